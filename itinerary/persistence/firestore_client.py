"""Firestore backend handle.

One ``FirestoreBackend`` is built at startup (see ``itinerary.api.app``)
and handed to every repository; nothing here is a module-level singleton.

Reads and writes go through the ``AsyncClient``. Realtime listeners
(``on_snapshot``) only exist on the synchronous ``Client``, so the backend
carries one of those too, built from the same credentials.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from itinerary.config import Settings
from itinerary.persistence.errors import BackendInitError

logger = logging.getLogger(__name__)

LISTENER_CHECK_SECONDS = 5.0


@dataclass
class FirestoreBackend:
    """Everything a repository needs: clients, namespace and commit times."""

    client: Any
    watch_client: Any
    app_id: str
    listener_check_seconds: float = LISTENER_CHECK_SECONDS
    commits: dict[str, datetime] = field(default_factory=dict)

    def user_root(self, user_id: str, *, watch: bool = False):
        """``/apps/{app_id}/users/{user_id}`` document reference."""
        client = self.watch_client if watch else self.client
        return (
            client.collection("apps")
            .document(self.app_id)
            .collection("users")
            .document(user_id)
        )

    def record_commit(self, path: str, commit_time: datetime) -> None:
        """Remember the latest acknowledged write time for ``path``."""
        latest = self.commits.get(path)
        if latest is None or commit_time > latest:
            self.commits[path] = commit_time

    def last_commit(self, path: str) -> datetime | None:
        return self.commits.get(path)


def _client_kwargs(settings: Settings) -> dict[str, Any]:
    if not settings.credentials_file:
        return {"project": settings.project_id}

    from google.oauth2 import service_account

    credentials = service_account.Credentials.from_service_account_file(
        settings.credentials_file
    )
    return {
        "project": settings.project_id or credentials.project_id,
        "credentials": credentials,
    }


def create_firestore_clients(settings: Settings) -> tuple[Any, Any]:
    """Build the Firestore ``AsyncClient`` and its listener ``Client``.

    Uses the service-account file from settings when given, otherwise
    Application Default Credentials (ADC).
    """
    from google.cloud.firestore import AsyncClient, Client

    try:
        kwargs = _client_kwargs(settings)
        client = AsyncClient(**kwargs)
        watch_client = Client(**kwargs)
    except Exception as exc:
        raise BackendInitError(f"Could not create Firestore client: {exc}") from exc

    logger.info("Using Google Cloud Firestore (project=%s)", client.project)
    return client, watch_client


def create_backend(settings: Settings) -> FirestoreBackend:
    client, watch_client = create_firestore_clients(settings)
    return FirestoreBackend(
        client=client,
        watch_client=watch_client,
        app_id=settings.app_id,
    )
