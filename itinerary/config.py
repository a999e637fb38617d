"""Environment-driven settings.

Values come from the process environment; ``itinerary.api.app`` loads a
``.env`` file from the project root first.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_APP_ID = "default-app-id"


def _float_env(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


@dataclass(frozen=True)
class Settings:
    app_id: str = DEFAULT_APP_ID
    project_id: str | None = None
    credentials_file: str | None = None
    initial_auth_token: str | None = None
    passcode: str | None = None
    auth_disabled: bool = False
    resubscribe_seconds: float = 5.0
    sync_timeout_seconds: float = 2.0
    session_idle_seconds: float = 1800.0

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            app_id=os.environ.get("ITINERARY_APP_ID") or DEFAULT_APP_ID,
            project_id=os.environ.get("GOOGLE_CLOUD_PROJECT") or None,
            credentials_file=os.environ.get("ITINERARY_CREDENTIALS_FILE") or None,
            initial_auth_token=os.environ.get("ITINERARY_INITIAL_AUTH_TOKEN") or None,
            passcode=os.environ.get("ITINERARY_PASSCODE") or None,
            auth_disabled=os.environ.get("ITINERARY_AUTH_DISABLED") == "1",
            resubscribe_seconds=_float_env("ITINERARY_RESUBSCRIBE_SECONDS", 5.0),
            sync_timeout_seconds=_float_env("ITINERARY_SYNC_TIMEOUT_SECONDS", 2.0),
            session_idle_seconds=_float_env("ITINERARY_SESSION_IDLE_SECONDS", 1800.0),
        )
