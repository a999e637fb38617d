"""Generic async Firestore repository for user-scoped collections."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Generic, Type, TypeVar

from google.api_core import exceptions as google_exceptions
from google.cloud.firestore import SERVER_TIMESTAMP

from itinerary.contracts.common import FirestoreModel
from itinerary.persistence.errors import DocumentNotFoundError, StoreOperationError
from itinerary.persistence.firestore_client import FirestoreBackend

T = TypeVar("T", bound=FirestoreModel)


@dataclass(frozen=True)
class Snapshot(Generic[T]):
    """Full contents of a collection at ``read_time``.

    Every write committed at or before ``read_time`` is reflected in
    ``items``.
    """

    items: list[T]
    read_time: datetime


class BaseRepository(Generic[T]):
    """CRUD for a Firestore subcollection under ``/apps/{app_id}/users/{user_id}/``.

    Serialization relies on the contract's ``to_firestore()`` and
    ``from_firestore()`` methods. Every ``google.api_core`` error is
    re-raised as a ``PersistenceError`` so callers never see SDK types.
    Writes record their commit time on the backend for the collection path.
    """

    order_by: str | None = None

    def __init__(
        self,
        backend: FirestoreBackend,
        model_class: Type[T],
        collection_name: str,
    ):
        self._backend = backend
        self._model_class = model_class
        self._collection_name = collection_name

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _collection_ref(self, user_id: str, *, watch: bool = False):
        root = self._backend.user_root(user_id, watch=watch)
        return root.collection(self._collection_name)

    def _ordered(self, query):
        if self.order_by:
            return query.order_by(self.order_by)
        return query

    def collection_path(self, user_id: str) -> str:
        return (
            f"apps/{self._backend.app_id}/users/{user_id}/{self._collection_name}"
        )

    def _hydrate(self, doc) -> T:
        data = doc.to_dict()
        data["id"] = doc.id
        return self._model_class.from_firestore(data)

    def _serialize(self, entity: T) -> dict[str, Any]:
        data = entity.to_firestore()
        data.pop("id", None)
        return data

    def _committed(self, user_id: str, commit_time: datetime) -> None:
        self._backend.record_commit(self.collection_path(user_id), commit_time)

    def last_commit(self, user_id: str) -> datetime | None:
        """Commit time of the latest write made through this backend."""
        return self._backend.last_commit(self.collection_path(user_id))

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    async def get(self, user_id: str, doc_id: str) -> T | None:
        """Fetch a single document by ID. Returns *None* if missing."""
        path = f"{self.collection_path(user_id)}/{doc_id}"
        try:
            doc = await self._collection_ref(user_id).document(doc_id).get()
        except google_exceptions.GoogleAPIError as exc:
            raise StoreOperationError("get", path, exc) from exc
        if not doc.exists:
            return None
        return self._hydrate(doc)

    async def list_all(self, user_id: str) -> list[T]:
        """Stream every document in the collection, in ``order_by`` order."""
        query = self._ordered(self._collection_ref(user_id))
        results: list[T] = []
        try:
            async for doc in query.stream():
                results.append(self._hydrate(doc))
        except google_exceptions.GoogleAPIError as exc:
            raise StoreOperationError("list", self.collection_path(user_id), exc) from exc
        return results

    async def snapshots(self, user_id: str) -> AsyncIterator[Snapshot[T]]:
        """Yield the full collection now and again every time it changes.

        Backed by a Firestore realtime listener (``on_snapshot``), whose
        callback runs on the SDK's background thread and is handed to the
        event loop through a queue. Each snapshot is a complete replacement
        of the previous one. Raises ``StoreOperationError`` when the
        listener cannot start or stops on its own; iterating again starts a
        fresh listener.
        """
        path = self.collection_path(user_id)
        loop = asyncio.get_running_loop()
        received: asyncio.Queue = asyncio.Queue()

        def on_snapshot(docs, changes, read_time):
            loop.call_soon_threadsafe(received.put_nowait, (docs, read_time))

        query = self._ordered(self._collection_ref(user_id, watch=True))
        try:
            watch = query.on_snapshot(on_snapshot)
        except google_exceptions.GoogleAPIError as exc:
            raise StoreOperationError("listen", path, exc) from exc

        try:
            while True:
                try:
                    docs, read_time = await asyncio.wait_for(
                        received.get(), self._backend.listener_check_seconds
                    )
                except asyncio.TimeoutError:
                    if not watch.is_active:
                        raise StoreOperationError(
                            "listen", path, RuntimeError("listener stopped")
                        ) from None
                    continue
                items = [self._hydrate(doc) for doc in docs]
                yield Snapshot(items=items, read_time=read_time)
        finally:
            watch.unsubscribe()

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    async def create(self, user_id: str, entity: T) -> str:
        """Create a document with an auto-generated ID and a server timestamp.

        Returns the document ID.
        """
        data = self._serialize(entity)
        data["createdAt"] = SERVER_TIMESTAMP
        try:
            update_time, ref = await self._collection_ref(user_id).add(data)
        except google_exceptions.GoogleAPIError as exc:
            raise StoreOperationError("create", self.collection_path(user_id), exc) from exc
        self._committed(user_id, update_time)
        return ref.id

    async def replace_fields(
        self, user_id: str, doc_id: str, fields: dict[str, Any]
    ) -> None:
        """Overwrite ``fields`` of an existing document; other fields survive.

        Raises ``DocumentNotFoundError`` when the document is gone.
        """
        path = f"{self.collection_path(user_id)}/{doc_id}"
        try:
            result = await self._collection_ref(user_id).document(doc_id).update(fields)
        except google_exceptions.NotFound as exc:
            raise DocumentNotFoundError(self.collection_path(user_id), doc_id) from exc
        except google_exceptions.GoogleAPIError as exc:
            raise StoreOperationError("update", path, exc) from exc
        self._committed(user_id, result.update_time)

    async def delete(self, user_id: str, doc_id: str) -> None:
        """Delete a document. Deleting a missing document is a no-op."""
        path = f"{self.collection_path(user_id)}/{doc_id}"
        try:
            commit_time = await self._collection_ref(user_id).document(doc_id).delete()
        except google_exceptions.GoogleAPIError as exc:
            raise StoreOperationError("delete", path, exc) from exc
        self._committed(user_id, commit_time)
