"""Repository for sailing legs."""

from __future__ import annotations

from itinerary.contracts.leg import Leg
from itinerary.persistence.firestore_client import FirestoreBackend
from itinerary.persistence.repositories.base import BaseRepository


class LegRepository(BaseRepository[Leg]):
    order_by = "startDate"

    def __init__(self, backend: FirestoreBackend):
        super().__init__(backend, Leg, "sailing_routes")

    async def update(self, user_id: str, leg_id: str, leg: Leg) -> None:
        """Replace name, dates and duration; ``createdAt`` is kept."""
        await self.replace_fields(user_id, leg_id, leg.to_store_fields())
