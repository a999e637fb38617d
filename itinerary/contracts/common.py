"""Base classes and shared types for itinerary contracts.

Conventions (all contracts and API responses):
- **Field names**: camelCase aliases on the wire and in Firestore
  (``startDate``, ``durationDays``), snake_case in Python
- **Calendar dates**: naive ``date`` values, ISO ``YYYY-MM-DD`` when serialized
- **Timestamps**: UTC, ISO 8601 in serialized form
- **Months**: 0-indexed (January = 0) wherever a bare month number appears
"""

from typing import Any

from pydantic import BaseModel, ConfigDict


class FirestoreModel(BaseModel):
    """Base model with Firestore-friendly serialization.

    - Enums serialize as string values (Firestore stores strings).
    - ``to_firestore()`` produces a JSON-safe dict (dates as ISO 8601).
    - ``from_firestore()`` hydrates from a Firestore document dict.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        use_enum_values=True,
    )

    def to_firestore(self) -> dict[str, Any]:
        """Dump to Firestore-compatible dict."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_firestore(cls, data: dict[str, Any]) -> "FirestoreModel":
        """Create model instance from Firestore document dict."""
        return cls.model_validate(data)
