"""Leg: a single sailing itinerary segment.

Stored at: ``/apps/{app_id}/users/{user_id}/sailing_routes/{leg_id}``
"""

from datetime import date, datetime
from typing import Any, Self

from pydantic import Field, field_validator, model_validator

from itinerary.contracts.common import FirestoreModel
from itinerary.services.dates import add_days


class Leg(FirestoreModel):
    """A named segment of the itinerary, ``duration_days`` long.

    ``end_date`` is never edited on its own: whatever the caller (or the
    stored document) supplies is replaced by ``start_date + duration_days``.
    ``created_at`` is assigned by the store and only kept for audit;
    ordering is always by ``start_date``.
    """

    id: str | None = None
    name: str = Field(..., min_length=1, max_length=200)
    start_date: date = Field(..., alias="startDate")
    duration_days: int = Field(..., ge=1, alias="durationDays")
    end_date: date | None = Field(default=None, alias="endDate")
    created_at: datetime | None = Field(default=None, alias="createdAt")

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value

    @model_validator(mode="after")
    def derive_end_date(self) -> Self:
        self.end_date = add_days(self.start_date, self.duration_days)
        return self

    def covers(self, day: date) -> bool:
        """True when ``day`` falls inside the inclusive [start, end] interval."""
        return self.start_date <= day <= self.end_date

    def to_store_fields(self) -> dict[str, Any]:
        """The replaceable tuple written on create and update."""
        data = self.to_firestore()
        return {
            "name": data["name"],
            "startDate": data["startDate"],
            "endDate": data["endDate"],
            "durationDays": data["durationDays"],
        }


class LegForm(FirestoreModel):
    """Raw leg input as submitted by the client.

    Deliberately loose: required-field and range checks are done by the
    leg manager so they surface through the status slot like every other
    failure.
    """

    name: str | None = None
    start_date: str | None = Field(default=None, alias="startDate")
    duration_days: int | float | str | None = Field(default=None, alias="durationDays")
