"""Render-ready views of the itinerary: calculated, never persisted.

``CalendarMonth`` backs the calendar overlay, ``Timeline`` the chronological
list. Both are rebuilt from the current leg snapshot on every request.
"""

from datetime import date, datetime, timezone

from pydantic import Field

from itinerary.contracts.common import FirestoreModel
from itinerary.contracts.enums import StatusLevel


class MonthRef(FirestoreModel):
    """A ``(month, year)`` pair, month 0-indexed."""

    month: int = Field(..., ge=0, le=11)
    year: int


class CalendarDay(FirestoreModel):
    """One numbered cell of the month grid."""

    day: int = Field(..., ge=1, le=31)
    calendar_date: date = Field(..., alias="date")
    is_today: bool = Field(default=False, alias="isToday")
    leg_id: str | None = Field(default=None, alias="legId")
    leg_name: str | None = Field(default=None, alias="legName")


class CalendarMonth(FirestoreModel):
    """Calendar grid for one month, 7 columns, Sunday first.

    ``cells`` holds ``first_weekday`` leading ``None`` placeholders followed by
    one ``CalendarDay`` per day of the month. The grid is not padded to a
    full final week.
    """

    month: int = Field(..., ge=0, le=11)
    year: int
    label: str = Field(..., description="e.g. 'January 2025'")
    first_weekday: int = Field(..., ge=0, le=6, alias="firstWeekday")
    days_in_month: int = Field(..., ge=28, le=31, alias="daysInMonth")
    cells: list[CalendarDay | None]
    previous: MonthRef
    next: MonthRef

    def to_firestore(self) -> dict:
        # keep explicit nulls for blank cells and days without a leg
        return self.model_dump(mode="json", by_alias=True)


class TimelineEntry(FirestoreModel):
    """One leg as shown on the timeline, dates pre-formatted."""

    id: str | None = None
    name: str
    start_date: date = Field(..., alias="startDate")
    end_date: date = Field(..., alias="endDate")
    duration_days: int = Field(..., alias="durationDays")
    start_label: str = Field(..., alias="startLabel")
    end_label: str = Field(..., alias="endLabel")


class TimelineSummary(FirestoreModel):
    leg_count: int = Field(..., ge=0, alias="legCount")
    total_days: int = Field(..., ge=0, alias="totalDays")
    first_start: str = Field(..., alias="firstStart")
    last_end: str = Field(..., alias="lastEnd")


class Timeline(FirestoreModel):
    """Legs in ascending start-date order plus a short summary."""

    entries: list[TimelineEntry] = Field(default_factory=list)
    summary: TimelineSummary


class StatusMessage(FirestoreModel):
    """The single status slot of a session. The latest message replaces it."""

    level: StatusLevel = StatusLevel.INFO
    text: str
    at: datetime = Field(default_factory=lambda: datetime.now(tz=timezone.utc))


class SessionState(FirestoreModel):
    """What the client needs to render the header: who, locked, last message."""

    user_id: str | None = Field(default=None, alias="userId")
    unlocked: bool = False
    leg_count: int = Field(default=0, ge=0, alias="legCount")
    status: StatusMessage | None = None
