"""Calendar-date helpers shared by the leg contract and the calendar engine.

Dates are stored as plain ``YYYY-MM-DD`` strings and always read back as
naive ``date`` values, so the same day comes out on both the write and the
read path regardless of the server's timezone.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta

NOT_AVAILABLE = "N/A"

# Fixed table so rendering never depends on the process locale.
MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def parse_iso_date(text: str) -> date:
    """Parse a stored ``YYYY-MM-DD`` string as a calendar date.

    Raises ``ValueError`` on anything else (including full timestamps).
    """
    if len(text) != 10:
        raise ValueError(f"Expected YYYY-MM-DD, got {text!r}")
    return date.fromisoformat(text)


def to_iso_date(value: date) -> str:
    return as_date(value).isoformat()


def as_date(value: date | datetime | str) -> date:
    """Normalize a date, datetime or ISO string to a date at midnight."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_iso_date(value)


def add_days(value: date | datetime | str, days: int) -> date:
    """Return ``value`` advanced by ``days`` calendar days.

    Raises ``ValueError`` when the result falls outside ``date.min`` ..
    ``date.max``.
    """
    try:
        return as_date(value) + timedelta(days=days)
    except OverflowError as exc:
        raise ValueError("date out of range") from exc


def format_date(value: date | datetime | str | None) -> str:
    """Render ``Mon D, YYYY`` (e.g. ``Jan 5, 2025``), or ``N/A`` when absent."""
    if value is None or value == "":
        return NOT_AVAILABLE
    day = as_date(value)
    return f"{MONTH_ABBREVIATIONS[day.month - 1]} {day.day}, {day.year}"
