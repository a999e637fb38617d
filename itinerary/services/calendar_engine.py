"""Month grid computation and leg overlay for the calendar view.

Months are 0-indexed (January = 0) and the grid has 7 columns starting on
Sunday, so ``first_weekday`` is also the number of leading blank cells.
"""

from __future__ import annotations

import calendar
from collections.abc import Sequence
from datetime import date

from itinerary.contracts.leg import Leg
from itinerary.contracts.views import (
    CalendarDay,
    CalendarMonth,
    MonthRef,
    Timeline,
    TimelineEntry,
    TimelineSummary,
)
from itinerary.services.dates import MONTH_NAMES, format_date


def _check_month(month: int) -> None:
    if not 0 <= month <= 11:
        raise ValueError(f"month must be in [0, 11], got {month}")


def days_in_month(month: int, year: int) -> int:
    _check_month(month)
    return calendar.monthrange(year, month + 1)[1]


def first_weekday(month: int, year: int) -> int:
    """Weekday of the 1st, 0 = Sunday ... 6 = Saturday."""
    _check_month(month)
    # date.weekday() is Monday-based
    return (date(year, month + 1, 1).weekday() + 1) % 7


def build_grid(month: int, year: int) -> list[int | None]:
    """Row-major cells for a 7-column grid: blanks, then 1..days_in_month."""
    blanks: list[int | None] = [None] * first_weekday(month, year)
    return blanks + list(range(1, days_in_month(month, year) + 1))


def navigate_prev_month(month: int, year: int) -> tuple[int, int]:
    _check_month(month)
    if month == 0:
        return 11, year - 1
    return month - 1, year


def navigate_next_month(month: int, year: int) -> tuple[int, int]:
    _check_month(month)
    if month == 11:
        return 0, year + 1
    return month + 1, year


def month_label(month: int, year: int) -> str:
    _check_month(month)
    return f"{MONTH_NAMES[month]} {year}"


def leg_for_day(legs: Sequence[Leg], day: int, month: int, year: int) -> Leg | None:
    """Return the first leg, in list order, whose [start, end] covers the day.

    Overlapping legs are neither flagged nor ranked: the earliest entry of
    ``legs`` wins.
    """
    _check_month(month)
    target = date(year, month + 1, day)
    for leg in legs:
        if leg.covers(target):
            return leg
    return None


def build_month_view(
    legs: Sequence[Leg],
    month: int,
    year: int,
    today: date | None = None,
) -> CalendarMonth:
    """Annotate the month grid with the covering leg of each day."""
    cells: list[CalendarDay | None] = []
    for day in build_grid(month, year):
        if day is None:
            cells.append(None)
            continue
        current = date(year, month + 1, day)
        leg = leg_for_day(legs, day, month, year)
        cells.append(
            CalendarDay(
                day=day,
                calendar_date=current,
                is_today=current == today,
                leg_id=leg.id if leg else None,
                leg_name=leg.name if leg else None,
            )
        )

    prev_month, prev_year = navigate_prev_month(month, year)
    next_month, next_year = navigate_next_month(month, year)
    return CalendarMonth(
        month=month,
        year=year,
        label=month_label(month, year),
        first_weekday=first_weekday(month, year),
        days_in_month=days_in_month(month, year),
        cells=cells,
        previous=MonthRef(month=prev_month, year=prev_year),
        next=MonthRef(month=next_month, year=next_year),
    )


def build_timeline(legs: Sequence[Leg]) -> Timeline:
    """Chronological view of the legs, in the order they are given.

    The snapshot is already sorted by start date; this keeps that order
    rather than re-sorting.
    """
    entries = [
        TimelineEntry(
            id=leg.id,
            name=leg.name,
            start_date=leg.start_date,
            end_date=leg.end_date,
            duration_days=leg.duration_days,
            start_label=format_date(leg.start_date),
            end_label=format_date(leg.end_date),
        )
        for leg in legs
    ]
    summary = TimelineSummary(
        leg_count=len(entries),
        total_days=sum(leg.duration_days for leg in legs),
        first_start=format_date(min((leg.start_date for leg in legs), default=None)),
        last_end=format_date(max((leg.end_date for leg in legs), default=None)),
    )
    return Timeline(entries=entries, summary=summary)
