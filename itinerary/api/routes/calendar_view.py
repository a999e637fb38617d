"""Calendar overlay endpoint."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query

from itinerary.api.deps import get_leg_manager, get_settings
from itinerary.config import Settings
from itinerary.services.calendar_engine import build_month_view
from itinerary.services.leg_manager import LegManager

router = APIRouter(prefix="/calendar", tags=["calendar"])


@router.get("")
async def get_month(
    month: int | None = Query(None, ge=0, le=11, description="0 = January"),
    year: int | None = Query(None, ge=1, le=9999),
    manager: LegManager = Depends(get_leg_manager),
    settings: Settings = Depends(get_settings),
) -> dict:
    """Month grid with the covering leg of each day.

    Without ``month``/``year`` the current month is shown. The response
    carries ``previous`` and ``next`` for navigation.
    """
    today = date.today()
    if month is None:
        month = today.month - 1
    if year is None:
        year = today.year
    await manager.wait_until_synced(settings.sync_timeout_seconds)
    return build_month_view(manager.legs, month, year, today=today).to_firestore()
