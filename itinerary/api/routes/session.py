"""Session state and passcode unlock."""

from __future__ import annotations

from fastapi import APIRouter, Body, Depends, HTTPException

from itinerary.api.deps import get_leg_manager
from itinerary.services.leg_manager import MSG_WRONG_PASSCODE, LegManager

router = APIRouter(prefix="/session", tags=["session"])


@router.get("")
async def get_session(
    manager: LegManager = Depends(get_leg_manager),
) -> dict:
    return manager.session_state().to_firestore()


@router.post("/unlock")
async def unlock(
    passcode: str = Body(..., embed=True),
    manager: LegManager = Depends(get_leg_manager),
) -> dict:
    if not manager.unlock(passcode):
        raise HTTPException(status_code=403, detail=MSG_WRONG_PASSCODE)
    return manager.session_state().to_firestore()
