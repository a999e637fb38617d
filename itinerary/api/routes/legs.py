"""Leg CRUD and timeline endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from itinerary.api.deps import get_leg_manager, get_settings
from itinerary.api.errors import raise_for_result
from itinerary.config import Settings
from itinerary.contracts.leg import LegForm
from itinerary.services.calendar_engine import build_timeline
from itinerary.services.leg_manager import LegManager

router = APIRouter(prefix="/legs", tags=["legs"])


async def _leg_payload(manager: LegManager, leg_id: str, timeout: float) -> dict:
    """The mirrored leg once its write has come back, else just the id."""
    await manager.wait_until_synced(timeout)
    for leg in manager.legs:
        if leg.id == leg_id:
            return leg.to_firestore()
    return {"id": leg_id}


@router.get("")
async def list_legs(
    manager: LegManager = Depends(get_leg_manager),
    settings: Settings = Depends(get_settings),
) -> list[dict]:
    await manager.wait_until_synced(settings.sync_timeout_seconds)
    return [leg.to_firestore() for leg in manager.legs]


@router.get("/timeline")
async def get_timeline(
    manager: LegManager = Depends(get_leg_manager),
    settings: Settings = Depends(get_settings),
) -> dict:
    await manager.wait_until_synced(settings.sync_timeout_seconds)
    return build_timeline(manager.legs).to_firestore()


@router.post("", status_code=201)
async def create_leg(
    form: LegForm,
    manager: LegManager = Depends(get_leg_manager),
    settings: Settings = Depends(get_settings),
) -> dict:
    result = await manager.add_leg(form.name, form.start_date, form.duration_days)
    raise_for_result(result)
    return await _leg_payload(manager, result.data, settings.sync_timeout_seconds)


@router.get("/{leg_id}")
async def get_leg(
    leg_id: str,
    manager: LegManager = Depends(get_leg_manager),
    settings: Settings = Depends(get_settings),
) -> dict:
    await manager.wait_until_synced(settings.sync_timeout_seconds)
    for leg in manager.legs:
        if leg.id == leg_id:
            return leg.to_firestore()
    raise HTTPException(status_code=404, detail="Leg not found")


@router.put("/{leg_id}")
async def update_leg(
    leg_id: str,
    form: LegForm,
    manager: LegManager = Depends(get_leg_manager),
    settings: Settings = Depends(get_settings),
) -> dict:
    result = await manager.update_leg(
        leg_id, form.name, form.start_date, form.duration_days
    )
    raise_for_result(result)
    return await _leg_payload(manager, leg_id, settings.sync_timeout_seconds)


@router.delete("/{leg_id}", status_code=204)
async def delete_leg(
    leg_id: str,
    manager: LegManager = Depends(get_leg_manager),
) -> None:
    raise_for_result(await manager.delete_leg(leg_id))
