"""FastAPI dependency injection wiring."""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request

from itinerary.api.auth import UserClaims, verify_firebase_token
from itinerary.config import Settings
from itinerary.services.leg_manager import LegManager
from itinerary.services.sessions import SessionRegistry


# ------------------------------------------------------------------
# Current user
# ------------------------------------------------------------------


def get_current_user(
    claims: UserClaims = Depends(verify_firebase_token),
) -> str:
    """Return the authenticated user ID."""
    return claims.uid


# ------------------------------------------------------------------
# Process-wide handles (built in the lifespan, kept on app.state)
# ------------------------------------------------------------------


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def _require_backend(request: Request) -> None:
    error = getattr(request.app.state, "init_error", None)
    if error:
        raise HTTPException(status_code=503, detail=f"Backend unavailable: {error}")


def get_sessions(request: Request) -> SessionRegistry:
    _require_backend(request)
    return request.app.state.sessions


# ------------------------------------------------------------------
# Per-user leg manager
# ------------------------------------------------------------------


async def get_leg_manager(
    user_id: str = Depends(get_current_user),
    sessions: SessionRegistry = Depends(get_sessions),
) -> LegManager:
    return sessions.get(user_id)
