"""Firebase Auth ID-token verification."""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Header, HTTPException, Request

from itinerary.config import Settings


@dataclass
class UserClaims:
    uid: str
    anonymous: bool = False
    email: str | None = None


async def verify_firebase_token(
    request: Request,
    authorization: str | None = Header(None, description="Bearer <Firebase ID token>"),
) -> UserClaims:
    """Extract and verify a Firebase Auth ID token from the Authorization header.

    Anonymous and custom-token sessions are created by the Firebase client
    SDK; both end up here as ordinary ID tokens. When the request carries no
    header, the pre-issued ``ITINERARY_INITIAL_AUTH_TOKEN`` is used instead.

    In development, set ``ITINERARY_AUTH_DISABLED=1`` to bypass verification
    and use a fixed test user.
    """
    settings: Settings = request.app.state.settings
    if settings.auth_disabled:
        return UserClaims(uid="dev-user", email="dev@localhost")

    if authorization:
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() != "bearer" or not token:
            raise HTTPException(status_code=401, detail="Invalid authorization header")
    elif settings.initial_auth_token:
        token = settings.initial_auth_token
    else:
        raise HTTPException(status_code=401, detail="Missing authorization header")

    try:
        from firebase_admin import auth as firebase_auth

        decoded = firebase_auth.verify_id_token(token)
    except Exception as exc:
        raise HTTPException(status_code=401, detail=f"Invalid token: {exc}") from exc

    provider = decoded.get("firebase", {}).get("sign_in_provider")
    return UserClaims(
        uid=decoded["uid"],
        anonymous=provider == "anonymous",
        email=decoded.get("email"),
    )
