"""FastAPI application factory."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI

# Load .env file from project root (must be before other imports)
load_dotenv()
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402

from itinerary.api.routes import calendar_view, legs, session  # noqa: E402
from itinerary.config import Settings  # noqa: E402
from itinerary.persistence.errors import BackendInitError  # noqa: E402
from itinerary.persistence.firestore_client import create_backend  # noqa: E402
from itinerary.services.sessions import SessionRegistry  # noqa: E402

logger = logging.getLogger(__name__)


def _init_firebase_admin(settings: Settings) -> None:
    """Initialize Firebase Admin SDK for ID-token verification."""
    try:
        import firebase_admin
        from firebase_admin import credentials

        if settings.credentials_file:
            firebase_admin.initialize_app(
                credentials.Certificate(settings.credentials_file)
            )
        else:
            # ADC on Cloud Run
            firebase_admin.initialize_app()
        logger.info("Firebase Admin SDK initialized")
    except ValueError:
        # Already initialized
        logger.info("Firebase Admin SDK already initialized")
    except Exception as exc:
        logger.warning("Firebase Admin SDK init failed: %s", exc)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the Firestore backend handle and the session registry once."""
    try:
        settings = Settings.from_env()
    except ValueError:
        logger.exception("Invalid configuration")
        raise
    app.state.settings = settings
    app.state.init_error = None
    app.state.backend = None
    app.state.sessions = None

    if not settings.auth_disabled:
        _init_firebase_admin(settings)

    try:
        backend = create_backend(settings)
    except BackendInitError as exc:
        # No retry: every data route answers 503 with this message.
        logger.error("Backend initialization failed: %s", exc)
        app.state.init_error = str(exc)
    else:
        app.state.backend = backend
        app.state.sessions = SessionRegistry(backend, settings)
        app.state.sessions.start()
        logger.info("Backend ready (app_id=%s)", settings.app_id)

    yield

    if app.state.sessions is not None:
        await app.state.sessions.close()


app = FastAPI(
    title="Sailing Itinerary API",
    description="Plan sailing legs on a calendar and a timeline",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=os.environ.get("CORS_ORIGINS", "http://localhost:5173").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(session.router, prefix="/api")
app.include_router(legs.router, prefix="/api")
app.include_router(calendar_view.router, prefix="/api")


@app.get("/api/health")
async def health():
    settings: Settings | None = getattr(app.state, "settings", None)
    init_error = getattr(app.state, "init_error", None)
    sessions = getattr(app.state, "sessions", None)
    return {
        "status": "degraded" if init_error else "ok",
        "app_id": settings.app_id if settings else None,
        "backend_ready": getattr(app.state, "backend", None) is not None,
        "init_error": init_error,
        "sessions": len(sessions) if sessions is not None else 0,
    }
