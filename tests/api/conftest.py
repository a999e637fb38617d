"""Shared fixtures for API tests."""

from __future__ import annotations

import httpx
import pytest

from itinerary.api.app import app
from itinerary.api.deps import get_current_user
from itinerary.config import Settings
from itinerary.persistence.firestore_client import FirestoreBackend
from itinerary.services.sessions import SessionRegistry
from tests.persistence.fake_firestore import FakeFirestoreClient

TEST_USER_ID = "api-test-user"
TEST_PASSCODE = "fair-winds"


@pytest.fixture
def fake_client():
    """In-memory Firestore fake, shared by every session in a single test."""
    return FakeFirestoreClient()


@pytest.fixture
def settings():
    return Settings(
        app_id="test-app",
        passcode=TEST_PASSCODE,
        resubscribe_seconds=0.05,
        sync_timeout_seconds=1.0,
    )


def install_state(settings: Settings, fake_client: FakeFirestoreClient) -> SessionRegistry:
    """Put what the lifespan would build onto ``app.state``."""
    backend = FirestoreBackend(
        client=fake_client,
        watch_client=fake_client,
        app_id=settings.app_id,
        listener_check_seconds=0.05,
    )
    sessions = SessionRegistry(backend, settings)
    app.state.settings = settings
    app.state.init_error = None
    app.state.backend = backend
    app.state.sessions = sessions
    return sessions


@pytest.fixture
async def test_app(fake_client, settings):
    """FastAPI app with dependency overrides for testing."""
    # Override auth to return a fixed test user
    app.dependency_overrides[get_current_user] = lambda: TEST_USER_ID
    sessions = install_state(settings, fake_client)
    yield app
    await sessions.close()
    app.dependency_overrides.clear()


@pytest.fixture
async def client(test_app):
    """httpx AsyncClient wired to the test app."""
    transport = httpx.ASGITransport(app=test_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def unlocked_client(client):
    """Client whose session has already passed the passcode gate."""
    resp = await client.post("/api/session/unlock", json={"passcode": TEST_PASSCODE})
    assert resp.status_code == 200
    return client
