"""Unit tests for the leg repository using FakeFirestoreClient."""

from __future__ import annotations

import asyncio
from datetime import date, datetime

import pytest
from pydantic import ValidationError

from itinerary.contracts.leg import Leg
from itinerary.persistence.errors import DocumentNotFoundError, StoreOperationError
from itinerary.persistence.firestore_client import FirestoreBackend
from itinerary.persistence.repositories.leg_repo import LegRepository
from tests.persistence.fake_firestore import FakeFirestoreClient

USER_ID = "test-user-123"
COLLECTION = f"apps/test-app/users/{USER_ID}/sailing_routes"


@pytest.fixture
def fake_client():
    return FakeFirestoreClient()


@pytest.fixture
def repo(fake_client):
    backend = FirestoreBackend(
        client=fake_client,
        watch_client=fake_client,
        app_id="test-app",
        listener_check_seconds=0.05,
    )
    return LegRepository(backend)


def _leg(name: str, start: date, days: int = 3) -> Leg:
    return Leg(name=name, start_date=start, duration_days=days)


class TestLegRepository:
    async def test_create_stores_iso_dates_under_app_and_user(self, repo, fake_client):
        leg_id = await repo.create(USER_ID, _leg("Solent crossing", date(2025, 1, 5), 7))

        docs = fake_client.documents_under(COLLECTION)
        assert list(docs) == [leg_id]
        stored = docs[leg_id]
        assert stored["startDate"] == "2025-01-05"
        assert stored["endDate"] == "2025-01-12"
        assert stored["durationDays"] == 7
        assert isinstance(stored["createdAt"], datetime)
        assert "id" not in stored

    async def test_get_round_trip(self, repo):
        leg_id = await repo.create(USER_ID, _leg("Channel", date(2025, 6, 1)))
        leg = await repo.get(USER_ID, leg_id)
        assert leg is not None
        assert leg.id == leg_id
        assert leg.end_date == date(2025, 6, 4)
        assert leg.created_at is not None

    async def test_get_missing_returns_none(self, repo):
        assert await repo.get(USER_ID, "nope") is None

    async def test_list_is_ordered_by_start_date(self, repo):
        await repo.create(USER_ID, _leg("Third", date(2025, 8, 1)))
        await repo.create(USER_ID, _leg("First", date(2025, 2, 1)))
        await repo.create(USER_ID, _leg("Second", date(2025, 5, 1)))

        names = [leg.name for leg in await repo.list_all(USER_ID)]
        assert names == ["First", "Second", "Third"]

    async def test_users_are_isolated(self, repo):
        await repo.create(USER_ID, _leg("Mine", date(2025, 2, 1)))
        assert await repo.list_all("someone-else") == []

    async def test_update_replaces_fields_and_keeps_created_at(self, repo, fake_client):
        leg_id = await repo.create(USER_ID, _leg("Draft", date(2025, 3, 1)))
        created_at = fake_client.documents_under(COLLECTION)[leg_id]["createdAt"]

        await repo.update(USER_ID, leg_id, _leg("Final", date(2025, 3, 10), 5))

        stored = fake_client.documents_under(COLLECTION)[leg_id]
        assert stored["name"] == "Final"
        assert stored["startDate"] == "2025-03-10"
        assert stored["endDate"] == "2025-03-15"
        assert stored["durationDays"] == 5
        assert stored["createdAt"] == created_at

    async def test_update_missing_raises_not_found(self, repo):
        with pytest.raises(DocumentNotFoundError):
            await repo.update(USER_ID, "ghost", _leg("X", date(2025, 1, 1)))

    async def test_delete(self, repo, fake_client):
        leg_id = await repo.create(USER_ID, _leg("Gone", date(2025, 1, 1)))
        await repo.delete(USER_ID, leg_id)
        assert fake_client.documents_under(COLLECTION) == {}

    async def test_store_errors_are_translated(self, repo, fake_client):
        fake_client.failing.add("add")
        with pytest.raises(StoreOperationError):
            await repo.create(USER_ID, _leg("Nope", date(2025, 1, 1)))

        fake_client.failing = {"stream"}
        with pytest.raises(StoreOperationError):
            await repo.list_all(USER_ID)

    async def test_writes_record_commit_time(self, repo):
        assert repo.last_commit(USER_ID) is None
        leg_id = await repo.create(USER_ID, _leg("A", date(2025, 1, 1)))
        created = repo.last_commit(USER_ID)
        await repo.delete(USER_ID, leg_id)
        assert repo.last_commit(USER_ID) > created
        assert repo.last_commit("someone-else") is None


class TestLegSnapshots:
    async def test_first_snapshot_then_one_per_write(self, repo):
        stream = repo.snapshots(USER_ID)
        try:
            first = await anext(stream)
            assert first.items == []

            await repo.create(USER_ID, _leg("Outbound", date(2025, 7, 1)))
            second = await asyncio.wait_for(anext(stream), 1)
            assert [leg.name for leg in second.items] == ["Outbound"]
            assert second.read_time >= repo.last_commit(USER_ID)
        finally:
            await stream.aclose()

    async def test_snapshot_is_full_replacement(self, repo):
        keep_id = await repo.create(USER_ID, _leg("Keep", date(2025, 7, 1)))
        drop_id = await repo.create(USER_ID, _leg("Drop", date(2025, 7, 5)))
        stream = repo.snapshots(USER_ID)
        try:
            first = await anext(stream)
            assert {leg.id for leg in first.items} == {keep_id, drop_id}

            await repo.delete(USER_ID, drop_id)
            second = await asyncio.wait_for(anext(stream), 1)
            assert [leg.id for leg in second.items] == [keep_id]
        finally:
            await stream.aclose()

    async def test_writes_from_other_clients_are_delivered(self, repo, fake_client):
        stream = repo.snapshots(USER_ID)
        try:
            await anext(stream)
            fake_client.put(f"{COLLECTION}/external", {
                "name": "From another device",
                "startDate": "2025-09-01",
                "endDate": "2025-09-03",
                "durationDays": 2,
            })
            snapshot = await asyncio.wait_for(anext(stream), 1)
            assert [leg.id for leg in snapshot.items] == ["external"]
        finally:
            await stream.aclose()

    async def test_closing_the_stream_stops_the_listener(self, repo, fake_client):
        stream = repo.snapshots(USER_ID)
        await anext(stream)
        assert len(fake_client.watches) == 1
        await stream.aclose()
        assert fake_client.watches == []

    async def test_listener_refused(self, repo, fake_client):
        fake_client.failing.add("listen")
        with pytest.raises(StoreOperationError):
            await anext(repo.snapshots(USER_ID))

    async def test_listener_that_stops_raises(self, repo, fake_client):
        stream = repo.snapshots(USER_ID)
        await anext(stream)
        fake_client.drop_listeners()
        with pytest.raises(StoreOperationError):
            await asyncio.wait_for(anext(stream), 1)

    async def test_unreadable_document_fails_the_snapshot(self, repo, fake_client):
        fake_client.put(f"{COLLECTION}/edge", {
            "name": "Edge of the calendar",
            "startDate": "9999-12-31",
            "durationDays": 1,
        })
        with pytest.raises(ValidationError):
            await anext(repo.snapshots(USER_ID))
        assert fake_client.watches == []
