"""One leg manager per authenticated user, evicted after a period of inactivity."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from collections.abc import Callable

from itinerary.config import Settings
from itinerary.persistence.firestore_client import FirestoreBackend
from itinerary.persistence.repositories.leg_repo import LegRepository
from itinerary.services.leg_manager import LegManager
from itinerary.services.passcode_gate import PasscodeGate

logger = logging.getLogger(__name__)

MAX_SWEEP_SECONDS = 60.0


class SessionRegistry:
    """Creates managers lazily and feeds each one its auth transition.

    The passcode gate lives inside the manager, so unlocking is remembered
    per user until the manager is evicted (``session_idle_seconds`` without
    a request) or the process stops. Each manager holds a realtime listener
    open, so idle ones are closed by a background sweep.
    """

    def __init__(
        self,
        backend: FirestoreBackend,
        settings: Settings,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._backend = backend
        self._settings = settings
        self._clock = clock
        self._managers: dict[str, LegManager] = {}
        self._last_seen: dict[str, float] = {}
        self._sweeper: asyncio.Task | None = None
        if not settings.passcode:
            logger.warning("ITINERARY_PASSCODE is not set; legs cannot be edited")

    def __len__(self) -> int:
        return len(self._managers)

    def get(self, user_id: str) -> LegManager:
        self._last_seen[user_id] = self._clock()
        manager = self._managers.get(user_id)
        if manager is None:
            manager = LegManager(
                LegRepository(self._backend),
                PasscodeGate(self._settings.passcode),
                resubscribe_delay=self._settings.resubscribe_seconds,
            )
            manager.on_auth_state(user_id)
            self._managers[user_id] = manager
        return manager

    async def evict_idle(self) -> int:
        """Close managers not requested for ``session_idle_seconds``."""
        cutoff = self._clock() - self._settings.session_idle_seconds
        idle = [uid for uid, seen in self._last_seen.items() if seen <= cutoff]
        for user_id in idle:
            del self._last_seen[user_id]
            manager = self._managers.pop(user_id, None)
            if manager is not None:
                await self._close_manager(user_id, manager)
        if idle:
            logger.info("Evicted %d idle session(s)", len(idle))
        return len(idle)

    async def _sweep(self) -> None:
        interval = min(self._settings.session_idle_seconds, MAX_SWEEP_SECONDS)
        while True:
            await asyncio.sleep(interval)
            await self.evict_idle()

    def start(self) -> None:
        """Start the idle sweep. Must be called from a running loop."""
        if self._sweeper is None:
            self._sweeper = asyncio.create_task(self._sweep())

    async def _close_manager(self, user_id: str, manager: LegManager) -> None:
        try:
            await manager.close()
        except Exception:
            logger.exception("Failed to close session for %s", user_id)

    async def close(self) -> None:
        sweeper, self._sweeper = self._sweeper, None
        if sweeper is not None:
            sweeper.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await sweeper
        managers = list(self._managers.items())
        self._managers.clear()
        self._last_seen.clear()
        for user_id, manager in managers:
            await self._close_manager(user_id, manager)
        logger.info("Closed %d session(s)", len(managers))
