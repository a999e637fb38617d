"""Leg manager: the session's live mirror of the user's legs.

The mirror is only ever replaced by a snapshot from the repository
subscription. Mutations go straight to the store and come back through that
subscription; a failed mutation leaves the mirror at the last snapshot.

Every operation reports its outcome as a ``ServiceResult`` and records a
human-readable line in the single ``status`` slot (latest wins). Nothing
here raises to the caller for validation, gate or store failures.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from datetime import date, datetime

from pydantic import ValidationError

from itinerary.contracts.enums import ErrorCode, StatusLevel
from itinerary.contracts.leg import Leg
from itinerary.contracts.result import ServiceResult
from itinerary.contracts.views import SessionState, StatusMessage
from itinerary.persistence.errors import DocumentNotFoundError, PersistenceError
from itinerary.persistence.repositories.base import Snapshot
from itinerary.persistence.repositories.leg_repo import LegRepository
from itinerary.services.dates import as_date, parse_iso_date
from itinerary.services.passcode_gate import PasscodeGate

logger = logging.getLogger(__name__)

MSG_FILL_ALL_FIELDS = "Please fill in all fields."
MSG_BAD_DURATION = "Duration must be a positive whole number of days."
MSG_BAD_DATE = "Start date must be a valid YYYY-MM-DD date."
MSG_NOT_AUTHENTICATED = "Not signed in yet. Please wait a moment and try again."
MSG_LOCKED = "Enter the passcode to edit legs."
MSG_WRONG_PASSCODE = "Incorrect passcode."
MSG_UNLOCKED = "Editing unlocked."
MSG_LOAD_FAILED = "Could not load legs."

RESUBSCRIBE_DELAY_SECONDS = 5.0


def _positive_int(value: object) -> int | None:
    """Coerce form input to a positive integer, or None if it is not one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        number = value
    elif isinstance(value, float) and value.is_integer():
        number = int(value)
    elif isinstance(value, str):
        try:
            number = int(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if number >= 1 else None


def _is_blank(value: object) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class LegManager:
    def __init__(
        self,
        repo: LegRepository,
        gate: PasscodeGate,
        resubscribe_delay: float = RESUBSCRIBE_DELAY_SECONDS,
    ):
        self._repo = repo
        self.gate = gate
        self.user_id: str | None = None
        self.legs: list[Leg] = []
        self.status: StatusMessage | None = None
        self.read_time: datetime | None = None
        self._resubscribe_delay = resubscribe_delay
        self._applied = asyncio.Event()
        self._task: asyncio.Task | None = None

    # ------------------------------------------------------------------
    # Status slot
    # ------------------------------------------------------------------

    def _report(self, level: StatusLevel, text: str) -> None:
        self.status = StatusMessage(level=level, text=text)

    def _fail(self, code: ErrorCode, message: str) -> ServiceResult:
        self._report(StatusLevel.ERROR, message)
        return ServiceResult.fail(code.value, message)

    def session_state(self) -> SessionState:
        return SessionState(
            user_id=self.user_id,
            unlocked=self.gate.unlocked,
            leg_count=len(self.legs),
            status=self.status,
        )

    # ------------------------------------------------------------------
    # Auth and subscription
    # ------------------------------------------------------------------

    def on_auth_state(self, user_id: str | None) -> None:
        """Handle an auth transition. Must be called from a running loop."""
        if user_id == self.user_id:
            return
        self._stop_following()
        self.user_id = user_id
        self.legs = []
        self.read_time = None
        if user_id is None:
            logger.info("Session signed out")
            return
        logger.info("Session authenticated as %s; following legs", user_id)
        self._task = asyncio.create_task(self._follow(user_id))

    def apply_snapshot(self, snapshot: Snapshot[Leg]) -> None:
        """Replace the mirror with ``snapshot``. Never merges."""
        self.legs = list(snapshot.items)
        self.read_time = snapshot.read_time
        applied, self._applied = self._applied, asyncio.Event()
        applied.set()

    async def _follow(self, user_id: str) -> None:
        while True:
            try:
                async for snapshot in self._repo.snapshots(user_id):
                    self.apply_snapshot(snapshot)
            except (PersistenceError, ValidationError) as exc:
                logger.warning("Leg subscription failed for %s: %s", user_id, exc)
                self._report(StatusLevel.ERROR, MSG_LOAD_FAILED)
            except Exception:
                logger.exception("Leg subscription crashed for %s", user_id)
                self._report(StatusLevel.ERROR, MSG_LOAD_FAILED)
            await asyncio.sleep(self._resubscribe_delay)

    async def wait_until_synced(self, timeout: float | None = None) -> bool:
        """Wait until every write acknowledged so far is in the mirror.

        Returns False if there is no session or the timeout elapses; the
        mirror is then simply the last snapshot received.
        """
        if self.user_id is None:
            return False
        target = self._repo.last_commit(self.user_id)

        def _synced() -> bool:
            if self.read_time is None:
                return False
            return target is None or self.read_time >= target

        async def _wait() -> None:
            while not _synced():
                await self._applied.wait()

        try:
            await asyncio.wait_for(_wait(), timeout)
        except asyncio.TimeoutError:
            return False
        return True

    @property
    def following(self) -> bool:
        """True while the subscription task is running."""
        return self._task is not None and not self._task.done()

    def _stop_following(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def close(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    # ------------------------------------------------------------------
    # Passcode gate
    # ------------------------------------------------------------------

    def unlock(self, passcode: str) -> bool:
        if self.gate.submit(passcode):
            self._report(StatusLevel.INFO, MSG_UNLOCKED)
            return True
        self._report(StatusLevel.ERROR, MSG_WRONG_PASSCODE)
        return False

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _build_leg(
        self, name: object, start_date: object, duration_days: object
    ) -> Leg | ServiceResult:
        if _is_blank(name) or _is_blank(start_date) or _is_blank(duration_days):
            return self._fail(ErrorCode.VALIDATION, MSG_FILL_ALL_FIELDS)

        days = _positive_int(duration_days)
        if days is None:
            return self._fail(ErrorCode.VALIDATION, MSG_BAD_DURATION)

        if isinstance(start_date, date):
            start = as_date(start_date)
        else:
            try:
                start = parse_iso_date(str(start_date).strip())
            except ValueError:
                return self._fail(ErrorCode.VALIDATION, MSG_BAD_DATE)

        try:
            return Leg(name=name, start_date=start, duration_days=days)
        except ValidationError as exc:
            message = exc.errors()[0]["msg"]
            return self._fail(ErrorCode.VALIDATION, f"Invalid leg: {message}")

    def _require_unlocked(self) -> ServiceResult | None:
        if not self.gate.unlocked:
            return self._fail(ErrorCode.LOCKED, MSG_LOCKED)
        return None

    def _require_session(self) -> ServiceResult | None:
        if self.user_id is None:
            return self._fail(ErrorCode.NOT_AUTHENTICATED, MSG_NOT_AUTHENTICATED)
        return None

    async def add_leg(
        self, name: object, start_date: object, duration_days: object
    ) -> ServiceResult[str]:
        """Create a leg; the new document id is returned in ``data``."""
        blocked = self._require_unlocked()
        if blocked is not None:
            return blocked
        leg = self._build_leg(name, start_date, duration_days)
        if isinstance(leg, ServiceResult):
            return leg
        blocked = self._require_session()
        if blocked is not None:
            return blocked

        try:
            leg_id = await self._repo.create(self.user_id, leg)
        except PersistenceError:
            logger.exception("Failed to add leg for %s", self.user_id)
            return self._fail(ErrorCode.STORE_ERROR, "Error adding leg. Please try again.")

        self._report(StatusLevel.INFO, f"Added leg '{leg.name}'.")
        return ServiceResult.ok(leg_id)

    async def update_leg(
        self,
        leg_id: str,
        name: object,
        start_date: object,
        duration_days: object,
    ) -> ServiceResult[str]:
        """Replace name, start date, end date and duration of ``leg_id``."""
        blocked = self._require_unlocked()
        if blocked is not None:
            return blocked
        if _is_blank(leg_id):
            return self._fail(ErrorCode.VALIDATION, MSG_FILL_ALL_FIELDS)
        leg = self._build_leg(name, start_date, duration_days)
        if isinstance(leg, ServiceResult):
            return leg
        blocked = self._require_session()
        if blocked is not None:
            return blocked

        try:
            await self._repo.update(self.user_id, leg_id, leg)
        except DocumentNotFoundError:
            return self._fail(ErrorCode.NOT_FOUND, "That leg no longer exists.")
        except PersistenceError:
            logger.exception("Failed to update leg %s for %s", leg_id, self.user_id)
            return self._fail(ErrorCode.STORE_ERROR, "Error updating leg. Please try again.")

        self._report(StatusLevel.INFO, f"Updated leg '{leg.name}'.")
        return ServiceResult.ok(leg_id)

    async def delete_leg(self, leg_id: str) -> ServiceResult[str]:
        blocked = self._require_unlocked()
        if blocked is not None:
            return blocked
        if _is_blank(leg_id):
            return self._fail(ErrorCode.VALIDATION, MSG_FILL_ALL_FIELDS)
        blocked = self._require_session()
        if blocked is not None:
            return blocked

        try:
            await self._repo.delete(self.user_id, leg_id)
        except PersistenceError:
            logger.exception("Failed to delete leg %s for %s", leg_id, self.user_id)
            return self._fail(ErrorCode.STORE_ERROR, "Error deleting leg. Please try again.")

        self._report(StatusLevel.INFO, "Leg deleted.")
        return ServiceResult.ok(leg_id)
