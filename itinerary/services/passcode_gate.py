"""Shared-secret gate in front of leg mutations.

This is a convenience lock for a shared screen, not access control: the
secret is compared on the server, but any authenticated caller holding it
can mutate their own legs, and nothing binds it to a user.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class PasscodeGate:
    """Exact string comparison against one configured secret.

    Once unlocked, the gate stays open for the life of the session. With no
    secret configured it can never be opened.
    """

    def __init__(self, secret: str | None):
        self._secret = secret or None
        self._unlocked = False
        self.entry = ""

    @property
    def unlocked(self) -> bool:
        return self._unlocked

    def submit(self, entry: str) -> bool:
        """Try ``entry``. On mismatch the entry is cleared and False returned."""
        self.entry = entry
        if self._secret is not None and entry == self._secret:
            self._unlocked = True
            return True
        self.entry = ""
        logger.warning("Rejected passcode attempt")
        return False
