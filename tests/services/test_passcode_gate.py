"""Tests for the shared-secret edit gate."""

from __future__ import annotations

from itinerary.services.passcode_gate import PasscodeGate


class TestPasscodeGate:
    def test_starts_locked(self):
        assert not PasscodeGate("fair-winds").unlocked

    def test_exact_secret_unlocks(self):
        gate = PasscodeGate("fair-winds")
        assert gate.submit("fair-winds") is True
        assert gate.unlocked

    def test_wrong_secret_stays_locked_and_clears_entry(self):
        gate = PasscodeGate("fair-winds")
        assert gate.submit("Fair-Winds") is False
        assert not gate.unlocked
        assert gate.entry == ""

    def test_near_misses_are_rejected(self):
        gate = PasscodeGate("fair-winds")
        for attempt in ["fair-winds ", " fair-winds", "fair", ""]:
            assert gate.submit(attempt) is False
        assert not gate.unlocked

    def test_stays_unlocked_for_the_session(self):
        gate = PasscodeGate("fair-winds")
        gate.submit("fair-winds")
        gate.submit("wrong")
        assert gate.unlocked

    def test_without_secret_never_unlocks(self):
        gate = PasscodeGate(None)
        assert gate.submit("") is False
        assert gate.submit("anything") is False
        assert not gate.unlocked
