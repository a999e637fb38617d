"""Tests for environment-driven settings."""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest

from itinerary.config import DEFAULT_APP_ID, Settings


class TestSettings:
    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings.from_env()
        assert settings.app_id == DEFAULT_APP_ID
        assert settings.passcode is None
        assert settings.initial_auth_token is None
        assert settings.auth_disabled is False
        assert settings.resubscribe_seconds == 5.0
        assert settings.session_idle_seconds == 1800.0

    def test_from_environment(self):
        env = {
            "ITINERARY_APP_ID": "regatta-2025",
            "ITINERARY_PASSCODE": "fair-winds",
            "ITINERARY_INITIAL_AUTH_TOKEN": "tok",
            "ITINERARY_AUTH_DISABLED": "1",
            "ITINERARY_RESUBSCRIBE_SECONDS": "0.5",
            "ITINERARY_SESSION_IDLE_SECONDS": "60",
        }
        with patch.dict(os.environ, env, clear=True):
            settings = Settings.from_env()
        assert settings.app_id == "regatta-2025"
        assert settings.passcode == "fair-winds"
        assert settings.initial_auth_token == "tok"
        assert settings.auth_disabled is True
        assert settings.resubscribe_seconds == 0.5
        assert settings.session_idle_seconds == 60.0

    def test_bad_number(self):
        with patch.dict(os.environ, {"ITINERARY_SYNC_TIMEOUT_SECONDS": "soon"}, clear=True):
            with pytest.raises(ValueError):
                Settings.from_env()
