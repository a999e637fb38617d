"""Tests for application startup."""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest

from itinerary.api.app import app, lifespan


class TestStartup:
    async def test_bad_setting_fails_startup(self):
        env = {"ITINERARY_SYNC_TIMEOUT_SECONDS": "soon", "ITINERARY_AUTH_DISABLED": "1"}
        with patch.dict(os.environ, env):
            with pytest.raises(ValueError, match="ITINERARY_SYNC_TIMEOUT_SECONDS"):
                async with lifespan(app):
                    pass
