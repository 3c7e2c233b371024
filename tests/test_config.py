"""Tests for settings validation and derived limit text"""

import pytest
from pydantic import ValidationError

from testimony_prep.utils.config import Settings, get_settings, limit_descriptions


class TestLimitBounds:

    @pytest.mark.parametrize("field", [
        "demo_session_hours",
        "demo_max_documents_per_session",
        "demo_max_file_size",
    ])
    def test_zero_is_rejected(self, field):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, **{field: 0})

    @pytest.mark.parametrize("field", [
        "demo_session_price_limit",
        "demo_price_per_thousand_chars",
    ])
    def test_negative_price_is_rejected(self, field):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, **{field: -0.01})

    def test_zero_price_limit_is_allowed(self):
        assert Settings(_env_file=None, demo_session_price_limit=0).demo_session_price_limit == 0

    def test_invalid_env_value_fails_at_startup(self, monkeypatch):
        monkeypatch.setenv("DEMO_SESSION_HOURS", "0")
        with pytest.raises(ValidationError):
            get_settings()


class TestDescriptions:

    def test_defaults(self, settings):
        descriptions = limit_descriptions(settings)
        assert descriptions["pricing"]["session_limit"] == "$5.00 per 24hr session"
