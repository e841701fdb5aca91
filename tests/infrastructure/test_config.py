"""Tests for environment-driven settings."""

import pytest

from shopdesk.domain.exceptions import ValidationError
from shopdesk.infrastructure.config import DEFAULT_BASE_URL, Settings, load_settings


class TestLoadSettings:

    def test_defaults(self):
        assert load_settings({}) == Settings()
        assert Settings().base_url == DEFAULT_BASE_URL
        assert Settings().poll_interval == 10.0

    def test_overrides(self):
        settings = load_settings(
            {
                "SHOPDESK_BASE_URL": "http://localhost:8000/api/v1/",
                "SHOPDESK_SESSION_COOKIE": "token=abc",
                "SHOPDESK_POLL_INTERVAL": "2.5",
                "SHOPDESK_REQUEST_TIMEOUT": "4",
                "SHOPDESK_ALERT_SOUND": "off",
                "SHOPDESK_ALERT_VIBRATION": "Yes",
            }
        )
        assert settings.base_url == "http://localhost:8000/api/v1"
        assert settings.session_cookie == "token=abc"
        assert settings.poll_interval == 2.5
        assert settings.request_timeout == 4.0
        assert settings.alert_sound is False
        assert settings.alert_vibration is True

    def test_blank_cookie_is_none(self):
        assert load_settings({"SHOPDESK_SESSION_COOKIE": ""}).session_cookie is None

    @pytest.mark.parametrize("value", ["abc", "0", "-3"])
    def test_bad_interval_rejected(self, value):
        with pytest.raises(ValidationError, match="SHOPDESK_POLL_INTERVAL"):
            load_settings({"SHOPDESK_POLL_INTERVAL": value})

    def test_bad_flag_rejected(self):
        with pytest.raises(ValidationError, match="on/off"):
            load_settings({"SHOPDESK_ALERT_SOUND": "loud"})
