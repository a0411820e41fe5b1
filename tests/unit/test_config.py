"""Unit tests for configuration module."""

import pytest
from pydantic import ValidationError

from vehicle_insight.config import Settings, get_settings


class TestSettings:
    """Test suite for Settings class."""

    def test_default_settings(self) -> None:
        """Test that default settings are properly initialized."""
        settings = Settings()

        assert settings.notification_sender == "BuyItNow@digitalrecognition.net"
        assert settings.domain_keyword == "DRN"
        assert settings.notification_phrase == "Buy It Now Hit"
        assert settings.field_keyword == "VIN"
        assert settings.search_page_size == 50
        assert settings.max_messages == 20
        assert settings.fetch_concurrency == 5
        assert settings.log_level == "INFO"
        assert settings.debug is False

    def test_settings_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test loading settings from environment variables."""
        monkeypatch.setenv("VEHICLE_INSIGHT_MAX_MESSAGES", "7")
        monkeypatch.setenv("VEHICLE_INSIGHT_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("VEHICLE_INSIGHT_DEBUG", "true")

        # Clear the cache to ensure fresh settings
        get_settings.cache_clear()

        settings = get_settings()

        assert settings.max_messages == 7
        assert settings.log_level == "DEBUG"
        assert settings.debug is True

        # Clean up
        get_settings.cache_clear()

    def test_fetch_concurrency_is_bounded(self) -> None:
        """Test that fan-out outside 1..10 is rejected."""
        with pytest.raises(ValidationError):
            Settings(fetch_concurrency=0)
        with pytest.raises(ValidationError):
            Settings(fetch_concurrency=11)

    def test_get_settings_returns_cached_instance(self) -> None:
        """Test that get_settings returns the same cached instance."""
        get_settings.cache_clear()

        settings1 = get_settings()
        settings2 = get_settings()

        assert settings1 is settings2

        # Clean up
        get_settings.cache_clear()
