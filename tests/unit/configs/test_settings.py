import pytest
from pydantic import ValidationError

from pixel_relay.configs.settings import Settings, get_settings


def test_settings_default_values():
    """Test default values for settings."""
    settings = Settings()
    assert settings.DEBUG is False
    assert settings.DEFAULT_CURRENCY == "NZD"
    assert settings.AFFILIATION is None
    assert settings.PIXEL_CONFIG_PATH is None
    assert settings.MEASUREMENT_ID == ""
    assert "ENV" not in Settings.model_fields


def test_tracking_toggles_all_enabled_by_default():
    """Test every tracking category is enabled by default."""
    assert Settings().tracking_toggles() == {
        "page_views": True,
        "ecommerce": True,
        "search": True,
        "form_submit": True,
    }


def test_settings_from_environment(monkeypatch):
    """Test environment variables override defaults."""
    monkeypatch.setenv("TRACK_SEARCH", "false")
    monkeypatch.setenv("AFFILIATION", "Flagship")
    settings = Settings()
    assert settings.tracking_toggles()["search"] is False
    assert settings.AFFILIATION == "Flagship"


def test_invalid_currency_rejected():
    """Test the default currency must be a three-letter code."""
    with pytest.raises(ValidationError):
        Settings(DEFAULT_CURRENCY="DOLLARS")


def test_get_settings_is_cached():
    """Test get_settings returns the same instance."""
    get_settings.cache_clear()
    assert get_settings() is get_settings()
    get_settings.cache_clear()
