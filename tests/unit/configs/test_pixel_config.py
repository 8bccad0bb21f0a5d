"""
Unit tests for the YAML pixel config loader.

Tests for Config.load_pixel_config, Config.apply_pixel_config and
Config.load_settings.
"""

from pathlib import Path

import pytest

from pixel_relay.configs.config import Config
from pixel_relay.configs.settings import Settings, get_settings

PIXEL_YAML = """\
debug: true
tracking:
  page_views: true
  ecommerce: true
  search: false
  form_submit: false
store:
  affiliation: "${AFFILIATION}"
  default_currency: AUD
collection:
  measurement_id: G-TEST123
"""


@pytest.fixture
def write_config(tmp_path):
    def _write(content: str, name: str = "pixel.yaml") -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestLoadPixelConfig:
    """Tests for Config.load_pixel_config."""

    def test_substitutes_settings(self, write_config):
        path = write_config(PIXEL_YAML)
        config = Config.load_pixel_config(path, Settings(AFFILIATION="Flagship"))
        assert config["store"]["affiliation"] == "Flagship"
        assert config["tracking"]["search"] is False

    def test_unset_placeholder_becomes_empty(self, write_config):
        path = write_config(PIXEL_YAML)
        config = Config.load_pixel_config(path, Settings())
        assert config["store"]["affiliation"] == ""

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Config.load_pixel_config(tmp_path / "nope.yaml", Settings())

    def test_no_path_configured(self):
        with pytest.raises(FileNotFoundError):
            Config.load_pixel_config(None, Settings())

    def test_empty_file(self, write_config):
        assert Config.load_pixel_config(write_config(""), Settings()) == {}

    def test_not_a_mapping(self, write_config):
        with pytest.raises(ValueError, match="must be a mapping"):
            Config.load_pixel_config(write_config("- a\n- b\n"), Settings())

    def test_invalid_yaml(self, write_config):
        with pytest.raises(ValueError, match="Invalid YAML"):
            Config.load_pixel_config(write_config("tracking: [unclosed\n"), Settings())


class TestApplyPixelConfig:
    """Tests for Config.apply_pixel_config."""

    def test_overrides(self):
        config = {
            "debug": True,
            "tracking": {"search": False},
            "store": {"default_currency": "AUD"},
            "collection": {"measurement_id": "G-TEST123"},
        }
        settings = Config.apply_pixel_config(Settings(), config)
        assert settings.DEBUG is True
        assert settings.TRACK_SEARCH is False
        assert settings.TRACK_ECOMMERCE is True
        assert settings.DEFAULT_CURRENCY == "AUD"
        assert settings.MEASUREMENT_ID == "G-TEST123"

    def test_empty_affiliation_is_unset(self):
        settings = Config.apply_pixel_config(Settings(), {"store": {"affiliation": ""}})
        assert settings.AFFILIATION is None

    def test_unknown_keys_ignored(self):
        config = {"tracking": {"clicks": False}, "extra": 1}
        settings = Config.apply_pixel_config(Settings(), config)
        assert settings.tracking_toggles() == Settings().tracking_toggles()

    def test_invalid_value_raises(self):
        from pydantic import ValidationError

        with pytest.raises(ValidationError):
            Config.apply_pixel_config(Settings(), {"store": {"default_currency": "DOLLARS"}})


class TestLoadSettings:
    """Tests for Config.load_settings."""

    def test_without_config(self):
        assert Config.load_settings().tracking_toggles()["form_submit"] is True

    def test_with_config(self, write_config):
        settings = Config.load_settings(write_config(PIXEL_YAML))
        assert settings.DEBUG is True
        assert settings.TRACK_FORM_SUBMIT is False
        assert settings.AFFILIATION is None

    def test_path_from_environment(self, write_config, monkeypatch):
        path = write_config(PIXEL_YAML)
        monkeypatch.setenv("PIXEL_CONFIG_PATH", str(path))
        monkeypatch.setenv("AFFILIATION", "Env Store")
        settings = Config.load_settings()
        assert settings.AFFILIATION == "Env Store"
        assert settings.DEFAULT_CURRENCY == "AUD"
