"""Configuration loader for the pixel relay."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from pixel_relay.configs.settings import Settings, get_settings

# YAML (section, key) -> Settings field
_YAML_TO_SETTINGS = {
    ("tracking", "page_views"): "TRACK_PAGE_VIEWS",
    ("tracking", "ecommerce"): "TRACK_ECOMMERCE",
    ("tracking", "search"): "TRACK_SEARCH",
    ("tracking", "form_submit"): "TRACK_FORM_SUBMIT",
    ("store", "affiliation"): "AFFILIATION",
    ("store", "default_currency"): "DEFAULT_CURRENCY",
    ("collection", "measurement_id"): "MEASUREMENT_ID",
    ("collection", "server_container_url"): "SERVER_CONTAINER_URL",
}


class Config:
    """Configuration for the pixel relay."""

    @classmethod
    def load_pixel_config(
        cls,
        path: Optional[Path] = None,
        settings: Optional[Settings] = None,
    ) -> Dict[str, Any]:
        """
        Load the YAML pixel configuration.

        ``${NAME}`` placeholders are substituted with the matching settings
        value before parsing.

        Args:
            path: Path to the YAML file. Defaults to ``PIXEL_CONFIG_PATH``.
            settings: Settings used for substitution. Defaults to cached settings.

        Returns:
            Parsed configuration dict (empty when the file is empty)

        Raises:
            FileNotFoundError: If the config file does not exist
            ValueError: If the file is not a YAML mapping
        """
        settings = settings or get_settings()
        path = Path(path) if path else settings.PIXEL_CONFIG_PATH
        if path is None or not path.exists():
            raise FileNotFoundError(f"Missing pixel config at {path}")

        with open(path, encoding="utf-8") as f:
            content = f.read()

        for key, value in settings.model_dump().items():
            placeholder = f"${{{key}}}"
            if placeholder in content:
                content = content.replace(placeholder, "" if value is None else str(value))

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in pixel config {path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"Pixel config {path} must be a mapping, got {type(data).__name__}")
        return data

    @classmethod
    def apply_pixel_config(cls, settings: Settings, config: Dict[str, Any]) -> Settings:
        """
        Return new settings with the YAML overrides applied.

        Recognised sections are ``tracking``, ``store`` and ``collection``,
        plus a top-level ``debug`` flag. Unknown keys are ignored.
        """
        overrides: Dict[str, Any] = {}
        for (section, key), field_name in _YAML_TO_SETTINGS.items():
            block = config.get(section)
            if isinstance(block, dict) and key in block:
                overrides[field_name] = block[key]

        if "debug" in config:
            overrides["DEBUG"] = config["debug"]

        # Empty substitutions leave the affiliation unset
        if overrides.get("AFFILIATION") == "":
            overrides["AFFILIATION"] = None

        merged = settings.model_dump()
        merged.update(overrides)
        return Settings(**merged)

    @classmethod
    def load_settings(cls, path: Optional[Path] = None) -> Settings:
        """Load settings from the environment, then apply the YAML file if any."""
        settings = get_settings()
        path = Path(path) if path else settings.PIXEL_CONFIG_PATH
        if path is None:
            return settings
        return cls.apply_pixel_config(settings, cls.load_pixel_config(path, settings))
