"""Centralized settings management for the pixel relay."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Relay settings powered by pydantic-settings.

    Loads configuration from environment variables and a .env file located
    in the current working directory.
    """

    # -------------------------------------------------------------------------
    # ENVIRONMENT
    # -------------------------------------------------------------------------
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    JSON_LOGS: bool = False

    # -------------------------------------------------------------------------
    # COLLECTION ENDPOINT
    # -------------------------------------------------------------------------
    # Passed through to the collection client behind the sink; logged at start-up
    MEASUREMENT_ID: str = ""
    SERVER_CONTAINER_URL: str = ""

    # -------------------------------------------------------------------------
    # EVENT TOGGLES
    # -------------------------------------------------------------------------
    TRACK_PAGE_VIEWS: bool = True
    TRACK_ECOMMERCE: bool = True
    TRACK_SEARCH: bool = True
    TRACK_FORM_SUBMIT: bool = True

    # -------------------------------------------------------------------------
    # STORE
    # -------------------------------------------------------------------------
    # Falls back to the shop name from the init snapshot when unset
    AFFILIATION: str | None = None
    DEFAULT_CURRENCY: str = Field(default="NZD", min_length=3, max_length=3)

    # -------------------------------------------------------------------------
    # PATHS
    # -------------------------------------------------------------------------
    PIXEL_CONFIG_PATH: Path | None = None

    # -------------------------------------------------------------------------
    # CONFIGURATION
    # -------------------------------------------------------------------------
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        # Allow extra fields in .env but ignore them in the model
        extra="ignore",
    )

    def tracking_toggles(self) -> dict[str, bool]:
        """
        Return the per-category event toggles keyed by category name.

        Returns
        -------
        dict
            Mapping of ``page_views``, ``ecommerce``, ``search`` and
            ``form_submit`` to their enabled flag.
        """
        return {
            "page_views": self.TRACK_PAGE_VIEWS,
            "ecommerce": self.TRACK_ECOMMERCE,
            "search": self.TRACK_SEARCH,
            "form_submit": self.TRACK_FORM_SUBMIT,
        }


@lru_cache
def get_settings() -> Settings:
    """
    Get cached relay settings.

    Returns
    -------
    Settings
        The singleton settings instance.
    """
    return Settings()
