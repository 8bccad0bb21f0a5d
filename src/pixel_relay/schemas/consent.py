"""
Consent models.

``ConsentState`` mirrors the storefront's customer-privacy payload;
``ConsentSignals`` is the four-flag record sent to the collection sink.
"""

from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class ConsentValue(str, Enum):
    """Value of a single consent signal."""

    GRANTED = "granted"
    DENIED = "denied"

    @classmethod
    def from_flag(cls, allowed: bool) -> "ConsentValue":
        return cls.GRANTED if allowed else cls.DENIED


class ConsentState(BaseModel):
    """
    Current visitor consent.

    Accepts both the snake_case field names and the storefront's
    camelCase payload keys. Missing or null flags count as not allowed.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    analytics_allowed: bool = Field(
        default=False,
        validation_alias=AliasChoices("analytics_allowed", "analyticsProcessingAllowed"),
    )
    marketing_allowed: bool = Field(
        default=False,
        validation_alias=AliasChoices("marketing_allowed", "marketingAllowed"),
    )
    personalization_allowed: bool = Field(
        default=False,
        validation_alias=AliasChoices(
            "personalization_allowed", "preferencesProcessingAllowed"
        ),
    )

    @field_validator(
        "analytics_allowed", "marketing_allowed", "personalization_allowed", mode="before"
    )
    @classmethod
    def coerce_missing(cls, v):
        """Treat null flags as denied."""
        if v is None:
            return False
        return v


class ConsentSignals(BaseModel):
    """The four consent signals understood by the collection endpoint."""

    model_config = ConfigDict(use_enum_values=True, frozen=True)

    analytics_storage: ConsentValue
    ad_storage: ConsentValue
    ad_personalization: ConsentValue
    ad_user_data: ConsentValue

    def to_params(self) -> dict:
        return self.model_dump()
