"""
Bootstrap context for the relay.

The storefront hands the pixel an ``init`` snapshot once at start-up: the
shop, the live browsing context and the visitor's initial privacy state.
These models hold the parts of that snapshot the mappers and the consent
tracker need.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from pixel_relay.normalization.fields import extract_field, first_present

DEFAULT_AFFILIATION = "Shopify Store"


@dataclass(frozen=True)
class PageContext:
    """Live browsing context used when an event carries no page data."""

    href: str = ""
    referrer: str = ""
    title: str = ""


@dataclass(frozen=True)
class ShopInfo:
    """Store identity and default currency."""

    name: Optional[str] = None
    currency: Optional[str] = None


@dataclass(frozen=True)
class InitData:
    """Parsed ``init`` snapshot."""

    shop: ShopInfo = field(default_factory=ShopInfo)
    page: PageContext = field(default_factory=PageContext)
    customer_privacy: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_raw(cls, raw: Optional[Mapping[str, Any]]) -> "InitData":
        """
        Build from the raw storefront ``init`` payload.

        Every field is optional; a missing or malformed payload yields an
        empty snapshot.
        """
        raw = raw if isinstance(raw, Mapping) else {}

        shop = ShopInfo(
            name=extract_field(raw, "data.shop.name") or None,
            currency=extract_field(raw, "data.shop.paymentSettings.currencyCode") or None,
        )
        page = PageContext(
            href=str(
                first_present(
                    extract_field(raw, "context.document.location.href"),
                    extract_field(raw, "context.window.location.href"),
                )
                or ""
            ),
            referrer=str(extract_field(raw, "context.document.referrer") or ""),
            title=str(extract_field(raw, "context.document.title") or ""),
        )
        privacy = raw.get("customerPrivacy")
        return cls(
            shop=shop,
            page=page,
            customer_privacy=dict(privacy) if isinstance(privacy, Mapping) else {},
        )

    def affiliation(self, configured: Optional[str] = None) -> str:
        """Configured label, else the shop name, else the generic store label."""
        return configured or self.shop.name or DEFAULT_AFFILIATION
