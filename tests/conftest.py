"""
Shared pytest fixtures for the pixel relay test suite.

Provides factory fixtures that build raw storefront payloads shaped like the
ones the storefront event bus delivers.
"""

import logging
from typing import Any, Dict, List, Optional

import pytest

from pixel_relay.mapping.mappers import MappingContext
from pixel_relay.schemas.context import PageContext
from pixel_relay.sinks import MemorySink

PAGE_URL = "https://shop.example/products/merino-crew"


def _money(amount: Any, currency: str = "NZD") -> Dict[str, Any]:
    return {"amount": amount, "currencyCode": currency}


@pytest.fixture
def money():
    """Return a function that builds a storefront money mapping."""
    return _money


@pytest.fixture
def create_variant():
    """
    Return a function that creates product variant payloads.

    Example:
        variant = create_variant(price="29.95", title="Navy / M")
    """

    def _create_variant(
        product_id: Optional[str] = "gid://shopify/Product/123",
        product_title: Optional[str] = "Merino Crew",
        title: Optional[str] = "Navy / M",
        price: Any = "29.95",
        **kwargs,
    ) -> Dict[str, Any]:
        variant = {
            "id": "gid://shopify/ProductVariant/456",
            "title": title,
            "sku": "MC-NAVY-M",
            "price": _money(price),
            "product": {
                "id": product_id,
                "title": product_title,
                "vendor": "Acme Knitwear",
                "type": "Sweaters",
            },
        }
        variant.update(kwargs)
        return variant

    return _create_variant


@pytest.fixture
def create_checkout(create_variant):
    """
    Return a function that creates checkout payloads.

    Defaults to a single line of two units at 29.95 NZD.
    """

    def _create_checkout(
        line_items: Optional[List[Dict[str, Any]]] = None,
        total: Any = "59.90",
        currency: Optional[str] = "NZD",
        order_id: Optional[str] = "gid://shopify/Order/789",
        **kwargs,
    ) -> Dict[str, Any]:
        if line_items is None:
            line_items = [
                {
                    "title": "Merino Crew",
                    "quantity": 2,
                    "variant": create_variant(),
                    "discountAllocations": [],
                }
            ]
        checkout = {
            "currencyCode": currency,
            "totalPrice": _money(total),
            "totalTax": _money("7.81"),
            "shippingLine": {"price": _money("5.00")},
            "token": "tok_abc123",
            "order": {"id": order_id} if order_id else None,
            "discountApplications": [],
            "lineItems": line_items,
        }
        checkout.update(kwargs)
        return checkout

    return _create_checkout


@pytest.fixture
def create_event():
    """
    Return a function that wraps event data in a raw storefront event.

    The sandboxed document context is included unless ``with_context`` is False.
    """

    def _create_event(
        data: Optional[Dict[str, Any]] = None,
        name: str = "page_viewed",
        with_context: bool = True,
        href: str = PAGE_URL,
        title: str = "Merino Crew - Example Store",
    ) -> Dict[str, Any]:
        event: Dict[str, Any] = {"name": name, "data": data or {}}
        if with_context:
            event["context"] = {
                "document": {
                    "location": {"href": href},
                    "referrer": "https://www.google.com/",
                    "title": title,
                }
            }
        return event

    return _create_event


@pytest.fixture
def page_context():
    """Live browsing context used as fallback."""
    return PageContext(
        href="https://shop.example/live",
        referrer="https://live.example/",
        title="Live Title",
    )


@pytest.fixture
def mapping_context(page_context):
    """Default mapping context with a store currency of NZD."""
    return MappingContext(
        page=page_context,
        shop_currency="NZD",
        fallback_currency="NZD",
        affiliation="Example Store",
    )


@pytest.fixture
def memory_sink():
    """Fresh in-memory sink."""
    return MemorySink()


@pytest.fixture
def init_payload():
    """Raw storefront init snapshot."""
    return {
        "context": {
            "document": {
                "location": {"href": "https://shop.example/"},
                "referrer": "",
                "title": "Example Store",
            }
        },
        "data": {
            "shop": {
                "name": "Example Store",
                "paymentSettings": {"currencyCode": "AUD"},
            }
        },
        "customerPrivacy": {
            "analyticsProcessingAllowed": True,
            "marketingAllowed": False,
            "preferencesProcessingAllowed": False,
        },
    }


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo setup_logging() side effects so caplog sees package records."""
    yield
    logger = logging.getLogger("pixel_relay")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep host environment variables out of Settings()."""
    for name in (
        "DEBUG",
        "AFFILIATION",
        "DEFAULT_CURRENCY",
        "PIXEL_CONFIG_PATH",
        "TRACK_PAGE_VIEWS",
        "TRACK_ECOMMERCE",
        "TRACK_SEARCH",
        "TRACK_FORM_SUBMIT",
        "LOG_LEVEL",
        "JSON_LOGS",
        "MEASUREMENT_ID",
        "SERVER_CONTAINER_URL",
    ):
        monkeypatch.delenv(name, raising=False)
