"""
Route table: storefront event -> mapping function -> enabling category.

The table is static so the whole dispatch surface can be inspected without
running anything. ``build_routes`` selects the routes whose category is
switched on, once, when a dispatcher is created.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from pixel_relay.mapping import mappers
from pixel_relay.mapping.mappers import MappingContext
from pixel_relay.schemas.event import CanonicalEvent, StorefrontEvent, TrackingCategory

logger = logging.getLogger(__name__)

Mapper = Callable[[Any, MappingContext], Optional[CanonicalEvent]]


@dataclass(frozen=True)
class EventRoute:
    """One row of the route table."""

    source_event: StorefrontEvent
    mapper: Mapper
    category: TrackingCategory

    @property
    def name(self) -> str:
        return self.source_event.value


EVENT_ROUTES: Tuple[EventRoute, ...] = (
    EventRoute(
        StorefrontEvent.PAGE_VIEWED,
        mappers.map_page_viewed,
        TrackingCategory.PAGE_VIEWS,
    ),
    EventRoute(
        StorefrontEvent.COLLECTION_VIEWED,
        mappers.map_collection_viewed,
        TrackingCategory.ECOMMERCE,
    ),
    EventRoute(
        StorefrontEvent.PRODUCT_VIEWED,
        mappers.map_product_viewed,
        TrackingCategory.ECOMMERCE,
    ),
    EventRoute(
        StorefrontEvent.PRODUCT_ADDED_TO_CART,
        mappers.map_product_added_to_cart,
        TrackingCategory.ECOMMERCE,
    ),
    EventRoute(
        StorefrontEvent.CART_VIEWED,
        mappers.map_cart_viewed,
        TrackingCategory.ECOMMERCE,
    ),
    EventRoute(
        StorefrontEvent.PRODUCT_REMOVED_FROM_CART,
        mappers.map_product_removed_from_cart,
        TrackingCategory.ECOMMERCE,
    ),
    EventRoute(
        StorefrontEvent.CHECKOUT_STARTED,
        mappers.map_checkout_started,
        TrackingCategory.ECOMMERCE,
    ),
    EventRoute(
        StorefrontEvent.CHECKOUT_SHIPPING_INFO_SUBMITTED,
        mappers.map_checkout_shipping_info_submitted,
        TrackingCategory.ECOMMERCE,
    ),
    EventRoute(
        StorefrontEvent.PAYMENT_INFO_SUBMITTED,
        mappers.map_payment_info_submitted,
        TrackingCategory.ECOMMERCE,
    ),
    EventRoute(
        StorefrontEvent.CHECKOUT_COMPLETED,
        mappers.map_checkout_completed,
        TrackingCategory.ECOMMERCE,
    ),
    EventRoute(
        StorefrontEvent.SEARCH_SUBMITTED,
        mappers.map_search_submitted,
        TrackingCategory.SEARCH,
    ),
    EventRoute(
        StorefrontEvent.FORM_SUBMITTED,
        mappers.map_form_submitted,
        TrackingCategory.FORM_SUBMIT,
    ),
)


def build_routes(toggles: Mapping[str, bool]) -> Dict[str, EventRoute]:
    """
    Select the routes whose category is enabled.

    Args:
        toggles: Category name -> enabled flag. Categories missing from the
            mapping are enabled.

    Returns:
        Storefront event name -> route, in table order
    """
    routes: Dict[str, EventRoute] = {}
    for route in EVENT_ROUTES:
        if toggles.get(route.category.value, True):
            routes[route.name] = route

    disabled = sorted({r.category.value for r in EVENT_ROUTES if r.name not in routes})
    if disabled:
        logger.info(f"Tracking disabled for categories: {', '.join(disabled)}")
    return routes


def describe_routes(toggles: Optional[Mapping[str, bool]] = None) -> Dict[str, Dict[str, Any]]:
    """
    List every route with its canonical target and whether it is enabled.

    Returns:
        Dict mapping storefront event -> {category, mapper, enabled}
    """
    toggles = toggles or {}
    return {
        route.name: {
            "category": route.category.value,
            "mapper": route.mapper.__name__,
            "enabled": bool(toggles.get(route.category.value, True)),
        }
        for route in EVENT_ROUTES
    }
