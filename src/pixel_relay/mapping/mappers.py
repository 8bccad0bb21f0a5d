"""
Per-event mapping functions.

Each function turns one raw storefront event into one ``CanonicalEvent``.
They are pure: no I/O, no shared state, and no exceptions for missing or
oddly-shaped fields. ``map_form_submitted`` may return None to suppress an
event.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from pixel_relay.normalization.coupons import extract_coupons
from pixel_relay.normalization.currency import FALLBACK_CURRENCY, normalize_amount, resolve_currency
from pixel_relay.normalization.fields import (
    as_text,
    extract_field,
    first_present,
    resolve_page_location,
    resolve_page_referrer,
    resolve_page_title,
)
from pixel_relay.normalization.identifiers import ORDER_GID_PREFIX, extract_identifier
from pixel_relay.normalization.items import (
    build_checkout_items,
    build_items,
    build_single_item,
)
from pixel_relay.schemas.context import DEFAULT_AFFILIATION, PageContext
from pixel_relay.schemas.event import AnalyticsEvent, CanonicalEvent

# Add-to-cart forms are reported by map_product_added_to_cart
CART_ADD_ACTION = "/cart/add"


@dataclass(frozen=True)
class MappingContext:
    """Process-level values the mappers read but never change."""

    page: PageContext = field(default_factory=PageContext)
    shop_currency: Optional[str] = None
    fallback_currency: str = FALLBACK_CURRENCY
    affiliation: str = DEFAULT_AFFILIATION

    def currency_for(self, event: Any) -> str:
        return resolve_currency(event, self.shop_currency, self.fallback_currency)


# ---------------------------------------------------------------------------
# Page & discovery
# ---------------------------------------------------------------------------


def map_page_viewed(event: Any, context: MappingContext) -> CanonicalEvent:
    return CanonicalEvent(
        name=AnalyticsEvent.PAGE_VIEW,
        page_location=resolve_page_location(event, context.page),
        page_referrer=resolve_page_referrer(event, context.page),
        page_title=resolve_page_title(event, context.page),
    )


def map_collection_viewed(event: Any, context: MappingContext) -> CanonicalEvent:
    """Collection listing; every item carries the collection title as list name."""
    collection = extract_field(event, "data.collection")
    list_name = as_text(extract_field(collection, "title"))

    return CanonicalEvent(
        name=AnalyticsEvent.VIEW_ITEM_LIST,
        page_location=resolve_page_location(event, context.page),
        page_title=resolve_page_title(event, context.page),
        item_list_id=as_text(extract_field(collection, "id")),
        item_list_name=list_name,
        items=build_items(extract_field(collection, "productVariants"), list_name),
    )


def map_product_viewed(event: Any, context: MappingContext) -> CanonicalEvent:
    variant = extract_field(event, "data.productVariant")

    return CanonicalEvent(
        name=AnalyticsEvent.VIEW_ITEM,
        page_location=resolve_page_location(event, context.page),
        page_title=resolve_page_title(event, context.page),
        currency=context.currency_for(event),
        value=normalize_amount(extract_field(variant, "price.amount")),
        items=build_single_item(variant, quantity=1),
    )


def map_search_submitted(event: Any, context: MappingContext) -> CanonicalEvent:
    return CanonicalEvent(
        name=AnalyticsEvent.VIEW_SEARCH_RESULTS,
        page_location=resolve_page_location(event, context.page),
        page_title=resolve_page_title(event, context.page),
        search_term=as_text(extract_field(event, "data.searchResult.query")),
    )


def map_form_submitted(event: Any, context: MappingContext) -> Optional[CanonicalEvent]:
    """
    Generic form submission.

    Returns None for add-to-cart forms so they are not counted twice.
    """
    element = extract_field(event, "data.element")
    action = as_text(extract_field(element, "action"))
    if action and CART_ADD_ACTION in action:
        return None

    return CanonicalEvent(
        name=AnalyticsEvent.FORM_SUBMIT,
        page_location=resolve_page_location(event, context.page),
        page_title=resolve_page_title(event, context.page),
        form_id=as_text(extract_field(element, "id")),
        form_action=action,
    )


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------


def _cart_line_event(name: AnalyticsEvent, event: Any, context: MappingContext) -> CanonicalEvent:
    cart_line = extract_field(event, "data.cartLine")

    return CanonicalEvent(
        name=name,
        page_location=resolve_page_location(event, context.page),
        currency=context.currency_for(event),
        value=normalize_amount(extract_field(cart_line, "cost.totalAmount.amount")),
        items=build_single_item(
            extract_field(cart_line, "merchandise"),
            quantity=extract_field(cart_line, "quantity"),
        ),
    )


def map_product_added_to_cart(event: Any, context: MappingContext) -> CanonicalEvent:
    return _cart_line_event(AnalyticsEvent.ADD_TO_CART, event, context)


def map_product_removed_from_cart(event: Any, context: MappingContext) -> CanonicalEvent:
    return _cart_line_event(AnalyticsEvent.REMOVE_FROM_CART, event, context)


def map_cart_viewed(event: Any, context: MappingContext) -> CanonicalEvent:
    cart = extract_field(event, "data.cart")

    return CanonicalEvent(
        name=AnalyticsEvent.VIEW_CART,
        page_location=resolve_page_location(event, context.page),
        currency=context.currency_for(event),
        value=normalize_amount(extract_field(cart, "cost.totalAmount.amount")),
        items=build_items(extract_field(cart, "lines")),
    )


# ---------------------------------------------------------------------------
# Checkout funnel
# ---------------------------------------------------------------------------


def _checkout_event(
    name: AnalyticsEvent,
    event: Any,
    context: MappingContext,
    **extra: Any,
) -> CanonicalEvent:
    """Fields shared by every checkout step."""
    checkout = extract_field(event, "data.checkout")

    return CanonicalEvent(
        name=name,
        page_location=resolve_page_location(event, context.page),
        currency=context.currency_for(event),
        value=normalize_amount(extract_field(checkout, "totalPrice.amount")),
        coupon=extract_coupons(extract_field(checkout, "discountApplications")),
        items=build_checkout_items(extract_field(checkout, "lineItems")),
        **extra,
    )


def map_checkout_started(event: Any, context: MappingContext) -> CanonicalEvent:
    return _checkout_event(AnalyticsEvent.BEGIN_CHECKOUT, event, context)


def map_checkout_shipping_info_submitted(event: Any, context: MappingContext) -> CanonicalEvent:
    return _checkout_event(
        AnalyticsEvent.ADD_SHIPPING_INFO,
        event,
        context,
        shipping_tier=as_text(
            extract_field(event, "data.checkout.delivery.selectedDeliveryOptions[0].title")
        ),
    )


def map_payment_info_submitted(event: Any, context: MappingContext) -> CanonicalEvent:
    return _checkout_event(
        AnalyticsEvent.ADD_PAYMENT_INFO,
        event,
        context,
        payment_type=as_text(extract_field(event, "data.checkout.transactions[0].gateway")),
    )


def resolve_transaction_id(checkout: Any) -> Optional[str]:
    """
    Order number without its namespace, else the checkout token.

    None when neither is present; the field is then left out of the event.
    """
    return first_present(
        extract_identifier(extract_field(checkout, "order.id"), ORDER_GID_PREFIX),
        as_text(extract_field(checkout, "token")),
    )


def map_checkout_completed(event: Any, context: MappingContext) -> CanonicalEvent:
    checkout = extract_field(event, "data.checkout")

    return _checkout_event(
        AnalyticsEvent.PURCHASE,
        event,
        context,
        transaction_id=resolve_transaction_id(checkout),
        tax=normalize_amount(extract_field(checkout, "totalTax.amount")),
        shipping=normalize_amount(extract_field(checkout, "shippingLine.price.amount")),
        affiliation=context.affiliation,
    )
