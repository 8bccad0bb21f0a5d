# src/pixel_relay/schemas/event.py
"""
Canonical Analytics Event Schema for the pixel relay.

Storefront lifecycle events arrive in many shapes (catalog listings, cart
lines, checkout line items). This schema is the single normalized
representation that every mapping function produces and every sink consumes.

Absent values are ``None`` and are dropped from the emitted parameter mapping,
so downstream consumers never receive an empty placeholder for a field that
was not populated.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

# ============================================================================
# ENUMS
# ============================================================================


class StorefrontEvent(str, Enum):
    """
    Storefront lifecycle events the relay subscribes to.
    """

    PAGE_VIEWED = "page_viewed"
    COLLECTION_VIEWED = "collection_viewed"
    PRODUCT_VIEWED = "product_viewed"
    PRODUCT_ADDED_TO_CART = "product_added_to_cart"
    CART_VIEWED = "cart_viewed"
    PRODUCT_REMOVED_FROM_CART = "product_removed_from_cart"
    CHECKOUT_STARTED = "checkout_started"
    CHECKOUT_SHIPPING_INFO_SUBMITTED = "checkout_shipping_info_submitted"
    PAYMENT_INFO_SUBMITTED = "payment_info_submitted"
    CHECKOUT_COMPLETED = "checkout_completed"
    SEARCH_SUBMITTED = "search_submitted"
    FORM_SUBMITTED = "form_submitted"


class AnalyticsEvent(str, Enum):
    """
    Canonical analytics event names.
    """

    PAGE_VIEW = "page_view"
    VIEW_ITEM_LIST = "view_item_list"
    VIEW_ITEM = "view_item"
    ADD_TO_CART = "add_to_cart"
    VIEW_CART = "view_cart"
    REMOVE_FROM_CART = "remove_from_cart"
    BEGIN_CHECKOUT = "begin_checkout"
    ADD_SHIPPING_INFO = "add_shipping_info"
    ADD_PAYMENT_INFO = "add_payment_info"
    PURCHASE = "purchase"
    VIEW_SEARCH_RESULTS = "view_search_results"
    FORM_SUBMIT = "form_submit"


class TrackingCategory(str, Enum):
    """
    Configuration category that gates a group of storefront events.
    """

    PAGE_VIEWS = "page_views"
    ECOMMERCE = "ecommerce"
    SEARCH = "search"
    FORM_SUBMIT = "form_submit"


# ============================================================================
# LINE ITEMS
# ============================================================================


class LineItem(BaseModel):
    """
    One purchasable unit (product variant + quantity) in canonical form.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "item_id": "123",
                "item_name": "Merino Crew",
                "item_brand": "Acme Knitwear",
                "item_category": "Sweaters",
                "item_variant": "Navy / M",
                "price": 29.95,
                "quantity": 2,
                "index": 0,
                "discount": 0.0,
            }
        }
    )

    item_id: Optional[str] = None
    item_name: Optional[str] = None
    item_brand: Optional[str] = None
    item_category: Optional[str] = None
    item_variant: Optional[str] = None
    price: float = 0.0
    quantity: int = 1
    index: Optional[int] = Field(
        default=None, ge=0, description="Zero-based position in the source list"
    )
    item_list_name: Optional[str] = None
    coupon: Optional[str] = None
    discount: Optional[float] = None

    @property
    def is_identifiable(self) -> bool:
        """Whether the item carries an id or a name."""
        return bool(self.item_id or self.item_name)

    def to_params(self) -> Dict[str, Any]:
        """Serialize to analytics parameters, omitting absent fields."""
        return self.model_dump(exclude_none=True)


# ============================================================================
# CANONICAL EVENT
# ============================================================================


class CanonicalEvent(BaseModel):
    """
    Canonical analytics event.

    One envelope serves every event name; each mapping function populates
    only the fields relevant to the event it produces.
    """

    model_config = ConfigDict(
        use_enum_values=True,
        json_schema_extra={
            "example": {
                "name": "purchase",
                "page_location": "https://shop.example/checkouts/abc/thank_you",
                "transaction_id": "789",
                "currency": "NZD",
                "value": 59.9,
                "tax": 0.0,
                "shipping": 0.0,
                "affiliation": "Example Store",
                "items": [{"item_id": "123", "price": 29.95, "quantity": 2}],
            }
        },
    )

    name: AnalyticsEvent

    # ---- PAGE ----
    page_location: str = ""
    page_referrer: Optional[str] = None
    page_title: Optional[str] = None

    # ---- MONETARY ----
    currency: Optional[str] = None
    value: Optional[float] = None
    tax: Optional[float] = None
    shipping: Optional[float] = None

    # ---- ECOMMERCE ----
    transaction_id: Optional[str] = None
    coupon: Optional[str] = None
    affiliation: Optional[str] = None
    shipping_tier: Optional[str] = None
    payment_type: Optional[str] = None
    item_list_id: Optional[str] = None
    item_list_name: Optional[str] = None
    items: Optional[List[LineItem]] = None

    # ---- SEARCH & FORMS ----
    search_term: Optional[str] = None
    form_id: Optional[str] = None
    form_action: Optional[str] = None

    def to_params(self) -> Dict[str, Any]:
        """
        Serialize to the analytics parameter mapping sent with the event.

        The event name is not part of the parameters. Fields that are ``None``
        are omitted entirely rather than sent as null or empty strings.
        """
        return self.model_dump(exclude={"name"}, exclude_none=True)

    def to_record(self) -> Dict[str, Any]:
        """Serialize to ``{"name": ..., "params": {...}}``."""
        return {"name": self.name, "params": self.to_params()}
