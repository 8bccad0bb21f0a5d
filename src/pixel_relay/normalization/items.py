"""
Item list builder.

Converts storefront line records into canonical ``LineItem`` objects.

Two source shapes exist and each has its own tagged wrapper:

- ``CatalogLine``: cart lines (``merchandise`` wrapper) and collection
  entries (``variant`` wrapper, or a bare product variant).
- ``CheckoutLine``: checkout line items with a flat ``variant`` wrapper and
  per-line discount codes.

Field resolution never raises; missing nested fields degrade to None or to
the documented default.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Type

from pixel_relay.normalization.coupons import extract_line_coupons
from pixel_relay.normalization.currency import MoneyParser
from pixel_relay.normalization.fields import as_text, extract_field, first_present
from pixel_relay.normalization.identifiers import (
    PRODUCT_GID_PREFIX,
    VARIANT_GID_PREFIX,
    extract_identifier,
)
from pixel_relay.schemas.event import LineItem


class LineKind(str, Enum):
    """Shape of a raw line record."""

    CATALOG = "catalog"
    CHECKOUT = "checkout"


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _quantity(value: Any) -> int:
    """Positive quantity, defaulting to 1 when absent, zero or unparseable."""
    if isinstance(value, bool):
        return 1
    try:
        quantity = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 1
    return quantity or 1


class SourceLine(ABC):
    """
    Abstract wrapper around one raw line record.

    Subclasses define where each canonical field lives in their shape.
    """

    kind: ClassVar[LineKind]
    # Drop items that carry neither id nor name
    drop_unidentified: ClassVar[bool] = False

    def __init__(self, raw: Any):
        self.raw = _as_mapping(raw)

    @property
    @abstractmethod
    def merchandise(self) -> Mapping[str, Any]:
        """The purchasable variant record."""

    @property
    def product(self) -> Mapping[str, Any]:
        return _as_mapping(self.merchandise.get("product"))

    @abstractmethod
    def item_id(self) -> Optional[str]:
        """Identifier with its namespace prefix stripped."""

    def item_name(self) -> Optional[str]:
        """Item-level title, else product title, else variant title."""
        return first_present(
            as_text(self.raw.get("title")),
            as_text(self.product.get("title")),
            as_text(self.merchandise.get("title")),
        )

    def item_variant(self) -> Optional[str]:
        """Variant label, only when it differs from the product title."""
        variant_title = as_text(self.merchandise.get("title"))
        if variant_title == as_text(self.product.get("title")):
            return None
        return variant_title

    def unit_price(self) -> float:
        return MoneyParser.normalize_amount(extract_field(self.merchandise, "price.amount"))

    def quantity(self) -> int:
        return _quantity(self.raw.get("quantity"))

    def discount(self) -> float:
        return MoneyParser.sum_allocations(self.raw.get("discountAllocations"))

    def coupon(self) -> Optional[str]:
        return None

    def to_line_item(
        self,
        index: Optional[int] = None,
        list_name: Optional[str] = None,
        with_discount: bool = True,
    ) -> LineItem:
        """Resolve every canonical field of this line."""
        return LineItem(
            item_id=self.item_id(),
            item_name=self.item_name(),
            item_brand=as_text(self.product.get("vendor")),
            item_category=as_text(self.product.get("type")),
            item_variant=self.item_variant(),
            price=self.unit_price(),
            quantity=self.quantity(),
            index=index,
            item_list_name=list_name or None,
            coupon=self.coupon(),
            discount=self.discount() if with_discount else None,
        )


class CatalogLine(SourceLine):
    """Cart line or collection entry."""

    kind = LineKind.CATALOG
    drop_unidentified = True

    @property
    def merchandise(self) -> Mapping[str, Any]:
        wrapped = first_present(self.raw.get("merchandise"), self.raw.get("variant"))
        if isinstance(wrapped, Mapping):
            return wrapped
        # A bare product variant is its own merchandise
        if "product" in self.raw or "price" in self.raw:
            return self.raw
        return {}

    @property
    def is_bare_variant(self) -> bool:
        return self.merchandise is self.raw

    def item_id(self) -> Optional[str]:
        return extract_identifier(
            self.product.get("id"),
            PRODUCT_GID_PREFIX,
            fallback=self.merchandise.get("sku"),
        )

    def item_name(self) -> Optional[str]:
        if self.is_bare_variant:
            # The record's own title is the variant title here
            return first_present(
                as_text(self.product.get("title")),
                as_text(self.merchandise.get("title")),
            )
        return super().item_name()


class CheckoutLine(SourceLine):
    """Checkout line item."""

    kind = LineKind.CHECKOUT

    @property
    def merchandise(self) -> Mapping[str, Any]:
        return _as_mapping(self.raw.get("variant"))

    def item_id(self) -> Optional[str]:
        return first_present(
            extract_identifier(self.product.get("id"), PRODUCT_GID_PREFIX),
            extract_identifier(
                self.merchandise.get("id"),
                VARIANT_GID_PREFIX,
                fallback=self.merchandise.get("sku"),
            ),
        )

    def coupon(self) -> Optional[str]:
        return extract_line_coupons(self.raw.get("discountAllocations"))


LINE_TYPES: Dict[LineKind, Type[SourceLine]] = {
    LineKind.CATALOG: CatalogLine,
    LineKind.CHECKOUT: CheckoutLine,
}


def build_line_items(
    lines: Any,
    kind: LineKind,
    list_name: Optional[str] = None,
) -> List[LineItem]:
    """
    Build canonical items from raw lines of the given shape.

    Args:
        lines: Raw line records; None or a non-list counts as empty
        kind: Which source shape the lines have
        list_name: Optional list label applied to every item

    Returns:
        Items in input order, ``index`` holding the original position
    """
    if not isinstance(lines, list):
        return []

    line_type = LINE_TYPES[kind]
    items = [
        line_type(raw).to_line_item(index=index, list_name=list_name)
        for index, raw in enumerate(lines)
    ]
    if line_type.drop_unidentified:
        items = [item for item in items if item.is_identifiable]
    return items


def build_items(lines: Any, list_name: Optional[str] = None) -> List[LineItem]:
    """Catalog/cart builder; items without id and name are dropped."""
    return build_line_items(lines, LineKind.CATALOG, list_name=list_name)


def build_checkout_items(lines: Any) -> List[LineItem]:
    """Checkout builder; every line is kept."""
    return build_line_items(lines, LineKind.CHECKOUT)


def build_single_item(merchandise: Any, quantity: Any = None) -> List[LineItem]:
    """
    One-item list for product views and cart additions/removals.

    Carries no position, list name or discount.
    """
    line = CatalogLine({"merchandise": _as_mapping(merchandise), "quantity": quantity})
    return [line.to_line_item(with_discount=False)]
