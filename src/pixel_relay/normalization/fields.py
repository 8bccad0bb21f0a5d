"""
Tolerant field extraction from raw storefront events.

Supports:
- Dot notation for nested fields: "context.document.location.href"
- Array indexing: "delivery.selectedDeliveryOptions[0].title"

Every lookup degrades to ``None`` instead of raising, whatever the shape of
the input.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, Mapping, Optional, Sequence

if TYPE_CHECKING:
    from pixel_relay.schemas.context import PageContext

_INDEXED_SEGMENT = re.compile(r"^([^\[\]]*)((?:\[\d+\])+)$")
_INDEX = re.compile(r"\[(\d+)\]")


def extract_field(data: Any, path: str) -> Any:
    """
    Extract a field using dot notation and array indexing.

    Supports:
    - "field" - simple field access
    - "parent.child" - nested field access
    - "items[0]" - array index access
    - "items[0].name" - array index then nested access

    Args:
        data: Source data (mapping or sequence)
        path: Field path with optional array notation

    Returns:
        Extracted value, or None when any hop is missing or of the wrong type
    """
    if not path:
        return data

    current = data
    for segment in path.split("."):
        if current is None:
            return None

        match = _INDEXED_SEGMENT.match(segment)
        if match:
            key, indexes = match.group(1), _INDEX.findall(match.group(2))
            if key:
                current = _get_value(current, key)
            for index in indexes:
                current = _get_index(current, int(index))
        else:
            current = _get_value(current, segment)

    return current


def _get_value(data: Any, key: str) -> Any:
    if isinstance(data, Mapping):
        return data.get(key)
    return None


def _get_index(data: Any, index: int) -> Any:
    if isinstance(data, Sequence) and not isinstance(data, (str, bytes)):
        if index < len(data):
            return data[index]
    return None


def first_present(*values: Any) -> Any:
    """Return the first value that is neither None nor an empty string."""
    for value in values:
        if value is not None and value != "":
            return value
    return None


def as_text(value: Any) -> Optional[str]:
    """Stringify a scalar field; None and empty strings become None."""
    if value is None or isinstance(value, (Mapping, list, tuple)):
        return None
    text = str(value)
    return text or None


# ---------------------------------------------------------------------------
# Page context resolvers
# ---------------------------------------------------------------------------


def resolve_page_location(event: Any, page: Optional["PageContext"] = None) -> str:
    """Sandboxed document URL, else sandboxed window URL, else the live page."""
    value = first_present(
        as_text(extract_field(event, "context.document.location.href")),
        as_text(extract_field(event, "context.window.location.href")),
        page.href if page else None,
    )
    return value or ""


def resolve_page_referrer(event: Any, page: Optional["PageContext"] = None) -> str:
    """Sandboxed document referrer, else the live referrer."""
    value = first_present(
        as_text(extract_field(event, "context.document.referrer")),
        page.referrer if page else None,
    )
    return value or ""


def resolve_page_title(event: Any, page: Optional["PageContext"] = None) -> str:
    """Sandboxed document title, else the live title."""
    value = first_present(
        as_text(extract_field(event, "context.document.title")),
        page.title if page else None,
    )
    return value or ""
