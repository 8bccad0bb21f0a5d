"""Namespaced storefront identifiers (``gid://shopify/<Type>/<id>``)."""

from typing import Any, Optional

from pixel_relay.normalization.fields import as_text

PRODUCT_GID_PREFIX = "gid://shopify/Product/"
VARIANT_GID_PREFIX = "gid://shopify/ProductVariant/"
ORDER_GID_PREFIX = "gid://shopify/Order/"


def extract_identifier(
    global_id: Any,
    prefix: str,
    fallback: Any = None,
) -> Optional[str]:
    """
    Strip a namespacing prefix from a composite identifier.

    Examples:
        >>> extract_identifier("gid://shopify/Product/123", PRODUCT_GID_PREFIX)
        '123'
        >>> extract_identifier("SKU-9", PRODUCT_GID_PREFIX)
        'SKU-9'
        >>> extract_identifier(None, PRODUCT_GID_PREFIX, fallback="SKU-9")
        'SKU-9'

    Args:
        global_id: Primary identifier (string or number)
        prefix: Namespace prefix to strip when present
        fallback: Secondary SKU-like value used when the primary is absent

    Returns:
        Stripped identifier, the unchanged identifier when the prefix does not
        match, the fallback, or None
    """
    text = as_text(global_id)
    if text and text.startswith(prefix):
        text = text[len(prefix):]
    return text or as_text(fallback)
