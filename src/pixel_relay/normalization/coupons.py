"""
Discount and coupon extraction.

Returns None rather than an empty string when there is nothing to report,
so the coupon field is left out of the emitted event altogether.
"""

from typing import Any, Iterable, Optional

from pixel_relay.normalization.fields import as_text, extract_field, first_present

DISCOUNT_CODE_TYPE = "DISCOUNT_CODE"


def join_codes(codes: Iterable[Any]) -> Optional[str]:
    """Comma-join non-empty codes; None when nothing remains."""
    kept = [text for text in (as_text(code) for code in codes) if text]
    return ",".join(kept) if kept else None


def extract_coupons(discount_applications: Any) -> Optional[str]:
    """
    Comma-joined discount codes applied to a checkout.

    Only ``DISCOUNT_CODE`` applications count; automatic and script
    discounts are excluded. The display title is preferred over the raw code.

    Args:
        discount_applications: The checkout's ``discountApplications`` list

    Returns:
        "CODE1,CODE2", or None when the input is absent or yields no codes
    """
    if not isinstance(discount_applications, list):
        return None

    return join_codes(
        first_present(
            as_text(extract_field(application, "title")),
            as_text(extract_field(application, "code")),
        )
        for application in discount_applications
        if extract_field(application, "type") == DISCOUNT_CODE_TYPE
    )


def extract_line_coupons(discount_allocations: Any) -> Optional[str]:
    """
    Comma-joined codes of the discounts allocated to one checkout line.

    Uses the allocation's own ``code``, else the title of a discount-code
    application it points to.
    """
    if not isinstance(discount_allocations, list):
        return None

    codes = []
    for allocation in discount_allocations:
        code = as_text(extract_field(allocation, "code"))
        if not code and extract_field(allocation, "discountApplication.type") == DISCOUNT_CODE_TYPE:
            code = as_text(extract_field(allocation, "discountApplication.title"))
        codes.append(code)
    return join_codes(codes)
