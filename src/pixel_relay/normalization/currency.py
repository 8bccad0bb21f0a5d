"""
Monetary amount and currency helpers.

Amounts arrive as strings ("29.95"), numbers, or money mappings
(``{"amount": "29.95", "currencyCode": "NZD"}``). They are normalized to
floats; anything absent or unparseable counts as zero.
"""

from __future__ import annotations

import math
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from pixel_relay.normalization.fields import as_text, extract_field, first_present

FALLBACK_CURRENCY = "NZD"


class MoneyParser:
    """
    Parse monetary values from storefront payloads.

    Never raises: malformed input normalizes to ``0.0``.
    """

    # Leading numeric prefix, the way browsers parse "12.50 NZD"
    NUMBER_PREFIX = re.compile(r"^\s*([-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?)")

    @classmethod
    def normalize_amount(cls, value: Any) -> float:
        """
        Normalize a numeric-like value to a float.

        Handles:
        - "12.5" -> 12.5
        - 12.5 -> 12.5
        - "12.50 NZD" -> 12.5
        - {"amount": "12.5"} -> 12.5
        - None, "", "abc", True, NaN, 10**400 -> 0.0

        Args:
            value: Raw amount

        Returns:
            Float amount, 0.0 when absent or invalid
        """
        if isinstance(value, Mapping):
            value = value.get("amount")

        if value is None or isinstance(value, bool):
            return 0.0

        if isinstance(value, (int, float, Decimal)):
            try:
                number = float(value)
            except (OverflowError, ValueError):
                return 0.0
        elif isinstance(value, str):
            match = cls.NUMBER_PREFIX.match(value)
            if not match:
                return 0.0
            try:
                number = float(Decimal(match.group(1)))
            except (InvalidOperation, OverflowError):
                return 0.0
        else:
            return 0.0

        if math.isnan(number) or math.isinf(number):
            return 0.0
        return number

    @classmethod
    def sum_allocations(cls, allocations: Any) -> float:
        """
        Sum the ``amount`` money values of a discount allocation list.

        Non-list input and malformed entries contribute zero.
        """
        if not isinstance(allocations, list):
            return 0.0
        total = 0.0
        for allocation in allocations:
            total += cls.normalize_amount(extract_field(allocation, "amount"))
        return total


def normalize_amount(value: Any) -> float:
    """Module-level shortcut for :meth:`MoneyParser.normalize_amount`."""
    return MoneyParser.normalize_amount(value)


def resolve_currency(
    event: Any,
    shop_currency: Optional[str] = None,
    fallback: str = FALLBACK_CURRENCY,
) -> str:
    """
    Resolve the currency code for an event.

    Order: checkout currency, cart total currency, store default, fallback.
    The first non-empty value wins.
    """
    return first_present(
        as_text(extract_field(event, "data.checkout.currencyCode")),
        as_text(extract_field(event, "data.cart.cost.totalAmount.currencyCode")),
        shop_currency,
        fallback,
    )
