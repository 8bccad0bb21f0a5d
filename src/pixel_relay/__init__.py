"""
pixel_relay: storefront event to analytics event translation.

This package provides:
- Canonical event models: CanonicalEvent, LineItem, ConsentSignals
- Normalization helpers: field lookups, money parsing, identifiers, coupons
- Item list builders for catalog/cart and checkout line shapes
- One mapping function per storefront event, wired through a route table
- EventDispatcher: subscription, dispatch and consent handling
"""

__version__ = "0.1.0"
