"""
Normalization module for storefront event data.

This package provides:
- fields: tolerant path lookups and page resolvers
- currency: MoneyParser, amount normalization, currency resolution
- identifiers: namespaced identifier stripping
- coupons: discount code extraction
- items: tagged line wrappers and item list builders
"""
