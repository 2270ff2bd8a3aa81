"""
Catalog Engines - marketplace business rules.

This package provides:
- SKU variant parsing and the one-shot catalog normalization job
- B2B pricing (margin ranges, route logistics, category fees)
- Cart logistics aggregation and shipment cost calculation
- Checkout validation and catalog click tracking helpers
- Pending order expiry

Engines work on plain values; only the normalizer, the repositories and the
jobs touch the database.
"""
