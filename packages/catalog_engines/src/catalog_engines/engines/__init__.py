"""
Engine implementations.

Pure calculation engines are exported here. The normalization engine needs
the persistence layer and is imported from catalog_engines.engines.normalizer.
"""

from catalog_engines.engines.cart_logistics import calculate_cart_logistics
from catalog_engines.engines.checkout import validate_checkout
from catalog_engines.engines.pricing import B2BPriceCalculator, calculate_b2b_price
from catalog_engines.engines.routes import calculate_route_cost, route_summary
from catalog_engines.engines.shipping import calculate_shipping, generate_hybrid_tracking_id
from catalog_engines.engines.sku_parser import parse_sku_variants

__all__ = [
    "B2BPriceCalculator",
    "calculate_b2b_price",
    "calculate_cart_logistics",
    "calculate_route_cost",
    "calculate_shipping",
    "generate_hybrid_tracking_id",
    "parse_sku_variants",
    "route_summary",
    "validate_checkout",
]
