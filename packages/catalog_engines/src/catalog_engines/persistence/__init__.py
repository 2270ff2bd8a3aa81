"""Persistence - ORM models and repositories."""

from catalog_engines.persistence.repo import (
    CatalogRepository,
    OrdersRepository,
    PricingRepository,
    TrackingRepository,
)

__all__ = [
    "CatalogRepository",
    "OrdersRepository",
    "PricingRepository",
    "TrackingRepository",
]
