"""Contracts - enumerations shared by engines, API and CLI."""

from catalog_engines.contracts.types import (
    AttributeSlug,
    CheckoutChannel,
    ClickSourceType,
    DeliveryMethod,
    NormalizeAction,
    OptionType,
    PaymentMethod,
    PaymentStatus,
)

__all__ = [
    "AttributeSlug",
    "CheckoutChannel",
    "ClickSourceType",
    "DeliveryMethod",
    "NormalizeAction",
    "OptionType",
    "PaymentMethod",
    "PaymentStatus",
]
