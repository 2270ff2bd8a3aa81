"""
Shared enumerations.

String enums so values can be compared with and stored as plain strings.
"""

from enum import Enum


class NormalizeAction(str, Enum):
    """Actions accepted by the product normalization job."""

    PREVIEW = "preview"
    MIGRATE = "migrate"

    def __str__(self) -> str:
        return self.value


class AttributeSlug(str, Enum):
    """Attribute slugs the SKU normalizer links variants to."""

    COLOR = "color"
    SIZE = "size"
    AGE_GROUP = "age_group"


class OptionType(str, Enum):
    """Primary option type of a product variant."""

    COLOR = "color"
    SIZE = "size"
    AGE = "age"


class PaymentStatus(str, Enum):
    """Order payment lifecycle: draft -> pending -> paid/failed/expired."""

    DRAFT = "draft"
    PENDING = "pending"
    PENDING_VALIDATION = "pending_validation"
    PAID = "paid"
    FAILED = "failed"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


class PaymentMethod(str, Enum):
    STRIPE = "stripe"
    MONCASH = "moncash"
    NATCASH = "natcash"
    TRANSFER = "transfer"


class DeliveryMethod(str, Enum):
    ADDRESS = "address"
    PICKUP = "pickup"


class CheckoutChannel(str, Enum):
    B2C = "b2c"
    B2B = "b2b"


class ClickSourceType(str, Enum):
    """Where a tracked catalog click came from."""

    PDF_CATALOG = "pdf_catalog"
    WHATSAPP_STATUS = "whatsapp_status"
    DIRECT_LINK = "direct_link"
