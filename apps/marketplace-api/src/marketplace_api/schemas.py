"""
API request models.

Response bodies are the engines' own result dictionaries; only inputs are
validated here.
"""

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class NormalizeRequest(BaseModel):
    """Body of the normalize-products job."""

    model_config = ConfigDict(populate_by_name=True)

    action: str | None = Field(None, description='"preview" or "migrate"')
    dry_run: bool = Field(True, alias="dryRun", description="Analyze only, write nothing")


class MarginRangeCreate(BaseModel):
    min_cost: Decimal = Field(..., ge=0, description="Lower bound (inclusive)")
    max_cost: Decimal | None = Field(None, description="Upper bound (exclusive); null for no limit")
    margin_percent: Decimal = Field(..., ge=0, description="Margin applied to the factory cost")
    description: str | None = None
    is_active: bool = True
    sort_order: int = 0


class MarginRangeUpdate(BaseModel):
    """Partial update. Only max_cost and description may be set to null."""

    min_cost: Decimal | None = Field(None, ge=0)
    max_cost: Decimal | None = None
    margin_percent: Decimal | None = Field(None, ge=0)
    description: str | None = None
    is_active: bool | None = None
    sort_order: int | None = None

    @field_validator("min_cost", "margin_percent", "is_active", "sort_order")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value


class MarginRangeToggle(BaseModel):
    is_active: bool


class PriceCalculationRequest(BaseModel):
    """Ad-hoc price calculation from a factory cost."""

    base_cost: Decimal = Field(..., ge=0)
    logistics_cost: Decimal = Field(Decimal("0"), ge=0)
    category_fees: Decimal = Field(Decimal("0"), ge=0)
    additional_expenses: Decimal = Field(Decimal("0"), ge=0)


class PriceQuoteRequest(BaseModel):
    product_ids: list[UUID] = Field(..., min_length=1)
    destination_code: str | None = Field(None, description="Destination country code, e.g. HT")


class CartItemIn(BaseModel):
    id: str
    product_id: UUID
    quantity: int = Field(..., gt=0)
    unit_price_b2b: Decimal = Field(Decimal("0"), ge=0)


class CartLogisticsRequest(BaseModel):
    items: list[CartItemIn]
    destination_code: str | None = None
    route_id: UUID | None = Field(None, description="Explicit route; overrides destination_code")


class ShippingQuoteRequest(BaseModel):
    weight_grams: Decimal = Field(..., ge=0)
    reference_price: Decimal = Field(..., ge=0)
    commune_id: UUID | None = None
    category_id: UUID | None = None


class TrackingIdRequest(BaseModel):
    department_code: str = Field(..., min_length=1)
    commune_code: str = Field(..., min_length=1)
    point_code: str | None = None
    unit_count: int = Field(..., ge=0)
    china_tracking: str = Field(..., min_length=1)


class CheckoutItemIn(BaseModel):
    id: str
    quantity: int


class CheckoutValidationRequest(BaseModel):
    channel: str = Field("b2c", pattern="^(b2c|b2b)$")
    items: list[CheckoutItemIn] = Field(default_factory=list)
    delivery_method: str | None = None
    selected_address: str | None = None
    selected_pickup_point: str | None = None
    payment_method: str | None = None
    payment_reference: str | None = None


class WhatsAppNotificationRequest(BaseModel):
    """Fields are optional here so missing ones get the sender's error message."""

    model_config = ConfigDict(populate_by_name=True)

    notification_id: UUID | None = Field(None, alias="notificationId")
    phone: str | None = None
    message: str | None = None
    template_name: str | None = Field(None, alias="templateName")
    template_params: dict[str, str] | None = Field(None, alias="templateParams")


class EmailNotificationRequest(BaseModel):
    """Fields are optional here so missing ones get the sender's error message."""

    model_config = ConfigDict(populate_by_name=True)

    notification_id: UUID | None = Field(None, alias="notificationId")
    recipient_email: str | None = Field(None, alias="recipientEmail")
    recipient_name: str | None = Field(None, alias="recipientName")
    subject: str | None = None
    title: str | None = None
    message: str | None = None
    cta_url: str | None = Field(None, alias="ctaUrl")
    cta_text: str | None = Field(None, alias="ctaText")
