"""
Marketplace tables used by the catalog, pricing and order engines.

Column names follow the storefront database (Spanish product columns,
English everywhere else) so the engines can run against the existing
schema.
"""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.dialects.postgresql import JSONB

from basecore.db import Base

# JSONB on Postgres, plain JSON elsewhere (tests run on SQLite)
JSONType = JSON().with_variant(JSONB(), "postgresql")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ModelMixin:
    """Common fields for all marketplace models."""

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)


# --- Catalog ---


class Product(Base, ModelMixin):
    """
    Catalog product.

    Before normalization every SKU variant is its own flat row. After it,
    one row per parent SKU has is_parent=True and the rest are deactivated
    and point at it through parent_product_id.
    """

    __tablename__ = "products"

    sku_interno = Column(String(120), nullable=False, index=True)
    nombre = Column(String(500), nullable=False)
    descripcion_corta = Column(Text, nullable=True)
    descripcion_larga = Column(Text, nullable=True)
    precio_mayorista = Column(Numeric(12, 2), nullable=False, default=0)
    precio_sugerido_venta = Column(Numeric(12, 2), nullable=True)
    stock_fisico = Column(Integer, nullable=False, default=0)
    moq = Column(Integer, nullable=False, default=1)
    peso_kg = Column(Numeric(10, 3), nullable=True)
    imagen_principal = Column(Text, nullable=True)
    galeria_imagenes = Column(JSONType, nullable=True)
    categoria_id = Column(Uuid(as_uuid=True), nullable=True, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    is_parent = Column(Boolean, nullable=False, default=False)
    parent_product_id = Column(Uuid(as_uuid=True), ForeignKey("products.id"), nullable=True)

    __table_args__ = (
        Index("idx_products_active_parent_sku", "is_active", "is_parent", "sku_interno"),
    )


class ProductVariant(Base, ModelMixin):
    """A purchasable variant of a parent product."""

    __tablename__ = "product_variants"

    product_id = Column(Uuid(as_uuid=True), ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    sku = Column(String(120), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    option_type = Column(String(50), nullable=False)  # color, size, age
    option_value = Column(String(120), nullable=False)
    price = Column(Numeric(12, 2), nullable=True)
    stock = Column(Integer, nullable=False, default=0)
    moq = Column(Integer, nullable=False, default=1)
    images = Column(JSONType, nullable=False, default=list)
    is_active = Column(Boolean, nullable=False, default=True)
    attribute_combination = Column(JSONType, nullable=False, default=dict)


class Attribute(Base, ModelMixin):
    """Variant attribute definition (color, size, age_group, ...)."""

    __tablename__ = "attributes"

    slug = Column(String(50), nullable=False, unique=True)
    name = Column(String(100), nullable=False)
    display_name = Column(String(100), nullable=False)
    attribute_type = Column(String(30), nullable=False, default="select")
    render_type = Column(String(30), nullable=False, default="chips")
    is_active = Column(Boolean, nullable=False, default=True)


class AttributeOption(Base, ModelMixin):
    """A selectable value of an attribute."""

    __tablename__ = "attribute_options"

    attribute_id = Column(Uuid(as_uuid=True), ForeignKey("attributes.id", ondelete="CASCADE"), nullable=False)
    value = Column(String(120), nullable=False)  # Always lower-case
    display_value = Column(String(120), nullable=False)
    color_hex = Column(String(7), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        UniqueConstraint("attribute_id", "value", name="uq_attribute_options_attribute_value"),
    )


class VariantAttributeValue(Base, ModelMixin):
    """Link between a variant and one attribute option."""

    __tablename__ = "variant_attribute_values"

    variant_id = Column(Uuid(as_uuid=True), ForeignKey("product_variants.id", ondelete="CASCADE"), nullable=False, index=True)
    attribute_id = Column(Uuid(as_uuid=True), ForeignKey("attributes.id"), nullable=False)
    attribute_option_id = Column(Uuid(as_uuid=True), ForeignKey("attribute_options.id"), nullable=False)


class ProductMigrationLog(Base, ModelMixin):
    """One row per flat product folded into a variant."""

    __tablename__ = "product_migration_log"

    original_product_id = Column(Uuid(as_uuid=True), nullable=True)
    new_variant_id = Column(Uuid(as_uuid=True), nullable=True)
    parent_sku = Column(String(120), nullable=False, index=True)
    status = Column(String(20), nullable=False, default="completed")
    migrated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


# --- Pricing & logistics ---


class B2BMarginRange(Base, ModelMixin):
    """Margin percent applied to factory cost within [min_cost, max_cost)."""

    __tablename__ = "b2b_margin_ranges"

    min_cost = Column(Numeric(12, 2), nullable=False)
    max_cost = Column(Numeric(12, 2), nullable=True)  # None = no upper bound
    margin_percent = Column(Numeric(6, 2), nullable=False)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    sort_order = Column(Integer, nullable=False, default=0)


class CategoryShippingRate(Base, ModelMixin):
    """Per-category fees added on top of logistics."""

    __tablename__ = "category_shipping_rates"

    category_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    fixed_fee = Column(Numeric(12, 2), nullable=False, default=0)
    percentage_fee = Column(Numeric(6, 2), nullable=False, default=0)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)


class DestinationCountry(Base, ModelMixin):
    __tablename__ = "destination_countries"

    code = Column(String(3), nullable=False, unique=True)
    name = Column(String(100), nullable=False)
    currency = Column(String(3), nullable=False, default="USD")
    is_active = Column(Boolean, nullable=False, default=True)


class TransitHub(Base, ModelMixin):
    __tablename__ = "transit_hubs"

    code = Column(String(10), nullable=False, unique=True)
    name = Column(String(100), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)


class ShippingRoute(Base, ModelMixin):
    """Route from origin to a destination country, direct or through a hub."""

    __tablename__ = "shipping_routes"

    destination_country_id = Column(Uuid(as_uuid=True), ForeignKey("destination_countries.id"), nullable=False)
    transit_hub_id = Column(Uuid(as_uuid=True), ForeignKey("transit_hubs.id"), nullable=True)
    is_direct = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)


class RouteLogisticsCost(Base, ModelMixin):
    """Cost of one segment of a shipping route."""

    __tablename__ = "route_logistics_costs"

    shipping_route_id = Column(Uuid(as_uuid=True), ForeignKey("shipping_routes.id", ondelete="CASCADE"), nullable=False, index=True)
    segment = Column(String(50), nullable=False)  # china_to_hub, hub_to_destination, ...
    cost_per_kg = Column(Numeric(12, 4), nullable=False, default=0)
    cost_per_cbm = Column(Numeric(12, 4), nullable=False, default=0)
    min_cost = Column(Numeric(12, 2), nullable=False, default=0)
    estimated_days_min = Column(Integer, nullable=False, default=0)
    estimated_days_max = Column(Integer, nullable=False, default=0)
    notes = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)


class ShippingRateSetting(Base, ModelMixin):
    """Global key/value shipping rates (china_usa_rate_per_kg, ...)."""

    __tablename__ = "shipping_rates"

    key = Column(String(100), nullable=False, unique=True)
    value = Column(Numeric(12, 4), nullable=False, default=0)
    description = Column(Text, nullable=True)


class Department(Base, ModelMixin):
    __tablename__ = "departments"

    code = Column(String(10), nullable=False, unique=True)
    name = Column(String(100), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)


class Commune(Base, ModelMixin):
    """Last-mile delivery zone with its own per-lb rate and fees."""

    __tablename__ = "communes"

    department_id = Column(Uuid(as_uuid=True), ForeignKey("departments.id"), nullable=False, index=True)
    code = Column(String(10), nullable=False)
    name = Column(String(100), nullable=False)
    rate_per_lb = Column(Numeric(10, 4), nullable=False, default=0)
    extra_department_fee = Column(Numeric(10, 2), nullable=False, default=0)
    delivery_fee = Column(Numeric(10, 2), nullable=False, default=0)
    operational_fee = Column(Numeric(10, 2), nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)


# --- Orders, notifications, tracking ---


class OrderB2B(Base, ModelMixin):
    """Wholesale order with a time-limited stock reservation."""

    __tablename__ = "orders_b2b"

    seller_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    buyer_id = Column(Uuid(as_uuid=True), nullable=True, index=True)
    status = Column(String(30), nullable=False, default="draft")
    payment_status = Column(String(30), nullable=False, default="draft")
    payment_method = Column(String(30), nullable=True)
    total_amount = Column(Numeric(12, 2), nullable=False, default=0)
    total_quantity = Column(Integer, nullable=False, default=0)
    currency = Column(String(3), nullable=False, default="USD")
    stock_reserved = Column(Boolean, nullable=False, default=False)
    reserved_at = Column(DateTime(timezone=True), nullable=True)
    reservation_expires_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("idx_orders_b2b_payment_expiry", "payment_status", "reservation_expires_at"),
    )


class Notification(Base, ModelMixin):
    __tablename__ = "notifications"

    user_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    type = Column(String(50), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    data = Column(JSONType, nullable=True)
    is_read = Column(Boolean, nullable=False, default=False)
    is_email_sent = Column(Boolean, nullable=False, default=False)
    is_whatsapp_sent = Column(Boolean, nullable=False, default=False)


class CatalogClickTracking(Base, ModelMixin):
    """A click on a seller's shared catalog link or pixel."""

    __tablename__ = "catalog_click_tracking"

    seller_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    product_id = Column(Uuid(as_uuid=True), nullable=True)
    variant_id = Column(Uuid(as_uuid=True), nullable=True)
    source_type = Column(String(30), nullable=False, default="direct_link")
    source_campaign = Column(String(120), nullable=True)
    device_type = Column(String(20), nullable=False)
    user_agent = Column(String(500), nullable=True)
    ip_hash = Column(String(16), nullable=True)
