"""
Repositories for marketplace tables.

Queries live here so engines, the API and the CLI share them. Methods
flush but never commit; the caller owns the transaction.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Iterable
from uuid import UUID

from sqlalchemy.orm import Session

from catalog_engines.contracts.types import PaymentStatus
from catalog_engines.engines.money import to_decimal
from catalog_engines.engines.pricing import CategoryRate, MarginRange, ProductForCalculation
from catalog_engines.engines.routes import RouteInfo, RouteSegment
from catalog_engines.engines.shipping import CommuneRates
from catalog_engines.exceptions import NotFoundError
from catalog_engines.persistence.models import (
    Attribute,
    AttributeOption,
    B2BMarginRange,
    CatalogClickTracking,
    CategoryShippingRate,
    Commune,
    DestinationCountry,
    Notification,
    OrderB2B,
    Product,
    ProductMigrationLog,
    ProductVariant,
    RouteLogisticsCost,
    ShippingRateSetting,
    ShippingRoute,
    TransitHub,
    VariantAttributeValue,
    utcnow,
)


class CatalogRepository:
    """Products, variants and attribute options."""

    def __init__(self, db: Session):
        self.db = db

    def get_flat_products(self) -> list[Product]:
        """Active products not yet folded into a parent, ordered by SKU."""
        return (
            self.db.query(Product)
            .filter(Product.is_active.is_(True), Product.is_parent.is_(False))
            .order_by(Product.sku_interno)
            .all()
        )

    def get_attribute_ids(self, slugs: Iterable[str]) -> dict[str, UUID]:
        rows = self.db.query(Attribute.slug, Attribute.id).filter(Attribute.slug.in_(list(slugs))).all()
        return {slug: attribute_id for slug, attribute_id in rows}

    def get_or_create_attribute_option(
        self,
        attribute_id: UUID,
        value: str,
        display_value: str,
        color_hex: str | None = None,
    ) -> AttributeOption:
        """Fetch an option by (attribute, lower-cased value) or create it."""
        normalized = value.lower()
        existing = (
            self.db.query(AttributeOption)
            .filter(
                AttributeOption.attribute_id == attribute_id,
                AttributeOption.value == normalized,
            )
            .first()
        )
        if existing:
            return existing

        option = AttributeOption(
            attribute_id=attribute_id,
            value=normalized,
            display_value=display_value,
            color_hex=color_hex,
            is_active=True,
        )
        self.db.add(option)
        self.db.flush()
        return option

    def promote_to_parent(self, product: Product, parent_sku: str, name: str) -> Product:
        product.is_parent = True
        product.sku_interno = parent_sku
        product.nombre = name
        self.db.flush()
        return product

    def create_variant(self, **fields: Any) -> ProductVariant:
        variant = ProductVariant(**fields)
        self.db.add(variant)
        self.db.flush()
        return variant

    def link_variant_option(self, variant_id: UUID, attribute_id: UUID, option_id: UUID) -> VariantAttributeValue:
        link = VariantAttributeValue(
            variant_id=variant_id,
            attribute_id=attribute_id,
            attribute_option_id=option_id,
        )
        self.db.add(link)
        self.db.flush()
        return link

    def log_migration(self, original_product_id: UUID, new_variant_id: UUID, parent_sku: str) -> ProductMigrationLog:
        entry = ProductMigrationLog(
            original_product_id=original_product_id,
            new_variant_id=new_variant_id,
            parent_sku=parent_sku,
            status="completed",
        )
        self.db.add(entry)
        self.db.flush()
        return entry

    def deactivate_into_parent(self, product: Product, parent_id: UUID) -> None:
        product.is_active = False
        product.parent_product_id = parent_id
        self.db.flush()

    def get_products_for_calculation(self, product_ids: Iterable[UUID]) -> list[ProductForCalculation]:
        ids = list(product_ids)
        if not ids:
            return []
        rows = self.db.query(Product).filter(Product.id.in_(ids)).all()
        return [
            ProductForCalculation(
                id=row.id,
                factory_cost=to_decimal(row.precio_mayorista),
                category_id=row.categoria_id,
                weight_kg=to_decimal(row.peso_kg) if row.peso_kg is not None else None,
            )
            for row in rows
        ]


class PricingRepository:
    """Margin ranges, category rates, routes and shipping rates."""

    def __init__(self, db: Session):
        self.db = db

    # --- Margin ranges ---

    def list_margin_ranges(self, active_only: bool = False) -> list[B2BMarginRange]:
        query = self.db.query(B2BMarginRange)
        if active_only:
            query = query.filter(B2BMarginRange.is_active.is_(True))
        return query.order_by(B2BMarginRange.sort_order, B2BMarginRange.min_cost).all()

    def get_margin_ranges(self, active_only: bool = True) -> list[MarginRange]:
        return [MarginRange.from_model(row) for row in self.list_margin_ranges(active_only=active_only)]

    def get_margin_range(self, range_id: UUID) -> B2BMarginRange:
        row = self.db.get(B2BMarginRange, range_id)
        if row is None:
            raise NotFoundError("margin range", range_id)
        return row

    def create_margin_range(
        self,
        min_cost: Decimal,
        max_cost: Decimal | None,
        margin_percent: Decimal,
        description: str | None = None,
        is_active: bool = True,
        sort_order: int = 0,
    ) -> B2BMarginRange:
        row = B2BMarginRange(
            min_cost=min_cost,
            max_cost=max_cost,
            margin_percent=margin_percent,
            description=description,
            is_active=is_active,
            sort_order=sort_order,
        )
        self.db.add(row)
        self.db.flush()
        return row

    def update_margin_range(self, range_id: UUID, **fields: Any) -> B2BMarginRange:
        row = self.get_margin_range(range_id)
        for name, value in fields.items():
            setattr(row, name, value)
        row.updated_at = utcnow()
        self.db.flush()
        return row

    def delete_margin_range(self, range_id: UUID) -> None:
        row = self.get_margin_range(range_id)
        self.db.delete(row)
        self.db.flush()

    def toggle_margin_range(self, range_id: UUID, is_active: bool) -> B2BMarginRange:
        return self.update_margin_range(range_id, is_active=is_active)

    # --- Category fees ---

    def get_category_rates(self) -> list[CategoryRate]:
        rows = self.db.query(CategoryShippingRate).filter(CategoryShippingRate.is_active.is_(True)).all()
        return [CategoryRate.from_model(row) for row in rows]

    def get_category_rate(self, category_id: UUID | None) -> CategoryRate | None:
        if not category_id:
            return None
        row = (
            self.db.query(CategoryShippingRate)
            .filter(
                CategoryShippingRate.category_id == category_id,
                CategoryShippingRate.is_active.is_(True),
            )
            .first()
        )
        return CategoryRate.from_model(row) if row else None

    # --- Routes ---

    def get_routes(self) -> list[RouteInfo]:
        """Routes with their destination, hub and segments."""
        rows = (
            self.db.query(ShippingRoute, DestinationCountry, TransitHub)
            .join(DestinationCountry, ShippingRoute.destination_country_id == DestinationCountry.id)
            .outerjoin(TransitHub, ShippingRoute.transit_hub_id == TransitHub.id)
            .all()
        )
        if not rows:
            return []

        route_ids = [route.id for route, _, _ in rows]
        segments_by_route: dict[UUID, list[RouteSegment]] = {}
        for cost in (
            self.db.query(RouteLogisticsCost)
            .filter(RouteLogisticsCost.shipping_route_id.in_(route_ids))
            .order_by(RouteLogisticsCost.created_at)
            .all()
        ):
            segments_by_route.setdefault(cost.shipping_route_id, []).append(
                RouteSegment(
                    id=cost.id,
                    segment=cost.segment,
                    cost_per_kg=to_decimal(cost.cost_per_kg),
                    cost_per_cbm=to_decimal(cost.cost_per_cbm),
                    min_cost=to_decimal(cost.min_cost),
                    estimated_days_min=cost.estimated_days_min or 0,
                    estimated_days_max=cost.estimated_days_max or 0,
                    is_active=bool(cost.is_active),
                    notes=cost.notes,
                )
            )

        return [
            RouteInfo(
                id=route.id,
                country_name=country.name,
                country_code=country.code,
                is_direct=bool(route.is_direct),
                is_active=bool(route.is_active),
                hub_name=hub.name if hub else None,
                hub_code=hub.code if hub else None,
                segments=segments_by_route.get(route.id, []),
            )
            for route, country, hub in rows
        ]

    def get_route(self, route_id: UUID) -> RouteInfo:
        for route in self.get_routes():
            if route.id == route_id:
                return route
        raise NotFoundError("shipping route", route_id)

    # --- Shipping rates ---

    def get_shipping_rates(self) -> dict[str, Decimal]:
        return {row.key: to_decimal(row.value) for row in self.db.query(ShippingRateSetting).all()}

    def get_commune_rates(self, commune_id: UUID | None) -> CommuneRates | None:
        if not commune_id:
            return None
        row = self.db.get(Commune, commune_id)
        if row is None:
            raise NotFoundError("commune", commune_id)
        return CommuneRates.from_model(row)


class OrdersRepository:
    """B2B orders and user notifications."""

    def __init__(self, db: Session):
        self.db = db

    def get_expired_pending_orders(self, now: datetime) -> list[OrderB2B]:
        """Pending orders whose stock reservation has run out."""
        return (
            self.db.query(OrderB2B)
            .filter(
                OrderB2B.payment_status == PaymentStatus.PENDING.value,
                OrderB2B.reservation_expires_at.isnot(None),
                OrderB2B.reservation_expires_at < now,
            )
            .order_by(OrderB2B.reservation_expires_at)
            .all()
        )

    def expire_order(self, order: OrderB2B) -> OrderB2B:
        order.payment_status = PaymentStatus.EXPIRED.value
        order.status = PaymentStatus.EXPIRED.value
        order.stock_reserved = False
        order.updated_at = utcnow()
        self.db.flush()
        return order

    def create_notification(
        self,
        user_id: UUID,
        notification_type: str,
        title: str,
        message: str,
        data: dict | None = None,
    ) -> Notification:
        notification = Notification(
            user_id=user_id,
            type=notification_type,
            title=title,
            message=message,
            data=data or {},
        )
        self.db.add(notification)
        self.db.flush()
        return notification

    def mark_whatsapp_sent(self, notification_id: UUID) -> bool:
        return self._mark_sent(notification_id, is_whatsapp_sent=True)

    def mark_email_sent(self, notification_id: UUID) -> bool:
        return self._mark_sent(notification_id, is_email_sent=True)

    def _mark_sent(self, notification_id: UUID, **flags: bool) -> bool:
        """Set delivery flags on a notification. An unknown id updates nothing."""
        updated = (
            self.db.query(Notification)
            .filter(Notification.id == notification_id)
            .update(flags, synchronize_session="evaluate")
        )
        self.db.flush()
        return updated > 0


class TrackingRepository:
    """Catalog click tracking."""

    def __init__(self, db: Session):
        self.db = db

    def record_click(
        self,
        seller_id: UUID,
        device_type: str,
        source_type: str,
        product_id: UUID | None = None,
        variant_id: UUID | None = None,
        source_campaign: str | None = None,
        user_agent: str | None = None,
        ip_hash: str | None = None,
    ) -> CatalogClickTracking:
        click = CatalogClickTracking(
            seller_id=seller_id,
            product_id=product_id,
            variant_id=variant_id,
            source_type=source_type,
            source_campaign=source_campaign,
            device_type=device_type,
            user_agent=user_agent,
            ip_hash=ip_hash,
        )
        self.db.add(click)
        self.db.flush()
        return click

    def count_clicks(self, seller_id: UUID) -> int:
        return self.db.query(CatalogClickTracking).filter(CatalogClickTracking.seller_id == seller_id).count()
