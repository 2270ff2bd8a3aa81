"""Routes, cart logistics and shipment cost endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from basecore.db import get_db
from basecore.settings import Settings
from catalog_engines.engines.cart_logistics import CartItem, ProductCostInfo, calculate_cart_logistics
from catalog_engines.engines.routes import find_route_for_destination, route_summary
from catalog_engines.engines.shipping import calculate_shipping, generate_hybrid_tracking_id
from catalog_engines.persistence.repo import CatalogRepository, PricingRepository
from marketplace_api.deps import get_app_settings
from marketplace_api.schemas import CartLogisticsRequest, ShippingQuoteRequest, TrackingIdRequest

logistics_router = APIRouter(prefix="/logistics", tags=["logistics"])


@logistics_router.get("/routes")
def list_routes(db: Session = Depends(get_db)):
    results = []
    for route in PricingRepository(db).get_routes():
        summary = route_summary(route)
        results.append(
            {
                "id": route.id,
                "country_code": route.country_code,
                "name": summary.name,
                "segments": summary.segments,
                "days_range": summary.days_range,
                "cost_per_kg": summary.cost_per_kg,
                "is_active": summary.is_active,
            }
        )
    return results


@logistics_router.post("/cart")
def cart_logistics(
    body: CartLogisticsRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Per-item B2B prices and totals for a cart."""
    pricing = PricingRepository(db)

    if body.route_id:
        route = pricing.get_route(body.route_id)
    else:
        route = find_route_for_destination(
            pricing.get_routes(),
            body.destination_code or settings.DEFAULT_DESTINATION_CODE,
        )

    products = CatalogRepository(db).get_products_for_calculation(item.product_id for item in body.items)

    summary = calculate_cart_logistics(
        items=[
            CartItem(
                id=item.id,
                product_id=item.product_id,
                quantity=item.quantity,
                unit_price_b2b=item.unit_price_b2b,
            )
            for item in body.items
        ],
        products=[
            ProductCostInfo(
                id=p.id,
                factory_cost=p.factory_cost,
                category_id=p.category_id,
                weight_kg=p.weight_kg,
            )
            for p in products
        ],
        margin_ranges=pricing.get_margin_ranges(),
        category_rates=pricing.get_category_rates(),
        route=route,
        default_margin_percent=settings.DEFAULT_MARGIN_PERCENT,
        default_weight_kg=settings.DEFAULT_WEIGHT_KG,
    )
    return summary.to_dict()


@logistics_router.post("/shipping-quote")
def shipping_quote(body: ShippingQuoteRequest, db: Session = Depends(get_db)):
    pricing = PricingRepository(db)
    result = calculate_shipping(
        weight_grams=body.weight_grams,
        reference_price=body.reference_price,
        rates=pricing.get_shipping_rates(),
        commune=pricing.get_commune_rates(body.commune_id),
        category_rate=pricing.get_category_rate(body.category_id),
    )
    return result.to_dict()


@logistics_router.post("/tracking-id")
def tracking_id(body: TrackingIdRequest):
    return {
        "tracking_id": generate_hybrid_tracking_id(
            body.department_code,
            body.commune_code,
            body.point_code,
            body.unit_count,
            body.china_tracking,
        )
    }
