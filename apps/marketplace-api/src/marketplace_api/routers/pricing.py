"""B2B pricing endpoints: margin range administration and price quotes."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from basecore.db import get_db
from basecore.settings import Settings
from catalog_engines.engines.pricing import B2BPriceCalculator, MarginRange, calculate_b2b_price
from catalog_engines.persistence.repo import CatalogRepository, PricingRepository
from marketplace_api.deps import get_app_settings
from marketplace_api.schemas import (
    MarginRangeCreate,
    MarginRangeToggle,
    MarginRangeUpdate,
    PriceCalculationRequest,
    PriceQuoteRequest,
)

pricing_router = APIRouter(prefix="/pricing", tags=["pricing"])


def _validate_bounds(min_cost, max_cost):
    if min_cost is not None and max_cost is not None and max_cost <= min_cost:
        raise HTTPException(status_code=422, detail="max_cost must be greater than min_cost")


@pricing_router.get("/margin-ranges")
def list_margin_ranges(active_only: bool = False, db: Session = Depends(get_db)):
    repo = PricingRepository(db)
    return [MarginRange.from_model(row) for row in repo.list_margin_ranges(active_only=active_only)]


@pricing_router.post("/margin-ranges", status_code=201)
def create_margin_range(body: MarginRangeCreate, db: Session = Depends(get_db)):
    _validate_bounds(body.min_cost, body.max_cost)
    row = PricingRepository(db).create_margin_range(**body.model_dump())
    db.commit()
    return MarginRange.from_model(row)


@pricing_router.patch("/margin-ranges/{range_id}")
def update_margin_range(range_id: UUID, body: MarginRangeUpdate, db: Session = Depends(get_db)):
    repo = PricingRepository(db)
    fields = body.model_dump(exclude_unset=True)

    current = repo.get_margin_range(range_id)
    _validate_bounds(
        fields.get("min_cost", current.min_cost),
        fields.get("max_cost", current.max_cost),
    )

    row = repo.update_margin_range(range_id, **fields)
    db.commit()
    return MarginRange.from_model(row)


@pricing_router.post("/margin-ranges/{range_id}/toggle")
def toggle_margin_range(range_id: UUID, body: MarginRangeToggle, db: Session = Depends(get_db)):
    row = PricingRepository(db).toggle_margin_range(range_id, body.is_active)
    db.commit()
    return MarginRange.from_model(row)


@pricing_router.delete("/margin-ranges/{range_id}", status_code=204)
def delete_margin_range(range_id: UUID, db: Session = Depends(get_db)):
    PricingRepository(db).delete_margin_range(range_id)
    db.commit()


@pricing_router.post("/calculate")
def calculate_price(
    body: PriceCalculationRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Price a bare factory cost with the active margin ranges."""
    result = calculate_b2b_price(
        base_cost=body.base_cost,
        logistics_cost=body.logistics_cost,
        ranges=PricingRepository(db).get_margin_ranges(),
        category_fees=body.category_fees,
        additional_expenses=body.additional_expenses,
        default_margin_percent=settings.DEFAULT_MARGIN_PERCENT,
    )
    return result.to_dict()


@pricing_router.post("/quote")
def quote_prices(
    body: PriceQuoteRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """B2B prices for catalog products, keyed by product id."""
    products = CatalogRepository(db).get_products_for_calculation(body.product_ids)
    pricing = PricingRepository(db)

    calculator = B2BPriceCalculator(
        margin_ranges=pricing.get_margin_ranges(),
        routes=pricing.get_routes(),
        category_rates=pricing.get_category_rates(),
        destination_code=body.destination_code or settings.DEFAULT_DESTINATION_CODE,
        default_margin_percent=settings.DEFAULT_MARGIN_PERCENT,
        default_weight_kg=settings.DEFAULT_WEIGHT_KG,
        pvp_multiplier=settings.SUGGESTED_PVP_MULTIPLIER,
    )
    prices = calculator.calculate_batch_prices(products)

    return {str(product_id): price.to_dict() for product_id, price in prices.items()}
