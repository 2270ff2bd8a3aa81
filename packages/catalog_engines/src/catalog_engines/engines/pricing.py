"""
B2B Price Engine

Computes wholesale prices with the protection rule:

1. Apply the margin to the factory cost (base cost).
2. THEN add logistics, category fees and other expenses.

Logistics never eats into the margin because the margin is computed before
it is added: final = base * (1 + margin%) + logistics + fees + expenses.
"""

import logging
from dataclasses import asdict, dataclass
from decimal import Decimal
from typing import Any, Iterable

from catalog_engines.engines.money import (
    HUNDRED,
    ZERO,
    percent_of,
    round_money,
    round_tenths,
    to_decimal,
)
from catalog_engines.engines.routes import (
    ORIGIN_NAME,
    DaysRange,
    RouteInfo,
    calculate_route_cost,
    find_route_for_destination,
    route_summary,
)

logger = logging.getLogger(__name__)

DEFAULT_MARGIN_PERCENT = Decimal("30")
DEFAULT_WEIGHT_KG = Decimal("0.5")
SUGGESTED_PVP_MULTIPLIER = Decimal("1.3")


@dataclass
class MarginRange:
    """Margin applied to factory costs in [min_cost, max_cost)."""

    min_cost: Decimal
    max_cost: Decimal | None
    margin_percent: Decimal
    is_active: bool = True
    sort_order: int = 0
    description: str | None = None
    id: Any = None

    @classmethod
    def from_model(cls, row: Any) -> "MarginRange":
        return cls(
            id=row.id,
            min_cost=to_decimal(row.min_cost),
            max_cost=to_decimal(row.max_cost) if row.max_cost is not None else None,
            margin_percent=to_decimal(row.margin_percent),
            is_active=bool(row.is_active),
            sort_order=row.sort_order or 0,
            description=row.description,
        )

    def applies_to(self, cost: Decimal) -> bool:
        if not self.is_active or cost < self.min_cost:
            return False
        return self.max_cost is None or cost < self.max_cost


@dataclass
class CategoryRate:
    category_id: Any
    fixed_fee: Decimal = ZERO
    percentage_fee: Decimal = ZERO

    @classmethod
    def from_model(cls, row: Any) -> "CategoryRate":
        return cls(
            category_id=row.category_id,
            fixed_fee=to_decimal(row.fixed_fee),
            percentage_fee=to_decimal(row.percentage_fee),
        )


@dataclass
class B2BPriceResult:
    base_cost: Decimal
    margin_range: MarginRange | None
    margin_percent: Decimal
    margin_value: Decimal
    subtotal_with_margin: Decimal  # Base + margin, BEFORE logistics
    logistics_cost: Decimal
    category_fees: Decimal
    additional_expenses: Decimal
    final_b2b_price: Decimal

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class ProductForCalculation:
    id: Any
    factory_cost: Decimal  # precio_mayorista
    category_id: Any = None
    weight_kg: Decimal | None = None


@dataclass
class ProductLogisticsInfo:
    route_id: Any
    route_name: str
    logistics_cost: Decimal
    estimated_days: DaysRange
    origin_country: str
    destination_country: str


@dataclass
class B2BCalculatedPrice:
    factory_cost: Decimal
    margin_range: MarginRange | None
    margin_percent: Decimal
    margin_value: Decimal
    subtotal_with_margin: Decimal
    logistics: ProductLogisticsInfo | None
    logistics_cost: Decimal
    category_fees: Decimal
    final_b2b_price: Decimal
    suggested_pvp: Decimal
    profit_amount: Decimal
    roi_percent: Decimal

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def find_margin_range_for_cost(
    base_cost: Decimal,
    ranges: Iterable[MarginRange],
) -> MarginRange | None:
    """
    Find the margin range for a factory cost.

    Ranges are checked in the order given (callers pass them sorted by
    sort_order); the first active range containing the cost wins.
    """
    cost = to_decimal(base_cost)
    for margin_range in ranges:
        if margin_range.applies_to(cost):
            return margin_range
    return None


def calculate_b2b_price(
    base_cost: Decimal,
    logistics_cost: Decimal,
    ranges: Iterable[MarginRange],
    category_fees: Decimal = ZERO,
    additional_expenses: Decimal = ZERO,
    default_margin_percent: Decimal = DEFAULT_MARGIN_PERCENT,
) -> B2BPriceResult:
    """Price a product from its factory cost using the protection rule."""
    base_cost = to_decimal(base_cost)
    logistics_cost = to_decimal(logistics_cost)
    category_fees = to_decimal(category_fees)
    additional_expenses = to_decimal(additional_expenses)

    margin_range = find_margin_range_for_cost(base_cost, ranges)
    margin_percent = margin_range.margin_percent if margin_range else to_decimal(default_margin_percent)

    margin_value = percent_of(base_cost, margin_percent)
    subtotal_with_margin = base_cost + margin_value
    final_b2b_price = subtotal_with_margin + logistics_cost + category_fees + additional_expenses

    return B2BPriceResult(
        base_cost=base_cost,
        margin_range=margin_range,
        margin_percent=margin_percent,
        margin_value=round_money(margin_value),
        subtotal_with_margin=round_money(subtotal_with_margin),
        logistics_cost=logistics_cost,
        category_fees=category_fees,
        additional_expenses=additional_expenses,
        final_b2b_price=round_money(final_b2b_price),
    )


def calculate_category_fees(
    category_id: Any,
    base_cost: Decimal,
    rates: Iterable[CategoryRate],
) -> Decimal:
    """Fixed fee plus a percentage of the base cost, for the product's category."""
    if not category_id:
        return ZERO

    rate = next((r for r in rates if r.category_id == category_id), None)
    if rate is None:
        return ZERO

    return round_money(rate.fixed_fee + percent_of(base_cost, rate.percentage_fee))


class B2BPriceCalculator:
    """
    Prices products for a destination market.

    Combines margin ranges, the route to the destination and category fees.
    Loaded once with the reference data, then used for any number of
    products.
    """

    def __init__(
        self,
        margin_ranges: list[MarginRange],
        routes: list[RouteInfo],
        category_rates: list[CategoryRate],
        destination_code: str | None = None,
        default_margin_percent: Decimal = DEFAULT_MARGIN_PERCENT,
        default_weight_kg: Decimal = DEFAULT_WEIGHT_KG,
        pvp_multiplier: Decimal = SUGGESTED_PVP_MULTIPLIER,
    ):
        self.margin_ranges = margin_ranges
        self.routes = routes
        self.category_rates = category_rates
        self.destination_code = destination_code
        self.default_margin_percent = to_decimal(default_margin_percent)
        self.default_weight_kg = to_decimal(default_weight_kg)
        self.pvp_multiplier = to_decimal(pvp_multiplier)

    def find_route_for_destination(self, destination_code: str | None) -> RouteInfo | None:
        return find_route_for_destination(self.routes, destination_code)

    def get_category_fees(self, category_id: Any, base_cost: Decimal) -> Decimal:
        return calculate_category_fees(category_id, base_cost, self.category_rates)

    def calculate_logistics(
        self,
        route: RouteInfo | None,
        weight_kg: Decimal | None = None,
    ) -> ProductLogisticsInfo | None:
        """Logistics cost and transit time of one unit over a route."""
        if route is None:
            return None

        weight = to_decimal(weight_kg) if weight_kg else self.default_weight_kg
        cost = calculate_route_cost(route, weight)
        summary = route_summary(route)

        return ProductLogisticsInfo(
            route_id=route.id,
            route_name=summary.name,
            logistics_cost=round_money(cost.cost),
            estimated_days=cost.days,
            origin_country=ORIGIN_NAME,
            destination_country=route.country_name,
        )

    def calculate_product_price(
        self,
        product: ProductForCalculation,
        destination_code: str | None = None,
    ) -> B2BCalculatedPrice:
        """
        Calculate the B2B price of one product.

        1. Margin range for the factory cost (default margin if none)
        2. Margin on the factory cost
        3. Logistics over the destination route
        4. Category fees
        5. Final price, then suggested retail price, profit and ROI
        """
        factory_cost = to_decimal(product.factory_cost)

        margin_range = find_margin_range_for_cost(factory_cost, self.margin_ranges)
        margin_percent = margin_range.margin_percent if margin_range else self.default_margin_percent

        margin_value = percent_of(factory_cost, margin_percent)
        subtotal_with_margin = factory_cost + margin_value

        route = self.find_route_for_destination(destination_code or self.destination_code)
        logistics = self.calculate_logistics(route, product.weight_kg)
        logistics_cost = logistics.logistics_cost if logistics else ZERO

        category_fees = self.get_category_fees(product.category_id, factory_cost)

        final_b2b_price = round_money(subtotal_with_margin + logistics_cost + category_fees)

        suggested_pvp = round_money(final_b2b_price * self.pvp_multiplier)
        profit_amount = round_money(suggested_pvp - final_b2b_price)
        if final_b2b_price > 0:
            roi_percent = round_tenths(profit_amount / final_b2b_price * HUNDRED)
        else:
            roi_percent = ZERO

        return B2BCalculatedPrice(
            factory_cost=factory_cost,
            margin_range=margin_range,
            margin_percent=margin_percent,
            margin_value=round_money(margin_value),
            subtotal_with_margin=round_money(subtotal_with_margin),
            logistics=logistics,
            logistics_cost=logistics_cost,
            category_fees=category_fees,
            final_b2b_price=final_b2b_price,
            suggested_pvp=suggested_pvp,
            profit_amount=profit_amount,
            roi_percent=roi_percent,
        )

    def calculate_batch_prices(
        self,
        products: Iterable[ProductForCalculation],
        destination_code: str | None = None,
    ) -> dict[Any, B2BCalculatedPrice]:
        """Calculate prices for many products, keyed by product id."""
        results = {}
        for product in products:
            results[product.id] = self.calculate_product_price(product, destination_code)

        logger.debug(
            "Calculated batch B2B prices",
            extra={"products": len(results), "destination": destination_code or self.destination_code},
        )
        return results
