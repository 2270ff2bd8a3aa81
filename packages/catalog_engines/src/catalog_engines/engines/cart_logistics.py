"""
Cart Logistics Engine

Prices every line of a B2B cart (margin on factory cost, route logistics,
category fees) and aggregates totals and the delivery window for the whole
cart.
"""

from dataclasses import asdict, dataclass, field
from decimal import Decimal
from typing import Any, Iterable

from catalog_engines.engines.money import ZERO, percent_of, round_money, to_decimal
from catalog_engines.engines.pricing import (
    DEFAULT_MARGIN_PERCENT,
    DEFAULT_WEIGHT_KG,
    CategoryRate,
    MarginRange,
    calculate_category_fees,
    find_margin_range_for_cost,
)
from catalog_engines.engines.routes import (
    DaysRange,
    RouteInfo,
    calculate_route_cost,
    route_summary,
)

# Delivery window shown when no route (or no item) gives one
DEFAULT_DELIVERY_DAYS = DaysRange(min=7, max=21)
DEFAULT_ROUTE_NAME = "Ruta estándar"


@dataclass
class CartItem:
    id: Any
    product_id: Any
    quantity: int
    unit_price_b2b: Decimal = ZERO  # Used as factory cost if the product is unknown


@dataclass
class ProductCostInfo:
    id: Any
    factory_cost: Decimal | None
    category_id: Any = None
    weight_kg: Decimal | None = None


@dataclass
class CartItemLogistics:
    item_id: Any
    product_id: Any
    factory_cost: Decimal
    margin_percent: Decimal
    margin_value: Decimal
    subtotal_with_margin: Decimal
    logistics_cost: Decimal
    category_fees: Decimal
    final_unit_price: Decimal
    final_total_price: Decimal
    estimated_days: DaysRange
    route_name: str


@dataclass
class CartLogisticsSummary:
    items_logistics: dict[Any, CartItemLogistics] = field(default_factory=dict)
    total_factory_cost: Decimal = ZERO
    total_margin_value: Decimal = ZERO
    total_logistics_cost: Decimal = ZERO
    total_category_fees: Decimal = ZERO
    total_final_price: Decimal = ZERO
    estimated_delivery_days: DaysRange = field(default_factory=lambda: DaysRange(7, 21))
    route_name: str = DEFAULT_ROUTE_NAME
    items_count: int = 0
    total_quantity: int = 0

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["items_logistics"] = list(data["items_logistics"].values())
        return data


def calculate_cart_logistics(
    items: Iterable[CartItem],
    products: Iterable[ProductCostInfo],
    margin_ranges: list[MarginRange],
    category_rates: list[CategoryRate],
    route: RouteInfo | None,
    default_margin_percent: Decimal = DEFAULT_MARGIN_PERCENT,
    default_weight_kg: Decimal = DEFAULT_WEIGHT_KG,
) -> CartLogisticsSummary:
    """
    Calculate per-item prices and cart totals.

    Per-item amounts are unit values; the totals multiply them by quantity.
    The cart delivery window is the slowest item's window.
    """
    items = list(items)
    products_by_id = {p.id: p for p in products}
    summary = CartLogisticsSummary(items_count=len(items))

    if route is not None:
        summary.route_name = route_summary(route).name

    total_factory_cost = ZERO
    total_margin_value = ZERO
    total_logistics_cost = ZERO
    total_category_fees = ZERO
    total_final_price = ZERO
    max_days_min = 0
    max_days_max = 0

    for item in items:
        product = products_by_id.get(item.product_id)
        quantity = Decimal(item.quantity)

        if product is not None and product.factory_cost:
            factory_cost = to_decimal(product.factory_cost)
        else:
            factory_cost = to_decimal(item.unit_price_b2b)
        weight = to_decimal(product.weight_kg) if product and product.weight_kg else to_decimal(default_weight_kg)
        category_id = product.category_id if product else None

        # 1. Margin on factory cost
        margin_range = find_margin_range_for_cost(factory_cost, margin_ranges)
        margin_percent = margin_range.margin_percent if margin_range else to_decimal(default_margin_percent)
        margin_value = percent_of(factory_cost, margin_percent)
        subtotal_with_margin = factory_cost + margin_value

        # 2. Logistics per unit
        logistics_cost = ZERO
        estimated_days = DaysRange(DEFAULT_DELIVERY_DAYS.min, DEFAULT_DELIVERY_DAYS.max)
        if route is not None:
            cost = calculate_route_cost(route, weight)
            logistics_cost = round_money(cost.cost)
            estimated_days = cost.days

        # 3. Category fees
        category_fees = calculate_category_fees(category_id, factory_cost, category_rates)

        # 4. Final prices
        final_unit_price = round_money(subtotal_with_margin + logistics_cost + category_fees)
        final_total_price = round_money(final_unit_price * quantity)

        summary.items_logistics[item.id] = CartItemLogistics(
            item_id=item.id,
            product_id=item.product_id,
            factory_cost=factory_cost,
            margin_percent=margin_percent,
            margin_value=round_money(margin_value),
            subtotal_with_margin=round_money(subtotal_with_margin),
            logistics_cost=logistics_cost,
            category_fees=category_fees,
            final_unit_price=final_unit_price,
            final_total_price=final_total_price,
            estimated_days=estimated_days,
            route_name=summary.route_name,
        )

        total_factory_cost += factory_cost * quantity
        total_margin_value += margin_value * quantity
        total_logistics_cost += logistics_cost * quantity
        total_category_fees += category_fees * quantity
        total_final_price += final_total_price
        summary.total_quantity += item.quantity

        max_days_min = max(max_days_min, estimated_days.min)
        max_days_max = max(max_days_max, estimated_days.max)

    summary.total_factory_cost = round_money(total_factory_cost)
    summary.total_margin_value = round_money(total_margin_value)
    summary.total_logistics_cost = round_money(total_logistics_cost)
    summary.total_category_fees = round_money(total_category_fees)
    summary.total_final_price = round_money(total_final_price)
    summary.estimated_delivery_days = DaysRange(
        min=max_days_min or DEFAULT_DELIVERY_DAYS.min,
        max=max_days_max or DEFAULT_DELIVERY_DAYS.max,
    )

    return summary
