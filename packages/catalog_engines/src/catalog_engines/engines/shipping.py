"""
Shipment cost calculation and hybrid tracking ids.

A shipment travels China -> USA (charged per kg from the global rates) and
USA -> destination commune (charged per lb by the commune), plus category,
commune and insurance fees on top of the reference price.
"""

from dataclasses import asdict, dataclass
from decimal import Decimal
from typing import Any

from catalog_engines.engines.money import ZERO, percent_of, to_decimal
from catalog_engines.engines.pricing import CategoryRate

GRAMS_PER_KG = Decimal("1000")
LB_PER_GRAM = Decimal("0.00220462")

RATE_CHINA_USA_PER_KG = "china_usa_rate_per_kg"
RATE_INSURANCE_PERCENT = "default_insurance_percent"


@dataclass
class CommuneRates:
    rate_per_lb: Decimal = ZERO
    extra_department_fee: Decimal = ZERO
    delivery_fee: Decimal = ZERO
    operational_fee: Decimal = ZERO

    @classmethod
    def from_model(cls, row: Any) -> "CommuneRates":
        return cls(
            rate_per_lb=to_decimal(row.rate_per_lb),
            extra_department_fee=to_decimal(row.extra_department_fee),
            delivery_fee=to_decimal(row.delivery_fee),
            operational_fee=to_decimal(row.operational_fee),
        )


@dataclass
class ShippingCalculation:
    weight_grams: Decimal
    weight_kg: Decimal
    weight_lb: Decimal
    china_usa_cost: Decimal
    usa_destination_cost: Decimal
    category_fixed_fee: Decimal
    category_percentage_fee: Decimal
    extra_department_fee: Decimal
    delivery_fee: Decimal
    operational_fee: Decimal
    insurance_cost: Decimal
    total_shipping_cost: Decimal
    final_price: Decimal

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def get_rate_value(rates: dict[str, Decimal] | None, key: str) -> Decimal:
    if not rates:
        return ZERO
    return to_decimal(rates.get(key))


def calculate_shipping(
    weight_grams: Decimal,
    reference_price: Decimal,
    rates: dict[str, Decimal] | None = None,
    commune: CommuneRates | None = None,
    category_rate: CategoryRate | None = None,
) -> ShippingCalculation:
    """
    Calculate the landed shipping cost of a parcel.

    Amounts are not rounded; callers round for display.
    """
    weight_grams = to_decimal(weight_grams)
    reference_price = to_decimal(reference_price)

    weight_kg = weight_grams / GRAMS_PER_KG
    weight_lb = weight_grams * LB_PER_GRAM

    china_usa_cost = weight_kg * get_rate_value(rates, RATE_CHINA_USA_PER_KG)
    usa_destination_cost = weight_lb * commune.rate_per_lb if commune else ZERO

    fixed_fee = category_rate.fixed_fee if category_rate else ZERO
    percentage_fee = percent_of(reference_price, category_rate.percentage_fee) if category_rate else ZERO

    extra_department_fee = commune.extra_department_fee if commune else ZERO
    delivery_fee = commune.delivery_fee if commune else ZERO
    operational_fee = commune.operational_fee if commune else ZERO

    insurance_cost = percent_of(reference_price, get_rate_value(rates, RATE_INSURANCE_PERCENT))

    total_shipping_cost = (
        china_usa_cost
        + usa_destination_cost
        + fixed_fee
        + percentage_fee
        + extra_department_fee
        + delivery_fee
        + operational_fee
        + insurance_cost
    )

    return ShippingCalculation(
        weight_grams=weight_grams,
        weight_kg=weight_kg,
        weight_lb=weight_lb,
        china_usa_cost=china_usa_cost,
        usa_destination_cost=usa_destination_cost,
        category_fixed_fee=fixed_fee,
        category_percentage_fee=percentage_fee,
        extra_department_fee=extra_department_fee,
        delivery_fee=delivery_fee,
        operational_fee=operational_fee,
        insurance_cost=insurance_cost,
        total_shipping_cost=total_shipping_cost,
        final_price=reference_price + total_shipping_cost,
    )


def generate_hybrid_tracking_id(
    department_code: str,
    commune_code: str,
    point_code: str | None,
    unit_count: int,
    china_tracking: str,
) -> str:
    """
    Build a tracking id that encodes the delivery zone.

    Format: DEPT-COMMUNE-POINT-NN-CHINATRACKING, e.g. OU-PAP-XX-03-YT123.
    """
    point = (point_code or "XX").upper()
    units = str(unit_count).zfill(2)
    return f"{department_code.upper()}-{commune_code.upper()}-{point}-{units}-{china_tracking}"
