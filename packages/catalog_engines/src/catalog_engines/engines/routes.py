"""
Route Pricing

A shipping route is a chain of segments (origin -> hub -> destination, or
direct). Each active segment charges max(cost_per_kg * weight, min_cost)
and adds its transit days.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from catalog_engines.engines.money import ZERO, to_decimal

ORIGIN_NAME = "China"


@dataclass
class RouteSegment:
    segment: str
    cost_per_kg: Decimal = ZERO
    cost_per_cbm: Decimal = ZERO
    min_cost: Decimal = ZERO
    estimated_days_min: int = 0
    estimated_days_max: int = 0
    is_active: bool = True
    id: Any = None
    notes: str | None = None


@dataclass
class RouteInfo:
    id: Any
    country_name: str
    country_code: str
    is_direct: bool
    is_active: bool = True
    hub_name: str | None = None
    hub_code: str | None = None
    segments: list[RouteSegment] = field(default_factory=list)

    @property
    def active_segments(self) -> list[RouteSegment]:
        return [s for s in self.segments if s.is_active]


@dataclass
class DaysRange:
    min: int
    max: int

    def to_dict(self) -> dict[str, int]:
        return {"min": self.min, "max": self.max}


@dataclass
class RouteCost:
    cost: Decimal
    days: DaysRange


@dataclass
class RouteSummary:
    name: str
    segments: int
    days_range: str
    cost_per_kg: Decimal
    is_active: bool


def calculate_route_cost(route: RouteInfo | None, weight_kg: Decimal) -> RouteCost:
    """Total cost and transit days of a route for a given weight."""
    if route is None:
        return RouteCost(cost=ZERO, days=DaysRange(0, 0))

    weight = to_decimal(weight_kg)
    total_cost = ZERO
    days_min = 0
    days_max = 0

    for segment in route.active_segments:
        total_cost += max(to_decimal(segment.cost_per_kg) * weight, to_decimal(segment.min_cost))
        days_min += segment.estimated_days_min
        days_max += segment.estimated_days_max

    return RouteCost(cost=total_cost, days=DaysRange(days_min, days_max))


def route_display_name(route: RouteInfo) -> str:
    if route.is_direct:
        return f"{ORIGIN_NAME} → {route.country_name} (Directo)"
    return f"{ORIGIN_NAME} → {route.hub_name} → {route.country_name}"


def route_summary(route: RouteInfo) -> RouteSummary:
    segments = route.active_segments
    days_min = sum(s.estimated_days_min for s in segments)
    days_max = sum(s.estimated_days_max for s in segments)

    return RouteSummary(
        name=route_display_name(route),
        segments=len(segments),
        days_range=f"{days_min}-{days_max} días",
        cost_per_kg=sum((to_decimal(s.cost_per_kg) for s in segments), ZERO),
        is_active=route.is_active,
    )


def find_route_for_destination(routes: list[RouteInfo], destination_code: str | None) -> RouteInfo | None:
    """First active route whose destination country code matches (case-insensitive)."""
    if not destination_code:
        return None

    code = destination_code.upper()
    for route in routes:
        if route.is_active and (route.country_code or "").upper() == code:
            return route
    return None
