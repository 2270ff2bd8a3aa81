"""
Integration tests for the normalization and pricing endpoints.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from catalog_engines.persistence import models


@pytest.fixture
def flat_products(seed):
    return seed(
        models.Product(sku_interno="1005-3-4t-110-champagne", nombre="Vestido - Color Champagne", precio_mayorista=Decimal("10"), stock_fisico=4),
        models.Product(sku_interno="1005-dh0715a-rosa-8y", nombre="Vestido - Color Rosa", precio_mayorista=Decimal("10"), stock_fisico=6),
    )


@pytest.fixture
def margin_ranges(seed):
    return seed(
        models.B2BMarginRange(min_cost=Decimal("0"), max_cost=Decimal("10"), margin_percent=Decimal("50"), sort_order=1),
        models.B2BMarginRange(min_cost=Decimal("10"), max_cost=Decimal("50"), margin_percent=Decimal("30"), sort_order=2),
        models.B2BMarginRange(min_cost=Decimal("50"), max_cost=None, margin_percent=Decimal("20"), sort_order=3),
    )


@pytest.fixture
def haiti_route(seed):
    country, hub = seed(
        models.DestinationCountry(code="HT", name="Haití"),
        models.TransitHub(code="MIA", name="Miami"),
    )
    (route,) = seed(models.ShippingRoute(destination_country_id=country.id, transit_hub_id=hub.id))
    now = datetime.now(timezone.utc)
    seed(
        models.RouteLogisticsCost(
            shipping_route_id=route.id,
            segment="china_to_hub",
            cost_per_kg=Decimal("6"),
            min_cost=Decimal("2"),
            estimated_days_min=7,
            estimated_days_max=12,
            created_at=now - timedelta(minutes=1),
        ),
        models.RouteLogisticsCost(
            shipping_route_id=route.id,
            segment="hub_to_destination",
            cost_per_kg=Decimal("4"),
            min_cost=Decimal("3"),
            estimated_days_min=3,
            estimated_days_max=5,
            created_at=now,
        ),
    )
    return route


class TestHealth:
    def test_root(self, client):
        assert client.get("/").json() == {"message": "Marketplace API", "version": "1.0.0"}

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}


class TestNormalizeProducts:
    """Tests for POST /api/v1/normalize-products."""

    def test_preview(self, client, flat_products):
        response = client.post("/api/v1/normalize-products", json={"action": "preview"})

        assert response.status_code == 200
        body = response.json()
        assert body["total_products"] == 2
        assert body["details"][0]["colors_found"] == ["champagne", "rosa"]

    def test_migrate_dry_run_by_default(self, client, flat_products, attributes, query):
        response = client.post("/api/v1/normalize-products", json={"action": "migrate"})

        assert response.status_code == 200
        assert response.json()["dry_run"] is True
        assert query(lambda db: db.query(models.ProductVariant).count()) == 0

    def test_migrate_apply(self, client, flat_products, attributes, query):
        response = client.post("/api/v1/normalize-products", json={"action": "migrate", "dryRun": False})

        body = response.json()
        assert response.status_code == 200
        assert body["parent_products_created"] == 1
        assert body["variants_created"] == 2
        assert body["errors"] == []
        assert query(lambda db: db.query(models.ProductVariant).count()) == 2

    @pytest.mark.parametrize("payload", [{"action": "delete"}, {}])
    def test_invalid_action(self, client, payload):
        response = client.post("/api/v1/normalize-products", json=payload)

        assert response.status_code == 400
        assert response.json() == {"error": 'Invalid action. Use "preview" or "migrate".'}


class TestMarginRanges:
    """Tests for margin range administration."""

    def test_create_and_list(self, client):
        response = client.post(
            "/api/v1/pricing/margin-ranges",
            json={"min_cost": "0", "max_cost": "10", "margin_percent": "50", "description": "Small"},
        )

        assert response.status_code == 201
        created = response.json()
        assert created["margin_percent"] == 50
        assert created["description"] == "Small"

        listed = client.get("/api/v1/pricing/margin-ranges").json()
        assert [r["id"] for r in listed] == [created["id"]]

    def test_create_rejects_inverted_bounds(self, client):
        response = client.post(
            "/api/v1/pricing/margin-ranges",
            json={"min_cost": "10", "max_cost": "5", "margin_percent": "30"},
        )
        assert response.status_code == 422

    def test_update_toggle_delete(self, client, margin_ranges):
        range_id = str(margin_ranges[0].id)

        updated = client.patch(f"/api/v1/pricing/margin-ranges/{range_id}", json={"margin_percent": "45"})
        assert updated.status_code == 200
        assert updated.json()["margin_percent"] == 45

        toggled = client.post(f"/api/v1/pricing/margin-ranges/{range_id}/toggle", json={"is_active": False})
        assert toggled.json()["is_active"] is False
        active = client.get("/api/v1/pricing/margin-ranges", params={"active_only": True}).json()
        assert range_id not in [r["id"] for r in active]

        deleted = client.delete(f"/api/v1/pricing/margin-ranges/{range_id}")
        assert deleted.status_code == 204
        assert len(client.get("/api/v1/pricing/margin-ranges").json()) == 2

    def test_update_rejects_max_below_existing_min(self, client, margin_ranges):
        response = client.patch(f"/api/v1/pricing/margin-ranges/{margin_ranges[1].id}", json={"max_cost": "5"})
        assert response.status_code == 422

    @pytest.mark.parametrize("field", ["margin_percent", "min_cost", "is_active", "sort_order"])
    def test_update_rejects_null_for_required_fields(self, client, margin_ranges, query, field):
        range_id = margin_ranges[0].id

        response = client.patch(f"/api/v1/pricing/margin-ranges/{range_id}", json={field: None})

        assert response.status_code == 422
        stored = query(lambda db: db.get(models.B2BMarginRange, range_id))
        assert stored.margin_percent == Decimal("50")
        assert stored.is_active is True

    def test_update_clears_upper_bound(self, client, margin_ranges):
        response = client.patch(
            f"/api/v1/pricing/margin-ranges/{margin_ranges[0].id}",
            json={"max_cost": None, "description": None},
        )

        assert response.status_code == 200
        assert response.json()["max_cost"] is None

    def test_unknown_range(self, client):
        response = client.patch(f"/api/v1/pricing/margin-ranges/{uuid4()}", json={"margin_percent": "10"})

        assert response.status_code == 404
        assert response.json()["success"] is False


class TestPriceCalculation:
    """Tests for price calculation and quotes."""

    def test_calculate(self, client, margin_ranges):
        response = client.post("/api/v1/pricing/calculate", json={"base_cost": "10", "logistics_cost": "5"})

        body = response.json()
        assert body["margin_percent"] == 30
        assert body["final_b2b_price"] == 18.0

    def test_calculate_default_margin(self, client):
        response = client.post("/api/v1/pricing/calculate", json={"base_cost": "100"})

        body = response.json()
        assert body["margin_range"] is None
        assert body["final_b2b_price"] == 130.0

    def test_quote(self, client, seed, margin_ranges, haiti_route):
        category_id = uuid4()
        (product,) = seed(
            models.Product(sku_interno="1005", nombre="Vestido", precio_mayorista=Decimal("10"), categoria_id=category_id)
        )
        seed(models.CategoryShippingRate(category_id=category_id, fixed_fee=Decimal("1"), percentage_fee=Decimal("0")))

        response = client.post(
            "/api/v1/pricing/quote",
            json={"product_ids": [str(product.id)], "destination_code": "ht"},
        )

        assert response.status_code == 200
        price = response.json()[str(product.id)]
        assert price["logistics_cost"] == 6.0
        assert price["category_fees"] == 1.0
        assert price["final_b2b_price"] == 20.0
        assert price["suggested_pvp"] == 26.0
        assert price["roi_percent"] == 30.0
        assert price["logistics"]["route_name"] == "China → Miami → Haití"
        assert price["logistics"]["estimated_days"] == {"min": 10, "max": 17}

    def test_quote_requires_products(self, client):
        assert client.post("/api/v1/pricing/quote", json={"product_ids": []}).status_code == 422
