"""
Integration tests for logistics, checkout and job endpoints.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from catalog_engines.persistence import models


@pytest.fixture
def route(seed):
    country, hub = seed(
        models.DestinationCountry(code="HT", name="Haití"),
        models.TransitHub(code="MIA", name="Miami"),
    )
    (shipping_route,) = seed(models.ShippingRoute(destination_country_id=country.id, transit_hub_id=hub.id))
    now = datetime.now(timezone.utc)
    seed(
        models.RouteLogisticsCost(
            shipping_route_id=shipping_route.id,
            segment="china_to_hub",
            cost_per_kg=Decimal("6"),
            min_cost=Decimal("2"),
            estimated_days_min=7,
            estimated_days_max=12,
            created_at=now - timedelta(minutes=1),
        ),
        models.RouteLogisticsCost(
            shipping_route_id=shipping_route.id,
            segment="hub_to_destination",
            cost_per_kg=Decimal("4"),
            min_cost=Decimal("3"),
            estimated_days_min=3,
            estimated_days_max=5,
            created_at=now,
        ),
    )
    return shipping_route


class TestRoutes:
    def test_list_routes(self, client, route):
        routes = client.get("/api/v1/logistics/routes").json()

        assert len(routes) == 1
        assert routes[0]["name"] == "China → Miami → Haití"
        assert routes[0]["days_range"] == "10-17 días"
        assert routes[0]["segments"] == 2


class TestCartLogistics:
    """Tests for POST /api/v1/logistics/cart."""

    @pytest.fixture
    def cart(self, seed):
        category_id = uuid4()
        (product,) = seed(
            models.Product(sku_interno="1005", nombre="Vestido", precio_mayorista=Decimal("10"), categoria_id=category_id),
        )
        seed(
            models.CategoryShippingRate(category_id=category_id, fixed_fee=Decimal("1")),
            models.B2BMarginRange(min_cost=Decimal("0"), max_cost=Decimal("10"), margin_percent=Decimal("50"), sort_order=1),
            models.B2BMarginRange(min_cost=Decimal("10"), max_cost=Decimal("50"), margin_percent=Decimal("30"), sort_order=2),
        )
        return {
            "items": [
                {"id": "i1", "product_id": str(product.id), "quantity": 2},
                {"id": "i2", "product_id": str(uuid4()), "quantity": 1, "unit_price_b2b": "5"},
            ]
        }

    def test_totals_for_default_destination(self, client, route, cart):
        response = client.post("/api/v1/logistics/cart", json=cart)

        body = response.json()
        assert response.status_code == 200
        assert body["total_factory_cost"] == 25.0
        assert body["total_margin_value"] == 8.5
        assert body["total_logistics_cost"] == 18.0
        assert body["total_category_fees"] == 2.0
        assert body["total_final_price"] == 53.5
        assert body["total_quantity"] == 3
        assert body["estimated_delivery_days"] == {"min": 10, "max": 17}
        assert [item["item_id"] for item in body["items_logistics"]] == ["i1", "i2"]

    def test_explicit_route(self, client, route, cart):
        cart["route_id"] = str(route.id)
        cart["destination_code"] = "DO"

        body = client.post("/api/v1/logistics/cart", json=cart).json()

        assert body["route_name"] == "China → Miami → Haití"

    def test_unknown_route(self, client, cart):
        cart["route_id"] = str(uuid4())
        assert client.post("/api/v1/logistics/cart", json=cart).status_code == 404

    def test_no_route_for_destination(self, client, cart):
        body = client.post("/api/v1/logistics/cart", json=cart).json()

        assert body["route_name"] == "Ruta estándar"
        assert body["total_logistics_cost"] == 0
        assert body["estimated_delivery_days"] == {"min": 7, "max": 21}


class TestShipping:
    def test_shipping_quote(self, client, seed):
        (department,) = seed(models.Department(code="OU", name="Ouest"))
        category_id = uuid4()
        (commune,) = seed(
            models.Commune(
                department_id=department.id,
                code="PAP",
                name="Port-au-Prince",
                rate_per_lb=Decimal("2"),
                extra_department_fee=Decimal("1"),
                delivery_fee=Decimal("3"),
                operational_fee=Decimal("0.5"),
            )
        )
        seed(
            models.ShippingRateSetting(key="china_usa_rate_per_kg", value=Decimal("10")),
            models.ShippingRateSetting(key="default_insurance_percent", value=Decimal("2")),
            models.CategoryShippingRate(category_id=category_id, fixed_fee=Decimal("2"), percentage_fee=Decimal("5")),
        )

        response = client.post(
            "/api/v1/logistics/shipping-quote",
            json={
                "weight_grams": 1000,
                "reference_price": 100,
                "commune_id": str(commune.id),
                "category_id": str(category_id),
            },
        )

        body = response.json()
        assert response.status_code == 200
        assert body["total_shipping_cost"] == pytest.approx(27.90924)
        assert body["final_price"] == pytest.approx(127.90924)

    def test_unknown_commune(self, client):
        response = client.post(
            "/api/v1/logistics/shipping-quote",
            json={"weight_grams": 1000, "reference_price": 100, "commune_id": str(uuid4())},
        )
        assert response.status_code == 404

    def test_tracking_id(self, client):
        response = client.post(
            "/api/v1/logistics/tracking-id",
            json={"department_code": "ou", "commune_code": "pap", "unit_count": 3, "china_tracking": "YT123"},
        )
        assert response.json() == {"tracking_id": "OU-PAP-XX-03-YT123"}


class TestCheckoutValidation:
    def test_valid(self, client):
        response = client.post(
            "/api/v1/checkout/validate",
            json={
                "items": [{"id": "p1", "quantity": 1}],
                "delivery_method": "pickup",
                "selected_pickup_point": "pp-1",
                "payment_method": "moncash",
                "payment_reference": "MC-123",
            },
        )
        assert response.json() == {"valid": True, "errors": []}

    def test_errors(self, client):
        response = client.post("/api/v1/checkout/validate", json={"channel": "b2b", "payment_method": "transfer"})

        body = response.json()
        assert body["valid"] is False
        assert {"field": "items", "message": "Tu pedido está vacío"} in body["errors"]
        assert {"field": "paymentReference", "message": "Ingresa tu referencia de transferencia"} in body["errors"]

    def test_unknown_channel(self, client):
        assert client.post("/api/v1/checkout/validate", json={"channel": "pos"}).status_code == 422


class TestExpirePendingOrdersJob:
    def test_expires_orders(self, client, seed, query):
        past = datetime.now(timezone.utc) - timedelta(hours=1)
        (order,) = seed(
            models.OrderB2B(
                seller_id=uuid4(),
                payment_status="pending",
                total_amount=Decimal("40"),
                stock_reserved=True,
                reservation_expires_at=past,
            )
        )

        response = client.post("/api/v1/jobs/expire-pending-orders")

        assert response.json() == {"success": True, "expired_count": 1, "message": "Expired 1 pending orders"}
        stored = query(lambda db: db.get(models.OrderB2B, order.id))
        assert stored.payment_status == "expired"
        assert stored.stock_reserved is False
        notification = query(lambda db: db.query(models.Notification).one())
        assert notification.message == "Tu pedido por $40.00 ha expirado. El stock ha sido liberado."
