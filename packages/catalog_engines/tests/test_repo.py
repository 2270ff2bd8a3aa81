"""
Tests for the marketplace repositories.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from catalog_engines.exceptions import NotFoundError
from catalog_engines.persistence import models
from catalog_engines.persistence.repo import (
    CatalogRepository,
    OrdersRepository,
    PricingRepository,
    TrackingRepository,
)


class TestCatalogRepository:
    """Tests for catalog queries."""

    def test_flat_products_exclude_parents_and_inactive(self, db_session, make_product):
        make_product("B-2")
        make_product("A-1")
        make_product("P", is_parent=True)
        make_product("X-1", is_active=False)

        skus = [p.sku_interno for p in CatalogRepository(db_session).get_flat_products()]

        assert skus == ["A-1", "B-2"]

    def test_get_or_create_option_reuses_lower_cased(self, db_session, attributes):
        repo = CatalogRepository(db_session)
        color_id = attributes["color"].id

        first = repo.get_or_create_attribute_option(color_id, "Rosa", "Rosa")
        second = repo.get_or_create_attribute_option(color_id, "rosa", "rosa")

        assert first.id == second.id
        assert first.value == "rosa"

    def test_products_for_calculation(self, db_session, make_product):
        category_id = uuid4()
        product = make_product("A-1", precio="12.50", peso_kg=Decimal("1.2"), categoria_id=category_id)
        light = make_product("A-2")

        rows = {p.id: p for p in CatalogRepository(db_session).get_products_for_calculation([product.id, light.id])}

        assert rows[product.id].factory_cost == Decimal("12.50")
        assert rows[product.id].weight_kg == Decimal("1.2")
        assert rows[product.id].category_id == category_id
        assert rows[light.id].weight_kg is None

    def test_products_for_calculation_empty(self, db_session):
        assert CatalogRepository(db_session).get_products_for_calculation([]) == []


class TestMarginRanges:
    """Tests for margin range administration."""

    def test_crud(self, db_session):
        repo = PricingRepository(db_session)

        row = repo.create_margin_range(Decimal("0"), Decimal("10"), Decimal("50"), description="Small")
        repo.update_margin_range(row.id, margin_percent=Decimal("45"))
        assert repo.get_margin_range(row.id).margin_percent == Decimal("45")

        repo.delete_margin_range(row.id)
        with pytest.raises(NotFoundError):
            repo.get_margin_range(row.id)

    def test_ordered_by_sort_order(self, db_session):
        repo = PricingRepository(db_session)
        repo.create_margin_range(Decimal("50"), None, Decimal("20"), sort_order=3)
        repo.create_margin_range(Decimal("0"), Decimal("10"), Decimal("50"), sort_order=1)
        repo.create_margin_range(Decimal("10"), Decimal("50"), Decimal("30"), sort_order=2)

        ranges = repo.get_margin_ranges()

        assert [r.margin_percent for r in ranges] == [Decimal("50"), Decimal("30"), Decimal("20")]
        assert ranges[-1].max_cost is None

    def test_toggle_hides_from_active(self, db_session):
        repo = PricingRepository(db_session)
        row = repo.create_margin_range(Decimal("0"), None, Decimal("25"))

        repo.toggle_margin_range(row.id, False)

        assert repo.get_margin_ranges() == []
        assert len(repo.list_margin_ranges()) == 1

    def test_update_missing(self, db_session):
        with pytest.raises(NotFoundError):
            PricingRepository(db_session).update_margin_range(uuid4(), margin_percent=Decimal("1"))


class TestRoutesAndRates:
    """Tests for routes, category fees and shipping rates."""

    @pytest.fixture
    def route(self, db_session):
        country = models.DestinationCountry(code="HT", name="Haití")
        hub = models.TransitHub(code="MIA", name="Miami")
        db_session.add_all([country, hub])
        db_session.flush()

        route = models.ShippingRoute(destination_country_id=country.id, transit_hub_id=hub.id)
        db_session.add(route)
        db_session.flush()

        now = datetime.now(timezone.utc)
        db_session.add_all(
            [
                models.RouteLogisticsCost(
                    shipping_route_id=route.id,
                    segment="hub_to_destination",
                    cost_per_kg=Decimal("4"),
                    min_cost=Decimal("3"),
                    estimated_days_min=3,
                    estimated_days_max=5,
                    created_at=now,
                ),
                models.RouteLogisticsCost(
                    shipping_route_id=route.id,
                    segment="china_to_hub",
                    cost_per_kg=Decimal("6"),
                    min_cost=Decimal("2"),
                    estimated_days_min=7,
                    estimated_days_max=12,
                    created_at=now - timedelta(minutes=1),
                ),
            ]
        )
        db_session.flush()
        return route

    def test_get_routes(self, db_session, route):
        routes = PricingRepository(db_session).get_routes()

        assert len(routes) == 1
        info = routes[0]
        assert info.country_code == "HT"
        assert info.hub_name == "Miami"
        assert info.is_direct is False
        assert [s.segment for s in info.segments] == ["china_to_hub", "hub_to_destination"]

    def test_get_route_missing(self, db_session, route):
        with pytest.raises(NotFoundError):
            PricingRepository(db_session).get_route(uuid4())

    def test_no_routes(self, db_session):
        assert PricingRepository(db_session).get_routes() == []

    def test_category_rate(self, db_session):
        category_id = uuid4()
        db_session.add(models.CategoryShippingRate(category_id=category_id, fixed_fee=Decimal("1"), percentage_fee=Decimal("5")))
        db_session.add(models.CategoryShippingRate(category_id=uuid4(), fixed_fee=Decimal("9"), is_active=False))
        db_session.flush()

        repo = PricingRepository(db_session)

        assert repo.get_category_rate(category_id).percentage_fee == Decimal("5")
        assert repo.get_category_rate(None) is None
        assert len(repo.get_category_rates()) == 1

    def test_shipping_rates(self, db_session):
        db_session.add(models.ShippingRateSetting(key="china_usa_rate_per_kg", value=Decimal("10")))
        db_session.flush()

        assert PricingRepository(db_session).get_shipping_rates() == {"china_usa_rate_per_kg": Decimal("10")}

    def test_commune_rates(self, db_session):
        department = models.Department(code="OU", name="Ouest")
        db_session.add(department)
        db_session.flush()
        commune = models.Commune(department_id=department.id, code="PAP", name="Port-au-Prince", rate_per_lb=Decimal("2"))
        db_session.add(commune)
        db_session.flush()

        repo = PricingRepository(db_session)

        assert repo.get_commune_rates(commune.id).rate_per_lb == Decimal("2")
        assert repo.get_commune_rates(None) is None
        with pytest.raises(NotFoundError):
            repo.get_commune_rates(uuid4())


class TestOrdersRepository:
    """Tests for order expiry queries and notifications."""

    def test_expired_pending_orders(self, db_session):
        now = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
        expired = models.OrderB2B(seller_id=uuid4(), payment_status="pending", reservation_expires_at=now - timedelta(minutes=5))
        fresh = models.OrderB2B(seller_id=uuid4(), payment_status="pending", reservation_expires_at=now + timedelta(minutes=5))
        paid = models.OrderB2B(seller_id=uuid4(), payment_status="paid", reservation_expires_at=now - timedelta(minutes=5))
        open_ended = models.OrderB2B(seller_id=uuid4(), payment_status="pending")
        db_session.add_all([expired, fresh, paid, open_ended])
        db_session.flush()

        orders = OrdersRepository(db_session).get_expired_pending_orders(now)

        assert [o.id for o in orders] == [expired.id]

    def test_mark_whatsapp_sent(self, db_session):
        repo = OrdersRepository(db_session)
        notification = repo.create_notification(uuid4(), "order_paid", "Pagado", "Tu pedido fue pagado")

        assert repo.mark_whatsapp_sent(notification.id) is True

        assert notification.is_whatsapp_sent is True
        assert notification.is_email_sent is False
        assert notification.data == {}

    def test_mark_email_sent(self, db_session):
        repo = OrdersRepository(db_session)
        notification = repo.create_notification(uuid4(), "order_paid", "Pagado", "Tu pedido fue pagado")

        assert repo.mark_email_sent(notification.id) is True

        assert notification.is_email_sent is True
        assert notification.is_whatsapp_sent is False

    def test_mark_missing_notification_is_noop(self, db_session):
        repo = OrdersRepository(db_session)

        assert repo.mark_whatsapp_sent(uuid4()) is False
        assert repo.mark_email_sent(uuid4()) is False
        assert db_session.query(models.Notification).count() == 0


class TestTrackingRepository:
    def test_record_and_count(self, db_session):
        seller_id = uuid4()
        repo = TrackingRepository(db_session)

        repo.record_click(seller_id, device_type="mobile", source_type="pdf_catalog", ip_hash="abc")
        repo.record_click(seller_id, device_type="desktop", source_type="direct_link")
        repo.record_click(uuid4(), device_type="desktop", source_type="direct_link")

        assert repo.count_clicks(seller_id) == 2
