"""
Pytest fixtures for catalog engine tests.

Database tests run against in-memory SQLite. pysqlite needs the BEGIN
workaround below for SAVEPOINTs to behave like they do on Postgres.
"""

import os
from decimal import Decimal

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from basecore.db import Base
from catalog_engines.engines.pricing import CategoryRate, MarginRange
from catalog_engines.engines.routes import RouteInfo, RouteSegment
from catalog_engines.persistence import models


@pytest.fixture
def db_engine():
    engine = create_engine("sqlite://")

    @event.listens_for(engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    Session = sessionmaker(bind=db_engine, autoflush=False)
    session = Session()
    yield session
    session.close()


@pytest.fixture
def attributes(db_session):
    """The color / size / age_group attributes, keyed by slug."""
    rows = {}
    for slug, display in (("color", "Color"), ("size", "Talla"), ("age_group", "Edad")):
        attribute = models.Attribute(slug=slug, name=slug, display_name=display)
        db_session.add(attribute)
        rows[slug] = attribute
    db_session.commit()
    return rows


@pytest.fixture
def make_product(db_session):
    """Factory for flat catalog rows."""

    def _make(sku, nombre="Vestido Niña", precio="10.00", stock=5, **fields):
        product = models.Product(
            sku_interno=sku,
            nombre=nombre,
            precio_mayorista=Decimal(precio),
            stock_fisico=stock,
            **fields,
        )
        db_session.add(product)
        db_session.flush()
        return product

    return _make


@pytest.fixture
def margin_ranges():
    """[0,10) 50%, [10,50) 30%, [50,∞) 20%."""
    return [
        MarginRange(min_cost=Decimal("0"), max_cost=Decimal("10"), margin_percent=Decimal("50"), sort_order=1),
        MarginRange(min_cost=Decimal("10"), max_cost=Decimal("50"), margin_percent=Decimal("30"), sort_order=2),
        MarginRange(min_cost=Decimal("50"), max_cost=None, margin_percent=Decimal("20"), sort_order=3),
    ]


@pytest.fixture
def hub_route():
    """China → Miami → Haití: 6.00 for 0.5 kg, 10-17 days."""
    return RouteInfo(
        id="route-ht",
        country_name="Haití",
        country_code="HT",
        is_direct=False,
        hub_name="Miami",
        hub_code="MIA",
        segments=[
            RouteSegment(
                segment="china_to_hub",
                cost_per_kg=Decimal("6"),
                min_cost=Decimal("2"),
                estimated_days_min=7,
                estimated_days_max=12,
            ),
            RouteSegment(
                segment="hub_to_destination",
                cost_per_kg=Decimal("4"),
                min_cost=Decimal("3"),
                estimated_days_min=3,
                estimated_days_max=5,
            ),
        ],
    )


@pytest.fixture
def category_rates():
    return [CategoryRate(category_id="cat-toys", fixed_fee=Decimal("1"), percentage_fee=Decimal("0"))]
