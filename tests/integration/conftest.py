"""
Pytest configuration for integration tests.

Runs the marketplace API against a shared in-memory SQLite database.
"""

import os
import sys

# Add project paths to sys.path for imports
project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, os.path.join(project_root, "packages", "basecore", "src"))
sys.path.insert(0, os.path.join(project_root, "packages", "catalog_engines", "src"))
sys.path.insert(0, os.path.join(project_root, "packages", "notifications_whatsapp", "src"))
sys.path.insert(0, os.path.join(project_root, "apps", "marketplace-api", "src"))
sys.path.insert(0, os.path.join(project_root, "apps", "order-expiry-worker", "src"))

# Set environment variables for tests
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("CLICK_TRACKING_SALT", "test-salt")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from basecore.db import Base, get_db
from catalog_engines.persistence import models


@pytest.fixture
def session_factory():
    """Sessionmaker over one in-memory database shared by all sessions."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    engine.dispose()


@pytest.fixture
def seed(session_factory):
    """Insert rows in their own committed transaction and return them."""

    def _seed(*rows):
        with session_factory() as session:
            for row in rows:
                session.add(row)
                session.flush()
            session.commit()
        return rows

    return _seed


@pytest.fixture
def query(session_factory):
    """Run a read against a fresh session."""

    def _query(fn):
        with session_factory() as session:
            return fn(session)

    return _query


@pytest.fixture
def client(session_factory):
    from marketplace_api.main import app

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def attributes(seed):
    return seed(
        models.Attribute(slug="color", name="color", display_name="Color"),
        models.Attribute(slug="size", name="size", display_name="Talla"),
        models.Attribute(slug="age_group", name="age_group", display_name="Edad"),
    )
