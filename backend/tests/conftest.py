"""
Pytest configuration and fixtures for backend tests.
"""

import os

# Must be set before any application module reads settings
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("ENVIRONMENT", "test")

from dataclasses import dataclass

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ordering_api.main import app
from shared.infrastructure.db import get_db
from shared.security.auth import sign_jwt
from ordering_api.models import (
    Base,
    Tenant,
    Table,
    Category,
    Dish,
    CustomisationOption,
    OptionValue,
    DishAvailableOption,
)


# SQLite in-memory database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    Uses SQLite in-memory for isolation.
    """
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """
    Create a test client with database session override.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# Catalog fixtures
# =============================================================================


@dataclass
class SeededCatalog:
    """Ids of one restaurant's catalog, as created by build_catalog()."""

    tenant_id: int
    table_id: int
    burger_id: int       # 10.00, allows Size
    lemonade_id: int     # 5.00, no options
    size_option_id: int
    regular_id: int      # Size +0.00
    large_id: int        # Size +2.50
    sauce_option_id: int
    ketchup_id: int      # Sauce +0.50, not allowed on any dish


def build_catalog(db: Session, name: str = "Test Restaurant") -> SeededCatalog:
    """Create a restaurant with two dishes, two options and one table."""
    tenant = Tenant(name=name, address="123 Test St")
    db.add(tenant)
    db.flush()

    category = Category(tenant_id=tenant.id, name="Principales")
    size = CustomisationOption(tenant_id=tenant.id, name="Size")
    sauce = CustomisationOption(tenant_id=tenant.id, name="Sauce")
    db.add_all([category, size, sauce])
    db.flush()

    regular = OptionValue(tenant_id=tenant.id, option_id=size.id, name="Regular", extra_price_cents=0)
    large = OptionValue(tenant_id=tenant.id, option_id=size.id, name="Large", extra_price_cents=250)
    ketchup = OptionValue(tenant_id=tenant.id, option_id=sauce.id, name="Ketchup", extra_price_cents=50)
    burger = Dish(tenant_id=tenant.id, category_id=category.id, name="Burger", base_price_cents=1000)
    lemonade = Dish(tenant_id=tenant.id, category_id=category.id, name="Lemonade", base_price_cents=500)
    table = Table(tenant_id=tenant.id, table_number="1", capacity=4)
    db.add_all([regular, large, ketchup, burger, lemonade, table])
    db.flush()

    db.add(DishAvailableOption(dish_id=burger.id, option_id=size.id))
    db.commit()

    return SeededCatalog(
        tenant_id=tenant.id,
        table_id=table.id,
        burger_id=burger.id,
        lemonade_id=lemonade.id,
        size_option_id=size.id,
        regular_id=regular.id,
        large_id=large.id,
        sauce_option_id=sauce.id,
        ketchup_id=ketchup.id,
    )


@pytest.fixture
def seed_catalog(db_session) -> SeededCatalog:
    """Catalog of the main test restaurant."""
    return build_catalog(db_session)


@pytest.fixture
def other_catalog(db_session, seed_catalog) -> SeededCatalog:
    """Catalog of a second restaurant, for tenant isolation tests."""
    return build_catalog(db_session, name="Other Restaurant")


# =============================================================================
# Staff auth helpers
# =============================================================================


def staff_headers(
    tenant_id: int,
    roles: list[str] | None = None,
    user_id: int = 1,
    superadmin: bool = False,
) -> dict[str, str]:
    """Authorization header carrying a signed staff token."""
    claims = {
        "sub": str(user_id),
        "tenant_id": tenant_id,
        "roles": roles if roles is not None else ["MANAGER"],
    }
    if superadmin:
        claims["is_superadmin"] = True
    return {"Authorization": f"Bearer {sign_jwt(claims)}"}


@pytest.fixture
def manager_headers(seed_catalog) -> dict[str, str]:
    """Headers for a manager of the main test restaurant."""
    return staff_headers(seed_catalog.tenant_id)


def order_payload(catalog: SeededCatalog, **overrides) -> dict:
    """
    Order body for the reference scenario:
    3 x Burger (Large) + 1 x Lemonade = 3 x 12.50 + 5.00 = 42.50
    """
    payload = {
        "tenant_id": catalog.tenant_id,
        "table_id": catalog.table_id,
        "customer_name": "Ana",
        "lines": [
            {"dish_id": catalog.burger_id, "quantity": 3, "selected_value_ids": [catalog.large_id]},
            {"dish_id": catalog.lemonade_id, "quantity": 1},
        ],
    }
    payload.update(overrides)
    return payload
