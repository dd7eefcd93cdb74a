"""
Seed data for development and demos.
Creates one restaurant with a small menu, a customisation option and tables.

Catalog rows are normally authored by the menu management service; this
only exists so a fresh database can take orders end to end.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from shared.config.logging import get_logger
from shared.infrastructure.db import safe_commit
from ordering_api.models import (
    Category,
    CustomisationOption,
    Dish,
    DishAvailableOption,
    OptionValue,
    Table,
    Tenant,
)

logger = get_logger(__name__)

DEMO_TENANT_NAME = "Demo Bistro"
DEMO_TABLE_COUNT = 4


def seed_demo(db: Session) -> Tenant:
    """
    Seed the demo restaurant.
    Idempotent: returns the existing tenant if it was already seeded.
    """
    existing = db.scalar(select(Tenant).where(Tenant.name == DEMO_TENANT_NAME))
    if existing:
        logger.info("Demo tenant already seeded, skipping", tenant_id=existing.id)
        return existing

    tenant = Tenant(name=DEMO_TENANT_NAME, address="Calle Falsa 123", email="demo@bistro.test")
    db.add(tenant)
    db.flush()

    mains = Category(tenant_id=tenant.id, name="Principales")
    drinks = Category(tenant_id=tenant.id, name="Bebidas")
    db.add_all([mains, drinks])
    db.flush()

    size = CustomisationOption(tenant_id=tenant.id, name="Tamaño")
    db.add(size)
    db.flush()
    db.add_all([
        OptionValue(tenant_id=tenant.id, option_id=size.id, name="Regular", extra_price_cents=0),
        OptionValue(tenant_id=tenant.id, option_id=size.id, name="Grande", extra_price_cents=250),
    ])

    burger = Dish(
        tenant_id=tenant.id,
        category_id=mains.id,
        name="Hamburguesa",
        description="Carne, queso y pan brioche",
        base_price_cents=1000,
    )
    lemonade = Dish(
        tenant_id=tenant.id,
        category_id=drinks.id,
        name="Limonada",
        description=None,
        base_price_cents=500,
    )
    db.add_all([burger, lemonade])
    db.flush()
    db.add(DishAvailableOption(dish_id=burger.id, option_id=size.id))

    db.add_all([
        Table(tenant_id=tenant.id, table_number=str(n), capacity=4)
        for n in range(1, DEMO_TABLE_COUNT + 1)
    ])

    safe_commit(db)
    logger.info("Demo tenant seeded", tenant_id=tenant.id)
    return tenant
