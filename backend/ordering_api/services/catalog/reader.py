"""
Catalog Reader - authoritative, tenant-scoped catalog lookups for ordering.

Dish, option and table rows are authored by the menu management service.
Ordering only ever needs three things from them: the base price of a dish
(and which options it offers), the extra price of an option value, and
whether a table exists. Everything is resolved inside one tenant.

Usage:
    reader = SqlCatalogReader(db)
    dishes = reader.get_dishes(tenant_id, [1, 2])
    values = reader.get_option_values(tenant_id, [7])
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Protocol, TypedDict

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from ordering_api.models import (
    Category,
    CustomisationOption,
    Dish,
    DishAvailableOption,
    OptionValue,
    Table,
    Tenant,
)


@dataclass(frozen=True)
class DishPrice:
    """Authoritative price data for one dish."""

    dish_id: int
    name: str
    base_price_cents: int
    allowed_option_ids: frozenset[int] = field(default_factory=frozenset)


@dataclass(frozen=True)
class OptionValuePrice:
    """Authoritative price data for one option value."""

    value_id: int
    option_id: int
    name: str
    option_name: str
    extra_price_cents: int


@dataclass(frozen=True)
class TableRef:
    """Minimal table projection used by the ordering flow."""

    table_id: int
    tenant_id: int
    table_number: str
    capacity: int


# =============================================================================
# Menu projection types
# =============================================================================


class MenuOptionValueView(TypedDict):
    id: int
    name: str
    extra_price_cents: int


class MenuOptionView(TypedDict):
    id: int
    name: str
    values: list[MenuOptionValueView]


class MenuDishView(TypedDict):
    id: int
    name: str
    description: str | None
    base_price_cents: int
    options: list[MenuOptionView]


class MenuCategoryView(TypedDict):
    id: int
    name: str
    dishes: list[MenuDishView]


class MenuView(TypedDict):
    restaurant: dict
    categories: list[MenuCategoryView]


class CatalogReader(Protocol):
    """
    Read-only access to a tenant's catalog.

    Implementations must only return rows that belong to the given tenant
    and are active. Missing ids are simply absent from the result; callers
    decide whether that is an error.
    """

    def get_dishes(self, tenant_id: int, dish_ids: Iterable[int]) -> dict[int, DishPrice]:
        ...

    def get_option_values(
        self, tenant_id: int, value_ids: Iterable[int]
    ) -> dict[int, OptionValuePrice]:
        ...

    def get_table(self, tenant_id: int, table_id: int) -> TableRef | None:
        ...


class SqlCatalogReader:
    """CatalogReader backed by the catalog tables in the ordering database."""

    def __init__(self, db: Session):
        self._db = db

    def get_dishes(self, tenant_id: int, dish_ids: Iterable[int]) -> dict[int, DishPrice]:
        ids = set(dish_ids)
        if not ids:
            return {}

        dishes = self._db.execute(
            select(Dish).where(
                Dish.tenant_id == tenant_id,
                Dish.id.in_(ids),
                Dish.is_active.is_(True),
            )
        ).scalars().all()

        # Batch load the gating relation for all dishes at once
        allowed: dict[int, set[int]] = {dish.id: set() for dish in dishes}
        if allowed:
            rows = self._db.execute(
                select(DishAvailableOption.dish_id, DishAvailableOption.option_id)
                .where(DishAvailableOption.dish_id.in_(allowed.keys()))
            ).all()
            for dish_id, option_id in rows:
                allowed[dish_id].add(option_id)

        return {
            dish.id: DishPrice(
                dish_id=dish.id,
                name=dish.name,
                base_price_cents=dish.base_price_cents,
                allowed_option_ids=frozenset(allowed[dish.id]),
            )
            for dish in dishes
        }

    def get_option_values(
        self, tenant_id: int, value_ids: Iterable[int]
    ) -> dict[int, OptionValuePrice]:
        ids = set(value_ids)
        if not ids:
            return {}

        rows = self._db.execute(
            select(OptionValue, CustomisationOption)
            .join(CustomisationOption, OptionValue.option_id == CustomisationOption.id)
            .where(
                OptionValue.tenant_id == tenant_id,
                CustomisationOption.tenant_id == tenant_id,
                OptionValue.id.in_(ids),
                OptionValue.is_active.is_(True),
                CustomisationOption.is_active.is_(True),
            )
        ).all()

        return {
            value.id: OptionValuePrice(
                value_id=value.id,
                option_id=option.id,
                name=value.name,
                option_name=option.name,
                extra_price_cents=value.extra_price_cents,
            )
            for value, option in rows
        }

    def get_table(self, tenant_id: int, table_id: int) -> TableRef | None:
        table = self._db.scalar(
            select(Table).where(
                Table.id == table_id,
                Table.tenant_id == tenant_id,
                Table.is_active.is_(True),
            )
        )
        return _table_ref(table) if table else None

    def find_table(self, table_id: int) -> TableRef | None:
        """
        Resolve a table by id alone.

        Only used by the public QR landing flow, where the table id is the
        entry point and the tenant is learned from it.
        """
        table = self._db.scalar(
            select(Table).where(Table.id == table_id, Table.is_active.is_(True))
        )
        return _table_ref(table) if table else None

    def get_menu(self, tenant_id: int) -> MenuView | None:
        """
        Build the public menu for a tenant.

        Categories and dishes are ordered by name, option values by name.
        Returns None when the tenant does not exist.
        """
        tenant = self._db.scalar(
            select(Tenant).where(Tenant.id == tenant_id, Tenant.is_active.is_(True))
        )
        if not tenant:
            return None

        categories = self._db.execute(
            select(Category)
            .where(Category.tenant_id == tenant_id, Category.is_active.is_(True))
            .options(
                selectinload(Category.dishes)
                .selectinload(Dish.available_options)
                .selectinload(DishAvailableOption.option)
                .selectinload(CustomisationOption.values)
            )
            .order_by(Category.name)
        ).scalars().all()

        result: list[MenuCategoryView] = []
        for category in categories:
            dishes: list[MenuDishView] = []
            for dish in sorted(category.dishes, key=lambda d: d.name):
                if not dish.is_active:
                    continue
                options: list[MenuOptionView] = [
                    {
                        "id": link.option.id,
                        "name": link.option.name,
                        "values": [
                            {
                                "id": value.id,
                                "name": value.name,
                                "extra_price_cents": value.extra_price_cents,
                            }
                            for value in sorted(link.option.values, key=lambda v: v.name)
                            if value.is_active
                        ],
                    }
                    for link in sorted(dish.available_options, key=lambda a: a.option.name)
                    if link.option.is_active
                ]
                dishes.append(
                    {
                        "id": dish.id,
                        "name": dish.name,
                        "description": dish.description,
                        "base_price_cents": dish.base_price_cents,
                        "options": options,
                    }
                )
            result.append({"id": category.id, "name": category.name, "dishes": dishes})

        return {
            "restaurant": {"id": tenant.id, "name": tenant.name, "address": tenant.address},
            "categories": result,
        }


def _table_ref(table: Table) -> TableRef:
    return TableRef(
        table_id=table.id,
        tenant_id=table.tenant_id,
        table_number=table.table_number,
        capacity=table.capacity,
    )


def get_catalog_reader(db: Session) -> SqlCatalogReader:
    """Factory function for dependency injection."""
    return SqlCatalogReader(db)
