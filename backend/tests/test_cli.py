"""
Tests for the demo seed and the operations CLI.
"""

from contextlib import contextmanager

import pytest
from typer.testing import CliRunner

import cli
from shared.security.auth import verify_jwt
from ordering_api.models import Dish, OptionValue, Table
from ordering_api.seed import DEMO_TABLE_COUNT, seed_demo
from ordering_api.services.catalog import SqlCatalogReader
from ordering_api.services.domain import CartLine, CreateOrderCommand, OrderService, PriceCalculator

runner = CliRunner()


@pytest.fixture
def cli_db(db_session, monkeypatch):
    """Point CLI commands at the test session."""

    @contextmanager
    def _context():
        yield db_session

    monkeypatch.setattr("shared.infrastructure.db.get_db_context", _context)
    return db_session


class TestSeedDemo:
    """Demo restaurant seeding."""

    def test_seed_is_idempotent(self, db_session):
        first = seed_demo(db_session)
        second = seed_demo(db_session)

        assert first.id == second.id
        tables = db_session.query(Table).filter(Table.tenant_id == first.id).count()
        assert tables == DEMO_TABLE_COUNT

    def test_seeded_menu_prices_reference_order(self, db_session):
        tenant = seed_demo(db_session)
        burger = db_session.query(Dish).filter_by(tenant_id=tenant.id, name="Hamburguesa").one()
        lemonade = db_session.query(Dish).filter_by(tenant_id=tenant.id, name="Limonada").one()
        large = db_session.query(OptionValue).filter_by(tenant_id=tenant.id, name="Grande").one()

        quote = PriceCalculator(SqlCatalogReader(db_session)).calculate(
            tenant.id,
            [
                CartLine(dish_id=burger.id, quantity=3, selected_value_ids=(large.id,)),
                CartLine(dish_id=lemonade.id),
            ],
        )

        assert quote.total_cents == 4250


class TestCli:
    """typer commands."""

    def test_version(self):
        result = runner.invoke(cli.app, ["version"])

        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_staff_token_is_verifiable(self):
        result = runner.invoke(
            cli.app, ["staff-token", "--user-id", "5", "--tenant-id", "3", "--role", "KITCHEN"]
        )

        assert result.exit_code == 0
        # Long tokens may be wrapped by the console
        claims = verify_jwt("".join(result.output.split()))
        assert claims["sub"] == "5"
        assert claims["tenant_id"] == 3
        assert claims["roles"] == ["KITCHEN"]

    def test_verify_totals_passes_on_consistent_orders(self, cli_db, seed_catalog):
        OrderService(cli_db).create_order(
            CreateOrderCommand(
                tenant_id=seed_catalog.tenant_id,
                table_id=seed_catalog.table_id,
                customer_name="Ana",
                lines=[CartLine(dish_id=seed_catalog.lemonade_id, quantity=2)],
            )
        )

        result = runner.invoke(cli.app, ["verify-totals", "--tenant-id", str(seed_catalog.tenant_id)])

        assert result.exit_code == 0

    def test_verify_totals_fails_after_price_change(self, cli_db, seed_catalog):
        OrderService(cli_db).create_order(
            CreateOrderCommand(
                tenant_id=seed_catalog.tenant_id,
                table_id=seed_catalog.table_id,
                customer_name="Ana",
                lines=[CartLine(dish_id=seed_catalog.lemonade_id, quantity=2)],
            )
        )
        cli_db.get(Dish, seed_catalog.lemonade_id).base_price_cents = 700
        cli_db.commit()

        result = runner.invoke(cli.app, ["verify-totals"])

        assert result.exit_code == 1
