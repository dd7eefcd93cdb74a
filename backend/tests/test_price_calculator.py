"""
Tests for the pricing domain service.
"""

import pytest

from shared.utils.exceptions import (
    DishNotFoundError,
    OptionNotAllowedError,
    OptionValueNotFoundError,
    ValidationError,
)
from ordering_api.models import Dish
from ordering_api.services.catalog import DishPrice, OptionValuePrice, SqlCatalogReader
from ordering_api.services.domain.pricing_service import (
    CartLine,
    PriceCalculator,
    normalize_lines,
    normalize_quantity,
    price_lines,
)


class TestPriceLines:
    """Pure pricing over in-memory catalog data."""

    DISHES = {
        1: DishPrice(dish_id=1, name="Burger", base_price_cents=1000, allowed_option_ids=frozenset({10})),
        2: DishPrice(dish_id=2, name="Lemonade", base_price_cents=500),
    }
    VALUES = {
        100: OptionValuePrice(value_id=100, option_id=10, name="Large", option_name="Size", extra_price_cents=250),
        101: OptionValuePrice(value_id=101, option_id=10, name="Regular", option_name="Size", extra_price_cents=0),
        200: OptionValuePrice(value_id=200, option_id=20, name="Ketchup", option_name="Sauce", extra_price_cents=50),
    }

    def test_reference_scenario(self):
        """10.00 + 2.50 option x3 and 5.00 x1 give 37.50 + 5.00 = 42.50."""
        quote = price_lines(
            [
                CartLine(dish_id=1, quantity=3, selected_value_ids=(100,)),
                CartLine(dish_id=2, quantity=1),
            ],
            self.DISHES,
            self.VALUES,
        )

        assert [line.unit_price_cents for line in quote.lines] == [1250, 500]
        assert [line.line_total_cents for line in quote.lines] == [3750, 500]
        assert quote.total_cents == 4250

    def test_zero_cost_value_keeps_base_price(self):
        quote = price_lines(
            [CartLine(dish_id=1, quantity=2, selected_value_ids=(101,))],
            self.DISHES,
            self.VALUES,
        )

        assert quote.lines[0].unit_price_cents == 1000
        assert quote.total_cents == 2000

    def test_unknown_dish_fails_whole_calculation(self):
        with pytest.raises(DishNotFoundError) as exc_info:
            price_lines(
                [CartLine(dish_id=1, quantity=1), CartLine(dish_id=99, quantity=1)],
                self.DISHES,
                self.VALUES,
            )

        assert exc_info.value.status_code == 404
        assert exc_info.value.entity_id == 99

    def test_unknown_value_fails(self):
        with pytest.raises(OptionValueNotFoundError):
            price_lines(
                [CartLine(dish_id=1, quantity=1, selected_value_ids=(999,))],
                self.DISHES,
                self.VALUES,
            )

    def test_value_of_option_not_offered_by_dish_is_rejected(self):
        with pytest.raises(OptionNotAllowedError) as exc_info:
            price_lines(
                [CartLine(dish_id=1, quantity=1, selected_value_ids=(200,))],
                self.DISHES,
                self.VALUES,
            )

        assert exc_info.value.status_code == 400
        assert exc_info.value.code == "VALIDATION_ERROR"

    def test_same_input_same_quote(self):
        lines = [CartLine(dish_id=1, quantity=2, selected_value_ids=(100,))]

        assert price_lines(lines, self.DISHES, self.VALUES) == price_lines(
            lines, self.DISHES, self.VALUES
        )


class TestLineNormalization:
    """Quantity and selection policies applied before any lookup."""

    def test_missing_quantity_defaults_to_one(self):
        assert normalize_quantity(None) == 1

    @pytest.mark.parametrize("quantity", [0, -1, 100])
    def test_out_of_range_quantity_is_rejected(self, quantity):
        with pytest.raises(ValidationError):
            normalize_quantity(quantity)

    def test_empty_cart_is_rejected(self):
        with pytest.raises(ValidationError):
            normalize_lines([])

    def test_repeated_value_ids_count_once(self):
        lines = normalize_lines([CartLine(dish_id=1, selected_value_ids=(5, 5, 6, 5))])

        assert lines[0].selected_value_ids == (5, 6)
        assert lines[0].quantity == 1


class TestPriceCalculator:
    """Pricing against the database catalog."""

    def test_prices_from_catalog(self, db_session, seed_catalog):
        calculator = PriceCalculator(SqlCatalogReader(db_session))

        quote = calculator.calculate(
            seed_catalog.tenant_id,
            [
                CartLine(dish_id=seed_catalog.burger_id, quantity=3, selected_value_ids=(seed_catalog.large_id,)),
                CartLine(dish_id=seed_catalog.lemonade_id),
            ],
        )

        assert quote.total_cents == 4250
        assert quote.lines[1].quantity == 1

    def test_dish_of_other_tenant_is_not_found(self, db_session, seed_catalog, other_catalog):
        calculator = PriceCalculator(SqlCatalogReader(db_session))

        with pytest.raises(DishNotFoundError):
            calculator.calculate(
                seed_catalog.tenant_id,
                [CartLine(dish_id=other_catalog.burger_id, quantity=1)],
            )

    def test_value_of_other_tenant_is_not_found(self, db_session, seed_catalog, other_catalog):
        calculator = PriceCalculator(SqlCatalogReader(db_session))

        with pytest.raises(OptionValueNotFoundError):
            calculator.calculate(
                seed_catalog.tenant_id,
                [CartLine(dish_id=seed_catalog.burger_id, selected_value_ids=(other_catalog.large_id,))],
            )

    def test_inactive_dish_is_not_found(self, db_session, seed_catalog):
        dish = db_session.get(Dish, seed_catalog.lemonade_id)
        dish.is_active = False
        db_session.commit()

        calculator = PriceCalculator(SqlCatalogReader(db_session))

        with pytest.raises(DishNotFoundError):
            calculator.calculate(seed_catalog.tenant_id, [CartLine(dish_id=seed_catalog.lemonade_id)])
