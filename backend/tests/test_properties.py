"""
Property-based Testing with Hypothesis.

Pricing is pure over in-memory catalog data, so its invariants can be
checked against generated carts without a database.
"""

import pytest
from hypothesis import given, settings, strategies as st

from shared.config.constants import Limits, ORDER_TRANSITIONS, OrderStatus
from shared.utils.exceptions import ValidationError
from ordering_api.services.catalog import DishPrice, OptionValuePrice
from ordering_api.services.domain.pricing_service import (
    CartLine,
    normalize_lines,
    normalize_quantity,
    price_lines,
)
from ordering_api.services.domain.order_status_service import can_transition


OPTION_ID = 10


def _catalog(base_prices, extras):
    dishes = {
        i: DishPrice(
            dish_id=i,
            name=f"Dish {i}",
            base_price_cents=price,
            allowed_option_ids=frozenset({OPTION_ID}),
        )
        for i, price in enumerate(base_prices, start=1)
    }
    values = {
        100 + i: OptionValuePrice(
            value_id=100 + i,
            option_id=OPTION_ID,
            name=f"Value {i}",
            option_name="Option",
            extra_price_cents=extra,
        )
        for i, extra in enumerate(extras)
    }
    return dishes, values


cart_strategy = st.tuples(
    st.lists(st.integers(min_value=0, max_value=100_000), min_size=1, max_size=5),
    st.lists(st.integers(min_value=0, max_value=5_000), min_size=0, max_size=5),
).flatmap(
    lambda catalog: st.tuples(
        st.just(catalog),
        st.lists(
            st.tuples(
                st.integers(min_value=1, max_value=len(catalog[0])),
                st.integers(min_value=Limits.MIN_QUANTITY, max_value=Limits.MAX_QUANTITY),
                st.lists(
                    st.integers(min_value=100, max_value=100 + len(catalog[1]) - 1),
                    max_size=len(catalog[1]),
                )
                if catalog[1]
                else st.just([]),
            ),
            min_size=1,
            max_size=10,
        ),
    )
)


class TestPricingProperties:
    """Invariants of price_lines over generated carts."""

    @given(cart=cart_strategy)
    @settings(max_examples=100)
    def test_total_is_sum_of_line_totals(self, cart):
        """Property: total = sum(quantity * (base + extras))."""
        (base_prices, extras), raw_lines = cart
        dishes, values = _catalog(base_prices, extras)
        lines = normalize_lines(
            [CartLine(dish_id=d, quantity=q, selected_value_ids=tuple(v)) for d, q, v in raw_lines]
        )

        quote = price_lines(lines, dishes, values)

        assert quote.total_cents == sum(line.line_total_cents for line in quote.lines)
        for line, priced in zip(lines, quote.lines):
            expected_unit = dishes[line.dish_id].base_price_cents + sum(
                values[v].extra_price_cents for v in dict.fromkeys(line.selected_value_ids)
            )
            assert priced.unit_price_cents == expected_unit
            assert priced.line_total_cents == expected_unit * line.quantity

    @given(cart=cart_strategy)
    @settings(max_examples=50)
    def test_total_is_never_negative(self, cart):
        (base_prices, extras), raw_lines = cart
        dishes, values = _catalog(base_prices, extras)
        lines = normalize_lines(
            [CartLine(dish_id=d, quantity=q, selected_value_ids=tuple(v)) for d, q, v in raw_lines]
        )

        assert price_lines(lines, dishes, values).total_cents >= 0

    @given(
        base=st.integers(min_value=0, max_value=100_000),
        quantity=st.integers(min_value=Limits.MIN_QUANTITY, max_value=Limits.MAX_QUANTITY - 1),
    )
    @settings(max_examples=50)
    def test_one_more_unit_adds_one_unit_price(self, base, quantity):
        dishes, values = _catalog([base], [])

        smaller = price_lines([CartLine(dish_id=1, quantity=quantity)], dishes, values)
        larger = price_lines([CartLine(dish_id=1, quantity=quantity + 1)], dishes, values)

        assert larger.total_cents - smaller.total_cents == base


class TestQuantityProperties:
    """Quantity policy."""

    @given(quantity=st.integers(min_value=Limits.MIN_QUANTITY, max_value=Limits.MAX_QUANTITY))
    def test_in_range_quantity_is_kept(self, quantity):
        assert normalize_quantity(quantity) == quantity

    @given(
        quantity=st.one_of(
            st.integers(max_value=Limits.MIN_QUANTITY - 1),
            st.integers(min_value=Limits.MAX_QUANTITY + 1),
        )
    )
    def test_out_of_range_quantity_is_rejected(self, quantity):
        with pytest.raises(ValidationError):
            normalize_quantity(quantity)


class TestLifecycleProperties:
    """Order status lifecycle."""

    @given(
        current=st.sampled_from(OrderStatus.ALL),
        target=st.sampled_from(OrderStatus.ALL),
    )
    def test_transition_matches_table(self, current, target):
        assert can_transition(current, target) == (target in ORDER_TRANSITIONS[current])

    @given(status=st.sampled_from(OrderStatus.ALL))
    def test_no_self_transitions(self, status):
        assert not can_transition(status, status)

    @given(
        terminal=st.sampled_from(OrderStatus.TERMINAL),
        target=st.sampled_from(OrderStatus.ALL),
    )
    def test_terminal_states_have_no_exits(self, terminal, target):
        assert not can_transition(terminal, target)
