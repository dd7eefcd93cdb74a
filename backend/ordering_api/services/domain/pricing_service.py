"""
Pricing Domain Service.

Turns cart lines into per-line and total prices using only authoritative
catalog data. Whatever price a client sends along with its cart is never
read here: the request schemas do not even carry one.

    unit_price = dish.base_price + sum(extra_price of each selected value)
    line_total = unit_price * quantity
    total      = sum(line_total)

Policies:
- A missing quantity means 1; a quantity outside 1..99 is rejected.
- An unknown dish id or option value id fails the whole calculation.
- A selected value whose option the dish does not offer is rejected.
- The same value id repeated on one line counts once.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Sequence

from shared.config.constants import ErrorMessages, Limits
from shared.utils.exceptions import (
    DishNotFoundError,
    OptionNotAllowedError,
    OptionValueNotFoundError,
    ValidationError,
)
from ordering_api.services.catalog import CatalogReader, DishPrice, OptionValuePrice


@dataclass(frozen=True)
class CartLine:
    """One line of a customer's cart as submitted."""

    dish_id: int
    quantity: int | None = None
    selected_value_ids: tuple[int, ...] = ()


@dataclass(frozen=True)
class PricedLine:
    """A cart line with its server-side prices."""

    dish_id: int
    dish_name: str
    quantity: int
    selected_value_ids: tuple[int, ...]
    unit_price_cents: int
    line_total_cents: int


@dataclass(frozen=True)
class PriceQuote:
    """Result of pricing a whole cart."""

    lines: tuple[PricedLine, ...]
    total_cents: int


def unit_price_cents(base_price_cents: int, extra_prices_cents: Iterable[int]) -> int:
    return base_price_cents + sum(extra_prices_cents)


def line_total_cents(unit_price: int, quantity: int) -> int:
    return unit_price * quantity


def normalize_quantity(quantity: int | None) -> int:
    """Apply the quantity policy: None -> 1, otherwise must be within limits."""
    if quantity is None:
        return Limits.MIN_QUANTITY
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError(ErrorMessages.INVALID_QUANTITY, field="quantity", value=quantity)
    if quantity < Limits.MIN_QUANTITY or quantity > Limits.MAX_QUANTITY:
        raise ValidationError(
            f"La cantidad debe estar entre {Limits.MIN_QUANTITY} y {Limits.MAX_QUANTITY}",
            field="quantity",
            value=quantity,
        )
    return quantity


def normalize_value_ids(value_ids: Iterable[int]) -> tuple[int, ...]:
    """Drop repeated value ids, keeping first-seen order."""
    return tuple(dict.fromkeys(value_ids))


def normalize_lines(lines: Sequence[CartLine]) -> list[CartLine]:
    """
    Validate cart shape and apply quantity/selection policies.

    Runs before any catalog lookup so malformed carts fail without I/O.
    """
    if not lines:
        raise ValidationError(ErrorMessages.EMPTY_CART)
    if len(lines) > Limits.MAX_ORDER_LINES:
        raise ValidationError(
            f"El pedido no puede tener más de {Limits.MAX_ORDER_LINES} líneas",
            lines=len(lines),
        )

    normalized = []
    for line in lines:
        value_ids = normalize_value_ids(line.selected_value_ids)
        if len(value_ids) > Limits.MAX_SELECTED_VALUES:
            raise ValidationError(
                f"Un plato no puede tener más de {Limits.MAX_SELECTED_VALUES} opciones",
                dish_id=line.dish_id,
            )
        normalized.append(
            CartLine(
                dish_id=line.dish_id,
                quantity=normalize_quantity(line.quantity),
                selected_value_ids=value_ids,
            )
        )
    return normalized


def price_lines(
    lines: Sequence[CartLine],
    dishes: Mapping[int, DishPrice],
    values: Mapping[int, OptionValuePrice],
) -> PriceQuote:
    """
    Price already-normalized lines against catalog data.

    Pure: no I/O, same input gives the same quote.

    Raises:
        DishNotFoundError: A dish id is not in `dishes`.
        OptionValueNotFoundError: A selected value id is not in `values`.
        OptionNotAllowedError: A selected value's option is not offered by the dish.
    """
    priced: list[PricedLine] = []
    for line in lines:
        dish = dishes.get(line.dish_id)
        if dish is None:
            raise DishNotFoundError(line.dish_id)

        extras: list[int] = []
        for value_id in line.selected_value_ids:
            value = values.get(value_id)
            if value is None:
                raise OptionValueNotFoundError(value_id, dish_id=line.dish_id)
            if value.option_id not in dish.allowed_option_ids:
                raise OptionNotAllowedError(dish.dish_id, value_id, option_id=value.option_id)
            extras.append(value.extra_price_cents)

        quantity = line.quantity if line.quantity is not None else Limits.MIN_QUANTITY
        unit = unit_price_cents(dish.base_price_cents, extras)
        priced.append(
            PricedLine(
                dish_id=dish.dish_id,
                dish_name=dish.name,
                quantity=quantity,
                selected_value_ids=line.selected_value_ids,
                unit_price_cents=unit,
                line_total_cents=line_total_cents(unit, quantity),
            )
        )

    return PriceQuote(
        lines=tuple(priced),
        total_cents=sum(line.line_total_cents for line in priced),
    )


class PriceCalculator:
    """
    Prices a cart for one tenant using a CatalogReader.

    Usage:
        calculator = PriceCalculator(SqlCatalogReader(db))
        quote = calculator.calculate(tenant_id, [CartLine(dish_id=1, quantity=2)])
    """

    def __init__(self, catalog: CatalogReader):
        self._catalog = catalog

    def calculate(self, tenant_id: int, lines: Sequence[CartLine]) -> PriceQuote:
        normalized = normalize_lines(lines)

        dishes = self._catalog.get_dishes(tenant_id, {line.dish_id for line in normalized})
        value_ids = {vid for line in normalized for vid in line.selected_value_ids}
        values = self._catalog.get_option_values(tenant_id, value_ids)

        return price_lines(normalized, dishes, values)
