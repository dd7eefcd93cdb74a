"""
Order Query Service.

Read-only projections of orders:
- staff list for a tenant, newest first, optionally filtered by status
- single order by (tenant_id, order_number) for anonymous polling
- per-status counters for the staff dashboard

Line prices are recomputed from the catalog with the same formula the
pricing service uses, so the lines of an order add up to its stored total
as long as the catalog has not changed since the order was placed.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.orm import Session

from shared.config.constants import OrderStatus
from shared.config.settings import settings
from shared.utils.exceptions import OrderNotFoundError, ValidationError
from shared.utils.schemas import (
    OrderCustomisationOutput,
    OrderLineOutput,
    OrderOutput,
    OrderStatsOutput,
)
from ordering_api.models import Order, OrderDetail
from ordering_api.repositories import OrderFilters, get_order_repository
from ordering_api.services.domain.pricing_service import line_total_cents, unit_price_cents


@dataclass(frozen=True)
class TotalMismatch:
    """An order whose stored total differs from its recomputed lines."""

    order_id: int
    order_number: int
    stored_cents: int
    recomputed_cents: int


def build_line_output(detail: OrderDetail) -> OrderLineOutput:
    customisations = [
        OrderCustomisationOutput(
            value_id=c.value.id,
            value_name=c.value.name,
            option_id=c.value.option.id,
            option_name=c.value.option.name,
            extra_price_cents=c.value.extra_price_cents,
        )
        for c in sorted(detail.customisations, key=lambda c: c.value_id)
    ]
    unit = unit_price_cents(
        detail.dish.base_price_cents,
        (c.extra_price_cents for c in customisations),
    )
    return OrderLineOutput(
        id=detail.id,
        dish_id=detail.dish_id,
        dish_name=detail.dish.name,
        quantity=detail.quantity,
        unit_price_cents=unit,
        line_total_cents=line_total_cents(unit, detail.quantity),
        customisations=customisations,
    )


def build_order_output(order: Order) -> OrderOutput:
    return OrderOutput(
        id=order.id,
        tenant_id=order.tenant_id,
        table_id=order.table_id,
        table_number=order.table.table_number if order.table else None,
        order_number=order.order_number,
        customer_name=order.customer_name,
        status=order.status,
        comment=order.comment,
        total_price_cents=order.total_price_cents,
        order_time=order.order_time,
        status_updated_at=order.status_updated_at,
        lines=[build_line_output(detail) for detail in order.details],
    )


class OrderQueryService:
    """
    Read paths for orders. Every method takes an explicit tenant id.

    Usage:
        queries = OrderQueryService(db)
        orders = queries.list_orders(tenant_id, status="Pending", limit=20)
    """

    def __init__(self, db: Session):
        self._repo = get_order_repository(db)

    def list_orders(
        self,
        tenant_id: int,
        status: str | None = None,
        limit: int | None = None,
    ) -> list[OrderOutput]:
        """
        Raises:
            ValidationError: Unknown status filter or non-positive limit.
        """
        if status is not None and status not in OrderStatus.ALL:
            raise ValidationError(
                f"Estado inválido: '{status}'. Valores permitidos: {', '.join(OrderStatus.ALL)}"
            )
        if limit is None:
            limit = settings.orders_default_limit
        if limit < 1:
            raise ValidationError("El límite debe ser mayor que cero", limit=limit)
        limit = min(limit, settings.orders_max_limit)

        orders = self._repo.find_all(tenant_id, OrderFilters(status=status, limit=limit))
        return [build_order_output(order) for order in orders]

    def get_by_number(self, tenant_id: int, order_number: int) -> OrderOutput:
        """
        Raises:
            OrderNotFoundError: No order with that number in the tenant.
        """
        order = self._repo.find_by_number(tenant_id, order_number)
        if order is None:
            raise OrderNotFoundError(order_number, tenant_id=tenant_id)
        return build_order_output(order)

    def get_stats(self, tenant_id: int) -> OrderStatsOutput:
        counts = self._repo.count_by_status(tenant_id)
        return OrderStatsOutput(
            pending=counts[OrderStatus.PENDING],
            making=counts[OrderStatus.MAKING],
            completed=counts[OrderStatus.COMPLETED],
            cancelled=counts[OrderStatus.CANCELLED],
            total=sum(counts.values()),
        )

    def find_total_mismatches(self, tenant_id: int) -> list[TotalMismatch]:
        """
        Recompute every order's total from its lines and report differences.

        A mismatch means either the catalog prices changed after the order
        was placed or the stored total is wrong.
        """
        mismatches = []
        for order in self._repo.find_all_for_audit(tenant_id):
            recomputed = sum(
                build_line_output(detail).line_total_cents for detail in order.details
            )
            if recomputed != order.total_price_cents:
                mismatches.append(
                    TotalMismatch(
                        order_id=order.id,
                        order_number=order.order_number,
                        stored_cents=order.total_price_cents,
                        recomputed_cents=recomputed,
                    )
                )
        return mismatches
