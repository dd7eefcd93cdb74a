"""
Order Status Domain Service.

Lifecycle:
    Pending -> Making -> Completed
    Pending -> Cancelled
    Making  -> Cancelled

Completed and Cancelled are terminal. Requesting the current status again
is not an edge and is rejected like any other invalid transition.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shared.config.constants import ORDER_TRANSITIONS, OrderStatus
from shared.config.logging import get_logger
from shared.infrastructure.db import safe_commit
from shared.utils.exceptions import (
    DatabaseError,
    InvalidTransitionError,
    OrderNotFoundError,
    ValidationError,
)
from ordering_api.models import Order

logger = get_logger(__name__)


@dataclass(frozen=True)
class StatusChange:
    order_id: int
    order_number: int
    previous_status: str
    status: str
    status_updated_at: datetime


def can_transition(current: str, target: str) -> bool:
    """True if `current -> target` is an edge of the lifecycle."""
    return target in ORDER_TRANSITIONS.get(current, [])


def validate_transition(current: str, target: str, order_id: int | None = None) -> None:
    """
    Raises:
        ValidationError: `target` is not a known status.
        InvalidTransitionError: The edge is not allowed.
    """
    if target not in OrderStatus.ALL:
        raise ValidationError(
            f"Estado inválido: '{target}'. Valores permitidos: {', '.join(OrderStatus.ALL)}",
            order_id=order_id,
        )
    if not can_transition(current, target):
        raise InvalidTransitionError("pedido", current, target, order_id=order_id)


class OrderStatusService:
    """
    Applies status transitions to existing orders.

    The caller is expected to have passed the Access Guard for `tenant_id`.
    """

    def __init__(self, db: Session):
        self._db = db

    def update_status(
        self,
        tenant_id: int,
        order_id: int,
        target_status: str,
        user_id: int | None = None,
    ) -> StatusChange:
        """
        Move an order to `target_status`.

        The write is a single-row UPDATE guarded by the status that was
        validated, so two staff members racing on the same order cannot
        both apply a transition from the same state.

        Raises:
            OrderNotFoundError: No order with that id in the tenant.
            ValidationError: Unknown target status.
            InvalidTransitionError: The edge is not allowed.
        """
        order = self._db.scalar(
            select(Order).where(Order.id == order_id, Order.tenant_id == tenant_id)
        )
        if order is None:
            raise OrderNotFoundError(order_id, tenant_id=tenant_id)

        current = order.status
        validate_transition(current, target_status, order_id=order_id)

        now = datetime.now(timezone.utc)
        updated = self._db.execute(
            update(Order)
            .where(
                Order.id == order_id,
                Order.tenant_id == tenant_id,
                Order.status == current,
            )
            .values(
                status=target_status,
                status_updated_at=now,
                status_updated_by_id=user_id,
            )
            .returning(Order.id)
        ).first()

        if updated is None:
            # Status changed between read and write; report against the fresh state
            self._db.rollback()
            fresh = self._db.scalar(
                select(Order.status).where(Order.id == order_id, Order.tenant_id == tenant_id)
            )
            raise InvalidTransitionError(
                "pedido", fresh or current, target_status, order_id=order_id
            )

        try:
            safe_commit(self._db)
        except SQLAlchemyError as e:
            logger.error("Failed to update order status", order_id=order_id, error=str(e))
            raise DatabaseError("actualizar el estado del pedido")

        logger.info(
            "Order status updated",
            tenant_id=tenant_id,
            order_id=order_id,
            order_number=order.order_number,
            from_status=current,
            to_status=target_status,
            user_id=user_id,
        )

        return StatusChange(
            order_id=order_id,
            order_number=order.order_number,
            previous_status=current,
            status=target_status,
            status_updated_at=now,
        )
