"""
Order Domain Service.

Turns a customer's cart into a durable, numbered, priced order:

1. Validate customer name, comment and cart shape.
2. Resolve the table inside the tenant.
3. Price every line against the tenant's catalog.
4. Reserve the next order number for the tenant.
5. Write Order, OrderDetail and OrderDetailCustomisationOption rows.

Steps 4 and 5 share one transaction. If anything fails after the number is
reserved, the rollback also undoes the reservation, and no reader ever
sees a half-written order.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shared.config.constants import ErrorMessages, Limits, OrderStatus
from shared.config.logging import get_logger, mask_customer_name
from shared.utils.exceptions import (
    DatabaseError,
    TableNotFoundError,
    ValidationError,
)
from ordering_api.models import Order, OrderDetail, OrderDetailCustomisationOption
from ordering_api.services.catalog import CatalogReader, SqlCatalogReader
from ordering_api.services.domain.order_sequencer import OrderSequencer
from ordering_api.services.domain.pricing_service import (
    CartLine,
    PriceCalculator,
    PriceQuote,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class CreateOrderCommand:
    """Everything a customer submits to place an order."""

    tenant_id: int
    table_id: int
    customer_name: str | None
    lines: Sequence[CartLine]
    comment: str | None = None
    idempotency_key: str | None = None


@dataclass(frozen=True)
class OrderReceipt:
    """What the customer gets back after placing an order."""

    order_id: int
    order_number: int
    tenant_id: int
    table_id: int
    total_price_cents: int
    status: str
    created: bool = True


def normalize_customer_name(name: str | None) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError(ErrorMessages.CUSTOMER_NAME_REQUIRED)
    if len(cleaned) > Limits.MAX_CUSTOMER_NAME_LENGTH:
        raise ValidationError(
            f"El nombre del cliente no puede superar {Limits.MAX_CUSTOMER_NAME_LENGTH} caracteres"
        )
    return cleaned


def normalize_comment(comment: str | None) -> str | None:
    if comment is None:
        return None
    cleaned = comment.strip()
    if not cleaned:
        return None
    if len(cleaned) > Limits.MAX_COMMENT_LENGTH:
        raise ValidationError(
            f"El comentario no puede superar {Limits.MAX_COMMENT_LENGTH} caracteres"
        )
    return cleaned


def normalize_idempotency_key(key: str | None) -> str | None:
    if key is None:
        return None
    cleaned = key.strip()
    if not cleaned:
        return None
    if len(cleaned) > Limits.MAX_IDEMPOTENCY_KEY_LENGTH:
        raise ValidationError(
            f"Idempotency-Key no puede superar {Limits.MAX_IDEMPOTENCY_KEY_LENGTH} caracteres"
        )
    return cleaned


class OrderService:
    """
    Domain service for order creation.

    Usage:
        service = OrderService(db)
        receipt = service.create_order(CreateOrderCommand(...))
    """

    def __init__(
        self,
        db: Session,
        catalog: CatalogReader | None = None,
        sequencer: OrderSequencer | None = None,
    ):
        self._db = db
        self._catalog = catalog or SqlCatalogReader(db)
        self._sequencer = sequencer or OrderSequencer(db)
        self._pricing = PriceCalculator(self._catalog)

    def find_by_idempotency_key(self, tenant_id: int, key: str) -> Order | None:
        return self._db.scalar(
            select(Order).where(
                Order.tenant_id == tenant_id,
                Order.idempotency_key == key,
            )
        )

    def create_order(self, command: CreateOrderCommand) -> OrderReceipt:
        """
        Validate, price and persist a new order.

        Raises:
            ValidationError: Blank name, empty cart, bad quantity, option not
                allowed for a dish, or oversized text fields.
            TableNotFoundError / DishNotFoundError / OptionValueNotFoundError:
                A referenced id does not resolve inside the tenant.
            OrderSequenceExhaustedError: The number could not be reserved.
            DatabaseError: The write failed for a reason other than a conflict.
        """
        customer_name = normalize_customer_name(command.customer_name)
        comment = normalize_comment(command.comment)
        idempotency_key = normalize_idempotency_key(command.idempotency_key)
        tenant_id = command.tenant_id

        def existing() -> OrderReceipt | None:
            if idempotency_key is None:
                return None
            order = self.find_by_idempotency_key(tenant_id, idempotency_key)
            if order is None:
                return None
            logger.info(
                "Order replayed by idempotency key",
                tenant_id=tenant_id,
                order_id=order.id,
                order_number=order.order_number,
            )
            return _receipt(order, created=False)

        replay = existing()
        if replay is not None:
            return replay

        if self._catalog.get_table(tenant_id, command.table_id) is None:
            raise TableNotFoundError(command.table_id, tenant_id=tenant_id)

        quote = self._pricing.calculate(tenant_id, command.lines)
        attempts = 0

        def write(order_number: int) -> OrderReceipt:
            nonlocal attempts, quote
            attempts += 1
            # A retry starts a new transaction; price from what that one reads
            if attempts > 1:
                quote = self._pricing.calculate(tenant_id, command.lines)
            order = self._write_order(
                command, order_number, customer_name, comment, idempotency_key, quote
            )
            return _receipt(order, created=True)

        try:
            receipt = self._sequencer.reserve(tenant_id, write, existing=existing)
        except SQLAlchemyError as e:
            self._db.rollback()
            logger.error(
                "Failed to create order",
                tenant_id=tenant_id,
                table_id=command.table_id,
                error=str(e),
            )
            raise DatabaseError("registrar el pedido")
        except Exception:
            self._db.rollback()
            raise

        if receipt.created:
            logger.info(
                "Order created",
                tenant_id=tenant_id,
                table_id=command.table_id,
                order_id=receipt.order_id,
                order_number=receipt.order_number,
                total_price_cents=receipt.total_price_cents,
                lines=len(quote.lines),
                customer=mask_customer_name(customer_name),
            )
        return receipt

    def _write_order(
        self,
        command: CreateOrderCommand,
        order_number: int,
        customer_name: str,
        comment: str | None,
        idempotency_key: str | None,
        quote: PriceQuote,
    ) -> Order:
        order = Order(
            tenant_id=command.tenant_id,
            table_id=command.table_id,
            order_number=order_number,
            customer_name=customer_name,
            total_price_cents=quote.total_cents,
            order_time=datetime.now(timezone.utc),
            status=OrderStatus.PENDING,
            comment=comment,
            idempotency_key=idempotency_key,
        )
        self._db.add(order)
        self._db.flush()

        # Details first so their ids are known for the customisation rows
        details = [
            OrderDetail(
                tenant_id=command.tenant_id,
                order_id=order.id,
                dish_id=line.dish_id,
                quantity=line.quantity,
            )
            for line in quote.lines
        ]
        self._db.add_all(details)
        self._db.flush()

        customisations = [
            OrderDetailCustomisationOption(
                tenant_id=command.tenant_id,
                order_detail_id=detail.id,
                value_id=value_id,
            )
            for detail, line in zip(details, quote.lines)
            for value_id in line.selected_value_ids
        ]
        if customisations:
            self._db.add_all(customisations)
            self._db.flush()

        return order


def _receipt(order: Order, created: bool) -> OrderReceipt:
    return OrderReceipt(
        order_id=order.id,
        order_number=order.order_number,
        tenant_id=order.tenant_id,
        table_id=order.table_id,
        total_price_cents=order.total_price_cents,
        status=order.status,
        created=created,
    )
