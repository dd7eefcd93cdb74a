"""
Order Models: Order, OrderDetail, OrderDetailCustomisationOption, OrderSequence.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.config.constants import OrderStatus
from .base import Base, BigIntPK

if TYPE_CHECKING:
    from .table import Table
    from .catalog import Dish, OptionValue


class Order(Base):
    """
    One customer transaction at one table.

    Created exactly once by the order service; afterwards only the status
    columns change. total_price_cents is computed server-side and is the
    only derived value stored.
    """

    # "order" is a reserved SQL keyword
    __tablename__ = "customer_order"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    tenant_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("tenant.id"), nullable=False, index=True
    )
    table_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("restaurant_table.id"), nullable=False, index=True
    )
    order_number: Mapped[int] = mapped_column(Integer, nullable=False)
    customer_name: Mapped[str] = mapped_column(Text, nullable=False)
    total_price_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    order_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    status: Mapped[str] = mapped_column(
        Text, default=OrderStatus.PENDING, nullable=False
    )  # Pending, Making, Completed, Cancelled
    comment: Mapped[Optional[str]] = mapped_column(Text)
    # Optional client-supplied key that makes resubmission return the same order
    idempotency_key: Mapped[Optional[str]] = mapped_column(Text)

    status_updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    status_updated_by_id: Mapped[Optional[int]] = mapped_column(BigInteger)

    # Relationships
    table: Mapped["Table"] = relationship()
    details: Mapped[list["OrderDetail"]] = relationship(
        back_populates="order", order_by="OrderDetail.id"
    )

    __table_args__ = (
        UniqueConstraint("tenant_id", "order_number", name="uq_order_tenant_number"),
        UniqueConstraint("tenant_id", "idempotency_key", name="uq_order_tenant_idempotency_key"),
        CheckConstraint("total_price_cents >= 0", name="chk_order_total_non_negative"),
        # Staff list: tenant + status filter, newest first
        Index("ix_order_tenant_status_time", "tenant_id", "status", "order_time"),
        Index("ix_order_tenant_time", "tenant_id", "order_time"),
    )

    def __repr__(self) -> str:
        return (
            f"<Order(id={self.id}, tenant_id={self.tenant_id}, "
            f"order_number={self.order_number}, status='{self.status}')>"
        )


class OrderDetail(Base):
    """
    One line item of an order: a dish and a quantity.
    """

    __tablename__ = "order_detail"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    tenant_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("tenant.id"), nullable=False, index=True
    )
    order_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("customer_order.id"), nullable=False, index=True
    )
    dish_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("dish.id"), nullable=False, index=True
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        CheckConstraint("quantity > 0", name="chk_order_detail_quantity_positive"),
    )

    # Relationships
    order: Mapped["Order"] = relationship(back_populates="details")
    dish: Mapped["Dish"] = relationship()
    customisations: Mapped[list["OrderDetailCustomisationOption"]] = relationship(
        back_populates="order_detail"
    )


class OrderDetailCustomisationOption(Base):
    """
    One selected option value on an order line.
    """

    __tablename__ = "order_detail_customisation_option"

    order_detail_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("order_detail.id"), primary_key=True
    )
    value_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("option_value.id"), primary_key=True
    )
    tenant_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("tenant.id"), nullable=False, index=True
    )

    order_detail: Mapped["OrderDetail"] = relationship(back_populates="customisations")
    value: Mapped["OptionValue"] = relationship()


class OrderSequence(Base):
    """
    Per-tenant order number counter.

    One row per tenant; reserving a number is a single
    UPDATE ... RETURNING on this row inside the order's transaction,
    so same-tenant reservations serialize on the row lock and other
    tenants never wait.
    """

    __tablename__ = "order_sequence"

    tenant_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("tenant.id"), primary_key=True
    )
    last_number: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("last_number >= 0", name="chk_order_sequence_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<OrderSequence(tenant_id={self.tenant_id}, last_number={self.last_number})>"
