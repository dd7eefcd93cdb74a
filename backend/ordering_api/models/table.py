"""
Table Model: where an order originates.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import ActiveRowMixin, Base, BigIntPK

if TYPE_CHECKING:
    from .tenant import Tenant


class Table(ActiveRowMixin, Base):
    """
    Physical table in a restaurant, addressed by the QR code customers scan.
    """

    # "table" is a reserved SQL keyword
    __tablename__ = "restaurant_table"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    tenant_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("tenant.id"), nullable=False, index=True
    )
    table_number: Mapped[str] = mapped_column(Text, nullable=False)  # "7", "Terraza-3"
    capacity: Mapped[int] = mapped_column(Integer, default=4)

    tenant: Mapped["Tenant"] = relationship(back_populates="tables")

    __table_args__ = (
        UniqueConstraint("tenant_id", "table_number", name="uq_table_tenant_number"),
    )

    def __repr__(self) -> str:
        return f"<Table(id={self.id}, tenant_id={self.tenant_id}, table_number='{self.table_number}')>"
