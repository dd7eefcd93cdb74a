"""
Multi-Tenancy Model: Tenant (one restaurant account).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from sqlalchemy import Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import ActiveRowMixin, Base, BigIntPK

if TYPE_CHECKING:
    from .catalog import Category, CustomisationOption
    from .table import Table


class Tenant(ActiveRowMixin, Base):
    """
    Represents a restaurant (top-level tenant).
    All other entities belong to a tenant for complete data isolation.
    Identity is immutable; descriptive fields are edited by the account service.
    """

    __tablename__ = "tenant"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[Optional[str]] = mapped_column(Text)
    phone: Mapped[Optional[str]] = mapped_column(Text)
    address: Mapped[Optional[str]] = mapped_column(Text)
    summary: Mapped[Optional[str]] = mapped_column(Text)

    # Relationships
    categories: Mapped[list["Category"]] = relationship(back_populates="tenant")
    customisation_options: Mapped[list["CustomisationOption"]] = relationship(
        back_populates="tenant"
    )
    tables: Mapped[list["Table"]] = relationship(back_populates="tenant")

    def __repr__(self) -> str:
        return f"<Tenant(id={self.id}, name='{self.name}')>"
