"""
Catalog Models: Category, Dish, CustomisationOption, OptionValue, DishAvailableOption.

These rows are authored by the menu management service. The ordering
engine only reads them to resolve authoritative prices.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import ActiveRowMixin, Base, BigIntPK

if TYPE_CHECKING:
    from .tenant import Tenant


class Category(ActiveRowMixin, Base):
    """
    Dish category within a restaurant menu.
    """

    __tablename__ = "dish_category"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    tenant_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("tenant.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)

    # Relationships
    tenant: Mapped["Tenant"] = relationship(back_populates="categories")
    dishes: Mapped[list["Dish"]] = relationship(back_populates="category")

    __table_args__ = (
        UniqueConstraint("tenant_id", "name", name="uq_category_tenant_name"),
    )


class Dish(ActiveRowMixin, Base):
    """
    A menu item with a base price.
    Only the options linked through DishAvailableOption may be selected for it.
    """

    __tablename__ = "dish"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    tenant_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("tenant.id"), nullable=False, index=True
    )
    category_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("dish_category.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    base_price_cents: Mapped[int] = mapped_column(Integer, nullable=False)

    # Relationships
    category: Mapped["Category"] = relationship(back_populates="dishes")
    available_options: Mapped[list["DishAvailableOption"]] = relationship(
        back_populates="dish"
    )

    __table_args__ = (
        CheckConstraint("base_price_cents >= 0", name="chk_dish_price_non_negative"),
        Index("ix_dish_tenant_active", "tenant_id", "is_active"),
    )


class CustomisationOption(ActiveRowMixin, Base):
    """
    A named axis of choice (e.g. "Size") owned by a restaurant.
    """

    __tablename__ = "customisation_option"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    tenant_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("tenant.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)

    # Relationships
    tenant: Mapped["Tenant"] = relationship(back_populates="customisation_options")
    values: Mapped[list["OptionValue"]] = relationship(back_populates="option")


class OptionValue(ActiveRowMixin, Base):
    """
    One selectable value of a customisation option.
    The extra price may be zero ("Regular").
    """

    __tablename__ = "option_value"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    tenant_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("tenant.id"), nullable=False, index=True
    )
    option_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("customisation_option.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    extra_price_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    option: Mapped["CustomisationOption"] = relationship(back_populates="values")

    __table_args__ = (
        CheckConstraint("extra_price_cents >= 0", name="chk_option_value_price_non_negative"),
    )


class DishAvailableOption(Base):
    """
    Gating relation: which customisation options a dish offers.
    """

    __tablename__ = "dish_available_option"

    dish_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("dish.id"), primary_key=True
    )
    option_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("customisation_option.id"), primary_key=True
    )

    dish: Mapped["Dish"] = relationship(back_populates="available_options")
    option: Mapped["CustomisationOption"] = relationship()
