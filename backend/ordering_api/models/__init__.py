"""
SQLAlchemy ORM Models Package.

All models are organized into domain-specific modules:
- base: Base class and ActiveRowMixin (soft delete, timestamps)
- tenant: Tenant
- table: Table
- catalog: Category, Dish, CustomisationOption, OptionValue, DishAvailableOption
- order: Order, OrderDetail, OrderDetailCustomisationOption, OrderSequence
"""

# Base classes
from .base import Base, ActiveRowMixin

# Tenant
from .tenant import Tenant

# Tables
from .table import Table

# Catalog (menu structure, read-only for ordering)
from .catalog import (
    Category,
    Dish,
    CustomisationOption,
    OptionValue,
    DishAvailableOption,
)

# Orders
from .order import (
    Order,
    OrderDetail,
    OrderDetailCustomisationOption,
    OrderSequence,
)

__all__ = [
    # Base
    "Base",
    "ActiveRowMixin",
    # Tenant
    "Tenant",
    # Table
    "Table",
    # Catalog
    "Category",
    "Dish",
    "CustomisationOption",
    "OptionValue",
    "DishAvailableOption",
    # Order
    "Order",
    "OrderDetail",
    "OrderDetailCustomisationOption",
    "OrderSequence",
]
