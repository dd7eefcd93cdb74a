"""
Catalog Services - read-only access to a restaurant's menu and tables.
"""

from .reader import (
    CatalogReader,
    SqlCatalogReader,
    DishPrice,
    OptionValuePrice,
    TableRef,
    MenuView,
    get_catalog_reader,
)

__all__ = [
    "CatalogReader",
    "SqlCatalogReader",
    "DishPrice",
    "OptionValuePrice",
    "TableRef",
    "MenuView",
    "get_catalog_reader",
]
