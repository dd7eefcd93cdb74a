"""
Repository layer: tenant-scoped data access.
"""

from .base import RepositoryFilters, TenantRepository, require_tenant
from .order import OrderRepository, OrderFilters, get_order_repository

__all__ = [
    "TenantRepository",
    "RepositoryFilters",
    "require_tenant",
    "OrderRepository",
    "OrderFilters",
    "get_order_repository",
]
