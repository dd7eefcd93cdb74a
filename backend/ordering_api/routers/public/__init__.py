"""
Public (anonymous) routers.
"""

from .health import router as health_router
from .catalog import router as catalog_router
from .orders import router as orders_router

__all__ = ["health_router", "catalog_router", "orders_router"]
