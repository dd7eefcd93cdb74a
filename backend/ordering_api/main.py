"""
Ordering API main application.
Entry point for the FastAPI server.

Run with:
    uvicorn ordering_api.main:app --app-dir backend --port 8000
"""

from fastapi import FastAPI
from slowapi.errors import RateLimitExceeded

from shared.security.rate_limit import limiter, rate_limit_exceeded_handler
from ordering_api import __version__
from ordering_api.core import (
    configure_cors,
    lifespan,
    register_exception_handlers,
    register_middlewares,
)
from ordering_api.routers.public import catalog_router, health_router, orders_router
from ordering_api.routers.staff import orders_router as staff_orders_router


def create_app() -> FastAPI:
    app = FastAPI(
        title="Table Ordering API",
        description="Order ingestion, pricing and status tracking for table-side ordering",
        version=__version__,
        lifespan=lifespan,
    )

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    register_exception_handlers(app)
    register_middlewares(app)
    configure_cors(app)

    app.include_router(health_router)
    app.include_router(catalog_router)
    app.include_router(orders_router)
    app.include_router(staff_orders_router)

    return app


app = create_app()
