"""
Startup and shutdown of the ordering API.

Startup refuses insecure production configuration, makes sure the schema
exists and reports whether the database answers. Shutdown releases the
connection pool.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from shared.config.logging import rest_api_logger as logger, setup_logging
from shared.config.settings import settings
from shared.infrastructure.db import SessionLocal, engine
from shared.utils.health import HealthStatus, database_probe, run_health_check
from ordering_api.models import Base


def check_configuration() -> None:
    """
    Raises:
        RuntimeError: Insecure settings while running in production.
    """
    problems = settings.validate_production_secrets()
    for problem in problems:
        logger.error("Configuration error", error=problem)

    if not problems:
        return
    if settings.environment == "production":
        raise RuntimeError(
            f"Production configuration errors: {'; '.join(problems)}. "
            "Server will not start with insecure configuration."
        )
    logger.warning("Running with insecure defaults (acceptable for development only)")


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    check_configuration()

    logger.info(
        "Starting ordering API",
        port=settings.rest_api_port,
        env=settings.environment,
        version=app.version,
    )

    # Catalog and order tables; a no-op when they already exist
    Base.metadata.create_all(bind=engine)

    db_check = run_health_check("database", database_probe(SessionLocal))
    if db_check.status == HealthStatus.HEALTHY:
        logger.info("Database ready", latency_ms=round(db_check.latency_ms or 0, 1))
    else:
        logger.error("Database not reachable at startup", error=db_check.error)

    yield

    logger.info("Shutting down ordering API")
    engine.dispose()
