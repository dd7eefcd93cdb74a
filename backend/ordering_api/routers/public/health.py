"""
Liveness and readiness probes.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from shared.config.settings import settings
from shared.infrastructure.db import SessionLocal
from shared.utils.health import HealthStatus, database_probe, run_health_checks


SERVICE_NAME = "ordering-api"

router = APIRouter(prefix="/api", tags=["health"])


def _identity() -> dict:
    return {"service": SERVICE_NAME, "environment": settings.environment}


@router.get("/health")
def health_check():
    """Liveness: the process answers. Touches no dependency."""
    return {"status": HealthStatus.HEALTHY.value, **_identity()}


@router.get("/health/detailed")
def detailed_health_check():
    """Readiness: 200 when the database answers, 503 otherwise."""
    report = run_health_checks({"database": database_probe(SessionLocal)})
    body = {**_identity(), "status": report["status"], "dependencies": report["components"]}

    if report["status"] == HealthStatus.HEALTHY.value:
        return body
    return JSONResponse(status_code=503, content=body)
