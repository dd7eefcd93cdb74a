"""
Dependency probes shared by the health endpoints, startup and the CLI.

A probe is a zero-argument callable; raising means the dependency is down.

    report = run_health_checks({"database": database_probe(SessionLocal)})
    # {"status": "healthy", "components": {"database": {"status": "healthy", ...}}}
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping

from sqlalchemy import text

from shared.config.logging import get_logger

logger = get_logger(__name__)

Probe = Callable[[], Any]


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    DEGRADED = "degraded"


@dataclass
class HealthCheckResult:
    component: str
    status: HealthStatus
    latency_ms: float | None = None
    # Exception class name only; the message may contain hosts or credentials
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"component": self.component, "status": self.status.value}
        if self.latency_ms is not None:
            body["latency_ms"] = round(self.latency_ms, 2)
        if self.error:
            body["error"] = self.error
        return body


def run_health_check(component: str, probe: Probe) -> HealthCheckResult:
    started = time.perf_counter()
    try:
        probe()
    except Exception as e:
        elapsed = (time.perf_counter() - started) * 1000
        logger.warning("Health check failed", component=component, error=str(e), latency_ms=elapsed)
        return HealthCheckResult(component, HealthStatus.UNHEALTHY, elapsed, type(e).__name__)
    return HealthCheckResult(component, HealthStatus.HEALTHY, (time.perf_counter() - started) * 1000)


def run_health_checks(probes: Mapping[str, Probe]) -> dict[str, Any]:
    """Overall status is "degraded" as soon as one component is unhealthy."""
    results = [run_health_check(name, probe) for name, probe in probes.items()]
    healthy = all(result.status == HealthStatus.HEALTHY for result in results)
    return {
        "status": (HealthStatus.HEALTHY if healthy else HealthStatus.DEGRADED).value,
        "components": {result.component: result.to_dict() for result in results},
    }


def database_probe(session_factory: Callable[[], Any]) -> Probe:
    """SELECT 1 on a fresh session from `session_factory`."""

    def probe() -> None:
        with session_factory() as db:
            db.execute(text("SELECT 1"))

    return probe
