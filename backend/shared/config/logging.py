"""
Structured logging for the ordering backend.

Loggers accept keyword context next to the message:

    logger.info("Order created", tenant_id=1, order_number=42)

Production writes one JSON object per line; development writes a coloured
single line with the context appended. Both include the request ID set by
the correlation middleware.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from shared.config.settings import settings


def _context(record: logging.LogRecord) -> dict[str, Any]:
    return getattr(record, "context", None) or {}


def _request_id(record: logging.LogRecord) -> str | None:
    request_id = getattr(record, "request_id", None)
    return request_id if request_id and request_id != "-" else None


class JsonFormatter(logging.Formatter):
    """One JSON document per record, for log aggregation."""

    def __init__(self, include_source: bool = False):
        super().__init__()
        self._include_source = include_source

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        request_id = _request_id(record)
        if request_id:
            entry["request_id"] = request_id
        context = _context(record)
        if context:
            entry["context"] = context
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        if self._include_source:
            entry["source"] = f"{record.pathname}:{record.lineno} in {record.funcName}"
        return json.dumps(entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """Coloured human-readable lines for local development."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"
    DIM = "\033[2m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, self.RESET)
        clock = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        parts = [f"{color}[{clock}] {record.levelname:8}{self.RESET}"]
        request_id = _request_id(record)
        if request_id:
            parts.append(f"{self.DIM}[{request_id[:8]}]{self.RESET}")
        parts.append(f"{record.name}: {record.getMessage()}")

        line = " ".join(parts)
        context = _context(record)
        if context:
            line += " (" + " | ".join(f"{key}={value}" for key, value in context.items()) + ")"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class StructuredLogger(logging.Logger):
    """Logger whose level methods take keyword context instead of `extra`."""

    def _emit(self, level: int, msg: str, args: tuple, exc_info: Any = None, **context: Any) -> None:
        if self.isEnabledFor(level):
            self._log(level, msg, args, exc_info=exc_info, extra={"context": context})

    def debug(self, msg: str, *args: Any, **context: Any) -> None:
        self._emit(logging.DEBUG, msg, args, **context)

    def info(self, msg: str, *args: Any, **context: Any) -> None:
        self._emit(logging.INFO, msg, args, **context)

    def warning(self, msg: str, *args: Any, **context: Any) -> None:
        self._emit(logging.WARNING, msg, args, **context)

    def error(self, msg: str, *args: Any, **context: Any) -> None:
        self._emit(logging.ERROR, msg, args, **context)

    def critical(self, msg: str, *args: Any, **context: Any) -> None:
        self._emit(logging.CRITICAL, msg, args, **context)


logging.setLoggerClass(StructuredLogger)


def setup_logging() -> None:
    """
    Install the root handler. Call once at application startup.
    """
    # Deferred: correlation imports FastAPI, settings must not
    from shared.infrastructure.correlation import CorrelationIdFilter

    level = logging.DEBUG if settings.debug else logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.addFilter(CorrelationIdFilter())
    if settings.environment == "production":
        handler.setFormatter(JsonFormatter(include_source=settings.debug))
    else:
        handler.setFormatter(ConsoleFormatter())

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    for noisy, noisy_level in (
        ("uvicorn.access", logging.WARNING),
        ("sqlalchemy.engine", logging.WARNING),
        ("httpx", logging.WARNING),
    ):
        logging.getLogger(noisy).setLevel(noisy_level)


def get_logger(name: str) -> StructuredLogger:
    """
    Usage:
        from shared.config.logging import get_logger
        logger = get_logger(__name__)
        logger.warning("Order number reservation conflict", tenant_id=1, attempt=2)
    """
    return logging.getLogger(name)  # type: ignore


def mask_customer_name(name: str | None) -> str:
    """
    Customers are anonymous walk-ins; logs keep only the first letter of
    the name they typed.
    """
    if not name:
        return "<no-name>"
    return f"{name[0]}***"


rest_api_logger = get_logger("ordering_api")
public_logger = get_logger("ordering_api.public")
security_audit_logger = get_logger("security.audit")


def audit_access_event(
    event_type: str,
    user_id: int | str | None = None,
    tenant_id: int | None = None,
    success: bool = True,
    reason: str | None = None,
    **extra: Any,
) -> None:
    """
    Record an Access Guard decision on a staff route.

    Args:
        event_type: TENANT_ACCESS or ROLE_CHECK
        user_id: Staff user from the token, if known
        tenant_id: Tenant in the request path
        success: Whether access was granted
        reason: Why access was denied
        **extra: Additional context
    """
    log = security_audit_logger.info if success else security_audit_logger.warning
    log(
        f"ACCESS_AUDIT: {event_type}",
        event_type=event_type,
        user_id=user_id,
        tenant_id=tenant_id,
        success=success,
        reason=reason,
        **extra,
    )
