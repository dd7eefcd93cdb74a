"""
Cross-origin access for the two browser clients of the API:
the customer menu app (public routes) and the staff dashboard.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.config.settings import settings


# Local dev servers of the menu app and the dashboard
DEV_ORIGINS = (
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
)

# Idempotency-Key lets the menu app retry checkout safely
REQUEST_HEADERS = (
    "Accept",
    "Accept-Language",
    "Authorization",
    "Content-Type",
    "Idempotency-Key",
    "X-Request-ID",
)

PREFLIGHT_MAX_AGE = 600


def parse_origins(raw: str) -> list[str]:
    """Split the comma-separated ALLOWED_ORIGINS value, dropping blanks."""
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def get_cors_origins() -> list[str]:
    """Configured origins, or the local dev servers when none are set."""
    configured = parse_origins(settings.allowed_origins)
    return configured or list(DEV_ORIGINS)


def configure_cors(app: FastAPI) -> None:
    """Configure CORS middleware on the FastAPI application."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_cors_origins(),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=list(REQUEST_HEADERS),
        expose_headers=["X-Request-ID"],
        # No preflight caching while developing so header changes show up at once
        max_age=0 if settings.environment == "development" else PREFLIGHT_MAX_AGE,
    )
