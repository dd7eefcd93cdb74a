"""
HTTP middlewares of the ordering API.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from shared.config.constants import ErrorCode
from shared.config.settings import settings
from shared.infrastructure.correlation import CorrelationIdMiddleware


# The API only ever returns JSON, so the policy forbids loading anything
BASE_SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
}

HSTS_VALUE = "max-age=31536000; includeSubDomains"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers.update(BASE_SECURITY_HEADERS)
        if settings.environment == "production":
            response.headers["Strict-Transport-Security"] = HSTS_VALUE
        if "server" in response.headers:
            del response.headers["server"]
        return response


class JsonBodyOnlyMiddleware(BaseHTTPMiddleware):
    """
    Reject POST/PUT/PATCH bodies declared as anything but JSON with 415.
    A missing Content-Type is left to request validation.
    """

    async def dispatch(self, request: Request, call_next):
        if request.method in ("POST", "PUT", "PATCH"):
            content_type = request.headers.get("content-type", "")
            if content_type and not content_type.lower().startswith("application/json"):
                return JSONResponse(
                    status_code=415,
                    content={
                        "detail": "Tipo de contenido no soportado. Use application/json",
                        "code": ErrorCode.VALIDATION_ERROR,
                    },
                )
        return await call_next(request)


def register_middlewares(app: FastAPI) -> None:
    # Starlette runs the last one added first: correlation wraps everything
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(JsonBodyOnlyMiddleware)
    app.add_middleware(CorrelationIdMiddleware)
