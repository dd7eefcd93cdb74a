"""
Rate limiting for anonymous endpoints using slowapi.

Customers order without an account, so the public routes are keyed by
client IP. Limits come from settings so deployments can tune them.

Usage in router:
    from shared.security.rate_limit import limiter, PUBLIC_ORDER_LIMIT

    @router.post("/orders")
    @limiter.limit(PUBLIC_ORDER_LIMIT)
    def create_order(request: Request, ...):
        ...
"""

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from shared.config.constants import ErrorCode, ErrorMessages
from shared.config.logging import get_logger
from shared.config.settings import settings

logger = get_logger(__name__)

# Create limiter instance using client IP as key
limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)

PUBLIC_ORDER_LIMIT = settings.public_order_rate_limit
PUBLIC_READ_LIMIT = settings.public_read_rate_limit


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """
    Custom handler for rate limit exceeded errors.
    Returns a JSON response with retry information.
    """
    logger.warning(
        "Rate limit exceeded",
        path=request.url.path,
        client=get_remote_address(request),
        limit=str(exc.detail),
    )
    # Window length of the exceeded limit, e.g. 60 for "30/minute"
    retry_after = exc.limit.limit.get_expiry()
    return JSONResponse(
        status_code=429,
        content={
            "detail": ErrorMessages.RATE_LIMITED,
            "code": ErrorCode.RATE_LIMITED,
            "retry_after": retry_after,
        },
        headers={"Retry-After": str(retry_after)},
    )
