"""
Exception handlers.

Every error body has the same shape: {"detail": <message>, "code": <CODE>}.
AppException subclasses already logged themselves when constructed.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from shared.config.constants import ErrorCode, ErrorMessages
from shared.config.logging import rest_api_logger as logger
from shared.utils.exceptions import AppException
from shared.utils.schemas import ErrorResponse


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(detail=exc.detail, code=exc.code).model_dump(),
        headers=exc.headers,
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    # Storage errors may carry SQL and parameters; only the log sees them
    logger.error(
        "Unhandled error",
        path=request.url.path,
        method=request.method,
        error_type=type(exc).__name__,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            detail=ErrorMessages.INTERNAL_ERROR, code=ErrorCode.INTERNAL_ERROR
        ).model_dump(),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register the JSON error handlers on the FastAPI application."""
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
