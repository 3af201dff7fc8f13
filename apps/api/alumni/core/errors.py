"""Standardized error responses across all API endpoints."""
from typing import Any

import sentry_sdk
import structlog
from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ConflictError(Exception):
    """Raised by services when a write collides with existing state (HTTP 409)."""


class ErrorResponse(BaseModel):
    """Standard error envelope returned by all API error handlers."""
    error: str
    message: str
    detail: Any = None
    request_id: str = "unknown"


logger = structlog.get_logger()


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch unhandled exceptions and return a consistent JSON envelope."""
    request_id = request.headers.get("x-request-id", "unknown")

    logger.error(
        "unhandled_exception",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
        method=request.method,
        request_id=request_id,
    )

    sentry_sdk.capture_exception(exc)

    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="internal_server_error",
            message="Something went wrong. Please try again.",
            request_id=request_id,
        ).model_dump(),
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Standardize HTTPException responses into the same JSON envelope."""
    request_id = request.headers.get("x-request-id", "unknown")

    if isinstance(exc.detail, dict):
        error = exc.detail.get("error", f"http_{exc.status_code}")
        message = exc.detail.get("message", str(exc.detail))
        detail: Any = exc.detail.get("detail")
    else:
        error = f"http_{exc.status_code}"
        message = str(exc.detail)
        # Plain-string detail stays available under "detail" for clients
        detail = exc.detail

    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=error, message=message, detail=detail, request_id=request_id
        ).model_dump(),
        headers=dict(exc.headers or {}),
    )


_SERVICE_ERROR_STATUS: tuple[tuple[type[Exception], int], ...] = (
    (LookupError, 404),
    (PermissionError, 403),
    (ConflictError, 409),
    (ValueError, 422),
)


def service_error_to_http(exc: Exception) -> HTTPException:
    """Translate a service-layer exception into the matching HTTPException.

    Services signal outcomes with builtin exceptions: LookupError for a
    missing or out-of-scope row, PermissionError for a role check,
    ConflictError for a state collision and ValueError for bad input.
    """
    for exc_type, status_code in _SERVICE_ERROR_STATUS:
        if isinstance(exc, exc_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    raise exc
