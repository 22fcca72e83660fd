"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain and framework
exceptions to HTTP responses with one JSON error shape:
``{"error": <code>, "message": <text>, "details": {...}}``.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from vendorflow.core.config import get_settings
from vendorflow.domain.exceptions import VendorFlowException

logger = logging.getLogger(__name__)

# Map domain error_code to HTTP status
_ERROR_CODE_STATUS: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "PERMISSION_DENIED": 403,
    "RESOURCE_NOT_FOUND": 404,
    "DEPTH_EXCEEDED": 409,
    "CONFLICT": 409,
    "SHARE_EXPIRED": 410,
    "STORAGE_ERROR": 502,
}


def _route_path(request: Request) -> str:
    """Route template (e.g. /chains/access/{token}); raw paths may carry share tokens."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or "<unmatched>"


def _vendorflow_exception_handler(
    request: Request, exc: VendorFlowException
) -> JSONResponse:
    status = _ERROR_CODE_STATUS.get(exc.error_code, 400)
    if status >= 500:
        logger.error("Storage failure on %s %s: %s", request.method, _route_path(request), exc.message)
    else:
        logger.debug("Rejected %s %s: %s", request.method, _route_path(request), exc.error_code)
    return JSONResponse(status_code=status, content=exc.to_dict())


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 422 with pydantic's error list."""
    return JSONResponse(
        status_code=422,
        content={
            "error": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": jsonable_encoder(exc.errors()),
        },
    )


def _rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning("Rate limit hit on %s %s", request.method, _route_path(request))
    return JSONResponse(
        status_code=429,
        content={
            "error": "RATE_LIMITED",
            "message": "Too many requests",
            "details": {"limit": str(exc.detail)},
        },
    )


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "HTTP_ERROR", "message": exc.detail},
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception on %s %s", request.method, _route_path(request))
    detail: Any = str(exc) if get_settings().debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_ERROR", "message": detail},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Handlers: VendorFlowException (and subclasses), RequestValidationError,
    RateLimitExceeded, StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(VendorFlowException, _vendorflow_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
