"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain and framework
exceptions to HTTP responses. Domain exceptions carry an ErrorKind; the
status code is decided here, never in the core.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from rolegate.core.config import get_settings
from rolegate.domain.enums import ErrorKind
from rolegate.domain.exceptions import RolegateException, SqlNotConfiguredException

logger = logging.getLogger(__name__)

_KIND_STATUS: dict[ErrorKind, int] = {
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.BAD_REQUEST: 400,
    ErrorKind.INFRASTRUCTURE: 500,
}


def status_for_kind(kind: ErrorKind) -> int:
    """Return the HTTP status for an error kind (500 for anything unmapped)."""
    return _KIND_STATUS.get(kind, 500)


def _rolegate_exception_handler(
    request: Request, exc: RolegateException
) -> JSONResponse:
    """Return JSON from RolegateException.to_dict() with the kind's status code."""
    if isinstance(exc, SqlNotConfiguredException):
        return JSONResponse(status_code=503, content=exc.to_dict())
    status = status_for_kind(exc.kind)
    if exc.kind is ErrorKind.INFRASTRUCTURE:
        logger.error("Infrastructure failure: %s", exc.message)
        if not get_settings().debug:
            return JSONResponse(
                status_code=status,
                content={
                    "error": exc.error_code,
                    "kind": exc.kind.value,
                    "message": "Internal server error",
                },
            )
    headers = {"WWW-Authenticate": "Bearer"} if status == 401 else None
    return JSONResponse(status_code=status, content=exc.to_dict(), headers=headers)


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 422 with validation error details."""
    return JSONResponse(
        status_code=422,
        content={
            "error": "VALIDATION_ERROR",
            "kind": ErrorKind.BAD_REQUEST.value,
            "message": "Request validation failed",
            "details": exc.errors(),
        },
    )


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return JSON for Starlette HTTP exceptions (status + detail)."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "HTTP_ERROR", "message": exc.detail},
    )


def _sqlalchemy_exception_handler(
    request: Request, exc: SQLAlchemyError
) -> JSONResponse:
    """Return 500 for store failures; the driver message is shown only in debug."""
    logger.exception("Database error: %s", exc)
    detail: Any = str(exc) if get_settings().debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={
            "error": "INFRASTRUCTURE_ERROR",
            "kind": ErrorKind.INFRASTRUCTURE.value,
            "message": detail,
        },
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    settings = get_settings()
    detail: Any = str(exc) if settings.debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_ERROR", "message": detail},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Call once after creating the app. Handlers: RolegateException (and
    subclasses), RequestValidationError, StarletteHTTPException,
    SQLAlchemyError, generic Exception.
    """
    app.add_exception_handler(RolegateException, _rolegate_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(SQLAlchemyError, _sqlalchemy_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
