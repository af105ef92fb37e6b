"""
Application exceptions and the global exception handlers for the FastAPI app.
Every error response is serialized as {"error": {...}}.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
from typing import Any


logger = logging.getLogger(__name__)


class AppException(Exception):
    """Base application exception."""
    def __init__(self, message: str, status_code: int = 500, details: Any = None):
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class NotFoundError(AppException):
    """Raised when a referenced staff member, service, leave or holiday does not exist."""
    def __init__(self, message: str, details: Any = None):
        super().__init__(message, status.HTTP_404_NOT_FOUND, details)


class InvalidInputError(AppException):
    """Raised for input the domain rejects (negative targets, bad rule sets, inverted ranges)."""
    def __init__(self, message: str, details: Any = None):
        super().__init__(message, status.HTTP_400_BAD_REQUEST, details)


class StoreUnavailableError(AppException):
    """Raised when the relational store cannot serve a read or write."""
    def __init__(self, message: str = "Data store unavailable", details: Any = None):
        super().__init__(message, status.HTTP_503_SERVICE_UNAVAILABLE, details)


class ExternalServiceError(AppException):
    """Raised when an upstream feed is unreachable or returns malformed data."""
    def __init__(self, message: str, details: Any = None):
        super().__init__(message, status.HTTP_502_BAD_GATEWAY, details)


def _error_response(request: Request, status_code: int, message: Any, /, **fields: Any) -> JSONResponse:
    """Every error leaves the API as {"error": {"message", ..., "path"}}."""
    error = {"message": message, **fields, "path": request.url.path}
    return JSONResponse(status_code=status_code, content={"error": error})


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Domain errors: client mistakes are warnings, upstream and store failures are errors."""
    level = logging.WARNING if exc.status_code < 500 else logging.ERROR
    logger.log(
        level,
        f"{type(exc).__name__}: {exc.message}",
        extra={"status_code": exc.status_code, "path": request.url.path, "details": exc.details},
    )
    return _error_response(request, exc.status_code, exc.message, details=exc.details)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger.warning(
        f"HTTP exception: {exc.detail}",
        extra={"status_code": exc.status_code, "path": request.url.path},
    )
    return _error_response(request, exc.status_code, exc.detail, status_code=exc.status_code)


def _serialize_validation_errors(errors: list) -> list:
    """Make pydantic error entries JSON-safe; ctx may carry the raised ValueError."""
    serialized = []
    for error in errors:
        entry = {}
        for key, value in error.items():
            if key == "ctx" and isinstance(value, dict):
                entry[key] = {
                    ctx_key: str(ctx_value) if isinstance(ctx_value, Exception) else ctx_value
                    for ctx_key, ctx_value in value.items()
                }
            elif isinstance(value, Exception):
                entry[key] = str(value)
            else:
                entry[key] = value
        serialized.append(entry)
    return serialized


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = _serialize_validation_errors(exc.errors())
    logger.warning(f"Validation error on {request.url.path}", extra={"errors": errors})
    return _error_response(request, status.HTTP_422_UNPROCESSABLE_ENTITY, "Validation error", details=errors)


async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Store failures that reached the API are reported as 503."""
    logger.error(
        f"Database error: {exc}",
        extra={"path": request.url.path, "exception_type": type(exc).__name__},
    )
    return _error_response(request, status.HTTP_503_SERVICE_UNAVAILABLE, StoreUnavailableError().message)


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        f"Unhandled exception: {exc}",
        extra={"path": request.url.path, "exception_type": type(exc).__name__},
    )
    return _error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
