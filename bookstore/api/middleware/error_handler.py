"""
Error Handling for the bookstore services

Centralized error handling:
- Structured error responses
- Logging of errors
- Exception translation (request validation -> 400, persistence -> 500)
"""

import traceback
from datetime import datetime

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from .logging import get_request_id


class BookstoreException(Exception):
    """Base exception for bookstore errors."""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: int = 500,
        detail: str = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.detail = detail
        super().__init__(message)


class NotFoundError(BookstoreException):
    """Resource not found."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(
            message=f"{resource} not found",
            code="NOT_FOUND",
            status_code=404,
            detail=f"No {resource.lower()} with identifier '{identifier}' exists",
        )


class ValidationError(BookstoreException):
    """Input validation failed."""

    def __init__(self, message: str, detail: str = None):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            status_code=400,
            detail=detail,
        )


class AuthenticationError(BookstoreException):
    """Missing or rejected credentials."""

    def __init__(self, message: str = "Could not validate credentials"):
        super().__init__(
            message=message,
            code="AUTHENTICATION_ERROR",
            status_code=401,
        )


class PersistenceError(BookstoreException):
    """Unexpected storage failure."""

    def __init__(self, detail: str = None):
        super().__init__(
            message="Persistence error",
            code="PERSISTENCE_ERROR",
            status_code=500,
            detail=detail,
        )


def create_error_response(
    error: str,
    code: str,
    status_code: int,
    detail: str = None,
    headers: dict = None,
) -> JSONResponse:
    """Create standardized error response."""
    content = {
        "error": error,
        "code": code,
        "detail": detail,
        "timestamp": datetime.utcnow().isoformat(),
    }
    request_id = get_request_id()
    if request_id:
        content["request_id"] = request_id

    return JSONResponse(status_code=status_code, content=content, headers=headers)


def format_validation_errors(errors: list[dict]) -> str:
    """Flatten FastAPI/pydantic error entries into one readable line."""
    parts = []
    for error in errors:
        # Drop the leading "body"/"path"/"query" segment
        location = ".".join(str(p) for p in error.get("loc", ())[1:])
        message = error.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts)


def setup_exception_handlers(app):
    """Register exception handlers with FastAPI app."""

    @app.exception_handler(BookstoreException)
    async def bookstore_exception_handler(request: Request, exc: BookstoreException):
        logger.warning(f"Bookstore error: {exc.code} - {exc.message}")
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        return create_error_response(
            error=exc.message,
            code=exc.code,
            status_code=exc.status_code,
            detail=exc.detail,
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        detail = format_validation_errors(exc.errors())
        logger.warning(f"Validation error on {request.url.path}: {detail}")
        return create_error_response(
            error="Validation Error",
            code="VALIDATION_ERROR",
            status_code=400,
            detail=detail,
        )

    @app.exception_handler(SQLAlchemyError)
    async def persistence_exception_handler(request: Request, exc: SQLAlchemyError):
        logger.error(
            f"Persistence error on {request.method} {request.url.path}: "
            f"{type(exc).__name__}: {exc}"
        )
        error = PersistenceError(detail="The data store could not complete the request")
        return create_error_response(
            error=error.message,
            code=error.code,
            status_code=error.status_code,
            detail=error.detail,
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled exception: {type(exc).__name__}: {str(exc)}\n{traceback.format_exc()}"
        )
        return create_error_response(
            error="Internal Server Error",
            code="INTERNAL_ERROR",
            status_code=500,
            detail="An unexpected error occurred",
        )
