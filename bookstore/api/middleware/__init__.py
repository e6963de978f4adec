"""
API middleware components.

Provides cross-cutting concerns for the API:
- Error handling
- CORS for the browser frontend
- Access logging with request ids
"""

from .logging import (
    LoggingConfig,
    RequestLoggingMiddleware,
    setup_logging,
    get_request_id,
    redact_sensitive_data,
)

from .error_handler import (
    BookstoreException,
    NotFoundError,
    ValidationError,
    AuthenticationError,
    PersistenceError,
    setup_exception_handlers,
    create_error_response,
)

from .cors import (
    allowed_origins,
    setup_cors,
)


__all__ = [
    # Error handling
    "BookstoreException",
    "NotFoundError",
    "ValidationError",
    "AuthenticationError",
    "PersistenceError",
    "setup_exception_handlers",
    "create_error_response",
    # CORS
    "allowed_origins",
    "setup_cors",
    # Logging
    "LoggingConfig",
    "RequestLoggingMiddleware",
    "setup_logging",
    "get_request_id",
    "redact_sensitive_data",
]
