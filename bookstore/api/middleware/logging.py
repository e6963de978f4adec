"""
Access logging for the bookstore services.

One line per request on the "bookstore.access" logger, e.g.

    PATCH /api/books/3f2c.../stock -> 200 (4.2ms) rid=9a1b2c3d book_id=3f2c...

The request id is taken from X-Request-ID (or generated), echoed back on the
response and available to error bodies through get_request_id().
"""

import json
import time
import uuid
import logging
from typing import Optional, Callable, Set, Any
from dataclasses import dataclass, field
from contextvars import ContextVar

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

logger = logging.getLogger("bookstore.access")

# Resource identifiers echoed in access lines when the matched route has them
LOGGED_PATH_PARAMS = ("user_id", "book_id", "order_id")

BODY_METHODS = {"POST", "PUT", "PATCH"}


@dataclass
class LoggingConfig:
    """Access log options."""

    enabled: bool = True

    # Append the (redacted) JSON body of writes
    log_request_body: bool = False
    max_body_log_size: int = 2048

    excluded_paths: Set[str] = field(default_factory=lambda: {"/health"})

    # Credentials that may appear in user service bodies
    redacted_fields: Set[str] = field(default_factory=lambda: {
        "password",
        "hashed_password",
        "access_token",
    })

    slow_request_threshold: float = 1.0

    request_id_header: str = "X-Request-ID"


def redact_sensitive_data(data: Any, redacted_fields: Set[str]) -> Any:
    """Replace the values of credential fields, at any depth."""
    if isinstance(data, dict):
        return {
            key: "[REDACTED]" if key.lower() in redacted_fields
            else redact_sensitive_data(value, redacted_fields)
            for key, value in data.items()
        }
    if isinstance(data, list):
        return [redact_sensitive_data(item, redacted_fields) for item in data]
    return data


def get_request_id() -> str:
    """Request id of the request being handled, or an empty string."""
    return request_id_var.get()


def describe_body(body: bytes, config: LoggingConfig) -> Optional[str]:
    """Compact, redacted rendering of a request body for the access line."""
    if not body:
        return None
    if len(body) > config.max_body_log_size:
        return f"<{len(body)} bytes>"
    try:
        parsed = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return "<non-JSON body>"
    return json.dumps(redact_sensitive_data(parsed, config.redacted_fields), separators=(",", ":"))


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tags every request with an id and writes its access line."""

    def __init__(self, app: FastAPI, config: Optional[LoggingConfig] = None):
        super().__init__(app)
        self.config = config or LoggingConfig()

    def _level(self, status_code: int, duration: float) -> int:
        if status_code >= 500:
            return logging.ERROR
        if status_code >= 400 or duration > self.config.slow_request_threshold:
            return logging.WARNING
        return logging.INFO

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        header = self.config.request_id_header
        request_id = request.headers.get(header) or uuid.uuid4().hex[:8]
        request_id_var.set(request_id)

        if not self.config.enabled or request.url.path in self.config.excluded_paths:
            response = await call_next(request)
            response.headers[header] = request_id
            return response

        body = None
        if self.config.log_request_body and request.method in BODY_METHODS:
            body = describe_body(await request.body(), self.config)

        start = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start
        response.headers[header] = request_id

        parts = [
            f"{request.method} {request.url.path} -> {response.status_code}",
            f"({duration * 1000:.1f}ms)",
            f"rid={request_id}",
        ]
        # Filled in by the router while handling the request
        path_params = request.scope.get("path_params") or {}
        parts.extend(f"{name}={path_params[name]}" for name in LOGGED_PATH_PARAMS if name in path_params)
        if body:
            parts.append(f"body={body}")
        if duration > self.config.slow_request_threshold:
            parts.insert(0, "[SLOW]")

        logger.log(self._level(response.status_code, duration), " ".join(parts))
        return response


def setup_logging(app: FastAPI, config: Optional[LoggingConfig] = None) -> None:
    """Install the access log middleware."""
    app.add_middleware(RequestLoggingMiddleware, config=config or LoggingConfig())
