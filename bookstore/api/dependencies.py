"""
Dependency injection for FastAPI routes.

Provides injectable dependencies for:
- Configuration
- Repositories and the book event notifier
- Path identifier validation
- Request context
"""

import os
from typing import Optional
from functools import lru_cache
from dataclasses import dataclass, field
from uuid import UUID

from fastapi import Depends, Request
from sqlalchemy.engine import Engine

from .middleware.error_handler import ValidationError
from ..events.notifier import NotificationSink, BookEventNotifier, create_notification_sink


# =============================================================================
# Configuration
# =============================================================================

ALL_SERVICES = ("books", "users", "cart", "orders")

# Default port per service when run as separate processes
DEFAULT_PORTS = {
    "books": 3008,
    "users": 3002,
    "cart": 3003,
    "orders": 3004,
}


def _parse_services(value: str) -> tuple[str, ...]:
    names = tuple(s.strip().lower() for s in value.split(",") if s.strip())
    unknown = [s for s in names if s not in ALL_SERVICES]
    if unknown:
        raise ValueError(f"Unknown service(s): {', '.join(unknown)}")
    return names


@dataclass
class Settings:
    """Application settings loaded from environment."""

    # Database
    database_url: str = "sqlite:///./bookstore.db"
    database_echo: bool = False

    # Messaging
    rabbitmq_url: Optional[str] = None
    events_exchange: str = "bookstore_events"

    # Authentication
    jwt_secret_key: str = "dev-secret-change-me"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60

    # Services mounted by this process
    enabled_services: tuple[str, ...] = field(default=ALL_SERVICES)

    # Extra browser origins on top of the dev servers
    cors_allowed_origins: tuple[str, ...] = ()

    # Environment
    environment: str = "development"
    debug: bool = True

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables."""
        return cls(
            database_url=os.getenv("DATABASE_URL", cls.database_url),
            database_echo=os.getenv("DATABASE_ECHO", "false").lower() == "true",
            rabbitmq_url=os.getenv("RABBITMQ_URL") or None,
            events_exchange=os.getenv("EVENTS_EXCHANGE", cls.events_exchange),
            jwt_secret_key=os.getenv("JWT_SECRET_KEY", cls.jwt_secret_key),
            jwt_algorithm=os.getenv("JWT_ALGORITHM", cls.jwt_algorithm),
            access_token_expire_minutes=int(
                os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", cls.access_token_expire_minutes)
            ),
            enabled_services=_parse_services(
                os.getenv("BOOKSTORE_SERVICES", ",".join(ALL_SERVICES))
            ),
            cors_allowed_origins=tuple(
                origin.strip()
                for origin in os.getenv("CORS_ALLOWED_ORIGINS", "").split(",")
                if origin.strip()
            ),
            environment=os.getenv("BOOKSTORE_ENV", cls.environment),
            debug=os.getenv("DEBUG", "true").lower() == "true",
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings.from_env()


# =============================================================================
# Service Container (Lazy Loading)
# =============================================================================

class ServiceContainer:
    """
    Container for lazy-loaded service instances.

    One container lives on `app.state.services`. The notification sink is
    handed in explicitly; nothing here is module-global.
    """

    def __init__(self, settings: Settings, notification_sink: Optional[NotificationSink] = None):
        self.settings = settings
        self._engine: Optional[Engine] = None
        self._book_repository = None
        self._user_repository = None
        self._cart_repository = None
        self._order_repository = None
        self._notification_sink = notification_sink
        self._book_notifier = None

    @property
    def engine(self) -> Engine:
        """Shared database engine."""
        if self._engine is None:
            from ..storage.database import create_db_engine
            self._engine = create_db_engine(
                self.settings.database_url,
                echo=self.settings.database_echo,
            )
        return self._engine

    @property
    def book_repository(self):
        """Get book repository instance."""
        if self._book_repository is None:
            from ..storage.book_repository import BookRepository
            self._book_repository = BookRepository(self.engine)
        return self._book_repository

    @property
    def user_repository(self):
        """Get user repository instance."""
        if self._user_repository is None:
            from ..storage.user_repository import UserRepository
            self._user_repository = UserRepository(self.engine)
        return self._user_repository

    @property
    def cart_repository(self):
        """Get cart repository instance."""
        if self._cart_repository is None:
            from ..storage.cart_repository import CartRepository
            self._cart_repository = CartRepository(self.engine)
        return self._cart_repository

    @property
    def order_repository(self):
        """Get order repository instance."""
        if self._order_repository is None:
            from ..storage.order_repository import OrderRepository
            self._order_repository = OrderRepository(self.engine)
        return self._order_repository

    @property
    def notification_sink(self) -> NotificationSink:
        """Get the sink for book events."""
        if self._notification_sink is None:
            self._notification_sink = create_notification_sink(
                self.settings.rabbitmq_url,
                self.settings.events_exchange,
            )
        return self._notification_sink

    @property
    def book_notifier(self) -> BookEventNotifier:
        """Get book event notifier instance."""
        if self._book_notifier is None:
            self._book_notifier = BookEventNotifier(self.notification_sink)
        return self._book_notifier

    def close(self) -> None:
        """Release broker and database resources."""
        if self._notification_sink is not None:
            self._notification_sink.close()
        if self._engine is not None:
            self._engine.dispose()


def get_service_container(request: Request) -> ServiceContainer:
    """Get the container attached to the running application."""
    return request.app.state.services


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


# =============================================================================
# Individual Service Dependencies
# =============================================================================

def get_book_repository(
    container: ServiceContainer = Depends(get_service_container),
):
    """Dependency for book repository."""
    return container.book_repository


def get_user_repository(
    container: ServiceContainer = Depends(get_service_container),
):
    """Dependency for user repository."""
    return container.user_repository


def get_cart_repository(
    container: ServiceContainer = Depends(get_service_container),
):
    """Dependency for cart repository."""
    return container.cart_repository


def get_order_repository(
    container: ServiceContainer = Depends(get_service_container),
):
    """Dependency for order repository."""
    return container.order_repository


def get_book_notifier(
    container: ServiceContainer = Depends(get_service_container),
) -> BookEventNotifier:
    """Dependency for book event notifier."""
    return container.book_notifier


# =============================================================================
# Identifier Validation
# =============================================================================

def require_identifier(value: str, resource: str) -> str:
    """
    Validate a path identifier before it reaches storage.

    Args:
        value: Raw identifier from the URL
        resource: Human-readable resource name for the error message

    Returns:
        Canonical UUID string

    Raises:
        ValidationError: If the identifier is not a UUID
    """
    try:
        return str(UUID(value))
    except (ValueError, TypeError):
        raise ValidationError(
            f"Invalid {resource} ID format",
            detail=f"'{value}' is not a valid identifier",
        )


# =============================================================================
# Request Context Dependencies
# =============================================================================

async def get_client_ip(request: Request) -> str:
    """Extract client IP from request, considering proxies."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    if request.client:
        return request.client.host

    return "unknown"
