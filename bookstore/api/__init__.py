"""
Bookstore Services - FastAPI Backend.

HTTP surface of the books, users, cart and orders services.
"""

from .main import app, create_app, main
from .dependencies import (
    Settings,
    get_settings,
    get_service_container,
    ServiceContainer,
)
from .schemas import (
    BookCreate,
    BookUpdate,
    BookResponse,
    StockUpdate,
    UserCreate,
    UserLogin,
    UserResponse,
    TokenResponse,
    CartItemCreate,
    CartItemUpdate,
    CartResponse,
    OrderResponse,
    HealthResponse,
    ErrorResponse,
)

__all__ = [
    # Application
    "app",
    "create_app",
    "main",
    # Dependencies
    "Settings",
    "get_settings",
    "get_service_container",
    "ServiceContainer",
    # Schemas
    "BookCreate",
    "BookUpdate",
    "BookResponse",
    "StockUpdate",
    "UserCreate",
    "UserLogin",
    "UserResponse",
    "TokenResponse",
    "CartItemCreate",
    "CartItemUpdate",
    "CartResponse",
    "OrderResponse",
    "HealthResponse",
    "ErrorResponse",
]
