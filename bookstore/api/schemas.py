"""
API Schemas for the bookstore services

Pydantic models for request validation and response serialization:
- Book models
- User/auth models
- Cart and order models

Numeric fields run in pydantic's lax mode, so JSON numeric strings
("9.99", "5") are accepted and come out as numbers.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, field_validator

# Largest value an INTEGER column holds on every supported database
MAX_INTEGER = 2**31 - 1


# =============================================================================
# Book Schemas
# =============================================================================

class BookBase(BaseModel):
    """Base book fields."""

    title: str = Field(..., min_length=1, max_length=500)
    author: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1, max_length=100)


class BookCreate(BookBase):
    """Book creation request."""

    price: float = Field(..., ge=0, allow_inf_nan=False)
    stock: int = Field(0, ge=0, le=MAX_INTEGER)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Dune",
                "author": "Frank Herbert",
                "description": "Politics and prophecy on a desert planet.",
                "category": "Science Fiction",
                "price": 9.99,
                "stock": 12,
            }
        }
    )


class BookUpdate(BaseModel):
    """Book update request (partial)."""

    title: Optional[str] = Field(None, min_length=1, max_length=500)
    author: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    price: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    stock: Optional[int] = Field(None, ge=0, le=MAX_INTEGER)


class StockUpdate(BaseModel):
    """Stock level replacement."""

    stock: int = Field(..., ge=0, le=MAX_INTEGER)


class BookResponse(BookBase):
    """Book response model."""

    id: str
    price: float
    stock: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# =============================================================================
# User Schemas
# =============================================================================

class UserCredentials(BaseModel):
    """Email is compared case-insensitively, so it is stored lower-cased."""

    email: EmailStr

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.lower()


class UserCreate(UserCredentials):
    password: str = Field(..., min_length=6, max_length=128)
    name: Optional[str] = Field(None, max_length=255)


class UserLogin(UserCredentials):
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    id: str
    email: str
    name: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


# =============================================================================
# Cart Schemas
# =============================================================================

class CartItemCreate(BaseModel):
    """Item added to a cart. Title and price are snapshots supplied by the caller."""

    book_id: str = Field(..., validation_alias=AliasChoices("book_id", "bookId"))
    title: str = Field(..., min_length=1, max_length=500)
    price: float = Field(..., ge=0, allow_inf_nan=False)
    quantity: int = Field(1, ge=1, le=MAX_INTEGER)

    @field_validator("book_id")
    @classmethod
    def book_id_is_identifier(cls, value: str) -> str:
        try:
            return str(UUID(value))
        except ValueError:
            raise ValueError("Invalid book ID format")


class CartItemUpdate(BaseModel):
    quantity: int = Field(..., ge=1, le=MAX_INTEGER)


class CartItemResponse(BaseModel):
    book_id: str
    title: str
    price: float
    quantity: int

    model_config = ConfigDict(from_attributes=True)


class CartResponse(BaseModel):
    user_id: str
    items: list[CartItemResponse]
    total_items: int
    total_price: float

    model_config = ConfigDict(from_attributes=True)


# =============================================================================
# Order Schemas
# =============================================================================

class OrderItem(BaseModel):
    book_id: str
    title: str
    price: float
    quantity: int


class OrderResponse(BaseModel):
    id: str
    user_id: str
    status: str
    items: list[OrderItem]
    total: float
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# =============================================================================
# Misc
# =============================================================================

class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    detail: Optional[str] = None
    code: str
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    request_id: Optional[str] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "Book not found",
                "detail": "No book with identifier '0b6f3c0e-7d0c-4a43-9d0e-5f1f7b0f2a11' exists",
                "code": "NOT_FOUND",
                "timestamp": "2025-01-20T12:00:00Z",
            }
        }
    )


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "healthy"
    version: str
    services: list[str]
    components: dict[str, str] = Field(default_factory=dict)
