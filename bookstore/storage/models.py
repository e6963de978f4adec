"""
Database models for the bookstore services.

Each service is the only writer of its own table. Cross-service references
(cart item -> book, order -> user) are plain identifiers without foreign keys.
"""

from datetime import datetime

from sqlalchemy import (
    Column,
    String,
    Integer,
    Float,
    Text,
    DateTime,
    Boolean,
    JSON,
    Index,
    UniqueConstraint,
    CheckConstraint,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class BookModel(Base):
    """Catalog entry owned by the books service."""

    __tablename__ = "books"

    id = Column(String(36), primary_key=True)  # UUID

    title = Column(String(500), nullable=False, index=True)
    author = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=False)
    category = Column(String(100), nullable=False, index=True)

    price = Column(Float, nullable=False)
    stock = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_books_price_non_negative"),
        CheckConstraint("stock >= 0", name="ck_books_stock_non_negative"),
        Index("idx_books_title_author", "title", "author"),
    )


class User(Base):
    """User model for authentication."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True)  # UUID
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    name = Column(String(255))
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)


class CartItemModel(Base):
    """One line of a user's cart. Title and price are snapshots taken when added."""

    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), nullable=False, index=True)
    book_id = Column(String(36), nullable=False)
    title = Column(String(500), nullable=False)
    price = Column(Float, nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    added_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("user_id", "book_id", name="uq_cart_items_user_book"),
        CheckConstraint("quantity >= 1", name="ck_cart_items_quantity_positive"),
    )


class OrderModel(Base):
    """Finalized order created by cart checkout."""

    __tablename__ = "orders"

    id = Column(String(36), primary_key=True)  # UUID
    user_id = Column(String(36), nullable=False, index=True)
    status = Column(String(20), nullable=False, default="pending")

    # Line item snapshot (JSON array of {book_id, title, price, quantity})
    items = Column(JSON, nullable=False, default=list)
    total = Column(Float, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)
