"""
Storage Module for the bookstore services

Relational storage through SQLAlchemy, one repository per owned entity:
- Books (catalog service)
- Users (users service)
- Cart items (cart service)
- Orders (orders service, written by cart checkout)
"""

from bookstore.storage.database import create_db_engine, ping
from bookstore.storage.models import Base
from bookstore.storage.book_repository import BookRepository, StoredBook
from bookstore.storage.user_repository import UserRepository, StoredUser
from bookstore.storage.cart_repository import CartRepository, StoredCart, StoredCartItem
from bookstore.storage.order_repository import OrderRepository, StoredOrder

__all__ = [
    # Engine
    "create_db_engine",
    "ping",
    "Base",
    # Repositories
    "BookRepository",
    "StoredBook",
    "UserRepository",
    "StoredUser",
    "CartRepository",
    "StoredCart",
    "StoredCartItem",
    "OrderRepository",
    "StoredOrder",
]
