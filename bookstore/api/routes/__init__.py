"""
API Routes for the bookstore services

Route modules, one per service:
- books: Catalog CRUD, search and stock
- users: Registration, login, current profile
- cart: Per-user cart and checkout
- orders: Order lookup
"""

from bookstore.api.routes.books import router as books_router
from bookstore.api.routes.users import router as users_router
from bookstore.api.routes.cart import router as cart_router
from bookstore.api.routes.orders import router as orders_router

__all__ = [
    "books_router",
    "users_router",
    "cart_router",
    "orders_router",
]
