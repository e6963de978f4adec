"""
Cart API Routes

Per-user carts: read, add, change quantity, remove and checkout.
"""

from fastapi import APIRouter, Depends, status
from loguru import logger

from bookstore.api.schemas import (
    CartItemCreate,
    CartItemUpdate,
    CartResponse,
    OrderResponse,
    ErrorResponse,
)
from bookstore.api.dependencies import get_cart_repository, require_identifier
from bookstore.api.middleware.error_handler import NotFoundError, ValidationError


router = APIRouter(prefix="/cart", tags=["cart"])


@router.get(
    "/{user_id}",
    response_model=CartResponse,
    responses={400: {"model": ErrorResponse, "description": "Invalid user ID format"}},
)
def get_cart(
    user_id: str,
    repo = Depends(get_cart_repository),
):
    """Get the cart of a user; empty if nothing was added yet."""
    user_id = require_identifier(user_id, "user")
    return CartResponse.model_validate(repo.get_cart(user_id))


@router.post(
    "/{user_id}/items",
    response_model=CartResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse, "description": "Invalid item"}},
)
def add_item(
    user_id: str,
    item: CartItemCreate,
    repo = Depends(get_cart_repository),
):
    """Add a book to the cart, or increase its quantity if already there."""
    user_id = require_identifier(user_id, "user")
    logger.info(f"Adding {item.quantity} x {item.book_id} to cart of {user_id}")

    cart = repo.add_item(
        user_id,
        item.book_id,
        title=item.title,
        price=item.price,
        quantity=item.quantity,
    )
    return CartResponse.model_validate(cart)


@router.put(
    "/{user_id}/items/{book_id}",
    response_model=CartResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid ID or quantity"},
        404: {"model": ErrorResponse, "description": "Book not in cart"},
    },
)
def update_item_quantity(
    user_id: str,
    book_id: str,
    body: CartItemUpdate,
    repo = Depends(get_cart_repository),
):
    """Set the quantity of a cart line."""
    user_id = require_identifier(user_id, "user")
    book_id = require_identifier(book_id, "book")

    cart = repo.update_quantity(user_id, book_id, body.quantity)
    if cart is None:
        raise NotFoundError("Cart item", book_id)
    return CartResponse.model_validate(cart)


@router.delete(
    "/{user_id}/items/{book_id}",
    response_model=CartResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid ID format"},
        404: {"model": ErrorResponse, "description": "Book not in cart"},
    },
)
def remove_item(
    user_id: str,
    book_id: str,
    repo = Depends(get_cart_repository),
):
    """Remove a book from the cart."""
    user_id = require_identifier(user_id, "user")
    book_id = require_identifier(book_id, "book")

    cart = repo.remove_item(user_id, book_id)
    if cart is None:
        raise NotFoundError("Cart item", book_id)
    return CartResponse.model_validate(cart)


@router.post(
    "/{user_id}/checkout",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse, "description": "Cart is empty"}},
)
def checkout(
    user_id: str,
    repo = Depends(get_cart_repository),
):
    """
    Turn the cart into an order.

    The order is created and the cart emptied in one transaction.
    """
    user_id = require_identifier(user_id, "user")
    logger.info(f"Checking out cart of {user_id}")

    order = repo.checkout(user_id)
    if order is None:
        raise ValidationError("Cart is empty", detail="Add items before checking out")
    return order
