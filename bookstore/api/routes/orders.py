"""
Order API Routes

Orders are created by cart checkout and only read here.
"""

from fastapi import APIRouter, Depends
from loguru import logger

from bookstore.api.schemas import OrderResponse, ErrorResponse
from bookstore.api.dependencies import get_order_repository, require_identifier
from bookstore.api.middleware.error_handler import NotFoundError


router = APIRouter(prefix="/orders", tags=["orders"])


@router.get(
    "/user/{user_id}",
    response_model=list[OrderResponse],
    responses={400: {"model": ErrorResponse, "description": "Invalid user ID format"}},
)
def list_user_orders(
    user_id: str,
    repo = Depends(get_order_repository),
):
    """Orders of a user, newest first."""
    user_id = require_identifier(user_id, "user")
    orders = repo.list_for_user(user_id)
    logger.info(f"Listing orders of {user_id}: {len(orders)} found")
    return orders


@router.get(
    "/{order_id}",
    response_model=OrderResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid order ID format"},
        404: {"model": ErrorResponse, "description": "Order not found"},
    },
)
def get_order(
    order_id: str,
    repo = Depends(get_order_repository),
):
    order_id = require_identifier(order_id, "order")

    order = repo.get(order_id)
    if not order:
        raise NotFoundError("Order", order_id)
    return order
