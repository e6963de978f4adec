"""
Book API Routes

Catalog operations: list, search, get, create, update, delete and stock
changes. Every successful mutation is followed by a best-effort event.
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Query, Depends, status
from loguru import logger

from bookstore.api.schemas import (
    BookCreate,
    BookUpdate,
    BookResponse,
    StockUpdate,
    MessageResponse,
    ErrorResponse,
)
from bookstore.api.dependencies import (
    get_book_repository,
    get_book_notifier,
    require_identifier,
)
from bookstore.api.middleware.error_handler import NotFoundError, ValidationError


router = APIRouter(prefix="/books", tags=["books"])


# =============================================================================
# Read Endpoints
# =============================================================================

@router.get(
    "",
    response_model=list[BookResponse],
)
def list_books(
    repo = Depends(get_book_repository),
):
    """List every book in the catalog."""
    books = repo.list_all()
    logger.info(f"Listing books: {len(books)} found")
    return books


@router.get(
    "/search",
    response_model=list[BookResponse],
    responses={
        400: {"model": ErrorResponse, "description": "Missing search query"},
    },
)
def search_books(
    q: Optional[str] = Query(None, description="Text matched against title, author, description and category"),
    repo = Depends(get_book_repository),
):
    """Case-insensitive substring search across title, author, description and category."""
    if not q:
        raise ValidationError("Search query is required", detail="Provide the 'q' query parameter")

    logger.info(f"Searching books: '{q}'")
    return repo.search(q)


@router.get(
    "/{book_id}",
    response_model=BookResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid book ID format"},
        404: {"model": ErrorResponse, "description": "Book not found"},
    },
)
def get_book(
    book_id: str,
    repo = Depends(get_book_repository),
):
    """Get a book by ID."""
    book_id = require_identifier(book_id, "book")
    logger.info(f"Fetching book: {book_id}")

    book = repo.get(book_id)
    if not book:
        raise NotFoundError("Book", book_id)
    return book


# =============================================================================
# Mutations
# =============================================================================

@router.post(
    "",
    response_model=BookResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Missing or invalid book fields"},
    },
)
def create_book(
    book: BookCreate,
    repo = Depends(get_book_repository),
    notifier = Depends(get_book_notifier),
):
    """Create a new book and announce it on `book.created`."""
    logger.info(f"Creating book: {book.title} by {book.author}")

    created = repo.create(id=str(uuid.uuid4()), **book.model_dump())

    notifier.book_created(created.to_dict())
    return created


@router.put(
    "/{book_id}",
    response_model=BookResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid ID or field values"},
        404: {"model": ErrorResponse, "description": "Book not found"},
    },
)
def update_book(
    book_id: str,
    book: BookUpdate,
    repo = Depends(get_book_repository),
    notifier = Depends(get_book_notifier),
):
    """
    Update a book.

    Supports partial updates - only provided, non-null fields are modified.
    """
    book_id = require_identifier(book_id, "book")
    logger.info(f"Updating book: {book_id}")

    updates = book.model_dump(exclude_unset=True, exclude_none=True)
    updated = repo.update(book_id, **updates)
    if not updated:
        raise NotFoundError("Book", book_id)

    notifier.book_updated(updated.to_dict())
    return updated


@router.delete(
    "/{book_id}",
    response_model=MessageResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid book ID format"},
        404: {"model": ErrorResponse, "description": "Book not found"},
    },
)
def delete_book(
    book_id: str,
    repo = Depends(get_book_repository),
    notifier = Depends(get_book_notifier),
):
    """Delete a book permanently."""
    book_id = require_identifier(book_id, "book")
    logger.info(f"Deleting book: {book_id}")

    if not repo.delete(book_id):
        raise NotFoundError("Book", book_id)

    notifier.book_deleted(book_id)
    return MessageResponse(message="Book deleted")


@router.patch(
    "/{book_id}/stock",
    response_model=BookResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid ID or stock value"},
        404: {"model": ErrorResponse, "description": "Book not found"},
    },
)
def update_stock(
    book_id: str,
    body: StockUpdate,
    repo = Depends(get_book_repository),
    notifier = Depends(get_book_notifier),
):
    """Replace the stock level of a book."""
    book_id = require_identifier(book_id, "book")
    logger.info(f"Updating stock: {book_id} -> {body.stock}")

    updated = repo.set_stock(book_id, body.stock)
    if not updated:
        raise NotFoundError("Book", book_id)

    notifier.stock_updated(book_id, updated.stock)
    return updated
