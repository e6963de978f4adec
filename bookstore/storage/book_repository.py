"""
Book Repository for the catalog service

Structured storage for book records using SQLAlchemy:
- PostgreSQL for production
- SQLite for development/testing

Mutations are single-row read-modify-write without version checks;
concurrent updates to the same book can overwrite each other.
"""

from datetime import datetime
from dataclasses import dataclass
from typing import Optional

from loguru import logger
from sqlalchemy import or_
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from .models import BookModel


@dataclass
class StoredBook:
    """Data class for book data transfer."""

    id: str
    title: str
    author: str
    description: str
    category: str
    price: float
    stock: int = 0

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, model: BookModel) -> "StoredBook":
        """Create from SQLAlchemy model."""
        return cls(
            id=model.id,
            title=model.title,
            author=model.author,
            description=model.description,
            category=model.category,
            price=model.price,
            stock=model.stock,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "description": self.description,
            "category": self.category,
            "price": self.price,
            "stock": self.stock,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class BookRepository:
    """
    Repository for book CRUD operations.

    Usage:
        repo = BookRepository(create_db_engine("sqlite:///./bookstore.db"))

        book = repo.create(
            id="9b1f...",
            title="Dune",
            author="Frank Herbert",
            description="Desert planet politics",
            category="Science Fiction",
            price=9.99,
        )

        results = repo.search("dune")
    """

    # Fields a caller may change through update()
    UPDATABLE_FIELDS = ("title", "author", "description", "category", "price", "stock")

    def __init__(self, engine: Engine):
        """
        Initialize repository.

        Args:
            engine: Engine returned by create_db_engine
        """
        self.engine = engine
        self.SessionLocal = sessionmaker(bind=self.engine, expire_on_commit=False)

    def get_session(self) -> Session:
        """Get database session."""
        return self.SessionLocal()

    def create(self, id: str, **fields) -> StoredBook:
        """
        Create a new book.

        Args:
            id: Unique book ID
            **fields: Book fields (title, author, description, category, price, stock)

        Returns:
            Created StoredBook
        """
        with self.get_session() as session:
            book = BookModel(id=id, **fields)
            session.add(book)
            session.commit()
            session.refresh(book)

            logger.debug(f"Stored book {id}")
            return StoredBook.from_model(book)

    def get(self, book_id: str) -> Optional[StoredBook]:
        """
        Get book by ID.

        Returns:
            StoredBook or None
        """
        with self.get_session() as session:
            book = session.get(BookModel, book_id)
            if book:
                return StoredBook.from_model(book)
            return None

    def list_all(self) -> list[StoredBook]:
        """List every book, oldest first."""
        with self.get_session() as session:
            books = session.query(BookModel).order_by(BookModel.created_at.asc()).all()
            return [StoredBook.from_model(b) for b in books]

    def search(self, query: str) -> list[StoredBook]:
        """
        Case-insensitive substring search over title, author, description and category.

        Args:
            query: Search text; LIKE wildcards are matched literally

        Returns:
            Matching books, each at most once
        """
        with self.get_session() as session:
            books = session.query(BookModel).filter(
                or_(
                    BookModel.title.icontains(query, autoescape=True),
                    BookModel.author.icontains(query, autoescape=True),
                    BookModel.description.icontains(query, autoescape=True),
                    BookModel.category.icontains(query, autoescape=True),
                ),
            ).order_by(BookModel.created_at.asc()).all()

            return [StoredBook.from_model(b) for b in books]

    def update(self, book_id: str, **updates) -> Optional[StoredBook]:
        """
        Merge the given fields into a book.

        Args:
            book_id: Book ID
            **updates: Fields to update; unknown keys are ignored

        Returns:
            Updated StoredBook or None
        """
        with self.get_session() as session:
            book = session.get(BookModel, book_id)
            if not book:
                return None

            for key, value in updates.items():
                if key in self.UPDATABLE_FIELDS:
                    setattr(book, key, value)

            book.updated_at = datetime.utcnow()
            session.commit()
            session.refresh(book)

            return StoredBook.from_model(book)

    def set_stock(self, book_id: str, stock: int) -> Optional[StoredBook]:
        """Replace the stock level of a book."""
        return self.update(book_id, stock=stock)

    def delete(self, book_id: str) -> bool:
        """
        Delete a book.

        Returns:
            True if a book was removed
        """
        with self.get_session() as session:
            book = session.get(BookModel, book_id)
            if not book:
                return False

            session.delete(book)
            session.commit()
            return True
