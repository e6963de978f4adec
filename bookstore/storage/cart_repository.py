"""
Cart Repository for the cart service

Carts are keyed by user ID and hold line items with title/price snapshots.
Checkout turns the cart into an order and empties it in one transaction.
"""

from datetime import datetime
from dataclasses import dataclass, field
from typing import Optional
from uuid import uuid4

from loguru import logger
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from .models import CartItemModel, OrderModel
from .order_repository import StoredOrder


@dataclass
class StoredCartItem:
    """Single cart line."""

    book_id: str
    title: str
    price: float
    quantity: int

    @classmethod
    def from_model(cls, model: CartItemModel) -> "StoredCartItem":
        return cls(
            book_id=model.book_id,
            title=model.title,
            price=model.price,
            quantity=model.quantity,
        )

    def to_dict(self) -> dict:
        return {
            "book_id": self.book_id,
            "title": self.title,
            "price": self.price,
            "quantity": self.quantity,
        }


@dataclass
class StoredCart:
    """A user's cart. A user without stored items has an empty cart."""

    user_id: str
    items: list[StoredCartItem] = field(default_factory=list)

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def total_price(self) -> float:
        return round(sum(item.price * item.quantity for item in self.items), 2)


class CartRepository:
    """
    Repository for cart line items.

    Usage:
        repo = CartRepository(engine)
        repo.add_item(user_id, book_id, title="Dune", price=9.99, quantity=2)
        order = repo.checkout(user_id)
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self.SessionLocal = sessionmaker(bind=self.engine, expire_on_commit=False)

    def get_session(self) -> Session:
        """Get database session."""
        return self.SessionLocal()

    def _load(self, session: Session, user_id: str) -> StoredCart:
        rows = session.query(CartItemModel).filter(
            CartItemModel.user_id == user_id,
        ).order_by(CartItemModel.id.asc()).all()
        return StoredCart(user_id=user_id, items=[StoredCartItem.from_model(r) for r in rows])

    def _find_item(self, session: Session, user_id: str, book_id: str) -> Optional[CartItemModel]:
        return session.query(CartItemModel).filter(
            CartItemModel.user_id == user_id,
            CartItemModel.book_id == book_id,
        ).first()

    def get_cart(self, user_id: str) -> StoredCart:
        """Get the cart of a user."""
        with self.get_session() as session:
            return self._load(session, user_id)

    def add_item(
        self,
        user_id: str,
        book_id: str,
        title: str,
        price: float,
        quantity: int = 1,
    ) -> StoredCart:
        """
        Add a book to the cart.

        If the book is already present its quantity grows by `quantity`
        and the title/price snapshot is refreshed.

        Returns:
            Updated cart
        """
        with self.get_session() as session:
            item = self._find_item(session, user_id, book_id)
            if item:
                item.quantity += quantity
                item.title = title
                item.price = price
            else:
                session.add(CartItemModel(
                    user_id=user_id,
                    book_id=book_id,
                    title=title,
                    price=price,
                    quantity=quantity,
                ))
            session.commit()
            return self._load(session, user_id)

    def update_quantity(self, user_id: str, book_id: str, quantity: int) -> Optional[StoredCart]:
        """
        Set the quantity of a cart line.

        Returns:
            Updated cart, or None if the book is not in the cart
        """
        with self.get_session() as session:
            item = self._find_item(session, user_id, book_id)
            if not item:
                return None

            item.quantity = quantity
            session.commit()
            return self._load(session, user_id)

    def remove_item(self, user_id: str, book_id: str) -> Optional[StoredCart]:
        """
        Remove a cart line.

        Returns:
            Updated cart, or None if the book is not in the cart
        """
        with self.get_session() as session:
            item = self._find_item(session, user_id, book_id)
            if not item:
                return None

            session.delete(item)
            session.commit()
            return self._load(session, user_id)

    def checkout(self, user_id: str) -> Optional[StoredOrder]:
        """
        Convert the cart into an order and empty the cart.

        Both writes share one transaction; either the order exists and the
        cart is empty, or nothing changed.

        Returns:
            Created order, or None if the cart is empty
        """
        with self.get_session() as session:
            cart = self._load(session, user_id)
            if not cart.items:
                return None

            order = OrderModel(
                id=str(uuid4()),
                user_id=user_id,
                status="pending",
                items=[item.to_dict() for item in cart.items],
                total=cart.total_price,
                created_at=datetime.utcnow(),
            )
            session.add(order)
            session.query(CartItemModel).filter(
                CartItemModel.user_id == user_id,
            ).delete(synchronize_session=False)
            session.commit()

            logger.info(f"Checked out cart of user {user_id} into order {order.id}")
            return StoredOrder.from_model(order)
