"""
Order Repository for the orders service.

Orders are written only by cart checkout and are read-only afterwards.
"""

from datetime import datetime
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from .models import OrderModel


@dataclass
class StoredOrder:
    """Data class for order data transfer."""

    id: str
    user_id: str
    status: str
    total: float
    items: list[dict] = field(default_factory=list)
    created_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, model: OrderModel) -> "StoredOrder":
        return cls(
            id=model.id,
            user_id=model.user_id,
            status=model.status,
            total=model.total,
            items=list(model.items or []),
            created_at=model.created_at,
        )


class OrderRepository:
    """Read access to orders."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self.SessionLocal = sessionmaker(bind=self.engine, expire_on_commit=False)

    def get_session(self) -> Session:
        """Get database session."""
        return self.SessionLocal()

    def get(self, order_id: str) -> Optional[StoredOrder]:
        """Get order by ID."""
        with self.get_session() as session:
            order = session.get(OrderModel, order_id)
            if order:
                return StoredOrder.from_model(order)
            return None

    def list_for_user(self, user_id: str) -> list[StoredOrder]:
        """List orders of a user, newest first."""
        with self.get_session() as session:
            orders = session.query(OrderModel).filter(
                OrderModel.user_id == user_id,
            ).order_by(OrderModel.created_at.desc()).all()
            return [StoredOrder.from_model(o) for o in orders]
