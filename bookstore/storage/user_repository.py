"""
User Repository for the users service.
"""

from datetime import datetime
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from .models import User


@dataclass
class StoredUser:
    """User account without credentials-related logic."""

    id: str
    email: str
    hashed_password: str
    name: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, model: User) -> "StoredUser":
        return cls(
            id=model.id,
            email=model.email,
            hashed_password=model.hashed_password,
            name=model.name,
            is_active=model.is_active,
            created_at=model.created_at,
        )


class UserRepository:
    """Repository for user accounts."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self.SessionLocal = sessionmaker(bind=self.engine, expire_on_commit=False)

    def get_session(self) -> Session:
        """Get database session."""
        return self.SessionLocal()

    def create(
        self,
        id: str,
        email: str,
        hashed_password: str,
        name: Optional[str] = None,
    ) -> StoredUser:
        """Insert a new account. The email column is unique."""
        with self.get_session() as session:
            user = User(
                id=id,
                email=email,
                hashed_password=hashed_password,
                name=name,
            )
            session.add(user)
            session.commit()
            session.refresh(user)
            return StoredUser.from_model(user)

    def get(self, user_id: str) -> Optional[StoredUser]:
        with self.get_session() as session:
            user = session.get(User, user_id)
            if user:
                return StoredUser.from_model(user)
            return None

    def get_by_email(self, email: str) -> Optional[StoredUser]:
        with self.get_session() as session:
            user = session.query(User).filter(User.email == email).first()
            if user:
                return StoredUser.from_model(user)
            return None
