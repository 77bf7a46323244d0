"""SQLModel implementation of User repository."""

from __future__ import annotations

from typing import Callable, Optional

from sqlmodel import Session, select

from ...models.user import User


class SQLModelUserRepository:
    """SQLModel-based user repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        """Retrieve a user by ID."""
        with self.session_factory() as session:
            obj = session.get(User, user_id)
            if obj:
                session.expunge(obj)
            return obj

    def get_by_username(self, username: str) -> Optional[User]:
        """Retrieve a user by username."""
        with self.session_factory() as session:
            obj = session.exec(select(User).where(User.username == username.strip())).first()
            if obj:
                session.expunge(obj)
            return obj

    def create(self, user: User) -> User:
        """Create a new user."""
        with self.session_factory() as session:
            user.username = user.username.strip()
            session.add(user)
            session.commit()
            session.refresh(user)
            session.expunge(user)
            return user
