"""Repository primitives for user entities."""

from __future__ import annotations

from sqlalchemy.orm import Session

from errchain.db.models.user import User


def create_user(session: Session, *, name: str, email: str | None = None) -> User:
    """Create and return a user row."""
    user = User(name=name, email=email)
    session.add(user)
    session.flush()
    session.refresh(user)
    return user


def get_user_by_id(session: Session, user_id: int) -> User | None:
    """Fetch a user by id."""
    return session.get(User, user_id)
