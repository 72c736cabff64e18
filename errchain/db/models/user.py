"""SQLAlchemy model for users looked up by the user collaborators."""

from __future__ import annotations

from sqlalchemy import Integer
from sqlalchemy import PrimaryKeyConstraint
from sqlalchemy import String
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.orm import Mapped
from sqlalchemy.orm import mapped_column


class Base(DeclarativeBase):
    """Declarative base for errchain ORM models."""


class User(Base):
    """User entity."""

    __tablename__ = "users"
    __table_args__ = (PrimaryKeyConstraint("id", name="pk_users"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
