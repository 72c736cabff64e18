"""Model module imports for SQLAlchemy metadata registration."""

from errchain.db.models.user import Base
from errchain.db.models.user import User

__all__ = [
    "Base",
    "User",
]
