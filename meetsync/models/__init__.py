"""SQLAlchemy ORM models."""

from meetsync.models.base import Base
from meetsync.models.user import User

__all__ = ["Base", "User"]
