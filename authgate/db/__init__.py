"""Persistence layer: SQLAlchemy models and the user store."""

from .models import User
from .session import Base, create_engine, create_session_factory
from .user_store import UserStore

__all__ = [
    "Base",
    "User",
    "UserStore",
    "create_engine",
    "create_session_factory",
]
