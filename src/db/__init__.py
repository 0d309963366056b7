"""Database layer - SQLAlchemy

Durable backing for pending confirmations:
- models: ORM models
- engine: engine and session factory
- crud: row-level operations
"""

from .engine import create_db_engine, init_db, make_session_factory, session_scope
from .models import Base, PendingConfirmation

__all__ = [
    "create_db_engine",
    "init_db",
    "make_session_factory",
    "session_scope",
    "Base",
    "PendingConfirmation",
]
