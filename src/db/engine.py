"""Database connection management

Engine and session factory for the durable confirmation store.
"""

from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine, Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from .models import Base


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine for ``database_url``

    In-memory SQLite gets a single shared connection so every session sees
    the same database.
    """
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url or database_url == "sqlite://":
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, echo=echo, **kwargs)

    return create_engine(
        database_url,
        pool_pre_ping=True,  # connection health check
        pool_size=5,
        max_overflow=10,
        echo=echo,
    )


def init_db(engine: Engine) -> None:
    """Create the tables if they do not exist"""
    Base.metadata.create_all(bind=engine)


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@contextmanager
def session_scope(factory: sessionmaker) -> Generator[Session, None, None]:
    """Transactional session scope

    Commits on success, rolls back on error, always closes.

    Example:
        with session_scope(factory) as db:
            row = db.get(PendingConfirmation, token)
    """
    db = factory()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
