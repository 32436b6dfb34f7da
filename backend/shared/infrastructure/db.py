"""
Database configuration and session management.
Uses SQLAlchemy 2.0 sessions with pooled engines for server databases.
"""

import os
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from shared.config.settings import DATABASE_URL, settings


def _calculate_pool_size() -> int:
    """
    Pool size based on CPU cores.
    Formula: (2 * CPU cores) + 1, capped at 20.
    """
    cores = os.cpu_count() or 4
    return min(cores * 2 + 1, 20)


def build_engine(url: str = DATABASE_URL, echo: bool = settings.database_echo) -> Engine:
    """
    Create an engine for the given URL.

    SQLite gets no pool sizing (an in-memory database is shared through a
    single connection); every other backend gets the pooled configuration
    with timeouts.
    """
    if url.startswith("sqlite"):
        sqlite_kwargs: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            sqlite_kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=echo, **sqlite_kwargs)

    pool_kwargs: dict[str, Any] = {
        "pool_pre_ping": True,  # Verify connections before using
        "pool_size": _calculate_pool_size(),
        "max_overflow": 15,
        "pool_timeout": 30,  # Wait max 30s for a pooled connection
        "pool_recycle": 1800,  # Recycle connections after 30 minutes
    }
    if url.startswith("postgresql"):
        pool_kwargs["connect_args"] = {"connect_timeout": 10}

    return create_engine(url, echo=echo, **pool_kwargs)


engine = build_engine()

# Session factory
SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
    expire_on_commit=False,
)


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency for database sessions.

    Usage:
        @router.get("/read/all")
        def read_all(db: Session = Depends(get_db)):
            ...

    The session is closed after the request completes.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_db_context() -> Generator[Session, None, None]:
    """
    Context manager for database sessions outside of FastAPI
    (CLI commands, the outbox processor).
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def safe_commit(db: Session) -> None:
    """
    Commit, rolling back on failure.

    Raises the original exception after rolling back so the caller
    decides how to report it.
    """
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
