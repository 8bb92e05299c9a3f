"""
Database session management for GlickoTR.

Provides the SQLAlchemy engine and session factory using the settings from
config.py. The engine is created on first use, so importing this module
never opens a connection.

Usage:
    from glickotr.db import get_session

    with get_session() as session:
        service.apply_match(session, match_id)
        # Commits automatically on exit, rolls back on exception
"""

from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from glickotr.config import settings


def get_engine() -> Engine:
    """
    Create SQLAlchemy engine with connection pooling.

    - Pre-ping verifies connections before use (handles stale connections)
    - SQL echo only when LOG_LEVEL=DEBUG
    """
    return create_engine(
        settings.database_url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=True,
        echo=settings.log_level == "DEBUG",
    )


_engine = None


def _get_engine() -> Engine:
    """Get or create the singleton engine instance."""
    global _engine
    if _engine is None:
        _engine = get_engine()
    return _engine


# Bound lazily in get_session()
SessionLocal = sessionmaker(autocommit=False, autoflush=False)


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """
    Context manager for database sessions.

    Commits on successful exit, rolls back on exception. A rating update
    run inside one block is applied atomically: both players and the
    match marker, or nothing.

    Raises:
        Any exception from the database operation (after rollback)
    """
    session = SessionLocal(bind=_get_engine())
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
