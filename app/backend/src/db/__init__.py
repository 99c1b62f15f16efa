"""Database access for the farm lookup tables and report views."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from ..models.base import Base

from .session import SessionLocal, build_engine, engine as _engine


@contextmanager
def get_session() -> Iterator[Session]:
    """Context manager yielding a read-mostly SQLAlchemy session."""

    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def get_session_dependency() -> Iterator[Session]:
    """FastAPI dependency wrapping :func:`get_session`."""

    with get_session() as session:
        yield session


def get_engine() -> Engine:
    """Return the engine shared by report queries and farm lookups."""

    return _engine


__all__ = [
    "Base",
    "SessionLocal",
    "build_engine",
    "get_engine",
    "get_session",
    "get_session_dependency",
]
