"""SQLAlchemy declarative base for the lookup tables the service owns.

Report views are read through SQLAlchemy Core and have no ORM models.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base for SQLAlchemy models."""
