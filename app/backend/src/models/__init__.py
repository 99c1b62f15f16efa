"""ORM models exposed for easy imports."""

from .farm import Farm

__all__ = ["Farm"]
