"""Public API routers exposed by the FastAPI application."""

from . import health, webhook

__all__ = [
    "health",
    "webhook",
]
