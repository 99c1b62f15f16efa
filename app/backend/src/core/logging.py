"""Structured logging configuration."""

from __future__ import annotations

import logging

import structlog

from .config import get_settings


def _resolve_level(level_name: str) -> int:
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        return logging.INFO
    return level


def configure_logging() -> None:
    """Configure JSON logging for structlog events and stdlib loggers at ``LOG_LEVEL``."""

    level = _resolve_level(get_settings().log_level)

    logging.basicConfig(
        level=level,
        format='{"level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}',
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


__all__ = ["configure_logging"]
