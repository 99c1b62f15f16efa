"""Tests for structured logging configuration."""

from __future__ import annotations

import json

import pytest
import structlog
from structlog.testing import capture_logs

from app.backend.src.core.config import get_settings
from app.backend.src.core.logging import configure_logging


@pytest.fixture()
def log_level(monkeypatch):
    def apply(level: str) -> None:
        monkeypatch.setenv("LOG_LEVEL", level)
        get_settings.cache_clear()
        configure_logging()

    yield apply
    get_settings.cache_clear()
    structlog.reset_defaults()


def test_info_events_are_dropped_at_error_level(log_level) -> None:
    log_level("ERROR")
    logger = structlog.get_logger("reports")

    with capture_logs() as captured:
        logger.info("report_module_selected", module="tower")
        logger.error("report_fetch_failed", module="tower")

    assert [entry["event"] for entry in captured] == ["report_fetch_failed"]


def test_unknown_level_falls_back_to_info(log_level) -> None:
    log_level("chatty")
    logger = structlog.get_logger("reports")

    with capture_logs() as captured:
        logger.debug("report_query_built")
        logger.info("report_module_selected", module="tower")

    assert [entry["event"] for entry in captured] == ["report_module_selected"]


def test_events_render_as_json(log_level, capsys) -> None:
    log_level("INFO")

    structlog.get_logger("reports").info("report_module_selected", module="pest")

    line = capsys.readouterr().out.strip().splitlines()[-1]
    payload = json.loads(line)
    assert payload["event"] == "report_module_selected"
    assert payload["module"] == "pest"
    assert payload["level"] == "info"
    assert "timestamp" in payload
