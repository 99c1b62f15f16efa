"""Tests for report module registration."""

from __future__ import annotations

import pytest

from app.backend.src.reports import ModuleValidationError, build_registry
from app.backend.src.reports.modules import MODULE_CLASSES
from app.backend.src.reports.modules.tower import TowerModule
from app.backend.src.reports.registry import ModuleRegistry, missing_capabilities
from app.backend.src.reports.router import MODULE_CHECK_ORDER


class IncompleteModule:
    key = "incomplete"
    name = "Incomplete"
    keywords = ("incomplete",)
    data_type = "incomplete"

    def parse(self, message: str) -> None:
        return None


class SilentModule:
    key = "silent"
    name = "Silent"
    keywords = ()
    data_type = "silent"

    def parse(self, message):
        return None

    async def fetch(self, farm_id, params):
        return None

    def render(self, rows, params):
        return None


def test_default_registry_loads_every_module(registry) -> None:
    assert len(registry) == len(MODULE_CLASSES)
    assert set(MODULE_CHECK_ORDER) | {"tower"} == set(registry.keys())
    assert registry.rejected == []


def test_missing_capabilities_are_listed() -> None:
    assert missing_capabilities(IncompleteModule()) == ["fetch", "render"]


def test_blank_identity_is_rejected(gateway) -> None:
    module = TowerModule(gateway)
    module.name = ""

    assert missing_capabilities(module) == ["name"]


def test_empty_keywords_are_allowed() -> None:
    assert missing_capabilities(SilentModule()) == []


def test_register_raises_for_incomplete_module() -> None:
    registry = ModuleRegistry()

    with pytest.raises(ModuleValidationError) as excinfo:
        registry.register(IncompleteModule())

    assert excinfo.value.module_key == "incomplete"
    assert excinfo.value.missing == ["fetch", "render"]
    assert "incomplete" not in registry


def test_duplicate_keys_are_rejected(gateway) -> None:
    registry = ModuleRegistry()
    registry.register(TowerModule(gateway))

    with pytest.raises(ModuleValidationError, match="unique key"):
        registry.register(TowerModule(gateway))


def test_build_registry_skips_invalid_modules(gateway) -> None:
    registry = build_registry([IncompleteModule(), TowerModule(gateway), SilentModule()])

    assert registry.keys() == ["tower", "silent"]
    assert [exc.module_key for exc in registry.rejected] == ["incomplete"]
