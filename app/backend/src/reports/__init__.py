"""Keyword-routed farm reports."""

from __future__ import annotations

from app.backend.src.services.data_source import DataSourceGateway
from app.backend.src.services.farm_names import FarmNameCache

from .base import Clock, QueryParameters, ReportMetadata, ReportModule, ReportOutput
from .errors import (
    DataSourceError,
    ModuleValidationError,
    NoModulesAvailable,
    RenderError,
    ReportError,
)
from .modules import MODULE_CLASSES
from .processor import QueryProcessor, Stage
from .registry import ModuleRegistry, build_registry
from .router import FALLBACK_MODULE, MODULE_CHECK_ORDER, RouteDecision, select_module


def build_default_registry(
    gateway: DataSourceGateway,
    farm_names: FarmNameCache | None = None,
    clock: Clock | None = None,
) -> ModuleRegistry:
    """Instantiate every built-in report module against ``gateway``."""

    return build_registry(
        module_class(gateway, farm_names=farm_names, clock=clock)
        for module_class in MODULE_CLASSES
    )


__all__ = [
    "DataSourceError",
    "FALLBACK_MODULE",
    "MODULE_CHECK_ORDER",
    "ModuleRegistry",
    "ModuleValidationError",
    "NoModulesAvailable",
    "QueryParameters",
    "QueryProcessor",
    "RenderError",
    "ReportError",
    "ReportMetadata",
    "ReportModule",
    "ReportOutput",
    "RouteDecision",
    "Stage",
    "build_default_registry",
    "build_registry",
    "select_module",
]
