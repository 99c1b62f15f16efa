"""Exceptions raised while routing and producing reports."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.backend.src.services.data_source import FetchError


class ReportError(Exception):
    """Base class for report dispatch failures."""


class ModuleValidationError(ReportError):
    """A report module does not expose the full capability set."""

    def __init__(self, module_key: str, missing: list[str]) -> None:
        self.module_key = module_key
        self.missing = list(missing)
        super().__init__(
            f"Module [{module_key}] missing capabilities: {', '.join(self.missing)}"
        )


class NoModulesAvailable(ReportError):
    """Neither a prioritized module nor the fallback module is registered."""

    def __init__(self, fallback_module: str) -> None:
        self.fallback_module = fallback_module
        super().__init__(
            "No data modules available. Please check server configuration."
        )


class DataSourceError(ReportError):
    """A module's fetch reported an error from the data source."""

    def __init__(self, module_name: str, error: "FetchError") -> None:
        self.module_name = module_name
        self.error = error
        super().__init__(f"Database error in {module_name}: {error.message}")


class RenderError(ReportError):
    """A module raised while rendering its rows."""

    def __init__(self, module_name: str) -> None:
        self.module_name = module_name
        super().__init__(f"Failed to render {module_name}")


__all__ = [
    "DataSourceError",
    "ModuleValidationError",
    "NoModulesAvailable",
    "RenderError",
    "ReportError",
]
