"""Registry of report modules keyed by module identifier."""

from __future__ import annotations

from typing import Any, Iterable, Iterator

import structlog

from .base import ReportModule
from .errors import ModuleValidationError

LOGGER = structlog.get_logger(__name__)

_MISSING = object()
REQUIRED_ATTRIBUTES = ("name", "keywords", "data_type")
REQUIRED_METHODS = ("parse", "fetch", "render")


def missing_capabilities(module: Any) -> list[str]:
    """Return the capabilities ``module`` fails to provide.

    ``keywords`` only has to exist; an empty set is allowed and simply means
    the module is never selected by keyword.
    """

    missing: list[str] = []
    for attribute in ("key", *REQUIRED_ATTRIBUTES):
        value = getattr(module, attribute, _MISSING)
        if value is _MISSING:
            missing.append(attribute)
        elif attribute != "keywords" and not (isinstance(value, str) and value):
            missing.append(attribute)
    for method in REQUIRED_METHODS:
        if not callable(getattr(module, method, None)):
            missing.append(method)
    return missing


class ModuleRegistry:
    """Validated, read-only-after-startup set of report modules."""

    def __init__(self) -> None:
        self._modules: dict[str, ReportModule] = {}
        self.rejected: list[ModuleValidationError] = []

    def register(self, module: ReportModule) -> None:
        missing = missing_capabilities(module)
        key = getattr(module, "key", None) or type(module).__name__
        if missing:
            raise ModuleValidationError(key, missing)
        if key in self._modules:
            raise ModuleValidationError(key, ["unique key"])
        self._modules[key] = module

    def get(self, key: str) -> ReportModule | None:
        return self._modules.get(key)

    def all(self) -> list[ReportModule]:
        return list(self._modules.values())

    def keys(self) -> list[str]:
        return list(self._modules)

    def __contains__(self, key: object) -> bool:
        return key in self._modules

    def __iter__(self) -> Iterator[ReportModule]:
        return iter(self.all())

    def __len__(self) -> int:
        return len(self._modules)


def build_registry(modules: Iterable[Any]) -> ModuleRegistry:
    """Register each module, logging and skipping the ones that fail validation."""

    registry = ModuleRegistry()
    for module in modules:
        try:
            registry.register(module)
        except ModuleValidationError as exc:
            LOGGER.error(
                "report_module_rejected",
                module=exc.module_key,
                missing=exc.missing,
            )
            registry.rejected.append(exc)
            continue
        LOGGER.info("report_module_registered", module=module.key, name=module.name)
    LOGGER.info(
        "report_registry_built",
        modules=registry.keys(),
        rejected=[exc.module_key for exc in registry.rejected],
    )
    return registry


__all__ = ["ModuleRegistry", "build_registry", "missing_capabilities"]
