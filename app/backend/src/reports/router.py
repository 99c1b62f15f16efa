"""Keyword routing from a free-text message to a report module."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import structlog

from .base import ReportModule, SelectionTraceEntry
from .errors import NoModulesAvailable
from .registry import ModuleRegistry

LOGGER = structlog.get_logger(__name__)

# More specific reports come first; the first module with a matching keyword wins.
MODULE_CHECK_ORDER: tuple[str, ...] = (
    "pending_deliveries",
    "available_harvest",
    "harvest_performance",
    "customer_deliveries",
    "daily_operations",
    "inventory_aging",
    "allocation_efficiency",
    "summary_stats",
    "tasks",
    "spacer",
    "pest",
    "monitoring",
    "lighting",
    "sensor",
)
FALLBACK_MODULE = "tower"


@dataclass
class RouteDecision:
    module: ReportModule
    matched_keywords: list[str]
    trace: list[SelectionTraceEntry] = field(default_factory=list)

    @property
    def used_fallback(self) -> bool:
        return not self.matched_keywords

    def to_dict(self) -> dict:
        return {
            "module": self.module.key,
            "matchedKeywords": list(self.matched_keywords),
            "trace": [entry.model_dump(by_alias=True) for entry in self.trace],
        }


def matching_keywords(module: ReportModule, message: str) -> list[str]:
    """Keywords of ``module`` contained in ``message``, in keyword order."""

    text = message.lower()
    return [keyword for keyword in module.keywords if keyword.lower() in text]


def select_module(
    raw_message: str,
    priority_order: Sequence[str],
    registry: ModuleRegistry,
    fallback_module_name: str,
) -> RouteDecision:
    """Pick the first module in ``priority_order`` whose keywords appear in the message.

    Modules missing from the registry, or registered without keywords, are
    skipped. When nothing matches the fallback module is returned with no
    matched keywords; if the fallback is not registered either, routing
    fails with :class:`NoModulesAvailable`.
    """

    trace: list[SelectionTraceEntry] = []
    for key in priority_order:
        module = registry.get(key)
        if module is None:
            trace.append(SelectionTraceEntry(module_key=key, outcome="missing"))
            continue
        if not module.keywords:
            trace.append(SelectionTraceEntry(module_key=key, outcome="no_keywords"))
            continue

        matched = matching_keywords(module, raw_message)
        if matched:
            trace.append(
                SelectionTraceEntry(
                    module_key=key, outcome="matched", matched_keywords=matched
                )
            )
            LOGGER.info("report_module_selected", module=key, matched_keywords=matched)
            return RouteDecision(module=module, matched_keywords=matched, trace=trace)
        trace.append(SelectionTraceEntry(module_key=key, outcome="no_match"))

    fallback = registry.get(fallback_module_name)
    if fallback is None:
        LOGGER.error("report_fallback_missing", fallback=fallback_module_name)
        raise NoModulesAvailable(fallback_module_name)

    trace.append(SelectionTraceEntry(module_key=fallback_module_name, outcome="fallback"))
    LOGGER.info("report_module_selected", module=fallback_module_name, fallback=True)
    return RouteDecision(module=fallback, matched_keywords=[], trace=trace)


__all__ = [
    "FALLBACK_MODULE",
    "MODULE_CHECK_ORDER",
    "RouteDecision",
    "matching_keywords",
    "select_module",
]
