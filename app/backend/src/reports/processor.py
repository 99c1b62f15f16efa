"""Per-request orchestration: route, parse, fetch, render."""

from __future__ import annotations

import time
from enum import Enum
from typing import Sequence

import structlog

from app.backend.src.services.data_source import FarmId
from app.backend.src.services.metrics import report_fetch_seconds, report_requests_total

from .base import Clock, ReportMetadata, ReportModule, ReportOutput, utc_now
from .errors import DataSourceError, RenderError
from .html import error_page, no_data_page
from .registry import ModuleRegistry
from .router import FALLBACK_MODULE, MODULE_CHECK_ORDER, RouteDecision, select_module

LOGGER = structlog.get_logger(__name__)


class Stage(str, Enum):
    ROUTING = "routing"
    PARSING = "parsing"
    FETCHING = "fetching"
    RENDERING = "rendering"


class QueryProcessor:
    """Turn a message and a farm id into a report.

    Routing errors (:class:`NoModulesAvailable`) propagate to the caller.
    Every failure after a module has been chosen is logged and replaced by
    the fixed friendly error page with ``metadata.error`` set.
    """

    def __init__(
        self,
        registry: ModuleRegistry,
        priority_order: Sequence[str] = MODULE_CHECK_ORDER,
        fallback_module: str = FALLBACK_MODULE,
        *,
        clock: Clock | None = None,
    ) -> None:
        self.registry = registry
        self.priority_order = tuple(priority_order)
        self.fallback_module = fallback_module
        self._clock = clock or utc_now

    def route(self, message: str) -> RouteDecision:
        return select_module(message, self.priority_order, self.registry, self.fallback_module)

    async def process(self, message: str, farm_id: FarmId) -> ReportOutput:
        decision = self.route(message)
        module = decision.module
        stage = Stage.PARSING
        query_time: float | None = None

        try:
            params = module.parse(message)
            LOGGER.info(
                "report_query_parsed",
                module=module.key,
                search_terms=params.search_terms,
            )

            stage = Stage.FETCHING
            started = time.monotonic()
            result = await module.fetch(farm_id, params)
            elapsed = time.monotonic() - started
            report_fetch_seconds.labels(module=module.key).observe(elapsed)
            query_time = round(elapsed * 1000, 1)

            if result.error is not None:
                raise DataSourceError(module.name, result.error)

            if not result.rows:
                LOGGER.info("report_empty", module=module.key, farm_id=farm_id)
                report_requests_total.labels(module=module.key, outcome="empty").inc()
                return ReportOutput(
                    html_content=no_data_page(module.name, params.search_terms, self._clock()),
                    metadata=ReportMetadata(
                        title=f"No {module.name} Found",
                        description="No data found for the specified criteria.",
                        record_count=0,
                        data_type=module.data_type,
                        search_query=params,
                        farm_id=farm_id,
                        query_time=query_time,
                        matched_keywords=decision.matched_keywords,
                        module_selection=decision.trace,
                    ),
                )

            stage = Stage.RENDERING
            try:
                output = module.render(result.rows, params)
            except Exception as exc:
                raise RenderError(module.name) from exc
        except Exception as exc:
            self._log_failure(module, stage, farm_id, exc)
            report_requests_total.labels(module=module.key, outcome="error").inc()
            return self._error_output(module, stage, farm_id, query_time, decision)

        report_requests_total.labels(module=module.key, outcome="rendered").inc()
        LOGGER.info(
            "report_rendered",
            module=module.key,
            farm_id=farm_id,
            record_count=output.metadata.record_count,
            query_time_ms=query_time,
        )
        metadata = output.metadata.model_copy(
            update={
                "farm_id": farm_id,
                "query_time": query_time,
                "matched_keywords": decision.matched_keywords,
                "module_selection": decision.trace,
            }
        )
        return output.model_copy(update={"metadata": metadata})

    def _log_failure(
        self, module: ReportModule, stage: Stage, farm_id: FarmId, exc: Exception
    ) -> None:
        context = {
            "module": module.key,
            "stage": stage.value,
            "farm_id": farm_id,
            "error": str(exc),
        }
        if isinstance(exc, DataSourceError):
            context["code"] = exc.error.code
            context["details"] = exc.error.details
        elif exc.__cause__ is not None:
            context["cause"] = repr(exc.__cause__)
        LOGGER.error("report_processing_failed", **context)

    def _error_output(
        self,
        module: ReportModule,
        stage: Stage,
        farm_id: FarmId,
        query_time: float | None,
        decision: RouteDecision,
    ) -> ReportOutput:
        return ReportOutput(
            html_content=error_page(module.name, self._clock()),
            metadata=ReportMetadata(
                title="Temporary Data Issue",
                description=f"Unable to access {module.name.lower()} at this time",
                record_count=0,
                data_type=module.data_type,
                farm_id=farm_id,
                query_time=query_time,
                matched_keywords=decision.matched_keywords,
                module_selection=decision.trace,
                error=True,
                error_type="user_friendly",
                module_used=module.name,
                stage=stage.value,
            ),
        )


__all__ = ["QueryProcessor", "Stage"]
