"""Common contract shared by every report module."""

from __future__ import annotations

import asyncio
import re
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Callable, ClassVar, Literal, Sequence

import structlog
from markupsafe import Markup
from pydantic import BaseModel, ConfigDict, Field, SerializeAsAny
from pydantic.alias_generators import to_camel

from app.backend.src.services.data_source import (
    DataSourceGateway,
    FarmId,
    FetchError,
    QueryResult,
    ReportQuery,
    Row,
)
from app.backend.src.services.farm_names import FarmNameCache

from .html import Column, render_page, render_table

LOGGER = structlog.get_logger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def iso(moment: datetime) -> str:
    """Timestamp literal used for range predicates against the views."""

    return moment.isoformat()


def matches(pattern: str, message: str) -> bool:
    return re.search(pattern, message) is not None


def add_term(terms: list[str], term: str) -> None:
    if term not in terms:
        terms.append(term)


class _WireModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class QueryParameters(_WireModel):
    """Filters extracted from a message.

    ``search_terms`` lists every filter signal that was detected so the
    rendered report can explain how its rows were selected. Subclasses add
    the typed filter fields for their report.
    """

    search_terms: list[str] = Field(default_factory=list)


class SelectionTraceEntry(_WireModel):
    module_key: str
    outcome: Literal["missing", "no_keywords", "matched", "no_match", "fallback"]
    matched_keywords: list[str] = Field(default_factory=list)


class ReportMetadata(_WireModel):
    title: str
    description: str
    record_count: int
    data_type: str
    search_query: SerializeAsAny[QueryParameters] | None = None
    summary: dict[str, Any] = Field(default_factory=dict)
    farm_name: str | None = None
    farm_id: FarmId | None = None
    query_time: float | None = None
    matched_keywords: list[str] = Field(default_factory=list)
    module_selection: list[SelectionTraceEntry] = Field(default_factory=list)
    error: bool = False
    error_type: str | None = None
    module_used: str | None = None
    stage: str | None = None


class ReportOutput(_WireModel):
    html_content: str
    metadata: ReportMetadata

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class ReportModule(ABC):
    """A single report type: keyword identity plus parse, fetch and render.

    Subclasses declare their identity as class attributes and implement
    :meth:`parse`, :meth:`build_query` and :meth:`render`. The base class owns
    the fetch sequence: a farm-scoped query on :attr:`relation`, the module's
    filters, an optional row cap and optional farm-name enrichment, executed
    off the event loop.
    """

    key: ClassVar[str]
    name: ClassVar[str]
    keywords: ClassVar[tuple[str, ...]] = ()
    data_type: ClassVar[str]
    relation: ClassVar[str]
    row_limit: ClassVar[int | None] = None
    enrich_farm_name: ClassVar[bool] = False
    color: ClassVar[str] = "#2E8B57"

    def __init__(
        self,
        gateway: DataSourceGateway,
        *,
        farm_names: FarmNameCache | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.gateway = gateway
        self.farm_names = farm_names
        self._clock = clock or utc_now

    def now(self) -> datetime:
        return self._clock()

    @abstractmethod
    def parse(self, message: str) -> QueryParameters:
        """Detect filter signals in ``message``. Pure; no I/O."""

    @abstractmethod
    def build_query(self, query: ReportQuery, params: QueryParameters) -> ReportQuery:
        """Layer this module's filters and ordering onto ``query``."""

    @abstractmethod
    def render(self, rows: list[Row], params: QueryParameters) -> ReportOutput:
        """Build the report for a non-empty row list."""

    def _fetch_blocking(self, farm_id: FarmId, params: QueryParameters) -> QueryResult:
        query = self.build_query(self.gateway.from_relation(self.relation, farm_id), params)
        if self.row_limit is not None:
            query.limit(self.row_limit)
        result = query.execute()
        if result.error is not None or not result.rows:
            return result
        if self.enrich_farm_name and self.farm_names is not None:
            return QueryResult(rows=self.farm_names.enhance(result.rows, farm_id))
        return result

    async def fetch(self, farm_id: FarmId, params: QueryParameters) -> QueryResult:
        """Fetch rows for ``farm_id``. Failures come back as ``result.error``."""

        try:
            result = await asyncio.to_thread(self._fetch_blocking, farm_id, params)
        except Exception as exc:
            LOGGER.error(
                "report_fetch_failed",
                module=self.key,
                farm_id=farm_id,
                error=str(exc),
            )
            return QueryResult.failed(self.describe_fetch_error(FetchError.from_exception(exc)))
        if result.error is not None:
            return QueryResult.failed(self.describe_fetch_error(result.error))
        return result

    def describe_fetch_error(self, error: FetchError) -> FetchError:
        return error

    def page(
        self,
        title: str,
        rows: Sequence[Row],
        params: QueryParameters,
        columns: Sequence[Column],
        *,
        summary: Markup | str = "",
        row_style: Callable[[Row], str] | None = None,
        farm_name: str | None = None,
        footer: str | None = None,
    ) -> str:
        return render_page(
            title,
            color=self.color,
            generated_at=self.now(),
            farm_name=farm_name,
            search_terms=params.search_terms,
            summary=summary,
            body=render_table(rows, columns, row_style=row_style),
            footer=footer,
        )

    def metadata(
        self,
        rows: Sequence[Row],
        params: QueryParameters,
        *,
        title: str,
        description: str,
        summary: dict[str, Any],
        farm_name: str | None = None,
    ) -> ReportMetadata:
        return ReportMetadata(
            title=title,
            description=description,
            record_count=len(rows),
            data_type=self.data_type,
            search_query=params,
            summary=summary,
            farm_name=farm_name,
        )

    def describe(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "name": self.name,
            "dataType": self.data_type,
            "keywords": list(self.keywords),
        }


def farm_name_of(rows: Sequence[Row]) -> str | None:
    if not rows:
        return None
    return rows[0].get("farm_name") or None


__all__ = [
    "Clock",
    "QueryParameters",
    "ReportMetadata",
    "ReportModule",
    "ReportOutput",
    "SelectionTraceEntry",
    "add_term",
    "farm_name_of",
    "iso",
    "matches",
    "utc_now",
]
