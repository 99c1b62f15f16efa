"""Farm-scoped query builder over the relational report views.

Every query starts from :meth:`DataSourceGateway.from_relation`, which pins
``farm_id`` as the first predicate. Modules layer their own filters on top;
there is no way to build an unscoped report query through this interface.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Iterable

import structlog
from sqlalchemy import column, literal_column, or_, select, table
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.sql import ColumnElement, Select

LOGGER = structlog.get_logger(__name__)

FarmId = int | str
Row = dict[str, Any]


@dataclass(frozen=True)
class FetchError:
    """Data-source failure captured instead of raised."""

    message: str
    code: str | None = None
    details: str | None = None

    @classmethod
    def from_exception(cls, exc: BaseException) -> "FetchError":
        details = None
        if isinstance(exc, DBAPIError) and exc.orig is not None:
            details = str(exc.orig)
        return cls(
            message=str(exc) or exc.__class__.__name__,
            code=getattr(exc, "code", None),
            details=details,
        )


@dataclass(frozen=True)
class QueryResult:
    """Rows for a report, or the error that prevented fetching them."""

    rows: list[Row] | None
    error: FetchError | None = None

    @classmethod
    def failed(cls, error: FetchError) -> "QueryResult":
        return cls(rows=None, error=error)


class ReportQuery:
    """Chainable filter builder for one relation, always scoped to a farm."""

    def __init__(self, engine: Engine, relation: str, farm_id: FarmId) -> None:
        self._engine = engine
        self.relation = relation
        self.farm_id = farm_id
        self._source = table(relation)
        self._conditions: list[ColumnElement[bool]] = [column("farm_id") == farm_id]
        self._order_by: list[Any] = []
        self._limit: int | None = None

    def _where(self, condition: ColumnElement[bool]) -> "ReportQuery":
        self._conditions.append(condition)
        return self

    def eq(self, field: str, value: Any) -> "ReportQuery":
        return self._where(column(field) == value)

    def neq(self, field: str, value: Any) -> "ReportQuery":
        return self._where(column(field) != value)

    def gt(self, field: str, value: Any) -> "ReportQuery":
        return self._where(column(field) > value)

    def gte(self, field: str, value: Any) -> "ReportQuery":
        return self._where(column(field) >= value)

    def lt(self, field: str, value: Any) -> "ReportQuery":
        return self._where(column(field) < value)

    def lte(self, field: str, value: Any) -> "ReportQuery":
        return self._where(column(field) <= value)

    def ilike(self, field: str, pattern: str) -> "ReportQuery":
        return self._where(column(field).ilike(pattern))

    def in_(self, field: str, values: Iterable[Any]) -> "ReportQuery":
        return self._where(column(field).in_(list(values)))

    def is_null(self, field: str) -> "ReportQuery":
        return self._where(column(field).is_(None))

    def not_null(self, field: str) -> "ReportQuery":
        return self._where(column(field).is_not(None))

    def any_of(self, *conditions: ColumnElement[bool]) -> "ReportQuery":
        """Add a single predicate that holds when any of ``conditions`` holds."""

        return self._where(or_(*conditions))

    def order(
        self, field: str, *, ascending: bool = True, nulls_last: bool = False
    ) -> "ReportQuery":
        clause = column(field).asc() if ascending else column(field).desc()
        if nulls_last:
            clause = clause.nulls_last()
        self._order_by.append(clause)
        return self

    def limit(self, count: int) -> "ReportQuery":
        self._limit = count
        return self

    def statement(self) -> Select:
        stmt = select(literal_column("*")).select_from(self._source).where(*self._conditions)
        if self._order_by:
            stmt = stmt.order_by(*self._order_by)
        if self._limit is not None:
            stmt = stmt.limit(self._limit)
        return stmt

    def execute(self) -> QueryResult:
        """Run the query. Database errors are returned, never raised."""

        stmt = self.statement()
        start = time.monotonic()
        try:
            with self._engine.connect() as connection:
                result = connection.execute(stmt)
                rows = [dict(row._mapping) for row in result]
        except SQLAlchemyError as exc:
            LOGGER.error(
                "report_query_failed",
                relation=self.relation,
                farm_id=self.farm_id,
                error=str(exc),
            )
            return QueryResult.failed(FetchError.from_exception(exc))

        LOGGER.info(
            "latency",
            stage="SQL Execution",
            relation=self.relation,
            farm_id=self.farm_id,
            rows=len(rows),
            duration_ms=(time.monotonic() - start) * 1000,
        )
        return QueryResult(rows=rows)


class DataSourceGateway:
    """Entry point for report queries against the configured engine."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @property
    def engine(self) -> Engine:
        return self._engine

    def from_relation(self, relation: str, farm_id: FarmId) -> ReportQuery:
        return ReportQuery(self._engine, relation, farm_id)


__all__ = [
    "DataSourceGateway",
    "FarmId",
    "FetchError",
    "QueryResult",
    "ReportQuery",
    "Row",
]
