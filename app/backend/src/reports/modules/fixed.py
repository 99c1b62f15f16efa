"""Reports over pre-windowed views that take no filters beyond the farm."""

from __future__ import annotations

from typing import Any, Callable, ClassVar, Sequence

from app.backend.src.services.data_source import ReportQuery, Row

from ..base import QueryParameters, ReportModule, ReportOutput
from ..html import Column, summary_cards


class FixedViewModule(ReportModule):
    """Base for reports whose view already selects and windows the rows.

    ``parse`` only records :attr:`search_term`; ``fetch`` adds nothing to the
    farm predicate. Subclasses describe the table, summary and titles.
    """

    search_term: ClassVar[str]
    report_title: ClassVar[str]
    description: ClassVar[str]
    columns: ClassVar[Sequence[Column]] = ()
    summarize: ClassVar[Callable[[list[Row]], dict[str, Any]]]
    summary_labels: ClassVar[Sequence[tuple[str, str]]] = ()

    def parse(self, message: str) -> QueryParameters:
        return QueryParameters(search_terms=[self.search_term])

    def build_query(self, query: ReportQuery, params: QueryParameters) -> ReportQuery:
        return query

    def describe_rows(self, rows: list[Row]) -> str:
        return self.description

    def style_row(self, row: Row) -> str:
        return ""

    def render(self, rows: list[Row], params: QueryParameters) -> ReportOutput:
        summary = self.summarize(rows)
        cards = [(label, summary[key]) for key, label in self.summary_labels]
        html = self.page(
            self.report_title,
            rows,
            params,
            self.columns,
            summary=summary_cards(cards, self.color) if cards else "",
            row_style=self.style_row,
        )
        return ReportOutput(
            html_content=html,
            metadata=self.metadata(
                rows,
                params,
                title=self.report_title,
                description=self.describe_rows(rows),
                summary=summary,
            ),
        )


def percent(name: str) -> Callable[[Row], str]:
    def read(row: Row) -> str:
        value = row.get(name)
        return "-" if value is None or value == "" else f"{value}%"

    return read


def humanize(name: str) -> Callable[[Row], str]:
    """Read an enum-like value such as ``very_fresh`` as ``very fresh``."""

    def read(row: Row) -> str:
        value = row.get(name)
        return str(value).replace("_", " ") if value else "-"

    return read


def color_of(name: str, bold: bool = False) -> Callable[[Row], str]:
    def style(row: Row) -> str:
        css = f"color:{row.get(name) or '#333'}"
        return css + ";font-weight:bold" if bold else css

    return style


__all__ = ["FixedViewModule", "color_of", "humanize", "percent"]
