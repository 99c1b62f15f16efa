"""Single-row snapshot of today's key numbers."""

from __future__ import annotations

from markupsafe import Markup, escape

from app.backend.src.services.data_source import Row

from ..base import QueryParameters, ReportOutput
from ..html import cell, render_page
from ..summaries import to_int
from .fixed import FixedViewModule

# (label, value field, status colour field, unit)
CARDS: tuple[tuple[str, str, str, str], ...] = (
    ("Pending Deliveries", "pending_deliveries", "overdue_status_color", ""),
    ("Overdue (>5 days)", "overdue_deliveries", "overdue_status_color", ""),
    ("Old Inventory (>7 days)", "old_inventory_batches", "old_inventory_color", "batches"),
    ("Today's Deliveries", "todays_deliveries", "activity_level_color", ""),
)


def stats_summary(rows: list[Row]) -> dict[str, int]:
    row = rows[0] if rows else {}
    return {name: to_int(row.get(name)) for _, name, _, _ in CARDS}


class SummaryStatsModule(FixedViewModule):
    key = "summary_stats"
    name = "Quick Summary Stats"
    keywords = ("today's numbers", "quick summary", "summary stats", "dashboard")
    data_type = "rpt_summary_stats"
    relation = "rpt_summary_stats"
    row_limit = 1
    color = "#333333"

    search_term = "today's numbers"
    report_title = "Today's Farm Summary"
    description = "A quick overview of key metrics for today."
    summarize = staticmethod(stats_summary)

    def render(self, rows: list[Row], params: QueryParameters) -> ReportOutput:
        row = rows[0]
        html = ['<div class="summary-cards">']
        for label, name, status_color, unit in CARDS:
            value = cell(row.get(name))
            if unit:
                value = Markup(f"{value} <small>{escape(unit)}</small>")
            html.append(
                '<div class="card">'
                f'<div class="card-label">{escape(label)}</div>'
                f'<div class="card-value">{value}</div>'
                f'<div style="height:5px;border-radius:3px;margin-top:10px;'
                f'background-color:{escape(row.get(status_color) or "#ddd")}"></div>'
                "</div>"
            )
        html.append("</div>")

        page = render_page(
            self.report_title,
            color=self.color,
            generated_at=self.now(),
            search_terms=params.search_terms,
            body=Markup("".join(html)),
        )
        return ReportOutput(
            html_content=page,
            metadata=self.metadata(
                rows,
                params,
                title=self.report_title,
                description=self.description,
                summary=self.summarize(rows),
            ),
        )
