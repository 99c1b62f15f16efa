"""Lighting usage and energy cost by day."""

from __future__ import annotations

from datetime import timedelta
from typing import Literal

from app.backend.src.services.data_source import ReportQuery, Row

from ..base import QueryParameters, ReportModule, ReportOutput, add_term, farm_name_of, matches
from ..html import Column, field, format_date, format_number, summary_line
from ..summaries import lighting_summary, to_float

LOOKBACK_DAYS = {"daily": 7, "weekly": 30, "monthly": 90}
HIGH_COST = 50
HIGH_USAGE_HOURS = 12
LOW_USAGE_HOURS = 8


class LightingQuery(QueryParameters):
    time_filter: Literal["daily", "weekly", "monthly"] | None = None
    zone_filter: bool = False
    cost_filter: Literal["analysis", "high"] | None = None
    usage_filter: Literal["high", "low"] | None = None
    efficiency_filter: bool = False


class LightingModule(ReportModule):
    key = "lighting"
    name = "Lighting Usage Report"
    keywords = (
        "lighting",
        "lights",
        "energy",
        "usage",
        "cost",
        "zones",
        "fixtures",
        "kwh",
        "electricity",
    )
    data_type = "lighting"
    relation = "light_total_summary"
    row_limit = 30
    enrich_farm_name = True
    color = "#F59E0B"

    def parse(self, message: str) -> LightingQuery:
        text = message.lower()
        terms: list[str] = []

        time_filter = None
        for period, pattern in (
            ("daily", r"daily|day|today"),
            ("weekly", r"weekly|week|this.*week"),
            ("monthly", r"monthly|month|this.*month"),
        ):
            if matches(pattern, text):
                time_filter = period
                add_term(terms, period)

        zones = matches(r"zone|zones|area|areas", text)
        if zones:
            add_term(terms, "zones")

        cost = None
        if matches(r"cost|expensive|cheap|budget|price", text):
            cost = "analysis"
            add_term(terms, "cost analysis")
        if matches(r"high.*cost|expensive", text):
            cost = "high"
            add_term(terms, "high cost")

        usage = None
        if matches(r"high.*usage|heavy.*usage|intensive", text):
            usage = "high"
            add_term(terms, "high usage")
        if matches(r"low.*usage|minimal.*usage|efficient", text):
            usage = "low"
            add_term(terms, "efficient usage")

        efficiency = matches(r"efficiency|efficient|optimize|energy.*saving", text)
        if efficiency:
            add_term(terms, "efficiency")

        return LightingQuery(
            search_terms=terms,
            time_filter=time_filter,
            zone_filter=zones,
            cost_filter=cost,
            usage_filter=usage,
            efficiency_filter=efficiency,
        )

    def build_query(self, query: ReportQuery, params: LightingQuery) -> ReportQuery:
        query.order("period_day", ascending=False)
        if params.time_filter:
            start = self.now() - timedelta(days=LOOKBACK_DAYS[params.time_filter])
            query.gte("period_day", start.date().isoformat())
        if params.cost_filter == "high":
            query.gte("total_cost", HIGH_COST)
        if params.usage_filter == "high":
            query.gte("total_usage_hours", HIGH_USAGE_HOURS)
        elif params.usage_filter == "low":
            query.lte("total_usage_hours", LOW_USAGE_HOURS)
        if params.zone_filter:
            query.order("zones_active", ascending=False)
        return query

    def render(self, rows: list[Row], params: LightingQuery) -> ReportOutput:
        summary = lighting_summary(rows)
        farm_name = farm_name_of(rows)
        title = "Lighting Usage Report"
        if params.search_terms:
            title = f"Lighting Usage: {', '.join(params.search_terms)}"

        columns = (
            Column("Date", lambda row: format_date(row.get("period_day"))),
            Column(
                "Usage Hours",
                lambda row: f"{to_float(row.get('total_usage_hours')):.1f} hrs",
                style=_usage_style,
            ),
            Column(
                "Energy (kWh)",
                lambda row: f"{to_float(row.get('total_energy_used_kwh')):.2f} kWh",
            ),
            Column("Cost", lambda row: "$" + format_number(to_float(row.get("total_cost")), 2)),
            Column("Zones", field("zones_active", placeholder="0")),
            Column("Fixtures", field("total_fixtures_active", placeholder="0")),
            Column("Zone Names", field("zones_included")),
        )
        html = self.page(
            title,
            rows,
            params,
            columns,
            summary=summary_line(
                [
                    f"{summary['total_hours']} Total Hours",
                    f"{summary['total_energy']} kWh",
                    f"${summary['total_cost']} Total Cost",
                    f"{summary['avg_zones']} Avg Zones",
                ]
            ),
            farm_name=farm_name,
        )

        description = f"{len(rows)} lighting usage periods found"
        if params.search_terms:
            description += f" matching: {', '.join(params.search_terms)}"
        return ReportOutput(
            html_content=html,
            metadata=self.metadata(
                rows,
                params,
                title=f"Lighting Usage Report - {farm_name or 'Unknown Farm'}",
                description=description,
                summary=summary,
                farm_name=farm_name,
            ),
        )


def _usage_style(row: Row) -> str:
    hours = to_float(row.get("total_usage_hours"))
    if hours > 15:
        return "color:#dc2626;font-weight:bold"
    if hours > 8:
        return "color:#d97706"
    return "color:#059669"
