"""Nutrient monitoring (pH and EC) per tower."""

from __future__ import annotations

from datetime import timedelta
from typing import Literal

from sqlalchemy import column

from app.backend.src.services.data_source import FetchError, ReportQuery, Row

from ..base import QueryParameters, ReportModule, ReportOutput, farm_name_of, iso, matches
from ..html import Column, field, format_flag, format_number, summary_line
from ..summaries import monitoring_summary

RECENT_DAYS = 7
PH_COLORS = {"low": "red", "high": "purple"}


class MonitoringQuery(QueryParameters):
    issue_filter: bool = False
    ph_filter: Literal["low", "high"] | None = None
    ec_filter: Literal["low", "high"] | None = None
    time_filter: Literal["today", "recent"] | None = None


def reading_issues(row: Row) -> list[str]:
    issues = []
    ec_status = str(row.get("ec_status") or "").lower()
    if row.get("ph_color") == "red":
        issues.append("pH Too Low")
    if row.get("ph_color") == "purple":
        issues.append("pH Too High")
    if "low" in ec_status:
        issues.append("EC Too Low")
    if "high" in ec_status:
        issues.append("EC Too High")
    if not row.get("ph_value") and not row.get("ec_value"):
        issues.append("No Readings")
    elif row.get("needs_attention") and not issues:
        issues.append("Overdue for Reading")
    return issues


class MonitoringModule(ReportModule):
    key = "monitoring"
    name = "Nutrient Monitoring Data"
    keywords = ("monitoring", "nutrient", "ph", "ec", "reading")
    data_type = "monitoring_data"
    relation = "monitoring_tower_dashboard_fixed"
    color = "#6A5ACD"

    def parse(self, message: str) -> MonitoringQuery:
        text = message.lower()
        terms: list[str] = []

        issue = matches(r"issue|problem|attention|alert|overdue", text)
        if issue:
            terms.append("needs attention")

        ph = None
        if matches(r"ph.*low|low.*ph", text):
            ph = "low"
            terms.append("pH low")
        if matches(r"ph.*high|high.*ph", text):
            ph = "high"
            terms.append("pH high")

        ec = None
        if matches(r"ec.*low|low.*ec", text):
            ec = "low"
            terms.append("EC low")
        if matches(r"ec.*high|high.*ec", text):
            ec = "high"
            terms.append("EC high")

        time_filter = None
        if "today" in text:
            time_filter = "today"
            terms.append("today only")
        elif "recent" in text and "latest" not in text:
            time_filter = "recent"
            terms.append("recent readings")
        elif "latest" in text:
            # Sorted output only; no window.
            terms.append("latest")

        return MonitoringQuery(
            search_terms=terms,
            issue_filter=issue,
            ph_filter=ph,
            ec_filter=ec,
            time_filter=time_filter,
        )

    def build_query(self, query: ReportQuery, params: MonitoringQuery) -> ReportQuery:
        if params.issue_filter:
            query.eq("needs_attention", True)
        if params.ph_filter:
            query.eq("ph_color", PH_COLORS[params.ph_filter])
        if params.ec_filter:
            level = params.ec_filter
            query.any_of(
                column("ec_status").ilike(f"%{level}%"),
                column("ec_status").ilike(f"%very_{level}%"),
            )

        now = self.now()
        if params.time_filter == "today":
            midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
            query.gte("read_at", iso(midnight))
        elif params.time_filter == "recent":
            query.gte("read_at", iso(now - timedelta(days=RECENT_DAYS)))
        return query.order("row_number").order("tower_number_within_row")

    def describe_fetch_error(self, error: FetchError) -> FetchError:
        return FetchError(
            message="Unable to retrieve monitoring data. Please try again later.",
            code=error.code,
            details=error.details or error.message,
        )

    def render(self, rows: list[Row], params: MonitoringQuery) -> ReportOutput:
        summary = monitoring_summary(rows)
        farm_name = farm_name_of(rows)
        title = "Nutrient Monitoring Dashboard"
        if params.search_terms:
            title = f"Monitoring: {', '.join(params.search_terms)}"

        def reading(name: str):
            def read(row: Row) -> str:
                value = row.get(name)
                return format_number(value, 1) if value else "No Reading"

            return read

        columns = (
            Column("Tower ID", field("tower_identifier", placeholder="Unknown")),
            Column("pH Value", reading("ph_value")),
            Column("EC Value", reading("ec_value")),
            Column("Last Reading", field("last_read_human_readable", placeholder="Never")),
            Column("Read By", field("reader_name")),
            Column("Needs Attention", lambda row: format_flag(row.get("needs_attention"))),
            Column("Issues", lambda row: ", ".join(reading_issues(row)) or "None"),
        )
        html = self.page(
            title,
            rows,
            params,
            columns,
            summary=summary_line(
                [
                    f"{summary['needs_attention']} Need Attention",
                    f"{summary['good_status']} Good",
                    f"{summary['never_read']} Never Read",
                ]
            ),
            farm_name=farm_name,
        )
        return ReportOutput(
            html_content=html,
            metadata=self.metadata(
                rows,
                params,
                title=f"Monitoring Dashboard - {farm_name or 'Farm Data'}",
                description=f"{len(rows)} towers monitored matching criteria.",
                summary=summary,
                farm_name=farm_name or "Unknown Farm",
            ),
        )
