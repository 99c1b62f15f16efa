"""Tower status report; also the fallback when no other report matches."""

from __future__ import annotations

from markupsafe import Markup, escape

from app.backend.src.services.data_source import ReportQuery, Row

from ..base import QueryParameters, ReportModule, ReportOutput, add_term, farm_name_of, matches
from ..html import Column, field, format_date, format_flag, summary_line
from ..summaries import tower_summary

# First entry is the one queried; every match is recorded.
PLANT_PATTERNS: tuple[tuple[str, str], ...] = (
    (r"green oak|oak.*green|oakleaf.*green", "Lettuce, Oakleaf Green"),
    (r"red oak|oak.*red|oakleaf.*red", "Lettuce, Oakleaf Red"),
    (r"butter.*rex|rex.*butter", "Lettuce, Butter Rex"),
    (r"bibb.*gatsbi|gatsbi.*bibb", "Lettuce, Bibb Gatsbi"),
    (r"salanova.*red|red.*salanova", "Lettuce, Salanova Red Butter"),
    (r"salanova.*green|green.*salanova", "Lettuce, Salanova Green Butter"),
    (r"romaine.*green|green.*romaine", "Lettuce, Romaine Green Forest"),
    (r"summer.*crisp|crisp.*summer", "Lettuce, Summer Crisp Green"),
    (r"swiss.*chard|chard.*swiss", "Swiss Chard, Bright Lights"),
    (r"sorrel.*green|green.*sorrel", "Sorrel, Green"),
    (r"lettuce", "lettuce"),
)

AVAILABLE_STATUSES = ("Available", "Partially Available")


class TowerQuery(QueryParameters):
    plant_names: list[str] = []
    statuses: list[str] = []
    maintenance_filter: bool = False
    availability_filter: bool = False


def detect_plants(message: str) -> list[str]:
    return [plant for pattern, plant in PLANT_PATTERNS if matches(pattern, message)]


class TowerModule(ReportModule):
    key = "tower"
    name = "Tower Data"
    keywords = ("tower", "plant", "grow", "lettuce", "oak", "available", "clean")
    data_type = "towers"
    relation = "tower_display_with_plants"
    color = "#2E8B57"

    def parse(self, message: str) -> TowerQuery:
        text = message.lower()
        terms: list[str] = []
        plants = detect_plants(text)
        for plant in plants:
            add_term(terms, plant)

        statuses: list[str] = []
        availability = False
        maintenance = False
        if matches(r"available|empty|free", text):
            statuses.extend(AVAILABLE_STATUSES)
            availability = True
            add_term(terms, "available")
        if matches(r"growing|planted|active", text):
            statuses.append("Growing")
            add_term(terms, "growing")
        if matches(r"clean|cleaned|cleaning", text):
            statuses.append("Clean")
            add_term(terms, "clean")
        if matches(r"maintenance|repair|service", text):
            maintenance = True
            add_term(terms, "maintenance needed")

        return TowerQuery(
            search_terms=terms,
            plant_names=plants,
            statuses=statuses,
            maintenance_filter=maintenance,
            availability_filter=availability,
        )

    def build_query(self, query: ReportQuery, params: TowerQuery) -> ReportQuery:
        # Only the highest-precedence filter category reaches the query.
        if params.plant_names:
            query.ilike("plant_name", f"%{params.plant_names[0]}%")
        elif params.statuses:
            query.in_("tower_status", params.statuses)
        elif params.maintenance_filter:
            query.eq("has_maintenance", True)
        elif params.availability_filter:
            query.gt("overall_available_ports", 0)
        return query.order("tower_identifier")

    def render(self, rows: list[Row], params: TowerQuery) -> ReportOutput:
        summary = tower_summary(rows)
        farm_name = farm_name_of(rows)
        title = "Tower Farm Status Report"
        if params.search_terms:
            title = f"Towers: {', '.join(params.search_terms)}"

        def plant(row: Row):
            value = row.get("plant_name")
            if value and any(p.lower() in str(value).lower() for p in params.plant_names):
                return Markup(f"<strong>{escape(value)}</strong>")
            return value

        columns = (
            Column("Tower ID", field("tower_identifier")),
            Column("Farm", field("farm_name")),
            Column("Status", field("tower_status"), style=_status_style),
            Column("Plant", plant),
            Column("Date Planted", lambda row: format_date(row.get("date_planted"))),
            Column("Ports Used", field("individual_ports_used", placeholder="0")),
            Column("Available Ports", field("overall_available_ports", placeholder="0")),
            Column("Total Ports", field("total_ports", placeholder="0")),
            Column("Maintenance", lambda row: format_flag(row.get("has_maintenance"))),
            Column("Next Due", lambda row: format_date(row.get("next_maintenance_due"))),
        )
        html = self.page(
            title,
            rows,
            params,
            columns,
            summary=summary_line(
                [
                    f"{summary['growing']} Growing",
                    f"{summary['clean']} Clean",
                    f"{summary['available']} Available",
                    f"{summary['maintenance']} Need Maintenance",
                ]
            ),
            farm_name=farm_name,
            footer=f"Total towers: {len(rows)}",
        )

        description = f"{len(rows)} towers found"
        if params.search_terms:
            description += f" matching: {', '.join(params.search_terms)}"
        return ReportOutput(
            html_content=html,
            metadata=self.metadata(
                rows,
                params,
                title=f"Towers - {farm_name or 'Unknown Farm'}",
                description=description,
                summary=summary,
                farm_name=farm_name,
            ),
        )


def _status_style(row: Row) -> str:
    status = str(row.get("tower_status") or "").lower()
    if status == "growing":
        return "background-color:#d4edda;color:#155724"
    if status == "clean":
        return "background-color:#cce7ff;color:#004085"
    if "available" in status:
        return "background-color:#f0f0f0;color:#495057"
    if row.get("has_maintenance"):
        return "background-color:#fff3cd;color:#856404"
    return ""
