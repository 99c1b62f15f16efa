"""Spacer tray inventory report."""

from __future__ import annotations

from datetime import timedelta
from typing import Literal

from markupsafe import Markup, escape
from sqlalchemy import column

from app.backend.src.services.data_source import ReportQuery, Row

from ..base import QueryParameters, ReportModule, ReportOutput, add_term, farm_name_of, iso, matches
from ..html import Column, field, format_date, summary_line
from ..summaries import parse_datetime, spacer_summary
from .tower import PLANT_PATTERNS

SPACER_PLANT_PATTERNS = PLANT_PATTERNS + (
    (r"herbs?", "herb"),
    (r"basil", "basil"),
    (r"cilantro", "cilantro"),
    (r"parsley", "parsley"),
)
HERBS = ("basil", "cilantro", "parsley")

LOW_QUANTITY = 5
HIGH_QUANTITY = 20
RECENT_DAYS = 3


class SpacerQuery(QueryParameters):
    plant_names: list[str] = []
    statuses: list[str] = []
    quantity_filter: Literal["low", "high"] | None = None
    ready_filter: bool = False
    date_filter: Literal["recent", "overdue"] | None = None


class SpacerModule(ReportModule):
    key = "spacer"
    name = "Spacer Inventory"
    keywords = ("spacer", "tray", "seedling", "germination", "ready", "seeded", "inventory")
    data_type = "spacers"
    relation = "spacer_inventory"
    enrich_farm_name = True
    color = "#7C3AED"

    def parse(self, message: str) -> SpacerQuery:
        text = message.lower()
        terms: list[str] = []
        plants = [plant for pattern, plant in SPACER_PLANT_PATTERNS if matches(pattern, text)]
        for plant in plants:
            add_term(terms, plant)

        statuses: list[str] = []
        ready = False
        if matches(r"ready|harvest|harvestable", text):
            statuses.append("Ready")
            ready = True
            add_term(terms, "ready")
        if matches(r"growing|germinating|seeded", text):
            statuses.append("Growing")
            add_term(terms, "growing")
        if matches(r"available|empty|unused", text):
            statuses.append("Available")
            add_term(terms, "available")

        quantity = None
        if matches(r"low.*quantity|few.*trays|running.*low", text):
            quantity = "low"
            add_term(terms, "low quantity")
        if matches(r"high.*quantity|many.*trays|abundant", text):
            quantity = "high"
            add_term(terms, "high quantity")

        date_filter = None
        if matches(r"recent|today|yesterday|this.*week", text):
            date_filter = "recent"
            add_term(terms, "recent")
        if matches(r"overdue|late|past.*due", text):
            date_filter = "overdue"
            add_term(terms, "overdue")

        return SpacerQuery(
            search_terms=terms,
            plant_names=plants,
            statuses=statuses,
            quantity_filter=quantity,
            ready_filter=ready,
            date_filter=date_filter,
        )

    def build_query(self, query: ReportQuery, params: SpacerQuery) -> ReportQuery:
        query.order("spacer_date", ascending=False)
        now = self.now()

        # Plant beats status beats quantity beats date.
        if params.plant_names:
            plant = params.plant_names[0]
            if plant == "herb":
                query.any_of(*(column("plant_type").ilike(f"%{herb}%") for herb in HERBS))
            else:
                query.ilike("plant_type", f"%{plant}%")
        elif params.statuses:
            query.in_("status", params.statuses)
        elif params.quantity_filter == "low":
            query.lte("quantity", LOW_QUANTITY)
        elif params.quantity_filter == "high":
            query.gte("quantity", HIGH_QUANTITY)
        elif params.date_filter == "recent":
            query.gte("spacer_date", iso(now - timedelta(days=RECENT_DAYS)))
        elif params.date_filter == "overdue":
            query.lt("expected_ready_date", iso(now)).eq("status", "Growing")
        return query

    def render(self, rows: list[Row], params: SpacerQuery) -> ReportOutput:
        now = self.now()
        summary = spacer_summary(rows)
        farm_name = farm_name_of(rows)
        title = "Spacer Inventory Report"
        if params.search_terms:
            title = f"Spacer Inventory: {', '.join(params.search_terms)}"

        def plant(row: Row):
            value = row.get("plant_type")
            if value and any(p.lower() in str(value).lower() for p in params.plant_names):
                return Markup(f"<strong>{escape(value)}</strong>")
            return value

        def expected_ready(row: Row) -> str:
            expected = parse_datetime(row.get("expected_ready_date"))
            late = expected is not None and expected < now and row.get("status") == "Growing"
            return format_date(expected) + (" (overdue)" if late else "")

        columns = (
            Column("Spacer ID", field("spacer_id")),
            Column(
                "Status",
                field("status"),
                style=lambda row: (
                    f"background-color:{row.get('status_background_color') or ''};"
                    f"color:{row.get('status_color') or ''}"
                ),
            ),
            Column("Plant Type", plant),
            Column("Quantity", field("quantity", placeholder="0")),
            Column("Seeded Date", lambda row: format_date(row.get("seeded_date"))),
            Column("Expected Ready", expected_ready),
            Column("Last Updated", lambda row: format_date(row.get("spacer_date"))),
        )
        html = self.page(
            title,
            rows,
            params,
            columns,
            summary=summary_line(
                [
                    f"{summary['ready']} Ready",
                    f"{summary['growing']} Growing",
                    f"{summary['available']} Available",
                    f"{summary['total_quantity']} Total Trays",
                ]
            ),
            farm_name=farm_name,
        )

        description = f"{len(rows)} spacer trays found"
        if params.search_terms:
            description += f" matching: {', '.join(params.search_terms)}"
        return ReportOutput(
            html_content=html,
            metadata=self.metadata(
                rows,
                params,
                title=f"Spacer Inventory - {farm_name or 'Unknown Farm'}",
                description=description,
                summary=summary,
                farm_name=farm_name,
            ),
        )
