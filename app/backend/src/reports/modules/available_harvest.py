"""Harvested product that has not been allocated yet."""

from __future__ import annotations

from app.backend.src.services.data_source import Row

from ..html import Column, field, format_date
from ..summaries import available_harvest_summary
from .fixed import FixedViewModule, humanize


class AvailableHarvestModule(FixedViewModule):
    key = "available_harvest"
    name = "Available Harvest Report"
    keywords = ("available for allocation", "what can i sell", "available harvest")
    data_type = "rpt_available_harvest"
    relation = "rpt_available_harvest"
    color = "#34C759"

    search_term = "available harvest"
    report_title = "Available Harvest for Allocation"
    description = "Fresh product batches available for allocation."
    summarize = staticmethod(available_harvest_summary)
    summary_labels = (
        ("total_quantity", "Total Available"),
        ("plant_types", "Plant Types"),
        ("very_fresh_items", "Very Fresh"),
        ("avg_days_since_harvest", "Avg Days Since Harvest"),
    )
    columns = (
        Column("Plant", field("plant_name")),
        Column("Available Qty", field("available_quantity")),
        Column("Harvest Date", lambda row: format_date(row.get("harvest_date"))),
        Column("Days Old", field("days_since_harvest")),
        Column(
            "Freshness",
            humanize("freshness_level"),
            style=lambda row: "color:#34C759"
            if row.get("freshness_level") == "very_fresh"
            else "color:#FF9500",
        ),
    )

    def describe_rows(self, rows: list[Row]) -> str:
        return f"{len(rows)} fresh product batches are available for allocation."
