"""Weekly harvest, delivery and waste rates."""

from __future__ import annotations

from ..html import Column, field, format_date
from ..summaries import harvest_performance_summary
from .fixed import FixedViewModule, color_of, percent


class HarvestPerformanceModule(FixedViewModule):
    key = "harvest_performance"
    name = "Harvest Performance Report"
    keywords = ("harvest performance", "how are we harvesting", "harvest summary")
    data_type = "rpt_harvest_performance"
    relation = "rpt_harvest_performance"
    color = "#2E8B57"

    search_term = "harvest performance"
    report_title = "Weekly Harvest Performance"
    description = "Performance summary for the last 30 days, grouped by week."
    summarize = staticmethod(harvest_performance_summary)
    summary_labels = (
        ("total_harvested", "Total Harvested"),
        ("avg_delivery_rate", "Avg Delivery Rate %"),
        ("avg_waste_rate", "Avg Waste Rate %"),
        ("weeks_reported", "Weeks Reported"),
    )
    columns = (
        Column("Week Of", lambda row: format_date(row.get("harvest_week"))),
        Column("Plant", field("plant_name")),
        Column("Total Harvested", field("total_harvested")),
        Column(
            "Delivery Rate",
            percent("delivery_rate_percent"),
            style=color_of("performance_color"),
        ),
        Column("Waste Rate", percent("waste_rate_percent"), style=color_of("waste_color")),
    )
