"""Day-by-day harvest, allocation and delivery activity."""

from __future__ import annotations

from ..html import Column, field, format_date
from ..summaries import daily_operations_summary
from .fixed import FixedViewModule


class DailyOperationsModule(FixedViewModule):
    key = "daily_operations"
    name = "Daily Operations Dashboard"
    keywords = ("daily operations", "what happened today", "what's happening")
    data_type = "rpt_daily_operations"
    relation = "rpt_daily_operations"
    color = "#1D4ED8"

    search_term = "daily operations"
    report_title = "Daily Operations Dashboard"
    description = "A summary of farm operations over the last 14 days."
    summarize = staticmethod(daily_operations_summary)
    summary_labels = (
        ("total_days", "Days"),
        ("total_harvests", "Harvests"),
        ("total_harvested", "Total Qty"),
        ("total_allocations", "Allocations"),
        ("total_deliveries", "Deliveries"),
        ("avg_same_day_rate", "Avg Same-Day %"),
    )
    columns = (
        Column("Date", lambda row: format_date(row.get("harvest_date"))),
        Column("Harvests", field("harvest_batches")),
        Column("Total Qty", field("total_harvested")),
        Column("Allocations", field("allocations_made")),
        Column("Deliveries", field("deliveries_completed")),
        Column("Same-Day Rate", lambda row: f"{row.get('same_day_delivery_rate') or 0}%"),
    )
