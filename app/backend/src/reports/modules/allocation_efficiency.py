"""Weekly allocation success rates."""

from __future__ import annotations

from ..html import Column, field, format_date, format_number
from ..summaries import allocation_efficiency_summary
from .fixed import FixedViewModule, percent


class AllocationEfficiencyModule(FixedViewModule):
    key = "allocation_efficiency"
    name = "Allocation Efficiency Report"
    keywords = ("allocation efficiency", "how efficient are allocations")
    data_type = "rpt_allocation_efficiency"
    relation = "rpt_allocation_efficiency"
    color = "#4F46E5"

    search_term = "allocation efficiency"
    report_title = "Weekly Allocation Efficiency"
    description = "Analysis of allocation success rates over the last 30 days."
    summarize = staticmethod(allocation_efficiency_summary)
    summary_labels = (
        ("total_weeks", "Weeks"),
        ("total_allocations", "Allocations"),
        ("total_successful", "Successful"),
        ("total_overdue", "Overdue"),
        ("avg_success_rate", "Avg Success %"),
        ("avg_days_to_delivery", "Avg Days to Delivery"),
    )
    columns = (
        Column("Week Of", lambda row: format_date(row.get("allocation_week"))),
        Column("Plant", field("plant_name")),
        Column("Total Allocations", field("total_allocations")),
        Column("Successful", field("successful_deliveries")),
        Column("Overdue", field("overdue_allocations")),
        Column(
            "Avg. Days to Delivery",
            lambda row: "N/A"
            if row.get("avg_days_to_delivery") is None
            else format_number(row["avg_days_to_delivery"], 1),
        ),
        Column("Success Rate", percent("success_rate_percent")),
    )
