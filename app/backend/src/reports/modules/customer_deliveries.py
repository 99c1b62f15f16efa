"""Per-customer delivery totals."""

from __future__ import annotations

from ..html import Column, field
from ..summaries import customer_deliveries_summary
from .fixed import FixedViewModule, color_of, percent


class CustomerDeliveriesModule(FixedViewModule):
    key = "customer_deliveries"
    name = "Customer Delivery Summary"
    keywords = ("customer deliveries", "top customers", "who are we delivering to")
    data_type = "rpt_customer_deliveries"
    relation = "rpt_customer_deliveries"
    color = "#0E7490"

    search_term = "customer deliveries"
    report_title = "Customer Delivery Summary"
    description = "Summary of deliveries to customers over the last 30 days."
    summarize = staticmethod(customer_deliveries_summary)
    summary_labels = (
        ("total_customers", "Customers"),
        ("total_completed", "Completed"),
        ("total_pending", "Pending"),
        ("total_quantity_delivered", "Qty Delivered"),
        ("avg_completion_rate", "Avg Completion %"),
    )
    columns = (
        Column("Customer", field("customer_name")),
        Column("Type", field("customer_type"), style=color_of("customer_type_color", bold=True)),
        Column("Completed", field("completed_deliveries")),
        Column("Pending", field("pending_deliveries")),
        Column("Total Qty", field("total_quantity_delivered")),
        Column(
            "Completion %",
            percent("completion_rate_percent"),
            style=color_of("completion_rate_color"),
        ),
    )
