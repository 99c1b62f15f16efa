"""Available inventory by age and waste risk."""

from __future__ import annotations

from app.backend.src.services.data_source import Row

from ..html import Column, field
from ..summaries import inventory_aging_summary
from .fixed import FixedViewModule, color_of, humanize


class InventoryAgingModule(FixedViewModule):
    key = "inventory_aging"
    name = "Inventory Aging Analysis"
    keywords = ("inventory aging", "getting old", "waste risk", "old inventory")
    data_type = "rpt_inventory_aging"
    relation = "rpt_inventory_aging"
    color = "#B45309"

    search_term = "inventory aging"
    report_title = "Inventory Aging Analysis"
    description = "Analysis of available inventory by age and waste risk."
    summarize = staticmethod(inventory_aging_summary)
    summary_labels = (
        ("total_items", "Batches"),
        ("total_quantity", "Total Qty"),
        ("high_risk", "High Risk Qty"),
        ("medium_risk", "Medium Risk Qty"),
        ("low_risk", "Low Risk Qty"),
    )
    columns = (
        Column("Plant", field("plant_name")),
        Column("Available Qty", field("available_quantity")),
        Column("Age", field("age_text")),
        Column("Category", humanize("age_category"), style=color_of("age_color", bold=True)),
        Column("Waste Risk", humanize("waste_risk_level")),
    )

    def style_row(self, row: Row) -> str:
        return f"border-left:5px solid {row.get('risk_color') or '#ddd'}"
