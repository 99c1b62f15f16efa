"""Allocations waiting to be delivered."""

from __future__ import annotations

from typing import Literal

from app.backend.src.services.data_source import ReportQuery, Row

from ..base import QueryParameters, ReportModule, ReportOutput, add_term, farm_name_of, iso
from ..html import Column, field, format_date, summary_line
from ..summaries import pending_deliveries_summary


class PendingDeliveriesQuery(QueryParameters):
    urgency_filter: Literal["urgent"] | None = None
    customer_type_filter: Literal["wholesale", "consumer"] | None = None
    time_filter: Literal["overdue", "today"] | None = None


class PendingDeliveriesModule(ReportModule):
    key = "pending_deliveries"
    name = "Pending Deliveries Report"
    keywords = ("pending deliveries", "to be delivered", "needs to be delivered", "deliveries")
    data_type = "rpt_pending_deliveries"
    relation = "rpt_pending_deliveries"
    color = "#8B4513"

    def parse(self, message: str) -> PendingDeliveriesQuery:
        text = message.lower()
        terms = ["pending deliveries"]
        urgency = customer_type = time_filter = None

        if any(word in text for word in ("urgent", "priority", "rush")):
            urgency = "urgent"
            add_term(terms, "urgent")

        # Later signals overwrite earlier ones within a category.
        if "wholesale" in text or "retailer" in text:
            customer_type = "wholesale"
            add_term(terms, "wholesale")
        if any(word in text for word in ("consumer", "direct", "retail")):
            customer_type = "consumer"
            add_term(terms, "consumer")

        if "overdue" in text or "late" in text:
            time_filter = "overdue"
            add_term(terms, "overdue")
        if "today" in text:
            time_filter = "today"
            add_term(terms, "due today")

        return PendingDeliveriesQuery(
            search_terms=terms,
            urgency_filter=urgency,
            customer_type_filter=customer_type,
            time_filter=time_filter,
        )

    def build_query(self, query: ReportQuery, params: PendingDeliveriesQuery) -> ReportQuery:
        if params.urgency_filter:
            query.eq("delivery_urgency", params.urgency_filter)
        if params.customer_type_filter:
            query.ilike("customer_type", f"%{params.customer_type_filter}%")

        now = self.now()
        if params.time_filter == "overdue":
            query.lt("expected_delivery_date", iso(now))
        elif params.time_filter == "today":
            query.eq("expected_delivery_date", now.date().isoformat())
        return query.order("expected_delivery_date")

    def render(self, rows: list[Row], params: PendingDeliveriesQuery) -> ReportOutput:
        summary = pending_deliveries_summary(rows, now=self.now())
        farm_name = farm_name_of(rows)
        title = self.name
        if len(params.search_terms) > 1:
            title = f"Pending Deliveries: {', '.join(params.search_terms[1:])}"

        columns = (
            Column("Customer", field("customer_name")),
            Column(
                "Type",
                field("customer_type"),
                style=lambda row: f"color:{row.get('customer_type_color') or '#333'}",
            ),
            Column("Product", field("plant_name", "product_name")),
            Column("Quantity", field("quantity")),
            Column(
                "Pending Since",
                lambda row: row.get("days_pending_text")
                or format_date(row.get("expected_delivery_date")),
            ),
            Column(
                "Priority",
                field("delivery_urgency", placeholder="Normal"),
                style=lambda row: f"color:{_urgency_color(row)};font-weight:bold",
            ),
        )
        html = self.page(
            title,
            rows,
            params,
            columns,
            summary=summary_line(
                [
                    f"{len(rows)} pending deliveries found",
                    f"Filtered by: {params.urgency_filter}" if params.urgency_filter else "",
                    f"Customer type: {params.customer_type_filter}"
                    if params.customer_type_filter
                    else "",
                    f"Time filter: {params.time_filter}" if params.time_filter else "",
                ]
            ),
            row_style=lambda row: f"border-left:5px solid {_urgency_color(row)}",
            farm_name=farm_name,
        )
        return ReportOutput(
            html_content=html,
            metadata=self.metadata(
                rows,
                params,
                title=self.name,
                description=f"{len(rows)} allocations are pending delivery.",
                summary=summary,
                farm_name=farm_name or "Unknown Farm",
            ),
        )


def _urgency_color(row: Row) -> str:
    return str(row.get("urgency_color") or "#ccc")
