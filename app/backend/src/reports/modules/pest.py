"""Pest control application history."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Literal

from sqlalchemy import column

from app.backend.src.services.data_source import ReportQuery, Row

from ..base import QueryParameters, ReportModule, ReportOutput, matches
from ..html import Column, field, format_date, format_flag, summary_line
from ..summaries import pest_summary

PRODUCT_PATTERNS: tuple[tuple[str, str], ...] = (
    (r"pyganic", "Pyganic"),
    (r"pageant", "Pageant"),
    (r"milstop", "MilStop SP"),
    (r"thuricide|bt", "Thuricide (BT)"),
    (r"enstar", "Enstar II"),
)

RECENT_DAYS = 90
LAST_WEEK_DAYS = 7

TimeFilter = Literal["recent", "last_month", "last_week", "this_year"]


class PestQuery(QueryParameters):
    product_names: list[str] = []
    product_types: list[str] = []
    time_filter: TimeFilter | None = None
    omri_filter: bool = False
    show_all: bool = False


def window_start(time_filter: str, now: datetime) -> date:
    if time_filter == "last_month":
        first_of_month = now.date().replace(day=1)
        return (first_of_month - timedelta(days=1)).replace(day=1)
    if time_filter == "last_week":
        return (now - timedelta(days=LAST_WEEK_DAYS)).date()
    if time_filter == "this_year":
        return now.date().replace(month=1, day=1)
    return (now - timedelta(days=RECENT_DAYS)).date()


def _detect_time_filter(text: str) -> tuple[TimeFilter | None, str | None]:
    """Time windows are checked in order; the first hit wins."""

    if (
        any(word in text for word in ("recent", "latest", "current"))
        or matches(r"last.*applications?", text)
    ):
        return "recent", "recent"
    if "last month" in text or "past month" in text:
        return "last_month", "last month"
    if "last week" in text or "past week" in text:
        return "last_week", "last week"
    if "this year" in text or "current year" in text:
        return "this_year", "this year"
    if "all" in text:
        return None, "all"
    return None, None


class PestModule(ReportModule):
    key = "pest"
    name = "Pest Application Data"
    keywords = ("pest", "pesticide", "application", "spray", "insecticide", "fungicide")
    data_type = "pest_applications"
    relation = "pest_recent_applications"
    color = "#2c5530"

    def parse(self, message: str) -> PestQuery:
        text = message.lower()
        terms: list[str] = []

        products = [product for pattern, product in PRODUCT_PATTERNS if matches(pattern, text)]
        terms.extend(products)

        types: list[str] = []
        if matches(r"insecticide|insect", text):
            types.append("Insecticide")
            terms.append("insecticide")
        if matches(r"fungicide|fungus", text):
            types.append("Fungicide")
            terms.append("fungicide")

        time_filter, time_term = _detect_time_filter(text)
        if time_term:
            terms.append(time_term)

        omri = any(word in text for word in ("omri", "organic", "certified"))
        if omri:
            terms.append("OMRI certified")

        return PestQuery(
            search_terms=terms,
            product_names=products,
            product_types=types,
            time_filter=time_filter,
            omri_filter=omri,
            show_all=time_term == "all",
        )

    def build_query(self, query: ReportQuery, params: PestQuery) -> ReportQuery:
        if params.product_names:
            query.ilike("product_name", f"%{params.product_names[0]}%")
        elif params.product_types:
            query.ilike("product_type", f"%{params.product_types[0]}%")

        if params.time_filter and not params.show_all:
            start = window_start(params.time_filter, self.now()).isoformat()
            # Applications without a recorded date stay visible in every window.
            query.any_of(
                column("application_date") >= start,
                column("application_date").is_(None),
            )

        if params.omri_filter:
            query.eq("omri_certified", True)
        return query.order("application_date", ascending=False, nulls_last=True)

    def render(self, rows: list[Row], params: PestQuery) -> ReportOutput:
        summary = pest_summary(rows)
        title = "Pest Control Application Report"
        if params.search_terms:
            title = f"Pest Applications: {', '.join(params.search_terms)}"

        def dose(row: Row) -> str:
            if row.get("dose_amount") and row.get("dose_unit"):
                return f"{row['dose_amount']} {row['dose_unit']}"
            return "-"

        columns = (
            Column("Product Name", field("product_name", placeholder="Unknown Product")),
            Column("Type", field("product_type")),
            Column(
                "Application Date",
                lambda row: format_date(row.get("application_date"))
                if row.get("application_date")
                else "No date recorded",
            ),
            Column("Treatment Area", field("treatment_area")),
            Column("Dose", dose),
            Column("Applicator", field("applicator_name")),
            Column("OMRI Certified", lambda row: format_flag(row.get("omri_certified"))),
        )
        html = self.page(
            title,
            rows,
            params,
            columns,
            summary=summary_line(
                [
                    f"{len(rows)} applications",
                    f"{summary['omri_certified']} OMRI certified",
                    f"{summary['organic']} Organic",
                    f"{summary['biological']} Biological",
                    f"{summary['chemical']} Chemical",
                ]
            ),
        )
        return ReportOutput(
            html_content=html,
            metadata=self.metadata(
                rows,
                params,
                title="Pest Applications - Farm Data",
                description=f"{len(rows)} applications found matching criteria.",
                summary=summary,
            ),
        )
