"""Prometheus metric definitions for report dispatch."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

report_requests_total = Counter(
    "report_requests_total",
    "Total report requests by selected module and outcome.",
    labelnames=["module", "outcome"],
)

report_fetch_seconds = Histogram(
    "report_fetch_seconds",
    "Time spent fetching rows for a report module.",
    labelnames=["module"],
)

__all__ = [
    "report_fetch_seconds",
    "report_requests_total",
]
