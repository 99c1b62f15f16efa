"""Summary calculators for report rows.

Each calculator takes the fetched rows of one report type and returns a flat
dict of counts or formatted aggregates. Missing or unparsable numbers count as
zero and an empty row list yields the zeroed summary.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timezone
from typing import Any, Iterable, Mapping

Rows = Iterable[Mapping[str, Any]]

_LEADING_INT = re.compile(r"^\s*[+-]?\d+")
_LEADING_FLOAT = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")


def to_int(value: Any) -> int:
    if value is None or isinstance(value, bool):
        return int(bool(value))
    if isinstance(value, (int, float)):
        return int(value)
    match = _LEADING_INT.match(str(value))
    return int(match.group()) if match else 0


def to_float(value: Any) -> float:
    if value is None or isinstance(value, bool):
        return float(bool(value))
    if isinstance(value, (int, float)):
        return float(value)
    match = _LEADING_FLOAT.match(str(value))
    return float(match.group()) if match else 0.0


def _lower(value: Any) -> str:
    return str(value).lower() if value else ""


def parse_datetime(value: Any) -> datetime | None:
    """Best-effort conversion of a row value into an aware UTC datetime."""

    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip().replace("Z", "+00:00")
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _now(now: datetime | None) -> datetime:
    return now if now is not None else datetime.now(timezone.utc)


def _average(total: float, count: int) -> str:
    return f"{total / count:.1f}" if count else "0.0"


def tower_summary(rows: Rows) -> dict[str, int]:
    rows = list(rows)
    statuses = [_lower(row.get("tower_status")) for row in rows]
    return {
        "growing": sum(1 for status in statuses if status == "growing"),
        "clean": sum(1 for status in statuses if status == "clean"),
        "available": sum(1 for status in statuses if "available" in status),
        "maintenance": sum(1 for row in rows if row.get("has_maintenance")),
    }


def pest_summary(rows: Rows) -> dict[str, int]:
    rows = list(rows)
    types = [_lower(row.get("product_type")) for row in rows]
    return {
        "organic": sum(1 for kind in types if "organic" in kind),
        "biological": sum(1 for kind in types if "biological" in kind),
        "chemical": sum(1 for kind in types if "chemical" in kind),
        "omri_certified": sum(1 for row in rows if row.get("omri_certified")),
    }


def monitoring_summary(rows: Rows) -> dict[str, int]:
    rows = list(rows)
    return {
        "needs_attention": sum(1 for row in rows if row.get("needs_attention")),
        "good_status": sum(1 for row in rows if not row.get("needs_attention")),
        "never_read": sum(1 for row in rows if not row.get("read_at")),
    }


def lighting_summary(rows: Rows) -> dict[str, str]:
    rows = list(rows)
    if not rows:
        return {
            "total_hours": "0.0",
            "total_energy": "0.00",
            "total_cost": "0.00",
            "avg_zones": "0.0",
        }

    hours = sum(to_float(row.get("total_usage_hours")) for row in rows)
    energy = sum(to_float(row.get("total_energy_used_kwh")) for row in rows)
    cost = sum(to_float(row.get("total_cost")) for row in rows)
    zones = sum(to_float(row.get("zones_active")) for row in rows)
    return {
        "total_hours": f"{hours:.1f}",
        "total_energy": f"{energy:.2f}",
        "total_cost": f"{cost:.2f}",
        "avg_zones": _average(zones, len(rows)),
    }


def sensor_summary(rows: Rows) -> dict[str, Any]:
    """Rows are expected newest first; the first row supplies the latest reading."""

    rows = list(rows)
    latest = parse_datetime(rows[0].get("time")) if rows else None
    return {
        "unique_sensors": len({row.get("sensor_name") for row in rows}),
        "reading_types": len({row.get("reading_type") for row in rows}),
        "latest_reading": (
            latest.strftime("%I:%M:%S %p").lstrip("0") if latest else "No readings"
        ),
    }


def spacer_summary(rows: Rows) -> dict[str, int]:
    rows = list(rows)
    summary = {
        "ready": 0,
        "growing": 0,
        "available": 0,
        "total_quantity": 0,
        "total_trays": len(rows),
    }
    for row in rows:
        quantity = to_int(row.get("quantity"))
        summary["total_quantity"] += quantity
        status = _lower(row.get("status"))
        if status in ("ready", "growing", "available"):
            summary[status] += quantity
    return summary


def _customer_bucket(customer_type: str) -> str | None:
    if "wholesale" in customer_type or "retailer" in customer_type:
        return "wholesale_customers"
    if "consumer" in customer_type or "direct" in customer_type:
        return "consumer_customers"
    return None


def pending_deliveries_summary(
    rows: Rows, now: datetime | None = None
) -> dict[str, int]:
    rows = list(rows)
    current = _now(now)
    summary = {
        "total_deliveries": len(rows),
        "urgent_deliveries": 0,
        "overdue_deliveries": 0,
        "wholesale_customers": 0,
        "consumer_customers": 0,
    }
    seen_customers: set[tuple[Any, Any]] = set()
    for row in rows:
        if _lower(row.get("delivery_urgency")) == "urgent":
            summary["urgent_deliveries"] += 1

        expected = parse_datetime(row.get("expected_delivery_date"))
        if expected is not None and expected < current:
            summary["overdue_deliveries"] += 1

        customer = (row.get("customer_name"), row.get("customer_type"))
        if customer in seen_customers:
            continue
        seen_customers.add(customer)
        bucket = _customer_bucket(_lower(row.get("customer_type")))
        if bucket:
            summary[bucket] += 1
    return summary


def inventory_aging_summary(rows: Rows) -> dict[str, int]:
    rows = list(rows)
    summary = {
        "total_items": len(rows),
        "total_quantity": 0,
        "high_risk": 0,
        "medium_risk": 0,
        "low_risk": 0,
    }
    for row in rows:
        quantity = to_int(row.get("available_quantity"))
        summary["total_quantity"] += quantity
        risk = _lower(row.get("waste_risk_level"))
        for level in ("high", "medium", "low"):
            if level in risk:
                summary[f"{level}_risk"] += quantity
                break
    return summary


def harvest_performance_summary(rows: Rows) -> dict[str, Any]:
    rows = list(rows)
    return {
        "total_harvested": sum(to_int(row.get("total_harvested")) for row in rows),
        "avg_delivery_rate": _average(
            sum(to_float(row.get("delivery_rate_percent")) for row in rows), len(rows)
        ),
        "avg_waste_rate": _average(
            sum(to_float(row.get("waste_rate_percent")) for row in rows), len(rows)
        ),
        "weeks_reported": len(rows),
    }


def daily_operations_summary(rows: Rows) -> dict[str, Any]:
    rows = list(rows)
    return {
        "total_days": len(rows),
        "total_harvests": sum(to_int(row.get("harvest_batches")) for row in rows),
        "total_harvested": sum(to_int(row.get("total_harvested")) for row in rows),
        "total_allocations": sum(to_int(row.get("allocations_made")) for row in rows),
        "total_deliveries": sum(
            to_int(row.get("deliveries_completed")) for row in rows
        ),
        "avg_same_day_rate": _average(
            sum(to_float(row.get("same_day_delivery_rate")) for row in rows),
            len(rows),
        ),
    }


def customer_deliveries_summary(rows: Rows) -> dict[str, Any]:
    rows = list(rows)
    summary: dict[str, Any] = {
        "total_customers": len(rows),
        "total_completed": 0,
        "total_pending": 0,
        "total_quantity_delivered": 0,
        "avg_completion_rate": "0.0",
        "wholesale_customers": 0,
        "consumer_customers": 0,
    }
    completion = 0.0
    for row in rows:
        summary["total_completed"] += to_int(row.get("completed_deliveries"))
        summary["total_pending"] += to_int(row.get("pending_deliveries"))
        summary["total_quantity_delivered"] += to_int(
            row.get("total_quantity_delivered")
        )
        completion += to_float(row.get("completion_rate_percent"))
        bucket = _customer_bucket(_lower(row.get("customer_type")))
        if bucket:
            summary[bucket] += 1
    summary["avg_completion_rate"] = _average(completion, len(rows))
    return summary


def available_harvest_summary(rows: Rows) -> dict[str, Any]:
    rows = list(rows)
    very_fresh = sum(
        1 for row in rows if _lower(row.get("freshness_level")) == "very_fresh"
    )
    return {
        "total_quantity": sum(to_int(row.get("available_quantity")) for row in rows),
        "plant_types": len({row.get("plant_name") for row in rows}),
        "very_fresh_items": very_fresh,
        "regular_fresh_items": len(rows) - very_fresh,
        "avg_days_since_harvest": _average(
            sum(to_int(row.get("days_since_harvest")) for row in rows), len(rows)
        ),
    }


def allocation_efficiency_summary(rows: Rows) -> dict[str, Any]:
    rows = list(rows)
    delivery_days = [
        to_float(row["avg_days_to_delivery"])
        for row in rows
        if row.get("avg_days_to_delivery") is not None
    ]
    return {
        "total_weeks": len(rows),
        "total_allocations": sum(to_int(row.get("total_allocations")) for row in rows),
        "total_successful": sum(
            to_int(row.get("successful_deliveries")) for row in rows
        ),
        "total_overdue": sum(to_int(row.get("overdue_allocations")) for row in rows),
        "avg_success_rate": _average(
            sum(to_float(row.get("success_rate_percent")) for row in rows), len(rows)
        ),
        "avg_days_to_delivery": _average(sum(delivery_days), len(delivery_days)),
    }


def tasks_summary(rows: Rows, now: datetime | None = None) -> dict[str, int]:
    rows = list(rows)
    current = _now(now)
    summary = {
        "total_tasks": len(rows),
        "pending": 0,
        "completed": 0,
        "overdue": 0,
        "assigned": 0,
        "unassigned": 0,
        "tower_tasks": 0,
        "recurring_tasks": 0,
    }
    for row in rows:
        status = _lower(row.get("status"))
        if status in ("pending", "completed"):
            summary[status] += 1

        due = parse_datetime(row.get("due_date"))
        if due is not None and due < current and status != "completed":
            summary["overdue"] += 1

        summary["assigned" if row.get("assigned_to") else "unassigned"] += 1
        if row.get("tower_id"):
            summary["tower_tasks"] += 1
        if row.get("is_recurring"):
            summary["recurring_tasks"] += 1
    return summary


__all__ = [
    "allocation_efficiency_summary",
    "available_harvest_summary",
    "customer_deliveries_summary",
    "daily_operations_summary",
    "harvest_performance_summary",
    "inventory_aging_summary",
    "lighting_summary",
    "monitoring_summary",
    "parse_datetime",
    "pending_deliveries_summary",
    "pest_summary",
    "sensor_summary",
    "spacer_summary",
    "tasks_summary",
    "to_float",
    "to_int",
    "tower_summary",
]
