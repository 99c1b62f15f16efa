"""Tests for the summary calculators."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from app.backend.src.reports.summaries import (
    allocation_efficiency_summary,
    customer_deliveries_summary,
    harvest_performance_summary,
    inventory_aging_summary,
    lighting_summary,
    monitoring_summary,
    parse_datetime,
    pending_deliveries_summary,
    sensor_summary,
    spacer_summary,
    tasks_summary,
    to_float,
    to_int,
    tower_summary,
)

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    ("value", "expected"),
    [("12", 12), ("12 trays", 12), ("abc", 0), (None, 0), (3.9, 3), ("", 0)],
)
def test_to_int_is_lenient(value, expected) -> None:
    assert to_int(value) == expected


def test_to_float_is_lenient() -> None:
    assert to_float("4.5kwh") == 4.5
    assert to_float("n/a") == 0.0


def test_parse_datetime_assumes_utc() -> None:
    assert parse_datetime("2026-10-19") == datetime(2026, 10, 19, tzinfo=timezone.utc)
    assert parse_datetime("2026-10-19T08:00:00Z").hour == 8
    assert parse_datetime("not a date") is None


def test_empty_inputs_give_zeroed_summaries() -> None:
    assert tower_summary([]) == {"growing": 0, "clean": 0, "available": 0, "maintenance": 0}
    assert lighting_summary([]) == {
        "total_hours": "0.0",
        "total_energy": "0.00",
        "total_cost": "0.00",
        "avg_zones": "0.0",
    }
    assert sensor_summary([])["latest_reading"] == "No readings"
    assert harvest_performance_summary([])["avg_delivery_rate"] == "0.0"
    assert allocation_efficiency_summary([])["avg_days_to_delivery"] == "0.0"


def test_tower_summary_counts_statuses() -> None:
    rows = [
        {"tower_status": "Growing"},
        {"tower_status": "Partially Available", "has_maintenance": True},
        {"tower_status": "Clean"},
        {"tower_status": None},
    ]

    assert tower_summary(rows) == {"growing": 1, "clean": 1, "available": 1, "maintenance": 1}


def test_monitoring_summary() -> None:
    rows = [
        {"needs_attention": True, "read_at": None},
        {"needs_attention": False, "read_at": "2026-10-19T08:00:00Z"},
    ]

    assert monitoring_summary(rows) == {"needs_attention": 1, "good_status": 1, "never_read": 1}


def test_lighting_summary_formats_totals() -> None:
    rows = [
        {"total_usage_hours": "10.5", "total_energy_used_kwh": 3.333, "total_cost": "1.005",
         "zones_active": 3},
        {"total_usage_hours": 2, "total_energy_used_kwh": None, "total_cost": 2, "zones_active": 4},
    ]

    summary = lighting_summary(rows)

    assert summary["total_hours"] == "12.5"
    assert summary["total_energy"] == "3.33"
    assert summary["avg_zones"] == "3.5"


def test_sensor_summary_uses_first_row_as_latest() -> None:
    rows = [
        {"sensor_name": "A", "reading_type": "temperature", "time": "2026-10-19T14:05:09Z"},
        {"sensor_name": "A", "reading_type": "humidity", "time": "2026-10-19T13:00:00Z"},
        {"sensor_name": "B", "reading_type": "humidity", "time": "2026-10-19T12:00:00Z"},
    ]

    assert sensor_summary(rows) == {
        "unique_sensors": 2,
        "reading_types": 2,
        "latest_reading": "2:05:09 PM",
    }


def test_spacer_summary_sums_quantities_by_status() -> None:
    rows = [
        {"status": "Ready", "quantity": "4"},
        {"status": "Growing", "quantity": 12},
        {"status": "Growing", "quantity": None},
        {"status": "Retired", "quantity": 2},
    ]

    assert spacer_summary(rows) == {
        "ready": 4,
        "growing": 12,
        "available": 0,
        "total_quantity": 18,
        "total_trays": 4,
    }


def test_pending_deliveries_summary_counts_unique_customers() -> None:
    rows = [
        {"customer_name": "Fresh Market", "customer_type": "wholesale",
         "delivery_urgency": "urgent", "expected_delivery_date": "2026-10-15"},
        {"customer_name": "Fresh Market", "customer_type": "wholesale",
         "delivery_urgency": "normal", "expected_delivery_date": "2026-10-25"},
        {"customer_name": "Jane Doe", "customer_type": "direct consumer",
         "delivery_urgency": "Urgent", "expected_delivery_date": None},
    ]

    assert pending_deliveries_summary(rows, now=NOW) == {
        "total_deliveries": 3,
        "urgent_deliveries": 2,
        "overdue_deliveries": 1,
        "wholesale_customers": 1,
        "consumer_customers": 1,
    }


def test_inventory_aging_summary_buckets_quantity_by_risk() -> None:
    rows = [
        {"available_quantity": 12, "waste_risk_level": "high_risk"},
        {"available_quantity": 5, "waste_risk_level": "medium_risk"},
        {"available_quantity": 4, "waste_risk_level": "low"},
    ]

    assert inventory_aging_summary(rows) == {
        "total_items": 3,
        "total_quantity": 21,
        "high_risk": 12,
        "medium_risk": 5,
        "low_risk": 4,
    }


def test_customer_deliveries_summary_averages_completion() -> None:
    rows = [
        {"completed_deliveries": 8, "pending_deliveries": 2, "total_quantity_delivered": 40,
         "completion_rate_percent": 80, "customer_type": "retailer"},
        {"completed_deliveries": 1, "pending_deliveries": 1, "total_quantity_delivered": 3,
         "completion_rate_percent": "50", "customer_type": "consumer"},
    ]

    summary = customer_deliveries_summary(rows)

    assert summary["total_completed"] == 9
    assert summary["avg_completion_rate"] == "65.0"
    assert summary["wholesale_customers"] == 1
    assert summary["consumer_customers"] == 1


def test_allocation_efficiency_ignores_missing_delivery_days() -> None:
    rows = [
        {"total_allocations": 10, "success_rate_percent": 90, "avg_days_to_delivery": 2},
        {"total_allocations": 5, "success_rate_percent": 70, "avg_days_to_delivery": None},
    ]

    summary = allocation_efficiency_summary(rows)

    assert summary["total_allocations"] == 15
    assert summary["avg_success_rate"] == "80.0"
    assert summary["avg_days_to_delivery"] == "2.0"


def test_tasks_summary() -> None:
    rows = [
        {"status": "pending", "due_date": "2026-10-18T09:00:00+00:00", "assigned_to": "u-1",
         "tower_id": 3},
        {"status": "completed", "due_date": "2026-10-17T09:00:00+00:00"},
        {"status": "pending", "due_date": "2026-10-22T09:00:00+00:00", "is_recurring": True},
    ]

    assert tasks_summary(rows, now=NOW) == {
        "total_tasks": 3,
        "pending": 2,
        "completed": 1,
        "overdue": 1,
        "assigned": 1,
        "unassigned": 2,
        "tower_tasks": 1,
        "recurring_tasks": 1,
    }
