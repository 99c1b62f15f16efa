"""Shared fixtures: a seeded SQLite report store and a fixed clock."""

from __future__ import annotations

import os
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

sys.path.append(str(Path(__file__).resolve().parents[4]))

# Configure environment before application imports
os.environ.setdefault("DATABASE_URL", "sqlite:///./test_farm_reports.db")

from app.backend.src.db import build_engine
from app.backend.src.models import Farm  # noqa: F401
from app.backend.src.models.base import Base
from app.backend.src.reports import QueryProcessor, build_default_registry
from app.backend.src.services.data_source import DataSourceGateway
from app.backend.src.services.farm_names import FarmNameCache

# Monday 19 October 2026, noon UTC.
NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)

SCHEMA = (
    """
    CREATE TABLE tower_display_with_plants (
        farm_id INTEGER, tower_identifier TEXT, tower_status TEXT, plant_name TEXT,
        date_planted TEXT, individual_ports_used INTEGER, overall_available_ports INTEGER,
        total_ports INTEGER, has_maintenance BOOLEAN, next_maintenance_due TEXT,
        farm_name TEXT
    )
    """,
    """
    CREATE TABLE rpt_pending_deliveries (
        farm_id INTEGER, customer_name TEXT, customer_type TEXT, plant_name TEXT,
        quantity INTEGER, expected_delivery_date TEXT, delivery_urgency TEXT,
        urgency_color TEXT, customer_type_color TEXT, days_pending_text TEXT
    )
    """,
    """
    CREATE TABLE task_assignment_view (
        farm_id INTEGER, task_type TEXT, status TEXT, due_date TEXT,
        assigned_to TEXT, assigned_to_name TEXT, tower_id INTEGER,
        tower_identifier TEXT, is_recurring BOOLEAN, notes TEXT
    )
    """,
    """
    CREATE TABLE pest_recent_applications (
        farm_id INTEGER, product_name TEXT, product_type TEXT, application_date TEXT,
        omri_certified BOOLEAN, target_pest TEXT, dose_amount REAL, dose_unit TEXT
    )
    """,
    """
    CREATE TABLE spacer_inventory (
        farm_id INTEGER, spacer_id TEXT, plant_type TEXT, status TEXT,
        quantity INTEGER, seeded_date TEXT, expected_ready_date TEXT, spacer_date TEXT
    )
    """,
    """
    CREATE TABLE rpt_inventory_aging (
        farm_id INTEGER, plant_name TEXT, available_quantity INTEGER, age_text TEXT,
        age_category TEXT, age_color TEXT, waste_risk_level TEXT, risk_color TEXT
    )
    """,
    """
    CREATE TABLE light_total_summary (
        farm_id INTEGER, period_day TEXT, total_usage_hours REAL,
        total_energy_used_kwh REAL, total_cost REAL, zones_active INTEGER,
        total_fixtures_active INTEGER, zones_included TEXT
    )
    """,
    """
    CREATE TABLE sensor_readings_compiled (
        farm_id INTEGER, sensor_name TEXT, reading_type TEXT, value REAL, time TEXT
    )
    """,
)

MONITORING_SCHEMA = """
    CREATE TABLE monitoring_tower_dashboard_fixed (
        farm_id INTEGER, tower_identifier TEXT, row_number INTEGER,
        tower_number_within_row INTEGER, ph_value REAL, ec_value REAL, ph_color TEXT,
        ec_status TEXT, needs_attention BOOLEAN, read_at TEXT,
        last_read_human_readable TEXT, reader_name TEXT
    )
"""


def _lighting(farm_id, day, hours, kwh, cost, zones, fixtures=12, names="Zone A"):
    return {
        "farm_id": farm_id, "period_day": day, "total_usage_hours": hours,
        "total_energy_used_kwh": kwh, "total_cost": cost, "zones_active": zones,
        "total_fixtures_active": fixtures, "zones_included": names,
    }


def _sensor(farm_id, name, reading_type, value, at):
    return {
        "farm_id": farm_id, "sensor_name": name, "reading_type": reading_type,
        "value": value, "time": at,
    }


def _monitoring(farm_id, tower, row, position, ph, ec, ph_color, ec_status, attention, read_at):
    return {
        "farm_id": farm_id, "tower_identifier": tower, "row_number": row,
        "tower_number_within_row": position, "ph_value": ph, "ec_value": ec,
        "ph_color": ph_color, "ec_status": ec_status, "needs_attention": attention,
        "read_at": read_at, "last_read_human_readable": "today" if read_at else None,
        "reader_name": "Sam" if read_at else None,
    }


SEED = {
    "farms": [
        {"id": 1, "farm_name": "Green Valley Farm"},
        {"id": 2, "farm_name": "Hilltop Farm"},
    ],
    "tower_display_with_plants": [
        {
            "farm_id": 1, "tower_identifier": "T-02", "tower_status": "Growing",
            "plant_name": "Lettuce, Oakleaf Green", "date_planted": "2026-10-01",
            "individual_ports_used": 20, "overall_available_ports": 8, "total_ports": 28,
            "has_maintenance": False, "next_maintenance_due": None,
            "farm_name": "Green Valley Farm",
        },
        {
            "farm_id": 1, "tower_identifier": "T-01", "tower_status": "Clean",
            "plant_name": None, "date_planted": None,
            "individual_ports_used": 0, "overall_available_ports": 28, "total_ports": 28,
            "has_maintenance": False, "next_maintenance_due": None,
            "farm_name": "Green Valley Farm",
        },
        {
            "farm_id": 1, "tower_identifier": "T-03", "tower_status": "Partially Available",
            "plant_name": "Basil <Genovese>", "date_planted": "2026-09-20",
            "individual_ports_used": 18, "overall_available_ports": 10, "total_ports": 28,
            "has_maintenance": True, "next_maintenance_due": "2026-10-21",
            "farm_name": "Green Valley Farm",
        },
        {
            "farm_id": 2, "tower_identifier": "H-01", "tower_status": "Growing",
            "plant_name": "Lettuce, Oakleaf Green", "date_planted": "2026-10-02",
            "individual_ports_used": 28, "overall_available_ports": 0, "total_ports": 28,
            "has_maintenance": False, "next_maintenance_due": None,
            "farm_name": "Hilltop Farm",
        },
    ],
    "rpt_pending_deliveries": [
        {
            "farm_id": 1, "customer_name": "Fresh Market", "customer_type": "wholesale",
            "plant_name": "Lettuce, Oakleaf Green", "quantity": 10,
            "expected_delivery_date": "2026-10-15", "delivery_urgency": "urgent",
            "urgency_color": "#dc3545", "customer_type_color": "#007bff",
            "days_pending_text": "4 days",
        },
        {
            "farm_id": 1, "customer_name": "Jane Doe", "customer_type": "consumer",
            "plant_name": "Basil", "quantity": 2,
            "expected_delivery_date": "2026-10-25", "delivery_urgency": "normal",
            "urgency_color": "#28a745", "customer_type_color": "#6f42c1",
            "days_pending_text": None,
        },
        {
            "farm_id": 2, "customer_name": "Hill Grocer", "customer_type": "wholesale",
            "plant_name": "Lettuce, Oakleaf Green", "quantity": 5,
            "expected_delivery_date": "2026-10-01", "delivery_urgency": "urgent",
            "urgency_color": "#dc3545", "customer_type_color": "#007bff",
            "days_pending_text": "18 days",
        },
    ],
    "task_assignment_view": [
        {
            "farm_id": 1, "task_type": "Harvest", "status": "pending",
            "due_date": "2026-10-18T09:00:00+00:00", "assigned_to": "u-1",
            "assigned_to_name": "Alex", "tower_id": 3, "tower_identifier": "T-03",
            "is_recurring": False, "notes": None,
        },
        {
            "farm_id": 1, "task_type": "Clean trays", "status": "completed",
            "due_date": "2026-10-17T09:00:00+00:00", "assigned_to": None,
            "assigned_to_name": None, "tower_id": None, "tower_identifier": None,
            "is_recurring": False, "notes": "done early",
        },
        {
            "farm_id": 1, "task_type": "Nutrient check", "status": "pending",
            "due_date": "2026-10-22T09:00:00+00:00", "assigned_to": None,
            "assigned_to_name": None, "tower_id": None, "tower_identifier": None,
            "is_recurring": True, "notes": None,
        },
        {
            "farm_id": 2, "task_type": "Harvest", "status": "pending",
            "due_date": "2026-10-10T09:00:00+00:00", "assigned_to": None,
            "assigned_to_name": None, "tower_id": 9, "tower_identifier": "H-01",
            "is_recurring": False, "notes": None,
        },
    ],
    "pest_recent_applications": [
        {
            "farm_id": 1, "product_name": "Pyganic", "product_type": "Organic Insecticide",
            "application_date": "2026-10-10", "omri_certified": True,
            "target_pest": "Aphids", "dose_amount": 1.5, "dose_unit": "oz",
        },
        {
            "farm_id": 1, "product_name": "MilStop SP", "product_type": "Fungicide",
            "application_date": "2026-01-05", "omri_certified": True,
            "target_pest": "Powdery mildew", "dose_amount": None, "dose_unit": None,
        },
        {
            "farm_id": 1, "product_name": "Enstar II", "product_type": "Chemical Insecticide",
            "application_date": None, "omri_certified": False,
            "target_pest": "Whiteflies", "dose_amount": 0.5, "dose_unit": "oz",
        },
    ],
    "spacer_inventory": [
        {
            "farm_id": 1, "spacer_id": "S-1", "plant_type": "Basil Genovese",
            "status": "Growing", "quantity": 12, "seeded_date": "2026-10-05",
            "expected_ready_date": "2026-10-18", "spacer_date": "2026-10-17",
        },
        {
            "farm_id": 1, "spacer_id": "S-2", "plant_type": "Cilantro",
            "status": "Ready", "quantity": 4, "seeded_date": "2026-09-28",
            "expected_ready_date": "2026-10-12", "spacer_date": "2026-10-10",
        },
        {
            "farm_id": 1, "spacer_id": "S-3", "plant_type": "Lettuce, Butter Rex",
            "status": "Growing", "quantity": 30, "seeded_date": "2026-10-08",
            "expected_ready_date": "2026-10-29", "spacer_date": "2026-10-18",
        },
    ],
    "rpt_inventory_aging": [
        {
            "farm_id": 1, "plant_name": "Lettuce, Oakleaf Green", "available_quantity": 12,
            "age_text": "6 days", "age_category": "getting_old", "age_color": "#FF9500",
            "waste_risk_level": "high_risk", "risk_color": "#dc3545",
        },
        {
            "farm_id": 1, "plant_name": "Basil", "available_quantity": 4,
            "age_text": "1 day", "age_category": "fresh", "age_color": "#34C759",
            "waste_risk_level": "low_risk", "risk_color": "#28a745",
        },
    ],
    "light_total_summary": [
        _lighting(1, "2026-10-18", 14.0, 120.5, 55.0, 3),
        _lighting(1, "2026-10-18", 9.0, 70.0, 40.0, 6),
        _lighting(1, "2026-10-12", 8.0, 60.25, 30.0, 5),
        _lighting(1, "2026-10-11", 10.0, 80.0, 50.0, 1),
        _lighting(1, "2026-09-19", 6.0, 40.0, 20.0, 2),
        _lighting(1, "2026-09-18", 12.0, 100.0, 49.99, 4),
        _lighting(1, "2026-07-20", 16.0, 130.0, 70.0, 7),
        _lighting(2, "2026-10-18", 20.0, 150.0, 90.0, 8),
    ],
    "sensor_readings_compiled": [
        _sensor(1, "temp-1", "temperature", 21.5, "2026-10-19T11:30:00+00:00"),
        _sensor(1, "hum-1", "humidity", 62.0, "2026-10-19T10:00:00+00:00"),
        _sensor(1, "temp-1", "temperature", 20.0, "2026-10-18T12:00:00+00:00"),
        _sensor(1, "temp-1", "temperature", 19.0, "2026-10-18T11:59:00+00:00"),
        _sensor(1, "hum-1", "humidity", 58.0, "2026-10-19T11:00:00+00:00"),
        _sensor(2, "temp-9", "temperature", 25.0, "2026-10-19T11:45:00+00:00"),
    ],
}

MONITORING_SEED = [
    _monitoring(1, "R1-T1", 1, 1, 5.2, 1.8, "red", "good", False, "2026-10-19T08:00:00+00:00"),
    _monitoring(1, "R1-T2", 1, 2, 7.4, 0.4, "purple", "very_low", True, "2026-10-18T23:59:00+00:00"),
    _monitoring(1, "R2-T1", 2, 1, 6.0, 3.2, "green", "high", True, "2026-10-12T12:00:00+00:00"),
    _monitoring(1, "R2-T2", 2, 2, None, None, None, None, True, None),
    _monitoring(2, "H-R1-T1", 1, 1, 6.1, 1.5, "green", "good", False, "2026-10-19T09:00:00+00:00"),
]


def _insert(connection, name: str, rows: list[dict]) -> None:
    columns = list(rows[0])
    placeholders = ", ".join(f":{column}" for column in columns)
    connection.execute(
        text(f"INSERT INTO {name} ({', '.join(columns)}) VALUES ({placeholders})"),
        rows,
    )


@pytest.fixture()
def engine(tmp_path: Path) -> Engine:
    """SQLite file seeded with report views for farms 1 and 2.

    ``monitoring_tower_dashboard_fixed`` is absent unless ``monitoring_view``
    is requested, so by default fetches against it fail inside the driver.
    """

    engine = build_engine(f"sqlite:///{tmp_path / 'reports.db'}")
    Base.metadata.create_all(engine)
    with engine.begin() as connection:
        for statement in SCHEMA:
            connection.execute(text(statement))
        for name, rows in SEED.items():
            _insert(connection, name, rows)
    yield engine
    engine.dispose()


@pytest.fixture()
def monitoring_view(engine: Engine) -> Engine:
    with engine.begin() as connection:
        connection.execute(text(MONITORING_SCHEMA))
        _insert(connection, "monitoring_tower_dashboard_fixed", MONITORING_SEED)
    return engine


@pytest.fixture()
def clock():
    return lambda: NOW


@pytest.fixture()
def gateway(engine: Engine) -> DataSourceGateway:
    return DataSourceGateway(engine)


@pytest.fixture()
def farm_names(engine: Engine) -> FarmNameCache:
    return FarmNameCache(sessionmaker(bind=engine, expire_on_commit=False))


@pytest.fixture()
def registry(gateway: DataSourceGateway, farm_names: FarmNameCache, clock):
    return build_default_registry(gateway, farm_names=farm_names, clock=clock)


@pytest.fixture()
def processor(registry, clock) -> QueryProcessor:
    return QueryProcessor(registry, clock=clock)
