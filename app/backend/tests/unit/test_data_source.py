"""Tests for the farm-scoped query builder."""

from __future__ import annotations

from sqlalchemy import column
from sqlalchemy.exc import OperationalError

from app.backend.src.services.data_source import DataSourceGateway, FetchError, QueryResult


def test_every_query_is_scoped_to_the_farm(gateway: DataSourceGateway) -> None:
    result = gateway.from_relation("tower_display_with_plants", 1).execute()

    assert result.error is None
    assert {row["farm_id"] for row in result.rows} == {1}
    assert len(result.rows) == 3


def test_statement_starts_with_farm_predicate(gateway: DataSourceGateway) -> None:
    query = gateway.from_relation("tower_display_with_plants", 7).eq("tower_status", "Growing")

    sql = str(query.statement())

    assert "FROM tower_display_with_plants" in sql
    assert sql.index("farm_id") < sql.index("tower_status")


def test_filters_ordering_and_limit(gateway: DataSourceGateway) -> None:
    result = (
        gateway.from_relation("tower_display_with_plants", 1)
        .gt("overall_available_ports", 5)
        .order("tower_identifier", ascending=False)
        .limit(2)
        .execute()
    )

    assert [row["tower_identifier"] for row in result.rows] == ["T-03", "T-02"]


def test_ilike_is_case_insensitive(gateway: DataSourceGateway) -> None:
    result = (
        gateway.from_relation("tower_display_with_plants", 1)
        .ilike("plant_name", "%oakleaf GREEN%")
        .execute()
    )

    assert [row["tower_identifier"] for row in result.rows] == ["T-02"]


def test_any_of_keeps_the_farm_scope(gateway: DataSourceGateway) -> None:
    result = (
        gateway.from_relation("pest_recent_applications", 1)
        .any_of(column("application_date") >= "2026-07-01", column("application_date").is_(None))
        .order("application_date", ascending=False, nulls_last=True)
        .execute()
    )

    assert [row["product_name"] for row in result.rows] == ["Pyganic", "Enstar II"]


def test_null_predicates(gateway: DataSourceGateway) -> None:
    unassigned = gateway.from_relation("task_assignment_view", 1).is_null("assigned_to").execute()
    on_towers = gateway.from_relation("task_assignment_view", 1).not_null("tower_id").execute()

    assert len(unassigned.rows) == 2
    assert [row["tower_identifier"] for row in on_towers.rows] == ["T-03"]


def test_database_errors_are_returned_not_raised(gateway: DataSourceGateway) -> None:
    result = gateway.from_relation("monitoring_tower_dashboard_fixed", 1).execute()

    assert result.rows is None
    assert isinstance(result.error, FetchError)
    assert "monitoring_tower_dashboard_fixed" in result.error.message
    assert result.error.details


def test_fetch_error_from_driver_exception() -> None:
    exc = OperationalError("SELECT 1", {}, Exception("connection refused"))

    error = FetchError.from_exception(exc)

    assert error.details == "connection refused"
    assert error.code == exc.code


def test_failed_result_has_no_rows() -> None:
    result = QueryResult.failed(FetchError(message="boom"))

    assert result.rows is None
    assert result.error.message == "boom"
