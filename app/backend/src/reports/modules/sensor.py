"""Environmental sensor readings."""

from __future__ import annotations

from datetime import timedelta
from typing import Literal

from app.backend.src.services.data_source import ReportQuery, Row

from ..base import QueryParameters, ReportModule, ReportOutput, iso, matches
from ..html import Column, field, format_datetime, format_number, summary_line
from ..summaries import sensor_summary

LOOKBACK = {"recent": timedelta(hours=24), "last_hour": timedelta(hours=1)}


class SensorQuery(QueryParameters):
    reading_type: Literal["temperature", "humidity"] | None = None
    time_filter: Literal["recent", "last_hour"] | None = None


class SensorModule(ReportModule):
    key = "sensor"
    name = "Sensor Reading Data"
    keywords = ("sensor", "temperature", "humidity", "data")
    data_type = "sensor_data"
    relation = "sensor_readings_compiled"
    row_limit = 100
    color = "#4682B4"

    def parse(self, message: str) -> SensorQuery:
        text = message.lower()
        terms: list[str] = []
        reading_type = time_filter = None

        if matches(r"temperature|temp", text):
            reading_type = "temperature"
            terms.append("temperature")
        if matches(r"humidity", text):
            reading_type = "humidity"
            terms.append("humidity")
        if matches(r"recent|latest|today", text):
            time_filter = "recent"
            terms.append("recent")
        if matches(r"last.*hour", text):
            time_filter = "last_hour"
            terms.append("last hour")

        return SensorQuery(search_terms=terms, reading_type=reading_type, time_filter=time_filter)

    def build_query(self, query: ReportQuery, params: SensorQuery) -> ReportQuery:
        if params.reading_type:
            query.eq("reading_type", params.reading_type)
        if params.time_filter:
            query.gte("time", iso(self.now() - LOOKBACK[params.time_filter]))
        return query.order("time", ascending=False)

    def render(self, rows: list[Row], params: SensorQuery) -> ReportOutput:
        summary = sensor_summary(rows)
        columns = (
            Column("Sensor", field("sensor_name")),
            Column("Reading Type", field("reading_type")),
            Column("Value", lambda row: format_number(row.get("value"), 2)),
            Column("Time", lambda row: format_datetime(row.get("time"))),
        )
        html = self.page(
            "Sensor Readings Report",
            rows,
            params,
            columns,
            summary=summary_line(
                [
                    f"{summary['unique_sensors']} Sensors",
                    f"{summary['reading_types']} Reading Types",
                    f"Latest: {summary['latest_reading']}",
                ]
            ),
        )
        return ReportOutput(
            html_content=html,
            metadata=self.metadata(
                rows,
                params,
                title="Sensor Readings - Farm Data",
                description=f"{len(rows)} readings found matching criteria.",
                summary=summary,
            ),
        )
