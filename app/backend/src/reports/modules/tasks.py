"""Task assignment report."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Literal

from app.backend.src.services.data_source import ReportQuery, Row

from ..base import QueryParameters, ReportModule, ReportOutput, add_term, farm_name_of, iso, matches
from ..html import Column, field, format_date, summary_line
from ..summaries import parse_datetime, tasks_summary


class TasksQuery(QueryParameters):
    status_filter: Literal["pending", "completed", "overdue"] | None = None
    assignment_filter: Literal["assigned_to_me", "unassigned"] | None = None
    time_filter: Literal["today", "this_week"] | None = None
    priority_filter: Literal["urgent"] | None = None
    tower_filter: bool = False
    recurring_filter: bool = False


def due_window(time_filter: str, now: datetime) -> tuple[datetime, datetime]:
    """Start and end of the due-date window; weeks start on Sunday."""

    if time_filter == "today":
        start = now.replace(hour=0, minute=0, second=0, microsecond=0)
        return start, start + timedelta(days=1)
    days_since_sunday = (now.weekday() + 1) % 7
    start = now - timedelta(days=days_since_sunday)
    return start, start + timedelta(days=7)


class TasksModule(ReportModule):
    key = "tasks"
    name = "Task Assignment Report"
    keywords = (
        "tasks",
        "assignments",
        "todo",
        "overdue",
        "pending",
        "completed",
        "due",
        "work",
        "assigned",
    )
    data_type = "tasks"
    relation = "task_assignment_view"
    row_limit = 100
    enrich_farm_name = True
    color = "#4F46E5"

    def parse(self, message: str) -> TasksQuery:
        text = message.lower()
        terms: list[str] = []
        status = assignment = time_filter = priority = None

        if matches(r"pending|waiting|todo|to.*do", text):
            status = "pending"
            add_term(terms, "pending")
        if matches(r"completed|done|finished", text):
            status = "completed"
            add_term(terms, "completed")
        if matches(r"overdue|late|past.*due", text):
            status = "overdue"
            add_term(terms, "overdue")

        if matches(r"assigned.*to.*me|my.*tasks|mine", text):
            assignment = "assigned_to_me"
            add_term(terms, "my tasks")
        if matches(r"unassigned|no.*one.*assigned|not.*assigned", text):
            assignment = "unassigned"
            add_term(terms, "unassigned")

        if matches(r"today|due.*today", text):
            time_filter = "today"
            add_term(terms, "due today")
        if matches(r"this.*week|week", text):
            time_filter = "this_week"
            add_term(terms, "this week")

        if matches(r"urgent|priority|high.*priority", text):
            priority = "urgent"
            add_term(terms, "urgent")

        tower = matches(r"tower", text)
        if tower:
            add_term(terms, "tower tasks")
        recurring = matches(r"recurring|repeat|regular", text)
        if recurring:
            add_term(terms, "recurring")

        return TasksQuery(
            search_terms=terms,
            status_filter=status,
            assignment_filter=assignment,
            time_filter=time_filter,
            priority_filter=priority,
            tower_filter=tower,
            recurring_filter=recurring,
        )

    def build_query(self, query: ReportQuery, params: TasksQuery) -> ReportQuery:
        now = self.now()
        if params.status_filter == "overdue":
            query.lt("due_date", iso(now)).neq("status", "completed")
        elif params.status_filter:
            query.eq("status", params.status_filter)

        if params.time_filter:
            start, end = due_window(params.time_filter, now)
            query.gte("due_date", iso(start)).lt("due_date", iso(end))

        # "assigned to me" needs a user identity, which webhook requests do not carry.
        if params.assignment_filter == "unassigned":
            query.is_null("assigned_to")
        if params.tower_filter:
            query.not_null("tower_id")
        if params.recurring_filter:
            query.eq("is_recurring", True)

        if not params.status_filter:
            query.order("due_date")
        return query

    def render(self, rows: list[Row], params: TasksQuery) -> ReportOutput:
        now = self.now()
        summary = tasks_summary(rows, now=now)
        farm_name = farm_name_of(rows)
        title = f"Tasks: {', '.join(params.search_terms)}" if params.search_terms else self.name

        def is_overdue(row: Row) -> bool:
            due = parse_datetime(row.get("due_date"))
            return due is not None and due < now and row.get("status") != "completed"

        def due(row: Row) -> str:
            marker = "OVERDUE " if is_overdue(row) else ""
            return marker + format_date(row.get("due_date"))

        columns = (
            Column("Task", field("task_type", placeholder="Task")),
            Column("Assigned To", field("assigned_to_name", placeholder="Unassigned")),
            Column("Role", field("assigned_role_name")),
            Column("Due Date", due),
            Column(
                "Status",
                field("status", placeholder="Unknown"),
                style=lambda row: "font-weight:normal"
                if row.get("status") == "completed"
                else "font-weight:bold",
            ),
            Column("Tower", field("tower_identifier")),
            Column("Recurring", lambda row: "Yes" if row.get("is_recurring") else ""),
            Column("Notes", field("notes")),
        )
        html = self.page(
            title,
            rows,
            params,
            columns,
            summary=summary_line(
                [
                    f"{summary['total_tasks']} Tasks",
                    f"{summary['pending']} Pending",
                    f"{summary['completed']} Completed",
                    f"{summary['overdue']} Overdue",
                    f"{summary['unassigned']} Unassigned",
                ]
            ),
            row_style=lambda row: (
                f"color:{row.get('color_code') or '#333'};"
                f"background-color:{row.get('bg_color_code') or '#fff'}"
            ),
            farm_name=farm_name,
        )

        description = f"{len(rows)} tasks found"
        if params.search_terms:
            description += f" matching: {', '.join(params.search_terms)}"
        return ReportOutput(
            html_content=html,
            metadata=self.metadata(
                rows,
                params,
                title=f"Task Assignment Report - {farm_name or 'Unknown Farm'}",
                description=description,
                summary=summary,
                farm_name=farm_name,
            ),
        )
