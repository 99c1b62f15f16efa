"""HTML building blocks shared by the report modules.

Everything taken from a database row goes through :func:`markupsafe.escape`.
Pages are self-contained: inline styles, a print button, and no external
assets.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Iterable, Mapping, Sequence

from markupsafe import Markup, escape

from .summaries import parse_datetime

PLACEHOLDER = "-"

Row = Mapping[str, Any]


@dataclass(frozen=True)
class Column:
    """One table column: a header and how to read the cell from a row."""

    header: str
    value: Callable[[Row], Any]
    style: Callable[[Row], str] | None = None


def field(name: str, *fallbacks: str, placeholder: str = PLACEHOLDER) -> Callable[[Row], Any]:
    """Return a reader for ``name`` that tries ``fallbacks`` when it is blank."""

    def read(row: Row) -> Any:
        for key in (name, *fallbacks):
            value = row.get(key)
            if value is not None and value != "":
                return value
        return placeholder

    return read


def cell(value: Any) -> Markup:
    if value is None or value == "":
        return Markup(PLACEHOLDER)
    if isinstance(value, Markup):
        return value
    return escape(value)


def format_date(value: Any) -> str:
    parsed = parse_datetime(value)
    return parsed.strftime("%m/%d/%Y") if parsed else PLACEHOLDER


def format_datetime(value: Any) -> str:
    parsed = parse_datetime(value)
    if parsed is None:
        return PLACEHOLDER
    return f"{parsed:%m/%d/%Y} {parsed:%I:%M %p}".replace(" 0", " ", 1)


def format_number(value: Any, decimals: int = 0, suffix: str = "") -> str:
    if value is None or value == "":
        return PLACEHOLDER
    try:
        number = float(value)
    except (TypeError, ValueError):
        return str(value)
    return f"{number:,.{decimals}f}{suffix}"


def format_flag(value: Any, yes: str = "Yes", no: str = "No") -> str:
    return yes if value else no


def generated_on(now: datetime) -> str:
    """Human timestamp used in report headers, e.g. ``October 19, 2026 3:04 PM``."""

    hour = now.strftime("%I").lstrip("0") or "12"
    return f"{now:%B} {now.day}, {now.year} {hour}:{now:%M %p}"


def _style_attr(style: Callable[[Row], str] | None, row: Row) -> str:
    css = style(row) if style else ""
    return f' style="{escape(css)}"' if css else ""


def render_table(
    rows: Iterable[Row],
    columns: Sequence[Column],
    *,
    row_style: Callable[[Row], str] | None = None,
    empty_message: str = "No records found matching the specified criteria.",
) -> Markup:
    html = ["<table>", "<thead><tr>"]
    for column in columns:
        html.append(f"<th>{escape(column.header)}</th>")
    html.append("</tr></thead>")

    html.append("<tbody>")
    count = 0
    for row in rows:
        count += 1
        html.append(f"<tr{_style_attr(row_style, row)}>")
        for column in columns:
            html.append(f"<td{_style_attr(column.style, row)}>{cell(column.value(row))}</td>")
        html.append("</tr>")
    if count == 0:
        html.append(
            f'<tr><td colspan="{len(columns)}"><em>{escape(empty_message)}</em></td></tr>'
        )
    html.append("</tbody></table>")
    return Markup("".join(html))


def summary_cards(cards: Sequence[tuple[str, Any]], color: str) -> Markup:
    """Render ``(label, value)`` pairs as a strip of stat cards."""

    html = ['<div class="summary-cards">']
    for label, value in cards:
        html.append(
            f'<div class="card" style="border-top:3px solid {escape(color)}">'
            f'<div class="card-value">{cell(value)}</div>'
            f'<div class="card-label">{escape(label)}</div></div>'
        )
    html.append("</div>")
    return Markup("".join(html))


def summary_line(parts: Sequence[str]) -> Markup:
    return Markup(" &bull; ").join(escape(part) for part in parts if part)


def search_banner(search_terms: Sequence[str]) -> Markup:
    if not search_terms:
        return Markup("")
    terms = ", ".join(search_terms)
    return Markup(
        f'<div class="search">Search criteria: <strong>{escape(terms)}</strong></div>'
    )


_STYLE = """
body{font-family:Arial,sans-serif;margin:20px;font-size:12px;background:#f8f9fa}
.container{background:white;padding:20px;border-radius:8px;box-shadow:0 2px 4px rgba(0,0,0,0.1)}
.header{display:flex;justify-content:space-between;align-items:center;margin-bottom:15px}
h1{font-size:18px;color:%(color)s;margin:0}
.print-button{background:%(color)s;color:white;border:none;padding:8px 16px;border-radius:4px;cursor:pointer;font-size:11px;font-weight:bold}
.info{color:#666;font-size:10px;margin-bottom:15px}
.search{margin-bottom:10px;font-size:11px;color:#444}
.summary{margin-bottom:15px;padding:10px;background:#f1f8f4;border-radius:6px;font-size:11px;border-left:4px solid %(color)s}
.summary-cards{display:flex;flex-wrap:wrap;gap:10px;margin-bottom:15px}
.card{flex:1;min-width:110px;background:#fafafa;padding:10px;border-radius:6px;text-align:center}
.card-value{font-size:18px;font-weight:bold;color:%(color)s}
.card-label{font-size:10px;color:#666}
table{width:100%%;border-collapse:collapse;font-size:11px}
th,td{border:1px solid #ddd;padding:8px;text-align:left}
th{background-color:#f8f9fa;color:%(color)s;font-weight:bold}
tr:nth-child(even){background-color:#f9f9f9}
.footer{margin-top:15px;color:#999;font-size:10px}
@media print{
body{background:white;margin:0}
.container{box-shadow:none;border-radius:0;padding:10px}
.print-button{display:none !important}
}
"""


def render_page(
    title: str,
    *,
    color: str,
    generated_at: datetime,
    farm_name: str | None = None,
    search_terms: Sequence[str] = (),
    summary: Markup | str = "",
    body: Markup | str = "",
    footer: str | None = None,
) -> str:
    """Assemble a complete report document."""

    info = f"Generated on {generated_on(generated_at)}"
    if farm_name:
        info += f" &bull; Farm: {escape(farm_name)}"
    summary_html = f'<div class="summary">{escape(summary)}</div>' if summary else ""
    footer_html = f'<div class="footer">{escape(footer)}</div>' if footer else ""
    return (
        "<!DOCTYPE html>\n<html>\n<head>\n"
        '<meta charset="utf-8">\n'
        f"<title>{escape(title)}</title>\n"
        f"<style>{_STYLE % {'color': escape(color)}}</style>\n"
        "</head>\n<body>\n"
        '<div class="container">\n'
        '<div class="header">'
        f"<h1>{escape(title)}</h1>"
        '<button class="print-button" onclick="window.print()">Print Report</button>'
        "</div>\n"
        f'<div class="info">{info}</div>\n'
        f"{search_banner(search_terms)}\n"
        f"{summary_html}\n"
        f"{escape(body)}\n"
        f"{footer_html}\n"
        "</div>\n</body>\n</html>"
    )


def no_data_page(module_name: str, search_terms: Sequence[str], generated_at: datetime) -> str:
    return render_page(
        f"No {module_name} Found",
        color="#6c757d",
        generated_at=generated_at,
        search_terms=search_terms,
        body=Markup(
            "<p>No data found for the specified criteria. "
            "Try broadening the search or checking a different time range.</p>"
        ),
    )


def error_page(module_name: str, generated_at: datetime) -> str:
    """Fixed, user-safe page shown when a report cannot be produced."""

    return render_page(
        "Temporary Data Issue",
        color="#b45309",
        generated_at=generated_at,
        body=Markup(
            f"<p>We are having trouble accessing your "
            f"<strong>{escape(module_name.lower())}</strong> right now. "
            "This might be a temporary issue with the data connection.</p>"
            "<ul>"
            "<li>Try asking for a different type of report (towers, deliveries, etc.)</li>"
            "<li>Try your query again in a moment</li>"
            "<li>Try rephrasing your question</li>"
            "</ul>"
        ),
        footer="The technical team has been notified of this issue.",
    )


MOCK_COLUMNS = (
    Column("ID", field("id")),
    Column("Product", field("name")),
    Column("Status", field("status")),
    Column("Quantity", field("quantity")),
)


def mock_rows() -> list[dict[str, Any]]:
    return [
        {"id": 1, "name": "Lettuce, Oakleaf Green", "status": "Growing", "quantity": 24},
        {"id": 2, "name": "Basil", "status": "Ready", "quantity": 12},
        {"id": 3, "name": "Swiss Chard, Bright Lights", "status": "Available", "quantity": 8},
    ]


def mock_table_page(message: str, generated_at: datetime) -> str:
    return render_page(
        "Sample Farm Data",
        color="#2E8B57",
        generated_at=generated_at,
        summary=summary_line([f"Showing sample data for: {message}" if message else ""]),
        body=render_table(mock_rows(), MOCK_COLUMNS),
        footer="Connect a farm to see live data.",
    )


__all__ = [
    "Column",
    "MOCK_COLUMNS",
    "PLACEHOLDER",
    "cell",
    "error_page",
    "field",
    "format_date",
    "format_datetime",
    "format_flag",
    "format_number",
    "generated_on",
    "mock_rows",
    "mock_table_page",
    "no_data_page",
    "render_page",
    "render_table",
    "search_banner",
    "summary_cards",
    "summary_line",
]
