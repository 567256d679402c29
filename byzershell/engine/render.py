"""
Rendering of engine responses as tables.

The engine answers with a JSON array of row objects. Anything that is not
JSON is shown as a single-row table with a ``message`` column.
"""

import html
import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional

from ..shell.ui.formatter import ShellFormatter

UNNAMED_COLUMN = "value"

BOOTSTRAP_CSS = (
    '<link rel="stylesheet" '
    'href="https://stackpath.bootstrapcdn.com/bootstrap/4.5.2/css/bootstrap.min.css" '
    'integrity="sha384-JcKb8q3iqJ61gNV9KGb8thSsNjpSL0n8PARn9HuZOnIxN0hoP+VmmDGMN5t9UJ0Z" '
    'crossorigin="anonymous">'
)


class TableFormat(str, Enum):
    """Output formats for result tables."""

    DEFAULT = "default"
    MARKDOWN = "markdown"
    HTML = "html"
    HTML_RAW = "html-raw"

    @classmethod
    def parse(cls, name: str) -> "TableFormat":
        try:
            return cls(name.strip().lower())
        except ValueError:
            raise ValueError(f"unknown format: {name}") from None


def parse_response(text: str) -> Any:
    """Decode an engine response, wrapping plain text as a message row."""
    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return {"message": text}


def cell_text(value: Any) -> str:
    """Text shown for one cell."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


@dataclass
class JsonTable:
    """Rows of a JSON value laid out under a fixed set of columns.

    ``headers`` is None when the rows are not objects; each row then has a
    single unnamed cell holding the whole value.
    """

    headers: Optional[List[str]]
    rows: List[List[Any]] = field(default_factory=list)

    @classmethod
    def from_value(cls, value: Any, headers: Optional[List[str]] = None) -> "JsonTable":
        items = value if isinstance(value, list) else [value]
        if headers is None:
            headers = infer_headers(items)

        if headers is None:
            return cls(None, [[item] for item in items])

        rows = []
        for item in items:
            if isinstance(item, dict):
                rows.append([item.get(name) for name in headers])
            else:
                rows.append([None for _ in headers])
        return cls(list(headers), rows)

    @property
    def column_names(self) -> List[str]:
        return list(self.headers) if self.headers is not None else [UNNAMED_COLUMN]

    def text_rows(self) -> List[List[str]]:
        return [[cell_text(cell) for cell in row] for row in self.rows]


def infer_headers(items: List[Any]) -> Optional[List[str]]:
    """Column names from the keys of the first row, if it is an object."""
    if items and isinstance(items[0], dict):
        return list(items[0].keys())
    return None


def format_markdown(table: JsonTable) -> str:
    def line(cells: List[str]) -> str:
        escaped = [cell.replace("|", "\\|").replace("\n", "<br>") for cell in cells]
        return "| " + " | ".join(escaped) + " |"

    headers = table.column_names
    lines = [line(headers), "|" + "|".join("---" for _ in headers) + "|"]
    lines.extend(line(row) for row in table.text_rows())
    return "\n".join(lines)


def format_html(table: JsonTable, styled: bool = True) -> str:
    parts = []
    if styled:
        parts.append(BOOTSTRAP_CSS)
        parts.append('<table class="table table-bordered table-hover">')
    else:
        parts.append("<table>")

    parts.append("<tr>")
    for name in table.column_names:
        parts.append(f"<th>{html.escape(name)}</th>")
    parts.append("</tr>")

    for row in table.text_rows():
        parts.append("<tr>")
        for cell in row:
            parts.append(f"<td><pre>{html.escape(cell)}</pre></td>")
        parts.append("</tr>")

    parts.append("</table>")
    return "".join(parts)


def render_table(table: JsonTable, fmt: Any, formatter: ShellFormatter) -> None:
    """
    Write a table to the formatter's channel.

    Args:
        table: Table to render
        fmt: TableFormat or format name
        formatter: Formatter bound to the shell channel

    Raises:
        ValueError: Unknown format name
    """
    if not isinstance(fmt, TableFormat):
        fmt = TableFormat.parse(str(fmt))

    if fmt is TableFormat.DEFAULT:
        formatter.print_table(table.column_names, table.text_rows(), show_lines=True)
    elif fmt is TableFormat.MARKDOWN:
        formatter.io.write(format_markdown(table) + "\n")
    else:
        formatter.io.write(format_html(table, styled=fmt is TableFormat.HTML) + "\n")


def render_response(text: str, fmt: Any, formatter: ShellFormatter) -> JsonTable:
    """Parse an engine response and render it. Returns the rendered table."""
    table = JsonTable.from_value(parse_response(text))
    render_table(table, fmt, formatter)
    return table
