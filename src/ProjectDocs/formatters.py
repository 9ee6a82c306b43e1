"""Formatting helpers for turning documentation records into terminal output.

The ``list`` and ``info`` commands render compact tables and newline-delimited
JSON. This module keeps the column layout, status glyphs and truncation rules
in one place so every record type is presented consistently.
"""

from __future__ import annotations

import json
from typing import Any, Iterable, List, Mapping, Sequence

__all__ = [
    "STATUS_ICONS",
    "format_table",
    "format_json_lines",
    "status_icon",
    "status_label",
    "truncate",
]

STATUS_ICONS = {
    "complete": "✓",
    "in-progress": "●",
}


def format_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    """Render an ASCII table with padded columns and header separator.

    Args:
        headers: Ordered column headers rendered on the first row.
        rows: Row data that should be left-aligned within the computed widths.

    Returns:
        Multiline string containing the table body and separator.
    """

    column_widths = [len(header) for header in headers]
    for row in rows:
        for index, cell in enumerate(row):
            column_widths[index] = max(column_widths[index], len(cell))

    def _format_row(values: Sequence[str]) -> str:
        return " | ".join(value.ljust(column_widths[index]) for index, value in enumerate(values))

    separator = "-+-".join("-" * width for width in column_widths)
    lines = [_format_row(headers), separator]
    lines.extend(_format_row(row) for row in rows)
    return "\n".join(lines)


def format_json_lines(payloads: Iterable[Mapping[str, Any]]) -> List[str]:
    """Serialise each payload as one compact JSON document per line."""

    return [json.dumps(dict(payload), ensure_ascii=False) for payload in payloads]


def status_icon(status: str) -> str:
    return STATUS_ICONS.get(status, "○")


def status_label(status: str) -> str:
    """Return ``status`` prefixed with its glyph, e.g. ``● in-progress``."""

    return f"{status_icon(status)} {status}"


def truncate(text: str, width: int) -> str:
    """Clip ``text`` to ``width`` characters, marking the cut with an ellipsis."""

    if width <= 0:
        return ""
    if len(text) <= width:
        return text
    return text[: width - 1] + "…"
