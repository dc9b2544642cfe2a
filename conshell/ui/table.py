#!/usr/bin/env python3
# conshell/ui/table.py
from __future__ import annotations

from typing import List, Optional, Sequence

from conshell.ui.ansi import strip_ansi


def _column_widths(rows: Sequence[Sequence[str]]) -> List[int]:
    """Visual widths per column, ignoring ANSI sequences."""
    widths: List[int] = []
    for row in rows:
        for index, cell in enumerate(row):
            length = len(strip_ansi(cell))
            if index >= len(widths):
                widths.append(length)
            else:
                widths[index] = max(widths[index], length)
    return widths


def format_table(
    rows: Sequence[Sequence[object]],
    headers: Optional[Sequence[object]] = None,
    *,
    padding: int = 1,
) -> str:
    """Return a borderless, column-aligned table string."""
    str_rows = [[str(cell) for cell in row] for row in rows]
    str_headers = [str(h) for h in headers] if headers is not None else None
    widths = _column_widths(([str_headers] if str_headers else []) + str_rows)
    gap = " " * (padding * 2)

    def render_row(row: Sequence[str]) -> str:
        cells = [cell + " " * (widths[i] - len(strip_ansi(cell)))
                 for i, cell in enumerate(row)]
        return gap.join(cells).rstrip()

    lines: List[str] = []
    if str_headers:
        lines.append(render_row(str_headers))
        lines.append(render_row(["-" * w for w in widths]))
    lines.extend(render_row(row) for row in str_rows)
    return "\n".join(lines)
