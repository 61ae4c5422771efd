"""Plain-text table output."""

from __future__ import annotations

from collections.abc import Sequence

NO_DATA = "No data to display."


def format_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    """Render rows under headers as left-aligned columns separated by two spaces.

    Returns a notice instead of a table when there are no rows.
    """
    if not rows:
        return NO_DATA

    widths = [len(header) for header in headers]
    for row in rows:
        if len(row) > len(widths):
            raise ValueError(
                f"row has {len(row)} cells but the table has {len(widths)} columns"
            )
        widths = [
            max(width, len(cell)) for width, cell in zip(widths, row)
        ] + widths[len(row):]

    def render(cells: Sequence[str]) -> str:
        return "  ".join(cell.ljust(width) for cell, width in zip(cells, widths))

    return "\n".join([render(headers), *(render(row) for row in rows)])


def print_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
    """Print a table built by format_table."""
    print(format_table(headers, rows))