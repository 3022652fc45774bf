"""Human-readable output for measurement results."""

import math
from typing import Iterable, List, Sequence

from depsize.schemas.units import ALL_UNIT_NAME, Result

BYTE_UNITS = ["B", "kB", "MB", "GB", "TB", "PB"]
TABLE_HEAD = ("Name", "min", "min+gz")


def pretty_bytes(num: int) -> str:
    """Format a byte count with SI units, e.g. ``1.34 kB``."""
    if num < 0:
        return "-" + pretty_bytes(-num)
    if num < 1000:
        return f"{num} B"
    exponent = min(int(math.log10(num) // 3), len(BYTE_UNITS) - 1)
    value = num / 1000**exponent
    if float(f"{value:.3g}") >= 1000 and exponent < len(BYTE_UNITS) - 1:
        exponent += 1
        value = num / 1000**exponent
    return f"{value:.3g} {BYTE_UNITS[exponent]}"


def display_name(name: str) -> str:
    return "All" if name == ALL_UNIT_NAME else name


def render_table(results: Iterable[Result]) -> str:
    """Render results as a bordered text table, one row per result."""
    rows: List[Sequence[str]] = [
        (display_name(r.name), pretty_bytes(r.raw_bytes), pretty_bytes(r.gzip_bytes))
        for r in results
    ]
    widths = [len(h) for h in TABLE_HEAD]
    for row in rows:
        widths = [max(w, len(cell)) for w, cell in zip(widths, row)]

    def line(cells: Sequence[str]) -> str:
        return "│ " + " │ ".join(cell.ljust(w) for cell, w in zip(cells, widths)) + " │"

    def border(left: str, mid: str, right: str) -> str:
        return left + mid.join("─" * (w + 2) for w in widths) + right

    lines = [border("┌", "┬", "┐"), line(TABLE_HEAD), border("├", "┼", "┤")]
    lines.extend(line(row) for row in rows)
    lines.append(border("└", "┴", "┘"))
    return "\n".join(lines)
