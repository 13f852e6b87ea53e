"""Stateless text and HTML rendering of matrices."""

import numpy as np

from spectragraph.linalg.decomposition import EPSILON

HTML_ALIGNMENTS: tuple[str, ...] = ("left", "center", "right")


def format_number(value: float, precision: int = 3) -> str:
    """Format a number with grouping and at most `precision` decimals.

    Values below EPSILON in magnitude print as 0; trailing zeros are
    dropped, so 2.500 renders as "2.5" and 1234.0 as "1,234".
    """
    if abs(value) < EPSILON:
        value = 0.0
    if not np.isfinite(value):
        return "∞" if value > 0 else ("-∞" if value < 0 else "NaN")
    text = f"{value:,.{precision}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text == "-0":
        text = "0"
    return text


def format_matrix(data: np.ndarray, precision: int = 3) -> str:
    """Render a 2-D array as nested brackets, one row per line."""
    if data.size == 0:
        return "[]"
    rows = [
        "[" + ", ".join(format_number(v, precision) for v in row) + "]"
        for row in data
    ]
    return "[" + "\n ".join(rows) + "]"


def matrix_to_html(
    data: np.ndarray,
    align: str = "center",
    show_zeros: bool = True,
    precision: int = 3,
) -> str:
    """Render a 2-D array as an HTML table.

    Args:
        data: Array to render.
        align: Cell alignment; anything other than left/center/right
            falls back to center.
        show_zeros: If False, zero cells are left empty.
        precision: Maximum number of decimals.

    Returns:
        HTML string starting with <table>.
    """
    if align.lower() not in HTML_ALIGNMENTS:
        align = "center"
    parts = ['<table border="0">']
    for row in data:
        parts.append("<tr>")
        for value in row:
            value = 0.0 if abs(value) < EPSILON else float(value)
            parts.append(f'<td align="{align}">')
            if show_zeros or value != 0:
                parts.append(format_number(value, precision))
            parts.append("</td>")
        parts.append("</tr>")
    parts.append("</table>")
    return "".join(parts)
