"""Coordinate labelling helpers used in diagnostics."""

from typing import Iterable, List, Optional

from .models import Coord, Run


def column_label(c: int) -> str:
    """Bijective base-26 column name: 0 -> A, 25 -> Z, 26 -> AA."""
    n = c + 1
    label = ""
    while n > 0:
        rem = (n - 1) % 26
        label = chr(65 + rem) + label
        n = (n - 1) // 26
    return label


def to_a1(r: int, c: int) -> str:
    """Spreadsheet-style label for a 0-based cell, e.g. (0, 0) -> 'A1'."""
    return f"{column_label(c)}{r + 1}"


def run_cells_a1(run: Run) -> List[str]:
    return [to_a1(r, c) for r, c in run.coords()]


def format_cells_list(cells: Iterable[Coord], limit: Optional[int] = None) -> str:
    """
    Join cell labels with commas.

    When `limit` is given and more cells exist, only the first `limit`
    labels are shown followed by an ellipsis.
    """
    labels = [to_a1(r, c) for r, c in cells]
    if limit is not None and len(labels) > limit:
        return ", ".join(labels[:limit]) + ", …"
    return ", ".join(labels)
