"""Run extraction and rendering over a coordinate -> text grid."""

from typing import Dict, Iterable, List, Optional, Set

from .geometry import column_label
from .models import Coord, Run


def extract_runs(grid: Dict[Coord, str], rows: int, cols: int) -> List[Run]:
    """
    Extract every horizontal and vertical run from the grid.

    `grid` maps each contributing cell (real tile or portal projection) to
    its effective text. Rows are scanned left to right first, then columns
    top to bottom. Single-cell runs are included.
    """
    runs: List[Run] = []

    # Horizontal runs
    for r in range(rows):
        text, start, cells = "", 0, 0
        for c in range(cols + 1):  # +1 to flush last run
            if c < cols and (r, c) in grid:
                if cells == 0:
                    start = c
                text += grid[(r, c)]
                cells += 1
            elif cells:
                runs.append(Run(text.lower(), r, start, 'H', cells))
                text, cells = "", 0

    # Vertical runs
    for c in range(cols):
        text, start, cells = "", 0, 0
        for r in range(rows + 1):
            if r < rows and (r, c) in grid:
                if cells == 0:
                    start = r
                text += grid[(r, c)]
                cells += 1
            elif cells:
                runs.append(Run(text.lower(), start, c, 'V', cells))
                text, cells = "", 0

    return runs


def runs_touching(runs: Iterable[Run], coords: Iterable[Coord]) -> List[Run]:
    """Runs whose span includes at least one of `coords`."""
    targets = set(coords)
    return [run for run in runs if any(cell in targets for cell in run.coords())]


def covers_goal(runs: Iterable[Run], goal: Coord) -> bool:
    """True iff some run passes through the goal cell."""
    return any(run.contains(*goal) for run in runs)


def render_grid(
    rows: int,
    cols: int,
    grid: Dict[Coord, str],
    projected: Optional[Dict[Coord, str]] = None,
    blocked: Iterable[Coord] = (),
    goal: Optional[Coord] = None,
) -> str:
    """
    Render the board as text.

    Real tiles are uppercase, portal projections lowercase, blocked cells
    '#', the empty goal cell '*', and other empty cells '.'.
    """
    projected = projected or {}
    blocked_set: Set[Coord] = set(blocked)

    def token(r: int, c: int) -> str:
        if (r, c) in grid:
            return grid[(r, c)].upper()
        if (r, c) in projected:
            return projected[(r, c)].lower()
        if (r, c) in blocked_set:
            return "#"
        if goal == (r, c):
            return "*"
        return "."

    tokens = [[token(r, c) for c in range(cols)] for r in range(rows)]
    width = max([len(column_label(c)) for c in range(cols)] +
                [len(t) for row in tokens for t in row])
    gutter = len(str(rows))

    header = " " * gutter + " " + " ".join(column_label(c).ljust(width) for c in range(cols))
    lines = [header.rstrip()]
    for r, row in enumerate(tokens):
        lines.append(f"{str(r + 1).rjust(gutter)} " + " ".join(t.ljust(width) for t in row).rstrip())

    return '\n'.join(lines)
