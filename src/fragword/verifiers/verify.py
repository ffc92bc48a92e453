"""
Whole-board verification.

Validates, in reporting order:
1. Word legality (every multi-cell run must be an allowed word)
2. Standalone fragments (a real tile outside every legal multi-cell run
   must itself be an allowed word)
3. Connectivity (every tile and projection must reach a seed, with portals
   bridging their group members)
"""

from typing import Dict, Iterable, List, Optional, Set

from .allowlist import Allowlist
from .cascade import WORD, STANDALONE, CONNECTIVITY
from .connectivity import disconnected_nodes
from .geometry import format_cells_list, to_a1
from .models import BoardIssue, BoardReport, Coord, Run


def check_words(runs: Iterable[Run], allowlist: Allowlist) -> List[BoardIssue]:
    """Every run of two or more cells must be an allowed word."""
    issues: List[BoardIssue] = []
    for run in runs:
        if run.cells >= 2 and not allowlist.contains(run.text):
            cells = run.coords()
            issues.append(BoardIssue(
                code="WORD_NOT_ALLOWED",
                message=f'The word "{run.text.upper()}" is not allowed (cells {format_cells_list(cells)}).',
                cells=cells,
                word=run.text,
                cascade_level=WORD
            ))
    return issues


def covered_cells(runs: Iterable[Run], allowlist: Allowlist) -> Set[Coord]:
    """Cells belonging to a legal multi-cell run."""
    covered: Set[Coord] = set()
    for run in runs:
        if run.cells >= 2 and allowlist.contains(run.text):
            covered.update(run.coords())
    return covered


def check_standalone(
    runs: Iterable[Run],
    real_cells: Dict[Coord, str],
    allowlist: Allowlist
) -> List[BoardIssue]:
    """Real tiles not covered by a legal word must be allowed on their own."""
    issues: List[BoardIssue] = []
    covered = covered_cells(runs, allowlist)

    for (r, c), text in sorted(real_cells.items()):
        if (r, c) in covered:
            continue
        if not allowlist.contains(text):
            issues.append(BoardIssue(
                code="LONE_TILE_NOT_ALLOWED",
                message=f'The tile "{text.upper()}" is not allowed to stand alone (cell {to_a1(r, c)}).',
                cells=[(r, c)],
                word=text.lower(),
                cascade_level=STANDALONE
            ))
    return issues


def check_connectivity(
    seeds: Iterable[Coord],
    nodes: Set[Coord],
    bridges: Dict[Coord, Set[Coord]],
    limit: int = 6
) -> List[BoardIssue]:
    """All nodes must be reachable from a seed; skipped when no seed is on the board."""
    stranded = disconnected_nodes(seeds, nodes, bridges)
    if not stranded:
        return []
    return [BoardIssue(
        code="DISCONNECTED",
        message=(
            f"Disconnected group: cells {format_cells_list(stranded, limit)} "
            f"are not connected to a seed."
        ),
        cells=stranded,
        cascade_level=CONNECTIVITY
    )]


def validate_board(
    runs: List[Run],
    real_cells: Dict[Coord, str],
    nodes: Set[Coord],
    seeds: Iterable[Coord],
    bridges: Dict[Coord, Set[Coord]],
    allowlist: Allowlist,
    limit: int = 6,
    rendered: Optional[str] = None
) -> BoardReport:
    """
    Main verification function: runs every check against one board snapshot.

    Returns a BoardReport with:
    - valid: True if the board passes all checks
    - issues: every issue found, in reporting order
    - runs: the runs the checks were computed from
    - grid: rendered board text, when supplied
    """
    issues: List[BoardIssue] = []
    issues.extend(check_words(runs, allowlist))
    issues.extend(check_standalone(runs, real_cells, allowlist))
    issues.extend(check_connectivity(seeds, nodes, bridges, limit))

    return BoardReport(
        valid=len(issues) == 0,
        issues=issues,
        runs=runs,
        grid=rendered,
    )
