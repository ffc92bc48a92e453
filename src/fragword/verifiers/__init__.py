"""Board verification for fragword."""

from .allowlist import Allowlist, normalize_word, is_valid, are_all_valid
from .models import Coord, Run, BoardIssue, BoardReport
from .geometry import column_label, to_a1, run_cells_a1, format_cells_list
from .grid import extract_runs, runs_touching, covers_goal, render_grid
from .connectivity import portal_bridges, reachable_from, disconnected_nodes
from .cascade import filter_cascading_issues
from .verify import validate_board, check_words, check_standalone, check_connectivity

__all__ = [
    # Allowlist
    "Allowlist",
    "normalize_word",
    "is_valid",
    "are_all_valid",
    # Models
    "Coord",
    "Run",
    "BoardIssue",
    "BoardReport",
    # Geometry
    "column_label",
    "to_a1",
    "run_cells_a1",
    "format_cells_list",
    # Grid utilities
    "extract_runs",
    "runs_touching",
    "covers_goal",
    "render_grid",
    # Connectivity
    "portal_bridges",
    "reachable_from",
    "disconnected_nodes",
    # Verification
    "filter_cascading_issues",
    "validate_board",
    "check_words",
    "check_standalone",
    "check_connectivity",
]
