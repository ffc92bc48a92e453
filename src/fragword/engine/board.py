"""
Board state for a single puzzle session.

Holds the grid, the tile pools, the committed-tile ledger, the staged
actions of the current turn, the portal topology and the allowlist, and
answers every geometry and validity question the turn rules ask.
"""

import logging
from typing import Dict, Iterable, List, Optional, Set, Tuple

from pydantic import BaseModel, ConfigDict, Field

from ..verifiers import (
    Allowlist,
    BoardReport,
    Coord,
    Run,
    covers_goal,
    disconnected_nodes,
    extract_runs,
    portal_bridges,
    render_grid,
    runs_touching,
    validate_board,
)
from .constants import (
    DECK_ID_PREFIX,
    DEFAULT_PORTAL_GROUP,
    DISCONNECTED_REPORT_LIMIT,
    HAND_SLOTS,
    SEED_ID_PREFIX,
)
from .models import (
    Cell,
    CellKind,
    CellRef,
    CommittedTile,
    Level,
    PlaceAction,
    RecallAction,
    StagedAction,
    Tile,
)

logger = logging.getLogger(__name__)


class BoardState(BaseModel):
    """
    Canonical mutable model of one puzzle session.

    Attributes:
        rows, cols: Board dimensions
        par: Target turn count (scoring only)
        goal: Cell a run must pass through to win
        turn: Number of the upcoming turn, starting at 1
        grid: rows x cols cells
        committed: Ledger of committed tiles keyed by tile id
        staged: Actions staged during the current turn
        deck, hand, reserve: Tile pools
        portal_at: Portal cell -> group id
        portal_groups: Group id -> member cells
        allowlist: Permitted words for this level
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    rows: int
    cols: int
    par: int
    goal: CellRef
    turn: int = 1
    grid: List[List[Cell]] = Field(default_factory=list)
    committed: Dict[str, CommittedTile] = Field(default_factory=dict)
    staged: List[StagedAction] = Field(default_factory=list)
    deck: List[Tile] = Field(default_factory=list)
    hand: List[Tile] = Field(default_factory=list)
    reserve: List[Tile] = Field(default_factory=list)
    portal_at: Dict[Coord, str] = Field(default_factory=dict)
    portal_groups: Dict[str, List[Coord]] = Field(default_factory=dict)
    allowlist: Allowlist = Field(default_factory=Allowlist)

    @classmethod
    def init_state(cls, level: Level, allowlist: Optional[Allowlist] = None) -> "BoardState":
        """
        Allocate an empty board for a level.

        Args:
            level: Normalized level descriptor
            allowlist: Prebuilt allowlist; built from the level's words if omitted

        Returns:
            A BoardState with an empty grid and a full deck
        """
        return cls(
            rows=level.rows,
            cols=level.cols,
            par=level.par,
            goal=level.goal.model_copy(),
            grid=[[Cell() for _ in range(level.cols)] for _ in range(level.rows)],
            deck=[Tile(id=f"{DECK_ID_PREFIX}{i}", text=text) for i, text in enumerate(level.deck)],
            allowlist=allowlist if allowlist is not None else Allowlist.build(level.allowed_words),
        )

    def start_level(self, level: Level) -> None:
        """Place seeds, apply specials, pull the starting hand and deal."""
        for i, seed in enumerate(level.seeds):
            self.put_word(seed.r, seed.c, seed.text, f"{SEED_ID_PREFIX}{i}", seed=True)

        for special in level.specials:
            self.grid[special.r][special.c].special = special.type
            if special.type == "portal":
                group = special.group or DEFAULT_PORTAL_GROUP
                self.portal_at[(special.r, special.c)] = group
                self.portal_groups.setdefault(group, []).append((special.r, special.c))

        for frag in level.starting_hand or []:
            ix = next((i for i, tile in enumerate(self.deck) if tile.text == frag), None)
            if ix is None:
                logger.warning(
                    "Level %s: starting hand fragment %r not found in deck",
                    level.id or "?", frag
                )
                continue
            self.hand.append(self.deck.pop(ix))

        self.deal_to_hand(HAND_SLOTS)
        logger.info(
            "Level %s started: %dx%d board, %d seeds, %d tiles in deck",
            level.id or "?", self.rows, self.cols, len(level.seeds), len(self.deck)
        )

    def deal_to_hand(self, target: int = HAND_SLOTS) -> List[Tile]:
        """Draw from the front of the deck until the hand holds `target` tiles."""
        drawn: List[Tile] = []
        while len(self.hand) < target and self.deck:
            tile = self.deck.pop(0)
            self.hand.append(tile)
            drawn.append(tile)
        if drawn:
            logger.debug("Dealt %s", [t.text for t in drawn])
        return drawn

    # ---------- geometry ----------

    def in_bounds(self, r: int, c: int) -> bool:
        return 0 <= r < self.rows and 0 <= c < self.cols

    def fits(self, r: int, c: int) -> bool:
        """A tile covers exactly one cell, so fitting is being in bounds."""
        return self.in_bounds(r, c)

    def touches_existing(self, r: int, c: int) -> bool:
        """True if the cell or one of its four neighbours is occupied."""
        around = [(r, c), (r - 1, c), (r + 1, c), (r, c - 1), (r, c + 1)]
        return any(self.in_bounds(nr, nc) and self.grid[nr][nc].occupied for nr, nc in around)

    def is_blocked(self, r: int, c: int) -> bool:
        return self.in_bounds(r, c) and self.grid[r][c].special == "blocked"

    # ---------- occupants ----------

    def put_word(self, r: int, c: int, text: str, tile_id: str, seed: bool = False) -> None:
        """Write an occupant into one cell, keeping its special flag."""
        cell = self.grid[r][c]
        cell.text = text
        cell.tile_id = tile_id
        cell.seed = seed

    def remove_word(self, tile_id: str, r: int, c: int) -> bool:
        """Clear the cell only if `tile_id` is still its occupant."""
        cell = self.grid[r][c]
        if cell.tile_id != tile_id:
            return False
        cell.text = None
        cell.tile_id = None
        cell.seed = False
        return True

    def cell_kind(self, r: int, c: int) -> CellKind:
        cell = self.grid[r][c]
        if not cell.occupied:
            return CellKind.EMPTY
        if cell.seed:
            return CellKind.SEED
        if cell.tile_id in self.committed:
            return CellKind.COMMITTED
        return CellKind.STAGED

    @property
    def placements(self) -> List[PlaceAction]:
        return [a for a in self.staged if isinstance(a, PlaceAction)]

    @property
    def recalls(self) -> List[RecallAction]:
        return [a for a in self.staged if isinstance(a, RecallAction)]

    def tile_location(self, tile_id: str) -> Optional[str]:
        """Where a player tile currently lives: deck, hand, reserve, staged or committed."""
        for name in ("deck", "hand", "reserve"):
            if any(t.id == tile_id for t in getattr(self, name)):
                return name
        if any(a.tile.id == tile_id for a in self.placements):
            return "staged"
        if tile_id in self.committed:
            return "committed"
        return None

    # ---------- portals ----------

    def group_cells(self, group: str) -> List[Coord]:
        return list(self.portal_groups.get(group, []))

    def portal_overlay_text(self, r: int, c: int) -> Optional[str]:
        """
        Text projected onto an empty portal cell by another member of its group.

        A real occupant suppresses the projection.
        """
        group = self.portal_at.get((r, c))
        if group is None or self.grid[r][c].occupied:
            return None
        for mr, mc in self.portal_groups.get(group, []):
            if (mr, mc) == (r, c):
                continue
            if self.grid[mr][mc].occupied:
                return self.grid[mr][mc].text
        return None

    # ---------- snapshots ----------

    def real_cells(self) -> Dict[Coord, str]:
        return {
            (r, c): cell.text
            for r, row in enumerate(self.grid)
            for c, cell in enumerate(row)
            if cell.occupied
        }

    def projected_cells(self) -> Dict[Coord, str]:
        projected: Dict[Coord, str] = {}
        for r, c in self.portal_at:
            text = self.portal_overlay_text(r, c)
            if text:
                projected[(r, c)] = text
        return projected

    def text_map(self) -> Dict[Coord, str]:
        """Effective text of every cell that takes part in a run."""
        texts = self.projected_cells()
        texts.update(self.real_cells())
        return texts

    def seed_cells(self) -> Set[Coord]:
        return {
            (r, c)
            for r, row in enumerate(self.grid)
            for c, cell in enumerate(row)
            if cell.occupied and cell.seed
        }

    def blocked_cells(self) -> List[Coord]:
        return [
            (r, c)
            for r, row in enumerate(self.grid)
            for c, cell in enumerate(row)
            if cell.special == "blocked"
        ]

    def grid_snapshot(self) -> List[List[Optional[str]]]:
        """Effective text per cell (real or projected), None where empty."""
        texts = self.text_map()
        return [[texts.get((r, c)) for c in range(self.cols)] for r in range(self.rows)]

    def render(self) -> str:
        return render_grid(
            self.rows,
            self.cols,
            self.real_cells(),
            projected=self.projected_cells(),
            blocked=self.blocked_cells(),
            goal=(self.goal.r, self.goal.c),
        )

    # ---------- runs & validity ----------

    def extract_runs(self) -> List[Run]:
        return extract_runs(self.text_map(), self.rows, self.cols)

    def affected_runs(self, coords: Iterable[Coord]) -> List[Run]:
        """Runs passing through any of the given cells."""
        return runs_touching(self.extract_runs(), coords)

    def runs_valid(self, runs: Iterable[Run]) -> bool:
        return self.allowlist.contains_all_runs(runs)

    def _graph(self) -> Tuple[Set[Coord], Dict[Coord, Set[Coord]]]:
        nodes = set(self.text_map())
        return nodes, portal_bridges(self.portal_groups, nodes)

    def disconnected_cells(self) -> List[Coord]:
        """Tiles and projections that cannot reach a seed."""
        nodes, bridges = self._graph()
        return disconnected_nodes(self.seed_cells(), nodes, bridges)

    def report(self) -> BoardReport:
        """Run every board check and collect all issues found."""
        nodes, bridges = self._graph()
        return validate_board(
            runs=self.extract_runs(),
            real_cells=self.real_cells(),
            nodes=nodes,
            seeds=self.seed_cells(),
            bridges=bridges,
            allowlist=self.allowlist,
            limit=DISCONNECTED_REPORT_LIMIT,
            rendered=self.render(),
        )

    def board_invalid_reason(self) -> Optional[str]:
        """None for a legal board, else the first failing check's message."""
        return self.report().first_reason

    def board_valid(self) -> bool:
        return self.board_invalid_reason() is None

    def covers_goal(self) -> bool:
        return covers_goal(self.extract_runs(), (self.goal.r, self.goal.c))

    def get_state(self) -> Dict:
        """
        Get the current board state as a dictionary.

        Returns:
            Dictionary containing board state
        """
        return {
            "turn": self.turn,
            "par": self.par,
            "grid": self.grid_snapshot(),
            "hand": [t.text for t in self.hand],
            "reserve": [t.text for t in self.reserve],
            "deck_remaining": len(self.deck),
            "staged": len(self.staged),
            "committed": len(self.committed),
            "covers_goal": self.covers_goal(),
        }
