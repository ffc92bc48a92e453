"""Board state and turn rules for fragword."""

from .models import (
    Pool,
    SpecialType,
    MoveAction,
    CellRef,
    SeedSpec,
    SpecialSpec,
    Level,
    Tile,
    CellKind,
    Cell,
    CommittedTile,
    PlaceAction,
    RecallAction,
    StagedAction,
    ActionResult,
    Move,
    MoveRecord,
)
from .constants import HAND_SLOTS, RESERVE_SLOTS, BOARD_MIN, BOARD_MAX, DEFAULT_PAR, SEED_ID_PREFIX
from .board import BoardState
from .rules import (
    stage_placement,
    move_staged_placement,
    return_staged_to_pool,
    stage_recall,
    cancel_staged_recall,
    commit_turn,
    commit_placement_turn,
    commit_recall_turn,
    rollback_turn,
)
from .session import Session, new_session

__all__ = [
    # Models
    "Pool",
    "SpecialType",
    "MoveAction",
    "CellRef",
    "SeedSpec",
    "SpecialSpec",
    "Level",
    "Tile",
    "CellKind",
    "Cell",
    "CommittedTile",
    "PlaceAction",
    "RecallAction",
    "StagedAction",
    "ActionResult",
    "Move",
    "MoveRecord",
    # Constants
    "HAND_SLOTS",
    "RESERVE_SLOTS",
    "BOARD_MIN",
    "BOARD_MAX",
    "DEFAULT_PAR",
    "SEED_ID_PREFIX",
    # State
    "BoardState",
    # Rules
    "stage_placement",
    "move_staged_placement",
    "return_staged_to_pool",
    "stage_recall",
    "cancel_staged_recall",
    "commit_turn",
    "commit_placement_turn",
    "commit_recall_turn",
    "rollback_turn",
    # Harness
    "Session",
    "new_session",
]
