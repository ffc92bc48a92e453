"""
Session harness around one level's board state.

A host (the command-line runner, a UI, a test) drives a puzzle through a
Session: it forwards each gesture to the turn rules, keeps the win flag
and records the moves it was asked to apply.
"""

import logging
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from . import rules
from .board import BoardState
from .constants import SEED_ID_PREFIX
from .models import ActionResult, Level, Move, MoveRecord, Tile

logger = logging.getLogger(__name__)


class Session(BaseModel):
    """
    One running puzzle.

    Attributes:
        level: The level descriptor the session was started from
        state: The board state owned by this session
        history: Moves applied through `apply`, with their results
        won: Whether a commit has covered the goal
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    level: Level
    state: BoardState
    history: List[MoveRecord] = Field(default_factory=list)
    won: bool = False

    @classmethod
    def create(cls, level: Level) -> "Session":
        """
        Factory method to build and start a session for a level.

        Args:
            level: Normalized level descriptor

        Returns:
            A Session with seeds placed and the opening hand dealt
        """
        state = BoardState.init_state(level)
        state.start_level(level)
        return cls(level=level, state=state)

    # ---------- operations ----------

    def stage_place(self, tile_id: str, r: int, c: int) -> ActionResult:
        return rules.stage_placement(self.state, tile_id, r, c)

    def move_staged(self, tile_id: str, r: int, c: int) -> ActionResult:
        return rules.move_staged_placement(self.state, tile_id, r, c)

    def return_staged(self, r: int, c: int, pool: str = "hand") -> ActionResult:
        return rules.return_staged_to_pool(self.state, r, c, pool)

    def stage_recall(self, tile_id: str) -> ActionResult:
        return rules.stage_recall(self.state, tile_id)

    def cancel_recall(self, tile_id: str) -> ActionResult:
        return rules.cancel_staged_recall(self.state, tile_id)

    def commit(self) -> ActionResult:
        result = rules.commit_turn(self.state)
        if result.win:
            self.won = True
            logger.info("Level %s won in %d turn(s)", self.level.id or "?", self.used_turns)
        return result

    def rollback(self) -> ActionResult:
        rules.rollback_turn(self.state)
        return ActionResult.success()

    def apply(self, move: Move) -> ActionResult:
        """Apply a scripted move, resolving its tile reference, and record it."""
        turn = self.state.turn
        result = self._dispatch(move)
        self.history.append(MoveRecord(turn=turn, move=move, result=result))
        return result

    def _dispatch(self, move: Move) -> ActionResult:
        if move.action == "submit":
            return self.commit()
        if move.action == "reset":
            return self.rollback()

        if move.action == "return":
            if move.r is None or move.c is None:
                return ActionResult.failure("A return needs a cell.", "BAD_MOVE")
            return self.return_staged(move.r, move.c, move.pool)

        tile_id = self.resolve_tile(move.tile, move.action)
        if tile_id is None:
            return ActionResult.failure(f"Unknown tile {move.tile!r}.", "UNKNOWN_TILE")

        if move.action == "recall":
            return self.stage_recall(tile_id)
        if move.action == "cancel_recall":
            return self.cancel_recall(tile_id)

        if move.r is None or move.c is None:
            return ActionResult.failure(f"A {move.action} needs a cell.", "BAD_MOVE")
        if move.action == "place":
            return self.stage_place(tile_id, move.r, move.c)
        return self.move_staged(tile_id, move.r, move.c)

    def resolve_tile(self, ref: Optional[str], action: str = "place") -> Optional[str]:
        """
        Turn a tile reference into a tile id.

        A reference is either a tile id or a fragment text; text is matched
        case-insensitively against the tiles the action can apply to.
        """
        if not ref:
            return None

        candidates: List[Tile]
        if action == "place":
            candidates = self.state.hand + self.state.reserve
        elif action == "move":
            candidates = [a.tile for a in self.state.placements]
        elif action == "recall":
            candidates = [Tile(id=t.id, text=t.text) for t in self.state.committed.values()]
        elif action == "cancel_recall":
            candidates = [Tile(id=a.snapshot.id, text=a.snapshot.text) for a in self.state.recalls]
        else:
            candidates = []

        for tile in candidates:
            if tile.id == ref:
                return tile.id
        for tile in candidates:
            if tile.text.lower() == ref.lower():
                return tile.id
        # Known ids in the wrong place still reach the rules for a precise reason
        if self.state.tile_location(ref) is not None or ref.startswith(SEED_ID_PREFIX):
            return ref
        return None

    # ---------- read-only accessors ----------

    @property
    def turn(self) -> int:
        return self.state.turn

    @property
    def used_turns(self) -> int:
        return self.state.turn - 1

    @property
    def hand(self) -> List[str]:
        return [t.text for t in self.state.hand]

    @property
    def reserve(self) -> List[str]:
        return [t.text for t in self.state.reserve]

    def grid_snapshot(self) -> List[List[Optional[str]]]:
        return self.state.grid_snapshot()

    def get_state(self) -> Dict:
        """
        Get the current session state.

        Returns:
            Dictionary containing session state
        """
        return {
            "level": self.level.id,
            "won": self.won,
            "used_turns": self.used_turns,
            "moves_applied": len(self.history),
            **self.state.get_state(),
        }


def new_session(level: Level) -> Session:
    return Session.create(level)
