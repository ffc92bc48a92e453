"""
Turn rules: staging, single-axis enforcement, atomic commit and rollback.

A turn stages either placements or recalls, never both. Nothing staged is
final until `commit_turn` validates the whole board; `rollback_turn`
undoes every staged action unconditionally.
"""

import logging
from typing import List, Optional, Tuple

from ..verifiers import Run, column_label, format_cells_list, to_a1
from .board import BoardState
from .constants import HAND_SLOTS, RESERVE_SLOTS, SEED_ID_PREFIX
from .models import ActionResult, CommittedTile, PlaceAction, RecallAction, Tile

logger = logging.getLogger(__name__)

MIXED_TURN_REASON = "You can place or recall in a single submit, not both."


def _fail(reason: str, code: str) -> ActionResult:
    logger.debug("Rejected (%s): %s", code, reason)
    return ActionResult.failure(reason, code)


# -------------------- Staging --------------------

def stage_placement(state: BoardState, tile_id: str, r: int, c: int) -> ActionResult:
    """Move a tile from hand or reserve onto an empty cell for this turn."""
    if state.recalls:
        return _fail(MIXED_TURN_REASON, "MIXED_TURN")

    found = _find_in_pools(state, tile_id)
    if found is None:
        return _fail("Tile not in hand or reserve.", "NOT_IN_POOL")

    error = _target_cell_error(state, r, c)
    if error is not None:
        return error

    error = _axis_error(state.placements, r, c)
    if error is not None:
        return error

    pool, index = found
    tile = getattr(state, pool).pop(index)
    state.put_word(r, c, tile.text, tile.id)
    state.staged.append(PlaceAction(tile=tile, r=r, c=c, origin=pool))
    logger.debug("Staged %s (%s) at %s from %s", tile.id, tile.text, to_a1(r, c), pool)
    return ActionResult.success()


def move_staged_placement(state: BoardState, tile_id: str, to_r: int, to_c: int) -> ActionResult:
    """Move a tile staged this turn to another cell."""
    act = next((a for a in state.placements if a.tile.id == tile_id), None)
    if act is None:
        return _fail("That tile isn't currently staged.", "NOT_STAGED")

    error = _target_cell_error(state, to_r, to_c)
    if error is not None:
        return error

    others = [a for a in state.placements if a.tile.id != tile_id]
    error = _axis_error(others, to_r, to_c)
    if error is not None:
        return error

    state.remove_word(tile_id, act.r, act.c)
    state.put_word(to_r, to_c, act.tile.text, act.tile.id)
    logger.debug("Moved %s from %s to %s", tile_id, to_a1(act.r, act.c), to_a1(to_r, to_c))
    act.r, act.c = to_r, to_c
    return ActionResult.success()


def return_staged_to_pool(state: BoardState, r: int, c: int, pool: str) -> ActionResult:
    """Take a staged tile back off the board. Only the hand accepts it."""
    if pool not in ("hand", "reserve"):
        return _fail("Only hand or reserve slots are valid.", "INVALID_POOL")
    if not state.in_bounds(r, c) or not state.grid[r][c].tile_id:
        return _fail("Nothing to return in that cell.", "EMPTY_CELL")

    cell = state.grid[r][c]
    tile_id = cell.tile_id
    if cell.seed or tile_id.startswith(SEED_ID_PREFIX):
        return _fail("Seed tiles are fixed and cannot be moved.", "SEED_FIXED")
    if tile_id in state.committed:
        return _fail("Committed tiles must be recalled; they can't be returned to hand.", "COMMITTED_TILE")
    if pool == "reserve":
        return _fail("You can only add to reserve by recalling committed tiles.", "RESERVE_RECALL_ONLY")

    ix = next(
        (i for i, a in enumerate(state.staged)
         if isinstance(a, PlaceAction) and a.tile.id == tile_id and (a.r, a.c) == (r, c)),
        None
    )
    if ix is None:
        return _fail("Tile is not staged.", "NOT_STAGED")
    if len(state.hand) >= HAND_SLOTS:
        return _fail("Your hand is full.", "HAND_FULL")

    act = state.staged.pop(ix)
    state.remove_word(tile_id, r, c)
    state.hand.append(act.tile)
    logger.debug("Returned %s from %s to hand", tile_id, to_a1(r, c))
    return ActionResult.success()


def stage_recall(state: BoardState, tile_id: str) -> ActionResult:
    """Lift a committed tile off the board, to join the reserve on commit."""
    if state.placements:
        return _fail(MIXED_TURN_REASON, "MIXED_TURN")
    if tile_id.startswith(SEED_ID_PREFIX):
        return _fail("Seed tiles cannot be recalled.", "SEED_FIXED")

    tile = state.committed.get(tile_id)
    if tile is None:
        return _fail("That tile is not committed on the board.", "NOT_COMMITTED")
    if any(a.snapshot.id == tile_id for a in state.recalls):
        return _fail("That tile is already being recalled.", "ALREADY_STAGED")

    state.remove_word(tile.id, tile.r, tile.c)
    state.staged.append(RecallAction(snapshot=tile.model_copy()))
    logger.debug("Staged recall of %s from %s", tile_id, to_a1(tile.r, tile.c))
    return ActionResult.success()


def cancel_staged_recall(state: BoardState, tile_id: str) -> ActionResult:
    """Put a tile whose recall was staged back on its original cell."""
    ix = next(
        (i for i, a in enumerate(state.staged)
         if isinstance(a, RecallAction) and a.snapshot.id == tile_id),
        None
    )
    if ix is None:
        return _fail("No staged recall found for that tile.", "NOT_STAGED")

    snap = state.staged.pop(ix).snapshot
    state.put_word(snap.r, snap.c, snap.text, snap.id)
    logger.debug("Cancelled recall of %s", tile_id)
    return ActionResult.success()


# -------------------- Commit --------------------

def commit_turn(state: BoardState) -> ActionResult:
    """Submit the current turn, dispatching on what was staged."""
    placements = state.placements
    recalls = state.recalls
    if not placements and not recalls:
        return _fail("Nothing to submit.", "NOTHING_TO_SUBMIT")
    if placements and recalls:
        return _fail(MIXED_TURN_REASON, "MIXED_TURN")
    if recalls:
        return commit_recall_turn(state)
    return commit_placement_turn(state)


def commit_placement_turn(state: BoardState) -> ActionResult:
    """
    Validate and commit the staged placements.

    A single placement may cross several words, all of which must be
    allowed; with no word it must be allowed alone. Several placements
    must build exactly one word together. The whole board is then checked.
    On failure every placement stays staged.
    """
    placements = state.placements
    if not placements:
        return _fail("Nothing to submit.", "NOTHING_TO_SUBMIT")

    carriers = [
        run for run in state.extract_runs()
        if run.cells >= 2 and _run_contains_placements(state, run, placements)
    ]

    if len(placements) == 1:
        if carriers:
            disallowed = next((run for run in carriers if not state.allowlist.contains(run.text)), None)
            if disallowed is not None:
                return _word_not_allowed(disallowed)
        else:
            p = placements[0]
            if not state.allowlist.contains(p.tile.text):
                return _fail(
                    f'The tile "{p.tile.text.upper()}" is not allowed to stand alone (cell {to_a1(p.r, p.c)}).',
                    "LONE_TILE_NOT_ALLOWED"
                )
    else:
        if len(carriers) != 1:
            return _fail(
                "All tiles placed this turn must connect to form a single continuous word.",
                "NOT_ONE_WORD"
            )
        if not state.allowlist.contains(carriers[0].text):
            return _word_not_allowed(carriers[0])

    reason = state.board_invalid_reason()
    if reason:
        return _fail(reason, "BOARD_INVALID")

    for p in placements:
        state.committed[p.tile.id] = CommittedTile(id=p.tile.id, text=p.tile.text, r=p.r, c=p.c)

    state.staged = []
    state.turn += 1
    state.deal_to_hand(HAND_SLOTS)
    win = state.covers_goal()
    logger.debug("Committed %d placement(s); turn is now %d", len(placements), state.turn)
    if win:
        logger.info("Goal covered after %d turn(s)", state.turn - 1)
    return ActionResult.success(win=win)


def commit_recall_turn(state: BoardState) -> ActionResult:
    """
    Validate and commit the staged recalls.

    Any failure rolls the whole turn back, so the recalled tiles return
    to their cells.
    """
    recalls = state.recalls
    if not recalls:
        return _fail("Nothing to submit.", "NOTHING_TO_SUBMIT")

    if len(state.reserve) + len(recalls) > RESERVE_SLOTS:
        rollback_turn(state)
        return _fail(f"Reserve is full (max {RESERVE_SLOTS}).", "RESERVE_FULL")

    reason = state.board_invalid_reason()
    if reason:
        rollback_turn(state)
        return _fail(f"Recall would leave an invalid board: {reason}", "RECALL_BREAKS_BOARD")

    for rec in recalls:
        snap = rec.snapshot
        del state.committed[snap.id]
        state.reserve.append(Tile(id=snap.id, text=snap.text))

    state.staged = []
    state.turn += 1
    logger.debug("Committed %d recall(s); turn is now %d", len(recalls), state.turn)
    return ActionResult.success()


def rollback_turn(state: BoardState) -> None:
    """Undo every staged action. Safe to call with nothing staged."""
    staged = list(state.staged)
    state.staged = []

    for act in staged:
        if isinstance(act, RecallAction):
            snap = act.snapshot
            state.put_word(snap.r, snap.c, snap.text, snap.id)
    for act in staged:
        if isinstance(act, PlaceAction):
            state.remove_word(act.tile.id, act.r, act.c)
            getattr(state, act.origin).append(act.tile)

    if staged:
        logger.debug("Rolled back %d staged action(s)", len(staged))


# -------------------- helpers --------------------

def _find_in_pools(state: BoardState, tile_id: str) -> Optional[Tuple[str, int]]:
    for pool in ("hand", "reserve"):
        for i, tile in enumerate(getattr(state, pool)):
            if tile.id == tile_id:
                return pool, i
    return None


def _target_cell_error(state: BoardState, r: int, c: int) -> Optional[ActionResult]:
    if not state.fits(r, c):
        return _fail("That cell is outside the board.", "OUT_OF_BOUNDS")
    if state.is_blocked(r, c):
        return _fail("That cell is blocked.", "BLOCKED")
    if state.portal_overlay_text(r, c):
        return _fail("That cell is occupied by a portal projection.", "PORTAL_PROJECTION")
    if state.grid[r][c].occupied:
        return _fail("That cell already has a tile.", "OCCUPIED")
    return None


def _axis_error(placements: List[PlaceAction], r: int, c: int) -> Optional[ActionResult]:
    """Check that (r, c) keeps this turn's placements on one row or column."""
    if not placements:
        return None

    if len(placements) >= 2:
        if all(p.r == placements[0].r for p in placements):
            row = placements[0].r
            if r != row:
                return _fail(f"This turn runs along row {row + 1}. Place on that row.", "AXIS_LOCKED")
            return None
        if all(p.c == placements[0].c for p in placements):
            col = placements[0].c
            if c != col:
                return _fail(
                    f"This turn runs along column {column_label(col)}. Place on that column.",
                    "AXIS_LOCKED"
                )
            return None

    first = placements[0]
    if r != first.r and c != first.c:
        return _fail(
            f'Since you already placed "{first.tile.text.upper()}" on {to_a1(first.r, first.c)}, '
            f"you must either continue on row {first.r + 1} or column {column_label(first.c)}.",
            "AXIS_LOCKED"
        )
    return None


def _run_contains_placements(state: BoardState, run: Run, placements: List[PlaceAction]) -> bool:
    """Every placement lies in the run, directly or through a member of its portal group."""
    for p in placements:
        if run.contains(p.r, p.c):
            continue
        group = state.portal_at.get((p.r, p.c))
        if group is None:
            return False
        if not any(run.contains(mr, mc) for mr, mc in state.group_cells(group)):
            return False
    return True


def _word_not_allowed(run: Run) -> ActionResult:
    return _fail(
        f'The word "{run.text.upper()}" is not allowed (cells {format_cells_list(run.coords())}).',
        "WORD_NOT_ALLOWED"
    )
