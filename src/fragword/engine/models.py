"""
Pydantic models for the engine layer.

Covers the normalized level descriptor handed over by a level loader, the
tiles and cells of a running board, the staged actions of a turn, and the
result returned by every staging or commit operation.
"""

from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .constants import BOARD_MAX, BOARD_MIN, DEFAULT_PAR


# Type aliases
Pool = Literal["hand", "reserve"]
SpecialType = Literal["blocked", "portal"]
MoveAction = Literal["place", "move", "return", "recall", "cancel_recall", "submit", "reset"]


class CellRef(BaseModel):
    """A 0-based cell coordinate."""
    r: int = Field(..., ge=0)
    c: int = Field(..., ge=0)


class SeedSpec(BaseModel):
    """A pre-placed fragment occupying one cell."""
    text: str = Field(..., min_length=1)
    r: int = Field(..., ge=0)
    c: int = Field(..., ge=0)


class SpecialSpec(BaseModel):
    """A blocked cell or a member of a portal group."""
    r: int = Field(..., ge=0)
    c: int = Field(..., ge=0)
    type: SpecialType
    group: Optional[str] = None


class Level(BaseModel):
    """
    Normalized level descriptor.

    Bounds, overlaps and the non-empty allowlist are the loader's
    responsibility; this model only fixes the shape the engine reads.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    name: Optional[str] = None
    rows: int = Field(..., ge=BOARD_MIN, le=BOARD_MAX)
    cols: int = Field(..., ge=BOARD_MIN, le=BOARD_MAX)
    par: int = DEFAULT_PAR
    goal: CellRef
    seeds: List[SeedSpec] = Field(default_factory=list)
    specials: List[SpecialSpec] = Field(default_factory=list)
    deck: List[str] = Field(default_factory=list)
    starting_hand: Optional[List[str]] = Field(
        default=None,
        validation_alias=AliasChoices("starting_hand", "startingHand"),
    )
    allowed_words: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("allowed_words", "allowedWords"),
    )
    notes: str = ""


class Tile(BaseModel):
    """A player tile: an identity plus its fragment text."""
    model_config = ConfigDict(frozen=True)

    id: str
    text: str


class CellKind(str, Enum):
    EMPTY = "empty"
    SEED = "seed"
    STAGED = "staged"
    COMMITTED = "committed"


class Cell(BaseModel):
    """One grid cell. `special` survives any change of occupant."""
    text: Optional[str] = None
    tile_id: Optional[str] = None
    seed: bool = False
    special: Optional[SpecialType] = None

    @property
    def occupied(self) -> bool:
        return bool(self.text)


class CommittedTile(BaseModel):
    """Ledger entry for a tile permanently on the board."""
    id: str
    text: str
    r: int
    c: int


class PlaceAction(BaseModel):
    """A tile staged onto the board this turn."""
    kind: Literal["place"] = "place"
    tile: Tile
    r: int
    c: int
    origin: Pool


class RecallAction(BaseModel):
    """A committed tile staged for return to the reserve this turn."""
    kind: Literal["recall"] = "recall"
    snapshot: CommittedTile


StagedAction = Annotated[Union[PlaceAction, RecallAction], Field(discriminator="kind")]


class ActionResult(BaseModel):
    """Outcome of a staging or commit operation."""
    ok: bool
    reason: Optional[str] = None
    code: Optional[str] = None
    win: Optional[bool] = None

    @classmethod
    def success(cls, **extra) -> "ActionResult":
        return cls(ok=True, **extra)

    @classmethod
    def failure(cls, reason: str, code: str) -> "ActionResult":
        return cls(ok=False, reason=reason, code=code)


class Move(BaseModel):
    """One scripted player gesture, as read by the command-line harness."""
    action: MoveAction
    tile: Optional[str] = None
    r: Optional[int] = None
    c: Optional[int] = None
    pool: Pool = "hand"


class MoveRecord(BaseModel):
    """A move applied to a session and what came of it."""
    turn: int
    move: Move
    result: ActionResult
