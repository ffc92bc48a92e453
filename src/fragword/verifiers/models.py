"""Data models for board verification."""

from typing import List, NamedTuple, Optional, Tuple

from pydantic import BaseModel, Field


Coord = Tuple[int, int]


class Run(NamedTuple):
    """A maximal horizontal or vertical span of occupied or projected cells."""
    text: str
    r: int
    c: int
    direction: str
    cells: int

    def coords(self) -> List[Coord]:
        if self.direction == 'H':
            return [(self.r, self.c + i) for i in range(self.cells)]
        return [(self.r + i, self.c) for i in range(self.cells)]

    def contains(self, r: int, c: int) -> bool:
        if self.direction == 'H':
            return r == self.r and self.c <= c <= self.c + self.cells - 1
        return c == self.c and self.r <= r <= self.r + self.cells - 1


class BoardIssue(BaseModel):
    """A single reason the board is not in a legal state."""
    code: str
    message: str
    cells: List[Coord] = Field(default_factory=list)
    word: Optional[str] = None
    cascade_level: int = 0  # 0=WORD, 1=STANDALONE, 2=CONNECTIVITY


class BoardReport(BaseModel):
    """Result of whole-board validation."""
    valid: bool
    issues: List[BoardIssue] = Field(default_factory=list)
    runs: List[Run] = Field(default_factory=list)
    grid: Optional[str] = None

    @property
    def first_reason(self) -> Optional[str]:
        """Message of the highest-priority issue, or None for a legal board."""
        if not self.issues:
            return None
        return min(self.issues, key=lambda issue: issue.cascade_level).message
