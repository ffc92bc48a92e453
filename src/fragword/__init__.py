"""fragword: a turn-based fragment-tile word placement puzzle engine."""

from .engine import BoardState, Level, Session, new_session
from .verifiers import Allowlist

__all__ = ["Allowlist", "BoardState", "Level", "Session", "new_session"]
