"""Gameplay limits shared by the board state and the turn rules."""

BOARD_MIN = 1
BOARD_MAX = 10
DEFAULT_PAR = 7

HAND_SLOTS = 4
RESERVE_SLOTS = 2

# Tile identity patterns
SEED_ID_PREFIX = "__SEED__"
DECK_ID_PREFIX = "D"

# Portal specials that omit a group join this one
DEFAULT_PORTAL_GROUP = "A"

# Cells listed in a disconnected-group diagnostic before eliding the rest
DISCONNECTED_REPORT_LIMIT = 6
