"""
Constants for the Connect Four game.

This module defines the fixed board geometry, the two player identities and
the perspective-relative token labels used by the board representation.
"""
from enum import Enum, auto
from typing import Dict, Final, List, Tuple


# Board geometry (fixed, not configurable)
NUM_COLS: Final[int] = 7
NUM_ROWS: Final[int] = 6
NUM_CELLS: Final[int] = NUM_COLS * NUM_ROWS

# Number of contiguous stones needed to win
CONNECT: Final[int] = 4


class Player(Enum):
    """Enum representing the two players."""
    A = auto()
    B = auto()

    @property
    def other(self) -> "Player":
        """The opposing player."""
        return Player.B if self is Player.A else Player.A


class Token(Enum):
    """
    Ownership label of an occupied cell.

    Labels are relative to the player whose turn it currently is: ``OWN``
    stones belong to the active player, ``OPPONENT`` stones to the other one.
    """
    OWN = auto()
    OPPONENT = auto()

    @property
    def flipped(self) -> "Token":
        return Token.OPPONENT if self is Token.OWN else Token.OWN


# Direction vectors (d_col, d_row) checked for four in a row
DIRECTIONS: Final[List[Tuple[int, int]]] = [
    (1, 0),   # horizontal
    (0, 1),   # vertical
    (1, 1),   # diagonal rising
    (1, -1),  # diagonal falling
]

# Values used by Board.to_array()
EMPTY_CELL: Final[int] = 0
PLAYER_CELL_VALUES: Final[Dict[Player, int]] = {
    Player.A: 1,
    Player.B: 2,
}

# Symbols for terminal display
PLAYER_SYMBOLS: Final[Dict[Player, str]] = {
    Player.A: "X",
    Player.B: "O",
}
EMPTY_SYMBOL: Final[str] = "."

# Colours for rich rendering (yellow and red discs, as on the physical game)
PLAYER_STYLES: Final[Dict[Player, str]] = {
    Player.A: "bold yellow",
    Player.B: "bold red",
}

# Default search budgets
DEFAULT_WARMUP_ITERATIONS: Final[int] = 20
DEFAULT_MCTS_ITERATIONS: Final[int] = 1000
