"""
Connect Four AI Core Package

This package contains the core game logic for Connect Four, including:
- Board representation and win detection
- Real game flow
- Constants and enums

All core components can be imported directly from this package.
"""

# Game and board
from connect4_ai.core.game import Board, Game, GameResult

# Constants
from connect4_ai.core.constants import (
    Player, Token,
    NUM_COLS, NUM_ROWS, NUM_CELLS, CONNECT
)

__all__ = [
    # Game
    'Board', 'Game', 'GameResult',

    # Constants
    'Player', 'Token',
    'NUM_COLS', 'NUM_ROWS', 'NUM_CELLS', 'CONNECT'
]
