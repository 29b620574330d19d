"""
Connect Four AI - a Monte Carlo Tree Search player for Connect Four.

This package provides the Connect Four rules, along with an MCTS engine
that grows a single search tree over the course of a game.
"""

__version__ = "0.1.0"
__author__ = "Connect Four AI Team"

# Make key components available at package level
from connect4_ai.core.game import Board, Game, GameResult
from connect4_ai.core.constants import Player, Token, NUM_COLS, NUM_ROWS
from connect4_ai.mcts.search import MCTS
from connect4_ai.mcts.agent import MCTSAgent

# Version info as a tuple for programmatic access
VERSION_INFO = tuple(map(int, __version__.split('.')))


def new_game() -> Board:
    """Create an empty board with player A to move."""
    return Board()


def new_engine(seed=None) -> MCTS:
    """Create a search engine rooted at the empty board."""
    return MCTS(seed=seed)
