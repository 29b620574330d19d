"""
Baseline agents for Connect Four.
"""
from typing import Optional
import random

from connect4_ai.core.game import Board


class RandomAgent:
    """Agent that plays a uniformly random legal move."""

    def __init__(self, name: str = "Random Agent", seed: Optional[int] = None):
        self.name = name
        self.rng = random.Random(seed)

    def select_move(self, board: Board) -> int:
        """
        Pick a random legal column.

        Args:
            board: Current board

        Returns:
            Column index
        """
        moves = board.legal_moves()
        if not moves:
            raise ValueError("No legal moves available")
        return self.rng.choice(moves)

    def __str__(self) -> str:
        return self.name
