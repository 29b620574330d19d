"""
Game state and flow management for Connect Four.

This module defines the core game mechanics, including:
- Board: the 7x6 grid, column heights, the active player and win detection
- GameResult: outcome of a real game
- Game: a real game session that plays moves for alternating players

Cells are labelled relative to the active player (see ``Token``). Switching
turns relabels every stone, so a single routine answering "does OWN have
four in a row?" serves both players.
"""
from __future__ import annotations
from enum import Enum, auto
from typing import Dict, List, Optional, Tuple
import copy
import operator

import numpy as np

from connect4_ai.core.constants import (
    NUM_COLS, NUM_ROWS, NUM_CELLS, CONNECT, DIRECTIONS,
    EMPTY_CELL, EMPTY_SYMBOL, PLAYER_CELL_VALUES, PLAYER_SYMBOLS,
    Player, Token
)

Cell = Tuple[int, int]  # (column, row)


class Board:
    """
    Connect Four board state machine.

    Holds the number of stones in each column, a sparse mapping of occupied
    cells to their relative ``Token`` and the player whose turn it is.
    """

    def __init__(self):
        self.column_height: List[int] = [0] * NUM_COLS
        self.cells: Dict[Cell, Token] = {}
        self.active_player: Player = Player.A

    @property
    def num_stones(self) -> Tuple[int, ...]:
        """Number of stones in each column."""
        return tuple(self.column_height)

    def current_player(self) -> Player:
        """Get the currently active player."""
        return self.active_player

    def clone(self) -> Board:
        """Create an independent copy of this board."""
        return copy.deepcopy(self)

    def drop(self, column: int) -> Optional[int]:
        """
        Drop a stone for the active player into a column.

        Args:
            column: Column index in ``[0, NUM_COLS)``

        Returns:
            The row the stone landed in, or None if the column is out of
            range or already full (the board is left unchanged)
        """
        if isinstance(column, bool):
            return None
        try:
            column = operator.index(column)
        except TypeError:
            return None
        if not 0 <= column < NUM_COLS:
            return None
        row = self.column_height[column]
        if row >= NUM_ROWS:
            return None
        self.column_height[column] += 1
        self.cells[(column, row)] = Token.OWN
        return row

    def switch_turn(self) -> None:
        """Hand the turn to the other player, relabelling every stone."""
        self.active_player = self.active_player.other
        for cell, token in self.cells.items():
            self.cells[cell] = token.flipped

    def legal_moves(self) -> List[int]:
        """
        Get the columns that can still be played, in ascending order.

        Returns:
            List of column indices, empty if the game is already over
        """
        if self.is_terminal():
            return []
        return self.open_columns()

    def open_columns(self) -> List[int]:
        """Columns with space left, regardless of whether the game is over."""
        return [col for col, height in enumerate(self.column_height) if height < NUM_ROWS]

    def is_win(self) -> bool:
        """Check whether the active player has four in a row."""
        return any(self._check_direction(d_col, d_row) for d_col, d_row in DIRECTIONS)

    def is_full(self) -> bool:
        return len(self.cells) == NUM_CELLS

    def is_terminal(self) -> bool:
        """Check whether the game has ended (win or full board)."""
        return self.is_win() or self.is_full()

    def _check_direction(self, d_col: int, d_row: int) -> bool:
        span = CONNECT - 1
        # Keep every start cell such that the whole run stays on the board
        cols = range(max(0, -d_col * span), NUM_COLS - max(0, d_col * span))
        rows = range(max(0, -d_row * span), NUM_ROWS - max(0, d_row * span))
        for col in cols:
            for row in rows:
                if all(
                    self.cells.get((col + i * d_col, row + i * d_row)) is Token.OWN
                    for i in range(CONNECT)
                ):
                    return True
        return False

    def owner_of(self, column: int, row: int) -> Optional[Player]:
        """
        Get the absolute owner of a cell.

        Args:
            column: Column index
            row: Row index (0 is the bottom row)

        Returns:
            The player owning the stone, or None if the cell is empty
        """
        token = self.cells.get((column, row))
        if token is None:
            return None
        if token is Token.OWN:
            return self.active_player
        return self.active_player.other

    def to_array(self) -> np.ndarray:
        """
        Get the board as an array of absolute owners.

        Returns:
            ``int8`` array of shape (NUM_ROWS, NUM_COLS) with row 0 at the
            bottom: 0 for empty, 1 for player A, 2 for player B
        """
        grid = np.full((NUM_ROWS, NUM_COLS), EMPTY_CELL, dtype=np.int8)
        for (col, row) in self.cells:
            grid[row, col] = PLAYER_CELL_VALUES[self.owner_of(col, row)]
        return grid

    def __str__(self) -> str:
        lines = []
        for row in reversed(range(NUM_ROWS)):
            symbols = []
            for col in range(NUM_COLS):
                owner = self.owner_of(col, row)
                symbols.append(PLAYER_SYMBOLS[owner] if owner else EMPTY_SYMBOL)
            lines.append(" ".join(symbols))
        lines.append(" ".join(str(col + 1) for col in range(NUM_COLS)))
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (f"Board(active_player={self.active_player.name}, "
                f"num_stones={list(self.column_height)})")


class GameResult(Enum):
    """Enum representing possible game results."""
    IN_PROGRESS = auto()
    WINNER = auto()
    DRAW = auto()


class Game:
    """
    A real game of Connect Four between two players.

    Each call to ``play`` drops a stone for the current player, records the
    outcome and passes the turn on.
    """

    def __init__(self):
        self.board = Board()
        self.result = GameResult.IN_PROGRESS
        self.winner: Optional[Player] = None
        self.moves: List[int] = []

    @property
    def current_player(self) -> Player:
        return self.board.current_player()

    @property
    def game_over(self) -> bool:
        return self.result is not GameResult.IN_PROGRESS

    def legal_moves(self) -> List[int]:
        if self.game_over:
            return []
        return self.board.legal_moves()

    def play(self, column: int) -> Optional[int]:
        """
        Play a move for the current player.

        Args:
            column: Column to drop the stone into

        Returns:
            The row used, or None if the game is over or the move is illegal
        """
        if self.game_over:
            return None

        row = self.board.drop(column)
        if row is None:
            return None
        self.moves.append(column)

        if self.board.is_win():
            self.result = GameResult.WINNER
            self.winner = self.board.current_player()
        elif self.board.is_full():
            self.result = GameResult.DRAW

        self.board.switch_turn()
        return row

    def reset(self) -> None:
        """Start over with an empty board."""
        self.board = Board()
        self.result = GameResult.IN_PROGRESS
        self.winner = None
        self.moves = []

    def __str__(self) -> str:
        return str(self.board)
