"""
Monte Carlo Tree Search Node for Connect Four.

This module defines the MCTSNode class which represents a node in the MCTS tree.
Each node owns a board snapshot and accumulated statistics (visits, value).
Nodes live in an arena owned by the search engine; a node refers to its
children by arena index and never to its parent.
"""
from __future__ import annotations
from typing import List, Optional, Tuple
import math

from connect4_ai.core.game import Board
from connect4_ai.mcts.config import MCTSConfig


class MCTSNode:
    """
    A node in the Monte Carlo Tree Search.

    ``value`` is the signed cumulative reward seen from the perspective of
    the player who made the move leading to ``state``.
    """

    def __init__(self, state: Board):
        """
        Initialize an MCTS node.

        Args:
            state: The board this node represents
        """
        self.state = state
        self.visits = 0.0
        self.value = 0.0
        # (move, arena index) pairs, in legal-move order
        self.children: List[Tuple[int, int]] = []

    def is_expanded(self) -> bool:
        return bool(self.children)

    def child_for(self, move: int) -> Optional[int]:
        """
        Get the arena index of the child reached by a move.

        Args:
            move: Column index labelling the edge

        Returns:
            The child's index, or None if no such edge exists
        """
        for child_move, index in self.children:
            if child_move == move:
                return index
        return None

    def __str__(self) -> str:
        return (f"MCTSNode(visits={self.visits}, "
                f"value={self.value:.2f}, "
                f"children={len(self.children)})")


def ucb(node: MCTSNode, parent: MCTSNode) -> float:
    """
    Calculate the UCB1 score of a node relative to its parent.

    UCB1 = 2 * sqrt(ln(parent_visits) / visits) + value / visits

    Args:
        node: Child node to score
        parent: The node it is being selected from

    Returns:
        UCB1 score, infinite for a node that was never visited
    """
    if node.visits == 0:
        return MCTSConfig.INFINITE_VALUE
    exploration = math.sqrt(math.log(parent.visits) / node.visits)
    return MCTSConfig.EXPLORATION_CONSTANT * exploration + node.value / node.visits


def utility(node: MCTSNode) -> float:
    """Average reward of a visited node."""
    return node.value / node.visits
