"""
Monte Carlo Tree Search (MCTS) algorithm for Connect Four.

This module implements the search engine with the four standard phases:
1. Selection: Descend from the root by UCB1 until reaching an unexpanded node
2. Expansion: Create one child per legal move of that node
3. Simulation: Run a random playout to the end of the game
4. Backpropagation: Update statistics along the selected path

Nodes are stored in an arena (a list addressed by index). The root is an
index that moves forward as real moves are played; nodes left behind are
never pruned.
"""
from __future__ import annotations
from typing import Any, Dict, List, Optional, Tuple
import logging
import random

from connect4_ai.core.constants import Player
from connect4_ai.core.game import Board
from connect4_ai.mcts.node import MCTSNode, ucb, utility

logger = logging.getLogger(__name__)


class MCTS:
    """
    Monte Carlo Tree Search engine.

    The root always represents the current state of the real game. Call
    ``run_iteration`` as many times as the budget allows, then read
    ``best_move`` and report every real move through ``apply_move``.
    """

    def __init__(self, seed: Optional[int] = None):
        """
        Initialize a search engine over an empty board.

        Args:
            seed: Optional seed for tie-breaking and playouts
        """
        self.rng = random.Random(seed)
        self.nodes: List[MCTSNode] = [MCTSNode(Board())]
        self.root = 0

    @property
    def root_node(self) -> MCTSNode:
        return self.nodes[self.root]

    @property
    def node_count(self) -> int:
        """Total number of nodes ever created, reachable or not."""
        return len(self.nodes)

    def _add_node(self, state: Board) -> int:
        self.nodes.append(MCTSNode(state))
        return len(self.nodes) - 1

    def select_child(self, index: int) -> Optional[int]:
        """
        Pick the child with the highest UCB score, breaking exact ties at random.

        Args:
            index: Arena index of the node to select from

        Returns:
            Arena index of the chosen child, or None if the node is not expanded
        """
        parent = self.nodes[index]
        if not parent.children:
            return None

        scored = [(ucb(self.nodes[child], parent), child) for _, child in parent.children]
        best_score = max(score for score, _ in scored)
        choice = [child for score, child in scored if score == best_score]
        if len(choice) > 1:
            return self.rng.choice(choice)
        return choice[0]

    def select(self) -> List[int]:
        """
        Selection phase: follow UCB from the root down to an unexpanded node.

        Returns:
            Path of arena indices, root first
        """
        current = self.root
        path = [current]
        next_node = self.select_child(current)
        while next_node is not None:
            path.append(next_node)
            current = next_node
            next_node = self.select_child(current)
        return path

    def expand(self, index: int) -> bool:
        """
        Expansion phase: create one child per legal move.

        The turn is switched before the move is dropped, so each child's
        OWN stones belong to the player who just moved.

        Args:
            index: Arena index of the node to expand

        Returns:
            True if children were created, False for a terminal node
        """
        moves = self.nodes[index].state.legal_moves()
        if not moves:
            return False

        for move in moves:
            new_state = self.nodes[index].state.clone()
            new_state.switch_turn()
            new_state.drop(move)
            child = self._add_node(new_state)
            self.nodes[index].children.append((move, child))
        return True

    def rollout(self, index: int) -> Optional[Player]:
        """
        Simulation phase: play uniformly random moves until the game ends.

        Args:
            index: Arena index of the node to simulate from

        Returns:
            The winning player, or None for a draw
        """
        state = self.nodes[index].state.clone()
        first_step = True
        while not state.is_terminal():
            state.switch_turn()
            # Past the first step the new mover's lines were already checked
            moves = state.legal_moves() if first_step else state.open_columns()
            first_step = False
            if not moves:
                logger.warning("No legal moves in non-terminal state %s", list(state.num_stones))
                break
            state.drop(self.rng.choice(moves))

        if state.is_win():
            return state.current_player()
        return None

    def backpropagate(self, path: List[int], reward: float) -> None:
        """
        Backpropagation phase: update statistics along the path.

        The reward is negated at every step so each node accumulates value
        from its own mover's perspective.

        Args:
            path: Arena indices, root first
            reward: Playout result from the root's perspective
        """
        for index in path:
            node = self.nodes[index]
            node.value += reward
            node.visits += 1
            reward = -reward

    def run_iteration(self, verbose: bool = False) -> float:
        """
        Run one full select/expand/simulate/backpropagate cycle.

        Args:
            verbose: Whether to log the tree and path details

        Returns:
            The playout result from the root's perspective (+1, -1 or 0)
        """
        path = self.select()
        leaf = path[-1]

        if verbose:
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("All nodes\n   --- %s", self.format_path(range(len(self.nodes))))
            logger.info("Path before expansion\n   --- %s", self.format_path(path))

        if self.expand(leaf):
            path.append(self.select_child(leaf))

        winner = self.rollout(path[-1])
        reward = 0.0
        if winner is not None:
            reward = 1.0 if winner == self.root_node.state.current_player() else -1.0
        self.backpropagate(path, reward)

        if verbose:
            logger.info("Playout result: %s", reward)
            logger.info("Path after backprop\n   --- %s", self.format_path(path))
        return reward

    def search(self, iterations: int, verbose: bool = False) -> None:
        """Run a batch of iterations."""
        for _ in range(iterations):
            self.run_iteration(verbose)

    def best_move(self) -> Tuple[int, float]:
        """
        Get the root move with the highest average reward.

        Ties go to the first child in column order. Children that were never
        visited have no average and are not candidates.

        Returns:
            Tuple of (column, utility)

        Raises:
            ValueError: If no child of the root has been explored
        """
        candidates = [
            (move, child) for move, child in self.root_node.children
            if self.nodes[child].visits > 0
        ]
        if not candidates:
            raise ValueError("No explored moves at the root; run at least one iteration first")

        move, child = max(candidates, key=lambda pair: utility(self.nodes[pair[1]]))
        return move, utility(self.nodes[child])

    def apply_move(self, move: int) -> None:
        """
        Advance the root to the child reached by a real move.

        Args:
            move: Column that was played

        Raises:
            ValueError: If the root has no edge for this move
        """
        child = self.root_node.child_for(move)
        if child is None:
            raise ValueError(f"Move {move} was never explored from the current root")
        self.root = child

    def format_path(self, path) -> str:
        """
        Pretty-print a sequence of nodes.

        Args:
            path: Iterable of arena indices

        Returns:
            One line per node with its index, value, visits and utility
        """
        lines = []
        for index in path:
            node = self.nodes[index]
            u = node.value / node.visits if node.visits else float('nan')
            lines.append(f"idx: {index} value: {node.value} visits: {node.visits} u: {u}")
        return "\n   --- ".join(lines)

    def count_reachable(self) -> int:
        """Count the nodes reachable from the current root."""
        count = 0
        stack = [self.root]
        while stack:
            index = stack.pop()
            count += 1
            stack.extend(child for _, child in self.nodes[index].children)
        return count

    def get_action_statistics(self) -> Dict[int, Dict[str, float]]:
        """
        Get statistics for all moves from the root.

        Returns:
            Dictionary mapping columns to visits, value, utility and UCB score
        """
        root = self.root_node
        result = {}
        for move, index in root.children:
            child = self.nodes[index]
            result[move] = {
                "visits": child.visits,
                "value": child.value,
                "utility": utility(child) if child.visits > 0 else float('nan'),
                "ucb": ucb(child, root),
            }
        return result

    def get_principal_variation(self, max_depth: int = 10) -> List[Tuple[int, float]]:
        """
        Get the principal variation (most visited line) from the root.

        Args:
            max_depth: Maximum number of moves to follow

        Returns:
            List of (column, utility) pairs
        """
        result = []
        current = self.root_node
        while current.children and len(result) < max_depth:
            move, index = max(current.children, key=lambda pair: self.nodes[pair[1]].visits)
            child = self.nodes[index]
            if child.visits == 0:
                break
            result.append((move, utility(child)))
            current = child
        return result

    def stats(self) -> Dict[str, Any]:
        return {
            "node_count": self.node_count,
            "reachable_nodes": self.count_reachable(),
            "root_visits": self.root_node.visits,
        }
