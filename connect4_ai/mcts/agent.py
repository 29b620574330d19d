"""
Monte Carlo Tree Search Agent for Connect Four.

This module provides the MCTSAgent class, a ready-to-use AI player that
keeps one search tree for the whole game: the tree is warmed up on reset,
grown before each of the agent's moves, and advanced (not rebuilt) as real
moves are played, so earlier search effort is reused.
"""
from typing import Any, Dict, List, Optional, Tuple
import logging
import time

from connect4_ai.mcts.config import MCTSConfig
from connect4_ai.mcts.search import MCTS

logger = logging.getLogger(__name__)


class MCTSAgent:
    """
    Monte Carlo Tree Search agent for playing Connect Four.

    Every real move, the agent's own as well as the opponent's, must be
    reported so the engine's root stays in step with the game.
    """

    def __init__(
        self,
        config: Optional[MCTSConfig] = None,
        name: str = "MCTS Agent"
    ):
        """
        Initialize an MCTS agent and warm up its engine.

        Args:
            config: MCTS configuration parameters
            name: Name of the agent
        """
        self.config = config or MCTSConfig()
        self.name = name

        # Statistics from the most recent search
        self.last_stats: Dict[str, Any] = {}

        # (column, utility) of every move the agent chose
        self.move_history: List[Tuple[int, float]] = []

        self.engine: Optional[MCTS] = None
        self.reset()

    def reset(self) -> None:
        """Start a fresh game with a new engine."""
        self.engine = MCTS(seed=self.config.seed)
        self.engine.search(self.config.warmup_iterations)
        self.last_stats = {}
        self.move_history = []
        logger.debug("%s reset (%d warm-up iterations)", self.name, self.config.warmup_iterations)

    def observe_move(self, column: int) -> None:
        """
        Report a move played by the opponent.

        Args:
            column: Column the opponent played
        """
        if not self.engine.root_node.is_expanded():
            self.engine.run_iteration()
        self.engine.apply_move(column)

    def select_move(self) -> Tuple[int, float]:
        """
        Search, pick the best move and advance the engine past it.

        Returns:
            Tuple of (column, utility)
        """
        start_time = time.time()
        self.engine.search(self.config.iterations)
        if self.config.verbose_final_iteration:
            self.engine.run_iteration(verbose=True)

        move, value = self.engine.best_move()
        self.last_stats = {
            "iterations": self.config.iterations,
            "time_elapsed": time.time() - start_time,
            "utility": value,
            "action_statistics": self.engine.get_action_statistics(),
            "principal_variation": self.engine.get_principal_variation(),
            **self.engine.stats(),
        }
        self.engine.apply_move(move)
        self.move_history.append((move, value))

        logger.info("%s best move: %d, utility: %.3f", self.name, move, value)
        return move, value

    def get_last_statistics(self) -> Dict[str, Any]:
        return self.last_stats

    def __str__(self) -> str:
        return f"{self.name} (MCTS, {self.config.iterations} iterations)"


class MCTSAgentFactory:
    """
    Factory for creating MCTS agents with different configurations.
    """

    @staticmethod
    def create_fast(seed: Optional[int] = None) -> MCTSAgent:
        config = MCTSConfig.fast()
        config.seed = seed
        return MCTSAgent(config=config, name="Fast MCTS")

    @staticmethod
    def create_standard(seed: Optional[int] = None) -> MCTSAgent:
        config = MCTSConfig.default()
        config.seed = seed
        return MCTSAgent(config=config, name="Standard MCTS")

    @staticmethod
    def create_strong(seed: Optional[int] = None) -> MCTSAgent:
        config = MCTSConfig.deep()
        config.seed = seed
        return MCTSAgent(config=config, name="Strong MCTS")
