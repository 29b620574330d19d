"""
Monte Carlo Tree Search (MCTS) implementation for Connect Four.

The MCTS algorithm works by:

1. Selection: Starting from the root node, select child nodes using UCB1 until
   reaching a node that has not been expanded.
2. Expansion: Create one child node per legal move.
3. Simulation: From one of the new children, perform a random playout to the
   end of the game.
4. Backpropagation: Update the statistics of all nodes in the path with the result.

The tree is kept between moves; playing a move advances the root to the
matching child.
"""

from connect4_ai.mcts.node import MCTSNode, ucb, utility
from connect4_ai.mcts.search import MCTS
from connect4_ai.mcts.agent import MCTSAgent, MCTSAgentFactory
from connect4_ai.mcts.config import MCTSConfig

# Default configuration
DEFAULT_CONFIG = MCTSConfig(
    warmup_iterations=20,     # Iterations run on reset
    iterations=1000,          # Number of MCTS iterations per move
    verbose_final_iteration=True
)

__all__ = [
    'MCTS',
    'MCTSAgent',
    'MCTSAgentFactory',
    'MCTSNode',
    'MCTSConfig',
    'ucb',
    'utility',
    'DEFAULT_CONFIG'
]
