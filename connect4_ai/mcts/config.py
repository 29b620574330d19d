"""
Configuration for Monte Carlo Tree Search (MCTS).

This module defines the search budgets used by the MCTS agent. The UCB1
exploration constant is fixed.
"""
from dataclasses import dataclass, fields
from typing import ClassVar, Optional

from connect4_ai.core.constants import DEFAULT_MCTS_ITERATIONS, DEFAULT_WARMUP_ITERATIONS


@dataclass
class MCTSConfig:
    """
    Configuration parameters for Monte Carlo Tree Search.

    This class defines the search budgets for the MCTS agent,
    with validation and sensible defaults.
    """
    warmup_iterations: int = DEFAULT_WARMUP_ITERATIONS
    """Number of iterations run on a fresh engine, before any move"""

    iterations: int = DEFAULT_MCTS_ITERATIONS
    """Number of MCTS iterations to perform per move decision"""

    verbose_final_iteration: bool = True
    """Whether to run one extra verbose iteration before reading the best move"""

    seed: Optional[int] = None
    """Seed for the engine's random source (None = unseeded)"""

    # Constants
    EXPLORATION_CONSTANT: ClassVar[float] = 2.0
    """UCB1 exploration factor"""

    INFINITE_VALUE: ClassVar[float] = float('inf')
    """UCB score of a node that has never been visited"""

    def __post_init__(self):
        """Validate configuration parameters."""
        if self.warmup_iterations < 0:
            raise ValueError("warmup_iterations must be non-negative")

        if self.iterations <= 0:
            raise ValueError("iterations must be positive")

    @classmethod
    def default(cls) -> 'MCTSConfig':
        return cls()

    @classmethod
    def fast(cls) -> 'MCTSConfig':
        """
        Get a configuration optimized for speed (fewer iterations).

        Returns:
            Fast MCTSConfig object
        """
        return cls(iterations=200, verbose_final_iteration=False)

    @classmethod
    def deep(cls) -> 'MCTSConfig':
        """
        Get a configuration optimized for deep search.

        Returns:
            Deep MCTSConfig object
        """
        return cls(warmup_iterations=100, iterations=5000)

    @classmethod
    def from_dict(cls, config_dict: dict) -> 'MCTSConfig':
        """
        Create a configuration from a dictionary.

        Args:
            config_dict: Dictionary of configuration parameters

        Returns:
            MCTSConfig object
        """
        # Filter out any keys that aren't valid parameters
        valid_params = {k: v for k, v in config_dict.items()
                        if k in cls.__dataclass_fields__}
        return cls(**valid_params)

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def __str__(self) -> str:
        params = ", ".join(f"{name}={value}" for name, value in self.to_dict().items())
        return f"MCTSConfig({params})"
