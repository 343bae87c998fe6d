"""
Team Template Agent
===================

Your agent must provide one of:
1. A `create_agent()` factory or a `FlappyAgent` class whose instances have
   an `act(obs) -> action` method
2. A standalone `act(obs) -> action` function

Actions are integers: 0 = do nothing, 1 = jump.
"""

from __future__ import annotations

from typing import Dict
import numpy as np


class FlappyAgent:
    """
    Your agent implementation.

    Replace the strategy in `act()` with your own logic.
    """

    def __init__(self):
        """Initialize your agent. Load models, set up state, etc."""
        self.rng = np.random.default_rng()

    def act(self, obs: Dict[str, np.ndarray]) -> int:
        """
        Choose an action based on the observation.

        Args:
            obs: Dictionary containing game state (see FlappyEnv).

        Returns:
            action: 1 to jump, 0 to do nothing.
        """
        # TODO: Replace with your strategy
        return int(self.rng.random() < 0.05)

    def reset(self) -> None:
        """Called when a new episode starts (optional)."""
        pass


def act(obs: Dict[str, np.ndarray]) -> int:
    """Standalone act function (alternative to class-based agent)."""
    return int(np.random.random() < 0.05)
