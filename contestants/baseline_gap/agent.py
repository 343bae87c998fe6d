"""
Baseline Gap Agent - Hops along the lower edge of the next gap.

This is a simple heuristic agent that reads the geometry of the next gap
from the observation and jumps whenever the body sinks too close to the
gap's lower edge.

This serves as:
1. A working example of how to read observations and return actions
2. A baseline benchmark for agents to compare against
3. A verification that the environment API works correctly

Strategy:
- Read next_gap_bottom (top of the lower obstacle ahead)
- Keep the body's top edge above next_gap_bottom - BOTTOM_MARGIN
- Jump only while falling, so one jump is not wasted on top of another
"""

import numpy as np
from typing import Any, Dict, Optional


# Distance from the gap's lower edge at which to jump. Must exceed the body
# height; a jump rises about 90 units with the default physics.
BOTTOM_MARGIN = 34.0


class FlappyAgent:
    """
    Simple baseline agent that bounces inside the next gap.
    """

    def __init__(self, margin: float = BOTTOM_MARGIN, debug: bool = False):
        """
        Initialize the agent.

        Args:
            margin: Jump threshold measured up from the gap's lower edge.
            debug: If True, print decisions to stdout.
        """
        self.margin = margin
        self.debug = debug
        self._rng = np.random.default_rng()

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Reset agent state for a new episode.

        Args:
            seed: Optional random seed for reproducibility.
        """
        if seed is not None:
            self._rng = np.random.default_rng(seed)

    def act(self, observation: Dict[str, Any], debug: bool = False) -> int:
        """
        Decide whether to jump this frame.

        Args:
            observation: Dict of numpy arrays from the environment.
            debug: If True, print debug info for this step.

        Returns:
            1 to jump, 0 to do nothing.
        """
        body_y = float(observation["body_y"])
        body_vy = float(observation["body_vy"])
        gap_bottom = float(observation["next_gap_bottom"])

        threshold = gap_bottom - self.margin
        action = 1 if (body_y > threshold and body_vy >= 0.0) else 0

        if debug or self.debug:
            print(f"[Gap Agent] y={body_y:.1f} vy={body_vy:.2f} "
                  f"threshold={threshold:.1f} dx={float(observation['next_gap_dx']):.1f} "
                  f"action={action}")

        return action


# Convenience function to create agent (used by evaluation harness)
def create_agent(**kwargs) -> FlappyAgent:
    """Factory function to create an agent instance."""
    return FlappyAgent(**kwargs)
