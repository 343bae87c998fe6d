"""
Kinematic Body
==============

The player-controlled body: falls under gravity, jumps on input.
Integration is semi-implicit Euler (velocity first, then position).
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from flappy_sim.flappy_core.config_loader import GameConfig, get_config


class FlapState(Enum):
    """Presentation-only velocity band. Has no effect on physics."""
    ASCENDING = "ascending"
    NEUTRAL = "neutral"
    DESCENDING = "descending"


class KinematicBody:
    """
    Vertical kinematics for the player body.

    The horizontal position is fixed; the world scrolls past it.
    No bounds are enforced here - leaving the playfield is a collision,
    decided by the collision module.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize body at its start position, at rest.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._gravity = config.physics.gravity
        self._jump_velocity = config.physics.jump_velocity
        self._flap_threshold = config.physics.flap_threshold

        self.x: float = config.body.start_x
        self.width: float = config.body.width
        self.height: float = config.body.height
        self.y: float = config.body.start_y
        self.vy: float = 0.0

    def integrate(self, delta: float) -> None:
        """
        Advance by one frame delta.

        Args:
            delta: Elapsed time in nominal-frame units.
        """
        self.vy += delta * self._gravity
        self.y += delta * self.vy

    def apply_jump(self) -> None:
        """Overwrite vertical velocity with the jump velocity."""
        self.vy = self._jump_velocity

    def reset(self) -> None:
        """Return to the start position with zero velocity."""
        self.y = self._config.body.start_y
        self.vy = 0.0

    @property
    def flap_state(self) -> FlapState:
        """Velocity band used to pick a sprite frame."""
        if self.vy < -self._flap_threshold:
            return FlapState.ASCENDING
        if self.vy > self._flap_threshold:
            return FlapState.DESCENDING
        return FlapState.NEUTRAL

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def __repr__(self) -> str:
        return f"KinematicBody(y={self.y:.2f}, vy={self.vy:.2f})"
