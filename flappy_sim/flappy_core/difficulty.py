"""
Difficulty Ramp
===============

Shrinks the spawn interval and speeds up obstacles a little every frame.
"""

from __future__ import annotations

from typing import Optional

from flappy_sim.flappy_core.config_loader import GameConfig, get_config


class DifficultyRamp:
    """
    Two scalars that tighten monotonically over a round.

    - spawn_interval (ms): decreases, floored at min_spawn_interval_ms
    - obstacle_velocity: negative, magnitude capped at max_obstacle_speed
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize ramp at its configured starting values.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        difficulty = config.difficulty
        self._initial_interval = difficulty.initial_spawn_interval_ms
        self._initial_velocity = difficulty.initial_obstacle_velocity
        self._interval_accel = difficulty.interval_accel
        self._velocity_accel = difficulty.velocity_accel
        self._min_interval = difficulty.min_spawn_interval_ms
        self._max_speed = difficulty.max_obstacle_speed

        self._spawn_interval: float = self._initial_interval
        self._obstacle_velocity: float = self._initial_velocity

    @property
    def spawn_interval(self) -> float:
        """Current time between spawns (ms)."""
        return self._spawn_interval

    @property
    def obstacle_velocity(self) -> float:
        """Current horizontal obstacle velocity (negative)."""
        return self._obstacle_velocity

    @property
    def at_limit(self) -> bool:
        """True once both scalars have reached their limits."""
        return (
            self._spawn_interval <= self._min_interval
            and -self._obstacle_velocity >= self._max_speed
        )

    def advance(self, delta: float) -> None:
        """
        Apply the accelerators for one frame delta.

        Args:
            delta: Elapsed time in nominal-frame units.
        """
        self._spawn_interval = max(
            self._min_interval,
            self._spawn_interval + self._interval_accel * delta
        )
        self._obstacle_velocity = max(
            -self._max_speed,
            self._obstacle_velocity + self._velocity_accel * delta
        )

    def reset(self) -> None:
        """Restore the configured initial values."""
        self._spawn_interval = self._initial_interval
        self._obstacle_velocity = self._initial_velocity
