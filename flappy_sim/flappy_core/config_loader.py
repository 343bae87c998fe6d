"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import yaml


@dataclass(frozen=True)
class PlayfieldConfig:
    """Playfield geometry."""
    width: float                 # X where new obstacle pairs appear
    height: float                # Lower bound of the legal body area


@dataclass(frozen=True)
class BodyConfig:
    """Player body size and start position."""
    width: float
    height: float
    start_x: float
    start_y: float


@dataclass(frozen=True)
class PhysicsConfig:
    """Kinematic integration parameters."""
    gravity: float
    jump_velocity: float
    frame_ms: float              # Simulated milliseconds per unit delta
    flap_threshold: float


@dataclass(frozen=True)
class InputConfig:
    """Input debounce settings."""
    jump_cooldown_ms: float


@dataclass(frozen=True)
class ObstacleConfig:
    """Obstacle pair geometry and gap ranges."""
    width: float
    gap_min: float
    gap_max: float
    gap_start: float
    gap_end: float
    skin: str

    @property
    def gap_size_range(self) -> Tuple[float, float]:
        return (self.gap_min, self.gap_max)

    @property
    def gap_top_range(self) -> Tuple[float, float]:
        return (self.gap_start, self.gap_end)


@dataclass(frozen=True)
class DifficultyConfig:
    """Difficulty ramp initial values, accelerators and limits."""
    initial_spawn_interval_ms: float
    initial_obstacle_velocity: float
    interval_accel: float
    velocity_accel: float
    min_spawn_interval_ms: float
    max_obstacle_speed: float


@dataclass(frozen=True)
class ObservationConfig:
    """Observation / snapshot parameters."""
    max_obstacles: int
    max_frames: int


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    playfield: PlayfieldConfig
    body: BodyConfig
    physics: PhysicsConfig
    input: InputConfig
    obstacles: ObstacleConfig
    difficulty: DifficultyConfig
    observation: ObservationConfig


VALID_SKINS = ("green", "red")


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    playfield = config.playfield
    body = config.body
    obstacles = config.obstacles
    difficulty = config.difficulty

    if playfield.width <= 0 or playfield.height <= 0:
        raise ValueError(
            f"Playfield size must be positive, got {playfield.width}x{playfield.height}"
        )

    if body.width <= 0 or body.height <= 0:
        raise ValueError(f"Body size must be positive, got {body.width}x{body.height}")

    if body.height >= playfield.height:
        raise ValueError(
            f"Body height ({body.height}) must be smaller than playfield height "
            f"({playfield.height})"
        )

    if not 0 <= body.start_y <= playfield.height - body.height:
        raise ValueError(
            f"body.start_y ({body.start_y}) must lie within "
            f"[0, {playfield.height - body.height}]"
        )

    if config.physics.jump_velocity >= 0:
        raise ValueError(
            f"physics.jump_velocity must be negative (upward), got {config.physics.jump_velocity}"
        )

    if config.physics.frame_ms <= 0:
        raise ValueError(f"physics.frame_ms must be positive, got {config.physics.frame_ms}")

    if config.input.jump_cooldown_ms < 0:
        raise ValueError(
            f"input.jump_cooldown_ms must not be negative, got {config.input.jump_cooldown_ms}"
        )

    # Gap ranges
    if obstacles.width <= 0:
        raise ValueError(f"obstacles.width must be positive, got {obstacles.width}")

    if not 0 < obstacles.gap_min <= obstacles.gap_max:
        raise ValueError(
            f"Gap size range must satisfy 0 < gap_min <= gap_max, "
            f"got [{obstacles.gap_min}, {obstacles.gap_max}]"
        )

    if not 0 <= obstacles.gap_start <= obstacles.gap_end:
        raise ValueError(
            f"Gap top range must satisfy 0 <= gap_start <= gap_end, "
            f"got [{obstacles.gap_start}, {obstacles.gap_end}]"
        )

    if obstacles.gap_end + obstacles.gap_max > playfield.height:
        raise ValueError(
            f"Largest gap ({obstacles.gap_end} + {obstacles.gap_max}) extends below "
            f"playfield height ({playfield.height})"
        )

    if obstacles.gap_min < body.height:
        raise ValueError(
            f"gap_min ({obstacles.gap_min}) is smaller than body height ({body.height})"
        )

    if obstacles.skin not in VALID_SKINS:
        raise ValueError(f"obstacles.skin must be one of {VALID_SKINS}, got '{obstacles.skin}'")

    # Difficulty ramp
    if difficulty.interval_accel >= 0 or difficulty.velocity_accel >= 0:
        raise ValueError(
            "Difficulty accelerators must be negative "
            f"(interval_accel={difficulty.interval_accel}, "
            f"velocity_accel={difficulty.velocity_accel})"
        )

    if difficulty.initial_obstacle_velocity >= 0:
        raise ValueError(
            "initial_obstacle_velocity must be negative (leftward), "
            f"got {difficulty.initial_obstacle_velocity}"
        )

    if not 0 < difficulty.min_spawn_interval_ms <= difficulty.initial_spawn_interval_ms:
        raise ValueError(
            f"min_spawn_interval_ms ({difficulty.min_spawn_interval_ms}) must be positive "
            f"and not exceed initial_spawn_interval_ms ({difficulty.initial_spawn_interval_ms})"
        )

    if difficulty.max_obstacle_speed < abs(difficulty.initial_obstacle_velocity):
        raise ValueError(
            f"max_obstacle_speed ({difficulty.max_obstacle_speed}) is below the initial "
            f"speed ({abs(difficulty.initial_obstacle_velocity)})"
        )

    if config.observation.max_obstacles <= 0:
        raise ValueError(
            f"observation.max_obstacles must be positive, got {config.observation.max_obstacles}"
        )


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    playfield_data = raw["playfield"]
    playfield = PlayfieldConfig(
        width=float(playfield_data["width"]),
        height=float(playfield_data["height"])
    )

    # Body start position defaults follow the playfield
    body_data = raw["body"]
    body = BodyConfig(
        width=float(body_data["width"]),
        height=float(body_data["height"]),
        start_x=float(body_data.get("start_x", playfield.width / 8)),
        start_y=float(body_data.get("start_y", playfield.height / 2))
    )

    physics_data = raw["physics"]
    jump_velocity = float(physics_data["jump_velocity"])
    physics = PhysicsConfig(
        gravity=float(physics_data["gravity"]),
        jump_velocity=jump_velocity,
        frame_ms=float(physics_data.get("frame_ms", 1000.0 / 60.0)),
        flap_threshold=float(physics_data.get("flap_threshold", -jump_velocity / 6))
    )

    input_data = raw.get("input", {})
    input_config = InputConfig(
        jump_cooldown_ms=float(input_data.get("jump_cooldown_ms", 20.0))
    )

    obstacle_data = raw["obstacles"]
    gap_max = float(obstacle_data["gap_max"])
    gap_start = float(obstacle_data.get("gap_start", playfield.height / 6))
    obstacles = ObstacleConfig(
        width=float(obstacle_data["width"]),
        gap_min=float(obstacle_data["gap_min"]),
        gap_max=gap_max,
        gap_start=gap_start,
        gap_end=float(obstacle_data.get("gap_end", playfield.height - gap_start - gap_max)),
        skin=str(obstacle_data.get("skin", "green"))
    )

    difficulty_data = raw["difficulty"]
    difficulty = DifficultyConfig(
        initial_spawn_interval_ms=float(difficulty_data["initial_spawn_interval_ms"]),
        initial_obstacle_velocity=float(difficulty_data["initial_obstacle_velocity"]),
        interval_accel=float(difficulty_data["interval_accel"]),
        velocity_accel=float(difficulty_data["velocity_accel"]),
        min_spawn_interval_ms=float(difficulty_data.get("min_spawn_interval_ms", 900.0)),
        max_obstacle_speed=float(difficulty_data.get("max_obstacle_speed", 6.0))
    )

    obs_data = raw.get("observation", {})
    observation = ObservationConfig(
        max_obstacles=int(obs_data.get("max_obstacles", 6)),
        max_frames=int(obs_data.get("max_frames", 20000))
    )

    config = GameConfig(
        playfield=playfield,
        body=body,
        physics=physics,
        input=input_config,
        obstacles=obstacles,
        difficulty=difficulty,
        observation=observation
    )

    _validate_config(config)
    return config


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
