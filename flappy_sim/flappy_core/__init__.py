"""
Flappy Core - The simulation core of the side-scrolling obstacle game.

This module provides the frame-driven game simulation, its components
(body, obstacle track, difficulty ramp, collision, scoring) and a
Gymnasium environment wrapper.

Main exports:
- CoreGame: Idle / Playing / GameOver state machine driving one round
- GameListener: Base class for score / game over / restart notifications
- FlappyEnv: Gymnasium environment for agents
- GameConfig: Configuration loaded from game_config.yaml
"""

from flappy_sim.flappy_core.config_loader import GameConfig, load_config
from flappy_sim.flappy_core.body import FlapState, KinematicBody
from flappy_sim.flappy_core.obstacles import ObstaclePair, ObstacleSkin, ObstacleTrack
from flappy_sim.flappy_core.difficulty import DifficultyRamp
from flappy_sim.flappy_core.collision import CollisionResult, check_collision, is_colliding
from flappy_sim.flappy_core.events import CallbackListener, GameListener
from flappy_sim.flappy_core.game import CoreGame, FrameResult, GamePhase
from flappy_sim.flappy_core.env_gym import FlappyEnv

__all__ = [
    "GameConfig",
    "load_config",
    "FlapState",
    "KinematicBody",
    "ObstaclePair",
    "ObstacleSkin",
    "ObstacleTrack",
    "DifficultyRamp",
    "CollisionResult",
    "check_collision",
    "is_colliding",
    "CallbackListener",
    "GameListener",
    "CoreGame",
    "FrameResult",
    "GamePhase",
    "FlappyEnv",
]
