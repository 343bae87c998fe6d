"""
Gymnasium Environment Wrapper
=============================

Provides a standard Gymnasium interface to the game.
Reward is always 0.0 - agents must compute their own from info.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple, Union
import numpy as np

import gymnasium as gym
from gymnasium import spaces

from flappy_sim.flappy_core.config_loader import GameConfig, load_config
from flappy_sim.flappy_core.game import CoreGame
from flappy_sim.flappy_core.state_snapshot import GameSnapshot

logger = logging.getLogger(__name__)

NOOP = 0
JUMP = 1


class FlappyEnv(gym.Env):
    """
    Side-scrolling obstacle game as a Gymnasium environment.

    Action Space:
        Discrete(2): 0 = do nothing, 1 = request a jump.

    Observation Space:
        Dict with body state, next gap geometry and padded obstacle arrays.

    Step:
        One frame with delta = 1.0 nominal frame.

    Reward:
        Always 0.0. Agents must compute their own reward from the info dict.

    Info:
        Contains score, delta_score, frame, phase, terminated_reason, etc.
    """

    metadata = {
        "render_modes": ["rgb_array"],
        "render_fps": 60,
    }

    def __init__(
        self,
        config_path: Optional[str] = None,
        render_mode: Optional[str] = None,
        image_width: Optional[int] = None,
        image_height: Optional[int] = None,
        max_frames: Optional[int] = None,
        debug: bool = False,
    ):
        """
        Initialize environment.

        Args:
            config_path: Path to game_config.yaml. Uses default if None.
            render_mode: "rgb_array" for numpy frames, None for headless.
            image_width: Rendered image width. Defaults to playfield width.
            image_height: Rendered image height. Defaults to playfield height.
            max_frames: Truncation cap. Uses config value if None.
            debug: If True, log per-step details at DEBUG level.
        """
        super().__init__()

        self._config = load_config(config_path)

        if render_mode is not None and render_mode not in self.metadata["render_modes"]:
            raise ValueError(f"Unsupported render_mode: {render_mode}")

        self.render_mode = render_mode
        self._debug = debug
        playfield = self._config.playfield
        self._img_width = int(playfield.width) if image_width is None else image_width
        self._img_height = int(playfield.height) if image_height is None else image_height
        self._max_frames = (
            self._config.observation.max_frames if max_frames is None else max_frames
        )

        self._game = CoreGame(config=self._config)
        self._renderer = None

        self.action_space = spaces.Discrete(2)
        self.observation_space = self._build_observation_space()

        if self._debug:
            logger.debug(
                "FlappyEnv: playfield %gx%g, max_obstacles=%d, max_frames=%d",
                playfield.width, playfield.height,
                self._config.observation.max_obstacles, self._max_frames
            )

    def _build_observation_space(self) -> spaces.Dict:
        """Build the observation space definition."""
        max_obs = self._config.observation.max_obstacles
        height = self._config.playfield.height
        width = self._config.playfield.width

        return spaces.Dict({
            "body_y": spaces.Box(low=-np.inf, high=np.inf, shape=(), dtype=np.float32),
            "body_vy": spaces.Box(low=-np.inf, high=np.inf, shape=(), dtype=np.float32),
            "score": spaces.Box(low=0, high=np.iinfo(np.int64).max, shape=(), dtype=np.int64),
            "playfield_height": spaces.Box(low=0, high=height, shape=(), dtype=np.float32),
            "obstacle_velocity": spaces.Box(low=-np.inf, high=0, shape=(), dtype=np.float32),
            "next_gap_dx": spaces.Box(low=-np.inf, high=width, shape=(), dtype=np.float32),
            "next_gap_top": spaces.Box(low=0, high=height, shape=(), dtype=np.float32),
            "next_gap_bottom": spaces.Box(low=0, high=height, shape=(), dtype=np.float32),
            "obs_x": spaces.Box(low=-np.inf, high=np.inf, shape=(max_obs,), dtype=np.float32),
            "obs_top": spaces.Box(low=0, high=height, shape=(max_obs,), dtype=np.float32),
            "obs_bottom": spaces.Box(low=0, high=height, shape=(max_obs,), dtype=np.float32),
            "obs_mask": spaces.MultiBinary(max_obs),
        })

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Reset the environment and start a new round.

        Args:
            seed: Random seed for reproducibility.
            options: Additional options (unused).

        Returns:
            (observation, info) tuple.
        """
        super().reset(seed=seed)

        # Gap placement follows the env's seeded generator
        game_seed = int(self.np_random.integers(0, 2**31 - 1))

        # A fresh game so reset works mid-round too
        self._game = CoreGame(config=self._config, seed=game_seed)
        self._game.start()

        obs = self._snapshot_to_obs(self._game.snapshot())
        info = self._game.get_info()
        info["delta_score"] = 0

        return obs, info

    def step(
        self,
        action: Union[int, np.ndarray]
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Execute one frame.

        Args:
            action: 0 = nothing, 1 = jump.

        Returns:
            (observation, reward, terminated, truncated, info) tuple.
            Reward is always 0.0.
        """
        if isinstance(action, np.ndarray):
            action = int(action.item())

        if int(action) == JUMP:
            self._game.request_jump()

        result = self._game.update(1.0)

        obs = self._snapshot_to_obs(self._game.snapshot())
        terminated = result.game_over or self._game.is_over
        truncated = (not terminated) and self._game.frame >= self._max_frames

        info = self._game.get_info()
        info["delta_score"] = result.delta_score
        info["jumped"] = result.jumped

        if self._debug:
            logger.debug(
                "step action=%d jumped=%s y=%.1f score=%d",
                action, result.jumped, float(obs["body_y"]), info["score"]
            )
            if terminated:
                logger.debug("terminated: %s", info["terminated_reason"])

        return obs, 0.0, bool(terminated), bool(truncated), info

    def _snapshot_to_obs(self, snapshot: GameSnapshot) -> Dict[str, np.ndarray]:
        """Convert snapshot to observation dict."""
        return snapshot.to_obs_dict()

    def render(self) -> Optional[np.ndarray]:
        """
        Render the current game state.

        Returns:
            RGB array if render_mode is "rgb_array", None otherwise.
        """
        if self.render_mode != "rgb_array":
            return None

        if self._renderer is None:
            from flappy_sim.flappy_core.render_solid import SolidRenderer
            self._renderer = SolidRenderer(self._config)

        return self._renderer.render(self._game.snapshot(), self._img_width, self._img_height)

    def close(self) -> None:
        """Clean up resources."""
        if self._renderer is not None:
            self._renderer.close()
            self._renderer = None

    @property
    def game(self) -> CoreGame:
        """Access to underlying game (for debugging/tools)."""
        return self._game

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config
