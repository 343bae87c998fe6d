"""
Solid Renderer
==============

Fast numpy-based renderer that draws obstacles and the body as
solid-color rectangles. Game space is y-down, same as image space.
"""

from __future__ import annotations

from typing import Optional
import numpy as np

from flappy_sim.flappy_core.body import FlapState
from flappy_sim.flappy_core.config_loader import GameConfig, get_config
from flappy_sim.flappy_core.obstacles import ObstacleSkin
from flappy_sim.flappy_core.state_snapshot import GameSnapshot, SKIN_INDEX

# RGB palette shared by every renderer
SKY_COLOR = (78, 192, 202)
SKIN_COLORS = {
    ObstacleSkin.GREEN: (84, 168, 48),
    ObstacleSkin.RED: (204, 64, 48),
}
BODY_COLORS = {
    FlapState.ASCENDING.value: (255, 236, 96),
    FlapState.NEUTRAL.value: (250, 200, 40),
    FlapState.DESCENDING.value: (230, 150, 20),
}


class SolidRenderer:
    """
    Renders a GameSnapshot as solid-color rectangles.

    Uses numpy for fast CPU-based rendering without pygame.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize renderer.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config

        self._bg_color = np.array(SKY_COLOR, dtype=np.uint8)

        # Obstacle colors indexed like obs_skin
        self._skin_colors = np.zeros((len(SKIN_INDEX), 3), dtype=np.uint8)
        for skin, index in SKIN_INDEX.items():
            self._skin_colors[index] = SKIN_COLORS[skin]

        self._body_colors = {
            state: np.array(rgb, dtype=np.uint8) for state, rgb in BODY_COLORS.items()
        }
        self._game_over_tint = np.array([40, 40, 40], dtype=np.uint8)

    def render(self, snapshot: GameSnapshot, width: int, height: int) -> np.ndarray:
        """
        Render the snapshot to an RGB array.

        Args:
            snapshot: Snapshot from CoreGame.snapshot().
            width: Output image width.
            height: Output image height.

        Returns:
            (height, width, 3) uint8 array.
        """
        img = np.empty((height, width, 3), dtype=np.uint8)
        img[:] = self._bg_color

        scale_x = width / snapshot.playfield_width
        scale_y = height / snapshot.playfield_height

        # Obstacles: upper segment from the top down to the gap, lower from the gap down
        for i in np.flatnonzero(snapshot.obs_mask):
            color = self._skin_colors[snapshot.obs_skin[i]]
            left = snapshot.obs_x[i]
            right = left + snapshot.obs_width[i]
            self._fill_rect(img, left, 0.0, right, snapshot.obs_top[i], scale_x, scale_y, color)
            self._fill_rect(
                img, left, snapshot.obs_bottom[i], right, snapshot.playfield_height,
                scale_x, scale_y, color
            )

        self._fill_rect(
            img,
            snapshot.body_x,
            snapshot.body_y,
            snapshot.body_x + snapshot.body_width,
            snapshot.body_y + snapshot.body_height,
            scale_x,
            scale_y,
            self._body_colors[snapshot.flap_state]
        )

        if snapshot.phase == "game_over":
            img[:] = (img // 2) + self._game_over_tint

        return img

    def _fill_rect(
        self,
        img: np.ndarray,
        x0: float,
        y0: float,
        x1: float,
        y1: float,
        scale_x: float,
        scale_y: float,
        color: np.ndarray
    ) -> None:
        """Fill a game-space rectangle, clipped to the image."""
        height, width = img.shape[:2]

        px0 = max(0, int(x0 * scale_x))
        px1 = min(width, int(x1 * scale_x))
        py0 = max(0, int(y0 * scale_y))
        py1 = min(height, int(y1 * scale_y))

        if px0 >= px1 or py0 >= py1:
            return

        img[py0:py1, px0:px1] = color

    def close(self) -> None:
        """Clean up resources (no-op for solid renderer)."""
        pass
