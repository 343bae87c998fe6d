"""
State Snapshot
==============

Packs game state into fixed-size numpy arrays for rendering and
Gymnasium observations. A snapshot is a copy: mutating it never
touches the game.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Sequence, TYPE_CHECKING
import numpy as np

from flappy_sim.flappy_core.config_loader import GameConfig, get_config
from flappy_sim.flappy_core.obstacles import ObstacleSkin

if TYPE_CHECKING:
    from flappy_sim.flappy_core.body import KinematicBody
    from flappy_sim.flappy_core.difficulty import DifficultyRamp
    from flappy_sim.flappy_core.obstacles import ObstaclePair

# Index of each skin in obs_skin; -1 marks an empty slot
SKIN_INDEX = {skin: i for i, skin in enumerate(ObstacleSkin)}


@dataclass
class GameSnapshot:
    """
    Read-only view of one frame.

    Obstacle arrays are fixed-size with masking for variable pair counts.
    Pairs beyond max_obstacles (oldest first kept) are dropped from the arrays.
    """
    # Core state
    phase: str
    score: int
    frame: int
    clock_ms: float

    # Playfield (for normalization)
    playfield_width: float
    playfield_height: float

    # Body
    body_x: float
    body_y: float
    body_vy: float
    body_width: float
    body_height: float
    flap_state: str

    # Difficulty
    spawn_interval: float
    obstacle_velocity: float

    # Next gap ahead of the body
    next_gap_dx: float
    next_gap_top: float
    next_gap_bottom: float

    # Obstacle arrays (fixed size, padded)
    obs_x: np.ndarray               # (MAX_OBS,) float32
    obs_width: np.ndarray           # (MAX_OBS,) float32
    obs_top: np.ndarray             # (MAX_OBS,) float32
    obs_bottom: np.ndarray          # (MAX_OBS,) float32
    obs_skin: np.ndarray            # (MAX_OBS,) int8
    obs_scored: np.ndarray          # (MAX_OBS,) bool
    obs_mask: np.ndarray            # (MAX_OBS,) bool

    @property
    def obstacle_count(self) -> int:
        return int(self.obs_mask.sum())

    def to_obs_dict(self) -> Dict[str, np.ndarray]:
        """Convert to Gymnasium observation dictionary."""
        return {
            "body_y": np.array(self.body_y, dtype=np.float32),
            "body_vy": np.array(self.body_vy, dtype=np.float32),
            "score": np.array(self.score, dtype=np.int64),
            "playfield_height": np.array(self.playfield_height, dtype=np.float32),
            "obstacle_velocity": np.array(self.obstacle_velocity, dtype=np.float32),
            "next_gap_dx": np.array(self.next_gap_dx, dtype=np.float32),
            "next_gap_top": np.array(self.next_gap_top, dtype=np.float32),
            "next_gap_bottom": np.array(self.next_gap_bottom, dtype=np.float32),
            "obs_x": self.obs_x.copy(),
            "obs_top": self.obs_top.copy(),
            "obs_bottom": self.obs_bottom.copy(),
            "obs_mask": self.obs_mask.astype(np.int8),
        }


class SnapshotBuilder:
    """Builds GameSnapshot objects from live game components."""

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize snapshot builder.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._max_obs = config.observation.max_obstacles

    def _find_next_gap(self, body: "KinematicBody", pairs: Sequence["ObstaclePair"]):
        """First pair whose right edge is still ahead of the body's left edge."""
        for pair in pairs:
            if pair.right > body.x:
                return pair
        return None

    def build(
        self,
        body: "KinematicBody",
        pairs: Sequence["ObstaclePair"],
        ramp: "DifficultyRamp",
        phase: str,
        score: int,
        frame: int,
        clock_ms: float
    ) -> GameSnapshot:
        """
        Build a snapshot.

        Args:
            body: Player body.
            pairs: Active obstacle pairs in spawn order.
            ramp: Difficulty ramp.
            phase: Game phase value.
            score: Current score.
            frame: Frames simulated this round.
            clock_ms: Game clock reading.

        Returns:
            GameSnapshot.
        """
        playfield = self._config.playfield
        n = self._max_obs

        obs_x = np.zeros(n, dtype=np.float32)
        obs_width = np.zeros(n, dtype=np.float32)
        obs_top = np.zeros(n, dtype=np.float32)
        obs_bottom = np.zeros(n, dtype=np.float32)
        obs_skin = np.full(n, -1, dtype=np.int8)
        obs_scored = np.zeros(n, dtype=bool)
        obs_mask = np.zeros(n, dtype=bool)

        for i, pair in enumerate(pairs[:n]):
            obs_x[i] = pair.x
            obs_width[i] = pair.width
            obs_top[i] = pair.top_edge_y
            obs_bottom[i] = pair.bottom_edge_y
            obs_skin[i] = SKIN_INDEX[pair.skin]
            obs_scored[i] = pair.scored
            obs_mask[i] = True

        # With no pair ahead, the whole playfield height counts as open
        next_pair = self._find_next_gap(body, pairs)
        if next_pair is None:
            next_gap_dx = playfield.width - body.x
            next_gap_top = 0.0
            next_gap_bottom = playfield.height
        else:
            next_gap_dx = next_pair.x - body.x
            next_gap_top = next_pair.top_edge_y
            next_gap_bottom = next_pair.bottom_edge_y

        return GameSnapshot(
            phase=phase,
            score=score,
            frame=frame,
            clock_ms=clock_ms,
            playfield_width=playfield.width,
            playfield_height=playfield.height,
            body_x=body.x,
            body_y=body.y,
            body_vy=body.vy,
            body_width=body.width,
            body_height=body.height,
            flap_state=body.flap_state.value,
            spawn_interval=ramp.spawn_interval,
            obstacle_velocity=ramp.obstacle_velocity,
            next_gap_dx=float(next_gap_dx),
            next_gap_top=float(next_gap_top),
            next_gap_bottom=float(next_gap_bottom),
            obs_x=obs_x,
            obs_width=obs_width,
            obs_top=obs_top,
            obs_bottom=obs_bottom,
            obs_skin=obs_skin,
            obs_scored=obs_scored,
            obs_mask=obs_mask
        )
