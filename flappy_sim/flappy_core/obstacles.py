"""
Obstacle Track
==============

Spawns, scrolls, scores and recycles obstacle pairs.

Each pair is one gap: an upper segment ending at top_edge_y and a lower
segment starting at bottom_edge_y. Pairs are kept in spawn order.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from flappy_sim.flappy_core.config_loader import GameConfig, get_config

logger = logging.getLogger(__name__)


class ObstacleSkin(Enum):
    """Closed set of obstacle appearances. Purely cosmetic."""
    GREEN = "green"
    RED = "red"


@dataclass
class ObstaclePair:
    """One obstacle pair and the gap between its segments."""
    uid: int
    x: float
    width: float
    top_edge_y: float
    bottom_edge_y: float
    skin: ObstacleSkin = ObstacleSkin.GREEN
    scored: bool = False

    @property
    def gap_size(self) -> float:
        return self.bottom_edge_y - self.top_edge_y

    @property
    def right(self) -> float:
        return self.x + self.width

    def __repr__(self) -> str:
        return (
            f"ObstaclePair(uid={self.uid}, x={self.x:.1f}, "
            f"gap=[{self.top_edge_y:.1f}, {self.bottom_edge_y:.1f}], scored={self.scored})"
        )


class ObstacleTrack:
    """
    Time-ordered collection of obstacle pairs.

    Spawning is driven by the game clock: one pair per elapsed spawn
    interval, never more than one per call (no catch-up under frame drops).
    The first check after a reset always spawns.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        skin: Optional[ObstacleSkin] = None
    ):
        """
        Initialize an empty track.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for gap placement. Random if None.
            skin: Appearance tag for new pairs. Uses config default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._rng = random.Random(seed)
        self._skin = skin if skin is not None else ObstacleSkin(config.obstacles.skin)

        self._spawn_x = config.playfield.width
        self._width = config.obstacles.width
        self._gap_top_range = config.obstacles.gap_top_range
        self._gap_size_range = config.obstacles.gap_size_range

        self._pairs: List[ObstaclePair] = []
        self._next_uid: int = 0
        self._last_spawn_time: Optional[float] = None

    @property
    def pairs(self) -> Tuple[ObstaclePair, ...]:
        """Active pairs in spawn order."""
        return tuple(self._pairs)

    @property
    def last_spawn_time(self) -> Optional[float]:
        """Clock time of the latest spawn, None if nothing spawned since reset."""
        return self._last_spawn_time

    @property
    def skin(self) -> ObstacleSkin:
        return self._skin

    @skin.setter
    def skin(self, value: ObstacleSkin) -> None:
        """Change the appearance of pairs spawned from now on."""
        self._skin = value

    def __len__(self) -> int:
        return len(self._pairs)

    def _draw_gap(self) -> Tuple[float, float]:
        """Draw (top_edge_y, bottom_edge_y) from the configured ranges."""
        top_lo, top_hi = self._gap_top_range
        size_lo, size_hi = self._gap_size_range
        top = top_lo + self._rng.random() * (top_hi - top_lo)
        size = size_lo + self._rng.random() * (size_hi - size_lo)
        return top, top + size

    def add_pair(self, top_edge_y: float, bottom_edge_y: float, x: Optional[float] = None) -> ObstaclePair:
        """
        Append a pair with explicit geometry.

        Args:
            top_edge_y: Bottom of the upper segment.
            bottom_edge_y: Top of the lower segment.
            x: Left edge. Defaults to the right edge of the playfield.

        Returns:
            The new pair.
        """
        pair = ObstaclePair(
            uid=self._next_uid,
            x=self._spawn_x if x is None else x,
            width=self._width,
            top_edge_y=top_edge_y,
            bottom_edge_y=bottom_edge_y,
            skin=self._skin
        )
        self._next_uid += 1
        self._pairs.append(pair)
        return pair

    def spawn_if_due(self, now: float, spawn_interval: float) -> Optional[ObstaclePair]:
        """
        Spawn one pair if the spawn interval has elapsed.

        Args:
            now: Current clock time (ms).
            spawn_interval: Current spawn interval (ms).

        Returns:
            The spawned pair, or None.
        """
        if self._last_spawn_time is not None and not now > self._last_spawn_time + spawn_interval:
            return None

        top, bottom = self._draw_gap()
        pair = self.add_pair(top, bottom)
        self._last_spawn_time = now
        logger.debug("Spawned %r at t=%.1f", pair, now)
        return pair

    def advance_and_score(self, obstacle_velocity: float, body_x: float) -> List[ObstaclePair]:
        """
        Scroll every pair left, score pairs the body has passed, drop expired ones.

        Scoring is checked before removal so a pair that leaves the playfield
        in the same frame it passes the body is still scored once.

        Args:
            obstacle_velocity: Current horizontal velocity (negative).
            body_x: Body's fixed horizontal position.

        Returns:
            Pairs newly scored this call, in spawn order.
        """
        step = abs(obstacle_velocity)
        scored: List[ObstaclePair] = []
        survivors: List[ObstaclePair] = []

        for pair in self._pairs:
            pair.x -= step

            if not pair.scored and pair.x < body_x - pair.width:
                pair.scored = True
                scored.append(pair)

            if pair.x < -pair.width:
                continue
            survivors.append(pair)

        self._pairs = survivors
        return scored

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Remove all pairs and forget the last spawn time.

        Args:
            seed: New random seed. Keeps current RNG if None.
        """
        if seed is not None:
            self._rng = random.Random(seed)
        self._pairs = []
        self._next_uid = 0
        self._last_spawn_time = None
