"""
Collision Oracle
================

Pure predicates deciding whether the body has hit an obstacle or left
the playfield. Nothing here mutates state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from flappy_sim.flappy_core.body import KinematicBody
from flappy_sim.flappy_core.obstacles import ObstaclePair


@dataclass(frozen=True)
class CollisionResult:
    """Result of a collision check."""
    colliding: bool
    reason: str

    @staticmethod
    def none() -> "CollisionResult":
        return CollisionResult(False, "")

    @staticmethod
    def out_of_bounds() -> "CollisionResult":
        return CollisionResult(True, "out_of_bounds")

    @staticmethod
    def obstacle() -> "CollisionResult":
        return CollisionResult(True, "obstacle")


def is_out_of_bounds(body: KinematicBody, playfield_height: float) -> bool:
    """True if the body is above the top or below the bottom of the playfield."""
    return body.y < 0 or body.y > playfield_height - body.height


def overlaps_horizontally(body: KinematicBody, pair: ObstaclePair) -> bool:
    """True if the body's horizontal extent overlaps the pair's (open interval)."""
    return body.x > pair.x - body.width and body.x < pair.x + pair.width


def is_inside_gap(body: KinematicBody, pair: ObstaclePair) -> bool:
    """True if the body's vertical span lies within the gap (edges inclusive)."""
    return pair.top_edge_y <= body.y <= pair.bottom_edge_y - body.height


def check_collision(
    body: KinematicBody,
    pairs: Iterable[ObstaclePair],
    playfield_height: float
) -> CollisionResult:
    """
    Check bounds, then every pair in order. Stops at the first hit.

    Args:
        body: The player body.
        pairs: Active obstacle pairs.
        playfield_height: Height of the playfield.

    Returns:
        CollisionResult with the reason of the first hit.
    """
    if is_out_of_bounds(body, playfield_height):
        return CollisionResult.out_of_bounds()

    for pair in pairs:
        if not overlaps_horizontally(body, pair):
            continue
        if not is_inside_gap(body, pair):
            return CollisionResult.obstacle()

    return CollisionResult.none()


def is_colliding(
    body: KinematicBody,
    pairs: Iterable[ObstaclePair],
    playfield_height: float
) -> bool:
    """Boolean form of check_collision."""
    return check_collision(body, pairs, playfield_height).colliding
