"""
Scoring System
==============

One point per obstacle pair passed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from flappy_sim.flappy_core.obstacles import ObstaclePair


@dataclass
class ScoreEvent:
    """Record of a scoring event."""
    points: int
    pair_uid: int
    total: int

    def __repr__(self) -> str:
        return f"ScoreEvent(pair={self.pair_uid}, +{self.points}, total={self.total})"


class ScoreTracker:
    """
    Tracks the round score.

    Each pair is credited at most once; the track's scored flag and the
    uid set here guard the same invariant from both sides.
    """

    POINTS_PER_PAIR = 1

    def __init__(self):
        self._score: int = 0
        self._credited: set = set()
        self._events: List[ScoreEvent] = []

    @property
    def score(self) -> int:
        """Current total score."""
        return self._score

    @property
    def events(self) -> List[ScoreEvent]:
        """Scoring events of the current round."""
        return list(self._events)

    def apply_pass(self, pair: ObstaclePair) -> ScoreEvent:
        """
        Credit a passed pair.

        Args:
            pair: The pair the body has just passed.

        Returns:
            ScoreEvent describing the points awarded (0 if already credited).
        """
        if pair.uid in self._credited:
            return ScoreEvent(points=0, pair_uid=pair.uid, total=self._score)

        self._credited.add(pair.uid)
        self._score += self.POINTS_PER_PAIR
        event = ScoreEvent(points=self.POINTS_PER_PAIR, pair_uid=pair.uid, total=self._score)
        self._events.append(event)
        return event

    def reset(self) -> None:
        """Reset score to zero."""
        self._score = 0
        self._credited = set()
        self._events = []
