"""
Core Game
=========

Main game orchestrator combining body, obstacles, difficulty, collision and
scoring behind the Idle -> Playing -> GameOver state machine.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple

from flappy_sim.flappy_core.body import KinematicBody
from flappy_sim.flappy_core.collision import check_collision
from flappy_sim.flappy_core.config_loader import GameConfig, get_config
from flappy_sim.flappy_core.difficulty import DifficultyRamp
from flappy_sim.flappy_core.events import GameListener
from flappy_sim.flappy_core.obstacles import ObstaclePair, ObstacleSkin, ObstacleTrack
from flappy_sim.flappy_core.scoring import ScoreTracker
from flappy_sim.flappy_core.state_snapshot import GameSnapshot, SnapshotBuilder

logger = logging.getLogger(__name__)


class GamePhase(Enum):
    IDLE = "idle"
    PLAYING = "playing"
    GAME_OVER = "game_over"


@dataclass
class FrameResult:
    """Result of a single update call."""
    phase: GamePhase
    delta_score: int
    jumped: bool
    spawned: bool
    game_over: bool
    termination_reason: str

    @staticmethod
    def frozen(phase: GamePhase, reason: str = "") -> "FrameResult":
        """Result for a frame in which nothing was simulated."""
        return FrameResult(phase, 0, False, False, False, reason)


class CoreGame:
    """
    Main game simulation class.

    Orchestrates:
    - Kinematic body
    - Obstacle track (spawn, scroll, score, recycle)
    - Difficulty ramp
    - Collision checks
    - Scoring and listener notifications

    One update = one frame of `delta` nominal-frame units. Nothing advances
    outside the PLAYING phase.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        listener: Optional[GameListener] = None,
        clock: Optional[Callable[[], float]] = None,
        skin: Optional[ObstacleSkin] = None
    ):
        """
        Initialize game in the IDLE phase.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for gap placement.
            listener: Receives score / game over / restart notifications.
            clock: Millisecond time source. If None, a simulated clock
                advanced by update() is used.
            skin: Obstacle appearance tag. Uses config default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._seed = seed
        self._listener = listener if listener is not None else GameListener()
        self._external_clock = clock

        # Subsystems
        self._body = KinematicBody(config)
        self._track = ObstacleTrack(config, seed=seed, skin=skin)
        self._ramp = DifficultyRamp(config)
        self._scorer = ScoreTracker()
        self._snapshot_builder = SnapshotBuilder(config)

        # Game state
        self._phase = GamePhase.IDLE
        self._sim_ms: float = 0.0
        self._frame: int = 0
        self._last_jump_time: Optional[float] = None
        self._pending_jump_at: Optional[float] = None
        self._termination_reason: str = ""

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config

    @property
    def phase(self) -> GamePhase:
        """Current phase."""
        return self._phase

    @property
    def is_playing(self) -> bool:
        return self._phase is GamePhase.PLAYING

    @property
    def is_over(self) -> bool:
        """True if the last round has ended."""
        return self._phase is GamePhase.GAME_OVER

    @property
    def score(self) -> int:
        """Current score."""
        return self._scorer.score

    @property
    def frame(self) -> int:
        """Frames simulated this round."""
        return self._frame

    @property
    def termination_reason(self) -> str:
        """Reason for game end, or empty string."""
        return self._termination_reason

    @property
    def body(self) -> KinematicBody:
        """Player body. Read it; do not mutate it from outside."""
        return self._body

    @property
    def track(self) -> ObstacleTrack:
        """Obstacle track. Read it; do not mutate it from outside."""
        return self._track

    @property
    def ramp(self) -> DifficultyRamp:
        """Difficulty ramp."""
        return self._ramp

    @property
    def obstacles(self) -> Tuple[ObstaclePair, ...]:
        """Active obstacle pairs in spawn order."""
        return self._track.pairs

    @property
    def listener(self) -> GameListener:
        return self._listener

    @listener.setter
    def listener(self, listener: Optional[GameListener]) -> None:
        self._listener = listener if listener is not None else GameListener()

    def now(self) -> float:
        """Current game clock reading (ms)."""
        if self._external_clock is not None:
            return self._external_clock()
        return self._sim_ms

    def start(self, seed: Optional[int] = None) -> bool:
        """
        Start (or restart) a round.

        Ignored while a round is already playing.

        Args:
            seed: New random seed for gap placement. Keeps current RNG if None.

        Returns:
            True if a new round started.
        """
        if self._phase is GamePhase.PLAYING:
            logger.debug("start() ignored: round already in progress")
            return False

        if seed is not None:
            self._seed = seed

        self._body.reset()
        self._track.reset(seed)
        self._ramp.reset()
        self._scorer.reset()

        self._sim_ms = 0.0
        self._frame = 0
        self._last_jump_time = None
        self._pending_jump_at = None
        self._termination_reason = ""

        self._phase = GamePhase.PLAYING
        logger.info("Round started (seed=%s)", self._seed)
        self._listener.on_score_changed(0)
        return True

    def request_jump(self) -> bool:
        """
        Request a jump for the next frame.

        Only the latest request before a frame is considered; it is honored
        if the jump cooldown has elapsed since the last honored jump,
        otherwise it is dropped.

        Returns:
            True if the request was recorded (the game is playing).
        """
        if self._phase is not GamePhase.PLAYING:
            logger.debug("request_jump() ignored in phase %s", self._phase.value)
            return False

        self._pending_jump_at = self.now()
        return True

    def _resolve_jump(self) -> bool:
        """Apply or discard the pending jump request."""
        requested_at = self._pending_jump_at
        self._pending_jump_at = None
        if requested_at is None:
            return False

        cooldown = self._config.input.jump_cooldown_ms
        if self._last_jump_time is not None and requested_at - self._last_jump_time < cooldown:
            return False

        self._body.apply_jump()
        self._last_jump_time = requested_at
        return True

    def update(self, delta: float) -> FrameResult:
        """
        Advance the simulation by one frame.

        Order: difficulty ramp, obstacle spawn/scroll/score, pending jump,
        body integration, collision check.

        Args:
            delta: Elapsed time in nominal-frame units. Not clamped.

        Returns:
            FrameResult for this frame.
        """
        if self._phase is not GamePhase.PLAYING:
            return FrameResult.frozen(self._phase, self._termination_reason)

        if self._external_clock is None:
            self._sim_ms += delta * self._config.physics.frame_ms
        now = self.now()
        self._frame += 1

        self._ramp.advance(delta)

        spawned = self._track.spawn_if_due(now, self._ramp.spawn_interval) is not None
        passed = self._track.advance_and_score(self._ramp.obstacle_velocity, self._body.x)

        delta_score = 0
        for pair in passed:
            event = self._scorer.apply_pass(pair)
            if event.points:
                delta_score += event.points
                self._listener.on_score_changed(self._scorer.score)

        jumped = self._resolve_jump()
        self._body.integrate(delta)

        collision = check_collision(
            self._body,
            self._track.pairs,
            self._config.playfield.height
        )
        if collision.colliding:
            self._enter_game_over(collision.reason)

        return FrameResult(
            phase=self._phase,
            delta_score=delta_score,
            jumped=jumped,
            spawned=spawned,
            game_over=collision.colliding,
            termination_reason=self._termination_reason
        )

    def _enter_game_over(self, reason: str) -> None:
        """Freeze the round and notify the listener."""
        self._phase = GamePhase.GAME_OVER
        self._termination_reason = reason
        self._pending_jump_at = None
        final_score = self._scorer.score
        logger.info(
            "Game over after %d frames: score=%d reason=%s",
            self._frame, final_score, reason
        )
        self._listener.on_game_over(final_score)
        self._listener.on_restart_ready()

    def snapshot(self) -> GameSnapshot:
        """Build a read-only snapshot of the current frame."""
        return self._snapshot_builder.build(
            body=self._body,
            pairs=self._track.pairs,
            ramp=self._ramp,
            phase=self._phase.value,
            score=self._scorer.score,
            frame=self._frame,
            clock_ms=self.now()
        )

    def get_info(self) -> Dict[str, Any]:
        """Get additional info dict for Gymnasium."""
        return {
            "score": self._scorer.score,
            "frame": self._frame,
            "phase": self._phase.value,
            "terminated_reason": self._termination_reason,
            "obstacle_count": len(self._track),
            "spawn_interval": self._ramp.spawn_interval,
            "obstacle_velocity": self._ramp.obstacle_velocity,
        }
