"""
Game Events
===========

Notifications the game sends to the presentation layer.
The game never waits on a listener and ignores return values.
"""

from __future__ import annotations

from typing import Callable, Optional


class GameListener:
    """
    Base listener. Subclass and override what you need; defaults do nothing.
    """

    def on_score_changed(self, score: int) -> None:
        """Score changed (including the reset to 0 on start)."""

    def on_game_over(self, final_score: int) -> None:
        """The round ended with the given score."""

    def on_restart_ready(self) -> None:
        """The game accepts a start trigger again."""


class CallbackListener(GameListener):
    """Listener built from plain callables."""

    def __init__(
        self,
        on_score_changed: Optional[Callable[[int], None]] = None,
        on_game_over: Optional[Callable[[int], None]] = None,
        on_restart_ready: Optional[Callable[[], None]] = None
    ):
        self._on_score_changed = on_score_changed
        self._on_game_over = on_game_over
        self._on_restart_ready = on_restart_ready

    def on_score_changed(self, score: int) -> None:
        if self._on_score_changed is not None:
            self._on_score_changed(score)

    def on_game_over(self, final_score: int) -> None:
        if self._on_game_over is not None:
            self._on_game_over(final_score)

    def on_restart_ready(self) -> None:
        if self._on_restart_ready is not None:
            self._on_restart_ready()
