"""
Human Play Mode
================

Play interactively with keyboard or mouse in real time.

Controls:
    - Space / Up / Click: Jump (or start when on the menu)
    - Enter: Start / restart
    - ESC: Quit

Usage:
    python -m tools.play_human [--seed SEED] [--scale SCALE] [--skin green|red]
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

import pygame

from flappy_sim.flappy_core.config_loader import load_config, GameConfig
from flappy_sim.flappy_core.events import GameListener
from flappy_sim.flappy_core.game import CoreGame, GamePhase
from flappy_sim.flappy_core.obstacles import ObstacleSkin
from flappy_sim.flappy_core.render_solid import BODY_COLORS, SKIN_COLORS, SKY_COLOR
from flappy_sim.flappy_core.state_snapshot import GameSnapshot, SKIN_INDEX

# Driver-side cap on a single frame delta (nominal frames)
MAX_FRAME_DELTA = 3.0


class ConsoleListener(GameListener):
    """Prints score changes and game over to stdout."""

    def __init__(self):
        self.restart_ready = True

    def on_score_changed(self, score: int) -> None:
        if score > 0:
            print(f"  Score: {score}")

    def on_game_over(self, final_score: int) -> None:
        print(f"\nGAME OVER - Score: {final_score}")

    def on_restart_ready(self) -> None:
        self.restart_ready = True
        print("Press Enter or click to play again")


class FlappyRenderer:
    """
    Draws a snapshot with pygame primitives.
    """

    def __init__(self, config: GameConfig, scale: float):
        """Initialize renderer."""
        self._config = config
        self._scale = scale
        self._window_width = int(config.playfield.width * scale)
        self._window_height = int(config.playfield.height * scale)

        self._skin_colors = {SKIN_INDEX[skin]: rgb for skin, rgb in SKIN_COLORS.items()}
        self._obstacle_border = (40, 60, 30)
        self._text = (255, 255, 255)
        self._text_shadow = (40, 40, 50)

        pygame.font.init()
        self._font_large = pygame.font.Font(None, int(64 * scale))
        self._font_small = pygame.font.Font(None, int(28 * scale))

    @property
    def window_size(self):
        return (self._window_width, self._window_height)

    def _rect(self, x: float, y: float, w: float, h: float) -> pygame.Rect:
        s = self._scale
        return pygame.Rect(int(x * s), int(y * s), max(1, int(w * s)), max(1, int(h * s)))

    def render(self, screen: pygame.Surface, snapshot: GameSnapshot) -> None:
        """Render the complete scene."""
        screen.fill(SKY_COLOR)

        height = snapshot.playfield_height
        for i in range(len(snapshot.obs_mask)):
            if not snapshot.obs_mask[i]:
                continue
            color = self._skin_colors[int(snapshot.obs_skin[i])]
            x = float(snapshot.obs_x[i])
            w = float(snapshot.obs_width[i])
            top = float(snapshot.obs_top[i])
            bottom = float(snapshot.obs_bottom[i])

            upper = self._rect(x, 0, w, top)
            lower = self._rect(x, bottom, w, height - bottom)
            pygame.draw.rect(screen, color, upper)
            pygame.draw.rect(screen, color, lower)
            pygame.draw.rect(screen, self._obstacle_border, upper, 2)
            pygame.draw.rect(screen, self._obstacle_border, lower, 2)

        body = self._rect(snapshot.body_x, snapshot.body_y, snapshot.body_width, snapshot.body_height)
        pygame.draw.ellipse(screen, BODY_COLORS[snapshot.flap_state], body)

        self._draw_text(screen, str(snapshot.score), self._font_large, self._window_width // 2, 40)

        if snapshot.phase == GamePhase.IDLE.value:
            self._draw_text(screen, "Press Enter or click to play", self._font_small,
                            self._window_width // 2, self._window_height // 2)
        elif snapshot.phase == GamePhase.GAME_OVER.value:
            self._draw_text(screen, "Game over", self._font_large,
                            self._window_width // 2, self._window_height // 2 - 30)
            self._draw_text(screen, "Press Enter or click to play again", self._font_small,
                            self._window_width // 2, self._window_height // 2 + 20)

    def _draw_text(self, screen: pygame.Surface, text: str, font, cx: int, cy: int) -> None:
        shadow = font.render(text, True, self._text_shadow)
        surface = font.render(text, True, self._text)
        rect = surface.get_rect(center=(cx, cy))
        screen.blit(shadow, rect.move(2, 2))
        screen.blit(surface, rect)


class HumanPlayer:
    """
    Real-time driver: feeds wall-clock frame deltas and input to CoreGame.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        scale: float = 1.0,
        skin: ObstacleSkin = ObstacleSkin.GREEN,
        target_fps: int = 60
    ):
        if config is None:
            config = load_config()

        self._config = config
        self._seed = seed
        self._target_fps = target_fps

        pygame.init()
        self._renderer = FlappyRenderer(config, scale)
        self._screen = pygame.display.set_mode(self._renderer.window_size)
        pygame.display.set_caption("Flappy Sim")
        self._clock = pygame.time.Clock()

        self._listener = ConsoleListener()
        # Debounce and spawn timing use the same wall clock as the frame deltas
        self._game = CoreGame(
            config=config,
            seed=seed,
            listener=self._listener,
            clock=pygame.time.get_ticks,
            skin=skin
        )

        self._running = True

    def run(self) -> int:
        """Run the game loop. Returns the last score."""
        print("=== Flappy Sim ===")
        print("Space / click to jump, Enter to start, ESC to quit")
        print()

        frame_ms = self._config.physics.frame_ms
        while self._running:
            elapsed_ms = self._clock.tick(self._target_fps)
            self._handle_events()

            delta = min(elapsed_ms / frame_ms, MAX_FRAME_DELTA)
            self._game.update(delta)

            self._renderer.render(self._screen, self._game.snapshot())
            pygame.display.flip()

        pygame.quit()
        return self._game.score

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self._running = False
                elif event.key == pygame.K_RETURN:
                    self._start()
                elif event.key in (pygame.K_SPACE, pygame.K_UP):
                    self._jump_or_start()

            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self._jump_or_start()

    def _jump_or_start(self) -> None:
        if self._game.is_playing:
            self._game.request_jump()
        else:
            self._start()

    def _start(self) -> None:
        if self._listener.restart_ready and self._game.start():
            self._listener.restart_ready = False
            print("\n=== Round Started ===\n")


def main():
    parser = argparse.ArgumentParser(description="Play Flappy Sim interactively")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--scale", type=float, default=1.0, help="Window scale (default: 1.0)")
    parser.add_argument("--skin", choices=[s.value for s in ObstacleSkin], default="green",
                        help="Obstacle skin")
    parser.add_argument("--fps", type=int, default=60, help="Target FPS")
    parser.add_argument("--config", type=str, default=None, help="Path to game_config.yaml")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    if args.debug:
        logging.basicConfig(level=logging.DEBUG)

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    player = HumanPlayer(
        config=config,
        seed=args.seed,
        scale=args.scale,
        skin=ObstacleSkin(args.skin),
        target_fps=args.fps
    )
    score = player.run()
    print(f"\nFinal Score: {score}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
