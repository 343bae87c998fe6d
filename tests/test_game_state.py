"""
Tests for the game state machine: phases, per-frame order, jump debounce,
scoring notifications and restart.
"""

import dataclasses

import numpy as np
import pytest

from flappy_sim.flappy_core.config_loader import load_config
from flappy_sim.flappy_core.collision import is_colliding
from flappy_sim.flappy_core.events import CallbackListener, GameListener
from flappy_sim.flappy_core.game import CoreGame, GamePhase


class RecordingListener(GameListener):
    """Collects notifications in order."""

    def __init__(self):
        self.events = []

    def on_score_changed(self, score):
        self.events.append(("score", score))

    def on_game_over(self, final_score):
        self.events.append(("game_over", final_score))

    def on_restart_ready(self):
        self.events.append(("restart_ready",))

    def of(self, kind):
        return [e for e in self.events if e[0] == kind]


class ManualClock:
    """Millisecond clock driven by the test."""

    def __init__(self):
        self.ms = 0.0

    def __call__(self):
        return self.ms


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def listener():
    return RecordingListener()


@pytest.fixture
def game(config, listener):
    return CoreGame(config=config, seed=42, listener=listener)


def play_until_over(game, max_frames=1000, delta=1.0):
    for _ in range(max_frames):
        game.update(delta)
        if game.is_over:
            break


class TestPhases:
    """Test Idle -> Playing -> GameOver transitions."""

    def test_starts_idle_and_frozen(self, game):
        assert game.phase is GamePhase.IDLE

        result = game.update(1.0)

        assert result.phase is GamePhase.IDLE
        assert game.frame == 0
        assert len(game.obstacles) == 0
        assert game.body.vy == 0.0

    def test_jump_ignored_when_not_playing(self, game):
        assert game.request_jump() is False
        game.start()
        play_until_over(game)
        assert game.request_jump() is False

    def test_start_enters_playing(self, game, listener):
        assert game.start() is True
        assert game.phase is GamePhase.PLAYING
        assert listener.events == [("score", 0)]

    def test_start_ignored_while_playing(self, game, listener):
        game.start()
        game.update(1.0)
        frame = game.frame

        assert game.start() is False
        assert game.frame == frame
        assert listener.events == [("score", 0)]

    def test_fall_to_game_over(self, game, listener, config):
        """No input: body falls monotonically until it leaves the playfield."""
        game.start()
        prev_y = game.body.y

        for _ in range(1000):
            game.update(1.0)
            if game.is_over:
                break
            assert game.body.y > prev_y
            prev_y = game.body.y

        assert game.is_over
        assert game.termination_reason == "out_of_bounds"
        assert game.body.y > config.playfield.height - config.body.height
        assert game.score == 0
        assert listener.of("game_over") == [("game_over", 0)]
        assert listener.events[-2:] == [("game_over", 0), ("restart_ready",)]

    def test_game_over_freezes_state(self, game):
        game.start()
        play_until_over(game)
        y, vy, frame = game.body.y, game.body.vy, game.frame
        positions = [p.x for p in game.obstacles]

        for _ in range(10):
            result = game.update(1.0)
            assert result.phase is GamePhase.GAME_OVER
            assert not result.game_over

        assert (game.body.y, game.body.vy, game.frame) == (y, vy, frame)
        assert [p.x for p in game.obstacles] == positions

    def test_restart_resets_everything(self, game, config, listener):
        game.start()
        play_until_over(game)
        assert game.ramp.spawn_interval != config.difficulty.initial_spawn_interval_ms

        assert game.start() is True

        assert game.phase is GamePhase.PLAYING
        assert game.body.y == config.body.start_y
        assert game.body.vy == 0.0
        assert game.ramp.spawn_interval == config.difficulty.initial_spawn_interval_ms
        assert game.ramp.obstacle_velocity == config.difficulty.initial_obstacle_velocity
        assert game.score == 0
        assert game.frame == 0
        assert game.termination_reason == ""
        assert len(game.obstacles) == 0
        assert listener.events[-1] == ("score", 0)

    def test_first_frame_spawns_a_pair(self, game, config):
        game.start()
        result = game.update(1.0)

        assert result.spawned
        assert len(game.obstacles) == 1
        # Spawned at the right edge, then scrolled in the same frame
        assert game.obstacles[0].x < config.playfield.width

    def test_large_delta_is_not_clamped(self, game):
        """One oversized step can carry the body straight out of the playfield."""
        game.start()
        result = game.update(100.0)

        assert result.game_over
        assert game.frame == 1
        assert game.termination_reason == "out_of_bounds"


class TestJumpDebounce:
    """Test jump cooldown and request ordering."""

    @pytest.fixture
    def clock(self):
        return ManualClock()

    @pytest.fixture
    def clocked_game(self, config, clock):
        game = CoreGame(config=config, seed=1, clock=clock)
        game.start()
        return game

    def count_jumps(self, game, clock, request_times):
        jumps = 0
        for t in request_times:
            clock.ms = t
            game.request_jump()
            if game.update(1.0).jumped:
                jumps += 1
        return jumps

    def test_within_cooldown_one_jump(self, clocked_game, clock, config):
        cooldown = config.input.jump_cooldown_ms
        assert self.count_jumps(clocked_game, clock, [0.0, cooldown / 2]) == 1

    def test_beyond_cooldown_two_jumps(self, clocked_game, clock, config):
        cooldown = config.input.jump_cooldown_ms
        assert self.count_jumps(clocked_game, clock, [0.0, cooldown + 1.0]) == 2

    def test_exactly_cooldown_is_honored(self, clocked_game, clock, config):
        cooldown = config.input.jump_cooldown_ms
        assert self.count_jumps(clocked_game, clock, [0.0, cooldown]) == 2

    def test_rejected_request_is_not_queued(self, clocked_game, clock, config):
        """A rejected request does not fire later once the cooldown expires."""
        cooldown = config.input.jump_cooldown_ms
        self.count_jumps(clocked_game, clock, [0.0, cooldown / 2])

        clock.ms = cooldown * 5
        assert not clocked_game.update(1.0).jumped

    def test_multiple_requests_in_one_frame_make_one_jump(self, clocked_game, clock):
        clock.ms = 0.0
        clocked_game.request_jump()
        clock.ms = 5.0
        clocked_game.request_jump()

        assert clocked_game.update(1.0).jumped
        assert not clocked_game.update(1.0).jumped

    def test_jump_overwrites_velocity_before_integration(self, clocked_game, config):
        for _ in range(5):
            clocked_game.update(1.0)
        assert clocked_game.body.vy > 0

        clocked_game.request_jump()
        clocked_game.update(1.0)

        expected = config.physics.jump_velocity + config.physics.gravity
        assert clocked_game.body.vy == pytest.approx(expected)

    def test_simulated_clock_debounce(self, game, config):
        """Without an injected clock, jump timing follows the simulated clock."""
        game.start()
        frame_ms = config.physics.frame_ms
        cooldown = config.input.jump_cooldown_ms
        frames_per_cooldown = int(cooldown // frame_ms) + 1

        jumps = 0
        for _ in range(frames_per_cooldown + 1):
            game.request_jump()
            if game.update(1.0).jumped:
                jumps += 1

        assert jumps == 2


class TestScoring:
    """Test pass-and-score through the game."""

    @pytest.fixture
    def floating_config(self, config):
        """Zero gravity so the body holds its height."""
        return dataclasses.replace(
            config,
            physics=dataclasses.replace(config.physics, gravity=0.0)
        )

    def test_pass_gap_scores_once(self, floating_config):
        scores = []
        game = CoreGame(
            config=floating_config,
            seed=3,
            listener=CallbackListener(on_score_changed=scores.append)
        )
        game.start()
        body = game.body
        body.y = 250.0

        pair = game.track.add_pair(200.0, 325.0, x=body.x + body.width + 1)
        assert not is_colliding(body, [pair], floating_config.playfield.height)

        for _ in range(300):
            game.update(1.0)
            if pair.scored:
                break

        assert pair.scored
        assert game.is_playing
        assert scores == [0, 1]
        assert game.score == 1

        # Keep flying until the pair is recycled; no second credit
        for _ in range(60):
            game.update(1.0)
            if pair not in game.obstacles:
                break

        assert pair not in game.obstacles
        assert scores == [0, 1]

    def test_hitting_obstacle_ends_round(self, floating_config, listener):
        game = CoreGame(config=floating_config, seed=3, listener=listener)
        game.start()
        game.body.y = 100.0
        game.track.add_pair(200.0, 325.0, x=game.body.x + game.body.width + 1)

        play_until_over(game, max_frames=50)

        assert game.is_over
        assert game.termination_reason == "obstacle"
        assert listener.of("game_over") == [("game_over", 0)]


class TestSnapshot:
    """Test the read-only snapshot."""

    def test_snapshot_reflects_state(self, game, config):
        game.start()
        game.update(1.0)
        snap = game.snapshot()
        pair = game.obstacles[0]

        assert snap.phase == "playing"
        assert snap.frame == 1
        assert snap.body_y == pytest.approx(game.body.y)
        assert snap.obstacle_count == 1
        assert snap.obs_x[0] == pytest.approx(pair.x)
        assert snap.next_gap_top == pytest.approx(pair.top_edge_y)
        assert snap.next_gap_bottom == pytest.approx(pair.bottom_edge_y)
        assert snap.next_gap_dx == pytest.approx(pair.x - game.body.x)
        assert snap.obs_x.shape == (config.observation.max_obstacles,)

    def test_snapshot_is_a_copy(self, game):
        game.start()
        game.update(1.0)
        snap = game.snapshot()
        snap.obs_x[0] = -999.0
        assert game.obstacles[0].x != -999.0

    def test_empty_track_gap_is_open(self, game, config):
        snap = game.snapshot()
        assert snap.obstacle_count == 0
        assert snap.next_gap_top == 0.0
        assert snap.next_gap_bottom == config.playfield.height

    def test_overflow_keeps_oldest_pairs(self, game, config):
        """Pairs beyond the array size are left out, oldest first kept."""
        max_obs = config.observation.max_obstacles
        xs = [100.0 + 40.0 * i for i in range(max_obs + 2)]
        for x in xs:
            game.track.add_pair(200.0, 330.0, x=x)

        snap = game.snapshot()

        assert len(game.obstacles) == max_obs + 2
        assert snap.obs_mask.all()
        assert snap.obstacle_count == max_obs
        np.testing.assert_allclose(snap.obs_x, xs[:max_obs])
        assert snap.next_gap_dx == pytest.approx(xs[0] - game.body.x)
