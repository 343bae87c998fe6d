"""
Tests for the difficulty ramp.
"""

import pytest

from flappy_sim.flappy_core.config_loader import load_config
from flappy_sim.flappy_core.difficulty import DifficultyRamp


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def ramp(config):
    return DifficultyRamp(config)


class TestDifficultyRamp:
    """Test ramp acceleration, limits and reset."""

    def test_initial_values(self, ramp, config):
        assert ramp.spawn_interval == config.difficulty.initial_spawn_interval_ms
        assert ramp.obstacle_velocity == config.difficulty.initial_obstacle_velocity

    def test_advance_applies_accelerators(self, ramp, config):
        """One unit delta moves each scalar by its accelerator."""
        d = config.difficulty
        ramp.advance(1.0)
        assert ramp.spawn_interval == pytest.approx(d.initial_spawn_interval_ms + d.interval_accel)
        assert ramp.obstacle_velocity == pytest.approx(
            d.initial_obstacle_velocity + d.velocity_accel
        )

    def test_advance_scales_with_delta(self, config):
        short = DifficultyRamp(config)
        long = DifficultyRamp(config)

        short.advance(1.0)
        short.advance(1.0)
        long.advance(2.0)

        assert short.spawn_interval == pytest.approx(long.spawn_interval)
        assert short.obstacle_velocity == pytest.approx(long.obstacle_velocity)

    def test_monotonic(self, ramp):
        """Interval shrinks and speed grows every frame."""
        prev_interval = ramp.spawn_interval
        prev_velocity = ramp.obstacle_velocity
        for _ in range(100):
            ramp.advance(1.0)
            assert ramp.spawn_interval < prev_interval
            assert ramp.obstacle_velocity < prev_velocity
            prev_interval = ramp.spawn_interval
            prev_velocity = ramp.obstacle_velocity

    def test_limits_hold(self, ramp, config):
        """Interval never goes below its floor, speed never above its cap."""
        ramp.advance(1_000_000.0)

        assert ramp.spawn_interval == config.difficulty.min_spawn_interval_ms
        assert ramp.obstacle_velocity == -config.difficulty.max_obstacle_speed
        assert ramp.at_limit

        ramp.advance(1.0)
        assert ramp.spawn_interval == config.difficulty.min_spawn_interval_ms
        assert ramp.obstacle_velocity == -config.difficulty.max_obstacle_speed

    def test_reset_restores_exact_initial_values(self, ramp, config):
        """Reset is independent of how long the previous round ran."""
        for _ in range(10_000):
            ramp.advance(1.3)

        ramp.reset()

        assert ramp.spawn_interval == config.difficulty.initial_spawn_interval_ms
        assert ramp.obstacle_velocity == config.difficulty.initial_obstacle_velocity
        assert not ramp.at_limit
