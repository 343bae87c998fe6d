"""
Tests for the kinematic body.
"""

import pytest

from flappy_sim.flappy_core.config_loader import load_config
from flappy_sim.flappy_core.body import FlapState, KinematicBody


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def body(config):
    return KinematicBody(config)


class TestIntegration:
    """Test semi-implicit Euler integration."""

    def test_starts_at_rest(self, body, config):
        """Body starts at the configured position with zero velocity."""
        assert body.x == config.body.start_x
        assert body.y == config.body.start_y
        assert body.vy == 0.0

    def test_velocity_updates_before_position(self, body, config):
        """One step from rest moves by delta * (delta * gravity)."""
        g = config.physics.gravity
        start_y = body.y

        body.integrate(1.0)

        assert body.vy == pytest.approx(g)
        assert body.y == pytest.approx(start_y + g)

    def test_velocity_is_linear_in_delta(self, config):
        """Two steps d1, d2 reach the same velocity as one step d1 + d2."""
        split = KinematicBody(config)
        whole = KinematicBody(config)

        split.integrate(0.7)
        split.integrate(1.3)
        whole.integrate(2.0)

        assert split.vy == pytest.approx(whole.vy)

    def test_position_matches_semi_implicit_closed_form(self, config):
        """Positions follow the semi-implicit Euler closed form for each stepping."""
        g = config.physics.gravity
        d1, d2 = 0.7, 1.3

        split = KinematicBody(config)
        split.integrate(d1)
        split.integrate(d2)

        whole = KinematicBody(config)
        whole.integrate(d1 + d2)

        start_y = config.body.start_y
        assert split.y == pytest.approx(start_y + g * (d1 * d1 + d1 * d2 + d2 * d2))
        assert whole.y == pytest.approx(start_y + g * (d1 + d2) ** 2)

    def test_zero_delta_is_noop(self, body):
        """A zero delta changes nothing."""
        body.integrate(0.0)
        assert body.vy == 0.0
        assert body.y == pytest.approx(300.0)

    def test_no_bounds_enforced(self, body):
        """Integration never clamps position."""
        for _ in range(500):
            body.integrate(1.0)
        assert body.y > 10_000


class TestJump:
    """Test jump impulse."""

    @pytest.mark.parametrize("prior_vy", [-20.0, -6.0, 0.0, 3.5, 40.0])
    def test_jump_overwrites_velocity(self, body, config, prior_vy):
        """Jump sets velocity to the jump constant regardless of prior velocity."""
        body.vy = prior_vy
        body.apply_jump()
        assert body.vy == config.physics.jump_velocity

    def test_jump_does_not_move(self, body):
        """Jump changes velocity only."""
        y = body.y
        body.apply_jump()
        assert body.y == y

    def test_reset_restores_start(self, body, config):
        """Reset returns to start position at rest."""
        body.apply_jump()
        body.integrate(5.0)
        body.reset()
        assert body.y == config.body.start_y
        assert body.vy == 0.0


class TestFlapState:
    """Test presentation-only velocity bands."""

    def test_bands(self, body, config):
        threshold = config.physics.flap_threshold

        body.vy = -threshold - 0.5
        assert body.flap_state is FlapState.ASCENDING

        body.vy = threshold + 0.5
        assert body.flap_state is FlapState.DESCENDING

        body.vy = 0.0
        assert body.flap_state is FlapState.NEUTRAL

    def test_thresholds_are_neutral(self, body, config):
        """Exactly at the threshold the state is neutral."""
        threshold = config.physics.flap_threshold

        body.vy = threshold
        assert body.flap_state is FlapState.NEUTRAL
        body.vy = -threshold
        assert body.flap_state is FlapState.NEUTRAL

    def test_right_after_jump_is_ascending(self, body):
        body.apply_jump()
        assert body.flap_state is FlapState.ASCENDING
