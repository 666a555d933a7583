"""
Tests for the gaze-to-screen transfer function.
"""

import math

import pytest

from gazepoint.core.config import TransferConfig
from gazepoint.vision.gaze_estimator import GazeSample
from gazepoint.vision.transfer import ScreenPoint, TransferError, map_to_screen


WIDTH = 1000
HEIGHT = 800


def gaze(x=0.5, y=0.5, eye_area=0.0):
    """Gaze sample at a normalized eye position."""
    return GazeSample(
        gaze_point=(x, y),
        eye_area=eye_area,
        eye_position_x=x,
        eye_position_y=y,
    )


class TestMapToScreen:
    """Tests for map_to_screen."""

    @pytest.fixture
    def neutral(self):
        return TransferConfig.neutral()

    def test_center_maps_to_screen_center(self, neutral):
        """A centered gaze lands on the screen center."""
        assert map_to_screen(gaze(), neutral, WIDTH, HEIGHT) == ScreenPoint(500.0, 400.0)

    def test_neutral_is_linear(self, neutral):
        """Neutral settings map eye offset 1:1 onto the screen."""
        point = map_to_screen(gaze(0.6, 0.25), neutral, WIDTH, HEIGHT)

        assert point.x == pytest.approx(600.0)
        assert point.y == pytest.approx(200.0)

    def test_position_effect_amplifies_range(self, neutral):
        """Range multiplier is 1 + effect * multiplier."""
        neutral.eye_position_x_effect = 1.0
        neutral.eye_position_x_multiplier = 1.0

        point = map_to_screen(gaze(0.6, 0.5), neutral, WIDTH, HEIGHT)

        assert point.x == pytest.approx(700.0)
        assert point.y == pytest.approx(400.0)

    def test_position_effect_does_not_shift_origin(self, neutral):
        """Effects scale movement; the center stays put."""
        neutral.eye_position_x_effect = 3.0
        neutral.eye_position_y_effect = -2.0

        assert map_to_screen(gaze(), neutral, WIDTH, HEIGHT) == ScreenPoint(500.0, 400.0)

    def test_zero_effect_ignores_multiplier(self, neutral):
        """With effect 0 the multiplier has no influence."""
        neutral.eye_position_y_multiplier = 5.0

        point = map_to_screen(gaze(0.5, 0.75), neutral, WIDTH, HEIGHT)

        assert point.y == pytest.approx(600.0)

    def test_distance_multiplier(self, neutral):
        """Distance range multiplier is 1 + eye_area * multiplier."""
        neutral.distance_x_multiplier = 2.0

        point = map_to_screen(gaze(0.6, 0.6, eye_area=0.5), neutral, WIDTH, HEIGHT)

        assert point.x == pytest.approx(500.0 + 0.1 * 2.0 * WIDTH)
        assert point.y == pytest.approx(400.0 + 0.1 * HEIGHT)

    def test_distance_multiplier_at_closest(self, neutral):
        """At eye_area 0 the distance multiplier has no effect."""
        neutral.distance_y_multiplier = 4.0

        point = map_to_screen(gaze(0.5, 0.6, eye_area=0.0), neutral, WIDTH, HEIGHT)

        assert point.y == pytest.approx(480.0)

    def test_negative_multiplier_flips_axis(self, neutral):
        """Negative movement multipliers mirror the axis."""
        neutral.x_movement_multiplier = -1.0

        point = map_to_screen(gaze(0.6, 0.5), neutral, WIDTH, HEIGHT)

        assert point.x == pytest.approx(400.0)

    def test_movement_multiplier(self, neutral):
        """Overall gain scales the offset from center."""
        neutral.y_movement_multiplier = 2.0

        point = map_to_screen(gaze(0.5, 0.6), neutral, WIDTH, HEIGHT)

        assert point.y == pytest.approx(400.0 + 0.1 * 2.0 * HEIGHT)

    def test_default_config(self):
        """Defaults (all 1.0) double the position range and add distance range."""
        point = map_to_screen(gaze(0.6, 0.5, eye_area=0.5), TransferConfig(), WIDTH, HEIGHT)

        assert point.x == pytest.approx(500.0 + 0.1 * 2.0 * 1.5 * WIDTH)

    def test_clamped_to_screen(self, neutral):
        """Output never leaves [0, width] x [0, height]."""
        neutral.x_movement_multiplier = 10.0
        neutral.y_movement_multiplier = 10.0

        assert map_to_screen(gaze(1.0, 1.0), neutral, WIDTH, HEIGHT) == ScreenPoint(1000.0, 800.0)
        assert map_to_screen(gaze(0.0, 0.0), neutral, WIDTH, HEIGHT) == ScreenPoint(0.0, 0.0)

    def test_output_always_on_screen(self):
        """Grid over gaze and settings stays within bounds."""
        for x in (0.0, 0.2, 0.5, 0.9, 1.0):
            for gain in (-5.0, -1.0, 0.0, 1.0, 7.5):
                config = TransferConfig(
                    x_movement_multiplier=gain,
                    y_movement_multiplier=-gain,
                    eye_position_x_effect=gain,
                    distance_y_multiplier=gain,
                )
                point = map_to_screen(gaze(x, 1.0 - x, eye_area=x), config, WIDTH, HEIGHT)

                assert 0.0 <= point.x <= WIDTH
                assert 0.0 <= point.y <= HEIGHT

    def test_pure(self):
        """Same arguments, same result; the config is not modified."""
        config = TransferConfig(x_movement_multiplier=1.3, distance_x_multiplier=-0.4)
        before = config.to_dict()
        sample = gaze(0.37, 0.81, eye_area=0.6)

        first = map_to_screen(sample, config, WIDTH, HEIGHT)
        second = map_to_screen(sample, config, WIDTH, HEIGHT)

        assert first == second
        assert config.to_dict() == before


class TestMapToScreenErrors:
    """Invalid inputs fail fast."""

    @pytest.mark.parametrize("width,height", [(0, 800), (1000, 0), (-1, 800), (1000, -5)])
    def test_non_positive_screen(self, width, height):
        with pytest.raises(TransferError, match="must be positive"):
            map_to_screen(gaze(), TransferConfig(), width, height)

    def test_non_finite_screen(self):
        with pytest.raises(TransferError, match="must be finite"):
            map_to_screen(gaze(), TransferConfig(), math.inf, HEIGHT)

    @pytest.mark.parametrize("name", ["x_movement_multiplier", "eye_position_y_effect", "distance_x_multiplier"])
    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
    def test_non_finite_config(self, name, value):
        config = TransferConfig()
        setattr(config, name, value)

        with pytest.raises(TransferError, match=name):
            map_to_screen(gaze(), config, WIDTH, HEIGHT)

    def test_transfer_error_is_value_error(self):
        with pytest.raises(ValueError):
            map_to_screen(gaze(), TransferConfig(), 0, 0)


class TestScreenPoint:
    """Tests for ScreenPoint."""

    def test_hidden_sentinel(self):
        assert ScreenPoint.HIDDEN.is_hidden
        assert not ScreenPoint(0.0, 0.0).is_hidden

    def test_to_pixels(self):
        assert ScreenPoint(10.6, 20.2).to_pixels() == (11, 20)
