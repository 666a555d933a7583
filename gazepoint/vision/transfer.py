"""
Gaze-to-screen transfer function.

Maps a normalized gaze sample to clamped screen pixels. Position and
distance effects amplify the movement range around the screen center; they
never shift the origin.
"""

from dataclasses import dataclass
import math
from typing import ClassVar

from gazepoint.core.config import TransferConfig
from gazepoint.vision.gaze_estimator import GazeSample


class TransferError(ValueError):
    """Invalid transfer function input (caller bug, not runtime noise)."""

    pass


@dataclass(frozen=True)
class ScreenPoint:
    """
    Screen position in pixels.

    ScreenPoint.HIDDEN (negative coordinates) means "no signal": hide the
    pointer and leave the cursor where it is.
    """

    x: float
    y: float

    HIDDEN: ClassVar["ScreenPoint"]

    @property
    def is_hidden(self) -> bool:
        """True for the no-signal sentinel."""
        return self.x < 0 or self.y < 0

    def to_pixels(self) -> tuple[int, int]:
        """Integer pixel coordinates."""
        return (int(round(self.x)), int(round(self.y)))


ScreenPoint.HIDDEN = ScreenPoint(-1.0, -1.0)


def _require_finite(name: str, value: float):
    if not math.isfinite(value):
        raise TransferError(f"{name} must be finite, got {value}")


def _range_multiplier(scale: float, multiplier: float) -> float:
    """1 + scale * multiplier (identity when either term is zero)."""
    if scale == 0 or multiplier == 0:
        return 1.0
    return 1.0 + scale * multiplier


def map_to_screen(
    gaze: GazeSample,
    config: TransferConfig,
    screen_width: float,
    screen_height: float,
) -> ScreenPoint:
    """
    Map a gaze sample to screen coordinates.

    Args:
        gaze: Gaze sample (eye position and eye-area depth proxy)
        config: Transfer multipliers, read as-is on every call
        screen_width: Screen width in pixels
        screen_height: Screen height in pixels

    Returns:
        ScreenPoint clamped to [0, width] x [0, height]

    Raises:
        TransferError: On a non-finite input or a screen dimension <= 0

    Steps:
    1. Movement from center: eye position - 0.5
    2. Position range: * (1 + effect * multiplier)
    3. Distance range: * (1 + eye_area * distance multiplier)
    4. Overall gain: center + movement * movement multiplier * dimension
    5. Clamp to screen
    """
    for name, value in (("screen_width", screen_width), ("screen_height", screen_height)):
        _require_finite(name, value)
        if value <= 0:
            raise TransferError(f"{name} must be positive, got {value}")

    for name, value in config.to_dict().items():
        _require_finite(name, value)

    _require_finite("eye_position_x", gaze.eye_position_x)
    _require_finite("eye_position_y", gaze.eye_position_y)
    _require_finite("eye_area", gaze.eye_area)

    movement_x = gaze.eye_position_x - 0.5
    movement_y = gaze.eye_position_y - 0.5

    movement_x *= _range_multiplier(config.eye_position_x_effect, config.eye_position_x_multiplier)
    movement_y *= _range_multiplier(config.eye_position_y_effect, config.eye_position_y_multiplier)

    movement_x *= _range_multiplier(gaze.eye_area, config.distance_x_multiplier)
    movement_y *= _range_multiplier(gaze.eye_area, config.distance_y_multiplier)

    screen_x = screen_width / 2.0 + movement_x * config.x_movement_multiplier * screen_width
    screen_y = screen_height / 2.0 + movement_y * config.y_movement_multiplier * screen_height

    return ScreenPoint(
        x=min(max(screen_x, 0.0), float(screen_width)),
        y=min(max(screen_y, 0.0), float(screen_height)),
    )
