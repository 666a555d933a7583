"""
Gaze point estimation from eye landmarks.

Fuses the eye regions and pupil positions of one or both eyes into a single
normalized gaze point, plus an eye-area depth proxy used by the transfer
function and an eye-openness signal used by blink detection.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from gazepoint.vision.landmarks import (
    EyeRegion,
    LandmarkSet,
    Point,
    LEFT_EYE_CONTOUR,
    RIGHT_EYE_CONTOUR,
    LEFT_IRIS_CENTER,
    RIGHT_IRIS_CENTER,
    compute_eye_region,
    compute_pupil_position,
    landmark_count,
)
from gazepoint.utils.logger import get_logger

logger = get_logger(__name__)


# Largest expected eye region area in normalized landmark units
MAX_EXPECTED_AREA = 0.01

# Blend weights when both pupils are available
PUPIL_WEIGHT = 0.6
REGION_WEIGHT = 0.4

NO_SIGNAL_POINT: Point = (0.5, 0.5)


@dataclass(frozen=True)
class GazeSample:
    """
    Per-frame gaze estimate.

    Attributes:
        gaze_point: Fused gaze point, normalized 0-1
        eye_area: Depth proxy (0 = eyes at largest expected size/closest,
            rising toward 1 as the face moves away)
        eye_position_x: Gaze x, for the transfer function
        eye_position_y: Gaze y, for the transfer function
        raw_eye_area: Un-normalized region area (eye openness)
        has_signal: False when no eye resolved; gaze_point is then the
            screen center
    """

    gaze_point: Point
    eye_area: float
    eye_position_x: float
    eye_position_y: float
    raw_eye_area: float = 0.0
    has_signal: bool = True
    left_region: Optional[EyeRegion] = None
    right_region: Optional[EyeRegion] = None

    @classmethod
    def no_signal(cls) -> "GazeSample":
        """Sample for a frame where nothing resolved."""
        x, y = NO_SIGNAL_POINT
        return cls(
            gaze_point=NO_SIGNAL_POINT,
            eye_area=distance_from_area(0.0),
            eye_position_x=x,
            eye_position_y=y,
            raw_eye_area=0.0,
            has_signal=False,
        )


def distance_from_area(area: float) -> float:
    """
    Normalize an eye area to a distance metric in [0, 1].

    0 means the eyes fill the largest expected area; the value rises
    toward 1 as the eyes shrink.
    """
    clamped = min(max(MAX_EXPECTED_AREA - area, 0.0), MAX_EXPECTED_AREA)
    return clamped / MAX_EXPECTED_AREA


def _midpoint(a: Point, b: Point) -> Point:
    return ((a[0] + b[0]) / 2.0, (a[1] + b[1]) / 2.0)


class GazeEstimator:
    """
    Estimate a normalized gaze point from face landmarks.

    The only state is the one-eye mode flag, which may be changed between
    calls. Output is a pure function of the landmarks and the mode.
    """

    def __init__(self, use_one_eye: bool = False):
        """
        Initialize gaze estimator.

        Args:
            use_one_eye: Track the right eye (on-screen left) only
        """
        self._use_one_eye = use_one_eye
        logger.info(f"GazeEstimator initialized (one_eye={use_one_eye})")

    @property
    def use_one_eye(self) -> bool:
        """Whether one-eye mode is active."""
        return self._use_one_eye

    @use_one_eye.setter
    def use_one_eye(self, value: bool):
        if value != self._use_one_eye:
            logger.info(f"One-eye mode {'enabled' if value else 'disabled'}")
        self._use_one_eye = bool(value)

    def estimate(
        self, landmarks: LandmarkSet, use_one_eye: Optional[bool] = None
    ) -> GazeSample:
        """
        Estimate gaze for one frame.

        Args:
            landmarks: Face landmark set (may be empty)
            use_one_eye: Override the mode flag for this call

        Returns:
            GazeSample; has_signal is False if no eye resolved
        """
        if use_one_eye is None:
            use_one_eye = self._use_one_eye

        if landmark_count(landmarks) == 0:
            return GazeSample.no_signal()

        left_region = compute_eye_region(landmarks, LEFT_EYE_CONTOUR)
        right_region = compute_eye_region(landmarks, RIGHT_EYE_CONTOUR)

        left_pupil = compute_pupil_position(landmarks, LEFT_EYE_CONTOUR, LEFT_IRIS_CENTER)
        right_pupil = compute_pupil_position(landmarks, RIGHT_EYE_CONTOUR, RIGHT_IRIS_CENTER)

        if use_one_eye:
            # Region and pupil each prefer the right eye independently
            region = right_region if right_region is not None else left_region
            pupil = right_pupil if right_pupil is not None else left_pupil
            point, area = self._fuse(region, None, pupil, None)
        else:
            point, area = self._fuse(left_region, right_region, left_pupil, right_pupil)

        if point is None:
            return GazeSample.no_signal()

        return GazeSample(
            gaze_point=point,
            eye_area=distance_from_area(area),
            eye_position_x=point[0],
            eye_position_y=point[1],
            raw_eye_area=area,
            has_signal=True,
            left_region=left_region,
            right_region=right_region,
        )

    @staticmethod
    def _fuse(
        region_a: Optional[EyeRegion],
        region_b: Optional[EyeRegion],
        pupil_a: Optional[Point],
        pupil_b: Optional[Point],
    ) -> Tuple[Optional[Point], float]:
        """
        Combine up to two eyes into a gaze point and an eye area.

        Returns:
            (gaze point or None, raw area)
        """
        # Combined region center and area
        if region_a is not None and region_b is not None:
            center = _midpoint(region_a.center, region_b.center)
            area = (region_a.area + region_b.area) / 2.0
        elif region_a is not None or region_b is not None:
            region = region_a if region_a is not None else region_b
            center = region.center
            area = region.area
        else:
            center = None
            area = 0.0

        # Pupils are more accurate than region centers
        if pupil_a is not None and pupil_b is not None:
            pupil = _midpoint(pupil_a, pupil_b)
            if center is None:
                point = pupil
            else:
                point = (
                    pupil[0] * PUPIL_WEIGHT + center[0] * REGION_WEIGHT,
                    pupil[1] * PUPIL_WEIGHT + center[1] * REGION_WEIGHT,
                )
        elif pupil_a is not None:
            point = pupil_a
        elif pupil_b is not None:
            point = pupil_b
        else:
            point = center

        return point, area
