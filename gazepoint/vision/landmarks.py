"""
Eye geometry from MediaPipe Face Mesh landmarks.

Landmark sets are indexed by the Face Mesh topology: 468 canonical points,
478 when the tracker refines iris landmarks. Entries are normalized (x, y)
pairs; a missing point may be None, and a faceless frame is an empty set.

See: https://github.com/google/mediapipe/blob/master/mediapipe/modules/face_geometry/data/canonical_face_model_uv_visualization.png
"""

from dataclasses import dataclass
import math
from typing import Optional, Sequence, Tuple, List, Union

import numpy as np

Point = Tuple[float, float]
LandmarkSet = Union[Sequence[Optional[Sequence[float]]], np.ndarray]


# Full 16-point eye contours

# Left eye contour (right eye on the user's face, on-screen right)
LEFT_EYE_CONTOUR = [33, 7, 163, 144, 145, 153, 154, 155, 133, 173, 157, 158, 159, 160, 161, 246]

# Right eye contour (left eye on the user's face, on-screen left)
RIGHT_EYE_CONTOUR = [362, 382, 381, 380, 374, 373, 390, 249, 263, 466, 388, 387, 386, 385, 384, 398]

# Iris centers, only present with refine_landmarks=True
LEFT_IRIS_CENTER = 468
RIGHT_IRIS_CENTER = 473

# Published region is this fraction of the raw bounding box
REGION_SHRINK = 0.8


@dataclass(frozen=True)
class EyeRegion:
    """
    Inner eye rectangle in normalized image coordinates.

    The raw bounding box of the contour is shrunk around its own center,
    which keeps eyelid and eyebrow contour noise out of the region.
    """

    center: Point
    left: float
    top: float
    right: float
    bottom: float
    width: float
    height: float

    @property
    def area(self) -> float:
        """Region area (width * height)."""
        return self.width * self.height

    def to_pixel_rect(self, image_width: int, image_height: int) -> Tuple[int, int, int, int]:
        """(x, y, width, height) in pixels of an image of the given size."""
        return (
            round(self.left * image_width),
            round(self.top * image_height),
            round(self.width * image_width),
            round(self.height * image_height),
        )


def landmark_count(landmarks: Optional[LandmarkSet]) -> int:
    """Number of entries in a landmark set (0 for None)."""
    if landmarks is None:
        return 0
    return len(landmarks)


def get_point(landmarks: LandmarkSet, index: int) -> Optional[Point]:
    """
    Look up one landmark.

    Returns:
        (x, y) or None if the index is out of range, the point is missing,
        or a coordinate is not finite
    """
    if index < 0 or index >= landmark_count(landmarks):
        return None

    point = landmarks[index]
    if point is None:
        return None

    x, y = float(point[0]), float(point[1])
    if not (math.isfinite(x) and math.isfinite(y)):
        return None

    return (x, y)


def resolve_points(landmarks: LandmarkSet, indices: Sequence[int]) -> List[Point]:
    """Points for the given indices, skipping any that do not resolve."""
    points = []
    for index in indices:
        point = get_point(landmarks, index)
        if point is not None:
            points.append(point)
    return points


def compute_eye_region(
    landmarks: LandmarkSet, indices: Sequence[int]
) -> Optional[EyeRegion]:
    """
    Compute the inner eye rectangle for one eye.

    Args:
        landmarks: Face landmark set
        indices: Eye contour indices

    Returns:
        EyeRegion, or None if no contour point resolves
    """
    points = resolve_points(landmarks, indices)
    if not points:
        return None

    xs = np.array([p[0] for p in points], dtype=np.float64)
    ys = np.array([p[1] for p in points], dtype=np.float64)

    raw_left, raw_right = float(xs.min()), float(xs.max())
    raw_top, raw_bottom = float(ys.min()), float(ys.max())

    center_x = (raw_left + raw_right) / 2.0
    center_y = (raw_top + raw_bottom) / 2.0

    width = (raw_right - raw_left) * REGION_SHRINK
    height = (raw_bottom - raw_top) * REGION_SHRINK

    return EyeRegion(
        center=(center_x, center_y),
        left=center_x - width / 2.0,
        top=center_y - height / 2.0,
        right=center_x + width / 2.0,
        bottom=center_y + height / 2.0,
        width=width,
        height=height,
    )


def compute_pupil_position(
    landmarks: LandmarkSet,
    indices: Sequence[int],
    iris_index: Optional[int] = None,
) -> Optional[Point]:
    """
    Estimate the pupil position of one eye.

    The iris landmark is used when the set carries it. Otherwise the pupil
    is approximated by the centroid of the eye contour.

    Args:
        landmarks: Face landmark set
        indices: Eye contour indices
        iris_index: Iris center index, if the topology has one

    Returns:
        (x, y), or None if nothing resolves
    """
    if iris_index is not None:
        iris = get_point(landmarks, iris_index)
        if iris is not None:
            return iris

    points = resolve_points(landmarks, indices)
    if not points:
        return None

    centroid = np.mean(np.array(points, dtype=np.float64), axis=0)
    return (float(centroid[0]), float(centroid[1]))
