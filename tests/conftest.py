"""
Shared fixtures: synthetic Face Mesh landmark sets.
"""

import pytest

from gazepoint.core.config import AppConfig, StorageConfig, TransferConfig
from gazepoint.vision.landmarks import (
    LEFT_EYE_CONTOUR,
    RIGHT_EYE_CONTOUR,
    LEFT_IRIS_CENTER,
    RIGHT_IRIS_CENTER,
)

# Corner cycle: contour points alternate between the four box corners so the
# contour centroid equals the box center
_CORNERS = ((1, 1), (1, -1), (-1, 1), (-1, -1))


def place_eye(landmarks, indices, center, half_width=0.05, half_height=0.02):
    """Put an eye contour's points on the corners of a box around center."""
    cx, cy = center
    for i, index in enumerate(indices):
        sx, sy = _CORNERS[i % 4]
        landmarks[index] = (cx + sx * half_width, cy + sy * half_height)


def build_landmarks(
    left_center=(0.3, 0.5),
    right_center=(0.7, 0.5),
    half_width=0.05,
    half_height=0.02,
    size=468,
    left_iris=None,
    right_iris=None,
):
    """
    Landmark set with the requested eyes.

    Pass None for an eye center to leave that eye out. Iris points need
    size=478.
    """
    landmarks = [None] * size

    if left_center is not None:
        place_eye(landmarks, LEFT_EYE_CONTOUR, left_center, half_width, half_height)
    if right_center is not None:
        place_eye(landmarks, RIGHT_EYE_CONTOUR, right_center, half_width, half_height)

    if left_iris is not None:
        landmarks[LEFT_IRIS_CENTER] = left_iris
    if right_iris is not None:
        landmarks[RIGHT_IRIS_CENTER] = right_iris

    return landmarks


@pytest.fixture
def landmarks():
    """Both eyes, symmetric about the image center."""
    return build_landmarks()


@pytest.fixture
def app_config(tmp_path):
    """App config with neutral transfer and a temporary data directory."""
    config = AppConfig(storage=StorageConfig(data_dir=tmp_path / "data"))
    config.tracking.transfer = TransferConfig.neutral()
    return config


@pytest.fixture
def make_landmarks():
    """Factory for landmark sets (see build_landmarks)."""
    return build_landmarks
