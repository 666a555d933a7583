"""
Camera capture module with error handling.

Privacy: All frames processed in-memory only, never saved to disk.
"""

import sys
from dataclasses import dataclass
from typing import Optional, Tuple

import cv2
import numpy as np

from gazepoint.core.config import CameraConfig
from gazepoint.utils.logger import get_logger
from gazepoint.utils.timing import monotonic_ms

logger = get_logger(__name__)


def _backend() -> int:
    """Capture backend: DirectShow on Windows, auto elsewhere."""
    if sys.platform.startswith("win"):
        return cv2.CAP_DSHOW
    return cv2.CAP_ANY


@dataclass
class CameraFrame:
    """A captured camera frame with metadata."""

    image: np.ndarray  # RGB format (H, W, 3)
    timestamp_ms: float  # Monotonic capture time
    frame_number: int


class CameraError(Exception):
    """Camera-related errors."""

    pass


class Camera:
    """
    Camera capture for the landmark detector.

    Privacy: Frames are never saved to disk. All processing in-memory only.
    """

    def __init__(self, config: CameraConfig):
        """
        Initialize camera.

        Args:
            config: Camera configuration
        """
        self._config = config
        self._capture: Optional[cv2.VideoCapture] = None
        self._is_open = False
        self._frame_count = 0

        logger.info(f"Initializing camera {config.camera_index}")

    def open(self) -> bool:
        """
        Open camera and configure capture settings.

        Returns:
            True if the camera is open

        Raises:
            CameraError: If camera cannot be opened
        """
        if self._is_open:
            logger.warning("Camera already open")
            return True

        try:
            self._capture = cv2.VideoCapture(self._config.camera_index, _backend())

            if not self._capture.isOpened():
                raise CameraError(
                    f"Failed to open camera {self._config.camera_index}. "
                    "Check if camera is connected and not used by another application."
                )

            self._capture.set(cv2.CAP_PROP_FRAME_WIDTH, self._config.frame_width)
            self._capture.set(cv2.CAP_PROP_FRAME_HEIGHT, self._config.frame_height)
            self._capture.set(cv2.CAP_PROP_FPS, self._config.target_fps)

            # Skip first few frames which may be black/corrupted
            for _ in range(self._config.warmup_frames):
                self._capture.read()

            self._is_open = True
            self._frame_count = 0

            width, height = self.get_frame_size()
            logger.info(
                f"Camera opened: {width}x{height} @ {self._capture.get(cv2.CAP_PROP_FPS):.1f}fps"
            )

            return True

        except CameraError:
            self.close()
            raise

        except Exception as e:
            self.close()
            error_msg = f"Camera initialization failed: {e}"
            logger.error(error_msg)
            raise CameraError(error_msg) from e

    def read_frame(self) -> Optional[CameraFrame]:
        """
        Read a frame from the camera.

        Returns:
            CameraFrame in RGB format, None if read failed
        """
        if not self._is_open or self._capture is None:
            logger.warning("Attempted to read from closed camera")
            return None

        ret, frame = self._capture.read()
        timestamp_ms = monotonic_ms()

        if not ret or frame is None:
            logger.warning("Failed to read frame from camera")
            return None

        self._frame_count += 1

        return CameraFrame(
            image=cv2.cvtColor(frame, cv2.COLOR_BGR2RGB),
            timestamp_ms=timestamp_ms,
            frame_number=self._frame_count,
        )

    def get_frame_size(self) -> Tuple[int, int]:
        """Current (width, height), or the configured size when closed."""
        if self._capture is None:
            return (self._config.frame_width, self._config.frame_height)

        return (
            int(self._capture.get(cv2.CAP_PROP_FRAME_WIDTH)),
            int(self._capture.get(cv2.CAP_PROP_FRAME_HEIGHT)),
        )

    def close(self):
        """
        Release camera resources.

        Safe to call multiple times.
        """
        capture = getattr(self, "_capture", None)
        if capture is not None:
            capture.release()
            self._capture = None
            logger.info("Camera closed")

        self._is_open = False

    @property
    def is_open(self) -> bool:
        """Check if camera is open."""
        return self._is_open

    @property
    def frame_count(self) -> int:
        """Number of frames read since opening."""
        return self._frame_count

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __del__(self):
        self.close()
