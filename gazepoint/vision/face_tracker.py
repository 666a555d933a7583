"""
Face landmark detection using MediaPipe Face Mesh.

Privacy: No facial recognition, no biometric templates stored.
Only extracts geometric landmarks for gaze estimation.
"""

import numpy as np
import mediapipe as mp

from gazepoint.vision.landmarks import LandmarkSet
from gazepoint.utils.logger import get_logger

logger = get_logger(__name__)


EMPTY_LANDMARKS = np.empty((0, 2), dtype=np.float32)


class FaceTracker:
    """
    Face landmark tracking using MediaPipe Face Mesh.

    Produces one landmark set per frame in the Face Mesh topology
    (478 points with refined iris landmarks), or an empty set when no
    face is found.

    Privacy: Only processes frames in-memory. No data stored.
    """

    def __init__(
        self,
        min_detection_confidence: float = 0.5,
        min_tracking_confidence: float = 0.5,
        refine_landmarks: bool = True,
    ):
        """
        Initialize face tracker.

        Args:
            min_detection_confidence: Minimum confidence for face detection
            min_tracking_confidence: Minimum confidence for landmark tracking
            refine_landmarks: Add the 10 iris landmarks (468-477)
        """
        self._mp_face_mesh = mp.solutions.face_mesh
        self._face_mesh = self._mp_face_mesh.FaceMesh(
            max_num_faces=1,
            refine_landmarks=refine_landmarks,
            min_detection_confidence=min_detection_confidence,
            min_tracking_confidence=min_tracking_confidence,
        )

        logger.info(
            f"FaceTracker initialized (refine_landmarks={refine_landmarks})"
        )

    def process_frame(self, frame: np.ndarray) -> LandmarkSet:
        """
        Extract face landmarks from a frame.

        Args:
            frame: RGB image (H, W, 3) as numpy array

        Returns:
            (N, 2) array of normalized landmarks, empty if no face

        Privacy: Frame is not stored, only landmarks are extracted.
        """
        if frame is None or frame.size == 0:
            return EMPTY_LANDMARKS

        results = self._face_mesh.process(frame)

        if not results.multi_face_landmarks:
            return EMPTY_LANDMARKS

        # Use first detected face
        face_landmarks = results.multi_face_landmarks[0]

        return np.array(
            [[lm.x, lm.y] for lm in face_landmarks.landmark],
            dtype=np.float32,
        )

    def close(self):
        """Release MediaPipe resources."""
        face_mesh = getattr(self, "_face_mesh", None)
        if face_mesh is not None:
            face_mesh.close()
            self._face_mesh = None
            logger.info("FaceTracker closed")

    def __del__(self):
        """Cleanup on deletion."""
        self.close()
