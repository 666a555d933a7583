"""
GazePoint - Hands-free pointer control from facial landmarks.

Turns a webcam face-mesh stream into a cursor position and blink clicks.

Pipeline:
- Eye geometry from MediaPipe Face Mesh landmarks
- Gaze point and eye-area depth proxy per frame
- Blink detection on eye area for clicks
- Configurable transfer function to screen pixels

Privacy First:
- All processing happens locally
- No video recording
- Only numeric tuning settings are stored
"""

__version__ = "0.1.0"
__author__ = "GazePoint Team"
__license__ = "MIT"
