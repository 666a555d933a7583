"""
Timing utilities for performance monitoring.
"""

import time
from typing import Optional


class FPSCounter:
    """
    Track and calculate frames per second.

    Useful for monitoring camera capture and processing performance.
    """

    def __init__(self, window_size: int = 30):
        """
        Initialize FPS counter.

        Args:
            window_size: Number of frames to average over
        """
        self._window_size = window_size
        self._frame_times: list[float] = []
        self._last_time: Optional[float] = None

    def tick(self) -> float:
        """
        Register a frame and return current FPS.

        Returns:
            Current FPS (frames per second)
        """
        current_time = time.perf_counter()

        if self._last_time is not None:
            self._frame_times.append(current_time - self._last_time)

            # Keep only last N frames
            if len(self._frame_times) > self._window_size:
                self._frame_times.pop(0)

        self._last_time = current_time

        return self.fps

    @property
    def fps(self) -> float:
        """Current FPS, or 0.0 if no frames recorded."""
        if not self._frame_times:
            return 0.0

        avg_frame_time = sum(self._frame_times) / len(self._frame_times)
        if avg_frame_time <= 0:
            return 0.0

        return 1.0 / avg_frame_time

    def reset(self):
        """Reset FPS counter."""
        self._frame_times.clear()
        self._last_time = None


class LogThrottle:
    """
    Let a periodic log line through at most once per interval.

    Per-frame diagnostics would flood the console at camera rate.
    """

    def __init__(self, interval_s: float = 1.0):
        self._interval_s = interval_s
        self._last_emit: Optional[float] = None

    def ready(self, now_s: Optional[float] = None) -> bool:
        """Return True if the interval has elapsed since the last emit."""
        if now_s is None:
            now_s = time.monotonic()

        if self._last_emit is None or now_s - self._last_emit >= self._interval_s:
            self._last_emit = now_s
            return True

        return False


def monotonic_ms() -> float:
    """Monotonic clock in milliseconds, for timestamping frames."""
    return time.monotonic() * 1000.0
