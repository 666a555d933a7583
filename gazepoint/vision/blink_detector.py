"""
Blink detection for click events.

Classifies each eye-area sample as open or closed relative to an adaptive
baseline, and fires a click when an open -> closed -> open pattern
completes inside a short time window.

Not thread-safe: one instance belongs to one pipeline thread.
"""

from collections import deque
from dataclasses import dataclass
from enum import Enum, auto
from typing import Deque, Optional

from gazepoint.core.config import validate_blink_threshold
from gazepoint.utils.logger import get_logger

logger = get_logger(__name__)


# Maximum duration of a close-open pattern (ms)
BLINK_WINDOW_MS = 500.0

# Minimum time between clicks (ms)
CLICK_DEBOUNCE_MS = 300.0

# Relative area must recover by this much after the dip
REOPEN_RECOVERY = 0.2

# Baseline exponential moving average weight for the newest sample
BASELINE_ALPHA = 0.05


class BlinkState(Enum):
    """Detector states."""

    UNCALIBRATED = auto()  # No baseline yet
    TRACKING = auto()      # Baseline established, classifying samples


@dataclass(frozen=True)
class EyeSample:
    """One classified eye-area sample."""

    timestamp_ms: float
    relative_area: float  # Eye area / baseline
    closed: bool


class BlinkDetector:
    """
    Detect deliberate blinks from a stream of eye-area samples.

    Usage:
        detector = BlinkDetector(blink_threshold=0.3)
        if detector.process(sample.raw_eye_area, now_ms):
            cursor.click()

    Timestamps are milliseconds from any monotonic clock. Classification is
    timestamp-based, so dropped frames are tolerated.
    """

    def __init__(self, blink_threshold: float = 0.3, baseline: Optional[float] = None):
        """
        Initialize blink detector.

        Args:
            blink_threshold: Fractional drop in eye area that counts as closed
            baseline: Pre-seeded baseline eye area (optional)
        """
        self._blink_threshold = validate_blink_threshold(blink_threshold)

        self._baseline = 0.0
        self._history: Deque[EyeSample] = deque()
        self._last_click_ms: Optional[float] = None

        if baseline is not None and baseline > 0:
            self._baseline = float(baseline)

        logger.info(f"BlinkDetector initialized: threshold={self._blink_threshold:.2f}")

    @property
    def blink_threshold(self) -> float:
        """Fractional drop in eye area that counts as closed."""
        return self._blink_threshold

    @blink_threshold.setter
    def blink_threshold(self, value: float):
        self._blink_threshold = validate_blink_threshold(value)

    @property
    def state(self) -> BlinkState:
        """Current detector state."""
        if self._baseline > 0:
            return BlinkState.TRACKING
        return BlinkState.UNCALIBRATED

    @property
    def baseline(self) -> float:
        """Adaptive baseline eye area (0 when uncalibrated)."""
        return self._baseline

    @property
    def history(self) -> tuple:
        """Samples inside the current window, oldest first."""
        return tuple(self._history)

    @property
    def last_click_ms(self) -> Optional[float]:
        """Timestamp of the last fired click."""
        return self._last_click_ms

    def process(self, eye_area: float, now_ms: float) -> bool:
        """
        Process one eye-area sample.

        Args:
            eye_area: Current eye area (openness)
            now_ms: Sample timestamp in milliseconds

        Returns:
            True if a blink click fired on this sample
        """
        # Seed baseline on first sample
        if self._baseline <= 0:
            self._baseline = float(eye_area)
            self._history.clear()
            if self._baseline > 0:
                logger.debug(f"Blink baseline seeded: {self._baseline:.6f}")
            return False

        threshold = self._blink_threshold

        relative = eye_area / self._baseline
        closed = relative < (1.0 - threshold)

        # Slow adaptation so gradual distance changes do not trigger
        self._baseline = self._baseline * (1.0 - BASELINE_ALPHA) + eye_area * BASELINE_ALPHA

        self._history.append(EyeSample(now_ms, relative, closed))

        # Keep only samples inside the window
        while self._history and now_ms - self._history[0].timestamp_ms > BLINK_WINDOW_MS:
            self._history.popleft()

        if len(self._history) < 3 or not self._debounce_elapsed(now_ms):
            return False

        last = self._history[-1]
        if last.closed:
            return False

        samples = list(self._history)
        for first, dip in zip(samples, samples[1:-1]):
            if first.closed or not dip.closed:
                continue

            if last.timestamp_ms - first.timestamp_ms > BLINK_WINDOW_MS:
                continue

            decrease = 1.0 - dip.relative_area
            recovery = last.relative_area - dip.relative_area

            if decrease >= threshold and recovery >= REOPEN_RECOVERY:
                self._last_click_ms = now_ms
                self._history.clear()
                logger.debug(
                    f"Blink detected: dip={decrease:.2f}, recovery={recovery:.2f}"
                )
                return True

        return False

    def _debounce_elapsed(self, now_ms: float) -> bool:
        if self._last_click_ms is None:
            return True
        return now_ms - self._last_click_ms >= CLICK_DEBOUNCE_MS

    def reset(self):
        """Force recalibration (e.g. after the face was lost)."""
        self._baseline = 0.0
        self._history.clear()
        logger.debug("BlinkDetector reset")
