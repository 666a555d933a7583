"""
Cursor and click injection with safety mechanisms.

Uses pynput for cross-platform cursor control.
Includes rate limiting and bounds checking for safety.
"""

import time
from typing import Tuple, Optional

from pynput.mouse import Button, Controller as MouseController

from gazepoint.utils.logger import get_logger

logger = get_logger(__name__)


class CursorControlError(Exception):
    """Cursor control errors."""

    pass


class CursorController:
    """
    Pointer sink: absolute cursor moves and left clicks.

    Safety features:
    - Screen bounds checking
    - Rate limiting of moves
    - Emergency stop (disable) that also suppresses clicks
    """

    def __init__(
        self,
        screen_width: int,
        screen_height: int,
        min_update_interval: float = 0.01,  # 100 Hz max
        mouse: Optional[MouseController] = None,
    ):
        """
        Initialize cursor controller.

        Args:
            screen_width: Screen width in pixels
            screen_height: Screen height in pixels
            min_update_interval: Minimum time between cursor updates (seconds)
            mouse: pynput mouse controller (created if not given)
        """
        self._screen_width = screen_width
        self._screen_height = screen_height
        self._min_update_interval = min_update_interval

        try:
            self._mouse = mouse if mouse is not None else MouseController()
        except Exception as e:
            raise CursorControlError(f"Cannot access the system pointer: {e}") from e

        self._last_update_time: Optional[float] = None
        self._enabled = True

        # Statistics
        self._total_moves = 0
        self._skipped_moves = 0
        self._total_clicks = 0

        logger.info(
            f"CursorController initialized: {screen_width}x{screen_height}, "
            f"min_interval={min_update_interval*1000:.1f}ms"
        )

    def move_to(self, x: int, y: int) -> bool:
        """
        Move cursor to absolute screen position.

        Args:
            x: Target x coordinate (pixels)
            y: Target y coordinate (pixels)

        Returns:
            True if cursor moved, False if skipped (rate limited or disabled)
        """
        if not self._enabled:
            return False

        current_time = time.perf_counter()
        if (
            self._last_update_time is not None
            and current_time - self._last_update_time < self._min_update_interval
        ):
            self._skipped_moves += 1
            return False

        x_clamped = max(0, min(int(x), self._screen_width - 1))
        y_clamped = max(0, min(int(y), self._screen_height - 1))

        try:
            self._mouse.position = (x_clamped, y_clamped)
        except Exception as e:
            logger.error(f"Failed to move cursor: {e}")
            return False

        self._last_update_time = current_time
        self._total_moves += 1
        return True

    def click(self) -> bool:
        """
        Left click at the current cursor position.

        Returns:
            True if the click was sent
        """
        if not self._enabled:
            return False

        try:
            self._mouse.click(Button.left, 1)
        except Exception as e:
            logger.error(f"Failed to click: {e}")
            return False

        self._total_clicks += 1
        logger.info(f"Click at {self.get_position()}")
        return True

    def get_position(self) -> Tuple[int, int]:
        """Current cursor position as (x, y)."""
        try:
            pos = self._mouse.position
            return (int(pos[0]), int(pos[1]))
        except Exception as e:
            logger.error(f"Failed to get cursor position: {e}")
            return (0, 0)

    def enable(self):
        """Enable cursor control."""
        self._enabled = True
        logger.info("Cursor control enabled")

    def disable(self):
        """Disable cursor control (emergency stop)."""
        self._enabled = False
        logger.info("Cursor control disabled")

    def is_enabled(self) -> bool:
        """Check if cursor control is enabled."""
        return self._enabled

    def update_screen_size(self, width: int, height: int):
        """Update screen dimensions."""
        self._screen_width = width
        self._screen_height = height
        logger.info(f"Screen size updated: {width}x{height}")

    @property
    def statistics(self) -> dict:
        """Cursor control statistics."""
        attempted = self._total_moves + self._skipped_moves
        return {
            "total_moves": self._total_moves,
            "skipped_moves": self._skipped_moves,
            "total_clicks": self._total_clicks,
            "effective_rate": self._total_moves / attempted if attempted > 0 else 0.0,
        }

    @property
    def screen_size(self) -> Tuple[int, int]:
        """Get screen dimensions."""
        return (self._screen_width, self._screen_height)
