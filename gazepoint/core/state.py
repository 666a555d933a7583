"""
Pipeline state for GazePoint.

Two things are tracked: the tracking lifecycle (AppState) and whether the
last processed frame had a usable eye signal. The lifecycle gates cursor
output; the signal flag only drives status logging and the UI.
"""

from enum import Enum, auto
from typing import Dict, FrozenSet, Optional
from dataclasses import dataclass


class AppState(Enum):
    """
    Tracking lifecycle.

        IDLE -> TRACKING <-> PAUSED
        TRACKING/PAUSED -> IDLE
        any -> ERROR -> IDLE
    """

    IDLE = auto()      # Camera closed
    TRACKING = auto()  # Pointer follows gaze, blinks click
    PAUSED = auto()    # Camera open, cursor output suspended
    ERROR = auto()     # Needs user action (camera missing, init failure)


_TRANSITIONS: Dict[AppState, FrozenSet[AppState]] = {
    AppState.IDLE: frozenset({AppState.TRACKING, AppState.ERROR}),
    AppState.TRACKING: frozenset({AppState.PAUSED, AppState.IDLE, AppState.ERROR}),
    AppState.PAUSED: frozenset({AppState.TRACKING, AppState.IDLE, AppState.ERROR}),
    AppState.ERROR: frozenset({AppState.IDLE}),
}


def is_valid_transition(from_state: AppState, to_state: AppState) -> bool:
    """Whether the lifecycle allows moving from one state to another (same state: yes)."""
    return from_state == to_state or to_state in _TRANSITIONS[from_state]


@dataclass(frozen=True)
class ErrorInfo:
    """Why the pipeline entered ERROR."""

    error_type: str
    message: str
    recoverable: bool = True


class StateMachine:
    """
    Lifecycle state plus the eye-signal flag, owned by the controller.
    """

    def __init__(self, initial_state: AppState = AppState.IDLE):
        self._state = initial_state
        self._error: Optional[ErrorInfo] = None
        self._has_signal = False

    @property
    def current_state(self) -> AppState:
        return self._state

    @property
    def error(self) -> Optional[ErrorInfo]:
        """Set only while in ERROR."""
        return self._error

    @property
    def has_signal(self) -> bool:
        """True if the last processed frame resolved at least one eye."""
        return self._has_signal

    def can_transition_to(self, new_state: AppState) -> bool:
        return is_valid_transition(self._state, new_state)

    def transition_to(self, new_state: AppState) -> bool:
        """
        Move to new_state if the lifecycle allows it.

        Returns:
            False (state unchanged) for a disallowed transition
        """
        if not self.can_transition_to(new_state):
            return False

        if new_state != AppState.ERROR:
            self._error = None
        if new_state != AppState.TRACKING:
            self._has_signal = False

        self._state = new_state
        return True

    def set_error(self, error_info: ErrorInfo) -> bool:
        """Enter ERROR with the given reason."""
        if not self.transition_to(AppState.ERROR):
            return False
        self._error = error_info
        return True

    def update_signal(self, has_signal: bool) -> bool:
        """
        Record whether the current frame had an eye signal.

        Returns:
            True if this changed the flag (eyes found or lost)
        """
        has_signal = bool(has_signal)
        changed = has_signal != self._has_signal
        self._has_signal = has_signal
        return changed

    def reset(self):
        """Back to IDLE from anywhere, clearing error and signal."""
        self._state = AppState.IDLE
        self._error = None
        self._has_signal = False
