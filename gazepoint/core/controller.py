"""
Central controller driving the gaze pointer pipeline.

Manages state transitions and coordinates all components.
"""

from typing import Optional, Protocol
from dataclasses import dataclass

import numpy as np

from gazepoint.core.config import AppConfig, validate_blink_threshold
from gazepoint.core.state import StateMachine, AppState, ErrorInfo
from gazepoint.vision.landmarks import LandmarkSet, landmark_count
from gazepoint.vision.gaze_estimator import GazeEstimator, GazeSample
from gazepoint.vision.blink_detector import BlinkDetector
from gazepoint.vision.transfer import ScreenPoint, map_to_screen
from gazepoint.storage.schema import SettingsData
from gazepoint.storage.settings_store import SettingsStore, SettingsStoreError
from gazepoint.utils.timing import FPSCounter, LogThrottle
from gazepoint.utils.logger import get_logger

logger = get_logger(__name__)


class CursorSink(Protocol):
    """Receives absolute cursor moves and clicks."""

    def move_to(self, x: int, y: int) -> bool: ...

    def click(self) -> bool: ...

    def enable(self): ...

    def disable(self): ...


class OverlaySink(Protocol):
    """Renders the pointer; ScreenPoint.HIDDEN means hide it."""

    def show_pointer(self, point: ScreenPoint): ...


@dataclass
class FrameProcessingResult:
    """Result of processing a single frame."""

    success: bool
    face_detected: bool
    gaze: Optional[GazeSample] = None
    screen_point: ScreenPoint = ScreenPoint.HIDDEN
    clicked: bool = False
    fps: float = 0.0

    # RGB camera image, for the preview only
    frame: Optional[np.ndarray] = None


class Controller:
    """
    Central controller for GazePoint.

    Manages the complete pipeline:
    camera -> face landmarks -> gaze estimation -> {blink detection, transfer function} -> sinks

    The controller owns one GazeEstimator and one BlinkDetector. All
    per-frame work runs on a single worker thread; configuration is read
    fresh on every frame.
    """

    def __init__(
        self,
        config: AppConfig,
        screen_width: int,
        screen_height: int,
        cursor: Optional[CursorSink] = None,
        overlay: Optional[OverlaySink] = None,
        camera=None,
        face_tracker=None,
        settings_store: Optional[SettingsStore] = None,
    ):
        """
        Initialize controller.

        Args:
            config: Application configuration
            screen_width: Screen width in pixels
            screen_height: Screen height in pixels
            cursor: Cursor/click sink (created in initialize() if omitted)
            overlay: Pointer overlay sink (optional)
            camera: Frame source (created in initialize() if omitted)
            face_tracker: Landmark detector (created in initialize() if omitted)
            settings_store: Settings persistence (created in initialize() if omitted)
        """
        self._config = config
        self._screen_width = screen_width
        self._screen_height = screen_height

        self._state_machine = StateMachine(initial_state=AppState.IDLE)

        self._cursor = cursor
        self._overlay = overlay
        self._camera = camera
        self._face_tracker = face_tracker
        self._settings_store = settings_store

        tracking = config.tracking
        self._gaze_estimator = GazeEstimator(use_one_eye=tracking.use_one_eye)
        self._blink_detector = BlinkDetector(blink_threshold=tracking.blink_threshold)

        self._fps_counter = FPSCounter()
        self._log_throttle = LogThrottle(interval_s=1.0)

        # Cursor moves/clicks only while enabled (safety)
        self._tracking_enabled = False

        self._last_point: ScreenPoint = ScreenPoint.HIDDEN

        logger.info(f"Controller initialized for {screen_width}x{screen_height}")

    def initialize(self) -> bool:
        """
        Create any platform components that were not injected.

        Returns:
            True if successful, False if a component failed (ERROR state)
        """
        try:
            if self._settings_store is None:
                self._settings_store = SettingsStore(self._config.storage)

            if self._camera is None:
                from gazepoint.vision.camera import Camera

                self._camera = Camera(self._config.camera)

            if self._face_tracker is None:
                from gazepoint.vision.face_tracker import FaceTracker

                self._face_tracker = FaceTracker(
                    min_detection_confidence=self._config.tracking.min_face_confidence,
                    min_tracking_confidence=self._config.tracking.min_face_confidence,
                )

            if self._cursor is None:
                from gazepoint.os_control.cursor_controller import CursorController

                self._cursor = CursorController(self._screen_width, self._screen_height)

        except Exception as e:
            error_msg = f"Initialization failed: {e}"
            logger.error(error_msg)
            self._state_machine.set_error(
                ErrorInfo(
                    error_type="InitializationError",
                    message=error_msg,
                    recoverable=False,
                )
            )
            return False

        self.load_settings()

        logger.info("All components initialized successfully")
        return True

    def start_tracking(self) -> bool:
        """
        Open the camera and start driving the pointer.

        Returns:
            True if started successfully
        """
        if not self._state_machine.can_transition_to(AppState.TRACKING):
            logger.warning(f"Cannot start tracking from state {self._state_machine.current_state}")
            return False

        if self._camera is None or self._face_tracker is None:
            logger.warning("Cannot start tracking before initialize()")
            return False

        try:
            if not self._camera.is_open:
                self._camera.open()
        except Exception as e:
            self._state_machine.set_error(
                ErrorInfo(
                    error_type="CameraError",
                    message=str(e),
                    recoverable=True,
                )
            )
            return False

        if self._cursor is not None:
            self._cursor.enable()

        self._blink_detector.reset()
        self._fps_counter.reset()
        self._tracking_enabled = True

        self._state_machine.transition_to(AppState.TRACKING)
        logger.info("Tracking started")
        return True

    def stop_tracking(self) -> bool:
        """
        Stop tracking and release the camera.

        Returns:
            True if stopped
        """
        if self._state_machine.current_state not in (AppState.TRACKING, AppState.PAUSED):
            return False

        self._tracking_enabled = False
        if self._cursor is not None:
            self._cursor.disable()
        self._camera.close()
        self._publish_overlay(ScreenPoint.HIDDEN)

        self._state_machine.transition_to(AppState.IDLE)
        logger.info("Tracking stopped")
        return True

    def pause_tracking(self) -> bool:
        """Pause tracking (keep camera active)."""
        if self._state_machine.current_state != AppState.TRACKING:
            return False

        if self._cursor is not None:
            self._cursor.disable()
        self._publish_overlay(ScreenPoint.HIDDEN)

        self._state_machine.transition_to(AppState.PAUSED)
        logger.info("Tracking paused")
        return True

    def resume_tracking(self) -> bool:
        """Resume tracking from paused state."""
        if self._state_machine.current_state != AppState.PAUSED:
            return False

        if self._cursor is not None:
            self._cursor.enable()
        self._blink_detector.reset()

        self._state_machine.transition_to(AppState.TRACKING)
        logger.info("Tracking resumed")
        return True

    def process_frame(self) -> FrameProcessingResult:
        """
        Read one camera frame and run it through the pipeline.

        Call this from the worker thread only.
        """
        fps = self._fps_counter.tick()

        frame = self._camera.read_frame()
        if frame is None:
            return FrameProcessingResult(success=False, face_detected=False, fps=fps)

        landmarks = self._face_tracker.process_frame(frame.image)

        result = self.process_landmarks(landmarks, frame.timestamp_ms)
        result.fps = fps
        result.frame = frame.image
        return result

    def process_landmarks(self, landmarks: LandmarkSet, now_ms: float) -> FrameProcessingResult:
        """
        Run one frame's landmarks through the pipeline and publish to sinks.

        Args:
            landmarks: Face landmark set for the frame (empty if no face)
            now_ms: Frame timestamp in milliseconds

        Returns:
            FrameProcessingResult

        Raises:
            TransferError: If the transfer configuration or screen size is invalid
        """
        tracking = self._config.tracking
        result = FrameProcessingResult(
            success=False,
            face_detected=landmark_count(landmarks) > 0,
        )

        self._gaze_estimator.use_one_eye = tracking.use_one_eye
        gaze = self._gaze_estimator.estimate(landmarks)

        if not gaze.has_signal:
            self._handle_signal_lost()
            return result

        if self._state_machine.update_signal(True):
            logger.info("Eyes found")

        result.gaze = gaze

        point = map_to_screen(
            gaze,
            tracking.transfer,
            self._screen_width,
            self._screen_height,
        )
        result.screen_point = point
        self._last_point = point

        if tracking.blink_click_enabled:
            self._blink_detector.blink_threshold = tracking.blink_threshold
            result.clicked = self._blink_detector.process(gaze.raw_eye_area, now_ms)

        self._publish_overlay(point)

        if self._cursor_active:
            self._cursor.move_to(*point.to_pixels())
            if result.clicked:
                self._cursor.click()

        if self._log_throttle.ready(now_ms / 1000.0):
            logger.info(
                f"Eye: ({point.x:.0f}, {point.y:.0f}) | Area: {gaze.eye_area:.4f} | "
                f"Pos: ({gaze.eye_position_x:.2f}, {gaze.eye_position_y:.2f})"
            )

        result.success = True
        return result

    @property
    def _cursor_active(self) -> bool:
        return (
            self._cursor is not None
            and self._tracking_enabled
            and self._state_machine.current_state == AppState.TRACKING
        )

    def _handle_signal_lost(self):
        """No eyes this frame: hide pointer, keep cursor, recalibrate blinks."""
        if self._state_machine.update_signal(False):
            logger.info("Eyes lost, hiding pointer")

        self._blink_detector.reset()
        self._last_point = ScreenPoint.HIDDEN
        self._publish_overlay(ScreenPoint.HIDDEN)

    def _publish_overlay(self, point: ScreenPoint):
        if self._overlay is not None:
            self._overlay.show_pointer(point)

    # Settings

    def update_transfer(self, **values: float):
        """
        Change transfer function values; applied from the next frame.

        Raises:
            ValueError: On unknown names or non-finite values
        """
        self._config.tracking.transfer.update(**values)
        logger.debug(f"Transfer settings updated: {values}")

    def set_use_one_eye(self, use_one_eye: bool):
        """Switch between one-eye and two-eye tracking."""
        self._config.tracking.use_one_eye = bool(use_one_eye)

    def set_blink_threshold(self, threshold: float):
        """
        Change the blink threshold.

        Raises:
            ValueError: If outside the accepted range
        """
        self._config.tracking.blink_threshold = validate_blink_threshold(threshold)
        logger.debug(f"Blink threshold updated: {threshold:.2f}")

    def set_blink_click_enabled(self, enabled: bool):
        """Enable or disable clicking by blinking."""
        self._config.tracking.blink_click_enabled = bool(enabled)
        if not enabled:
            self._blink_detector.reset()

    def load_settings(self) -> bool:
        """Apply saved settings, if any, to the live configuration."""
        if self._settings_store is None:
            return False

        try:
            settings = self._settings_store.load()
            if settings is None:
                return False
            settings.apply_to(self._config.tracking)
        except (SettingsStoreError, ValueError) as e:
            logger.error(f"Failed to load settings: {e}")
            return False

        logger.info("Saved settings applied")
        return True

    def save_settings(self) -> bool:
        """Persist the live tracking configuration."""
        if self._settings_store is None:
            return False

        try:
            self._settings_store.save(SettingsData.from_config(self._config.tracking))
        except SettingsStoreError as e:
            logger.error(f"Failed to save settings: {e}")
            return False

        return True

    def update_screen_size(self, width: int, height: int):
        """Update target screen dimensions."""
        self._screen_width = width
        self._screen_height = height
        logger.info(f"Screen size updated: {width}x{height}")

    # Safety toggles

    def enable_tracking(self):
        """Enable cursor tracking (safety control)."""
        self._tracking_enabled = True
        logger.info("Cursor tracking enabled")

    def disable_tracking(self):
        """Disable cursor tracking (safety control)."""
        self._tracking_enabled = False
        logger.info("Cursor tracking disabled")

    def toggle_tracking(self) -> bool:
        """
        Toggle tracking enabled state.

        Returns:
            New tracking state (True = enabled)
        """
        self._tracking_enabled = not self._tracking_enabled
        state_str = "enabled" if self._tracking_enabled else "disabled"
        logger.info(f"Cursor tracking toggled: {state_str}")
        return self._tracking_enabled

    def is_tracking_enabled(self) -> bool:
        """Check if tracking is currently enabled."""
        return self._tracking_enabled

    def shutdown(self):
        """Clean shutdown of all components."""
        logger.info("Shutting down controller")

        if self._camera is not None and self._camera.is_open:
            self._camera.close()

        if self._face_tracker is not None:
            self._face_tracker.close()

        if self._cursor is not None:
            self._cursor.disable()

        self._publish_overlay(ScreenPoint.HIDDEN)
        self._state_machine.reset()

    # Properties
    @property
    def state(self) -> AppState:
        """Get current application state."""
        return self._state_machine.current_state

    @property
    def error(self) -> Optional[ErrorInfo]:
        """Get error information if in ERROR state."""
        return self._state_machine.error

    @property
    def blink_detector(self) -> BlinkDetector:
        """The blink detector owned by this pipeline."""
        return self._blink_detector

    @property
    def last_point(self) -> ScreenPoint:
        """Last published pointer position (HIDDEN when no signal)."""
        return self._last_point

    @property
    def has_signal(self) -> bool:
        """Whether the last frame resolved an eye."""
        return self._state_machine.has_signal

    @property
    def fps(self) -> float:
        """Get current processing FPS."""
        return self._fps_counter.fps
