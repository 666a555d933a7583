"""
Main application window with worker thread architecture.

Threading model:
- Main thread: UI event loop (PyQt6)
- Worker thread: Camera capture and processing
- Communication: Qt signals/slots
"""

import time

from PyQt6.QtWidgets import (
    QApplication,
    QMainWindow,
    QWidget,
    QVBoxLayout,
    QHBoxLayout,
    QFormLayout,
    QPushButton,
    QLabel,
    QGroupBox,
    QMessageBox,
    QCheckBox,
)
from PyQt6.QtCore import QThread, pyqtSignal
from PyQt6.QtGui import QKeySequence, QShortcut

from gazepoint.core.controller import Controller, FrameProcessingResult
from gazepoint.core.config import AppConfig, BLINK_THRESHOLD_MIN, BLINK_THRESHOLD_MAX
from gazepoint.core.state import AppState
from gazepoint.gui.widgets import CameraPreviewWidget, PointerOverlay, SettingSpinBox
from gazepoint.utils.logger import get_logger

logger = get_logger(__name__)


# (TransferConfig field, label)
TRANSFER_FIELDS = (
    ("x_movement_multiplier", "X movement"),
    ("y_movement_multiplier", "Y movement"),
    ("eye_position_x_effect", "Eye position X effect"),
    ("eye_position_x_multiplier", "Eye position X multiplier"),
    ("eye_position_y_effect", "Eye position Y effect"),
    ("eye_position_y_multiplier", "Eye position Y multiplier"),
    ("distance_x_multiplier", "Distance X multiplier"),
    ("distance_y_multiplier", "Distance Y multiplier"),
)


class ProcessingWorker(QThread):
    """
    Worker thread for camera processing.

    Runs the processing loop and emits signals to update UI.
    NEVER updates UI directly from this thread.
    """

    frame_processed = pyqtSignal(FrameProcessingResult)
    error_occurred = pyqtSignal(str)

    def __init__(self, controller: Controller, parent=None):
        super().__init__(parent)
        self._controller = controller
        self._running = False

    def run(self):
        """Worker thread main loop."""
        logger.info("Processing worker started")
        self._running = True

        try:
            while self._running:
                state = self._controller.state

                if state == AppState.TRACKING:
                    result = self._controller.process_frame()
                    self.frame_processed.emit(result)

                elif state == AppState.PAUSED:
                    time.sleep(0.03)

                else:
                    time.sleep(0.1)

        except Exception as e:
            logger.error(f"Worker thread error: {e}")
            self.error_occurred.emit(str(e))

        logger.info("Processing worker stopped")

    def stop(self):
        """Stop the worker thread."""
        self._running = False


def worker_needs_restart(worker: "ProcessingWorker") -> bool:
    """True if there is no worker or its loop has exited (e.g. after an error)."""
    return worker is None or not worker.isRunning()


class MainWindow(QMainWindow):
    """Main application window: tracking controls and tuning values."""

    def __init__(self, config: AppConfig):
        """
        Initialize main window.

        Args:
            config: Application configuration
        """
        super().__init__()

        self._config = config

        screen_geometry = QApplication.primaryScreen().geometry()
        self._screen_width = screen_geometry.width()
        self._screen_height = screen_geometry.height()

        logger.info(f"Screen size: {self._screen_width}x{self._screen_height}")

        self._overlay = PointerOverlay(
            radius=config.ui.pointer_radius,
            color=config.ui.pointer_color,
        )

        self._controller = Controller(
            config,
            self._screen_width,
            self._screen_height,
            overlay=self._overlay,
        )
        self._worker: ProcessingWorker = None

        self._init_ui()
        self._setup_keyboard_shortcuts()

        if self._controller.initialize():
            self._sync_settings_widgets()
            self._start_worker()
        else:
            QMessageBox.critical(
                self,
                "Initialization Error",
                "Failed to initialize GazePoint. Check that the camera is available "
                "and that the pointer can be controlled.",
            )

        self._update_button_states()

    def _setup_keyboard_shortcuts(self):
        """Emergency toggle for cursor control."""
        self._toggle_shortcut = QShortcut(QKeySequence(self._config.ui.toggle_shortcut), self)
        self._toggle_shortcut.activated.connect(self._on_toggle_tracking)

    def _init_ui(self):
        """Initialize UI components."""
        ui = self._config.ui
        self.setWindowTitle(ui.window_title)
        self.resize(ui.window_width, ui.window_height)

        central_widget = QWidget()
        self.setCentralWidget(central_widget)

        main_layout = QVBoxLayout(central_widget)
        main_layout.setContentsMargins(
            ui.content_margin, ui.content_margin, ui.content_margin, ui.content_margin
        )
        main_layout.setSpacing(ui.group_spacing)

        main_layout.addWidget(self._create_status_section())

        self._preview = CameraPreviewWidget(ui.preview_width, ui.preview_height)
        main_layout.addWidget(self._preview)

        main_layout.addWidget(self._create_controls_section())
        main_layout.addWidget(self._create_click_section())
        main_layout.addWidget(self._create_transfer_section())

        self._save_btn = QPushButton("Save Settings")
        self._save_btn.clicked.connect(self._on_save_clicked)
        main_layout.addWidget(self._save_btn)

        main_layout.addStretch()

    def _create_status_section(self) -> QWidget:
        container = QWidget()
        layout = QHBoxLayout(container)
        layout.setContentsMargins(0, 0, 0, 0)

        self._tracking_status_label = QLabel("Tracking: OFF")
        self._tracking_status_label.setStyleSheet("font-weight: bold; font-size: 14pt; color: #888;")

        self._face_label = QLabel("Eyes: -")
        self._face_label.setStyleSheet("color: #666;")

        self._fps_label = QLabel("FPS: 0.0")
        self._fps_label.setStyleSheet("color: #999; font-size: 9pt;")

        layout.addWidget(self._tracking_status_label)
        layout.addStretch()
        layout.addWidget(self._face_label)
        layout.addWidget(self._fps_label)

        return container

    def _create_controls_section(self) -> QWidget:
        container = QWidget()
        layout = QHBoxLayout(container)
        layout.setContentsMargins(0, 0, 0, 0)

        self._start_btn = QPushButton("Start")
        self._start_btn.clicked.connect(self._on_start_clicked)

        self._pause_btn = QPushButton("Pause")
        self._pause_btn.clicked.connect(self._on_pause_clicked)

        self._stop_btn = QPushButton("Stop")
        self._stop_btn.clicked.connect(self._on_stop_clicked)

        layout.addWidget(self._start_btn)
        layout.addWidget(self._pause_btn)
        layout.addWidget(self._stop_btn)

        return container

    def _create_click_section(self) -> QWidget:
        group = QGroupBox("Eyes && Clicks")
        layout = QFormLayout(group)

        tracking = self._config.tracking

        self._one_eye_check = QCheckBox("Use one eye")
        self._one_eye_check.setChecked(tracking.use_one_eye)
        self._one_eye_check.toggled.connect(self._controller.set_use_one_eye)
        layout.addRow(self._one_eye_check)

        self._blink_click_check = QCheckBox("Click by blinking")
        self._blink_click_check.setChecked(tracking.blink_click_enabled)
        self._blink_click_check.toggled.connect(self._controller.set_blink_click_enabled)
        layout.addRow(self._blink_click_check)

        self._blink_threshold_spin = SettingSpinBox(
            tracking.blink_threshold, BLINK_THRESHOLD_MIN, BLINK_THRESHOLD_MAX
        )
        self._blink_threshold_spin.setSingleStep(0.05)
        self._blink_threshold_spin.valueChanged.connect(self._controller.set_blink_threshold)
        layout.addRow("Blink threshold", self._blink_threshold_spin)

        return group

    def _create_transfer_section(self) -> QWidget:
        group = QGroupBox("Pointer Range")
        layout = QFormLayout(group)

        transfer = self._config.tracking.transfer
        self._transfer_spins = {}

        for name, label in TRANSFER_FIELDS:
            spin = SettingSpinBox(getattr(transfer, name))
            spin.valueChanged.connect(
                lambda value, name=name: self._controller.update_transfer(**{name: value})
            )
            self._transfer_spins[name] = spin
            layout.addRow(label, spin)

        return group

    def _sync_settings_widgets(self):
        """Show the values loaded from saved settings."""
        tracking = self._config.tracking

        self._one_eye_check.setChecked(tracking.use_one_eye)
        self._blink_click_check.setChecked(tracking.blink_click_enabled)
        self._blink_threshold_spin.setValue(tracking.blink_threshold)

        for name, spin in self._transfer_spins.items():
            spin.setValue(getattr(tracking.transfer, name))

    def _start_worker(self):
        """Start processing worker thread."""
        self._worker = ProcessingWorker(self._controller)
        self._worker.frame_processed.connect(self._on_frame_processed)
        self._worker.error_occurred.connect(self._on_worker_error)
        self._worker.start()

        logger.info("Worker thread started")

    def _on_start_clicked(self):
        if self._controller.start_tracking():
            if worker_needs_restart(self._worker):
                logger.info("Restarting processing worker")
                self._start_worker()
            self._overlay.show()
        elif self._controller.error is not None:
            QMessageBox.warning(self, "Cannot Start", self._controller.error.message)

        self._update_button_states()

    def _on_pause_clicked(self):
        if self._controller.state == AppState.TRACKING:
            self._controller.pause_tracking()
        elif self._controller.state == AppState.PAUSED:
            self._controller.resume_tracking()

        self._update_button_states()

    def _on_stop_clicked(self):
        self._controller.stop_tracking()
        self._overlay.hide()
        self._preview.clear()
        self._update_button_states()

    def _on_toggle_tracking(self):
        if self._controller.state == AppState.TRACKING:
            self._controller.toggle_tracking()
            self._update_tracking_status()

    def _on_save_clicked(self):
        if self._controller.save_settings():
            self.statusBar().showMessage("Settings saved", 3000)
        else:
            QMessageBox.warning(self, "Save Failed", "Settings could not be saved.")

    def _on_frame_processed(self, result: FrameProcessingResult):
        """Handle a frame result from the worker (main thread)."""
        self._fps_label.setText(f"FPS: {result.fps:.1f}")

        if result.frame is not None:
            self._preview.update_frame(result.frame, result.gaze)

        if result.gaze is not None:
            self._face_label.setText("Eyes: Tracking")
        elif result.face_detected:
            self._face_label.setText("Eyes: Not found")
        else:
            self._face_label.setText("Face: Not detected")

        if result.clicked:
            self.statusBar().showMessage("Blink click", 1000)

    def _on_worker_error(self, error_msg: str):
        logger.error(f"Worker error: {error_msg}")
        self._controller.stop_tracking()
        self._update_button_states()
        QMessageBox.critical(
            self,
            "Processing Error",
            f"An error occurred during processing:\n{error_msg}",
        )

    def _update_tracking_status(self):
        if self._controller.state == AppState.TRACKING and self._controller.is_tracking_enabled():
            self._tracking_status_label.setText("Tracking: ON")
            self._tracking_status_label.setStyleSheet("font-weight: bold; font-size: 14pt; color: #4caf50;")
        else:
            self._tracking_status_label.setText("Tracking: OFF")
            self._tracking_status_label.setStyleSheet("font-weight: bold; font-size: 14pt; color: #888;")

    def _update_button_states(self):
        state = self._controller.state

        self._start_btn.setEnabled(state == AppState.IDLE)
        self._pause_btn.setEnabled(state in (AppState.TRACKING, AppState.PAUSED))
        self._pause_btn.setText("Resume" if state == AppState.PAUSED else "Pause")
        self._stop_btn.setEnabled(state in (AppState.TRACKING, AppState.PAUSED))

        self._update_tracking_status()

    def closeEvent(self, event):
        """Handle window close event."""
        logger.info("Application closing")

        if self._worker:
            self._worker.stop()
            self._worker.wait(5000)

        self._controller.shutdown()
        self._overlay.close()

        event.accept()
