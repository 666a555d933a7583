"""
Custom GUI widgets for GazePoint.
"""

from PyQt6.QtWidgets import QWidget, QApplication, QDoubleSpinBox
from PyQt6.QtCore import Qt, QPointF, pyqtSignal, pyqtSlot
from PyQt6.QtGui import QImage, QPixmap, QPainter, QPen, QColor
import numpy as np

from gazepoint.vision.gaze_estimator import GazeSample
from gazepoint.vision.transfer import ScreenPoint


class PointerOverlay(QWidget):
    """
    Full-screen, transparent, click-through window drawing the gaze pointer.

    show_pointer() may be called from the worker thread: it only emits a
    signal, and the repaint happens on the UI thread.
    """

    pointer_moved = pyqtSignal(float, float)

    def __init__(self, radius: int = 14, color: str = "#2196f3", parent=None):
        """
        Initialize overlay.

        Args:
            radius: Pointer dot radius (pixels)
            color: Pointer dot color
            parent: Parent widget
        """
        super().__init__(parent)

        self.setWindowFlags(
            Qt.WindowType.Window
            | Qt.WindowType.FramelessWindowHint
            | Qt.WindowType.WindowStaysOnTopHint
            | Qt.WindowType.Tool
            | Qt.WindowType.WindowTransparentForInput
        )
        self.setAttribute(Qt.WidgetAttribute.WA_TranslucentBackground)
        self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents)
        self.setAttribute(Qt.WidgetAttribute.WA_ShowWithoutActivating)

        screen = QApplication.primaryScreen()
        if screen is not None:
            self.setGeometry(screen.geometry())

        self._radius = radius
        self._color = QColor(color)
        self._point: ScreenPoint = ScreenPoint.HIDDEN

        self.pointer_moved.connect(self._apply_pointer)

    def show_pointer(self, point: ScreenPoint):
        """Move the pointer dot; ScreenPoint.HIDDEN hides it."""
        self.pointer_moved.emit(point.x, point.y)

    @pyqtSlot(float, float)
    def _apply_pointer(self, x: float, y: float):
        self._point = ScreenPoint(x, y)
        self.update()

    @property
    def pointer(self) -> ScreenPoint:
        """Last pointer position shown."""
        return self._point

    def paintEvent(self, event):
        """Paint the pointer dot."""
        if self._point.is_hidden:
            return

        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        fill = QColor(self._color)
        fill.setAlpha(140)
        painter.setBrush(fill)
        painter.setPen(QPen(self._color, 2))

        x, y = self._point.to_pixels()
        painter.drawEllipse(
            x - self._radius,
            y - self._radius,
            self._radius * 2,
            self._radius * 2,
        )


class SettingSpinBox(QDoubleSpinBox):
    """Spin box for one tuning value, stepping by 0.1."""

    def __init__(self, value: float, minimum: float = -10.0, maximum: float = 10.0, parent=None):
        super().__init__(parent)
        self.setRange(minimum, maximum)
        self.setSingleStep(0.1)
        self.setDecimals(2)
        self.setValue(value)
        self.setKeyboardTracking(False)


class CameraPreviewWidget(QWidget):
    """
    Camera preview with the tracked eye regions and gaze point drawn on top.

    Privacy: Only displays in-memory frames, never saves to disk.
    """

    LEFT_EYE_COLOR = QColor(76, 175, 80)
    RIGHT_EYE_COLOR = QColor(33, 150, 243)
    GAZE_COLOR = QColor(255, 193, 7)

    def __init__(self, width: int = 320, height: int = 240, parent=None):
        """
        Initialize preview widget.

        Args:
            width: Preview width
            height: Preview height
            parent: Parent widget
        """
        super().__init__(parent)

        self._preview_width = width
        self._preview_height = height

        self.setFixedSize(width, height)
        self.setStyleSheet("background-color: black;")

        self._current_pixmap: QPixmap = None

    def update_frame(self, frame: np.ndarray, gaze: GazeSample = None):
        """
        Show a new RGB frame (H, W, 3), annotated with gaze if given.
        """
        if frame is None or frame.size == 0:
            return

        height, width, channels = frame.shape
        image = QImage(
            frame.data,
            width,
            height,
            channels * width,
            QImage.Format.Format_RGB888,
        ).copy()

        if gaze is not None and gaze.has_signal:
            self._draw_gaze(image, gaze)

        scaled_image = image.scaled(
            self._preview_width,
            self._preview_height,
            Qt.AspectRatioMode.KeepAspectRatio,
            Qt.TransformationMode.SmoothTransformation,
        )

        self._current_pixmap = QPixmap.fromImage(scaled_image)
        self.update()

    def clear(self):
        """Drop the last frame (camera stopped)."""
        self._current_pixmap = None
        self.update()

    def _draw_gaze(self, image: QImage, gaze: GazeSample):
        width, height = image.width(), image.height()

        painter = QPainter(image)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        for region, color in (
            (gaze.left_region, self.LEFT_EYE_COLOR),
            (gaze.right_region, self.RIGHT_EYE_COLOR),
        ):
            if region is None:
                continue
            painter.setPen(QPen(color, 2))
            painter.drawRect(*region.to_pixel_rect(width, height))

        painter.setPen(QPen(self.GAZE_COLOR, 2))
        painter.setBrush(self.GAZE_COLOR)
        gx, gy = gaze.gaze_point
        painter.drawEllipse(QPointF(gx * width, gy * height), 4.0, 4.0)

        painter.end()

    def paintEvent(self, event):
        """Paint the preview."""
        painter = QPainter(self)

        if self._current_pixmap:
            x = (self.width() - self._current_pixmap.width()) // 2
            y = (self.height() - self._current_pixmap.height()) // 2
            painter.drawPixmap(x, y, self._current_pixmap)
        else:
            painter.setPen(QColor(128, 128, 128))
            painter.drawText(self.rect(), Qt.AlignmentFlag.AlignCenter, "No Camera Feed")
