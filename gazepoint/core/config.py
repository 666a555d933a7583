"""
Configuration management for GazePoint.

All application configuration with sensible defaults.
Uses dataclasses for type safety and validation.

Tracking values (transfer multipliers, blink threshold, one-eye mode) are
mutable at runtime; the pipeline reads them fresh on every frame.
"""

from dataclasses import dataclass, field, fields
import math
import os
from pathlib import Path


# Accepted range for the blink threshold (fractional drop in eye area)
BLINK_THRESHOLD_MIN = 0.05
BLINK_THRESHOLD_MAX = 0.8


@dataclass
class CameraConfig:
    """Camera capture configuration."""

    camera_index: int = 0  # Default camera
    frame_width: int = 640  # Balance between quality and performance
    frame_height: int = 480
    target_fps: int = 30  # Smooth but not excessive CPU usage
    warmup_frames: int = 10  # Frames to skip after camera init


@dataclass
class TransferConfig:
    """
    Gaze-to-screen transfer function parameters.

    Every value may be any finite float. Negative values are allowed and
    flip or compress the corresponding axis.
    """

    # Overall X/Y range
    x_movement_multiplier: float = 1.0
    y_movement_multiplier: float = 1.0

    # Eye position range amplification: 1 + effect * multiplier
    eye_position_x_effect: float = 1.0
    eye_position_x_multiplier: float = 1.0
    eye_position_y_effect: float = 1.0
    eye_position_y_multiplier: float = 1.0

    # Distance (eye area) range amplification: 1 + eye_area * multiplier
    distance_x_multiplier: float = 1.0
    distance_y_multiplier: float = 1.0

    def validate(self):
        """Raise ValueError if any value is not a finite number."""
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"{f.name} must be a number")
            if not math.isfinite(value):
                raise ValueError(f"{f.name} must be finite")

    def update(self, **values: float):
        """
        Update named values in place.

        Raises:
            ValueError: On unknown names or non-finite values. Nothing is
                changed if any value is rejected.
        """
        names = {f.name for f in fields(self)}
        unknown = set(values) - names
        if unknown:
            raise ValueError(f"Unknown transfer setting(s): {', '.join(sorted(unknown))}")

        candidate = TransferConfig(**{**self.to_dict(), **values})
        candidate.validate()

        for name, value in values.items():
            setattr(self, name, float(value))

    def to_dict(self) -> dict:
        """Plain dict of all values."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def neutral(cls) -> "TransferConfig":
        """Identity mapping: unit gain, no position or distance effects."""
        return cls(
            eye_position_x_effect=0.0,
            eye_position_y_effect=0.0,
            distance_x_multiplier=0.0,
            distance_y_multiplier=0.0,
        )


@dataclass
class TrackingConfig:
    """Gaze tracking and click configuration."""

    transfer: TransferConfig = field(default_factory=TransferConfig)

    # Fractional drop in eye area that counts as "closed"
    blink_threshold: float = 0.3

    # Track the right eye (on-screen left) only
    use_one_eye: bool = False

    # Emit clicks on detected blinks
    blink_click_enabled: bool = True

    # Minimum confidence threshold for face detection
    min_face_confidence: float = 0.5


@dataclass
class StorageConfig:
    """Data storage configuration."""

    # User data directory (where settings are stored)
    data_dir: Path = field(default_factory=lambda: Path.home() / ".gazepoint")

    # Settings filename
    settings_filename: str = "settings.json"

    # Log filename (optional, off by default)
    log_filename: str = "gazepoint.log"

    # Enable file logging (OFF by default for privacy)
    enable_file_logging: bool = False

    def __post_init__(self):
        """Ensure data directory exists."""
        self.data_dir = Path(self.data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

        # Validate path to prevent directory traversal
        try:
            self.data_dir.resolve(strict=True)
        except (RuntimeError, OSError) as e:
            raise ValueError(f"Invalid data directory path: {e}")

    @property
    def settings_path(self) -> Path:
        """Get full path to settings file."""
        return self.data_dir / self.settings_filename

    @property
    def log_path(self) -> Path:
        """Get full path to log file."""
        return self.data_dir / self.log_filename


@dataclass
class UIConfig:
    """User interface configuration."""

    window_title: str = "GazePoint - Hands-free Pointer"
    window_width: int = 420
    window_height: int = 820

    # Camera preview with eye overlays
    preview_width: int = 320
    preview_height: int = 240

    # Pointer overlay dot
    pointer_radius: int = 14
    pointer_color: str = "#2196f3"

    # UI spacing and padding
    content_margin: int = 15
    group_spacing: int = 10

    # Emergency stop keyboard shortcut
    toggle_shortcut: str = "Space"


@dataclass
class AppConfig:
    """Main application configuration."""

    camera: CameraConfig = field(default_factory=CameraConfig)
    tracking: TrackingConfig = field(default_factory=TrackingConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    ui: UIConfig = field(default_factory=UIConfig)

    # Application version
    version: str = "0.1.0"

    # Log level from environment or default to WARNING
    log_level: str = field(
        default_factory=lambda: os.getenv("GAZEPOINT_LOG_LEVEL", "WARNING")
    )

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self):
        """Validate configuration parameters."""
        self.tracking.transfer.validate()

        validate_blink_threshold(self.tracking.blink_threshold)

        if not 0.0 <= self.tracking.min_face_confidence <= 1.0:
            raise ValueError("min_face_confidence must be between 0.0 and 1.0")

        # Camera config validation
        if self.camera.target_fps < 1 or self.camera.target_fps > 60:
            raise ValueError("target_fps must be between 1 and 60")


def validate_blink_threshold(value: float) -> float:
    """
    Check a blink threshold against the accepted range.

    Returns:
        The value as float

    Raises:
        ValueError: If outside [BLINK_THRESHOLD_MIN, BLINK_THRESHOLD_MAX]
    """
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"blink_threshold must be a number, got {value!r}")

    if not BLINK_THRESHOLD_MIN <= value <= BLINK_THRESHOLD_MAX:
        raise ValueError(
            f"blink_threshold must be between {BLINK_THRESHOLD_MIN} and {BLINK_THRESHOLD_MAX}"
        )
    return value


def get_default_config() -> AppConfig:
    """
    Get default application configuration.

    Returns:
        AppConfig instance with default values
    """
    return AppConfig()
