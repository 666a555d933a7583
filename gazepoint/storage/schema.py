"""
Persisted tracking settings schema and validation.

Privacy: Only stores numeric tuning parameters,
no biometric data, no images, no personal information.
"""

from dataclasses import dataclass, field
from typing import Dict, Any
from datetime import datetime

from gazepoint.core.config import (
    TrackingConfig,
    TransferConfig,
    validate_blink_threshold,
)
from gazepoint.utils.logger import get_logger

logger = get_logger(__name__)


SCHEMA_VERSION = "1.0"


@dataclass
class SettingsData:
    """
    User-tunable tracking settings as stored on disk.

    Privacy: Contains only numeric mapping parameters and flags.
    """

    # Schema version for future compatibility
    version: str = SCHEMA_VERSION

    # Time the settings were saved
    timestamp: str = ""

    # Transfer function values, keyed by TransferConfig field name
    transfer: Dict[str, float] = field(default_factory=dict)

    blink_threshold: float = 0.3
    use_one_eye: bool = False
    blink_click_enabled: bool = True

    def __post_init__(self):
        """Initialize default values."""
        if not self.transfer:
            self.transfer = TransferConfig().to_dict()

        if not self.timestamp:
            self.timestamp = datetime.now().isoformat()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "version": self.version,
            "timestamp": self.timestamp,
            "transfer": dict(self.transfer),
            "blink_threshold": self.blink_threshold,
            "use_one_eye": self.use_one_eye,
            "blink_click_enabled": self.blink_click_enabled,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SettingsData":
        """Create from dictionary. Missing transfer keys take defaults."""
        transfer = TransferConfig().to_dict()
        transfer.update(data.get("transfer", {}))

        return cls(
            version=data.get("version", SCHEMA_VERSION),
            timestamp=data.get("timestamp", ""),
            transfer=transfer,
            blink_threshold=data.get("blink_threshold", 0.3),
            use_one_eye=data.get("use_one_eye", False),
            blink_click_enabled=data.get("blink_click_enabled", True),
        )

    @classmethod
    def from_config(cls, config: TrackingConfig) -> "SettingsData":
        """Snapshot the live tracking configuration."""
        return cls(
            transfer=config.transfer.to_dict(),
            blink_threshold=config.blink_threshold,
            use_one_eye=config.use_one_eye,
            blink_click_enabled=config.blink_click_enabled,
        )

    def apply_to(self, config: TrackingConfig):
        """
        Copy these settings into a live tracking configuration.

        Validates first; the configuration is untouched on error.
        """
        self.validate()

        config.transfer.update(**self.transfer)
        config.blink_threshold = float(self.blink_threshold)
        config.use_one_eye = bool(self.use_one_eye)
        config.blink_click_enabled = bool(self.blink_click_enabled)

    def validate(self) -> bool:
        """
        Validate settings data.

        Returns:
            True if valid, raises ValueError if invalid
        """
        if not self.version:
            raise ValueError("Missing version")

        try:
            TransferConfig(**self.transfer).validate()
        except TypeError as e:
            raise ValueError(f"Invalid transfer settings: {e}")

        validate_blink_threshold(self.blink_threshold)

        if not isinstance(self.use_one_eye, bool):
            raise ValueError("use_one_eye must be a boolean")

        if not isinstance(self.blink_click_enabled, bool):
            raise ValueError("blink_click_enabled must be a boolean")

        try:
            datetime.fromisoformat(self.timestamp)
        except ValueError:
            raise ValueError("Invalid timestamp format")

        logger.debug("Settings data validated")
        return True
