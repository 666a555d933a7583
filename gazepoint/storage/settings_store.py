"""
Tracking settings storage.

Privacy & Security:
- Local-only storage (no network)
- Path traversal protection
- Schema validation
- Safe JSON serialization
"""

import json
from pathlib import Path
from typing import Optional

from gazepoint.core.config import StorageConfig
from gazepoint.storage.schema import SettingsData
from gazepoint.utils.logger import get_logger

logger = get_logger(__name__)


class SettingsStoreError(Exception):
    """Settings storage errors."""

    pass


class SettingsStore:
    """
    JSON file storage for tracking settings.

    The file layout is an implementation detail; only SettingsData is
    exchanged with callers.
    """

    def __init__(self, config: StorageConfig):
        """
        Initialize settings store.

        Args:
            config: Storage configuration

        Raises:
            SettingsStoreError: If storage path is invalid
        """
        try:
            self._data_dir = config.data_dir.resolve(strict=False)
            self._data_dir.mkdir(parents=True, exist_ok=True)
        except (RuntimeError, OSError) as e:
            raise SettingsStoreError(f"Invalid storage path: {e}")

        self._settings_path = self._data_dir / config.settings_filename

        if not self._is_safe_path(self._settings_path):
            raise SettingsStoreError("Path traversal detected")

        logger.info(f"SettingsStore initialized: {self._settings_path}")

    def save(self, settings: SettingsData) -> bool:
        """
        Save settings to disk.

        Returns:
            True if successful

        Raises:
            SettingsStoreError: If validation or writing fails
        """
        try:
            settings.validate()

            # Write to temporary file first, then replace atomically
            temp_path = self._settings_path.with_suffix(".tmp")

            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(settings.to_dict(), f, indent=2, ensure_ascii=False)

            temp_path.replace(self._settings_path)

        except (OSError, ValueError, TypeError) as e:
            error_msg = f"Failed to save settings: {e}"
            logger.error(error_msg)
            raise SettingsStoreError(error_msg) from e

        logger.info("Settings saved")
        return True

    def load(self) -> Optional[SettingsData]:
        """
        Load settings from disk.

        Returns:
            SettingsData if found, None if no file exists

        Raises:
            SettingsStoreError: If the file is corrupted or invalid
        """
        if not self._settings_path.exists():
            logger.info("No saved settings found")
            return None

        try:
            with open(self._settings_path, "r", encoding="utf-8") as f:
                data_dict = json.load(f)

            if not isinstance(data_dict, dict):
                raise ValueError("settings file must contain a JSON object")

            settings = SettingsData.from_dict(data_dict)
            settings.validate()

        except json.JSONDecodeError as e:
            error_msg = f"Corrupted settings file: {e}"
            logger.error(error_msg)
            raise SettingsStoreError(error_msg) from e

        except (ValueError, TypeError) as e:
            error_msg = f"Invalid settings data: {e}"
            logger.error(error_msg)
            raise SettingsStoreError(error_msg) from e

        except OSError as e:
            error_msg = f"Failed to load settings: {e}"
            logger.error(error_msg)
            raise SettingsStoreError(error_msg) from e

        logger.info("Settings loaded")
        return settings

    def delete(self) -> bool:
        """
        Delete saved settings.

        Returns:
            True if deleted, False if no file existed
        """
        if not self._settings_path.exists():
            logger.info("No settings to delete")
            return False

        try:
            self._settings_path.unlink()
        except OSError as e:
            logger.error(f"Failed to delete settings: {e}")
            raise SettingsStoreError(f"Failed to delete settings: {e}") from e

        logger.info("Settings deleted")
        return True

    def exists(self) -> bool:
        """Check if saved settings exist."""
        return self._settings_path.exists()

    @property
    def path(self) -> Path:
        """Location of the settings file."""
        return self._settings_path

    def _is_safe_path(self, path: Path) -> bool:
        """Check that path stays within the data directory."""
        try:
            return path.resolve(strict=False).parent == self._data_dir
        except (RuntimeError, OSError):
            return False
