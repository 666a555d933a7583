"""
Tests for settings schema, validation and storage.
"""

import json

import pytest
from datetime import datetime

from gazepoint.core.config import StorageConfig, TrackingConfig, TransferConfig
from gazepoint.storage.schema import SettingsData, SCHEMA_VERSION
from gazepoint.storage.settings_store import SettingsStore, SettingsStoreError


class TestSettingsData:
    """Tests for SettingsData."""

    def test_defaults(self):
        """Test that defaults are filled in and valid."""
        settings = SettingsData()

        assert settings.version == SCHEMA_VERSION
        assert settings.transfer == TransferConfig().to_dict()
        assert settings.blink_threshold == 0.3
        assert settings.validate() is True

    def test_timestamp_auto_generated(self):
        """Test that timestamp is auto-generated if not provided."""
        settings = SettingsData()

        datetime.fromisoformat(settings.timestamp)

    def test_invalid_timestamp(self):
        """Test that a malformed timestamp is rejected."""
        settings = SettingsData(timestamp="yesterday")

        with pytest.raises(ValueError, match="Invalid timestamp format"):
            settings.validate()

    def test_missing_version(self):
        settings = SettingsData(version="")

        with pytest.raises(ValueError, match="Missing version"):
            settings.validate()

    def test_unknown_transfer_key(self):
        """Test that unknown transfer names are rejected."""
        settings = SettingsData(transfer={"warp_factor": 9.0})

        with pytest.raises(ValueError, match="Invalid transfer settings"):
            settings.validate()

    def test_non_finite_transfer_value(self):
        transfer = TransferConfig().to_dict()
        transfer["distance_y_multiplier"] = float("inf")
        settings = SettingsData(transfer=transfer)

        with pytest.raises(ValueError, match="distance_y_multiplier"):
            settings.validate()

    def test_negative_transfer_values_allowed(self):
        """Negative multipliers are valid settings."""
        transfer = TransferConfig(x_movement_multiplier=-3.0, eye_position_y_effect=-0.5).to_dict()

        assert SettingsData(transfer=transfer).validate() is True

    @pytest.mark.parametrize("threshold", [0.0, 0.04, 0.81, "high"])
    def test_blink_threshold_out_of_range(self, threshold):
        settings = SettingsData(blink_threshold=threshold)

        with pytest.raises(ValueError, match="blink_threshold"):
            settings.validate()

    def test_non_bool_flags(self):
        with pytest.raises(ValueError, match="use_one_eye"):
            SettingsData(use_one_eye="yes").validate()

        with pytest.raises(ValueError, match="blink_click_enabled"):
            SettingsData(blink_click_enabled=1).validate()

    def test_serialization(self):
        """Test to_dict and from_dict."""
        settings = SettingsData(
            transfer=TransferConfig(y_movement_multiplier=2.5).to_dict(),
            blink_threshold=0.45,
            use_one_eye=True,
            blink_click_enabled=False,
        )

        data_dict = settings.to_dict()

        assert data_dict["version"] == SCHEMA_VERSION
        assert data_dict["transfer"]["y_movement_multiplier"] == 2.5
        assert data_dict["use_one_eye"] is True

        restored = SettingsData.from_dict(data_dict)

        assert restored == settings

    def test_from_dict_fills_missing_transfer_keys(self):
        """Older files without every transfer key still load."""
        restored = SettingsData.from_dict({"transfer": {"x_movement_multiplier": 0.5}})

        assert restored.transfer["x_movement_multiplier"] == 0.5
        assert restored.transfer["distance_x_multiplier"] == 1.0
        assert restored.validate() is True

    def test_from_config_and_apply(self):
        """Test snapshotting a live config and applying it to another."""
        source = TrackingConfig(blink_threshold=0.6, use_one_eye=True)
        source.transfer.eye_position_x_multiplier = 4.0

        target = TrackingConfig()
        SettingsData.from_config(source).apply_to(target)

        assert target.transfer == source.transfer
        assert target.blink_threshold == 0.6
        assert target.use_one_eye is True
        assert target.transfer is not source.transfer

    def test_apply_invalid_leaves_config_untouched(self):
        target = TrackingConfig()
        transfer = TransferConfig(x_movement_multiplier=5.0).to_dict()
        settings = SettingsData(transfer=transfer, blink_threshold=2.0)

        with pytest.raises(ValueError):
            settings.apply_to(target)

        assert target.transfer.x_movement_multiplier == 1.0
        assert target.blink_threshold == 0.3


class TestSettingsStore:
    """Tests for SettingsStore."""

    @pytest.fixture
    def store(self, tmp_path):
        return SettingsStore(StorageConfig(data_dir=tmp_path / "store"))

    def test_load_missing(self, store):
        assert store.exists() is False
        assert store.load() is None

    def test_save_and_load(self, store):
        settings = SettingsData(
            transfer=TransferConfig(distance_x_multiplier=-1.5).to_dict(),
            blink_threshold=0.25,
        )

        assert store.save(settings) is True
        assert store.exists()

        loaded = store.load()

        assert loaded == settings

    def test_file_is_json(self, store):
        store.save(SettingsData())

        with open(store.path, "r", encoding="utf-8") as f:
            data = json.load(f)

        assert data["version"] == SCHEMA_VERSION
        assert set(data["transfer"]) == set(TransferConfig().to_dict())

    def test_no_temp_file_left(self, store):
        store.save(SettingsData())

        assert not store.path.with_suffix(".tmp").exists()

    def test_save_invalid(self, store):
        with pytest.raises(SettingsStoreError):
            store.save(SettingsData(blink_threshold=5.0))

        assert not store.exists()

    def test_corrupted_file(self, store):
        store.path.write_text("{broken", encoding="utf-8")

        with pytest.raises(SettingsStoreError, match="Corrupted"):
            store.load()

    def test_non_object_file(self, store):
        store.path.write_text("[1, 2, 3]", encoding="utf-8")

        with pytest.raises(SettingsStoreError, match="Invalid settings data"):
            store.load()

    def test_invalid_values_in_file(self, store):
        store.path.write_text(json.dumps({"blink_threshold": 0.99}), encoding="utf-8")

        with pytest.raises(SettingsStoreError, match="blink_threshold"):
            store.load()

    def test_delete(self, store):
        assert store.delete() is False

        store.save(SettingsData())

        assert store.delete() is True
        assert not store.exists()

    def test_unsafe_filename(self, tmp_path):
        config = StorageConfig(data_dir=tmp_path / "store", settings_filename="../escape.json")

        with pytest.raises(SettingsStoreError, match="Path traversal"):
            SettingsStore(config)
