"""
Tests for logging setup and timing helpers.
"""

import logging

from gazepoint.core.config import AppConfig, StorageConfig
from gazepoint.utils.logger import configure_logging, get_logger, setup_logger
from gazepoint.utils.timing import FPSCounter, LogThrottle


class TestLogger:
    """Tests for logger setup."""

    def test_setup_is_idempotent(self):
        logger = setup_logger("gazepoint.test.idempotent", level="INFO")
        again = setup_logger("gazepoint.test.idempotent", level="DEBUG")

        assert logger is again
        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG

    def test_unknown_level_falls_back_to_warning(self):
        logger = setup_logger("gazepoint.test.level", level="LOUD")

        assert logger.level == logging.WARNING

    def test_file_logging(self, tmp_path):
        config = AppConfig(
            storage=StorageConfig(data_dir=tmp_path, enable_file_logging=True),
            log_level="INFO",
        )
        logger = setup_logger(
            "gazepoint.test.file",
            level=config.log_level,
            log_file=config.storage.log_path,
            enable_file_logging=True,
        )

        logger.info("hello")
        for handler in logger.handlers:
            handler.flush()

        assert "hello" in config.storage.log_path.read_text(encoding="utf-8")

        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)

    def test_configure_logging_uses_config_level(self, tmp_path):
        config = AppConfig(storage=StorageConfig(data_dir=tmp_path), log_level="ERROR")

        logger = configure_logging(config)

        assert logger.name == "gazepoint"
        assert logger.level == logging.ERROR
        assert get_logger("gazepoint.vision.camera").getEffectiveLevel() == logging.ERROR


class TestLogThrottle:
    """Tests for LogThrottle."""

    def test_first_call_passes(self):
        assert LogThrottle(1.0).ready(10.0)

    def test_interval(self):
        throttle = LogThrottle(1.0)

        assert throttle.ready(0.0)
        assert not throttle.ready(0.5)
        assert throttle.ready(1.0)
        assert not throttle.ready(1.9)


class TestFPSCounter:
    """Tests for FPSCounter."""

    def test_no_frames(self):
        assert FPSCounter().fps == 0.0

    def test_reset(self):
        counter = FPSCounter()
        counter.tick()
        counter.tick()

        counter.reset()

        assert counter.fps == 0.0
