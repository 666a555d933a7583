"""
GazePoint - Hands-free pointer control

Main entry point.

Usage:
    python -m gazepoint.main
"""

import sys
from PyQt6.QtWidgets import QApplication

from gazepoint.core.config import get_default_config
from gazepoint.gui.app_window import MainWindow
from gazepoint.utils.logger import configure_logging, get_logger


def main():
    """Main entry point."""

    config = get_default_config()

    configure_logging(config)

    logger = get_logger(__name__)
    logger.info("=" * 60)
    logger.info("GazePoint Starting")
    logger.info(f"Version: {config.version}")
    logger.info("=" * 60)

    app = QApplication(sys.argv)
    app.setApplicationName("GazePoint")
    app.setApplicationVersion(config.version)

    window = MainWindow(config)
    window.show()

    exit_code = app.exec()

    logger.info("Application exiting")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
