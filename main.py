"""
TimeLog — personal activity-time tracker
Entry point for the application.
"""

import faulthandler
import logging
import sys
from pathlib import Path

faulthandler.enable()

# Ensure the timelog package is importable when run from another directory
sys.path.insert(0, str(Path(__file__).resolve().parent))

from PySide6.QtWidgets import QApplication

from timelog.config import load_config
from timelog.ui.main_window import MainWindow
from timelog.ui.styles import DARK_STYLESHEET


def setup_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler("timelog.log", encoding="utf-8"),
        ],
    )


def main() -> None:
    setup_logging()
    logger = logging.getLogger(__name__)
    logger.info("Starting TimeLog...")

    app = QApplication(sys.argv)
    app.setApplicationName("TimeLog")
    app.setOrganizationName("TimeLog")
    # Closing the main window hides it to the tray
    app.setQuitOnLastWindowClosed(False)

    app.setStyleSheet(DARK_STYLESHEET)

    window = MainWindow(load_config())
    window.show()

    logger.info("Application started.")
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
