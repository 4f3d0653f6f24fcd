#!/usr/bin/env python3
"""
Slide Restore entry point.

Sets up logging, builds the service container and opens the editor window.
"""
import logging
import sys

from PySide6.QtWidgets import QApplication

from slide_restore.application.app import get_container
from slide_restore.presentation.main_window import MainWindow
from slide_restore.utils.logging_config import setup_logging


def main() -> int:
    setup_logging(logging.INFO)

    app = QApplication(sys.argv)
    app.setApplicationName("Slide Restore")

    window = MainWindow(get_container())
    window.show()
    window.ensure_api_key()

    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
