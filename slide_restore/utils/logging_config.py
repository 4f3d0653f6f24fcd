# slide_restore/utils/logging_config.py
"""
Centralized logging configuration for the entire application.
This should be called only once at application startup.
"""

import logging
import os
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from typing import Optional

from PySide6.QtCore import QObject, Signal

# Global flag to track if logging has been configured
_logging_configured = False

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(log_level: int = logging.INFO,
                  log_dir: Optional[str] = None) -> logging.Logger:
    """
    Configure logging for the entire application.

    Args:
        log_level: Console logging level (default: logging.INFO)
        log_dir: Directory for log files (default: ./logs)

    Returns:
        Configured root logger
    """
    global _logging_configured

    if _logging_configured:
        return logging.getLogger()

    if log_dir is None:
        log_dir = os.path.join(os.getcwd(), 'logs')
    os.makedirs(log_dir, exist_ok=True)

    current_date = datetime.now().strftime("%Y-%m-%d")
    log_file = os.path.join(log_dir, f"slide_restore_{current_date}.log")

    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)
    formatter = logging.Formatter(LOG_FORMAT)

    # Console handler at the requested level
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)

    # Rotating file handler keeps everything at DEBUG
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,  # 10 MB
        backupCount=5,
        encoding="utf-8"
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)

    # Clear existing handlers to prevent duplicate logging
    logger.handlers.clear()
    logger.addHandler(console_handler)
    logger.addHandler(file_handler)

    logger.info("Logging system initialized")
    _logging_configured = True
    return logger


class LogSignalEmitter(QObject):
    """
    Broadcasts log lines as Qt signals so the window can show them in the
    status bar.
    """

    info_logged = Signal(str)
    warning_logged = Signal(str)
    error_logged = Signal(str)

    def __init__(self, parent=None):
        super().__init__(parent)

    def emit_info(self, message: str):
        self.info_logged.emit(message)
        logging.info(message)

    def emit_warning(self, message: str):
        self.warning_logged.emit(message)
        logging.warning(message)

    def emit_error(self, message: str):
        self.error_logged.emit(message)
        logging.error(message)


# Global log signal emitter for easy access
log_signal_emitter = LogSignalEmitter()
