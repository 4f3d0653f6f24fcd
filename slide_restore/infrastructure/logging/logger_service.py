# slide_restore/infrastructure/logging/logger_service.py
"""
Implementation of the logger service using Python's built-in logging module.
"""
import logging
import os
import sys
from datetime import datetime
from typing import Any, Dict

from slide_restore.domain.services.i_logger_service import ILoggerService

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class ConsoleLoggerService(ILoggerService):
    """
    Logger service that writes to the console.

    Context keyword arguments are rendered as "[key=value ...]" after the message.
    """

    def __init__(self, level: int = logging.INFO, name: str = "SlideRestore"):
        """
        Initialize the logger service.

        Args:
            level: Initial log level (default: INFO)
            name: Logger name
        """
        self.logger = logging.getLogger(name)
        self.set_level(level)

        # Records propagate to the root logger once setup_logging has run
        if not self.logger.handlers and not logging.getLogger().handlers:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(level)
            console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
            self.logger.addHandler(console_handler)

    def debug(self, message: str, **kwargs) -> None:
        self.logger.debug(self._with_context(message, kwargs))

    def info(self, message: str, **kwargs) -> None:
        self.logger.info(self._with_context(message, kwargs))

    def warning(self, message: str, **kwargs) -> None:
        self.logger.warning(self._with_context(message, kwargs))

    def error(self, message: str, **kwargs) -> None:
        self.logger.error(self._with_context(message, kwargs))

    def critical(self, message: str, **kwargs) -> None:
        self.logger.critical(self._with_context(message, kwargs))

    def set_level(self, level: int) -> None:
        self.logger.setLevel(level)

    def _with_context(self, message: str, extra: Dict[str, Any]) -> str:
        formatted = self._format_extra(extra)
        return f"{message} {formatted}" if formatted else message

    def _format_extra(self, extra: Dict[str, Any]) -> str:
        """
        Format extra context information for logging.

        Args:
            extra: Dictionary of extra context information

        Returns:
            Formatted string of context information
        """
        if not extra:
            return ""

        formatted = [f"{key}={value}" for key, value in extra.items()]
        return f"[{' '.join(formatted)}]"


class FileLoggerService(ConsoleLoggerService):
    """
    Extension of ConsoleLoggerService that also logs to a dated file.
    """

    def __init__(self, level: int = logging.INFO, name: str = "SlideRestore",
                 log_dir: str = "logs"):
        """
        Initialize the file logger service.

        Args:
            level: Initial log level (default: INFO)
            name: Logger name
            log_dir: Directory to store log files
        """
        super().__init__(level, name)

        os.makedirs(log_dir, exist_ok=True)

        current_date = datetime.now().strftime("%Y-%m-%d")
        self.log_file = os.path.join(log_dir, f"{name}_{current_date}.log")

        if not any(isinstance(h, logging.FileHandler) and h.baseFilename == os.path.abspath(self.log_file)
                   for h in self.logger.handlers):
            file_handler = logging.FileHandler(self.log_file, encoding="utf-8")
            file_handler.setLevel(level)
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
            self.logger.addHandler(file_handler)
