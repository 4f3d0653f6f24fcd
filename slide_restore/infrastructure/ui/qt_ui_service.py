# slide_restore/infrastructure/ui/qt_ui_service.py

from typing import Optional

from PySide6.QtWidgets import QFileDialog, QInputDialog, QLineEdit, QMessageBox, QWidget

from slide_restore.domain.common.errors import UIError
from slide_restore.domain.common.result import Result
from slide_restore.domain.services.i_logger_service import ILoggerService
from slide_restore.domain.services.i_ui_service import IUIService


class QtUIService(IUIService):
    """
    Dialog service built on Qt's standard dialogs.

    Must be called from the UI thread; background work reports back through
    the task service before any dialog is shown.
    """

    def __init__(self, logger: ILoggerService, parent: Optional[QWidget] = None):
        self.logger = logger
        self.parent = parent

    def set_parent(self, parent: QWidget) -> None:
        """Attach dialogs to the main window once it exists."""
        self.parent = parent

    def show_message(self, title: str, message: str, message_type: str = "info") -> Result[bool]:
        try:
            if message_type == "warning":
                QMessageBox.warning(self.parent, title, message)
            elif message_type == "error":
                QMessageBox.critical(self.parent, title, message)
            else:
                QMessageBox.information(self.parent, title, message)
            return Result.ok(True)
        except Exception as e:
            self.logger.error(f"Error showing message dialog: {e}")
            return Result.fail(UIError(message="Failed to show message", inner_error=e))

    def select_file(self, title: str, filter_pattern: str) -> Result[str]:
        try:
            file_path, _ = QFileDialog.getOpenFileName(self.parent, title, "", filter_pattern)
            return Result.ok(file_path or "")
        except Exception as e:
            self.logger.error(f"Error showing file selection dialog: {e}")
            return Result.fail(UIError(message="Failed to select file", inner_error=e))

    def select_save_path(self, title: str, default_name: str, filter_pattern: str) -> Result[str]:
        try:
            file_path, _ = QFileDialog.getSaveFileName(self.parent, title, default_name, filter_pattern)
            return Result.ok(file_path or "")
        except Exception as e:
            self.logger.error(f"Error showing save dialog: {e}")
            return Result.fail(UIError(message="Failed to select save location", inner_error=e))

    def prompt_secret(self, title: str, label: str, current: Optional[str] = None) -> Result[str]:
        try:
            text, accepted = QInputDialog.getText(
                self.parent, title, label, QLineEdit.Password, current or ""
            )
            return Result.ok(text if accepted else "")
        except Exception as e:
            self.logger.error(f"Error showing input dialog: {e}")
            return Result.fail(UIError(message="Failed to read input", inner_error=e))
