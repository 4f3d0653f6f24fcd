# slide_restore/domain/services/i_ui_service.py

from abc import ABC, abstractmethod
from typing import Any, Optional

from slide_restore.domain.common.result import Result


class IUIService(ABC):
    """Interface for dialog-level UI operations."""

    @abstractmethod
    def set_parent(self, parent: Any) -> None:
        """Set the window that owns the dialogs."""
        pass

    @abstractmethod
    def show_message(self, title: str, message: str, message_type: str = "info") -> Result[bool]:
        """
        Show a message dialog to the user.

        Args:
            title: Dialog title
            message: Message text
            message_type: Type of message ("info", "warning", "error")

        Returns:
            Result indicating success or failure
        """
        pass

    @abstractmethod
    def select_file(self, title: str, filter_pattern: str) -> Result[str]:
        """
        Show an open-file dialog.

        Returns:
            Result containing the selected path, or an empty string if cancelled
        """
        pass

    @abstractmethod
    def select_save_path(self, title: str, default_name: str, filter_pattern: str) -> Result[str]:
        """
        Show a save-file dialog.

        Returns:
            Result containing the chosen path, or an empty string if cancelled
        """
        pass

    @abstractmethod
    def prompt_secret(self, title: str, label: str, current: Optional[str] = None) -> Result[str]:
        """
        Ask the user for a secret value (API key) with masked input.

        Returns:
            Result containing the entered text, or an empty string if cancelled
        """
        pass
