# slide_restore/domain/services/i_config_repository_service.py
"""
Configuration repository interface for application settings.
"""
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict

from slide_restore.domain.common.result import Result


class IConfigRepository(ABC):
    """
    Interface for configuration repository.

    Defines methods for loading, saving, and accessing configuration settings.
    """

    @abstractmethod
    def load_config(self, force_reload: bool = False) -> Result[Dict[str, Any]]:
        """
        Load configuration from storage.

        Args:
            force_reload: Whether to force a reload from storage

        Returns:
            Result containing the configuration dictionary
        """
        pass

    @abstractmethod
    def save_config(self, config: Dict[str, Any]) -> Result[bool]:
        """
        Save configuration to storage.

        Args:
            config: Configuration dictionary

        Returns:
            Result indicating success or failure
        """
        pass

    @abstractmethod
    def get_global_setting(self, key: str, default: Any = None) -> Any:
        """Get a setting, or default if it is missing or the config cannot be read."""
        pass

    @abstractmethod
    def set_global_setting(self, key: str, value: Any) -> Result[bool]:
        """Set a setting and persist it."""
        pass

    @abstractmethod
    def remove_global_setting(self, key: str) -> Result[bool]:
        """Remove a setting and persist the change."""
        pass

    @abstractmethod
    def get_model_name(self) -> str:
        """Name of the generative image model."""
        pass

    @abstractmethod
    def get_thinking_budget(self) -> int:
        """Thinking token budget for the model (0 disables it)."""
        pass

    @abstractmethod
    def get_pdf_render_scale(self) -> float:
        """Upscale factor used when rasterizing PDF pages."""
        pass

    @abstractmethod
    def register_observer(self, callback: Callable[[], None]) -> None:
        """Register a callback invoked after every successful save."""
        pass
