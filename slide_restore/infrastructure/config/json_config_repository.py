# slide_restore/infrastructure/config/json_config_repository.py

"""
JSON-based implementation of the configuration repository.

Stores configuration in a JSON file on disk.
"""
import json
import os
import threading
from typing import Any, Callable, Dict, List

from slide_restore.domain.common.errors import ConfigurationError
from slide_restore.domain.common.result import Result
from slide_restore.domain.services.i_config_repository_service import IConfigRepository
from slide_restore.domain.services.i_logger_service import ILoggerService

DEFAULT_MODEL_NAME = "gemini-3-pro-image-preview"
DEFAULT_THINKING_BUDGET = 32768
DEFAULT_PDF_RENDER_SCALE = 4.0


class JsonConfigRepository(IConfigRepository):
    """
    JSON-based implementation of the configuration repository.

    The file is cached and reloaded when its modification time changes.
    Writes go to a temporary file first and are moved into place atomically.
    """

    def __init__(self, config_file: str, logger: ILoggerService):
        """
        Initialize the repository.

        Args:
            config_file: Path to the JSON configuration file
            logger: Logger service
        """
        self.config_file = config_file
        self.logger = logger
        self._config_cache = None
        self._last_modified = 0.0
        self._lock = threading.RLock()
        self._observers: List[Callable[[], None]] = []

        # Default configuration with consistent types
        self.DEFAULT_CONFIG = {
            "api_key": "",
            "model_name": DEFAULT_MODEL_NAME,
            "thinking_budget": DEFAULT_THINKING_BUDGET,  # Always store as int
            "pdf_render_scale": DEFAULT_PDF_RENDER_SCALE,  # Always store as float
            "log_level": "INFO",
            "app_version": "1.1.0"
        }

    def load_config(self, force_reload: bool = False) -> Result[Dict[str, Any]]:
        """
        Load configuration from storage, creating it with defaults if missing.

        Args:
            force_reload: Whether to force a reload from storage

        Returns:
            Result containing the configuration dictionary
        """
        with self._lock:
            if os.path.exists(self.config_file):
                mtime = os.path.getmtime(self.config_file)
                if mtime > self._last_modified:
                    force_reload = True

            if self._config_cache is not None and not force_reload:
                return Result.ok(self._config_cache)

            if not os.path.exists(self.config_file):
                self.logger.warning("Config file not found. Creating new configuration with default settings.")
                return self.save_config(dict(self.DEFAULT_CONFIG)).map(lambda _: self._config_cache)

            # Reloads after the first load are reported to observers
            changed_on_disk = self._config_cache is not None

            try:
                with open(self.config_file, "r", encoding="utf-8") as f:
                    config = json.load(f)
                if not isinstance(config, dict):
                    raise ValueError("top-level JSON value is not an object")
            except (OSError, ValueError) as e:
                error = ConfigurationError(
                    message=f"Error loading config: {e}",
                    details={"path": self.config_file},
                    inner_error=e
                )
                self.logger.error(str(error))
                return Result.fail(error)

            self.logger.info(f"Config loaded successfully from {self.config_file}")
            self._last_modified = os.path.getmtime(self.config_file)

            # Merge missing default keys and normalize types
            updated = False
            for key, default_value in self.DEFAULT_CONFIG.items():
                if key not in config:
                    config[key] = default_value
                    updated = True

            updated |= self._normalize(config, "thinking_budget", int, DEFAULT_THINKING_BUDGET)
            updated |= self._normalize(config, "pdf_render_scale", float, DEFAULT_PDF_RENDER_SCALE)

            if updated:
                save_result = self.save_config(config)
                if save_result.is_failure:
                    return Result.fail(save_result.error)

            self._config_cache = config
            if changed_on_disk and not updated:
                self._notify_observers()
            return Result.ok(config)

    def _normalize(self, config: Dict[str, Any], key: str, cast, default) -> bool:
        """Coerce config[key] to cast; returns True if the value changed."""
        value = config.get(key)
        if isinstance(value, cast) and not isinstance(value, bool):
            return False
        try:
            config[key] = cast(value)
        except (ValueError, TypeError):
            config[key] = default
        return True

    def save_config(self, config: Dict[str, Any]) -> Result[bool]:
        """
        Save configuration to storage.

        Args:
            config: Configuration dictionary

        Returns:
            Result indicating success or failure
        """
        with self._lock:
            try:
                config_dir = os.path.dirname(self.config_file)
                if config_dir:
                    os.makedirs(config_dir, exist_ok=True)

                temp_path = f"{self.config_file}.tmp"
                with open(temp_path, "w", encoding="utf-8") as f:
                    json.dump(config, f, indent=4)

                # os.replace is atomic on modern operating systems
                os.replace(temp_path, self.config_file)

                self.logger.info(f"Config saved successfully to {self.config_file}")
                self._config_cache = config
                self._last_modified = os.path.getmtime(self.config_file)
            except OSError as e:
                error = ConfigurationError(
                    message=f"Failed to save config: {e}",
                    details={"path": self.config_file},
                    inner_error=e
                )
                self.logger.error(str(error))
                return Result.fail(error)

        self._notify_observers()
        return Result.ok(True)

    def get_global_setting(self, key: str, default: Any = None) -> Any:
        with self._lock:
            config_result = self.load_config()
            if config_result.is_failure:
                self.logger.error(f"Error loading config: {config_result.error}")
                return default
            return config_result.value.get(key, default)

    def set_global_setting(self, key: str, value: Any) -> Result[bool]:
        with self._lock:
            config_result = self.load_config()
            if config_result.is_failure:
                return Result.fail(config_result.error)

            config = config_result.value
            config[key] = value
            return self.save_config(config)

    def remove_global_setting(self, key: str) -> Result[bool]:
        with self._lock:
            config_result = self.load_config()
            if config_result.is_failure:
                return Result.fail(config_result.error)

            config = config_result.value
            if key not in config:
                return Result.ok(False)
            del config[key]
            return self.save_config(config)

    def get_model_name(self) -> str:
        name = self.get_global_setting("model_name", DEFAULT_MODEL_NAME)
        return str(name).strip() or DEFAULT_MODEL_NAME

    def get_thinking_budget(self) -> int:
        budget = self.get_global_setting("thinking_budget", DEFAULT_THINKING_BUDGET)
        try:
            return max(0, int(budget))
        except (ValueError, TypeError):
            return DEFAULT_THINKING_BUDGET

    def get_pdf_render_scale(self) -> float:
        scale = self.get_global_setting("pdf_render_scale", DEFAULT_PDF_RENDER_SCALE)
        try:
            scale = float(scale)
        except (ValueError, TypeError):
            return DEFAULT_PDF_RENDER_SCALE
        return scale if scale > 0 else DEFAULT_PDF_RENDER_SCALE

    def register_observer(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if callback not in self._observers:
                self._observers.append(callback)
                self.logger.debug(f"Observer registered: {callback.__qualname__}")

    def _notify_observers(self) -> None:
        """Call all registered observer functions."""
        with self._lock:
            observers = self._observers.copy()

        for callback in observers:
            try:
                callback()
            except Exception as e:
                self.logger.error(f"Error notifying observer {callback.__qualname__}: {e}")
