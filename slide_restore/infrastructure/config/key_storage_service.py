# slide_restore/infrastructure/config/key_storage_service.py
import os
from typing import Optional, Sequence

from slide_restore.domain.common.errors import ValidationError
from slide_restore.domain.common.result import Result
from slide_restore.domain.services.i_config_repository_service import IConfigRepository
from slide_restore.domain.services.i_key_storage_service import IKeyStorage
from slide_restore.domain.services.i_logger_service import ILoggerService

API_KEY_SETTING = "api_key"
MIN_KEY_LENGTH = 10
ENV_KEY_NAMES = ("GEMINI_API_KEY", "API_KEY")


class ConfigKeyStorage(IKeyStorage):
    """
    API key storage backed by the configuration repository.

    A key saved by the user takes precedence over the environment.
    """

    def __init__(self, config_repository: IConfigRepository, logger: ILoggerService,
                 env_names: Sequence[str] = ENV_KEY_NAMES):
        self.config_repository = config_repository
        self.logger = logger
        self.env_names = tuple(env_names)

    def _stored(self) -> str:
        return str(self.config_repository.get_global_setting(API_KEY_SETTING, "") or "").strip()

    def get(self) -> Optional[str]:
        stored = self._stored()
        if stored:
            return stored

        for name in self.env_names:
            value = os.environ.get(name, "").strip()
            if value:
                self.logger.debug("Using API key from environment", variable=name)
                return value
        return None

    def set(self, key: str) -> Result[bool]:
        key = (key or "").strip()
        if len(key) < MIN_KEY_LENGTH:
            return Result.fail(ValidationError(
                message="Please enter a valid API key",
                details={"length": len(key), "minimum": MIN_KEY_LENGTH}
            ))

        result = self.config_repository.set_global_setting(API_KEY_SETTING, key)
        if result.is_success:
            self.logger.info("API key saved")
        return result

    def clear(self) -> Result[bool]:
        result = self.config_repository.remove_global_setting(API_KEY_SETTING)
        if result.is_success:
            self.logger.info("API key cleared")
        return result

    def has_key(self) -> bool:
        key = self.get()
        return key is not None and len(key) > MIN_KEY_LENGTH
