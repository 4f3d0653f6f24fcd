import logging

from slide_restore.application.app import apply_log_level, initialize_app
from slide_restore.domain.services.i_config_repository_service import IConfigRepository
from slide_restore.domain.services.i_logger_service import ILoggerService
from slide_restore.infrastructure.config.json_config_repository import JsonConfigRepository
from slide_restore.infrastructure.logging.logger_service import ConsoleLoggerService


def test_unknown_level_falls_back_to_info(tmp_path, logger):
    repo = JsonConfigRepository(str(tmp_path / "config.json"), logger)
    repo.set_global_setting("log_level", "verbose")
    console = ConsoleLoggerService(level=logging.ERROR, name="slide_restore.level_test")

    apply_log_level(repo, console)

    assert console.logger.level == logging.INFO


def test_log_level_follows_config_changes(tmp_path):
    container = initialize_app(config_file=str(tmp_path / "config.json"))
    logger = container.resolve(ILoggerService)
    config = container.resolve(IConfigRepository)

    assert logger.logger.level == logging.INFO

    config.set_global_setting("log_level", "debug")
    assert logger.logger.level == logging.DEBUG

    config.set_global_setting("log_level", "INFO")
    assert logger.logger.level == logging.INFO
