# slide_restore/application/app.py

import logging
import os
from typing import Optional

from slide_restore.domain.common.di_container import DIContainer
from slide_restore.domain.services.i_background_task_service import IBackgroundTaskService
from slide_restore.domain.services.i_compositor_service import ICompositorService
from slide_restore.domain.services.i_config_repository_service import IConfigRepository
from slide_restore.domain.services.i_document_decoder_service import IDocumentDecoder
from slide_restore.domain.services.i_generative_image_service import IGenerativeImageService
from slide_restore.domain.services.i_key_storage_service import IKeyStorage
from slide_restore.domain.services.i_logger_service import ILoggerService
from slide_restore.domain.services.i_overlay_renderer_service import IOverlayRenderer
from slide_restore.domain.services.i_restore_service import IRestoreService
from slide_restore.domain.services.i_ui_service import IUIService

from slide_restore.infrastructure.config.json_config_repository import JsonConfigRepository
from slide_restore.infrastructure.config.key_storage_service import ConfigKeyStorage
from slide_restore.infrastructure.generative.gemini_image_service import GeminiImageService
from slide_restore.infrastructure.imaging.compositor_service import PillowCompositorService
from slide_restore.infrastructure.imaging.document_decoder import PillowPdfDocumentDecoder
from slide_restore.infrastructure.imaging.overlay_renderer import PillowOverlayRenderer
from slide_restore.infrastructure.logging.logger_service import ConsoleLoggerService, FileLoggerService
from slide_restore.infrastructure.restore.restore_service import RestoreService
from slide_restore.infrastructure.threading.qt_background_task_service import QtBackgroundTaskService
from slide_restore.infrastructure.ui.qt_ui_service import QtUIService

CONFIG_PATH_ENV = "SLIDE_RESTORE_CONFIG"


def resolve_config_path() -> str:
    return os.environ.get(CONFIG_PATH_ENV) or os.path.join(os.getcwd(), "config.json")


def apply_log_level(config_repo: IConfigRepository, logger: ILoggerService) -> None:
    """Set the logger level from the "log_level" setting (INFO when unknown)."""
    level_name = str(config_repo.get_global_setting("log_level", "INFO")).upper()
    level = getattr(logging, level_name, None)
    logger.set_level(level if isinstance(level, int) else logging.INFO)


def initialize_app(config_file: Optional[str] = None, log_dir: Optional[str] = None) -> DIContainer:
    """
    Build the service container.

    Args:
        config_file: Path of config.json (default: $SLIDE_RESTORE_CONFIG or ./config.json)
        log_dir: When given, the logger also writes its own dated file there
    """
    container = DIContainer()

    # Core services
    if log_dir:
        logger = FileLoggerService(level=logging.INFO, log_dir=log_dir)
    else:
        logger = ConsoleLoggerService(level=logging.INFO)
    container.register_instance(ILoggerService, logger)

    config_repo = JsonConfigRepository(config_file or resolve_config_path(), logger)
    container.register_instance(IConfigRepository, config_repo)

    # Edits to log_level take effect without a restart
    apply_log_level(config_repo, logger)
    config_repo.register_observer(lambda: apply_log_level(config_repo, logger))

    thread_service = QtBackgroundTaskService(logger)
    container.register_instance(IBackgroundTaskService, thread_service)

    container.register_factory(
        IUIService,
        lambda: QtUIService(container.resolve(ILoggerService)),
        singleton=True
    )

    container.register_factory(
        IKeyStorage,
        lambda: ConfigKeyStorage(
            config_repository=container.resolve(IConfigRepository),
            logger=container.resolve(ILoggerService)
        ),
        singleton=True
    )

    # Imaging
    container.register_factory(
        IDocumentDecoder,
        lambda: PillowPdfDocumentDecoder(
            logger=container.resolve(ILoggerService),
            render_scale=container.resolve(IConfigRepository).get_pdf_render_scale
        )
    )

    container.register_factory(
        ICompositorService,
        lambda: PillowCompositorService(container.resolve(ILoggerService))
    )

    container.register_factory(
        IOverlayRenderer,
        lambda: PillowOverlayRenderer()
    )

    # Restore pipeline
    container.register_factory(
        IGenerativeImageService,
        lambda: GeminiImageService(
            key_storage=container.resolve(IKeyStorage),
            config_repository=container.resolve(IConfigRepository),
            logger=container.resolve(ILoggerService)
        )
    )

    container.register_factory(
        IRestoreService,
        lambda: RestoreService(
            generative_service=container.resolve(IGenerativeImageService),
            compositor=container.resolve(ICompositorService),
            logger=container.resolve(ILoggerService)
        )
    )

    logger.info("Application dependencies initialized", config=config_repo.config_file)

    return container


_container: Optional[DIContainer] = None


def get_container() -> DIContainer:
    global _container
    if _container is None:
        _container = initialize_app()
    return _container
