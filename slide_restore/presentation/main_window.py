# slide_restore/presentation/main_window.py
"""
Main application window.

Wires the editing session to the canvas, the region panel, the restore
buttons and the result preview. Restores run on the background task
service under a single task id, so at most one is in flight.
"""
import time
from typing import Dict, List

from PIL import Image
from PySide6.QtCore import Qt
from PySide6.QtGui import QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QHBoxLayout, QLabel, QMainWindow, QPushButton, QSplitter, QVBoxLayout, QWidget
)

from slide_restore.domain.common.di_container import DIContainer
from slide_restore.domain.common.errors import DecodeError, EmptyInstructionError, ResourceError, RestoreFailedError
from slide_restore.domain.common.result import Result
from slide_restore.domain.editing.session import EditorSession
from slide_restore.domain.models.region_model import Region
from slide_restore.domain.models.restore_model import QualityTier, RestoreOutcome
from slide_restore.domain.services.i_background_task_service import IBackgroundTaskService, Worker
from slide_restore.domain.services.i_document_decoder_service import IDocumentDecoder
from slide_restore.domain.services.i_key_storage_service import IKeyStorage
from slide_restore.domain.services.i_logger_service import ILoggerService
from slide_restore.domain.services.i_overlay_renderer_service import IOverlayRenderer
from slide_restore.domain.services.i_restore_service import IRestoreService
from slide_restore.domain.services.i_ui_service import IUIService
from slide_restore.presentation.components.region_canvas import RegionCanvas
from slide_restore.presentation.components.region_panel import RegionPanel
from slide_restore.presentation.components.ui_components import GroupHeader, StyledButton, pil_to_qpixmap
from slide_restore.utils.logging_config import log_signal_emitter

RESTORE_TASK_ID = "restore"
OPEN_FILTER = "Images and PDF (*.png *.jpg *.jpeg *.webp *.bmp *.gif *.pdf);;All files (*)"
SAVE_FILTER = "PNG image (*.png)"


def read_file_bytes(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


class RestoreWorker(Worker[Result[RestoreOutcome]]):
    """Runs one restore off the UI thread on a frozen copy of the session state."""

    def __init__(self, restore_service: IRestoreService, source: Image.Image,
                 regions: List[Region], replacements: Dict[int, str], quality_tier: QualityTier):
        super().__init__()
        self.restore_service = restore_service
        self.source = source
        self.regions = [region.copy() for region in regions]
        self.replacements = dict(replacements)
        self.quality_tier = quality_tier

    def execute(self) -> Result[RestoreOutcome]:
        return self.restore_service.restore(
            self.source, self.regions, self.replacements, self.quality_tier,
            on_progress=self.report_progress
        )


class MainWindow(QMainWindow):
    """Editor window: upload, draw regions, type replacements, restore, save."""

    def __init__(self, container: DIContainer):
        super().__init__()
        self.container = container
        self.logger = container.resolve(ILoggerService)
        self.decoder = container.resolve(IDocumentDecoder)
        self.renderer = container.resolve(IOverlayRenderer)
        self.restore_service = container.resolve(IRestoreService)
        self.thread_service = container.resolve(IBackgroundTaskService)
        self.key_storage = container.resolve(IKeyStorage)
        self.ui_service = container.resolve(IUIService)
        self.ui_service.set_parent(self)

        self.session = EditorSession(self.logger)
        self.pdf_document = None

        self.setWindowTitle("Slide Restore")
        self.resize(1280, 820)

        self._build_ui()
        self._bind_shortcuts()

        log_signal_emitter.info_logged.connect(lambda message: self.statusBar().showMessage(message, 5000))
        log_signal_emitter.warning_logged.connect(lambda message: self.statusBar().showMessage(message, 8000))
        log_signal_emitter.error_logged.connect(lambda message: self.statusBar().showMessage(message))

        self.update_controls()

    # ----- layout -----

    def _build_ui(self):
        central_widget = QWidget()
        main_layout = QVBoxLayout(central_widget)

        # Toolbar
        toolbar = QHBoxLayout()
        self.upload_button = StyledButton("Upload image / PDF")
        self.upload_button.clicked.connect(self.upload_file)
        toolbar.addWidget(self.upload_button)

        self.prev_page_button = QPushButton("< Prev")
        self.prev_page_button.clicked.connect(lambda: self.change_page(self.session.page_number - 1))
        toolbar.addWidget(self.prev_page_button)
        self.page_label = QLabel()
        toolbar.addWidget(self.page_label)
        self.next_page_button = QPushButton("Next >")
        self.next_page_button.clicked.connect(lambda: self.change_page(self.session.page_number + 1))
        toolbar.addWidget(self.next_page_button)

        toolbar.addStretch()

        self.undo_button = StyledButton("Undo", role="neutral")
        self.undo_button.clicked.connect(self.undo)
        toolbar.addWidget(self.undo_button)
        self.redo_button = StyledButton("Redo", role="neutral")
        self.redo_button.clicked.connect(self.redo)
        toolbar.addWidget(self.redo_button)

        self.key_button = QPushButton("Change API key")
        self.key_button.clicked.connect(self.change_api_key)
        toolbar.addWidget(self.key_button)
        main_layout.addLayout(toolbar)

        splitter = QSplitter(Qt.Horizontal)

        self.canvas = RegionCanvas(self.session, self.renderer, self.logger)
        self.canvas.selections_changed.connect(self.on_selections_changed)
        self.canvas.region_limit_reached.connect(self.on_region_limit_reached)
        splitter.addWidget(self.canvas)

        side = QWidget()
        side_layout = QVBoxLayout(side)
        side_layout.setContentsMargins(0, 0, 0, 0)

        self.region_panel = RegionPanel(self.session, self.logger)
        self.region_panel.selections_changed.connect(self.on_selections_changed)
        side_layout.addWidget(self.region_panel, 3)

        restore_group = GroupHeader("Restore")
        restore_layout = QVBoxLayout(restore_group)
        self.restore_buttons: Dict[QualityTier, StyledButton] = {}
        for tier in QualityTier:
            button = StyledButton(tier.label, role="accent" if tier is QualityTier.ONE_K else "primary")
            button.clicked.connect(lambda _=False, t=tier: self.start_restore(t))
            restore_layout.addWidget(button)
            self.restore_buttons[tier] = button
        side_layout.addWidget(restore_group)

        result_group = GroupHeader("Result")
        result_layout = QVBoxLayout(result_group)
        self.result_label = QLabel("No result yet")
        self.result_label.setAlignment(Qt.AlignCenter)
        self.result_label.setMinimumHeight(180)
        result_layout.addWidget(self.result_label)
        self.save_button = StyledButton("Download PNG")
        self.save_button.clicked.connect(self.save_result)
        result_layout.addWidget(self.save_button)
        side_layout.addWidget(result_group, 2)

        splitter.addWidget(side)
        splitter.setStretchFactor(0, 3)
        splitter.setStretchFactor(1, 1)
        main_layout.addWidget(splitter)

        self.setCentralWidget(central_widget)
        self.statusBar().showMessage("Ready")

    def _bind_shortcuts(self):
        QShortcut(QKeySequence.Undo, self).activated.connect(self.undo)
        QShortcut(QKeySequence.Redo, self).activated.connect(self.redo)
        QShortcut(QKeySequence("Ctrl+Y"), self).activated.connect(self.redo)

    def update_controls(self):
        """Enable or disable controls from the session state."""
        session = self.session
        restoring = session.is_restoring

        self.prev_page_button.setVisible(session.is_paginated)
        self.next_page_button.setVisible(session.is_paginated)
        self.page_label.setVisible(session.is_paginated)
        self.page_label.setText(f"Page {session.page_number} / {session.page_count}")
        self.prev_page_button.setEnabled(session.can_change_page(session.page_number - 1))
        self.next_page_button.setEnabled(session.can_change_page(session.page_number + 1))

        self.undo_button.setEnabled(not restoring and session.history.can_undo)
        self.redo_button.setEnabled(not restoring and session.history.can_redo)
        for button in self.restore_buttons.values():
            button.setEnabled(session.can_restore)
        self.save_button.setEnabled(session.result_image is not None)
        self.region_panel.set_locked(restoring)

    def refresh_view(self):
        """Redraw everything derived from the session."""
        self.canvas.refresh()
        self.region_panel.rebuild()
        self._show_result()
        self.update_controls()

    def _show_result(self):
        if self.session.result_image is None:
            self.result_label.clear()
            self.result_label.setText("No result yet")
            return

        pixmap = pil_to_qpixmap(self.session.result_image)
        self.result_label.setPixmap(pixmap.scaled(
            self.result_label.width(), self.result_label.height(),
            Qt.KeepAspectRatio, Qt.SmoothTransformation
        ))

    # ----- source -----

    def upload_file(self):
        path_result = self.ui_service.select_file("Open image or PDF", OPEN_FILTER)
        if path_result.is_failure or not path_result.value:
            return

        path = path_result.value
        read_result = Result.from_operation(
            lambda: read_file_bytes(path), self.logger, ResourceError, "Could not read file", path=path
        )
        if read_result.is_failure:
            return

        data = read_result.value
        if path.lower().endswith(".pdf") or data[:5] == b"%PDF-":
            self._load_pdf(data)
        else:
            self._load_image(data)

    def _load_image(self, data: bytes):
        result = self.decoder.decode_image(data)
        if result.is_failure:
            self._ignore_decode_error(result.error)
            return

        self.pdf_document = None
        self.session.load_source(result.value)
        self.refresh_view()

    def _load_pdf(self, data: bytes):
        document_result = self.decoder.open_pdf(data)
        if document_result.is_failure:
            self._ignore_decode_error(document_result.error)
            return

        document = document_result.value
        page_result = self.decoder.render_page(document, 1)
        if page_result.is_failure:
            self._ignore_decode_error(page_result.error)
            return

        self.pdf_document = document
        self.session.load_source(page_result.value, page_number=1,
                                 page_count=self.decoder.page_count(document))
        self.refresh_view()

    def change_page(self, page_number: int):
        if self.pdf_document is None or not self.session.can_change_page(page_number):
            return

        page_result = self.decoder.render_page(self.pdf_document, page_number)
        if page_result.is_failure:
            self._ignore_decode_error(page_result.error)
            return

        self.session.load_source(page_result.value, page_number=page_number,
                                 page_count=self.session.page_count)
        self.refresh_view()

    def _ignore_decode_error(self, error):
        # Unreadable uploads leave the current document untouched
        if isinstance(error, DecodeError):
            self.logger.warning(f"Ignoring unreadable file: {error.message}")
        else:
            self.logger.error(str(error))

    # ----- editing -----

    def on_selections_changed(self):
        self.canvas.refresh()
        self.region_panel.rebuild()
        self.update_controls()

    def on_region_limit_reached(self, limit: int):
        log_signal_emitter.emit_warning(f"You can mark at most {limit} regions")

    def undo(self):
        if self.session.undo():
            self.on_selections_changed()

    def redo(self):
        if self.session.redo():
            self.on_selections_changed()

    # ----- API key -----

    def ensure_api_key(self) -> bool:
        """Ask for a key when none is stored. Returns True once a key is available."""
        if self.key_storage.has_key():
            return True
        return self.change_api_key()

    def change_api_key(self) -> bool:
        prompt = self.ui_service.prompt_secret(
            "Gemini API key",
            "Enter your Gemini API key. It is stored in the local config file.",
            self.key_storage.get()
        )
        if prompt.is_failure or not prompt.value:
            return self.key_storage.has_key()

        result = self.key_storage.set(prompt.value)
        if result.is_failure:
            self.ui_service.show_message("API key", result.error.message, "warning")
            return False
        log_signal_emitter.emit_info("API key saved")
        return True

    # ----- restore -----

    def start_restore(self, quality_tier: QualityTier):
        if not self.ensure_api_key():
            return

        if self.thread_service.is_task_running(RESTORE_TASK_ID):
            self.logger.debug("Restore already running; request ignored")
            return

        token = self.session.begin_restore()
        if token is None:
            return

        worker = RestoreWorker(
            self.restore_service, self.session.source_image,
            self.session.store.regions, self.session.store.replacements, quality_tier
        )
        worker.set_on_progress(lambda percent, message: self.statusBar().showMessage(f"{message} ({percent}%)"))
        worker.set_on_completed(lambda result, t=token: self.on_restore_finished(t, result))
        worker.set_on_error(lambda error, t=token: self.on_restore_finished(t, Result.fail(error)))

        started = self.thread_service.execute_task(RESTORE_TASK_ID, worker)
        if started.is_failure:
            self.session.finish_restore(token, Result.fail(started.error))
            self.logger.error(str(started.error))
        self.update_controls()

    def on_restore_finished(self, token: int, result: Result[RestoreOutcome]):
        stored = self.session.finish_restore(token, result)
        self.update_controls()

        if token != self.session.generation:
            self.statusBar().showMessage("Source changed during restore; result discarded", 5000)
            return

        if result.is_failure:
            error = result.error
            if isinstance(error, EmptyInstructionError):
                self.ui_service.show_message("Nothing to restore", error.message, "info")
            elif isinstance(error, RestoreFailedError):
                self.ui_service.show_message("Restore failed", error.message, "error")
            else:
                self.ui_service.show_message("Restore failed", RestoreFailedError(error).message, "error")
            self.statusBar().showMessage("Restore failed", 5000)
            return

        if stored:
            self._show_result()
            self.update_controls()
            log_signal_emitter.emit_info(f"Restored {result.value.region_count} region(s)")

    def save_result(self):
        if self.session.result_image is None:
            return

        default_name = f"Precision_Restored_{int(time.time() * 1000)}.png"
        path_result = self.ui_service.select_save_path("Save restored image", default_name, SAVE_FILTER)
        if path_result.is_failure or not path_result.value:
            return

        image = self.session.result_image
        save_result = Result.from_operation(
            lambda: image.save(path_result.value, format="PNG"), self.logger, ResourceError,
            "Could not save result", path=path_result.value
        )
        if save_result.is_failure:
            self.ui_service.show_message("Save failed", save_result.error.message, "error")
            return
        log_signal_emitter.emit_info(f"Saved {path_result.value}")

    def closeEvent(self, event):
        self.thread_service.wait_for_all()
        event.accept()
