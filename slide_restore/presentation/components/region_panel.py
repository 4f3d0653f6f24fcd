# slide_restore/presentation/components/region_panel.py
"""
Side panel listing the regions with an editor for each replacement text.
"""
from typing import Dict

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QHBoxLayout, QLabel, QPlainTextEdit, QPushButton, QScrollArea, QVBoxLayout, QWidget
)

from slide_restore.domain.editing.session import EditorSession
from slide_restore.domain.services.i_logger_service import ILoggerService
from slide_restore.presentation.components.ui_components import GroupHeader


class ReplacementEdit(QPlainTextEdit):
    """Plain text editor that reports when it loses focus."""
    focus_lost = Signal()

    def focusOutEvent(self, event):
        super().focusOutEvent(event)
        self.focus_lost.emit()


class RegionRow(QWidget):
    """Number badge, text editor, character counter and remove button for one region."""

    def __init__(self, number: int, region_id: int, text: str, max_chars: int, parent=None):
        super().__init__(parent)
        self.region_id = region_id
        self.max_chars = max_chars

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 4, 0, 4)

        header = QHBoxLayout()
        badge = QLabel(str(number))
        badge.setFixedSize(24, 24)
        badge.setAlignment(Qt.AlignCenter)
        badge.setStyleSheet("background-color: #ef4444; color: white; font-weight: bold; border-radius: 4px;")
        header.addWidget(badge)

        self.counter = QLabel()
        self.counter.setStyleSheet("color: #64748b;")
        header.addWidget(self.counter)
        header.addStretch()

        self.remove_button = QPushButton("Remove")
        self.remove_button.setFlat(True)
        self.remove_button.setStyleSheet("color: #ef4444;")
        header.addWidget(self.remove_button)
        layout.addLayout(header)

        self.editor = ReplacementEdit()
        self.editor.setPlaceholderText("Replacement text for this area")
        self.editor.setFixedHeight(64)
        self.editor.setPlainText(text)
        layout.addWidget(self.editor)

        self.update_counter(len(text))

    def update_counter(self, length: int) -> None:
        self.counter.setText(f"{length}/{self.max_chars}")

    def set_text_silently(self, text: str) -> None:
        cursor_position = min(self.editor.textCursor().position(), len(text))
        self.editor.blockSignals(True)
        self.editor.setPlainText(text)
        cursor = self.editor.textCursor()
        cursor.setPosition(cursor_position)
        self.editor.setTextCursor(cursor)
        self.editor.blockSignals(False)
        self.update_counter(len(text))


class RegionPanel(GroupHeader):
    """
    Lists the session's regions in display order.

    Text edits go straight to the session; a history snapshot is taken when
    an editor loses focus. Removal commits immediately.

    Signals:
        selections_changed: Emitted after a region was removed from here
    """
    selections_changed = Signal()

    def __init__(self, session: EditorSession, logger: ILoggerService, parent=None):
        super().__init__("Replacement Text", parent)
        self.session = session
        self.logger = logger
        self.rows: Dict[int, RegionRow] = {}

        layout = QVBoxLayout(self)

        self.count_label = QLabel()
        layout.addWidget(self.count_label)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QScrollArea.NoFrame)
        self.rows_container = QWidget()
        self.rows_layout = QVBoxLayout(self.rows_container)
        self.rows_layout.setAlignment(Qt.AlignTop)
        scroll.setWidget(self.rows_container)
        layout.addWidget(scroll)

        self.empty_label = QLabel("Drag on the image to mark the text you want to restore.")
        self.empty_label.setWordWrap(True)
        self.empty_label.setStyleSheet("color: #64748b;")
        self.rows_layout.addWidget(self.empty_label)

        self.rebuild()

    def rebuild(self) -> None:
        """Recreate all rows from the session state."""
        for row in self.rows.values():
            self.rows_layout.removeWidget(row)
            row.deleteLater()
        self.rows = {}

        store = self.session.store
        for number, region in enumerate(store.regions, start=1):
            row = RegionRow(number, region.id, store.get_replacement(region.id), store.max_chars)
            row.editor.textChanged.connect(lambda region_id=region.id: self._on_text_changed(region_id))
            row.editor.focus_lost.connect(lambda region_id=region.id: self._on_focus_lost(region_id))
            row.remove_button.clicked.connect(lambda _=False, region_id=region.id: self._on_remove(region_id))
            row.setEnabled(not self.session.is_restoring)
            self.rows_layout.addWidget(row)
            self.rows[region.id] = row

        self.empty_label.setVisible(not self.rows)
        self.count_label.setText(f"Regions ({store.count}/{store.max_selections})")

    def set_locked(self, locked: bool) -> None:
        for row in self.rows.values():
            row.setEnabled(not locked)

    def _on_text_changed(self, region_id: int) -> None:
        row = self.rows.get(region_id)
        if row is None:
            return

        text = row.editor.toPlainText()
        if self.session.edit_text(region_id, text):
            row.update_counter(len(text))
        else:
            row.set_text_silently(self.session.store.get_replacement(region_id))

    def _on_focus_lost(self, region_id: int) -> None:
        self.session.commit_text(region_id)

    def _on_remove(self, region_id: int) -> None:
        if self.session.remove_region(region_id):
            self.rebuild()
            self.selections_changed.emit()
