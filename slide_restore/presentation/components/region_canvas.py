# slide_restore/presentation/components/region_canvas.py
"""
Drawing surface for region selection.

Shows the source image with the selection overlay, scaled to fit the
widget, and turns mouse drags into session gestures.
"""
from typing import Optional

from PySide6.QtCore import QRect, Qt, Signal
from PySide6.QtGui import QColor, QPainter, QPixmap
from PySide6.QtWidgets import QSizePolicy, QWidget

from slide_restore.domain.editing.geometry import DisplayRect, contains, to_canvas_coords
from slide_restore.domain.editing.session import EditorSession
from slide_restore.domain.services.i_logger_service import ILoggerService
from slide_restore.domain.services.i_overlay_renderer_service import IOverlayRenderer
from slide_restore.presentation.components.ui_components import pil_to_qpixmap


class RegionCanvas(QWidget):
    """
    Click and drag on the image to add a region.

    Signals:
        selections_changed: Emitted after any change to the region list
        region_limit_reached: Emitted when a drag is refused because the store is full
    """
    selections_changed = Signal()
    region_limit_reached = Signal(int)

    def __init__(self, session: EditorSession, renderer: IOverlayRenderer,
                 logger: ILoggerService, parent=None):
        super().__init__(parent)
        self.session = session
        self.renderer = renderer
        self.logger = logger
        self.pixmap: Optional[QPixmap] = None

        self.setMinimumSize(480, 320)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.setCursor(Qt.CrossCursor)
        self.setMouseTracking(False)

    def refresh(self) -> None:
        """Redraw the overlay from the current session state."""
        if not self.session.has_source:
            self.pixmap = None
        else:
            frame = self.renderer.render(self.session.source_image, self.session.store.regions)
            self.pixmap = pil_to_qpixmap(frame)
        self.update()

    def display_rect(self) -> DisplayRect:
        """Where the image is drawn inside the widget: aspect-fit and centred."""
        if self.pixmap is None or self.pixmap.width() == 0 or self.pixmap.height() == 0:
            return 0.0, 0.0, 0.0, 0.0

        scale = min(self.width() / self.pixmap.width(), self.height() / self.pixmap.height())
        display_w = self.pixmap.width() * scale
        display_h = self.pixmap.height() * scale
        left = (self.width() - display_w) / 2
        top = (self.height() - display_h) / 2
        return left, top, display_w, display_h

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.fillRect(self.rect(), QColor(241, 245, 249))

        if self.pixmap is None:
            painter.setPen(QColor(100, 116, 139))
            painter.drawText(self.rect(), Qt.AlignCenter, "Upload an image or PDF to start")
            return

        painter.setRenderHint(QPainter.SmoothPixmapTransform)
        left, top, width, height = self.display_rect()
        painter.drawPixmap(QRect(round(left), round(top), round(width), round(height)), self.pixmap)

    def _canvas_pos(self, event):
        pos = event.position()
        source = self.session.source_image
        return to_canvas_coords((pos.x(), pos.y()), self.display_rect(), (source.width, source.height))

    def mousePressEvent(self, event):
        if event.button() != Qt.LeftButton or not self.session.has_source:
            return
        # Presses on the letterbox margin do not start a region
        pos = event.position()
        if not contains(self.display_rect(), (pos.x(), pos.y())):
            return

        region = self.session.begin_drag(self._canvas_pos(event))
        if region is None:
            if self.session.store.is_full and not self.session.is_restoring:
                self.region_limit_reached.emit(self.session.store.max_selections)
            return
        self.refresh()

    def mouseMoveEvent(self, event):
        if not self.session.store.is_drawing:
            return
        if self.session.drag_to(self._canvas_pos(event)) is not None:
            self.refresh()

    def mouseReleaseEvent(self, event):
        if event.button() != Qt.LeftButton:
            return
        if self.session.end_drag():
            self.refresh()
            self.selections_changed.emit()
