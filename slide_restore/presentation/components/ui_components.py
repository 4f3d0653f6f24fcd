# slide_restore/presentation/components/ui_components.py
from PIL import Image
from PySide6.QtGui import QImage, QPixmap
from PySide6.QtWidgets import QGroupBox, QPushButton

BUTTON_COLORS = {
    # role: (normal, hover, pressed)
    "primary": ("#3a7ca5", "#2a6b94", "#1a5a83"),
    "accent": ("#ef4444", "#dc2626", "#b91c1c"),
    "neutral": ("#64748b", "#475569", "#334155"),
}


class StyledButton(QPushButton):
    """Flat colored button. role selects the palette from BUTTON_COLORS."""
    def __init__(self, text, parent=None, role="primary"):
        super().__init__(text, parent)
        normal, hover, pressed = BUTTON_COLORS.get(role, BUTTON_COLORS["primary"])
        self.setStyleSheet(f"""
            QPushButton {{
                background-color: {normal};
                color: white;
                padding: 8px 16px;
                border-radius: 4px;
                font-weight: bold;
            }}
            QPushButton:hover {{
                background-color: {hover};
            }}
            QPushButton:pressed {{
                background-color: {pressed};
            }}
            QPushButton:disabled {{
                background-color: #cbd5e1;
                color: #f8fafc;
            }}
        """)


class GroupHeader(QGroupBox):
    """Group box used for the side panels."""
    def __init__(self, title, parent=None):
        super().__init__(title, parent)
        self.setStyleSheet("""
            QGroupBox {
                font-weight: bold;
                border: 1px solid #e2e8f0;
                border-radius: 6px;
                margin-top: 10px;
                padding-top: 15px;
            }
            QGroupBox::title {
                subcontrol-origin: margin;
                subcontrol-position: top left;
                padding: 0 5px;
            }
        """)


def pil_to_qpixmap(image: Image.Image) -> QPixmap:
    """Convert a PIL image to a QPixmap (copied, so the PIL buffer can be freed)."""
    rgba = image.convert("RGBA")
    data = rgba.tobytes("raw", "RGBA")
    qimage = QImage(data, rgba.width, rgba.height, rgba.width * 4, QImage.Format_RGBA8888)
    return QPixmap.fromImage(qimage.copy())
