import io

import pytest
from PIL import Image

from slide_restore.domain.services.i_logger_service import ILoggerService


class RecordingLogger(ILoggerService):
    """Logger that keeps (level, message, context) tuples in memory."""

    def __init__(self):
        self.records = []

    def _record(self, level, message, kwargs):
        self.records.append((level, message, kwargs))

    def debug(self, message: str, **kwargs) -> None:
        self._record("DEBUG", message, kwargs)

    def info(self, message: str, **kwargs) -> None:
        self._record("INFO", message, kwargs)

    def warning(self, message: str, **kwargs) -> None:
        self._record("WARNING", message, kwargs)

    def error(self, message: str, **kwargs) -> None:
        self._record("ERROR", message, kwargs)

    def critical(self, message: str, **kwargs) -> None:
        self._record("CRITICAL", message, kwargs)

    def set_level(self, level: int) -> None:
        pass

    def messages(self, level):
        return [message for record_level, message, _ in self.records if record_level == level]


@pytest.fixture
def logger():
    return RecordingLogger()


def gradient_image(width=80, height=60, mode="RGB"):
    """Deterministic image where every pixel has a distinct-ish colour."""
    image = Image.new(mode, (width, height))
    pixels = image.load()
    for y in range(height):
        for x in range(width):
            color = ((x * 3) % 256, (y * 5) % 256, (x + y) % 256)
            pixels[x, y] = color + (255,) if mode == "RGBA" else color
    return image


def png_bytes(image):
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()
