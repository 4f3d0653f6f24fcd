# slide_restore/domain/services/i_document_decoder_service.py
"""
Decoder interface for uploaded images and PDF documents.
"""
from abc import ABC, abstractmethod
from typing import Any

from PIL import Image

from slide_restore.domain.common.result import Result


class IDocumentDecoder(ABC):
    """Turns uploaded bytes into source images."""

    @abstractmethod
    def decode_image(self, data: bytes) -> Result[Image.Image]:
        """
        Decode raster image bytes.

        Returns:
            Result containing an RGB or RGBA image, or a DecodeError
        """
        pass

    @abstractmethod
    def open_pdf(self, data: bytes) -> Result[Any]:
        """
        Open a PDF document held in memory.

        Returns:
            Result containing an opaque document handle, or a DecodeError
        """
        pass

    @abstractmethod
    def page_count(self, document: Any) -> int:
        """Number of pages in an opened document."""
        pass

    @abstractmethod
    def render_page(self, document: Any, page_number: int) -> Result[Image.Image]:
        """
        Rasterize a 1-based page at the configured upscale factor.

        Returns:
            Result containing the page as an RGB image
        """
        pass
