# slide_restore/infrastructure/imaging/document_decoder.py
"""
Decoder for uploaded files: raster images through Pillow, PDF pages through
PyMuPDF.
"""
import io
from typing import Any, Callable

import fitz  # PyMuPDF
from PIL import Image, ImageOps, UnidentifiedImageError

from slide_restore.domain.common.errors import DecodeError, ValidationError
from slide_restore.domain.common.result import Result
from slide_restore.domain.services.i_document_decoder_service import IDocumentDecoder
from slide_restore.domain.services.i_logger_service import ILoggerService


class PillowPdfDocumentDecoder(IDocumentDecoder):
    """
    Decodes images with Pillow and rasterizes PDF pages with PyMuPDF.

    Pages are rendered at a fixed upscale factor so small slide text stays
    legible for the model.
    """

    def __init__(self, logger: ILoggerService, render_scale: Callable[[], float]):
        """
        Initialize the decoder.

        Args:
            logger: Logger service for logging
            render_scale: Provider of the PDF upscale factor (read at render time)
        """
        self.logger = logger
        self.render_scale = render_scale

    def decode_image(self, data: bytes) -> Result[Image.Image]:
        try:
            with Image.open(io.BytesIO(data)) as opened:
                image = ImageOps.exif_transpose(opened)
                image.load()
        except (UnidentifiedImageError, OSError, ValueError) as e:
            self.logger.debug(f"Rejected upload that is not an image: {e}")
            return Result.fail(DecodeError(
                message="File is not a readable image",
                details={"size": len(data)},
                inner_error=e
            ))

        if image.mode not in ("RGB", "RGBA"):
            has_alpha = image.mode in ("LA", "PA") or "transparency" in image.info
            image = image.convert("RGBA" if has_alpha else "RGB")

        self.logger.debug(f"Decoded image {image.width}x{image.height} ({image.mode})")
        return Result.ok(image)

    def open_pdf(self, data: bytes) -> Result[Any]:
        try:
            document = fitz.open(stream=data, filetype="pdf")
        except (RuntimeError, ValueError) as e:
            self.logger.debug(f"Rejected upload that is not a PDF: {e}")
            return Result.fail(DecodeError(
                message="File is not a readable PDF",
                details={"size": len(data)},
                inner_error=e
            ))

        if document.page_count == 0:
            document.close()
            return Result.fail(DecodeError(message="PDF has no pages"))

        self.logger.info(f"Opened PDF with {document.page_count} pages")
        return Result.ok(document)

    def page_count(self, document: Any) -> int:
        return document.page_count

    def render_page(self, document: Any, page_number: int) -> Result[Image.Image]:
        if not 1 <= page_number <= document.page_count:
            return Result.fail(ValidationError(
                message=f"Page {page_number} is out of range",
                details={"pages": document.page_count}
            ))

        scale = self.render_scale()
        try:
            page = document[page_number - 1]
            pix = page.get_pixmap(matrix=fitz.Matrix(scale, scale), alpha=False)
            image = Image.frombytes("RGB", (pix.width, pix.height), pix.samples)
        except (RuntimeError, ValueError) as e:
            error = DecodeError(
                message=f"Failed to render page {page_number}: {e}",
                details={"page": page_number, "scale": scale},
                inner_error=e
            )
            self.logger.error(str(error))
            return Result.fail(error)

        self.logger.debug(f"Rendered page {page_number} at x{scale}: {image.width}x{image.height}")
        return Result.ok(image)
