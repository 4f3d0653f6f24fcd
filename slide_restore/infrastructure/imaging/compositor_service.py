# slide_restore/infrastructure/imaging/compositor_service.py
"""
Pixel compositing of model output onto the original image.

The output starts as an exact copy of the source, so every pixel outside
the selected regions is identical to the source regardless of what the
model produced there. Only the region rectangles are taken from the model
image, scaled back to the source's footprint.
"""
from typing import Sequence

import numpy as np
from PIL import Image

from slide_restore.domain.editing.geometry import pixel_bounds
from slide_restore.domain.models.region_model import Region
from slide_restore.domain.services.i_compositor_service import ICompositorService
from slide_restore.domain.services.i_logger_service import ILoggerService


class PillowCompositorService(ICompositorService):
    """Compositor built on Pillow's box resampling."""

    def __init__(self, logger: ILoggerService, resample: int = Image.Resampling.LANCZOS):
        self.logger = logger
        self.resample = resample

    def composite(self, source: Image.Image, model_image: Image.Image,
                  regions: Sequence[Region]) -> Image.Image:
        output = source.copy()
        if not regions:
            return output

        # The model may answer at a different resolution than the input
        scale_x = model_image.width / source.width
        scale_y = model_image.height / source.height
        patch_source = model_image if model_image.mode == output.mode else model_image.convert(output.mode)

        for region in regions:
            left, top, right, bottom = pixel_bounds(region, source.width, source.height)
            width, height = right - left, bottom - top
            if width == 0 or height == 0:
                self.logger.debug("Skipping empty region", region=region.id)
                continue

            box = (left * scale_x, top * scale_y, right * scale_x, bottom * scale_y)
            patch = patch_source.resize((width, height), self.resample, box=box)
            output.paste(patch, (left, top))

        self.logger.debug(
            "Composited regions",
            count=len(regions),
            model_size=f"{model_image.width}x{model_image.height}",
            source_size=f"{source.width}x{source.height}",
        )
        return output


def changed_mask(source: Image.Image, result: Image.Image) -> np.ndarray:
    """
    Boolean (height, width) array marking pixels that differ between two
    images of the same size.

    Raises:
        ValueError: If the sizes differ
    """
    if source.size != result.size:
        raise ValueError(f"Size mismatch: {source.size} vs {result.size}")

    a = np.asarray(source.convert("RGBA"))
    b = np.asarray(result.convert("RGBA"))
    return np.any(a != b, axis=-1)
