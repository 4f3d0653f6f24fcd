# slide_restore/infrastructure/imaging/overlay_renderer.py
"""
Renders the editing overlay: base image plus numbered selection boxes.
"""
import math
from typing import Sequence, Tuple

from PIL import Image, ImageDraw, ImageFont

from slide_restore.domain.models.region_model import Region
from slide_restore.domain.services.i_overlay_renderer_service import IOverlayRenderer

SELECTION_COLOR = (239, 68, 68)  # #ef4444
FILL_ALPHA = 26  # ~10% opacity
OUTLINE_WIDTH = 4
BADGE_SIZE = 30
BADGE_FONT_SIZE = 20


class PillowOverlayRenderer(IOverlayRenderer):
    """
    Draws each region in display order: translucent fill, outline, and a
    square badge with its 1-based number at the top-right corner. Later
    regions paint over earlier ones.
    """

    def __init__(self, color: Tuple[int, int, int] = SELECTION_COLOR,
                 outline_width: int = OUTLINE_WIDTH, badge_size: int = BADGE_SIZE):
        self.color = color
        self.outline_width = outline_width
        self.badge_size = badge_size
        self.font = ImageFont.load_default(size=BADGE_FONT_SIZE)

    def render(self, source: Image.Image, regions: Sequence[Region]) -> Image.Image:
        frame = source.convert("RGBA")

        for number, region in enumerate(regions, start=1):
            left, top = region.x, region.y
            right, bottom = region.x + region.w, region.y + region.h

            self._blend_fill(frame, left, top, right, bottom)

            draw = ImageDraw.Draw(frame)
            draw.rectangle((left, top, right, bottom), outline=self.color + (255,), width=self.outline_width)

            badge_left = right - self.badge_size
            draw.rectangle((badge_left, top, right, top + self.badge_size), fill=self.color + (255,))
            self._draw_centered(draw, str(number), right - self.badge_size / 2, top + self.badge_size / 2)

        return frame

    def _blend_fill(self, frame: Image.Image, left: float, top: float, right: float, bottom: float) -> None:
        """Blend the translucent fill in place, through a layer the size of the box only."""
        box_left = max(0, int(math.floor(left)))
        box_top = max(0, int(math.floor(top)))
        # ImageDraw rectangles include the right and bottom edges
        box_right = min(frame.width, int(math.ceil(right)) + 1)
        box_bottom = min(frame.height, int(math.ceil(bottom)) + 1)
        if box_right <= box_left or box_bottom <= box_top:
            return

        layer = Image.new("RGBA", (box_right - box_left, box_bottom - box_top), (0, 0, 0, 0))
        ImageDraw.Draw(layer).rectangle(
            (left - box_left, top - box_top, right - box_left, bottom - box_top),
            fill=self.color + (FILL_ALPHA,)
        )
        frame.alpha_composite(layer, dest=(box_left, box_top))

    def _draw_centered(self, draw: ImageDraw.ImageDraw, text: str, cx: float, cy: float) -> None:
        # textbbox works for both FreeType and bitmap fallback fonts
        x0, y0, x1, y1 = draw.textbbox((0, 0), text, font=self.font)
        draw.text((cx - (x0 + x1) / 2, cy - (y0 + y1) / 2), text, fill=(255, 255, 255, 255), font=self.font)
