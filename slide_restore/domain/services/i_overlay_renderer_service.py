# slide_restore/domain/services/i_overlay_renderer_service.py
from abc import ABC, abstractmethod
from typing import Sequence

from PIL import Image

from slide_restore.domain.models.region_model import Region


class IOverlayRenderer(ABC):
    """Draws the source image with numbered selection rectangles."""

    @abstractmethod
    def render(self, source: Image.Image, regions: Sequence[Region]) -> Image.Image:
        """Full redraw of the overlay; never patches a previous frame."""
        pass
