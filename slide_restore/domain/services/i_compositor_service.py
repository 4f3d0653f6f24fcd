# slide_restore/domain/services/i_compositor_service.py
from abc import ABC, abstractmethod
from typing import Sequence

from PIL import Image

from slide_restore.domain.models.region_model import Region


class ICompositorService(ABC):
    """Merges model output back onto the untouched source."""

    @abstractmethod
    def composite(self, source: Image.Image, model_image: Image.Image,
                  regions: Sequence[Region]) -> Image.Image:
        """
        Build a new image equal to source except inside the regions, where the
        matching area of model_image (scaled to the source size) is pasted.
        """
        pass
