# slide_restore/domain/models/restore_model.py
"""
Models exchanged between the restore orchestrator and the generative model.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from PIL import Image

from slide_restore.domain.models.region_model import Region


class QualityTier(Enum):
    """Output resolution class requested from the model."""
    ONE_K = "1K"
    TWO_K = "2K"
    FOUR_K = "4K"

    @property
    def label(self) -> str:
        return {
            QualityTier.ONE_K: "Restore (1K)",
            QualityTier.TWO_K: "Precise restore (2K)",
            QualityTier.FOUR_K: "Precise restore (4K)",
        }[self]


@dataclass(frozen=True)
class ModelRequest:
    """Single request to the generative image model."""
    image_png: bytes
    prompt: str
    quality_tier: QualityTier
    aspect_ratio: str


@dataclass(frozen=True)
class ModelResponse:
    """
    Tagged model answer: either image bytes or a reason why there are none.
    """
    image: Optional[bytes] = None
    reason: Optional[str] = None

    @property
    def has_image(self) -> bool:
        return bool(self.image)

    @classmethod
    def with_image(cls, data: bytes) -> 'ModelResponse':
        return cls(image=data)

    @classmethod
    def without_image(cls, reason: str) -> 'ModelResponse':
        return cls(image=None, reason=reason)


@dataclass
class RestoreOutcome:
    """
    Successful restore run.

    Attributes:
        image: Composited result, same size as the source
        regions_applied: Regions that carried replacement text
        quality_tier: Tier the model was asked for
    """
    image: Image.Image
    regions_applied: Tuple[Region, ...]
    quality_tier: QualityTier

    @property
    def region_count(self) -> int:
        return len(self.regions_applied)
