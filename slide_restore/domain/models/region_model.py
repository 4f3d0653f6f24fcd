# slide_restore/domain/models/region_model.py
from dataclasses import dataclass, replace
from typing import Tuple

Point = Tuple[float, float]


@dataclass
class Region:
    """Rectangle drawn on the source image, in source-image pixel space."""
    id: int  # Stable identifier issued by the selection store
    x: float = 0.0
    y: float = 0.0
    w: float = 0.0
    h: float = 0.0

    @property
    def rect(self) -> Tuple[float, float, float, float]:
        return (self.x, self.y, self.w, self.h)

    def copy(self) -> 'Region':
        return replace(self)
