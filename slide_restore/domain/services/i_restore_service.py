# slide_restore/domain/services/i_restore_service.py
"""
Restore service interface.

Builds the model request from the current selections, calls the model and
composites the answer onto the source.
"""
from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional, Sequence

from PIL import Image

from slide_restore.domain.common.result import Result
from slide_restore.domain.models.region_model import Region
from slide_restore.domain.models.restore_model import QualityTier, RestoreOutcome

ProgressCallback = Callable[[int, str], None]


class IRestoreService(ABC):
    """Orchestrates one restore run."""

    @abstractmethod
    def restore(self, source: Image.Image, regions: Sequence[Region],
                replacements: Dict[int, str], quality_tier: QualityTier,
                on_progress: Optional[ProgressCallback] = None) -> Result[RestoreOutcome]:
        """
        Regenerate the regions that carry replacement text.

        Args:
            source: Source image
            regions: Regions in display order
            replacements: Replacement text keyed by region id
            quality_tier: Output resolution class requested from the model
            on_progress: Optional (percent, message) callback

        Returns:
            Result containing the outcome, an EmptyInstructionError when no
            region has text, or a RestoreFailedError
        """
        pass
