# slide_restore/domain/editing/selection_store.py
"""
Owner of the drawn regions and their replacement text.

All mutations are synchronous. Policy limits (region count, text length,
restore in progress) are reported through return values, never raised.
"""
import itertools
from typing import Dict, List, Optional, Sequence

from slide_restore.domain.editing.geometry import bounding_box
from slide_restore.domain.models.region_model import Point, Region

MAX_SELECTIONS = 10
MAX_CHAR_LIMIT = 300


class SelectionStore:
    """
    Ordered regions (insertion order is display and numbering order) plus a
    region-id to replacement-text mapping.
    """

    def __init__(self, max_selections: int = MAX_SELECTIONS, max_chars: int = MAX_CHAR_LIMIT):
        self.max_selections = max_selections
        self.max_chars = max_chars
        self._regions: List[Region] = []
        self._replacements: Dict[int, str] = {}
        self._ids = itertools.count(1)
        self._drag_start: Optional[Point] = None

    @property
    def regions(self) -> List[Region]:
        """Live regions. Callers must not mutate them."""
        return self._regions

    @property
    def replacements(self) -> Dict[int, str]:
        return self._replacements

    @property
    def count(self) -> int:
        return len(self._regions)

    @property
    def is_full(self) -> bool:
        return len(self._regions) >= self.max_selections

    @property
    def is_drawing(self) -> bool:
        return self._drag_start is not None

    def get_region(self, region_id: int) -> Optional[Region]:
        for region in self._regions:
            if region.id == region_id:
                return region
        return None

    def get_replacement(self, region_id: int) -> str:
        return self._replacements.get(region_id, "")

    def begin_region(self, pos: Point, restoring: bool = False) -> Optional[Region]:
        """
        Start a drag gesture with a zero-size region at pos.

        Returns:
            The new region, or None when the limit is reached or a restore is running
        """
        if restoring or self.is_full:
            return None

        region = Region(id=next(self._ids), x=pos[0], y=pos[1], w=0.0, h=0.0)
        self._regions.append(region)
        self._drag_start = (pos[0], pos[1])
        return region

    def update_active_region(self, pos: Point) -> Optional[Region]:
        """Resize the region being drawn so it spans from the drag start to pos."""
        if self._drag_start is None or not self._regions:
            return None

        region = self._regions[-1]
        region.x, region.y, region.w, region.h = bounding_box(self._drag_start, pos)
        return region

    def end_region(self) -> bool:
        """
        Finish the drag gesture.

        Returns:
            True if a gesture was active (the caller should commit history)
        """
        was_drawing = self._drag_start is not None
        self._drag_start = None
        return was_drawing

    def set_replacement(self, region_id: int, text: str) -> bool:
        """
        Set the replacement text for a region. Empty text removes the entry.

        Returns:
            False if the text exceeds the character limit (prior value kept)
        """
        if len(text) > self.max_chars:
            return False
        if text:
            self._replacements[region_id] = text
        else:
            self._replacements.pop(region_id, None)
        return True

    def remove_region(self, region_id: int) -> bool:
        """Remove a region and its replacement text."""
        region = self.get_region(region_id)
        if region is None:
            return False

        self._regions.remove(region)
        self._replacements.pop(region_id, None)
        return True

    def restore_state(self, selections: Sequence[Region], replacements: Dict[int, str]) -> None:
        """Replace the whole state with copies of the given selections and text."""
        self._regions = [region.copy() for region in selections]
        self._replacements = dict(replacements)
        self._drag_start = None

    def clear(self) -> None:
        self._regions = []
        self._replacements = {}
        self._drag_start = None
