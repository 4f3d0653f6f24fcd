# slide_restore/domain/models/history_model.py
"""
Snapshot model for the undo/redo history.
"""
from dataclasses import dataclass, field
from typing import Dict, Sequence, Tuple

from slide_restore.domain.models.region_model import Region


@dataclass(frozen=True)
class HistorySnapshot:
    """
    Immutable copy of the editing state taken at a commit point.

    Attributes:
        selections: Region copies in display order
        replacements: Replacement text keyed by region id
    """
    selections: Tuple[Region, ...] = ()
    replacements: Dict[int, str] = field(default_factory=dict)

    @classmethod
    def capture(cls, selections: Sequence[Region], replacements: Dict[int, str]) -> 'HistorySnapshot':
        """Deep-copy live state into a new snapshot."""
        return cls(
            selections=tuple(region.copy() for region in selections),
            replacements=dict(replacements),
        )

    def matches(self, selections: Sequence[Region], replacements: Dict[int, str]) -> bool:
        """Check whether live state equals this snapshot."""
        return list(self.selections) == list(selections) and self.replacements == dict(replacements)


EMPTY_SNAPSHOT = HistorySnapshot()
