# slide_restore/domain/editing/history_log.py
"""
Bounded snapshot log with a cursor, driving undo and redo.
"""
from typing import Dict, List, Optional, Sequence

from slide_restore.domain.models.history_model import EMPTY_SNAPSHOT, HistorySnapshot
from slide_restore.domain.models.region_model import Region

MAX_HISTORY = 50


class HistoryLog:
    """
    Ordered snapshots plus a cursor. The cursor is -1 when no snapshot is
    applied (empty editing state) and otherwise indexes the current snapshot.

    The log does not suppress duplicate commits; callers decide when a commit
    is warranted.
    """

    def __init__(self, capacity: int = MAX_HISTORY):
        if capacity < 1:
            raise ValueError("History capacity must be at least 1")
        self.capacity = capacity
        self._snapshots: List[HistorySnapshot] = []
        self._index = -1

    def __len__(self) -> int:
        return len(self._snapshots)

    @property
    def index(self) -> int:
        return self._index

    @property
    def current(self) -> HistorySnapshot:
        """Snapshot at the cursor, or the empty snapshot at -1."""
        if self._index < 0:
            return EMPTY_SNAPSHOT
        return self._snapshots[self._index]

    @property
    def can_undo(self) -> bool:
        return self._index >= 0

    @property
    def can_redo(self) -> bool:
        return self._index < len(self._snapshots) - 1

    def commit(self, selections: Sequence[Region], replacements: Dict[int, str]) -> HistorySnapshot:
        """
        Append a deep copy of the given state after the cursor.

        Snapshots after the cursor (the redo branch) are discarded. When the
        log exceeds its capacity the oldest snapshot is dropped.
        """
        snapshot = HistorySnapshot.capture(selections, replacements)

        del self._snapshots[self._index + 1:]
        self._snapshots.append(snapshot)
        if len(self._snapshots) > self.capacity:
            del self._snapshots[0]

        self._index = len(self._snapshots) - 1
        return snapshot

    def undo(self) -> Optional[HistorySnapshot]:
        """
        Step the cursor back.

        Returns:
            The snapshot now current, EMPTY_SNAPSHOT when stepping off the
            first entry, or None when there is nothing to undo
        """
        if self._index > 0:
            self._index -= 1
            return self._snapshots[self._index]
        if self._index == 0:
            self._index = -1
            return EMPTY_SNAPSHOT
        return None

    def redo(self) -> Optional[HistorySnapshot]:
        """Step the cursor forward; None when already at the newest snapshot."""
        if self._index < len(self._snapshots) - 1:
            self._index += 1
            return self._snapshots[self._index]
        return None

    def clear(self) -> None:
        self._snapshots = []
        self._index = -1
