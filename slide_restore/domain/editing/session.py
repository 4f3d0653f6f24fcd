# slide_restore/domain/editing/session.py
"""
Editing session state owned by the main window.

The session ties the selection store and the history log to the current
source image, and enforces the commit points:
- end of a drag gesture
- focus leaving a text field while the state differs from the current snapshot
- region removal
"""
from typing import Optional

from PIL import Image

from slide_restore.domain.common.result import Result
from slide_restore.domain.editing.history_log import HistoryLog
from slide_restore.domain.editing.selection_store import SelectionStore
from slide_restore.domain.models.history_model import HistorySnapshot
from slide_restore.domain.models.region_model import Point, Region
from slide_restore.domain.models.restore_model import RestoreOutcome
from slide_restore.domain.services.i_logger_service import ILoggerService


class EditorSession:
    """
    Explicit state for one editing session.

    Attributes:
        store: Regions and replacement text
        history: Undo/redo snapshots
        source_image: Image being edited, or None before the first upload
        result_image: Last successful restore result for this source
        page_number: 1-based page of the loaded PDF (1 for plain images)
        page_count: Number of pages of the loaded PDF (0 for plain images)
        generation: Incremented on every source change; used to drop stale restores
    """

    def __init__(self, logger: ILoggerService,
                 store: Optional[SelectionStore] = None,
                 history: Optional[HistoryLog] = None):
        self.logger = logger
        self.store = store or SelectionStore()
        self.history = history or HistoryLog()
        self.source_image: Optional[Image.Image] = None
        self.result_image: Optional[Image.Image] = None
        self.page_number = 1
        self.page_count = 0
        self.generation = 0
        self._restoring = False
        self._restore_generation: Optional[int] = None

    # ----- source -----

    @property
    def has_source(self) -> bool:
        return self.source_image is not None

    @property
    def is_paginated(self) -> bool:
        return self.page_count > 0

    def load_source(self, image: Image.Image, page_number: int = 1, page_count: int = 0) -> None:
        """
        Replace the source image and reset regions, text, history and result.
        """
        self.source_image = image
        self.result_image = None
        self.page_number = page_number
        self.page_count = page_count
        self.store.clear()
        self.history.clear()
        self.generation += 1
        self.logger.info("Source loaded", size=f"{image.width}x{image.height}",
                         page=page_number, pages=page_count)

    def can_change_page(self, page_number: int) -> bool:
        return self.is_paginated and 1 <= page_number <= self.page_count

    # ----- drawing -----

    def begin_drag(self, pos: Point) -> Optional[Region]:
        """Start a new region at pos. Returns None when drawing is not allowed."""
        if not self.has_source:
            return None

        region = self.store.begin_region(pos, restoring=self._restoring)
        if region is None:
            if self._restoring:
                self.logger.debug("Drawing ignored while a restore is running")
            else:
                self.logger.warning("Region limit reached", limit=self.store.max_selections)
        return region

    def drag_to(self, pos: Point) -> Optional[Region]:
        return self.store.update_active_region(pos)

    def end_drag(self) -> bool:
        """Finish the gesture and commit a snapshot if one was in progress."""
        if not self.store.end_region():
            return False
        self._commit()
        return True

    # ----- text -----

    def edit_text(self, region_id: int, text: str) -> bool:
        """Update replacement text without committing history."""
        accepted = self.store.set_replacement(region_id, text)
        if not accepted:
            self.logger.warning("Replacement text too long", region=region_id,
                                length=len(text), limit=self.store.max_chars)
        return accepted

    def commit_text(self, region_id: int) -> bool:
        """
        Commit point for a text field losing focus.

        A snapshot is taken whenever the live state differs from the snapshot
        at the history cursor.
        """
        if self.history.current.matches(self.store.regions, self.store.replacements):
            return False
        self.logger.debug("Committing text edit", region=region_id)
        self._commit()
        return True

    def remove_region(self, region_id: int) -> bool:
        if self._restoring or not self.store.remove_region(region_id):
            return False
        self._commit()
        return True

    # ----- history -----

    def undo(self) -> bool:
        if self._restoring:
            return False
        return self._apply(self.history.undo())

    def redo(self) -> bool:
        if self._restoring:
            return False
        return self._apply(self.history.redo())

    def _commit(self) -> HistorySnapshot:
        snapshot = self.history.commit(self.store.regions, self.store.replacements)
        self.logger.debug("History committed", index=self.history.index, size=len(self.history))
        return snapshot

    def _apply(self, snapshot: Optional[HistorySnapshot]) -> bool:
        if snapshot is None:
            return False
        self.store.restore_state(snapshot.selections, snapshot.replacements)
        return True

    # ----- restore -----

    @property
    def is_restoring(self) -> bool:
        return self._restoring

    @property
    def can_restore(self) -> bool:
        return self.has_source and self.store.count > 0 and not self._restoring

    def begin_restore(self) -> Optional[int]:
        """
        Mark a restore as in flight.

        Returns:
            Token to hand back to finish_restore, or None if a restore is
            already running or there is nothing to restore
        """
        if not self.can_restore:
            return None
        self._restoring = True
        self._restore_generation = self.generation
        return self.generation

    def finish_restore(self, token: int, result: Result[RestoreOutcome]) -> bool:
        """
        Complete the in-flight restore.

        The result image is only stored on success, and only when the source
        has not changed since the restore started.

        Returns:
            True if a new result image was stored
        """
        if token != self._restore_generation:
            self.logger.debug("Ignoring result for unknown restore", token=token)
            return False

        self._restoring = False
        self._restore_generation = None

        if token != self.generation:
            self.logger.info("Discarding stale restore result", token=token, current=self.generation)
            return False
        if result.is_failure:
            return False

        self.result_image = result.value.image
        return True
