# slide_restore/domain/services/i_background_task_service.py
"""
Background task service interface.

Long-latency work (the model call) runs off the UI thread. Tasks are keyed
by id and a second task with a running id is rejected, which is how only
one restore can be in flight at a time. Tasks cannot be cancelled once
submitted.
"""
from abc import ABC, abstractmethod
from typing import Any, Callable, Generic, List, Optional, TypeVar

from slide_restore.domain.common.result import Result

T = TypeVar('T')


class Worker(Generic[T]):
    """
    Base class for background workers executed by the task service.

    Workers report start, progress, completion with a result, or an error.
    """

    def __init__(self):
        self.on_started_callback: Optional[Callable[[], None]] = None
        self.on_progress_callback: Optional[Callable[[int, str], None]] = None
        self.on_completed_callback: Optional[Callable[[T], None]] = None
        self.on_error_callback: Optional[Callable[[str], None]] = None

    def set_on_started(self, callback: Callable[[], None]) -> None:
        self.on_started_callback = callback

    def set_on_progress(self, callback: Callable[[int, str], None]) -> None:
        self.on_progress_callback = callback

    def set_on_completed(self, callback: Callable[[T], None]) -> None:
        self.on_completed_callback = callback

    def set_on_error(self, callback: Callable[[str], None]) -> None:
        self.on_error_callback = callback

    def report_started(self) -> None:
        if self.on_started_callback:
            self.on_started_callback()

    def report_progress(self, percent: int, message: str = "") -> None:
        if self.on_progress_callback:
            self.on_progress_callback(percent, message)

    def report_completed(self, result: T) -> None:
        if self.on_completed_callback:
            self.on_completed_callback(result)

    def report_error(self, error: str) -> None:
        if self.on_error_callback:
            self.on_error_callback(error)

    @abstractmethod
    def execute(self) -> T:
        """
        Execute the worker's task. Called in a background thread.

        Returns:
            The result of the worker's execution
        """
        pass


class IBackgroundTaskService(ABC):
    """Runs workers in background threads and tracks them by id."""

    @abstractmethod
    def execute_task(self, task_id: str, worker: Worker[Any]) -> Result[bool]:
        """
        Execute a worker in a background thread.

        Returns:
            Result indicating whether the task was started; fails if a task
            with the same id is still running
        """
        pass

    @abstractmethod
    def is_task_running(self, task_id: str) -> bool:
        pass

    @abstractmethod
    def get_running_tasks(self) -> List[str]:
        pass

    @abstractmethod
    def wait_for_all(self, timeout_ms: int = 5000) -> None:
        """Block until running tasks finish or the timeout passes."""
        pass
