# slide_restore/infrastructure/threading/qt_background_task_service.py
"""
Qt implementation of the background task service.

Workers run in a QThread; their callbacks are delivered back on the thread
that submitted the task through queued signal connections. Results are
passed through unchanged (Signal(object)), so PIL images and Result objects
reach the UI thread intact.
"""
import traceback
from typing import Any, Dict, List

from PySide6.QtCore import QMutex, QMutexLocker, QObject, QThread, Qt, Signal, Slot

from slide_restore.domain.common.errors import ValidationError
from slide_restore.domain.common.result import Result
from slide_restore.domain.services.i_background_task_service import IBackgroundTaskService, Worker
from slide_restore.domain.services.i_logger_service import ILoggerService


class WorkerSignals(QObject):
    """
    Signals available from a running worker thread.

    Signals:
        started: The worker began execution
        progress: Progress report (percent, message)
        completed: The worker's return value
        error: Error text for an unhandled exception
    """
    started = Signal()
    progress = Signal(int, str)
    completed = Signal(object)
    error = Signal(str)


class WorkerWrapper(QObject):
    """Bridges a domain Worker to Qt's threading model."""

    def __init__(self, worker: Worker[Any], logger: ILoggerService, task_id: str):
        super().__init__()
        self.worker = worker
        self.logger = logger
        self.task_id = task_id
        self.signals = WorkerSignals()

    @Slot()
    def run(self):
        """Execute the worker's task. Runs in the background thread."""
        try:
            self.logger.debug(f"Worker for task '{self.task_id}' starting execution")
            self.signals.started.emit()
            result = self.worker.execute()
            self.signals.completed.emit(result)
        except Exception as e:
            error_message = f"Unhandled error in worker: {e}"
            self.logger.error(error_message)
            self.logger.debug(traceback.format_exc())
            self.signals.error.emit(error_message)


class TaskInfo:
    """Thread, wrapper and worker belonging to one running task."""

    def __init__(self, task_id: str, thread: QThread, wrapper: WorkerWrapper, worker: Worker):
        self.task_id = task_id
        self.thread = thread
        self.wrapper = wrapper
        self.worker = worker


class QtBackgroundTaskService(IBackgroundTaskService):
    """
    Runs each task in its own QThread and forgets it once it has finished.

    A task id can only be used by one running task at a time.
    """

    def __init__(self, logger: ILoggerService):
        self.logger = logger
        self.tasks: Dict[str, TaskInfo] = {}
        self.mutex = QMutex()

    def execute_task(self, task_id: str, worker: Worker[Any]) -> Result[bool]:
        locker = QMutexLocker(self.mutex)

        if task_id in self.tasks:
            self.logger.warning(f"Task '{task_id}' is already running")
            return Result.fail(ValidationError(
                message=f"Task '{task_id}' is already running",
                details={"task_id": task_id}
            ))

        self.logger.debug(f"Starting task '{task_id}'")

        thread = QThread()
        wrapper = WorkerWrapper(worker, self.logger, task_id)
        wrapper.moveToThread(thread)

        thread.started.connect(wrapper.run)

        # Submitter callbacks run on the submitting thread; reports made from
        # inside execute() are re-routed through the signals
        signals = wrapper.signals
        on_started = worker.on_started_callback
        on_progress = worker.on_progress_callback
        on_completed = worker.on_completed_callback
        on_error = worker.on_error_callback
        worker.set_on_progress(signals.progress.emit)
        worker.set_on_error(signals.error.emit)

        if on_started:
            signals.started.connect(on_started, Qt.QueuedConnection)
        if on_progress:
            signals.progress.connect(on_progress, Qt.QueuedConnection)
        if on_completed:
            signals.completed.connect(on_completed, Qt.QueuedConnection)
        if on_error:
            signals.error.connect(on_error, Qt.QueuedConnection)

        # Tear down once the worker is done either way
        signals.completed.connect(lambda _: self._finish_task(task_id), Qt.QueuedConnection)
        signals.error.connect(lambda _: self._finish_task(task_id), Qt.QueuedConnection)
        thread.finished.connect(wrapper.deleteLater)
        thread.finished.connect(thread.deleteLater)

        self.tasks[task_id] = TaskInfo(task_id, thread, wrapper, worker)
        thread.start()

        self.logger.debug(f"Task '{task_id}' started successfully")
        return Result.ok(True)

    def is_task_running(self, task_id: str) -> bool:
        locker = QMutexLocker(self.mutex)
        return task_id in self.tasks

    def get_running_tasks(self) -> List[str]:
        locker = QMutexLocker(self.mutex)
        return list(self.tasks.keys())

    def wait_for_all(self, timeout_ms: int = 5000) -> None:
        """Block until running threads finish (used on application shutdown)."""
        for task_id in self.get_running_tasks():
            task_info = self.tasks.get(task_id)
            if task_info and not task_info.thread.wait(timeout_ms):
                self.logger.warning(f"Task '{task_id}' did not finish within {timeout_ms} ms")

    def _finish_task(self, task_id: str) -> None:
        locker = QMutexLocker(self.mutex)
        task_info = self.tasks.pop(task_id, None)
        if task_info is None:
            return

        task_info.thread.quit()
        task_info.thread.wait(1000)
        self.logger.debug(f"Task '{task_id}' resources cleaned up")
