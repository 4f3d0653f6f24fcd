import threading
import time

import pytest
from PySide6.QtCore import QCoreApplication, QEventLoop

from slide_restore.domain.common.errors import ValidationError
from slide_restore.domain.services.i_background_task_service import Worker
from slide_restore.infrastructure.threading.qt_background_task_service import QtBackgroundTaskService


@pytest.fixture(scope="module")
def qt_app():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def service(qt_app, logger):
    service = QtBackgroundTaskService(logger)
    yield service
    service.wait_for_all(2000)


def wait_until(predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while not predicate() and time.monotonic() < deadline:
        QCoreApplication.processEvents(QEventLoop.AllEvents, 50)
        time.sleep(0.01)
    return predicate()


class AnswerWorker(Worker[int]):
    def __init__(self, gate=None):
        super().__init__()
        self.gate = gate
        self.thread_name = None

    def execute(self) -> int:
        self.thread_name = threading.current_thread().name
        if self.gate is not None:
            self.gate.wait(5)
        self.report_progress(50, "half way")
        return 42


class FailingWorker(Worker[None]):
    def execute(self) -> None:
        raise RuntimeError("boom")


def test_result_and_progress_are_delivered(service):
    worker = AnswerWorker()
    events = []
    worker.set_on_started(lambda: events.append("started"))
    worker.set_on_progress(lambda percent, message: events.append((percent, message)))
    worker.set_on_completed(lambda result: events.append(("done", result)))

    assert service.execute_task("restore", worker).is_success

    assert wait_until(lambda: ("done", 42) in events)
    assert events.index("started") < events.index((50, "half way")) < events.index(("done", 42))
    assert worker.thread_name != threading.current_thread().name
    assert wait_until(lambda: not service.is_task_running("restore"))


def test_second_task_with_same_id_is_rejected(service):
    gate = threading.Event()
    first = AnswerWorker(gate)
    done = []
    first.set_on_completed(lambda result: done.append(result))

    assert service.execute_task("restore", first).is_success
    assert service.get_running_tasks() == ["restore"]

    second = service.execute_task("restore", AnswerWorker())
    assert second.is_failure
    assert isinstance(second.error, ValidationError)

    gate.set()
    assert wait_until(lambda: done == [42])
    assert wait_until(lambda: service.get_running_tasks() == [])

    # The id is free again once the first task finished
    assert service.execute_task("restore", AnswerWorker()).is_success
    assert wait_until(lambda: not service.is_task_running("restore"))


def test_worker_exception_reaches_error_callback(service, logger):
    worker = FailingWorker()
    errors = []
    worker.set_on_error(lambda error: errors.append(error))

    service.execute_task("failing", worker)

    assert wait_until(lambda: len(errors) == 1)
    assert "boom" in errors[0]
    assert wait_until(lambda: not service.is_task_running("failing"))
    assert any("boom" in message for message in logger.messages("ERROR"))
