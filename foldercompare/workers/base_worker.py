"""
Worker contract shared by the compare and file operation workers.

A worker wraps one unit of engine work (a folder comparison or a batch of
copy/move/delete targets) so it can run on a QThread. Outcomes travel back
through `WorkerSignals`:
- ``finished(result)`` after a normal run
- ``cancelled()`` when a cancel request was seen, with the partial result
  still available from `BaseWorker.result`
- ``error(type, message)`` when the work raised, for example an
  InvalidDirectoryError from the up-front folder check
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Optional

from PyQt6.QtCore import QObject, QThread, pyqtSignal, pyqtSlot, QMutex, QMutexLocker


class WorkerState(Enum):
    PENDING = auto()
    RUNNING = auto()
    CANCELLING = auto()
    CANCELLED = auto()
    COMPLETED = auto()
    FAILED = auto()


@dataclass
class ProgressInfo:
    """Position within a batch: ``current`` of ``total`` items started."""
    current: int
    total: int
    message: str = ""  # operation name
    detail: str = ""   # entry name


class WorkerSignals(QObject):
    progress = pyqtSignal(int, int, str)  # (current, total, message)
    progress_detail = pyqtSignal(object)  # ProgressInfo
    status = pyqtSignal(str)
    finished = pyqtSignal(object)         # result
    error = pyqtSignal(str, str)          # (error_type, message)
    cancelled = pyqtSignal()


class WorkerMeta(type(QObject), type(ABC)):
    pass


class BaseWorker(QObject, ABC, metaclass=WorkerMeta):
    """
    Runs `do_work` once and reports how it ended.

    Subclasses poll `is_cancelled` between items; the base class only
    decides which terminal signal to emit.
    """

    def __init__(self, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.signals = WorkerSignals()
        self._mutex = QMutex()
        self._state = WorkerState.PENDING
        self._cancel_requested = False
        self._result: Any = None

    @property
    def state(self) -> WorkerState:
        with QMutexLocker(self._mutex):
            return self._state

    def _set_state(self, value: WorkerState) -> None:
        with QMutexLocker(self._mutex):
            self._state = value

    @property
    def is_cancelled(self) -> bool:
        with QMutexLocker(self._mutex):
            return self._cancel_requested

    @property
    def result(self) -> Any:
        """Value returned by `do_work`, kept on cancellation too."""
        return self._result

    def cancel(self) -> None:
        """Ask the worker to stop at its next check. Safe from any thread."""
        with QMutexLocker(self._mutex):
            self._cancel_requested = True
            if self._state == WorkerState.RUNNING:
                self._state = WorkerState.CANCELLING

    @pyqtSlot()
    def run(self) -> None:
        self._set_state(WorkerState.RUNNING)

        try:
            result = self.do_work()
        except Exception as e:
            logging.exception(f"{type(self).__name__} - Worker failed")
            self._set_state(WorkerState.FAILED)
            self.signals.error.emit(type(e).__name__, str(e))
            return

        self._result = result
        if self.is_cancelled:
            self._set_state(WorkerState.CANCELLED)
            self.signals.cancelled.emit()
        else:
            self._set_state(WorkerState.COMPLETED)
            self.signals.finished.emit(result)

    @abstractmethod
    def do_work(self) -> Any:
        pass

    def report_progress(self, current: int, total: int, message: str = "") -> None:
        self.signals.progress.emit(current, total, message)

    def report_progress_detail(self, info: ProgressInfo) -> None:
        self.signals.progress_detail.emit(info)
        self.signals.progress.emit(info.current, info.total, info.message)

    def report_status(self, message: str) -> None:
        self.signals.status.emit(message)


class WorkerThread(QThread):
    """
    QThread that runs a single worker and ends when it returns.

    No event loop is started on the thread, so `wait()` returns as soon
    as the worker is done.
    """

    def __init__(self, worker: BaseWorker, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.worker = worker

    def run(self) -> None:
        self.worker.run()

    def cancel(self) -> None:
        self.worker.cancel()

    @property
    def result(self) -> Any:
        return self.worker.result
