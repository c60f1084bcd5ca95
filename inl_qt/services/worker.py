from __future__ import annotations

import logging
import os
import threading
import time
from typing import Any, Callable, Dict, Optional

from PySide6.QtCore import QObject, QRunnable, QThreadPool, Signal, Slot

from inl_qt.services.status_service import StatusService


_logger = logging.getLogger(__name__)

DEFAULT_MAX_THREADS = 2

# Most recent job per group. Callbacks of any other job in the group are dropped.
_active: Dict[str, "WorkerHandle"] = {}
_pool: Optional[QThreadPool] = None


def _max_threads() -> int:
    raw = os.getenv("INL_QT_MAX_THREADS", "").strip()
    if not raw:
        return DEFAULT_MAX_THREADS
    try:
        return max(1, int(raw))
    except ValueError:
        _logger.warning("Ignoring invalid INL_QT_MAX_THREADS=%r", raw)
        return DEFAULT_MAX_THREADS


def worker_pool() -> QThreadPool:
    global _pool
    if _pool is None:
        _pool = QThreadPool.globalInstance()
        _pool.setMaxThreadCount(_max_threads())
        _logger.debug("Worker pool sized to %d thread(s)", _pool.maxThreadCount())
    return _pool


class WorkerHandle:
    """Cancellation flag shared between the GUI thread and one job."""

    def __init__(self, group: Optional[str] = None) -> None:
        self.group = group
        self._cancel = threading.Event()

    def cancel(self) -> None:
        self._cancel.set()

    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set()

    @property
    def current(self) -> bool:
        return self.group is None or _active.get(self.group) is self


class _JobSignals(QObject):
    result = Signal(object)
    error = Signal(str)
    finished = Signal()


class _Job(QRunnable):
    def __init__(self, fn: Callable[[WorkerHandle], Any], handle: WorkerHandle, description: str) -> None:
        super().__init__()
        self._fn = fn
        self._handle = handle
        self._description = description
        self.signals = _JobSignals()

    @Slot()
    def run(self) -> None:
        started = time.perf_counter()
        try:
            if self._handle.cancelled:
                _logger.info("Skipped cancelled job: %s", self._description)
                return
            _logger.info("Job started: %s", self._description)
            value = self._fn(self._handle)
        except Exception as exc:
            _logger.exception("Job failed: %s", self._description)
            # One line for the dialog; the traceback is in the log.
            self.signals.error.emit(f"{type(exc).__name__}: {exc}")
        else:
            self.signals.result.emit(value)
        finally:
            _logger.info("Job done: %s (%.2fs)", self._description, time.perf_counter() - started)
            self.signals.finished.emit()


def _if_current(handle: WorkerHandle, callback: Callable[..., None]) -> Callable[..., None]:
    def _deliver(*args: Any) -> None:
        if handle.current:
            callback(*args)

    return _deliver


def run_in_worker(
    fn: Callable[[WorkerHandle], Any],
    on_result: Optional[Callable[[Any], None]] = None,
    on_error: Optional[Callable[[str], None]] = None,
    on_finished: Optional[Callable[[], None]] = None,
    *,
    description: str = "",
    status: Optional[StatusService] = None,
    group: Optional[str] = None,
) -> WorkerHandle:
    """Run ``fn(handle)`` on the thread pool and deliver callbacks on the GUI thread.

    Starting a new job in the same ``group`` cancels the previous one and
    suppresses its callbacks.
    """
    handle = WorkerHandle(group)
    if group:
        previous = _active.get(group)
        if previous is not None:
            previous.cancel()
        _active[group] = handle

    job = _Job(fn, handle, str(description or fn.__name__))
    for signal, callback in (
        (job.signals.result, on_result),
        (job.signals.error, on_error),
        (job.signals.finished, on_finished),
    ):
        if callback is not None:
            signal.connect(_if_current(handle, callback))

    if status is not None:
        if description:
            status.set_status(description)
        status.set_busy(True)
        job.signals.finished.connect(lambda: status.set_busy(False))

    worker_pool().start(job)
    return handle
