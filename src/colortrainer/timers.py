import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Optional

from PyQt5.QtCore import QObject, QTimer, pyqtSignal


class Scheduler:
    """Runs delayed and background work on behalf of a QuizSession"""

    def call_later(self, delay_ms: int, callback: Callable[[], None]):
        """Run callback after delay_ms. Returns a handle with cancel()"""
        raise NotImplementedError

    def run_in_background(
        self, fn: Callable[[], Any], on_done: Callable[[Any], None]
    ):
        """
        Run fn off the control thread and hand its result to on_done on the
        control thread. Returns a handle with cancel()
        """
        raise NotImplementedError


class TimerHandle:
    def __init__(self, timer: QTimer):
        self._timer = timer

    def cancel(self):
        if self._timer is not None:
            self._timer.stop()
            self._timer.deleteLater()
            self._timer = None

    @property
    def active(self) -> bool:
        return self._timer is not None and self._timer.isActive()


class TaskHandle:
    def __init__(self, future: Future):
        self.future = future
        self.cancelled = False

    def cancel(self):
        self.cancelled = True
        self.future.cancel()


class QtScheduler(QObject, Scheduler):
    """Scheduler backed by the Qt event loop"""

    _finished = pyqtSignal(object, object)

    def __init__(self, parent: Optional[QObject] = None, max_workers: int = 2):
        super().__init__(parent)
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="colortrainer"
        )
        # Emitted from worker threads, delivered on the thread owning self
        self._finished.connect(self._deliver)

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle:
        timer = QTimer(self)
        timer.setSingleShot(True)
        handle = TimerHandle(timer)

        def fire():
            handle.cancel()
            callback()

        timer.timeout.connect(fire)
        timer.start(max(0, int(delay_ms)))
        return handle

    def run_in_background(
        self, fn: Callable[[], Any], on_done: Callable[[Any], None]
    ) -> TaskHandle:
        future = self._executor.submit(fn)
        handle = TaskHandle(future)
        future.add_done_callback(lambda f: self._finished.emit(handle, on_done))
        return handle

    def _deliver(self, handle: TaskHandle, on_done: Callable[[Any], None]):
        if handle.cancelled or handle.future.cancelled():
            return
        error = handle.future.exception()
        if error is not None:
            logging.error(f"Background task failed: {error!r}")
            return
        on_done(handle.future.result())

    def shutdown(self):
        self._executor.shutdown(wait=False, cancel_futures=True)
