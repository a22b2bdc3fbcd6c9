"""Keep-alive tokens that hold the process open while uploads are in flight."""

from __future__ import annotations

import threading
from typing import Optional


class BackgroundTaskToken:
    """Handle for one unit of in-flight work.

    Ending a token more than once is a no-op, so it can be released from
    whichever exit path runs first. Usable as a context manager.
    """

    def __init__(self, tasks: "BackgroundTasks") -> None:
        self._tasks = tasks
        self._lock = threading.Lock()
        self._ended = False

    def __enter__(self) -> "BackgroundTaskToken":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.end()

    @property
    def ended(self) -> bool:
        return self._ended

    def end(self) -> None:
        with self._lock:
            if self._ended:
                return
            self._ended = True
        self._tasks._release()


class BackgroundTasks:
    """Counts in-flight work so shutdown can wait for it to finish."""

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._active = 0

    @property
    def active(self) -> int:
        with self._cond:
            return self._active

    def begin(self) -> BackgroundTaskToken:
        with self._cond:
            self._active += 1
        return BackgroundTaskToken(self)

    def _release(self) -> None:
        with self._cond:
            self._active -= 1
            if self._active == 0:
                self._cond.notify_all()

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        with self._cond:
            return self._cond.wait_for(lambda: self._active == 0, timeout=timeout)


__all__ = ["BackgroundTaskToken", "BackgroundTasks"]
