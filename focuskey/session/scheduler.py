"""Cancellable one-shot callbacks.

The controller only needs "run this once after N seconds, unless I
cancel it first".  Production code backs that with a single-shot
``QTimer``; tests substitute a manual scheduler.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

from PyQt6.QtCore import QObject, QTimer

MAX_TIMER_INTERVAL_MS = 24 * 60 * 60 * 1000  # one leg of a long delay


class ScheduledCall(ABC):
    """Handle for a pending callback."""

    @abstractmethod
    def cancel(self) -> None:
        """Prevent the callback from running.  Safe to call twice."""

    @property
    @abstractmethod
    def active(self) -> bool:
        """True until the callback has fired or been cancelled."""


class CallbackScheduler(ABC):

    @abstractmethod
    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> ScheduledCall:
        ...


class _QtScheduledCall(ScheduledCall):

    def __init__(self, timer: QTimer, delay_ms: int, callback: Callable[[], None]) -> None:
        self._timer = timer
        self._callback = callback
        self._remaining_ms = delay_ms
        self._active = True
        timer.timeout.connect(self._on_timeout)
        self._start_next_leg()

    def _start_next_leg(self) -> None:
        leg = min(self._remaining_ms, MAX_TIMER_INTERVAL_MS)
        self._remaining_ms -= leg
        self._timer.start(leg)

    def _on_timeout(self) -> None:
        if not self._active:
            return
        if self._remaining_ms > 0:
            self._start_next_leg()
            return
        self._active = False
        self._timer.deleteLater()
        self._callback()

    def cancel(self) -> None:
        if not self._active:
            return
        self._active = False
        self._timer.stop()
        self._timer.deleteLater()

    @property
    def active(self) -> bool:
        return self._active


class QtCallbackScheduler(CallbackScheduler):
    """Runs callbacks on the Qt event loop of the calling thread.

    ``QTimer`` intervals are signed 32-bit milliseconds, so longer delays
    run as a chain of shorter legs on the same timer.
    """

    def __init__(self, parent: QObject | None = None) -> None:
        self._parent = parent

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> ScheduledCall:
        timer = QTimer(self._parent)
        timer.setSingleShot(True)
        return _QtScheduledCall(timer, max(0, int(delay_seconds * 1000)), callback)
