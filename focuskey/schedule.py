"""Starts and ends sessions for profiles with a weekly schedule.

The watcher polls on a ``QTimer``.  When idle and a scheduled profile's
window is open it starts a session (trigger ``scheduled``); when that
window closes it ends the session it started.  Sessions started any
other way are left alone, and a window whose session the user ended
early is not restarted.
"""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Callable, Iterable

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from .profiles import store as profile_store
from .profiles.models import FocusProfile, TriggerMethod
from .session.controller import SessionController
from .session.errors import FocusSessionError

logger = logging.getLogger(__name__)


class ScheduleEvent(Enum):
    STARTED = "started"
    ENDED = "ended"


class ScheduleWatcher(QObject):

    error_occurred = pyqtSignal(object)

    def __init__(
        self,
        controller: SessionController,
        parent: QObject | None = None,
        *,
        interval_seconds: int = 30,
        profiles: Callable[[], Iterable[FocusProfile]] = profile_store.list_profiles,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        super().__init__(parent)
        self._controller = controller
        self._profiles = profiles
        self._clock = clock

        # session this watcher started: (profile, session start time)
        self._owned: tuple[FocusProfile, datetime] | None = None
        # profile id → start of the last window already handled
        self._handled: dict[str, datetime] = {}

        self._qt_timer = QTimer(self)
        self._qt_timer.setInterval(max(1, interval_seconds) * 1000)
        self._qt_timer.timeout.connect(self._on_tick)

    @property
    def is_running(self) -> bool:
        return self._qt_timer.isActive()

    def start(self) -> None:
        self._qt_timer.start()
        self.check()

    def stop(self) -> None:
        self._qt_timer.stop()

    def _on_tick(self) -> None:
        self.check()

    def check(self, now: datetime | None = None) -> ScheduleEvent | None:
        """Reconcile the controller with the schedules at *now*."""
        now = now or self._clock()
        ctrl = self._controller

        if self._owned is not None:
            profile, started = self._owned
            if not ctrl.is_session_active or ctrl.session_start_time != started:
                self._owned = None  # ended or replaced by someone else
            elif not profile.schedule.is_active_at(now):
                self._owned = None
                try:
                    ctrl.end_session(naturally=True)
                except FocusSessionError as exc:
                    self._report(exc)
                logger.info("Scheduled session for %r ended", profile.name)
                return ScheduleEvent.ENDED
            else:
                return None

        if ctrl.is_session_active:
            return None

        for profile in self._profiles():
            if not profile.is_scheduled:
                continue
            window = profile.schedule.window_start(now)
            if window is None or self._handled.get(profile.id) == window:
                continue
            self._handled[profile.id] = window
            try:
                ctrl.start_session(profile, TriggerMethod.SCHEDULED)
            except FocusSessionError as exc:
                self._report(exc)
                return None
            self._owned = (profile, ctrl.session_start_time)
            logger.info("Scheduled session for %r started", profile.name)
            return ScheduleEvent.STARTED
        return None

    def _report(self, exc: FocusSessionError) -> None:
        logger.error("Scheduled session change failed: %s", exc)
        self.error_occurred.emit(exc)
