"""Focus session state machine for FocusKey.

States
------
IDLE        No session.  Nothing is blocked.
FOCUSING    Session running, the profile's block set is applied.
ON_BREAK    Session running, restrictions lifted until the break ends.

Transitions
-----------
IDLE → FOCUSING          start_session(profile, trigger_method)
FOCUSING → ON_BREAK      start_break()      (breaks_used < allowed_breaks)
ON_BREAK → FOCUSING      end_break()        (manual, or break timer expiry)
FOCUSING|ON_BREAK → IDLE end_session(naturally)

Every illegal call raises a :class:`FocusSessionError` subclass and
leaves the state untouched.  The only exception is a gateway failure
while ending a session: local state is still cleared (the user must
never be stuck in a session they cannot end) and the error is raised
afterwards.

All transitions are expected on the Qt main thread.  Break expiry is a
cancellable scheduled callback; a callback that fires after its break
was already ended does nothing.
"""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Callable

from PyQt6.QtCore import QObject, pyqtSignal

from ..gateway.base import AppRestrictionGateway
from ..history.store import SessionHistoryStore
from ..profiles.models import FocusProfile, TriggerMethod
from .errors import (
    FocusSessionError,
    GatewayError,
    NoActiveSession,
    NoBreaksAvailable,
    NotAuthorized,
    NotOnBreak,
    SessionAlreadyActive,
)
from .scheduler import CallbackScheduler, QtCallbackScheduler, ScheduledCall

logger = logging.getLogger(__name__)


class SessionState(Enum):
    IDLE = "idle"
    FOCUSING = "focusing"
    ON_BREAK = "on_break"


BREAK_WARNING_SECONDS = 60  # break_ending_soon fires this long before expiry


class SessionController(QObject):
    """Owns the single active focus session, if any.

    Signals
    -------
    state_changed(new_state: SessionState)
        Emitted on every transition.
    session_started(data: dict)
        Keys: ``profile_name``, ``trigger_method``, ``start_time``,
        ``allowed_breaks``, ``history_id``.
    session_ended(data: dict)
        Keys: ``profile_name``, ``trigger_method``, ``start_time``,
        ``end_time``, ``duration_seconds``, ``breaks_used``,
        ``break_seconds``, ``focus_seconds``, ``completed_naturally``,
        ``history_id``.
    break_started(breaks_used: int)
    break_ended(automatic: bool)
    break_ending_soon()
        Fires once, ``BREAK_WARNING_SECONDS`` before a break expires.
    error_occurred(error: FocusSessionError)
        Failures with no caller to raise to (automatic break expiry).
    """

    state_changed = pyqtSignal(object)
    session_started = pyqtSignal(object)
    session_ended = pyqtSignal(object)
    break_started = pyqtSignal(int)
    break_ended = pyqtSignal(bool)
    break_ending_soon = pyqtSignal()
    error_occurred = pyqtSignal(object)

    def __init__(
        self,
        gateway: AppRestrictionGateway,
        history: SessionHistoryStore | None = None,
        parent: QObject | None = None,
        *,
        scheduler: CallbackScheduler | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        super().__init__(parent)

        # ── collaborators ─────────────────────────────────────────────
        self._gateway = gateway
        self._clock = clock
        self._history = history if history is not None else SessionHistoryStore(clock=clock)
        self._scheduler = scheduler if scheduler is not None else QtCallbackScheduler(self)

        # ── session state ─────────────────────────────────────────────
        self._state: SessionState = SessionState.IDLE
        self._profile: FocusProfile | None = None
        self._trigger: TriggerMethod | None = None
        self._start_time: datetime | None = None
        self._breaks_used: int = 0
        self._break_start: datetime | None = None
        self._break_seconds: float = 0.0
        self._record_id: int | None = None

        # ── break timers ──────────────────────────────────────────────
        self._break_generation: int = 0
        self._break_timer: ScheduledCall | None = None
        self._warning_timer: ScheduledCall | None = None

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def gateway(self) -> AppRestrictionGateway:
        return self._gateway

    @property
    def is_authorized(self) -> bool:
        return self._gateway.is_authorized

    @property
    def is_session_active(self) -> bool:
        return self._state != SessionState.IDLE

    @property
    def is_on_break(self) -> bool:
        return self._state == SessionState.ON_BREAK

    @property
    def current_profile(self) -> FocusProfile | None:
        return self._profile

    @property
    def trigger_method(self) -> TriggerMethod | None:
        return self._trigger

    @property
    def session_start_time(self) -> datetime | None:
        return self._start_time

    @property
    def break_start_time(self) -> datetime | None:
        return self._break_start

    @property
    def breaks_used(self) -> int:
        return self._breaks_used

    @property
    def breaks_remaining(self) -> int:
        if self._profile is None:
            return 0
        return max(0, self._profile.allowed_breaks - self._breaks_used)

    @property
    def history_id(self) -> int | None:
        return self._record_id

    @property
    def session_duration(self) -> float | None:
        """Seconds since the session started, or None when idle."""
        if self._start_time is None:
            return None
        return max(0.0, (self._clock() - self._start_time).total_seconds())

    @property
    def break_time_remaining(self) -> float | None:
        """Seconds left on the current break, or None when not on one."""
        if self._break_start is None or self._profile is None:
            return None
        elapsed = (self._clock() - self._break_start).total_seconds()
        return max(0.0, self._profile.break_duration_seconds - elapsed)

    def can_take_break(self) -> bool:
        if self._profile is None or self._state != SessionState.FOCUSING:
            return False
        return self._breaks_used < self._profile.allowed_breaks

    # ══════════════════════════════════════════════════════════════════
    #  TRANSITIONS
    # ══════════════════════════════════════════════════════════════════

    def start_session(
        self,
        profile: FocusProfile,
        trigger_method: TriggerMethod | str = TriggerMethod.MANUAL,
    ) -> None:
        """IDLE → FOCUSING.  Applies the profile's block set first; if
        that fails nothing else happens and the controller stays IDLE."""
        trigger = TriggerMethod(trigger_method)
        if not self._gateway.is_authorized:
            raise NotAuthorized()
        if self._state != SessionState.IDLE:
            raise SessionAlreadyActive()

        self._call_gateway(self._gateway.apply, profile.block_set)

        now = self._clock()
        self._profile = profile
        self._trigger = trigger
        self._start_time = now
        self._breaks_used = 0
        self._break_start = None
        self._break_seconds = 0.0
        self._record_id = self._history.create(profile.name, trigger.value, start_time=now)

        self._set_state(SessionState.FOCUSING)
        logger.info(
            "Focus session started with profile %r (%s)", profile.name, trigger.value
        )
        self.session_started.emit({
            "profile_name": profile.name,
            "trigger_method": trigger.value,
            "start_time": now,
            "allowed_breaks": profile.allowed_breaks,
            "history_id": self._record_id,
        })

    def start_break(self) -> None:
        """FOCUSING → ON_BREAK.  Lifts restrictions and arms the expiry timer."""
        if not self.can_take_break():
            raise NoBreaksAvailable()

        # Timers are inert until the state is ON_BREAK.
        try:
            self._arm_break_timers(self._profile.break_duration_seconds)
            self._call_gateway(self._gateway.clear)
        except Exception:
            self._cancel_break_timers()
            raise

        self._break_start = self._clock()
        self._breaks_used += 1
        self._history.add_break(self._record_id)

        self._set_state(SessionState.ON_BREAK)
        logger.info(
            "Break started (%d/%d)", self._breaks_used, self._profile.allowed_breaks
        )
        self.break_started.emit(self._breaks_used)

    def end_break(self, automatic: bool = False) -> None:
        """ON_BREAK → FOCUSING.  Re-applies the same block set."""
        if self._state != SessionState.ON_BREAK:
            raise NotOnBreak()

        self._call_gateway(self._gateway.apply, self._profile.block_set)
        self._cancel_break_timers()
        self._close_break(self._clock())

        self._set_state(SessionState.FOCUSING)
        logger.info("Break ended%s, focus resumed", " automatically" if automatic else "")
        self.break_ended.emit(automatic)

    def end_session(self, naturally: bool = True) -> None:
        """FOCUSING|ON_BREAK → IDLE.

        *naturally* is False when the user forced the session to stop.
        """
        if self._state == SessionState.IDLE:
            raise NoActiveSession()

        self._cancel_break_timers()
        gateway_error: GatewayError | None = None
        try:
            self._call_gateway(self._gateway.clear)
        except GatewayError as exc:
            logger.error("Clearing restrictions failed while ending session: %s", exc)
            gateway_error = exc

        end_time = self._clock()
        if self._break_start is not None:
            self._close_break(end_time)
        self._history.finalize(self._record_id, end_time, naturally)

        duration = max(0.0, (end_time - self._start_time).total_seconds())
        data = {
            "profile_name": self._profile.name,
            "trigger_method": self._trigger.value,
            "start_time": self._start_time,
            "end_time": end_time,
            "duration_seconds": duration,
            "breaks_used": self._breaks_used,
            "break_seconds": self._break_seconds,
            "focus_seconds": max(0.0, duration - self._break_seconds),
            "completed_naturally": naturally,
            "history_id": self._record_id,
        }

        self._profile = None
        self._trigger = None
        self._start_time = None
        self._breaks_used = 0
        self._break_start = None
        self._break_seconds = 0.0
        self._record_id = None

        self._set_state(SessionState.IDLE)
        logger.info(
            "Focus session ended (%s, %d min, %d breaks)",
            "completed" if naturally else "interrupted",
            int(duration // 60),
            data["breaks_used"],
        )
        self.session_ended.emit(data)

        if gateway_error is not None:
            raise gateway_error

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL
    # ══════════════════════════════════════════════════════════════════

    def _set_state(self, new_state: SessionState) -> None:
        self._state = new_state
        self.state_changed.emit(new_state)

    def _call_gateway(self, operation, *args) -> None:
        try:
            operation(*args)
        except GatewayError:
            raise
        except Exception as exc:
            raise GatewayError(f"Restriction backend failed: {exc}") from exc

    def _close_break(self, end_time: datetime) -> None:
        taken = max(0.0, (end_time - self._break_start).total_seconds())
        self._break_seconds += taken
        self._break_start = None
        self._history.add_break_time(self._record_id, taken)

    # ── break timers ──────────────────────────────────────────────────

    def _arm_break_timers(self, duration_seconds: int) -> None:
        self._cancel_break_timers()
        generation = self._break_generation
        self._break_timer = self._scheduler.call_later(
            duration_seconds, lambda: self._on_break_expired(generation)
        )
        if duration_seconds > BREAK_WARNING_SECONDS:
            self._warning_timer = self._scheduler.call_later(
                duration_seconds - BREAK_WARNING_SECONDS,
                lambda: self._on_break_warning(generation),
            )

    def _cancel_break_timers(self) -> None:
        self._break_generation += 1
        for timer in (self._break_timer, self._warning_timer):
            if timer is not None:
                timer.cancel()
        self._break_timer = None
        self._warning_timer = None

    def _is_current_break(self, generation: int) -> bool:
        return generation == self._break_generation and self._state == SessionState.ON_BREAK

    def _on_break_warning(self, generation: int) -> None:
        if self._is_current_break(generation):
            self._warning_timer = None
            self.break_ending_soon.emit()

    def _on_break_expired(self, generation: int) -> None:
        if not self._is_current_break(generation):
            return
        self._break_timer = None
        try:
            self.end_break(automatic=True)
        except FocusSessionError as exc:
            logger.error("Automatic break end failed: %s", exc)
            self.error_occurred.emit(exc)
