"""Tag/link triggers.

An NFC tag carries a universal link such as
``https://focuskey.app/toggle``.  The OS hands the link to the app;
:class:`TriggerDispatcher` turns it into a controller call.

Actions
-------
start   Start a session with the default profile.  If one is already
        running, ask the user instead of doing anything.
toggle  End the running session, or start one.
break   Take a break if the session allows one.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable
from urllib.parse import urlsplit

from PyQt6.QtCore import QObject, pyqtSignal

from .profiles import store as profile_store
from .profiles.models import DEFAULT_PROFILE_NAME, FocusProfile, TriggerMethod
from .session.controller import SessionController
from .session.errors import (
    AlreadyOnBreak, NoActiveSession, NoBreaksAvailable, NoProfileAvailable,
)

logger = logging.getLogger(__name__)

LINK_HOST = "focuskey.app"
APP_SCHEME = "focuskey"
LINK_SCHEMES = ("https", "http", APP_SCHEME)


class TriggerAction(Enum):
    START = "start"
    TOGGLE = "toggle"
    BREAK = "break"


class TriggerOutcome(Enum):
    STARTED = "started"
    ENDED = "ended"
    BREAK_STARTED = "break_started"
    CONFIRMATION_REQUIRED = "confirmation_required"
    IGNORED = "ignored"


def parse_trigger_url(url: str) -> TriggerAction | None:
    """``https://focuskey.app/break`` or ``focuskey://break`` → ``TriggerAction.BREAK``.

    Foreign hosts and unknown paths give None.
    """
    parts = urlsplit(url.strip())
    scheme = parts.scheme.lower()
    host = parts.hostname or ""
    path = parts.path.strip("/").lower()
    if scheme not in LINK_SCHEMES:
        logger.warning("Ignoring link with scheme %r: %s", parts.scheme, url)
        return None
    if scheme == APP_SCHEME and host != LINK_HOST:
        # focuskey://toggle carries the action where the host would be
        if path:
            logger.warning("Ignoring app link with path %r: %s", path, url)
            return None
        path = host
    elif host != LINK_HOST:
        logger.warning("Ignoring link for host %r: %s", parts.hostname, url)
        return None

    try:
        return TriggerAction(path)
    except ValueError:
        logger.warning("Unknown trigger action %r", path)
        return None


def resolve_default_profile(preferred_name: str | None = None) -> FocusProfile:
    """Preferred profile, else "Work", else last used, else the first one."""
    for name in (preferred_name, DEFAULT_PROFILE_NAME):
        if name:
            profile = profile_store.find_profile(name)
            if profile is not None:
                return profile

    profile = profile_store.last_used_profile()
    if profile is not None:
        return profile

    profiles = profile_store.list_profiles()
    if not profiles:
        raise NoProfileAvailable()
    return profiles[0]


class TriggerDispatcher(QObject):
    """Maps trigger actions onto :class:`SessionController` transitions.

    Signals
    -------
    confirmation_requested(profile: FocusProfile)
        A ``start`` arrived while a session was running.  The UI should
        ask the user whether to end it.
    """

    confirmation_requested = pyqtSignal(object)

    def __init__(
        self,
        controller: SessionController,
        parent: QObject | None = None,
        *,
        preferred_profile: Callable[[], str | None] = lambda: None,
    ) -> None:
        super().__init__(parent)
        self._controller = controller
        self._preferred_profile = preferred_profile

    def handle_url(self, url: str) -> TriggerOutcome:
        action = parse_trigger_url(url)
        if action is None:
            return TriggerOutcome.IGNORED
        logger.info("Trigger link received: %s", action.value)
        return self.dispatch(action)

    def dispatch(self, action: TriggerAction) -> TriggerOutcome:
        """Run *action*.  Controller errors propagate to the caller."""
        ctrl = self._controller

        if action is TriggerAction.START:
            if ctrl.is_session_active:
                logger.info("Session already active, confirmation required")
                self.confirmation_requested.emit(ctrl.current_profile)
                return TriggerOutcome.CONFIRMATION_REQUIRED
            self._start_default()
            return TriggerOutcome.STARTED

        if action is TriggerAction.TOGGLE:
            if ctrl.is_session_active:
                ctrl.end_session(naturally=True)
                return TriggerOutcome.ENDED
            self._start_default()
            return TriggerOutcome.STARTED

        # BREAK
        if not ctrl.is_session_active:
            raise NoActiveSession()
        if ctrl.is_on_break:
            raise AlreadyOnBreak()
        if not ctrl.can_take_break():
            raise NoBreaksAvailable()
        ctrl.start_break()
        return TriggerOutcome.BREAK_STARTED

    def _start_default(self) -> None:
        profile = resolve_default_profile(self._preferred_profile())
        self._controller.start_session(profile, TriggerMethod.NFC)
        profile_store.mark_used(profile.id)
