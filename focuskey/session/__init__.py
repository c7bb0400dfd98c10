"""Session package."""

from .controller import SessionController, SessionState, BREAK_WARNING_SECONDS
from .errors import (
    FocusSessionError,
    NotAuthorized,
    SessionAlreadyActive,
    NoActiveSession,
    NoBreaksAvailable,
    NotOnBreak,
    AlreadyOnBreak,
    NoProfileAvailable,
    GatewayError,
)
from .scheduler import CallbackScheduler, QtCallbackScheduler, ScheduledCall

__all__ = [
    "SessionController",
    "SessionState",
    "BREAK_WARNING_SECONDS",
    "FocusSessionError",
    "NotAuthorized",
    "SessionAlreadyActive",
    "NoActiveSession",
    "NoBreaksAvailable",
    "NotOnBreak",
    "AlreadyOnBreak",
    "NoProfileAvailable",
    "GatewayError",
    "CallbackScheduler",
    "QtCallbackScheduler",
    "ScheduledCall",
]
