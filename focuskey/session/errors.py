"""Errors raised by session operations.

Every error carries a message meant to be shown to the user as-is.
"""


class FocusSessionError(Exception):
    """Base class for all session errors."""

    message = "Focus session error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)

    @property
    def user_message(self) -> str:
        return str(self)


class NotAuthorized(FocusSessionError):
    message = "Screen Time authorization is required"


class SessionAlreadyActive(FocusSessionError):
    message = "A focus session is already active"


class NoActiveSession(FocusSessionError):
    message = "No active focus session"


class NoBreaksAvailable(FocusSessionError):
    message = "No breaks remaining for this session"


class NotOnBreak(FocusSessionError):
    message = "Not currently on a break"


class AlreadyOnBreak(FocusSessionError):
    message = "Already on a break"


class NoProfileAvailable(FocusSessionError):
    message = "No focus profiles available"


class GatewayError(FocusSessionError):
    """The platform failed to apply or clear restrictions.

    The original exception is kept as ``__cause__``.
    """

    message = "Could not update app restrictions"
