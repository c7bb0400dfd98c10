"""Gateways that run without an OS enforcement framework."""

from __future__ import annotations

import logging

from ..profiles.models import BlockSet
from ..session.errors import GatewayError
from .base import AppRestrictionGateway

logger = logging.getLogger(__name__)


class SimulatedRestrictionGateway(AppRestrictionGateway):
    """Keeps the "applied" block set in memory.

    Used on desktop builds and in tests.  ``fail_next`` makes the next
    ``apply`` or ``clear`` raise, to exercise rollback paths.
    """

    name = "simulated"

    def __init__(self, authorized: bool = True) -> None:
        self._authorized = authorized
        self.applied: BlockSet | None = None
        self.apply_calls: int = 0
        self.clear_calls: int = 0
        self.fail_next: Exception | None = None

    @property
    def is_authorized(self) -> bool:
        return self._authorized

    def grant_authorization(self) -> None:
        self._authorized = True

    def revoke_authorization(self) -> None:
        self._authorized = False

    @property
    def is_blocking(self) -> bool:
        return self.applied is not None

    def _raise_if_failing(self, operation: str) -> None:
        if self.fail_next is None:
            return
        cause, self.fail_next = self.fail_next, None
        raise GatewayError(f"Failed to {operation} restrictions: {cause}") from cause

    def apply(self, block_set: BlockSet) -> None:
        self.apply_calls += 1
        self._raise_if_failing("apply")
        self.applied = block_set
        logger.debug("Shield applied (%d tokens)", len(block_set))

    def clear(self) -> None:
        self.clear_calls += 1
        self._raise_if_failing("clear")
        if self.applied is not None:
            logger.debug("Shield cleared")
        self.applied = None


class UnsupportedPlatformGateway(AppRestrictionGateway):
    """Selected where no enforcement backend exists.

    Never authorized, so the controller refuses to start sessions.
    """

    name = "unsupported"

    @property
    def is_authorized(self) -> bool:
        return False

    def apply(self, block_set: BlockSet) -> None:
        raise GatewayError("App restrictions are not supported on this platform")

    def clear(self) -> None:
        pass
