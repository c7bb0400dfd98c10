"""Contract between the session controller and platform enforcement."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..profiles.models import BlockSet


class AppRestrictionGateway(ABC):
    """Applies and clears the device's block list.

    Both operations are idempotent: ``apply`` replaces whatever was
    applied before and ``clear`` with nothing applied is a no-op.
    Failures are raised as :class:`~focuskey.session.errors.GatewayError`.
    """

    name = "abstract"

    @property
    @abstractmethod
    def is_authorized(self) -> bool:
        """Whether the user granted the platform permission."""

    @abstractmethod
    def apply(self, block_set: BlockSet) -> None:
        ...

    @abstractmethod
    def clear(self) -> None:
        ...
