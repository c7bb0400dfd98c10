"""Restriction gateways and startup selection."""

from .base import AppRestrictionGateway
from .simulated import SimulatedRestrictionGateway, UnsupportedPlatformGateway

GATEWAYS: dict[str, type[AppRestrictionGateway]] = {
    SimulatedRestrictionGateway.name: SimulatedRestrictionGateway,
    UnsupportedPlatformGateway.name: UnsupportedPlatformGateway,
}


def create_gateway(name: str, authorized: bool = True) -> AppRestrictionGateway:
    """Build the gateway configured under *name* (``settings.restriction_backend``)."""
    try:
        cls = GATEWAYS[name]
    except KeyError:
        raise ValueError(
            f"Unknown restriction backend {name!r}; "
            f"expected one of {sorted(GATEWAYS)}"
        ) from None
    if cls is SimulatedRestrictionGateway:
        return SimulatedRestrictionGateway(authorized=authorized)
    return cls()


__all__ = [
    "AppRestrictionGateway",
    "SimulatedRestrictionGateway",
    "UnsupportedPlatformGateway",
    "GATEWAYS",
    "create_gateway",
]
