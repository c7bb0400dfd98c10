"""Profiles package."""

from .models import (
    BlockSet,
    FocusProfile,
    ProfileSchedule,
    TriggerMethod,
    Weekday,
    DEFAULT_PROFILES,
    DEFAULT_PROFILE_NAME,
)

__all__ = [
    "BlockSet",
    "FocusProfile",
    "ProfileSchedule",
    "TriggerMethod",
    "Weekday",
    "DEFAULT_PROFILES",
    "DEFAULT_PROFILE_NAME",
]
