"""Focus profiles: what to block and how many breaks a session allows.

A profile is a frozen value.  Editing one produces a new instance via
:meth:`FocusProfile.replace`, so a running session keeps the exact
profile it started with.
"""

from __future__ import annotations

import dataclasses
import uuid
from dataclasses import dataclass, field
from datetime import datetime, time, timedelta
from enum import Enum


class Weekday(Enum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @property
    def short_name(self) -> str:
        return self.value[:3].title()

    @classmethod
    def from_date(cls, moment: datetime) -> "Weekday":
        return _WEEKDAYS[moment.weekday()]


_WEEKDAYS: tuple[Weekday, ...] = tuple(Weekday)


class TriggerMethod(Enum):
    MANUAL = "manual"
    NFC = "nfc"
    SCHEDULED = "scheduled"


@dataclass(frozen=True)
class BlockSet:
    """Opaque platform tokens for the apps, categories and web domains
    a profile shields.  The gateway alone knows what the tokens mean."""

    applications: frozenset[str] = frozenset()
    categories: frozenset[str] = frozenset()
    web_domains: frozenset[str] = frozenset()

    @property
    def is_empty(self) -> bool:
        return not (self.applications or self.categories or self.web_domains)

    def __len__(self) -> int:
        return len(self.applications) + len(self.categories) + len(self.web_domains)


@dataclass(frozen=True)
class ProfileSchedule:
    """Recurring weekly window.

    ``end <= start`` means the window runs past midnight; the part after
    midnight belongs to the weekday on which the window opened.
    """

    days: frozenset[Weekday]
    start: time
    end: time

    @property
    def spans_midnight(self) -> bool:
        return self.end <= self.start

    def window_start(self, moment: datetime) -> datetime | None:
        """When the window containing *moment* opened, or None if closed."""
        now = moment.time()
        opened_on = None
        if not self.spans_midnight:
            if self.start <= now < self.end:
                opened_on = moment
        elif now >= self.start:
            opened_on = moment
        elif now < self.end:
            opened_on = moment - timedelta(days=1)

        if opened_on is None or Weekday.from_date(opened_on) not in self.days:
            return None
        return datetime.combine(opened_on.date(), self.start)

    def is_active_at(self, moment: datetime) -> bool:
        return self.window_start(moment) is not None


@dataclass(frozen=True)
class FocusProfile:
    name: str
    icon: str = ""
    color: str = ""
    description: str = ""
    block_set: BlockSet = field(default_factory=BlockSet)
    allowed_breaks: int = 1
    break_duration: int = 5  # minutes
    schedule: ProfileSchedule | None = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("Profile name must not be empty")
        if self.allowed_breaks < 0:
            raise ValueError("allowed_breaks must be >= 0")
        if self.break_duration < 0:
            raise ValueError("break_duration must be >= 0")

    @property
    def break_duration_seconds(self) -> int:
        return self.break_duration * 60

    @property
    def is_scheduled(self) -> bool:
        return self.schedule is not None and bool(self.schedule.days)

    def replace(self, **changes) -> "FocusProfile":
        """Return an edited copy that keeps the same id."""
        return dataclasses.replace(self, **changes)


# ── defaults ──────────────────────────────────────────────────────────────

DEFAULT_PROFILE_NAME = "Work"

DEFAULT_PROFILES: tuple[FocusProfile, ...] = (
    FocusProfile(
        name="Work",
        icon="briefcase.fill",
        color="#007AFF",
        description="Block social media and entertainment during work hours",
        allowed_breaks=2,
        break_duration=10,
    ),
    FocusProfile(
        name="Study",
        icon="book.fill",
        color="#34C759",
        description="Eliminate distractions while learning and studying",
        allowed_breaks=1,
        break_duration=5,
    ),
    FocusProfile(
        name="Sleep",
        icon="moon.fill",
        color="#AF52DE",
        description="Wind down by blocking stimulating apps before bed",
        allowed_breaks=0,
        break_duration=0,
    ),
)
