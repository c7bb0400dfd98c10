"""Profile persistence on top of the ``profiles`` table."""

from __future__ import annotations

import logging
from datetime import datetime

from ..database.db import get_session
from ..database.models import StoredProfile
from .models import (
    BlockSet, DEFAULT_PROFILES, FocusProfile, ProfileSchedule, Weekday,
)

logger = logging.getLogger(__name__)


# ── row ↔ value conversion ───────────────────────────────────────────────


def _to_profile(row: StoredProfile) -> FocusProfile:
    schedule = None
    if row.schedule_days is not None and row.schedule_start and row.schedule_end:
        schedule = ProfileSchedule(
            days=frozenset(Weekday(d) for d in row.schedule_days),
            start=row.schedule_start,
            end=row.schedule_end,
        )
    return FocusProfile(
        id=row.id,
        name=row.name,
        icon=row.icon,
        color=row.color,
        description=row.description,
        block_set=BlockSet(
            applications=frozenset(row.blocked_applications or ()),
            categories=frozenset(row.blocked_categories or ()),
            web_domains=frozenset(row.blocked_web_domains or ()),
        ),
        allowed_breaks=row.allowed_breaks,
        break_duration=row.break_duration_minutes,
        schedule=schedule,
    )


def _apply_to_row(row: StoredProfile, profile: FocusProfile) -> None:
    row.name = profile.name
    row.icon = profile.icon
    row.color = profile.color
    row.description = profile.description
    row.blocked_applications = sorted(profile.block_set.applications)
    row.blocked_categories = sorted(profile.block_set.categories)
    row.blocked_web_domains = sorted(profile.block_set.web_domains)
    row.allowed_breaks = profile.allowed_breaks
    row.break_duration_minutes = profile.break_duration
    if profile.schedule is None:
        row.schedule_days = None
        row.schedule_start = None
        row.schedule_end = None
    else:
        row.schedule_days = sorted(d.value for d in profile.schedule.days)
        row.schedule_start = profile.schedule.start
        row.schedule_end = profile.schedule.end


# ── public API ────────────────────────────────────────────────────────────


def list_profiles() -> list[FocusProfile]:
    """All profiles, defaults first, then by creation time."""
    with get_session() as db:
        rows = (
            db.query(StoredProfile)
            .order_by(StoredProfile.is_default.desc(), StoredProfile.created_at)
            .all()
        )
        return [_to_profile(r) for r in rows]


def get_profile(profile_id: str) -> FocusProfile | None:
    with get_session() as db:
        row = db.get(StoredProfile, profile_id)
        return _to_profile(row) if row else None


def find_profile(name: str) -> FocusProfile | None:
    """Case-insensitive lookup by display name."""
    with get_session() as db:
        for row in db.query(StoredProfile).all():
            if row.name.casefold() == name.casefold():
                return _to_profile(row)
    return None


def save_profile(profile: FocusProfile) -> FocusProfile:
    """Insert or update *profile* (matched on id)."""
    with get_session() as db:
        row = db.get(StoredProfile, profile.id)
        if row is None:
            row = StoredProfile(id=profile.id, created_at=datetime.now())
            db.add(row)
        _apply_to_row(row, profile)
    logger.info("Saved profile %r", profile.name)
    return profile


def delete_profile(profile_id: str) -> bool:
    """Remove a profile.  Returns False when it did not exist."""
    with get_session() as db:
        row = db.get(StoredProfile, profile_id)
        if row is None:
            return False
        db.delete(row)
    logger.info("Deleted profile %s", profile_id)
    return True


def mark_used(profile_id: str, when: datetime | None = None) -> None:
    with get_session() as db:
        row = db.get(StoredProfile, profile_id)
        if row:
            row.last_used = when or datetime.now()


def last_used_profile() -> FocusProfile | None:
    with get_session() as db:
        row = (
            db.query(StoredProfile)
            .filter(StoredProfile.last_used.isnot(None))
            .order_by(StoredProfile.last_used.desc())
            .first()
        )
        return _to_profile(row) if row else None


def seed_default_profiles() -> int:
    """Insert the built-in profiles into an empty table.

    Returns how many were inserted (0 once the user has any profile).
    """
    with get_session() as db:
        if db.query(StoredProfile).count() > 0:
            return 0
        now = datetime.now()
        for profile in DEFAULT_PROFILES:
            row = StoredProfile(id=profile.id, created_at=now, is_default=True)
            _apply_to_row(row, profile)
            db.add(row)
    logger.info("Seeded %d default profiles", len(DEFAULT_PROFILES))
    return len(DEFAULT_PROFILES)
