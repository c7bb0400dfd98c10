"""SQLAlchemy ORM models for FocusKey."""

from datetime import datetime
from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, Float, JSON, Time
)
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class SessionHistoryRecord(Base):
    """One focus session, opened at start and closed when it ends."""

    __tablename__ = "session_history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    profile_name = Column(String(120), nullable=False)
    start_time = Column(DateTime, nullable=False, default=datetime.now)
    end_time = Column(DateTime, nullable=True)
    breaks_taken = Column(Integer, nullable=False, default=0)
    total_break_seconds = Column(Float, nullable=False, default=0.0)
    total_focus_seconds = Column(Float, nullable=False, default=0.0)
    trigger_method = Column(String(20), nullable=False, default="manual")  # manual | nfc | scheduled
    completed_naturally = Column(Boolean, nullable=False, default=False)

    @property
    def is_active(self) -> bool:
        return self.end_time is None

    def total_session_seconds(self, now: datetime | None = None) -> float:
        """Wall time covered by the session (up to *now* while open)."""
        end = self.end_time or now or datetime.now()
        return max(0.0, (end - self.start_time).total_seconds())

    def focus_efficiency(self, now: datetime | None = None) -> float:
        """Share of the session spent focusing, 0.0 → 1.0."""
        total = self.total_session_seconds(now)
        if total <= 0:
            return 0.0
        return max(0.0, min(1.0, self.total_focus_seconds / total))

    def __repr__(self) -> str:
        return (
            f"<SessionHistoryRecord id={self.id} profile={self.profile_name} "
            f"breaks={self.breaks_taken} active={self.is_active}>"
        )


class StoredProfile(Base):
    """Persisted focus profile.  Block tokens are opaque strings."""

    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True)
    name = Column(String(120), nullable=False, unique=True)
    icon = Column(String(64), nullable=False, default="")
    color = Column(String(16), nullable=False, default="")
    description = Column(String(255), nullable=False, default="")
    blocked_applications = Column(JSON, nullable=False, default=list)
    blocked_categories = Column(JSON, nullable=False, default=list)
    blocked_web_domains = Column(JSON, nullable=False, default=list)
    allowed_breaks = Column(Integer, nullable=False, default=1)
    break_duration_minutes = Column(Integer, nullable=False, default=5)
    schedule_days = Column(JSON, nullable=True)          # weekday names, None = unscheduled
    schedule_start = Column(Time, nullable=True)
    schedule_end = Column(Time, nullable=True)
    is_default = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    last_used = Column(DateTime, nullable=True)

    def __repr__(self) -> str:
        return (
            f"<StoredProfile name={self.name} breaks={self.allowed_breaks}"
            f"x{self.break_duration_minutes}m default={self.is_default}>"
        )
