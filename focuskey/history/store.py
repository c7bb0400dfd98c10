"""Session history persistence.

The controller treats the store as best-effort: a failed write is
logged and the session carries on.  Methods therefore swallow
``SQLAlchemyError`` and accept a ``None`` handle (the handle returned
when ``create`` itself failed).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from sqlalchemy.exc import SQLAlchemyError

from ..database.db import get_session
from ..database.models import SessionHistoryRecord

logger = logging.getLogger(__name__)

RecordHandle = int


@dataclass
class DaySummary:
    """Aggregate of the sessions that started on one calendar day."""

    day: date
    sessions: int = 0
    completed_naturally: int = 0
    breaks_taken: int = 0
    focus_seconds: float = 0.0
    break_seconds: float = 0.0
    average_efficiency: float = 0.0

    @property
    def focus_minutes(self) -> int:
        return int(self.focus_seconds // 60)


class SessionHistoryStore:

    def __init__(self, clock=datetime.now) -> None:
        self._clock = clock

    # ── writes ────────────────────────────────────────────────────────

    def create(
        self,
        profile_name: str,
        trigger_method: str,
        start_time: datetime | None = None,
    ) -> RecordHandle | None:
        """Open a record for a session that is starting now."""
        try:
            with get_session() as db:
                record = SessionHistoryRecord(
                    profile_name=profile_name,
                    trigger_method=trigger_method,
                    start_time=start_time or self._clock(),
                    completed_naturally=False,
                )
                db.add(record)
                db.flush()
                return record.id
        except SQLAlchemyError:
            logger.exception("Could not create history record for %r", profile_name)
            return None

    def add_break(self, handle: RecordHandle | None, duration_seconds: float = 0.0) -> None:
        """Count one more break, with whatever duration is already known."""
        self._update_breaks(handle, 1, duration_seconds)

    def add_break_time(self, handle: RecordHandle | None, duration_seconds: float) -> None:
        """Add time to the break already counted by ``add_break``."""
        self._update_breaks(handle, 0, duration_seconds)

    def _update_breaks(self, handle, count: int, duration_seconds: float) -> None:
        if handle is None:
            return
        try:
            with get_session() as db:
                record = db.get(SessionHistoryRecord, handle)
                if record is None:
                    logger.warning("History record %s not found for break", handle)
                    return
                if not record.is_active:
                    logger.warning("History record %s already closed", handle)
                    return
                record.breaks_taken += count
                record.total_break_seconds += max(0.0, duration_seconds)
        except SQLAlchemyError:
            logger.exception("Could not record break on history record %s", handle)

    def finalize(
        self,
        handle: RecordHandle | None,
        end_time: datetime,
        natural_completion: bool,
    ) -> None:
        """Close the record and compute focused time (elapsed minus breaks)."""
        if handle is None:
            return
        try:
            with get_session() as db:
                record = db.get(SessionHistoryRecord, handle)
                if record is None:
                    logger.warning("History record %s not found for finalize", handle)
                    return
                if not record.is_active:
                    logger.warning("History record %s already closed", handle)
                    return
                record.end_time = end_time
                record.completed_naturally = natural_completion
                elapsed = record.total_session_seconds()
                record.total_focus_seconds = max(0.0, elapsed - record.total_break_seconds)
        except SQLAlchemyError:
            logger.exception("Could not finalize history record %s", handle)

    # ── reads ─────────────────────────────────────────────────────────

    def get(self, handle: RecordHandle) -> SessionHistoryRecord | None:
        with get_session() as db:
            return db.get(SessionHistoryRecord, handle)

    def recent(self, limit: int = 20) -> list[SessionHistoryRecord]:
        """Most recent sessions first."""
        with get_session() as db:
            return (
                db.query(SessionHistoryRecord)
                .order_by(SessionHistoryRecord.start_time.desc())
                .limit(limit)
                .all()
            )

    def summary_for_day(self, day: date | None = None) -> DaySummary:
        """Totals for finished sessions that started on *day* (default today)."""
        day = day or self._clock().date()
        start = datetime.combine(day, time.min)
        end = start + timedelta(days=1)
        summary = DaySummary(day=day)

        with get_session() as db:
            rows = (
                db.query(SessionHistoryRecord)
                .filter(
                    SessionHistoryRecord.start_time >= start,
                    SessionHistoryRecord.start_time < end,
                    SessionHistoryRecord.end_time.isnot(None),
                )
                .all()
            )

        efficiencies = []
        for row in rows:
            summary.sessions += 1
            summary.completed_naturally += int(row.completed_naturally)
            summary.breaks_taken += row.breaks_taken
            summary.focus_seconds += row.total_focus_seconds
            summary.break_seconds += row.total_break_seconds
            efficiencies.append(row.focus_efficiency())
        if efficiencies:
            summary.average_efficiency = sum(efficiencies) / len(efficiencies)
        return summary
