"""Session history package."""

from .store import DaySummary, RecordHandle, SessionHistoryStore

__all__ = ["DaySummary", "RecordHandle", "SessionHistoryStore"]
