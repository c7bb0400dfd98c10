"""Database package."""

from .db import get_session, init_db
from .models import SessionHistoryRecord, StoredProfile

__all__ = ["get_session", "init_db", "SessionHistoryRecord", "StoredProfile"]
