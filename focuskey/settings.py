"""Application settings with JSON persistence.

Settings are stored at:
    ~/Library/Application Support/FocusKey/settings.json

Usage::

    settings = load_settings()
    settings.default_profile_name = "Study"
    save_settings(settings)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict, fields
from pathlib import Path

logger = logging.getLogger(__name__)

# Same app-support directory as database/db.py
APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "FocusKey"
SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── restrictions ──────────────────────────────────────────────────
    restriction_backend: str = "simulated"   # simulated | unsupported
    screen_time_authorized: bool = True      # simulated backend only

    # ── sessions ──────────────────────────────────────────────────────
    default_profile_name: str | None = None  # None → "Work", then last used

    # ── schedules ─────────────────────────────────────────────────────
    schedule_enabled: bool = True
    schedule_check_interval_seconds: int = 30

    # ── logging ───────────────────────────────────────────────────────
    log_level: str = "INFO"
    log_to_file: bool = True


def load_settings() -> Settings:
    """Load settings from disk, falling back to defaults."""
    try:
        if SETTINGS_PATH.exists():
            data = json.loads(SETTINGS_PATH.read_text(encoding="utf-8"))
            # Only use keys that exist in the dataclass
            valid_keys = {f.name for f in fields(Settings)}
            filtered = {k: v for k, v in data.items() if k in valid_keys}
            return Settings(**filtered)
    except (OSError, ValueError, TypeError, AttributeError) as exc:
        logger.warning("Ignoring unreadable settings file %s: %s", SETTINGS_PATH, exc)
    return Settings()


def save_settings(settings: Settings) -> None:
    """Write settings to disk as JSON."""
    APP_SUPPORT_DIR.mkdir(parents=True, exist_ok=True)
    SETTINGS_PATH.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )
