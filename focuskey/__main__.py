"""Allow running FocusKey as a module: python -m focuskey [LINK ...].

Builds the controller and its collaborators, dispatches any trigger
links given on the command line, then keeps the Qt event loop alive
while a session is active so break timers and schedules can fire.
"""

import logging
import sys

from PyQt6.QtCore import QCoreApplication

from .database.db import init_db
from .gateway import create_gateway
from .history.store import SessionHistoryStore
from .logging_config import setup_logging
from .schedule import ScheduleWatcher
from .session.controller import SessionController
from .session.errors import FocusSessionError
from .settings import APP_SUPPORT_DIR, Settings, load_settings
from .triggers import TriggerDispatcher, TriggerOutcome

logger = logging.getLogger("focuskey")


class FocusKeyApp:
    """Composition root: owns one controller and wires its collaborators."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.gateway = create_gateway(
            settings.restriction_backend,
            authorized=settings.screen_time_authorized,
        )
        self.history = SessionHistoryStore()
        self.controller = SessionController(self.gateway, self.history)
        self.dispatcher = TriggerDispatcher(
            self.controller,
            preferred_profile=lambda: self.settings.default_profile_name,
        )
        self.watcher = ScheduleWatcher(
            self.controller,
            interval_seconds=settings.schedule_check_interval_seconds,
        )

        self.controller.error_occurred.connect(self._report_error)
        self.watcher.error_occurred.connect(self._report_error)
        self.dispatcher.confirmation_requested.connect(self._confirm_end)

    def handle_links(self, links: list[str]) -> None:
        for link in links:
            try:
                outcome = self.dispatcher.handle_url(link)
            except FocusSessionError as exc:
                self._report_error(exc)
                continue
            if outcome is TriggerOutcome.IGNORED:
                print(f"Ignored link: {link}")
            else:
                print(f"{link}: {outcome.value}")

    def _report_error(self, exc: FocusSessionError) -> None:
        print(f"FocusKey: {exc.user_message}", file=sys.stderr)

    def _confirm_end(self, profile) -> None:
        name = profile.name if profile else "current"
        print(f"A {name} session is running. Tap a toggle tag to end it.")


def main() -> None:
    settings = load_settings()
    setup_logging(
        settings.log_level,
        APP_SUPPORT_DIR / "logs" if settings.log_to_file else None,
    )
    init_db()
    logger.info("FocusKey ready")

    app = QCoreApplication(sys.argv)
    app.setApplicationName("FocusKey")
    app.setOrganizationName("FocusKey")

    focus = FocusKeyApp(settings)
    focus.handle_links(sys.argv[1:])

    if settings.schedule_enabled:
        focus.watcher.start()
    else:
        # Nothing left to wait for once the session is over
        if not focus.controller.is_session_active:
            return
        focus.controller.session_ended.connect(lambda _data: app.quit())
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
