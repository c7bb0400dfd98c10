"""Shared test helpers for FocusKey."""

from datetime import datetime, timedelta

from focuskey.session.scheduler import CallbackScheduler, ScheduledCall


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2025, 1, 6, 9, 0, 0)  # a Monday

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class _FakeCall(ScheduledCall):

    def __init__(self, due: datetime, callback):
        self.due = due
        self.callback = callback
        self._active = True

    def cancel(self):
        self._active = False

    @property
    def active(self):
        return self._active


class FakeScheduler(CallbackScheduler):
    """Scheduler driven by a FakeClock.  ``advance`` fires due callbacks."""

    def __init__(self, clock: FakeClock):
        self.clock = clock
        self.calls: list[_FakeCall] = []

    def call_later(self, delay_seconds, callback):
        call = _FakeCall(self.clock.now + timedelta(seconds=delay_seconds), callback)
        self.calls.append(call)
        return call

    @property
    def pending(self) -> list[_FakeCall]:
        return [c for c in self.calls if c.active]

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing callbacks in due order."""
        target = self.clock.now + timedelta(seconds=seconds)
        while True:
            due = sorted(
                (c for c in self.pending if c.due <= target), key=lambda c: c.due
            )
            if not due:
                break
            call = due[0]
            self.clock.now = max(self.clock.now, call.due)
            call._active = False
            call.callback()
        self.clock.now = target

    def fire_stale(self, call: _FakeCall) -> None:
        """Run a callback even though it was cancelled (a late timer)."""
        call.callback()
