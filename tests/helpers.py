"""Shared test helpers for Pomotimer."""

from datetime import datetime, timedelta, timezone

from pomotimer.timer.engine import TimerEngine


class UpdateCollector:
    """Subscriber that records every TimerUpdate it receives."""

    def __init__(self):
        self.items: list = []

    def __call__(self, update):
        self.items.append(update)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    @property
    def phases(self):
        return [u.phase for u in self.items]

    def clear(self):
        self.items.clear()


class FakeClock:
    """Injectable ``now_fn`` that only moves when told to."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float = 0, **kwargs) -> None:
        self.now += timedelta(seconds=seconds, **kwargs)


class ManualScheduler:
    """Scheduler double: records start/stop, fires only via ``fire()``."""

    def __init__(self):
        self.callback = None
        self.interval_ms = None
        self.is_active = False
        self.starts = 0
        self.stops = 0

    def bind(self, callback, interval_ms):
        self.callback = callback
        self.interval_ms = interval_ms

    def start(self):
        self.starts += 1
        self.is_active = True

    def stop(self):
        self.stops += 1
        self.is_active = False

    def fire(self):
        """Deliver one tick, as the real timer would, if active."""
        if self.is_active:
            self.callback()


def finish_phase(engine: TimerEngine, clock: FakeClock, scheduler: ManualScheduler) -> None:
    """Jump the clock to the end of the running phase and tick once."""
    clock.advance(engine.get_state().remaining.total_seconds())
    scheduler.fire()
