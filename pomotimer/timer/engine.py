"""Timer state machine for Pomodoro sessions.

Phases
------
IDLE        No session.  Baseline after construction and ``reset()``.
WORK        Work period of the current cycle.
BREAK       Regular break after a work period.
LONG_BREAK  Extended break taken every ``long_break_interval`` cycles.
COMPLETED   All configured cycles are done.  Nothing is scheduled.

WORK, BREAK and LONG_BREAK are either running or paused; that is the
``is_running`` flag, not a separate phase.

Transitions
-----------
IDLE → WORK                         start(config), cycle := 1
WORK → BREAK | LONG_BREAK           phase time elapsed
BREAK | LONG_BREAK → WORK           phase time elapsed, cycles remain
BREAK | LONG_BREAK → COMPLETED      phase time elapsed, last cycle
{running} ⇄ {paused}                pause() / resume()
Any → IDLE                          reset()

Timekeeping
-----------
Remaining time is always ``phase_end - now``.  Nothing is decremented per
tick, so a late tick (suspended process, sleeping laptop) just observes
more elapsed time and still completes the phase exactly once.
"""

from __future__ import annotations

import logging
import math
import threading
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable, Optional

from .config import PomodoroConfig, validate_config
from .scheduler import DEFAULT_TICK_INTERVAL_MS, QtScheduler, Scheduler


# ── enums ─────────────────────────────────────────────────────────────────


class Phase(Enum):
    IDLE = "idle"
    WORK = "work"
    BREAK = "break"
    LONG_BREAK = "long_break"
    COMPLETED = "completed"


TIMED_PHASES: frozenset[Phase] = frozenset({Phase.WORK, Phase.BREAK, Phase.LONG_BREAK})

_ZERO = timedelta(0)


# ── event payload ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class TimerUpdate:
    """Immutable state snapshot delivered to subscribers."""

    phase: Phase
    remaining: timedelta
    current_cycle: int
    is_running: bool

    @property
    def remaining_seconds(self) -> int:
        """Whole seconds left, rounded up so 0 means really done."""
        return max(0, math.ceil(self.remaining.total_seconds()))


TimerCallback = Callable[[TimerUpdate], None]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


# ── engine ────────────────────────────────────────────────────────────────


class TimerEngine:
    """Pomodoro phase sequencer with wall-clock timekeeping.

    Subscribers registered with :meth:`subscribe` receive a
    :class:`TimerUpdate` after every state change and on every tick while
    running, synchronously and in registration order.

    ``scheduler`` and ``now_fn`` are injectable so hosts and tests control
    the polling cadence and the clock.  The default scheduler is a
    ``QTimer`` and needs a running Qt event loop.
    """

    def __init__(
        self,
        *,
        scheduler: Optional[Scheduler] = None,
        now_fn: Optional[Callable[[], datetime]] = None,
        tick_interval_ms: int = DEFAULT_TICK_INTERVAL_MS,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._now = now_fn or _utc_now
        self._logger = logger or logging.getLogger("pomotimer.timer")
        self._lock = threading.RLock()
        self._subscribers: list[TimerCallback] = []
        self._pending: deque[TimerUpdate] = deque()
        self._emitting: bool = False

        # ── session state ─────────────────────────────────────────────
        self._phase: Phase = Phase.IDLE
        self._current_cycle: int = 0
        self._phase_end: datetime | None = None
        self._remaining_on_pause: timedelta = _ZERO
        self._config: PomodoroConfig | None = None
        self._is_running: bool = False

        # ── periodic tick ─────────────────────────────────────────────
        self._scheduler = scheduler if scheduler is not None else QtScheduler()
        self._scheduler.bind(self.tick, tick_interval_ms)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def current_cycle(self) -> int:
        return self._current_cycle

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def config(self) -> PomodoroConfig | None:
        """Active configuration, ``None`` when idle."""
        return self._config

    # ══════════════════════════════════════════════════════════════════
    #  SUBSCRIPTIONS
    # ══════════════════════════════════════════════════════════════════

    def subscribe(self, callback: TimerCallback) -> TimerCallback:
        """Register *callback*; returns it so it can be used as a decorator."""
        with self._lock:
            self._subscribers.append(callback)
        return callback

    def unsubscribe(self, callback: TimerCallback) -> bool:
        """Remove one registration of *callback*.  False if not registered."""
        with self._lock:
            try:
                self._subscribers.remove(callback)
            except ValueError:
                return False
            return True

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def start(self, config: PomodoroConfig | None) -> None:
        """Begin a new session at cycle 1.

        Raises :class:`InvalidConfiguration` before touching any state.
        Starting while a session is in progress replaces it.
        """
        validate_config(config)
        with self._lock:
            self._config = config
            self._current_cycle = 1
            self._logger.info(
                "Session started: config=%s cycles=%d",
                config.name or "<custom>",
                config.cycles,
            )
            self._enter_phase_locked(Phase.WORK, config.work)

    def pause(self) -> None:
        """Freeze the running phase.  No-op unless running."""
        with self._lock:
            if not self._is_running or self._phase == Phase.IDLE:
                return
            now = self._now()
            self._remaining_on_pause = self._remaining_until_end(now)
            self._phase_end = None
            self._scheduler.stop()
            self._is_running = False
            self._logger.debug(
                "Paused %s with %.1fs left",
                self._phase.value,
                self._remaining_on_pause.total_seconds(),
            )
            self._emit_locked(now)

    def resume(self) -> None:
        """Continue a paused phase.  No-op unless paused."""
        with self._lock:
            if self._is_running or self._phase not in TIMED_PHASES:
                return
            now = self._now()
            self._phase_end = now + self._remaining_on_pause
            self._is_running = True
            self._scheduler.start()
            self._logger.debug("Resumed %s", self._phase.value)
            self._emit_locked(now)

    def reset(self) -> None:
        """Stop everything and return to IDLE.  Safe from any state."""
        with self._lock:
            self._reset_locked()

    def get_state(self) -> TimerUpdate:
        """Current snapshot without side effects."""
        with self._lock:
            return self._snapshot_locked(self._now())

    def tick(self) -> None:
        """Scheduler callback: publish progress or complete the phase."""
        with self._lock:
            if not self._is_running or self._phase_end is None:
                return
            now = self._now()
            if self._phase_end <= now:
                self._complete_phase_locked()
            else:
                self._emit_locked(now)

    def close(self) -> None:
        """Stop the scheduler and drop every subscriber."""
        with self._lock:
            self._scheduler.stop()
            self._subscribers.clear()
            self._pending.clear()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — state machine
    # ══════════════════════════════════════════════════════════════════

    def _enter_phase_locked(self, phase: Phase, duration: timedelta) -> None:
        now = self._now()
        self._phase = phase
        self._phase_end = now + duration
        self._remaining_on_pause = _ZERO
        self._is_running = True
        self._scheduler.start()
        self._logger.info(
            "Entered %s: cycle=%d duration=%ss",
            phase.value,
            self._current_cycle,
            int(duration.total_seconds()),
        )
        self._emit_locked(now)

    def _complete_phase_locked(self) -> None:
        # No ticks may land between the completion check and the next phase.
        self._scheduler.stop()
        config = self._config
        if config is None:
            self._reset_locked()
            return

        if self._phase == Phase.WORK:
            if config.has_long_break and self._current_cycle % config.long_break_interval == 0:
                self._enter_phase_locked(Phase.LONG_BREAK, config.long_break)
            else:
                self._enter_phase_locked(Phase.BREAK, config.break_duration)
            return

        if self._current_cycle >= config.cycles:
            self._phase = Phase.COMPLETED
            self._is_running = False
            self._phase_end = None
            self._remaining_on_pause = _ZERO
            self._logger.info("Session completed after %d cycles", self._current_cycle)
            self._emit_locked(self._now())
            return

        self._current_cycle += 1
        self._enter_phase_locked(Phase.WORK, config.work)

    def _reset_locked(self) -> None:
        self._scheduler.stop()
        self._phase = Phase.IDLE
        self._is_running = False
        self._phase_end = None
        self._remaining_on_pause = _ZERO
        self._config = None
        self._current_cycle = 0
        self._logger.info("Timer reset")
        self._emit_locked(self._now())

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — snapshots and delivery
    # ══════════════════════════════════════════════════════════════════

    def _remaining_until_end(self, now: datetime) -> timedelta:
        if self._phase_end is None:
            return _ZERO
        return max(self._phase_end - now, _ZERO)

    def _snapshot_locked(self, now: datetime) -> TimerUpdate:
        if self._is_running:
            remaining = self._remaining_until_end(now)
        elif self._phase in TIMED_PHASES:
            remaining = self._remaining_on_pause
        else:
            remaining = _ZERO
        return TimerUpdate(
            phase=self._phase,
            remaining=remaining,
            current_cycle=self._current_cycle,
            is_running=self._is_running,
        )

    def _emit_locked(self, now: datetime) -> None:
        # A subscriber that changes state mid-delivery queues its update
        # behind the current one, so every subscriber sees the same order.
        self._pending.append(self._snapshot_locked(now))
        if self._emitting:
            return
        self._emitting = True
        try:
            while self._pending:
                update = self._pending.popleft()
                for callback in list(self._subscribers):
                    try:
                        callback(update)
                    except Exception:
                        self._logger.exception("Timer subscriber %r failed", callback)
        finally:
            self._emitting = False
