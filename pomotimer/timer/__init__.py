"""Timer package."""

from .config import (
    PomodoroConfig,
    InvalidConfiguration,
    validate_config,
    DEFAULT_CYCLES,
    DEFAULT_LONG_BREAK_INTERVAL,
)
from .engine import TimerEngine, TimerUpdate, Phase, TIMED_PHASES
from .scheduler import Scheduler, QtScheduler, DEFAULT_TICK_INTERVAL_MS

__all__ = [
    "PomodoroConfig",
    "InvalidConfiguration",
    "validate_config",
    "DEFAULT_CYCLES",
    "DEFAULT_LONG_BREAK_INTERVAL",
    "TimerEngine",
    "TimerUpdate",
    "Phase",
    "TIMED_PHASES",
    "Scheduler",
    "QtScheduler",
    "DEFAULT_TICK_INTERVAL_MS",
]
