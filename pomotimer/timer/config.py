"""Pomodoro session configuration.

A :class:`PomodoroConfig` is the immutable input to
:meth:`TimerEngine.start <pomotimer.timer.engine.TimerEngine.start>`.
Durations are :class:`~datetime.timedelta` values in memory and whole
seconds in the JSON record form used by storage and preset files::

    {
        "name": "Classic",
        "work_seconds": 1500,
        "break_seconds": 300,
        "long_break_seconds": 900,     # null disables long breaks
        "long_break_interval": 4,
        "cycles": 4
    }
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Any


DEFAULT_LONG_BREAK_INTERVAL = 4
DEFAULT_CYCLES = 4


class InvalidConfiguration(ValueError):
    """Raised when a session cannot start with the given configuration."""


@dataclass(frozen=True)
class PomodoroConfig:
    """One named work/break schedule."""

    work: timedelta
    break_duration: timedelta = timedelta(0)
    long_break: timedelta | None = None
    long_break_interval: int = DEFAULT_LONG_BREAK_INTERVAL
    cycles: int = DEFAULT_CYCLES
    name: str | None = None

    @classmethod
    def from_minutes(
        cls,
        work: float,
        break_: float = 0,
        long_break: float | None = None,
        *,
        long_break_interval: int = DEFAULT_LONG_BREAK_INTERVAL,
        cycles: int = DEFAULT_CYCLES,
        name: str | None = None,
    ) -> PomodoroConfig:
        return cls(
            work=timedelta(minutes=work),
            break_duration=timedelta(minutes=break_),
            long_break=None if long_break is None else timedelta(minutes=long_break),
            long_break_interval=long_break_interval,
            cycles=cycles,
            name=name,
        )

    @property
    def has_long_break(self) -> bool:
        return self.long_break is not None and self.long_break_interval > 0

    # ── JSON record form ──────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "work_seconds": _to_seconds(self.work),
            "break_seconds": _to_seconds(self.break_duration),
            "long_break_seconds": (
                None if self.long_break is None else _to_seconds(self.long_break)
            ),
            "long_break_interval": self.long_break_interval,
            "cycles": self.cycles,
        }

    @classmethod
    def from_dict(cls, data: Any) -> PomodoroConfig:
        """Build a config from a stored record.

        Stored records are checked more strictly than :func:`validate_config`
        because they come from outside the process: every duration must be
        a non-negative number and the counts must be positive integers.
        """
        if not isinstance(data, dict):
            raise InvalidConfiguration(f"config record must be an object, got {type(data).__name__}")

        work = _seconds_field(data, "work_seconds", required=True)
        if work <= 0:
            raise InvalidConfiguration("work_seconds must be greater than zero")
        long_break = _seconds_field(data, "long_break_seconds", required=False)

        name = data.get("name")
        if name is not None and not isinstance(name, str):
            raise InvalidConfiguration("name must be a string")

        return cls(
            work=timedelta(seconds=work),
            break_duration=timedelta(seconds=_seconds_field(data, "break_seconds", required=False) or 0),
            long_break=None if long_break is None else timedelta(seconds=long_break),
            long_break_interval=_count_field(data, "long_break_interval", DEFAULT_LONG_BREAK_INTERVAL),
            cycles=_count_field(data, "cycles", DEFAULT_CYCLES),
            name=name,
        )


def validate_config(config: PomodoroConfig | None) -> PomodoroConfig:
    """Check the preconditions for starting a session.

    A missing config, a non-positive work duration or fewer than one
    cycle is rejected; the remaining fields are taken as given.
    """
    if config is None:
        raise InvalidConfiguration("a configuration is required to start a session")
    if config.work <= timedelta(0):
        raise InvalidConfiguration("work duration must be greater than zero")
    if config.cycles < 1:
        raise InvalidConfiguration("a session needs at least one cycle")
    return config


# ── record helpers ───────────────────────────────────────────────────────


def _to_seconds(value: timedelta) -> int:
    return int(round(value.total_seconds()))


def _seconds_field(data: dict, key: str, *, required: bool) -> float | None:
    value = data.get(key)
    if value is None:
        if required:
            raise InvalidConfiguration(f"{key} is required")
        return None
    # bool is an int subclass; "true" is never a duration
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidConfiguration(f"{key} must be a number of seconds")
    if value < 0:
        raise InvalidConfiguration(f"{key} must not be negative")
    return float(value)


def _count_field(data: dict, key: str, default: int) -> int:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidConfiguration(f"{key} must be a positive integer")
    return value
