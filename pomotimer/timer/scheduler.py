"""Repeating-timer abstraction that drives :meth:`TimerEngine.tick`.

The engine binds its tick callback once and then only calls ``start()`` and
``stop()``; ``is_active`` is for hosts and tests.  Anything that calls
the bound callback every few hundred milliseconds will do.
:class:`QtScheduler` is the production implementation and runs the
callback on the Qt event loop thread.
"""

from __future__ import annotations

from typing import Callable, Protocol

from PyQt6.QtCore import QObject, QTimer


DEFAULT_TICK_INTERVAL_MS = 250


class Scheduler(Protocol):
    def bind(self, callback: Callable[[], None], interval_ms: int) -> None: ...

    def start(self) -> None: ...

    def stop(self) -> None: ...

    @property
    def is_active(self) -> bool: ...


class QtScheduler:
    """``QTimer``-backed scheduler.

    A ``QApplication`` (or ``QCoreApplication``) event loop must be running
    for the callback to fire.
    """

    def __init__(self, parent: QObject | None = None) -> None:
        self._qt_timer = QTimer(parent)
        self._qt_timer.setInterval(DEFAULT_TICK_INTERVAL_MS)
        self._callback: Callable[[], None] | None = None

    def bind(self, callback: Callable[[], None], interval_ms: int) -> None:
        if self._callback is not None:
            self._qt_timer.timeout.disconnect(self._callback)
        self._callback = callback
        self._qt_timer.setInterval(interval_ms)
        self._qt_timer.timeout.connect(callback)

    @property
    def interval_ms(self) -> int:
        return self._qt_timer.interval()

    @property
    def is_active(self) -> bool:
        return self._qt_timer.isActive()

    def start(self) -> None:
        # QTimer.start() on an active timer restarts it; keep the phase
        # cadence unchanged instead.
        if not self._qt_timer.isActive():
            self._qt_timer.start()

    def stop(self) -> None:
        self._qt_timer.stop()
