"""Phase-change notifications.

:class:`PhaseNotifier` subscribes to a :class:`TimerEngine` and turns
phase transitions into ``notify(title, body)`` calls on a
:class:`Notifier`.  Delivery is fire-and-forget: a failing notifier is
logged at DEBUG and otherwise ignored, so it can never disturb the timer.
"""

from __future__ import annotations

import logging
from typing import Protocol

from PyQt6.QtWidgets import QSystemTrayIcon

from .settings import Settings
from .timer.engine import Phase, TimerEngine, TimerUpdate

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def notify(self, title: str, body: str) -> None: ...


class TrayNotifier:
    """Show notifications as system-tray balloon messages."""

    def __init__(self, tray_icon: QSystemTrayIcon, settings: Settings | None = None) -> None:
        self._tray_icon = tray_icon
        self._settings = settings or Settings()

    def notify(self, title: str, body: str) -> None:
        if not self._settings.notifications_enabled:
            return
        if self._settings.do_not_disturb:
            return
        try:
            self._tray_icon.showMessage(title, body)
        except Exception as error:
            logger.debug("Tray notification failed: %s", error)


class LogNotifier:
    """Fallback for hosts without a system tray."""

    def notify(self, title: str, body: str) -> None:
        logger.info("%s: %s", title, body)


def _minutes(update: TimerUpdate) -> int:
    return (update.remaining_seconds + 59) // 60


class PhaseNotifier:
    """Engine subscriber that announces each newly entered phase.

    Starting a session, pausing, resuming, ticks and reset are silent;
    only transitions made by the timer itself produce a notification.
    """

    def __init__(self, engine: TimerEngine, notifier: Notifier) -> None:
        self._engine = engine
        self._notifier = notifier
        self._last_phase = engine.phase
        engine.subscribe(self.on_update)

    def detach(self) -> None:
        self._engine.unsubscribe(self.on_update)

    def on_update(self, update: TimerUpdate) -> None:
        previous, self._last_phase = self._last_phase, update.phase
        if update.phase == previous:
            return

        message = self._message_for(previous, update)
        if message is None:
            return
        try:
            self._notifier.notify(*message)
        except Exception as error:
            logger.debug("Notification dropped: %s", error)

    def _message_for(self, previous: Phase, update: TimerUpdate) -> tuple[str, str] | None:
        config = self._engine.config
        cycles = config.cycles if config else update.current_cycle

        if update.phase == Phase.BREAK:
            return ("Nice work!", f"Take a {_minutes(update)}-minute break.")
        if update.phase == Phase.LONG_BREAK:
            return ("Great streak!", f"Take a {_minutes(update)}-minute long break.")
        if update.phase == Phase.WORK and previous in (Phase.BREAK, Phase.LONG_BREAK):
            return ("Ready to focus?", f"Cycle {update.current_cycle} of {cycles}. Let's go!")
        if update.phase == Phase.COMPLETED:
            return ("Session complete", f"All {update.current_cycle} cycles done.")
        return None
