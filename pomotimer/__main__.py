"""Run a Pomodoro session: python -m pomotimer.

Examples::

    python -m pomotimer                       # default preset from settings
    python -m pomotimer --preset "Deep work"
    python -m pomotimer --work 30 --break 5 --cycles 2 --save "Half hour"
    python -m pomotimer --list
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import signal
import sys

from PyQt6.QtGui import QColor, QIcon, QPainter, QPixmap
from PyQt6.QtWidgets import QApplication, QSystemTrayIcon
from sqlalchemy.exc import SQLAlchemyError

from .database.db import configure_engine, init_db
from .formatting import format_remaining
from .notifications import LogNotifier, PhaseNotifier, TrayNotifier
from .presets import find_preset, load_preset_catalog
from .settings import Settings, load_settings
from .storage import ConfigStorage, SqlKeyValueStore
from .timer import (
    InvalidConfiguration,
    Phase,
    PomodoroConfig,
    TimerEngine,
    TimerUpdate,
    validate_config,
)

EXIT_USAGE = 2


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Configure logging for the application."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    return logging.getLogger("pomotimer")


def _minutes(value: str) -> float:
    minutes = float(value)
    if minutes < 0:
        raise argparse.ArgumentTypeError(f"{value} must not be negative")
    return minutes


def _count(value: str) -> int:
    count = int(value)
    if count < 1:
        raise argparse.ArgumentTypeError(f"{value} must be at least 1")
    return count


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pomotimer", description="Pomodoro timer")
    parser.add_argument("--preset", help="preset or saved config to run (case-insensitive)")
    parser.add_argument("--work", type=_minutes, metavar="MIN", help="work minutes (custom config)")
    parser.add_argument("--break", dest="break_", type=_minutes, default=5, metavar="MIN",
                        help="break minutes (default: 5)")
    parser.add_argument("--long-break", type=_minutes, metavar="MIN",
                        help="long break minutes; omit to disable long breaks")
    parser.add_argument("--interval", type=_count, default=4, metavar="N",
                        help="take the long break every N cycles (default: 4)")
    parser.add_argument("--cycles", type=_count, default=4, metavar="N",
                        help="work cycles in the session (default: 4)")
    parser.add_argument("--save", metavar="NAME", help="store the custom config under NAME")
    parser.add_argument("--list", action="store_true", help="list presets and saved configs")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def _describe(config: PomodoroConfig) -> str:
    parts = [
        f"work {format_remaining(config.work)}",
        f"break {format_remaining(config.break_duration)}",
    ]
    if config.has_long_break:
        parts.append(
            f"long break {format_remaining(config.long_break)} every {config.long_break_interval}"
        )
    parts.append(f"{config.cycles} cycles")
    return f"{config.name or '<unnamed>'}: " + ", ".join(parts)


def _resolve_config(
    args: argparse.Namespace,
    settings: Settings,
    storage: ConfigStorage,
) -> PomodoroConfig | None:
    if args.work is not None:
        return PomodoroConfig.from_minutes(
            args.work,
            args.break_,
            args.long_break,
            long_break_interval=args.interval,
            cycles=args.cycles,
            name=args.save,
        )

    name = args.preset or settings.default_preset
    # Saved configs shadow presets of the same name
    return (
        find_preset(storage.get_user_configs(), name)
        or find_preset(load_preset_catalog(settings.preset_catalog_path), name)
    )


def _make_tray_icon() -> QIcon:
    icon = QPixmap(64, 64)
    icon.fill(QColor(0, 0, 0, 0))
    p = QPainter(icon)
    p.setRenderHint(QPainter.RenderHint.Antialiasing)
    p.setBrush(QColor("#E8574A"))
    p.setPen(QColor("#E8574A").darker(120))
    p.drawEllipse(4, 4, 56, 56)
    p.end()
    return QIcon(icon)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logger = setup_logging(args.verbose)

    settings = load_settings()
    if settings.database_url:
        configure_engine(settings.database_url)
    try:
        init_db()
    except (SQLAlchemyError, OSError) as error:
        logger.warning("Saved configs unavailable: %s", error)
    storage = ConfigStorage(SqlKeyValueStore())

    if args.list:
        for preset in load_preset_catalog(settings.preset_catalog_path):
            print(_describe(preset))
        for config in storage.get_user_configs():
            print(f"{_describe(config)} (saved)")
        return 0

    config = _resolve_config(args, settings, storage)
    if config is None:
        print(f"No preset or saved config named {args.preset or settings.default_preset!r}",
              file=sys.stderr)
        return EXIT_USAGE
    if args.save and config.name != args.save:
        config = dataclasses.replace(config, name=args.save)
    try:
        validate_config(config)
        if args.save:
            storage.save_user_config(config)
            logger.info("Saved config %r", args.save)
    except InvalidConfiguration as error:
        print(f"Invalid configuration: {error}", file=sys.stderr)
        return EXIT_USAGE

    app = QApplication.instance() or QApplication(sys.argv[:1])
    app.setApplicationName("Pomotimer")
    app.setQuitOnLastWindowClosed(False)

    engine = TimerEngine(tick_interval_ms=settings.tick_interval_ms)

    tray = None
    if QSystemTrayIcon.isSystemTrayAvailable():
        tray = QSystemTrayIcon(_make_tray_icon())
        tray.show()
        notifier = TrayNotifier(tray, settings)
    else:
        notifier = LogNotifier()
    PhaseNotifier(engine, notifier)

    @engine.subscribe
    def _on_update(update: TimerUpdate) -> None:
        if tray is not None:
            tray.setToolTip(
                f"Pomotimer: {update.phase.value} {format_remaining(update.remaining)}"
            )
        if update.phase == Phase.COMPLETED:
            app.quit()

    engine.start(config)
    logger.info("Running %s", _describe(config))
    signal.signal(signal.SIGINT, lambda *_: app.quit())
    status = app.exec()

    if engine.phase != Phase.COMPLETED:
        engine.reset()
    engine.close()
    return status


if __name__ == "__main__":
    sys.exit(main())
