"""Preset catalog: named configurations offered at startup.

The built-in catalog is always available.  A JSON file holding a list of
config records (see :mod:`pomotimer.timer.config`) can replace it; when
that file is missing or unreadable the built-ins are used instead.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, Optional

from .timer.config import InvalidConfiguration, PomodoroConfig

logger = logging.getLogger(__name__)


BUILTIN_PRESETS: tuple[PomodoroConfig, ...] = (
    PomodoroConfig.from_minutes(25, 5, 15, long_break_interval=4, cycles=4, name="Classic"),
    PomodoroConfig.from_minutes(15, 3, 10, long_break_interval=4, cycles=4, name="Short focus"),
    PomodoroConfig.from_minutes(50, 10, 30, long_break_interval=2, cycles=4, name="Deep work"),
    PomodoroConfig.from_minutes(52, 17, None, cycles=3, name="52/17"),
)


def load_preset_catalog(path: Path | str | None) -> list[PomodoroConfig]:
    """Read presets from *path*, or return the built-ins."""
    if path is None:
        return list(BUILTIN_PRESETS)

    path = Path(path)
    try:
        records = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as error:
        logger.warning("Preset catalog %s unavailable, using built-ins: %s", path, error)
        return list(BUILTIN_PRESETS)

    if not isinstance(records, list):
        logger.warning("Preset catalog %s is not a list, using built-ins", path)
        return list(BUILTIN_PRESETS)

    presets = []
    for record in records:
        try:
            presets.append(PomodoroConfig.from_dict(record))
        except InvalidConfiguration as error:
            logger.warning("Skipping preset %r: %s", record, error)
    return presets


def find_preset(presets: Iterable[PomodoroConfig], name: str) -> Optional[PomodoroConfig]:
    """Case-insensitive lookup by name."""
    wanted = name.casefold()
    for preset in presets:
        if preset.name and preset.name.casefold() == wanted:
            return preset
    return None
