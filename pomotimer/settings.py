"""Application settings with JSON persistence.

Settings are stored at:
    ~/Library/Application Support/Pomotimer/settings.json   (macOS)
    $XDG_DATA_HOME/pomotimer/settings.json                  (elsewhere)

Usage::

    settings = load_settings()
    settings.tick_interval_ms = 500
    save_settings(settings)
"""

from __future__ import annotations

import json
import logging
import os
import sys
from dataclasses import dataclass, asdict, fields
from pathlib import Path

logger = logging.getLogger(__name__)


def _default_data_dir() -> Path:
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "Pomotimer"
    base = os.environ.get("XDG_DATA_HOME") or str(Path.home() / ".local" / "share")
    return Path(base) / "pomotimer"


APP_DATA_DIR = _default_data_dir()
SETTINGS_PATH = APP_DATA_DIR / "settings.json"
DB_PATH = APP_DATA_DIR / "pomotimer.db"


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── timer ─────────────────────────────────────────────────────────
    tick_interval_ms: int = 250
    default_preset: str = "Classic"

    # ── notifications ─────────────────────────────────────────────────
    notifications_enabled: bool = True
    do_not_disturb: bool = False

    # ── storage ───────────────────────────────────────────────────────
    database_url: str | None = None        # None → SQLite file in APP_DATA_DIR
    preset_catalog_path: str | None = None  # None → built-in presets only


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from disk, falling back to defaults."""
    path = path or SETTINGS_PATH
    try:
        if path.exists():
            data = json.loads(path.read_text(encoding="utf-8"))
            # Only use keys that exist in the dataclass
            valid_keys = {f.name for f in fields(Settings)}
            filtered = {k: v for k, v in data.items() if k in valid_keys}
            return Settings(**filtered)
    except (OSError, ValueError, TypeError, AttributeError) as error:
        logger.warning("Ignoring unreadable settings file %s: %s", path, error)
    return Settings()


def save_settings(settings: Settings, path: Path | None = None) -> None:
    """Write settings to disk as JSON."""
    path = path or SETTINGS_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )
