"""Display helpers for remaining time."""

from __future__ import annotations

import math
from datetime import timedelta


def format_remaining(remaining: timedelta) -> str:
    """``mm:ss`` below an hour, ``h:mm:ss`` above; partial seconds round up."""
    total = max(0, math.ceil(remaining.total_seconds()))
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes:02d}:{seconds:02d}"
