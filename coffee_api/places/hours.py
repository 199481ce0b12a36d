from __future__ import annotations

import re
from typing import Any

TIME_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")

DEFAULT_OPEN = "08:00"
DEFAULT_CLOSE = "18:00"


def to_minutes(value: Any) -> int | None:
    """Return minute-of-day for an ``H:MM`` / ``HH:MM`` string, else ``None``."""
    if not isinstance(value, str):
        return None
    raw = value.strip()
    if not TIME_PATTERN.match(raw):
        return None
    hours, minutes = raw.split(":")
    return int(hours) * 60 + int(minutes)


def format_time(value: Any) -> str | None:
    """Zero-pad a valid time to ``HH:MM``; ``None`` for anything unparsable."""
    minutes = to_minutes(value)
    if minutes is None:
        return None
    return f"{minutes // 60:02d}:{minutes % 60:02d}"
