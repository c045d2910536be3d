from __future__ import annotations

"""Formatting helpers shared across services and API.

Pure functions, no UI imports.
"""

import math

from core.constants import SECONDS_PER_DAY


def _is_missing(seconds: float | None) -> bool:
    return seconds is None or (isinstance(seconds, float) and math.isnan(seconds))


def _hhmmss(total_seconds: int) -> str:
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    secs = total_seconds % 60
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def format_elapsed(seconds: float | None) -> str:
    """Elapsed duration as HH:MM:SS (hours are not wrapped, e.g. 26:03:00)."""

    if _is_missing(seconds):
        return "-"
    return _hhmmss(int(math.floor(max(float(seconds), 0.0))))


def format_time_of_day(seconds: float | None) -> str:
    """Seconds since midnight as HH:MM:SS, wrapped on 24 h."""

    if _is_missing(seconds):
        return "-"
    return _hhmmss(int(math.floor(float(seconds))) % SECONDS_PER_DAY)
