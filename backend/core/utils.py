from __future__ import annotations

from datetime import time

from core.errors import StrategyError


def parse_clock_time(value: str) -> time:
    """
    Convertit une heure "HH:MM" ou "HH:MM:SS" en datetime.time.
    """
    if not isinstance(value, str):
        raise StrategyError("L'heure de depart doit etre une chaine.")

    parts = value.strip().split(":")
    if len(parts) not in (2, 3):
        raise StrategyError("Format attendu HH:MM.")
    try:
        numbers = [int(p) for p in parts]
    except ValueError as e:
        raise StrategyError(f"Heure invalide: {value!r}") from e

    hours, minutes = numbers[0], numbers[1]
    seconds = numbers[2] if len(numbers) == 3 else 0
    if not (0 <= hours < 24 and 0 <= minutes < 60 and 0 <= seconds < 60):
        raise StrategyError(f"Heure hors bornes: {value!r}")
    return time(hours, minutes, seconds)


def pace_to_mmss(pace_min_per_km: float) -> str:
    """
    Convertit une allure en min/km (decimale) en chaine "M:SS".
    """
    total_seconds = int(round(pace_min_per_km * 60.0))
    minutes = total_seconds // 60
    secs = total_seconds % 60
    return f"{minutes}:{secs:02d}"


def pace_to_speed_kmh(pace_min_per_km: float) -> float:
    if pace_min_per_km <= 0:
        return float("nan")
    return 60.0 / pace_min_per_km
