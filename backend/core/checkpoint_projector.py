from __future__ import annotations

"""Temps de passage aux points de passage et comptabilite des arrets.

Regles de bord :
- un point a moins de EDGE_TOLERANCE_M du depart est "au depart" : aucun arret compte ;
- un point a moins de EDGE_TOLERANCE_M de l'arrivee est "a l'arrivee" : aucun arret apres lui.
"""

from bisect import bisect_left
from dataclasses import dataclass, replace
from datetime import time
from typing import Sequence

from core.constants import EDGE_TOLERANCE_M, SECONDS_PER_DAY
from core.models import Checkpoint, Strategy, TrackSample


def nearest_sample_index(distances: Sequence[float], target: float) -> int:
    """Indice du point le plus proche en distance (liste triee). Egalite -> le premier."""

    if not distances:
        raise ValueError("Trace vide.")
    pos = bisect_left(distances, target)
    if pos <= 0:
        return 0
    if pos >= len(distances):
        return len(distances) - 1
    # distances[pos] peut avoir des doublons : bisect_left donne deja le premier.
    before = pos - 1
    while before > 0 and distances[before - 1] == distances[before]:
        before -= 1
    if abs(distances[pos] - target) < abs(distances[before] - target):
        return pos
    return before


def assign_checkpoint_times(
    track: Sequence[TrackSample], checkpoints: Sequence[Checkpoint]
) -> tuple[Checkpoint, ...]:
    if not track:
        return tuple(checkpoints)
    distances = [s.distance_from_start for s in track]
    out = []
    for cp in checkpoints:
        idx = nearest_sample_index(distances, cp.distance_from_start)
        out.append(replace(cp, predicted_time=track[idx].predicted_time))
    return tuple(out)


def is_at_start(checkpoint: Checkpoint) -> bool:
    return checkpoint.distance_from_start < EDGE_TOLERANCE_M


def is_at_goal(checkpoint: Checkpoint, total_distance: float) -> bool:
    return abs(checkpoint.distance_from_start - total_distance) < EDGE_TOLERANCE_M


def sort_checkpoints(checkpoints: Sequence[Checkpoint]) -> list[Checkpoint]:
    return sorted(checkpoints, key=lambda cp: cp.distance_from_start)


def arrival_dwell_count(checkpoints: Sequence[Checkpoint], index: int) -> int:
    """Nombre d'arrets deja effectues en arrivant au point `index` (liste triee)."""

    if checkpoints and is_at_start(checkpoints[0]):
        return max(0, index - 1)
    return index


def charged_checkpoint_count(checkpoints: Sequence[Checkpoint], total_distance: float) -> int:
    """Points de passage ou un arret est compte (hors depart et arrivee)."""

    ordered = sort_checkpoints(checkpoints)
    count = len(ordered)
    if ordered and is_at_start(ordered[0]):
        count -= 1
        ordered = ordered[1:]
    if ordered and is_at_goal(ordered[-1], total_distance):
        count -= 1
    return count


def total_dwell_seconds(checkpoints: Sequence[Checkpoint], total_distance: float, dwell_minutes: float) -> float:
    return charged_checkpoint_count(checkpoints, total_distance) * float(dwell_minutes) * 60.0


def time_to_seconds(value: time) -> int:
    return value.hour * 3600 + value.minute * 60 + value.second


def clock_seconds(start_clock: time, elapsed_s: float) -> float:
    """Heure de la journee (s depuis minuit) apres elapsed_s, modulo 24 h."""

    return (time_to_seconds(start_clock) + float(elapsed_s)) % SECONDS_PER_DAY


@dataclass(frozen=True)
class ArrivalRow:
    name: str
    distance_m: float
    section_distance_m: float | None
    run_time_s: float
    dwell_s: float
    elapsed_s: float
    clock_s: float
    kind: str  # "start", "checkpoint", "goal"


def build_arrival_table(
    checkpoints: Sequence[Checkpoint],
    *,
    total_distance: float,
    total_run_time_s: float,
    strategy: Strategy,
) -> list[ArrivalRow]:
    """Lignes depart / points de passage / arrivee avec heure et temps ecoule (arrets inclus).

    Les lignes START et GOAL ne sont ajoutees que si aucun point de passage ne les represente.
    """

    ordered = sort_checkpoints(checkpoints)
    dwell_unit = strategy.dwell_seconds_per_checkpoint
    has_start = any(is_at_start(cp) for cp in ordered)
    has_goal = any(is_at_goal(cp, total_distance) for cp in ordered)

    rows: list[ArrivalRow] = []
    if not has_start:
        rows.append(
            ArrivalRow(
                name="START",
                distance_m=0.0,
                section_distance_m=None,
                run_time_s=0.0,
                dwell_s=0.0,
                elapsed_s=0.0,
                clock_s=clock_seconds(strategy.start_clock_time, 0.0),
                kind="start",
            )
        )

    prev_distance = 0.0
    for i, cp in enumerate(ordered):
        at_start = is_at_start(cp)
        run_time = float(cp.predicted_time or 0.0)
        dwell = arrival_dwell_count(ordered, i) * dwell_unit
        elapsed = run_time + dwell
        rows.append(
            ArrivalRow(
                name=f"{cp.name} (START)" if at_start else cp.name,
                distance_m=cp.distance_from_start,
                section_distance_m=None if at_start else cp.distance_from_start - prev_distance,
                run_time_s=run_time,
                dwell_s=dwell,
                elapsed_s=elapsed,
                clock_s=clock_seconds(strategy.start_clock_time, elapsed),
                kind="start" if at_start else "checkpoint",
            )
        )
        prev_distance = cp.distance_from_start

    if not has_goal:
        dwell = total_dwell_seconds(ordered, total_distance, strategy.dwell_time_per_checkpoint)
        elapsed = float(total_run_time_s) + dwell
        rows.append(
            ArrivalRow(
                name="GOAL",
                distance_m=float(total_distance),
                section_distance_m=float(total_distance) - prev_distance,
                run_time_s=float(total_run_time_s),
                dwell_s=dwell,
                elapsed_s=elapsed,
                clock_s=clock_seconds(strategy.start_clock_time, elapsed),
                kind="goal",
            )
        )
    return rows
