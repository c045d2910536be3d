from __future__ import annotations

from dataclasses import replace
from typing import Sequence

import numpy as np

from core.models import Strategy, TrackSample
from core.transform_report import TransformReport


def select_base_pace(gradient: np.ndarray, strategy: Strategy) -> np.ndarray:
    """Allure de base (min/km) par segment.

    Priorite : montee (pente >= seuil, inclusif), puis descente (pente < -5, exclusif), sinon plat.
    """

    gradient = np.asarray(gradient, dtype=float)
    return np.where(
        gradient >= strategy.climb_gradient_threshold,
        strategy.climb_pace,
        np.where(gradient < strategy.descent_gradient_threshold, strategy.descent_pace, strategy.flat_pace),
    ).astype(float)


def pace_decay_factor(midpoint_m: np.ndarray, total_distance_m: float, ratio: float) -> np.ndarray:
    """Facteur multiplicatif d'allure (1 / vitesse relative) au milieu de chaque segment.

    La vitesse relative decroit lineairement de 1.0 au depart a `ratio` a l'arrivee.
    """

    midpoint_m = np.asarray(midpoint_m, dtype=float)
    if total_distance_m > 0:
        progress = midpoint_m / total_distance_m
    else:
        progress = np.zeros_like(midpoint_m)
    speed_factor = 1.0 - (1.0 - float(ratio)) * progress
    safe = np.where(speed_factor > 0, speed_factor, 1.0)
    return 1.0 / safe


def compute_segment_seconds(track: Sequence[TrackSample], strategy: Strategy) -> np.ndarray:
    """Duree (s) de chaque segment (i-1, i) ; 0 pour les segments de longueur nulle ou negative."""

    if len(track) < 2:
        return np.zeros(0, dtype=float)

    dist = np.array([s.distance_from_start for s in track], dtype=float)
    gradient = np.array([s.gradient for s in track[1:]], dtype=float)
    total_distance = float(dist[-1])

    segment_km = (dist[1:] - dist[:-1]) / 1000.0
    valid = segment_km > 0

    base_pace = select_base_pace(gradient, strategy)
    midpoint = (dist[1:] + dist[:-1]) / 2.0
    adjusted_pace = base_pace * pace_decay_factor(midpoint, total_distance, strategy.pace_distribution_ratio)

    return np.where(valid, segment_km * adjusted_pace * 60.0, 0.0)


def simulate(
    track: Sequence[TrackSample],
    strategy: Strategy,
    *,
    report: TransformReport | None = None,
) -> tuple[TrackSample, ...]:
    """
    Calcule le temps de passage predit (s depuis le depart) en chaque point de la trace.
    Fonction pure : la trace d'entree n'est pas modifiee.
    """
    if not track:
        return ()

    segment_s = compute_segment_seconds(track, strategy)
    cumulative_s = np.concatenate(([0.0], np.cumsum(segment_s)))

    if report is not None:
        zero_length = int(
            sum(1 for prev, cur in zip(track, track[1:]) if cur.distance_from_start <= prev.distance_from_start)
        )
        report.add(
            "simulate:segments",
            rows_in=max(len(track) - 1, 0),
            rows_out=max(len(track) - 1, 0) - zero_length,
            reason="zero-length segments carry time forward",
            details={"zero_length_segments": zero_length},
        )

    return tuple(replace(sample, predicted_time=float(t)) for sample, t in zip(track, cumulative_s))


def total_time_s(track: Sequence[TrackSample]) -> float:
    if not track:
        return 0.0
    last = track[-1].predicted_time
    return float(last) if last is not None else 0.0
