from __future__ import annotations

"""Orchestration de la prediction (strategie -> temps de passage) (sans UI)."""

import logging
import math
from typing import Any, Sequence

import pandas as pd

from core.checkpoint_projector import assign_checkpoint_times, build_arrival_table, clock_seconds, total_dwell_seconds
from core.formatting import format_elapsed
from core.models import Checkpoint, Course, Strategy, TrackSample
from core.pace_simulator import simulate, total_time_s
from core.profile_plot import build_profile_plot
from core.strategy_solver import solve
from core.transform_report import TransformReport
from core.utils import pace_to_speed_kmh
from services.models import EffectivePaces, PredictionResult, PredictionSummary


logger = logging.getLogger("coursepace.services.prediction_service")

TRACK_COLUMNS = [
    "lat",
    "lon",
    "elevation_m",
    "distance_m",
    "gradient_percent",
    "predicted_time_s",
]


def track_to_dataframe(track: Sequence[TrackSample]) -> pd.DataFrame:
    if not track:
        return pd.DataFrame(columns=TRACK_COLUMNS)
    rows = [
        {
            "lat": s.latitude,
            "lon": s.longitude,
            "elevation_m": s.elevation,
            "distance_m": s.distance_from_start,
            "gradient_percent": s.gradient,
            "predicted_time_s": s.predicted_time if s.predicted_time is not None else math.nan,
        }
        for s in track
    ]
    return pd.DataFrame(rows, columns=TRACK_COLUMNS)


def build_checkpoint_markers(checkpoints: Sequence[Checkpoint]) -> list[dict[str, Any]]:
    markers: list[dict[str, Any]] = []
    for cp in checkpoints:
        distance_km = cp.distance_from_start / 1000.0
        markers.append(
            {
                "distance_km": float(distance_km),
                "elevation_m": float(cp.elevation),
                "label": f"{cp.name}<br>{distance_km:.1f}km<br>{format_elapsed(cp.predicted_time or 0.0)}",
            }
        )
    return markers


def compute_summary(
    course: Course,
    checkpoints: Sequence[Checkpoint],
    strategy: Strategy,
    total_run_time_s: float,
) -> PredictionSummary:
    dwell_s = total_dwell_seconds(checkpoints, course.total_distance, strategy.dwell_time_per_checkpoint)
    elapsed_s = total_run_time_s + dwell_s
    distance_km = course.total_distance / 1000.0
    average_pace = (total_run_time_s / 60.0) / distance_km if distance_km > 0 else math.nan
    return PredictionSummary(
        total_run_time_s=float(total_run_time_s),
        total_dwell_s=float(dwell_s),
        total_elapsed_s=float(elapsed_s),
        finish_clock_s=float(clock_seconds(strategy.start_clock_time, elapsed_s)),
        average_pace_min_per_km=float(average_pace),
        average_speed_kmh=float(pace_to_speed_kmh(average_pace)),
    )


def predict(
    course: Course,
    strategy: Strategy,
    *,
    report: TransformReport | None = None,
) -> PredictionResult:
    strategy.validate()
    effective = solve(course.samples, course.checkpoints, course.total_distance, strategy, report=report)
    solved = effective is not strategy

    track = simulate(course.samples, effective, report=report)
    checkpoints = assign_checkpoint_times(track, course.checkpoints)
    total_run_time_s = total_time_s(track)

    arrivals = build_arrival_table(
        checkpoints,
        total_distance=course.total_distance,
        total_run_time_s=total_run_time_s,
        strategy=effective,
    )
    summary = compute_summary(course, checkpoints, effective, total_run_time_s)
    logger.info(
        "prediction_done",
        extra={
            "mode": strategy.mode,
            "solved": solved,
            "total_elapsed_s": round(summary.total_elapsed_s, 1),
        },
    )

    return PredictionResult(
        strategy=effective,
        paces=EffectivePaces(
            flat_pace=effective.flat_pace,
            climb_pace=effective.climb_pace,
            descent_pace=effective.descent_pace,
            solved=solved,
        ),
        track=track,
        checkpoints=checkpoints,
        arrivals=arrivals,
        summary=summary,
        df_track=track_to_dataframe(track),
        markers=build_checkpoint_markers(checkpoints),
    )


def build_profile_figure(course: Course, result: PredictionResult | None = None) -> Any:
    if result is None:
        return build_profile_plot(track_to_dataframe(course.samples), markers=build_checkpoint_markers(course.checkpoints))
    return build_profile_plot(result.df_track, markers=result.markers)


def export_track_csv(result: PredictionResult) -> str:
    return result.df_track.to_csv(index=False)
