from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import pandas as pd

from core.checkpoint_projector import ArrivalRow
from core.models import Checkpoint, Course, Strategy, TrackSample


DEFAULT_STRATEGY = Strategy()


@dataclass(frozen=True)
class LoadedCourse:
    name: str
    course: Course
    track_count: int


@dataclass(frozen=True)
class CourseStats:
    distance_km: float
    elevation_gain_m: float
    elevation_loss_m: float
    sample_count: int
    checkpoint_count: int


@dataclass(frozen=True)
class EffectivePaces:
    flat_pace: float
    climb_pace: float
    descent_pace: float
    solved: bool


@dataclass(frozen=True)
class PredictionSummary:
    total_run_time_s: float
    total_dwell_s: float
    total_elapsed_s: float
    finish_clock_s: float
    average_pace_min_per_km: float
    average_speed_kmh: float


@dataclass(frozen=True)
class PredictionResult:
    strategy: Strategy
    paces: EffectivePaces
    track: tuple[TrackSample, ...]
    checkpoints: tuple[Checkpoint, ...]
    arrivals: list[ArrivalRow]
    summary: PredictionSummary
    df_track: pd.DataFrame
    markers: list[dict[str, Any]]
