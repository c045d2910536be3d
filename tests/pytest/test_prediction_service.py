from __future__ import annotations

from dataclasses import replace
from datetime import time
from pathlib import Path

import pytest

from tests.unit._bootstrap import ensure_project_on_path


ensure_project_on_path()

FIXTURE = Path(__file__).resolve().parents[1] / "course.gpx"


@pytest.fixture()
def course():
    from services.course_service import load_course_from_bytes

    return load_course_from_bytes(FIXTURE.read_bytes(), FIXTURE.name).course


def test_pace_mode_prediction(course) -> None:
    from core.models import Strategy
    from core.transform_report import TransformReport
    from services.prediction_service import predict

    strategy = Strategy(flat_pace=6.0, dwell_time_per_checkpoint=5.0, start_clock_time=time(7, 0))
    report = TransformReport()
    result = predict(course, strategy, report=report)

    # Pentes du parcours entre -4.5 % et +9 % : tout au plat.
    expected_run = course.total_distance / 1000.0 * 6.0 * 60.0
    assert result.summary.total_run_time_s == pytest.approx(expected_run)
    assert result.summary.total_dwell_s == pytest.approx(2 * 5 * 60)
    assert result.summary.total_elapsed_s == pytest.approx(expected_run + 600)
    assert result.summary.average_pace_min_per_km == pytest.approx(6.0)
    assert result.summary.average_speed_kmh == pytest.approx(10.0)
    assert result.paces.solved is False
    assert result.strategy is strategy


def test_target_time_fallback_rejects_non_positive_pace(course) -> None:
    from core.errors import StrategyError
    from core.models import Strategy
    from services.prediction_service import predict

    strategy = Strategy(
        mode="target_time", target_hours=0, target_minutes=3, flat_pace=-6.0, dwell_time_per_checkpoint=5.0
    )
    with pytest.raises(StrategyError):
        predict(course, strategy)

    assert [r.name for r in result.arrivals] == ["Start (START)", "Aid 1", "Aid 2", "Finish"]
    assert [r.dwell_s for r in result.arrivals] == [0.0, 0.0, 300.0, 600.0]
    assert result.arrivals[-1].elapsed_s == pytest.approx(result.summary.total_elapsed_s)
    assert result.arrivals[-1].clock_s == pytest.approx(7 * 3600 + result.summary.total_elapsed_s)

    assert result.track[0].predicted_time == 0.0
    assert all(cp.predicted_time is not None for cp in result.checkpoints)
    assert report.find("simulate:segments") is not None


def test_target_time_prediction(course) -> None:
    from core.models import Strategy
    from services.prediction_service import predict

    strategy = Strategy(mode="target_time", target_hours=1, target_minutes=0, dwell_time_per_checkpoint=5.0)
    result = predict(course, strategy)

    assert result.paces.solved is True
    assert result.summary.total_elapsed_s == pytest.approx(3600.0, abs=1.0)
    assert result.paces.climb_pace == pytest.approx(2.0 * result.paces.flat_pace)
    assert result.paces.descent_pace == pytest.approx(0.8 * result.paces.flat_pace)


def test_target_time_fallback_keeps_strategy(course) -> None:
    from core.models import Strategy
    from services.prediction_service import predict

    strategy = Strategy(mode="target_time", target_hours=0, target_minutes=5, dwell_time_per_checkpoint=5.0)
    result = predict(course, strategy)
    assert result.paces.solved is False
    assert result.strategy is strategy


def test_invalid_strategy_raises(course) -> None:
    from core.errors import StrategyError
    from core.models import Strategy
    from services.prediction_service import predict

    with pytest.raises(StrategyError):
        predict(course, replace(Strategy(), pace_distribution_ratio=0.0))


def test_track_frame_profile_and_csv(course) -> None:
    from core.models import Strategy
    from services.prediction_service import TRACK_COLUMNS, build_profile_figure, export_track_csv, predict

    result = predict(course, Strategy())
    assert list(result.df_track.columns) == TRACK_COLUMNS
    assert len(result.df_track) == len(course.samples)
    assert result.df_track["predicted_time_s"].is_monotonic_increasing

    assert len(result.markers) == 4
    assert result.markers[1]["label"].startswith("Aid 1<br>")

    fig = build_profile_figure(course, result)
    assert len(fig.data) == 2
    assert len(build_profile_figure(course).data) == 2

    csv_text = export_track_csv(result)
    assert csv_text.splitlines()[0] == ",".join(TRACK_COLUMNS)


def test_profile_downsampling_keeps_last_point() -> None:
    import pandas as pd

    from core.profile_plot import downsample

    df = pd.DataFrame({"distance_m": range(5001), "elevation_m": [0.0] * 5001})
    out = downsample(df, max_points=2000)
    assert len(out) <= 2001
    assert out["distance_m"].iloc[-1] == 5000
    assert downsample(df.head(10), max_points=2000) is not None
