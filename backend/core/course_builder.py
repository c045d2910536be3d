from __future__ import annotations

"""Construction du modele de parcours (distance / pente / D+ D-) depuis les points GPX."""

import logging
from typing import Iterable, Sequence

import numpy as np

from core.constants import ELEVATION_HYSTERESIS_M
from core.errors import ParseError
from core.geo import distance_m, distances_to_point_m
from core.models import Checkpoint, Course, RawMarker, RawSample, TrackSample
from core.transform_report import TransformReport


logger = logging.getLogger("coursepace.core.course_builder")


def compute_elevation_gain_loss(
    elevations: Iterable[float], threshold_m: float = ELEVATION_HYSTERESIS_M
) -> tuple[float, float]:
    """D+ / D- cumules avec hysteresis.

    La reference ne bouge que lorsqu'un ecart >= threshold_m est atteint ; le bruit
    de l'altimetre GPS en dessous du seuil n'est donc jamais cumule.
    """

    gain = 0.0
    loss = 0.0
    baseline: float | None = None
    for elevation in elevations:
        if baseline is None:
            baseline = float(elevation)
            continue
        diff = float(elevation) - baseline
        if abs(diff) >= threshold_m:
            if diff > 0:
                gain += diff
            else:
                loss += -diff
            baseline = float(elevation)
    return gain, loss


def build_track(samples: Sequence[RawSample]) -> tuple[TrackSample, ...]:
    track: list[TrackSample] = []
    cumulative = 0.0
    prev: RawSample | None = None
    for sample in samples:
        gradient = 0.0
        if prev is not None:
            segment_m = distance_m(prev.latitude, prev.longitude, sample.latitude, sample.longitude)
            cumulative += segment_m
            if segment_m > 0:
                gradient = (sample.elevation - prev.elevation) / segment_m * 100.0
        track.append(
            TrackSample(
                latitude=sample.latitude,
                longitude=sample.longitude,
                elevation=sample.elevation,
                distance_from_start=cumulative,
                gradient=gradient,
            )
        )
        prev = sample
    return tuple(track)


def project_markers(
    track: Sequence[TrackSample],
    markers: Sequence[RawMarker],
    *,
    max_projection_distance_m: float | None = None,
) -> tuple[Checkpoint, ...]:
    """Projette chaque marqueur sur le point de trace geographiquement le plus proche.

    Sans max_projection_distance_m, un marqueur hors trace prend quand meme la
    distance du point le plus proche.
    """

    if not track or not markers:
        return ()

    lats = np.array([s.latitude for s in track], dtype=float)
    lons = np.array([s.longitude for s in track], dtype=float)
    dists = np.array([s.distance_from_start for s in track], dtype=float)

    checkpoints: list[Checkpoint] = []
    for marker in markers:
        offsets = distances_to_point_m(lats, lons, marker.latitude, marker.longitude)
        # argmin renvoie le premier minimum : egalite -> premier point de la trace.
        idx = int(np.argmin(offsets))
        if max_projection_distance_m is not None and offsets[idx] > max_projection_distance_m:
            logger.warning(
                "marker_dropped",
                extra={"marker": marker.name, "offset_m": round(float(offsets[idx]), 1)},
            )
            continue
        checkpoints.append(
            Checkpoint(
                latitude=marker.latitude,
                longitude=marker.longitude,
                elevation=marker.elevation,
                name=marker.name,
                distance_from_start=float(dists[idx]),
            )
        )

    return tuple(sorted(checkpoints, key=lambda cp: cp.distance_from_start))


def build_course(
    samples: Sequence[RawSample],
    markers: Sequence[RawMarker] = (),
    *,
    max_projection_distance_m: float | None = None,
    report: TransformReport | None = None,
) -> Course:
    if not samples:
        raise ParseError("Aucun point de trace : parcours impossible a construire.")

    track = build_track(samples)
    gain, loss = compute_elevation_gain_loss(s.elevation for s in track)
    checkpoints = project_markers(track, markers, max_projection_distance_m=max_projection_distance_m)

    if report is not None:
        zero_length = sum(
            1 for prev, cur in zip(track, track[1:]) if cur.distance_from_start <= prev.distance_from_start
        )
        report.add(
            "course:track",
            rows_in=len(samples),
            rows_out=len(track),
            reason="cumulative distance + gradient",
            details={"zero_length_segments": zero_length},
        )
        report.add(
            "course:checkpoints",
            rows_in=len(markers),
            rows_out=len(checkpoints),
            reason="nearest-sample projection",
        )

    course = Course(
        samples=track,
        checkpoints=checkpoints,
        total_distance=track[-1].distance_from_start,
        elevation_gain=gain,
        elevation_loss=loss,
    )
    logger.info(
        "course_built",
        extra={
            "samples": len(track),
            "checkpoints": len(checkpoints),
            "total_distance_m": round(course.total_distance, 1),
        },
    )
    return course
