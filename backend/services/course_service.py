from __future__ import annotations

"""Chargement d'un parcours GPX + statistiques legeres.

Ce module est sans UI et reutilise par l'API.
"""

import io
import logging
from pathlib import Path

from core import gpx_loader
from core.course_builder import build_course
from core.errors import ParseError
from core.models import Course
from services.models import CourseStats, LoadedCourse


logger = logging.getLogger("coursepace.services.course_service")

ALLOWED_EXTENSIONS = {".gpx"}


def load_course_from_bytes(
    data: bytes,
    name: str,
    *,
    max_projection_distance_m: float | None = None,
) -> LoadedCourse:
    extension = Path(name).suffix.lower()
    if extension and extension not in ALLOWED_EXTENSIONS:
        raise ParseError(f"Extension non supportee: {extension}")

    gpx = gpx_loader.load_gpx(io.BytesIO(data))
    samples = gpx_loader.extract_samples(gpx)
    if not samples:
        raise ParseError("Aucun point de trace (trkpt) dans le fichier GPX.")
    markers = gpx_loader.extract_markers(gpx)

    course = build_course(samples, markers, max_projection_distance_m=max_projection_distance_m)
    logger.info(
        "course_loaded",
        extra={"course_name": name, "samples": len(course.samples), "checkpoints": len(course.checkpoints)},
    )
    return LoadedCourse(name=name, course=course, track_count=len(gpx.tracks))


def compute_course_stats(course: Course) -> CourseStats:
    return CourseStats(
        distance_km=course.total_distance / 1000.0,
        elevation_gain_m=course.elevation_gain,
        elevation_loss_m=course.elevation_loss,
        sample_count=len(course.samples),
        checkpoint_count=len(course.checkpoints),
    )
