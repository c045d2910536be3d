from __future__ import annotations

from typing import IO

import gpxpy
import gpxpy.gpx

from core.errors import ParseError
from core.models import RawMarker, RawSample


def _decode_gpx_bytes(content: bytes) -> str:
    try:
        return content.decode("utf-8")
    except UnicodeDecodeError:
        try:
            return content.decode("latin-1")
        except UnicodeDecodeError:
            return content.decode("utf-8", errors="replace")


def parse_gpx_text(text: str) -> gpxpy.gpx.GPX:
    if not text or not text.strip():
        raise ParseError("Fichier GPX vide.")
    try:
        return gpxpy.parse(text)
    except gpxpy.gpx.GPXException as e:
        raise ParseError(f"GPX invalide: {e}") from e


def load_gpx(file: IO[bytes]) -> gpxpy.gpx.GPX:
    """
    Lit un fichier GPX (UploadFile ou file-like) et retourne l'objet GPX.
    """
    content = file.read()
    if isinstance(content, (bytes, bytearray)):
        text = _decode_gpx_bytes(bytes(content))
    else:
        text = str(content)
    return parse_gpx_text(text)


def _elevation_or_zero(value: float | None) -> float:
    return float(value) if value is not None else 0.0


def extract_samples(gpx: gpxpy.gpx.GPX) -> list[RawSample]:
    """Points de trace (trkpt) de toutes les traces/segments, dans l'ordre du fichier."""

    samples: list[RawSample] = []
    for track in gpx.tracks:
        for segment in track.segments:
            for point in segment.points:
                samples.append(
                    RawSample(
                        latitude=float(point.latitude),
                        longitude=float(point.longitude),
                        elevation=_elevation_or_zero(point.elevation),
                    )
                )
    return samples


def extract_markers(gpx: gpxpy.gpx.GPX) -> list[RawMarker]:
    """Waypoints nommes (ravitaillements, depart, arrivee)."""

    markers: list[RawMarker] = []
    for i, wpt in enumerate(gpx.waypoints):
        name = wpt.name or f"Point {i + 1}"
        markers.append(
            RawMarker(
                latitude=float(wpt.latitude),
                longitude=float(wpt.longitude),
                elevation=_elevation_or_zero(wpt.elevation),
                name=name,
            )
        )
    return markers
