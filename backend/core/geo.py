from __future__ import annotations

"""Distances orthodromiques (terre spherique)."""

import numpy as np
from gpxpy import geo as gpx_geo


def distance_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Distance de surface (m) entre deux points en degres. 0 pour deux points identiques."""

    if lat1 == lat2 and lon1 == lon2:
        return 0.0
    return float(gpx_geo.haversine_distance(lat1, lon1, lat2, lon2))


def distances_to_point_m(lats: np.ndarray, lons: np.ndarray, lat: float, lon: float) -> np.ndarray:
    """Version vectorisee de distance_m : distances de chaque (lats[i], lons[i]) a (lat, lon)."""

    lat1 = np.radians(np.asarray(lats, dtype=float))
    lon1 = np.radians(np.asarray(lons, dtype=float))
    lat2 = np.radians(float(lat))
    lon2 = np.radians(float(lon))

    d_lat = lat2 - lat1
    d_lon = lon2 - lon1
    a = np.sin(d_lat / 2.0) ** 2 + np.cos(lat1) * np.cos(lat2) * np.sin(d_lon / 2.0) ** 2
    a = np.clip(a, 0.0, 1.0)
    return gpx_geo.EARTH_RADIUS * 2.0 * np.arctan2(np.sqrt(a), np.sqrt(1.0 - a))
