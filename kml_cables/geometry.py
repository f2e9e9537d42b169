"""Geodesic calculations on [lon, lat] coordinates.

All functions use a spherical Earth of mean radius 6,371 km. Non-finite
inputs never raise: distance and bearing fall back to 0 and a debug
diagnostic is logged.
"""

import math
from math import radians, degrees, sin, cos, sqrt, atan2
from typing import List, Sequence

from .constants import EARTH_RADIUS_M
from .logger import logger
from .types import SegmentInfo

__all__ = [
    "EARTH_RADIUS_M",
    "haversine_distance",
    "initial_bearing",
    "total_distance",
    "calculate_segments",
    "interpolate_point",
]


def _is_valid(coord: Sequence[float]) -> bool:
    """True if coord is a [lon, lat] pair of finite numbers."""
    try:
        return len(coord) >= 2 and math.isfinite(coord[0]) and math.isfinite(coord[1])
    except TypeError:
        return False


def haversine_distance(a: Sequence[float], b: Sequence[float]) -> float:
    """Great circle distance in meters between two [lon, lat] points."""
    if not (_is_valid(a) and _is_valid(b)):
        logger.debug(f"Non-finite coordinate in distance calculation: {a!r} -> {b!r}")
        return 0.0

    lon1, lat1, lon2, lat2 = map(radians, [a[0], a[1], b[0], b[1]])
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    h = min(1.0, sin(dlat/2)**2 + cos(lat1) * cos(lat2) * sin(dlon/2)**2)
    c = 2 * atan2(sqrt(h), sqrt(1-h))
    return EARTH_RADIUS_M * c


def initial_bearing(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Initial great circle bearing from a to b.

    Args:
        a: Start point [lon, lat]
        b: End point [lon, lat]

    Returns:
        Bearing in degrees clockwise from north, in [0, 360)
    """
    if not (_is_valid(a) and _is_valid(b)):
        logger.debug(f"Non-finite coordinate in bearing calculation: {a!r} -> {b!r}")
        return 0.0

    lat1 = radians(a[1])
    lat2 = radians(b[1])
    dlon = radians(b[0] - a[0])

    y = sin(dlon) * cos(lat2)
    x = cos(lat1) * sin(lat2) - sin(lat1) * cos(lat2) * cos(dlon)
    bearing = (degrees(atan2(y, x)) + 360) % 360

    # (-tiny + 360) % 360 can round up to exactly 360.0
    return 0.0 if bearing >= 360 else bearing


def total_distance(coordinates: Sequence[Sequence[float]]) -> float:
    """Sum of haversine distances over consecutive coordinates, in meters."""
    if len(coordinates) < 2:
        return 0.0
    return sum(
        haversine_distance(coordinates[i], coordinates[i + 1])
        for i in range(len(coordinates) - 1)
    )


def calculate_segments(coordinates: Sequence[Sequence[float]]) -> List[SegmentInfo]:
    """
    Describe each leg of a LineString.

    Args:
        coordinates: List of [lon, lat] coordinates

    Returns:
        One SegmentInfo per adjacent pair, in order
    """
    segments: List[SegmentInfo] = []
    for i in range(len(coordinates) - 1):
        start, end = coordinates[i], coordinates[i + 1]
        segments.append({
            "startPoint": list(start),
            "endPoint": list(end),
            "distance": haversine_distance(start, end),
            "bearing": initial_bearing(start, end),
        })
    return segments


def interpolate_point(a: Sequence[float], b: Sequence[float], fraction: float) -> List[float]:
    """
    Point at ``fraction`` of the way from a to b.

    Linear in lon/lat, which is accurate enough for the short legs of a
    cable route.
    """
    return [
        a[0] + (b[0] - a[0]) * fraction,
        a[1] + (b[1] - a[1]) * fraction,
    ]
