"""Input and output validation utilities."""

import math
import os
from pathlib import Path
from typing import Any, Optional, Tuple

from .constants import LAT_MAX, LAT_MIN, LON_MAX, LON_MIN, MIN_LINESTRING_POINTS, SOIL_TYPES

__all__ = [
    "validate_coordinates",
    "validate_kml_file",
    "validate_feature",
    "validate_feature_collection",
]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_coordinates(
    lat: float, lon: float, context: str = ""
) -> Tuple[bool, Optional[str]]:
    """
    Check one WGS84 position.

    Both values must be real (non-bool) finite numbers within their
    ranges. This is the single range check shared by the KML coordinate
    parser, host GeoJSON ingestion and feature validation.

    Args:
        lat: Latitude in degrees
        lon: Longitude in degrees
        context: Suffix appended to the error, e.g. " in route.kml"

    Returns:
        tuple: (is_valid, error_message)
    """
    for axis, value, low, high in (
        ("Latitude", lat, LAT_MIN, LAT_MAX),
        ("Longitude", lon, LON_MIN, LON_MAX),
    ):
        if not _is_number(value) or not math.isfinite(value):
            return False, f"{axis} {value!r} is not a finite number{context}"
        if not low <= value <= high:
            return False, f"{axis} {value} outside [{low:g}, {high:g}]{context}"

    return True, None


def validate_kml_file(file_path: str) -> Tuple[bool, Optional[str]]:
    """
    Validate KML file exists and is readable.

    Args:
        file_path: Path to KML file

    Returns:
        tuple: (is_valid, error_message)
    """
    path = Path(file_path)

    if not path.exists():
        return False, f"File not found: {file_path}"

    if not path.is_file():
        return False, f"Not a file: {file_path}"

    if not os.access(path, os.R_OK):
        return False, f"File not readable: {file_path}"

    if not str(path).lower().endswith(".kml"):
        return False, f"File does not have .kml extension: {file_path}"

    if path.stat().st_size == 0:
        return False, f"File is empty: {file_path}"

    return True, None


def _is_position(value: Any) -> bool:
    return (
        isinstance(value, (list, tuple))
        and len(value) >= 2
        and validate_coordinates(value[1], value[0])[0]
    )


def validate_feature(feature: Any, position: int = 0) -> Tuple[bool, Optional[str]]:
    """
    Validate one cable feature.

    Args:
        feature: GeoJSON Feature dict
        position: 1-based position, used in error messages

    Returns:
        tuple: (is_valid, error_message)
    """
    where = f" (feature {position})" if position else ""

    if not isinstance(feature, dict) or feature.get("type") != "Feature":
        return False, f"Feature type is not 'Feature'{where}"

    geometry = feature.get("geometry")
    if not isinstance(geometry, dict):
        return False, f"Feature has no geometry{where}"

    coordinates = geometry.get("coordinates")
    if geometry.get("type") == "LineString":
        if not isinstance(coordinates, list) or len(coordinates) < MIN_LINESTRING_POINTS:
            return False, f"LineString must have at least 2 coordinates{where}"
        if not all(_is_position(c) for c in coordinates):
            return False, f"LineString has an invalid coordinate{where}"
    elif geometry.get("type") == "Point":
        if not _is_position(coordinates):
            return False, f"Point must have exactly one coordinate pair{where}"
    else:
        return False, f"Geometry must be LineString or Point{where}"

    properties = feature.get("properties")
    if not isinstance(properties, dict):
        return False, f"Feature is missing properties{where}"

    feature_id = properties.get("id")
    if not isinstance(feature_id, str) or not feature_id:
        return False, f"Feature id must be a non-empty string{where}"

    if properties.get("soilType") not in SOIL_TYPES:
        return False, f"Invalid soil type {properties.get('soilType')!r}{where}"

    depth = properties.get("depth")
    if not _is_number(depth) or not math.isfinite(depth) or depth < 0:
        return False, f"Depth must be a number >= 0{where}"

    return True, None


def validate_feature_collection(data: Any) -> Tuple[bool, Optional[str]]:
    """
    Validate a cable FeatureCollection.

    Checks the collection type, the features list and every feature
    (geometry, id, soilType, depth).

    Args:
        data: Candidate collection, typically freshly loaded JSON

    Returns:
        tuple: (is_valid, error_message)
    """
    if not isinstance(data, dict):
        return False, "Data is not an object"

    if data.get("type") != "FeatureCollection":
        return False, "Data is not a FeatureCollection"

    features = data.get("features")
    if not isinstance(features, list):
        return False, "Features is not an array"

    for position, feature in enumerate(features, start=1):
        is_valid, error = validate_feature(feature, position)
        if not is_valid:
            return False, error

    return True, None
