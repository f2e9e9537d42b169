"""Placemark-level parsers: coordinates, geometry and metadata.

This module breaks the Placemark handling into focused parsers:

1. Coordinates: whitespace-separated ``lon,lat[,alt]`` tuples
2. Geometry: LineString (2+ valid coordinates) or Point (opt-in)
3. Metadata: description, Snippet, TimeStamp/TimeSpan, visibility, open
   and ExtendedData values as a flat key -> string map

Each parser is designed to:
- Return consistent data structures
- Drop malformed data instead of failing the whole document
- Log parsing issues at debug level
"""

import re
from typing import Any, Dict, List, Optional

from .constants import MIN_LINESTRING_POINTS
from .document import find_first, first_text, get_attribute, get_elements_by_tag_name, text_content
from .exceptions import InvalidCoordinateError
from .logger import logger
from .types import Geometry
from .validation import validate_coordinates

__all__ = [
    "validate_coordinate",
    "parse_coordinate_string",
    "parse_coordinates",
    "extract_geometry",
    "extract_placemark_name",
    "extract_placemark_metadata",
]


# Plain ASCII decimal, optionally signed, with an optional exponent
NUMBER_PATTERN = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def validate_coordinate(lon: float, lat: float) -> bool:
    """
    Check that a coordinate is finite and inside the WGS84 ranges.

    Args:
        lon: Longitude
        lat: Latitude

    Returns:
        True if valid, False otherwise
    """
    return validate_coordinates(lat, lon)[0]


def parse_coordinate_string(coord_str: str, strict: bool = False) -> Optional[List[float]]:
    """
    Parse one KML coordinate tuple (lon,lat or lon,lat,alt).

    Altitude is accepted but not kept.

    Args:
        coord_str: Coordinate string like "106.827,-6.175,0"
        strict: Raise instead of returning None

    Returns:
        [lon, lat] or None if the token is invalid

    Raises:
        InvalidCoordinateError: If strict and the token is invalid
    """
    parts = coord_str.strip().split(",")
    if len(parts) < 2:
        if strict:
            raise InvalidCoordinateError(f"Coordinate '{coord_str}' has fewer than 2 components")
        return None

    lon_text, lat_text = parts[0].strip(), parts[1].strip()
    if not (NUMBER_PATTERN.fullmatch(lon_text) and NUMBER_PATTERN.fullmatch(lat_text)):
        if strict:
            raise InvalidCoordinateError(f"Coordinate '{coord_str}' is not numeric")
        return None

    lon, lat = float(lon_text), float(lat_text)

    if not validate_coordinate(lon, lat):
        if strict:
            raise InvalidCoordinateError("Coordinate out of range", latitude=lat, longitude=lon)
        return None

    return [lon, lat]


def parse_coordinates(coord_text: Optional[str]) -> List[List[float]]:
    """
    Parse a KML <coordinates> text into [lon, lat] pairs.

    Invalid tokens are dropped, never substituted.

    Args:
        coord_text: Raw coordinates text

    Returns:
        List of [lon, lat] pairs in document order
    """
    if not coord_text:
        return []

    coordinates = []
    for token in coord_text.split():
        parsed = parse_coordinate_string(token)
        if parsed is None:
            logger.debug(f"Dropping invalid coordinate '{token}'")
            continue
        coordinates.append(parsed)
    return coordinates


def extract_geometry(placemark: Any, include_points: bool = False) -> Optional[Geometry]:
    """
    Extract a LineString (or, optionally, Point) geometry from a Placemark.

    Args:
        placemark: lxml Placemark element
        include_points: Also accept a Point with exactly one valid coordinate

    Returns:
        GeoJSON geometry dict, or None when the Placemark should be skipped
    """
    line_string = find_first(placemark, "LineString")
    if line_string is not None:
        coordinates = parse_coordinates(first_text(line_string, "coordinates"))
        if len(coordinates) < MIN_LINESTRING_POINTS:
            logger.debug(
                f"Skipping LineString with {len(coordinates)} valid coordinate(s)"
            )
            return None
        return {"type": "LineString", "coordinates": coordinates}

    if include_points:
        point = find_first(placemark, "Point")
        if point is not None:
            coordinates = parse_coordinates(first_text(point, "coordinates"))
            if len(coordinates) != 1:
                logger.debug(f"Skipping Point with {len(coordinates)} valid coordinate(s)")
                return None
            return {"type": "Point", "coordinates": coordinates[0]}

    return None


def extract_placemark_name(placemark: Any) -> Optional[str]:
    """Name of a Placemark, None if absent or blank."""
    return first_text(placemark, "name")


def _flag(text: str) -> str:
    """KML boolean ('1'/'0'/'true') as 'true'/'false'."""
    return "true" if text.strip().lower() in ("1", "true") else "false"


def extract_placemark_metadata(placemark: Any) -> Dict[str, str]:
    """
    Extract free-form metadata from a Placemark element.

    Args:
        placemark: lxml Placemark element

    Returns:
        Dict of metadata key -> string value (empty if nothing found)
    """
    metadata: Dict[str, str] = {}

    description = first_text(placemark, "description")
    if description:
        metadata["description"] = description

    snippet = first_text(placemark, "Snippet")
    if snippet:
        metadata["snippet"] = snippet

    time_stamp = find_first(placemark, "TimeStamp")
    if time_stamp is not None:
        when = first_text(time_stamp, "when")
        if when:
            metadata["timestamp"] = when

    time_span = find_first(placemark, "TimeSpan")
    if time_span is not None:
        begin = first_text(time_span, "begin")
        end = first_text(time_span, "end")
        if begin:
            metadata["timeSpanBegin"] = begin
        if end:
            metadata["timeSpanEnd"] = end

    visibility = first_text(placemark, "visibility")
    if visibility is not None:
        metadata["visibility"] = _flag(visibility)

    is_open = first_text(placemark, "open")
    if is_open is not None:
        metadata["open"] = _flag(is_open)

    extended_data = find_first(placemark, "ExtendedData")
    if extended_data is not None:
        for data in get_elements_by_tag_name(extended_data, "Data"):
            name = get_attribute(data, "name")
            value = first_text(data, "value")
            if name and value:
                metadata[name] = value
        for simple_data in get_elements_by_tag_name(extended_data, "SimpleData"):
            name = get_attribute(simple_data, "name")
            value = text_content(simple_data)
            if name and value:
                metadata[name] = value

    return metadata
