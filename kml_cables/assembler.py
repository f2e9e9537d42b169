"""Assembly of GeoJSON cable features.

ID Policy:
    IDs are ``cable-NNN`` (zero-padded to 3 digits) and are handed out
    only to features that are actually assembled, so the IDs of one
    collection are contiguous starting at ``cable-001``.

Naming:
    ``name`` is kept exactly as extracted; the soil type is exposed only
    through ``properties.soilType``. A missing name becomes
    ``Cable Route N`` where N is the feature's own index.
"""

from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from .classifier import classify, depth_for_soil_type
from .constants import CABLE_ID_PREFIX, CABLE_ID_WIDTH, DEFAULT_NAME_TEMPLATE
from .geometry import calculate_segments, total_distance
from .kml_parsers import validate_coordinate
from .logger import logger
from .types import CableFeature, CableFeatureCollection, Geometry, SegmentInfo, StyleRecord

__all__ = [
    'format_cable_id',
    'default_name',
    'today_iso',
    'assemble_feature',
    'feature_collection',
    'assemble_from_geojson',
]


def format_cable_id(index: int) -> str:
    """
    Format a 1-based feature index as a cable id.

    Example:
        >>> format_cable_id(7)
        'cable-007'
    """
    return f"{CABLE_ID_PREFIX}{index:0{CABLE_ID_WIDTH}d}"


def default_name(index: int) -> str:
    """Placeholder name for a Placemark without one."""
    return DEFAULT_NAME_TEMPLATE.format(index=index)


def today_iso() -> str:
    """Current local date as YYYY-MM-DD."""
    return date.today().isoformat()


def assemble_feature(
    geometry: Geometry,
    soil_type: str,
    segments: List[SegmentInfo],
    total_distance_m: float,
    style: Optional[StyleRecord],
    metadata: Optional[Dict[str, str]],
    index: int,
    name: Optional[str] = None,
    install_date: Optional[str] = None,
) -> CableFeature:
    """
    Build one cable feature.

    Args:
        geometry: LineString or Point geometry
        soil_type: Classified soil type
        segments: Per-leg distances and bearings
        total_distance_m: Route length in meters
        style: Resolved style, omitted from the output when None
        metadata: Extracted metadata, omitted from the output when empty
        index: 1-based position of the feature in its collection
        name: Placemark name; a placeholder is used when missing
        install_date: Override for the conversion date (YYYY-MM-DD)

    Returns:
        GeoJSON Feature dict

    Raises:
        ValueError: If soil_type is not a known soil type
    """
    properties = {
        'id': format_cable_id(index),
        'soilType': soil_type,
        'depth': depth_for_soil_type(soil_type),
        'name': name or default_name(index),
        'installDate': install_date or today_iso(),
    }
    if style is not None:
        properties['style'] = style
    properties['segments'] = segments
    properties['totalDistance'] = total_distance_m
    if metadata:
        properties['metadata'] = metadata

    return {
        'type': 'Feature',
        'geometry': geometry,
        'properties': properties,
    }


def feature_collection(features: Iterable[CableFeature]) -> CableFeatureCollection:
    """Wrap features in a GeoJSON FeatureCollection."""
    return {
        'type': 'FeatureCollection',
        'features': list(features),
    }


def _coerce_geometry(geometry: Any) -> Optional[Geometry]:
    """Validate a host-model GeoJSON geometry, returning a clean copy or None."""
    if not isinstance(geometry, dict):
        return None
    geom_type = geometry.get('type')
    coordinates = geometry.get('coordinates')

    try:
        if geom_type == 'LineString' and isinstance(coordinates, list):
            cleaned = [
                [float(c[0]), float(c[1])] for c in coordinates
                if isinstance(c, (list, tuple)) and len(c) >= 2
            ]
            cleaned = [c for c in cleaned if validate_coordinate(c[0], c[1])]
            if len(cleaned) >= 2:
                return {'type': 'LineString', 'coordinates': cleaned}
        elif geom_type == 'Point' and isinstance(coordinates, (list, tuple)) and len(coordinates) >= 2:
            lon, lat = float(coordinates[0]), float(coordinates[1])
            if validate_coordinate(lon, lat):
                return {'type': 'Point', 'coordinates': [lon, lat]}
    except (TypeError, ValueError):
        return None
    return None


def _host_style(style: Any) -> Optional[StyleRecord]:
    """Incoming style dict, or None unless its lineColor (when given) is a string."""
    if not isinstance(style, dict):
        return None
    if 'lineColor' in style and not isinstance(style['lineColor'], str):
        logger.debug(f"Ignoring style with non-string lineColor {style['lineColor']!r}")
        return None
    return style


def assemble_from_geojson(
    features: Iterable[Dict[str, Any]],
    install_date: Optional[str] = None,
) -> CableFeatureCollection:
    """
    Turn already-parsed GeoJSON features into cable features.

    Used for feature models that were not read from raw KML, e.g. a
    GeoJSON upload. Name, ``description`` and ``style.lineColor`` from the
    incoming properties feed the classifier. IDs are re-assigned.

    Args:
        features: GeoJSON Feature dicts with LineString or Point geometry
        install_date: Override for the conversion date (YYYY-MM-DD)

    Returns:
        CableFeatureCollection
    """
    assembled = []
    for position, feature in enumerate(features, start=1):
        geometry = _coerce_geometry(feature.get('geometry') if isinstance(feature, dict) else None)
        if geometry is None:
            logger.debug(f"Skipping feature {position}: no usable LineString/Point geometry")
            continue

        properties = feature.get('properties')
        if not isinstance(properties, dict):
            properties = {}
        name = properties.get('name') if isinstance(properties.get('name'), str) else None
        description = properties.get('description')
        if not isinstance(description, str):
            description = None
        style = _host_style(properties.get('style'))

        soil_type = classify(name, description, style)
        if geometry['type'] == 'LineString':
            segments = calculate_segments(geometry['coordinates'])
            length = total_distance(geometry['coordinates'])
        else:
            segments, length = [], 0.0

        metadata = {'description': description} if description else None
        assembled.append(assemble_feature(
            geometry, soil_type, segments, length, style, metadata,
            index=len(assembled) + 1, name=name, install_date=install_date,
        ))

    return feature_collection(assembled)
