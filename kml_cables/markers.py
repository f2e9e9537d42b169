"""Distance markers along cable routes.

Markers are Point features placed every ``interval`` meters along a
LineString cable, measured with the haversine distance of each leg. The
start point is always marker 0 and the end point always closes the
sequence, so a route shorter than the interval gets exactly two markers.
"""

from typing import List

from .constants import DEFAULT_MARKER_INTERVAL_M
from .exceptions import ConfigurationError
from .geometry import haversine_distance, interpolate_point
from .types import CableFeature, CableFeatureCollection, MarkerProperties

__all__ = ['generate_markers', 'generate_all_markers']

# Distances closer than this are treated as the same marker position
POSITION_EPSILON_M = 1e-6


def _marker(feature: CableFeature, coordinates: List[float], distance: float) -> dict:
    properties = feature['properties']
    marker_properties: MarkerProperties = {
        'cableId': properties['id'],
        'cableName': properties.get('name') or properties['id'],
        'soilType': properties['soilType'],
        'depth': properties['depth'],
        'distanceFromStart': distance,
        'coordinates': list(coordinates),
    }
    return {
        'type': 'Feature',
        'geometry': {'type': 'Point', 'coordinates': list(coordinates)},
        'properties': marker_properties,
    }


def generate_markers(feature: CableFeature, interval: float = DEFAULT_MARKER_INTERVAL_M) -> dict:
    """
    Place distance markers along one cable.

    Args:
        feature: Cable feature; only LineString geometries produce markers
        interval: Marker spacing in meters

    Returns:
        GeoJSON FeatureCollection of marker Points, ordered by distance

    Raises:
        ConfigurationError: If interval is not positive
    """
    if not interval or interval <= 0:
        raise ConfigurationError(f"Marker interval must be positive, got {interval!r}", config_key='interval')

    geometry = feature.get('geometry') or {}
    coordinates = geometry.get('coordinates') or []
    if geometry.get('type') != 'LineString' or len(coordinates) < 2:
        return {'type': 'FeatureCollection', 'features': []}

    markers = [_marker(feature, coordinates[0], 0.0)]
    next_target = interval
    travelled = 0.0

    for i in range(len(coordinates) - 1):
        start, end = coordinates[i], coordinates[i + 1]
        leg = haversine_distance(start, end)
        if leg <= 0:
            continue

        while next_target < travelled + leg:
            fraction = (next_target - travelled) / leg
            markers.append(_marker(feature, interpolate_point(start, end, fraction), next_target))
            next_target += interval

        travelled += leg

    last_distance = markers[-1]['properties']['distanceFromStart']
    if travelled - last_distance > POSITION_EPSILON_M:
        markers.append(_marker(feature, coordinates[-1], travelled))

    return {'type': 'FeatureCollection', 'features': markers}


def generate_all_markers(collection: CableFeatureCollection, interval: float = DEFAULT_MARKER_INTERVAL_M) -> dict:
    """Markers for every cable of a collection, concatenated in cable order."""
    markers = []
    for feature in collection['features']:
        markers.extend(generate_markers(feature, interval)['features'])
    return {'type': 'FeatureCollection', 'features': markers}
