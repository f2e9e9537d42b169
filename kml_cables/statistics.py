"""Statistics calculation for cable feature collections."""

from typing import Dict

from .constants import SOIL_TYPES
from .types import CableFeatureCollection, CollectionStatistics

__all__ = ['calculate_statistics']


def calculate_statistics(collection: CableFeatureCollection) -> CollectionStatistics:
    """
    Calculate aggregate figures for a collection.

    Args:
        collection: CableFeatureCollection

    Returns:
        Dictionary with feature counts per geometry type, segment count,
        total route length in meters (rounded) and per-soil-type counts
        and lengths
    """
    soil_counts: Dict[str, int] = {soil: 0 for soil in SOIL_TYPES}
    soil_distance: Dict[str, float] = {soil: 0.0 for soil in SOIL_TYPES}

    stats = {
        'totalFeatures': len(collection['features']),
        'totalLines': 0,
        'totalPoints': 0,
        'totalSegments': 0,
        'totalDistance': 0,
        'soilTypeCounts': soil_counts,
        'soilTypeDistance': soil_distance,
    }

    total_m = 0.0
    for feature in collection['features']:
        properties = feature['properties']
        geom_type = feature['geometry']['type']
        if geom_type == 'LineString':
            stats['totalLines'] += 1
        elif geom_type == 'Point':
            stats['totalPoints'] += 1

        length = properties.get('totalDistance') or 0.0
        stats['totalSegments'] += len(properties.get('segments') or [])
        total_m += length

        soil_type = properties.get('soilType')
        if soil_type in soil_counts:
            soil_counts[soil_type] += 1
            soil_distance[soil_type] += length

    stats['totalDistance'] = round(total_m)
    return stats
