"""HTML preview map of converted cable routes.

The preview is a standalone folium map with one toggle-able layer per soil
type. Cables are drawn in their soil display colors and carry a tooltip
with name, soil type, depth and route length.
"""

from html import escape
from typing import List, Tuple

import folium

from .constants import PREVIEW_LINE_OPACITY, PREVIEW_LINE_WEIGHT, SOIL_TYPES
from .exceptions import DataExportError
from .helpers import format_segment_distance, get_soil_type_color
from .logger import logger
from .types import CableFeature, CableFeatureCollection

__all__ = ['collection_bounds', 'build_preview_map', 'render_preview_map']


def _positions(feature: CableFeature) -> List[List[float]]:
    geometry = feature['geometry']
    if geometry['type'] == 'Point':
        return [geometry['coordinates']]
    return geometry['coordinates']


def collection_bounds(collection: CableFeatureCollection) -> Tuple[List[float], List[float]]:
    """
    Bounding box of a collection in folium's [lat, lon] order.

    Returns:
        Tuple of ([min_lat, min_lon], [max_lat, max_lon])

    Raises:
        ValueError: If the collection has no coordinates
    """
    lons, lats = [], []
    for feature in collection['features']:
        for lon, lat in (pos[:2] for pos in _positions(feature)):
            lons.append(lon)
            lats.append(lat)
    if not lats:
        raise ValueError("Collection has no coordinates")
    return [min(lats), min(lons)], [max(lats), max(lons)]


def _tooltip_html(feature: CableFeature) -> str:
    properties = feature['properties']
    return (
        f"<b>{escape(properties['name'])}</b><br>"
        f"{properties['soilType']} &middot; depth {properties['depth']} m<br>"
        f"{format_segment_distance(properties.get('totalDistance') or 0.0)}"
    )


def build_preview_map(collection: CableFeatureCollection) -> folium.Map:
    """
    Build the folium map for a collection.

    Raises:
        DataExportError: If the collection is empty
    """
    if not collection['features']:
        raise DataExportError("Nothing to preview: collection has no features")

    south_west, north_east = collection_bounds(collection)
    center = [(south_west[0] + north_east[0]) / 2, (south_west[1] + north_east[1]) / 2]
    m = folium.Map(location=center, zoom_start=15, tiles='OpenStreetMap')

    layers = {soil: folium.FeatureGroup(name=soil) for soil in SOIL_TYPES}
    for feature in collection['features']:
        properties = feature['properties']
        color = get_soil_type_color(properties['soilType'])
        positions = [[lat, lon] for lon, lat in (pos[:2] for pos in _positions(feature))]
        layer = layers.get(properties['soilType'])
        if layer is None:
            continue
        tooltip = folium.Tooltip(_tooltip_html(feature))

        if feature['geometry']['type'] == 'LineString':
            folium.PolyLine(
                locations=positions,
                color=color,
                weight=PREVIEW_LINE_WEIGHT,
                opacity=PREVIEW_LINE_OPACITY,
                tooltip=tooltip,
            ).add_to(layer)
        else:
            folium.CircleMarker(
                location=positions[0],
                radius=5,
                color=color,
                fill=True,
                fill_opacity=PREVIEW_LINE_OPACITY,
                tooltip=tooltip,
            ).add_to(layer)

    for layer in layers.values():
        layer.add_to(m)
    folium.LayerControl(collapsed=False).add_to(m)
    m.fit_bounds([south_west, north_east])
    return m


def render_preview_map(collection: CableFeatureCollection, output_file: str) -> str:
    """
    Write an HTML preview map of a collection.

    Args:
        collection: CableFeatureCollection
        output_file: Destination HTML path

    Returns:
        The output path

    Raises:
        DataExportError: If the collection is empty or the file cannot be written
    """
    m = build_preview_map(collection)
    try:
        m.save(output_file)
    except OSError as e:
        raise DataExportError(f"Failed to write preview map: {e}", output_path=output_file) from e

    logger.info(f"✓ Preview map saved: {output_file}")
    return output_file
