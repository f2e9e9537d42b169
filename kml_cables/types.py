"""Type definitions for kml-cables.

This module provides TypedDict definitions for the GeoJSON structures
produced by the conversion pipeline. Keys use the camelCase names of the
output schema so that the dictionaries serialize to JSON unchanged.

Example:
    >>> from kml_cables.types import SegmentInfo
    >>> segment: SegmentInfo = {
    ...     "startPoint": [106.827, -6.175],
    ...     "endPoint": [106.828, -6.176],
    ...     "distance": 156.9,
    ...     "bearing": 135.2,
    ... }
"""

from typing import TypedDict, List, Dict, Union
from typing_extensions import NotRequired


class StyleRecord(TypedDict, total=False):
    """Resolved visual style of one KML style identifier.

    Every field is optional; a missing key means "unspecified".
    """

    lineColor: str  # rgba(r, g, b, a)
    lineOpacity: float
    lineWidth: float
    polygonColor: str
    polygonOpacity: float
    iconHref: str
    iconScale: float
    iconColor: str
    labelColor: str
    labelScale: float


class SegmentInfo(TypedDict):
    """One leg between two consecutive LineString coordinates."""

    startPoint: List[float]  # [lon, lat]
    endPoint: List[float]  # [lon, lat]
    distance: float  # meters
    bearing: float  # degrees in [0, 360)


class Geometry(TypedDict):
    """GeoJSON LineString or Point geometry."""

    type: str
    coordinates: Union[List[List[float]], List[float]]


class CableProperties(TypedDict):
    """Per-feature metadata attached to each cable feature."""

    id: str
    soilType: str
    depth: float
    name: str
    installDate: str
    style: NotRequired[StyleRecord]
    segments: NotRequired[List[SegmentInfo]]
    totalDistance: NotRequired[float]
    metadata: NotRequired[Dict[str, str]]


class CableFeature(TypedDict):
    """GeoJSON Feature carrying CableProperties."""

    type: str
    geometry: Geometry
    properties: CableProperties


class CableFeatureCollection(TypedDict):
    """GeoJSON FeatureCollection of cable features in document order."""

    type: str
    features: List[CableFeature]


class MarkerProperties(TypedDict):
    """Properties of a distance marker placed along a cable."""

    cableId: str
    cableName: str
    soilType: str
    depth: float
    distanceFromStart: float
    coordinates: List[float]


class CollectionStatistics(TypedDict):
    """Aggregate figures over one cable feature collection."""

    totalFeatures: int
    totalLines: int
    totalPoints: int
    totalSegments: int
    totalDistance: int  # meters, rounded
    soilTypeCounts: Dict[str, int]
    soilTypeDistance: Dict[str, float]


__all__ = [
    "StyleRecord",
    "SegmentInfo",
    "Geometry",
    "CableProperties",
    "CableFeature",
    "CableFeatureCollection",
    "MarkerProperties",
    "CollectionStatistics",
]
