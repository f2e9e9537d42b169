"""Helper functions for presenting conversion results.

Functions Overview:
-------------------

format_segment_distance(distance)
    Human-readable length with a unit chosen by magnitude.

    Example:
        >>> format_segment_distance(0.5)
        '50 cm'
        >>> format_segment_distance(156.93)
        '156.93 m'
        >>> format_segment_distance(2500)
        '2.50 km'

format_bearing(bearing)
    Bearing with its 8-point compass direction.

    Example:
        >>> format_bearing(135.2)
        '135.2° SE'

get_soil_type_color(soil_type)
    Display color of a soil type (black for unknown values).

default_output_path(input_path)
    Output path for a converted file: the input with a .json extension.
"""

from pathlib import Path

from .constants import SOIL_TYPE_COLORS, UNKNOWN_SOIL_COLOR

__all__ = [
    'format_segment_distance',
    'format_bearing',
    'get_soil_type_color',
    'default_output_path',
]

COMPASS_POINTS = ('N', 'NE', 'E', 'SE', 'S', 'SW', 'W', 'NW')


def format_segment_distance(distance: float) -> str:
    """
    Format a distance in meters for display.

    Args:
        distance: Distance in meters

    Returns:
        'NN cm' below 1 m, 'N.NN m' below 1 km, otherwise 'N.NN km'
    """
    if distance < 1:
        return f"{distance * 100:.0f} cm"
    if distance < 1000:
        return f"{distance:.2f} m"
    return f"{distance / 1000:.2f} km"


def format_bearing(bearing: float) -> str:
    """Format a bearing in degrees with its compass direction."""
    index = int(bearing / 45 + 0.5) % 8
    return f"{bearing:.1f}° {COMPASS_POINTS[index]}"


def get_soil_type_color(soil_type: str) -> str:
    """Hex display color for a soil type."""
    return SOIL_TYPE_COLORS.get(soil_type, UNKNOWN_SOIL_COLOR)


def default_output_path(input_path: str) -> str:
    """
    Output path derived from the input path by replacing its extension.

    Example:
        >>> default_output_path('data/route.kml')
        'data/route.json'
    """
    return str(Path(input_path).with_suffix('.json'))
