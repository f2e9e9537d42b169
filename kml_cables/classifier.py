"""Soil-type classification for cable routes.

Decision procedure, in strict priority order (first match wins):

1. Keywords in the Placemark name
2. Keywords in the description
3. Color proximity of the resolved line color
4. Default: Tanah Liat

Keyword rules are substring tests on the lower-cased text, checked in
this order: pasir/sand -> Pasir; batuan/batu/rock -> Batuan;
tanah liat/clay/liat -> Tanah Liat; the whole word "tanah" (when the text
does not also mention "batuan") -> Tanah Liat.

Color rules work on integer RGB channels:
- R > 200 and G > 180 and B < 100 -> Pasir (yellow/orange)
- R > 180 and G < 100 and B < 100 -> Tanah Liat (red)
- max pairwise channel difference < 50 and R < 150 -> Batuan (gray)
"""

import re
from typing import Optional

from .constants import (
    BATUAN_MAX_CHANNEL_SPREAD,
    BATUAN_MAX_RED,
    DEFAULT_SOIL_TYPE,
    PASIR_MIN_GREEN,
    PASIR_MAX_BLUE,
    PASIR_MIN_RED,
    SOIL_BATUAN,
    SOIL_KEYWORD_RULES,
    SOIL_PASIR,
    SOIL_TANAH_LIAT,
    SOIL_TYPE_DEPTH,
    TANAH_LIAT_MAX_BLUE,
    TANAH_LIAT_MAX_GREEN,
    TANAH_LIAT_MIN_RED,
    TANAH_WORD,
)
from .styles import parse_rgba
from .types import StyleRecord

__all__ = [
    'classify',
    'classify_text',
    'classify_color',
    'depth_for_soil_type',
]

TANAH_WORD_PATTERN = re.compile(r'\b' + TANAH_WORD + r'\b')


def classify_text(text: Optional[str]) -> Optional[str]:
    """
    Match soil keywords in free text.

    Args:
        text: Name or description

    Returns:
        Soil type, or None if no keyword matches
    """
    if not text:
        return None
    lowered = text.lower()

    for keywords, soil_type in SOIL_KEYWORD_RULES:
        if any(keyword in lowered for keyword in keywords):
            return soil_type

    if TANAH_WORD_PATTERN.search(lowered) and 'batuan' not in lowered:
        return SOIL_TANAH_LIAT

    return None


def classify_color(rgba: Optional[str]) -> Optional[str]:
    """
    Match a resolved 'rgba(r, g, b, a)' line color against the soil palette.

    Returns:
        Soil type, or None if the color is missing, unreadable or unmatched
    """
    channels = parse_rgba(rgba) if rgba else None
    if channels is None:
        return None
    r, g, b, _ = channels

    if r > PASIR_MIN_RED and g > PASIR_MIN_GREEN and b < PASIR_MAX_BLUE:
        return SOIL_PASIR
    if r > TANAH_LIAT_MIN_RED and g < TANAH_LIAT_MAX_GREEN and b < TANAH_LIAT_MAX_BLUE:
        return SOIL_TANAH_LIAT

    spread = max(abs(r - g), abs(g - b), abs(r - b))
    if spread < BATUAN_MAX_CHANNEL_SPREAD and r < BATUAN_MAX_RED:
        return SOIL_BATUAN

    return None


def classify(
    name: Optional[str],
    description: Optional[str] = None,
    style: Optional[StyleRecord] = None,
) -> str:
    """
    Determine the soil type of one cable route.

    Args:
        name: Placemark name
        description: Placemark description, if any
        style: Resolved style, if any

    Returns:
        One of 'Pasir', 'Tanah Liat', 'Batuan'

    Example:
        >>> classify('Pasir Jalur B', None, {'lineColor': 'rgba(117, 117, 117, 1.00)'})
        'Pasir'
    """
    soil_type = classify_text(name)
    if soil_type:
        return soil_type

    soil_type = classify_text(description)
    if soil_type:
        return soil_type

    if style and style.get('lineColor'):
        soil_type = classify_color(style['lineColor'])
        if soil_type:
            return soil_type

    return DEFAULT_SOIL_TYPE


def depth_for_soil_type(soil_type: str) -> float:
    """
    Installation depth in meters for a soil type.

    Raises:
        ValueError: If the soil type is not one of the three known values
    """
    try:
        return SOIL_TYPE_DEPTH[soil_type]
    except KeyError:
        raise ValueError(f"Unknown soil type: {soil_type!r}") from None
