"""KML style resolution.

Builds the mapping from style identifiers to resolved StyleRecords for one
conversion pass. ``Style`` (and ``gx:CascadingStyle``) elements are read
first; ``StyleMap`` aliases are then bound to the record of the ``Style``
they reference.

Color Format:
    KML ``<color>`` values are 8 hex digits in ABGR byte order
    (``aabbggrr``). They are converted to ``rgba(r, g, b, a)`` strings
    with the alpha channel normalized to [0, 1] and printed with two
    decimals.

StyleMap Resolution:
    The pair keyed ``normal`` wins. Without one, the first pair in
    document order whose ``styleUrl`` resolves is used. Aliases resolve
    against ``Style`` records only; a StyleMap pointing at another
    StyleMap is left unresolved.
"""

import math
import re
from typing import Any, Dict, Optional, Tuple

from .document import (
    KMLDocument,
    find_child,
    find_first,
    first_text,
    get_attribute,
    get_elements_by_tag_name,
)
from .logger import logger
from .types import StyleRecord

__all__ = [
    'ABGR_PATTERN',
    'abgr_to_rgba',
    'parse_rgba',
    'alpha_from_abgr',
    'parse_float',
    'extract_style',
    'resolve_styles',
    'strip_style_url',
    'lookup_style',
]

ABGR_PATTERN = re.compile(r'^[0-9a-fA-F]{8}$')
RGBA_PATTERN = re.compile(
    r'^rgba\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*([0-9]*\.?[0-9]+)\s*\)$'
)

# Element names registered as concrete styles
STYLE_TAGS = ('Style', 'CascadingStyle')


def abgr_to_rgba(abgr: str) -> Optional[str]:
    """
    Convert a KML ABGR color to an RGBA string.

    Args:
        abgr: 8 hex digits, case-insensitive, e.g. 'ff2dc0fb'

    Returns:
        'rgba(r, g, b, a)' string, or None if the input is not a valid color

    Example:
        >>> abgr_to_rgba('ff2dc0fb')
        'rgba(251, 192, 45, 1.00)'
    """
    if abgr is None:
        return None
    abgr = abgr.strip().lstrip('#')
    if not ABGR_PATTERN.match(abgr):
        return None

    a = int(abgr[0:2], 16)
    b = int(abgr[2:4], 16)
    g = int(abgr[4:6], 16)
    r = int(abgr[6:8], 16)

    return f"rgba({r}, {g}, {b}, {a / 255:.2f})"


def alpha_from_abgr(abgr: str) -> Optional[float]:
    """Alpha channel of an ABGR color as a fraction in [0, 1]."""
    if abgr is None:
        return None
    abgr = abgr.strip().lstrip('#')
    if not ABGR_PATTERN.match(abgr):
        return None
    return int(abgr[0:2], 16) / 255


def parse_rgba(rgba: str) -> Optional[Tuple[int, int, int, float]]:
    """
    Read the channels back from an 'rgba(r, g, b, a)' string.

    Returns:
        Tuple of (r, g, b, a) or None if the string is not an rgba color
    """
    if not isinstance(rgba, str) or not rgba:
        return None
    match = RGBA_PATTERN.match(rgba.strip())
    if not match:
        return None
    r, g, b = (int(match.group(i)) for i in (1, 2, 3))
    if max(r, g, b) > 255:
        return None
    return r, g, b, float(match.group(4))


def parse_float(text: Optional[str]) -> Optional[float]:
    """Locale-independent float parsing; None for blank, invalid or non-finite text."""
    if text is None:
        return None
    try:
        value = float(text.strip())
    except ValueError:
        logger.debug(f"Ignoring non-numeric style value '{text}'")
        return None
    if not math.isfinite(value):
        return None
    return value


def _read_color(sub_style: Any, style_id: Optional[str]) -> Tuple[Optional[str], Optional[float]]:
    """Color and alpha of a LineStyle/PolyStyle/IconStyle/LabelStyle element."""
    raw = first_text(sub_style, 'color')
    if raw is None:
        return None, None
    rgba = abgr_to_rgba(raw)
    if rgba is None:
        logger.debug(f"Ignoring invalid color '{raw}' in style {style_id!r}")
        return None, None
    return rgba, alpha_from_abgr(raw)


def extract_style(style_element: Any) -> StyleRecord:
    """
    Extract a StyleRecord from a KML Style element.

    Only sub-elements and fields present in the KML produce keys; nothing
    is defaulted here.

    Args:
        style_element: lxml element for <Style> or <gx:CascadingStyle>

    Returns:
        StyleRecord dict
    """
    style: StyleRecord = {}
    style_id = get_attribute(style_element, 'id')

    line_style = find_first(style_element, 'LineStyle')
    if line_style is not None:
        color, alpha = _read_color(line_style, style_id)
        if color is not None:
            style['lineColor'] = color
            style['lineOpacity'] = alpha
        width = parse_float(first_text(line_style, 'width'))
        if width is not None:
            style['lineWidth'] = width

    poly_style = find_first(style_element, 'PolyStyle')
    if poly_style is not None:
        color, alpha = _read_color(poly_style, style_id)
        if color is not None:
            style['polygonColor'] = color
            style['polygonOpacity'] = alpha

    icon_style = find_first(style_element, 'IconStyle')
    if icon_style is not None:
        color, _ = _read_color(icon_style, style_id)
        if color is not None:
            style['iconColor'] = color
        scale = parse_float(first_text(icon_style, 'scale'))
        if scale is not None:
            style['iconScale'] = scale
        icon = find_first(icon_style, 'Icon')
        href = first_text(icon, 'href') if icon is not None else None
        if href:
            style['iconHref'] = href

    label_style = find_first(style_element, 'LabelStyle')
    if label_style is not None:
        color, _ = _read_color(label_style, style_id)
        if color is not None:
            style['labelColor'] = color
        scale = parse_float(first_text(label_style, 'scale'))
        if scale is not None:
            style['labelScale'] = scale

    return style


def strip_style_url(style_url: Optional[str]) -> Optional[str]:
    """Turn a styleUrl such as '#s1' or 'styles.kml#s1' into the id 's1'."""
    if not style_url:
        return None
    style_id = style_url.strip().rsplit('#', 1)[-1]
    return style_id or None


def _resolve_style_map(style_map: Any, styles: Dict[str, StyleRecord]) -> Optional[StyleRecord]:
    """Resolve one StyleMap against concrete styles."""
    first_resolved = None
    for pair in get_elements_by_tag_name(style_map, 'Pair'):
        key = first_text(pair, 'key')
        style_id = strip_style_url(first_text(pair, 'styleUrl'))
        record = styles.get(style_id) if style_id else None

        if key == 'normal':
            # The normal pair decides, even when it does not resolve
            return record
        if record is not None and first_resolved is None:
            first_resolved = record

    return first_resolved


def resolve_styles(doc: KMLDocument) -> Dict[str, StyleRecord]:
    """
    Build the style id -> StyleRecord map for one document.

    The map is local to the call; nothing is cached across documents.

    Args:
        doc: Parsed KML document

    Returns:
        Dict mapping Style and StyleMap ids to StyleRecords
    """
    styles: Dict[str, StyleRecord] = {}

    for tag in STYLE_TAGS:
        for style_element in doc.get_elements_by_tag_name(tag):
            style_id = get_attribute(style_element, 'id')
            if style_id:
                styles[style_id] = extract_style(style_element)

    concrete = dict(styles)
    aliases = 0
    for style_map in doc.get_elements_by_tag_name('StyleMap'):
        map_id = get_attribute(style_map, 'id')
        if not map_id:
            continue
        record = _resolve_style_map(style_map, concrete)
        if record is None:
            logger.debug(f"StyleMap {map_id!r} does not resolve to a style")
            continue
        styles[map_id] = record
        aliases += 1

    logger.debug(f"Resolved {len(concrete)} style(s) and {aliases} style map(s)")
    return styles


def lookup_style(placemark: Any, styles: Dict[str, StyleRecord]) -> Optional[StyleRecord]:
    """
    Style of a Placemark: its styleUrl target, else its inline <Style>.

    A styleUrl that names an unknown id yields None.
    """
    style_url = first_text(placemark, 'styleUrl')
    if style_url:
        style_id = strip_style_url(style_url)
        style = styles.get(style_id)
        if style is None:
            logger.debug(f"Style {style_id!r} referenced but not defined")
        return style

    inline = find_child(placemark, 'Style')
    if inline is not None:
        return extract_style(inline)
    return None
