"""KML to GeoJSON conversion pipeline.

This module wires the stages together for one document:

    KML text -> parse_kml -> resolve_styles / extract_geometry
             -> classify -> calculate_segments / total_distance
             -> assemble_feature -> FeatureCollection

Error Policy:
- Empty or malformed XML raises KMLParseError; nothing partial is returned
- Placemarks without a usable geometry are skipped (debug log only)
- Invalid coordinate tokens are dropped
- Unknown style references resolve to "no style"

Each call builds its own style map and feature index, so independent
documents can be converted in parallel (see ``convert_kml_files``).

Example:
    >>> from kml_cables.converter import convert_kml_to_geojson
    >>> collection = convert_kml_to_geojson(open('route.kml', 'rb').read())
    >>> print(f"Converted {len(collection['features'])} cable routes")
    Converted 3 cable routes
"""

import http.client
import urllib.request
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from .assembler import assemble_feature, default_name, feature_collection, today_iso
from .classifier import classify
from .config import get_http_timeout
from .decorators import timed
from .document import parse_kml
from .exceptions import KMLCablesError
from .geometry import calculate_segments, total_distance
from .kml_parsers import extract_geometry, extract_placemark_metadata, extract_placemark_name
from .logger import logger
from .styles import lookup_style, resolve_styles
from .types import CableFeatureCollection

__all__ = [
    'convert_kml_to_geojson',
    'read_kml_source',
    'convert_kml_file',
    'convert_kml_files',
    'is_url',
]

MAX_WORKERS = 8


@timed
def convert_kml_to_geojson(
    kml_text: Union[str, bytes],
    include_points: bool = False,
    install_date: Optional[str] = None,
    file_path: Optional[str] = None,
) -> CableFeatureCollection:
    """
    Convert one KML document into a cable FeatureCollection.

    Args:
        kml_text: Raw KML document
        include_points: Also emit Point placemarks as features
        install_date: Override for the install date (default: today)
        file_path: Source path, only used in messages

    Returns:
        CableFeatureCollection in Placemark document order

    Raises:
        KMLParseError: If the document is empty or not well-formed XML
    """
    doc = parse_kml(kml_text, file_path=file_path)
    styles = resolve_styles(doc)
    install_date = install_date or today_iso()

    features = []
    skipped = 0
    for position, placemark in enumerate(doc.get_elements_by_tag_name('Placemark'), start=1):
        geometry = extract_geometry(placemark, include_points=include_points)
        if geometry is None:
            skipped += 1
            logger.debug(f"Skipping Placemark {position}: no usable geometry")
            continue

        index = len(features) + 1
        name = extract_placemark_name(placemark) or default_name(index)
        metadata = extract_placemark_metadata(placemark)
        style = lookup_style(placemark, styles)
        soil_type = classify(name, metadata.get('description'), style)

        if geometry['type'] == 'LineString':
            segments = calculate_segments(geometry['coordinates'])
            length = total_distance(geometry['coordinates'])
        else:
            segments, length = [], 0.0

        features.append(assemble_feature(
            geometry, soil_type, segments, length, style, metadata,
            index=index, name=name, install_date=install_date,
        ))

    source = f" from {Path(file_path).name}" if file_path else ""
    total_m = sum(f['properties']['totalDistance'] for f in features)
    logger.info(f"✓ Converted {len(features)} cable route(s){source} ({total_m / 1000:.2f} km)")
    if skipped:
        logger.debug(f"Skipped {skipped} Placemark(s) without usable geometry")

    return feature_collection(features)


def is_url(source: str) -> bool:
    """True if source looks like an http(s) URL."""
    return source.lower().startswith(('http://', 'https://'))


def read_kml_source(source: str) -> bytes:
    """
    Read a KML document from a local path or an http(s) URL.

    Args:
        source: File path or URL

    Returns:
        Raw document bytes

    Raises:
        OSError: If the file cannot be read
        urllib.error.URLError: If the URL cannot be fetched
        http.client.HTTPException: If the server response is broken off or malformed
        ValueError: If the URL is malformed
        ConfigurationError: If the configured HTTP timeout is invalid
    """
    if is_url(source):
        timeout = get_http_timeout()
        logger.debug(f"Fetching {source} (timeout {timeout:.0f}s)")
        with urllib.request.urlopen(source, timeout=timeout) as response:
            return response.read()

    return Path(source).read_bytes()


def convert_kml_file(source: str, include_points: bool = False, install_date: Optional[str] = None) -> CableFeatureCollection:
    """
    Read and convert one KML file or URL.

    Raises:
        KMLParseError: If the document is empty or malformed
        OSError: If the file cannot be read
    """
    kml_bytes = read_kml_source(source)
    return convert_kml_to_geojson(
        kml_bytes, include_points=include_points, install_date=install_date, file_path=source
    )


def convert_kml_files(
    sources: Iterable[str],
    include_points: bool = False,
    install_date: Optional[str] = None,
    max_workers: int = MAX_WORKERS,
) -> Dict[str, CableFeatureCollection]:
    """
    Convert independent KML documents in parallel.

    A document that fails to read or parse is logged and left out of the
    result; the others are unaffected.

    Args:
        sources: File paths or URLs
        include_points: Also emit Point placemarks as features
        install_date: Override for the install date (default: today)
        max_workers: Upper bound on worker threads

    Returns:
        Dict mapping each successfully converted source to its collection,
        in sorted source order
    """
    source_list: List[str] = list(dict.fromkeys(sources))
    if not source_list:
        return {}

    install_date = install_date or today_iso()
    results: Dict[str, CableFeatureCollection] = {}

    with ThreadPoolExecutor(max_workers=max(1, min(len(source_list), max_workers))) as executor:
        future_to_source = {
            executor.submit(convert_kml_file, source, include_points, install_date): source
            for source in source_list
        }
        for future in as_completed(future_to_source):
            source = future_to_source[future]
            try:
                results[source] = future.result()
            except (KMLCablesError, OSError, http.client.HTTPException, ValueError) as e:
                logger.error(f"✗ {source}: {e}")

    return {source: results[source] for source in sorted(results)}
