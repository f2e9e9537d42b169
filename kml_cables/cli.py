"""Command-line interface."""

import sys
from urllib.parse import urlparse

from .converter import convert_kml_file, is_url
from .exceptions import KMLCablesError
from .exporter import write_geojson
from .helpers import default_output_path, format_segment_distance
from .logger import logger, set_debug_mode
from .renderer import render_preview_map
from .storage import save_collection
from .validation import validate_kml_file

__all__ = ['print_help', 'parse_args', 'print_summary', 'main']


def print_help():
    """Print comprehensive help message."""
    help_text = """
KML Cable Route Converter
=========================

Convert KML cable routes into a GeoJSON FeatureCollection with soil type,
burial depth, per-segment distances and bearings.

USAGE:
    kml-cables <input.kml> [output.json] [OPTIONS]

ARGUMENTS:
    <input.kml>          KML file or http(s) URL
    [output.json]        Output file (default: input path with .json extension)

OPTIONS:
    --points             Also convert Point placemarks
    --preview FILE       Write an HTML preview map to FILE
    --save               Store the result as the current cable data
    --debug              Enable debug output to diagnose parsing issues
    --help, -h           Show this help message

SOIL TYPES:
    • Pasir       - sand,  1.5 m depth
    • Tanah Liat  - clay,  2.0 m depth (default)
    • Batuan      - rock,  2.5 m depth

    Soil type is taken from the placemark name, then its description,
    then its line color.

ENVIRONMENT:
    KML_CABLES_DATA_DIR      Where --save stores data (default ~/.cache/kml-cables)
    KML_CABLES_HTTP_TIMEOUT  Seconds allowed for URL downloads (default 30)

EXAMPLES:
    # Convert a single file to route.json
    kml-cables route.kml

    # Custom output and a preview map
    kml-cables route.kml cables.json --preview preview.html

    # Debug mode for troubleshooting
    kml-cables --debug problematic.kml
"""
    print(help_text)


def _fail(message):
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def _default_output_for(source):
    if is_url(source):
        name = urlparse(source).path.rsplit('/', 1)[-1] or 'cables'
        return default_output_path(name)
    return default_output_path(source)


def parse_args(argv):
    """
    Parse command-line arguments.

    Args:
        argv: Arguments without the program name

    Returns:
        dict with input, output, include_points, preview, save and debug

    Exits with status 1 on a bad option or missing input.
    """
    options = {
        'input': None,
        'output': None,
        'include_points': False,
        'preview': None,
        'save': False,
        'debug': False,
    }
    positional = []

    i = 0
    while i < len(argv):
        arg = argv[i]

        if arg == '--debug':
            options['debug'] = True
            i += 1
        elif arg == '--points':
            options['include_points'] = True
            i += 1
        elif arg == '--save':
            options['save'] = True
            i += 1
        elif arg == '--preview':
            if i + 1 < len(argv):
                options['preview'] = argv[i + 1]
                i += 2
            else:
                _fail("--preview requires a file name")
        elif arg.startswith('-'):
            _fail(f"Unknown option: {arg}")
        else:
            positional.append(arg)
            i += 1

    if not positional:
        _fail("No KML file specified")
    if len(positional) > 2:
        _fail(f"Too many arguments: {' '.join(positional[2:])}")

    options['input'] = positional[0]
    options['output'] = positional[1] if len(positional) > 1 else _default_output_for(positional[0])
    return options


def print_summary(collection):
    """Print one line per converted cable and the total route length."""
    features = collection['features']
    for i, feature in enumerate(features, start=1):
        geometry = feature['geometry']
        count = len(geometry['coordinates']) if geometry['type'] == 'LineString' else 1
        print(f"  {i}. {feature['properties']['name']} - {count} points")

    total = sum(f['properties'].get('totalDistance', 0.0) for f in features)
    print(f"Total distance: {format_segment_distance(total)}")


def main():
    """Main CLI entry point."""
    # Check for help flag first
    if len(sys.argv) < 2 or '--help' in sys.argv or '-h' in sys.argv:
        print_help()
        sys.exit(0 if '--help' in sys.argv or '-h' in sys.argv else 1)

    options = parse_args(sys.argv[1:])
    if options['debug']:
        set_debug_mode(True)

    source = options['input']
    if not is_url(source):
        is_valid, error = validate_kml_file(source)
        if not is_valid:
            _fail(error)

    try:
        collection = convert_kml_file(
            source, include_points=options['include_points']
        )
        write_geojson(collection, options['output'])
        if options['preview']:
            if collection['features']:
                render_preview_map(collection, options['preview'])
            else:
                logger.warning("No cable routes found, skipping preview map")
        if options['save']:
            slot_path = save_collection(collection)
            logger.info(f"✓ Saved cable data to {slot_path}")
    except (KMLCablesError, OSError) as e:
        _fail(e)

    print(f"Converted {source} -> {options['output']}")
    print_summary(collection)
