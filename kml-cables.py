#!/usr/bin/env python3
"""
KML Cable Route Converter
Converts KML cable routes into GeoJSON with soil type, depth and segment data.

Usage:
    python kml-cables.py input.kml [output.json]
    python kml-cables.py --preview map.html input.kml  # With preview map
    python kml-cables.py --debug input.kml  # Debug mode
"""

from kml_cables.cli import main


if __name__ == '__main__':
    main()
