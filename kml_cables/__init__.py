"""
KML Cable Route Converter

Converts KML cable routes into GeoJSON features enriched with soil type,
burial depth, segment distances and bearings.
"""

__version__ = "1.0.0"

# Export key functions
from .converter import convert_kml_to_geojson, convert_kml_file, convert_kml_files, read_kml_source
from .assembler import assemble_from_geojson
from .classifier import classify, depth_for_soil_type
from .geometry import haversine_distance, initial_bearing, calculate_segments, total_distance
from .styles import abgr_to_rgba, resolve_styles
from .statistics import calculate_statistics
from .markers import generate_markers, generate_all_markers
from .helpers import format_segment_distance, format_bearing, get_soil_type_color
from .renderer import render_preview_map
from .storage import save_collection, load_collection, delete_collection
from .validation import (
    validate_coordinates,
    validate_kml_file,
    validate_feature_collection,
)
from .exceptions import (
    KMLCablesError,
    KMLParseError,
    InvalidCoordinateError,
    DataExportError,
    StorageError,
    ConfigurationError,
)

__all__ = [
    # Conversion
    "convert_kml_to_geojson",
    "convert_kml_file",
    "convert_kml_files",
    "read_kml_source",
    "assemble_from_geojson",
    # Classification
    "classify",
    "depth_for_soil_type",
    # Geometry
    "haversine_distance",
    "initial_bearing",
    "calculate_segments",
    "total_distance",
    # Styles
    "abgr_to_rgba",
    "resolve_styles",
    # Statistics and markers
    "calculate_statistics",
    "generate_markers",
    "generate_all_markers",
    # Display
    "format_segment_distance",
    "format_bearing",
    "get_soil_type_color",
    "render_preview_map",
    # Storage
    "save_collection",
    "load_collection",
    "delete_collection",
    # Validation
    "validate_coordinates",
    "validate_kml_file",
    "validate_feature_collection",
    # Exceptions
    "KMLCablesError",
    "KMLParseError",
    "InvalidCoordinateError",
    "DataExportError",
    "StorageError",
    "ConfigurationError",
]
