"""Constants used throughout the KML cable route converter.

This module centralizes the fixed numbers and lookup tables used across
the conversion pipeline:
- Geodesy: Earth radius for the spherical-earth formulas
- Soil Classification: closed soil-type enum, depth table, keyword and
  color-proximity rules
- Feature IDs: prefix and zero-padding of generated cable IDs
- Persistence: storage slot name and data directory defaults
- Rendering: display colors per soil type
"""

# === Geodesy ===
EARTH_RADIUS_M = 6371000.0  # Mean Earth radius

# === Soil Classification ===
SOIL_PASIR = "Pasir"
SOIL_TANAH_LIAT = "Tanah Liat"
SOIL_BATUAN = "Batuan"

SOIL_TYPES = (SOIL_PASIR, SOIL_TANAH_LIAT, SOIL_BATUAN)
DEFAULT_SOIL_TYPE = SOIL_TANAH_LIAT

# Installation depth in meters, derived strictly from soil type
SOIL_TYPE_DEPTH = {
    SOIL_PASIR: 1.5,
    SOIL_TANAH_LIAT: 2.0,
    SOIL_BATUAN: 2.5,
}

# Substring rules, checked in order; first match wins
SOIL_KEYWORD_RULES = (
    (("pasir", "sand"), SOIL_PASIR),
    (("batuan", "batu", "rock"), SOIL_BATUAN),
    (("tanah liat", "clay", "liat"), SOIL_TANAH_LIAT),
)

# Whole word "tanah" means clay unless the text also mentions "batuan"
TANAH_WORD = "tanah"

# Color-proximity thresholds on 0-255 channels
PASIR_MIN_RED = 200
PASIR_MIN_GREEN = 180
PASIR_MAX_BLUE = 100
TANAH_LIAT_MIN_RED = 180
TANAH_LIAT_MAX_GREEN = 100
TANAH_LIAT_MAX_BLUE = 100
BATUAN_MAX_CHANNEL_SPREAD = 50
BATUAN_MAX_RED = 150

# === Feature IDs ===
CABLE_ID_PREFIX = "cable-"
CABLE_ID_WIDTH = 3
DEFAULT_NAME_TEMPLATE = "Cable Route {index}"

# === Geometry ===
MIN_LINESTRING_POINTS = 2
LAT_MIN = -90.0
LAT_MAX = 90.0
LON_MIN = -180.0
LON_MAX = 180.0

# === Distance Markers ===
DEFAULT_MARKER_INTERVAL_M = 30.0

# === Persistence ===
STORAGE_SLOT = "underground-cable-data"
DATA_DIR_ENV = "KML_CABLES_DATA_DIR"

# === Source Loading ===
HTTP_TIMEOUT_ENV = "KML_CABLES_HTTP_TIMEOUT"
DEFAULT_HTTP_TIMEOUT_S = 30.0

# === Rendering ===
SOIL_TYPE_COLORS = {
    SOIL_PASIR: "#FFFF00",  # Yellow
    SOIL_TANAH_LIAT: "#8B4513",  # Brown
    SOIL_BATUAN: "#808080",  # Gray
}
UNKNOWN_SOIL_COLOR = "#000000"
PREVIEW_LINE_WEIGHT = 3
PREVIEW_LINE_OPACITY = 0.8
