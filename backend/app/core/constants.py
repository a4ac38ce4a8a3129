"""Shared application constants.

Centralizes the lookup tables and numeric thresholds used across ingestion,
geometry and routing so we can document and adjust them in one place.
"""

# Mean Earth radius (m) used by every distance computation in the app
EARTH_RADIUS_M = 6371000.0

# Track travel modes and their display colors.
# Unknown modes on upload fall back to "other".
TRACK_MODE_COLORS = {
    "walking": "#FF6B6B",
    "hiking": "#FF9F43",
    "cycling": "#4ECDC4",
    "bus": "#A55EEA",
    "metro": "#26DE81",
    "train": "#45B7D1",
    "boat": "#2D98DA",
    "car": "#FC5C65",
    "other": "#9B59B6",
}
DEFAULT_TRACK_MODE = "hiking"
FALLBACK_TRACK_MODE = "other"

# Routing mode -> (provider profile, display color, track mode used on save).
# Unknown routing modes are rejected, there is no fallback here.
ROUTING_MODES = {
    "car": ("car-vario", "#FC5C65", "car"),
    "bike": ("trekking", "#4ECDC4", "cycling"),
    "foot": ("hiking", "#FF9F43", "hiking"),
    "boat": ("river", "#2D98DA", "boat"),
    "train": ("rail", "#45B7D1", "train"),
    "metro": ("shortest", "#A55EEA", "metro"),
}

# Zoom step function over max(lat_range, lng_range), in degrees.
# Upper bounds are exclusive: a range of exactly 0.01 lands on zoom 12.
ZOOM_STEPS = [
    (0.01, 15),
    (0.1, 12),
    (1.0, 9),
    (10.0, 6),
]
ZOOM_FLOOR = 4

# How far (chars) past a point tag we look for its <ele>/<time> children
INGEST_LOOKAHEAD_CHARS = 500

MIN_TRACK_POINTS = 2

DEFAULT_WAYPOINT_ICON = "📍"
DEFAULT_TAG_CATEGORY = "Custom"
