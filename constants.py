"""
Constants for the MotoTrack tracking and export core.

Centralized definitions for GPX output, file naming, storage layout and
location acquisition defaults.
"""

from pathlib import Path


# =============================================================================
# Application Identity
# =============================================================================

APP_NAME = "MOTOGPx"
VERSION = "1.0.0"


# =============================================================================
# GPX Output
# =============================================================================

NS_GPX = "http://www.topografix.com/GPX/1/1"
GPX_VERSION = "1.1"
GPX_CREATOR = APP_NAME
GPX_TRACK_NAME = "Track"
GPX_DECLARATION = '<?xml version="1.0" encoding="UTF-8" standalone="no" ?>'

# Trackpoint <time> is second precision, always UTC
GPX_TIME_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


# =============================================================================
# Export File Naming and Storage
# =============================================================================

EXPORT_FILE_PREFIX = "MotoTrack"
EXPORT_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
EXPORT_EXTENSION = ".gpx"
EXPORT_SUBDIR = "Documents"

# Stand-in for application-private storage when running off-device
DEFAULT_STORAGE_ROOT = Path.home() / ".mototrack"


# =============================================================================
# Location Acquisition
# =============================================================================

LOCATION_INTERVAL_MS = 1000
LOCATION_MIN_DISTANCE_M = 1.0
LOCATION_HIGH_ACCURACY = True


# =============================================================================
# Keep-Alive Notice (shown by the host while tracking)
# =============================================================================

TRACKING_NOTICE_TITLE = "Tracking active"
TRACKING_NOTICE_TEXT = "Recording location in the background"
