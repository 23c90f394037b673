"""
Tracking and export core for MotoTrack.

Records position fixes enriched with the latest accelerometer reading and
exports the recorded path to GPX 1.1.
"""

from tracking.data_models import (
    AccelerometerSample,
    ExportResult,
    LocationFix,
    LocationRequest,
    SessionState,
    TrackerConfig,
    TrackPoint,
)
from tracking.errors import ExportWriteError, PermissionDeniedError, TrackingError
from tracking.observers import PointChannel
from tracking.session import TrackingSession

__all__ = [
    "AccelerometerSample",
    "ExportResult",
    "LocationFix",
    "LocationRequest",
    "SessionState",
    "TrackerConfig",
    "TrackPoint",
    "ExportWriteError",
    "PermissionDeniedError",
    "TrackingError",
    "PointChannel",
    "TrackingSession",
]
