"""
Data models for the tracking core.

Pydantic models for location fixes, accelerometer samples and the track
points recorded from them.
"""

from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from constants import (
    DEFAULT_STORAGE_ROOT,
    EXPORT_FILE_PREFIX,
    EXPORT_SUBDIR,
    GPX_CREATOR,
    GPX_TRACK_NAME,
    LOCATION_HIGH_ACCURACY,
    LOCATION_INTERVAL_MS,
    LOCATION_MIN_DISTANCE_M,
)


def _as_utc(value: datetime) -> datetime:
    """Interpret naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SessionState(str, Enum):
    """Recording session state. There is no paused state."""
    IDLE = "idle"
    TRACKING = "tracking"


class AccelerometerSample(BaseModel):
    """
    One 3-axis accelerometer reading.

    Only the latest sample is ever kept, so the model is frozen and swapped
    as a whole rather than updated field by field.
    """
    model_config = ConfigDict(frozen=True)

    x: float = Field(allow_inf_nan=False, description="X axis acceleration in m/s^2")
    y: float = Field(allow_inf_nan=False, description="Y axis acceleration in m/s^2")
    z: float = Field(allow_inf_nan=False, description="Z axis acceleration in m/s^2")
    received_at: datetime = Field(default_factory=_utc_now, description="Arrival time (UTC)")

    @field_validator("received_at")
    @classmethod
    def _received_at_utc(cls, value: datetime) -> datetime:
        return _as_utc(value)


class LocationFix(BaseModel):
    """Single position update delivered by the location feed."""
    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90.0, le=90.0, description="WGS84 latitude in degrees")
    longitude: float = Field(ge=-180.0, le=180.0, description="WGS84 longitude in degrees")
    altitude: float = Field(default=0.0, allow_inf_nan=False, description="Altitude in meters (0 when unknown)")
    time: datetime = Field(description="Capture time of the fix (UTC)")

    @field_validator("time")
    @classmethod
    def _time_utc(cls, value: datetime) -> datetime:
        return _as_utc(value)

    @classmethod
    def from_epoch_millis(
        cls,
        latitude: float,
        longitude: float,
        altitude: float,
        time_ms: int,
    ) -> "LocationFix":
        """
        Create a fix from a millisecond epoch capture time.

        Args:
            latitude: Latitude in degrees
            longitude: Longitude in degrees
            altitude: Altitude in meters
            time_ms: Capture time as milliseconds since the Unix epoch

        Returns:
            LocationFix with a UTC timestamp
        """
        return cls(
            latitude=latitude,
            longitude=longitude,
            altitude=altitude,
            time=datetime.fromtimestamp(time_ms / 1000.0, tz=timezone.utc),
        )


class TrackPoint(BaseModel):
    """
    One recorded sample of the path: a fix plus the sensor context it was
    recorded with. Never mutated once appended to the path store.
    """
    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)
    elevation: float = Field(default=0.0, allow_inf_nan=False, description="Meters; 0 when the fix had no altitude")
    timestamp: datetime = Field(description="Fix time, UTC, millisecond precision")
    accel: Optional[AccelerometerSample] = Field(default=None, description="Latest sample at record time")

    @field_validator("timestamp")
    @classmethod
    def _truncate_to_millis(cls, value: datetime) -> datetime:
        value = _as_utc(value)
        return value.replace(microsecond=(value.microsecond // 1000) * 1000)

    @classmethod
    def from_fix(
        cls,
        fix: LocationFix,
        sample: Optional[AccelerometerSample] = None,
    ) -> "TrackPoint":
        """
        Create a TrackPoint from a location fix and a sensor snapshot.

        Args:
            fix: Location fix being recorded
            sample: Cached accelerometer sample, or None if none arrived yet

        Returns:
            TrackPoint with all fields populated
        """
        return cls(
            latitude=fix.latitude,
            longitude=fix.longitude,
            elevation=fix.altitude,
            timestamp=fix.time,
            accel=sample,
        )


class LocationRequest(BaseModel):
    """Acquisition parameters handed to the location feed on start."""
    model_config = ConfigDict(frozen=True)

    interval_ms: int = Field(default=LOCATION_INTERVAL_MS, gt=0)
    min_update_distance_m: float = Field(default=LOCATION_MIN_DISTANCE_M, ge=0.0)
    high_accuracy: bool = LOCATION_HIGH_ACCURACY


class ExportResult(BaseModel):
    """Outcome of a GPX export: a written file, or nothing to export."""
    path: Optional[str] = Field(default=None, description="Absolute path of the written file")
    point_count: int = Field(default=0, ge=0)

    @property
    def nothing_to_export(self) -> bool:
        """True when no points were recorded and no file was written."""
        return self.path is None


class TrackerConfig(BaseModel):
    """Settings for a tracking session and its export."""
    storage_root: Path = DEFAULT_STORAGE_ROOT
    export_subdir: str = EXPORT_SUBDIR
    creator: str = Field(default=GPX_CREATOR, min_length=1)
    file_prefix: str = Field(default=EXPORT_FILE_PREFIX, min_length=1)
    track_name: str = GPX_TRACK_NAME
    location_request: LocationRequest = Field(default_factory=LocationRequest)

    @property
    def export_dir(self) -> Path:
        """Directory GPX files are written to."""
        return Path(self.storage_root) / self.export_subdir
