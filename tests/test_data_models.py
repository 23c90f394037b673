"""
Tests for tracking data models.
"""

import pytest
from datetime import datetime, timezone, timedelta
from pydantic import ValidationError

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from constants import EXPORT_SUBDIR, GPX_CREATOR
from tracking.data_models import (
    AccelerometerSample,
    ExportResult,
    LocationFix,
    LocationRequest,
    SessionState,
    TrackerConfig,
    TrackPoint,
)


class TestLocationFix:
    """Tests for LocationFix model."""

    def test_fix_creation(self, sample_timestamp):
        """Fix should store all fields."""
        fix = LocationFix(latitude=1.0, longitude=2.0, altitude=10.0, time=sample_timestamp)
        assert fix.latitude == 1.0
        assert fix.longitude == 2.0
        assert fix.altitude == 10.0
        assert fix.time == sample_timestamp

    def test_altitude_defaults_to_zero(self, sample_timestamp):
        """Fixes without altitude should report 0 meters."""
        fix = LocationFix(latitude=1.0, longitude=2.0, time=sample_timestamp)
        assert fix.altitude == 0.0

    def test_naive_time_is_utc(self):
        """Naive datetimes should be interpreted as UTC."""
        fix = LocationFix(latitude=0.0, longitude=0.0, time=datetime(2026, 1, 9, 12, 0, 0))
        assert fix.time.tzinfo == timezone.utc
        assert fix.time.hour == 12

    def test_aware_time_converted_to_utc(self):
        """Non-UTC aware datetimes should be converted to UTC."""
        plus_two = timezone(timedelta(hours=2))
        fix = LocationFix(latitude=0.0, longitude=0.0, time=datetime(2026, 1, 9, 12, 0, 0, tzinfo=plus_two))
        assert fix.time.utcoffset() == timedelta(0)
        assert fix.time.hour == 10

    @pytest.mark.parametrize("lat,lon", [(90.1, 0.0), (-90.1, 0.0), (0.0, 180.1), (0.0, -180.1)])
    def test_out_of_range_coordinates_rejected(self, lat, lon, sample_timestamp):
        """Coordinates outside WGS84 ranges should fail validation."""
        with pytest.raises(ValidationError):
            LocationFix(latitude=lat, longitude=lon, time=sample_timestamp)

    @pytest.mark.parametrize("altitude", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_altitude_rejected(self, altitude, sample_timestamp):
        """NaN and infinities have no GPX representation."""
        with pytest.raises(ValidationError):
            LocationFix(latitude=0.0, longitude=0.0, altitude=altitude, time=sample_timestamp)

    def test_from_epoch_millis(self):
        """Epoch milliseconds should convert to a UTC datetime."""
        fix = LocationFix.from_epoch_millis(1.0, 1.0, 10.0, 1736423138250)
        assert fix.time == datetime(2025, 1, 9, 11, 45, 38, 250000, tzinfo=timezone.utc)

    def test_fix_is_frozen(self, make_fix):
        """Fixes should be immutable."""
        fix = make_fix()
        with pytest.raises(ValidationError):
            fix.latitude = 0.0


class TestTrackPoint:
    """Tests for TrackPoint model."""

    def test_from_fix_without_sample(self, make_fix):
        """A point built without a sample should have no accel annotation."""
        fix = make_fix(lat=1.0, lon=1.0, alt=10.0)
        point = TrackPoint.from_fix(fix)
        assert point.latitude == 1.0
        assert point.longitude == 1.0
        assert point.elevation == 10.0
        assert point.timestamp == fix.time
        assert point.accel is None

    def test_from_fix_with_sample(self, make_fix, accel_sample):
        """The sample snapshot should be attached as-is."""
        point = TrackPoint.from_fix(make_fix(), accel_sample)
        assert point.accel == accel_sample

    def test_timestamp_truncated_to_millis(self):
        """Timestamps should keep millisecond precision only."""
        point = TrackPoint(
            latitude=0.0,
            longitude=0.0,
            timestamp=datetime(2026, 1, 9, 12, 0, 0, 123456, tzinfo=timezone.utc),
        )
        assert point.timestamp.microsecond == 123000

    def test_nan_elevation_rejected(self, sample_timestamp):
        with pytest.raises(ValidationError):
            TrackPoint(latitude=0.0, longitude=0.0, elevation=float("nan"), timestamp=sample_timestamp)

    def test_point_is_frozen(self, sample_points):
        """Points should be immutable once created."""
        with pytest.raises(ValidationError):
            sample_points[0].elevation = 1.0


class TestAccelerometerSample:
    """Tests for AccelerometerSample model."""

    def test_received_at_defaults_to_now_utc(self):
        """Samples should be stamped with their UTC arrival time."""
        before = datetime.now(timezone.utc)
        sample = AccelerometerSample(x=0.0, y=0.0, z=9.81)
        after = datetime.now(timezone.utc)
        assert before <= sample.received_at <= after

    def test_nan_axis_rejected(self):
        with pytest.raises(ValidationError):
            AccelerometerSample(x=float("nan"), y=0.0, z=9.81)


class TestExportResult:
    """Tests for ExportResult model."""

    def test_nothing_to_export(self):
        assert ExportResult().nothing_to_export is True

    def test_written_file(self):
        result = ExportResult(path="/tmp/MotoTrack_20260109_114538.gpx", point_count=3)
        assert result.nothing_to_export is False
        assert result.point_count == 3


class TestTrackerConfig:
    """Tests for TrackerConfig defaults."""

    def test_defaults(self):
        config = TrackerConfig()
        assert config.creator == GPX_CREATOR
        assert config.export_dir.name == EXPORT_SUBDIR
        assert config.location_request == LocationRequest()

    def test_export_dir_under_storage_root(self, tmp_path):
        config = TrackerConfig(storage_root=tmp_path)
        assert config.export_dir == tmp_path / EXPORT_SUBDIR

    def test_empty_creator_rejected(self):
        with pytest.raises(ValidationError):
            TrackerConfig(creator="")

    def test_location_request_defaults(self):
        """Default request matches one-second high accuracy updates."""
        request = LocationRequest()
        assert request.interval_ms == 1000
        assert request.min_update_distance_m == 1.0
        assert request.high_accuracy is True


def test_session_states():
    """Only idle and tracking states exist."""
    assert {s.value for s in SessionState} == {"idle", "tracking"}
