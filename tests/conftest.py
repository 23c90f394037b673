"""
Pytest configuration and fixtures for MotoTrack tests.

Provides reusable fixtures for location fixes, accelerometer samples,
push feeds and a tracking session wired to a temporary storage root.
"""

import pytest
from datetime import datetime, timezone, timedelta
from unittest.mock import MagicMock

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from tracking.data_models import AccelerometerSample, LocationFix, TrackerConfig, TrackPoint
from tracking.feeds import KeepAlive, PushLocationFeed, PushSensorFeed
from tracking.session import TrackingSession


# Fixed export time so generated file names are predictable
EXPORT_TIME = datetime(2026, 1, 9, 11, 45, 38)


class Permission:
    """Mutable permission flag usable as a session permission_check."""

    def __init__(self, granted: bool = True):
        self.granted = granted

    def __call__(self) -> bool:
        return self.granted


@pytest.fixture
def sample_timestamp():
    """Sample fix timestamp for testing."""
    return datetime(2026, 1, 9, 11, 45, 38, tzinfo=timezone.utc)


@pytest.fixture
def make_fix(sample_timestamp):
    """Factory for location fixes offset in seconds from sample_timestamp."""
    def _make(lat=40.4168, lon=-3.7038, alt=650.0, seconds=0):
        return LocationFix(
            latitude=lat,
            longitude=lon,
            altitude=alt,
            time=sample_timestamp + timedelta(seconds=seconds),
        )
    return _make


@pytest.fixture
def accel_sample():
    """Accelerometer sample with gravity on the z axis."""
    return AccelerometerSample(x=0.1, y=0.2, z=9.8)


@pytest.fixture
def sample_points(make_fix, accel_sample):
    """Three track points, the first one without a sensor sample."""
    return [
        TrackPoint.from_fix(make_fix(lat=40.0, lon=-3.0, alt=600.0, seconds=0)),
        TrackPoint.from_fix(make_fix(lat=40.001, lon=-3.001, alt=601.5, seconds=1), accel_sample),
        TrackPoint.from_fix(make_fix(lat=40.002, lon=-3.002, alt=603.0, seconds=2), accel_sample),
    ]


@pytest.fixture
def location_feed():
    return PushLocationFeed()


@pytest.fixture
def sensor_feed():
    return PushSensorFeed()


@pytest.fixture
def keep_alive():
    """Mock keep-alive collaborator."""
    return MagicMock(spec=KeepAlive)


@pytest.fixture
def permission():
    return Permission(granted=True)


@pytest.fixture
def tracker_config(tmp_path):
    """Tracker config rooted in a temporary directory."""
    return TrackerConfig(storage_root=tmp_path / "storage")


@pytest.fixture
def session(location_feed, sensor_feed, keep_alive, permission, tracker_config):
    """Idle tracking session with push feeds and a fixed clock."""
    return TrackingSession(
        location_feed=location_feed,
        sensor_feed=sensor_feed,
        keep_alive=keep_alive,
        permission_check=permission,
        config=tracker_config,
        clock=lambda: EXPORT_TIME,
    )
