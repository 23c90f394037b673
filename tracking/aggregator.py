"""
Fuses location fixes with the latest accelerometer sample.

Fixes and sensor samples arrive from independent feeds. Each fix is paired
with whatever sample is cached when it is processed; there is no timestamp
matching between the two streams.
"""

import logging
import threading
from typing import Optional

from tracking.data_models import AccelerometerSample, LocationFix, TrackPoint
from tracking.observers import PointChannel
from tracking.path_store import PathStore
from tracking.sensor_cache import SensorSampleCache

logger = logging.getLogger(__name__)


class LocationAggregator:
    """
    Turns incoming fixes into track points.

    Points are recorded only while the path store is open (the session is
    tracking). Recorded points are published on the channel right after
    they are appended.
    """

    def __init__(
        self,
        path_store: PathStore,
        sensor_cache: SensorSampleCache,
        channel: PointChannel,
    ):
        self.path_store = path_store
        self.sensor_cache = sensor_cache
        self.channel = channel
        # Held across append and publish so listeners see append order
        self._record_lock = threading.Lock()

    def on_sensor_event(self, sample: AccelerometerSample) -> None:
        self.sensor_cache.on_sensor_event(sample)

    def on_location_fix(self, fix: LocationFix) -> Optional[TrackPoint]:
        """
        Record a location fix.

        Args:
            fix: Position update from the location feed

        Returns:
            The appended TrackPoint, or None if the fix arrived while not
            tracking and was discarded
        """
        point = TrackPoint.from_fix(fix, self.sensor_cache.current_sample())

        with self._record_lock:
            if not self.path_store.append(point):
                logger.debug(f"Discarding fix at {fix.time.isoformat()}: not tracking")
                return None
            self.channel.publish(point)
        return point
