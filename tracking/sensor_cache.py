"""
Single-slot cache for the latest accelerometer sample.
"""

import threading
from typing import Optional

from tracking.data_models import AccelerometerSample


class SensorSampleCache:
    """
    Holds the most recent accelerometer sample, last writer wins.

    The sample is immutable and stored as one reference, so readers always
    get a consistent x/y/z triple even while the sensor feed overwrites it.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._sample: Optional[AccelerometerSample] = None

    def on_sensor_event(self, sample: AccelerometerSample) -> None:
        """Replace the cached sample unconditionally."""
        with self._lock:
            self._sample = sample

    def current_sample(self) -> Optional[AccelerometerSample]:
        """Return the cached sample, or None if no event has arrived."""
        with self._lock:
            return self._sample

    def clear(self) -> None:
        with self._lock:
            self._sample = None
