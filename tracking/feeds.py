"""
Collaborator interfaces for the platform services around the tracking core.

The session starts and stops location and sensor feeds and asks a
keep-alive collaborator to hold the process in the foreground while
tracking. Push-style implementations are provided for replaying recorded
events and for tests.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable, Optional

from tracking.data_models import AccelerometerSample, LocationFix, LocationRequest

logger = logging.getLogger(__name__)

FixCallback = Callable[[LocationFix], None]
SampleCallback = Callable[[AccelerometerSample], None]


class LocationFeed(ABC):
    """
    Source of position fixes.

    Subclasses must implement:
        - start(request, callback): begin delivering fixes to callback
        - stop(): stop delivering; must be safe to call when not started
    """

    @abstractmethod
    def start(self, request: LocationRequest, callback: FixCallback) -> None:
        pass

    @abstractmethod
    def stop(self) -> None:
        pass


class SensorFeed(ABC):
    """
    Source of accelerometer readings.

    Subclasses must implement:
        - start(callback): begin delivering samples to callback
        - stop(): stop delivering; must be safe to call when not started
    """

    @abstractmethod
    def start(self, callback: SampleCallback) -> None:
        pass

    @abstractmethod
    def stop(self) -> None:
        pass


class KeepAlive(ABC):
    """Keeps the host process running while a session is tracking."""

    @abstractmethod
    def acquire(self, title: str, text: str) -> None:
        """
        Start keeping the process alive.

        Args:
            title: Short notice title the host may display
            text: Notice body the host may display
        """
        pass

    @abstractmethod
    def release(self) -> None:
        pass


class PushLocationFeed(LocationFeed):
    """
    Location feed driven by the caller.

    push() forwards a fix to the subscribed callback only while the feed
    is started; fixes pushed before start or after stop go nowhere.

    Usage:
        feed = PushLocationFeed()
        session = TrackingSession(location_feed=feed, ...)
        session.start()
        feed.push(fix)
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._callback: Optional[FixCallback] = None
        self.request: Optional[LocationRequest] = None
        self.start_count = 0

    def start(self, request: LocationRequest, callback: FixCallback) -> None:
        with self._lock:
            self.request = request
            self._callback = callback
            self.start_count += 1

    def stop(self) -> None:
        with self._lock:
            self._callback = None

    @property
    def is_active(self) -> bool:
        with self._lock:
            return self._callback is not None

    def push(self, fix: LocationFix) -> bool:
        """
        Deliver a fix if the feed is started.

        Returns:
            True if the fix was delivered to a subscriber
        """
        with self._lock:
            callback = self._callback
        if callback is None:
            return False
        callback(fix)
        return True


class PushSensorFeed(SensorFeed):
    """Sensor feed driven by the caller; see PushLocationFeed."""

    def __init__(self):
        self._lock = threading.Lock()
        self._callback: Optional[SampleCallback] = None
        self.start_count = 0

    def start(self, callback: SampleCallback) -> None:
        with self._lock:
            self._callback = callback
            self.start_count += 1

    def stop(self) -> None:
        with self._lock:
            self._callback = None

    @property
    def is_active(self) -> bool:
        with self._lock:
            return self._callback is not None

    def push(self, sample: AccelerometerSample) -> bool:
        with self._lock:
            callback = self._callback
        if callback is None:
            return False
        callback(sample)
        return True


class LoggingKeepAlive(KeepAlive):
    """Keep-alive for hosts without a foreground service; only logs."""

    def __init__(self):
        self.held = False

    def acquire(self, title: str, text: str) -> None:
        self.held = True
        logger.info(f"{title}: {text}")

    def release(self) -> None:
        if self.held:
            logger.debug("Keep-alive released")
        self.held = False
