"""
Tracking session state machine.

Governs the Idle <-> Tracking transitions and owns their side effects:
starting and stopping the location and sensor feeds, holding the
keep-alive while tracking, and exporting the recorded path on stop.
"""

import logging
import threading
from datetime import datetime
from typing import Callable, List, Optional

from constants import TRACKING_NOTICE_TEXT, TRACKING_NOTICE_TITLE
from tracking.aggregator import LocationAggregator
from tracking.data_models import ExportResult, SessionState, TrackerConfig, TrackPoint
from tracking.errors import PermissionDeniedError
from tracking.feeds import KeepAlive, LocationFeed, SensorFeed
from tracking.gpx_writer import export_gpx
from tracking.observers import PointChannel
from tracking.path_store import PathStore
from tracking.sensor_cache import SensorSampleCache

logger = logging.getLogger(__name__)


class TrackingSession:
    """
    One recorder, at most one active session at a time.

    start() and stop() are idempotent: starting while tracking and
    stopping while idle do nothing. Permission is checked on every start
    but is not re-checked while tracking.

    Usage:
        session = TrackingSession(location_feed, sensor_feed, keep_alive,
                                  permission_check=lambda: True)
        session.channel.subscribe(print)
        session.start()
        ...
        result = session.stop()
        print(result.path or "nothing recorded")
    """

    def __init__(
        self,
        location_feed: LocationFeed,
        sensor_feed: SensorFeed,
        keep_alive: KeepAlive,
        permission_check: Callable[[], bool],
        path_store: Optional[PathStore] = None,
        sensor_cache: Optional[SensorSampleCache] = None,
        channel: Optional[PointChannel] = None,
        config: Optional[TrackerConfig] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize an idle session.

        Args:
            location_feed: Platform location source
            sensor_feed: Platform accelerometer source
            keep_alive: Foreground keep-alive held while tracking
            permission_check: Returns True if location permission is granted
            path_store: Store for recorded points (created if None)
            sensor_cache: Latest-sample cache (created if None)
            channel: Channel new points are published on (created if None)
            config: Export settings (defaults if None)
            clock: Source of the current time for start and export stamps
        """
        self.location_feed = location_feed
        self.sensor_feed = sensor_feed
        self.keep_alive = keep_alive
        self.permission_check = permission_check
        self.path_store = path_store if path_store is not None else PathStore()
        self.sensor_cache = sensor_cache if sensor_cache is not None else SensorSampleCache()
        self.channel = channel if channel is not None else PointChannel()
        self.config = config if config is not None else TrackerConfig()
        self.clock = clock

        self.aggregator = LocationAggregator(self.path_store, self.sensor_cache, self.channel)

        self._lock = threading.RLock()
        self._state = SessionState.IDLE
        self._started_at: Optional[datetime] = None

    @property
    def state(self) -> SessionState:
        with self._lock:
            return self._state

    @property
    def is_tracking(self) -> bool:
        return self.state is SessionState.TRACKING

    @property
    def started_at(self) -> Optional[datetime]:
        """Start time of the current session, None while idle."""
        with self._lock:
            return self._started_at

    @property
    def points(self) -> List[TrackPoint]:
        """Points of the current session, or of a stop whose export failed."""
        return self.path_store.snapshot()

    def start(self) -> bool:
        """
        Begin a tracking session.

        Returns:
            True if a session was started, False if already tracking

        Raises:
            PermissionDeniedError: If location permission is not granted
        """
        with self._lock:
            if self._state is SessionState.TRACKING:
                logger.debug("Start ignored: already tracking")
                return False

            if not self.permission_check():
                logger.warning("Start rejected: location permission not granted")
                raise PermissionDeniedError()

            self.path_store.open()
            self.sensor_cache.clear()
            self._started_at = self.clock()

            try:
                self.keep_alive.acquire(TRACKING_NOTICE_TITLE, TRACKING_NOTICE_TEXT)
                self.sensor_feed.start(self.aggregator.on_sensor_event)
                self.location_feed.start(
                    self.config.location_request, self.aggregator.on_location_fix
                )
            except Exception:
                logger.exception("Failed to start feeds, rolling back to idle")
                self.path_store.close()
                self._teardown()
                raise

            self._state = SessionState.TRACKING
            logger.info(f"Tracking started at {self._started_at.isoformat()}")
            return True

    def stop(self) -> Optional[ExportResult]:
        """
        End the tracking session and export the recorded path.

        The path store is closed before anything else, so no fix delivered
        during teardown can land in the exported track.

        Returns:
            ExportResult of the export, or None if not tracking

        Raises:
            ExportWriteError: If the GPX file cannot be written. The session
                is idle and the feeds are stopped either way; the points
                stay readable until the next start.
        """
        with self._lock:
            if self._state is not SessionState.TRACKING:
                logger.debug("Stop ignored: not tracking")
                return None

            self.path_store.close()
            try:
                self._stop_feeds()
                result = export_gpx(
                    self.path_store.snapshot(),
                    self.config.export_dir,
                    when=self.clock(),
                    creator=self.config.creator,
                    prefix=self.config.file_prefix,
                    track_name=self.config.track_name,
                )
                # Exported; points are only kept when the write failed
                self.path_store.clear()
            finally:
                self.keep_alive.release()
                self._state = SessionState.IDLE
                self._started_at = None

            if result.nothing_to_export:
                logger.info("Tracking stopped, no points recorded")
            else:
                logger.info(f"Tracking stopped, {result.point_count} points saved to {result.path}")
            return result

    def _stop_feeds(self) -> None:
        try:
            self.location_feed.stop()
        finally:
            self.sensor_feed.stop()

    def _teardown(self) -> None:
        try:
            self._stop_feeds()
        finally:
            self.keep_alive.release()
            self._started_at = None
