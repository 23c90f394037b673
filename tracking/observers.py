"""
In-process publish channel for newly recorded track points.

Replaces a platform broadcast with a callback registry: every appended
point is delivered immediately, in append order, to whoever is subscribed
at that moment. Delivery is fire-and-forget.
"""

import itertools
import logging
import threading
from typing import Callable, Dict, Iterator

from tracking.data_models import TrackPoint

logger = logging.getLogger(__name__)

PointListener = Callable[[TrackPoint], None]


class PointChannel:
    """
    Registry of track point listeners.

    Listeners are called synchronously in registration order. A listener
    that raises is logged and skipped; it never blocks recording or the
    remaining listeners. Listeners run while the aggregator holds its
    record lock, so they must return quickly: a slow listener (e.g. a
    redraw) delays every concurrent fix. Hand heavy work off to another
    thread.

    Example:
        channel = PointChannel()
        token = channel.subscribe(map_view.add_point)
        channel.publish(point)
        channel.unsubscribe(token)
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._listeners: Dict[int, PointListener] = {}
        self._ids = itertools.count(1)

    def subscribe(self, listener: PointListener) -> int:
        """
        Register a listener.

        Args:
            listener: Callable receiving each published TrackPoint

        Returns:
            Token to pass to unsubscribe()
        """
        with self._lock:
            token = next(self._ids)
            self._listeners[token] = listener
        return token

    def unsubscribe(self, token: int) -> bool:
        """
        Remove a listener.

        Args:
            token: Token returned by subscribe()

        Returns:
            True if a listener was removed, False if the token was unknown
        """
        with self._lock:
            return self._listeners.pop(token, None) is not None

    def publish(self, point: TrackPoint) -> None:
        """Deliver a point to every current listener."""
        with self._lock:
            listeners = list(self._listeners.values())

        for listener in listeners:
            try:
                listener(point)
            except Exception:
                logger.exception(f"Track point listener {listener!r} failed")

    def __len__(self) -> int:
        with self._lock:
            return len(self._listeners)

    def __iter__(self) -> Iterator[PointListener]:
        with self._lock:
            listeners = list(self._listeners.values())
        return iter(listeners)
