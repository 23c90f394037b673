"""
In-memory path store for the active tracking session.
"""

import threading
from typing import List

from tracking.data_models import TrackPoint


class PathStore:
    """
    Ordered, append-only sequence of track points.

    The store only accepts points while open. Opening clears previous
    points; closing happens under the same lock as append, so once
    close() returns no further point can be added and a snapshot taken
    afterwards is final.

    Usage:
        store = PathStore()
        store.open()
        store.append(point)
        store.close()
        points = store.snapshot()
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._points: List[TrackPoint] = []
        self._open = False

    def open(self) -> None:
        """Clear all points and start accepting appends."""
        with self._lock:
            self._points.clear()
            self._open = True

    def close(self) -> None:
        """Stop accepting appends. Recorded points are kept."""
        with self._lock:
            self._open = False

    def clear(self) -> None:
        with self._lock:
            self._points.clear()

    @property
    def is_open(self) -> bool:
        with self._lock:
            return self._open

    def append(self, point: TrackPoint) -> bool:
        """
        Append a point if the store is open.

        Args:
            point: Track point to record

        Returns:
            True if the point was appended, False if the store is closed
        """
        with self._lock:
            if not self._open:
                return False
            self._points.append(point)
            return True

    def snapshot(self) -> List[TrackPoint]:
        """Return a copy of the recorded points in append order."""
        with self._lock:
            return list(self._points)

    def __len__(self) -> int:
        with self._lock:
            return len(self._points)
