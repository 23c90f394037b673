"""
Exceptions raised by the tracking core.

All of them surface synchronously to the caller issuing the command;
nothing here is retried automatically.
"""

from typing import Optional


class TrackingError(Exception):
    """Base class for tracking core errors."""


class PermissionDeniedError(TrackingError):
    """Start was requested without location permission."""

    def __init__(self, message: str = "Location permission not granted"):
        super().__init__(message)


class ExportWriteError(TrackingError):
    """
    The GPX document could not be written.

    Attributes:
        path: Path the export attempted to write
        cause: Underlying OS error, if any
    """

    def __init__(self, path: str, cause: Optional[BaseException] = None):
        self.path = path
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Failed to write GPX file {path}{detail}")
