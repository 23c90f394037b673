"""
GPX 1.1 writer for recorded tracks.

Exports a session's track points as a single-track, single-segment GPX
document:
- Standard GPX 1.1 trackpoints (lat, lon, ele, time)
- A <desc> note with the accelerometer axes, when a sample was recorded
"""

import logging
import os
import tempfile
import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from decimal import Decimal
from io import StringIO
from pathlib import Path
from typing import Optional, Sequence, TextIO, Union

from constants import (
    EXPORT_EXTENSION,
    EXPORT_FILE_PREFIX,
    EXPORT_TIMESTAMP_FORMAT,
    GPX_CREATOR,
    GPX_DECLARATION,
    GPX_TIME_FORMAT,
    GPX_TRACK_NAME,
    GPX_VERSION,
    NS_GPX,
)
from tracking.data_models import AccelerometerSample, ExportResult, TrackPoint
from tracking.errors import ExportWriteError

logger = logging.getLogger(__name__)


def _gpx_tag(name: str) -> str:
    return f"{{{NS_GPX}}}{name}"


def write_gpx(
    points: Sequence[TrackPoint],
    output: TextIO,
    creator: str = GPX_CREATOR,
    track_name: str = GPX_TRACK_NAME,
) -> None:
    """
    Write track points to GPX 1.1 format.

    Args:
        points: Track points in recording order
        output: File-like object to write to
        creator: Value of the gpx creator attribute
        track_name: Name of the single <trk>
    """
    # Register the GPX namespace as default to avoid ns0 prefixes
    ET.register_namespace("", NS_GPX)

    gpx = ET.Element(
        _gpx_tag("gpx"),
        attrib={
            "version": GPX_VERSION,
            "creator": creator,
        },
    )

    trk = ET.SubElement(gpx, _gpx_tag("trk"))
    trk_name = ET.SubElement(trk, _gpx_tag("name"))
    trk_name.text = track_name

    trkseg = ET.SubElement(trk, _gpx_tag("trkseg"))

    # One <trkpt> per line between the <trkseg> line and its closing line
    gpx.text = "\n"
    trkseg.text = "\n"

    for point in points:
        trkpt = ET.SubElement(trkseg, _gpx_tag("trkpt"))
        trkpt.tail = "\n"
        trkpt.set("lat", _format_number(point.latitude))
        trkpt.set("lon", _format_number(point.longitude))

        ele = ET.SubElement(trkpt, _gpx_tag("ele"))
        ele.text = _format_number(point.elevation)

        time_elem = ET.SubElement(trkpt, _gpx_tag("time"))
        time_elem.text = _format_time(point.timestamp)

        # Omitted entirely when no sensor sample was recorded
        if point.accel is not None:
            desc = ET.SubElement(trkpt, _gpx_tag("desc"))
            desc.text = _format_accel(point.accel)

    # Write XML with declaration
    tree = ET.ElementTree(gpx)
    output.write(GPX_DECLARATION + "\n")
    tree.write(output, encoding="unicode", xml_declaration=False)
    output.write("\n")


def build_gpx(
    points: Sequence[TrackPoint],
    creator: str = GPX_CREATOR,
    track_name: str = GPX_TRACK_NAME,
) -> str:
    """Render track points as a GPX document string."""
    buffer = StringIO()
    write_gpx(points, buffer, creator=creator, track_name=track_name)
    return buffer.getvalue()


def gpx_filename(when: datetime, prefix: str = EXPORT_FILE_PREFIX) -> str:
    """
    Build the export file name for a given export time.

    Args:
        when: Export time
        prefix: File name prefix

    Returns:
        Name like 'MotoTrack_20260109_114538.gpx'
    """
    return f"{prefix}_{when.strftime(EXPORT_TIMESTAMP_FORMAT)}{EXPORT_EXTENSION}"


def export_gpx(
    points: Sequence[TrackPoint],
    output_dir: Union[str, Path],
    when: Optional[datetime] = None,
    creator: str = GPX_CREATOR,
    prefix: str = EXPORT_FILE_PREFIX,
    track_name: str = GPX_TRACK_NAME,
) -> ExportResult:
    """
    Export track points to a timestamped GPX file.

    The document is written to a temporary file in the destination
    directory and renamed into place, so a failed write never leaves a
    partial .gpx behind. The points are only read.

    Args:
        points: Track points in recording order
        output_dir: Destination directory, created if missing
        when: Export time used in the file name (defaults to now)
        creator: Value of the gpx creator attribute
        prefix: File name prefix
        track_name: Name of the single <trk>

    Returns:
        ExportResult with the file path, or with nothing_to_export set
        when there are no points

    Raises:
        ExportWriteError: If the directory or file cannot be written
    """
    if not points:
        logger.info("No track points recorded, nothing to export")
        return ExportResult(path=None, point_count=0)

    if when is None:
        when = datetime.now()

    output_dir = Path(output_dir)
    output_path = (output_dir / gpx_filename(when, prefix)).absolute()
    content = build_gpx(points, creator=creator, track_name=track_name)

    temp_path = None
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        fd, temp_path = tempfile.mkstemp(
            prefix=f".{output_path.name}.", suffix=".tmp", dir=output_dir
        )
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        # Atomic rename
        os.replace(temp_path, output_path)
    except OSError as e:
        if temp_path is not None and os.path.exists(temp_path):
            os.remove(temp_path)
        logger.error(f"Failed to export GPX to {output_path}: {e}")
        raise ExportWriteError(str(output_path), e) from e

    logger.info(f"Exported {len(points)} track points to {output_path}")
    return ExportResult(path=str(output_path), point_count=len(points))


def _format_number(value: float) -> str:
    """
    Shortest round-trip digits in positional notation, e.g. 1.0, 0.1,
    0.00001 (never 1e-05, which is not a valid xsd:decimal).
    """
    return format(Decimal(repr(float(value))), "f")


def _format_accel(sample: AccelerometerSample) -> str:
    return (
        f"accel x:{_format_number(sample.x)} "
        f"y:{_format_number(sample.y)} "
        f"z:{_format_number(sample.z)}"
    )


def _format_time(dt: datetime) -> str:
    """Format datetime as ISO 8601 UTC string with second precision."""
    # Ensure UTC timezone
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).strftime(GPX_TIME_FORMAT)
