#!/usr/bin/env python3
"""
Replay a recorded location/accelerometer event log through a tracking
session and export the result to GPX.

The events file is JSON lines, one event per line:
    {"type": "fix", "lat": 40.4168, "lon": -3.7038, "alt": 650.0, "time_ms": 1736423138000}
    {"type": "accel", "x": 0.1, "y": 0.2, "z": 9.8}
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Union

from pydantic import BaseModel, ValidationError

from constants import DEFAULT_STORAGE_ROOT, GPX_CREATOR, VERSION
from rich_console import (
    console,
    create_replay_progress,
    print_banner,
    print_config_summary,
    print_error,
    print_export_result,
    print_track_point,
    setup_rich_logging,
)
from tracking.data_models import AccelerometerSample, LocationFix, TrackerConfig
from tracking.errors import ExportWriteError, PermissionDeniedError
from tracking.feeds import LoggingKeepAlive, PushLocationFeed, PushSensorFeed
from tracking.session import TrackingSession

FeedEvent = Union[LocationFix, AccelerometerSample]


class ReplayConfig(BaseModel):
    events_file: Path
    tracker: TrackerConfig
    permission_granted: bool = True
    show_points: bool = True
    verbose: bool = False


def parse_event(line: str) -> FeedEvent:
    """
    Parse one JSON line into a feed event.

    Args:
        line: JSON object with a "type" of "fix" or "accel"

    Returns:
        LocationFix or AccelerometerSample

    Raises:
        ValueError: If the line is not valid JSON or has an unknown type
        ValidationError: If field values are out of range
    """
    data = json.loads(line)
    if not isinstance(data, dict):
        raise ValueError("event must be a JSON object")

    event_type = data.get("type")
    if event_type == "fix":
        return LocationFix.from_epoch_millis(
            latitude=data["lat"],
            longitude=data["lon"],
            altitude=data.get("alt", 0.0),
            time_ms=data["time_ms"],
        )
    if event_type == "accel":
        return AccelerometerSample(x=data["x"], y=data["y"], z=data["z"])
    raise ValueError(f"unknown event type: {event_type!r}")


def load_events(path: Union[str, Path]) -> List[FeedEvent]:
    """
    Load all events from a JSON lines file, skipping blank lines.

    Raises:
        ValueError: On the first malformed line, with its line number
    """
    events = []
    with open(path, "r", encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                events.append(parse_event(line))
            except (ValueError, KeyError, TypeError, ValidationError) as e:
                raise ValueError(f"{path}:{line_no}: invalid event ({e})") from e
    return events


def replay_events(
    events: Sequence[FeedEvent],
    location_feed: PushLocationFeed,
    sensor_feed: PushSensorFeed,
    progress=None,
    task_id=None,
) -> int:
    """
    Push events into the feeds in order.

    Args:
        events: Fixes and samples in arrival order
        location_feed: Feed receiving the fixes
        sensor_feed: Feed receiving the samples
        progress: Optional rich Progress to advance per event
        task_id: Progress task to advance

    Returns:
        Number of fixes pushed
    """
    fixes = 0
    for event in events:
        if isinstance(event, LocationFix):
            location_feed.push(event)
            fixes += 1
        else:
            sensor_feed.push(event)
        if progress is not None:
            progress.advance(task_id)
    return fixes


def parse_args(argv: Optional[Sequence[str]] = None) -> ReplayConfig:
    parser = argparse.ArgumentParser(
        description="Replay a location/accelerometer event log and export it as GPX."
    )
    parser.add_argument("events_file", help="JSON lines file of fix/accel events")
    parser.add_argument(
        "--storage-root",
        default=str(DEFAULT_STORAGE_ROOT),
        help="Storage root; GPX files go to its Documents/ subdirectory",
    )
    parser.add_argument("--creator", default=GPX_CREATOR, help="GPX creator attribute")
    parser.add_argument(
        "--deny-permission",
        action="store_true",
        help="Simulate missing location permission",
    )
    parser.add_argument(
        "--quiet-points",
        action="store_true",
        help="Do not print each recorded point",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)

    return ReplayConfig(
        events_file=Path(args.events_file),
        tracker=TrackerConfig(storage_root=Path(args.storage_root), creator=args.creator),
        permission_granted=not args.deny_permission,
        show_points=not args.quiet_points,
        verbose=args.verbose,
    )


def run(config: ReplayConfig) -> int:
    """
    Replay the configured events file through a tracking session.

    Returns:
        Process exit code
    """
    try:
        events = load_events(config.events_file)
    except OSError as e:
        print_error(f"Cannot read {config.events_file}: {e}")
        return 1
    except ValueError as e:
        print_error(str(e), hint="Each line must be a fix or accel JSON object")
        return 1

    print_config_summary(config.tracker, str(config.events_file), len(events))

    location_feed = PushLocationFeed()
    sensor_feed = PushSensorFeed()
    session = TrackingSession(
        location_feed=location_feed,
        sensor_feed=sensor_feed,
        keep_alive=LoggingKeepAlive(),
        permission_check=lambda: config.permission_granted,
        config=config.tracker,
    )
    if config.show_points:
        session.channel.subscribe(print_track_point)

    try:
        session.start()
    except PermissionDeniedError as e:
        print_error(str(e), hint="Grant location permission and start again")
        return 1

    with create_replay_progress() as progress:
        task_id = progress.add_task("Replaying", total=len(events))
        fixes = replay_events(events, location_feed, sensor_feed, progress, task_id)

    try:
        result = session.stop()
    except ExportWriteError as e:
        print_error(str(e), hint="Check that the storage root is writable")
        return 1

    print_export_result(result, discarded=fixes - result.point_count)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    try:
        config = parse_args(argv)
    except ValidationError as e:
        console.print(f"Configuration Error: {e}", markup=False)
        return 1

    setup_rich_logging(config.verbose)
    print_banner(VERSION)
    return run(config)


if __name__ == "__main__":
    sys.exit(main())
