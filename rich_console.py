"""
Rich console configuration for the MotoTrack recorder.

Provides terminal output with progress bars, panels, and styled logging.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.theme import Theme
from rich.panel import Panel
from rich.table import Table
from rich.progress import (
    Progress,
    SpinnerColumn,
    TextColumn,
    BarColumn,
    TaskProgressColumn,
    TimeElapsedColumn,
    MofNCompleteColumn,
)

from tracking.data_models import ExportResult, TrackerConfig, TrackPoint

MOTO_THEME = Theme({
    "info": "cyan",
    "warning": "yellow",
    "error": "bold red",
    "success": "bold green",
    "highlight": "bold magenta",
    "muted": "dim",
    "gps": "green",
    "accel": "bold blue",
})

# Global console instance
console = Console(theme=MOTO_THEME)


def setup_rich_logging(verbose: bool = False) -> None:
    """
    Configure logging to use Rich handler.

    Args:
        verbose: Enable DEBUG level logging with full details
    """
    level = logging.DEBUG if verbose else logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[
            RichHandler(
                console=console,
                show_time=verbose,
                show_path=verbose,
                rich_tracebacks=True,
                tracebacks_show_locals=verbose,
                markup=False,
            )
        ],
        force=True,  # Override any existing configuration
    )


def create_replay_progress() -> Progress:
    """
    Create a progress bar for replaying recorded feed events.

    Returns:
        Configured Progress instance
    """
    return Progress(
        SpinnerColumn("dots"),
        TextColumn("[bold blue]{task.description}"),
        BarColumn(bar_width=40, style="cyan", complete_style="green"),
        TaskProgressColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )


def format_track_point(point: TrackPoint) -> str:
    """
    Format a track point as a single styled line.

    Args:
        point: Recorded track point

    Returns:
        Rich markup string
    """
    line = (
        f"[gps]{point.latitude:.6f}, {point.longitude:.6f}[/] "
        f"[muted]ele {point.elevation:.1f} m  {point.timestamp:%H:%M:%S}[/]"
    )
    if point.accel is not None:
        line += f"  [accel]a=({point.accel.x:.2f}, {point.accel.y:.2f}, {point.accel.z:.2f})[/]"
    return line


def print_track_point(point: TrackPoint) -> None:
    """Print a newly recorded track point (point channel listener)."""
    console.print(format_track_point(point))


def print_banner(version: str = "1.0.0") -> None:
    """
    Print a styled startup banner.

    Args:
        version: Version string to display
    """
    console.print("[bold cyan]MotoTrack[/] [dim]GPS + accelerometer track recorder[/]")
    console.print(f"[muted]Version {version}[/]\n")


def print_config_summary(config: TrackerConfig, events_file: str, event_count: int) -> None:
    """
    Print a styled configuration summary panel.

    Args:
        config: Tracker configuration in use
        events_file: Path of the replayed events file
        event_count: Number of events to replay
    """
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Key", style="dim")
    table.add_column("Value", style="bold")

    table.add_row("Events", f"[highlight]{event_count}[/] from {events_file}")
    table.add_row("Export Dir", f"[green]{config.export_dir}[/]")
    table.add_row("Creator", config.creator)
    request = config.location_request
    table.add_row(
        "Location Request",
        f"every {request.interval_ms} ms, min {request.min_update_distance_m:g} m, "
        f"{'high' if request.high_accuracy else 'balanced'} accuracy",
    )

    panel = Panel(
        table,
        title="[bold]Configuration[/]",
        border_style="cyan",
        padding=(1, 2),
    )
    console.print(panel)
    console.print()


def print_export_result(result: ExportResult, discarded: int = 0) -> None:
    """
    Print a styled summary of the stop/export outcome.

    Args:
        result: Export result returned by stopping the session
        discarded: Number of fixes that were not recorded
    """
    if result.nothing_to_export:
        console.print("\n[warning]No points recorded, nothing exported.[/]")
        return

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Metric", style="dim")
    table.add_column("Value", style="bold green")

    table.add_row("Track Points", f"{result.point_count:,}")
    if discarded:
        table.add_row("Discarded Fixes", f"{discarded:,}")
    table.add_row("Output", result.path)

    panel = Panel(
        table,
        title="[bold green]Complete[/]",
        border_style="green",
        padding=(1, 2),
    )
    console.print()
    console.print(panel)


def print_error(message: str, hint: Optional[str] = None) -> None:
    """
    Print a styled error message.

    Args:
        message: Error message
        hint: Optional hint for resolution
    """
    console.print(f"\n[error]Error:[/] {escape(message)}")
    if hint:
        console.print(f"[muted]Hint: {escape(hint)}[/]")
