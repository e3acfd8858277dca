"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with progress bars, tables, and formatted messages.
"""

import numpy as np
from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table
from rich.text import Text

from inkfit.domain import BezierCurve
from inkfit.utils import FitStats

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_DOT = "·"  # Separator/secondary info


def create_progress() -> Progress:
    """Create a rich progress bar for stroke fitting.

    Returns:
        Configured Progress instance with bar and time elapsed.
    """
    return Progress(
        TextColumn("  "),
        BarColumn(bar_width=40, complete_style="green", finished_style="green"),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=False,
    )


def print_header(version: str) -> None:
    """Print application header.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]inkfit[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator.

    Args:
        message: Step description message
    """
    console.print(f"\n{SYM_STEP} {message}")


def print_input_info(path: str, stroke_count: int, point_count: int) -> None:
    """Print input file information.

    Args:
        path: Path to the stroke file
        stroke_count: Number of strokes read
        point_count: Total number of points across strokes
    """
    # Use Text to safely handle paths with special characters
    line = Text("  ")
    line.append(path)
    console.print(line)
    console.print(f"  {stroke_count:,} strokes {SYM_DOT} {point_count:,} points")


def _fmt(value: float) -> str:
    return f"{value:.2f}"


def print_curve_table(strokes: list[list[BezierCurve] | None]) -> None:
    """Print fitted curves as a table, one row per curve.

    Args:
        strokes: Curves per stroke; None marks a stroke that failed
    """
    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("stroke", justify="right")
    table.add_column("curve", justify="right")
    table.add_column("P0")
    table.add_column("P1")
    table.add_column("P2")
    table.add_column("P3")

    for stroke_index, curves in enumerate(strokes):
        if curves is None:
            table.add_row(str(stroke_index), "-", f"[red]{SYM_ERR} failed[/red]", "", "", "")
            continue
        for curve_index, curve in enumerate(curves):
            table.add_row(
                str(stroke_index),
                str(curve_index),
                *(f"({_fmt(p.x)}, {_fmt(p.y)})" for p in curve.points()),
            )

    console.print(table)


def _format_time(seconds: float) -> str:
    """Format seconds into human-readable time string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        mins = int(seconds // 60)
        secs = seconds % 60
        return f"{mins}m {secs:.1f}s"


def print_fit_summary(stats: FitStats) -> None:
    """Print success message with batch summary.

    Args:
        stats: Statistics from the batch run
    """
    time_str = _format_time(stats.duration_seconds)
    console.print(f"\n[bold green]{SYM_OK} Complete[/bold green] in {time_str}")

    error_style = "red" if stats.error_count > 0 else "green"
    console.print(
        f"  {stats.fitted_count} strokes {SYM_DOT} {stats.curves_produced} curves {SYM_DOT} "
        f"{stats.skipped_count} skipped {SYM_DOT} "
        f"[{error_style}]{stats.error_count} errors[/{error_style}]"
    )
    if stats.curves_produced:
        console.print(f"  {stats.points_per_curve:.1f} points per curve")

    if stats.stroke_timings_ms:
        avg = sum(stats.stroke_timings_ms) / len(stats.stroke_timings_ms)
        console.print(
            f"  {avg:.1f}ms avg ({min(stats.stroke_timings_ms):.1f}-"
            f"{max(stats.stroke_timings_ms):.1f}ms range)"
        )


def mask_to_halfblock(mask: np.ndarray) -> str:
    """Render a boolean mask with half-block characters.

    Each character covers two pixel rows, so the preview keeps a roughly
    square aspect ratio in a terminal.
    """
    rows, cols = mask.shape
    lines = []
    for r in range(0, rows, 2):
        chars = []
        for c in range(cols):
            top = bool(mask[r, c])
            bottom = bool(mask[r + 1, c]) if r + 1 < rows else False
            if top and bottom:
                chars.append("█")
            elif top:
                chars.append("▀")
            elif bottom:
                chars.append("▄")
            else:
                chars.append(" ")
        lines.append("".join(chars).rstrip())
    return "\n".join(lines)


def print_preview(mask: np.ndarray) -> None:
    """Print a rendered pixel mask.

    Args:
        mask: Boolean (height, width) array of painted pixels
    """
    console.print(Text(mask_to_halfblock(mask)))


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")
