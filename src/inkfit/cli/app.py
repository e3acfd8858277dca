"""CLI application entry point for inkfit.

This module provides a developer CLI using Typer. It reads strokes from a
JSON file and either prints the fitted curves or renders a terminal preview.
"""

import math
from pathlib import Path
from typing import Annotated

import typer

from inkfit import __version__
from inkfit.cli.output import (
    console,
    create_progress,
    print_curve_table,
    print_error,
    print_fit_summary,
    print_header,
    print_input_info,
    print_preview,
    print_step,
)
from inkfit.config import FitConfig, InkfitSettings, LoggingConfig, ProcessingConfig
from inkfit.core import CurveFitter, Rasterizer, StrokeProcessor, polygonify
from inkfit.domain import BezierCurve, Brush, PixelBuffer, Point, PolygonMode, colors
from inkfit.exceptions import InkfitError, InputFileError
from inkfit.io import StrokeReader

# Create the Typer app
app = typer.Typer(
    name="inkfit",
    help="Fit freehand strokes with cubic Bezier curves and rasterize them.",
    add_completion=False,
    no_args_is_help=True,
)

# Blank pixels kept around the preview drawing
PREVIEW_MARGIN = 1


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]inkfit[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Fit freehand strokes with cubic Bezier curves and rasterize them."""


def _load_strokes(input_file: Path, quiet: bool) -> list[list[Point]]:
    if not quiet:
        print_step("Reading strokes")
    reader = StrokeReader(input_file)
    strokes = reader.load()
    if not quiet:
        print_input_info(str(input_file), len(strokes), reader.point_count)
    return strokes


@app.command()
def fit(
    input_file: Annotated[
        Path,
        typer.Argument(
            help="JSON file with [x, y] points (one stroke or a list of strokes)",
            show_default=False,
        ),
    ],
    error: Annotated[
        float,
        typer.Option(
            "--error",
            "-e",
            help="Maximum squared distance from a point to its curve",
            min=0.0,
        ),
    ] = 4.0,
    max_iterations: Annotated[
        int,
        typer.Option(
            "--max-iterations",
            help="Newton-Raphson rounds before splitting",
            min=0,
            max=32,
        ),
    ] = 4,
    workers: Annotated[
        int | None,
        typer.Option(
            "--workers",
            "-j",
            help="Number of parallel workers (default: auto)",
            min=1,
        ),
    ] = None,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Write detailed logs to file",
        ),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            help="Logging level (DEBUG|INFO|WARNING|ERROR)",
        ),
    ] = "WARNING",
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Print only the curve table",
        ),
    ] = False,
) -> None:
    """Fit every stroke in a file and print the resulting curves.

    Example:
        inkfit fit strokes.json --error 2.0
    """
    if not quiet:
        print_header(__version__)

    settings = InkfitSettings(
        fit=FitConfig(error_tolerance=error, max_iterations=max_iterations),
        processing=ProcessingConfig(max_workers=workers),
        logging=LoggingConfig(
            log_file=log_file,
            log_level=log_level if not quiet else "WARNING",
        ),
    )

    try:
        strokes = _load_strokes(input_file, quiet)

        if not quiet:
            print_step("Fitting")

        processor = StrokeProcessor(settings)
        if not quiet and strokes:
            with create_progress() as progress:
                task_id = progress.add_task(f"Fitting {len(strokes)} strokes", total=len(strokes))

                def update_progress(completed: int, *_: object) -> None:
                    progress.update(task_id, completed=completed)

                batch = processor.process(
                    strokes, max_workers=workers, progress_callback=update_progress
                )
        else:
            batch = processor.process(strokes, max_workers=workers)

        print_curve_table(batch.curves)
        if not quiet:
            print_fit_summary(batch.stats)

        if batch.stats.error_count:
            raise typer.Exit(code=1)

    except InputFileError as e:
        print_error(f"Could not read strokes: {e.reason}")
        raise typer.Exit(code=1)
    except InkfitError as e:
        print_error(str(e))
        raise typer.Exit(code=1)


@app.command()
def preview(
    input_file: Annotated[
        Path,
        typer.Argument(
            help="JSON file with [x, y] points (one stroke or a list of strokes)",
            show_default=False,
        ),
    ],
    error: Annotated[
        float,
        typer.Option(
            "--error",
            "-e",
            help="Maximum squared distance from a point to its curve",
            min=0.0,
        ),
    ] = 4.0,
    width: Annotated[
        int,
        typer.Option(
            "--width",
            "-w",
            help="Preview width in characters",
            min=8,
            max=400,
        ),
    ] = 64,
    brush_width: Annotated[
        int,
        typer.Option(
            "--brush-width",
            "-b",
            help="Stroke width in preview pixels (0 and 1 are thin)",
            min=0,
        ),
    ] = 0,
    fill: Annotated[
        bool,
        typer.Option(
            "--fill",
            help="Close each stroke into a polygon and fill it",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Print only the preview",
        ),
    ] = False,
) -> None:
    """Fit strokes and draw them as a terminal preview.

    Example:
        inkfit preview strokes.json --width 80 --fill
    """
    if not quiet:
        print_header(__version__)

    try:
        strokes = _load_strokes(input_file, quiet)

        fitter = CurveFitter(FitConfig(error_tolerance=error))
        fitted = [fitter.fit(stroke).curves for stroke in strokes]
        all_curves = [curve for curves in fitted for curve in curves]
        if not all_curves:
            print_error("Nothing to draw", details="No stroke has two distinct points.")
            raise typer.Exit(code=1)

        scale, offset, size = _preview_transform(all_curves, width)
        buffer = PixelBuffer(*size)
        rasterizer = Rasterizer()
        brush = Brush(colors.BLACK, brush_width)

        if not quiet:
            print_step("Rendering")

        for curves in fitted:
            placed = [_place(curve, scale, offset) for curve in curves]
            if fill and placed:
                rasterizer.rasterize(buffer, polygonify(placed, PolygonMode.FILL), brush)
            else:
                for curve in placed:
                    rasterizer.rasterize(buffer, curve, brush)

        print_preview(buffer.painted_mask())

    except InputFileError as e:
        print_error(f"Could not read strokes: {e.reason}")
        raise typer.Exit(code=1)
    except InkfitError as e:
        print_error(str(e))
        raise typer.Exit(code=1)


def _preview_transform(
    curves: list[BezierCurve], width: int
) -> tuple[float, Point, tuple[int, int]]:
    """Scale and offset that fit all control points into the preview width.

    Returns:
        Tuple of (scale, offset, (buffer_width, buffer_height))
    """
    xs = [p.x for curve in curves for p in curve.points()]
    ys = [p.y for curve in curves for p in curve.points()]
    min_x, min_y = min(xs), min(ys)
    span_x = max(xs) - min_x
    span_y = max(ys) - min_y

    drawable = width - 1 - 2 * PREVIEW_MARGIN
    span = max(span_x, span_y)
    scale = drawable / span if span > 0 else 1.0

    height = math.ceil(span_y * scale) + 1 + 2 * PREVIEW_MARGIN
    offset = Point(PREVIEW_MARGIN - min_x * scale, PREVIEW_MARGIN - min_y * scale)
    return scale, offset, (width, height)


def _place(curve: BezierCurve, scale: float, offset: Point) -> BezierCurve:
    return BezierCurve(tuple(p * scale + offset for p in curve.points()))  # type: ignore[arg-type]


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
