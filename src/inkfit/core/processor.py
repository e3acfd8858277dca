"""Batch fitting of many strokes.

The editor buffers freehand strokes and fits them in one go. Each stroke is
independent, so they are fanned out to worker processes with
ProcessPoolExecutor.

Key components:
- fit_stroke: Top-level picklable function for parallel execution
- StrokeProcessor: Orchestrates a batch and collects statistics
"""

import time
import traceback
from collections.abc import Callable, Sequence
from concurrent.futures import Future, ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any

import structlog

from inkfit.config import FitConfig, InkfitSettings
from inkfit.core.fitter import CurveFitter
from inkfit.domain import BezierCurve, Point
from inkfit.utils import FitStats, ProcessingLogger, configure_logging


def fit_stroke(points_list: list[list[float]], config_dict: dict[str, Any]) -> dict[str, Any]:
    """Fit a single stroke.

    Top-level function designed to be picklable for use with ProcessPoolExecutor.

    Args:
        points_list: Stroke points as [x, y] pairs
        config_dict: Serialized fit configuration

    Returns:
        Dictionary containing either:
        - Success: {"curves": [...], "point_count": int, "splits": int,
          "reparameterizations": int, "max_error": float, "duration_ms": float}
        - Error: {"error": str, "error_type": str, "traceback": str, "duration_ms": float}
    """
    start_time = time.time()

    try:
        points = [Point(float(x), float(y)) for x, y in points_list]
        fitter = CurveFitter(FitConfig(**config_dict))
        result = fitter.fit(points)

        duration_ms = (time.time() - start_time) * 1000
        return {**result.to_dict(), "duration_ms": duration_ms}

    except Exception as e:
        # Capture full traceback for debugging
        duration_ms = (time.time() - start_time) * 1000
        return {
            "error": str(e),
            "error_type": type(e).__name__,
            "traceback": traceback.format_exc(),
            "duration_ms": duration_ms,
        }


@dataclass
class BatchResult:
    """Curves for every stroke of a batch, in submission order.

    A stroke that failed has None in its slot; a stroke too small to fit has
    an empty list.
    """

    curves: list[list[BezierCurve] | None] = field(default_factory=list)
    stats: FitStats = field(default_factory=FitStats)

    def all_curves(self) -> list[BezierCurve]:
        """Every fitted curve of the batch, stroke by stroke."""
        return [curve for stroke in self.curves if stroke for curve in stroke]


class StrokeProcessor:
    """Fits batches of strokes, in parallel when it pays off.

    Example:
        processor = StrokeProcessor(InkfitSettings())
        batch = processor.process(strokes, max_workers=4)
        print(batch.stats.curves_produced)
    """

    def __init__(
        self,
        config: InkfitSettings,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        """Initialize the processor.

        Args:
            config: Settings holding the fit, processing and logging config
            logger: Logger to use; configured from settings when omitted
        """
        self.config = config
        if logger is None:
            logger = configure_logging(
                log_file=config.logging.log_file,
                console_level=config.logging.log_level,
                file_level=config.logging.file_log_level,
            )
        self.logger = logger
        self.processing_logger = ProcessingLogger(self.logger)

    def process(
        self,
        strokes: Sequence[Sequence[Point]],
        max_workers: int | None = None,
        progress_callback: Callable[[int, int, int, bool], None] | None = None,
    ) -> BatchResult:
        """Fit every stroke of a batch.

        Args:
            strokes: Point sequences, one per stroke
            max_workers: Maximum worker processes (None = config default,
                1 = fit in this process)
            progress_callback: Optional callback(completed, total, stroke_index, success)

        Returns:
            BatchResult with curves per stroke and statistics
        """
        self.processing_logger = ProcessingLogger(self.logger)
        stats = self.processing_logger.stats
        stats.start_time = time.time()
        stats.stroke_count = len(strokes)

        if max_workers is None:
            max_workers = self.config.processing.max_workers

        config_dict = self.config.fit.model_dump()
        tasks = [[[p.x, p.y] for p in stroke] for stroke in strokes]
        curves: list[list[BezierCurve] | None] = [None] * len(tasks)

        self.logger.info(
            "Starting batch fit",
            stroke_count=len(tasks),
            max_workers=max_workers,
            error_tolerance=self.config.fit.error_tolerance,
        )

        total = len(tasks)
        completed = 0

        if max_workers == 1:
            for index, points_list in enumerate(tasks):
                self.processing_logger.log_stroke_start(index, len(points_list))
                success = self._collect(index, fit_stroke(points_list, config_dict), curves)
                completed += 1
                if progress_callback is not None:
                    progress_callback(completed, total, index, success)
        elif tasks:
            pending_futures: dict[Future[dict[str, Any]], int] = {}
            with ProcessPoolExecutor(max_workers=max_workers) as executor:
                for index, points_list in enumerate(tasks):
                    self.processing_logger.log_stroke_start(index, len(points_list))
                    future = executor.submit(fit_stroke, points_list, config_dict)
                    pending_futures[future] = index

                for future in as_completed(pending_futures):
                    index = pending_futures.pop(future)
                    try:
                        success = self._collect(index, future.result(), curves)
                    except Exception as e:
                        # Executor-level error (e.g. a worker died)
                        self.processing_logger.log_stroke_error(
                            stroke_index=index,
                            error=e,
                            traceback=traceback.format_exc(),
                        )
                        success = False

                    completed += 1
                    if progress_callback is not None:
                        progress_callback(completed, total, index, success)

        stats.end_time = time.time()

        self.logger.info(
            "Batch fit complete",
            fitted=stats.fitted_count,
            skipped=stats.skipped_count,
            errors=stats.error_count,
            curves=stats.curves_produced,
            duration_seconds=round(stats.duration_seconds, 2),
        )

        return BatchResult(curves=curves, stats=stats)

    def _collect(
        self,
        index: int,
        result: dict[str, Any],
        curves: list[list[BezierCurve] | None],
    ) -> bool:
        """Record one worker result; returns True on success."""
        if "error" in result:
            self.processing_logger.log_stroke_error(
                stroke_index=index,
                error=Exception(result["error"]),
                traceback=result.get("traceback"),
            )
            return False

        fitted = [BezierCurve.from_dict(c) for c in result["curves"]]
        curves[index] = fitted
        if not fitted:
            self.processing_logger.log_stroke_skipped(
                index, f"{result['point_count']} distinct points"
            )
            return True

        self.processing_logger.log_stroke_complete(
            stroke_index=index,
            point_count=result["point_count"],
            curve_count=len(fitted),
            duration_ms=result.get("duration_ms", 0.0),
        )
        return True
