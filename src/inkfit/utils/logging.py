"""Logging utilities for inkfit."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import structlog

_HANDLER_MARKER = "_inkfit_handler"


@dataclass
class FitStats:
    """Statistics from a batch fitting run."""

    stroke_count: int = 0
    fitted_count: int = 0
    skipped_count: int = 0
    error_count: int = 0
    curves_produced: int = 0
    points_consumed: int = 0
    errors: list[tuple[int, str]] = field(default_factory=list)
    stroke_timings_ms: list[float] = field(default_factory=list)
    start_time: float | None = None
    end_time: float | None = None

    @property
    def duration_seconds(self) -> float:
        """Calculate processing duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0

    @property
    def points_per_curve(self) -> float:
        """Average number of input points summarized by one curve."""
        if self.curves_produced == 0:
            return 0.0
        return self.points_consumed / self.curves_produced


def _tag(handler: logging.Handler) -> logging.Handler:
    setattr(handler, _HANDLER_MARKER, True)
    return handler


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "WARNING",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    Calling this again replaces the handlers installed by the previous call.

    Args:
        log_file: Path to log file (no file output if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output except errors

    Returns:
        Configured structlog logger
    """
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            root_logger.removeHandler(handler)
            handler.close()
    root_logger.setLevel(logging.DEBUG)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(getattr(logging, file_level.upper()))
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )
        root_logger.addHandler(_tag(file_handler))

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.ERROR if quiet else getattr(logging, console_level.upper()))
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(_tag(console_handler))

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("inkfit")
    logger.info(
        "Logging initialized",
        log_file=str(log_file) if log_file else None,
        level=console_level,
    )

    return logger


class ProcessingLogger:
    """Logger for tracking batch fitting progress and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger) -> None:
        self._logger = logger
        self._stats = FitStats()

    def log_stroke_start(self, stroke_index: int, point_count: int) -> None:
        """Log start of stroke fitting."""
        self._logger.debug("Fitting stroke", stroke=stroke_index, points=point_count)

    def log_stroke_complete(
        self,
        stroke_index: int,
        point_count: int,
        curve_count: int,
        duration_ms: float,
    ) -> None:
        """Log successful stroke fit."""
        self._logger.info(
            "Stroke fitted",
            stroke=stroke_index,
            points=point_count,
            curves=curve_count,
            duration_ms=round(duration_ms, 2),
        )
        self._stats.fitted_count += 1
        self._stats.curves_produced += curve_count
        self._stats.points_consumed += point_count
        self._stats.stroke_timings_ms.append(duration_ms)

    def log_stroke_skipped(self, stroke_index: int, reason: str) -> None:
        """Log skipped stroke."""
        self._logger.debug("Stroke skipped", stroke=stroke_index, reason=reason)
        self._stats.skipped_count += 1

    def log_stroke_error(
        self,
        stroke_index: int,
        error: Exception,
        traceback: str | None = None,
    ) -> None:
        """Log stroke fitting error."""
        self._logger.error(
            "Stroke fitting failed",
            stroke=stroke_index,
            error=str(error),
            error_type=type(error).__name__,
            traceback=traceback,
        )
        self._stats.error_count += 1
        self._stats.errors.append((stroke_index, str(error)))

    @property
    def stats(self) -> FitStats:
        """Get current fitting statistics."""
        return self._stats
