"""Configuration settings for inkfit."""

from pathlib import Path

from pydantic import BaseModel, Field


class FitConfig(BaseModel):
    """Configuration for the curve fitter.

    The tolerance is compared against squared pixel distances, so 4.0 allows
    input points to sit up to about two pixels from the fitted curve.
    """

    error_tolerance: float = Field(
        default=4.0,
        ge=0.0,
        description="Maximum squared distance between an input point and its fitted curve",
    )
    max_iterations: int = Field(
        default=4,
        ge=0,
        le=32,
        description="Newton-Raphson reparameterization rounds before splitting",
    )
    collapse_duplicates: bool = Field(
        default=True,
        description="Merge consecutive identical input points before fitting",
    )


class RasterConfig(BaseModel):
    """Configuration for rasterization."""

    flatten_bias: float = Field(
        default=800.0,
        ge=0.0,
        description="Bias added to the squared arc-length bound when flattening curves",
    )
    flatten_divisor: float = Field(
        default=8.0,
        gt=0.0,
        description="Pixels of estimated arc length per flattened segment",
    )
    max_workers: int | None = Field(
        default=None,
        ge=1,
        description="Max scanline fill threads (None = auto)",
    )
    parallel_min_rows: int = Field(
        default=64,
        ge=1,
        description="Polygons spanning fewer rows are filled on the calling thread",
    )


class ProcessingConfig(BaseModel):
    """Configuration for batch stroke fitting."""

    max_workers: int | None = Field(
        default=None,
        description="Max worker processes (None = auto)",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class InkfitSettings(BaseModel):
    """Main application settings."""

    fit: FitConfig = Field(default_factory=FitConfig)
    raster: RasterConfig = Field(default_factory=RasterConfig)
    processing: ProcessingConfig = Field(default_factory=ProcessingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> InkfitSettings:
    """Get default application settings."""
    return InkfitSettings()
