"""Configuration management for inkfit.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- FitConfig: Curve fitting settings
- RasterConfig: Flattening and scanline fill settings
- ProcessingConfig: Batch fitting settings
- LoggingConfig: Logging settings
- InkfitSettings: Main application settings
"""

from inkfit.config.settings import (
    FitConfig,
    InkfitSettings,
    LoggingConfig,
    ProcessingConfig,
    RasterConfig,
    get_default_settings,
)

__all__ = [
    "FitConfig",
    "InkfitSettings",
    "LoggingConfig",
    "ProcessingConfig",
    "RasterConfig",
    "get_default_settings",
]
