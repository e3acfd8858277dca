"""Command-line interface for inkfit.

This module provides a developer CLI using Typer with rich output for
user-friendly feedback and progress reporting.

Key features:
- Batch curve fitting with a progress bar
- Terminal previews of fitted and filled strokes
- Detailed error reporting
"""

from inkfit.cli.app import cli, main

__all__ = ["cli", "main"]
