"""Tests for the command-line interface."""

import json
from pathlib import Path

import numpy as np
import pytest
from typer.testing import CliRunner

from inkfit import __version__
from inkfit.cli.app import app
from inkfit.cli.output import mask_to_halfblock

runner = CliRunner()


@pytest.fixture
def line_file(tmp_path: Path) -> Path:
    """A single straight stroke."""
    path = tmp_path / "line.json"
    path.write_text(json.dumps([[0, 0], [50, 0], [100, 0]]), encoding="utf-8")
    return path


@pytest.fixture
def ring_file(tmp_path: Path) -> Path:
    """A closed circular stroke and a single tap."""
    ring = [[50 + 40 * np.cos(a), 50 + 40 * np.sin(a)] for a in np.linspace(0, 2 * np.pi, 40)]
    path = tmp_path / "ring.json"
    path.write_text(json.dumps({"strokes": [[[float(x), float(y)] for x, y in ring], [[1, 1]]]}))
    return path


class TestVersion:
    """Tests for the version option."""

    def test_version(self):
        """Test that --version prints the version and exits cleanly."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestFitCommand:
    """Tests for the fit command."""

    def test_fit_prints_curves(self, line_file: Path):
        """Test fitting a file in quiet mode."""
        result = runner.invoke(app, ["fit", str(line_file), "-j", "1", "-q"])
        assert result.exit_code == 0
        assert "(0.00, 0.00)" in result.output
        assert "(100.00, 0.00)" in result.output

    def test_fit_with_summary(self, ring_file: Path):
        """Test the full report with a skipped stroke."""
        result = runner.invoke(app, ["fit", str(ring_file), "-j", "1", "--error", "1.0"])
        assert result.exit_code == 0
        assert "Complete" in result.output
        assert "1 skipped" in result.output

    def test_fit_missing_file(self, tmp_path: Path):
        """Test that a missing input exits with an error."""
        result = runner.invoke(app, ["fit", str(tmp_path / "nope.json"), "-q"])
        assert result.exit_code == 1
        assert "Could not read strokes" in result.output

    def test_fit_rejects_negative_error(self, line_file: Path):
        """Test option validation."""
        result = runner.invoke(app, ["fit", str(line_file), "--error", "-1"])
        assert result.exit_code != 0


class TestPreviewCommand:
    """Tests for the preview command."""

    def test_preview_line(self, line_file: Path):
        """Test that a straight stroke renders as a row of half blocks."""
        result = runner.invoke(app, ["preview", str(line_file), "-q", "--width", "20"])
        assert result.exit_code == 0
        assert "▄" * 18 in result.output

    def test_preview_fill(self, ring_file: Path):
        """Test that a filled ring renders full blocks."""
        result = runner.invoke(app, ["preview", str(ring_file), "-q", "--fill", "--width", "24"])
        assert result.exit_code == 0
        assert "█" in result.output

    def test_preview_nothing_to_draw(self, tmp_path: Path):
        """Test that a file without a fittable stroke fails."""
        path = tmp_path / "tap.json"
        path.write_text("[[4, 4]]", encoding="utf-8")
        result = runner.invoke(app, ["preview", str(path), "-q"])
        assert result.exit_code == 1
        assert "Nothing to draw" in result.output


class TestHalfBlock:
    """Tests for terminal rendering of masks."""

    def test_mask_to_halfblock(self):
        """Test the four cell shapes."""
        mask = np.array(
            [
                [True, True, False, False],
                [True, False, True, False],
            ]
        )
        assert mask_to_halfblock(mask) == "█▀▄"

    def test_odd_row_count(self):
        """Test that a trailing single row renders as upper halves."""
        mask = np.array([[False], [False], [True]])
        assert mask_to_halfblock(mask) == "\n▀"
