"""Stroke reader for the developer CLI.

Strokes are read from JSON. Three shapes are accepted:

- A single stroke: ``[[x, y], [x, y], ...]``
- Several strokes: ``[[[x, y], ...], [[x, y], ...]]``
- An object with a ``strokes`` key holding several strokes
"""

import json
import math
from pathlib import Path
from typing import Any

from inkfit.domain import Point
from inkfit.exceptions import InputFileError


class StrokeReader:
    """Loads freehand strokes from a JSON file.

    Example:
        reader = StrokeReader(Path("strokes.json"))
        for stroke in reader.load():
            print(len(stroke))
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._strokes: list[list[Point]] | None = None

    def load(self) -> list[list[Point]]:
        """Read and validate the file.

        Returns:
            Strokes as lists of points

        Raises:
            InputFileError: If the file is missing, not JSON, or malformed
        """
        if not self._path.exists():
            raise InputFileError(str(self._path), "file not found")

        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise InputFileError(str(self._path), str(e)) from e

        if isinstance(data, dict):
            if "strokes" not in data:
                raise InputFileError(str(self._path), "object has no 'strokes' key")
            data = data["strokes"]

        if not isinstance(data, list):
            raise InputFileError(str(self._path), "expected a JSON array")

        raw_strokes = [data] if data and _is_pair(data[0]) else data
        self._strokes = [self._parse_stroke(i, raw) for i, raw in enumerate(raw_strokes)]
        return self._strokes

    @property
    def strokes(self) -> list[list[Point]]:
        if self._strokes is None:
            raise RuntimeError("Strokes not loaded. Call load() first.")
        return self._strokes

    @property
    def point_count(self) -> int:
        return sum(len(stroke) for stroke in self.strokes)

    def _parse_stroke(self, index: int, raw: Any) -> list[Point]:
        if not isinstance(raw, list):
            raise InputFileError(str(self._path), f"stroke {index} is not an array")
        points = []
        for j, pair in enumerate(raw):
            if not _is_pair(pair):
                raise InputFileError(
                    str(self._path), f"stroke {index} point {j} is not an [x, y] pair"
                )
            try:
                x, y = float(pair[0]), float(pair[1])
            except OverflowError:
                raise InputFileError(
                    str(self._path), f"stroke {index} point {j} is out of range"
                ) from None
            if not (math.isfinite(x) and math.isfinite(y)):
                raise InputFileError(
                    str(self._path), f"stroke {index} point {j} is not finite"
                )
            points.append(Point(x, y))
        return points


def _is_pair(value: Any) -> bool:
    return (
        isinstance(value, list)
        and len(value) == 2
        and all(isinstance(c, (int, float)) and not isinstance(c, bool) for c in value)
    )
