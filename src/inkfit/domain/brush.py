"""Solid colors and brushes.

A brush pairs a solid RGB color with an integer stroke width. Width 0 is the
thinnest possible line and is what the editor uses for selection outlines.
"""

import math
from dataclasses import dataclass, replace
from typing import Any

from inkfit.exceptions import BrushError

_U16_MAX = 0xFFFF


@dataclass(frozen=True, slots=True)
class Color:
    """A three-float solid color.

    Attributes:
        r: Red channel in [0, 1]
        g: Green channel in [0, 1]
        b: Blue channel in [0, 1]
    """

    r: float
    g: float
    b: float

    def __post_init__(self) -> None:
        for name in ("r", "g", "b"):
            value = getattr(self, name)
            if math.isnan(value) or not 0.0 <= value <= 1.0:
                raise BrushError(f"color channel {name}={value!r} is not in [0, 1]")

    def to_rgba16(self) -> tuple[int, int, int, int]:
        """Convert to a fully opaque 16-bit RGBA sample.

        Returns:
            Tuple of (r, g, b, a) integers in [0, 65535]
        """
        return (
            int(self.r * _U16_MAX),
            int(self.g * _U16_MAX),
            int(self.b * _U16_MAX),
            _U16_MAX,
        )

    def to_dict(self) -> dict[str, Any]:
        return {"rgb": [self.r, self.g, self.b]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Color":
        r, g, b = data["rgb"]
        return cls(r, g, b)


class colors:  # noqa: N801
    """Named palette."""

    BLACK = Color(0.0, 0.0, 0.0)
    WHITE = Color(1.0, 1.0, 1.0)
    RED = Color(1.0, 0.0, 0.0)
    BLUE = Color(0.0, 0.0, 1.0)


@dataclass(frozen=True, slots=True)
class Brush:
    """A solid brush.

    Attributes:
        color: Stroke color
        width: Stroke width in pixels; 0 and 1 draw single-pixel lines,
            anything larger stamps a disc of that radius
    """

    color: Color
    width: int = 1

    def __post_init__(self) -> None:
        if isinstance(self.width, bool) or not isinstance(self.width, int):
            raise BrushError(f"width must be an integer, got {self.width!r}")
        if self.width < 0:
            raise BrushError(f"width must be >= 0, got {self.width}")

    def with_color(self, color: Color) -> "Brush":
        return replace(self, color=color)

    def with_width(self, width: int) -> "Brush":
        return replace(self, width=width)

    def to_dict(self) -> dict[str, Any]:
        return {"color": self.color.to_dict(), "width": self.width}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Brush":
        return cls(color=Color.from_dict(data["color"]), width=data["width"])


# Brush the editor uses for strokes that are still being drawn
BUFFERED_BRUSH = Brush(colors.RED, 3)

# Brush for highlighting selected items
SELECTION_BRUSH = Brush(colors.BLUE, 0)
