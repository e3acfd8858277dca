"""Exception hierarchy for inkfit."""


class InkfitError(Exception):
    """Base exception for all inkfit errors."""

    pass


class PreconditionError(InkfitError, ValueError):
    """A caller violated an API precondition.

    Distinct from numerical degeneracies, which the engine resolves with
    deterministic fallbacks and never raises.
    """

    pass


class FitInputError(PreconditionError):
    """Invalid input handed to the curve fitter."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Cannot fit curve: {reason}")


class ParameterRangeError(PreconditionError):
    """Curve parameter outside the closed interval [0, 1]."""

    def __init__(self, t: float) -> None:
        self.t = t
        super().__init__(f"Curve parameter {t!r} is outside [0, 1]")


class CurveDegreeError(PreconditionError):
    """A Bezier curve was built from the wrong number of control points."""

    def __init__(self, count: int) -> None:
        self.count = count
        super().__init__(f"Cubic Bezier curve needs exactly 4 control points, got {count}")


class BrushError(PreconditionError):
    """Invalid brush color or width."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Invalid brush: {reason}")


class PixelBufferError(InkfitError):
    """Errors related to the pixel buffer or its lock."""

    pass


class InputFileError(InkfitError):
    """Error loading a stroke input file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load strokes from '{path}': {reason}")
