"""Shared pixel buffer.

The rendering shell owns a PixelBuffer and hands it to the rasterizer. The
buffer is a numpy RGBA16 grid guarded by a readers-writer lock:

- read(): shared, read-only view for blitting
- write(): exclusive PixelCanvas for one shape's draw call
- take_dirty(): upgradable read that only upgrades when it clears the flag
"""

from collections.abc import Iterator
from contextlib import contextmanager

import numpy as np

from inkfit.exceptions import PixelBufferError
from inkfit.utils.locking import ReadWriteLock, UpgradeHandle

Rgba16 = tuple[int, int, int, int]

TRANSPARENT: Rgba16 = (0, 0, 0, 0)


class PixelCanvas:
    """Write access to a pixel array, with silent clipping.

    Handed out by ``PixelBuffer.write()``. Rows are independent slices of
    the underlying array, so workers may fill disjoint rows concurrently.
    """

    def __init__(self, pixels: np.ndarray) -> None:
        self._pixels = pixels
        self.height, self.width = pixels.shape[:2]

    @property
    def pixels(self) -> np.ndarray:
        return self._pixels

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def set_pixel(self, x: int, y: int, rgba: Rgba16) -> None:
        if 0 <= x < self.width and 0 <= y < self.height:
            self._pixels[y, x] = rgba

    def hline(self, y: int, x0: int, x1: int, rgba: Rgba16) -> None:
        """Set every pixel of row y between x0 and x1 inclusive."""
        if not 0 <= y < self.height:
            return
        if x0 > x1:
            x0, x1 = x1, x0
        x0 = max(x0, 0)
        x1 = min(x1, self.width - 1)
        if x0 > x1:
            return
        self._pixels[y, x0 : x1 + 1] = rgba


class PixelBuffer:
    """Mutable RGBA16 raster shared between one writer and many readers.

    Attributes:
        width: Width in pixels
        height: Height in pixels
    """

    def __init__(self, width: int, height: int, background: Rgba16 = TRANSPARENT) -> None:
        if width <= 0 or height <= 0:
            raise PixelBufferError(f"Buffer dimensions must be positive, got {width}x{height}")
        self._pixels = np.empty((height, width, 4), dtype=np.uint16)
        self._pixels[:, :] = background
        self._background = background
        self._dirty = True
        self._lock = ReadWriteLock()

    @classmethod
    def from_array(cls, pixels: np.ndarray) -> "PixelBuffer":
        """Wrap an existing (height, width, 4) uint16 array without copying."""
        if pixels.ndim != 3 or pixels.shape[2] != 4 or pixels.dtype != np.uint16:
            raise PixelBufferError(
                f"Expected a (height, width, 4) uint16 array, got {pixels.shape} {pixels.dtype}"
            )
        buffer = cls.__new__(cls)
        buffer._pixels = pixels
        buffer._background = TRANSPARENT
        buffer._dirty = True
        buffer._lock = ReadWriteLock()
        return buffer

    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    @property
    def is_dirty(self) -> bool:
        return self._dirty

    @contextmanager
    def read(self) -> Iterator[np.ndarray]:
        """Hold a shared read lock and yield a read-only view of the pixels."""
        with self._lock.read_locked():
            view = self._pixels.view()
            view.flags.writeable = False
            yield view

    @contextmanager
    def write(self) -> Iterator[PixelCanvas]:
        """Hold the exclusive write lock for one draw pass.

        The buffer is marked dirty when the pass begins.
        """
        with self._lock.write_locked():
            self._dirty = True
            yield PixelCanvas(self._pixels)

    @contextmanager
    def upgradable_read(self) -> Iterator["UpgradableView"]:
        """Hold an upgradable read lock.

        Plain readers keep running until the view is upgraded to a canvas.
        """
        with self._lock.upgradable_locked() as handle:
            yield UpgradableView(self, handle)

    def take_dirty(self) -> bool:
        """Report and clear the dirty flag.

        Consumers call this before blitting and skip the blit when it
        returns False.
        """
        with self.upgradable_read() as view:
            if not view.dirty:
                return False
            view.upgrade()
            self._dirty = False
            return True

    def pixel(self, x: int, y: int) -> Rgba16:
        """Colour of one pixel.

        Raises:
            PixelBufferError: If (x, y) lies outside the buffer
        """
        with self._lock.read_locked():
            if not (0 <= x < self.width and 0 <= y < self.height):
                raise PixelBufferError(
                    f"Pixel ({x}, {y}) is outside the {self.width}x{self.height} buffer"
                )
            r, g, b, a = (int(c) for c in self._pixels[y, x])
            return (r, g, b, a)

    def snapshot(self) -> np.ndarray:
        """Copy of the current pixels."""
        with self._lock.read_locked():
            return self._pixels.copy()

    def count_pixels(self, rgba: Rgba16) -> int:
        """Number of pixels exactly equal to rgba."""
        with self._lock.read_locked():
            return int(np.all(self._pixels == np.asarray(rgba, dtype=np.uint16), axis=2).sum())

    def painted_mask(self) -> np.ndarray:
        """Boolean (height, width) mask of pixels differing from the background."""
        with self._lock.read_locked():
            return np.any(self._pixels != np.asarray(self._background, dtype=np.uint16), axis=2)

    def clear(self, rgba: Rgba16 | None = None) -> None:
        """Fill the whole buffer with rgba (default: the background)."""
        with self._lock.write_locked():
            self._pixels[:, :] = self._background if rgba is None else rgba
            self._dirty = True

    def resize(self, width: int, height: int) -> None:
        """Reallocate to new dimensions, keeping the overlapping region."""
        if width <= 0 or height <= 0:
            raise PixelBufferError(f"Buffer dimensions must be positive, got {width}x{height}")
        with self._lock.write_locked():
            resized = np.empty((height, width, 4), dtype=np.uint16)
            resized[:, :] = self._background
            h = min(height, self._pixels.shape[0])
            w = min(width, self._pixels.shape[1])
            resized[:h, :w] = self._pixels[:h, :w]
            self._pixels = resized
            self._dirty = True

    def __repr__(self) -> str:
        return f"PixelBuffer({self.width}x{self.height}, dirty={self._dirty})"


class UpgradableView:
    """Read access that can be promoted to write access in place."""

    def __init__(self, buffer: PixelBuffer, handle: UpgradeHandle) -> None:
        self._buffer = buffer
        self._handle = handle

    @property
    def dirty(self) -> bool:
        return self._buffer._dirty

    @property
    def pixels(self) -> np.ndarray:
        view = self._buffer._pixels.view()
        view.flags.writeable = self._handle.upgraded
        return view

    @property
    def upgraded(self) -> bool:
        return self._handle.upgraded

    def upgrade(self) -> PixelCanvas:
        """Wait for plain readers to drain and return a writable canvas."""
        self._handle.upgrade()
        return PixelCanvas(self._buffer._pixels)
