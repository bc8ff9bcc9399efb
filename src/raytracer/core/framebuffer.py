"""In-memory RGB framebuffer.

Pixels are stored as a flat float32 array of shape (width * height, 3),
row-major with row 0 at the top of the image. Pixel (x, y) lives at index
y * width + x.

The buffer carries two pieces of synchronization state:
- `lock`: held by the renderer for the whole of a render, and by
  `to_image()` while copying, so readers never see a half-written frame.
- `dirty`: set after each completed render (or clear) and reset by the
  display once it has uploaded the pixels.

Render workers do not take the lock per pixel. Each one writes through its
own `band()` view, and bands never overlap.
"""

from __future__ import annotations

import threading

import numpy as np
import numpy.typing as npt


class Framebuffer:
    """A width x height RGB float32 image with a dirty flag.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        lock: Lock serializing whole-render writes against image reads.
    """

    def __init__(self, width: int, height: int) -> None:
        """Allocate a black framebuffer.

        Raises:
            ValueError: If width or height is not positive.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Framebuffer size must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.lock = threading.RLock()
        self._data = np.zeros((width * height, 3), dtype=np.float32)
        self._dirty = False

    @property
    def pixels(self) -> npt.NDArray[np.float32]:
        """The flat (width * height, 3) pixel array (a live view)."""
        return self._data

    @property
    def dirty(self) -> bool:
        """True if the contents changed since the last mark_clean()."""
        return self._dirty

    def mark_dirty(self) -> None:
        self._dirty = True

    def mark_clean(self) -> None:
        """Acknowledge that the current contents have been displayed."""
        self._dirty = False

    def band(self, y0: int, y1: int) -> npt.NDArray[np.float32]:
        """Writable (y1 - y0, width, 3) view of rows [y0, y1).

        Raises:
            ValueError: If the row range is empty or out of bounds.
        """
        if not 0 <= y0 < y1 <= self.height:
            raise ValueError(f"Invalid row range [{y0}, {y1}) for height {self.height}")
        return self._data[y0 * self.width : y1 * self.width].reshape(y1 - y0, self.width, 3)

    def set_pixel(self, x: int, y: int, color: npt.ArrayLike) -> None:
        """Write one pixel. Out-of-range coordinates are ignored."""
        if 0 <= x < self.width and 0 <= y < self.height:
            self._data[y * self.width + x] = color

    def get_pixel(self, x: int, y: int) -> npt.NDArray[np.float32]:
        """Read one pixel.

        Raises:
            IndexError: If the coordinates are out of range.
        """
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} framebuffer")
        return self._data[y * self.width + x].copy()

    def fill(self, color: npt.ArrayLike) -> None:
        """Set every pixel to one color and mark the buffer dirty."""
        with self.lock:
            self._data[:] = np.asarray(color, dtype=np.float32)
            self._dirty = True

    def to_image(self) -> npt.NDArray[np.float32]:
        """Copy the buffer as an (height, width, 3) image.

        Blocks while a render holds the lock.
        """
        with self.lock:
            return self._data.reshape(self.height, self.width, 3).copy()

    def __repr__(self) -> str:
        return f"Framebuffer({self.width}x{self.height}, dirty={self._dirty})"
