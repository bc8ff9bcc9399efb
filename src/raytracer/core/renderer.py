"""Row-band parallel renderer.

The Renderer owns a Framebuffer and an Integrator and fills the buffer one
frame at a time:

    1. The image rows are split into N contiguous bands,
       N = min(num_workers, height). The last band takes the remainder.
    2. A thread pool is created for this render only; each worker traces
       every pixel of its band in row then column order and writes into
       its own view of the framebuffer.
    3. The pool is joined, and the framebuffer is marked dirty.

Pixel (x, y) is traced through normalized image coordinates
u = x / width, v = y / height at the configured max depth.

The framebuffer lock is held by the calling thread for the whole render, so
a display thread calling `framebuffer.to_image()` waits for a complete frame.
Rendering is skipped entirely when the scene has no primitives or no lights.

Cancellation is cooperative: `cancel()` sets a flag that workers check
between rows. A cancelled render keeps the rows it finished and does not
mark the framebuffer dirty. The flag is only cleared when a render call
returns, so a cancel issued just before a render starts still stops it.

Example:
    >>> from src.raytracer.core.renderer import Renderer
    >>> from src.raytracer.scene.presets import create_default_scene
    >>> renderer = Renderer(create_default_scene(), 64, 64)
    >>> renderer.render()
    True
    >>> renderer.framebuffer.dirty
    True
"""

from __future__ import annotations

import logging
import os
import threading
import time
from collections.abc import Callable
from concurrent.futures import FIRST_COMPLETED, ThreadPoolExecutor, wait

import numpy as np
import numpy.typing as npt

from src.raytracer.camera.pinhole import generate_ray
from src.raytracer.core.framebuffer import Framebuffer
from src.raytracer.core.integrator import Integrator, RenderSettings
from src.raytracer.scene.scene import Scene

logger = logging.getLogger(__name__)

# Type alias for progress callback
# Callback receives (completed_rows, total_rows)
ProgressCallback = Callable[[int, int], None]


def default_worker_count() -> int:
    """Number of hardware threads, or 1 if it cannot be determined."""
    return os.cpu_count() or 1


def partition_rows(height: int, num_workers: int) -> list[tuple[int, int]]:
    """Split [0, height) into contiguous row bands.

    Args:
        height: Number of image rows (positive).
        num_workers: Requested number of bands (positive).

    Returns:
        min(num_workers, height) half-open (y0, y1) ranges in order. All but
        the last have height // N rows; the last takes the remainder.
    """
    count = max(1, min(num_workers, height))
    rows_per_band = height // count
    bands = []
    for i in range(count):
        y0 = i * rows_per_band
        y1 = height if i == count - 1 else y0 + rows_per_band
        bands.append((y0, y1))
    return bands


class Renderer:
    """Multi-threaded Whitted ray tracer writing into a Framebuffer.

    Attributes:
        scene: The scene being rendered. Must not be mutated during render().
        settings: Shared RenderSettings (also read by the integrator).
        integrator: The shading integrator.
        framebuffer: The output image.
        num_workers: Maximum number of render threads.
    """

    def __init__(
        self,
        scene: Scene,
        width: int,
        height: int,
        settings: RenderSettings | None = None,
        num_workers: int | None = None,
    ) -> None:
        """Create a renderer and allocate its framebuffer.

        Args:
            scene: The scene to render.
            width: Image width in pixels.
            height: Image height in pixels.
            settings: Render settings. Defaults to RenderSettings().
            num_workers: Thread count. Defaults to the number of CPUs.

        Raises:
            ValueError: If the size or worker count is not positive.
        """
        if num_workers is not None and num_workers <= 0:
            raise ValueError(f"Worker count must be positive, got {num_workers}")
        self.scene = scene
        self.settings = settings if settings is not None else RenderSettings()
        self.integrator = Integrator(scene, self.settings)
        self.num_workers = num_workers if num_workers is not None else default_worker_count()
        self.framebuffer = Framebuffer(width, height)
        self._cancel = threading.Event()
        self._rendering = threading.Event()
        self._update_aspect_ratio()

    @property
    def width(self) -> int:
        """Get the image width."""
        return self.framebuffer.width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self.framebuffer.height

    @property
    def is_rendering(self) -> bool:
        """True while render() is running."""
        return self._rendering.is_set()

    # =========================================================================
    # Rendering
    # =========================================================================

    def render(self, callback: ProgressCallback | None = None) -> bool:
        """Render one full frame into the framebuffer.

        Args:
            callback: Optional function called on the calling thread each
                time a band finishes, with (completed_rows, total_rows).

        Returns:
            True if a frame was completed; False if the scene was empty or the
            render was cancelled.

        Raises:
            Exception: Whatever a worker raised while tracing.
        """
        if self.scene.is_empty:
            logger.debug(
                "Skipping render: %d primitives, %d lights",
                len(self.scene.primitives),
                len(self.scene.lights),
            )
            self._cancel.clear()
            return False

        bands = partition_rows(self.height, self.num_workers)
        self._rendering.set()
        start = time.perf_counter()
        logger.debug(
            "Rendering %dx%d with %d band(s), max_depth=%d",
            self.width,
            self.height,
            len(bands),
            self.settings.max_depth,
        )
        try:
            with self.framebuffer.lock:
                completed = self._render_bands(bands, callback)
                if completed:
                    self.framebuffer.mark_dirty()
        finally:
            self._rendering.clear()
            self._cancel.clear()

        elapsed = time.perf_counter() - start
        if completed:
            logger.debug("Render finished in %.3fs", elapsed)
        else:
            logger.debug("Render cancelled after %.3fs", elapsed)
        return completed

    def _render_bands(
        self,
        bands: list[tuple[int, int]],
        callback: ProgressCallback | None,
    ) -> bool:
        completed_rows = 0
        with ThreadPoolExecutor(max_workers=len(bands), thread_name_prefix="render") as pool:
            pending = {
                pool.submit(self._render_band, y0, y1, self.framebuffer.band(y0, y1))
                for y0, y1 in bands
            }
            while pending:
                done, pending = wait(pending, return_when=FIRST_COMPLETED)
                for future in done:
                    error = future.exception()
                    if error is not None:
                        # Stop the other bands before propagating
                        self._cancel.set()
                        raise error
                    completed_rows += future.result()
                if callback is not None:
                    callback(completed_rows, self.height)
        return completed_rows == self.height

    def _render_band(self, y0: int, y1: int, out: npt.NDArray[np.float32]) -> int:
        """Trace rows [y0, y1) into `out`. Returns the number of rows finished."""
        camera = self.scene.camera
        depth = self.settings.max_depth
        width = self.width
        height = self.height
        for row, y in enumerate(range(y0, y1)):
            if self._cancel.is_set():
                return row
            v = y / height
            for x in range(width):
                ray = generate_ray(camera, x / width, v)
                out[row, x] = self.integrator.trace_ray(ray, depth)
        return y1 - y0

    def trace_pixel(self, x: int, y: int) -> npt.NDArray[np.float64]:
        """Trace a single pixel without touching the framebuffer.

        Raises:
            IndexError: If the coordinates are out of range.
        """
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} image")
        ray = generate_ray(self.scene.camera, x / self.width, y / self.height)
        return self.integrator.trace_ray(ray, self.settings.max_depth)

    def cancel(self) -> None:
        """Ask the current or next render to stop after its current rows.

        A cancel issued while idle is consumed by the next `render()` call,
        which then returns False without tracing.
        """
        self._cancel.set()

    def clear_cancel(self) -> None:
        """Drop a pending cancel so the next render runs to completion."""
        self._cancel.clear()

    # =========================================================================
    # Configuration
    # =========================================================================

    def resize(self, width: int, height: int) -> None:
        """Reallocate the framebuffer and update the camera aspect ratio.

        Dimensions below 1 are clamped to 1.

        Raises:
            RuntimeError: If called while a render is in progress.
        """
        if self.is_rendering:
            raise RuntimeError("Cannot resize while a render is in progress")
        if width < 1 or height < 1:
            logger.warning("Clamping render size %dx%d to at least 1x1", width, height)
            width = max(1, width)
            height = max(1, height)
        self.framebuffer = Framebuffer(width, height)
        self._update_aspect_ratio()
        logger.debug("Resized framebuffer to %dx%d", width, height)

    def clear(self, color: tuple[float, float, float] = (0.0, 0.0, 0.0)) -> None:
        """Fill the framebuffer with one color and mark it dirty."""
        self.framebuffer.fill(color)

    def set_max_depth(self, depth: int) -> None:
        """Set the recursion depth for primary rays.

        Raises:
            ValueError: If depth is negative.
        """
        if depth < 0:
            raise ValueError(f"Max depth must be non-negative, got {depth}")
        self.settings.max_depth = depth

    def enable_shadows(self, enabled: bool) -> None:
        self.settings.shadows = enabled

    def enable_reflections(self, enabled: bool) -> None:
        self.settings.reflections = enabled

    def _update_aspect_ratio(self) -> None:
        camera = self.scene.camera
        aspect = self.width / self.height
        if camera.aspect_ratio != aspect:
            self.scene.set_camera(camera.with_aspect_ratio(aspect))
