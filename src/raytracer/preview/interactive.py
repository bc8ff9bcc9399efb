"""Interactive preview window using Taichi GGUI.

This module shows a Renderer's framebuffer in a ti.ui.Window and exposes the
render settings as GUI controls:

    - Shadows and Reflections checkboxes
    - Max Depth slider
    - Render and Export PNG buttons

Renders run on a background thread so the window stays responsive. The
display loop only uploads the framebuffer when the renderer is idle and the
buffer is dirty, then marks it clean; it never reads a frame that is still
being written. Changing a setting cancels an in-flight render and starts a
new one.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.raytracer.core.renderer import Renderer
    >>> from src.raytracer.preview.interactive import InteractivePreview
    >>> from src.raytracer.scene.presets import create_default_scene
    >>>
    >>> renderer = Renderer(create_default_scene(), 400, 400)
    >>> InteractivePreview(renderer).run()  # Blocks until window closed
"""

from __future__ import annotations

import logging
import os
import threading
from datetime import datetime
from typing import TYPE_CHECKING

import numpy as np
import taichi as ti

if TYPE_CHECKING:
    import numpy.typing as npt

    from src.raytracer.core.renderer import Renderer

logger = logging.getLogger(__name__)

MAX_DEPTH_LIMIT = 8


class InteractivePreview:
    """Taichi GGUI window presenting a Renderer's framebuffer.

    Attributes:
        renderer: The renderer whose framebuffer is shown.
        width: Window width in pixels (the framebuffer width).
        height: Window height in pixels (the framebuffer height).
        display_image: Taichi field storing the display image (RGB float).
    """

    def __init__(
        self,
        renderer: Renderer,
        *,
        title: str = "Ray Tracer - Interactive Preview",
    ) -> None:
        """Create the preview. The window itself is opened lazily by run().

        Note:
            Taichi must already be initialized (ti.init) because the display
            field is allocated here.
        """
        self.renderer = renderer
        self.width = renderer.width
        self.height = renderer.height
        self._title = title
        self._window: ti.ui.Window | None = None
        self._canvas: ti.ui.Canvas | None = None
        self._render_thread: threading.Thread | None = None
        self._render_error: BaseException | None = None
        self._rerender_pending = False
        self.frames_presented = 0

        # Taichi fields are indexed (x, y), so the shape is (width, height)
        self.display_image: ti.MatrixField = ti.Vector.field(
            3, dtype=ti.f32, shape=(self.width, self.height)
        )

    def _initialize_window(self) -> None:
        if self._window is not None:
            return
        self._window = ti.ui.Window(
            name=self._title,
            res=(self.width, self.height),
            vsync=True,
        )
        self._canvas = self._window.get_canvas()

    @property
    def window(self) -> ti.ui.Window:
        """Get the Taichi GGUI window, initializing if needed."""
        if self._window is None:
            self._initialize_window()
        assert self._window is not None
        return self._window

    @property
    def canvas(self) -> ti.ui.Canvas:
        """Get the canvas for rendering."""
        if self._canvas is None:
            self._initialize_window()
        assert self._canvas is not None
        return self._canvas

    # =========================================================================
    # Framebuffer Upload
    # =========================================================================

    def update_image(self, image: npt.NDArray[np.float32]) -> None:
        """Upload an (height, width, 3) image to the display field.

        Raises:
            ValueError: If the image shape doesn't match the window.
        """
        expected_shape = (self.height, self.width, 3)
        if image.shape != expected_shape:
            raise ValueError(f"Image shape {image.shape} doesn't match expected {expected_shape}")

        # Row 0 is the top of the image but the bottom of a Taichi canvas,
        # and Taichi fields are (x, y) while NumPy images are (row, column)
        image_transposed = np.ascontiguousarray(
            np.transpose(np.flipud(image), (1, 0, 2)), dtype=np.float32
        )
        self.display_image.from_numpy(image_transposed)

    def upload_framebuffer(self) -> bool:
        """Upload the framebuffer if a finished frame is waiting.

        Returns:
            True if a new frame was uploaded (the framebuffer is then clean).
        """
        framebuffer = self.renderer.framebuffer
        if self.renderer.is_rendering or not framebuffer.dirty:
            return False
        self.update_image(framebuffer.to_image())
        framebuffer.mark_clean()
        self.frames_presented += 1
        return True

    # =========================================================================
    # Background Rendering
    # =========================================================================

    def request_render(self) -> None:
        """Start a render, or restart the one in progress."""
        if self._render_thread is not None and self._render_thread.is_alive():
            self._rerender_pending = True
            self.renderer.cancel()
            return
        self._rerender_pending = False
        # A restart cancel can land after the old render already returned
        self.renderer.clear_cancel()
        self._render_thread = threading.Thread(
            target=self._render_worker, name="preview-render", daemon=True
        )
        self._render_thread.start()

    def _render_worker(self) -> None:
        try:
            self.renderer.render()
        except Exception as exc:  # handed to the display thread in _poll_render
            self._render_error = exc

    def _poll_render(self) -> None:
        if self._render_error is not None:
            error, self._render_error = self._render_error, None
            raise error
        idle = self._render_thread is None or not self._render_thread.is_alive()
        if idle and self._rerender_pending:
            self.request_render()

    def wait(self, timeout: float | None = None) -> None:
        """Block until the current background render has finished."""
        if self._render_thread is not None:
            self._render_thread.join(timeout)

    # =========================================================================
    # Event Loop
    # =========================================================================

    def is_running(self) -> bool:
        """Check if the window is still open."""
        return self.window.running

    def show_frame(self) -> None:
        """Present the current display image."""
        self.canvas.set_image(self.display_image)
        self.window.show()

    def run(self) -> None:
        """Run the window event loop until the window is closed."""
        self._initialize_window()
        self.request_render()
        try:
            while self.is_running():
                self._poll_render()
                self.upload_framebuffer()
                self._draw_gui_panel()
                self.show_frame()
        finally:
            if self._render_thread is not None and self._render_thread.is_alive():
                self.renderer.cancel()
                self.wait()

    def close(self) -> None:
        """Close the preview window."""
        if self._window is not None:
            self._window.running = False

    def _draw_gui_panel(self) -> None:
        settings = self.renderer.settings
        with self.window.GUI.sub_window("Render Settings", 0.02, 0.02, 0.3, 0.24) as gui:
            shadows = gui.checkbox("Shadows", settings.shadows)
            reflections = gui.checkbox("Reflections", settings.reflections)
            depth = gui.slider_int(
                "Max Depth", settings.max_depth, minimum=0, maximum=MAX_DEPTH_LIMIT
            )
            render_clicked = gui.button("Render")
            export_clicked = gui.button("Export PNG")

        changed = (
            shadows != settings.shadows
            or reflections != settings.reflections
            or depth != settings.max_depth
        )
        if changed:
            self.renderer.enable_shadows(shadows)
            self.renderer.enable_reflections(reflections)
            self.renderer.set_max_depth(depth)
        if changed or render_clicked:
            self.request_render()
        if export_clicked:
            self.export_png()

    def export_png(self, filename: str | None = None) -> str:
        """Save the current frame to a PNG and return its file name.

        Defaults to a timestamped name render_YYYYMMDD_HHMMSS.png.
        """
        from src.raytracer.preview.export import save_png

        if filename is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            filename = f"render_{timestamp}.png"
        save_png(self.renderer, filename)
        print(f"Exported: {filename} ({self.width}x{self.height})")
        return filename

    @staticmethod
    def is_display_available() -> bool:
        """Check if a display is available for GUI rendering.

        Returns:
            True if a display is available, False for headless environments.
        """
        display = os.environ.get("DISPLAY")
        wayland = os.environ.get("WAYLAND_DISPLAY")

        if os.name == "nt":
            return True

        if os.uname().sysname == "Darwin":
            # SSH sessions without X forwarding have no display
            return not (os.environ.get("SSH_CONNECTION") and not display)

        return bool(display or wayland)
