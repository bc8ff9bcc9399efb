"""Preview module for output and visualization.

This module presents frames produced by the renderer. Nothing here writes to
the framebuffer; everything reads a finished frame.

Components:
    display: Matplotlib-based preview display
    export: PNG export via Pillow
    interactive: Taichi GGUI-based interactive preview window

Example:
    >>> from src.raytracer.core.renderer import Renderer
    >>> from src.raytracer.preview import save_png, show_preview
    >>> from src.raytracer.scene.presets import create_default_scene
    >>>
    >>> renderer = Renderer(create_default_scene(), 512, 512)
    >>> renderer.render()
    >>> show_preview(renderer)
    >>> save_png(renderer, "output.png")

For the interactive GGUI preview (requires ti.init first):
    >>> from src.raytracer.preview import InteractivePreview
    >>> InteractivePreview(renderer).run()
"""

from src.raytracer.preview.display import (
    apply_gamma,
    frame_image,
    process_image_for_display,
    show_comparison,
    show_preview,
)
from src.raytracer.preview.export import (
    compute_rmse,
    image_to_uint8,
    save_png,
    save_png_from_array,
)
from src.raytracer.preview.interactive import InteractivePreview

__all__ = [
    # Interactive preview
    "InteractivePreview",
    # Display functions
    "show_preview",
    "show_comparison",
    "apply_gamma",
    "process_image_for_display",
    "frame_image",
    # Export functions
    "save_png",
    "save_png_from_array",
    "image_to_uint8",
    "compute_rmse",
]
