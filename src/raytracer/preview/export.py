"""Image export for rendered frames.

Frames are written as 8-bit RGB PNGs through Pillow. The framebuffer stores
row 0 at the top, which is also PNG row order, so no flip is needed.

Example:
    >>> from src.raytracer.core.renderer import Renderer
    >>> from src.raytracer.preview.export import save_png
    >>> from src.raytracer.scene.presets import create_default_scene
    >>>
    >>> renderer = Renderer(create_default_scene(), 256, 256)
    >>> renderer.render()
    >>> save_png(renderer, "output.png")
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from src.raytracer.preview.display import frame_image, process_image_for_display

if TYPE_CHECKING:
    from src.raytracer.core.framebuffer import Framebuffer
    from src.raytracer.core.renderer import Renderer


def image_to_uint8(
    image: npt.NDArray[np.float32],
    *,
    gamma: float = 1.0,
) -> npt.NDArray[np.uint8]:
    """Convert a float image in [0, 1] to uint8, rounding to nearest.

    Args:
        image: Image array of shape (H, W, 3).
        gamma: Gamma encoding applied first.

    Returns:
        8-bit image array of shape (H, W, 3).
    """
    processed = process_image_for_display(image, gamma=gamma)
    return np.round(processed * 255.0).astype(np.uint8)


def save_png_from_array(
    image: npt.NDArray[np.float32],
    filepath: str | os.PathLike[str],
    *,
    gamma: float = 1.0,
) -> None:
    """Save an (H, W, 3) float array as an 8-bit RGB PNG."""
    pil_image = PILImage.fromarray(image_to_uint8(image, gamma=gamma))
    pil_image.save(filepath, format="PNG")


def save_png(
    source: Renderer | Framebuffer,
    filepath: str | os.PathLike[str],
    *,
    gamma: float = 1.0,
) -> None:
    """Save the current frame of a renderer or framebuffer as a PNG.

    The copy is taken under the framebuffer lock, so this waits for an
    in-progress render to finish.
    """
    save_png_from_array(frame_image(source), filepath, gamma=gamma)


def compute_rmse(
    image_a: npt.NDArray[np.floating[npt.NBitBase]],
    image_b: npt.NDArray[np.floating[npt.NBitBase]],
) -> float:
    """Compute root mean squared error between two images.

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes must match: {image_a.shape} vs {image_b.shape}")

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
