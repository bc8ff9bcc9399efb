"""Matplotlib-based preview of rendered frames.

The renderer produces display-ready colors already clamped to [0, 1], so the
display pipeline is short: optional gamma encoding, then a final clamp.
Gamma defaults to 1.0 (colors shown as computed).

Example:
    >>> from src.raytracer.core.renderer import Renderer
    >>> from src.raytracer.preview.display import show_preview
    >>> from src.raytracer.scene.presets import create_default_scene
    >>>
    >>> renderer = Renderer(create_default_scene(), 256, 256)
    >>> renderer.render()
    >>> show_preview(renderer)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

if TYPE_CHECKING:
    from src.raytracer.core.framebuffer import Framebuffer
    from src.raytracer.core.renderer import Renderer


def frame_image(source: Renderer | Framebuffer) -> npt.NDArray[np.float32]:
    """Copy the current frame of a renderer or framebuffer as (H, W, 3)."""
    framebuffer = getattr(source, "framebuffer", source)
    return framebuffer.to_image()


def apply_gamma(
    image: npt.NDArray[np.float32],
    gamma: float = 2.2,
) -> npt.NDArray[np.float32]:
    """Apply gamma encoding: out = in^(1/gamma).

    Args:
        image: Image array in [0, 1] range.
        gamma: Gamma value. 1.0 returns the image unchanged.

    Raises:
        ValueError: If gamma is not positive.
    """
    if gamma <= 0.0:
        raise ValueError(f"Gamma must be positive, got {gamma}")
    if gamma == 1.0:
        return image

    # Clamp first so negative values cannot produce NaN
    image = np.clip(image, 0.0, 1.0)
    return np.power(image, 1.0 / gamma).astype(np.float32)


def process_image_for_display(
    image: npt.NDArray[np.float32],
    gamma: float = 1.0,
) -> npt.NDArray[np.float32]:
    """Gamma-encode and clamp an image to [0, 1] float32."""
    result = apply_gamma(image.astype(np.float32, copy=True), gamma)
    return np.clip(result, 0.0, 1.0).astype(np.float32)


def show_preview(
    source: Renderer | Framebuffer,
    *,
    gamma: float = 1.0,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 8),
    block: bool = True,
) -> None:
    """Display the current frame as a Matplotlib figure.

    Args:
        source: A Renderer or a Framebuffer.
        gamma: Gamma encoding applied before display.
        title: Custom title (defaults to the image size).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until the figure is closed.
    """
    import matplotlib.pyplot as plt

    image = process_image_for_display(frame_image(source), gamma=gamma)

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(image)
    ax.axis("off")
    if title is None:
        height, width = image.shape[:2]
        title = f"Render Preview - {width}x{height}"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)


def show_comparison(
    image_a: npt.NDArray[np.float32],
    image_b: npt.NDArray[np.float32],
    *,
    labels: tuple[str, str] = ("A", "B"),
    diff_scale: float = 10.0,
    figsize: tuple[float, float] = (16, 6),
    block: bool = True,
) -> float:
    """Show two frames side by side with an amplified difference image.

    Useful for checking what a setting changes, e.g. shadows on versus off.

    Returns:
        RMSE between the two images.
    """
    import matplotlib.pyplot as plt

    from src.raytracer.preview.export import compute_rmse

    display_a = process_image_for_display(image_a)
    display_b = process_image_for_display(image_b)
    rmse = compute_rmse(display_a, display_b)

    diff = np.abs(display_a.astype(np.float64) - display_b.astype(np.float64))
    diff_amplified = np.clip(diff * diff_scale, 0.0, 1.0)

    fig, axes = plt.subplots(1, 3, figsize=figsize)
    for ax, image, label in zip(
        axes,
        (display_a, display_b, diff_amplified),
        (labels[0], labels[1], f"Difference ({diff_scale}x) - RMSE: {rmse:.6f}"),
    ):
        ax.imshow(image)
        ax.set_title(label)
        ax.axis("off")

    plt.tight_layout()
    plt.show(block=block)

    return rmse
