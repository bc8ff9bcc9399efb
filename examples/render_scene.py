#!/usr/bin/env python3
"""Render the default scene (or an OFF mesh) to a PNG.

This script builds the scene, renders one frame with the multi-threaded
renderer and writes the framebuffer to disk.

Usage:
    python -m examples.render_scene [options]

Options:
    --width WIDTH       Image width in pixels (default: 400)
    --height HEIGHT     Image height in pixels (default: 400)
    --depth DEPTH       Max recursion depth (default: 3)
    --workers N         Render threads (default: CPU count)
    --mesh FILE         Render an OFF mesh instead of the default scene
    --no-shadows        Disable shadow rays
    --no-reflections    Disable mirror reflections
    --output OUTPUT     Output file path (default: render.png)
    --show              Also show the result in a Matplotlib window
    --verbose           Enable debug logging
    --quiet             Suppress progress output

Example:
    python -m examples.render_scene --width 256 --height 256 --depth 2
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a scene with the CPU ray tracer.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--width", type=int, default=400, help="Image width (default: 400)")
    parser.add_argument("--height", type=int, default=400, help="Image height (default: 400)")
    parser.add_argument("--depth", type=int, default=3, help="Max recursion depth (default: 3)")
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of render threads (default: CPU count)",
    )
    parser.add_argument("--mesh", type=str, default=None, help="OFF file to render")
    parser.add_argument("--no-shadows", action="store_true", help="Disable shadow rays")
    parser.add_argument(
        "--no-reflections", action="store_true", help="Disable mirror reflections"
    )
    parser.add_argument(
        "--output",
        type=str,
        default="render.png",
        help="Output file path (default: render.png)",
    )
    parser.add_argument("--show", action="store_true", help="Show the result with Matplotlib")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--quiet", action="store_true", help="Suppress progress output")
    return parser.parse_args(argv)


def build_scene(mesh_path: str | None, aspect_ratio: float):
    """Create the default scene, or a scene holding one fitted OFF mesh."""
    from src.raytracer.scene.manager import SceneManager
    from src.raytracer.scene.off_loader import load_off_mesh
    from src.raytracer.scene.presets import DefaultSceneParams, populate_default_scene

    manager = SceneManager()
    params = DefaultSceneParams(aspect_ratio=aspect_ratio)
    if mesh_path is None:
        populate_default_scene(manager, params)
    else:
        manager.add_primitive(load_off_mesh(mesh_path, fit=True))
        manager.add_light(params.light_position, params.light_color, params.light_intensity)
        manager.set_camera(position=(0.0, 0.0, 4.0), aspect_ratio=aspect_ratio)
    return manager.scene


def render_scene(
    width: int = 400,
    height: int = 400,
    max_depth: int = 3,
    shadows: bool = True,
    reflections: bool = True,
    num_workers: int | None = None,
    mesh_path: str | None = None,
    output_path: str = "render.png",
    show: bool = False,
    quiet: bool = False,
) -> Path:
    """Render one frame and save it as a PNG.

    Returns:
        Path to the saved image file.
    """
    from src.raytracer.core.integrator import RenderSettings
    from src.raytracer.core.renderer import Renderer
    from src.raytracer.preview.export import save_png

    if not quiet:
        print(f"Creating scene ({width}x{height})...")
    scene = build_scene(mesh_path, width / max(height, 1))

    settings = RenderSettings(max_depth=max_depth, shadows=shadows, reflections=reflections)
    renderer = Renderer(scene, width, height, settings=settings, num_workers=num_workers)

    if not quiet:
        print(f"Rendering {len(scene.primitives)} object(s) at depth {max_depth}...")

    start_time = time.time()

    def progress_callback(done: int, total: int) -> None:
        if not quiet:
            elapsed = time.time() - start_time
            progress_pct = (done / total) * 100 if total > 0 else 0
            print(
                f"\r  Progress: {done}/{total} rows ({progress_pct:.1f}%) - {elapsed:.1f}s",
                end="",
                flush=True,
            )

    renderer.render(callback=progress_callback)

    if not quiet:
        print()

    output_file = Path(output_path)
    save_png(renderer, output_file)

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    if show:
        from src.raytracer.preview.display import show_preview

        show_preview(renderer)

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        render_scene(
            width=args.width,
            height=args.height,
            max_depth=args.depth,
            shadows=not args.no_shadows,
            reflections=not args.no_reflections,
            num_workers=args.workers,
            mesh_path=args.mesh,
            output_path=args.output,
            show=args.show,
            quiet=args.quiet,
        )
        return 0
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
