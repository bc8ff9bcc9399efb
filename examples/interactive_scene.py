#!/usr/bin/env python3
"""Open the default scene in a Taichi GGUI window with live render settings.

The frame is re-rendered on a background thread whenever a setting changes;
the window only shows completed frames.

Usage:
    python -m examples.interactive_scene [--width W] [--height H] [--workers N]

Controls:
    - Shadows / Reflections: toggle shadow rays and mirror reflections
    - Max Depth: recursion depth for primary rays
    - Render: trace the current frame again
    - Export PNG: save the current frame with a timestamped name
"""

from __future__ import annotations

import argparse
import logging
import platform
import sys
from pathlib import Path

# Allow running the file directly from a checkout
_repo_root = Path(__file__).resolve().parent.parent
if str(_repo_root) not in sys.path:
    sys.path.insert(0, str(_repo_root))

import taichi as ti  # noqa: E402

logger = logging.getLogger("examples.interactive_scene")


def select_backend() -> str:
    """Initialize Taichi for the preview window, preferring a GPU backend.

    Only the window and its display field live in Taichi; tracing always runs
    on CPU threads, so the backend choice affects presentation only.
    """
    candidates = [("gpu", ti.gpu), ("cpu", ti.cpu)]
    if platform.system() == "Darwin":
        candidates.insert(0, ("metal", ti.metal))

    for name, arch in candidates[:-1]:
        try:
            ti.init(arch=arch)
            return name
        except RuntimeError as exc:
            logger.debug("Taichi %s backend unavailable: %s", name, exc)
    name, arch = candidates[-1]
    ti.init(arch=arch)
    return name


def main(argv: list[str] | None = None) -> int:
    """Run the interactive preview until the window is closed."""
    parser = argparse.ArgumentParser(description="Interactive ray tracer preview.")
    parser.add_argument("--width", type=int, default=512, help="Window width (default: 512)")
    parser.add_argument("--height", type=int, default=512, help="Window height (default: 512)")
    parser.add_argument("--workers", type=int, default=None, help="Render threads")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    from src.raytracer.core.renderer import Renderer
    from src.raytracer.preview.interactive import InteractivePreview
    from src.raytracer.scene.presets import create_default_scene

    if not InteractivePreview.is_display_available():
        print("Error: no display found; the interactive preview needs a GUI session.",
              file=sys.stderr)
        return 1

    print(f"Display backend: {select_backend()}")
    renderer = Renderer(create_default_scene(), args.width, args.height,
                        num_workers=args.workers)
    preview = InteractivePreview(renderer)
    print(f"Window {args.width}x{args.height}: change a setting to re-render, "
          "'Export PNG' saves the frame, close the window to quit.")

    try:
        preview.run()
    except KeyboardInterrupt:
        print("\nStopped.")
    finally:
        preview.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
