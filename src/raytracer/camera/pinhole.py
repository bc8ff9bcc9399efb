"""Pinhole camera model for perspective projection ray generation.

This module implements a look-at pinhole camera that maps normalized image
coordinates to world-space primary rays. The camera supports:
- Look-at positioning (position, target, up)
- Vertical field of view specification
- Arbitrary aspect ratios

The camera basis is derived on demand from the current parameters rather
than cached, because the parameters are edited interactively:
- forward: points from position toward target
- right: forward x up, normalized
- up: right x forward (the "true" up, orthogonal to forward)

Image coordinates follow the raster convention: (0, 0) is the top-left
corner and v grows downward, so v is flipped when building the ray.

Example:
    >>> from src.raytracer.camera.pinhole import Camera, generate_ray
    >>> camera = Camera(position=(0.0, 0.0, 5.0), target=(0.0, 0.0, 0.0))
    >>> ray = generate_ray(camera, 0.5, 0.5)  # Ray through image center
    >>> ray.direction
    array([ 0.,  0., -1.])
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace

from src.raytracer.core.ray import Ray, Vec3, as_vec3, cross, normalize

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class Camera:
    """Configuration for a pinhole (perspective) camera.

    Attributes:
        position: Camera position in world space (x, y, z).
        target: Point the camera is looking at in world space (x, y, z).
        up: Up direction hint for camera orientation (typically (0, 1, 0)).
        fov: Vertical field of view in degrees, in (0, 180).
        aspect_ratio: Width divided by height of the output image.
    """

    position: tuple[float, float, float] = (0.0, 0.0, 5.0)
    target: tuple[float, float, float] = (0.0, 0.0, 0.0)
    up: tuple[float, float, float] = (0.0, 1.0, 0.0)
    fov: float = 45.0
    aspect_ratio: float = 1.0

    def __post_init__(self) -> None:
        if not 0.0 < self.fov < 180.0:
            raise ValueError(f"Field of view must be in (0, 180) degrees, got {self.fov}")
        if not self.aspect_ratio > 0.0:
            raise ValueError(f"Aspect ratio must be positive, got {self.aspect_ratio}")

    def with_aspect_ratio(self, aspect_ratio: float) -> Camera:
        """Return a copy of this camera with a different aspect ratio."""
        return replace(self, aspect_ratio=aspect_ratio)


# =============================================================================
# Ray Generation
# =============================================================================


def get_camera_basis(camera: Camera) -> tuple[Vec3, Vec3, Vec3]:
    """Compute the camera's orthonormal basis.

    Returns:
        A tuple (forward, right, up) of unit vectors in world space.
    """
    position = as_vec3(camera.position)
    forward = normalize(as_vec3(camera.target) - position)
    right = normalize(cross(forward, as_vec3(camera.up)))
    true_up = cross(right, forward)
    return forward, right, true_up


def generate_ray(camera: Camera, u: float, v: float) -> Ray:
    """Generate a primary ray through normalized image coordinates (u, v).

    The coordinates are normalized:
    - u = 0: left edge of image, u = 1: right edge
    - v = 0: top edge of image, v = 1: bottom edge

    Args:
        camera: The camera configuration.
        u: Horizontal coordinate in [0, 1] (left to right).
        v: Vertical coordinate in [0, 1] (top to bottom).

    Returns:
        A Ray with origin at the camera position and unit direction toward
        the specified point on the image plane.
    """
    forward, right, true_up = get_camera_basis(camera)
    tan_half_fov = math.tan(math.radians(camera.fov) / 2.0)

    ndc_x = 2.0 * u - 1.0
    ndc_y = 1.0 - 2.0 * v  # Flip: increasing row moves down the image

    direction = (
        forward
        + (ndc_x * tan_half_fov * camera.aspect_ratio) * right
        + (ndc_y * tan_half_fov) * true_up
    )
    return Ray(as_vec3(camera.position), direction)


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info(camera: Camera) -> dict[str, tuple[float, float, float]]:
    """Get the derived camera vectors for debugging.

    Returns:
        Dictionary with origin, forward, right and up as plain tuples.
    """
    forward, right, true_up = get_camera_basis(camera)
    return {
        "origin": tuple(float(c) for c in camera.position),
        "forward": tuple(float(c) for c in forward),
        "right": tuple(float(c) for c in right),
        "up": tuple(float(c) for c in true_up),
    }
