"""Ray data structure and vector utilities for CPU ray tracing.

This module provides the fundamental Ray dataclass, the small-vector helpers
used throughout the geometry kernel and integrator, and the numerical guard
constants shared by every intersection routine.

All vectors are float64 NumPy arrays of shape (3,). The helpers operate on
components directly because np.cross and np.linalg.norm carry noticeable
per-call overhead for 3-vectors, and they are called several times per ray.

Example:
    >>> from src.raytracer.core.ray import Ray, ray_at, vec3
    >>> ray = Ray(origin=vec3(0.0, 0.0, 5.0), direction=vec3(0.0, 0.0, -2.0))
    >>> ray.direction
    array([ 0.,  0., -1.])
    >>> ray_at(ray, 4.0)
    array([0., 0., 1.])
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

Vec3 = npt.NDArray[np.float64]

# =============================================================================
# Numerical Guards
# =============================================================================

# Self-intersection guard: minimum accepted hit distance and secondary ray offset
EPSILON = 1e-3

# Triangle determinant below which the ray is treated as parallel to the plane
PARALLEL_EPSILON = 1e-4

# Slack on the triangle barycentric bounds so rays through vertices and shared
# edges are not lost to rounding
BARYCENTRIC_EPSILON = 1e-6

# Box slab direction component below which the ray is parallel to the slab
SLAB_EPSILON = 1e-5

# Quadratic coefficient / vector length below which geometry is degenerate
DEGENERATE_EPSILON = 1e-12


def vec3(x: float, y: float, z: float) -> Vec3:
    """Create a 3-component float64 vector."""
    return np.array((x, y, z), dtype=np.float64)


def as_vec3(value: npt.ArrayLike) -> Vec3:
    """Convert a tuple, list or array into a float64 3-vector.

    Raises:
        ValueError: If the value does not have exactly three components.
    """
    arr = np.asarray(value, dtype=np.float64).reshape(-1)
    if arr.shape != (3,):
        raise ValueError(f"Expected a 3-component vector, got shape {arr.shape}")
    return arr.copy()


@dataclass
class Ray:
    """A ray with an origin point and a unit direction.

    The direction is normalized at construction. A zero-length direction is
    kept as the zero vector; every primitive reports a miss for it.

    Attributes:
        origin: The starting point of the ray.
        direction: The unit direction of the ray.
    """

    origin: Vec3
    direction: Vec3

    def __post_init__(self) -> None:
        self.origin = as_vec3(self.origin)
        self.direction = normalize(as_vec3(self.direction))


def ray_at(ray: Ray, t: float) -> Vec3:
    """Compute the point ray.origin + t * ray.direction."""
    return ray.origin + t * ray.direction


# =============================================================================
# Vector Utility Functions
# =============================================================================


def dot(a: Vec3, b: Vec3) -> float:
    """Compute the dot product of two vectors."""
    return float(a[0] * b[0] + a[1] * b[1] + a[2] * b[2])


def cross(a: Vec3, b: Vec3) -> Vec3:
    """Compute the cross product a x b."""
    return np.array(
        (
            a[1] * b[2] - a[2] * b[1],
            a[2] * b[0] - a[0] * b[2],
            a[0] * b[1] - a[1] * b[0],
        ),
        dtype=np.float64,
    )


def length_squared(v: Vec3) -> float:
    """Compute the squared length of a vector."""
    return dot(v, v)


def length(v: Vec3) -> float:
    """Compute the Euclidean length of a vector."""
    return math.sqrt(dot(v, v))


def normalize(v: Vec3) -> Vec3:
    """Normalize a vector to unit length.

    Args:
        v: The input vector.

    Returns:
        A unit vector in the same direction as v.
        If v is (near) zero-length, returns a zero vector.
    """
    n = length(v)
    if n < DEGENERATE_EPSILON:
        return np.zeros(3, dtype=np.float64)
    return v / n


def reflect(incident: Vec3, normal: Vec3) -> Vec3:
    """Reflect an incident vector about a normal.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (should be normalized).

    Returns:
        The reflected direction vector.
    """
    return incident - 2.0 * dot(incident, normal) * normal


def near_zero(v: Vec3, tolerance: float = DEGENERATE_EPSILON) -> bool:
    """Check if all components of a vector are near zero."""
    return abs(v[0]) < tolerance and abs(v[1]) < tolerance and abs(v[2]) < tolerance


# =============================================================================
# Affine Transforms (4x4 homogeneous matrices)
# =============================================================================


def transform_point(matrix: npt.NDArray[np.float64], point: Vec3) -> Vec3:
    """Apply an affine 4x4 matrix to a point (w = 1)."""
    return matrix[:3, :3] @ point + matrix[:3, 3]


def transform_direction(matrix: npt.NDArray[np.float64], direction: Vec3) -> Vec3:
    """Apply an affine 4x4 matrix to a direction (w = 0)."""
    return matrix[:3, :3] @ direction


def translation_matrix(offset: npt.ArrayLike) -> npt.NDArray[np.float64]:
    """Build a 4x4 translation matrix."""
    m = np.eye(4, dtype=np.float64)
    m[:3, 3] = as_vec3(offset)
    return m


def scale_matrix(factors: npt.ArrayLike) -> npt.NDArray[np.float64]:
    """Build a 4x4 (possibly non-uniform) scale matrix."""
    m = np.eye(4, dtype=np.float64)
    m[0, 0], m[1, 1], m[2, 2] = as_vec3(factors)
    return m


def rotation_matrix(axis: npt.ArrayLike, angle_degrees: float) -> npt.NDArray[np.float64]:
    """Build a 4x4 rotation matrix about an arbitrary axis (Rodrigues).

    Args:
        axis: Rotation axis; normalized internally.
        angle_degrees: Counter-clockwise rotation angle in degrees.

    Raises:
        ValueError: If the axis is zero-length.
    """
    k = as_vec3(axis)
    if near_zero(k):
        raise ValueError("Rotation axis must be non-zero")
    x, y, z = normalize(k)
    theta = math.radians(angle_degrees)
    c = math.cos(theta)
    s = math.sin(theta)
    t = 1.0 - c

    m = np.eye(4, dtype=np.float64)
    m[:3, :3] = (
        (t * x * x + c, t * x * y - s * z, t * x * z + s * y),
        (t * x * y + s * z, t * y * y + c, t * y * z - s * x),
        (t * x * z - s * y, t * y * z + s * x, t * z * z + c),
    )
    return m
