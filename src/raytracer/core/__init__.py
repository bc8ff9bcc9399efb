"""Core rendering module.

This module contains the fundamental building blocks for ray tracing:

Components:
    ray: Ray data structure, vector helpers and numerical guard constants
    integrator: Whitted-style recursive shading (Phong, shadows, reflections)
    framebuffer: Flat RGB float32 pixel buffer with a dirty flag
    renderer: Row-band multi-threaded render loop

Everything here runs on the CPU with NumPy; no rendering API is involved.
"""

from .ray import (
    BARYCENTRIC_EPSILON,
    DEGENERATE_EPSILON,
    EPSILON,
    PARALLEL_EPSILON,
    SLAB_EPSILON,
    Ray,
    as_vec3,
    cross,
    dot,
    length,
    length_squared,
    near_zero,
    normalize,
    ray_at,
    reflect,
    rotation_matrix,
    scale_matrix,
    transform_direction,
    transform_point,
    translation_matrix,
    vec3,
)

# Note: integrator, framebuffer and renderer are NOT imported here to avoid
# circular imports (they depend on geometry and scene, which import ray).
# Import directly from src.raytracer.core.renderer when needed:
#   from src.raytracer.core.renderer import Renderer

__all__ = [
    "EPSILON",
    "PARALLEL_EPSILON",
    "BARYCENTRIC_EPSILON",
    "SLAB_EPSILON",
    "DEGENERATE_EPSILON",
    "Ray",
    "ray_at",
    "vec3",
    "as_vec3",
    "length",
    "length_squared",
    "normalize",
    "dot",
    "cross",
    "reflect",
    "near_zero",
    "transform_point",
    "transform_direction",
    "translation_matrix",
    "scale_matrix",
    "rotation_matrix",
]
