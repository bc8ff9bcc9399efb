"""Geometry module for shape primitives and intersection.

This module provides the geometric primitives and intersection algorithms
(the geometry kernel):

Components:
    hit: HitRecord returned by every intersection query
    sphere: Sphere primitive with quadratic ray-sphere intersection
    box: Transformed box with slab-method intersection
    triangle: Möller–Trumbore triangle and linear-scan triangle mesh
    primitive: Closed Primitive union with a single intersect() dispatch

All intersection routines are pure functions of their geometric input and
never raise for a miss or for degenerate input:

    record = intersect(primitive, ray)
    if record.hit:
        ...
"""

from .box import Box, hit_box, transform_box
from .hit import HitRecord, miss
from .primitive import PRIMITIVE_TYPES, Primitive, intersect, is_primitive, transformed
from .sphere import Sphere, hit_sphere, transform_sphere
from .triangle import (
    MeshObject,
    Triangle,
    barycentric,
    hit_mesh,
    hit_triangle,
    transform_mesh,
    transform_triangle,
)

__all__ = [
    "HitRecord",
    "miss",
    "Sphere",
    "hit_sphere",
    "transform_sphere",
    "Box",
    "hit_box",
    "transform_box",
    "Triangle",
    "MeshObject",
    "barycentric",
    "hit_triangle",
    "hit_mesh",
    "transform_triangle",
    "transform_mesh",
    "Primitive",
    "PRIMITIVE_TYPES",
    "intersect",
    "transformed",
    "is_primitive",
]
