"""Closed primitive type and intersection dispatch.

The set of primitive kinds is fixed: Sphere, Box, Triangle and MeshObject.
`Primitive` is their union, and `intersect` is the single entry point that
dispatches on the concrete kind. Adding a kind means extending the union and
the two dispatch tables below.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Union

import numpy.typing as npt

from src.raytracer.core.ray import Ray
from src.raytracer.geometry.box import Box, hit_box, transform_box
from src.raytracer.geometry.hit import HitRecord
from src.raytracer.geometry.sphere import Sphere, hit_sphere, transform_sphere
from src.raytracer.geometry.triangle import (
    MeshObject,
    Triangle,
    hit_mesh,
    hit_triangle,
    transform_mesh,
    transform_triangle,
)

Primitive = Union[Sphere, Box, Triangle, MeshObject]

PRIMITIVE_TYPES: tuple[type, ...] = (Sphere, Box, Triangle, MeshObject)

_HIT_FUNCTIONS: dict[type, Callable[..., HitRecord]] = {
    Sphere: hit_sphere,
    Box: hit_box,
    Triangle: hit_triangle,
    MeshObject: hit_mesh,
}

_TRANSFORM_FUNCTIONS: dict[type, Callable[..., Primitive]] = {
    Sphere: transform_sphere,
    Box: transform_box,
    Triangle: transform_triangle,
    MeshObject: transform_mesh,
}


def intersect(primitive: Primitive, ray: Ray) -> HitRecord:
    """Intersect a ray with any primitive.

    Args:
        primitive: A Sphere, Box, Triangle or MeshObject.
        ray: The ray (unit direction).

    Returns:
        The primitive's HitRecord; a miss never raises.

    Raises:
        TypeError: If the object is not one of the primitive kinds.
    """
    try:
        hit_fn = _HIT_FUNCTIONS[type(primitive)]
    except KeyError:
        raise TypeError(f"Unsupported primitive type: {type(primitive).__name__}") from None
    return hit_fn(primitive, ray)


def transformed(primitive: Primitive, matrix: npt.ArrayLike) -> Primitive:
    """Return a copy of a primitive with an affine 4x4 transform applied.

    Raises:
        TypeError: If the object is not one of the primitive kinds.
    """
    try:
        transform_fn = _TRANSFORM_FUNCTIONS[type(primitive)]
    except KeyError:
        raise TypeError(f"Unsupported primitive type: {type(primitive).__name__}") from None
    return transform_fn(primitive, matrix)


def is_primitive(obj: object) -> bool:
    """Check whether an object is one of the supported primitive kinds."""
    return type(obj) in _HIT_FUNCTIONS
