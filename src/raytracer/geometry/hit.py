"""Hit record returned by every intersection query.

A HitRecord is a short-lived value: each intersection query creates a fresh
one. A miss is represented by hit=False with t=+inf, which lets callers keep
the closest hit with a plain `<` comparison.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

from src.raytracer.core.ray import Vec3
from src.raytracer.materials.phong import DEFAULT_MATERIAL, Material


@dataclass
class HitRecord:
    """Record of a ray-primitive intersection.

    Attributes:
        hit: Whether the ray intersected the primitive.
        t: Distance along the ray to the intersection. +inf for a miss.
        point: World-space intersection point. Only valid if hit is True.
        normal: World-space unit surface normal. Only valid if hit is True.
        material: Material of the struck primitive. Only valid if hit is True.
        primitive_index: Index of the struck primitive in its scene's
            primitive list, or -1 when the query was not made through a scene.
    """

    hit: bool = False
    t: float = math.inf
    point: Vec3 = field(default_factory=lambda: np.zeros(3, dtype=np.float64))
    normal: Vec3 = field(default_factory=lambda: np.zeros(3, dtype=np.float64))
    material: Material = DEFAULT_MATERIAL
    primitive_index: int = -1


def miss() -> HitRecord:
    """Create a HitRecord indicating no intersection."""
    return HitRecord()
