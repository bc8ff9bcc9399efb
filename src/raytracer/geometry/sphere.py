"""Sphere primitive with ray-sphere intersection.

The intersection solves the quadratic

    |O + t*D - C|^2 = r^2
    a*t^2 + b*t + c = 0,   a = D.D,  b = 2*D.(O - C),  c = |O - C|^2 - r^2

and prefers the nearer root. A root closer than EPSILON is rejected to avoid
self-intersection ("shadow acne") when a secondary ray starts on the surface;
in that case the far root is used, which is how a ray starting inside the
sphere finds its exit point.

Example:
    >>> from src.raytracer.core.ray import Ray, vec3
    >>> from src.raytracer.geometry.sphere import Sphere, hit_sphere
    >>> sphere = Sphere(center=vec3(0.0, 0.0, 0.0), radius=1.0)
    >>> record = hit_sphere(sphere, Ray(vec3(0.0, 0.0, 5.0), vec3(0.0, 0.0, -1.0)))
    >>> record.t
    4.0
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy.typing as npt

from src.raytracer.core.ray import (
    DEGENERATE_EPSILON,
    EPSILON,
    Ray,
    Vec3,
    as_vec3,
    dot,
    length,
    normalize,
    transform_direction,
    transform_point,
    vec3,
)
from src.raytracer.geometry.hit import HitRecord, miss
from src.raytracer.materials.phong import DEFAULT_MATERIAL, Material


@dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere.
        radius: The radius of the sphere (positive).
        material: The surface material.
    """

    center: Vec3
    radius: float
    material: Material = DEFAULT_MATERIAL

    def __post_init__(self) -> None:
        self.center = as_vec3(self.center)
        self.radius = float(self.radius)


def hit_sphere(sphere: Sphere, ray: Ray) -> HitRecord:
    """Test for ray-sphere intersection.

    Args:
        sphere: The sphere to test intersection against.
        ray: The ray (unit direction).

    Returns:
        A HitRecord for the nearest intersection at distance >= EPSILON,
        or a miss record. A zero-length ray direction is a miss.
    """
    oc = ray.origin - sphere.center

    a = dot(ray.direction, ray.direction)
    if a < DEGENERATE_EPSILON:
        return miss()
    b = 2.0 * dot(oc, ray.direction)
    c = dot(oc, oc) - sphere.radius * sphere.radius

    discriminant = b * b - 4.0 * a * c
    if discriminant < 0.0:
        return miss()

    sqrt_d = math.sqrt(discriminant)
    t1 = (-b - sqrt_d) / (2.0 * a)
    t2 = (-b + sqrt_d) / (2.0 * a)

    t = t1
    if t < EPSILON:
        # Near root is behind the ray (or on the surface we just left)
        t = t2
        if t < EPSILON:
            return miss()

    point = ray.origin + t * ray.direction
    return HitRecord(
        hit=True,
        t=t,
        point=point,
        normal=normalize(point - sphere.center),
        material=sphere.material,
    )


def transform_sphere(sphere: Sphere, matrix: npt.NDArray) -> Sphere:
    """Bake an affine transform into a sphere.

    The center is transformed as a point. The radius is scaled by the length
    of the transformed x axis, so only uniform scale is represented exactly.

    Args:
        sphere: The sphere to transform.
        matrix: A 4x4 affine matrix.

    Returns:
        A new Sphere with the transform applied.
    """
    scale = length(transform_direction(matrix, vec3(1.0, 0.0, 0.0)))
    return Sphere(
        center=transform_point(matrix, sphere.center),
        radius=sphere.radius * scale,
        material=sphere.material,
    )
