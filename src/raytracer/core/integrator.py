"""Whitted-style recursive integrator.

This module turns a primary ray into a color by:
    1. Finding the closest hit in the scene (background color on a miss)
    2. Local Phong shading: ambient + per-light diffuse and specular terms,
       with quadratic distance attenuation and hard shadows
    3. Recursively tracing a mirror reflection and blending it in
    4. Clamping the result to [0, 1]

Recursion is bounded by an explicit depth counter: a call with depth 0
returns the background color without touching the scene.

The integrator holds no per-pixel state. One instance is shared by every
render worker; all it reads is the scene and the settings.

Example:
    >>> from src.raytracer.core.integrator import Integrator, RenderSettings
    >>> from src.raytracer.scene.presets import create_default_scene
    >>> from src.raytracer.camera.pinhole import generate_ray
    >>> scene = create_default_scene()
    >>> integrator = Integrator(scene, RenderSettings(max_depth=3))
    >>> color = integrator.trace_ray(generate_ray(scene.camera, 0.5, 0.5), 3)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

import numpy as np

from src.raytracer.core.ray import EPSILON, Ray, Vec3, dot, reflect
from src.raytracer.geometry.hit import HitRecord

if TYPE_CHECKING:
    from collections.abc import Sequence

    from src.raytracer.scene.scene import Light

# =============================================================================
# Rendering Constants
# =============================================================================

# Default recursion depth for primary rays
DEFAULT_MAX_DEPTH = 3

# Quadratic light falloff: 1 / (1 + LINEAR * d + QUADRATIC * d^2)
ATTENUATION_CONSTANT = 1.0
ATTENUATION_LINEAR = 0.09
ATTENUATION_QUADRATIC = 0.032


@dataclass
class RenderSettings:
    """Integrator configuration.

    Attributes:
        max_depth: Recursion depth for primary rays. 0 renders the
            background everywhere; 1 disables visible reflections.
        shadows: Whether shadow rays are cast.
        reflections: Whether mirror reflections are traced.
    """

    max_depth: int = DEFAULT_MAX_DEPTH
    shadows: bool = True
    reflections: bool = True

    def __post_init__(self) -> None:
        if self.max_depth < 0:
            raise ValueError(f"Max depth must be non-negative, got {self.max_depth}")


class SceneView(Protocol):
    """The read-only part of a scene the integrator needs."""

    lights: Sequence[Light]
    background: Vec3

    def closest_hit(self, ray: Ray) -> HitRecord: ...


def attenuation(distance: float) -> float:
    """Quadratic distance falloff for point lights."""
    return 1.0 / (
        ATTENUATION_CONSTANT
        + ATTENUATION_LINEAR * distance
        + ATTENUATION_QUADRATIC * distance * distance
    )


class Integrator:
    """Recursive ray tracer with Phong shading, hard shadows and reflections.

    Attributes:
        scene: The scene to trace against.
        settings: Depth and feature toggles.
    """

    def __init__(self, scene: SceneView, settings: RenderSettings | None = None) -> None:
        self.scene = scene
        self.settings = settings if settings is not None else RenderSettings()

    def trace_ray(self, ray: Ray, depth: int) -> Vec3:
        """Compute the color seen along a ray.

        Args:
            ray: The ray to trace.
            depth: Remaining recursion depth. 0 returns the background.

        Returns:
            RGB color clamped to [0, 1].
        """
        if depth <= 0:
            return self.scene.background.copy()

        hit = self.scene.closest_hit(ray)
        if not hit.hit:
            return self.scene.background.copy()

        color = self.shade(hit, ray)

        reflectivity = hit.material.reflectivity
        if self.settings.reflections and reflectivity > 0.0:
            reflected_ray = Ray(
                hit.point + EPSILON * hit.normal,
                reflect(ray.direction, hit.normal),
            )
            reflected = self.trace_ray(reflected_ray, depth - 1)
            color = color * (1.0 - reflectivity) + reflected * reflectivity

        return np.clip(color, 0.0, 1.0)

    def shade(self, hit: HitRecord, ray: Ray) -> Vec3:
        """Local Phong shading at a hit point (no reflection, not clamped).

        Args:
            hit: A HitRecord with hit == True.
            ray: The ray that produced the hit.

        Returns:
            Unclamped RGB color.
        """
        material = hit.material
        base = material.color_array
        normal = hit.normal
        view_dir = -ray.direction

        color = material.ambient * base

        for light in self.scene.lights:
            to_light = light.position_array - hit.point
            light_distance = math.sqrt(dot(to_light, to_light))
            if light_distance == 0.0:
                continue
            light_dir = to_light / light_distance

            if self.is_in_shadow(hit.point, light_dir, light_distance):
                continue

            diff = max(dot(normal, light_dir), 0.0)
            reflect_dir = reflect(-light_dir, normal)
            spec = max(dot(view_dir, reflect_dir), 0.0) ** material.shininess

            scale = light.intensity * attenuation(light_distance)
            contribution = material.diffuse * diff * base + material.specular * spec
            color = color + contribution * light.color_array * scale

        return color

    def is_in_shadow(self, point: Vec3, light_dir: Vec3, light_distance: float) -> bool:
        """Test whether a point is occluded from a light.

        Args:
            point: The shaded surface point.
            light_dir: Unit direction from the point toward the light.
            light_distance: Distance from the point to the light.

        Returns:
            True if anything lies strictly between the point and the light.
            Always False when shadows are disabled.
        """
        if not self.settings.shadows:
            return False

        shadow_ray = Ray(point + EPSILON * light_dir, light_dir)
        occluder = self.scene.closest_hit(shadow_ray)
        return occluder.hit and occluder.t < light_distance
