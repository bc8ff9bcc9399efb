"""Phong material model.

A material is an immutable value attached to a primitive. It carries the
coefficients of the classic Phong illumination model plus a mirror
reflectivity used by the recursive integrator:

    color = ambient * base_color
          + sum over visible lights of
            (diffuse * max(N.L, 0) * base_color + specular * max(V.R, 0)^shininess)
            * light_color * light_intensity * attenuation(d)

The ambient, diffuse and specular coefficients are conceptually in [0, 1] but
are not clamped; the integrator clamps the final color instead.

Example:
    >>> from src.raytracer.materials.phong import Material
    >>> red = Material(color=(1.0, 0.0, 0.0))
    >>> mirror = Material(color=(0.9, 0.9, 0.9), reflectivity=1.0)
"""

from __future__ import annotations

from dataclasses import dataclass, replace

import numpy as np

from src.raytracer.core.ray import Vec3, as_vec3


@dataclass(frozen=True)
class Material:
    """Phong material properties.

    Attributes:
        color: Base surface color (RGB).
        ambient: Ambient reflectance coefficient.
        diffuse: Lambertian diffuse coefficient.
        specular: Specular highlight coefficient.
        shininess: Specular exponent (must be positive).
        reflectivity: Fraction of the outgoing color taken from the mirror
            reflection, in [0, 1].
    """

    color: tuple[float, float, float] = (1.0, 1.0, 1.0)
    ambient: float = 0.1
    diffuse: float = 0.7
    specular: float = 0.5
    shininess: float = 32.0
    reflectivity: float = 0.0

    def __post_init__(self) -> None:
        rgb = tuple(float(c) for c in as_vec3(self.color))
        object.__setattr__(self, "color", rgb)

        if not self.shininess > 0.0:
            raise ValueError(f"Shininess must be positive, got {self.shininess}")
        if not 0.0 <= self.reflectivity <= 1.0:
            raise ValueError(f"Reflectivity must be in [0, 1], got {self.reflectivity}")

        # Cached array form for the integrator's per-hit arithmetic
        object.__setattr__(self, "_color_array", np.array(rgb, dtype=np.float64))

    @property
    def color_array(self) -> Vec3:
        """Base color as a float64 array (read-only copy semantics expected)."""
        return self._color_array  # type: ignore[attr-defined]

    def with_color(self, color: tuple[float, float, float]) -> Material:
        """Return a copy of this material with a different base color."""
        return replace(self, color=color)

    def with_reflectivity(self, reflectivity: float) -> Material:
        """Return a copy of this material with a different reflectivity."""
        return replace(self, reflectivity=reflectivity)


DEFAULT_MATERIAL = Material()

# Presets used by the default scene and example scripts
RED_GLOSSY = Material(color=(1.0, 0.1, 0.1), reflectivity=0.3)
BLUE_GLOSSY = Material(color=(0.1, 0.1, 1.0), reflectivity=0.3)
GREEN_MATTE = Material(color=(0.1, 0.8, 0.1), reflectivity=0.1)
MIRROR = Material(color=(0.9, 0.9, 0.9), ambient=0.0, diffuse=0.1, specular=0.8, reflectivity=0.9)
