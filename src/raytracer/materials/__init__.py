"""Materials module for surface shading properties.

This module provides the material model attached to every primitive:

Components:
    phong: Immutable Phong material (ambient, diffuse, specular, shininess)
        with a mirror reflectivity used by the recursive integrator.

Materials are plain immutable values. Primitives hold their own material,
and hit records carry the material of the struck primitive so the integrator
never needs to look it up again.
"""

from .phong import (
    BLUE_GLOSSY,
    DEFAULT_MATERIAL,
    GREEN_MATTE,
    MIRROR,
    RED_GLOSSY,
    Material,
)

__all__ = [
    "Material",
    "DEFAULT_MATERIAL",
    "RED_GLOSSY",
    "BLUE_GLOSSY",
    "GREEN_MATTE",
    "MIRROR",
]
