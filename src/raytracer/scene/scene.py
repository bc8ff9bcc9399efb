"""Scene container and closest-hit queries.

The Scene owns an ordered list of primitives (an arena: primitives are
referred to by their index), a list of point lights, the camera and the
background color. It answers one query, `closest_hit`, by testing every
primitive; there is no acceleration structure.

Insertion order matters only for ties: the comparison is a strict `<`, so
when two primitives report exactly the same distance the one added first is
kept.

The scene must not be mutated while a render is in flight. Renders only read
it, so any number of worker threads may query it concurrently.

Example:
    >>> from src.raytracer.core.ray import Ray, vec3
    >>> from src.raytracer.geometry import Sphere
    >>> from src.raytracer.scene.scene import Light, Scene
    >>> scene = Scene()
    >>> scene.add_primitive(Sphere(center=vec3(0, 0, 0), radius=1.0))
    0
    >>> scene.add_light(Light(position=(5.0, 5.0, 5.0)))
    >>> scene.closest_hit(Ray(vec3(0, 0, 5), vec3(0, 0, -1))).primitive_index
    0
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from src.raytracer.camera.pinhole import Camera
from src.raytracer.core.ray import Ray, Vec3, as_vec3
from src.raytracer.geometry.hit import HitRecord, miss
from src.raytracer.geometry.primitive import Primitive, intersect, is_primitive

# Background color of the software framebuffer renderer (dark blue-gray)
DEFAULT_BACKGROUND = (0.2, 0.2, 0.3)


@dataclass
class Light:
    """A point light.

    Attributes:
        position: World-space light position.
        color: Light color (RGB).
        intensity: Positive scalar multiplier.
    """

    position: tuple[float, float, float]
    color: tuple[float, float, float] = (1.0, 1.0, 1.0)
    intensity: float = 1.0
    position_array: Vec3 = field(init=False, repr=False, compare=False)
    color_array: Vec3 = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.intensity > 0.0:
            raise ValueError(f"Light intensity must be positive, got {self.intensity}")
        self.position_array = as_vec3(self.position)
        self.color_array = as_vec3(self.color)


class Scene:
    """An owned collection of primitives and lights, plus camera and background.

    Attributes:
        primitives: Primitives in insertion order. Indices are stable until a
            primitive is removed or the scene is cleared.
        lights: Point lights.
        camera: The active camera.
        background: Color returned for rays that hit nothing.
    """

    def __init__(
        self,
        camera: Camera | None = None,
        background: tuple[float, float, float] = DEFAULT_BACKGROUND,
    ) -> None:
        self.primitives: list[Primitive] = []
        self.lights: list[Light] = []
        self.camera = camera if camera is not None else Camera()
        self.background: Vec3 = as_vec3(background)

    # =========================================================================
    # Mutators (never call while a render is in progress)
    # =========================================================================

    def add_primitive(self, primitive: Primitive) -> int:
        """Add a primitive and return its index.

        Raises:
            TypeError: If the object is not a supported primitive kind.
        """
        if not is_primitive(primitive):
            raise TypeError(f"Unsupported primitive type: {type(primitive).__name__}")
        self.primitives.append(primitive)
        return len(self.primitives) - 1

    def remove_primitive(self, index: int) -> Primitive:
        """Remove and return the primitive at an index.

        Indices of primitives added after it shift down by one.

        Raises:
            IndexError: If the index is out of range.
        """
        if not 0 <= index < len(self.primitives):
            raise IndexError(f"Primitive index {index} out of range")
        return self.primitives.pop(index)

    def add_light(self, light: Light) -> None:
        """Add a point light."""
        self.lights.append(light)

    def clear_lights(self) -> None:
        """Remove all lights, keeping the primitives."""
        self.lights.clear()

    def set_camera(self, camera: Camera) -> None:
        """Replace the active camera."""
        self.camera = camera

    def set_background(self, color: tuple[float, float, float]) -> None:
        """Set the color returned for rays that escape the scene."""
        self.background = as_vec3(color)

    def clear(self) -> None:
        """Remove all primitives and lights. Camera and background are kept."""
        self.primitives.clear()
        self.lights.clear()

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def is_empty(self) -> bool:
        """True if there is nothing to render (no primitives or no lights)."""
        return not self.primitives or not self.lights

    def closest_hit(self, ray: Ray) -> HitRecord:
        """Find the closest intersection over all primitives.

        Args:
            ray: The ray (unit direction).

        Returns:
            The HitRecord with the smallest distance, tagged with the index of
            the struck primitive, or a miss record (t = +inf).
        """
        closest = miss()
        for index, primitive in enumerate(self.primitives):
            record = intersect(primitive, ray)
            if record.hit and record.t < closest.t:
                record.primitive_index = index
                closest = record
        return closest

    def __len__(self) -> int:
        return len(self.primitives)

    def __repr__(self) -> str:
        return (
            f"Scene(primitives={len(self.primitives)}, lights={len(self.lights)}, "
            f"background={tuple(np.round(self.background, 3))})"
        )
