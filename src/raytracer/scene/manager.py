"""High-level scene editing API.

This module wraps a Scene with the editing operations an application needs:
adding spheres, boxes, cubes and meshes with a material in one call, placing
lights, configuring the camera and removing objects. Every call validates
its arguments and raises ValueError at the boundary, so the geometry kernel
never has to deal with invalid input.

The SceneManager also keeps an info record per primitive (kept in the same
order as the scene's primitive list) so that callers can list and describe
what is in the scene without inspecting the geometry.

Example:
    >>> from src.raytracer.materials import RED_GLOSSY
    >>> from src.raytracer.scene.manager import SceneManager
    >>> manager = SceneManager()
    >>> manager.add_sphere(center=(0, 0, -1), radius=0.5, material=RED_GLOSSY)
    0
    >>> manager.add_light(position=(5.0, 5.0, 5.0))
    >>> manager.get_primitive_count()
    1
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from src.raytracer.camera.pinhole import Camera
from src.raytracer.geometry.box import Box
from src.raytracer.geometry.primitive import Primitive
from src.raytracer.geometry.sphere import Sphere
from src.raytracer.geometry.triangle import MeshObject, Triangle
from src.raytracer.materials.phong import DEFAULT_MATERIAL, Material
from src.raytracer.scene.scene import Light, Scene

logger = logging.getLogger(__name__)


@dataclass
class SphereInfo:
    """Information about a sphere in the scene.

    Attributes:
        center: The center of the sphere.
        radius: The radius of the sphere.
        material: The material assigned to the sphere.
    """

    center: tuple[float, float, float]
    radius: float
    material: Material


@dataclass
class BoxInfo:
    """Information about a box in the scene.

    Attributes:
        min_corner: Local-space minimum corner.
        max_corner: Local-space maximum corner.
        material: The material assigned to the box.
        transformed: Whether the box has a non-identity transform.
    """

    min_corner: tuple[float, float, float]
    max_corner: tuple[float, float, float]
    material: Material
    transformed: bool


@dataclass
class MeshInfo:
    """Information about a triangle mesh in the scene.

    Attributes:
        triangle_count: Number of triangles in the mesh.
        material: The material shared by every triangle.
    """

    triangle_count: int
    material: Material


ObjectInfo = SphereInfo | BoxInfo | MeshInfo


def _as_tuple(value: npt.ArrayLike) -> tuple[float, float, float]:
    array = np.asarray(value, dtype=np.float64).reshape(-1)
    if array.shape != (3,):
        raise ValueError(f"Expected 3 components, got {array.shape[0]}")
    return (float(array[0]), float(array[1]), float(array[2]))


class SceneManager:
    """Scene editing facade with argument validation and object tracking.

    Attributes:
        scene: The wrapped Scene. Renderers read this directly.
        objects: One info record per primitive, in scene order.

    Example:
        >>> manager = SceneManager()
        >>> manager.add_cube(center=(0, -1.5, 0), size=(10, 0.1, 10))
        0
        >>> manager.add_sphere((1.5, 0, 0), 1.0)
        1
        >>> manager.remove(0)
        >>> manager.get_primitive_count()
        1
    """

    def __init__(self, scene: Scene | None = None) -> None:
        """Wrap an existing scene or start from an empty one."""
        self.scene = scene if scene is not None else Scene()
        self.objects: list[ObjectInfo] = [self._describe(p) for p in self.scene.primitives]

    def clear(self) -> None:
        """Remove every primitive and light. The camera is kept."""
        self.scene.clear()
        self.objects.clear()
        logger.debug("Scene cleared")

    # =========================================================================
    # Primitive Management
    # =========================================================================

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        material: Material = DEFAULT_MATERIAL,
    ) -> int:
        """Add a sphere to the scene.

        Args:
            center: The center point of the sphere as (x, y, z).
            radius: The radius of the sphere.
            material: The surface material.

        Returns:
            The index of the added primitive.

        Raises:
            ValueError: If the radius is not positive.
        """
        if not radius > 0.0:
            raise ValueError(f"Sphere radius must be positive, got {radius}")
        return self._add(Sphere(center=_as_tuple(center), radius=radius, material=material))

    def add_box(
        self,
        min_corner: tuple[float, float, float],
        max_corner: tuple[float, float, float],
        material: Material = DEFAULT_MATERIAL,
        transform: npt.ArrayLike | None = None,
    ) -> int:
        """Add a box given by its local-space corners and an optional transform.

        Raises:
            ValueError: If min_corner exceeds max_corner on any axis, or the
                transform is not an invertible 4x4 matrix.
        """
        box = Box(
            min_corner=_as_tuple(min_corner),
            max_corner=_as_tuple(max_corner),
            material=material,
            transform=np.eye(4) if transform is None else np.asarray(transform, dtype=np.float64),
        )
        return self._add(box)

    def add_cube(
        self,
        center: tuple[float, float, float],
        size: tuple[float, float, float],
        material: Material = DEFAULT_MATERIAL,
        rotation: npt.ArrayLike | None = None,
    ) -> int:
        """Add a box centered on a point, optionally rotated about its center.

        Args:
            center: World-space center.
            size: Edge lengths along x, y and z. A scalar gives a cube.
            material: The surface material.
            rotation: Optional 3x3 or 4x4 rotation matrix.

        Raises:
            ValueError: If any edge length is negative.
        """
        size_array = np.broadcast_to(np.asarray(size, dtype=np.float64), (3,))
        if np.any(size_array < 0.0):
            raise ValueError(f"Box size must be non-negative, got {tuple(size_array)}")
        box = Box.from_center_size(_as_tuple(center), size_array, material, rotation)
        return self._add(box)

    def add_mesh(
        self,
        triangles: Iterable[Triangle | Sequence[npt.ArrayLike]],
        material: Material = DEFAULT_MATERIAL,
    ) -> int:
        """Add a triangle mesh sharing one material.

        Args:
            triangles: World-space triangles, either Triangle objects or
                (v0, v1, v2) vertex triples.
            material: The material applied to every triangle.

        Raises:
            ValueError: If the mesh has no triangles.
        """
        tris = [
            t if isinstance(t, Triangle) else Triangle(*t, material=material) for t in triangles
        ]
        if not tris:
            raise ValueError("Mesh must contain at least one triangle")
        return self._add(MeshObject(triangles=tris, material=material))

    def add_primitive(self, primitive: Primitive) -> int:
        """Add an already-built primitive (e.g. a loaded or transformed mesh)."""
        return self._add(primitive)

    def remove(self, index: int) -> None:
        """Remove the primitive at an index.

        Raises:
            IndexError: If the index is out of range.
        """
        self.scene.remove_primitive(index)
        del self.objects[index]
        logger.debug("Removed primitive %d", index)

    def _add(self, primitive: Primitive) -> int:
        index = self.scene.add_primitive(primitive)
        self.objects.append(self._describe(primitive))
        logger.debug("Added %s at index %d", type(primitive).__name__, index)
        return index

    @staticmethod
    def _describe(primitive: Primitive) -> ObjectInfo:
        if isinstance(primitive, Sphere):
            return SphereInfo(
                center=_as_tuple(primitive.center),
                radius=primitive.radius,
                material=primitive.material,
            )
        if isinstance(primitive, Box):
            return BoxInfo(
                min_corner=_as_tuple(primitive.min_corner),
                max_corner=_as_tuple(primitive.max_corner),
                material=primitive.material,
                transformed=not np.allclose(primitive.transform, np.eye(4)),
            )
        if isinstance(primitive, MeshObject):
            return MeshInfo(triangle_count=len(primitive), material=primitive.material)
        # A lone triangle is described as a one-triangle mesh
        return MeshInfo(triangle_count=1, material=primitive.material)

    # =========================================================================
    # Lights and Camera
    # =========================================================================

    def add_light(
        self,
        position: tuple[float, float, float],
        color: tuple[float, float, float] = (1.0, 1.0, 1.0),
        intensity: float = 1.0,
    ) -> None:
        """Add a point light.

        Raises:
            ValueError: If the intensity is not positive.
        """
        self.scene.add_light(
            Light(position=_as_tuple(position), color=_as_tuple(color), intensity=intensity)
        )

    def clear_lights(self) -> None:
        """Remove all lights."""
        self.scene.clear_lights()

    def set_camera(
        self,
        position: tuple[float, float, float],
        target: tuple[float, float, float] = (0.0, 0.0, 0.0),
        up: tuple[float, float, float] = (0.0, 1.0, 0.0),
        fov: float = 45.0,
        aspect_ratio: float | None = None,
    ) -> Camera:
        """Configure the scene camera.

        Args:
            position: Camera position.
            target: Look-at point.
            up: Up hint.
            fov: Vertical field of view in degrees, in (0, 180).
            aspect_ratio: Width / height. Keeps the current ratio when None.

        Returns:
            The new Camera.

        Raises:
            ValueError: If fov or aspect_ratio is out of range.
        """
        if aspect_ratio is None:
            aspect_ratio = self.scene.camera.aspect_ratio
        camera = Camera(
            position=_as_tuple(position),
            target=_as_tuple(target),
            up=_as_tuple(up),
            fov=fov,
            aspect_ratio=aspect_ratio,
        )
        self.scene.set_camera(camera)
        return camera

    def set_background(self, color: tuple[float, float, float]) -> None:
        """Set the color seen by rays that hit nothing."""
        self.scene.set_background(_as_tuple(color))

    # =========================================================================
    # Scene Queries
    # =========================================================================

    def get_primitive_count(self) -> int:
        """Get the number of primitives in the scene."""
        return len(self.scene.primitives)

    def get_light_count(self) -> int:
        """Get the number of lights in the scene."""
        return len(self.scene.lights)

    def get_object_info(self, index: int) -> ObjectInfo | None:
        """Get the info record for a primitive, or None if out of range."""
        if 0 <= index < len(self.objects):
            return self.objects[index]
        return None
