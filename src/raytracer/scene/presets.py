"""Built-in demo scene.

This module provides the scene shown when nothing else has been loaded: two
glossy spheres resting above a flattened green cube that serves as the
ground, lit by a single white point light.

Layout (camera at +z looking toward the origin):
- Ground: cube centered at (0, -1.5, 0), 10 x 0.1 x 10, green matte
- Left sphere: red glossy, center (-1, 0, -1), radius 1
- Right sphere: blue glossy, center (1.5, 0, 0), radius 1
- Light: white, at (5, 5, 5)

Example:
    >>> from src.raytracer.scene.presets import create_default_scene
    >>> scene = create_default_scene()
    >>> len(scene.primitives), len(scene.lights)
    (3, 1)
"""

from dataclasses import dataclass

from src.raytracer.materials.phong import BLUE_GLOSSY, GREEN_MATTE, RED_GLOSSY
from src.raytracer.scene.manager import SceneManager
from src.raytracer.scene.scene import Scene

# =============================================================================
# Default Scene Parameters
# =============================================================================


@dataclass
class DefaultSceneParams:
    """Parameters for configuring the default scene.

    Attributes:
        light_position: World position of the point light.
        light_color: RGB color of the light.
        light_intensity: Light intensity multiplier.
        camera_position: Camera position. The camera looks at the origin.
        fov: Vertical field of view in degrees.
        aspect_ratio: Width / height of the target image.

    Example:
        >>> params = DefaultSceneParams(light_intensity=2.0)
        >>> params.camera_position
        (0.0, 0.0, 5.0)
    """

    light_position: tuple[float, float, float] = (5.0, 5.0, 5.0)
    light_color: tuple[float, float, float] = (1.0, 1.0, 1.0)
    light_intensity: float = 1.0
    camera_position: tuple[float, float, float] = (0.0, 0.0, 5.0)
    fov: float = 45.0
    aspect_ratio: float = 1.0


GROUND_CENTER = (0.0, -1.5, 0.0)
GROUND_SIZE = (10.0, 0.1, 10.0)
LEFT_SPHERE_CENTER = (-1.0, 0.0, -1.0)
RIGHT_SPHERE_CENTER = (1.5, 0.0, 0.0)
SPHERE_RADIUS = 1.0


def populate_default_scene(manager: SceneManager, params: DefaultSceneParams | None = None) -> None:
    """Clear a managed scene and fill it with the default objects, light and camera."""
    if params is None:
        params = DefaultSceneParams()

    manager.clear()
    manager.add_cube(GROUND_CENTER, GROUND_SIZE, GREEN_MATTE)
    manager.add_sphere(LEFT_SPHERE_CENTER, SPHERE_RADIUS, RED_GLOSSY)
    manager.add_sphere(RIGHT_SPHERE_CENTER, SPHERE_RADIUS, BLUE_GLOSSY)
    manager.add_light(params.light_position, params.light_color, params.light_intensity)
    manager.set_camera(
        position=params.camera_position,
        target=(0.0, 0.0, 0.0),
        up=(0.0, 1.0, 0.0),
        fov=params.fov,
        aspect_ratio=params.aspect_ratio,
    )


def create_default_scene(params: DefaultSceneParams | None = None) -> Scene:
    """Create the default demo scene.

    Args:
        params: Optional overrides for the light and camera.

    Returns:
        A Scene with a ground cube, two spheres, one light and a camera.
    """
    manager = SceneManager()
    populate_default_scene(manager, params)
    return manager.scene
