"""Pytest configuration for raytracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session (the interactive
preview allocates Taichi fields).
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture
def unit_sphere_scene():
    """A unit sphere at the origin, one white light, camera on +z."""
    from src.raytracer.camera.pinhole import Camera
    from src.raytracer.geometry.sphere import Sphere
    from src.raytracer.scene.scene import Light, Scene

    scene = Scene(camera=Camera(position=(0.0, 0.0, 5.0), target=(0.0, 0.0, 0.0)))
    scene.add_primitive(Sphere(center=(0.0, 0.0, 0.0), radius=1.0))
    scene.add_light(Light(position=(5.0, 5.0, 5.0)))
    return scene


class CountingScene:
    """Minimal scene stand-in that records closest_hit calls.

    Returns the queued records in order, then misses.
    """

    def __init__(self, records=(), lights=(), background=(0.2, 0.2, 0.3)):
        import numpy as np

        self.records = list(records)
        self.lights = list(lights)
        self.background = np.array(background, dtype=np.float64)
        self.calls = []

    def closest_hit(self, ray):
        from src.raytracer.geometry.hit import miss

        self.calls.append(ray)
        if self.records:
            return self.records.pop(0)
        return miss()


@pytest.fixture
def counting_scene_factory():
    """Factory for CountingScene instances."""
    return CountingScene
