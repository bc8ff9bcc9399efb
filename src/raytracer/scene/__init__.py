"""Scene module for scene representation and construction.

This module provides the scene container and the tools to fill it:

Components:
    scene: Scene (primitive arena + lights + camera) and Light
    manager: SceneManager, the validated editing API with info records
    presets: The default demo scene
    off_loader: OFF mesh file import
"""

from .manager import BoxInfo, MeshInfo, SceneManager, SphereInfo
from .off_loader import load_off, load_off_mesh, parse_off
from .presets import DefaultSceneParams, create_default_scene, populate_default_scene
from .scene import DEFAULT_BACKGROUND, Light, Scene

__all__ = [
    "Scene",
    "Light",
    "DEFAULT_BACKGROUND",
    "SceneManager",
    "SphereInfo",
    "BoxInfo",
    "MeshInfo",
    "DefaultSceneParams",
    "create_default_scene",
    "populate_default_scene",
    "load_off",
    "load_off_mesh",
    "parse_off",
]
