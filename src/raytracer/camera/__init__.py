"""Camera module for view and ray generation.

This module provides the camera model for generating primary rays:

Components:
    pinhole: Look-at pinhole (perspective) camera model

Camera responsibilities:
    - Transform (u, v) image coordinates to world-space rays
    - Support look-at positioning with up vector
    - Derive the orthonormal basis on demand from editable parameters

Ray generation uses normalized raster coordinates:
    u in [0, 1]: left to right across image
    v in [0, 1]: top to bottom across image
"""

from .pinhole import (
    Camera,
    generate_ray,
    get_camera_basis,
    get_camera_info,
)

__all__ = [
    "Camera",
    "generate_ray",
    "get_camera_basis",
    "get_camera_info",
]
