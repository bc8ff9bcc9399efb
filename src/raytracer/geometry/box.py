"""Box primitive with slab-method intersection.

A box is axis-aligned in its own local space, spanning [min_corner,
max_corner], and placed in the world by an optional affine transform. The
transform and its inverse are cached together so a ray is moved into local
space with a single matrix product instead of re-inverting per ray.

The local ray direction is deliberately left unnormalized: with
local_origin = M^-1 * O and local_direction = M^-1 * D, the local point at
parameter t maps back to O + t*D, so slab distances are world distances even
under non-uniform scale.

Normals are carried back to world space with the transpose of the inverse
transform, which keeps them perpendicular to the faces under non-uniform
scale.

Example:
    >>> from src.raytracer.core.ray import Ray, vec3
    >>> from src.raytracer.geometry.box import Box, hit_box
    >>> box = Box(min_corner=vec3(-1, -1, -1), max_corner=vec3(1, 1, 1))
    >>> hit_box(box, Ray(vec3(0.0, 0.0, 5.0), vec3(0.0, 0.0, -1.0))).t
    4.0
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np
import numpy.typing as npt

from src.raytracer.core.ray import (
    EPSILON,
    SLAB_EPSILON,
    Ray,
    Vec3,
    as_vec3,
    normalize,
    transform_direction,
    transform_point,
    translation_matrix,
)
from src.raytracer.geometry.hit import HitRecord, miss
from src.raytracer.materials.phong import DEFAULT_MATERIAL, Material

# Local-space face normals in the order they are tested: -x, +x, -y, +y, -z, +z
_FACE_NORMALS = (
    np.array((-1.0, 0.0, 0.0)),
    np.array((1.0, 0.0, 0.0)),
    np.array((0.0, -1.0, 0.0)),
    np.array((0.0, 1.0, 0.0)),
    np.array((0.0, 0.0, -1.0)),
    np.array((0.0, 0.0, 1.0)),
)


@dataclass
class Box:
    """A box defined by local-space corners and an affine transform.

    Attributes:
        min_corner: Local-space minimum corner.
        max_corner: Local-space maximum corner.
        material: The surface material.
        transform: 4x4 local-to-world affine matrix (identity by default).
        inverse_transform: Cached world-to-local matrix, derived from transform.
    """

    min_corner: Vec3
    max_corner: Vec3
    material: Material = DEFAULT_MATERIAL
    transform: npt.NDArray[np.float64] = field(default_factory=lambda: np.eye(4))
    inverse_transform: npt.NDArray[np.float64] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.min_corner = as_vec3(self.min_corner)
        self.max_corner = as_vec3(self.max_corner)
        if np.any(self.min_corner > self.max_corner):
            raise ValueError(
                f"Box min corner {self.min_corner} exceeds max corner {self.max_corner}"
            )
        self.set_transform(self.transform)

    def set_transform(self, transform: npt.ArrayLike) -> None:
        """Replace the local-to-world transform and refresh the cached inverse.

        Raises:
            ValueError: If the matrix is not 4x4 or not invertible.
        """
        matrix = np.asarray(transform, dtype=np.float64)
        if matrix.shape != (4, 4):
            raise ValueError(f"Box transform must be 4x4, got shape {matrix.shape}")
        try:
            inverse = np.linalg.inv(matrix)
        except np.linalg.LinAlgError as exc:
            raise ValueError("Box transform must be invertible") from exc
        self.transform = matrix.copy()
        self.inverse_transform = inverse

    @classmethod
    def from_center_size(
        cls,
        center: npt.ArrayLike,
        size: npt.ArrayLike,
        material: Material = DEFAULT_MATERIAL,
        rotation: npt.ArrayLike | None = None,
    ) -> Box:
        """Create a box centered on a point, optionally rotated about it.

        Args:
            center: World-space center of the box.
            size: Edge lengths along the local x, y and z axes.
            material: The surface material.
            rotation: Optional 3x3 or 4x4 rotation matrix applied about the center.

        Returns:
            A Box spanning [-size/2, size/2] in local space.
        """
        half = 0.5 * as_vec3(size)
        transform = translation_matrix(center)
        if rotation is not None:
            rot = np.asarray(rotation, dtype=np.float64)
            rot4 = np.eye(4)
            rot4[:3, :3] = rot[:3, :3]
            transform = transform @ rot4
        return cls(min_corner=-half, max_corner=half, material=material, transform=transform)


def _face_normal(local_point: Vec3, lo: Vec3, hi: Vec3, axis: int, sign: float) -> Vec3:
    """Find the local normal of the face a hit point lies on.

    The face of the slab that bounded the reported distance wins whenever the
    point lies on it. Otherwise, faces are tested in a fixed priority order
    (-x, +x, -y, +y, -z, +z) so edges and corners resolve deterministically,
    and the bounding slab is the fallback when the point is on no face.
    """
    planes = (lo[0], hi[0], lo[1], hi[1], lo[2], hi[2])
    slab_face = 2 * axis + (1 if sign > 0.0 else 0)
    if abs(local_point[axis] - planes[slab_face]) < EPSILON:
        return _FACE_NORMALS[slab_face]
    for face, plane in enumerate(planes):
        if abs(local_point[face // 2] - plane) < EPSILON:
            return _FACE_NORMALS[face]
    # Face tolerance too tight for this box scale
    return _FACE_NORMALS[slab_face]


def hit_box(box: Box, ray: Ray) -> HitRecord:
    """Test for ray-box intersection using the slab method.

    When the ray origin is inside the box the exit point is reported, never a
    point behind the origin.

    Args:
        box: The box to test intersection against.
        ray: The ray (unit direction).

    Returns:
        A HitRecord for the intersection, or a miss record.
    """
    inv = box.inverse_transform
    local_origin = transform_point(inv, ray.origin)
    local_direction = transform_direction(inv, ray.direction)
    lo = box.min_corner
    hi = box.max_corner

    t_min = -math.inf
    t_max = math.inf
    near_axis = -1
    far_axis = -1

    for i in range(3):
        d = local_direction[i]
        if abs(d) < SLAB_EPSILON:
            # Parallel to this slab: the origin must already lie between its planes
            if local_origin[i] < lo[i] or local_origin[i] > hi[i]:
                return miss()
            continue

        inv_d = 1.0 / d
        t0 = (lo[i] - local_origin[i]) * inv_d
        t1 = (hi[i] - local_origin[i]) * inv_d
        if t0 > t1:
            t0, t1 = t1, t0

        if t0 > t_min:
            t_min = t0
            near_axis = i
        if t1 < t_max:
            t_max = t1
            far_axis = i

        if t_max < t_min:
            return miss()

    # Every slab parallel: only possible for a degenerate direction
    if far_axis < 0:
        return miss()

    if t_min < EPSILON:
        if t_max < EPSILON:
            return miss()
        # Origin inside the box: report the exit point
        t = t_max
        axis = far_axis
        sign = 1.0 if local_direction[axis] > 0.0 else -1.0
    else:
        t = t_min
        axis = near_axis
        sign = -1.0 if local_direction[axis] > 0.0 else 1.0

    local_point = local_origin + t * local_direction
    local_normal = _face_normal(local_point, lo, hi, axis, sign)
    normal = normalize(inv[:3, :3].T @ local_normal)

    return HitRecord(
        hit=True,
        t=t,
        point=ray.origin + t * ray.direction,
        normal=normal,
        material=box.material,
    )


def transform_box(box: Box, matrix: npt.ArrayLike) -> Box:
    """Compose an additional world transform onto a box.

    Args:
        box: The box to transform.
        matrix: A 4x4 affine matrix applied after the box's own transform.

    Returns:
        A new Box with the composed transform and a fresh cached inverse.
    """
    return Box(
        min_corner=box.min_corner,
        max_corner=box.max_corner,
        material=box.material,
        transform=np.asarray(matrix, dtype=np.float64) @ box.transform,
    )
