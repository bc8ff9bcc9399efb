"""Triangle and triangle-mesh primitives.

Triangles are intersected with the Möller–Trumbore algorithm, which solves
for the ray distance t and barycentric coordinates (u, v) directly without
computing the plane equation first:

    O + t*D = (1 - u - v)*V0 + u*V1 + v*V2

Shading is flat: the reported normal is the face normal precomputed from the
winding (V1 - V0) x (V2 - V0). No vertex-normal interpolation is done.

A MeshObject owns a list of triangles sharing one material and finds the
closest hit by scanning all of them. There is no spatial index; the linear
scan is the reference behavior.

Example:
    >>> from src.raytracer.core.ray import Ray, vec3
    >>> from src.raytracer.geometry.triangle import Triangle, hit_triangle
    >>> tri = Triangle(vec3(0, 0, 0), vec3(1, 0, 0), vec3(0, 1, 0))
    >>> hit_triangle(tri, Ray(vec3(0.2, 0.2, 5.0), vec3(0.0, 0.0, -1.0))).t
    5.0
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

import numpy as np
import numpy.typing as npt

from src.raytracer.core.ray import (
    BARYCENTRIC_EPSILON,
    EPSILON,
    PARALLEL_EPSILON,
    Ray,
    Vec3,
    as_vec3,
    cross,
    dot,
    normalize,
    transform_point,
)
from src.raytracer.geometry.hit import HitRecord, miss
from src.raytracer.materials.phong import DEFAULT_MATERIAL, Material


@dataclass
class Triangle:
    """A triangle with a precomputed face normal.

    Attributes:
        v0: First vertex.
        v1: Second vertex.
        v2: Third vertex.
        material: The surface material.
        normal: Unit face normal, (v1 - v0) x (v2 - v0) normalized.
            Zero for a degenerate (zero-area) triangle.
    """

    v0: Vec3
    v1: Vec3
    v2: Vec3
    material: Material = DEFAULT_MATERIAL
    normal: Vec3 = field(init=False)
    edge1: Vec3 = field(init=False, repr=False)
    edge2: Vec3 = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.v0 = as_vec3(self.v0)
        self.v1 = as_vec3(self.v1)
        self.v2 = as_vec3(self.v2)
        self.edge1 = self.v1 - self.v0
        self.edge2 = self.v2 - self.v0
        self.normal = normalize(cross(self.edge1, self.edge2))


def barycentric(triangle: Triangle, ray: Ray) -> tuple[float, float, float] | None:
    """Run Möller–Trumbore and return the raw solution.

    Args:
        triangle: The triangle to test.
        ray: The ray (unit direction).

    Returns:
        (t, u, v) for an accepted intersection, where the barycentric weights
        of v0, v1, v2 are (1 - u - v, u, v); None for a miss.
    """
    h = cross(ray.direction, triangle.edge2)
    det = dot(triangle.edge1, h)

    # Ray parallel to the triangle plane, or degenerate triangle / direction
    if -PARALLEL_EPSILON < det < PARALLEL_EPSILON:
        return None

    f = 1.0 / det
    s = ray.origin - triangle.v0
    u = f * dot(s, h)
    if u < -BARYCENTRIC_EPSILON or u > 1.0 + BARYCENTRIC_EPSILON:
        return None

    q = cross(s, triangle.edge1)
    v = f * dot(ray.direction, q)
    if v < -BARYCENTRIC_EPSILON or u + v > 1.0 + BARYCENTRIC_EPSILON:
        return None

    t = f * dot(triangle.edge2, q)
    if t < EPSILON:
        return None

    return t, u, v


def hit_triangle(triangle: Triangle, ray: Ray) -> HitRecord:
    """Test for ray-triangle intersection.

    Args:
        triangle: The triangle to test intersection against.
        ray: The ray (unit direction).

    Returns:
        A HitRecord with the flat face normal, or a miss record.
    """
    solution = barycentric(triangle, ray)
    if solution is None:
        return miss()

    t = solution[0]
    return HitRecord(
        hit=True,
        t=t,
        point=ray.origin + t * ray.direction,
        normal=triangle.normal,
        material=triangle.material,
    )


def transform_triangle(triangle: Triangle, matrix: npt.NDArray[np.float64]) -> Triangle:
    """Bake an affine transform into a triangle's vertices (normal recomputed)."""
    return Triangle(
        v0=transform_point(matrix, triangle.v0),
        v1=transform_point(matrix, triangle.v1),
        v2=transform_point(matrix, triangle.v2),
        material=triangle.material,
    )


# =============================================================================
# Triangle Mesh
# =============================================================================


@dataclass
class MeshObject:
    """A triangle mesh whose triangles all share one material.

    Attributes:
        triangles: The owned triangles, already in world space.
        material: The material applied uniformly to every triangle.
    """

    triangles: list[Triangle]
    material: Material = DEFAULT_MATERIAL

    def __post_init__(self) -> None:
        # The mesh material wins over whatever the triangles were built with
        self.triangles = [
            t if t.material is self.material else Triangle(t.v0, t.v1, t.v2, self.material)
            for t in self.triangles
        ]

    @classmethod
    def from_vertices(
        cls,
        triangles: Iterable[Sequence[npt.ArrayLike]],
        material: Material = DEFAULT_MATERIAL,
    ) -> MeshObject:
        """Create a mesh from an iterable of (v0, v1, v2) vertex triples."""
        return cls(
            triangles=[Triangle(a, b, c, material) for a, b, c in triangles],
            material=material,
        )

    @classmethod
    def from_polygons(
        cls,
        vertices: npt.ArrayLike,
        faces: Iterable[Sequence[int]],
        material: Material = DEFAULT_MATERIAL,
    ) -> MeshObject:
        """Create a mesh from indexed polygons, fan-triangulating each face.

        A face (i0, i1, ..., in) becomes triangles (i0, ik, ik+1). Faces with
        fewer than three indices are skipped.

        Args:
            vertices: Array-like of shape (N, 3).
            faces: Vertex index sequences, one per polygon.
            material: The material applied to every triangle.
        """
        points = np.asarray(vertices, dtype=np.float64).reshape(-1, 3)
        triangles = []
        for face in faces:
            if len(face) < 3:
                continue
            for k in range(1, len(face) - 1):
                triangles.append(
                    Triangle(points[face[0]], points[face[k]], points[face[k + 1]], material)
                )
        return cls(triangles=triangles, material=material)

    def __len__(self) -> int:
        return len(self.triangles)


def hit_mesh(mesh: MeshObject, ray: Ray) -> HitRecord:
    """Find the closest triangle hit in a mesh by linear scan.

    Args:
        mesh: The mesh to test.
        ray: The ray (unit direction).

    Returns:
        The closest HitRecord over all triangles, or a miss record.
    """
    closest = miss()
    for triangle in mesh.triangles:
        record = hit_triangle(triangle, ray)
        if record.hit and record.t < closest.t:
            closest = record
    return closest


def transform_mesh(mesh: MeshObject, matrix: npt.NDArray[np.float64]) -> MeshObject:
    """Bake an affine transform into every triangle of a mesh."""
    return MeshObject(
        triangles=[transform_triangle(t, matrix) for t in mesh.triangles],
        material=mesh.material,
    )
