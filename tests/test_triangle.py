"""Unit tests for triangle and mesh intersection.

Tests cover:
- Interior hits with barycentric coordinates
- Exact acceptance at vertices and on edges
- Vertices of random triangles and the shared diagonal of a rotated quad
- Parallel rays, triangles behind the ray, outside misses
- Degenerate triangles
- Two-sided intersection with a fixed face normal
- MeshObject closest-hit scan, polygon fan triangulation
"""

import numpy as np
import pytest


@pytest.fixture
def xy_triangle():
    """Right triangle (0,0,0), (1,0,0), (0,1,0) facing +z."""
    from src.raytracer.geometry.triangle import Triangle

    return Triangle((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0))


def down_ray(x, y):
    """Ray from z = 5 straight down onto the z = 0 plane."""
    from src.raytracer.core.ray import Ray

    return Ray((x, y, 5.0), (0.0, 0.0, -1.0))


class TestTriangleIntersection:
    """Tests for Möller–Trumbore intersection."""

    def test_interior_hit(self, xy_triangle):
        from src.raytracer.geometry.triangle import barycentric, hit_triangle

        record = hit_triangle(xy_triangle, down_ray(0.25, 0.25))
        assert record.hit
        assert record.t == pytest.approx(5.0)
        assert np.allclose(record.point, [0.25, 0.25, 0.0])
        assert np.allclose(record.normal, [0.0, 0.0, 1.0])

        t, u, v = barycentric(xy_triangle, down_ray(0.25, 0.5))
        assert t == pytest.approx(5.0)
        assert u == pytest.approx(0.25)
        assert v == pytest.approx(0.5)

    @pytest.mark.parametrize(
        ("x", "y", "expected_uv"),
        [
            (0.0, 0.0, (0.0, 0.0)),
            (1.0, 0.0, (1.0, 0.0)),
            (0.0, 1.0, (0.0, 1.0)),
        ],
    )
    def test_vertices_are_hits(self, xy_triangle, x, y, expected_uv):
        """Test rays through each vertex are accepted exactly."""
        from src.raytracer.geometry.triangle import barycentric

        solution = barycentric(xy_triangle, down_ray(x, y))
        assert solution is not None
        t, u, v = solution
        assert t == 5.0
        assert (u, v) == expected_uv

    @pytest.mark.parametrize(("x", "y"), [(0.5, 0.0), (0.0, 0.5), (0.5, 0.5)])
    def test_edges_are_hits(self, xy_triangle, x, y):
        from src.raytracer.geometry.triangle import hit_triangle

        assert hit_triangle(xy_triangle, down_ray(x, y)).hit

    @pytest.mark.parametrize(("x", "y"), [(0.6, 0.6), (-0.1, 0.5), (0.5, -0.1), (2.0, 2.0)])
    def test_outside_misses(self, xy_triangle, x, y):
        from src.raytracer.geometry.triangle import hit_triangle

        record = hit_triangle(xy_triangle, down_ray(x, y))
        assert not record.hit
        assert record.t == float("inf")

    def test_parallel_ray_misses(self, xy_triangle):
        from src.raytracer.core.ray import Ray
        from src.raytracer.geometry.triangle import hit_triangle

        record = hit_triangle(xy_triangle, Ray((-1.0, 0.2, 0.0), (1.0, 0.0, 0.0)))
        assert not record.hit

    def test_triangle_behind_ray(self, xy_triangle):
        from src.raytracer.core.ray import Ray
        from src.raytracer.geometry.triangle import hit_triangle

        record = hit_triangle(xy_triangle, Ray((0.2, 0.2, 5.0), (0.0, 0.0, 1.0)))
        assert not record.hit

    def test_back_side_hit_keeps_face_normal(self, xy_triangle):
        """Test intersection is two-sided; the normal stays the winding normal."""
        from src.raytracer.core.ray import Ray
        from src.raytracer.geometry.triangle import hit_triangle

        record = hit_triangle(xy_triangle, Ray((0.2, 0.2, -5.0), (0.0, 0.0, 1.0)))
        assert record.hit
        assert record.t == pytest.approx(5.0)
        assert np.allclose(record.normal, [0.0, 0.0, 1.0])

    def test_degenerate_triangle(self):
        """Test a zero-area triangle has a zero normal and never hits."""
        from src.raytracer.geometry.triangle import Triangle, hit_triangle

        tri = Triangle((0.0, 0.0, 0.0), (1.0, 1.0, 0.0), (2.0, 2.0, 0.0))
        assert np.all(tri.normal == 0.0)
        assert not hit_triangle(tri, down_ray(1.0, 1.0)).hit

    def test_transform_triangle(self, xy_triangle):
        from src.raytracer.core.ray import rotation_matrix
        from src.raytracer.geometry.triangle import transform_triangle

        rotated = transform_triangle(xy_triangle, rotation_matrix((1.0, 0.0, 0.0), 90.0))
        # +z rotated about x by 90 degrees points along -y
        assert np.allclose(rotated.normal, [0.0, -1.0, 0.0], atol=1e-12)


class TestMeshObject:
    """Tests for triangle meshes."""

    def test_closest_triangle_wins(self):
        from src.raytracer.geometry.triangle import MeshObject, hit_mesh

        far = ((-1.0, -1.0, -2.0), (1.0, -1.0, -2.0), (0.0, 1.0, -2.0))
        near = ((-1.0, -1.0, 1.0), (1.0, -1.0, 1.0), (0.0, 1.0, 1.0))
        mesh = MeshObject.from_vertices([far, near])

        record = hit_mesh(mesh, down_ray(0.0, 0.0))
        assert record.hit
        assert record.t == pytest.approx(4.0)

    def test_mesh_material_applies_to_all_triangles(self):
        from src.raytracer.geometry.triangle import MeshObject, Triangle, hit_mesh
        from src.raytracer.materials.phong import RED_GLOSSY

        tri = Triangle((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0))
        mesh = MeshObject([tri], material=RED_GLOSSY)

        assert mesh.triangles[0].material is RED_GLOSSY
        assert hit_mesh(mesh, down_ray(0.2, 0.2)).material is RED_GLOSSY

    def test_empty_mesh_misses(self):
        from src.raytracer.geometry.triangle import MeshObject, hit_mesh

        assert not hit_mesh(MeshObject([]), down_ray(0.0, 0.0)).hit

    def test_from_polygons_fan_triangulates(self):
        """Test a quad becomes two triangles; faces under 3 vertices are skipped."""
        from src.raytracer.geometry.triangle import MeshObject, hit_mesh

        vertices = [(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0)]
        mesh = MeshObject.from_polygons(vertices, [[0, 1, 2, 3], [0, 1]])

        assert len(mesh) == 2
        assert hit_mesh(mesh, down_ray(0.8, 0.2)).hit
        assert hit_mesh(mesh, down_ray(0.2, 0.8)).hit
        assert not hit_mesh(mesh, down_ray(1.5, 0.5)).hit

    def test_transform_mesh(self):
        from src.raytracer.core.ray import translation_matrix
        from src.raytracer.geometry.triangle import MeshObject, hit_mesh, transform_mesh

        mesh = MeshObject.from_vertices([((0, 0, 0), (1, 0, 0), (0, 1, 0))])
        moved = transform_mesh(mesh, translation_matrix((0.0, 0.0, 2.0)))

        record = hit_mesh(moved, down_ray(0.2, 0.2))
        assert record.t == pytest.approx(3.0)


class TestSharedEdges:
    """Tests for rays through vertices and edges shared by neighboring triangles."""

    def test_random_triangle_vertices_are_hits(self):
        """Test rays aimed exactly at a vertex are accepted from oblique angles."""
        from src.raytracer.core.ray import Ray
        from src.raytracer.geometry.triangle import Triangle, barycentric

        rng = np.random.default_rng(7)
        checked = 0
        while checked < 200:
            corners = rng.uniform(-1.0, 1.0, size=(3, 3))
            face = np.cross(corners[1] - corners[0], corners[2] - corners[0])
            if 0.5 * np.linalg.norm(face) < 0.01:
                continue
            normal = face / np.linalg.norm(face)
            tri = Triangle(*corners)
            for vertex in corners:
                origin = vertex + 2.0 * normal + rng.uniform(-0.3, 0.3, size=3)
                solution = barycentric(tri, Ray(origin, vertex - origin))
                assert solution is not None
                _, u, v = solution
                assert u >= -1e-4 and v >= -1e-4
                assert u + v <= 1.0 + 1e-4
            checked += 1

    def test_rotated_quad_diagonal_has_no_cracks(self):
        """Test rays through the diagonal shared by a quad's two triangles hit the mesh."""
        from src.raytracer.core.ray import Ray, rotation_matrix, translation_matrix
        from src.raytracer.geometry.triangle import MeshObject, hit_mesh, transform_mesh

        vertices = [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 1.0, 0.0), (0.0, 1.0, 0.0)]
        quad = MeshObject.from_polygons(vertices, [[0, 1, 2], [0, 2, 3]])

        rng = np.random.default_rng(11)
        for _ in range(20):
            matrix = translation_matrix(rng.uniform(-2.0, 2.0, size=3)) @ rotation_matrix(
                rng.normal(size=3), rng.uniform(0.0, 360.0)
            )
            mesh = transform_mesh(quad, matrix)
            normal = matrix[:3, :3] @ np.array((0.0, 0.0, 1.0))
            for s in np.linspace(0.05, 0.95, 25):
                target = (matrix @ np.array((s, s, 0.0, 1.0)))[:3]
                origin = target + 3.0 * normal + rng.uniform(-0.5, 0.5, size=3)
                record = hit_mesh(mesh, Ray(origin, target - origin))
                assert record.hit
                assert np.allclose(record.point, target, atol=1e-9)

    @pytest.mark.parametrize(("x", "y"), [(0.5, -1e-3), (-1e-3, 0.5), (0.5005, 0.5005)])
    def test_just_outside_an_edge_misses(self, xy_triangle, x, y):
        from src.raytracer.geometry.triangle import hit_triangle

        assert not hit_triangle(xy_triangle, down_ray(x, y)).hit
