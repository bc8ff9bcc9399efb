"""Unit tests for the ray module.

Tests cover:
- Ray construction and direction normalization
- Vector utility functions (dot, cross, normalize, length, reflect)
- Affine transform helpers (translation, scale, rotation)
"""

import math

import numpy as np
import pytest


class TestRayBasics:
    """Tests for Ray dataclass and basic operations."""

    def test_direction_is_normalized(self):
        """Test that the direction is normalized at construction."""
        from src.raytracer.core.ray import Ray, vec3

        ray = Ray(vec3(1.0, 2.0, 3.0), vec3(0.0, 0.0, -2.0))
        assert np.allclose(ray.direction, [0.0, 0.0, -1.0])
        assert np.allclose(ray.origin, [1.0, 2.0, 3.0])

    def test_accepts_tuples(self):
        """Test that plain tuples are converted to float64 arrays."""
        from src.raytracer.core.ray import Ray

        ray = Ray((0, 0, 0), (3, 4, 0))
        assert ray.origin.dtype == np.float64
        assert np.allclose(ray.direction, [0.6, 0.8, 0.0])

    def test_zero_direction_stays_zero(self):
        """Test that a zero direction is kept as the zero vector."""
        from src.raytracer.core.ray import Ray

        ray = Ray((0.0, 0.0, 0.0), (0.0, 0.0, 0.0))
        assert np.all(ray.direction == 0.0)

    def test_ray_at(self):
        """Test ray_at computes origin + t * direction."""
        from src.raytracer.core.ray import Ray, ray_at

        ray = Ray((0.0, 0.0, 5.0), (0.0, 0.0, -1.0))
        assert np.allclose(ray_at(ray, 0.0), [0.0, 0.0, 5.0])
        assert np.allclose(ray_at(ray, 4.0), [0.0, 0.0, 1.0])
        assert np.allclose(ray_at(ray, -1.0), [0.0, 0.0, 6.0])

    def test_as_vec3_rejects_wrong_size(self):
        """Test that as_vec3 rejects anything but three components."""
        from src.raytracer.core.ray import as_vec3

        with pytest.raises(ValueError, match="3-component"):
            as_vec3((1.0, 2.0))
        with pytest.raises(ValueError, match="3-component"):
            as_vec3((1.0, 2.0, 3.0, 4.0))


class TestVectorUtilities:
    """Tests for vector helper functions."""

    def test_dot(self):
        from src.raytracer.core.ray import dot, vec3

        assert dot(vec3(1, 2, 3), vec3(4, 5, 6)) == 32.0

    def test_cross_matches_numpy(self):
        """Test cross product against np.cross."""
        from src.raytracer.core.ray import cross, vec3

        a = vec3(1.0, -2.0, 0.5)
        b = vec3(0.3, 4.0, -1.0)
        assert np.allclose(cross(a, b), np.cross(a, b))

    def test_cross_right_handed(self):
        """Test x cross y = z."""
        from src.raytracer.core.ray import cross, vec3

        assert np.allclose(cross(vec3(1, 0, 0), vec3(0, 1, 0)), [0.0, 0.0, 1.0])

    def test_length(self):
        from src.raytracer.core.ray import length, length_squared, vec3

        assert length(vec3(3, 4, 0)) == 5.0
        assert length_squared(vec3(3, 4, 0)) == 25.0

    def test_normalize(self):
        from src.raytracer.core.ray import length, normalize, vec3

        n = normalize(vec3(10.0, -5.0, 2.0))
        assert abs(length(n) - 1.0) < 1e-12

    def test_normalize_zero_vector(self):
        """Test that normalizing a zero vector returns zero instead of NaN."""
        from src.raytracer.core.ray import normalize, vec3

        n = normalize(vec3(0.0, 0.0, 0.0))
        assert np.all(n == 0.0)

    def test_reflect(self):
        """Test mirror reflection about a normal."""
        from src.raytracer.core.ray import reflect, vec3

        r = reflect(vec3(1.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0))
        assert np.allclose(r, [1.0, 1.0, 0.0])

    def test_reflect_head_on(self):
        """Test that a head-on ray reflects straight back."""
        from src.raytracer.core.ray import reflect, vec3

        r = reflect(vec3(0.0, 0.0, -1.0), vec3(0.0, 0.0, 1.0))
        assert np.allclose(r, [0.0, 0.0, 1.0])

    def test_near_zero(self):
        from src.raytracer.core.ray import near_zero, vec3

        assert near_zero(vec3(0.0, 1e-14, 0.0))
        assert not near_zero(vec3(0.0, 1e-3, 0.0))


class TestTransforms:
    """Tests for 4x4 affine transform helpers."""

    def test_translation_moves_points_not_directions(self):
        from src.raytracer.core.ray import (
            transform_direction,
            transform_point,
            translation_matrix,
            vec3,
        )

        m = translation_matrix((1.0, 2.0, 3.0))
        assert np.allclose(transform_point(m, vec3(0, 0, 0)), [1.0, 2.0, 3.0])
        assert np.allclose(transform_direction(m, vec3(0, 0, 1)), [0.0, 0.0, 1.0])

    def test_scale(self):
        from src.raytracer.core.ray import scale_matrix, transform_point, vec3

        m = scale_matrix((2.0, 3.0, 4.0))
        assert np.allclose(transform_point(m, vec3(1, 1, 1)), [2.0, 3.0, 4.0])

    def test_rotation_about_z(self):
        """Test a 90 degree rotation about z maps x to y."""
        from src.raytracer.core.ray import rotation_matrix, transform_direction, vec3

        m = rotation_matrix((0.0, 0.0, 1.0), 90.0)
        assert np.allclose(transform_direction(m, vec3(1, 0, 0)), [0.0, 1.0, 0.0])

    def test_rotation_is_orthonormal(self):
        from src.raytracer.core.ray import rotation_matrix

        m = rotation_matrix((1.0, 2.0, 3.0), 37.0)[:3, :3]
        assert np.allclose(m @ m.T, np.eye(3))
        assert math.isclose(np.linalg.det(m), 1.0)

    def test_rotation_zero_axis(self):
        from src.raytracer.core.ray import rotation_matrix

        with pytest.raises(ValueError, match="non-zero"):
            rotation_matrix((0.0, 0.0, 0.0), 45.0)
