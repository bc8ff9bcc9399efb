"""Unit tests for the Whitted integrator.

Tests cover:
- RenderSettings validation and light attenuation
- Depth handling and background on a miss
- Exact Phong shading for a head-on light
- Hard shadows (on, off, and is_in_shadow distances)
- Reflection blending, reflection ray construction and clamping
"""

import numpy as np
import pytest

BACKGROUND = np.array([0.2, 0.2, 0.3])


def make_hit(material, point=(0.0, 0.0, 0.0), normal=(0.0, 0.0, 1.0), t=1.0):
    from src.raytracer.geometry.hit import HitRecord

    return HitRecord(
        hit=True,
        t=t,
        point=np.array(point, dtype=np.float64),
        normal=np.array(normal, dtype=np.float64),
        material=material,
        primitive_index=0,
    )


def down_ray():
    from src.raytracer.core.ray import Ray

    return Ray((0.0, 0.0, 1.0), (0.0, 0.0, -1.0))


class TestRenderSettings:
    """Tests for RenderSettings and attenuation."""

    def test_defaults(self):
        from src.raytracer.core.integrator import RenderSettings

        settings = RenderSettings()
        assert settings.max_depth == 3
        assert settings.shadows
        assert settings.reflections

    def test_negative_depth(self):
        from src.raytracer.core.integrator import RenderSettings

        with pytest.raises(ValueError, match="non-negative"):
            RenderSettings(max_depth=-1)

    def test_attenuation(self):
        from src.raytracer.core.integrator import attenuation

        assert attenuation(0.0) == 1.0
        assert abs(attenuation(4.0) - 1.0 / 1.872) < 1e-12
        assert attenuation(10.0) < attenuation(5.0)


class TestTraceRay:
    """Tests for trace_ray on real scenes."""

    def test_depth_zero_is_background_without_queries(self, counting_scene_factory):
        from src.raytracer.core.integrator import Integrator
        from src.raytracer.materials import RED_GLOSSY

        scene = counting_scene_factory(records=[make_hit(RED_GLOSSY)])
        color = Integrator(scene).trace_ray(down_ray(), 0)
        assert np.allclose(color, BACKGROUND)
        assert len(scene.calls) == 0

    def test_background_is_a_copy(self, counting_scene_factory):
        from src.raytracer.core.integrator import Integrator

        scene = counting_scene_factory()
        color = Integrator(scene).trace_ray(down_ray(), 3)
        color[:] = 1.0
        assert np.allclose(scene.background, BACKGROUND)

    def test_miss_returns_background(self, unit_sphere_scene):
        from src.raytracer.core.integrator import Integrator
        from src.raytracer.core.ray import Ray

        ray = Ray((0.0, 5.0, 5.0), (0.0, 0.0, -1.0))
        color = Integrator(unit_sphere_scene).trace_ray(ray, 3)
        assert np.allclose(color, unit_sphere_scene.background)

    def test_head_on_light_exact(self):
        """Light at the eye: N.L = 1, perfect specular, distance 4."""
        from src.raytracer.core.integrator import Integrator
        from src.raytracer.core.ray import Ray
        from src.raytracer.geometry import Sphere
        from src.raytracer.materials import Material
        from src.raytracer.scene.scene import Light, Scene

        base = np.array([1.0, 0.1, 0.1])
        scene = Scene()
        scene.add_primitive(Sphere((0.0, 0.0, 0.0), 1.0, Material(color=tuple(base))))
        scene.add_light(Light(position=(0.0, 0.0, 5.0)))

        color = Integrator(scene).trace_ray(Ray((0.0, 0.0, 5.0), (0.0, 0.0, -1.0)), 3)
        expected = np.clip(0.1 * base + (0.7 * base + 0.5) / 1.872, 0.0, 1.0)
        assert np.allclose(color, expected)

    def test_result_is_clamped(self, counting_scene_factory):
        from src.raytracer.core.integrator import Integrator
        from src.raytracer.materials import Material

        scene = counting_scene_factory(records=[make_hit(Material(ambient=5.0))])
        color = Integrator(scene).trace_ray(down_ray(), 1)
        assert np.allclose(color, [1.0, 1.0, 1.0])

    def test_light_at_hit_point_is_skipped(self, counting_scene_factory):
        from src.raytracer.core.integrator import Integrator
        from src.raytracer.materials import Material
        from src.raytracer.scene.scene import Light

        scene = counting_scene_factory(
            records=[make_hit(Material(color=(1.0, 0.0, 0.0)))],
            lights=[Light(position=(0.0, 0.0, 0.0))],
        )
        color = Integrator(scene).trace_ray(down_ray(), 1)
        assert np.allclose(color, [0.1, 0.0, 0.0])
        # No shadow ray was cast for the skipped light
        assert len(scene.calls) == 1


class TestShadows:
    """Tests for shadow rays."""

    def _occluded_scene(self):
        from src.raytracer.geometry import Sphere
        from src.raytracer.scene.scene import Light, Scene

        scene = Scene()
        scene.add_primitive(Sphere((0.0, 0.0, 0.0), 1.0))
        scene.add_primitive(Sphere((2.5, 0.0, 3.0), 0.5))
        scene.add_light(Light(position=(5.0, 0.0, 5.0)))
        return scene

    def test_occluded_point_gets_ambient_only(self):
        from src.raytracer.core.integrator import Integrator
        from src.raytracer.core.ray import Ray

        color = Integrator(self._occluded_scene()).trace_ray(
            Ray((0.0, 0.0, 5.0), (0.0, 0.0, -1.0)), 3
        )
        assert np.allclose(color, [0.1, 0.1, 0.1])

    def test_disabling_shadows_lights_the_point(self):
        from src.raytracer.core.integrator import Integrator, RenderSettings
        from src.raytracer.core.ray import Ray

        integrator = Integrator(self._occluded_scene(), RenderSettings(shadows=False))
        color = integrator.trace_ray(Ray((0.0, 0.0, 5.0), (0.0, 0.0, -1.0)), 3)
        assert np.all(color > 0.1 + 1e-3)

    def test_is_in_shadow_respects_light_distance(self):
        from src.raytracer.core.integrator import Integrator
        from src.raytracer.geometry import Sphere
        from src.raytracer.scene.scene import Scene

        scene = Scene()
        scene.add_primitive(Sphere((0.0, 2.0, 0.0), 0.5))
        integrator = Integrator(scene)
        point = np.zeros(3)
        up = np.array([0.0, 1.0, 0.0])

        assert integrator.is_in_shadow(point, up, 5.0)
        # The occluder starts at 1.5, beyond a light at distance 1
        assert not integrator.is_in_shadow(point, up, 1.0)

    def test_is_in_shadow_disabled(self):
        from src.raytracer.core.integrator import Integrator, RenderSettings
        from src.raytracer.geometry import Sphere
        from src.raytracer.scene.scene import Scene

        scene = Scene()
        scene.add_primitive(Sphere((0.0, 2.0, 0.0), 0.5))
        integrator = Integrator(scene, RenderSettings(shadows=False))
        assert not integrator.is_in_shadow(np.zeros(3), np.array([0.0, 1.0, 0.0]), 5.0)


class TestReflections:
    """Tests for reflection recursion and blending."""

    def test_perfect_mirror_shows_background(self, counting_scene_factory):
        from src.raytracer.core.integrator import Integrator
        from src.raytracer.materials import Material

        scene = counting_scene_factory(records=[make_hit(Material(reflectivity=1.0))])
        color = Integrator(scene).trace_ray(down_ray(), 2)
        assert np.allclose(color, BACKGROUND)
        assert len(scene.calls) == 2

    def test_half_blend(self, counting_scene_factory):
        from src.raytracer.core.integrator import Integrator
        from src.raytracer.materials import Material

        material = Material(color=(1.0, 0.0, 0.0), reflectivity=0.5)
        scene = counting_scene_factory(records=[make_hit(material)])
        color = Integrator(scene).trace_ray(down_ray(), 2)
        assert np.allclose(color, 0.5 * np.array([0.1, 0.0, 0.0]) + 0.5 * BACKGROUND)

    def test_reflection_ray_offset_and_direction(self, counting_scene_factory):
        from src.raytracer.core.integrator import Integrator
        from src.raytracer.materials import Material

        scene = counting_scene_factory(records=[make_hit(Material(reflectivity=0.5))])
        Integrator(scene).trace_ray(down_ray(), 2)

        reflected = scene.calls[1]
        assert np.allclose(reflected.origin, [0.0, 0.0, 1e-3])
        assert np.allclose(reflected.direction, [0.0, 0.0, 1.0])

    def test_last_level_reflection_uses_background(self, counting_scene_factory):
        from src.raytracer.core.integrator import Integrator
        from src.raytracer.materials import Material

        scene = counting_scene_factory(records=[make_hit(Material(reflectivity=1.0))])
        color = Integrator(scene).trace_ray(down_ray(), 1)
        assert np.allclose(color, BACKGROUND)
        assert len(scene.calls) == 1

    def test_zero_reflectivity_traces_once(self, counting_scene_factory):
        from src.raytracer.core.integrator import Integrator
        from src.raytracer.materials import Material

        scene = counting_scene_factory(records=[make_hit(Material(color=(0.0, 1.0, 0.0)))])
        color = Integrator(scene).trace_ray(down_ray(), 3)
        assert np.allclose(color, [0.0, 0.1, 0.0])
        assert len(scene.calls) == 1

    def test_reflections_disabled(self, counting_scene_factory):
        from src.raytracer.core.integrator import Integrator, RenderSettings
        from src.raytracer.materials import Material

        scene = counting_scene_factory(records=[make_hit(Material(reflectivity=1.0))])
        color = Integrator(scene, RenderSettings(reflections=False)).trace_ray(down_ray(), 3)
        assert np.allclose(color, [0.1, 0.1, 0.1])
        assert len(scene.calls) == 1
