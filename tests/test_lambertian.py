"""Unit tests for Lambertian (diffuse) scattering.

Tests cover:
- Scattered directions stay on the normal's side of the surface
- Attenuation equals the albedo
- Scattering a hit on an object from Python scope
- Material registry operations

Note: Imports are done inside test methods to avoid Taichi initialization issues.
"""

import numpy as np
import pytest
import taichi as ti

from lightpath.core.colors import Color
from lightpath.core.ray import Ray
from lightpath.core.tuples import Point, Vector


class TestDiffuseScatter:
    """Tests for the scattered direction and attenuation."""

    def test_attenuation_is_albedo(self):
        from lightpath.core.integrator import scatter_once
        from lightpath.core.sampling import seed_streams
        from lightpath.materials.base import Lambertian

        seed_streams(1, 16)
        albedo = Color(0.8, 0.3, 0.1)
        attenuation, _ = scatter_once(Lambertian(albedo), Vector(0.0, -1.0, 0.0), Vector(0.0, 1.0, 0.0))
        assert attenuation == albedo

    def test_direction_in_normal_hemisphere(self):
        from lightpath.core.integrator import scatter_once
        from lightpath.core.sampling import seed_streams
        from lightpath.materials.base import Lambertian

        seed_streams(2, 16)
        normal = Vector(0.0, 0.0, 1.0)
        for _ in range(50):
            result = scatter_once(Lambertian(), Vector(0.3, 0.1, -1.0), normal)
            assert result is not None
            _, direction = result
            # normal + unit vector: never below the surface, never longer than 2
            assert direction.dot(normal) >= -1e-5
            assert direction.magnitude() <= 2.0 + 1e-5

    def test_directions_vary(self):
        from lightpath.core.integrator import scatter_once
        from lightpath.core.sampling import seed_streams
        from lightpath.materials.base import Lambertian

        seed_streams(3, 16)
        normal = Vector(0.0, 1.0, 0.0)
        directions = {scatter_once(Lambertian(), Vector(0.0, -1.0, 0.0), normal)[1].to_tuple() for _ in range(10)}
        assert len(directions) > 1

    def test_mean_direction_follows_normal(self):
        from lightpath.core.sampling import seed_streams
        from lightpath.materials.lambertian import scatter_lambertian

        n = 2000
        seed_streams(4, n)
        out = ti.Vector.field(3, dtype=ti.f32, shape=n)

        @ti.kernel
        def test_kernel():
            for i in range(n):
                _, _, direction = scatter_lambertian(
                    ti.math.vec3(0.5, 0.5, 0.5), i, ti.math.vec3(0.0, 1.0, 0.0)
                )
                out[i] = direction

        test_kernel()
        mean = out.to_numpy().mean(axis=0)
        # E[normal + unit vector] is the normal itself
        assert mean[1] == pytest.approx(1.0, abs=0.1)
        assert abs(mean[0]) < 0.1
        assert abs(mean[2]) < 0.1


class TestMaterialScatter:
    """Tests for Material.scatter on an object hit."""

    def test_scatter_from_hit_point(self):
        from lightpath.core.sampling import seed_streams
        from lightpath.materials.base import Lambertian
        from lightpath.scene.intersection import hit
        from lightpath.scene.object import Object

        seed_streams(5, 16)
        material = Lambertian(Color(0.2, 0.4, 0.6))
        ball = Object.sphere(material)
        ray = Ray(Point(0.0, 0.0, -5.0), Vector(0.0, 0.0, 1.0))
        h = hit(ball.intersect(ray))

        scattered = material.scatter(ray, h)
        assert scattered is not None
        assert scattered.attenuation == Color(0.2, 0.4, 0.6)
        assert scattered.ray.origin == Point(0.0, 0.0, -1.0)
        # The outward normal at the hit point is -z
        assert scattered.ray.direction.z <= 1e-5


class TestMaterialRegistry:
    """Tests for the Lambertian registry."""

    def test_add_and_count(self):
        from lightpath.materials.lambertian import add_lambertian_material, get_lambertian_material_count

        assert get_lambertian_material_count() == 0
        assert add_lambertian_material((0.1, 0.2, 0.3)) == 0
        assert add_lambertian_material((0.4, 0.5, 0.6)) == 1
        assert get_lambertian_material_count() == 2

    def test_scatter_by_id_uses_registered_albedo(self):
        from lightpath.core.sampling import seed_streams
        from lightpath.materials.lambertian import add_lambertian_material, scatter_lambertian_by_id

        seed_streams(6, 16)
        add_lambertian_material((0.1, 0.2, 0.3))
        idx = add_lambertian_material((0.7, 0.6, 0.5))
        result = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel(mat_idx: ti.i32):
            _, attenuation, _ = scatter_lambertian_by_id(mat_idx, 0, ti.math.vec3(0.0, 1.0, 0.0))
            result[None] = attenuation

        test_kernel(idx)
        np.testing.assert_allclose(result[None].to_numpy(), [0.7, 0.6, 0.5], atol=1e-6)

    def test_registry_full(self):
        from lightpath.materials.lambertian import MAX_LAMBERTIAN_MATERIALS, add_lambertian_material

        for _ in range(MAX_LAMBERTIAN_MATERIALS):
            add_lambertian_material((0.5, 0.5, 0.5))
        with pytest.raises(RuntimeError):
            add_lambertian_material((0.5, 0.5, 0.5))
