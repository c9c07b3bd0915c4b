"""Unit tests for the Taichi vector helpers.

Note: Imports are done inside test methods to avoid Taichi initialization issues.
"""

import math

import numpy as np
import pytest
import taichi as ti


class TestRayAt:
    """Tests for points along a kernel ray."""

    def test_ray_at(self):
        from lightpath.core.vecmath import DeviceRay, ray_at

        result = ti.Vector.field(3, dtype=ti.f32, shape=3)

        @ti.kernel
        def test_kernel():
            ray = DeviceRay(origin=ti.math.vec3(2.0, 3.0, 4.0), direction=ti.math.vec3(1.0, 0.0, 0.0))
            result[0] = ray_at(ray, 0.0)
            result[1] = ray_at(ray, -1.0)
            result[2] = ray_at(ray, 2.5)

        test_kernel()
        np.testing.assert_allclose(
            result.to_numpy(), [[2.0, 3.0, 4.0], [1.0, 3.0, 4.0], [4.5, 3.0, 4.0]], atol=1e-6
        )


class TestReflect:
    """Tests for reflection about a normal."""

    def test_reflect_at_45_degrees(self):
        from lightpath.core.vecmath import reflect

        result = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = reflect(ti.math.vec3(1.0, -1.0, 0.0), ti.math.vec3(0.0, 1.0, 0.0))

        test_kernel()
        assert result[None].to_numpy() == pytest.approx([1.0, 1.0, 0.0], abs=1e-6)

    def test_reflect_off_slanted_surface(self):
        from lightpath.core.vecmath import reflect

        result = ti.Vector.field(3, dtype=ti.f32, shape=())
        s = math.sqrt(2.0) / 2.0

        @ti.kernel
        def test_kernel():
            result[None] = reflect(ti.math.vec3(0.0, -1.0, 0.0), ti.math.vec3(s, s, 0.0))

        test_kernel()
        assert result[None].to_numpy() == pytest.approx([1.0, 0.0, 0.0], abs=1e-5)

    def test_reflect_keeps_length_and_negates_normal_component(self):
        from lightpath.core.vecmath import reflect

        n = 200
        rng = np.random.default_rng(17)
        incident = rng.uniform(-5.0, 5.0, size=(n, 3)).astype(np.float32)
        normals = rng.normal(size=(n, 3))
        normals = (normals / np.linalg.norm(normals, axis=1, keepdims=True)).astype(np.float32)

        incident_field = ti.Vector.field(3, dtype=ti.f32, shape=n)
        normal_field = ti.Vector.field(3, dtype=ti.f32, shape=n)
        out = ti.Vector.field(3, dtype=ti.f32, shape=n)
        incident_field.from_numpy(incident)
        normal_field.from_numpy(normals)

        @ti.kernel
        def test_kernel():
            for i in range(n):
                out[i] = reflect(incident_field[i], normal_field[i])

        test_kernel()
        reflected = out.to_numpy()
        np.testing.assert_allclose(
            np.linalg.norm(reflected, axis=1), np.linalg.norm(incident, axis=1), rtol=1e-4
        )
        np.testing.assert_allclose(
            np.sum(reflected * normals, axis=1), -np.sum(incident * normals, axis=1), atol=1e-3
        )


class TestRefract:
    """Tests for Snell's law and Schlick reflectance."""

    def test_straight_through(self):
        from lightpath.core.vecmath import refract

        result = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = refract(ti.math.vec3(0.0, 0.0, -1.0), ti.math.vec3(0.0, 0.0, 1.0), 1.0 / 1.5)

        test_kernel()
        assert result[None].to_numpy() == pytest.approx([0.0, 0.0, -1.0], abs=1e-6)

    def test_snell_law(self):
        from lightpath.core.vecmath import refract

        result = ti.Vector.field(3, dtype=ti.f32, shape=())
        eta = 1.0 / 1.5
        theta_in = math.radians(30.0)

        @ti.kernel
        def test_kernel():
            incident = ti.math.vec3(ti.sin(theta_in), -ti.cos(theta_in), 0.0)
            result[None] = refract(incident, ti.math.vec3(0.0, 1.0, 0.0), eta)

        test_kernel()
        d = result[None].to_numpy()
        assert np.linalg.norm(d) == pytest.approx(1.0, abs=1e-5)
        assert d[0] == pytest.approx(eta * math.sin(theta_in), abs=1e-5)
        assert d[1] < 0.0

    def test_schlick_at_normal_incidence(self):
        from lightpath.core.vecmath import schlick_reflectance

        result = ti.field(dtype=ti.f32, shape=2)

        @ti.kernel
        def test_kernel():
            result[0] = schlick_reflectance(1.0, 1.0 / 1.5)
            result[1] = schlick_reflectance(0.0, 1.0 / 1.5)

        test_kernel()
        assert result[0] == pytest.approx(0.04, abs=1e-5)
        assert result[1] == pytest.approx(1.0, abs=1e-5)

    def test_near_zero(self):
        from lightpath.core.vecmath import near_zero

        result = ti.field(dtype=ti.i32, shape=2)

        @ti.kernel
        def test_kernel():
            result[0] = near_zero(ti.math.vec3(1e-9, -1e-9, 0.0))
            result[1] = near_zero(ti.math.vec3(1e-9, 1e-3, 0.0))

        test_kernel()
        assert result[0] == 1
        assert result[1] == 0
