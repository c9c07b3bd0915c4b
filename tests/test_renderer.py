"""Tests for the render loop.

Tests cover:
- An empty scene renders the sky gradient
- A sphere shows up as a disc, at the right place in the image
- Seeded renders are reproducible, pixel by pixel
- Noise shrinks as rays per pixel grow
- Row ranges, progress callbacks and canvas validation

Note: Imports are done inside test methods to avoid Taichi initialization issues.
Images are kept tiny so the whole module runs in a few seconds on the CPU.
"""

import math

import numpy as np
import pytest

from lightpath.core.colors import Color, sky_gradient
from lightpath.core.config import RenderConfig
from lightpath.core.ray import Ray
from lightpath.core.transformations import translation
from lightpath.core.tuples import Point, Vector
from lightpath.materials.base import Dielectric, Lambertian, Metallic


def _camera(lookfrom: Point, lookat: Point, config: RenderConfig):
    from lightpath.camera.thin_lens import Camera

    return Camera.look_at(lookfrom, lookat, config.aspect_ratio, config.fov_radians)


def _mixed_scene():
    from lightpath.scene.group import ObjectGroup
    from lightpath.scene.object import Object

    return ObjectGroup(
        [
            Object.sphere(Lambertian(Color(0.5, 0.5, 0.5))).with_transform(
                translation(0.0, -101.0, 0.0) @ _uniform_scale(100.0)
            ),
            Object.sphere(Lambertian(Color(0.7, 0.3, 0.3))),
            Object.sphere(Metallic(Color(0.8, 0.8, 0.8), fuzz=0.3)).with_transform(
                translation(-2.0, 0.0, 0.0)
            ),
            Object.cube(Dielectric(1.5)).with_transform(
                translation(2.0, 0.0, 0.0) @ _uniform_scale(0.8)
            ),
        ]
    )


def _uniform_scale(s: float):
    from lightpath.core.transformations import scaling

    return scaling(s, s, s)


class TestSkyOnly:
    """Tests for rendering an empty scene."""

    def test_empty_scene_renders_gradient(self):
        from lightpath.core.renderer import render_scene

        config = RenderConfig(aspect_ratio=1.0, image_height=8, rays_per_pixel=4, seed=1)
        camera = _camera(Point(0.0, 0.0, 0.0), Point(0.0, 0.0, 1.0), config)
        canvas = render_scene([], camera, config)

        assert np.all(canvas.pixels > 0.0)
        for x, y in [(0, 0), (3, 4), (7, 7), (5, 1)]:
            # Pixel centre in viewport coordinates, with row 0 at the top
            u = (x + 0.5) / 8
            v = (8 - 1 - y + 0.5) / 8
            direction = camera.cast_ray(u, v).direction
            expected = sky_gradient(direction.unit().y).gamma_encode()
            got = canvas.pixel_at(x, y)
            assert got.red == pytest.approx(expected.red, abs=0.02)
            assert got.green == pytest.approx(expected.green, abs=0.02)
            assert got.blue == pytest.approx(expected.blue, abs=0.02)

    def test_top_is_deeper_blue(self):
        from lightpath.core.renderer import render_scene

        config = RenderConfig(aspect_ratio=1.0, image_height=10, rays_per_pixel=2, seed=2)
        canvas = render_scene([], _camera(Point(0.0, 0.0, 0.0), Point(0.0, 0.0, 1.0), config), config)
        # Green falls off toward the zenith
        assert canvas.pixel_at(5, 0).green < canvas.pixel_at(5, 9).green


class TestSphereDisc:
    """Tests for where geometry lands in the image."""

    def test_centred_sphere_is_a_black_disc(self):
        from lightpath.core.renderer import render_scene
        from lightpath.scene.object import Object

        config = RenderConfig(
            aspect_ratio=1.0, image_height=20, rays_per_pixel=4, max_scatter_depth=0, seed=3
        )
        camera = _camera(Point(0.0, 0.0, -2.0), Point(0.0, 0.0, 0.0), config)
        canvas = render_scene(Object.sphere(), camera, config)

        # The sphere subtends 30 degrees from the centre, about 5.8 pixels here
        for y in range(20):
            for x in range(20):
                r = math.hypot(x + 0.5 - 10.0, y + 0.5 - 10.0)
                pixel = canvas.pixels[y, x]
                if r < 4.5:
                    assert np.all(pixel == 0.0), (x, y)
                elif r > 7.0:
                    assert np.all(pixel > 0.0), (x, y)

    def test_rows_are_flipped(self):
        from lightpath.core.renderer import render_scene
        from lightpath.scene.object import Object

        config = RenderConfig(
            aspect_ratio=1.0, image_height=20, rays_per_pixel=4, max_scatter_depth=0, seed=4
        )
        camera = _camera(Point(0.0, 0.0, -4.0), Point(0.0, 0.0, 0.0), config)
        above = Object.sphere().with_transform(translation(0.0, 2.0, 0.0))
        canvas = render_scene(above, camera, config)

        # A sphere above the view axis appears in the top half of the canvas
        assert canvas.pixel_at(10, 4) == Color(0.0, 0.0, 0.0)
        assert canvas.pixel_at(10, 15) != Color(0.0, 0.0, 0.0)


class TestDeterminism:
    """Tests for seeded rendering."""

    def test_same_seed_bit_identical(self):
        from lightpath.core.renderer import render_scene

        config = RenderConfig(aspect_ratio=1.5, image_height=12, rays_per_pixel=6, max_scatter_depth=8, seed=1234)
        camera = _camera(Point(0.0, 1.0, -5.0), Point(0.0, 0.0, 0.0), config)
        first = render_scene(_mixed_scene(), camera, config).pixels.copy()
        second = render_scene(_mixed_scene(), camera, config).pixels.copy()
        np.testing.assert_array_equal(first, second)

    def test_different_seed_differs(self):
        from lightpath.core.renderer import render_scene

        camera_config = RenderConfig(aspect_ratio=1.5, image_height=12, rays_per_pixel=6, seed=1)
        camera = _camera(Point(0.0, 1.0, -5.0), Point(0.0, 0.0, 0.0), camera_config)
        first = render_scene(_mixed_scene(), camera, camera_config).pixels.copy()
        other = RenderConfig(aspect_ratio=1.5, image_height=12, rays_per_pixel=6, seed=2)
        second = render_scene(_mixed_scene(), camera, other).pixels.copy()
        assert not np.array_equal(first, second)

    def test_row_range_matches_full_render(self):
        from lightpath.core.renderer import render_scene
        from lightpath.preview.canvas import Canvas

        full_config = RenderConfig(aspect_ratio=1.0, image_height=10, rays_per_pixel=4, seed=77)
        camera = _camera(Point(0.0, 1.0, -5.0), Point(0.0, 0.0, 0.0), full_config)
        full = render_scene(_mixed_scene(), camera, full_config).pixels.copy()

        partial_config = RenderConfig(
            aspect_ratio=1.0, image_height=10, row_range=(2, 5), rays_per_pixel=4, seed=77
        )
        canvas = Canvas(10, 10)
        canvas.pixels[:] = -1.0
        render_scene(_mixed_scene(), camera, partial_config, canvas=canvas)

        # Rows 2..4 from the bottom are canvas rows 5..7
        np.testing.assert_array_equal(canvas.pixels[5:8], full[5:8])
        assert np.all(canvas.pixels[:5] == -1.0)
        assert np.all(canvas.pixels[8:] == -1.0)

    def test_noise_shrinks_with_more_rays(self):
        from lightpath.core.renderer import render_scene
        from lightpath.preview.export import compute_rmse

        def render(rays: int, seed: int) -> np.ndarray:
            config = RenderConfig(
                aspect_ratio=1.0, image_height=12, rays_per_pixel=rays, max_scatter_depth=6, seed=seed
            )
            camera = _camera(Point(0.0, 1.0, -5.0), Point(0.0, 0.0, 0.0), config)
            return render_scene(_mixed_scene(), camera, config).pixels.copy()

        reference = render(512, 100)
        coarse = compute_rmse(render(2, 200), reference)
        fine = compute_rmse(render(64, 300), reference)
        assert fine < coarse


class TestRenderer:
    """Tests for the Renderer class API."""

    def test_progress_callback(self):
        from lightpath.core.renderer import Renderer

        config = RenderConfig(aspect_ratio=1.0, image_height=10, rays_per_pixel=1, seed=5)
        renderer = Renderer([], _camera(Point(0.0, 0.0, 0.0), Point(0.0, 0.0, 1.0), config), config)
        calls = []
        renderer.render(callback=lambda done, total: calls.append((done, total)), batch_rows=4)
        assert calls == [(4, 10), (8, 10), (10, 10)]
        assert renderer.last_seed == 5

    def test_empty_row_range_renders_nothing(self):
        from lightpath.core.renderer import Renderer

        config = RenderConfig(aspect_ratio=1.0, image_height=4, row_range=(2, 2), rays_per_pixel=1, seed=5)
        renderer = Renderer([], _camera(Point(0.0, 0.0, 0.0), Point(0.0, 0.0, 1.0), config), config)
        calls = []
        canvas = renderer.render(callback=lambda done, total: calls.append((done, total)))
        assert calls == []
        assert np.all(canvas.pixels == 0.0)

    def test_canvas_size_checked(self):
        from lightpath.core.renderer import Renderer
        from lightpath.preview.canvas import Canvas

        config = RenderConfig(aspect_ratio=1.0, image_height=4, rays_per_pixel=1)
        renderer = Renderer([], _camera(Point(0.0, 0.0, 0.0), Point(0.0, 0.0, 1.0), config), config)
        with pytest.raises(ValueError):
            renderer.render(canvas=Canvas(5, 4))

    def test_trace_and_sky(self):
        from lightpath.core.renderer import Renderer
        from lightpath.scene.object import Object

        config = RenderConfig(aspect_ratio=1.0, image_height=4, max_scatter_depth=0)
        renderer = Renderer(
            Object.sphere(), _camera(Point(0.0, 0.0, -5.0), Point(0.0, 0.0, 0.0), config), config
        )
        assert renderer.trace(Ray(Point(0.0, 0.0, -5.0), Vector(0.0, 0.0, 1.0))) == Color(0.0, 0.0, 0.0)
        assert renderer.trace(Ray(Point(0.0, 0.0, -5.0), Vector(0.0, 1.0, 0.0))) == sky_gradient(1.0)
        assert renderer.sky_color(Vector(0.0, -1.0, 0.0)) == sky_gradient(-1.0)

    def test_demo_scenes_render(self):
        from lightpath.camera.thin_lens import Camera
        from lightpath.core.renderer import render_scene
        from lightpath.scene.demo import create_cube_scene, create_sphere_scene

        config = RenderConfig(image_height=9, rays_per_pixel=2, max_scatter_depth=5, aperture_radius=0.05, seed=8)
        for factory in (create_sphere_scene, create_cube_scene):
            world, settings = factory()
            canvas = render_scene(world, Camera.from_settings(settings, config), config)
            assert canvas.pixels.shape == (9, 16, 3)
            assert np.all(np.isfinite(canvas.pixels))
            assert np.all(canvas.pixels >= 0.0)
            assert canvas.pixels.max() > 0.0
