"""Render loop: camera rays through the integrator into a canvas.

For every pixel in the configured row range the renderer averages
``rays_per_pixel`` jittered samples over the pixel footprint, gamma encodes
the mean with a square root and writes it into the canvas. Rows are counted
from the bottom of the image, so row y lands at canvas row
``height - 1 - y``.

Pixels are independent: each draws only from its own random stream, so the
image is a pure function of the scene, the camera and the seed, however the
backend schedules the work. Rows are rendered in batches so callers can
report progress between kernel launches.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from lightpath.core.renderer import render_scene
    >>> from lightpath.scene.demo import create_sphere_scene
    >>>
    >>> world, settings = create_sphere_scene()
    >>> config = RenderConfig(image_height=90, rays_per_pixel=50, seed=7)
    >>> canvas = render_scene(world, Camera.from_settings(settings, config), config)
"""

from collections.abc import Callable, Iterable

import taichi as ti
import taichi.math as tm

from lightpath.camera.thin_lens import Camera, cast_ray, load_camera
from lightpath.core import integrator
from lightpath.core.colors import Color
from lightpath.core.config import RenderConfig
from lightpath.core.integrator import trace_ray
from lightpath.core.ray import Ray
from lightpath.core.sampling import random_f32, seed_streams
from lightpath.core.tuples import Vector
from lightpath.preview.canvas import Canvas
from lightpath.scene.object import Object
from lightpath.scene.storage import load_scene

vec3 = tm.vec3

# Type alias for progress callback
# Callback receives (rows_done, rows_total)
ProgressCallback = Callable[[int, int], None]

# Rows rendered per kernel launch between progress callbacks
DEFAULT_BATCH_ROWS = 16


@ti.kernel
def _render_rows_kernel(
    pixels: ti.types.ndarray(dtype=ti.f32, ndim=3),
    width: ti.i32,
    height: ti.i32,
    row_start: ti.i32,
    row_end: ti.i32,
    rays_per_pixel: ti.i32,
    max_depth: ti.i32,
):
    for y_pixel, x_pixel in ti.ndrange((row_start, row_end), width):
        stream = y_pixel * width + x_pixel
        total = vec3(0.0, 0.0, 0.0)
        for _ in range(rays_per_pixel):
            x = (ti.cast(x_pixel, ti.f32) + random_f32(stream)) / width
            y = (ti.cast(y_pixel, ti.f32) + random_f32(stream)) / height
            ray = cast_ray(x, y, stream)
            total += trace_ray(ray.origin, ray.direction, max_depth, stream)

        color = tm.sqrt(ti.max(total / rays_per_pixel, 0.0))
        row = height - 1 - y_pixel
        for c in ti.static(range(3)):
            pixels[row, x_pixel, c] = color[c]


def _as_objects(world: Object | Iterable[Object]) -> list[Object]:
    if isinstance(world, Object):
        return [world]
    return list(world)


class Renderer:
    """Renders one scene through one camera with fixed settings.

    The scene and camera are uploaded into the shared Taichi fields at the
    start of every ``render`` or ``trace`` call, so several renderers can be
    used alternately.

    Attributes:
        camera: The camera rays are cast from.
        config: The render settings.
        last_seed: Seed used by the most recent ``render`` call, or None.
    """

    def __init__(
        self,
        world: Object | Iterable[Object],
        camera: Camera,
        config: RenderConfig,
    ) -> None:
        """Initialize the renderer.

        Args:
            world: An ObjectGroup, any iterable of objects, or a single object.
            camera: The camera to render through.
            config: Image size, sampling and depth settings.
        """
        self._objects = _as_objects(world)
        self.camera = camera
        self.config = config
        self.last_seed: int | None = None

    @property
    def width(self) -> int:
        return self.config.image_width

    @property
    def height(self) -> int:
        return self.config.image_height

    def load(self) -> int:
        """Upload the scene and camera into field storage.

        Returns:
            Number of objects loaded.
        """
        count = load_scene(self._objects)
        load_camera(self.camera)
        return count

    def render(
        self,
        canvas: Canvas | None = None,
        callback: ProgressCallback | None = None,
        batch_rows: int = DEFAULT_BATCH_ROWS,
    ) -> Canvas:
        """Render the configured row range.

        Pixels outside the row range are left untouched.

        Args:
            canvas: Canvas to draw into. A new one is allocated if omitted.
            callback: Optional callback called after each batch of rows.
                Receives (rows_done, rows_total).
            batch_rows: Rows per kernel launch.

        Returns:
            The canvas drawn into.

        Raises:
            ValueError: If ``canvas`` does not match the configured size.
        """
        if canvas is None:
            canvas = Canvas(self.width, self.height)
        elif (canvas.width, canvas.height) != (self.width, self.height):
            raise ValueError(
                f"Canvas is {canvas.width}x{canvas.height}, "
                f"expected {self.width}x{self.height}"
            )
        if batch_rows < 1:
            raise ValueError(f"batch_rows must be >= 1, got {batch_rows}")

        self.load()
        self.last_seed = seed_streams(self.config.seed, self.width * self.height)

        row_start, row_end = self.config.rows
        rows_total = row_end - row_start
        start = row_start
        while start < row_end:
            end = min(start + batch_rows, row_end)
            _render_rows_kernel(
                canvas.pixels,
                self.width,
                self.height,
                start,
                end,
                self.config.rays_per_pixel,
                self.config.max_scatter_depth,
            )
            start = end
            if callback is not None:
                callback(start - row_start, rows_total)

        return canvas

    def trace(self, ray: Ray) -> Color:
        """One sample of the color along ``ray``, before gamma encoding."""
        self.load()
        return integrator.trace(ray.origin, ray.direction, self.config.max_scatter_depth)

    def sky_color(self, direction: Vector) -> Color:
        return integrator.sky(direction)

    def __repr__(self) -> str:
        return (
            f"Renderer(width={self.width}, height={self.height}, "
            f"objects={len(self._objects)})"
        )


def render_scene(
    world: Object | Iterable[Object],
    camera: Camera,
    config: RenderConfig,
    canvas: Canvas | None = None,
    callback: ProgressCallback | None = None,
) -> Canvas:
    """Render ``world`` through ``camera`` in one call.

    See ``Renderer.render`` for the arguments.
    """
    return Renderer(world, camera, config).render(canvas, callback)
