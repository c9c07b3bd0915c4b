"""Thin-lens camera model.

The camera builds an orthonormal basis from the view parameters:
- u_out: from lookfrom toward lookat (the view direction)
- u_horizontal: ``up x u_out``, to the right in the image plane
- u_vertical: ``u_out x u_horizontal``, up in the image plane

The viewport sits on the focus plane, ``focus_distance`` in front of the
camera, with height ``2 * tan(fov / 2) * focus_distance`` and width
``aspect_ratio`` times that. A ray through viewport coordinates (x, y) in
[0, 1]^2 aims at the matching point on the focus plane. With a non-zero
aperture the ray origin is jittered over a disc of that radius in the lens
plane, so objects off the focus plane blur (depth of field).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from lightpath.camera.thin_lens import Camera, load_camera, cast_ray
    >>>
    >>> camera = Camera.look_at(
    ...     lookfrom=Point(0.0, 0.0, -3.0),
    ...     lookat=Point(0.0, 0.0, 0.0),
    ...     aspect_ratio=16.0 / 9.0,
    ...     fov_radians=math.pi / 2.0,
    ... )
    >>> load_camera(camera)
    >>> # Use cast_ray(x, y, stream) within a Taichi kernel
"""

import math
from dataclasses import dataclass

import numpy as np
import taichi as ti
import taichi.math as tm

from lightpath.core.config import CameraSettings, RenderConfig
from lightpath.core.ray import Ray
from lightpath.core.sampling import random_in_unit_disc
from lightpath.core.tuples import Point, Vector
from lightpath.core.vecmath import DeviceRay

vec3 = tm.vec3

# World "up" hint used to orient the image plane
WORLD_UP = Vector(0.0, 1.0, 0.0)


# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass(frozen=True)
class Camera:
    """An immutable thin-lens camera.

    Attributes:
        origin: Centre of the lens.
        horizontal: Full width of the viewport on the focus plane.
        vertical: Full height of the viewport on the focus plane.
        lower_left_corner: Lower-left corner of the viewport.
        aperture_radius: Lens radius; 0 is a pinhole.
        u_horizontal: Unit vector to the right in the lens plane.
        u_vertical: Unit vector upward in the lens plane.
    """

    origin: Point
    horizontal: Vector
    vertical: Vector
    lower_left_corner: Point
    aperture_radius: float
    u_horizontal: Vector
    u_vertical: Vector

    @classmethod
    def look_at(
        cls,
        lookfrom: Point,
        lookat: Point,
        aspect_ratio: float,
        fov_radians: float,
        focus_distance: float | None = None,
        aperture_radius: float = 0.0,
    ) -> "Camera":
        """Build a camera at ``lookfrom`` aimed at ``lookat``.

        Args:
            lookfrom: Camera position.
            lookat: Point at the centre of the view.
            aspect_ratio: Image width divided by height.
            fov_radians: Vertical field of view.
            focus_distance: Distance to the plane in focus. None uses
                ``|lookfrom - lookat|``.
            aperture_radius: Lens radius for depth of field.
        """
        u_out = (lookat - lookfrom).unit()
        u_horizontal = WORLD_UP.cross(u_out).unit()
        u_vertical = u_out.cross(u_horizontal).unit()

        viewport_height = 2.0 * math.tan(fov_radians / 2.0)
        viewport_width = aspect_ratio * viewport_height

        if focus_distance is None:
            focus_distance = (lookfrom - lookat).magnitude()
        horizontal = u_horizontal * (viewport_width * focus_distance)
        vertical = u_vertical * (viewport_height * focus_distance)
        lower_left_corner = lookfrom + u_out * focus_distance - horizontal * 0.5 - vertical * 0.5

        return cls(
            origin=lookfrom,
            horizontal=horizontal,
            vertical=vertical,
            lower_left_corner=lower_left_corner,
            aperture_radius=float(aperture_radius),
            u_horizontal=u_horizontal,
            u_vertical=u_vertical,
        )

    @classmethod
    def from_settings(cls, settings: CameraSettings, config: RenderConfig) -> "Camera":
        """Combine scene camera placement with the render's optics."""
        return cls.look_at(
            settings.lookfrom,
            settings.lookat,
            config.aspect_ratio,
            config.fov_radians,
            settings.focus_distance,
            config.aperture_radius,
        )

    def cast_ray(self, x: float, y: float, rng: np.random.Generator | None = None) -> Ray:
        """Ray through viewport coordinates (x, y), both in [0, 1].

        Args:
            x: Horizontal coordinate, 0 at the left edge.
            y: Vertical coordinate, 0 at the bottom edge.
            rng: Source for the lens sample. Only used when the aperture is
                non-zero; a fresh generator is created if omitted.

        Returns:
            A ray from the (jittered) lens point to the focus plane. The
            direction is not normalised.
        """
        offset = Vector(0.0, 0.0, 0.0)
        if self.aperture_radius > 0.0:
            if rng is None:
                rng = np.random.default_rng()
            r = Vector.random_in_unit_disc(rng)
            offset = (self.u_horizontal * r.x + self.u_vertical * r.y) * self.aperture_radius
        destination = self.lower_left_corner + self.horizontal * x + self.vertical * y
        return Ray(self.origin + offset, destination - self.origin - offset)


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=ti.f32, shape=())
_viewport_horizontal = ti.Vector.field(3, dtype=ti.f32, shape=())
_viewport_vertical = ti.Vector.field(3, dtype=ti.f32, shape=())
_lower_left_corner = ti.Vector.field(3, dtype=ti.f32, shape=())
_lens_u = ti.Vector.field(3, dtype=ti.f32, shape=())
_lens_v = ti.Vector.field(3, dtype=ti.f32, shape=())
_aperture_radius = ti.field(dtype=ti.f32, shape=())


def load_camera(camera: Camera) -> None:
    """Copy a camera into the fields read by ``cast_ray``."""
    _camera_origin[None] = vec3(*camera.origin)
    _viewport_horizontal[None] = vec3(*camera.horizontal)
    _viewport_vertical[None] = vec3(*camera.vertical)
    _lower_left_corner[None] = vec3(*camera.lower_left_corner)
    _lens_u[None] = vec3(*camera.u_horizontal)
    _lens_v[None] = vec3(*camera.u_vertical)
    _aperture_radius[None] = camera.aperture_radius


@ti.func
def cast_ray(x: ti.f32, y: ti.f32, stream: ti.i32) -> DeviceRay:
    """Kernel twin of ``Camera.cast_ray`` for the loaded camera.

    The lens is only sampled when the aperture is non-zero, so pinhole
    renders consume no randomness here.
    """
    origin = _camera_origin[None]
    offset = vec3(0.0, 0.0, 0.0)
    aperture = _aperture_radius[None]
    if aperture > 0.0:
        r = random_in_unit_disc(stream)
        offset = (_lens_u[None] * r.x + _lens_v[None] * r.y) * aperture
    destination = _lower_left_corner[None] + x * _viewport_horizontal[None] + y * _viewport_vertical[None]
    return DeviceRay(origin=origin + offset, direction=destination - origin - offset)


def get_camera_info() -> dict[str, tuple[float, float, float]]:
    """Current camera fields as plain tuples, for debugging and tests."""
    fields = {
        "origin": _camera_origin,
        "horizontal": _viewport_horizontal,
        "vertical": _viewport_vertical,
        "lower_left": _lower_left_corner,
        "u_horizontal": _lens_u,
        "u_vertical": _lens_v,
    }
    info = {}
    for name, field in fields.items():
        v = field[None]
        info[name] = (float(v[0]), float(v[1]), float(v[2]))
    return info
