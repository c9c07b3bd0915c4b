"""The closed set of shapes and per-shape dispatch.

A shape is identified by its ``Shape`` tag; new shapes are added by extending
the enum and the two dispatch functions below, not by subclassing.

The Python-scope helpers at the bottom back ``Object.intersect`` and
``Object.normal_at``. They evaluate the same formulas as the Taichi functions
in float64 with NumPy, while kernels work in float32.
"""

from enum import IntEnum

import numpy as np
import taichi as ti
import taichi.math as tm

from lightpath.core.tuples import Point, Vector
from lightpath.geometry.cube import cube_local_normal, cube_normal, cube_roots, intersect_cube
from lightpath.geometry.sphere import (
    intersect_sphere,
    sphere_local_normal,
    sphere_normal,
    sphere_roots,
)

vec3 = tm.vec3


class Shape(IntEnum):
    """Shape tags stored in scene fields."""

    SPHERE = 0
    CUBE = 1


@ti.func
def intersect_local(shape: ti.i32, origin: vec3, direction: vec3):
    """Intersect an object-space ray with the given shape.

    Returns:
        Tuple of (count, t0, t1); only the first ``count`` parameters are valid.
    """
    count = 0
    t0 = 0.0
    t1 = 0.0
    if shape == int(Shape.SPHERE):
        count, t0, t1 = intersect_sphere(origin, direction)
    elif shape == int(Shape.CUBE):
        count, t0, t1 = intersect_cube(origin, direction)
    return count, t0, t1


@ti.func
def local_normal(shape: ti.i32, point: vec3) -> vec3:
    """Object-space (unnormalised) normal of ``shape`` at ``point``."""
    normal = vec3(0.0, 0.0, 0.0)
    if shape == int(Shape.SPHERE):
        normal = sphere_local_normal(point)
    elif shape == int(Shape.CUBE):
        normal = cube_local_normal(point)
    return normal


# =============================================================================
# Python-scope entry points
# =============================================================================


def _as_array(t: Point | Vector) -> np.ndarray:
    return np.array([t.x, t.y, t.z], dtype=np.float64)


def intersect_shape(shape: Shape, origin: Point, direction: Vector) -> list[float]:
    """Intersection parameters of an object-space ray with ``shape``.

    Evaluated in double precision, so rays from far away keep both hits.

    Args:
        shape: The shape to test.
        origin: Ray origin in object space.
        direction: Ray direction in object space.

    Returns:
        The parameters t in the order the shape reports them (ascending for
        spheres, discovery order for cubes).
    """
    if shape == Shape.SPHERE:
        return sphere_roots(_as_array(origin), _as_array(direction))
    return cube_roots(_as_array(origin), _as_array(direction))


def shape_normal(shape: Shape, point: Point) -> Vector:
    """Object-space normal of ``shape`` at ``point`` (not normalised)."""
    if shape == Shape.SPHERE:
        n = sphere_normal(_as_array(point))
    else:
        n = cube_normal(_as_array(point))
    return Vector(float(n[0]), float(n[1]), float(n[2]))
