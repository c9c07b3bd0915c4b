"""Unit sphere centred at the origin of object space.

The intersection solves ``|O + tD|^2 = 1`` with the robust quadratic formula
from Ray Tracing Gems, which avoids catastrophic cancellation when b^2 is
nearly equal to 4ac. Both roots are reported in ascending order even when
they are equal or negative; choosing which one counts as a hit is left to
hit selection.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from lightpath.geometry.sphere import intersect_sphere
    >>> # Use intersect_sphere within a Taichi kernel
"""

import math

import numpy as np
import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.func
def _solve_quadratic_robust(h: ti.f32, a: ti.f32, c: ti.f32, sqrt_d: ti.f32):
    """Solve a*t^2 + 2*h*t + c = 0 given sqrt(h^2 - a*c).

    Returns:
        Tuple of (t0, t1) where t0 <= t1.
    """
    # q = -(h + sign(h) * sqrt(discriminant))
    sign_h = ti.select(h < 0.0, -1.0, 1.0)
    q = -(h + sign_h * sqrt_d)

    t0 = 0.0
    t1 = 0.0

    if ti.abs(q) < 1e-10:
        # Tangent ray through the centre; the textbook formula is exact here
        t0 = (-h - sqrt_d) / a
        t1 = (-h + sqrt_d) / a
    else:
        t0 = q / a
        t1 = c / q

    if t0 > t1:
        temp = t0
        t0 = t1
        t1 = temp

    return t0, t1


@ti.func
def intersect_sphere(origin: vec3, direction: vec3):
    """Intersect an object-space ray with the unit sphere.

    With the sphere at the origin the quadratic coefficients are:
        a = dot(D, D)
        h = dot(D, O)  (half of the traditional b)
        c = dot(O, O) - 1

    Args:
        origin: Ray origin in object space.
        direction: Ray direction in object space (need not be normalised).

    Returns:
        Tuple of (count, t0, t1). ``count`` is 0 when the discriminant is
        negative and 2 otherwise, with ``t0 <= t1``.
    """
    a = tm.dot(direction, direction)
    h = tm.dot(direction, origin)
    c = tm.dot(origin, origin) - 1.0

    discriminant = h * h - a * c

    count = 0
    t0 = 0.0
    t1 = 0.0

    if discriminant >= 0.0:
        sqrt_d = ti.sqrt(discriminant)
        t0, t1 = _solve_quadratic_robust(h, a, c, sqrt_d)
        count = 2

    return count, t0, t1


@ti.func
def sphere_local_normal(point: vec3) -> vec3:
    """Object-space normal: the vector from the centre to ``point``."""
    return point


# =============================================================================
# Python-scope (float64) evaluation
# =============================================================================


def sphere_roots(origin: np.ndarray, direction: np.ndarray) -> list[float]:
    """Same solve as ``intersect_sphere`` in double precision.

    Returns:
        An empty list on a miss, otherwise both roots in ascending order.
    """
    a = float(np.dot(direction, direction))
    h = float(np.dot(direction, origin))
    c = float(np.dot(origin, origin)) - 1.0

    discriminant = h * h - a * c
    if discriminant < 0.0:
        return []

    sqrt_d = math.sqrt(discriminant)
    sign_h = -1.0 if h < 0.0 else 1.0
    q = -(h + sign_h * sqrt_d)
    if abs(q) < 1e-10:
        t0 = (-h - sqrt_d) / a
        t1 = (-h + sqrt_d) / a
    else:
        t0 = q / a
        t1 = c / q
    return sorted([t0, t1])


def sphere_normal(point: np.ndarray) -> np.ndarray:
    return np.asarray(point, dtype=np.float64)
