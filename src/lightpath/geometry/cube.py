"""Axis-aligned cube with extents [-1, 1] on every axis of object space.

Each axis whose direction component is not near zero contributes the two
slab planes x = -1 and x = +1 (and likewise for y, z). A plane crossing is
kept when it lies ahead of the origin and the other two coordinates at that
parameter fall inside [-1, 1]. Candidates are collected in axis order, then
face order, and the search stops at two. A ray starting inside the cube
therefore reports only its exit face.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from lightpath.geometry.cube import intersect_cube
    >>> # Use intersect_cube within a Taichi kernel
"""

import numpy as np
import taichi as ti
import taichi.math as tm

vec3 = tm.vec3

# Direction components smaller than this are treated as parallel to a slab
PARALLEL_EPSILON = 1e-8


@ti.func
def intersect_cube(origin: vec3, direction: vec3):
    """Intersect an object-space ray with the unit cube.

    Args:
        origin: Ray origin in object space.
        direction: Ray direction in object space (need not be normalised).

    Returns:
        Tuple of (count, t0, t1) with ``count`` in {0, 1, 2}. The parameters
        are in order of discovery, not sorted.
    """
    count = 0
    t0 = 0.0
    t1 = 0.0

    for axis in ti.static(range(3)):
        if ti.abs(direction[axis]) >= PARALLEL_EPSILON:
            for face in ti.static((-1.0, 1.0)):
                if count < 2:
                    t = (face - origin[axis]) / direction[axis]
                    if t >= 0.0:
                        on_face = 1
                        for other in ti.static(range(3)):
                            if ti.static(other != axis):
                                if ti.abs(origin[other] + t * direction[other]) > 1.0:
                                    on_face = 0
                        if on_face == 1:
                            if count == 0:
                                t0 = t
                            else:
                                t1 = t
                            count += 1

    return count, t0, t1


@ti.func
def cube_local_normal(point: vec3) -> vec3:
    """Object-space normal of the face containing ``point``.

    Picks the axis with the largest absolute coordinate; ties go to the
    lower axis. The result is not normalised.
    """
    best_axis = 0
    best = ti.abs(point.x)
    if ti.abs(point.y) > best:
        best_axis = 1
        best = ti.abs(point.y)
    if ti.abs(point.z) > best:
        best_axis = 2

    normal = vec3(point.x, 0.0, 0.0)
    if best_axis == 1:
        normal = vec3(0.0, point.y, 0.0)
    elif best_axis == 2:
        normal = vec3(0.0, 0.0, point.z)
    return normal


# =============================================================================
# Python-scope (float64) evaluation
# =============================================================================


def cube_roots(origin: np.ndarray, direction: np.ndarray) -> list[float]:
    """Same search as ``intersect_cube`` in double precision.

    Returns:
        Up to two parameters, in order of discovery.
    """
    ts: list[float] = []
    for axis in range(3):
        if abs(direction[axis]) < PARALLEL_EPSILON:
            continue
        others = [other for other in range(3) if other != axis]
        for face in (-1.0, 1.0):
            t = (face - origin[axis]) / direction[axis]
            if t < 0.0:
                continue
            if all(abs(origin[other] + t * direction[other]) <= 1.0 for other in others):
                ts.append(float(t))
                if len(ts) == 2:
                    return ts
    return ts


def cube_normal(point: np.ndarray) -> np.ndarray:
    """Normal of the face containing ``point``; ties go to the lower axis."""
    point = np.asarray(point, dtype=np.float64)
    axis = int(np.argmax(np.abs(point)))
    normal = np.zeros(3)
    normal[axis] = point[axis]
    return normal
