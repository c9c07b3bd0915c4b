"""Shape primitives in object space.

Components:
    sphere: Unit sphere at the origin
    cube: Axis-aligned cube spanning [-1, 1] on every axis
    shapes: The Shape tag and dispatch over both primitives

Intersection routines are Taichi functions. ``intersect_shape`` and
``shape_normal`` evaluate the same formulas from Python scope in float64.
"""

from .shapes import Shape, intersect_shape, shape_normal

__all__ = ["Shape", "intersect_shape", "shape_normal"]
