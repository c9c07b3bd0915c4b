"""Builders for 4x4 affine transforms.

Every builder returns a fresh ``Matrix`` starting from the identity. They can
be combined with ``Matrix.matmul`` or with the fluent methods on ``Matrix``:

    >>> from lightpath.core.matrix import Matrix
    >>> from lightpath.core.transformations import Axis
    >>> m = Matrix.identity(4).rotate(Axis.X, 1.57).scale(5, 5, 5).translate(10, 5, 7)

which rotates first and translates last.
"""

import math
from enum import IntEnum

from lightpath.core.matrix import Matrix


class Axis(IntEnum):
    """Coordinate axis for rotations."""

    X = 0
    Y = 1
    Z = 2


def translation(x: float, y: float, z: float) -> Matrix:
    """Move points by (x, y, z). Vectors are unaffected."""
    m = Matrix.identity(4)
    m[0, 3] = x
    m[1, 3] = y
    m[2, 3] = z
    return m


def scaling(x: float, y: float, z: float) -> Matrix:
    m = Matrix.identity(4)
    m[0, 0] = x
    m[1, 1] = y
    m[2, 2] = z
    return m


def rotation(axis: Axis, radians: float) -> Matrix:
    """Right-handed rotation by ``radians`` around ``axis``."""
    c = math.cos(radians)
    s = math.sin(radians)
    m = Matrix.identity(4)
    axis = Axis(axis)
    if axis == Axis.X:
        m[1, 1] = c
        m[1, 2] = -s
        m[2, 1] = s
        m[2, 2] = c
    elif axis == Axis.Y:
        m[0, 0] = c
        m[0, 2] = s
        m[2, 0] = -s
        m[2, 2] = c
    else:
        m[0, 0] = c
        m[0, 1] = -s
        m[1, 0] = s
        m[1, 1] = c
    return m


def shearing(xy: float, xz: float, yx: float, yz: float, zx: float, zy: float) -> Matrix:
    """Shear transform.

    ``xy`` moves x in proportion to y, ``xz`` moves x in proportion to z, and
    so on for the other four coefficients.
    """
    m = Matrix.identity(4)
    m[0, 1] = xy
    m[0, 2] = xz
    m[1, 0] = yx
    m[1, 2] = yz
    m[2, 0] = zx
    m[2, 1] = zy
    return m
