"""Kind-tagged points and vectors for Python-scope geometry.

Points and vectors share a base class but are never interchangeable:

    vector + vector = vector
    point + vector  = point
    point - point   = vector
    point - vector  = point
    point + point   -> TypeError

Illegal combinations return ``NotImplemented`` from the operator methods, so
Python raises ``TypeError`` the same way it does for any unsupported operand.

Equality is approximate (component-wise within ``EPSILON``) to absorb
floating-point drift. Scene construction, camera setup and tests use these
classes; Taichi kernels work on ``ti.math.vec3`` values instead (see
``lightpath.core.vecmath``).

Example:
    >>> from lightpath.core.tuples import Point, Vector
    >>> p = Point(1.0, 2.0, 3.0)
    >>> v = Vector(0.0, 1.0, 0.0)
    >>> p + v
    Point(1.0, 3.0, 3.0)
"""

from __future__ import annotations

import math

import numpy as np

# Tolerance used by every approximate comparison in the package
EPSILON = 1e-4


def approx_eq(a: float, b: float) -> bool:
    """Return True if two floats differ by less than EPSILON."""
    return abs(a - b) < EPSILON


class Tuple:
    """Three real coordinates plus a homogeneous ``w`` fixed by the subclass.

    Do not instantiate directly; use ``Point`` or ``Vector``.
    """

    __slots__ = ("x", "y", "z")

    w: float = 0.0

    def __init__(self, x: float, y: float, z: float) -> None:
        self.x = float(x)
        self.y = float(y)
        self.z = float(z)

    def __iter__(self):
        yield self.x
        yield self.y
        yield self.z

    def __getitem__(self, index: int) -> float:
        return (self.x, self.y, self.z)[index]

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return (
            approx_eq(self.x, other.x)
            and approx_eq(self.y, other.y)
            and approx_eq(self.z, other.z)
        )

    __hash__ = None  # approximate equality cannot be hashed consistently

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.x}, {self.y}, {self.z})"

    def __neg__(self):
        return type(self)(-self.x, -self.y, -self.z)

    def __mul__(self, scalar: float):
        if not isinstance(scalar, (int, float)):
            return NotImplemented
        return type(self)(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float):
        if not isinstance(scalar, (int, float)):
            return NotImplemented
        return type(self)(self.x / scalar, self.y / scalar, self.z / scalar)

    def as_array(self) -> list[float]:
        """Homogeneous coordinates ``[x, y, z, w]``."""
        return [self.x, self.y, self.z, self.w]

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)


class Vector(Tuple):
    """A direction or displacement (w = 0). Unaffected by translation."""

    __slots__ = ()

    w = 0.0

    def __add__(self, other):
        if isinstance(other, Vector):
            return Vector(self.x + other.x, self.y + other.y, self.z + other.z)
        if isinstance(other, Point):
            return Point(self.x + other.x, self.y + other.y, self.z + other.z)
        return NotImplemented

    def __sub__(self, other):
        if isinstance(other, Vector):
            return Vector(self.x - other.x, self.y - other.y, self.z - other.z)
        return NotImplemented

    def dot(self, other: Vector) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector) -> Vector:
        return Vector(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def magnitude_squared(self) -> float:
        return self.x * self.x + self.y * self.y + self.z * self.z

    def magnitude(self) -> float:
        return math.sqrt(self.magnitude_squared())

    def unit(self) -> Vector:
        """Return the vector scaled to length 1.

        The zero vector has no direction; callers must not pass one. Its
        result is non-finite (NumPy-style division) rather than an exception.
        """
        magnitude = self.magnitude()
        if magnitude == 0.0:
            return Vector(math.nan, math.nan, math.nan)
        return self / magnitude

    @staticmethod
    def random_in_unit_sphere(rng: np.random.Generator) -> Vector:
        """Uniform random point strictly inside the unit ball.

        Rejection sampling: draw in the enclosing cube until the sample lies
        inside the ball.

        Args:
            rng: The random generator to draw from.
        """
        while True:
            x, y, z = rng.uniform(-1.0, 1.0, size=3)
            v = Vector(x, y, z)
            if v.magnitude() < 1.0:
                return v

    @staticmethod
    def random_in_unit_disc(rng: np.random.Generator) -> Vector:
        """Uniform random point strictly inside the unit disc of the x-y plane.

        Args:
            rng: The random generator to draw from.
        """
        while True:
            x, y = rng.uniform(-1.0, 1.0, size=2)
            v = Vector(x, y, 0.0)
            if v.magnitude() < 1.0:
                return v


class Point(Tuple):
    """A position in space (w = 1)."""

    __slots__ = ()

    w = 1.0

    def __add__(self, other):
        if isinstance(other, Vector):
            return Point(self.x + other.x, self.y + other.y, self.z + other.z)
        return NotImplemented

    def __sub__(self, other):
        if isinstance(other, Point):
            return Vector(self.x - other.x, self.y - other.y, self.z - other.z)
        if isinstance(other, Vector):
            return Point(self.x - other.x, self.y - other.y, self.z - other.z)
        return NotImplemented


ORIGIN = Point(0.0, 0.0, 0.0)
