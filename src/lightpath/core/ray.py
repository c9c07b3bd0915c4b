"""Python-scope ray type.

Kernels carry rays as ``DeviceRay`` values (see ``lightpath.core.vecmath``);
this class is what scene-building code, tests and the single-ray API see.
"""

from __future__ import annotations

from dataclasses import dataclass

from lightpath.core.matrix import Matrix
from lightpath.core.tuples import Point, Vector


@dataclass(frozen=True)
class Ray:
    """A half-line from ``origin`` along ``direction``.

    The direction need not be normalised.

    Attributes:
        origin: Starting point.
        direction: Direction of travel.
    """

    origin: Point
    direction: Vector

    @classmethod
    def from_coords(cls, ox: float, oy: float, oz: float, dx: float, dy: float, dz: float) -> Ray:
        return cls(Point(ox, oy, oz), Vector(dx, dy, dz))

    def position(self, t: float) -> Point:
        """The point ``origin + t * direction``."""
        return self.origin + self.direction * t

    def transform(self, m: Matrix) -> Ray:
        """Apply a 4x4 transform to both origin and direction."""
        return Ray(m @ self.origin, m @ self.direction)
