"""RGB colors for Python-scope shading results and pixel buffers.

Components are unbounded reals; clamping to [0, 1] only happens when an
image is exported.
"""

from __future__ import annotations

import math

from lightpath.core.tuples import approx_eq


class Color:
    """An RGB triple with component-wise arithmetic.

    Attributes:
        red: Red component (nominally in [0, 1]).
        green: Green component.
        blue: Blue component.
    """

    __slots__ = ("red", "green", "blue")

    def __init__(self, red: float, green: float, blue: float) -> None:
        self.red = float(red)
        self.green = float(green)
        self.blue = float(blue)

    @classmethod
    def from_u8(cls, red: int, green: int, blue: int) -> Color:
        """Build a color from 8-bit channel values (0 to 255)."""
        return cls(red / 255.0, green / 255.0, blue / 255.0)

    def __iter__(self):
        yield self.red
        yield self.green
        yield self.blue

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Color):
            return NotImplemented
        return (
            approx_eq(self.red, other.red)
            and approx_eq(self.green, other.green)
            and approx_eq(self.blue, other.blue)
        )

    __hash__ = None

    def __repr__(self) -> str:
        return f"Color({self.red}, {self.green}, {self.blue})"

    def __add__(self, other: Color) -> Color:
        if not isinstance(other, Color):
            return NotImplemented
        return Color(self.red + other.red, self.green + other.green, self.blue + other.blue)

    def __sub__(self, other: Color) -> Color:
        if not isinstance(other, Color):
            return NotImplemented
        return Color(self.red - other.red, self.green - other.green, self.blue - other.blue)

    def __mul__(self, other):
        # Color * Color is the Hadamard product used for attenuation
        if isinstance(other, Color):
            return Color(self.red * other.red, self.green * other.green, self.blue * other.blue)
        if isinstance(other, (int, float)):
            return Color(self.red * other, self.green * other, self.blue * other)
        return NotImplemented

    def __rmul__(self, other):
        if isinstance(other, (int, float)):
            return self * other
        return NotImplemented

    def gamma_encode(self) -> Color:
        """Apply the square-root (gamma 2) tone curve.

        Negative components are treated as zero.
        """
        return Color(
            math.sqrt(max(self.red, 0.0)),
            math.sqrt(max(self.green, 0.0)),
            math.sqrt(max(self.blue, 0.0)),
        )

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.red, self.green, self.blue)


BLACK = Color(0.0, 0.0, 0.0)
WHITE = Color(1.0, 1.0, 1.0)

# Sky gradient end points: SKY_BLUE at the zenith, SKY_LIGHT_BLUE at the nadir
SKY_BLUE = Color.from_u8(135, 181, 235)
SKY_LIGHT_BLUE = Color.from_u8(135, 231, 235)


def sky_gradient(unit_y: float) -> Color:
    """Sky color for a ray whose unit direction has y component ``unit_y``.

    Returns ``SKY_BLUE * t + SKY_LIGHT_BLUE * (1 - t)`` with
    ``t = (1 + unit_y) / 2``.
    """
    t = (1.0 + unit_y) / 2.0
    return SKY_BLUE * t + SKY_LIGHT_BLUE * (1.0 - t)
