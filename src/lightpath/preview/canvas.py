"""Pixel buffer for rendered images.

A ``Canvas`` holds unclamped linear (or already gamma encoded) RGB values in
a float32 NumPy array of shape (height, width, 3). Row 0 is the top of the
image. Values are only clamped and quantised when the canvas is exported.

Example:
    >>> from lightpath.core.colors import Color
    >>> from lightpath.preview.canvas import Canvas
    >>> canvas = Canvas(4, 2)
    >>> canvas.write_pixel(0, 0, Color(1.0, 0.5, 0.0))
    >>> canvas.to_ppm().splitlines()[:3]
    ['P3', '4 2', '255']
"""

from __future__ import annotations

import numpy as np

from lightpath.core.colors import Color
from lightpath.preview.export import image_to_uint8

# Plain PPM readers are only required to accept lines up to this length
PPM_MAX_LINE_LENGTH = 70


class Canvas:
    """A width x height grid of RGB pixels.

    Attributes:
        width: Number of columns.
        height: Number of rows.
        pixels: The float32 buffer, shape (height, width, 3). Kernels write
            into it directly.
    """

    def __init__(self, width: int, height: int) -> None:
        if width < 1 or height < 1:
            raise ValueError(f"Canvas dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.pixels = np.zeros((height, width, 3), dtype=np.float32)

    def write_pixel(self, x: int, y: int, color: Color) -> None:
        """Set the pixel in column ``x`` of row ``y`` (row 0 at the top)."""
        self.pixels[y, x] = (color.red, color.green, color.blue)

    def pixel_at(self, x: int, y: int) -> Color:
        r, g, b = self.pixels[y, x]
        return Color(float(r), float(g), float(b))

    def to_ppm(self) -> str:
        """Encode the canvas as a plain (P3) PPM document.

        Each image row starts a new line, and lines are wrapped so none is
        longer than 70 characters. The document ends with a newline.
        """
        lines = ["P3", f"{self.width} {self.height}", "255"]
        values = image_to_uint8(self.pixels)
        for row in values:
            line = ""
            for value in row.reshape(-1):
                token = str(int(value))
                if not line:
                    line = token
                elif len(line) + 1 + len(token) <= PPM_MAX_LINE_LENGTH:
                    line = f"{line} {token}"
                else:
                    lines.append(line)
                    line = token
            lines.append(line)
        return "\n".join(lines) + "\n"

    def __repr__(self) -> str:
        return f"Canvas(width={self.width}, height={self.height})"
