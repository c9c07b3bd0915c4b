"""Image export utilities for rendered canvases.

The render loop already gamma encodes (square root) every pixel, so export
only clamps to [0, 1] and quantises to 8 bits.

Supported formats:
    - Plain PPM (P3), written directly
    - PNG and the other formats Pillow can write, chosen by file extension

Example:
    >>> from lightpath.preview.export import save_image
    >>> save_image(canvas, "out.png")
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

if TYPE_CHECKING:
    from lightpath.preview.canvas import Canvas


def image_to_uint8(image: npt.NDArray[np.floating]) -> npt.NDArray[np.uint8]:
    """Convert a float image in [0, 1] to uint8, clamping and rounding half up.

    Args:
        image: Image array of shape (H, W, 3).

    Returns:
        8-bit image array of shape (H, W, 3).
    """
    clamped = np.clip(image.astype(np.float64), 0.0, 1.0)
    return np.floor(clamped * 255.0 + 0.5).astype(np.uint8)


def save_ppm(canvas: Canvas, filepath: str | Path) -> None:
    """Write ``canvas`` as a plain PPM file."""
    Path(filepath).write_text(canvas.to_ppm(), encoding="ascii")


def save_png(canvas: Canvas, filepath: str | Path) -> None:
    """Write ``canvas`` as an 8-bit RGB image through Pillow.

    The format follows the file extension (PNG for ``.png``).
    """
    pil_image = PILImage.fromarray(image_to_uint8(canvas.pixels))
    pil_image.save(filepath)


def save_image(canvas: Canvas, filepath: str | Path) -> None:
    """Save ``canvas``, picking the writer from the file extension."""
    if Path(filepath).suffix.lower() == ".ppm":
        save_ppm(canvas, filepath)
    else:
        save_png(canvas, filepath)


def compute_rmse(
    image_a: npt.NDArray[np.floating],
    image_b: npt.NDArray[np.floating],
) -> float:
    """Compute root mean squared error between two images.

    Args:
        image_a: First image array.
        image_b: Second image array (must have same shape as image_a).

    Returns:
        RMSE value (lower is more similar).

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes must match: {image_a.shape} vs {image_b.shape}")

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
