"""Pixel buffer and image export."""

from .canvas import Canvas
from .export import compute_rmse, image_to_uint8, save_image, save_png, save_ppm

__all__ = ["Canvas", "save_ppm", "save_png", "save_image", "image_to_uint8", "compute_rmse"]
