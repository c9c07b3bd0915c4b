"""Tests for the preview module.

This module tests the preview/canvas and preview/export functionality including:
- The pixel buffer and its orientation
- Plain PPM encoding (header, clamping, rounding, line wrapping)
- PPM and PNG export
- RMSE computation
"""

import numpy as np
import pytest
from PIL import Image as PILImage

from lightpath.core.colors import Color
from lightpath.preview.canvas import PPM_MAX_LINE_LENGTH, Canvas
from lightpath.preview.export import compute_rmse, image_to_uint8, save_image, save_png, save_ppm


class TestCanvas:
    """Test the pixel buffer."""

    def test_new_canvas_is_black(self):
        canvas = Canvas(10, 20)
        assert canvas.width == 10
        assert canvas.height == 20
        assert canvas.pixels.shape == (20, 10, 3)
        assert canvas.pixels.dtype == np.float32
        assert np.all(canvas.pixels == 0.0)

    def test_write_and_read_pixel(self):
        canvas = Canvas(10, 20)
        red = Color(1.0, 0.0, 0.0)
        canvas.write_pixel(2, 3, red)
        assert canvas.pixel_at(2, 3) == red
        # Column x, row y
        assert np.allclose(canvas.pixels[3, 2], [1.0, 0.0, 0.0])

    def test_values_are_not_clamped_in_buffer(self):
        canvas = Canvas(1, 1)
        canvas.write_pixel(0, 0, Color(1.5, -0.5, 0.25))
        assert canvas.pixel_at(0, 0) == Color(1.5, -0.5, 0.25)

    @pytest.mark.parametrize("width,height", [(0, 5), (5, 0), (-1, 3)])
    def test_invalid_dimensions(self, width, height):
        with pytest.raises(ValueError):
            Canvas(width, height)


class TestPpm:
    """Test plain PPM encoding."""

    def test_header(self):
        lines = Canvas(5, 3).to_ppm().splitlines()
        assert lines[:3] == ["P3", "5 3", "255"]

    def test_pixel_data_clamped_and_rounded(self):
        canvas = Canvas(5, 3)
        canvas.write_pixel(0, 0, Color(1.5, 0.0, 0.0))
        canvas.write_pixel(2, 1, Color(0.0, 0.5, 0.0))
        canvas.write_pixel(4, 2, Color(-0.5, 0.0, 1.0))
        lines = canvas.to_ppm().splitlines()
        assert lines[3:6] == [
            "255 0 0 0 0 0 0 0 0 0 0 0 0 0 0",
            "0 0 0 0 0 0 0 128 0 0 0 0 0 0 0",
            "0 0 0 0 0 0 0 0 0 0 0 0 0 0 255",
        ]

    def test_long_lines_are_wrapped(self):
        canvas = Canvas(10, 2)
        canvas.pixels[:] = (1.0, 0.8, 0.6)
        lines = canvas.to_ppm().splitlines()
        assert lines[3:7] == [
            "255 204 153 255 204 153 255 204 153 255 204 153 255 204 153 255 204",
            "153 255 204 153 255 204 153 255 204 153 255 204 153",
            "255 204 153 255 204 153 255 204 153 255 204 153 255 204 153 255 204",
            "153 255 204 153 255 204 153 255 204 153 255 204 153",
        ]
        assert all(len(line) <= PPM_MAX_LINE_LENGTH for line in lines)

    def test_values_match_png_quantisation(self):
        canvas = Canvas(6, 4)
        canvas.pixels[:] = np.random.default_rng(9).uniform(-0.5, 1.5, size=(4, 6, 3))
        tokens = canvas.to_ppm().split()[4:]
        expected = image_to_uint8(canvas.pixels).reshape(-1)
        assert [int(token) for token in tokens] == expected.tolist()

    def test_ends_with_newline(self):
        assert Canvas(5, 3).to_ppm().endswith("\n")

    def test_row_count(self):
        lines = Canvas(3, 4).to_ppm().splitlines()
        # Header plus one short line per row
        assert len(lines) == 3 + 4


class TestImageToUint8:
    """Test float to 8-bit conversion."""

    def test_clamps_and_rounds_half_up(self):
        image = np.array([[[-1.0, 0.5, 2.0], [1.0 / 255.0, 0.2, 1.0]]], dtype=np.float32)
        result = image_to_uint8(image)
        assert result.dtype == np.uint8
        np.testing.assert_array_equal(result, [[[0, 128, 255], [1, 51, 255]]])


class TestExport:
    """Test writing canvases to disk."""

    def _gradient_canvas(self) -> Canvas:
        canvas = Canvas(4, 2)
        canvas.write_pixel(0, 0, Color(1.0, 0.0, 0.0))
        canvas.write_pixel(3, 1, Color(0.0, 0.0, 1.0))
        return canvas

    def test_save_ppm(self, tmp_path):
        canvas = self._gradient_canvas()
        path = tmp_path / "out.ppm"
        save_ppm(canvas, path)
        assert path.read_text(encoding="ascii") == canvas.to_ppm()

    def test_save_png(self, tmp_path):
        path = tmp_path / "out.png"
        save_png(self._gradient_canvas(), path)

        img = PILImage.open(path)
        assert img.size == (4, 2)
        assert img.mode == "RGB"
        # Row 0 of the canvas is the top row of the image
        assert img.getpixel((0, 0)) == (255, 0, 0)
        assert img.getpixel((3, 1)) == (0, 0, 255)

    def test_save_image_dispatches_on_suffix(self, tmp_path):
        canvas = self._gradient_canvas()
        ppm_path = tmp_path / "image.PPM"
        png_path = tmp_path / "image.png"
        save_image(canvas, ppm_path)
        save_image(canvas, str(png_path))

        assert ppm_path.read_text(encoding="ascii").startswith("P3\n")
        assert PILImage.open(png_path).format == "PNG"


class TestComputeRmse:
    """Test RMSE computation."""

    def test_identical_images_zero(self):
        image = np.random.default_rng(0).random((8, 8, 3)).astype(np.float32)
        assert compute_rmse(image, image) == 0.0

    def test_known_value(self):
        a = np.zeros((2, 2, 3), dtype=np.float32)
        b = np.full((2, 2, 3), 0.5, dtype=np.float32)
        assert compute_rmse(a, b) == pytest.approx(0.5)

    def test_shape_mismatch_raises(self):
        with pytest.raises(ValueError, match="shapes must match"):
            compute_rmse(np.zeros((2, 2, 3)), np.zeros((3, 2, 3)))
