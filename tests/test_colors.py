"""Unit tests for colors and the sky gradient."""

import pytest

from lightpath.core.colors import SKY_BLUE, SKY_LIGHT_BLUE, Color, sky_gradient


class TestColor:
    """Tests for color arithmetic."""

    def test_add_and_subtract(self):
        a = Color(0.9, 0.6, 0.75)
        b = Color(0.7, 0.1, 0.25)
        assert a + b == Color(1.6, 0.7, 1.0)
        assert a - b == Color(0.2, 0.5, 0.5)

    def test_scalar_multiply(self):
        assert Color(0.2, 0.3, 0.4) * 2 == Color(0.4, 0.6, 0.8)
        assert 2 * Color(0.2, 0.3, 0.4) == Color(0.4, 0.6, 0.8)

    def test_hadamard_product(self):
        assert Color(1.0, 0.2, 0.4) * Color(0.9, 1.0, 0.1) == Color(0.9, 0.2, 0.04)

    def test_from_u8(self):
        assert Color.from_u8(255, 0, 51) == Color(1.0, 0.0, 0.2)

    def test_gamma_encode_is_square_root(self):
        assert Color(0.25, 1.0, 0.0).gamma_encode() == Color(0.5, 1.0, 0.0)

    def test_gamma_encode_clamps_negative(self):
        assert Color(-0.5, 0.04, 4.0).gamma_encode() == Color(0.0, 0.2, 2.0)


class TestSkyGradient:
    """Tests for the sky seen by escaping rays."""

    def test_zenith(self):
        assert sky_gradient(1.0) == SKY_BLUE

    def test_nadir(self):
        assert sky_gradient(-1.0) == SKY_LIGHT_BLUE

    def test_horizon_is_midpoint(self):
        mid = sky_gradient(0.0)
        assert mid.red == pytest.approx(135.0 / 255.0)
        assert mid.green == pytest.approx(206.0 / 255.0)
        assert mid.blue == pytest.approx(235.0 / 255.0)
