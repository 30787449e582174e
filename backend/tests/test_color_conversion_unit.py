"""
Unit tests for color space conversion.

Tests RGB <-> HSL conversion and hex formatting:
- primary, secondary and achromatic colors
- hue wraparound
- round-trip accuracy
"""

import pytest

from app.services.colors.conversion import (
    HSL, rgb_to_hsl, hsl_to_rgb, hue_to_rgb, rgb_to_hex, hex_to_rgb
)
from app.services.colors.errors import InvalidInput


class TestRgbToHsl:
    """Test RGB to HSL conversion"""

    def test_primary_colors(self):
        """Red, green and blue sit at hue 0, 1/3 and 2/3"""
        red = rgb_to_hsl(255, 0, 0)
        assert red.h == pytest.approx(0.0)
        assert red.s == pytest.approx(1.0)
        assert red.l == pytest.approx(0.5)

        assert rgb_to_hsl(0, 255, 0).h == pytest.approx(1 / 3)
        assert rgb_to_hsl(0, 0, 255).h == pytest.approx(2 / 3)

    def test_magenta_wraps_into_unit_interval(self):
        """Negative raw hue is wrapped once into [0, 1)"""
        magenta = rgb_to_hsl(255, 0, 255)
        assert magenta.h == pytest.approx(5 / 6)

    def test_achromatic_colors_have_zero_saturation(self):
        """Grays have S=0 and H=0 regardless of lightness"""
        for v in (0, 1, 64, 128, 200, 255):
            hsl = rgb_to_hsl(v, v, v)
            assert hsl.s == 0.0
            assert hsl.h == 0.0
            assert hsl.l == pytest.approx(v / 255.0)

    def test_values_are_unit_scaled(self):
        """Saturation and lightness stay within [0, 1] for all inputs"""
        for r in range(0, 256, 51):
            for g in range(0, 256, 51):
                for b in range(0, 256, 51):
                    h, s, l = rgb_to_hsl(r, g, b)
                    assert 0.0 <= h < 1.0
                    assert 0.0 <= s <= 1.0
                    assert 0.0 <= l <= 1.0

    def test_light_color_uses_upper_saturation_branch(self):
        """L >= 0.5 divides by 2 - max - min"""
        hsl = rgb_to_hsl(255, 128, 128)
        assert hsl.l > 0.5
        assert hsl.s == pytest.approx(1.0)


class TestHslToRgb:
    """Test HSL to RGB conversion"""

    def test_gray_short_circuit(self):
        assert hsl_to_rgb(HSL(0.0, 0.0, 0.0)) == (0, 0, 0)
        assert hsl_to_rgb(HSL(0.7, 0.0, 1.0)) == (255, 255, 255)
        assert hsl_to_rgb(HSL(0.0, 0.0, 0.5)) == (128, 128, 128)

    def test_primary_colors(self):
        assert hsl_to_rgb(HSL(0.0, 1.0, 0.5)) == (255, 0, 0)
        assert hsl_to_rgb(HSL(1 / 3, 1.0, 0.5)) == (0, 255, 0)
        assert hsl_to_rgb(HSL(2 / 3, 1.0, 0.5)) == (0, 0, 255)

    def test_hue_to_rgb_wraps_hue(self):
        """Hue shifted outside [0, 1] wraps before interpolation"""
        assert hue_to_rgb(0.0, 1.0, -0.5) == hue_to_rgb(0.0, 1.0, 0.5)
        assert hue_to_rgb(0.0, 1.0, 1.25) == hue_to_rgb(0.0, 1.0, 0.25)

    def test_round_trip_within_one_unit(self):
        """RGB -> HSL -> RGB is lossless up to rounding"""
        values = range(0, 256, 15)
        for r in values:
            for g in values:
                for b in values:
                    back = hsl_to_rgb(rgb_to_hsl(r, g, b))
                    assert abs(back[0] - r) <= 1
                    assert abs(back[1] - g) <= 1
                    assert abs(back[2] - b) <= 1


class TestHexFormatting:
    """Test hex color formatting and parsing"""

    def test_rgb_to_hex_is_lowercase_and_padded(self):
        assert rgb_to_hex((58, 95, 172)) == "#3a5fac"
        assert rgb_to_hex((0, 0, 0)) == "#000000"
        assert rgb_to_hex((1, 2, 3)) == "#010203"
        assert rgb_to_hex((255, 255, 255)) == "#ffffff"

    def test_hex_to_rgb(self):
        assert hex_to_rgb("#3A5FAC") == (58, 95, 172)
        assert hex_to_rgb("3a5fac") == (58, 95, 172)

    def test_hex_to_rgb_invalid(self):
        for bad in ("", "#12345", "#gg0000", "#1234567"):
            with pytest.raises(InvalidInput):
                hex_to_rgb(bad)
