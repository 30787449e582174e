"""
Unit tests for swatch rendering.
"""

import base64

import cv2
import numpy as np
import pytest

from app.services.colors.errors import InvalidInput
from app.services.colors.swatches import hex_to_bgr, render_region_grid, render_swatch_strip


def _decode_png(b64_string):
    buffer = np.frombuffer(base64.b64decode(b64_string), np.uint8)
    return cv2.imdecode(buffer, cv2.IMREAD_COLOR)


def test_hex_to_bgr():
    assert hex_to_bgr("#ff8000") == (0, 128, 255)


class TestSwatchStrip:
    """Test palette strip rendering"""

    def test_chip_layout(self):
        img = _decode_png(render_swatch_strip(["#ff0000", "#0000ff"], chip_size=10))

        assert img.shape == (10, 20, 3)
        # OpenCV decodes to BGR
        assert tuple(img[5, 2]) == (0, 0, 255)
        assert tuple(img[5, 15]) == (255, 0, 0)

    def test_empty_palette(self):
        with pytest.raises(InvalidInput):
            render_swatch_strip([])

    @pytest.mark.parametrize("chip_size", [4, 500])
    def test_chip_size_bounds(self, chip_size):
        with pytest.raises(InvalidInput):
            render_swatch_strip(["#ffffff"], chip_size=chip_size)


class TestRegionGrid:
    """Test region grid rendering"""

    def test_regions_at_grid_positions(self):
        colors = ["#ff0000", "#00ff00", "#0000ff", "#ffffff"]
        img = _decode_png(render_region_grid(colors, 2, 2, chip_size=10))

        assert img.shape == (20, 20, 3)
        assert tuple(img[5, 5]) == (0, 0, 255)
        assert tuple(img[5, 15]) == (0, 255, 0)
        assert tuple(img[15, 5]) == (255, 0, 0)
        assert tuple(img[15, 15]) == (255, 255, 255)

    def test_highlight_draws_border(self):
        colors = ["#ffffff"] * 4
        img = _decode_png(render_region_grid(colors, 2, 2, chip_size=10, highlight=[3]))

        assert tuple(img[10, 10]) == (0, 0, 0)
        assert tuple(img[0, 0]) == (255, 255, 255)
        assert tuple(img[15, 15]) == (255, 255, 255)

    def test_count_mismatch(self):
        with pytest.raises(InvalidInput):
            render_region_grid(["#000000"] * 3, 2, 2)
