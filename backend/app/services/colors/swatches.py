"""
Swatch Rendering Module

Renders palettes as small PNG images for quick visual QA of an extraction.
"""

import base64
from typing import List, Sequence, Tuple

import cv2
import numpy as np
from loguru import logger

from .conversion import hex_to_rgb
from .errors import InvalidInput


def hex_to_bgr(hex_color: str) -> Tuple[int, int, int]:
    """Convert hex color to BGR tuple for OpenCV."""
    r, g, b = hex_to_rgb(hex_color)
    return (b, g, r)


def _encode_png_b64(img: np.ndarray) -> str:
    success, buffer = cv2.imencode('.png', img)
    if not success:
        raise RuntimeError("Failed to encode image as PNG")
    return base64.b64encode(buffer.tobytes()).decode('ascii')


def validate_swatch_params(hex_colors: Sequence[str], chip_size: int) -> None:
    """Validate swatch rendering parameters."""
    if not hex_colors:
        raise InvalidInput("Empty hex_colors list provided")
    if not 8 <= chip_size <= 200:
        raise InvalidInput(f"chip_size must be between 8 and 200, got {chip_size}")


def render_swatch_strip(hex_colors: List[str], chip_size: int = 40) -> str:
    """
    Render a horizontal strip of color chips, one per palette entry.

    Returns:
        Base64-encoded PNG image string
    """
    validate_swatch_params(hex_colors, chip_size)

    k = len(hex_colors)
    img = np.zeros((chip_size, chip_size * k, 3), dtype=np.uint8)

    for i, hex_color in enumerate(hex_colors):
        img[:, i * chip_size:(i + 1) * chip_size, :] = hex_to_bgr(hex_color)

    b64_string = _encode_png_b64(img)
    logger.debug(f"Encoded swatch strip: {chip_size * k}x{chip_size} -> {len(b64_string)} chars")
    return b64_string


def render_region_grid(hex_colors: List[str], rows: int, cols: int,
                       chip_size: int = 24,
                       highlight: Sequence[int] = (),
                       border_color: Tuple[int, int, int] = (0, 0, 0),
                       border_width: int = 2) -> str:
    """
    Render grid region colors at their spatial positions (row-major input),
    with a border around the highlighted region indices.

    Returns:
        Base64-encoded PNG image string
    """
    validate_swatch_params(hex_colors, chip_size)
    if len(hex_colors) != rows * cols:
        raise InvalidInput(f"Expected {rows * cols} region colors, got {len(hex_colors)}")

    img = np.zeros((rows * chip_size, cols * chip_size, 3), dtype=np.uint8)
    for index, hex_color in enumerate(hex_colors):
        row, col = divmod(index, cols)
        y0, x0 = row * chip_size, col * chip_size
        img[y0:y0 + chip_size, x0:x0 + chip_size, :] = hex_to_bgr(hex_color)

    for index in highlight:
        if 0 <= index < len(hex_colors):
            row, col = divmod(index, cols)
            y0, x0 = row * chip_size, col * chip_size
            cv2.rectangle(img, (x0, y0), (x0 + chip_size - 1, y0 + chip_size - 1),
                          border_color, border_width)

    return _encode_png_b64(img)
