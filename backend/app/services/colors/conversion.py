"""
Color space conversion utilities.

RGB <-> HSL conversion and hex formatting. Channels are 8-bit on the RGB side;
every conversion normalizes them to [0, 1] before doing any arithmetic, so
hue, saturation and lightness are all reported on the unit scale.
"""

import re
from typing import NamedTuple, Sequence, Tuple

from .errors import InvalidInput

HEX_RE = re.compile(r"^#?([0-9A-Fa-f]{6})$")


class HSL(NamedTuple):
    """Hue in [0, 1) (circular), saturation and lightness in [0, 1]."""
    h: float
    s: float
    l: float


def rgb_to_hsl(r: int, g: int, b: int) -> HSL:
    """
    Convert an 8-bit RGB color to HSL.

    Achromatic colors (r == g == b) have no defined hue and are reported
    with h=0 and s=0.
    """
    rf, gf, bf = r / 255.0, g / 255.0, b / 255.0

    c_max = max(rf, gf, bf)
    c_min = min(rf, gf, bf)

    # Luminosity is the average of the max and min intensities
    l = (c_max + c_min) / 2
    delta = c_max - c_min
    if delta == 0:
        return HSL(0.0, 0.0, l)

    if l < 0.5:
        s = delta / (c_max + c_min)
    else:
        s = delta / (2 - c_max - c_min)

    r2 = (((c_max - rf) / 6) + (delta / 2)) / delta
    g2 = (((c_max - gf) / 6) + (delta / 2)) / delta
    b2 = (((c_max - bf) / 6) + (delta / 2)) / delta

    if rf == c_max:
        h = b2 - g2
    elif gf == c_max:
        h = (1.0 / 3.0) + r2 - b2
    else:
        h = (2.0 / 3.0) + g2 - r2

    # Single wraparound correction
    if h < 0:
        h += 1
    elif h >= 1:
        h -= 1

    return HSL(h, s, l)


def hue_to_rgb(v1: float, v2: float, h: float) -> float:
    """Interpolate one channel (unit scale) for a hue-shifted position."""
    if h < 0:
        h += 1
    if h > 1:
        h -= 1

    if 6 * h < 1:
        return v1 + (v2 - v1) * 6 * h
    if 2 * h < 1:
        return v2
    if 3 * h < 2:
        return v1 + (v2 - v1) * ((2.0 / 3.0) - h) * 6
    return v1


def _to_u8(value: float) -> int:
    return int(min(255, max(0, round(value * 255))))


def hsl_to_rgb(hsl: HSL) -> Tuple[int, int, int]:
    """Convert HSL (unit scale) back to an 8-bit RGB triple."""
    h, s, l = hsl

    if s == 0:
        gray = _to_u8(l)
        return gray, gray, gray

    if l < 0.5:
        v2 = l * (1 + s)
    else:
        v2 = (l + s) - (s * l)
    v1 = 2 * l - v2

    r = hue_to_rgb(v1, v2, h + (1.0 / 3.0))
    g = hue_to_rgb(v1, v2, h)
    b = hue_to_rgb(v1, v2, h - (1.0 / 3.0))

    return _to_u8(r), _to_u8(g), _to_u8(b)


def rgb_to_hex(rgb: Sequence[int]) -> str:
    """Format an RGB triple (tuple or uint8 array) as lowercase #rrggbb."""
    r, g, b = [int(x) for x in rgb[:3]]
    return f"#{r:02x}{g:02x}{b:02x}"


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """Parse #rrggbb (the leading # is optional) into an RGB tuple."""
    match = HEX_RE.match(hex_color.strip())
    if match is None:
        raise InvalidInput(f"Invalid hex color: {hex_color!r}")
    digits = match.group(1)
    return tuple(int(digits[i:i+2], 16) for i in (0, 2, 4))
