"""
Raster container for decoded images.
"""
from dataclasses import dataclass

import numpy as np

from .errors import InvalidInput


@dataclass(frozen=True)
class Raster:
    """Read-only (H, W, 3) uint8 RGB pixel grid."""

    pixels: np.ndarray

    @classmethod
    def from_array(cls, array: np.ndarray) -> "Raster":
        """
        Build a raster from an RGB array, copying it and freezing the copy.

        Raises:
            InvalidInput: If the array is not (H, W, 3) or has zero area
        """
        arr = np.asarray(array)
        if arr.ndim != 3 or arr.shape[2] != 3:
            raise InvalidInput(f"Expected an (H, W, 3) RGB array, got shape {arr.shape}")
        if arr.shape[0] == 0 or arr.shape[1] == 0:
            raise InvalidInput("Raster has zero area")

        pixels = np.clip(arr, 0, 255).astype(np.uint8, copy=True)
        pixels.setflags(write=False)
        return cls(pixels=pixels)

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def pixel_count(self) -> int:
        return self.height * self.width
