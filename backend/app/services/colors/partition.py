"""
Spatial grid partitioning.

Splits a raster into a rows x cols grid of rectangular, non-overlapping
regions and computes the mean color of each region in row-major order.
"""

from dataclasses import dataclass
from typing import List, Tuple

import numpy as np
from loguru import logger

from .conversion import rgb_to_hex
from .errors import InvalidInput
from .raster import Raster

# 8-bit <-> 16-bit channel scale
CHANNEL_16_SCALE = 0x101

NORMALIZATIONS = ("actual", "theoretical")


@dataclass(frozen=True)
class RegionColor:
    """Mean color of one grid cell."""
    index: int
    row: int
    col: int
    rgb: Tuple[int, int, int]
    pixel_count: int
    bounds: Tuple[int, int, int, int]  # (y0, y1, x0, x1), end-exclusive

    @property
    def hex(self) -> str:
        return rgb_to_hex(self.rgb)


def cell_bounds(extent: int, parts: int, i: int) -> Tuple[int, int]:
    """Floor-divided [start, end) of slice ``i`` when ``extent`` is cut into ``parts``."""
    return (extent * i) // parts, (extent * (i + 1)) // parts


def grid_partition(raster: Raster, rows: int, cols: int,
                   normalization: str = "actual") -> List[RegionColor]:
    """
    Compute the mean color of each cell of a rows x cols grid.

    Channel sums are accumulated in uint64 on the 16-bit channel scale,
    divided by the cell's pixel count and reduced back to 8 bits with the
    0x101 divisor.

    Args:
        raster: Decoded input image
        rows: Number of grid rows
        cols: Number of grid columns
        normalization: "actual" divides each cell by its own pixel count;
            "theoretical" divides every cell by floor(H/rows) * floor(W/cols),
            which over- or under-divides the trailing row/column when the
            raster size is not a multiple of the grid size

    Returns:
        One RegionColor per cell, row-major

    Raises:
        InvalidInput: For non-positive grid sizes, a grid larger than the
            raster, or an unknown normalization
    """
    if rows <= 0 or cols <= 0:
        raise InvalidInput(f"Grid size must be positive, got {rows}x{cols}")
    if raster.pixel_count == 0:
        raise InvalidInput("Raster has zero area")
    if rows > raster.height or cols > raster.width:
        raise InvalidInput(
            f"Grid {rows}x{cols} is larger than raster {raster.width}x{raster.height}"
        )
    if normalization not in NORMALIZATIONS:
        raise InvalidInput(f"Unknown normalization: {normalization}")

    height, width = raster.height, raster.width
    theoretical_count = (height // rows) * (width // cols)

    logger.debug(f"Partitioning {width}x{height} raster into {rows}x{cols} grid "
                 f"({normalization} normalization)")

    regions = []
    for i in range(rows):
        y0, y1 = cell_bounds(height, rows, i)
        for j in range(cols):
            x0, x1 = cell_bounds(width, cols, j)

            cell = raster.pixels[y0:y1, x0:x1]
            count = (y1 - y0) * (x1 - x0)
            sums16 = cell.sum(axis=(0, 1), dtype=np.uint64) * np.uint64(CHANNEL_16_SCALE)

            divisor = count if normalization == "actual" else theoretical_count
            mean16 = sums16 // np.uint64(divisor)
            mean8 = np.minimum(mean16 // np.uint64(CHANNEL_16_SCALE), 255)

            regions.append(RegionColor(
                index=i * cols + j,
                row=i,
                col=j,
                rgb=tuple(int(c) for c in mean8),
                pixel_count=count,
                bounds=(y0, y1, x0, x1)
            ))

    return regions
