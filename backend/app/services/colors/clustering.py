"""
K-means color clustering.

Reduces the full pixel population of a raster to K representative colors.
Pixels are collapsed into unique colors weighted by their counts, seeded with
a deterministic furthest-point rule and refined with Lloyd iterations, so the
same raster always yields the same centroids.
"""

from dataclasses import dataclass
from typing import List, Tuple

import numpy as np
from loguru import logger
from sklearn.cluster import KMeans

from .conversion import rgb_to_hex
from .errors import ComputationError, InvalidInput
from .raster import Raster

# Max centroid drift (8-bit channel units) tolerated after the iteration cap
CONVERGENCE_SHIFT_TOL = 0.5


@dataclass(frozen=True)
class ClusterColor:
    """One cluster centroid with its pixel population."""
    cluster_index: int
    rgb: Tuple[int, int, int]
    population: int
    ratio: float

    @property
    def hex(self) -> str:
        return rgb_to_hex(self.rgb)


def unique_colors(raster: Raster) -> Tuple[np.ndarray, np.ndarray]:
    """
    Collapse a raster into its distinct colors.

    Returns:
        Tuple of (colors (N, 3) uint8 sorted lexicographically, counts (N,))
    """
    pixels = raster.pixels.reshape(-1, 3).astype(np.uint32)
    packed = (pixels[:, 0] << 16) | (pixels[:, 1] << 8) | pixels[:, 2]
    codes, counts = np.unique(packed, return_counts=True)

    colors = np.stack([(codes >> 16) & 0xFF, (codes >> 8) & 0xFF, codes & 0xFF], axis=1)
    return colors.astype(np.uint8), counts


def furthest_point_seeds(colors: np.ndarray, counts: np.ndarray, k: int) -> np.ndarray:
    """
    Pick k seed indices: the most frequent color first, then repeatedly the
    color furthest (squared RGB distance) from its nearest seed. Ties go to
    the lowest index.
    """
    points = colors.astype(np.float64)
    first = int(np.argmax(counts))
    seeds = [first]
    min_dist = np.sum((points - points[first]) ** 2, axis=1)

    while len(seeds) < k:
        idx = int(np.argmax(min_dist))
        seeds.append(idx)
        min_dist = np.minimum(min_dist, np.sum((points - points[idx]) ** 2, axis=1))

    return np.array(seeds, dtype=np.int64)


def cluster_palette(raster: Raster, k: int = 5, max_iter: int = 100,
                    tol: float = 1e-4, rng_seed: int = 42) -> List[ClusterColor]:
    """
    Cluster the raster's colors into k centroids.

    Args:
        raster: Decoded input image
        k: Number of clusters
        max_iter: Lloyd iteration cap
        tol: Relative center-shift tolerance passed to KMeans
        rng_seed: Seed for KMeans internals (empty-cluster relocation)

    Returns:
        ClusterColor entries ordered by population, most dominant first;
        ties keep centroid order

    Raises:
        InvalidInput: If k <= 0, max_iter <= 0 or k exceeds the number of
            distinct colors
        ComputationError: If clustering fails or does not converge within
            max_iter iterations
    """
    if k <= 0:
        raise InvalidInput(f"Cluster count must be positive, got {k}")
    if max_iter <= 0:
        raise InvalidInput(f"Iteration cap must be positive, got {max_iter}")

    colors, counts = unique_colors(raster)
    n_unique = len(colors)
    if n_unique < k:
        raise InvalidInput(f"Insufficient unique colors: {n_unique} < {k}")

    logger.info(f"Starting clustering with k={k}, {raster.pixel_count} pixels, "
                f"{n_unique} unique colors")

    points = colors.astype(np.float64)
    weights = counts.astype(np.float64)
    init = points[furthest_point_seeds(colors, counts, k)]

    try:
        kmeans = KMeans(
            n_clusters=k,
            init=init,
            n_init=1,
            max_iter=max_iter,
            tol=tol,
            algorithm="lloyd",
            random_state=rng_seed
        )
        labels = kmeans.fit_predict(points, sample_weight=weights)
    except Exception as e:
        logger.error(f"Clustering failed: {str(e)}")
        raise ComputationError(f"K-means clustering failed: {str(e)}") from e

    centers = kmeans.cluster_centers_
    populations = np.bincount(labels, weights=weights, minlength=k)
    if np.any(populations == 0):
        raise ComputationError("K-means produced an empty cluster")

    # Centroids must be a fixed point of the assignment step
    member_means = np.stack(
        [np.bincount(labels, weights=weights * points[:, c], minlength=k) for c in range(3)],
        axis=1
    ) / populations[:, None]
    shift = float(np.max(np.abs(member_means - centers)))
    if kmeans.n_iter_ >= max_iter and shift > CONVERGENCE_SHIFT_TOL:
        raise ComputationError(
            f"K-means did not converge within {max_iter} iterations (shift={shift:.3f})"
        )

    centers_u8 = np.clip(np.rint(centers), 0, 255).astype(np.uint8)
    total = float(np.sum(weights))
    order = sorted(range(k), key=lambda i: (-populations[i], i))

    result = [
        ClusterColor(
            cluster_index=i,
            rgb=tuple(int(c) for c in centers_u8[i]),
            population=int(populations[i]),
            ratio=float(populations[i] / total)
        )
        for i in order
    ]

    ratios_str = [f"{c.ratio:.3f}" for c in result]
    logger.info(f"Clustering successful after {kmeans.n_iter_} iterations: {ratios_str}")

    return result
