"""
Extraction pipeline.

Runs one decoded raster through a candidate strategy (grid partition or
k-means clustering), orders and selects the candidates, and formats the
palette as #rrggbb strings.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from loguru import logger

from .clustering import cluster_palette
from .conversion import rgb_to_hex
from .errors import InvalidInput
from .partition import NORMALIZATIONS, grid_partition
from .raster import Raster
from .selection import SELECTIONS, select_palette

CLUSTER_ORDERS = ("population", "hue")


@dataclass
class ExtractionParams:
    """Strategy selection and its parameters for one extraction."""
    strategy: str = "grid"

    # Grid partition
    rows: int = 4
    cols: int = 4
    normalization: str = "actual"

    # K-means
    k: int = 5
    max_iter: int = 100
    cluster_order: str = "population"

    # Palette selection
    selection: Optional[str] = None
    ranks: Optional[Sequence[int]] = None
    palette_size: int = 2

    def as_dict(self) -> Dict[str, Any]:
        return {
            "strategy": self.strategy,
            "rows": self.rows,
            "cols": self.cols,
            "normalization": self.normalization,
            "k": self.k,
            "max_iter": self.max_iter,
            "cluster_order": self.cluster_order,
            "selection": self.selection,
            "ranks": list(self.ranks) if self.ranks is not None else None,
            "palette_size": self.palette_size
        }


@dataclass
class ExtractionResult:
    """Final palette plus the intermediate candidates it was chosen from."""
    colors: List[str]
    strategy: str
    width: int
    height: int
    candidates: List[Any] = field(default_factory=list)
    selected: List[Any] = field(default_factory=list)


class ExtractionStrategy(ABC):
    """Produces candidate colors from a raster and chooses the palette among them."""

    name: str = ""

    @abstractmethod
    def candidates(self, raster: Raster) -> List[Any]:
        """Compute candidate colors in spatial/cluster order."""

    @abstractmethod
    def select(self, candidates: List[Any], params: ExtractionParams) -> List[Any]:
        """Pick and order the palette entries."""


class GridPartitionStrategy(ExtractionStrategy):
    """Region means of a fixed grid, hue-sorted, picked by rank."""

    name = "grid"

    def __init__(self, rows: int = 4, cols: int = 4, normalization: str = "actual"):
        self.rows = rows
        self.cols = cols
        self.normalization = normalization

    def candidates(self, raster: Raster) -> List[Any]:
        return grid_partition(raster, self.rows, self.cols, self.normalization)

    def select(self, candidates: List[Any], params: ExtractionParams) -> List[Any]:
        return select_palette(
            candidates,
            selection=params.selection or "rank",
            ranks=params.ranks,
            count=params.palette_size
        )


class KMeansClusterStrategy(ExtractionStrategy):
    """K-means centroids, by population or through the hue selector."""

    name = "kmeans"

    def __init__(self, k: int = 5, max_iter: int = 100, order: str = "population"):
        self.k = k
        self.max_iter = max_iter
        self.order = order

    def candidates(self, raster: Raster) -> List[Any]:
        return cluster_palette(raster, k=self.k, max_iter=self.max_iter)

    def select(self, candidates: List[Any], params: ExtractionParams) -> List[Any]:
        if self.order == "population" and params.selection is None:
            return list(candidates)
        return select_palette(
            candidates,
            selection=params.selection or "all",
            ranks=params.ranks,
            count=params.palette_size
        )


def build_strategy(params: ExtractionParams) -> ExtractionStrategy:
    """
    Build the strategy named by ``params``.

    Raises:
        InvalidInput: For unknown strategy, normalization, order or selection names
    """
    if params.selection is not None and params.selection not in SELECTIONS:
        raise InvalidInput(f"Unknown selection rule: {params.selection}")

    if params.strategy == "grid":
        if params.normalization not in NORMALIZATIONS:
            raise InvalidInput(f"Unknown normalization: {params.normalization}")
        return GridPartitionStrategy(params.rows, params.cols, params.normalization)

    if params.strategy == "kmeans":
        if params.cluster_order not in CLUSTER_ORDERS:
            raise InvalidInput(f"Unknown cluster order: {params.cluster_order}")
        return KMeansClusterStrategy(params.k, params.max_iter, params.cluster_order)

    raise InvalidInput(f"Unknown strategy: {params.strategy}")


def extract_palette(raster: Raster, params: Optional[ExtractionParams] = None) -> ExtractionResult:
    """
    Extract an ordered hex palette from a raster.

    Errors from any stage propagate unchanged; no partial palette is returned.
    """
    if params is None:
        params = ExtractionParams()

    strategy = build_strategy(params)
    candidates = strategy.candidates(raster)
    selected = strategy.select(candidates, params)
    colors = [rgb_to_hex(c.rgb) for c in selected]

    logger.debug(f"{strategy.name} extraction on {raster.width}x{raster.height}: {colors}")

    return ExtractionResult(
        colors=colors,
        strategy=strategy.name,
        width=raster.width,
        height=raster.height,
        candidates=candidates,
        selected=selected
    )
