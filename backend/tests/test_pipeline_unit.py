"""
Unit tests for the extraction pipeline.

Tests strategy construction, the grid and k-means paths end to end on
synthetic rasters, and determinism.
"""

import numpy as np
import pytest

from app.services.colors.conversion import rgb_to_hex
from app.services.colors.errors import InvalidInput
from app.services.colors.pipeline import (
    ExtractionParams, GridPartitionStrategy, KMeansClusterStrategy,
    build_strategy, extract_palette
)
from app.services.colors.raster import Raster
from generate_test_images import (
    RED, GREEN, BLUE, WHITE, create_block_grid, create_halves, create_stripes, spectrum_colors
)


class TestBuildStrategy:
    """Test strategy selection from parameters"""

    def test_grid(self):
        strategy = build_strategy(ExtractionParams(strategy="grid", rows=2, cols=3))
        assert isinstance(strategy, GridPartitionStrategy)
        assert (strategy.rows, strategy.cols) == (2, 3)

    def test_kmeans(self):
        strategy = build_strategy(ExtractionParams(strategy="kmeans", k=3))
        assert isinstance(strategy, KMeansClusterStrategy)
        assert strategy.k == 3

    @pytest.mark.parametrize("params", [
        ExtractionParams(strategy="median_cut"),
        ExtractionParams(normalization="weighted"),
        ExtractionParams(strategy="kmeans", cluster_order="brightness"),
        ExtractionParams(selection="loudest"),
    ])
    def test_unknown_names(self, params):
        with pytest.raises(InvalidInput):
            build_strategy(params)


class TestGridPipeline:
    """Test the grid partition path"""

    def test_stripes_sort_by_hue_with_white_tied_to_red(self):
        """Red, green, blue, white stripes order as red, white, green, blue"""
        raster = Raster.from_array(create_stripes([RED, GREEN, BLUE, WHITE]))
        result = extract_palette(raster, ExtractionParams(rows=4, cols=1, selection="all"))

        assert result.colors == ["#ff0000", "#ffffff", "#00ff00", "#0000ff"]
        assert result.strategy == "grid"
        assert (result.width, result.height) == (4, 8)
        assert len(result.candidates) == 4

    def test_stripes_default_rank_selection(self):
        raster = Raster.from_array(create_stripes([RED, GREEN, BLUE, WHITE]))
        result = extract_palette(raster, ExtractionParams(rows=4, cols=1))
        assert result.colors == ["#ff0000", "#00ff00"]

    def test_default_4x4_picks_ranks_3_and_11(self):
        spectrum = spectrum_colors(16)
        # Lay the hues out in reverse so spatial order differs from hue order
        raster = Raster.from_array(create_block_grid(spectrum[::-1], 4, 4))
        result = extract_palette(raster)

        assert len(result.candidates) == 16
        assert result.colors == [rgb_to_hex(spectrum[3]), rgb_to_hex(spectrum[11])]

    def test_explicit_ranks(self):
        spectrum = spectrum_colors(16)
        raster = Raster.from_array(create_block_grid(spectrum, 4, 4))
        result = extract_palette(raster, ExtractionParams(ranks=[0, 5, 15]))
        assert result.colors == [rgb_to_hex(spectrum[i]) for i in (0, 5, 15)]

    def test_saturation_selection(self):
        colors = [(128, 128, 128), (255, 0, 0), (200, 180, 180), (0, 0, 255)]
        raster = Raster.from_array(create_block_grid(colors, 2, 2))
        result = extract_palette(raster, ExtractionParams(rows=2, cols=2, selection="saturation"))
        assert result.colors == ["#ff0000", "#0000ff"]

    def test_normalization_changes_non_divisible_output(self):
        raster = Raster.from_array(np.full((5, 5, 3), 100, dtype=np.uint8))
        actual = extract_palette(raster, ExtractionParams(rows=2, cols=2, selection="all"))
        theoretical = extract_palette(
            raster, ExtractionParams(rows=2, cols=2, selection="all", normalization="theoretical")
        )
        assert actual.colors == ["#646464"] * 4
        assert theoretical.colors != actual.colors

    def test_grid_larger_than_raster(self):
        raster = Raster.from_array(np.zeros((2, 2, 3), dtype=np.uint8))
        with pytest.raises(InvalidInput):
            extract_palette(raster)

    def test_deterministic(self):
        rng = np.random.default_rng(5)
        raster = Raster.from_array(rng.integers(0, 256, size=(37, 29, 3), dtype=np.uint8))
        runs = [extract_palette(raster).colors for _ in range(3)]
        assert runs[0] == runs[1] == runs[2]


class TestKMeansPipeline:
    """Test the clustering path"""

    def test_population_order(self):
        arr = create_halves((20, 60, 220), (200, 30, 40))
        arr[:, 5:10] = (200, 30, 40)
        raster = Raster.from_array(arr)
        result = extract_palette(raster, ExtractionParams(strategy="kmeans", k=2))

        assert result.strategy == "kmeans"
        assert result.colors == ["#c81e28", "#143cdc"]

    def test_hue_order(self):
        """Dominant blue still follows the red-orange cluster in hue order"""
        arr = create_halves((20, 60, 220), (200, 40, 30))
        arr[:, 5:10] = (20, 60, 220)
        raster = Raster.from_array(arr)
        result = extract_palette(
            raster, ExtractionParams(strategy="kmeans", k=2, cluster_order="hue")
        )
        assert result.colors == ["#c8281e", "#143cdc"]

    def test_deterministic(self):
        rng = np.random.default_rng(9)
        raster = Raster.from_array(rng.integers(0, 256, size=(20, 20, 3), dtype=np.uint8))
        params = ExtractionParams(strategy="kmeans", k=3)
        assert extract_palette(raster, params).colors == extract_palette(raster, params).colors

    def test_k_exceeds_distinct_colors(self):
        raster = Raster.from_array(create_halves((1, 1, 1), (2, 2, 2)))
        with pytest.raises(InvalidInput):
            extract_palette(raster, ExtractionParams(strategy="kmeans", k=3))
