"""Tests for map rendering and PNG export."""

import struct

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from py_mapgen.core.pipeline import GenerationParams, generate
from py_mapgen.render import (
    TERRAIN_COLORS,
    colorize,
    export_filename,
    mountain_sites,
    render_map,
    render_png,
    save_png,
)


def hex_rgb(color):
    return [int(color[i:i + 2], 16) for i in (1, 3, 5)]


@pytest.fixture(scope="module")
def small_map():
    params = GenerationParams(
        seed=2024, width=200, height=100, scale=30.0,
        river_count=5, min_river_length=3, city_count=6,
    )
    return params, generate(params)


class TestColorize:
    """Test terrain color banding."""

    def test_band_edges(self):
        heights = np.array([0.0, 0.2, 0.25, 0.3, 0.35, 0.45, 0.6, 0.75, 0.9, 1.0])
        rgb = colorize(heights, 10, 1)
        expected_bands = [0, 0, 1, 1, 2, 3, 4, 5, 6, 6]
        assert rgb.shape == (1, 10, 3)
        assert rgb.dtype == np.uint8
        for column, band in enumerate(expected_bands):
            assert rgb[0, column].tolist() == hex_rgb(TERRAIN_COLORS[band][1])

    def test_shape_follows_grid(self):
        rgb = colorize(np.zeros(12), 4, 3)
        assert rgb.shape == (3, 4, 3)


class TestMountains:
    """Test mountain glyph site sampling."""

    def test_high_ground_keeps_all_samples(self):
        assert len(mountain_sites(np.ones(100), 10, 10, 1)) == 50

    def test_low_ground_has_none(self):
        assert mountain_sites(np.full(100, 0.75), 10, 10, 1) == []

    def test_deterministic(self):
        field = np.linspace(0, 1, 400)
        assert mountain_sites(field, 20, 20, 9) == mountain_sites(field, 20, 20, 9)


class TestRender:
    """Test figure rendering and export."""

    def test_export_filename(self):
        assert export_filename(4242) == "fantasy-map-4242.png"

    def test_render_map_layers(self, small_map):
        params, result = small_map
        fig = render_map(result, params)
        ax = fig.axes[0]
        assert len(ax.images) == 1
        assert len(ax.lines) == len(result.rivers)
        assert len(ax.patches) >= len(result.cities)

    def test_png_dimensions(self, small_map):
        params, result = small_map
        png = render_png(result, params)
        assert png[:8] == b"\x89PNG\r\n\x1a\n"
        width, height = struct.unpack(">II", png[16:24])
        assert (width, height) == (200, 100)

    def test_save_png(self, small_map, tmp_path):
        params, result = small_map
        path = save_png(result, params, tmp_path / "out" / "map.png")
        assert path.exists()
        assert path.read_bytes()[:4] == b"\x89PNG"
