"""Tests for texture histograms and atlas access."""

import numpy as np
import pytest

from bloxel_map.texture_analysis import AtlasStore, analyse_texture, texture_origin

from conftest import BLUE, GREEN, RED, WHITE, solid_tile, write_atlas


def test_histogram_sorted_by_count():
    tile = solid_tile(BLUE)
    tile[:5, :, :3] = RED  # 40 red, 24 blue
    a = analyse_texture(tile)
    assert a.colour_hexes == ("#ff0000", "#0000ff")
    assert a.colour_pixel_counts == (40, 24)
    assert a.colour_count == 2
    assert a.has_transparency is False


def test_ties_keep_scan_order():
    tile = solid_tile(WHITE)
    tile[:4, :, :3] = GREEN  # green is met first in row-major order
    a = analyse_texture(tile)
    assert a.colour_hexes == ("#00ff00", "#ffffff")
    assert a.colour_pixel_counts == (32, 32)


def test_partial_alpha_counts_as_transparent():
    tile = solid_tile(RED)
    tile[0, 0, 3] = 0
    tile[7, 7, 3] = 254
    a = analyse_texture(tile)
    assert a.has_transparency is True
    assert a.colour_hexes == ("#ff0000", "#transparent")
    assert a.colour_pixel_counts == (62, 2)


def test_counts_sum_to_area():
    rng = np.random.default_rng(7)
    tile = rng.integers(0, 4, size=(8, 8, 4), dtype=np.uint8) * 85
    a = analyse_texture(tile)
    assert sum(a.colour_pixel_counts) == 64
    assert a.colour_count == len(a.colour_hexes)


def test_rejects_rgb_only_tile():
    with pytest.raises(TypeError):
        analyse_texture(np.zeros((8, 8, 3), dtype=np.uint8))


def test_texture_origin_row_major():
    assert texture_origin(16, 0, 8) == (0, 0)
    assert texture_origin(16, 1, 8) == (8, 0)
    assert texture_origin(16, 3, 8) == (8, 8)


def test_atlas_store_crops_and_caches(tmp_path):
    write_atlas(
        tmp_path / "atlas_2.png",
        [solid_tile(RED), solid_tile(BLUE), solid_tile(GREEN)],
        per_row=2,
    )
    store = AtlasStore(tmp_path)
    tile = store.tile((2, 2))
    assert tile.shape == (8, 8, 4)
    assert tuple(tile[0, 0, :3]) == GREEN
    assert store.tile((2, 2)) is tile
    assert store.analyse((2, 1)).colour_hexes == ("#0000ff",)


def test_atlas_store_missing_file(tmp_path):
    store = AtlasStore(tmp_path)
    with pytest.raises(FileNotFoundError):
        store.tile((5, 0))


def test_atlas_store_index_out_of_range(tmp_path):
    write_atlas(tmp_path / "atlas_0.png", [solid_tile(RED), solid_tile(BLUE)], per_row=2)
    store = AtlasStore(tmp_path)
    with pytest.raises(ValueError):
        store.tile((0, 4))
