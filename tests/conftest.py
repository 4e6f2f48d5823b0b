"""Shared test fixtures."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Sequence, Tuple

import numpy as np
import pytest
from PIL import Image

from bloxel_map.core_types import Texture

T = 8

RED = (255, 0, 0)
BLUE = (0, 0, 255)
GREEN = (0, 255, 0)
WHITE = (255, 255, 255)


def solid_tile(rgb: Tuple[int, int, int], alpha: int = 255, size: int = T) -> np.ndarray:
    tile = np.zeros((size, size, 4), dtype=np.uint8)
    tile[..., :3] = rgb
    tile[..., 3] = alpha
    return tile


def write_atlas(path: Path, tiles: Sequence[np.ndarray], per_row: int) -> Path:
    """Lay tiles out row-major and save them as one RGBA PNG."""
    size = tiles[0].shape[0]
    rows = (len(tiles) + per_row - 1) // per_row
    atlas = np.zeros((rows * size, per_row * size, 4), dtype=np.uint8)
    for i, tile in enumerate(tiles):
        top = (i // per_row) * size
        left = (i % per_row) * size
        atlas[top : top + size, left : left + size] = tile
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(atlas).save(path)
    return path


def make_texture(
    texture_id: int,
    hexes: Sequence[str],
    counts: Sequence[int],
    block_ids: Sequence[int] = (),
    has_transparency: bool | None = None,
) -> Texture:
    if has_transparency is None:
        has_transparency = "#transparent" in hexes
    return Texture(
        texture_id=texture_id,
        atlas_file_index=0,
        texture_index_on_atlas=texture_id,
        has_transparency=has_transparency,
        colour_count=len(hexes),
        colour_hexes=tuple(hexes),
        colour_pixel_counts=tuple(counts),
        block_ids=tuple(block_ids),
    )


# Block map: red wool (10), blue wool (11) and blue concrete (4) share the
# blue texture; a slab and an excluded id reference textures of their own.
BLOCK_MAP: Dict[str, dict] = {
    "10": {
        "name": "Red Wool",
        "faceMap": {"blockFaceFront": 0, "blockFaceTop": 0},
        "texturePalette": [{"atlasFileIndex": 0, "textureIndexOnAtlas": 0}],
    },
    "11": {
        "name": "Blue Wool",
        "faceMap": {"blockFaceFront": 0, "blockFaceBack": 0},
        "texturePalette": [{"atlasFileIndex": 0, "textureIndexOnAtlas": 1}],
    },
    "4": {
        "name": "Blue Concrete",
        "faceMap": {"blockFaceFront": 0},
        "texturePalette": [{"atlasFileIndex": 0, "textureIndexOnAtlas": 1}],
    },
    "20": {
        "name": "Red Wool Slab",
        "faceMap": {"blockFaceFront": 0},
        "texturePalette": [{"atlasFileIndex": 0, "textureIndexOnAtlas": 2}],
    },
    "127": {
        "name": "Barrier",
        "faceMap": {"blockFaceFront": 0},
        "texturePalette": [{"atlasFileIndex": 0, "textureIndexOnAtlas": 3}],
    },
}


@pytest.fixture
def block_world(tmp_path: Path) -> Dict[str, Path]:
    """Atlas with red, blue, green and white tiles plus a matching block map."""
    textures = tmp_path / "textures"
    write_atlas(
        textures / "atlas_0.png",
        [solid_tile(RED), solid_tile(BLUE), solid_tile(GREEN), solid_tile(WHITE)],
        per_row=2,
    )
    map_path = tmp_path / "block_texture_map.json"
    map_path.write_text(json.dumps(BLOCK_MAP), encoding="utf-8")
    return {"root": tmp_path, "textures": textures, "map": map_path}
