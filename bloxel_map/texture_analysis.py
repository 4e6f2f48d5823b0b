# bloxel_map/texture_analysis.py
from __future__ import annotations

"""
Texture histogram analysis and atlas access.

Exports:
  analyse_texture(rgba) -> TextureAnalysis
  texture_origin(atlas_width, index_on_atlas, size) -> (left, top)
  AtlasStore(textures_dir, texture_size)
    .atlas(atlas_file_index)   -> uint8 (H,W,4)
    .tile(key)                 -> uint8 (T,T,4)
    .analyse(key)              -> TextureAnalysis

Notes:
  - Pixels with alpha < 255 count under the synthetic "#transparent" key.
  - Histogram order is descending count; ties keep row-major first occurrence.
  - AtlasStore caches are per instance, so one store lives for one job.
"""

from pathlib import Path
from typing import Dict, Tuple

import numpy as np

from .constants import ATLAS_FILE_PATTERN, TEXTURE_SIZE, TRANSPARENT_KEY
from .core_types import TextureAnalysis, TextureKey, U8Image, assert_u8_image_rgba
from .image_io import load_image_rgba


def analyse_texture(rgba: U8Image) -> TextureAnalysis:
    """Build the colour histogram of one texture tile."""
    arr = assert_u8_image_rgba(rgba)
    flat = arr.reshape(-1, 4).astype(np.int64)
    opaque = flat[:, 3] == 255

    packed = (flat[:, 0] << 16) | (flat[:, 1] << 8) | flat[:, 2]
    packed[~opaque] = -1  # transparent sentinel sorts before any colour

    uniques, first_idx, counts = np.unique(
        packed, return_index=True, return_counts=True
    )
    order = np.lexsort((first_idx, -counts))

    hexes = tuple(
        TRANSPARENT_KEY if int(v) < 0 else f"#{int(v):06x}" for v in uniques[order]
    )
    pixel_counts = tuple(int(c) for c in counts[order])
    return TextureAnalysis(
        has_transparency=bool(not np.all(opaque)),
        colour_count=len(hexes),
        colour_hexes=hexes,
        colour_pixel_counts=pixel_counts,
    )


def texture_origin(
    atlas_width: int, index_on_atlas: int, size: int = TEXTURE_SIZE
) -> Tuple[int, int]:
    """Top-left pixel of texture `index_on_atlas` in a row-major atlas grid."""
    per_row = atlas_width // size
    if per_row <= 0:
        raise ValueError(f"atlas width {atlas_width} smaller than texture size {size}")
    left = (index_on_atlas % per_row) * size
    top = (index_on_atlas // per_row) * size
    return left, top


class AtlasStore:
    """Loads atlas_<n>.png files on demand and hands out cropped tiles."""

    def __init__(self, textures_dir: Path, texture_size: int = TEXTURE_SIZE) -> None:
        self.textures_dir = Path(textures_dir)
        self.texture_size = int(texture_size)
        self._atlases: Dict[int, U8Image] = {}
        self._tiles: Dict[TextureKey, U8Image] = {}

    def atlas_path(self, atlas_file_index: int) -> Path:
        return self.textures_dir / ATLAS_FILE_PATTERN.format(index=atlas_file_index)

    def atlas(self, atlas_file_index: int) -> U8Image:
        cached = self._atlases.get(atlas_file_index)
        if cached is not None:
            return cached
        path = self.atlas_path(atlas_file_index)
        if not path.is_file():
            raise FileNotFoundError(f"Failed to load atlas image: {path}")
        arr = load_image_rgba(path)
        self._atlases[atlas_file_index] = arr
        return arr

    def tile(self, key: TextureKey) -> U8Image:
        cached = self._tiles.get(key)
        if cached is not None:
            return cached
        atlas_file_index, index_on_atlas = key
        atlas = self.atlas(atlas_file_index)
        T = self.texture_size
        left, top = texture_origin(atlas.shape[1], index_on_atlas, T)
        if top + T > atlas.shape[0]:
            raise ValueError(
                f"texture {index_on_atlas} lies outside atlas {atlas_file_index} "
                f"({atlas.shape[1]}x{atlas.shape[0]})"
            )
        tile = np.ascontiguousarray(atlas[top : top + T, left : left + T])
        self._tiles[key] = tile
        return tile

    def analyse(self, key: TextureKey) -> TextureAnalysis:
        return analyse_texture(self.tile(key))


__all__ = ["analyse_texture", "texture_origin", "AtlasStore"]
