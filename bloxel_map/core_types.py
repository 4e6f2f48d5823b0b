# bloxel_map/core_types.py
from __future__ import annotations

"""
Core type aliases, small value objects, and lightweight helpers.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterator, List, Literal, Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from .constants import (
    DEFAULT_FACE,
    DEFAULT_FPS,
    DEFAULT_SWITCH_THRESHOLD,
    FACES,
    TRANSPARENT_KEY,
)

# Basic aliases

RGBTuple = Tuple[int, int, int]
HexStr = str
Face = Literal["top", "bottom", "front", "back", "left", "right"]

U8Image = NDArray[np.uint8]  # (H, W, 4) RGBA
ChoiceGrid = NDArray[np.int32]  # (H, W) texture ids, NO_MATCH where unmatched

NO_MATCH: int = -1

# Collections

FaceIndex = Dict[str, Dict[HexStr, List[int]]]  # face -> "#rrggbb" -> texture ids
BlockNames = Dict[int, str]  # block id -> block name
TextureKey = Tuple[int, int]  # (atlas_file_index, texture_index_on_atlas)

# Value objects


@dataclass(frozen=True)
class TextureAnalysis:
    """Colour histogram of a single texture tile."""

    has_transparency: bool
    colour_count: int
    colour_hexes: Tuple[HexStr, ...]
    colour_pixel_counts: Tuple[int, ...]


@dataclass(frozen=True)
class Texture:
    """Deduplicated atlas texture with its histogram and owning blocks."""

    texture_id: int
    atlas_file_index: int
    texture_index_on_atlas: int
    has_transparency: bool
    colour_count: int
    colour_hexes: Tuple[HexStr, ...]
    colour_pixel_counts: Tuple[int, ...]
    block_ids: Tuple[int, ...] = ()

    @property
    def key(self) -> TextureKey:
        return (self.atlas_file_index, self.texture_index_on_atlas)

    @property
    def histogram(self) -> Iterator[Tuple[HexStr, int]]:
        return zip(self.colour_hexes, self.colour_pixel_counts)

    def to_dict(self) -> Dict[str, Any]:
        # Key names match the index files written by the original tooling.
        return {
            "textureId": self.texture_id,
            "atlasFileIndex": self.atlas_file_index,
            "textureIndexOnAtlas": self.texture_index_on_atlas,
            "hasTransparency": self.has_transparency,
            "colorCount": self.colour_count,
            "colorHexes": list(self.colour_hexes),
            "colorPixelCounts": list(self.colour_pixel_counts),
            "blockIds": list(self.block_ids),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Texture":
        return cls(
            texture_id=int(data["textureId"]),
            atlas_file_index=int(data["atlasFileIndex"]),
            texture_index_on_atlas=int(data["textureIndexOnAtlas"]),
            has_transparency=bool(data["hasTransparency"]),
            colour_count=int(data["colorCount"]),
            colour_hexes=tuple(str(h) for h in data["colorHexes"]),
            colour_pixel_counts=tuple(int(c) for c in data["colorPixelCounts"]),
            block_ids=tuple(int(b) for b in data.get("blockIds", [])),
        )


@dataclass(frozen=True)
class BlockEntry:
    """One row of the block texture map."""

    block_id: int
    name: str
    face_map: Dict[str, int]  # raw face name -> slot in texture_refs
    texture_refs: Sequence[Optional[TextureKey]]

    def texture_for_slot(self, slot: int) -> Optional[TextureKey]:
        if 0 <= slot < len(self.texture_refs):
            return self.texture_refs[slot]
        return None


@dataclass
class TextureIndex:
    """Texture palette, block names and per-face colour index."""

    texture_palette: List[Texture]
    block_map: BlockNames
    face_index: FaceIndex
    included_block_ids: List[int] = field(default_factory=list)

    def valid_texture_ids(self, face: str) -> FrozenSet[int]:
        """Union of every texture id listed under `face`."""
        if face not in self.face_index:
            raise ValueError(f'Face direction "{face}" not found in texture index.')
        return frozenset(
            tid for ids in self.face_index[face].values() for tid in ids
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "texture_palette": [t.to_dict() for t in self.texture_palette],
            "block_map": {str(k): v for k, v in self.block_map.items()},
            "face_index": self.face_index,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TextureIndex":
        palette = [Texture.from_dict(t) for t in data["texture_palette"]]
        block_map = {int(k): str(v) for k, v in data.get("block_map", {}).items()}
        face_index: FaceIndex = {
            str(face): {str(h): [int(t) for t in ids] for h, ids in colours.items()}
            for face, colours in data.get("face_index", {}).items()
        }
        return cls(
            texture_palette=palette,
            block_map=block_map,
            face_index=face_index,
            included_block_ids=sorted(block_map),
        )


@dataclass(frozen=True)
class Candidate:
    """Texture that survived filtering, with the colour it is matched by."""

    texture: Texture
    perceived_colour: RGBTuple


@dataclass(frozen=True)
class FilterConfig:
    """Candidate filter options. None means unlimited / use everything."""

    face_direction: Face = DEFAULT_FACE
    max_variance: Optional[float] = None
    max_colour_count: Optional[int] = None
    allow_transparency: bool = False
    search_depth: Optional[int] = None


@dataclass(frozen=True)
class RenderConfig:
    """Per-job output options."""

    output_width: Optional[int] = None
    output_height: Optional[int] = None
    switch_threshold: float = DEFAULT_SWITCH_THRESHOLD
    fps: int = DEFAULT_FPS


# Small helpers


def empty_face_index() -> FaceIndex:
    return {face: {} for face in FACES}


def is_transparent_key(hex_str: HexStr) -> bool:
    return hex_str == TRANSPARENT_KEY


def hex_to_rgb(hex_str: str) -> Optional[RGBTuple]:
    """Parse '#rrggbb' into an RGB tuple; the transparent key yields None."""
    if is_transparent_key(hex_str):
        return None
    s = hex_str.strip().lower()
    if not s.startswith("#") or len(s) != 7:
        raise ValueError(f"hex must be '#rrggbb', got {hex_str!r}")
    return (int(s[1:3], 16), int(s[3:5], 16), int(s[5:7], 16))


def assert_u8_image_rgba(image: np.ndarray) -> U8Image:
    """Validate a uint8 (H,W,4) image and return it typed as U8Image."""
    if image.dtype != np.uint8 or image.ndim != 3 or image.shape[-1] != 4:
        raise TypeError("expected uint8 (H,W,4) image")
    return image  # type: ignore[return-value]


__all__ = [
    # aliases / types
    "RGBTuple",
    "HexStr",
    "Face",
    "U8Image",
    "ChoiceGrid",
    "NO_MATCH",
    "FaceIndex",
    "BlockNames",
    "TextureKey",
    # value objects
    "TextureAnalysis",
    "Texture",
    "BlockEntry",
    "TextureIndex",
    "Candidate",
    "FilterConfig",
    "RenderConfig",
    # helpers
    "empty_face_index",
    "is_transparent_key",
    "hex_to_rgb",
    "assert_u8_image_rgba",
]
