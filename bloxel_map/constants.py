# bloxel_map/constants.py
"""
Global tunables and file names used across the project.

- Texture geometry (TEXTURE_SIZE)
- Block exclusion policy (SLAB_MARKER, EXCLUDED_BLOCK_IDS)
- Job defaults for the bloxelize CLI
- Blueprint symbol range
"""
from __future__ import annotations

from typing import FrozenSet, Literal, Tuple

# =========================
# Textures / atlases
# =========================
TEXTURE_SIZE: int = 8
TEXTURES_DIR_NAME: str = "textures"
ATLAS_FILE_PATTERN: str = "atlas_{index}.png"
TRANSPARENT_KEY: str = "#transparent"

# =========================
# Index files
# =========================
BLOCK_MAP_FILE: str = "block_texture_map.json"
INDEX_FILE: str = "1_texture_index.json"
INDEX_BLOCK_IDS_FILE: str = "2_texture_index_available_block_ids.json"
INCLUDED_BLOCK_IDS_FILE: str = "included_block_ids.json"

# =========================
# Block exclusion
# =========================
SLAB_MARKER: str = "Slab"
EXCLUDED_BLOCK_IDS: FrozenSet[int] = frozenset(
    {1, 127, 655, 656, 657, 658, 659, 660, 1227, 1228, 1229, 1230, 1231, 1232}
)

# =========================
# Faces
# =========================
FACES: Tuple[str, ...] = ("top", "bottom", "front", "back", "left", "right")

# =========================
# Job defaults
# =========================
DEFAULT_OUTPUT_WIDTH: int = 256
DEFAULT_ANIMATION_WIDTH: int = 96
DEFAULT_FACE: Literal["front"] = "front"
DEFAULT_MAX_VARIANCE: float = 20.0
DEFAULT_SWITCH_THRESHOLD: float = 15.0
DEFAULT_FPS: int = 20
OUTPUT_SUFFIX: str = "_bloxelized"

# =========================
# Blueprint symbols (BMP private use area)
# =========================
PRIVATE_USE_START: int = 0xE000
PRIVATE_USE_END: int = 0xF8FF
MAX_BLOCK_ID: int = PRIVATE_USE_END - PRIVATE_USE_START

__all__ = [
    "TEXTURE_SIZE",
    "TEXTURES_DIR_NAME",
    "ATLAS_FILE_PATTERN",
    "TRANSPARENT_KEY",
    "BLOCK_MAP_FILE",
    "INDEX_FILE",
    "INDEX_BLOCK_IDS_FILE",
    "INCLUDED_BLOCK_IDS_FILE",
    "SLAB_MARKER",
    "EXCLUDED_BLOCK_IDS",
    "FACES",
    "DEFAULT_OUTPUT_WIDTH",
    "DEFAULT_ANIMATION_WIDTH",
    "DEFAULT_FACE",
    "DEFAULT_MAX_VARIANCE",
    "DEFAULT_SWITCH_THRESHOLD",
    "DEFAULT_FPS",
    "OUTPUT_SUFFIX",
    "PRIVATE_USE_START",
    "PRIVATE_USE_END",
    "MAX_BLOCK_ID",
]
