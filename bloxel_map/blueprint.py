# bloxel_map/blueprint.py
from __future__ import annotations

"""
Blueprint encoding.

Each grid cell becomes one code point PRIVATE_USE_START + block_id, written
row-major with no separators. A cell with no texture encodes block id 0.
When a texture backs several blocks the smallest id is emitted.

Exports:
  Blueprint(symbols, width, height)
  representative_block_id(texture) -> int
  encode_blueprint(choices, palette) -> Blueprint
  decode_blueprint(symbols) -> list[int]
  write_blueprint_files(blueprint, base_path) -> (txt_path, json_path)
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .constants import MAX_BLOCK_ID, PRIVATE_USE_END, PRIVATE_USE_START
from .core_types import NO_MATCH, ChoiceGrid, Texture
from .utils import write_json


@dataclass(frozen=True)
class Blueprint:
    symbols: str
    width: int
    height: int

    def config(self) -> dict:
        return {"width": self.width, "height": self.height}


def representative_block_id(texture: Optional[Texture]) -> int:
    if texture is None or not texture.block_ids:
        return 0
    return int(texture.block_ids[0])


def block_id_to_symbol(block_id: int) -> str:
    if block_id < 0 or block_id > MAX_BLOCK_ID:
        raise ValueError(
            f"block id {block_id} outside the encodable range 0..{MAX_BLOCK_ID}"
        )
    return chr(PRIVATE_USE_START + block_id)


def encode_blueprint(choices: ChoiceGrid, palette: Sequence[Texture]) -> Blueprint:
    """Encode a (H,W) grid of texture ids as a private-use symbol string."""
    grid = np.asarray(choices)
    if grid.ndim != 2:
        raise ValueError("choices must be a 2D grid")
    height, width = int(grid.shape[0]), int(grid.shape[1])

    out: List[str] = []
    for texture_id in grid.reshape(-1).tolist():
        texture = None
        if texture_id != NO_MATCH and 0 <= texture_id < len(palette):
            texture = palette[texture_id]
        out.append(block_id_to_symbol(representative_block_id(texture)))
    return Blueprint(symbols="".join(out), width=width, height=height)


def decode_blueprint(symbols: str) -> List[int]:
    """Inverse of the symbol mapping: one block id per cell."""
    ids: List[int] = []
    for ch in symbols:
        cp = ord(ch)
        if not PRIVATE_USE_START <= cp <= PRIVATE_USE_END:
            raise ValueError(f"symbol U+{cp:04X} is not a blueprint symbol")
        ids.append(cp - PRIVATE_USE_START)
    return ids


def write_blueprint_files(blueprint: Blueprint, base_path: Path) -> Tuple[Path, Path]:
    """Write <base>.txt (symbols) and <base>.json ({width, height})."""
    base_path = Path(base_path)
    text_path = base_path.with_name(base_path.name + ".txt")
    config_path = base_path.with_name(base_path.name + ".json")
    text_path.parent.mkdir(parents=True, exist_ok=True)
    text_path.write_text(blueprint.symbols, encoding="utf-8")
    write_json(config_path, blueprint.config(), indent=2)
    return text_path, config_path


__all__ = [
    "Blueprint",
    "representative_block_id",
    "block_id_to_symbol",
    "encode_blueprint",
    "decode_blueprint",
    "write_blueprint_files",
]
