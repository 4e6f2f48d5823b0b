# bloxel_map/palette_index.py
from __future__ import annotations

"""
Texture palette index builder.

Exports:
  is_excluded_block(block_id, name) -> bool
  parse_block_map(data) -> dict[int, BlockEntry]
  read_block_map(path) -> dict[int, BlockEntry]
  scan_included_block_ids(blocks) -> list[int]
  build_texture_index(blocks, analyse, debug=False) -> TextureIndex
  save_texture_index(index, path) / load_texture_index(path)
  save_included_block_ids(ids, path)

Blocks are visited in ascending id order. Textures are deduplicated by
(atlas_file_index, texture_index_on_atlas); the first encounter is analysed
and receives the next dense texture id.
"""

from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Set

from .constants import EXCLUDED_BLOCK_IDS, SLAB_MARKER
from .core_types import (
    BlockEntry,
    Texture,
    TextureAnalysis,
    TextureIndex,
    TextureKey,
    empty_face_index,
)
from .faces import simplify_face_name
from .utils import debug_log, read_json, warn, write_json

Analyser = Callable[[TextureKey], TextureAnalysis]


def is_excluded_block(block_id: int, name: str) -> bool:
    """Slabs and a fixed set of ids never enter the palette."""
    return SLAB_MARKER in name or block_id in EXCLUDED_BLOCK_IDS


def _parse_texture_ref(raw: Any) -> Optional[TextureKey]:
    if not isinstance(raw, Mapping):
        return None
    if "atlasFileIndex" not in raw or "textureIndexOnAtlas" not in raw:
        return None
    return (int(raw["atlasFileIndex"]), int(raw["textureIndexOnAtlas"]))


def parse_block_map(data: Mapping[str, Any]) -> Dict[int, BlockEntry]:
    """
    Parse the block texture map JSON:
      {"<id>": {"name": str, "faceMap": {face: slot}, "texturePalette": [ref, ...]}}
    """
    blocks: Dict[int, BlockEntry] = {}
    for raw_id, raw in data.items():
        block_id = int(raw_id)
        refs = raw.get("texturePalette") or []
        if isinstance(refs, Mapping):
            # Some exports key the palette by slot number instead of a list.
            size = max((int(k) for k in refs), default=-1) + 1
            ordered = [refs.get(str(i)) for i in range(size)]
        else:
            ordered = list(refs)
        blocks[block_id] = BlockEntry(
            block_id=block_id,
            name=str(raw.get("name", "")),
            face_map={str(f): int(s) for f, s in (raw.get("faceMap") or {}).items()},
            texture_refs=[_parse_texture_ref(r) for r in ordered],
        )
    return blocks


def read_block_map(path: Path) -> Dict[int, BlockEntry]:
    return parse_block_map(read_json(path))


def scan_included_block_ids(blocks: Mapping[int, BlockEntry]) -> List[int]:
    """Ids of every block that survives exclusion, ascending. No atlas access."""
    return sorted(
        bid for bid, entry in blocks.items() if not is_excluded_block(bid, entry.name)
    )


def build_texture_index(
    blocks: Mapping[int, BlockEntry], analyse: Analyser, debug: bool = False
) -> TextureIndex:
    """Analyse every referenced texture once and build the palette and face index."""
    analyses: List[TextureAnalysis] = []
    keys: List[TextureKey] = []
    id_of_key: Dict[TextureKey, int] = {}
    owners: Dict[int, Set[int]] = {}
    block_map: Dict[int, str] = {}
    face_index = empty_face_index()
    included: List[int] = []
    unknown_faces: Set[str] = set()
    skipped_slots = 0

    for block_id in sorted(blocks):
        entry = blocks[block_id]
        if is_excluded_block(block_id, entry.name):
            continue

        included.append(block_id)
        block_map[block_id] = entry.name

        for raw_face, slot in entry.face_map.items():
            key = entry.texture_for_slot(slot)
            if key is None:
                skipped_slots += 1
                continue

            texture_id = id_of_key.get(key)
            if texture_id is None:
                texture_id = len(analyses)
                analyses.append(analyse(key))
                keys.append(key)
                id_of_key[key] = texture_id

            owners.setdefault(texture_id, set()).add(block_id)

            face = simplify_face_name(raw_face)
            if face is None:
                if raw_face not in unknown_faces:
                    warn(f"Could not determine simple face name for: {raw_face}")
                    unknown_faces.add(raw_face)
                continue

            by_colour = face_index[face]
            for hex_str in analyses[texture_id].colour_hexes:
                ids = by_colour.setdefault(hex_str, [])
                if texture_id not in ids:
                    ids.append(texture_id)

    palette = [
        Texture(
            texture_id=tid,
            atlas_file_index=keys[tid][0],
            texture_index_on_atlas=keys[tid][1],
            has_transparency=a.has_transparency,
            colour_count=a.colour_count,
            colour_hexes=a.colour_hexes,
            colour_pixel_counts=a.colour_pixel_counts,
            block_ids=tuple(sorted(owners.get(tid, ()))),
        )
        for tid, a in enumerate(analyses)
    ]

    if debug:
        debug_log(
            f"index: blocks={len(included)} textures={len(palette)} "
            f"missing_slots={skipped_slots} unknown_faces={len(unknown_faces)}"
        )

    return TextureIndex(
        texture_palette=palette,
        block_map=block_map,
        face_index=face_index,
        included_block_ids=sorted(included),
    )


def save_texture_index(index: TextureIndex, path: Path) -> Path:
    return write_json(path, index.to_dict())


def load_texture_index(path: Path) -> TextureIndex:
    if not Path(path).is_file():
        raise FileNotFoundError(f"texture index not found: {path}")
    return TextureIndex.from_dict(read_json(path))


def save_included_block_ids(ids: List[int], path: Path, indent: int | None = None) -> Path:
    return write_json(path, sorted(ids), indent=indent)


__all__ = [
    "Analyser",
    "is_excluded_block",
    "parse_block_map",
    "read_block_map",
    "scan_included_block_ids",
    "build_texture_index",
    "save_texture_index",
    "load_texture_index",
    "save_included_block_ids",
]
