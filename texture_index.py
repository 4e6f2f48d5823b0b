#!/usr/bin/env python3
"""
texture_index.py
Analyse every block texture once and write the texture index used by bloxelize.py.

Usage:
  python texture_index.py --map block_texture_map.json --textures textures --out 1_texture_index.json
  # only list the block ids that survive exclusion (no atlas access)
  python texture_index.py --ids-only --ids-out included_block_ids.json

Input
- block_texture_map.json: {"<id>": {"name", "faceMap": {face: slot}, "texturePalette": [{atlasFileIndex, textureIndexOnAtlas}, ...]}}
- textures/atlas_<n>.png: square textures laid out row-major, TEXTURE_SIZE px each.

Output
- 1_texture_index.json: {"texture_palette", "block_map", "face_index"}
- 2_texture_index_available_block_ids.json: ascending list of included block ids.

Slab blocks and a fixed set of ids are excluded. Textures shared between
blocks are analysed once; unknown face names are reported and left out of the
face index.
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path
from typing import List, Optional

from bloxel_map.constants import (
    BLOCK_MAP_FILE,
    INCLUDED_BLOCK_IDS_FILE,
    INDEX_BLOCK_IDS_FILE,
    INDEX_FILE,
    TEXTURE_SIZE,
    TEXTURES_DIR_NAME,
)
from bloxel_map.core_types import TextureIndex
from bloxel_map.palette_index import (
    build_texture_index,
    read_block_map,
    save_included_block_ids,
    save_texture_index,
    scan_included_block_ids,
)
from bloxel_map.texture_analysis import AtlasStore
from bloxel_map.utils import (
    enable_line_buffered_stdout,
    error,
    format_total_duration_compact,
    log,
)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        description="Build the texture index from the block texture map and atlas images."
    )
    p.add_argument("--map", type=Path, default=Path(BLOCK_MAP_FILE), help="Block texture map JSON.")
    p.add_argument(
        "--textures",
        type=Path,
        default=Path(TEXTURES_DIR_NAME),
        help="Directory containing atlas_<n>.png files.",
    )
    p.add_argument("--texture-size", type=int, default=TEXTURE_SIZE, help="Texture side in pixels.")
    p.add_argument("--out", type=Path, default=Path(INDEX_FILE), help="Texture index JSON path.")
    p.add_argument(
        "--ids-out",
        type=Path,
        default=None,
        help=f"Included block id list. Defaults to {INDEX_BLOCK_IDS_FILE} "
        f"({INCLUDED_BLOCK_IDS_FILE} with --ids-only).",
    )
    p.add_argument(
        "--ids-only",
        action="store_true",
        help="Only write the included block id list; atlases are not read.",
    )
    p.add_argument("--debug", action="store_true", help="Print index statistics.")
    return p.parse_args(argv)


def build(args: argparse.Namespace) -> Optional[TextureIndex]:
    log(f"Reading data from {args.map.name}...")
    blocks = read_block_map(args.map)

    if args.ids_only:
        ids = scan_included_block_ids(blocks)
        ids_path = args.ids_out or Path(INCLUDED_BLOCK_IDS_FILE)
        log(f"Found {len(ids)} blocks that are included in the final texture index.")
        save_included_block_ids(ids, ids_path, indent=2)
        log(f"Wrote {ids_path.name}")
        return None

    log(f"Analyzing {len(blocks)} blocks...")
    atlases = AtlasStore(args.textures, texture_size=args.texture_size)
    index = build_texture_index(blocks, atlases.analyse, debug=args.debug)

    ids_path = args.ids_out or Path(INDEX_BLOCK_IDS_FILE)
    save_included_block_ids(index.included_block_ids, ids_path)
    log(f"Writing available block ID list to {ids_path.name}...")
    save_texture_index(index, args.out)
    log(f"Analysis complete! Wrote final index to {args.out.name}")
    log(f"Total unique textures found: {len(index.texture_palette)}")
    log(f"Total available block IDs: {len(index.included_block_ids)}")
    return index


def main(argv: Optional[List[str]] = None) -> None:
    enable_line_buffered_stdout()
    args = parse_args(argv)
    if not args.map.exists():
        error(f"not found: {args.map}")
        sys.exit(2)
    t0 = time.perf_counter()
    try:
        build(args)
    except (ValueError, KeyError, FileNotFoundError, OSError) as e:
        error(f"An unrecoverable error occurred: {e}")
        sys.exit(1)
    log(f"Done in {format_total_duration_compact(time.perf_counter() - t0)}")


if __name__ == "__main__":
    main()
