#!/usr/bin/env python3
"""
bloxelize.py
Rebuild an image or GIF out of block textures and write a symbolic blueprint.

Usage:
  python bloxelize.py INPUT --index 1_texture_index.json --textures textures --width W --face front --debug

Modes:
  image     : one PNG mosaic; identical colours share a cached match.
  animation : GIF mosaic built frame by frame in order. A texture only changes
              between frames when the new match is closer by more than
              --switch-threshold, which keeps flat areas from flickering.
  auto      : animation for multi-frame input, image otherwise.

Input:
  Any Pillow-readable image. Animated GIFs are read fully composited.

Output (next to INPUT unless --outdir is given):
  <stem>_bloxelized.png or .gif : rendered mosaic, TEXTURE_SIZE px per block
  <stem>_bloxelized.txt         : blueprint, one private-use symbol per block
  <stem>_bloxelized.json        : {"width": W, "height": H}

Notes:
  The texture index comes from texture_index.py. For animations the blueprint
  describes the first frame.
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path
from typing import List, Optional

import numpy as np

from bloxel_map.blueprint import encode_blueprint, write_blueprint_files
from bloxel_map.constants import (
    DEFAULT_ANIMATION_WIDTH,
    DEFAULT_FACE,
    DEFAULT_FPS,
    DEFAULT_MAX_VARIANCE,
    DEFAULT_OUTPUT_WIDTH,
    DEFAULT_SWITCH_THRESHOLD,
    FACES,
    INDEX_FILE,
    OUTPUT_SUFFIX,
    TEXTURE_SIZE,
    TEXTURES_DIR_NAME,
)
from bloxel_map.core_types import ChoiceGrid, FilterConfig, RenderConfig, TextureIndex
from bloxel_map.image_io import (
    count_frames,
    iter_animation_frames,
    load_image_rgba,
    save_gif_rgba,
    save_png_rgba,
)
from bloxel_map.match import ColourMatcher, prepare_candidates, render_frame, resolve_output_size
from bloxel_map.mode import effective_mode
from bloxel_map.palette_index import load_texture_index
from bloxel_map.texture_analysis import AtlasStore
from bloxel_map.utils import (
    debug_log,
    enable_line_buffered_stdout,
    error,
    format_seconds_compact,
    format_total_duration_compact,
    key_value_pairs_to_string,
    log,
    print_banner,
    print_config_line,
)

# CLI args & small helpers


def _optional_float(text: str) -> Optional[float]:
    return None if text.strip().lower() in ("none", "off", "") else float(text)


def _optional_int(text: str) -> Optional[int]:
    return None if text.strip().lower() in ("none", "off", "") else int(text)


def parse_cli_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse CLI arguments for bloxelizing.

    Options that accept "none" disable the matching limit.
    """
    parser = argparse.ArgumentParser(
        prog="bloxelize",
        description="Convert an image or GIF into a block-texture mosaic and blueprint.",
    )
    parser.add_argument("src", type=Path, help="Input image or GIF")
    parser.add_argument("--outdir", type=Path, default=None, help="Output directory (optional)")
    parser.add_argument(
        "--mode",
        choices=["auto", "image", "animation"],
        default="auto",
        help="Processing mode.",
    )
    parser.add_argument("--index", type=Path, default=Path(INDEX_FILE), help="Texture index JSON")
    parser.add_argument(
        "--textures", type=Path, default=Path(TEXTURES_DIR_NAME), help="Directory with atlas_<n>.png"
    )
    parser.add_argument("--texture-size", type=int, default=TEXTURE_SIZE, help="Texture side in pixels")
    parser.add_argument(
        "--width",
        type=int,
        default=None,
        help=f"Output width in blocks (default {DEFAULT_OUTPUT_WIDTH}, {DEFAULT_ANIMATION_WIDTH} for animations).",
    )
    parser.add_argument("--height", type=int, default=None, help="Output height in blocks.")
    parser.add_argument("--face", choices=list(FACES), default=DEFAULT_FACE, help="Block face to draw")
    parser.add_argument(
        "--max-variance",
        type=_optional_float,
        default=DEFAULT_MAX_VARIANCE,
        help='Reject textures whose colour spread exceeds this ("none" = unlimited).',
    )
    parser.add_argument(
        "--search-depth",
        type=_optional_int,
        default=None,
        help="Most frequent colours averaged per texture (default: all).",
    )
    parser.add_argument(
        "--max-colours",
        type=_optional_int,
        default=None,
        help="Reject textures with more distinct colours (default: unlimited).",
    )
    parser.add_argument(
        "--allow-transparency", action="store_true", help="Allow textures with transparent pixels"
    )
    parser.add_argument(
        "--switch-threshold",
        type=float,
        default=DEFAULT_SWITCH_THRESHOLD,
        help="Animation only: distance gain needed to change a pixel's texture.",
    )
    parser.add_argument("--fps", type=int, default=DEFAULT_FPS, help="Animation only: output frame rate")
    parser.add_argument("--debug", action="store_true", help="Verbose matching details")
    return parser.parse_args(argv)


def filter_config_from_args(args: argparse.Namespace) -> FilterConfig:
    return FilterConfig(
        face_direction=args.face,
        max_variance=args.max_variance,
        max_colour_count=args.max_colours,
        allow_transparency=bool(args.allow_transparency),
        search_depth=args.search_depth,
    )


def render_config_from_args(args: argparse.Namespace) -> RenderConfig:
    if args.fps <= 0:
        raise ValueError("--fps must be positive")
    return RenderConfig(
        output_width=args.width,
        output_height=args.height,
        switch_threshold=float(args.switch_threshold),
        fps=int(args.fps),
    )


def output_base_for(src: Path, outdir: Optional[Path]) -> Path:
    parent = outdir if outdir is not None else src.parent
    return parent / f"{src.stem}{OUTPUT_SUFFIX}"


def _grid_size(rgba: np.ndarray, cfg: RenderConfig, default_width: int) -> tuple:
    width, height = cfg.output_width, cfg.output_height
    if not width and not height:
        width = default_width
    return resolve_output_size(rgba.shape[1], rgba.shape[0], width, height)


# Per-input processing


def process_image(
    src: Path,
    out_base: Path,
    index: TextureIndex,
    matcher: ColourMatcher,
    atlases: AtlasStore,
    cfg: RenderConfig,
    debug: bool,
) -> Path:
    """Static image: load -> resize -> match (cached) -> composite -> save."""
    rgba = load_image_rgba(src)
    out_w, out_h = _grid_size(rgba, cfg, DEFAULT_OUTPUT_WIDTH)
    log(f"Bloxelizing to {out_w}x{out_h} blocks...")

    t0 = time.perf_counter()
    composite, choices = render_frame(rgba, matcher, atlases, out_w, out_h, progress=True)
    if debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Match time", format_seconds_compact(time.perf_counter() - t0)),
                    ("Cache hits", matcher.cache_hits),
                    ("Textures used", int(np.unique(choices).size)),
                ]
            )
        )

    blueprint = encode_blueprint(choices, index.texture_palette)
    text_path, config_path = write_blueprint_files(blueprint, out_base)
    image_path = save_png_rgba(out_base.with_name(out_base.name + ".png"), composite)

    log("Outputs saved:")
    log(f"  - Image:     {image_path.name}")
    log(f"  - Blueprint: {text_path.name}")
    log(f"  - Config:    {config_path.name}")
    return image_path


def process_animation(
    src: Path,
    out_base: Path,
    index: TextureIndex,
    matcher: ColourMatcher,
    atlases: AtlasStore,
    cfg: RenderConfig,
    debug: bool,
) -> Path:
    """
    Animated input: frames are matched strictly in order, each against the
    previous frame's choices. The blueprint is taken from the first frame.
    """
    total = count_frames(src)
    delay_ms = int(round(1000.0 / cfg.fps))
    gif_path = out_base.with_name(out_base.name + ".gif")
    log(f"Processing GIF, saving final animation to: {gif_path.name}")

    rendered: List[np.ndarray] = []
    previous: Optional[ChoiceGrid] = None
    size: Optional[tuple] = None
    for i, frame in enumerate(iter_animation_frames(src)):
        log(f"--- Processing Frame {i + 1}/{total} ---")
        if size is None:
            size = _grid_size(frame, cfg, DEFAULT_ANIMATION_WIDTH)
        held_before = matcher.switches_held
        composite, choices = render_frame(
            frame, matcher, atlases, size[0], size[1], previous=previous, use_cache=False
        )
        if debug:
            debug_log(f"frame {i + 1}: held={matcher.switches_held - held_before}")
        if previous is None:
            blueprint = encode_blueprint(choices, index.texture_palette)
            write_blueprint_files(blueprint, out_base)
        previous = choices
        rendered.append(composite)

    log("Finalizing GIF...")
    save_gif_rgba(gif_path, rendered, delay_ms)
    log(f"Wrote {gif_path.name} | frames={len(rendered)} | delay={delay_ms}ms")
    return gif_path


def run(args: argparse.Namespace) -> Path:
    t_start = time.perf_counter()
    src: Path = args.src
    filter_cfg = filter_config_from_args(args)
    render_cfg = render_config_from_args(args)

    print_banner(src.name)
    log(f"Loading texture index from {args.index.name}...")
    index = load_texture_index(args.index)

    print_config_line(
        "filter",
        [
            ("Face", filter_cfg.face_direction),
            ("Max variance", filter_cfg.max_variance),
            ("Max colours", filter_cfg.max_colour_count),
            ("Search depth", filter_cfg.search_depth),
            ("Transparency", filter_cfg.allow_transparency),
        ],
        debug=False,
    )
    candidates = prepare_candidates(index, filter_cfg, debug=args.debug)
    log(f"Prepared {len(candidates)} valid candidate textures.")

    matcher = ColourMatcher(candidates, switch_threshold=render_cfg.switch_threshold)
    atlases = AtlasStore(args.textures, texture_size=args.texture_size)
    out_base = output_base_for(src, args.outdir)

    mode = effective_mode(args.mode, src)
    if args.debug:
        debug_log(f"mode: {mode}")
    if mode == "animation":
        out = process_animation(src, out_base, index, matcher, atlases, render_cfg, args.debug)
    else:
        out = process_image(src, out_base, index, matcher, atlases, render_cfg, args.debug)

    log(f"Total time {format_total_duration_compact(time.perf_counter() - t_start)}")
    return out


# Entry point


def main(argv: Optional[List[str]] = None) -> None:
    enable_line_buffered_stdout()
    args = parse_cli_args(argv)
    if not args.src.exists():
        error(f"not found: {args.src}")
        sys.exit(2)
    try:
        run(args)
    except (ValueError, KeyError, FileNotFoundError, OSError) as e:
        error(f"An unrecoverable error occurred: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
