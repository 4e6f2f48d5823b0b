# bloxel_map/match/run.py
from __future__ import annotations

"""
Frame renderer.

Resizes a source frame to the block grid with nearest-neighbour sampling,
matches every grid pixel to a texture, and pastes the chosen tiles onto a
transparent canvas T times larger than the grid.
"""

import math
from typing import Optional, Tuple

import numpy as np

from ..core_types import NO_MATCH, ChoiceGrid, U8Image, assert_u8_image_rgba
from ..image_io import resize_nearest_rgba
from ..texture_analysis import AtlasStore
from ..utils import print_progress_line
from .matcher import ColourMatcher


def resolve_output_size(
    src_w: int, src_h: int, width: Optional[int], height: Optional[int]
) -> Tuple[int, int]:
    """Fill in the missing side from the source aspect ratio (half-up rounding)."""
    if width and not height:
        return int(width), max(1, int(math.floor(src_h * (width / src_w) + 0.5)))
    if height and not width:
        return max(1, int(math.floor(src_w * (height / src_h) + 0.5))), int(height)
    if width and height:
        return int(width), int(height)
    raise ValueError("an output width or height is required")


def render_frame(
    rgba: U8Image,
    matcher: ColourMatcher,
    atlases: AtlasStore,
    out_w: int,
    out_h: int,
    previous: Optional[ChoiceGrid] = None,
    use_cache: bool = True,
    progress: bool = False,
) -> Tuple[U8Image, ChoiceGrid]:
    """
    Match one frame and composite its textures.

    previous: ChoiceGrid of the preceding frame (sequence mode). When given,
      the hysteresis rule applies per pixel and the colour cache is bypassed.

    Returns:
      composite: uint8 [out_h*T, out_w*T, 4]
      choices  : int32 [out_h, out_w], NO_MATCH where nothing was chosen
    """
    grid = resize_nearest_rgba(assert_u8_image_rgba(rgba), out_w, out_h)
    T = atlases.texture_size
    composite = np.zeros((out_h * T, out_w * T, 4), dtype=np.uint8)
    choices: ChoiceGrid = np.full((out_h, out_w), NO_MATCH, dtype=np.int32)

    if previous is not None and previous.shape != choices.shape:
        raise ValueError(
            f"previous choices {previous.shape} do not match grid {choices.shape}"
        )
    cached = use_cache and previous is None

    for y in range(out_h):
        for x in range(out_w):
            pixel = grid[y, x]
            if cached:
                texture = matcher.match_cached(pixel)
            else:
                prev_id = None
                if previous is not None and previous[y, x] != NO_MATCH:
                    prev_id = int(previous[y, x])
                texture = matcher.match(pixel, prev_id)
            choices[y, x] = texture.texture_id
            composite[y * T : (y + 1) * T, x * T : (x + 1) * T] = atlases.tile(texture.key)
        if progress:
            print_progress_line(
                f"Progress: {int(math.floor((y + 1) / out_h * 100 + 0.5))}%",
                final=(y + 1 == out_h),
            )

    return composite, choices


__all__ = ["resolve_output_size", "render_frame"]
