# bloxel_map/match/candidates.py
from __future__ import annotations

import math
from typing import List, Optional

import numpy as np

from ..core_types import Candidate, FilterConfig, RGBTuple, Texture, TextureIndex, hex_to_rgb
from ..utils import debug_log, key_value_pairs_to_string


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def perceived_colour(texture: Texture, depth: Optional[int] = None) -> Optional[RGBTuple]:
    """
    Count-weighted mean of the `depth` most frequent opaque histogram colours.

    depth=None uses the whole histogram. Returns None when no opaque pixel is
    covered by the considered entries.
    """
    limit = len(texture.colour_hexes) if depth is None else max(0, min(depth, len(texture.colour_hexes)))
    total_r = total_g = total_b = 0
    total_px = 0
    for hex_str, count in zip(texture.colour_hexes[:limit], texture.colour_pixel_counts[:limit]):
        rgb = hex_to_rgb(hex_str)
        if rgb is None:
            continue
        total_r += rgb[0] * count
        total_g += rgb[1] * count
        total_b += rgb[2] * count
        total_px += count
    if total_px == 0:
        return None
    return (
        _round_half_up(total_r / total_px),
        _round_half_up(total_g / total_px),
        _round_half_up(total_b / total_px),
    )


def colour_variance(texture: Texture) -> float:
    """Count-weighted mean RGB distance of each opaque colour from the texture mean."""
    if texture.colour_count <= 1:
        return 0.0
    mean = perceived_colour(texture, None)
    if mean is None:
        return 0.0

    rows = []
    weights = []
    for hex_str, count in texture.histogram:
        rgb = hex_to_rgb(hex_str)
        if rgb is not None:
            rows.append(rgb)
            weights.append(count)
    colours = np.asarray(rows, dtype=np.float64)
    w = np.asarray(weights, dtype=np.float64)
    dist = np.sqrt(np.sum((colours - np.asarray(mean, dtype=np.float64)) ** 2, axis=1))
    return float(np.sum(dist * w) / np.sum(w))


def prepare_candidates(
    index: TextureIndex, config: FilterConfig, debug: bool = False
) -> List[Candidate]:
    """
    Filter the palette down to the textures usable for this job.

    Steps per texture, in palette order:
      1. must be listed under config.face_direction
      2. colour_count <= max_colour_count (if set)
      3. no transparency unless allowed
      4. colour_variance <= max_variance (if set)
      5. must have a perceived colour at search_depth

    Raises ValueError when the face is unknown or nothing survives.
    """
    valid_ids = index.valid_texture_ids(config.face_direction)

    rejected = {"face": 0, "colours": 0, "transparency": 0, "variance": 0, "no colour": 0}
    candidates: List[Candidate] = []
    for texture in index.texture_palette:
        if texture.texture_id not in valid_ids:
            rejected["face"] += 1
            continue
        if config.max_colour_count is not None and texture.colour_count > config.max_colour_count:
            rejected["colours"] += 1
            continue
        if not config.allow_transparency and texture.has_transparency:
            rejected["transparency"] += 1
            continue
        if config.max_variance is not None and colour_variance(texture) > config.max_variance:
            rejected["variance"] += 1
            continue
        colour = perceived_colour(texture, config.search_depth)
        if colour is None:
            rejected["no colour"] += 1
            continue
        candidates.append(Candidate(texture=texture, perceived_colour=colour))

    if debug:
        debug_log("filter rejects: " + key_value_pairs_to_string(rejected.items()))

    if not candidates:
        raise ValueError("No candidate textures found with the specified filters.")
    return candidates


__all__ = ["perceived_colour", "colour_variance", "prepare_candidates"]
