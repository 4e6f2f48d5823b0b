# bloxel_map/match/__init__.py
"""
Matching API.

Provides:
  prepare_candidates(index, config, debug=False) -> list[Candidate]
    Filter the texture palette for one face and compute perceived colours.

  ColourMatcher(candidates, switch_threshold)
    .match(rgb, previous_texture_id=None) -> Texture
    .match_cached(rgb) -> Texture

  render_frame(rgba, matcher, atlases, out_w, out_h, previous=None) -> (composite, choices)
    Resize a frame to the block grid, match each pixel and paste its texture.

Notes:
  - Distances are plain Euclidean RGB.
  - Pass `previous` only for animation frames; static images use the colour cache.
"""

from .candidates import colour_variance, perceived_colour, prepare_candidates
from .matcher import ColourMatcher, colour_distance
from .run import render_frame, resolve_output_size

__all__ = [
    "colour_variance",
    "perceived_colour",
    "prepare_candidates",
    "ColourMatcher",
    "colour_distance",
    "render_frame",
    "resolve_output_size",
]
