# bloxel_map/__init__.py
"""
bloxel_map package.

Purpose:
  Turn images and GIFs into block-texture mosaics plus a symbolic blueprint.
  See bloxelize.py and texture_index.py for the CLIs.

Public API:
  build_texture_index : analyse atlas textures into a deduplicated palette.
  prepare_candidates  : filter the palette for one face and job settings.
  ColourMatcher       : nearest-texture lookup with temporal hysteresis.
  render_frame        : match and composite one frame.
  encode_blueprint    : grid of texture ids -> private-use symbol string.
  core_types          : shared value objects (Texture, TextureIndex, FilterConfig, ...).
  utils               : shared helpers (JSON I/O, formatting, logging).

Quick start:
  from bloxel_map import load_texture_index, prepare_candidates, ColourMatcher
  from bloxel_map.core_types import FilterConfig
"""

__version__ = "0.2.0"

# Re-export namespaces for convenience.
from . import constants
from . import core_types
from . import faces
from . import image_io
from . import utils
from . import match

from .texture_analysis import AtlasStore, analyse_texture  # noqa: E402,F401
from .palette_index import (  # noqa: E402,F401
    build_texture_index,
    load_texture_index,
    save_texture_index,
)
from .match import ColourMatcher, prepare_candidates, render_frame  # noqa: E402,F401
from .blueprint import decode_blueprint, encode_blueprint  # noqa: E402,F401

__all__ = [
    "__version__",
    "constants",
    "core_types",
    "faces",
    "image_io",
    "utils",
    "match",
    "AtlasStore",
    "analyse_texture",
    "build_texture_index",
    "load_texture_index",
    "save_texture_index",
    "ColourMatcher",
    "prepare_candidates",
    "render_frame",
    "encode_blueprint",
    "decode_blueprint",
]
