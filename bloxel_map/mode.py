# bloxel_map/mode.py
from __future__ import annotations
from pathlib import Path
from typing import Literal

from .image_io import is_animated

"""
Input mode selection helpers.

Exports:
- effective_mode(requested, path) -> Literal["image","animation"]

Notes:
- "auto" picks "animation" when the input has more than one frame; a
  single-frame GIF is processed as a still image.
"""


Mode = Literal["auto", "image", "animation"]
ResolvedMode = Literal["image", "animation"]


def effective_mode(requested: Mode, path: Path) -> ResolvedMode:
    """
    Resolve a user-requested mode into a concrete one.
    - "image" / "animation" stay as is
    - "auto" -> frame count of the file decides
    """
    if requested in ("image", "animation"):
        return requested
    return "animation" if is_animated(path) else "image"


__all__ = ["Mode", "ResolvedMode", "effective_mode"]
