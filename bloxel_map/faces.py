# bloxel_map/faces.py
from __future__ import annotations
from typing import Optional, Tuple

from .core_types import Face

"""
Face name helpers.

Exports:
- FACE_NAME_TABLE: ordered (substring, face) pairs
- simplify_face_name(raw) -> Optional[Face]

Notes:
- Raw face names in the block map look like "blockFaceTop" or "Front_Left".
  The first table row whose substring occurs in the raw name wins, so the
  order of the table is significant.
- None means "unrecognised"; callers log it and skip face indexing.
"""


FACE_NAME_TABLE: Tuple[Tuple[str, Face], ...] = (
    ("Top", "top"),
    ("Bottom", "bottom"),
    ("Front", "front"),
    ("Back", "back"),
    ("Right", "right"),
    ("Left", "left"),
)


def simplify_face_name(raw_name: str) -> Optional[Face]:
    """Map a raw block-map face name onto one of the six canonical faces."""
    for pattern, face in FACE_NAME_TABLE:
        if pattern in raw_name:
            return face
    return None


__all__ = ["FACE_NAME_TABLE", "simplify_face_name"]
