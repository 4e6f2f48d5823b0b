# bloxel_map/match/matcher.py
from __future__ import annotations

"""
Nearest-texture matching in RGB with optional temporal hysteresis.

ColourMatcher holds the candidate colours as one float64 [N,3] array so a
lookup is a single vectorised distance pass. Ties go to the earliest
candidate in palette order (np.argmin returns the first minimum).

Sequence mode: when the previous frame used texture P at this pixel and the
global best B differs, B only replaces P if it is closer by more than
switch_threshold. P is kept otherwise, even though B is nearer.
"""

import math
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..constants import DEFAULT_SWITCH_THRESHOLD
from ..core_types import Candidate, RGBTuple, Texture


def colour_distance(a: Sequence[int], b: Sequence[int]) -> float:
    """Euclidean distance between two RGB triples (extra channels ignored)."""
    dr = int(a[0]) - int(b[0])
    dg = int(a[1]) - int(b[1])
    db = int(a[2]) - int(b[2])
    return math.sqrt(dr * dr + dg * dg + db * db)


class ColourMatcher:
    """Matches pixel colours to candidate textures for one job."""

    def __init__(
        self,
        candidates: List[Candidate],
        switch_threshold: float = DEFAULT_SWITCH_THRESHOLD,
    ) -> None:
        if not candidates:
            raise ValueError("ColourMatcher needs at least one candidate")
        self.candidates = list(candidates)
        self.switch_threshold = float(switch_threshold)
        self._colours = np.array(
            [c.perceived_colour for c in self.candidates], dtype=np.float64
        )
        self._position_of: Dict[int, int] = {}
        for pos, c in enumerate(self.candidates):
            self._position_of.setdefault(c.texture.texture_id, pos)
        self._cache: Dict[RGBTuple, Texture] = {}
        self.cache_hits = 0
        self.switches_held = 0

    def distances(self, rgb: Sequence[int]) -> np.ndarray:
        target = np.array([rgb[0], rgb[1], rgb[2]], dtype=np.float64)
        diff = self._colours - target
        return np.sqrt(np.sum(diff * diff, axis=1))

    def nearest(self, rgb: Sequence[int]) -> Tuple[Candidate, float]:
        """Global nearest candidate and its distance."""
        dist = self.distances(rgb)
        pos = int(np.argmin(dist))
        return self.candidates[pos], float(dist[pos])

    def match(self, rgb: Sequence[int], previous_texture_id: Optional[int] = None) -> Texture:
        best, best_dist = self.nearest(rgb)
        if previous_texture_id is None:
            return best.texture
        if best.texture.texture_id == previous_texture_id:
            return best.texture

        prev_pos = self._position_of.get(previous_texture_id)
        if prev_pos is None:
            return best.texture
        previous = self.candidates[prev_pos]

        improvement = colour_distance(rgb, previous.perceived_colour) - best_dist
        if improvement > self.switch_threshold:
            return best.texture
        self.switches_held += 1
        return previous.texture

    def match_cached(self, rgb: Sequence[int]) -> Texture:
        """Static-image lookup memoised on the exact RGB value."""
        key: RGBTuple = (int(rgb[0]), int(rgb[1]), int(rgb[2]))
        hit = self._cache.get(key)
        if hit is not None:
            self.cache_hits += 1
            return hit
        texture = self.match(key)
        self._cache[key] = texture
        return texture


__all__ = ["colour_distance", "ColourMatcher"]
