"""Tests for nearest matching and the frame-to-frame hysteresis rule."""

import pytest

from bloxel_map.core_types import Candidate
from bloxel_map.match.matcher import ColourMatcher, colour_distance

from conftest import make_texture


def _cand(texture_id, rgb):
    return Candidate(make_texture(texture_id, ["#000000"], [64]), rgb)


def test_colour_distance():
    assert colour_distance((0, 0, 0), (3, 4, 0)) == 5.0
    assert colour_distance((10, 20, 30, 0), (10, 20, 30)) == 0.0


def test_nearest_prefers_first_on_tie():
    m = ColourMatcher([_cand(0, (10, 0, 0)), _cand(1, (0, 10, 0))])
    best, dist = m.nearest((0, 0, 0))
    assert best.texture.texture_id == 0
    assert dist == 10.0


def test_static_match_ignores_alpha():
    m = ColourMatcher([_cand(0, (250, 0, 0)), _cand(1, (0, 0, 250))])
    assert m.match((255, 0, 0, 0)).texture_id == 0
    assert m.match((0, 0, 255, 255)).texture_id == 1


def test_cached_match_is_idempotent():
    m = ColourMatcher([_cand(0, (250, 0, 0)), _cand(1, (0, 0, 250))])
    first = m.match_cached((200, 10, 10))
    second = m.match_cached((200, 10, 10))
    assert first is second
    assert first.texture_id == m.match((200, 10, 10)).texture_id
    assert m.cache_hits == 1


def test_hysteresis_keeps_previous_for_small_gain():
    # previous at distance 10, best at distance 8: gain 2 <= 15
    m = ColourMatcher([_cand(0, (10, 0, 0)), _cand(1, (0, 8, 0))], switch_threshold=15.0)
    assert m.match((0, 0, 0)).texture_id == 1
    assert m.match((0, 0, 0), previous_texture_id=0).texture_id == 0


def test_hysteresis_switches_for_large_gain():
    # previous at distance 20, best at distance 3: gain 17 > 15
    m = ColourMatcher([_cand(0, (20, 0, 0)), _cand(1, (0, 3, 0))], switch_threshold=15.0)
    assert m.match((0, 0, 0), previous_texture_id=0).texture_id == 1


def test_hysteresis_gain_equal_to_threshold_holds():
    m = ColourMatcher([_cand(0, (10, 0, 0)), _cand(1, (0, 8, 0))], switch_threshold=2.0)
    assert m.match((0, 0, 0), previous_texture_id=0).texture_id == 0


@pytest.mark.parametrize("previous", [None, 1, 99])
def test_hysteresis_falls_back_to_best(previous):
    # no history, history already best, or history filtered out of this run
    m = ColourMatcher([_cand(0, (10, 0, 0)), _cand(1, (0, 8, 0))], switch_threshold=15.0)
    assert m.match((0, 0, 0), previous_texture_id=previous).texture_id == 1


def test_matcher_requires_candidates():
    with pytest.raises(ValueError):
        ColourMatcher([])
