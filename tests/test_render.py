"""End-to-end tests: index -> candidates -> frame rendering -> blueprint."""

import numpy as np
import pytest

from bloxel_map.blueprint import decode_blueprint, encode_blueprint
from bloxel_map.core_types import FilterConfig
from bloxel_map.match import ColourMatcher, prepare_candidates, render_frame, resolve_output_size
from bloxel_map.palette_index import build_texture_index, read_block_map
from bloxel_map.texture_analysis import AtlasStore

from conftest import BLUE, RED


@pytest.fixture
def job(block_world):
    atlases = AtlasStore(block_world["textures"])
    index = build_texture_index(read_block_map(block_world["map"]), atlases.analyse)
    candidates = prepare_candidates(index, FilterConfig(face_direction="front", max_variance=20.0))
    return index, ColourMatcher(candidates, switch_threshold=15.0), atlases


def _image(*pixels):
    img = np.zeros((1, len(pixels), 4), dtype=np.uint8)
    for x, rgb in enumerate(pixels):
        img[0, x, :3] = rgb
        img[0, x, 3] = 255
    return img


@pytest.mark.parametrize(
    "src, width, height, expected",
    [
        ((100, 50), 10, None, (10, 5)),
        ((4, 2), 5, None, (5, 3)),
        ((4, 2), None, 3, (6, 3)),
        ((4, 2), 7, 7, (7, 7)),
    ],
)
def test_resolve_output_size(src, width, height, expected):
    assert resolve_output_size(src[0], src[1], width, height) == expected


def test_resolve_output_size_needs_a_side():
    with pytest.raises(ValueError):
        resolve_output_size(4, 2, None, None)


def test_red_blue_scenario(job):
    index, matcher, atlases = job
    red_id = next(t.texture_id for t in index.texture_palette if t.colour_hexes == ("#ff0000",))
    blue_id = next(t.texture_id for t in index.texture_palette if t.colour_hexes == ("#0000ff",))

    composite, choices = render_frame(_image(RED, BLUE), matcher, atlases, 2, 1)

    assert choices.tolist() == [[red_id, blue_id]]
    assert composite.shape == (8, 16, 4)
    assert np.all(composite[:, :8, :3] == RED)
    assert np.all(composite[:, 8:, :3] == BLUE)
    assert np.all(composite[..., 3] == 255)

    bp = encode_blueprint(choices, index.texture_palette)
    assert decode_blueprint(bp.symbols) == [10, 4]


def test_render_resizes_nearest(job):
    _index, matcher, atlases = job
    src = np.repeat(np.repeat(_image(RED, BLUE), 4, axis=0), 4, axis=1)  # 4x8
    composite, choices = render_frame(src, matcher, atlases, 2, 1)
    assert choices.shape == (1, 2)
    assert composite.shape == (8, 16, 4)


def test_previous_choices_hold_texture(job):
    index, matcher, atlases = job
    red_id = next(t.texture_id for t in index.texture_palette if t.colour_hexes == ("#ff0000",))
    blue_id = next(t.texture_id for t in index.texture_palette if t.colour_hexes == ("#0000ff",))
    purple = _image((125, 0, 130))  # slightly closer to blue than to red

    _, fresh = render_frame(purple, matcher, atlases, 1, 1, use_cache=False)
    assert fresh.tolist() == [[blue_id]]

    previous = np.array([[red_id]], dtype=np.int32)
    _, held = render_frame(purple, matcher, atlases, 1, 1, previous=previous)
    assert held.tolist() == [[red_id]]


def test_previous_shape_mismatch(job):
    _index, matcher, atlases = job
    with pytest.raises(ValueError):
        render_frame(_image(RED), matcher, atlases, 1, 1, previous=np.zeros((2, 2), dtype=np.int32))
