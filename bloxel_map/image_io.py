# bloxel_map/image_io.py
from __future__ import annotations

from pathlib import Path
from typing import Iterator, Optional, Sequence, Tuple

import numpy as np
from PIL import GifImagePlugin, Image, ImageSequence

from .core_types import U8Image

"""
Image I/O helpers (RGBA), nearest-neighbour resize, and GIF frame handling.
"""


def load_image_rgba(path: Path) -> U8Image:
    """Load an image with Pillow and return it as a uint8 (H,W,4) array."""
    with Image.open(path) as im:
        arr = np.array(im.convert("RGBA"), dtype=np.uint8)
    return arr


def save_png_rgba(path: Path, rgba: U8Image) -> Path:
    if path.suffix.lower() != ".png":
        path = path.with_suffix(".png")
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(np.ascontiguousarray(rgba, dtype=np.uint8)).save(path)
    return path


def resize_nearest_rgba(rgba: U8Image, dst_w: int, dst_h: int) -> U8Image:
    """Nearest-neighbour resize to (dst_w, dst_h); no-op when already that size."""
    H0, W0 = rgba.shape[0], rgba.shape[1]
    if (W0, H0) == (dst_w, dst_h):
        return rgba
    im = Image.fromarray(np.ascontiguousarray(rgba, dtype=np.uint8))
    im2 = im.resize((dst_w, dst_h), resample=Image.Resampling.NEAREST)
    return np.array(im2, dtype=np.uint8)


def is_animated(path: Path) -> bool:
    """True when Pillow reports more than one frame."""
    with Image.open(path) as im:
        return int(getattr(im, "n_frames", 1)) > 1


def iter_animation_frames(path: Path) -> Iterator[U8Image]:
    """
    Yield every frame as a fully composited RGBA array, in file order.

    Pillow applies GIF disposal while seeking, so each converted frame is the
    cumulative picture a viewer would show.
    """
    with Image.open(path) as im:
        for frame in ImageSequence.Iterator(im):
            yield np.array(frame.convert("RGBA"), dtype=np.uint8)


def count_frames(path: Path) -> int:
    with Image.open(path) as im:
        return int(getattr(im, "n_frames", 1))


def _gif_frame(rgba: U8Image) -> Tuple[Image.Image, Optional[int]]:
    """Quantise one RGBA frame to an adaptive palette; also return its transparent index."""
    im = Image.fromarray(np.ascontiguousarray(rgba, dtype=np.uint8)).convert(
        "P", palette=Image.Palette.ADAPTIVE
    )
    if im.palette is not None and im.palette.mode == "RGBA":
        for colour, index in im.palette.colors.items():
            if colour[3] == 0:
                return im, int(index)
    return im, None


def save_gif_rgba(path: Path, frames: Sequence[U8Image], delay_ms: int) -> Path:
    """
    Write RGBA frames as a looping GIF with a fixed per-frame delay.

    Every frame is written with its own colour table, including frames that
    repeat the previous one. save_all would fold repeats into a single frame
    with a longer delay.
    """
    if not frames:
        raise ValueError("no frames to write")
    if path.suffix.lower() != ".gif":
        path = path.with_suffix(".gif")
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wb") as fp:
        for i, frame in enumerate(frames):
            im, transparency = _gif_frame(frame)
            if i == 0:
                header, _ = GifImagePlugin.getheader(
                    im, info={"loop": 0, "duration": int(delay_ms)}
                )
                fp.write(b"".join(header))
            params = {"duration": int(delay_ms), "disposal": 2, "include_color_table": True}
            if transparency is not None:
                params["transparency"] = transparency
            fp.write(b"".join(GifImagePlugin.getdata(im, **params)))
        fp.write(b";")
    return path


__all__ = [
    "load_image_rgba",
    "save_png_rgba",
    "resize_nearest_rgba",
    "is_animated",
    "iter_animation_frames",
    "count_frames",
    "save_gif_rgba",
]
