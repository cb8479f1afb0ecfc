# tests/data_gen.py
"""
Tiny synthetic-image generators reused across the pixclust test suite.

All generators return (H, W, 4) uint8 RGBA arrays; wrap them with
``pixclust.PixelGrid`` to cluster them.

Intended usage:
    >>> pixels = make_stripes(12, 6, [RED, BLUE])
    >>> pixels.shape
    (6, 12, 4)
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple
import numpy as np

NDArray = np.ndarray
RGBA = Tuple[int, int, int, int]

RED: RGBA = (255, 0, 0, 255)
BLUE: RGBA = (0, 0, 255, 255)
YELLOW: RGBA = (255, 255, 0, 255)
WHITE: RGBA = (255, 255, 255, 255)
BLACK: RGBA = (0, 0, 0, 255)
TRANSPARENT: RGBA = (0, 0, 0, 0)


def make_2x2(top_left: RGBA = RED, top_right: RGBA = BLUE,
             bottom_left: RGBA = YELLOW, bottom_right: RGBA = TRANSPARENT) -> NDArray:
    """
    Construct the 2x2 test image

        [[top_left,    top_right   ],
         [bottom_left, bottom_right]]

    Defaults to Red / Blue / Yellow / fully transparent.
    """
    return np.asarray(
        [[top_left, top_right],
         [bottom_left, bottom_right]],
        dtype=np.uint8,
    )


def make_solid(width: int, height: int, colour: RGBA = WHITE) -> NDArray:
    """Single-colour image."""
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[:, :] = colour
    return pixels


def make_stripes(
    width: int,
    height: int,
    colours: Sequence[RGBA],
    vertical: bool = True,
) -> NDArray:
    """
    Construct equal-width stripes, one per colour.

    Parameters
    ----------
    width, height : int
        Image size; the striped dimension must be divisible by len(colours).
    colours : sequence of RGBA
        Stripe colours, left to right (or top to bottom).
    vertical : bool, default=True
        Vertical stripes (split along x) if True, horizontal otherwise.

    Returns
    -------
    pixels : (height, width, 4) ndarray, uint8
    """
    n = len(colours)
    span = width if vertical else height
    assert span % n == 0, f"{span} is not divisible by {n} stripes"
    step = span // n

    pixels = np.empty((height, width, 4), dtype=np.uint8)
    for i, colour in enumerate(colours):
        if vertical:
            pixels[:, i * step:(i + 1) * step] = colour
        else:
            pixels[i * step:(i + 1) * step, :] = colour
    return pixels


def make_noisy_stripes(
    width: int,
    height: int,
    colours: Sequence[RGBA],
    noise: float = 6.0,
    vertical: bool = True,
    seed: Optional[int] = None,
) -> NDArray:
    """
    Stripes with Gaussian noise (std ``noise``, in channel units) added to RGB.

    Alpha is left untouched. Values are clipped to 0..255.
    """
    rng = np.random.default_rng(seed)
    pixels = make_stripes(width, height, colours, vertical).astype(np.float64)
    pixels[..., :3] += noise * rng.normal(size=(height, width, 3))
    return np.clip(np.rint(pixels), 0, 255).astype(np.uint8)


def make_random_image(
    width: int,
    height: int,
    seed: Optional[int] = None,
    with_transparency: bool = False,
) -> NDArray:
    """
    Uniformly random RGB image.

    With ``with_transparency`` roughly a quarter of the pixels get alpha 0,
    the rest alpha 255.
    """
    rng = np.random.default_rng(seed)
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[..., :3] = rng.integers(0, 256, size=(height, width, 3), dtype=np.uint8)
    pixels[..., 3] = 255
    if with_transparency:
        pixels[..., 3][rng.random((height, width)) < 0.25] = 0
    return pixels
