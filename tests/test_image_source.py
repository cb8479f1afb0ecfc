# tests/test_image_source.py
"""
PixelGrid image source and per-cluster colour summaries.
"""

from __future__ import annotations

import numpy as np
import pytest

try:
    import torch
except Exception:  # pragma: no cover
    torch = None  # type: ignore

from pixclust.base import ConfigurationError, ImageSource, Partition, Pixel
from pixclust.image import PixelGrid, cluster_colour_means, mean_colour_image

from data_gen import RED, BLUE, YELLOW, TRANSPARENT, make_2x2


pytestmark = pytest.mark.skipif(torch is None, reason="PyTorch is required for these tests")


def test_accessors():
    image = PixelGrid(make_2x2(), name="tiny.png")

    assert image.name == "tiny.png"
    assert (image.width, image.height) == (2, 2)
    assert image.get(1, 0) == Pixel(*BLUE)
    assert image.get(0, 1).rgb == YELLOW[:3]
    assert image.get_checked(1, 1) == Pixel(*TRANSPARENT)
    assert image.get_checked(2, 0) is None
    assert image.get_checked(0, -1) is None
    with pytest.raises(IndexError):
        image.get(0, 2)


def test_to_tensor_is_raster_ordered():
    image = PixelGrid(make_2x2())
    flat = image.to_tensor()

    assert flat.shape == (4, 4)
    assert flat.dtype == torch.float32
    assert flat[:, 3].tolist() == [255, 255, 255, 0]
    assert flat[2].tolist() == list(YELLOW)


def test_rgb_input_gets_opaque_alpha():
    rgb = np.zeros((3, 5, 3), dtype=np.uint8)
    image = PixelGrid(rgb)

    assert (image.width, image.height) == (5, 3)
    assert image.get(4, 2) == Pixel(0, 0, 0, 255)


def test_from_rows_and_tensor_input():
    rows = [[RED, BLUE], [YELLOW, TRANSPARENT]]
    a = PixelGrid.from_rows(rows)
    b = PixelGrid(torch.as_tensor(make_2x2()))

    assert torch.equal(a.to_tensor(), b.to_tensor())
    np.testing.assert_array_equal(a.to_numpy(), make_2x2())


@pytest.mark.parametrize("pixels", [
    np.zeros((0, 4, 4), dtype=np.uint8),
    np.zeros((4, 4), dtype=np.uint8),
    np.zeros((2, 2, 5), dtype=np.uint8),
    np.full((2, 2, 4), 300, dtype=np.int32),
    np.full((2, 2, 4), -1, dtype=np.int32),
    np.full((2, 2, 4), np.nan, dtype=np.float32),
])
def test_rejects_bad_arrays(pixels):
    with pytest.raises(ConfigurationError):
        PixelGrid(pixels)


def test_default_to_tensor_goes_through_get():
    class Checkerboard(ImageSource):
        name = "checker"
        width = 3
        height = 2

        def get(self, x, y):
            return Pixel(*(RED if (x + y) % 2 == 0 else BLUE))

    flat = Checkerboard().to_tensor()
    assert flat.shape == (6, 4)
    assert flat[1].tolist() == list(BLUE)
    assert Checkerboard().n_pixels == 6


def test_cluster_colour_means():
    image = PixelGrid(make_2x2())
    partition = Partition.from_labels(2, 2, [0, 0, 1, 1])

    means = cluster_colour_means(image, partition)
    assert means[0] == pytest.approx((127.5, 0.0, 127.5, 255.0))
    assert means[1] == pytest.approx((127.5, 127.5, 0.0, 127.5))


def test_mean_colour_image():
    image = PixelGrid(make_2x2())
    partition = Partition.from_labels(2, 2, [4, 9, 9, 9])

    painted = mean_colour_image(image, partition)
    assert painted.shape == (2, 2, 4)
    assert painted.dtype == torch.uint8
    assert painted[0, 0].tolist() == list(RED)
    assert painted[1, 1].tolist() == painted[0, 1].tolist()


@pytest.mark.parametrize("as_tensor", [False, True])
def test_later_writes_to_source_array_are_not_seen(as_tensor):
    source = make_2x2()
    if as_tensor:
        source = torch.as_tensor(source)
    image = PixelGrid(source)

    source[0, 0] = 9
    assert image.get(0, 0) == Pixel(*RED)
    assert image.to_tensor()[0].tolist() == list(RED)

    flat = image.to_tensor()
    source[1, 1] = 9
    assert image.get(1, 1) == Pixel(*TRANSPARENT)
    assert torch.equal(image.to_tensor(), flat)
