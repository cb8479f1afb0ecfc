# tests/test_adjacency.py
"""
Adjacency factor construction and the tolerance threshold.
"""

from __future__ import annotations

import math

import pytest

try:
    import torch
except Exception:  # pragma: no cover
    torch = None  # type: ignore

from pixclust.base import ConfigurationError
from pixclust.distances import PixeldistAlg, get_pixeldist
from pixclust.image import PixelGrid, build_adjacency_factors, tolerance_threshold

from data_gen import make_2x2, make_random_image


pytestmark = pytest.mark.skipif(torch is None, reason="PyTorch is required for these tests")


def test_2x2_factor_order():
    image = PixelGrid(make_2x2())
    factors = build_adjacency_factors(image, PixeldistAlg.EUCLIDEAN, device="cpu")

    pairs = [(f.a, f.b) for f in factors]
    assert pairs == [
        ((0, 0), (1, 0)),   # right
        ((0, 0), (0, 1)),   # bottom
        ((0, 0), (1, 1)),   # bottom-right
        ((1, 0), (1, 1)),   # bottom
        ((1, 0), (0, 1)),   # bottom-left
        ((0, 1), (1, 1)),   # right
    ]


def test_2x2_factor_distances():
    image = PixelGrid(make_2x2())
    factors = build_adjacency_factors(image, PixeldistAlg.EUCLIDEAN, device="cpu")
    distances = [f.distance for f in factors]

    expected = [math.sqrt(2 / 3), 1 / math.sqrt(3), 1.0, 1.0, 1.0, 1.0]
    assert distances == pytest.approx(expected, abs=1e-6)


@pytest.mark.parametrize("connectivity", [4, 8])
@pytest.mark.parametrize("width,height", [(1, 5), (5, 1), (4, 3), (7, 6)])
def test_factor_count(connectivity, width, height):
    image = PixelGrid(make_random_image(width, height, seed=1))
    factors = build_adjacency_factors(image, connectivity=connectivity, device="cpu")

    expected = (width - 1) * height + width * (height - 1)
    if connectivity == 8:
        expected += 2 * (width - 1) * (height - 1)
    assert len(factors) == expected


@pytest.mark.parametrize("alg", [PixeldistAlg.EUCLIDEAN, PixeldistAlg.REDMEAN])
def test_factors_match_scalar_distance_and_raster_order(alg):
    image = PixelGrid(make_random_image(6, 5, seed=3, with_transparency=True))
    factors = build_adjacency_factors(image, alg, device="cpu")

    previous = -1
    for f in factors:
        (ax, ay), (bx, by) = f.a, f.b
        assert abs(ax - bx) <= 1 and 0 <= by - ay <= 1 and f.a != f.b
        assert f.distance == pytest.approx(get_pixeldist(image.get(ax, ay), image.get(bx, by), alg),
                                           abs=1e-5)

        # Source pixels never go backwards in raster order
        index = ay * image.width + ax
        assert index >= previous
        previous = index


def test_threshold_rank():
    distances = [0.1 * i for i in range(10, 0, -1)]     # 1.0 .. 0.1, unsorted on purpose

    assert tolerance_threshold(distances, 0.6) == pytest.approx(0.6)
    assert tolerance_threshold(distances, 0.55) == pytest.approx(0.6)
    assert tolerance_threshold(distances, 0.1) == pytest.approx(0.1)
    assert tolerance_threshold(distances, 1e-6) == pytest.approx(0.1)


def test_threshold_full_tolerance_exceeds_maximum():
    distances = [0.25, 1.0, 0.5]
    threshold = tolerance_threshold(distances, 1.0)

    assert threshold > 1.0
    assert all(d < threshold for d in distances)


@pytest.mark.parametrize("tolerance", [0.0, -0.1, 1.5, float("nan")])
def test_threshold_rejects_bad_tolerance(tolerance):
    with pytest.raises(ConfigurationError):
        tolerance_threshold([0.1, 0.2], tolerance)


def test_threshold_requires_distances():
    with pytest.raises(ConfigurationError):
        tolerance_threshold([], 0.5)
