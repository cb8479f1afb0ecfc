# tests/test_seeding_assignment.py
"""
Farthest-point seeding and nearest-centroid assignment.
"""

from __future__ import annotations

import pytest

try:
    import torch
except Exception:  # pragma: no cover
    torch = None  # type: ignore

from pixclust.base import ConfigurationError
from pixclust.distances import PixeldistAlg, pixel_distance_matrix
from pixclust.initialization import FarthestPointInit
from pixclust.assignments import NearestCentroidAssignment

from data_gen import RED, BLUE, YELLOW, WHITE, BLACK, make_random_image


pytestmark = pytest.mark.skipif(torch is None, reason="PyTorch is required for these tests")


def _pixels(*colours):
    return torch.tensor(colours, dtype=torch.float32)


def test_seeding_picks_farthest_pixel():
    pixels = _pixels(BLACK, (10, 10, 10, 255), WHITE, (200, 200, 200, 255))
    init = FarthestPointInit(PixeldistAlg.EUCLIDEAN)

    indices = init.initialize(pixels, 2, first_index=0)
    assert indices.tolist() == [0, 2]

    indices = init.initialize(pixels, 3, first_index=0)
    # (200,200,200) is farther from white than (10,10,10) is from black
    assert indices.tolist() == [0, 2, 3]


def test_seeding_ties_go_to_first_in_raster_order():
    pixels = _pixels(RED, BLUE, BLUE, BLUE)
    indices = FarthestPointInit().initialize(pixels, 2, first_index=0)
    assert indices.tolist() == [0, 1]


def test_seeding_never_repeats_a_pixel():
    # Only two distinct colours but four centroids requested
    pixels = _pixels(RED, RED, BLUE, BLUE, RED)
    indices = FarthestPointInit().initialize(pixels, 4, first_index=4)

    assert len(set(indices.tolist())) == 4
    assert indices[0].item() == 4
    assert indices[1].item() == 2


def test_seeding_random_first_pick_is_seeded():
    pixels = torch.as_tensor(make_random_image(8, 8, seed=0).reshape(-1, 4), dtype=torch.float32)
    init = FarthestPointInit()

    g1 = torch.Generator().manual_seed(42)
    g2 = torch.Generator().manual_seed(42)
    assert torch.equal(init.initialize(pixels, 5, generator=g1),
                       init.initialize(pixels, 5, generator=g2))


def test_seeding_too_many_centroids():
    with pytest.raises(ConfigurationError):
        FarthestPointInit().initialize(_pixels(RED, BLUE), 3)


def test_assignment_nearest_centroid():
    pixels = _pixels(RED, (250, 5, 5, 255), BLUE, (5, 5, 250, 255), YELLOW)
    centroids = torch.tensor([0, 2])

    labels = NearestCentroidAssignment().compute_assignments(pixels, centroids)
    assert labels.tolist() == [0, 0, 1, 1, 0]


def test_assignment_ties_go_to_first_centroid():
    # Yellow is equally far from red and green
    pixels = _pixels(RED, (0, 255, 0, 255), (255, 255, 0, 255))
    labels = NearestCentroidAssignment().compute_assignments(pixels, torch.tensor([0, 1]))
    assert labels.tolist() == [0, 1, 0]


def test_assignment_pins_centroid_pixels():
    # Two centroids of identical colour: argmin alone would give both to the first
    pixels = _pixels(RED, RED, BLUE, RED)
    labels = NearestCentroidAssignment().compute_assignments(pixels, torch.tensor([0, 3, 2]))

    assert labels.tolist() == [0, 0, 2, 1]


def test_assignment_distances_shape():
    pixels = torch.as_tensor(make_random_image(4, 4, seed=9).reshape(-1, 4), dtype=torch.float32)
    centroids = torch.tensor([1, 5, 9])
    distances = NearestCentroidAssignment(PixeldistAlg.REDMEAN).compute_distances(pixels, centroids)

    assert distances.shape == (16, 3)
    assert torch.allclose(distances, pixel_distance_matrix(pixels, pixels[centroids], PixeldistAlg.REDMEAN))
