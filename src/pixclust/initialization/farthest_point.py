"""
Farthest-point (k-means++ style) centroid seeding.

Picks initial centroids that are far apart in colour. Only the first pick
is random; every further centroid is deterministic given the first.
"""

from typing import Optional, Union
import torch
from torch import Tensor

from ..base.interfaces import InitializationStrategy
from ..base.errors import ConfigurationError
from ..distances.pixel import PixeldistAlg, parse_pixeldist_alg, pixel_distance_tensor


class FarthestPointInit(InitializationStrategy):
    """Farthest-point seeding over image pixels.

    Algorithm:
    1. Choose the first centroid uniformly at random
    2. For each remaining centroid:
       - Compute every pixel's distance to its nearest existing centroid
       - Choose the pixel with the largest such distance (first in raster
         order on ties), never a pixel that is already a centroid
    """

    def __init__(self, pixeldist_alg: Union[str, PixeldistAlg] = PixeldistAlg.EUCLIDEAN):
        """
        Args:
            pixeldist_alg: Distance used to measure how far apart pixels are
        """
        self.pixeldist_alg = parse_pixeldist_alg(pixeldist_alg)

    def initialize(self, pixels: Tensor, n_clusters: int,
                   generator: Optional[torch.Generator] = None,
                   first_index: Optional[int] = None,
                   **kwargs) -> Tensor:
        """Pick initial centroids.

        Args:
            pixels: (n, 4) RGBA pixels
            n_clusters: Number of centroids
            generator: Random generator for the first pick
            first_index: Use this pixel as the first centroid instead of a
                random one

        Returns:
            (n_clusters,) long tensor of distinct pixel indices
        """
        n_pixels = pixels.shape[0]

        if n_clusters > n_pixels:
            raise ConfigurationError(f"Cannot seed {n_clusters} centroids from {n_pixels} pixels")

        if first_index is None:
            first_index = torch.randint(n_pixels, (1,), generator=generator).item()

        chosen = [first_index]
        taken = torch.zeros(n_pixels, dtype=torch.bool, device=pixels.device)
        taken[first_index] = True

        # Distance from every pixel to its nearest centroid so far
        nearest = pixel_distance_tensor(pixels, pixels[first_index], self.pixeldist_alg)

        for _ in range(1, n_clusters):
            candidates = nearest.masked_fill(taken, -1.0)
            next_index = int(torch.argmax(candidates).item())

            chosen.append(next_index)
            taken[next_index] = True

            new_distances = pixel_distance_tensor(pixels, pixels[next_index], self.pixeldist_alg)
            nearest = torch.minimum(nearest, new_distances)

        return torch.tensor(chosen, dtype=torch.long, device=pixels.device)
