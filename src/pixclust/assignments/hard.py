"""
Hard assignment of pixels to their nearest centroid.

The distance computation is a pure map over pixels given the current
centroid set; the resulting label tensor is applied to the Partition only
after it is complete.
"""

from typing import Union
import torch
from torch import Tensor

from ..base.interfaces import AssignmentStrategy
from ..distances.pixel import PixeldistAlg, parse_pixeldist_alg, pixel_distance_matrix


class NearestCentroidAssignment(AssignmentStrategy):
    """Assign each pixel to the centroid with the smallest pixel distance.

    Ties go to the centroid that comes first in enumeration order. A
    centroid's own pixel always belongs to that centroid, even when another
    centroid has the same colour.
    """

    def __init__(self, pixeldist_alg: Union[str, PixeldistAlg] = PixeldistAlg.EUCLIDEAN):
        self.pixeldist_alg = parse_pixeldist_alg(pixeldist_alg)

    def compute_distances(self, pixels: Tensor, centroid_indices: Tensor) -> Tensor:
        """(n, k) distance from every pixel to every centroid pixel."""
        return pixel_distance_matrix(pixels, pixels[centroid_indices], self.pixeldist_alg)

    def compute_assignments(self, pixels: Tensor, centroid_indices: Tensor,
                            **kwargs) -> Tensor:
        """Assign each pixel to its nearest centroid.

        Args:
            pixels: (n, 4) RGBA pixels
            centroid_indices: (k,) pixel indices of the centroids

        Returns:
            (n,) long tensor of centroid positions 0..k-1
        """
        distances = self.compute_distances(pixels, centroid_indices)
        assignments = torch.argmin(distances, dim=1)

        assignments[centroid_indices] = torch.arange(
            len(centroid_indices), device=assignments.device
        )
        return assignments
