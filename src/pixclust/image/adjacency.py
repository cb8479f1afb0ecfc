"""
Adjacency factors: precomputed distances between neighbouring pixels.

Factors are enumerated in raster order. For every pixel the neighbours are
visited in a fixed order (right, bottom, bottom-right, bottom-left), so each
neighbouring pair appears exactly once. Agglomerative clustering walks this
list front to back and depends on the order for determinism.
"""

from typing import List, Optional, Sequence, Tuple, Union
import math
import torch
from torch import Tensor

from ..base.interfaces import ImageSource
from ..base.data_structures import AdjacencyFactor
from ..base.errors import ConfigurationError
from ..distances.pixel import PixeldistAlg, pixel_distance_tensor
from ..utils.validation import check_connectivity, check_tolerance


# (dx, dy) in per-pixel enumeration order
NEIGHBOUR_OFFSETS: Tuple[Tuple[int, int], ...] = (
    (1, 0),     # right
    (0, 1),     # bottom
    (1, 1),     # bottom-right
    (-1, 1),    # bottom-left
)


def _offsets(connectivity: int) -> Tuple[Tuple[int, int], ...]:
    check_connectivity(connectivity)
    return NEIGHBOUR_OFFSETS if connectivity == 8 else NEIGHBOUR_OFFSETS[:2]


def adjacency_distance_grid(image: ImageSource,
                            pixeldist_alg: Union[str, PixeldistAlg] = PixeldistAlg.EUCLIDEAN,
                            connectivity: int = 8,
                            device: Optional[torch.device] = None) -> Tuple[Tensor, Tensor]:
    """Distances from every pixel to each of its forward neighbours.

    Each direction is one vectorised map over the whole image.

    Returns:
        distances: (H, W, D) float32 tensor (0 where the neighbour is missing)
        valid: (H, W, D) bool tensor, True where the neighbour exists
    """
    offsets = _offsets(connectivity)
    width, height = image.width, image.height
    grid = image.to_tensor()
    if device is not None:
        grid = grid.to(device)
    grid = grid.reshape(height, width, 4)

    distances = torch.zeros(height, width, len(offsets), dtype=torch.float32, device=grid.device)
    valid = torch.zeros(height, width, len(offsets), dtype=torch.bool, device=grid.device)

    for d, (dx, dy) in enumerate(offsets):
        x0, x1 = max(0, -dx), width - max(0, dx)
        y0, y1 = 0, height - dy
        if x1 <= x0 or y1 <= y0:
            continue
        here = grid[y0:y1, x0:x1]
        there = grid[y0 + dy:y1 + dy, x0 + dx:x1 + dx]
        distances[y0:y1, x0:x1, d] = pixel_distance_tensor(here, there, pixeldist_alg)
        valid[y0:y1, x0:x1, d] = True

    return distances, valid


def build_adjacency_factors(image: ImageSource,
                            pixeldist_alg: Union[str, PixeldistAlg] = PixeldistAlg.EUCLIDEAN,
                            connectivity: int = 8,
                            device: Optional[torch.device] = None) -> List[AdjacencyFactor]:
    """Build the raster-ordered adjacency factor list of an image.

    Args:
        image: Image source
        pixeldist_alg: Distance algorithm used for every factor
        connectivity: 8 (right, bottom, bottom-right, bottom-left) or
            4 (right, bottom)
        device: Device for the distance computation (default: the image's)

    Returns:
        List of AdjacencyFactor in raster order
    """
    offsets = _offsets(connectivity)
    width = image.width
    distances, valid = adjacency_distance_grid(image, pixeldist_alg, connectivity, device)

    n_dirs = len(offsets)
    flat_distances = distances.reshape(-1).cpu().tolist()
    flat_indices = torch.nonzero(valid.reshape(-1)).squeeze(1).cpu().tolist()

    factors = []
    for flat in flat_indices:
        pixel_index, d = divmod(flat, n_dirs)
        x, y = pixel_index % width, pixel_index // width
        dx, dy = offsets[d]
        factors.append(AdjacencyFactor((x, y), (x + dx, y + dy), flat_distances[flat]))
    return factors


def tolerance_threshold(distances: Union[Sequence[float], Tensor], tolerance: float) -> float:
    """Distance below which neighbouring pixels are merged.

    The threshold is the ``ceil(N * tolerance)``-th smallest distance, so a
    vanishing tolerance yields the minimum distance and nothing passes the
    strict ``<`` merge test. A tolerance of 1.0 yields the maximum distance
    raised by one ulp, so every factor passes. Mid-range tolerances
    therefore pick one rank lower than a 0-based ``ceil(N * tolerance)``
    index would.

    Args:
        distances: Factor distances in any order
        tolerance: Fraction in (0, 1]

    Returns:
        Threshold distance

    Raises:
        ConfigurationError: If the tolerance is out of range or there are
            no distances
    """
    tolerance = check_tolerance(tolerance)
    values = torch.as_tensor(distances, dtype=torch.float32).reshape(-1)
    n = values.numel()
    if n == 0:
        raise ConfigurationError("Cannot compute a tolerance threshold without adjacency factors")

    sorted_dists = torch.sort(values).values

    if tolerance >= 1.0:
        return math.nextafter(float(sorted_dists[-1]), math.inf)

    # 1e-9 absorbs products like 0.6 * 10 = 6.000000000000001
    rank = math.ceil(n * tolerance - 1e-9)
    index = min(max(rank - 1, 0), n - 1)
    return float(sorted_dists[index])
