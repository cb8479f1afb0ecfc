"""
Clustering quality metrics over pixel partitions.

The silhouette coefficient scores how well each pixel sits in its own
cluster compared with the nearest other cluster, using the configured pixel
distance. K-means uses the mean silhouette to choose between candidate k.
"""

from typing import Optional, Union
import torch
from torch import Tensor
import torch.nn.functional as F

from ..distances.pixel import PixeldistAlg, pixel_distance_matrix, pixel_distance_tensor


# Largest number of pairwise distances held at once by silhouette_samples
SILHOUETTE_ELEMENT_BUDGET = 2 ** 22


def silhouette_samples(pixels: Tensor, labels: Tensor,
                       pixeldist_alg: Union[str, PixeldistAlg] = PixeldistAlg.EUCLIDEAN,
                       chunk_size: Optional[int] = None) -> Tensor:
    """Silhouette coefficient of every pixel.

    For pixel i with mean intra-cluster distance a(i) and smallest mean
    distance to another cluster b(i), s(i) = (b - a) / max(a, b). Pixels in
    singleton clusters score 0, as do pixels with a = b = 0.

    Args:
        pixels: (n, 4) RGBA pixels
        labels: (n,) cluster labels (any integer ids)
        pixeldist_alg: Distance algorithm
        chunk_size: Rows of the distance matrix computed at a time. Defaults
            to as many rows as fit in SILHOUETTE_ELEMENT_BUDGET distances.

    Returns:
        (n,) tensor of silhouette values in [-1, 1]
    """
    n_samples = pixels.shape[0]
    _, labels = torch.unique(labels, return_inverse=True)
    labels = labels.to(pixels.device)
    n_clusters = int(labels.max().item()) + 1

    if n_clusters == 1:
        return torch.zeros(n_samples, device=pixels.device)

    if chunk_size is None:
        chunk_size = max(1, SILHOUETTE_ELEMENT_BUDGET // n_samples)

    onehot = F.one_hot(labels, n_clusters).to(torch.float32)    # (n, K)
    counts = onehot.sum(dim=0)                                    # (K,)

    values = []
    for start in range(0, n_samples, chunk_size):
        block = pixels[start:start + chunk_size]
        own = labels[start:start + chunk_size]

        # Row sums of distances per cluster; the self-distance is zero
        distances = pixel_distance_matrix(block, pixels, pixeldist_alg)
        sums = distances @ onehot                                 # (c, K)

        own_counts = counts[own]
        a = sums.gather(1, own.unsqueeze(1)).squeeze(1) / (own_counts - 1).clamp(min=1)

        means = sums / counts.unsqueeze(0)
        means.scatter_(1, own.unsqueeze(1), float('inf'))
        b = means.min(dim=1).values

        s = (b - a) / torch.maximum(a, b)
        s = torch.nan_to_num(s, nan=0.0)
        s = torch.where(own_counts > 1, s, torch.zeros_like(s))
        values.append(s)

    return torch.cat(values)


def silhouette_score(pixels: Tensor, labels: Tensor,
                     pixeldist_alg: Union[str, PixeldistAlg] = PixeldistAlg.EUCLIDEAN,
                     sample_size: Optional[int] = None,
                     generator: Optional[torch.Generator] = None) -> float:
    """Compute mean Silhouette Coefficient.

    Args:
        pixels: (n, 4) RGBA pixels
        labels: (n,) cluster labels
        pixeldist_alg: Distance algorithm
        sample_size: If provided, score a random subsample of this many pixels
        generator: Random generator for the subsample

    Returns:
        Mean silhouette coefficient in [-1, 1]
    """
    n_samples = pixels.shape[0]

    if sample_size is not None and sample_size < n_samples:
        indices = torch.randperm(n_samples, generator=generator)[:sample_size]
        indices = indices.to(pixels.device)
        pixels = pixels[indices]
        labels = labels[indices]

    if torch.unique(labels).numel() < 2:
        return 0.0

    return silhouette_samples(pixels, labels, pixeldist_alg).mean().item()


def within_cluster_distance(pixels: Tensor, labels: Tensor,
                            pixeldist_alg: Union[str, PixeldistAlg] = PixeldistAlg.EUCLIDEAN) -> float:
    """Sum of each pixel's distance to the channel-wise mean of its cluster (WCSS)."""
    total = 0.0
    for label in torch.unique(labels):
        members = pixels[labels == label]
        mean = members.mean(dim=0)
        total += pixel_distance_tensor(members, mean, pixeldist_alg).sum().item()
    return total
