"""
Per-cluster colour statistics for consumers of a finished partition.
"""

from typing import Dict, Tuple
import torch
from torch import Tensor

from ..base.interfaces import ImageSource
from ..base.data_structures import Partition


def cluster_colour_means(image: ImageSource, partition: Partition) -> Dict[int, Tuple[float, float, float, float]]:
    """Channel-wise mean RGBA of every cluster.

    Args:
        image: Image the partition was built from
        partition: Finished partition

    Returns:
        Mapping cluster id -> (r, g, b, a) means
    """
    pixels = image.to_tensor().cpu()
    labels = partition.labels()

    means = {}
    for cid in partition.cluster_ids():
        members = pixels[labels == cid]
        means[cid] = tuple(members.mean(dim=0).tolist())
    return means


def mean_colour_image(image: ImageSource, partition: Partition) -> Tensor:
    """(H, W, 4) uint8 image with every pixel replaced by its cluster's mean colour."""
    pixels = image.to_tensor().cpu()
    labels = partition.labels()

    painted = torch.empty_like(pixels)
    for cid in partition.cluster_ids():
        mask = labels == cid
        painted[mask] = pixels[mask].mean(dim=0)

    return painted.round().clamp(0, 255).to(torch.uint8).reshape(image.height, image.width, 4)
