"""Image sources, adjacency factors and per-cluster statistics."""

from .source import PixelGrid
from .adjacency import (
    NEIGHBOUR_OFFSETS,
    adjacency_distance_grid,
    build_adjacency_factors,
    tolerance_threshold
)
from .summary import cluster_colour_means, mean_colour_image

__all__ = [
    'PixelGrid',
    'NEIGHBOUR_OFFSETS',
    'adjacency_distance_grid',
    'build_adjacency_factors',
    'tolerance_threshold',
    'cluster_colour_means',
    'mean_colour_image'
]
