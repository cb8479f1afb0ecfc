"""Pixel distance metrics."""

from .pixel import (
    PixeldistAlg,
    PIXELDIST_ALG_ALIASES,
    parse_pixeldist_alg,
    alpha_only_dist,
    euclidean,
    redmean,
    get_pixeldist,
    pixel_distance_tensor,
    pixel_distance_matrix
)

__all__ = [
    'PixeldistAlg',
    'PIXELDIST_ALG_ALIASES',
    'parse_pixeldist_alg',
    'alpha_only_dist',
    'euclidean',
    'redmean',
    'get_pixeldist',
    'pixel_distance_tensor',
    'pixel_distance_matrix'
]
