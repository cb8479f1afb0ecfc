"""Pixel-to-centroid assignment strategies."""

from .hard import NearestCentroidAssignment

__all__ = [
    'NearestCentroidAssignment'
]
