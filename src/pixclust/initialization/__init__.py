"""Centroid seeding strategies."""

from .farthest_point import FarthestPointInit

__all__ = [
    'FarthestPointInit'
]
