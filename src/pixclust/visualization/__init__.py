"""Visualization utilities for pixel clustering results."""

from .plot_partition import plot_partition, plot_silhouette_scores

__all__ = [
    'plot_partition',
    'plot_silhouette_scores'
]
