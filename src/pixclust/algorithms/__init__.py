"""Clustering algorithm implementations."""

from .agglomerative import AgglomerativeClusterer
from .kmeans import KMeansClusterer
from .engine import ClusteringEngine, CLUSTERER_FACTORIES, get_clusters

__all__ = [
    'AgglomerativeClusterer',
    'KMeansClusterer',
    'ClusteringEngine',
    'CLUSTERER_FACTORIES',
    'get_clusters'
]
