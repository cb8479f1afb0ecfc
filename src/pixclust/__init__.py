"""
pixclust: dominant colour regions of an image by pixel clustering.

This package reduces an image to clusters of similar pixels using one of:
- Agglomerative clustering over neighbouring pixels
- K-means with farthest-point seeding and silhouette-selected k

Example usage:
    >>> import numpy as np
    >>> from pixclust import PixelGrid, ClusteringEngine, ClusteringOptions
    >>>
    >>> # Wrap an already-decoded (H, W, 4) uint8 array
    >>> image = PixelGrid(np.zeros((32, 32, 4), dtype=np.uint8), name='blank')
    >>>
    >>> # Cluster with k-means
    >>> engine = ClusteringEngine(ClusteringOptions(clustering_alg='kmeans', max_k=5))
    >>> partition = engine.cluster(image)
    >>> partition.n_clusters
"""

__version__ = '0.1.0'

# Core data structures and errors
from .base import (
    PixclustError,
    ConfigurationError,
    InternalConsistencyError,
    Pixel,
    AdjacencyFactor,
    Centroid,
    Partition,
    KMeansResult,
    ClusteringResult,
    ImageSource
)

from .distances import PixeldistAlg, get_pixeldist
from .image import PixelGrid, build_adjacency_factors, cluster_colour_means
from .config import ClusteringAlg, ClusteringOptions

# Import main algorithms
from .algorithms import (
    AgglomerativeClusterer,
    KMeansClusterer,
    ClusteringEngine,
    get_clusters
)

# Import visualization
from .visualization import plot_partition, plot_silhouette_scores

__all__ = [
    # Algorithms
    'AgglomerativeClusterer',
    'KMeansClusterer',
    'ClusteringEngine',
    'get_clusters',

    # Configuration
    'ClusteringAlg',
    'ClusteringOptions',
    'PixeldistAlg',
    'get_pixeldist',

    # Core data structures
    'Pixel',
    'AdjacencyFactor',
    'Centroid',
    'Partition',
    'KMeansResult',
    'ClusteringResult',
    'ImageSource',
    'PixelGrid',
    'build_adjacency_factors',
    'cluster_colour_means',

    # Errors
    'PixclustError',
    'ConfigurationError',
    'InternalConsistencyError',

    # Visualization
    'plot_partition',
    'plot_silhouette_scores',

    # Version
    '__version__'
]
