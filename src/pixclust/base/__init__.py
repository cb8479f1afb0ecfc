"""Base classes, data structures and errors for pixel clustering."""

from .errors import (
    PixclustError,
    ConfigurationError,
    InternalConsistencyError
)

from .data_structures import (
    Coordinate,
    Pixel,
    AdjacencyFactor,
    Centroid,
    Partition,
    KMeansResult,
    ClusteringResult
)

from .interfaces import (
    ImageSource,
    InitializationStrategy,
    AssignmentStrategy,
    ConvergenceCriterion
)

from .clustering_base import BaseClusterer

__all__ = [
    # Errors
    'PixclustError',
    'ConfigurationError',
    'InternalConsistencyError',

    # Data structures
    'Coordinate',
    'Pixel',
    'AdjacencyFactor',
    'Centroid',
    'Partition',
    'KMeansResult',
    'ClusteringResult',

    # Interfaces
    'ImageSource',
    'InitializationStrategy',
    'AssignmentStrategy',
    'ConvergenceCriterion',

    # Base algorithm
    'BaseClusterer'
]
