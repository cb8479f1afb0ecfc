"""
Clustering engine.

Dispatches an image to the configured clustering algorithm and hands back a
validated, frozen Partition. Adding an algorithm means adding a ClusteringAlg
member and a factory to ``CLUSTERER_FACTORIES``.
"""

from typing import Callable, Dict, Optional, Union

from ..base.clustering_base import BaseClusterer
from ..base.interfaces import ImageSource
from ..base.data_structures import Partition, ClusteringResult
from ..config import ClusteringAlg, ClusteringOptions, parse_clustering_alg
from .agglomerative import AgglomerativeClusterer
from .kmeans import KMeansClusterer


def create_agglomerative(options: ClusteringOptions) -> AgglomerativeClusterer:
    """Create an agglomerative clusterer from options."""
    return AgglomerativeClusterer(
        tolerance=options.agglo_tolerance,
        pixeldist_alg=options.pixeldist_alg,
        connectivity=options.connectivity,
        verbose=options.verbose,
        device=options.device
    )


def create_kmeans(options: ClusteringOptions) -> KMeansClusterer:
    """Create a k-means clusterer from options."""
    return KMeansClusterer(
        max_k=options.max_k,
        pixeldist_alg=options.pixeldist_alg,
        silhouette_threshold=options.silhouette_threshold,
        silhouette_sample_size=options.silhouette_sample_size,
        max_iter=options.max_iter,
        verbose=options.verbose,
        random_state=options.random_state,
        device=options.device
    )


CLUSTERER_FACTORIES: Dict[ClusteringAlg, Callable[[ClusteringOptions], BaseClusterer]] = {
    ClusteringAlg.AGGLOMERATIVE: create_agglomerative,
    ClusteringAlg.KMEANS: create_kmeans,
}


class ClusteringEngine:
    """Facade selecting one clustering algorithm per configuration.

    Examples
    --------
    >>> engine = ClusteringEngine(ClusteringOptions(clustering_alg='kmeans', max_k=4))
    >>> partition = engine.cluster(PixelGrid(pixels))
    >>> partition.n_clusters
    """

    def __init__(self, options: Optional[ClusteringOptions] = None):
        self.options = options if options is not None else ClusteringOptions()

    def create_clusterer(self, algorithm: Optional[Union[str, ClusteringAlg]] = None) -> BaseClusterer:
        """Instantiate the clusterer for ``algorithm`` (default: the configured one)."""
        if algorithm is None:
            algorithm = self.options.clustering_alg
        return CLUSTERER_FACTORIES[parse_clustering_alg(algorithm)](self.options)

    def cluster(self, image: ImageSource,
                algorithm: Optional[Union[str, ClusteringAlg]] = None) -> Partition:
        """Cluster the pixels of ``image``.

        Args:
            image: Image to cluster
            algorithm: Override of the configured algorithm

        Returns:
            Validated, frozen Partition
        """
        return self.cluster_with_details(image, algorithm).partition

    def cluster_with_details(self, image: ImageSource,
                             algorithm: Optional[Union[str, ClusteringAlg]] = None) -> ClusteringResult:
        """Cluster ``image`` and keep the algorithm's diagnostics.

        Returns:
            ClusteringResult whose metadata holds ``threshold`` and
            ``n_merges`` (agglomerative) or ``best_k``, ``results`` and
            ``silhouette_scores`` (k-means)
        """
        if algorithm is None:
            algorithm = self.options.clustering_alg
        algorithm = parse_clustering_alg(algorithm)

        clusterer = self.create_clusterer(algorithm)
        partition = clusterer.fit_partition(image)

        partition.validate()
        partition.freeze()

        if isinstance(clusterer, KMeansClusterer):
            metadata = {
                'best_k': clusterer.best_k_,
                'centroids': clusterer.centroids_,
                'results': clusterer.results_,
                'silhouette_scores': clusterer.silhouette_scores_
            }
        elif isinstance(clusterer, AgglomerativeClusterer):
            metadata = {
                'threshold': clusterer.threshold_,
                'n_merges': clusterer.n_merges_
            }
        else:
            metadata = {}
        metadata['fit_time'] = clusterer.fit_time_

        return ClusteringResult(partition=partition, algorithm=algorithm, metadata=metadata)


def get_clusters(image: ImageSource, options: Optional[ClusteringOptions] = None,
                 algorithm: Optional[Union[str, ClusteringAlg]] = None) -> Partition:
    """Cluster ``image`` with a one-off engine."""
    return ClusteringEngine(options).cluster(image, algorithm)
