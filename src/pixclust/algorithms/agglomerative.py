"""
Agglomerative pixel clustering.

Neighbouring pixels whose distance falls below a percentile threshold are
merged into one cluster, in a single pass over the image's adjacency
factors.
"""

from typing import Callable, List, Optional, Union
import time
import torch

from ..base.clustering_base import BaseClusterer
from ..base.interfaces import ImageSource
from ..base.data_structures import AdjacencyFactor, Partition
from ..distances.pixel import PixeldistAlg
from ..image.adjacency import build_adjacency_factors, tolerance_threshold
from ..utils.validation import check_tolerance, check_connectivity


MergeCallback = Callable[[int, int, int], None]


class AgglomerativeClusterer(BaseClusterer):
    """Threshold-based agglomeration over local adjacency.

    Every pixel starts in its own cluster (id = raster index). The adjacency
    factors are then visited once, in raster order; for a factor (a, b) whose
    pixels sit in different clusters and whose distance is below the
    threshold, the larger cluster absorbs the smaller one. On equal sizes the
    cluster of b absorbs the cluster of a. Absorbed ids are never reused and
    clusters are never split.

    Parameters
    ----------
    tolerance : float, default=0.6
        Fraction in (0, 1] selecting the percentile of neighbour distances
        used as the merge threshold
    pixeldist_alg : PixeldistAlg or str, default='euclidean'
        Pixel distance algorithm
    connectivity : int, default=8
        8 to link right, bottom and both lower diagonals, 4 for right and
        bottom only
    on_merge : callable, optional
        Called as ``on_merge(winner, loser, n_clusters)`` after every merge
    verbose : int, default=0
        Verbosity level

    Attributes
    ----------
    partition_ : Partition
        Resulting partition
    threshold_ : float
        Merge threshold used
    factors_ : list of AdjacencyFactor
        Adjacency factors of the fitted image
    n_merges_ : int
        Number of merges performed
    """

    def __init__(self,
                 tolerance: float = 0.6,
                 pixeldist_alg: Union[str, PixeldistAlg] = PixeldistAlg.EUCLIDEAN,
                 connectivity: int = 8,
                 on_merge: Optional[MergeCallback] = None,
                 verbose: int = 0,
                 device: Optional[Union[str, torch.device]] = None):
        super().__init__(
            pixeldist_alg=pixeldist_alg,
            verbose=verbose,
            random_state=None,
            device=device
        )
        self.tolerance = check_tolerance(tolerance)
        self.connectivity = check_connectivity(connectivity)
        self.on_merge = on_merge

        self.threshold_: Optional[float] = None
        self.factors_: Optional[List[AdjacencyFactor]] = None
        self.n_merges_ = 0

    def _min_pixels(self) -> int:
        # A single pixel has no neighbours and therefore no threshold
        return 2

    def _fit(self, image: ImageSource) -> None:
        factors = build_adjacency_factors(image, self.pixeldist_alg, self.connectivity,
                                          device=self.device)
        self._fit_factors(image, factors)

    def fit_factors(self, image: ImageSource,
                    factors: List[AdjacencyFactor]) -> 'AgglomerativeClusterer':
        """Cluster using an already-built adjacency factor list."""
        self._validate_image(image)
        start_time = time.time()
        self._fit_factors(image, factors)
        self.fit_time_ = time.time() - start_time
        self.fitted_ = True
        return self

    def _fit_factors(self, image: ImageSource, factors: List[AdjacencyFactor]) -> None:
        start_time = time.time()
        self.factors_ = factors
        self.threshold_ = tolerance_threshold([f.distance for f in factors], self.tolerance)
        self._log(1, f"\t\"{image.name}\": {self.tolerance * 100:.0f}th-centile dist = "
                     f"{self.threshold_:.5f}, built in {time.time() - start_time:.2f}s")

        start_time = time.time()
        partition = Partition.singletons(image.width, image.height)
        self._log(2, f"\t\"{image.name}\": tables built in {time.time() - start_time:.2f}s")

        start_time = time.time()
        self.n_merges_ = self.merge(partition, factors, self.threshold_)
        self._log(1, f"\t\"{image.name}\": {self.n_merges_} merges over {len(factors)} "
                     f"factors in {time.time() - start_time:.2f}s")

        self._partition = partition

    def merge(self, partition: Partition, factors: List[AdjacencyFactor],
              threshold: float) -> int:
        """Run one merge pass over ``factors``, mutating ``partition``.

        Returns:
            Number of merges performed
        """
        n_merges = 0
        for factor in factors:
            a_cluster = partition.cluster_id(factor.a)
            b_cluster = partition.cluster_id(factor.b)

            if a_cluster != b_cluster and factor.distance < threshold:
                if partition.size(a_cluster) > partition.size(b_cluster):
                    winner, loser = a_cluster, b_cluster
                else:
                    winner, loser = b_cluster, a_cluster
                partition.absorb(winner, loser)
                n_merges += 1

                if self.on_merge is not None:
                    self.on_merge(winner, loser, partition.n_clusters)

        return n_merges

    def get_params(self, deep: bool = True):
        params = super().get_params(deep)
        params.update({
            'tolerance': self.tolerance,
            'connectivity': self.connectivity
        })
        return params
