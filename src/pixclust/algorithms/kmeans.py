"""
K-means pixel clustering.

For every candidate k from 2 to max_k, centroids are seeded by farthest-point
selection and refined by Lloyd iteration until the assignment is stable (or
a two-cycle is detected). The candidate with the highest mean silhouette
coefficient is kept.

Centroids are always real image pixels: after each assignment the member
pixel closest to the cluster's mean colour becomes the new centroid.
"""

from typing import Optional, List, Dict, Tuple, Union
import time
import warnings
import torch
from torch import Tensor

from ..base.clustering_base import BaseClusterer
from ..base.interfaces import ImageSource
from ..base.data_structures import Partition, Centroid, KMeansResult
from ..base.errors import ConfigurationError, InternalConsistencyError
from ..distances.pixel import PixeldistAlg, pixel_distance_tensor
from ..initialization.farthest_point import FarthestPointInit
from ..assignments.hard import NearestCentroidAssignment
from ..utils.convergence import AssignmentStability, OscillationGuard, MAX_CYCLES
from ..utils.metrics import silhouette_score
from ..utils.validation import check_max_k, check_random_state, check_unit_interval, raster_coordinate


class KMeansClusterer(BaseClusterer):
    """K-means over pixel colours with k chosen by silhouette.

    Parameters
    ----------
    max_k : int, default=10
        Largest number of clusters tried; candidates are 2..max_k
    pixeldist_alg : PixeldistAlg or str, default='euclidean'
        Pixel distance algorithm used for seeding, assignment, recentring
        and scoring
    silhouette_threshold : float, default=1.0
        Stop trying larger k once a candidate's mean silhouette is strictly
        above this value. 1.0 never stops early.
    silhouette_sample_size : int, optional
        Score each candidate on a random subsample of this many pixels
        instead of all of them
    max_iter : int, optional
        Upper bound on Lloyd iterations per k. None iterates until
        convergence.
    max_cycles : int, default=30
        Length of the WCSS window inspected by the oscillation guard
    verbose : int, default=0
        Verbosity level
    random_state : int or torch.Generator, optional
        Seed for the first centroid pick and silhouette subsampling
    device : torch.device, optional
        Device for computation (CPU/GPU)

    Attributes
    ----------
    partition_ : Partition
        Partition of the best candidate
    best_k_ : int
        Number of clusters of the best candidate
    centroids_ : list of Centroid
        Final centroids of the best candidate
    results_ : list of KMeansResult
        Converged run for every k tried, in order
    silhouette_scores_ : dict
        Mean silhouette per k tried
    """

    def __init__(self,
                 max_k: int = 10,
                 pixeldist_alg: Union[str, PixeldistAlg] = PixeldistAlg.EUCLIDEAN,
                 silhouette_threshold: float = 1.0,
                 silhouette_sample_size: Optional[int] = None,
                 max_iter: Optional[int] = None,
                 max_cycles: int = MAX_CYCLES,
                 verbose: int = 0,
                 random_state: Optional[Union[int, torch.Generator]] = None,
                 device: Optional[Union[str, torch.device]] = None):
        super().__init__(
            pixeldist_alg=pixeldist_alg,
            verbose=verbose,
            random_state=random_state,
            device=device
        )
        check_max_k(max_k)
        if silhouette_sample_size is not None and silhouette_sample_size < 2:
            raise ConfigurationError(
                f"silhouette_sample_size must be at least 2, got {silhouette_sample_size}"
            )
        if max_iter is not None and max_iter < 1:
            raise ConfigurationError(f"max_iter must be positive, got {max_iter}")

        self.max_k = max_k
        self.silhouette_threshold = check_unit_interval('silhouette_threshold', silhouette_threshold)
        self.silhouette_sample_size = silhouette_sample_size
        self.max_iter = max_iter
        self.max_cycles = max_cycles

        self.initialization_strategy: Optional[FarthestPointInit] = None
        self.assignment_strategy: Optional[NearestCentroidAssignment] = None

        self.best_k_: Optional[int] = None
        self.centroids_: Optional[List[Centroid]] = None
        self.results_: List[KMeansResult] = []
        self.silhouette_scores_: Dict[int, float] = {}

    def _create_components(self) -> None:
        """Create k-means specific components."""
        self.initialization_strategy = FarthestPointInit(self.pixeldist_alg)
        self.assignment_strategy = NearestCentroidAssignment(self.pixeldist_alg)

    def _validate_image(self, image: ImageSource) -> None:
        super()._validate_image(image)
        check_max_k(self.max_k, image.n_pixels)

    def _fit(self, image: ImageSource) -> None:
        self._create_components()
        pixels = image.to_tensor().to(self.device)
        generator = check_random_state(self.random_state)

        self.results_ = []
        self.silhouette_scores_ = {}
        best: Optional[KMeansResult] = None

        for k in range(2, self.max_k + 1):
            result, labels = self.run_k(pixels, image.width, image.height, k,
                                        generator=generator, name=image.name)

            result.silhouette = silhouette_score(
                pixels, labels, self.pixeldist_alg,
                sample_size=self.silhouette_sample_size,
                generator=generator
            )
            self.results_.append(result)
            self.silhouette_scores_[k] = result.silhouette

            self._log(1, f"\"{image.name}\": k={k:2d}: WCSS = {result.wcss:.6f}, "
                         f"silhouette = {result.silhouette:.5f} "
                         f"({result.n_iter} iterations, {result.converged_by})")

            # Ties keep the smaller k
            if best is None or result.silhouette > best.silhouette:
                best = result

            if result.silhouette > self.silhouette_threshold:
                self._log(1, f"\"{image.name}\": silhouette above "
                             f"{self.silhouette_threshold} at k={k}, stopping early")
                break

        self.best_k_ = best.k
        self.centroids_ = best.centroids
        self._partition = best.partition

    def run_k(self, pixels: Tensor, width: int, height: int, k: int,
              generator: Optional[torch.Generator] = None,
              first_index: Optional[int] = None,
              name: str = 'image') -> Tuple[KMeansResult, Tensor]:
        """Seed and run Lloyd iteration for a single k.

        Args:
            pixels: (width * height, 4) RGBA pixels in raster order
            width: Image width
            height: Image height
            k: Number of clusters
            generator: Random generator for the first centroid
            first_index: Fixed first centroid instead of a random pick
            name: Image name used in diagnostics

        Returns:
            The converged KMeansResult and its (n,) label tensor
        """
        if self.initialization_strategy is None:
            self._create_components()

        seeding_start = time.time()
        centroid_indices = self.initialization_strategy.initialize(
            pixels, k, generator=generator, first_index=first_index
        )
        self._log(2, f"\"{name}\": k={k}: seeding in {time.time() - seeding_start:.3f}s")

        return self.lloyd(pixels, width, height, centroid_indices)

    def lloyd(self, pixels: Tensor, width: int, height: int,
              centroid_indices: Tensor) -> Tuple[KMeansResult, Tensor]:
        """Iterate assignment and recentring from the given centroids.

        Returns:
            The converged KMeansResult and its (n,) label tensor
        """
        if self.assignment_strategy is None:
            self._create_components()

        k = len(centroid_indices)
        stability = AssignmentStability()
        guard = OscillationGuard(self.max_cycles)

        iteration = 0
        while True:
            iter_start_time = time.time()

            # Assignment is a pure map over pixels; the partition is rebuilt
            # from its finished output
            labels = self.assignment_strategy.compute_assignments(pixels, centroid_indices)
            partition = Partition.from_labels(width, height, labels.cpu())

            centroid_indices, wcss = self.recentre(pixels, labels, k)

            state = {'iteration': iteration, 'assignments': labels, 'objective': wcss}
            stable = stability.check(state)
            cycling = guard.check(state)
            iteration += 1

            self._log(2, f"Iteration {iteration:3d}: WCSS = {wcss:.6f} "
                         f"({time.time() - iter_start_time:.3f}s)")

            if stable:
                converged_by = 'stable'
                break
            if cycling:
                converged_by = 'oscillation'
                break
            if self.max_iter is not None and iteration >= self.max_iter:
                warnings.warn(f"k={k}: failed to converge after {self.max_iter} iterations")
                converged_by = 'max_iter'
                break

        centroids = [
            Centroid(
                coordinate=raster_coordinate(index, width),
                rgb=tuple(int(c) for c in pixels[index, :3].tolist())
            )
            for index in centroid_indices.tolist()
        ]

        result = KMeansResult(
            k=k,
            partition=partition,
            centroids=centroids,
            wcss=wcss,
            wcss_history=list(guard.history),
            n_iter=iteration,
            converged_by=converged_by
        )
        return result, labels

    def recentre(self, pixels: Tensor, labels: Tensor, k: int) -> Tuple[Tensor, float]:
        """Move every centroid to the member pixel closest to its cluster mean.

        Args:
            pixels: (n, 4) RGBA pixels
            labels: (n,) cluster positions 0..k-1
            k: Number of clusters

        Returns:
            (k,) new centroid pixel indices and the within-cluster sum of
            distances to the means (WCSS)
        """
        new_indices = torch.empty(k, dtype=torch.long, device=pixels.device)
        wcss = 0.0

        for c in range(k):
            member_indices = torch.nonzero(labels == c).squeeze(1)
            if member_indices.numel() == 0:
                raise InternalConsistencyError(f"Cluster {c} lost every member")

            members = pixels[member_indices]
            mean = members.mean(dim=0)
            distances = pixel_distance_tensor(members, mean, self.pixeldist_alg)

            wcss += distances.sum().item()
            new_indices[c] = member_indices[torch.argmin(distances)]

        return new_indices, wcss

    def get_params(self, deep: bool = True):
        params = super().get_params(deep)
        params.update({
            'max_k': self.max_k,
            'silhouette_threshold': self.silhouette_threshold,
            'silhouette_sample_size': self.silhouette_sample_size,
            'max_iter': self.max_iter,
            'max_cycles': self.max_cycles
        })
        return params
