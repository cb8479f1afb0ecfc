"""
Base class for pixel clustering algorithms.

Provides the common estimator skeleton: parameter handling, image
validation, timing and verbosity, and access to the fitted Partition.
"""

from abc import abstractmethod
from typing import Optional, Dict, Any, Union
import torch
import time

from .interfaces import ImageSource
from .data_structures import Partition
from ..distances.pixel import PixeldistAlg, parse_pixeldist_alg
from ..utils.validation import check_image_size
from ..utils.device import parse_device


class BaseClusterer:
    """Base class for algorithms that partition an image's pixels.

    Subclasses implement ``_fit`` and set ``self._partition``.
    """

    def __init__(self,
                 pixeldist_alg: Union[str, PixeldistAlg] = PixeldistAlg.EUCLIDEAN,
                 verbose: int = 0,
                 random_state: Optional[Union[int, torch.Generator]] = None,
                 device: Optional[Union[str, torch.device]] = None):
        """
        Args:
            pixeldist_alg: Pixel distance algorithm
            verbose: Verbosity level (0=silent, 1=progress, 2=detailed)
            random_state: Random seed for reproducibility
            device: Torch device (None for auto-detect)
        """
        self.pixeldist_alg = parse_pixeldist_alg(pixeldist_alg)
        self.verbose = verbose
        self.random_state = random_state
        self.device = parse_device(device)

        # Fit state
        self.fitted_ = False
        self.fit_time_ = 0.0
        self._partition: Optional[Partition] = None

    @abstractmethod
    def _fit(self, image: ImageSource) -> None:
        """Cluster ``image`` and store the result in ``self._partition``."""
        pass

    def _min_pixels(self) -> int:
        """Smallest image this algorithm can cluster."""
        return 1

    def fit(self, image: ImageSource) -> 'BaseClusterer':
        """Cluster the pixels of an image.

        Args:
            image: Image to cluster

        Returns:
            Self
        """
        self._validate_image(image)
        self.fitted_ = False

        start_time = time.time()
        self._fit(image)
        self.fit_time_ = time.time() - start_time

        self.fitted_ = True
        self._log(1, f"\"{image.name}\": {self.__class__.__name__} built "
                     f"{self._partition.n_clusters} clusters in {self.fit_time_:.3f}s")
        return self

    def fit_partition(self, image: ImageSource) -> Partition:
        """Fit and return the partition."""
        return self.fit(image).partition_

    def _validate_image(self, image: ImageSource) -> None:
        check_image_size(image.width, image.height, self._min_pixels())

    def _log(self, level: int, message: str) -> None:
        if self.verbose >= level:
            print(message)

    @property
    def partition_(self) -> Partition:
        """Partition built by the last fit."""
        if not self.fitted_:
            raise RuntimeError("Clusterer must be fitted first")
        return self._partition

    @property
    def n_clusters_(self) -> int:
        return self.partition_.n_clusters

    def get_params(self, deep: bool = True) -> Dict[str, Any]:
        """Get parameters (sklearn compatibility)."""
        return {
            'pixeldist_alg': self.pixeldist_alg,
            'verbose': self.verbose,
            'random_state': self.random_state,
            'device': self.device
        }

    def set_params(self, **params) -> 'BaseClusterer':
        """Set parameters (sklearn compatibility)."""
        for key, value in params.items():
            if key == 'pixeldist_alg':
                value = parse_pixeldist_alg(value)
            elif key == 'device':
                value = parse_device(value)
            setattr(self, key, value)
        return self
