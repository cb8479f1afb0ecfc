"""
Core interfaces for pixel clustering.

This module defines the abstract base classes that collaborators and
pluggable components implement: the image source a clusterer reads from,
centroid seeding, pixel assignment and convergence checking.
"""

from abc import ABC, abstractmethod
from typing import Optional, Dict, Any
import torch
from torch import Tensor

from .data_structures import Pixel


class ImageSource(ABC):
    """Read-only access to a decoded image.

    Decoding, resizing and file I/O happen outside pixclust; a clusterer only
    sees an identifier, the dimensions and pixel accessors.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Identifier of the image (usually its file name)."""
        pass

    @property
    @abstractmethod
    def width(self) -> int:
        pass

    @property
    @abstractmethod
    def height(self) -> int:
        pass

    @abstractmethod
    def get(self, x: int, y: int) -> Pixel:
        """Pixel at (x, y). Coordinates must be in bounds."""
        pass

    def get_checked(self, x: int, y: int) -> Optional[Pixel]:
        """Pixel at (x, y), or None when (x, y) lies outside the image."""
        if 0 <= x < self.width and 0 <= y < self.height:
            return self.get(x, y)
        return None

    def to_tensor(self) -> Tensor:
        """(width * height, 4) float32 tensor of RGBA channels in raster order.

        The default goes through ``get``; sources holding an array should
        override this.
        """
        rows = [
            tuple(self.get(x, y))
            for y in range(self.height)
            for x in range(self.width)
        ]
        return torch.tensor(rows, dtype=torch.float32).reshape(-1, 4)

    @property
    def n_pixels(self) -> int:
        return self.width * self.height


class InitializationStrategy(ABC):
    """Abstract base class for centroid seeding strategies."""

    @abstractmethod
    def initialize(self, pixels: Tensor, n_clusters: int,
                   **kwargs) -> Tensor:
        """Pick initial centroids.

        Args:
            pixels: (n, 4) RGBA pixels in raster order
            n_clusters: Number of centroids to pick
            **kwargs: Strategy-specific parameters

        Returns:
            (n_clusters,) long tensor of distinct pixel indices
        """
        pass


class AssignmentStrategy(ABC):
    """Abstract base class for pixel-to-centroid assignment strategies."""

    @abstractmethod
    def compute_assignments(self, pixels: Tensor, centroid_indices: Tensor,
                            **kwargs) -> Tensor:
        """Assign every pixel to a centroid.

        Args:
            pixels: (n, 4) RGBA pixels
            centroid_indices: (k,) pixel indices of the current centroids

        Returns:
            (n,) long tensor of centroid positions in 0..k-1
        """
        pass


class ConvergenceCriterion(ABC):
    """Abstract base class for convergence checking."""

    def __init__(self):
        self.history = []

    @abstractmethod
    def check(self, current_state: Dict[str, Any]) -> bool:
        """Check if the iteration has converged.

        Args:
            current_state: Dictionary containing current algorithm state

        Returns:
            True if converged, False otherwise
        """
        pass

    def reset(self):
        """Reset convergence history."""
        self.history = []
