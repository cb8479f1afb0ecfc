"""
Core data structures for pixel clustering.

This module provides the pixel and coordinate records shared by every
algorithm, the precomputed adjacency factors, and the Partition that maps
each pixel of an image to exactly one cluster.
"""

from typing import Optional, List, Tuple, Dict, Any, Set, Iterator, Sequence, Union, Mapping, NamedTuple
from types import MappingProxyType
from dataclasses import dataclass, field
import torch
from torch import Tensor

from .errors import InternalConsistencyError


Coordinate = Tuple[int, int]


class Pixel(NamedTuple):
    """A single RGBA pixel with 8-bit channels."""
    r: int
    g: int
    b: int
    a: int

    @property
    def rgb(self) -> Tuple[int, int, int]:
        return (self.r, self.g, self.b)


class AdjacencyFactor(NamedTuple):
    """Distance between two neighbouring pixels a and b."""
    a: Coordinate
    b: Coordinate
    distance: float


@dataclass(frozen=True)
class Centroid:
    """A k-means centroid: an actual image pixel and its colour."""
    coordinate: Coordinate
    rgb: Tuple[int, int, int]


class Partition:
    """Assignment of every pixel of a width x height image to one cluster.

    Two views are kept in agreement at all times:

    - ``cluster_of``: coordinate -> cluster id (one entry per pixel)
    - ``members_of``: cluster id -> set of coordinates

    The member sets are pairwise disjoint and their union is the full set of
    image coordinates. A Partition is mutated only by the single algorithm
    that builds it; ``freeze()`` hands it off read-only.
    """

    def __init__(self, width: int, height: int):
        """
        Args:
            width: Image width in pixels
            height: Image height in pixels
        """
        self.width = width
        self.height = height
        self._cluster_of: Dict[Coordinate, int] = {}
        self._members_of: Dict[int, Set[Coordinate]] = {}
        self._frozen = False

    @classmethod
    def singletons(cls, width: int, height: int) -> 'Partition':
        """One cluster per pixel, cluster id = raster index ``y * width + x``."""
        partition = cls(width, height)
        cluster_id = 0
        for y in range(height):
            for x in range(width):
                partition._cluster_of[(x, y)] = cluster_id
                partition._members_of[cluster_id] = {(x, y)}
                cluster_id += 1
        return partition

    @classmethod
    def from_labels(cls, width: int, height: int,
                    labels: Union[Tensor, Sequence[int]]) -> 'Partition':
        """Build a partition from raster-ordered cluster labels.

        Args:
            width: Image width
            height: Image height
            labels: (width * height,) cluster id per pixel, raster order

        Returns:
            Freshly built Partition
        """
        if isinstance(labels, Tensor):
            labels = labels.tolist()
        if len(labels) != width * height:
            raise InternalConsistencyError(
                f"Expected {width * height} labels, got {len(labels)}"
            )

        partition = cls(width, height)
        cluster_of = partition._cluster_of
        members_of = partition._members_of
        for index, label in enumerate(labels):
            coord = (index % width, index // width)
            cluster_of[coord] = label
            if label in members_of:
                members_of[label].add(coord)
            else:
                members_of[label] = {coord}
        return partition

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------
    @property
    def cluster_of(self) -> Mapping[Coordinate, int]:
        """Read-only view of coordinate -> cluster id."""
        return MappingProxyType(self._cluster_of)

    @property
    def members_of(self) -> Mapping[int, Set[Coordinate]]:
        """Read-only view of cluster id -> member coordinates."""
        if self._frozen:
            return MappingProxyType({
                cid: frozenset(members) for cid, members in self._members_of.items()
            })
        return MappingProxyType(self._members_of)

    @property
    def n_clusters(self) -> int:
        return len(self._members_of)

    @property
    def n_pixels(self) -> int:
        return self.width * self.height

    @property
    def frozen(self) -> bool:
        return self._frozen

    def cluster_id(self, coord: Coordinate) -> int:
        """Cluster id of the pixel at ``coord``."""
        try:
            return self._cluster_of[coord]
        except KeyError:
            raise InternalConsistencyError(f"Coordinate {coord} has no cluster") from None

    def members(self, cluster_id: int) -> Set[Coordinate]:
        """Member coordinates of ``cluster_id`` (a copy)."""
        try:
            return set(self._members_of[cluster_id])
        except KeyError:
            raise InternalConsistencyError(f"Unknown cluster id {cluster_id}") from None

    def size(self, cluster_id: int) -> int:
        return len(self._members_of[cluster_id])

    def cluster_ids(self) -> List[int]:
        """Cluster ids in ascending order."""
        return sorted(self._members_of)

    def sizes(self) -> Dict[int, int]:
        """Number of member pixels per cluster."""
        return {cid: len(members) for cid, members in self._members_of.items()}

    def labels(self) -> Tensor:
        """(width * height,) tensor of cluster ids in raster order."""
        labels = torch.empty(self.n_pixels, dtype=torch.long)
        for (x, y), cid in self._cluster_of.items():
            labels[y * self.width + x] = cid
        return labels

    def __iter__(self) -> Iterator[Tuple[int, Set[Coordinate]]]:
        for cid in self.cluster_ids():
            yield cid, set(self._members_of[cid])

    def __len__(self) -> int:
        return self.n_clusters

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def absorb(self, winner: int, loser: int) -> None:
        """Move every member of ``loser`` into ``winner``.

        Each moved coordinate has its cluster id rewritten. The loser's id is
        retired and never reused.
        """
        self._check_mutable()
        if winner == loser:
            raise InternalConsistencyError(f"Cluster {winner} cannot absorb itself")

        prey = self._members_of.pop(loser)
        for coord in prey:
            self._cluster_of[coord] = winner
        self._members_of[winner].update(prey)

    def freeze(self) -> 'Partition':
        """Mark the partition read-only and return it."""
        self._frozen = True
        return self

    def _check_mutable(self) -> None:
        if self._frozen:
            raise InternalConsistencyError("Partition is frozen and cannot be modified")

    # ------------------------------------------------------------------
    # Invariant checking
    # ------------------------------------------------------------------
    def validate(self) -> None:
        """Verify that the partition is exhaustive and disjoint.

        Raises:
            InternalConsistencyError: On any missing, extra, misfiled or
                doubly-assigned coordinate.
        """
        if len(self._cluster_of) != self.n_pixels:
            raise InternalConsistencyError(
                f"cluster_of has {len(self._cluster_of)} entries for "
                f"{self.n_pixels} pixels"
            )

        seen: Set[Coordinate] = set()
        for cid, members in self._members_of.items():
            if not members:
                raise InternalConsistencyError(f"Cluster {cid} is empty")
            for coord in members:
                if coord in seen:
                    raise InternalConsistencyError(
                        f"Coordinate {coord} is a member of more than one cluster"
                    )
                seen.add(coord)
                if self._cluster_of.get(coord) != cid:
                    raise InternalConsistencyError(
                        f"Coordinate {coord} is in cluster {cid} but cluster_of "
                        f"says {self._cluster_of.get(coord)}"
                    )

        for y in range(self.height):
            for x in range(self.width):
                if (x, y) not in seen:
                    raise InternalConsistencyError(f"Coordinate {(x, y)} has no cluster")

    def copy(self) -> 'Partition':
        """Mutable deep copy."""
        other = Partition(self.width, self.height)
        other._cluster_of = dict(self._cluster_of)
        other._members_of = {cid: set(m) for cid, m in self._members_of.items()}
        return other

    def __repr__(self) -> str:
        return (f"Partition(width={self.width}, height={self.height}, "
                f"n_clusters={self.n_clusters}, frozen={self._frozen})")


@dataclass
class KMeansResult:
    """Converged k-means run for a single candidate k."""
    k: int
    partition: Partition
    centroids: List[Centroid]
    wcss: float
    wcss_history: List[float] = field(default_factory=list)
    n_iter: int = 0
    converged_by: str = 'stable'
    silhouette: Optional[float] = None


@dataclass
class ClusteringResult:
    """Output of the clustering engine.

    ``partition`` is frozen. ``metadata`` carries algorithm-specific detail:
    the agglomerative threshold, or the k-means per-k results.
    """
    partition: Partition
    algorithm: Any
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def n_clusters(self) -> int:
        return self.partition.n_clusters
