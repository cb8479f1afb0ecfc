"""
Clustering options.

ClusteringOptions gathers every setting the engine needs. It can be built
directly or from an already-parsed mapping, either flat::

    {'clustering_alg': 'kmeans', 'max_k': 6}

or in the sectioned layout of a configuration file::

    {'args': {'pixeldist_alg': 'redmean', 'clustering_alg': 'agglo'},
     'settings': {'debug': True},
     'agglomerative_options': {'tolerance': 0.6},
     'kmeans_options': {'max_k': 10, 'silhouette_threshold': 0.7}}

Reading configuration files is left to the caller.
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union
import torch

from .base.errors import ConfigurationError
from .distances.pixel import PixeldistAlg, PIXELDIST_ALG_ALIASES, parse_pixeldist_alg  # noqa: F401
from .utils.validation import (
    check_tolerance, check_max_k, check_connectivity, check_unit_interval, check_random_state
)
from .utils.device import parse_device


class ClusteringAlg(Enum):
    """Clustering algorithm."""
    AGGLOMERATIVE = 'agglomerative'
    KMEANS = 'kmeans'


CLUSTERING_ALG_ALIASES: Dict[str, ClusteringAlg] = {
    'agglomerative': ClusteringAlg.AGGLOMERATIVE,
    'agglo': ClusteringAlg.AGGLOMERATIVE,
    'agg': ClusteringAlg.AGGLOMERATIVE,
    'kmeans': ClusteringAlg.KMEANS,
    'k-means': ClusteringAlg.KMEANS,
    'k_means': ClusteringAlg.KMEANS,
}


def parse_clustering_alg(value: Union[str, ClusteringAlg]) -> ClusteringAlg:
    """Resolve a clustering algorithm from its name (case-insensitive).

    Raises:
        ConfigurationError: If the name matches no known algorithm
    """
    if isinstance(value, ClusteringAlg):
        return value
    try:
        return CLUSTERING_ALG_ALIASES[str(value).strip().lower()]
    except KeyError:
        raise ConfigurationError(
            f"Unknown clustering algorithm {value!r}; expected one of "
            f"{sorted(CLUSTERING_ALG_ALIASES)}"
        ) from None


# Section key -> {key in section: ClusteringOptions field}
_SECTIONS: Dict[str, Dict[str, str]] = {
    'args': {
        'pixeldist_alg': 'pixeldist_alg',
        'clustering_alg': 'clustering_alg',
    },
    'settings': {
        'verbose': 'verbose',
        'device': 'device',
        'random_state': 'random_state',
    },
    'agglomerative_options': {
        'tolerance': 'agglo_tolerance',
        'connectivity': 'connectivity',
    },
    'kmeans_options': {
        'max_k': 'max_k',
        'silhouette_threshold': 'silhouette_threshold',
        'silhouette_sample_size': 'silhouette_sample_size',
        'max_iter': 'max_iter',
    },
}


@dataclass
class ClusteringOptions:
    """Settings for a clustering run.

    Attributes:
        pixeldist_alg: Pixel distance algorithm
        clustering_alg: Algorithm the engine dispatches to
        agglo_tolerance: Agglomerative merge percentile, in (0, 1]
        connectivity: Agglomerative neighbourhood, 4 or 8
        max_k: Largest k tried by k-means
        silhouette_threshold: K-means stops early above this silhouette
        silhouette_sample_size: Pixels sampled for each silhouette score
        max_iter: Upper bound on Lloyd iterations (None for unbounded)
        random_state: Seed for k-means
        verbose: Verbosity level
        device: Torch device (None for auto-detect)
    """
    pixeldist_alg: Union[str, PixeldistAlg] = PixeldistAlg.EUCLIDEAN
    clustering_alg: Union[str, ClusteringAlg] = ClusteringAlg.AGGLOMERATIVE
    agglo_tolerance: float = 0.6
    connectivity: int = 8
    max_k: int = 10
    silhouette_threshold: float = 1.0
    silhouette_sample_size: Optional[int] = None
    max_iter: Optional[int] = None
    random_state: Optional[Union[int, torch.Generator]] = None
    verbose: int = 0
    device: Optional[Union[str, torch.device]] = None

    def __post_init__(self):
        self.pixeldist_alg = parse_pixeldist_alg(self.pixeldist_alg)
        self.clustering_alg = parse_clustering_alg(self.clustering_alg)
        self.agglo_tolerance = check_tolerance(self.agglo_tolerance)
        check_connectivity(self.connectivity)
        check_max_k(self.max_k)
        self.silhouette_threshold = check_unit_interval('silhouette_threshold',
                                                        self.silhouette_threshold)

        if self.silhouette_sample_size is not None and self.silhouette_sample_size < 2:
            raise ConfigurationError(f"silhouette_sample_size must be at least 2, "
                                     f"got {self.silhouette_sample_size}")
        if self.max_iter is not None and self.max_iter < 1:
            raise ConfigurationError(f"max_iter must be positive, got {self.max_iter}")

        try:
            check_random_state(self.random_state)
        except TypeError as e:
            raise ConfigurationError(str(e)) from None

        if isinstance(self.verbose, bool):
            self.verbose = int(self.verbose)
        if not isinstance(self.verbose, int) or self.verbose < 0:
            raise ConfigurationError(f"verbose must be a non-negative int, got {self.verbose!r}")

        self.device = parse_device(self.device)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> 'ClusteringOptions':
        """Build options from a flat or sectioned mapping.

        In the sectioned layout ``settings.debug = true`` is read as
        ``verbose = 1`` unless ``verbose`` is given explicitly.

        Raises:
            ConfigurationError: On unknown keys or invalid values
        """
        field_names = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}

        for key, value in mapping.items():
            if key in _SECTIONS:
                if not isinstance(value, Mapping):
                    raise ConfigurationError(f"Section {key!r} must be a mapping")
                section = dict(value)

                if key == 'settings' and 'debug' in section:
                    debug = section.pop('debug')
                    if 'verbose' not in section:
                        kwargs.setdefault('verbose', 1 if debug else 0)

                for option, option_value in section.items():
                    if option not in _SECTIONS[key]:
                        raise ConfigurationError(f"Unknown option {option!r} in section {key!r}")
                    kwargs[_SECTIONS[key][option]] = option_value
            elif key in field_names:
                kwargs[key] = value
            else:
                raise ConfigurationError(f"Unknown option {key!r}")

        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Flat mapping with enums as their names."""
        result = {f.name: getattr(self, f.name) for f in fields(self)}
        result['pixeldist_alg'] = self.pixeldist_alg.value
        result['clustering_alg'] = self.clustering_alg.value
        result['device'] = str(self.device)
        return result
