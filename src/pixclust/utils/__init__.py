"""Utility functions for pixclust."""

from .validation import (
    check_image_size,
    check_pixel_array,
    check_tolerance,
    check_max_k,
    check_connectivity,
    check_unit_interval,
    check_random_state,
    raster_coordinate
)

from .device import (
    get_default_device,
    parse_device
)

from .convergence import (
    MAX_CYCLES,
    AssignmentStability,
    OscillationGuard,
    is_two_cycle
)

from .metrics import (
    silhouette_samples,
    silhouette_score,
    within_cluster_distance
)

__all__ = [
    # Validation
    'check_image_size',
    'check_pixel_array',
    'check_tolerance',
    'check_max_k',
    'check_connectivity',
    'check_unit_interval',
    'check_random_state',
    'raster_coordinate',

    # Device management
    'get_default_device',
    'parse_device',

    # Convergence criteria
    'MAX_CYCLES',
    'AssignmentStability',
    'OscillationGuard',
    'is_two_cycle',

    # Metrics
    'silhouette_samples',
    'silhouette_score',
    'within_cluster_distance'
]
