# tests/utils.py
"""
Small, reusable helpers used across the pixclust test suite.

Functions:
- assert_valid_partition(partition, width, height): exhaustive, disjoint, consistent views.
- partition_blocks(partition): the partition as a set of frozensets of coordinates.
- same_partition(p, q): equality up to cluster id renaming.
- time_block(label, meta=None): context manager that prints wall-clock time with optional metadata.
- print_timing(label, seconds, **meta): convenience printer for timings (used by time_block).
"""

from __future__ import annotations

import json
import time
from contextlib import contextmanager
from typing import Any, Dict, FrozenSet, Set, Tuple

Coordinate = Tuple[int, int]


def assert_valid_partition(partition, width: int, height: int) -> None:
    """
    Check both partition views against each other and the image grid.

    Every coordinate maps to exactly one cluster, that cluster contains it,
    member sets are pairwise disjoint and together cover the whole image.
    """
    expected = {(x, y) for y in range(height) for x in range(width)}

    assert set(partition.cluster_of) == expected

    seen: Set[Coordinate] = set()
    for cid, members in partition.members_of.items():
        assert members, f"cluster {cid} is empty"
        assert not (seen & set(members)), f"cluster {cid} overlaps another cluster"
        seen |= set(members)
        for coord in members:
            assert partition.cluster_of[coord] == cid

    assert seen == expected
    assert partition.n_clusters == len(partition.members_of)


def partition_blocks(partition) -> Set[FrozenSet[Coordinate]]:
    """The partition as a set of member sets, ignoring cluster ids."""
    return {frozenset(members) for members in partition.members_of.values()}


def same_partition(p, q) -> bool:
    """True if p and q group pixels identically (cluster ids may differ)."""
    return partition_blocks(p) == partition_blocks(q)


@contextmanager
def time_block(label: str, meta: Dict[str, Any] | None = None):
    """
    Context manager to time a block and print a single-line summary.

    Example
    -------
    >>> with time_block("fit", {"w": 32, "h": 32, "max_k": 4}):
    ...     clusterer.fit(image)

    Output
    ------
    [timing] fit {"w":32,"h":32,"max_k":4} 0.123s
    """
    t0 = time.perf_counter()
    try:
        yield
    finally:
        dt = time.perf_counter() - t0
        print_timing(label, dt, **(meta or {}))


def print_timing(label: str, seconds: float, **meta: Any) -> None:
    """
    Print timing in a compact, machine-readable single line.

    Example:
    [timing] fit {"w":32,"h":32,"max_k":4} 0.123s
    """
    meta_str = ""
    if meta:
        meta_str = " " + json.dumps(meta, separators=(",", ":"), default=repr)
    print(f"[timing] {label}{meta_str} {seconds:.3f}s")
