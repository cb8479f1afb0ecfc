"""
Exception types raised by pixclust.

Every failure surfaced to callers derives from PixclustError, so a caller
can catch the whole family with a single except clause.
"""


class PixclustError(Exception):
    """Base class for all pixclust errors."""


class ConfigurationError(PixclustError, ValueError):
    """Invalid clustering configuration or unusable input image.

    Raised for an out-of-range tolerance or max_k, unknown algorithm names,
    zero-size images and images too small for the requested clustering.
    """


class InternalConsistencyError(PixclustError, RuntimeError):
    """A Partition no longer describes an exhaustive, disjoint assignment.

    This indicates a bug rather than a recoverable condition and is never
    caught inside the package.
    """
