"""
Device selection for tensor computation.

Clusterers keep their pixel tensors on one device; these helpers resolve a
user-supplied device specification to a torch.device.
"""

from typing import Optional, Union
import torch
import warnings

from ..base.errors import ConfigurationError


def _mps_available() -> bool:
    return hasattr(torch.backends, 'mps') and torch.backends.mps.is_available()


def get_default_device() -> torch.device:
    """Best available device: cuda, then mps, else cpu."""
    if torch.cuda.is_available():
        return torch.device('cuda')
    if _mps_available():
        return torch.device('mps')
    return torch.device('cpu')


def parse_device(device: Optional[Union[str, torch.device]] = None) -> torch.device:
    """Resolve a device specification.

    Args:
        device: None or 'auto' for the best available device, 'cpu',
            'cuda' / 'cuda:X', 'mps', or a torch.device used as-is.
            Requests for an accelerator that is not present fall back to
            the CPU with a warning.

    Returns:
        Resolved device

    Raises:
        ConfigurationError: If the specification is not recognised
    """
    if isinstance(device, torch.device):
        return device

    if device is None or device == 'auto':
        return get_default_device()

    if device == 'cpu':
        return torch.device('cpu')

    if isinstance(device, str) and device.startswith('cuda'):
        if torch.cuda.is_available():
            return torch.device(device)
        return _fallback(device)

    if device == 'mps':
        return torch.device('mps') if _mps_available() else _fallback(device)

    raise ConfigurationError(f"Unknown device specification: {device!r}")


def _fallback(requested: str) -> torch.device:
    warnings.warn(f"{requested} not available, falling back to CPU")
    return torch.device('cpu')
