"""
Input validation utilities.

Provides the checks run before clustering: image dimensions, pixel arrays,
tolerance and max_k ranges, and random state handling.
"""

from typing import Optional, Union, Tuple
import math
import torch
from torch import Tensor
import numpy as np

from ..base.errors import ConfigurationError


def check_image_size(width: int, height: int, min_pixels: int = 1) -> None:
    """Validate image dimensions.

    Args:
        width: Image width
        height: Image height
        min_pixels: Minimum number of pixels the caller needs

    Raises:
        ConfigurationError: If the image is empty or too small
    """
    if width <= 0 or height <= 0:
        raise ConfigurationError(f"Image must be non-empty, got {width}x{height}")

    if width * height < min_pixels:
        raise ConfigurationError(f"Image has {width * height} pixels, but at least "
                                 f"{min_pixels} are needed")


def check_pixel_array(pixels: Union[Tensor, np.ndarray, list]) -> Tensor:
    """Validate and convert an image array to a (H, W, 4) uint8 tensor.

    Accepts (H, W, 3) RGB input, which is given an opaque alpha channel. The
    result never shares memory with the input.

    Raises:
        ConfigurationError: On a wrong shape, empty image or out-of-range values
    """
    if isinstance(pixels, Tensor):
        array = pixels.detach().cpu().clone()
    elif isinstance(pixels, np.ndarray):
        array = torch.from_numpy(np.array(pixels, copy=True, order='C'))
    elif isinstance(pixels, list):
        array = torch.tensor(pixels)
    else:
        raise TypeError(f"Cannot convert {type(pixels)} to a pixel tensor")

    if array.dim() != 3 or array.shape[2] not in (3, 4):
        raise ConfigurationError(f"Expected (H, W, 3) or (H, W, 4) pixels, "
                                 f"got shape {tuple(array.shape)}")

    height, width = array.shape[0], array.shape[1]
    check_image_size(width, height)

    if array.is_floating_point() and not torch.isfinite(array).all():
        raise ConfigurationError("Pixels contain NaN or infinite values")
    if (array < 0).any() or (array > 255).any():
        raise ConfigurationError("Pixel channels must lie in 0..255")

    array = array.to(torch.uint8)
    if array.shape[2] == 3:
        alpha = torch.full((height, width, 1), 255, dtype=torch.uint8)
        array = torch.cat([array, alpha], dim=2)

    return array.contiguous()


def check_tolerance(tolerance: float) -> float:
    """Validate the agglomerative tolerance, which must lie in (0, 1].

    Raises:
        ConfigurationError: If out of range or not a number
    """
    try:
        tolerance = float(tolerance)
    except (TypeError, ValueError):
        raise ConfigurationError(f"tolerance must be a number, got {tolerance!r}") from None

    if math.isnan(tolerance) or not 0.0 < tolerance <= 1.0:
        raise ConfigurationError(f"tolerance must lie in (0, 1], got {tolerance}")
    return tolerance


def check_max_k(max_k: int, n_pixels: Optional[int] = None) -> None:
    """Validate the largest k tried by k-means.

    Args:
        max_k: Largest candidate number of clusters
        n_pixels: Number of pixels in the image, if known

    Raises:
        ConfigurationError: If max_k < 2 or exceeds the pixel count
    """
    if isinstance(max_k, bool) or not isinstance(max_k, int):
        raise ConfigurationError(f"max_k must be int, got {type(max_k).__name__}")

    if max_k < 2:
        raise ConfigurationError(f"max_k must be at least 2, got {max_k}")

    if n_pixels is not None and max_k > n_pixels:
        raise ConfigurationError(f"max_k ({max_k}) cannot be larger than "
                                 f"the number of pixels ({n_pixels})")


def check_connectivity(connectivity: int) -> int:
    """Validate pixel neighbourhood connectivity (4 or 8)."""
    if connectivity not in (4, 8):
        raise ConfigurationError(f"connectivity must be 4 or 8, got {connectivity}")
    return connectivity


def check_unit_interval(name: str, value: float, allow_zero: bool = True) -> float:
    """Validate a setting that must lie in [0, 1] (or (0, 1])."""
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from None

    low_ok = value >= 0.0 if allow_zero else value > 0.0
    if math.isnan(value) or not low_ok or value > 1.0:
        bound = '[0, 1]' if allow_zero else '(0, 1]'
        raise ConfigurationError(f"{name} must lie in {bound}, got {value}")
    return value


def check_random_state(random_state: Optional[Union[int, torch.Generator]]) -> Optional[torch.Generator]:
    """Create generator from random state.

    Args:
        random_state: Seed or generator

    Returns:
        Generator or None
    """
    if random_state is None:
        return None
    elif isinstance(random_state, torch.Generator):
        return random_state
    elif isinstance(random_state, (int, np.integer)) and not isinstance(random_state, bool):
        generator = torch.Generator()
        generator.manual_seed(int(random_state))
        return generator
    else:
        raise TypeError(f"random_state must be int or Generator, got {type(random_state)}")


def raster_coordinate(index: int, width: int) -> Tuple[int, int]:
    """(x, y) of the pixel at raster position ``index``."""
    return (index % width, index // width)
