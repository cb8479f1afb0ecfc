"""
Colour distance between RGBA pixels.

Every distance is normalised to [0, 1]. When both pixels carry colour
(non-zero alpha) the distance is computed over RGB; as soon as either pixel
is fully transparent its colour channels are meaningless and the distance
degrades to the alpha difference.

Both a scalar form (single pixel pairs) and a broadcasting tensor form are
provided. The tensor form drives the vectorised code paths: adjacency
distances, seeding, assignment, recentring and the silhouette score.
"""

from enum import Enum
import math
from typing import Dict, Sequence, Union
import torch
from torch import Tensor

from ..base.errors import ConfigurationError


# Theoretical maximum of the squared-difference sums used for normalisation
EUCLIDEAN_MAX_SQ = 3.0 * 255.0 ** 2    # 195075
REDMEAN_MAX_SQ = 9.0 * 255.0 ** 2      # 585225


class PixeldistAlg(Enum):
    """Pixel distance algorithm."""
    EUCLIDEAN = 'euclidean'
    REDMEAN = 'redmean'


PIXELDIST_ALG_ALIASES: Dict[str, PixeldistAlg] = {
    'euclidean': PixeldistAlg.EUCLIDEAN,
    'redmean': PixeldistAlg.REDMEAN,
}


def parse_pixeldist_alg(value: Union[str, PixeldistAlg]) -> PixeldistAlg:
    """Resolve a pixel distance algorithm from its name (case-insensitive).

    Raises:
        ConfigurationError: If the name matches no known algorithm
    """
    if isinstance(value, PixeldistAlg):
        return value
    try:
        return PIXELDIST_ALG_ALIASES[str(value).strip().lower()]
    except KeyError:
        raise ConfigurationError(
            f"Unknown pixel distance algorithm {value!r}; expected one of "
            f"{sorted(PIXELDIST_ALG_ALIASES)}"
        ) from None


# ----------------------------------------------------------------------
# Scalar form
# ----------------------------------------------------------------------
def alpha_only_dist(a_a: int, a_b: int) -> float:
    """Distance between two alpha values, |a_a - a_b| / 255."""
    return abs(int(a_a) - int(a_b)) / 255.0


def euclidean(pixel_a: Sequence[int], pixel_b: Sequence[int]) -> float:
    """Normalised Euclidean distance over RGB.

    Returns ``sqrt(sum(dC^2) / (3 * 255^2))`` when both pixels have non-zero
    alpha, otherwise the alpha-only distance.
    """
    if pixel_a[3] != 0 and pixel_b[3] != 0:
        sq = sum((int(pixel_a[c]) - int(pixel_b[c])) ** 2 for c in range(3))
        return min(math.sqrt(sq / EUCLIDEAN_MAX_SQ), 1.0)
    return alpha_only_dist(pixel_a[3], pixel_b[3])


def redmean(pixel_a: Sequence[int], pixel_b: Sequence[int]) -> float:
    """Normalised "redmean" distance, a cheap perceptual approximation.

    The red and blue differences are weighted by the mean red level of the
    two pixels, green is weighted by 4.
    """
    if pixel_a[3] != 0 and pixel_b[3] != 0:
        ar, ag, ab = (float(c) for c in pixel_a[:3])
        br, bg, bb = (float(c) for c in pixel_b[:3])
        rmean = (ar + br) / 2.0

        r_multiple = 2.0 + rmean / 256.0
        g_multiple = 4.0
        b_multiple = 2.0 + (255.0 - rmean) / 256.0

        weighted = (r_multiple * (ar - br) ** 2
                    + g_multiple * (ag - bg) ** 2
                    + b_multiple * (ab - bb) ** 2)
        return min(math.sqrt(weighted / REDMEAN_MAX_SQ), 1.0)
    return alpha_only_dist(pixel_a[3], pixel_b[3])


def get_pixeldist(pixel_a: Sequence[int], pixel_b: Sequence[int],
                  pixeldist_alg: Union[str, PixeldistAlg] = PixeldistAlg.EUCLIDEAN) -> float:
    """Distance between two RGBA pixels using the chosen algorithm."""
    alg = parse_pixeldist_alg(pixeldist_alg)
    if alg is PixeldistAlg.REDMEAN:
        return redmean(pixel_a, pixel_b)
    return euclidean(pixel_a, pixel_b)


# ----------------------------------------------------------------------
# Tensor form
# ----------------------------------------------------------------------
def pixel_distance_tensor(a: Tensor, b: Tensor,
                          pixeldist_alg: Union[str, PixeldistAlg] = PixeldistAlg.EUCLIDEAN) -> Tensor:
    """Pixel distance over broadcastable (..., 4) RGBA tensors.

    Args:
        a: (..., 4) tensor of RGBA values in 0..255
        b: (..., 4) tensor broadcastable against ``a``
        pixeldist_alg: Distance algorithm

    Returns:
        Tensor of the broadcast shape without the channel axis, values in [0, 1]
    """
    alg = parse_pixeldist_alg(pixeldist_alg)
    a = a.to(torch.float32)
    b = b.to(torch.float32)

    delta = a[..., :3] - b[..., :3]
    sq = delta * delta

    if alg is PixeldistAlg.REDMEAN:
        rmean = (a[..., 0] + b[..., 0]) / 2.0
        weighted = ((2.0 + rmean / 256.0) * sq[..., 0]
                    + 4.0 * sq[..., 1]
                    + (2.0 + (255.0 - rmean) / 256.0) * sq[..., 2])
        colour = torch.sqrt(weighted / REDMEAN_MAX_SQ)
    else:
        colour = torch.sqrt(sq.sum(dim=-1) / EUCLIDEAN_MAX_SQ)

    alpha = torch.abs(a[..., 3] - b[..., 3]) / 255.0
    has_colour = (a[..., 3] != 0) & (b[..., 3] != 0)

    return torch.where(has_colour, colour, alpha).clamp(0.0, 1.0)


def pixel_distance_matrix(a: Tensor, b: Tensor,
                          pixeldist_alg: Union[str, PixeldistAlg] = PixeldistAlg.EUCLIDEAN) -> Tensor:
    """Pairwise distances between two pixel sets.

    Args:
        a: (m, 4) pixels
        b: (n, 4) pixels

    Returns:
        (m, n) distance matrix
    """
    return pixel_distance_tensor(a.unsqueeze(1), b.unsqueeze(0), pixeldist_alg)
