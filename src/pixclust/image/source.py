"""
In-memory image source.

PixelGrid wraps an already-decoded (H, W, 4) or (H, W, 3) pixel array so it
can be handed to the clusterers. Decoding files is left to the caller.
"""

from typing import Optional, Union
import torch
from torch import Tensor
import numpy as np

from ..base.interfaces import ImageSource
from ..base.data_structures import Pixel
from ..utils.validation import check_pixel_array


class PixelGrid(ImageSource):
    """Image backed by a (H, W, 4) uint8 tensor."""

    def __init__(self, pixels: Union[Tensor, np.ndarray, list], name: str = 'image'):
        """
        Args:
            pixels: (H, W, 4) RGBA or (H, W, 3) RGB array with values in 0..255
            name: Identifier reported in diagnostics
        """
        self._grid = check_pixel_array(pixels)
        self._name = name
        self._flat: Optional[Tensor] = None

    @classmethod
    def from_rows(cls, rows, name: str = 'image') -> 'PixelGrid':
        """Build from nested rows of (r, g, b, a) tuples, ``rows[y][x]``."""
        return cls(torch.tensor(rows, dtype=torch.int64), name=name)

    @property
    def name(self) -> str:
        return self._name

    @property
    def width(self) -> int:
        return self._grid.shape[1]

    @property
    def height(self) -> int:
        return self._grid.shape[0]

    def get(self, x: int, y: int) -> Pixel:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"({x}, {y}) is outside {self.width}x{self.height} image")
        return Pixel(*self._grid[y, x].tolist())

    def to_tensor(self) -> Tensor:
        if self._flat is None:
            self._flat = self._grid.reshape(-1, 4).to(torch.float32)
        return self._flat

    def to_numpy(self) -> np.ndarray:
        """(H, W, 4) uint8 copy of the pixels."""
        return self._grid.numpy().copy()

    def __repr__(self) -> str:
        return f"PixelGrid(name={self._name!r}, width={self.width}, height={self.height})"
