from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Tuple
import numpy as np

from models.errors import InvalidDimensions


@dataclass
class PixelBuffer:
    """
    Simple data object: RGBA pixels (+ optional source path for bookkeeping).
    No codec logic outside the image repository.
    """
    pixels: np.ndarray # Shape (H, W, 4), dtype uint8, RGBA order, top-left origin.
    path: Path | None = None # Source of the image.

    def __post_init__(self):
        if not isinstance(self.pixels, np.ndarray):
            raise ValueError(f"pixels must be a numpy array, got {type(self.pixels).__name__}")
        if self.pixels.dtype != np.uint8:
            raise ValueError(f"pixels must be uint8, got {self.pixels.dtype}")
        if self.pixels.ndim != 3 or self.pixels.shape[2] != 4:
            raise ValueError(f"pixels must have shape (H, W, 4), got {self.pixels.shape}")
        if self.pixels.shape[0] < 1 or self.pixels.shape[1] < 1:
            raise InvalidDimensions(
                f"buffer must be at least 1x1, got {self.pixels.shape[1]}x{self.pixels.shape[0]}"
            )

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    def pixel_at(self, x: int, y: int) -> Tuple[int, int, int, int]:
        r, g, b, a = self.pixels[y, x]
        return int(r), int(g), int(b), int(a)

    def to_flat_bytes(self) -> bytes:
        """Row-major R,G,B,A bytes, length width * height * 4."""
        return np.ascontiguousarray(self.pixels).tobytes()

    @classmethod
    def from_rgba_list(
        cls,
        width: int,
        height: int,
        pixels: Iterable[Tuple[int, int, int, int]],
    ) -> "PixelBuffer":
        """
        Build a buffer from row-major (R, G, B, A) tuples.
        """
        if width < 1 or height < 1:
            raise InvalidDimensions(f"buffer must be at least 1x1, got {width}x{height}")
        arr = np.asarray(list(pixels), dtype=np.int64)
        if arr.shape != (width * height, 4):
            raise ValueError(f"expected {width * height} RGBA tuples, got array of shape {arr.shape}")
        if arr.min() < 0 or arr.max() > 255:
            raise ValueError("channel values must lie in [0, 255]")
        return cls(pixels=arr.astype(np.uint8).reshape(height, width, 4))
