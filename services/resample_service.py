# services/resample_service.py
import logging
import numbers

import numpy as np

from models.errors import InvalidDimensions
from models.pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)


class ResampleService:
    """
    Nearest-neighbour downscaling to a square sprite.

    • Each destination pixel is a verbatim copy of one source pixel.
    • No averaging, so no colour outside the source palette appears.
    """

    @staticmethod
    def _check_size(target_size) -> int:
        if isinstance(target_size, bool) or not isinstance(target_size, numbers.Integral):
            raise InvalidDimensions(f"target_size must be an integer, got {target_size!r}")
        if target_size < 1:
            raise InvalidDimensions(f"target_size must be positive, got {target_size}")
        return int(target_size)

    @staticmethod
    def _source_indices(src_len: int, target_size: int) -> np.ndarray:
        """
        floor(d * src_len / target_size) for every destination index d,
        clamped to the last source index.
        """
        dst = np.arange(target_size, dtype=np.int64)
        return np.minimum(dst * src_len // target_size, src_len - 1)

    # --------------------------------------------------------------
    def resample(self, buf: PixelBuffer, target_size: int) -> PixelBuffer:
        size = self._check_size(target_size)
        src_h, src_w = buf.pixels.shape[:2]
        if src_w < 1 or src_h < 1:
            raise InvalidDimensions(f"source must be at least 1x1, got {src_w}x{src_h}")

        ys = self._source_indices(src_h, size)
        xs = self._source_indices(src_w, size)

        # fancy indexing returns a fresh array; the source is never touched
        out = np.ascontiguousarray(buf.pixels[ys[:, None], xs[None, :]])
        logger.debug(f"Resampled {src_w}x{src_h} -> {size}x{size}")
        return PixelBuffer(pixels=out)
