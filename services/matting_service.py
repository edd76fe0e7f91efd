# services/matting_service.py
import logging

import numpy as np

from models.errors import InvalidDimensions
from models.pixel_buffer import PixelBuffer
from models.process_options import ReferenceColor

logger = logging.getLogger(__name__)

CHROMA_TOLERANCE = 40.0  # Euclidean RGB distance


class MattingService:
    """
    Single-reference chroma key.

    • Reference colour is pixel (0, 0), sampled once per pass.
    • Any pixel closer than CHROMA_TOLERANCE in RGB gets alpha 0.
    • RGB is left untouched; there is no connectivity check, so
      background-coloured pixels inside the subject are keyed too.
    """

    tolerance: float = CHROMA_TOLERANCE

    @staticmethod
    def sample_reference(buf: PixelBuffer) -> ReferenceColor:
        if buf.pixels.size == 0:
            raise InvalidDimensions("Cannot sample a reference colour from an empty buffer")
        return ReferenceColor(*buf.pixel_at(0, 0))

    @staticmethod
    def color_distance(buf: PixelBuffer, reference: ReferenceColor) -> np.ndarray:
        """
        Returns
        -------
        dist : np.ndarray  (H, W)  float64, RGB distance to the reference
        """
        rgb = buf.pixels[:, :, :3].astype(np.float64)
        ref = np.array(reference.rgb(), dtype=np.float64)
        return np.sqrt(((rgb - ref) ** 2).sum(axis=2))

    # --------------------------------------------------------------
    def remove_background(self, buf: PixelBuffer) -> PixelBuffer:
        """
        Zero the alpha of every background-coloured pixel, in place.
        Returns the same buffer for chaining.
        """
        reference = self.sample_reference(buf)
        mask = self.color_distance(buf, reference) < self.tolerance
        buf.pixels[:, :, 3][mask] = 0

        logger.debug(
            f"Keyed {int(mask.sum())}/{mask.size} pixels against "
            f"({reference.r},{reference.g},{reference.b})"
        )
        return buf
