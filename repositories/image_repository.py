import base64
import binascii
import logging
import re
from io import BytesIO
from pathlib import Path
from typing import Union

import cv2
import numpy as np
from PIL import Image as PILImage

from models.errors import DecodeFailure, EncodeFailure
from models.pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)

_DATA_URL_RE = re.compile(r"^data:(?P<mime>[\w/+.-]*)(?P<params>(;[\w=.-]+)*?);base64,(?P<payload>.*)$", re.DOTALL)


class ImageRepository:
    """
    Handles decode/encode and file I/O for PixelBuffer entities.
    Decode goes through OpenCV, encode through Pillow.
    """

    # ---------- private helpers ----------
    @staticmethod
    def _to_rgba(arr: np.ndarray) -> np.ndarray:
        """
        Normalise whatever cv2 handed back to (H, W, 4) uint8 RGBA.
        """
        if arr.dtype == np.uint16:
            arr = (arr >> 8).astype(np.uint8)
        elif arr.dtype != np.uint8:
            raise DecodeFailure(f"Unsupported pixel depth: {arr.dtype}")

        if arr.ndim == 2:
            return cv2.cvtColor(arr, cv2.COLOR_GRAY2RGBA)
        channels = arr.shape[2]
        if channels == 1:
            return cv2.cvtColor(arr[:, :, 0], cv2.COLOR_GRAY2RGBA)
        if channels == 3:
            return cv2.cvtColor(arr, cv2.COLOR_BGR2RGBA)
        if channels == 4:
            return cv2.cvtColor(arr, cv2.COLOR_BGRA2RGBA)
        raise DecodeFailure(f"Unsupported channel count: {channels}")

    @staticmethod
    def _split_data_url(data_url: str) -> bytes:
        match = _DATA_URL_RE.match(data_url.strip())
        if match is None:
            raise DecodeFailure("Not a base64 data URL")
        try:
            # payload may be line-wrapped
            payload = re.sub(r"\s+", "", match.group("payload"))
            return base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as err:
            raise DecodeFailure(f"Corrupt base64 payload: {err}") from err

    # ---------- public API ----------
    def decode(self, data: bytes) -> PixelBuffer:
        if not data:
            raise DecodeFailure("Empty image data")
        arr = cv2.imdecode(np.frombuffer(data, dtype=np.uint8), cv2.IMREAD_UNCHANGED)
        if arr is None:
            raise DecodeFailure("Image data is corrupt or in an unsupported format")
        return PixelBuffer(pixels=self._to_rgba(arr))

    def decode_data_url(self, data_url: str) -> PixelBuffer:
        return self.decode(self._split_data_url(data_url))

    def load(self, path: Union[str, Path]) -> PixelBuffer:
        path = Path(path)
        if not path.is_file():
            raise DecodeFailure(f"Image not found: {path}")

        arr = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
        if arr is None:
            raise DecodeFailure(f"Image unreadable: {path}")

        buf = PixelBuffer(pixels=self._to_rgba(arr), path=path)
        logger.debug(f"Loaded {path} ({buf.width}x{buf.height})")
        return buf

    @staticmethod
    def encode_png(buf: PixelBuffer) -> bytes:
        """Lossless RGBA PNG bytes."""
        try:
            pil_image = PILImage.fromarray(np.ascontiguousarray(buf.pixels))
            buffer = BytesIO()
            pil_image.save(buffer, format="PNG")
        except (OSError, ValueError, TypeError) as err:
            raise EncodeFailure(f"PNG encode failed: {err}") from err
        return buffer.getvalue()

    def save(self, buf: PixelBuffer) -> None:
        if buf.path is None:
            raise EncodeFailure("Buffer has no destination path")
        data = self.encode_png(buf)
        try:
            Path(buf.path).write_bytes(data)
        except OSError as err:
            raise EncodeFailure(f"Could not write {buf.path}: {err}") from err

