from pathlib import Path
from typing import Union
import base64
import os
import logging

from dotenv import load_dotenv

from models.errors import DecodeFailure, EncodeFailure
from models.pixel_buffer import PixelBuffer
from repositories.image_repository import ImageRepository

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

_DEFAULT_EXTS = ".png,.jpg,.jpeg,.gif,.bmp,.webp"


class ImageService:
    """Codec helpers.  No pixel-art logic here."""
    def __init__(self):
        self.VALID_EXTS = {
            ext.strip().lower()
            for ext in os.getenv("VALID_IMAGE_EXTENSIONS", _DEFAULT_EXTS).split(",")
            if ext.strip()
        }
        self.image_repository = ImageRepository()

    def is_allowed_file(self, filename: str) -> bool:
        """Check the extension against VALID_IMAGE_EXTENSIONS."""
        return Path(filename).suffix.lower() in self.VALID_EXTS

    def load(self, path: Union[str, Path]) -> PixelBuffer:
        """Load a single image from disk into a PixelBuffer."""
        if not self.is_allowed_file(str(path)):
            raise DecodeFailure(f"Unsupported image extension: {Path(path).suffix or '(none)'}")
        return self.image_repository.load(path)

    def decode_source(self, source: Union[bytes, str, Path]) -> PixelBuffer:
        """
        Materialise an encoded image into a PixelBuffer.

        Args:
            source: raw encoded bytes, a ``data:`` URL, or a filesystem path.
        Returns:
            PixelBuffer in RGBA order.
        Raises:
            DecodeFailure: when nothing usable could be decoded.
        """
        if isinstance(source, (bytes, bytearray, memoryview)):
            return self.image_repository.decode(bytes(source))
        if isinstance(source, str) and source.lstrip().startswith("data:"):
            return self.image_repository.decode_data_url(source)
        if isinstance(source, (str, Path)):
            return self.load(source)
        raise DecodeFailure(f"Cannot decode source of type {type(source).__name__}")

    def encode_png(self, buf: PixelBuffer) -> bytes:
        return self.image_repository.encode_png(buf)

    def to_data_url(self, buf: PixelBuffer) -> str:
        """
        Encode a buffer as a PNG ``data:`` URL for JSON responses.
        """
        base64_string = base64.b64encode(self.encode_png(buf)).decode("utf-8")
        return f"data:image/png;base64,{base64_string}"

    def save(self, buf: PixelBuffer) -> None:
        """
        Business-level method to save the buffer to its path as PNG.
        """
        if buf.path is not None:
            try:
                Path(buf.path).parent.mkdir(parents=True, exist_ok=True)
            except OSError as err:
                raise EncodeFailure(f"Could not create {Path(buf.path).parent}: {err}") from err
        self.image_repository.save(buf)

