"""Shared pytest fixtures for sprite pipeline tests."""

from io import BytesIO

import numpy as np
import pytest
from PIL import Image as PILImage

from models.pixel_buffer import PixelBuffer

RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)
BLUE = (0, 0, 255, 255)
YELLOW = (255, 255, 0, 255)
GRAY = (200, 200, 200, 255)


def encode_png(pixels: np.ndarray) -> bytes:
    """PNG-encode an array with Pillow, independently of the code under test."""
    buffer = BytesIO()
    PILImage.fromarray(pixels).save(buffer, format="PNG")
    return buffer.getvalue()


def solid(width: int, height: int, color) -> PixelBuffer:
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[:, :] = color
    return PixelBuffer(pixels=pixels)


# =============================================================================
# Buffer Fixtures
# =============================================================================


@pytest.fixture
def quad_buffer() -> PixelBuffer:
    """2x2: red, green / blue, yellow."""
    return PixelBuffer.from_rgba_list(2, 2, [RED, GREEN, BLUE, YELLOW])


@pytest.fixture
def green_pixel() -> PixelBuffer:
    return solid(1, 1, GREEN)


@pytest.fixture
def gray_backdrop_sprite() -> PixelBuffer:
    """
    64x64 light-gray background with two subject blocks, both further than
    60 RGB units from the gray.
    """
    buf = solid(64, 64, GRAY)
    buf.pixels[16:48, 16:32] = (200, 50, 50, 255)   # distance ~212
    buf.pixels[16:48, 32:48] = (120, 200, 200, 255)  # distance 80
    return buf


@pytest.fixture
def palette_source() -> PixelBuffer:
    """Large non-square buffer drawn from a small fixed palette."""
    rng = np.random.default_rng(7)
    palette = np.array(
        [RED, GREEN, BLUE, YELLOW, GRAY, (12, 34, 56, 128)], dtype=np.uint8
    )
    idx = rng.integers(0, len(palette), size=(300, 517))
    return PixelBuffer(pixels=palette[idx])


@pytest.fixture
def png_bytes(gray_backdrop_sprite) -> bytes:
    return encode_png(gray_backdrop_sprite.pixels)
