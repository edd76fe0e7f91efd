"""
Sprite Processor Pipeline
Turns an arbitrary-resolution image into a square pixel-art sprite:
nearest-neighbour downscale, then an optional corner-sampled chroma key.
"""

import logging
from pathlib import Path
from typing import Union

from models.pixel_buffer import PixelBuffer
from models.process_options import ProcessOptions
from services.image_service import ImageService
from services.matting_service import MattingService
from services.resample_service import ResampleService

logger = logging.getLogger(__name__)


def process_image_to_sprite(
    source: PixelBuffer,
    options: ProcessOptions,
    *,
    resample_service: ResampleService = ResampleService(),
    matting_service: MattingService = MattingService(),
) -> PixelBuffer:
    """
    Run the pixel pipeline over a decoded buffer.

    The source buffer is left untouched; the resampled buffer is owned by
    this call and handed to the matting step, which edits its alpha in place.

    Args:
        source: Decoded RGBA buffer of any size
        options: Background removal flag and target size

    Returns:
        PixelBuffer: target_size x target_size RGBA sprite
    """
    sprite = resample_service.resample(source, options.target_size)

    if options.remove_background:
        matting_service.remove_background(sprite)

    logger.info(
        f"Sprite ready: {source.width}x{source.height} -> {sprite.width}x{sprite.height} "
        f"(background {'removed' if options.remove_background else 'kept'})"
    )
    return sprite


def process_encoded_to_sprite(
    source: Union[bytes, str, Path],
    options: ProcessOptions,
    *,
    image_service: ImageService = None,
    resample_service: ResampleService = ResampleService(),
    matting_service: MattingService = MattingService(),
) -> str:
    """
    Decode -> process -> encode, end to end.

    Args:
        source: Encoded image bytes, a data URL, or a file path
        options: Background removal flag and target size

    Returns:
        str: ``data:image/png;base64,...`` URL of the finished sprite

    Raises:
        DecodeFailure: the source could not be decoded
        InvalidDimensions: target_size is not a positive integer
        EncodeFailure: the finished sprite could not be serialised
    """
    image_service = image_service or ImageService()

    buf = image_service.decode_source(source)
    logger.info(f"Decoded source: {buf.width}x{buf.height}")

    sprite = process_image_to_sprite(
        buf,
        options,
        resample_service=resample_service,
        matting_service=matting_service,
    )
    return image_service.to_data_url(sprite)
