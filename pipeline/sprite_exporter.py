from __future__ import annotations
import os
import re
import logging
from pathlib import Path

from dotenv import load_dotenv

from models.pixel_buffer import PixelBuffer
from services.image_service import ImageService

# Load environment variables
load_dotenv()

OUTPUT_DIR = os.getenv("SPRITE_OUTPUT_DIR", "data/sprites")

logger = logging.getLogger(__name__)

_UNSAFE = re.compile(r"[^a-z0-9]")


def sprite_filename(prompt: str, size: int) -> str:
    """
    Download name for a sprite, e.g. "red_dragon_64x64.png".
    Every character outside [a-z0-9] becomes an underscore.
    """
    safe_name = _UNSAFE.sub("_", (prompt or "").strip().lower()) or "sprite"
    return f"{safe_name}_{size}x{size}.png"


def export_sprite(
    sprite: PixelBuffer,
    *,
    prompt: str = "",
    output_dir: str | Path = OUTPUT_DIR,
    image_service: ImageService = None,
) -> Path:
    """
    Write the sprite as PNG under *output_dir* and return the path.
    """
    image_service = image_service or ImageService()

    path = Path(output_dir) / sprite_filename(prompt, sprite.width)
    sprite.path = path
    image_service.save(sprite)

    logger.info(f"Sprite saved to {path}")
    return path
