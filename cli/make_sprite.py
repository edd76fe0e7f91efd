#!/usr/bin/env python3
"""
Pixel Sprite CLI
Convert one image on disk into a square pixel-art sprite PNG.
"""

import os
import sys
import logging
import argparse
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from models.errors import SpriteProcessingError
from models.process_options import ProcessOptions
from pipeline.sprite_processor import process_image_to_sprite
from pipeline.sprite_exporter import OUTPUT_DIR, export_sprite
from services.image_service import ImageService

DEFAULT_TARGET_SIZE = int(os.getenv("SPRITE_TARGET_SIZE", "64"))

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="pixel-sprite",
        description="Downscale an image to a sharp square sprite and key out its background.",
    )
    ap.add_argument("input", help="source image (png, jpg, ...)")
    ap.add_argument("-o", "--output", default=None,
                    help="output PNG path (default: <output-dir>/<prompt>_<N>xN.png)")
    ap.add_argument("--output-dir", default=OUTPUT_DIR,
                    help="directory used when --output is not given")
    ap.add_argument("--size", type=int, default=DEFAULT_TARGET_SIZE,
                    help="sprite edge length in pixels")
    ap.add_argument("--keep-background", action="store_true",
                    help="skip chroma-key background removal")
    ap.add_argument("--prompt", default="",
                    help="text used to name the output file")
    ap.add_argument("-v", "--verbose", action="store_true",
                    help="debug logging")
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else os.getenv("LOG_LEVEL", "INFO").upper(),
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )

    image_service = ImageService()
    options = ProcessOptions(
        remove_background=not args.keep_background,
        target_size=args.size,
    )

    try:
        source = image_service.load(args.input)
        sprite = process_image_to_sprite(source, options)

        if args.output:
            sprite.path = Path(args.output)
            image_service.save(sprite)
            out_path = sprite.path
        else:
            out_path = export_sprite(
                sprite,
                prompt=args.prompt or Path(args.input).stem,
                output_dir=args.output_dir,
                image_service=image_service,
            )
    except SpriteProcessingError as err:
        logger.error(f"{type(err).__name__}: {err}")
        return 1

    print(f"Sprite written: {out_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
