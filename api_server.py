#!/usr/bin/env python3
"""
Pixel Sprite API Server
Upload an image, get back a square pixel-art sprite as a PNG data URL.
"""

import os
import logging
from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from flask import Flask, request, jsonify
from flask_cors import CORS
from werkzeug.exceptions import RequestEntityTooLarge
from werkzeug.utils import secure_filename

# --- Centralized Logging Configuration ---
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
    datefmt='%H:%M:%S'
)

from models.errors import DecodeFailure, EncodeFailure, InvalidDimensions
from models.process_options import ProcessOptions
from pipeline.sprite_processor import process_encoded_to_sprite
from pipeline.sprite_exporter import sprite_filename
from services.image_service import ImageService

app = Flask(__name__)
CORS(app)  # Enable CORS for frontend communication

# Configuration
DEFAULT_TARGET_SIZE = int(os.getenv("SPRITE_TARGET_SIZE", "64"))
MAX_SPRITE_SIZE = int(os.getenv("MAX_SPRITE_SIZE", "1024"))
MAX_CONTENT_LENGTH = int(os.getenv("MAX_UPLOAD_SIZE_MB", "20")) * 1024 * 1024

app.config['MAX_CONTENT_LENGTH'] = MAX_CONTENT_LENGTH

# Initialize services
image_service = ImageService()

logger = logging.getLogger(__name__)

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def parse_bool(value, default: bool) -> bool:
    """Parse an HTML-form style boolean."""
    if value is None or value == "":
        return default
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ValueError(f"Invalid boolean value: {value!r}")


def parse_options(form) -> ProcessOptions:
    """Build ProcessOptions from request form fields."""
    raw_size = form.get('target_size')
    try:
        target_size = int(raw_size) if raw_size not in (None, "") else DEFAULT_TARGET_SIZE
    except ValueError:
        raise ValueError(f"target_size must be an integer, got {raw_size!r}")
    if target_size > MAX_SPRITE_SIZE:
        raise ValueError(f"target_size must be at most {MAX_SPRITE_SIZE}, got {target_size}")

    return ProcessOptions(
        remove_background=parse_bool(form.get('remove_background'), default=True),
        target_size=target_size,
    )


def error_response(message: str, status: int):
    return jsonify({'success': False, 'message': message}), status


@app.errorhandler(RequestEntityTooLarge)
def upload_too_large(e):
    return error_response(f'Upload exceeds {MAX_CONTENT_LENGTH // (1024 * 1024)} MB', 413)


@app.route('/api/health', methods=['GET'])
def health_check():
    """Liveness probe."""
    return jsonify({'status': 'ok'})


@app.route('/api/sprite', methods=['POST'])
def make_sprite():
    """Convert an uploaded image into a sprite."""
    if 'image' not in request.files:
        return error_response('No image provided', 400)

    file = request.files['image']
    if file.filename == '':
        return error_response('No file selected', 400)

    filename = secure_filename(file.filename)
    if not image_service.is_allowed_file(filename):
        return error_response(f'Unsupported file type: {filename}', 400)

    try:
        options = parse_options(request.form)
    except ValueError as e:
        return error_response(str(e), 400)

    try:
        data_url = process_encoded_to_sprite(file.read(), options, image_service=image_service)
    except InvalidDimensions as e:
        return error_response(str(e), 400)
    except DecodeFailure as e:
        logger.warning(f"Decode failed for {filename}: {e}")
        return error_response(f'Could not decode image: {e}', 422)
    except EncodeFailure as e:
        logger.error(f"Encode failed for {filename}: {e}")
        return error_response('Error encoding sprite', 500)

    return jsonify({
        'success': True,
        'sprite': data_url,
        'filename': sprite_filename(request.form.get('prompt', ''), options.target_size),
        'width': options.target_size,
        'height': options.target_size,
        'background_removed': options.remove_background,
    })


if __name__ == '__main__':
    print("🚀 Starting Pixel Sprite API Server...")
    print(f"🔧 Max upload size: {MAX_CONTENT_LENGTH // (1024*1024)}MB")
    print(f"🎯 Default sprite size: {DEFAULT_TARGET_SIZE}x{DEFAULT_TARGET_SIZE}")
    print("🌐 CORS enabled for frontend communication")
    print("="*60)

    app.run(debug=False, host='0.0.0.0', port=int(os.getenv("API_SERVER_PORT", "5002")))
