#!/usr/bin/env python3
"""
Sticker Slicer API Server
Thin HTTP surface over the two engine entry points. Images travel as PNG
data URLs (JSON) or multipart uploads; nothing is written to disk.
"""

import os
import logging
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any, Dict
from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from flask import Flask, request, jsonify
from flask_cors import CORS

# --- Centralized Logging Configuration ---
logging.basicConfig(
    level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO),
    format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
    datefmt='%H:%M:%S'
)

from sticker_slicer.models.engine_config import EngineConfig
from sticker_slicer.models.grid import SHEET_LAYOUTS, get_sheet_layout
from sticker_slicer.models.image import Image
from sticker_slicer.services.image_service import ImageService
from sticker_slicer.pipeline.batch_runner import BatchRunner
from sticker_slicer.pipeline.icon_renderer import render_icons
from sticker_slicer.pipeline.single_cleanup import GREEN_SCREEN_HEX
from sticker_slicer.exceptions import ImageDecodeError

app = Flask(__name__)
CORS(app)  # Enable CORS for frontend communication

# Configuration
MAX_CONTENT_LENGTH = int(os.getenv("MAX_UPLOAD_SIZE_MB", "50")) * 1024 * 1024
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "60"))
DEFAULT_PADDING = int(os.getenv("STICKER_PADDING", "2"))
DEFAULT_TOLERANCE = float(os.getenv("COLOR_TOLERANCE_PERCENT", "20"))
DEFAULT_CLEANUP_TOLERANCE = float(os.getenv("CLEANUP_TOLERANCE_PERCENT", "18"))
DEFAULT_EROSION = int(os.getenv("EROSION_STRENGTH", "1"))
DEFAULT_WIDTH = int(os.getenv("OUTPUT_WIDTH", "370"))
DEFAULT_HEIGHT = int(os.getenv("OUTPUT_HEIGHT", "320"))

app.config['MAX_CONTENT_LENGTH'] = MAX_CONTENT_LENGTH

# Initialize services
image_service = ImageService()
runner = BatchRunner(max_workers=int(os.getenv("MAX_WORKERS", "4")), image_service=image_service)

logger = logging.getLogger(__name__)


def _params() -> Dict[str, Any]:
    """Request parameters from JSON body or multipart form."""
    if request.is_json:
        return request.get_json(silent=True) or {}
    return request.form.to_dict()


def _read_image(params: Dict[str, Any], field: str) -> Image:
    """Decode the uploaded file *field*, or a data URL under params['image']."""
    upload = request.files.get(field)
    if upload is not None and upload.filename != '':
        return image_service.decode(upload.read())
    data_url = params.get('image')
    if not data_url:
        raise ValueError(f"No image provided (expected '{field}' upload or 'image' data URL)")
    return image_service.from_data_url(data_url)


@app.route('/api/slice-grid', methods=['POST'])
def slice_grid_endpoint():
    """Slice a sheet into stickers."""
    try:
        params = _params()
        sheet = _read_image(params, 'sheet')

        if params.get('quantity'):
            layout = get_sheet_layout(int(params['quantity']))
            rows, cols = layout.rows, layout.cols
        else:
            rows, cols = int(params.get('rows', 0)), int(params.get('cols', 0))

        config = EngineConfig(
            padding=int(params.get('padding', DEFAULT_PADDING)),
            color_tolerance_percent=float(params.get('tolerance', DEFAULT_TOLERANCE)),
        )
        width = int(params.get('width', DEFAULT_WIDTH))
        height = int(params.get('height', DEFAULT_HEIGHT))

        logger.info(f"Slicing sheet {sheet.width}x{sheet.height} as {rows}x{cols}")
        future = runner.submit_slice(sheet, rows, cols, width, height, config=config)
        stickers = future.result(timeout=REQUEST_TIMEOUT)

        response = {
            'success': True,
            'count': len(stickers),
            'stickers': image_service.to_data_urls(stickers),
        }
        if str(params.get('icons', '')).lower() in ('1', 'true', 'yes') and stickers:
            icons = render_icons(stickers[0])
            response['icons'] = {name: image_service.to_data_url(img) for name, img in icons.items()}
        return jsonify(response)

    except (ImageDecodeError, ValueError) as e:
        logger.warning(f"Rejected slice request: {e}")
        return jsonify({'success': False, 'message': str(e)}), 400
    except FutureTimeoutError:
        logger.error("Slice request timed out")
        return jsonify({'success': False, 'message': 'Processing timed out'}), 504
    except Exception as e:
        logger.error(f"Slicing error: {e}")
        return jsonify({'success': False, 'message': 'Error slicing sheet'}), 500


@app.route('/api/cleanup', methods=['POST'])
def cleanup_endpoint():
    """Flood-fill backdrop removal for one image."""
    try:
        params = _params()
        img = _read_image(params, 'image_file')

        color = params.get('color', GREEN_SCREEN_HEX)
        if isinstance(color, str) and color.lower() == 'auto':
            color = None
        future = runner.submit_cleanup(
            img,
            color,
            float(params.get('tolerance', DEFAULT_CLEANUP_TOLERANCE)),
            int(params.get('erosion', DEFAULT_EROSION)),
        )
        cleaned = future.result(timeout=REQUEST_TIMEOUT)

        return jsonify({'success': True, 'image': image_service.to_data_url(cleaned)})

    except (ImageDecodeError, ValueError) as e:
        logger.warning(f"Rejected cleanup request: {e}")
        return jsonify({'success': False, 'message': str(e)}), 400
    except FutureTimeoutError:
        logger.error("Cleanup request timed out")
        return jsonify({'success': False, 'message': 'Processing timed out'}), 504
    except Exception as e:
        logger.error(f"Cleanup error: {e}")
        return jsonify({'success': False, 'message': 'Error cleaning image'}), 500


@app.route('/api/layouts', methods=['GET'])
def layouts():
    """Sheet presets keyed by sticker count."""
    return jsonify({
        str(quantity): {
            'width': layout.width,
            'height': layout.height,
            'rows': layout.rows,
            'cols': layout.cols,
        }
        for quantity, layout in SHEET_LAYOUTS.items()
    })


@app.route('/api/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return jsonify({'status': 'healthy', 'message': 'Sticker Slicer API is running'})


@app.errorhandler(413)
def too_large(e):
    """Handle file too large error."""
    return jsonify({'error': f'File too large. Maximum size is {MAX_CONTENT_LENGTH // (1024 * 1024)}MB.'}), 413


@app.errorhandler(500)
def internal_error(e):
    """Handle internal server error."""
    logger.error(f"Internal server error: {e}")
    return jsonify({'error': 'Internal server error'}), 500


if __name__ == '__main__':
    logger.info(f"Starting Sticker Slicer API Server (max upload {MAX_CONTENT_LENGTH // (1024 * 1024)}MB)")
    app.run(host=os.getenv("HOST", "0.0.0.0"), port=int(os.getenv("PORT", "5000")), debug=False)
