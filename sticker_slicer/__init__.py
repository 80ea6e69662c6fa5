"""
sticker_slicer: backdrop removal and grid slicing for generated sticker sheets.

    from sticker_slicer import slice_grid, cleanup_single
"""
from .models import Image, EngineConfig, OutputSpec, GridSpec, SHEET_LAYOUTS, OUTPUT_SPECS
from .pipeline import slice_grid, cleanup_single, cleanup_green_screen, render_icons, BatchRunner
from .exceptions import StickerSlicerError, ImageDecodeError, InvalidColorError

__version__ = "1.0.0"

__all__ = [
    "Image",
    "EngineConfig",
    "OutputSpec",
    "GridSpec",
    "SHEET_LAYOUTS",
    "OUTPUT_SPECS",
    "slice_grid",
    "cleanup_single",
    "cleanup_green_screen",
    "render_icons",
    "BatchRunner",
    "StickerSlicerError",
    "ImageDecodeError",
    "InvalidColorError",
]
