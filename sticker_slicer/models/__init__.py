from .image import Image
from .background import BackgroundDescriptor, RemovalStrategy
from .grid import GridSpec, CellRect, SheetLayout, SHEET_LAYOUTS, get_sheet_layout
from .engine_config import EngineConfig, OutputSpec, OUTPUT_SPECS

__all__ = [
    "Image",
    "BackgroundDescriptor",
    "RemovalStrategy",
    "GridSpec",
    "CellRect",
    "SheetLayout",
    "SHEET_LAYOUTS",
    "get_sheet_layout",
    "EngineConfig",
    "OutputSpec",
    "OUTPUT_SPECS",
]
