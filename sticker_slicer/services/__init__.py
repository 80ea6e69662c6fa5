from .image_service import ImageService
from .color_sampler_service import ColorSamplerService, hex_to_rgb, rgb_to_hex
from .mask_service import ColorClassifier, MaskService
from .grid_boundary_service import GridBoundaryService
from .cell_extraction_service import CellExtractionService
from .edge_smoothing_service import EdgeSmoothingService
from .compositor_service import CompositorService
from .flood_fill_service import FloodFillService
from .erosion_service import ErosionService
from .background_removal_service import BackgroundRemovalService

__all__ = [
    "ImageService",
    "ColorSamplerService",
    "hex_to_rgb",
    "rgb_to_hex",
    "ColorClassifier",
    "MaskService",
    "GridBoundaryService",
    "CellExtractionService",
    "EdgeSmoothingService",
    "CompositorService",
    "FloodFillService",
    "ErosionService",
    "BackgroundRemovalService",
]
