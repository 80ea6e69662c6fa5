from .grid_slicer import slice_grid, solve_cells
from .single_cleanup import cleanup_single, cleanup_green_screen, GREEN_SCREEN_HEX
from .icon_renderer import render_icons
from .batch_runner import BatchRunner, BatchResult

__all__ = [
    "slice_grid",
    "solve_cells",
    "cleanup_single",
    "cleanup_green_screen",
    "GREEN_SCREEN_HEX",
    "render_icons",
    "BatchRunner",
    "BatchResult",
]
