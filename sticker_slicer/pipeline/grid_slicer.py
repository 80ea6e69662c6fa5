# pipeline/grid_slicer.py
from __future__ import annotations
from concurrent.futures import Executor
from typing import List, Optional
import logging

from ..models.image import Image
from ..models.background import RemovalStrategy
from ..models.grid import GridSpec, CellRect
from ..models.engine_config import EngineConfig, OutputSpec
from ..services.image_service import ImageService
from ..services.color_sampler_service import ColorSamplerService
from ..services.background_removal_service import BackgroundRemovalService
from ..services.grid_boundary_service import GridBoundaryService
from ..services.cell_extraction_service import CellExtractionService
from ..services.edge_smoothing_service import EdgeSmoothingService
from ..services.compositor_service import CompositorService

logger = logging.getLogger(__name__)


def solve_cells(
    mask_u8,
    grid: GridSpec,
    *,
    boundary_service: GridBoundaryService = GridBoundaryService(),
    extraction_service: CellExtractionService = CellExtractionService(),
) -> List[CellRect]:
    """
    Walk the sheet row by row, then column by column inside each settled
    row, and return the tight content box of every non-empty cell in
    row-major order. Rows, columns and cells that are too small or empty
    are dropped here.
    """
    height, width = mask_u8.shape[:2]
    rects: List[CellRect] = []

    row_cuts = boundary_service.solve_rows(mask_u8, grid)
    for r, (y0, y1) in enumerate(boundary_service.spans(row_cuts, height)):
        if not boundary_service.is_valid_span(y0, y1):
            logger.debug(f"Row {r} spans {y1 - y0}px, skipping")
            continue

        row_mask = mask_u8[y0:y1, :]
        col_cuts = boundary_service.solve_cols(row_mask, grid)
        for c, (x0, x1) in enumerate(boundary_service.spans(col_cuts, width)):
            if not boundary_service.is_valid_span(x0, x1):
                logger.debug(f"Cell ({r},{c}) spans {x1 - x0}px, skipping")
                continue
            rect = extraction_service.extract(mask_u8, x0, y0, x1, y1)
            if rect is not None:
                rects.append(rect)

    return rects


def slice_grid(
    image: Image,
    rows: int,
    cols: int,
    out_w: int,
    out_h: int,
    padding: Optional[int] = None,
    *,
    config: Optional[EngineConfig] = None,
    executor: Optional[Executor] = None,
    image_service: ImageService = ImageService(),
    sampler_service: ColorSamplerService = ColorSamplerService(),
    removal_service: BackgroundRemovalService = BackgroundRemovalService(),
    boundary_service: GridBoundaryService = GridBoundaryService(),
    extraction_service: CellExtractionService = CellExtractionService(),
    smoothing_service: EdgeSmoothingService = EdgeSmoothingService(),
    compositor_service: CompositorService = CompositorService(),
) -> List[Image]:
    """
    Cut a sticker sheet into individual out_w x out_h stickers.

    1. Sample the backdrop, mask it globally (3x3 opening).
    2. Solve row cuts, then column cuts per row, near the expected grid.
    3. Per cell: trim to content → blur alpha → fit and centre on canvas.

    Args:
        image:     Source sheet (any of gray / RGB / RGBA pixels).
        rows/cols: Logical grid shape (>= 1).
        out_w/out_h: Output canvas size.
        padding:   Safe margin inside the canvas; defaults to config.padding.
        config:    Tolerance / padding knobs (EngineConfig defaults if None).
        executor:  Optional pool to render the independent cells on.

    Returns:
        Zero or more stickers in row-major order. Empty or undersized cells
        are skipped, so the count can be below rows * cols.
    """
    config = config or EngineConfig()
    grid = GridSpec(rows=rows, cols=cols)
    spec = OutputSpec(width=out_w, height=out_h,
                      padding=config.padding if padding is None else padding)

    source = image_service.copy_image(image)
    descriptor = sampler_service.sample(source, config.color_tolerance_percent)
    composited, mask = removal_service.remove(
        source, descriptor, RemovalStrategy.GLOBAL_THRESHOLD
    )

    rects = solve_cells(mask, grid,
                        boundary_service=boundary_service,
                        extraction_service=extraction_service)

    def render(rect: CellRect) -> Image:
        cell = smoothing_service.smooth(composited, rect)
        return compositor_service.compose(cell, spec)

    if executor is not None:
        stickers = list(executor.map(render, rects))
    else:
        stickers = [render(rect) for rect in rects]

    logger.info(
        f"Sliced {source.width}x{source.height} sheet ({rows}x{cols}) "
        f"into {len(stickers)} stickers"
    )
    return stickers
