from __future__ import annotations
from typing import Optional
import logging
import numpy as np

from ..models.grid import CellRect
from ..repositories.mask_repository import MaskRepository

logger = logging.getLogger(__name__)

# Contours smaller than this on either axis are noise.
MIN_CONTOUR_SIZE = 5


class CellExtractionService:
    """Trims a nominal grid cell down to its foreground content."""

    def __init__(self):
        self.repo = MaskRepository()

    def extract(
        self,
        mask_u8: np.ndarray,
        x0: int,
        y0: int,
        x1: int,
        y1: int,
    ) -> Optional[CellRect]:
        """
        Args:
            mask_u8: Full-sheet foreground mask (255 = foreground).
            x0, y0, x1, y1: Nominal cell span, [x0, x1) x [y0, y1).

        Returns:
            The union bounding box of every external contour at least
            5x5 px, in absolute sheet coordinates, or None if the cell
            holds no qualifying content.
        """
        cell_mask = mask_u8[y0:y1, x0:x1]
        if cell_mask.size == 0:
            return None

        tight: Optional[CellRect] = None
        for x, y, w, h in self.repo.external_bounding_rects(cell_mask):
            if w < MIN_CONTOUR_SIZE or h < MIN_CONTOUR_SIZE:
                continue
            rect = CellRect(x, y, w, h)
            tight = rect if tight is None else tight.union(rect)

        if tight is None:
            logger.debug(f"Cell ({x0},{y0})-({x1},{y1}) has no content, skipping")
            return None
        return tight.offset(x0, y0)
