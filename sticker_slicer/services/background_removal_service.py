from __future__ import annotations
from typing import Tuple
import logging
import numpy as np

from ..models.image import Image
from ..models.background import BackgroundDescriptor, RemovalStrategy
from .mask_service import MaskService
from .flood_fill_service import FloodFillService
from .erosion_service import ErosionService

logger = logging.getLogger(__name__)


class BackgroundRemovalService:
    """
    Business-level entry for backdrop removal.

    Both strategies share the colour rule (ColorClassifier) and differ only
    in how "background" spreads:

    • GLOBAL_THRESHOLD – mask every backdrop-coloured pixel (sheets have
      backdrop-only gutters, so enclosure is not expected there).
    • FLOOD_FILL – remove only what the border can reach, then erode.

    Returns a **new** Image; the input is never modified.
    """

    def __init__(self):
        self.mask_service = MaskService()
        self.flood_fill_service = FloodFillService()
        self.erosion_service = ErosionService()

    def remove(
        self,
        img: Image,
        descriptor: BackgroundDescriptor,
        strategy: RemovalStrategy,
        *,
        erosion_strength: int = 0,
        strict_green: bool = False,
    ) -> Tuple[Image, np.ndarray]:
        """
        Returns:
            (cut-out Image, foreground mask uint8 with 255 = foreground)
        """
        if strategy is RemovalStrategy.GLOBAL_THRESHOLD:
            mask = self.mask_service.build_mask(img, descriptor)
            out = img.pixels.copy()
            out[:, :, 3] = np.minimum(out[:, :, 3], mask)
            return Image(pixels=out, path=img.path), mask

        if strategy is RemovalStrategy.FLOOD_FILL:
            filled = self.flood_fill_service.remove(img, descriptor, strict_green=strict_green)
            eroded = self.erosion_service.erode(filled, erosion_strength)
            mask = np.where(eroded.alpha > 0, 255, 0).astype(np.uint8)
            return eroded, mask

        raise ValueError(f"Unknown removal strategy: {strategy}")
