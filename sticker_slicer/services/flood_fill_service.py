from __future__ import annotations
from typing import List, Tuple
import logging
import numpy as np

from ..models.image import Image
from ..models.background import BackgroundDescriptor
from ..repositories.mask_repository import MaskRepository
from .mask_service import ColorClassifier

logger = logging.getLogger(__name__)


class FloodFillService:
    """
    Border-seeded background removal.

    Only backdrop-coloured pixels 4-connected to a seed on the image
    border are punched out, so a backdrop-coloured patch fully enclosed
    by foreground (a green eye, a white highlight) survives.
    """

    def __init__(self, seed_step: int = 10):
        self.seed_step = seed_step
        self.repo = MaskRepository()

    def border_seeds(self, width: int, height: int) -> List[Tuple[int, int]]:
        """Four corners plus every `seed_step` px along each edge, as (x, y)."""
        seeds = [(0, 0), (width - 1, 0), (0, height - 1), (width - 1, height - 1)]
        for x in range(0, width, self.seed_step):
            seeds.append((x, 0))
            seeds.append((x, height - 1))
        for y in range(0, height, self.seed_step):
            seeds.append((0, y))
            seeds.append((width - 1, y))
        return seeds

    def reachable_background(
        self,
        img: Image,
        descriptor: BackgroundDescriptor,
        strict_green: bool = False,
    ) -> np.ndarray:
        """uint8 (H, W): 255 where the fill reached."""
        classifier = ColorClassifier(descriptor, strict_green=strict_green)
        candidate = np.where(classifier.is_background(img.pixels), 255, 0).astype(np.uint8)
        return self.repo.flood_fill_from_seeds(
            candidate, self.border_seeds(img.width, img.height)
        )

    def remove(
        self,
        img: Image,
        descriptor: BackgroundDescriptor,
        strict_green: bool = False,
    ) -> Image:
        """Return a new Image with alpha = 0 on every reached pixel."""
        reached = self.reachable_background(img, descriptor, strict_green)
        out = img.pixels.copy()
        out[:, :, 3][reached > 0] = 0
        logger.debug(f"Flood fill removed {np.count_nonzero(reached)} pixels")
        return Image(pixels=out, path=img.path)
