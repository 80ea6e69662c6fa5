import numpy as np

from ..models.image import Image
from ..repositories.mask_repository import MaskRepository


class ErosionService:
    """
    Strips colour fringe left by the classifier tolerance: each round, any
    non-transparent pixel with a fully transparent 4-neighbour goes
    transparent.
    """

    def __init__(self):
        self.repo = MaskRepository()

    def erode(self, img: Image, strength: int) -> Image:
        if strength < 0:
            raise ValueError(f"Erosion strength must be >= 0, got {strength}")
        out = img.pixels.copy()
        if strength == 0:
            return Image(pixels=out, path=img.path)

        opaque = np.where(out[:, :, 3] > 0, 255, 0).astype(np.uint8)
        kept = self.repo.erode_cross(opaque, strength)
        out[:, :, 3][kept == 0] = 0
        return Image(pixels=out, path=img.path)
