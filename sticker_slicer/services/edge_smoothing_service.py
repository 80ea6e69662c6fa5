import numpy as np

from ..models.image import Image
from ..models.grid import CellRect
from ..repositories.mask_repository import MaskRepository


class EdgeSmoothingService:
    """
    Anti-aliases a cut-out cell by blurring its alpha channel only.

    Before blurring, transparent pixels next to the silhouette borrow the
    colour of their opaque neighbours; the softened edge then fades into
    the subject's own colour instead of the backdrop's.
    """

    KERNEL_SIZE = 5

    def __init__(self):
        self.repo = MaskRepository()

    def _extend_edge_colors(self, rgba: np.ndarray, passes: int) -> np.ndarray:
        alpha = rgba[:, :, 3]
        rgb = rgba[:, :, :3].astype(np.float32)
        known = (alpha > 0).astype(np.float32)

        for _ in range(passes):
            sums = self.repo.box_sum_3x3(rgb * known[:, :, None])
            counts = self.repo.box_sum_3x3(known)
            grow = (known == 0) & (counts > 0)
            if not grow.any():
                break
            rgb[grow] = sums[grow] / counts[grow][:, None]
            known[grow] = 1.0

        out = rgba.copy()
        hidden = alpha == 0
        out[:, :, :3][hidden] = np.clip(np.round(rgb[hidden]), 0, 255).astype(np.uint8)
        return out

    def crop(self, composited: Image, rect: CellRect) -> Image:
        pixels = composited.pixels[rect.y:rect.bottom, rect.x:rect.right].copy()
        return Image(pixels=pixels)

    def smooth(self, composited: Image, rect: CellRect) -> Image:
        """
        Crop *rect* out of the background-removed sheet and return it with
        a 5x5 Gaussian-blurred alpha (zero outside the crop).

        Colours of opaque pixels are never changed. Fully transparent pixels
        near the silhouette do get new RGB (their opaque neighbours' average)
        before the blur, so the faded edge shows the subject's colour rather
        than the backdrop's.
        """
        cell = self._extend_edge_colors(
            self.crop(composited, rect).pixels, passes=self.KERNEL_SIZE // 2
        )
        cell[:, :, 3] = self.repo.gaussian_blur_zero_border(
            np.ascontiguousarray(cell[:, :, 3]), self.KERNEL_SIZE
        )
        return Image(pixels=cell)
