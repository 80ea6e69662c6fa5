# services/mask_service.py
from __future__ import annotations
import logging
import numpy as np

from ..models.image import Image
from ..models.background import BackgroundDescriptor
from ..repositories.mask_repository import MaskRepository
from .color_sampler_service import GREEN_HUE_MIN, GREEN_HUE_MAX, green_screen_floors

logger = logging.getLogger(__name__)

# sqrt(3 * 255^2)
MAX_RGB_DISTANCE = 441.67


class ColorClassifier:
    """
    Per-pixel "is this backdrop?" rule shared by both removal strategies.

    Green-screen rule (OpenCV HSV units):
        H in [35, 85]  and  S >= 40 % * (1 - tol)  and  V >= 30 % * (1 - tol)
        (both floors never below 10 %)
    Solid colour rule:
        RGB distance to the reference <= tol * 441.67

    Fully transparent pixels always count as backdrop.
    """

    def __init__(self, descriptor: BackgroundDescriptor, strict_green: bool = False):
        self.descriptor = descriptor
        self.strict_green = strict_green
        self.repo = MaskRepository()

    @property
    def _tol(self) -> float:
        return self.descriptor.tolerance_percent / 100.0

    # ---------- private helpers ----------
    def _green_screen(self, rgba: np.ndarray) -> np.ndarray:
        tol = self._tol
        min_sat, min_val = green_screen_floors(self.descriptor.tolerance_percent)

        hsv = self.repo.to_hsv(rgba)
        hue, sat, val = hsv[:, :, 0], hsv[:, :, 1], hsv[:, :, 2]
        background = (
            (hue >= GREEN_HUE_MIN) & (hue <= GREEN_HUE_MAX)
            & (sat >= min_sat) & (val >= min_val)
        )
        if not self.strict_green:
            return background

        rgb = rgba[:, :, :3].astype(np.float32)
        r, g, b = rgb[:, :, 0], rgb[:, :, 1], rgb[:, :, 2]
        purity = 1.1 * (1.0 - tol * 0.5)
        green_dominant = (g > r * purity) & (g > b * purity)
        strongly_green = (g > r + 20) & (g > b + 20) & (g > 60)
        return green_dominant & (background | strongly_green)

    def _solid_color(self, rgba: np.ndarray) -> np.ndarray:
        ref = np.array(self.descriptor.reference_color, dtype=np.float32)
        diff = rgba[:, :, :3].astype(np.float32) - ref
        distance = np.sqrt(np.sum(diff * diff, axis=2))
        return distance <= self._tol * MAX_RGB_DISTANCE

    # ---------- public API ----------
    def is_background(self, rgba: np.ndarray) -> np.ndarray:
        """Bool (H, W): True where the pixel belongs to the backdrop."""
        if self.descriptor.is_green_screen:
            background = self._green_screen(rgba)
        else:
            background = self._solid_color(rgba)
        return background | (rgba[:, :, 3] == 0)


class MaskService:
    """
    Global-threshold foreground mask for sheets.

    Returns uint8 (H, W): 255 = foreground, 0 = backdrop, after a 3x3
    opening that removes isolated misclassified pixels.
    """

    def __init__(self) -> None:
        self.repo = MaskRepository()

    def build_mask(self, img: Image, descriptor: BackgroundDescriptor) -> np.ndarray:
        background = ColorClassifier(descriptor).is_background(img.pixels)
        raw = np.where(background, 0, 255).astype(np.uint8)
        mask = self.repo.open_3x3(raw)
        logger.debug(
            f"Mask {mask.shape[1]}x{mask.shape[0]}: "
            f"{np.count_nonzero(mask)} foreground pixels"
        )
        return mask
