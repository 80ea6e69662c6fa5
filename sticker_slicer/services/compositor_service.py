from __future__ import annotations
from typing import Tuple
import cv2
import numpy as np

from ..models.image import Image
from ..models.engine_config import OutputSpec


class CompositorService:
    """
    Places a cell on a fixed-size transparent canvas.

    • Aspect ratio is preserved; the cell is scaled to fit the safe area
      (canvas minus padding on every side) and never cropped.
    • Scaling happens on premultiplied colour so transparent pixels do
      not tint the edges.
    """

    @staticmethod
    def fit_size(cell_w: int, cell_h: int, spec: OutputSpec) -> Tuple[int, int]:
        scale = min(spec.safe_width / cell_w, spec.safe_height / cell_h)
        draw_w = min(spec.safe_width, max(1, int(round(cell_w * scale))))
        draw_h = min(spec.safe_height, max(1, int(round(cell_h * scale))))
        return draw_w, draw_h

    @staticmethod
    def _resize_premultiplied(rgba: np.ndarray, size: Tuple[int, int]) -> np.ndarray:
        draw_w, draw_h = size
        src_h, src_w = rgba.shape[:2]
        shrinking = draw_w < src_w or draw_h < src_h
        interpolation = cv2.INTER_AREA if shrinking else cv2.INTER_LINEAR

        alpha = rgba[:, :, 3].astype(np.float32) / 255.0
        premult = rgba[:, :, :3].astype(np.float32) * alpha[:, :, None]

        premult = cv2.resize(premult, (draw_w, draw_h), interpolation=interpolation)
        alpha = cv2.resize(alpha, (draw_w, draw_h), interpolation=interpolation)
        if premult.ndim == 2:  # 1-px results lose the channel axis
            premult = premult.reshape(draw_h, draw_w, 3)
        alpha = np.clip(alpha.reshape(draw_h, draw_w), 0.0, 1.0)

        safe_alpha = np.where(alpha > 1e-6, alpha, 1.0)
        rgb = premult / safe_alpha[:, :, None]

        out = np.zeros((draw_h, draw_w, 4), dtype=np.uint8)
        out[:, :, :3] = np.clip(np.round(rgb), 0, 255).astype(np.uint8)
        out[:, :, 3] = np.clip(np.round(alpha * 255.0), 0, 255).astype(np.uint8)
        return out

    def compose(self, cell: Image, spec: OutputSpec) -> Image:
        """Return a new spec.width x spec.height RGBA Image with *cell* centred."""
        cell_h, cell_w = cell.pixels.shape[:2]
        if cell_w < 1 or cell_h < 1:
            raise ValueError(f"Cannot compose an empty {cell_w}x{cell_h} cell")

        draw_w, draw_h = self.fit_size(cell_w, cell_h, spec)
        scaled = self._resize_premultiplied(cell.pixels, (draw_w, draw_h))

        canvas = np.zeros((spec.height, spec.width, 4), dtype=np.uint8)
        x = (spec.width - draw_w) // 2
        y = (spec.height - draw_h) // 2
        canvas[y:y + draw_h, x:x + draw_w] = scaled
        return Image(pixels=canvas)
