from __future__ import annotations
from collections import Counter
from typing import List, Tuple
import logging
import re

import cv2
import numpy as np

from ..models.image import Image
from ..models.background import BackgroundDescriptor, RGB
from ..repositories.mask_repository import MaskRepository
from ..exceptions import InvalidColorError

logger = logging.getLogger(__name__)

# OpenCV hue units (0-179); pure #00FF00 sits at 60.
GREEN_HUE_MIN = 35
GREEN_HUE_MAX = 85
# Only this exact colour selects the green-screen rule when given as a hex.
PURE_GREEN = (0, 255, 0)

_HEX_RE = re.compile(r"^#?([0-9a-f]{6}|[0-9a-f]{3})$", re.IGNORECASE)


def hex_to_rgb(color_hex: str) -> RGB:
    """'#00ff00' / '00FF00' / '#0f0' -> (0, 255, 0)."""
    match = _HEX_RE.match(color_hex.strip()) if color_hex else None
    if match is None:
        raise InvalidColorError(f"Not a hex color: {color_hex!r}")
    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)


def rgb_to_hex(rgb: RGB) -> str:
    r, g, b = rgb
    return f"#{r:02x}{g:02x}{b:02x}"


def green_screen_floors(tolerance_percent: float) -> Tuple[float, float]:
    """Minimum (saturation, value) of a green-screen pixel, 0-255 scale."""
    tol = tolerance_percent / 100.0
    return 255.0 * max(0.10, 0.40 * (1.0 - tol)), 255.0 * max(0.10, 0.30 * (1.0 - tol))


class ColorSamplerService:
    """
    Decides what the backdrop looks like.

    • Samples the border of the image (corners + every `step` px).
    • Green hue band, saturated enough to pass the green-screen rule
      itself → green-screen rule.
    • Anything else → generic solid colour, matched by RGB distance.
    """

    def __init__(self, step: int = 10):
        self.step = step
        self.mask_repo = MaskRepository()

    # ---------- private helpers ----------
    def _border_samples(self, img: Image) -> np.ndarray:
        h, w = img.height, img.width
        xs = list(range(0, w, self.step)) + [w - 1]
        ys = list(range(0, h, self.step)) + [h - 1]

        points = {(0, 0), (w - 1, 0), (0, h - 1), (w - 1, h - 1)}
        for x in xs:
            points.add((x, 0))
            points.add((x, h - 1))
        for y in ys:
            points.add((0, y))
            points.add((w - 1, y))

        samples = np.array([img.pixels[y, x] for x, y in sorted(points)], dtype=np.uint8)
        opaque = samples[samples[:, 3] > 0]
        # an already-cut image has a transparent border; fall back to the raw colours
        return opaque if len(opaque) else samples

    def is_green(self, rgb: RGB, tolerance_percent: float) -> bool:
        """True if *rgb* itself passes the green-screen rule at this tolerance."""
        h, s, v = self.mask_repo.rgb_to_hsv(rgb)
        min_sat, min_val = green_screen_floors(tolerance_percent)
        return GREEN_HUE_MIN <= h <= GREEN_HUE_MAX and s >= min_sat and v >= min_val

    # ---------- public API ----------
    def sample(self, img: Image, tolerance_percent: float) -> BackgroundDescriptor:
        """Build a descriptor from the image border."""
        samples = self._border_samples(img)
        median = np.median(samples[:, :3].astype(np.float32), axis=0)
        reference = tuple(int(round(v)) for v in median)

        is_green = self.is_green(reference, tolerance_percent)
        logger.debug(
            f"Sampled backdrop {rgb_to_hex(reference)} from {len(samples)} border pixels "
            f"-> {'green-screen' if is_green else 'solid colour'}"
        )
        return BackgroundDescriptor(
            is_green_screen=is_green,
            reference_color=reference,
            tolerance_percent=float(tolerance_percent),
        )

    def describe_hex(self, color_hex: str, tolerance_percent: float) -> BackgroundDescriptor:
        """
        Build a descriptor from a caller-chosen backdrop colour. Pure green
        gets the green-screen rule, any other colour is matched by RGB distance.
        """
        reference = hex_to_rgb(color_hex)
        return BackgroundDescriptor(
            is_green_screen=reference == PURE_GREEN,
            reference_color=reference,
            tolerance_percent=float(tolerance_percent),
        )

    @staticmethod
    def dominant_colors(img: Image, count: int = 5) -> List[str]:
        """
        Most frequent colours as hex strings.
        Downsamples to 100x100 and quantizes each channel to steps of 20.
        """
        small = cv2.resize(img.pixels[:, :, :3], (100, 100), interpolation=cv2.INTER_AREA)
        flat = small.reshape(-1, 3)[::4]
        quant = np.clip(np.round(flat / 20.0) * 20, 0, 255).astype(int)
        counts = Counter(rgb_to_hex(tuple(px)) for px in quant)
        return [c for c, _ in counts.most_common(count)]
