from __future__ import annotations
from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class EngineConfig:
    """
    Per-call knobs supplied by the caller. Immutable.

    padding                 – safe margin (px) inside each output canvas
    erosion_strength        – alpha erosion rounds after flood fill (cleanup_single)
    color_tolerance_percent – 0..100, widens the background color rule
    """
    padding: int = 2
    erosion_strength: int = 1
    color_tolerance_percent: float = 20.0

    def __post_init__(self):
        if self.padding < 0:
            raise ValueError(f"padding must be >= 0, got {self.padding}")
        if self.erosion_strength < 0:
            raise ValueError(f"erosion_strength must be >= 0, got {self.erosion_strength}")
        if not 0 <= self.color_tolerance_percent <= 100:
            raise ValueError(
                f"color_tolerance_percent must be in [0, 100], got {self.color_tolerance_percent}"
            )


@dataclass(frozen=True)
class OutputSpec:
    """Fixed output canvas: width x height with a safety padding."""
    width: int
    height: int
    padding: int = 0

    def __post_init__(self):
        if self.padding < 0:
            raise ValueError(f"padding must be >= 0, got {self.padding}")
        if self.width - 2 * self.padding < 1 or self.height - 2 * self.padding < 1:
            raise ValueError(
                f"Canvas {self.width}x{self.height} leaves no room inside padding {self.padding}"
            )

    @property
    def safe_width(self) -> int:
        return self.width - 2 * self.padding

    @property
    def safe_height(self) -> int:
        return self.height - 2 * self.padding


OUTPUT_SPECS: Dict[str, OutputSpec] = {
    "sticker":   OutputSpec(width=370, height=320, padding=2),
    "emoji":     OutputSpec(width=180, height=180, padding=0),
    "main_icon": OutputSpec(width=240, height=240, padding=0),
    "tab_icon":  OutputSpec(width=96,  height=74,  padding=0),
}
