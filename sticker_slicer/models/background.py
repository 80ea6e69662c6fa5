from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Tuple


RGB = Tuple[int, int, int]


class RemovalStrategy(Enum):
    """
    How "background" propagates spatially once a pixel is classified.

    • GLOBAL_THRESHOLD – every backdrop-colored pixel is removed (sheets).
    • FLOOD_FILL       – only backdrop pixels reachable from the border
                         are removed (single images).
    """
    GLOBAL_THRESHOLD = "global_threshold"
    FLOOD_FILL = "flood_fill"


@dataclass(frozen=True)
class BackgroundDescriptor:
    """
    Result of sampling the backdrop. Derived fresh for every image.
    """
    is_green_screen: bool
    reference_color: RGB      # (r, g, b) 0-255
    tolerance_percent: float  # 0..100

    @property
    def reference_hex(self) -> str:
        r, g, b = self.reference_color
        return f"#{r:02x}{g:02x}{b:02x}"
