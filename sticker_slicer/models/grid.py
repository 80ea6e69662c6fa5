from __future__ import annotations
from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class GridSpec:
    """
    Logical rows x cols partition requested by the caller.
    A target, not a guarantee: the pixel boundaries are solved.
    """
    rows: int
    cols: int

    def __post_init__(self):
        if self.rows < 1 or self.cols < 1:
            raise ValueError(f"Grid needs rows >= 1 and cols >= 1, got {self.rows}x{self.cols}")


@dataclass(frozen=True)
class CellRect:
    """Tight bounding box of one cell's foreground, absolute image coordinates."""
    x: int
    y: int
    w: int
    h: int

    @property
    def right(self) -> int:
        return self.x + self.w

    @property
    def bottom(self) -> int:
        return self.y + self.h

    def union(self, other: "CellRect") -> "CellRect":
        x1 = min(self.x, other.x)
        y1 = min(self.y, other.y)
        x2 = max(self.right, other.right)
        y2 = max(self.bottom, other.bottom)
        return CellRect(x1, y1, x2 - x1, y2 - y1)

    def offset(self, dx: int, dy: int) -> "CellRect":
        return CellRect(self.x + dx, self.y + dy, self.w, self.h)


@dataclass(frozen=True)
class SheetLayout:
    """Canvas size and grid shape of a generated sticker sheet."""
    width: int
    height: int
    cols: int
    rows: int

    @property
    def grid(self) -> GridSpec:
        return GridSpec(rows=self.rows, cols=self.cols)


# Keyed by number of stickers on the sheet.
SHEET_LAYOUTS: Dict[int, SheetLayout] = {
    8:  SheetLayout(width=1480, height=640,  cols=4, rows=2),
    16: SheetLayout(width=1480, height=1280, cols=4, rows=4),
    24: SheetLayout(width=1480, height=1920, cols=4, rows=6),
    32: SheetLayout(width=1480, height=2560, cols=4, rows=8),
    40: SheetLayout(width=1850, height=2560, cols=5, rows=8),
}


def get_sheet_layout(quantity: int) -> SheetLayout:
    """Layout for *quantity* stickers; unknown quantities fall back to 8."""
    return SHEET_LAYOUTS.get(quantity, SHEET_LAYOUTS[8])
