from typing import List, Tuple

import numpy as np
import pytest

from sticker_slicer.models.image import Image

GREEN = (0, 255, 0)
RED = (255, 0, 0)

# None of these fall in the green-screen band.
STICKER_COLORS: List[Tuple[int, int, int]] = [
    (255, 0, 0),
    (0, 0, 255),
    (255, 255, 0),
    (255, 0, 255),
    (0, 255, 255),
    (255, 128, 0),
    (128, 0, 255),
    (255, 255, 255),
]


def solid(width: int, height: int, color=GREEN, alpha: int = 255) -> np.ndarray:
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    pixels[:, :, :3] = color
    pixels[:, :, 3] = alpha
    return pixels


def paint(pixels: np.ndarray, x: int, y: int, w: int, h: int, color) -> np.ndarray:
    pixels[y:y + h, x:x + w, :3] = color
    pixels[y:y + h, x:x + w, 3] = 255
    return pixels


def make_sheet(width: int, height: int, rows: int, cols: int,
               square_w: int, square_h: int, gap: int,
               backdrop=GREEN) -> Tuple[Image, List[Tuple[int, int, int, int]]]:
    """Grid of coloured squares separated by *gap*, centred on the backdrop."""
    pixels = solid(width, height, backdrop)
    left = (width - (cols * square_w + (cols - 1) * gap)) // 2
    top = (height - (rows * square_h + (rows - 1) * gap)) // 2
    boxes = []
    for r in range(rows):
        for c in range(cols):
            x = left + c * (square_w + gap)
            y = top + r * (square_h + gap)
            paint(pixels, x, y, square_w, square_h,
                  STICKER_COLORS[(r * cols + c) % len(STICKER_COLORS)])
            boxes.append((x, y, square_w, square_h))
    return Image(pixels=pixels), boxes


def make_uniform_grid(rows: int, cols: int, cell: int = 100, square: int = 60,
                      backdrop=GREEN) -> Image:
    """Exact rows x cols grid, one centred square per cell."""
    pixels = solid(cols * cell, rows * cell, backdrop)
    offset = (cell - square) // 2
    for r in range(rows):
        for c in range(cols):
            paint(pixels, c * cell + offset, r * cell + offset, square, square,
                  STICKER_COLORS[(r * cols + c) % len(STICKER_COLORS)])
    return Image(pixels=pixels)


def opaque_bbox(img: Image):
    ys, xs = np.nonzero(img.alpha > 0)
    return xs.min(), ys.min(), xs.max() + 1, ys.max() + 1


@pytest.fixture
def sticker_sheet():
    """1480x640 sheet, 2 rows x 4 cols of 300x260 squares, 40 px gutters."""
    return make_sheet(1480, 640, rows=2, cols=4, square_w=300, square_h=260, gap=40)


@pytest.fixture
def enclosed_green():
    """400x400 green; 200x200 red shape with a 50x50 green patch inside it."""
    pixels = solid(400, 400, GREEN)
    paint(pixels, 100, 100, 200, 200, RED)
    paint(pixels, 175, 175, 50, 50, GREEN)
    return Image(pixels=pixels)
