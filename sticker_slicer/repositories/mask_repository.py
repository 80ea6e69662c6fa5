# repositories/mask_repository.py
from typing import List, Sequence, Tuple
import cv2
import numpy as np


class MaskRepository:
    """
    Thin OpenCV layer for uint8 masks and RGBA pixel arrays.

    • Masks are (H, W) uint8, 255 = set, 0 = clear.
    • No colour rules or thresholds live here, only array operations.
    """

    _KERNEL_3x3 = cv2.getStructuringElement(cv2.MORPH_RECT, (3, 3))
    _KERNEL_CROSS = cv2.getStructuringElement(cv2.MORPH_CROSS, (3, 3))

    # ---------- colour conversion ----------
    @staticmethod
    def to_hsv(rgba: np.ndarray) -> np.ndarray:
        """OpenCV HSV: H in 0-179 (half degrees), S and V in 0-255."""
        rgb = cv2.cvtColor(np.ascontiguousarray(rgba), cv2.COLOR_RGBA2RGB)
        return cv2.cvtColor(rgb, cv2.COLOR_RGB2HSV)

    @staticmethod
    def rgb_to_hsv(rgb: Tuple[int, int, int]) -> Tuple[int, int, int]:
        pix = np.array([[rgb]], dtype=np.uint8)
        h, s, v = cv2.cvtColor(pix, cv2.COLOR_RGB2HSV)[0, 0]
        return int(h), int(s), int(v)

    # ---------- morphology ----------
    @classmethod
    def open_3x3(cls, mask_u8: np.ndarray) -> np.ndarray:
        """Erode then dilate with a 3x3 rectangle (drops isolated specks)."""
        return cv2.morphologyEx(mask_u8, cv2.MORPH_OPEN, cls._KERNEL_3x3)

    @classmethod
    def erode_cross(cls, mask_u8: np.ndarray, iterations: int) -> np.ndarray:
        """
        4-connected erosion. Outside the image counts as set, so the
        image border by itself never erodes anything.
        """
        if iterations <= 0:
            return mask_u8.copy()
        return cv2.erode(
            mask_u8, cls._KERNEL_CROSS, iterations=iterations,
            borderType=cv2.BORDER_CONSTANT, borderValue=255,
        )

    # ---------- line statistics ----------
    @staticmethod
    def count_per_row(mask_u8: np.ndarray) -> np.ndarray:
        return np.count_nonzero(mask_u8, axis=1)

    @staticmethod
    def count_per_col(mask_u8: np.ndarray) -> np.ndarray:
        return np.count_nonzero(mask_u8, axis=0)

    # ---------- contours ----------
    @staticmethod
    def external_bounding_rects(mask_u8: np.ndarray) -> List[Tuple[int, int, int, int]]:
        """(x, y, w, h) of every external contour in *mask_u8*."""
        contours, _ = cv2.findContours(
            np.ascontiguousarray(mask_u8), cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE
        )
        return [tuple(int(v) for v in cv2.boundingRect(c)) for c in contours]

    # ---------- filtering ----------
    @staticmethod
    def gaussian_blur_zero_border(channel_u8: np.ndarray, ksize: int = 5) -> np.ndarray:
        """
        Gaussian blur (sigma derived from ksize) treating everything outside
        the array as 0.
        """
        pad = ksize // 2
        if pad == 0:
            return channel_u8.copy()
        padded = cv2.copyMakeBorder(channel_u8, pad, pad, pad, pad,
                                    cv2.BORDER_CONSTANT, value=0)
        blurred = cv2.GaussianBlur(padded, (ksize, ksize), 0, 0)
        return blurred[pad:-pad, pad:-pad].copy()

    @staticmethod
    def box_sum_3x3(arr: np.ndarray) -> np.ndarray:
        """Unnormalized 3x3 neighbourhood sum, zero outside the array."""
        return cv2.boxFilter(arr, -1, (3, 3), normalize=False,
                             borderType=cv2.BORDER_CONSTANT)

    # ---------- reachability ----------
    @staticmethod
    def flood_fill_from_seeds(
        candidate_u8: np.ndarray,
        seeds: Sequence[Tuple[int, int]],
    ) -> np.ndarray:
        """
        4-connected multi-source flood fill over the set pixels of
        *candidate_u8*, starting from (x, y) *seeds*.

        The fill mask doubles as the visited bitmap: a seed that already
        lies inside a filled region is skipped.

        Returns uint8 (H, W) with 255 for every reached pixel.
        """
        h, w = candidate_u8.shape
        work = np.ascontiguousarray(candidate_u8)
        visited = np.zeros((h + 2, w + 2), np.uint8)
        flags = 4 | cv2.FLOODFILL_MASK_ONLY | (255 << 8)

        for x, y in seeds:
            if not (0 <= x < w and 0 <= y < h):
                continue
            if visited[y + 1, x + 1] or not work[y, x]:
                continue
            cv2.floodFill(work, visited, (int(x), int(y)), 0, 0, 0, flags)

        return visited[1:-1, 1:-1].copy()
