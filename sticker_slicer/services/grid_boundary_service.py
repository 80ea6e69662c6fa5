from __future__ import annotations
from typing import List, Tuple
import logging
import math
import numpy as np

from ..models.grid import GridSpec
from ..repositories.mask_repository import MaskRepository

logger = logging.getLogger(__name__)

# Rows / columns narrower than this are not real cells.
MIN_SPAN = 10
# Boundary search window, as a fraction of the average cell size.
SEARCH_FRACTION = 0.25


class GridBoundaryService:
    """
    Content-aware grid cut lines.

    Sheets are only roughly uniform, so instead of slicing at
    total / n the solver walks the axis one cell at a time and, around
    each expected boundary (±25 % of the average cell), picks the first
    line with no foreground at all, or else the emptiest one.
    Each cut depends on the previous one, so the walk is sequential.
    """

    def __init__(self) -> None:
        self.repo = MaskRepository()

    # ---------- private helpers ----------
    @staticmethod
    def _solve_axis(profile: np.ndarray, count: int) -> List[int]:
        """
        profile : foreground pixel count for every line along the axis
        count   : number of cells wanted along the axis

        Returns at most count-1 interior cuts, strictly increasing, in [1, len-1].
        """
        total = len(profile)
        avg = total / count
        search = avg * SEARCH_FRACTION

        cuts: List[int] = []
        current = 0
        for i in range(count - 1):
            remaining = count - 2 - i        # cuts still needed after this one
            upper = total - 1 - remaining    # leave one line per remaining cut
            if current + 1 > upper:
                logger.debug(f"No room left for cut {i + 1}/{count - 1} (axis length {total})")
                break

            target = current + avg
            lo = max(current + 1, math.floor(target - search))
            hi = min(upper, math.floor(target + search))
            if lo > hi:
                lo = hi = min(max(math.floor(target), current + 1), upper)

            window = profile[lo:hi + 1]
            empty = np.flatnonzero(window == 0)
            if len(empty):
                best = lo + int(empty[0])
            else:
                best = lo + int(np.argmin(window))

            cuts.append(best)
            current = best
        return cuts

    # ---------- public API ----------
    def solve_rows(self, mask_u8: np.ndarray, grid: GridSpec) -> List[int]:
        """Interior Y cut lines for the whole sheet."""
        cuts = self._solve_axis(self.repo.count_per_row(mask_u8), grid.rows)
        logger.debug(f"Row cuts: {cuts}")
        return cuts

    def solve_cols(self, row_mask_u8: np.ndarray, grid: GridSpec) -> List[int]:
        """Interior X cut lines inside one settled row (its own sub-mask)."""
        cuts = self._solve_axis(self.repo.count_per_col(row_mask_u8), grid.cols)
        logger.debug(f"Column cuts: {cuts}")
        return cuts

    @staticmethod
    def spans(cuts: List[int], total: int) -> List[Tuple[int, int]]:
        """[0, c1), [c1, c2), ..., [cn, total)."""
        bounds = [0] + list(cuts) + [total]
        return list(zip(bounds[:-1], bounds[1:]))

    @staticmethod
    def is_valid_span(start: int, end: int) -> bool:
        return end - start >= MIN_SPAN
