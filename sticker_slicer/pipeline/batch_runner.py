"""
Batch runner.

Runs whole-image jobs on a thread pool so callers (CLI, HTTP server, a UI)
never block on a slow pass over a large sheet. Sheets share no state, so
they are processed in parallel; each job gets its own copy of the pixels.
A failing sheet is reported in its BatchResult and never stops the rest.
"""
from __future__ import annotations
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Union
import logging

from ..models.image import Image
from ..models.engine_config import EngineConfig
from ..services.image_service import ImageService
from .grid_slicer import slice_grid
from .single_cleanup import cleanup_single, GREEN_SCREEN_HEX

logger = logging.getLogger(__name__)

Source = Union[Image, bytes, str, Path]


@dataclass
class BatchResult:
    """Outcome of one source image in a batch."""
    source: str
    images: List[Image] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class BatchRunner:
    def __init__(self, max_workers: Optional[int] = None,
                 image_service: Optional[ImageService] = None):
        self._executor = ThreadPoolExecutor(max_workers=max_workers,
                                            thread_name_prefix="sticker_slicer")
        self.image_service = image_service or ImageService()

    def __enter__(self) -> "BatchRunner":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    # ---------- private helpers ----------
    def _load(self, source: Source) -> Image:
        if isinstance(source, Image):
            return self.image_service.copy_image(source)
        if isinstance(source, (bytes, bytearray)):
            return self.image_service.decode(bytes(source))
        return self.image_service.load(source)

    @staticmethod
    def _label(source: Source, index: int) -> str:
        if isinstance(source, (str, Path)):
            return str(source)
        if isinstance(source, Image) and source.path is not None:
            return str(source.path)
        return f"<image {index}>"

    def _run(self, sources: Iterable[Source],
             job: Callable[[Image], List[Image]]) -> List[BatchResult]:
        pending = []
        for i, source in enumerate(sources):
            label = self._label(source, i)
            future = self._executor.submit(lambda s=source: job(self._load(s)))
            pending.append((label, future))

        results: List[BatchResult] = []
        for label, future in pending:
            try:
                results.append(BatchResult(source=label, images=future.result()))
            except Exception as err:
                logger.error(f"Failed to process {label}: {err}")
                results.append(BatchResult(source=label, error=str(err)))
        return results

    # ---------- public API ----------
    def submit_slice(self, image: Image, rows: int, cols: int, out_w: int, out_h: int,
                     padding: Optional[int] = None,
                     config: Optional[EngineConfig] = None) -> "Future[List[Image]]":
        source = self.image_service.copy_image(image)
        return self._executor.submit(slice_grid, source, rows, cols, out_w, out_h,
                                     padding, config=config)

    def submit_cleanup(self, image: Image,
                       target_color_hex: Optional[str] = GREEN_SCREEN_HEX,
                       tolerance_percent: Optional[float] = None,
                       erosion_strength: Optional[int] = None,
                       config: Optional[EngineConfig] = None) -> "Future[Image]":
        source = self.image_service.copy_image(image)
        return self._executor.submit(cleanup_single, source, target_color_hex,
                                     tolerance_percent, erosion_strength, config=config)

    def run_slice_batch(self, sources: Iterable[Source], rows: int, cols: int,
                        out_w: int, out_h: int, padding: Optional[int] = None,
                        config: Optional[EngineConfig] = None) -> List[BatchResult]:
        """Slice every sheet; results come back in input order."""
        return self._run(
            sources,
            lambda img: slice_grid(img, rows, cols, out_w, out_h, padding, config=config),
        )

    def run_cleanup_batch(self, sources: Iterable[Source],
                          target_color_hex: Optional[str] = GREEN_SCREEN_HEX,
                          tolerance_percent: Optional[float] = None,
                          erosion_strength: Optional[int] = None,
                          config: Optional[EngineConfig] = None) -> List[BatchResult]:
        return self._run(
            sources,
            lambda img: [cleanup_single(img, target_color_hex, tolerance_percent,
                                        erosion_strength, config=config)],
        )
