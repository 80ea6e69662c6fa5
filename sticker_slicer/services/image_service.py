from __future__ import annotations
from pathlib import Path
from typing import Iterable, List, Union, Iterator
import base64
import re

import cv2
import numpy as np

from ..models.image import Image
from ..repositories.image_repository import ImageRepository
from ..exceptions import ImageDecodeError

_DATA_URL_RE = re.compile(r"^data:(image/\w+);base64,")


class ImageService:
    """I/O helpers and codec edge. No background / grid logic here."""

    def __init__(self, valid_exts: Iterable[str] | None = None):
        self.image_repository = ImageRepository(valid_exts)

    def create_image(self, pixels: np.ndarray, path: Union[str, Path] = None) -> Image:
        return self.image_repository.create_image(pixels, path)

    def copy_image(self, img: Image) -> Image:
        """Fresh RGBA copy; the caller's buffer is never aliased."""
        return self.image_repository.create_image(img.pixels, img.path)

    def load(self, path: str | Path) -> Image:
        """Load a single image from disk into an Image object."""
        return self.image_repository.load(path)

    def decode(self, data: bytes) -> Image:
        return self.image_repository.decode(data)

    def encode_png(self, img: Image) -> bytes:
        return self.image_repository.encode_png(img)

    def stream_paths(
        self,
        folder: Union[str, Path],
        *,
        recursive: bool = False,
        exts: Iterable[str] | None = None,
    ) -> Iterator[Path]:
        return self.image_repository.iter_dir(folder, recursive=recursive, exts=exts)

    def save(self, image: Image) -> None:
        """
        Business-level method to save the image to its path (PNG keeps alpha).
        """
        self.image_repository.save(image)

    def get_image_dimensions(self, img: Image):
        return self.image_repository.retrieve_image_dimensions(img)

    def resize_to_max_width(self, img: Image, max_width: int) -> Image:
        """
        Shrink so the width is at most *max_width*, keeping aspect ratio.
        Narrower images come back as an unchanged copy.
        """
        h, w = self.get_image_dimensions(img)
        if w <= max_width:
            return self.copy_image(img)
        new_h = max(1, int(round(h * (max_width / w))))
        pixels = cv2.resize(img.pixels, (max_width, new_h), interpolation=cv2.INTER_AREA)
        return Image(pixels=pixels, path=img.path)

    # ─── data URLs (the HTTP surface speaks these) ──────────────────────
    @staticmethod
    def strip_mime_type(data_url: str) -> str:
        return _DATA_URL_RE.sub("", data_url)

    def to_data_url(self, img: Image) -> str:
        encoded = base64.b64encode(self.encode_png(img)).decode("utf-8")
        return f"data:image/png;base64,{encoded}"

    def from_data_url(self, data_url: str) -> Image:
        try:
            raw = base64.b64decode(self.strip_mime_type(data_url), validate=True)
        except (ValueError, TypeError) as err:
            raise ImageDecodeError("Payload is not valid base64") from err
        return self.decode(raw)

    def to_data_urls(self, gallery: List[Image]) -> List[str]:
        return [self.to_data_url(img) for img in gallery]
