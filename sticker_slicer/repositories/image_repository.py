from __future__ import annotations
from io import BytesIO
from pathlib import Path
from typing import Union, Iterable, Iterator
import logging
import numpy as np
import cv2
from PIL import Image as PILImage

from ..models.image import Image
from ..exceptions import ImageDecodeError

logger = logging.getLogger(__name__)

DEFAULT_EXTS = {".png", ".jpg", ".jpeg", ".webp", ".bmp"}


class ImageRepository:
    """
    Handles decoding, encoding and file I/O for Image entities.
    Everything leaving this class is RGBA uint8.
    """
    def __init__(self, valid_exts: Iterable[str] | None = None):
        self.VALID_EXTS = {e.lower() for e in (valid_exts or DEFAULT_EXTS)}

    @staticmethod
    def to_rgba(pixels: np.ndarray) -> np.ndarray:
        """Normalize gray / RGB / RGBA arrays into a fresh (H, W, 4) uint8 RGBA array."""
        arr = np.asarray(pixels)
        if arr.dtype != np.uint8:
            arr = np.clip(arr, 0, 255).astype(np.uint8)
        if arr.ndim == 2:
            return cv2.cvtColor(arr, cv2.COLOR_GRAY2RGBA)
        if arr.ndim == 3 and arr.shape[2] == 3:
            return cv2.cvtColor(arr, cv2.COLOR_RGB2RGBA)
        if arr.ndim == 3 and arr.shape[2] == 4:
            return np.ascontiguousarray(arr).copy()
        raise ValueError(f"Unsupported pixel array shape: {arr.shape}")

    @classmethod
    def create_image(cls, pixels: np.ndarray, path: Union[str, Path] = None) -> Image:
        rgba = cls.to_rgba(pixels)
        if path is None:
            return Image(rgba)
        return Image(pixels=rgba, path=Path(path))

    @staticmethod
    def retrieve_image_dimensions(img: Image):
        return img.pixels.shape[:2]

    @staticmethod
    def _from_cv(arr: np.ndarray) -> np.ndarray:
        # cv2 hands back BGR / BGRA / gray
        if arr.ndim == 2:
            return cv2.cvtColor(arr, cv2.COLOR_GRAY2RGBA)
        if arr.shape[2] == 4:
            return cv2.cvtColor(arr, cv2.COLOR_BGRA2RGBA)
        return cv2.cvtColor(arr, cv2.COLOR_BGR2RGBA)

    @classmethod
    def decode(cls, data: bytes) -> Image:
        """Decode encoded image bytes (PNG, JPEG, ...) into an RGBA Image."""
        if not data:
            raise ImageDecodeError("Empty image payload")
        buf = np.frombuffer(data, dtype=np.uint8)
        arr = cv2.imdecode(buf, cv2.IMREAD_UNCHANGED)
        if arr is None:
            raise ImageDecodeError("Image bytes could not be decoded")
        if arr.dtype != np.uint8:
            # 16-bit PNGs
            arr = (arr / 257).astype(np.uint8)
        return Image(pixels=cls._from_cv(arr))

    @classmethod
    def load(cls, path: Union[str, Path]) -> Image:
        path = Path(path)
        try:
            data = path.read_bytes()
        except OSError as err:
            raise ImageDecodeError(f"Image not found or unreadable: {path}") from err
        try:
            img = cls.decode(data)
        except ImageDecodeError as err:
            raise ImageDecodeError(f"{err}: {path}") from err
        img.path = path
        return img

    @staticmethod
    def encode_png(image: Image) -> bytes:
        buffer = BytesIO()
        PILImage.fromarray(np.ascontiguousarray(image.pixels)).save(buffer, format="PNG")
        return buffer.getvalue()

    @staticmethod
    def save(image: Image) -> None:
        if image.path is None:
            raise ValueError("Image has no path to save to")
        Path(image.path).parent.mkdir(parents=True, exist_ok=True)
        PILImage.fromarray(np.ascontiguousarray(image.pixels)).save(image.path)

    def iter_dir(
        self,
        folder: Union[str, Path],
        *,
        recursive: bool = False,
        exts: Iterable[str] | None = None,
    ) -> Iterator[Path]:
        """
        Yield image file paths one at a time (sorted). Decoding is left
        to the caller so one bad file fails only its own call.
        """
        folder = Path(folder)
        if not folder.is_dir():
            raise NotADirectoryError(folder)

        allowed = {e.lower() for e in (exts or self.VALID_EXTS)}
        pattern = "**/*" if recursive else "*"

        for p in sorted(folder.glob(pattern)):
            if not p.is_file():
                continue
            if p.suffix.lower() not in allowed:
                logger.debug(f"Skipping due to extension: {p}")
                continue
            yield p

