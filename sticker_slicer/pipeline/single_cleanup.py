# pipeline/single_cleanup.py
from __future__ import annotations
from typing import Optional
import logging

from ..models.image import Image
from ..models.background import RemovalStrategy
from ..models.engine_config import EngineConfig
from ..services.image_service import ImageService
from ..services.color_sampler_service import ColorSamplerService
from ..services.background_removal_service import BackgroundRemovalService

logger = logging.getLogger(__name__)

GREEN_SCREEN_HEX = "#00FF00"
# Settings used to clean a sticker after it was edited / inpainted.
CLEANUP_TOLERANCE_PERCENT = 18
CLEANUP_EROSION_STRENGTH = 1


def cleanup_single(
    image: Image,
    target_color_hex: Optional[str] = GREEN_SCREEN_HEX,
    tolerance_percent: Optional[float] = None,
    erosion_strength: Optional[int] = None,
    *,
    config: Optional[EngineConfig] = None,
    strict_green: bool = False,
    image_service: ImageService = ImageService(),
    sampler_service: ColorSamplerService = ColorSamplerService(),
    removal_service: BackgroundRemovalService = BackgroundRemovalService(),
) -> Image:
    """
    Remove the backdrop from one image with a border-seeded flood fill.

    Backdrop-coloured regions enclosed by the subject are kept. Passing
    target_color_hex=None samples the backdrop from the image border.
    Tolerance and erosion default to *config* (EngineConfig defaults if
    None). Raises InvalidColorError for a malformed hex and ValueError for
    an out-of-range tolerance or negative erosion.

    Running the cleanup again on its own output keeps every opaque pixel
    only with erosion_strength=0; each further run with erosion N peels N
    more rings off the subject.
    """
    config = config or EngineConfig()
    if tolerance_percent is None:
        tolerance_percent = config.color_tolerance_percent
    if erosion_strength is None:
        erosion_strength = config.erosion_strength
    if not 0 <= tolerance_percent <= 100:
        raise ValueError(f"tolerance_percent must be in [0, 100], got {tolerance_percent}")
    if erosion_strength < 0:
        raise ValueError(f"erosion_strength must be >= 0, got {erosion_strength}")

    source = image_service.copy_image(image)
    if target_color_hex is None:
        descriptor = sampler_service.sample(source, tolerance_percent)
    else:
        descriptor = sampler_service.describe_hex(target_color_hex, tolerance_percent)

    cleaned, _ = removal_service.remove(
        source,
        descriptor,
        RemovalStrategy.FLOOD_FILL,
        erosion_strength=erosion_strength,
        strict_green=strict_green,
    )
    logger.debug(
        f"Cleaned {source.width}x{source.height} image against {descriptor.reference_hex} "
        f"(tolerance {tolerance_percent}%, erosion {erosion_strength})"
    )
    return cleaned


def cleanup_green_screen(image: Image) -> Image:
    """Post-edit cleanup preset: pure green, tolerance 18 %, 1 erosion round."""
    return cleanup_single(
        image,
        GREEN_SCREEN_HEX,
        CLEANUP_TOLERANCE_PERCENT,
        CLEANUP_EROSION_STRENGTH,
        strict_green=True,
    )
