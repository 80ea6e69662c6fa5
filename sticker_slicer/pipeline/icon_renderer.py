from typing import Dict

from ..models.image import Image
from ..models.engine_config import OUTPUT_SPECS
from ..services.compositor_service import CompositorService

ICON_SPECS = ("main_icon", "tab_icon")


def render_icons(
    sticker: Image,
    compositor_service: CompositorService = CompositorService(),
) -> Dict[str, Image]:
    """
    Fit an already-cut sticker into the store icon canvases
    (main 240x240, tab 96x74), centred with aspect ratio kept.
    """
    return {
        name: compositor_service.compose(sticker, OUTPUT_SPECS[name])
        for name in ICON_SPECS
    }
