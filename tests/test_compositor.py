import numpy as np
import pytest

from sticker_slicer.models.engine_config import OutputSpec
from sticker_slicer.models.image import Image
from sticker_slicer.services.compositor_service import CompositorService
from conftest import GREEN, RED, solid, opaque_bbox


def test_wide_cell_fills_safe_width_and_is_centred():
    out = CompositorService().compose(Image(solid(100, 50, RED)), OutputSpec(370, 320, padding=2))

    assert out.pixels.shape == (320, 370, 4)
    x0, y0, x1, y1 = opaque_bbox(out)
    assert (x0, x1) == (2, 368)
    assert y1 - y0 == 183
    assert abs(y0 - (320 - y1)) <= 1
    assert (out.pixels[y0:y1, x0:x1, :3] == RED).all()
    assert (out.alpha[y0:y1, x0:x1] == 255).all()


def test_tall_cell_keeps_aspect_ratio():
    out = CompositorService().compose(Image(solid(50, 200, RED)), OutputSpec(100, 100))
    x0, y0, x1, y1 = opaque_bbox(out)
    assert (y0, y1) == (0, 100)
    assert x1 - x0 == 25
    assert x0 == 37


def test_large_cell_is_shrunk_never_cropped():
    out = CompositorService().compose(Image(solid(1000, 1000, RED)), OutputSpec(180, 180, padding=10))
    assert opaque_bbox(out) == (10, 10, 170, 170)


def test_padding_area_stays_transparent():
    out = CompositorService().compose(Image(solid(64, 64, RED)), OutputSpec(96, 74, padding=4))
    assert (out.alpha[:4, :] == 0).all()
    assert (out.alpha[-4:, :] == 0).all()
    assert (out.alpha[:, :4] == 0).all()
    assert (out.alpha[:, -4:] == 0).all()


def test_transparent_color_does_not_bleed_into_scaled_edges():
    cell = solid(4, 2, RED)
    cell[:, 2:, :3] = GREEN
    cell[:, 2:, 3] = 0

    out = CompositorService().compose(Image(cell), OutputSpec(40, 20))

    visible = out.alpha > 0
    assert visible.any()
    assert (out.pixels[:, :, 1][visible] == 0).all()


def test_empty_cell_is_rejected():
    with pytest.raises(ValueError):
        CompositorService().compose(Image(np.zeros((0, 5, 4), np.uint8)), OutputSpec(10, 10))


def test_output_spec_needs_room_inside_padding():
    with pytest.raises(ValueError):
        OutputSpec(10, 10, padding=5)
