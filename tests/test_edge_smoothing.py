import numpy as np

from sticker_slicer.models.grid import CellRect
from sticker_slicer.models.image import Image
from sticker_slicer.services.edge_smoothing_service import EdgeSmoothingService
from conftest import GREEN, RED, solid, paint


def cut_out_square():
    """40x40: opaque red square at 10..29, transparent green elsewhere."""
    pixels = solid(40, 40, GREEN, alpha=0)
    paint(pixels, 10, 10, 20, 20, RED)
    return Image(pixels=pixels)


def test_only_alpha_is_blurred_on_a_tight_crop():
    smoothed = EdgeSmoothingService().smooth(cut_out_square(), CellRect(10, 10, 20, 20))

    assert smoothed.pixels.shape == (20, 20, 4)
    assert (smoothed.pixels[:, :, :3] == RED).all()
    assert smoothed.alpha[10, 10] == 255
    assert 0 < smoothed.alpha[0, 0] < smoothed.alpha[0, 10] < 255


def test_blur_treats_outside_of_crop_as_transparent():
    smoothed = EdgeSmoothingService().smooth(cut_out_square(), CellRect(10, 10, 20, 20))
    # symmetric falloff on all four sides
    sides = [int(smoothed.alpha[0, 10]), int(smoothed.alpha[19, 10]),
             int(smoothed.alpha[10, 0]), int(smoothed.alpha[10, 19])]
    assert max(sides) - min(sides) <= 1
    assert min(sides) < 255


def test_soft_edge_takes_subject_color_not_backdrop():
    smoothed = EdgeSmoothingService().smooth(cut_out_square(), CellRect(5, 5, 30, 30))

    # one pixel outside the square, now semi-transparent
    edge = smoothed.pixels[15, 4]
    assert 0 < edge[3] < 255
    assert tuple(edge[:3]) == RED

    # far from the square nothing becomes visible
    assert smoothed.alpha[0, 0] == 0


def test_source_is_not_modified():
    source = cut_out_square()
    before = source.pixels.copy()
    EdgeSmoothingService().smooth(source, CellRect(5, 5, 30, 30))
    assert np.array_equal(source.pixels, before)


def test_only_transparent_pixels_near_the_subject_get_new_colors():
    pixels = solid(30, 30, GREEN, alpha=0)
    paint(pixels, 10, 10, 5, 10, RED)
    paint(pixels, 15, 10, 5, 10, (0, 0, 255))
    smoothed = EdgeSmoothingService().smooth(Image(pixels), CellRect(0, 0, 30, 30))

    opaque = pixels[:, :, 3] == 255
    assert np.array_equal(smoothed.pixels[:, :, :3][opaque], pixels[:, :, :3][opaque])
    assert tuple(smoothed.pixels[15, 9, :3]) == RED
    assert tuple(smoothed.pixels[0, 0, :3]) == GREEN
