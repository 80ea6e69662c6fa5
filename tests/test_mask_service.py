import numpy as np

from sticker_slicer.models.background import BackgroundDescriptor
from sticker_slicer.models.image import Image
from sticker_slicer.services.mask_service import ColorClassifier, MaskService
from conftest import GREEN, RED, solid, paint


def green_descriptor(tol=20):
    return BackgroundDescriptor(is_green_screen=True, reference_color=GREEN, tolerance_percent=tol)


def test_mask_matches_image_size():
    mask = MaskService().build_mask(Image(solid(37, 23, GREEN)), green_descriptor())
    assert mask.shape == (23, 37)
    assert mask.dtype == np.uint8


def test_green_backdrop_is_background_and_subject_is_foreground():
    pixels = solid(60, 60, GREEN)
    paint(pixels, 20, 20, 20, 20, RED)
    mask = MaskService().build_mask(Image(pixels), green_descriptor())

    assert mask[30, 30] == 255
    assert mask[5, 5] == 0
    assert np.count_nonzero(mask) == 400


def test_lighting_variation_in_green_screen_is_still_background():
    pixels = solid(10, 10, (40, 160, 60))
    background = ColorClassifier(green_descriptor()).is_background(pixels)
    assert background.all()


def test_dark_green_below_value_floor_is_foreground():
    # V = 50/255 is under 30 % * (1 - 0.2)
    background = ColorClassifier(green_descriptor()).is_background(solid(4, 4, (0, 50, 0)))
    assert not background.any()


def test_higher_tolerance_lowers_saturation_floor():
    pixels = solid(4, 4, (90, 140, 90))  # S ~ 36 %
    assert not ColorClassifier(green_descriptor(0)).is_background(pixels).any()
    assert ColorClassifier(green_descriptor(50)).is_background(pixels).all()


def test_opening_removes_single_pixel_noise():
    pixels = solid(50, 50, GREEN)
    paint(pixels, 25, 25, 1, 1, RED)
    mask = MaskService().build_mask(Image(pixels), green_descriptor())
    assert np.count_nonzero(mask) == 0


def test_enclosed_green_is_removed_by_global_threshold(enclosed_green):
    mask = MaskService().build_mask(enclosed_green, green_descriptor())
    assert mask[200, 200] == 0
    assert mask[110, 110] == 255


def test_solid_color_rule_uses_rgb_distance():
    descriptor = BackgroundDescriptor(
        is_green_screen=False, reference_color=(255, 255, 255), tolerance_percent=10
    )
    pixels = solid(3, 1, (255, 255, 255))
    pixels[0, 1, :3] = (230, 230, 230)  # distance ~43 <= 44.2
    pixels[0, 2, :3] = (200, 200, 200)  # distance ~95
    background = ColorClassifier(descriptor).is_background(pixels)
    assert background.tolist() == [[True, True, False]]


def test_zero_tolerance_solid_color_matches_exact_color_only():
    descriptor = BackgroundDescriptor(
        is_green_screen=False, reference_color=(10, 20, 30), tolerance_percent=0
    )
    pixels = solid(2, 1, (10, 20, 30))
    pixels[0, 1, :3] = (10, 20, 31)
    assert ColorClassifier(descriptor).is_background(pixels).tolist() == [[True, False]]


def test_fully_transparent_pixels_are_background():
    pixels = solid(2, 1, RED)
    pixels[0, 0, 3] = 0
    background = ColorClassifier(green_descriptor()).is_background(pixels)
    assert background.tolist() == [[True, False]]


def test_strict_green_accepts_washed_out_but_dominant_green():
    # S = 20 % is under the standard floor, but green still clearly leads
    pixels = solid(2, 2, (120, 150, 120))
    assert not ColorClassifier(green_descriptor()).is_background(pixels).any()
    assert ColorClassifier(green_descriptor(), strict_green=True).is_background(pixels).all()


def test_strict_green_requires_bright_enough_green():
    pixels = solid(2, 2, (30, 55, 30))
    assert not ColorClassifier(green_descriptor(), strict_green=True).is_background(pixels).any()


def test_strict_green_keeps_pure_green_as_background():
    background = ColorClassifier(green_descriptor(18), strict_green=True).is_background(solid(3, 3, GREEN))
    assert background.all()
