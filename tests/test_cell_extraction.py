import numpy as np

from sticker_slicer.models.grid import CellRect
from sticker_slicer.services.cell_extraction_service import CellExtractionService


def build_mask():
    mask = np.zeros((100, 100), np.uint8)
    mask[10:30, 10:30] = 255
    mask[50:70, 60:80] = 255
    mask[90:93, 90:93] = 255     # 3x3 speck
    return mask


def test_disjoint_contours_merge_into_one_box():
    rect = CellExtractionService().extract(build_mask(), 0, 0, 100, 100)
    assert rect == CellRect(10, 10, 70, 60)


def test_box_is_in_absolute_coordinates():
    rect = CellExtractionService().extract(build_mask(), 5, 8, 100, 100)
    assert rect == CellRect(10, 10, 70, 60)


def test_box_stays_inside_the_nominal_span():
    mask = build_mask()
    rect = CellExtractionService().extract(mask, 0, 0, 50, 50)
    assert rect == CellRect(10, 10, 20, 20)
    assert rect.right <= 50 and rect.bottom <= 50


def test_content_cut_by_the_span_is_clipped_to_it():
    mask = np.zeros((60, 60), np.uint8)
    mask[10:50, 10:50] = 255
    rect = CellExtractionService().extract(mask, 30, 0, 60, 60)
    assert rect == CellRect(30, 10, 20, 40)


def test_only_noise_means_no_cell():
    mask = np.zeros((40, 40), np.uint8)
    mask[5:9, 5:30] = 255     # 4 px tall strip
    assert CellExtractionService().extract(mask, 0, 0, 40, 40) is None


def test_empty_cell_is_skipped():
    mask = np.zeros((40, 40), np.uint8)
    assert CellExtractionService().extract(mask, 0, 0, 40, 40) is None
    assert CellExtractionService().extract(mask, 10, 10, 10, 40) is None


def test_union_of_rects():
    assert CellRect(0, 0, 5, 5).union(CellRect(10, 2, 5, 10)) == CellRect(0, 0, 15, 12)
