import pytest

from sticker_slicer.models.engine_config import EngineConfig, OutputSpec, OUTPUT_SPECS
from sticker_slicer.models.grid import GridSpec, SHEET_LAYOUTS, get_sheet_layout


def test_engine_config_defaults():
    config = EngineConfig()
    assert (config.padding, config.erosion_strength, config.color_tolerance_percent) == (2, 1, 20.0)


@pytest.mark.parametrize("kwargs", [
    {"padding": -1},
    {"erosion_strength": -2},
    {"color_tolerance_percent": 101},
    {"color_tolerance_percent": -0.5},
])
def test_engine_config_validation(kwargs):
    with pytest.raises(ValueError):
        EngineConfig(**kwargs)


def test_engine_config_is_immutable():
    with pytest.raises(AttributeError):
        EngineConfig().padding = 4


def test_grid_spec_needs_at_least_one_cell():
    with pytest.raises(ValueError):
        GridSpec(rows=0, cols=3)


def test_sheet_layouts():
    assert get_sheet_layout(8).grid == GridSpec(rows=2, cols=4)
    assert (get_sheet_layout(40).width, get_sheet_layout(40).cols) == (1850, 5)
    assert get_sheet_layout(13) == SHEET_LAYOUTS[8]


def test_output_presets():
    sticker = OUTPUT_SPECS["sticker"]
    assert (sticker.width, sticker.height, sticker.padding) == (370, 320, 2)
    assert (sticker.safe_width, sticker.safe_height) == (366, 316)
    assert OUTPUT_SPECS["emoji"] == OutputSpec(180, 180, 0)
