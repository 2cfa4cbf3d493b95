import numpy as np
import pytest

from color_space import (
    hex_to_lch, hsl_string, lab_to_rgb, lab_to_lch, lch_to_hex,
    normalize_hex, parse_color, rgb_string, rgb_to_lab,
)
from palette_errors import InvalidColor


@pytest.mark.parametrize('value, expected', [
    ('#3366CC', '#3366cc'),
    ('#0f0', '#00ff00'),
    ('rgb(255, 0, 0)', '#ff0000'),
    ('hsl(240, 100%, 50%)', '#0000ff'),
    ('White', '#ffffff'),
    ('  #112233  ', '#112233'),
])
def test_normalize_hex_accepts_css_representations(value, expected):
    assert normalize_hex(value) == expected


@pytest.mark.parametrize('value', ['', '   ', 'not-a-color', '#12345', '#ggg', None, 42])
def test_parse_color_rejects_invalid_input(value):
    with pytest.raises(InvalidColor):
        parse_color(value)


def test_invalid_color_is_a_value_error():
    with pytest.raises(ValueError):
        parse_color('nope')


def test_lab_reference_points():
    lab = rgb_to_lab(np.array([[255, 255, 255], [0, 0, 0]]))
    assert lab[0, 0] == pytest.approx(100, abs=0.01)
    assert lab[1, 0] == pytest.approx(0, abs=0.01)


def test_rgb_lab_round_trip_is_exact_for_8bit_colors():
    rng = np.random.default_rng(7)
    rgb = rng.integers(0, 256, size=(500, 3))
    assert np.array_equal(lab_to_rgb(rgb_to_lab(rgb)), rgb.astype(np.uint8))


def test_lch_round_trip():
    for value in ('#3366cc', '#ff8800', '#0a0b0c'):
        assert lch_to_hex(hex_to_lch(value)) == value


def test_gray_has_no_hue():
    lch = lab_to_lch(np.array([50.0, 0.0, 0.0]))
    assert lch[1] == 0
    assert np.isnan(lch[2])


def test_lch_to_hex_clips_out_of_gamut():
    assert lch_to_hex(np.array([120.0, 0.0, 0.0])) == '#ffffff'
    assert lch_to_hex(np.array([-20.0, 0.0, 0.0])) == '#000000'


def test_css_renderings():
    assert rgb_string('#3366cc') == 'rgb(51,102,204)'
    assert hsl_string('#ff0000') == 'hsl(0,100%,50%)'
    assert hsl_string('#808080') == 'hsl(0,0%,50%)'
