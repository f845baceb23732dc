import pytest

from ttyreckit.colors import (
    ColorType,
    col256_to_rgb,
    color_convert,
    rgb_diff,
    rgb_to_16,
    rgb_to_256,
)


def test_brown_special_case():
    assert col256_to_rgb(3) == 0xAA5500


def test_black_and_index_masking():
    assert col256_to_rgb(0) == 0
    assert col256_to_rgb(0x100 + 5) == col256_to_rgb(5)


def test_bright_colours_add_grey():
    for i in range(8):
        if i != 3:
            assert col256_to_rgb(i + 8) == col256_to_rgb(i) + 0x555555


def test_grayscale_ramp_is_grey_and_increasing():
    values = [col256_to_rgb(i) for i in range(232, 256)]
    for v in values:
        assert (v >> 16) & 0xFF == (v >> 8) & 0xFF == v & 0xFF
    assert values == sorted(values)


@pytest.mark.parametrize("i", [i for i in range(16) if i != 3])
def test_rgb_to_16_round_trips_palette(i):
    assert rgb_to_16(col256_to_rgb(i)) == i


@pytest.mark.parametrize("i", range(16, 232))
def test_rgb_to_256_exact_for_colour_cube(i):
    rgb = col256_to_rgb(i)
    assert col256_to_rgb(rgb_to_256(rgb)) == rgb


def test_rgb_to_256_in_range():
    for rgb in (0x123456, 0xFEDCBA, 0x808080, 0x00FF7F, 0xFFFFFF):
        assert 0 <= rgb_to_256(rgb) <= 255


def test_rgb_diff_identity_and_symmetry():
    pairs = [(0x102030, 0xF0E0D0), (0xAA5500, 0x0000AA), (0, 0xFFFFFF)]
    for x, y in pairs:
        assert rgb_diff(x, x) == 0
        assert rgb_diff(x, y) == rgb_diff(y, x)
        assert rgb_diff(x, y) > 0


def test_convert_to_none_is_zero():
    assert color_convert(0x03123456, 0) == 0


def test_convert_same_type_unchanged():
    c = (ColorType.RGB << 24) | 0x123456
    assert color_convert(c, ColorType.RGB) == c


def test_convert_16_to_256_unchanged():
    c = (ColorType.PALETTE16 << 24) | 5
    assert color_convert(c, ColorType.PALETTE256) == c


def test_convert_256_to_rgb():
    assert color_convert((ColorType.PALETTE256 << 24) | 3, ColorType.RGB) == 0xAA5500


def test_convert_accepts_shifted_target():
    c = (ColorType.PALETTE256 << 24) | 200
    assert color_convert(c, ColorType.RGB << 24) == color_convert(c, ColorType.RGB)


def test_convert_rgb_to_palettes():
    rgb = col256_to_rgb(9)
    c = (ColorType.RGB << 24) | rgb
    assert color_convert(c, ColorType.PALETTE16) == rgb_to_16(rgb)
    assert color_convert(c, ColorType.PALETTE256) == rgb_to_256(rgb)
    assert color_convert(c, ColorType.PALETTE16) == 9