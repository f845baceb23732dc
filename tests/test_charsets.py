import pytest

from ttyreckit.charsets import cp437_char, tf8, vt100_char


def test_vt100_line_drawing():
    assert vt100_char(0x71) == "\u2500"
    assert vt100_char(0x78) == "\u2502"
    assert vt100_char(0x6A) == "\u2518"


def test_vt100_low_range_is_identity():
    assert [vt100_char(c) for c in range(0x2B)] == [chr(c) for c in range(0x2B)]


def test_cp437_blocks():
    assert cp437_char(0xDB) == "\u2588"
    assert cp437_char(0x01) == "\u263a"
    assert cp437_char(0x7F) == "\u2302"


def test_cp437_printable_ascii_is_identity():
    assert "".join(cp437_char(c) for c in range(0x20, 0x7F)) == "".join(
        chr(c) for c in range(0x20, 0x7F)
    )


def test_cp437_high_half_matches_python_codec():
    for code in range(0x80, 0x100):
        assert cp437_char(code) == bytes((code,)).decode("cp437")


@pytest.mark.parametrize("code", [-1, 128, 1000])
def test_vt100_out_of_range(code):
    with pytest.raises(ValueError):
        vt100_char(code)


@pytest.mark.parametrize("code", [-1, 256])
def test_cp437_out_of_range(code):
    with pytest.raises(ValueError):
        cp437_char(code)


@pytest.mark.parametrize("cp", [0, 0x41, 0x7F, 0x80, 0x7FF, 0x800, 0x2500, 0xFFFF, 0x10000, 0x1F600, 0x10FFFF])
def test_tf8_matches_utf8(cp):
    assert tf8(cp) == chr(cp).encode("utf-8")


def test_tf8_passes_surrogates():
    assert tf8(0xD800) == "\ud800".encode("utf-8", "surrogatepass")


@pytest.mark.parametrize("cp", [-5, 0x200000])
def test_tf8_rejects_out_of_range(cp):
    with pytest.raises(ValueError):
        tf8(cp)