"""Conversions between 16-colour, 256-colour and RGB terminal colours."""

from enum import IntEnum

_TYPE_SHIFT = 24
_TYPE_MASK = 0x3 << _TYPE_SHIFT


class ColorType(IntEnum):
    """Kind of colour stored in bits 24-25 of a colour value."""

    NONE = 0
    PALETTE16 = 1
    PALETTE256 = 2
    RGB = 3


def _r(x: int) -> int:
    return (x >> 16) & 0xFF


def _g(x: int) -> int:
    return (x >> 8) & 0xFF


def _b(x: int) -> int:
    return x & 0xFF


def _trunc_div(n: int, d: int) -> int:
    q = abs(n) // d
    return q if n >= 0 else -q


def col256_to_rgb(index: int) -> int:
    """Return the 0xRRGGBB value of a 256-colour palette entry."""
    i = index & 0xFF
    if i < 16:
        if i == 3:
            return 0xAA5500  # CGA/VGA brown
        c = ((0xAA0000 if i & 1 else 0)
             | (0x00AA00 if i & 2 else 0)
             | (0x0000AA if i & 4 else 0))
        return c + 0x555555 if i >= 8 else c
    if i < 232:
        i -= 16
        r, g, b = i // 36, i // 6 % 6, i % 6
        return ((r * 0x280000 + 0x370000 if r else 0)
                | (g * 0x002800 + 0x003700 if g else 0)
                | (b * 0x000028 + 0x000037 if b else 0))
    return (i * 10 - 2312) * 0x010101


def rgb_diff(x: int, y: int) -> int:
    """Return a perceptual distance between two RGB colours."""
    dr = abs(_r(x) - _r(y))
    dg = abs(_g(x) - _g(y))
    db = abs(_b(x) - _b(y))
    rm = (_r(x) + _r(y)) // 2
    return 2 * dr + 4 * dg + 3 * db + _trunc_div(rm * (dr - db), 256)


def rgb_to_16(c: int) -> int:
    """Return the nearest of the 16 standard colours."""
    top = max(_r(c), _g(c), _b(c))
    threshold = top // 2 + 32
    hue = ((1 if _r(c) > threshold else 0)
           | (2 if _g(c) > threshold else 0)
           | (4 if _b(c) > threshold else 0))
    if hue == 7 and top <= 0x70:
        return 8
    return hue | 8 if top > 0xC0 else hue


def _m6(x: int) -> int:
    x = (x + 5) // 40
    return x - 1 if x else 0


def _rgb_to_color_cube(c: int) -> int:
    return 16 + _m6(_r(c)) * 36 + _m6(_g(c)) * 6 + _m6(_b(c))


def _rgb_to_grayscale(c: int) -> int:
    return min(232 + (_r(c) * 2 + _g(c) * 3 + _b(c)) // 60, 255)


def rgb_to_256(c: int) -> int:
    """Return the nearest entry of the 256-colour palette."""
    res = rgb_to_16(c)
    best = rgb_diff(c, col256_to_rgb(res))
    for candidate in (_rgb_to_color_cube(c), _rgb_to_grayscale(c)):
        d = rgb_diff(c, col256_to_rgb(candidate))
        if d < best:
            best, res = d, candidate
    return res


def color_convert(c: int, to: int) -> int:
    """Convert colour value ``c`` to the colour kind ``to``.

    ``to`` is a ColorType, or the same value shifted into bits 24-25.
    """
    if not to:
        return 0
    source = (c & _TYPE_MASK) >> _TYPE_SHIFT
    if to > 3:
        to >>= _TYPE_SHIFT
    if source == to:
        return c
    if source == ColorType.PALETTE16 and to == ColorType.PALETTE256:
        return c
    if source in (ColorType.PALETTE16, ColorType.PALETTE256):
        c = col256_to_rgb(c)
    if to == ColorType.PALETTE16:
        return rgb_to_16(c)
    if to == ColorType.PALETTE256:
        return rgb_to_256(c)
    if to == ColorType.RGB:
        return c
    return 0