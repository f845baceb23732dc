"""Character set tables and a lenient UTF-8 encoder."""

# Glyphs the VT100 special graphics set shows for the codes 0x60-0x7f.
_VT100_GRAPHICS = "♦▒␉␌␍␊°±␤␋┘┐┌└┼⎺⎻─⎼⎽├┤┴┬│≤≥π≠£· "

_VT100_OVERRIDES = {
    0x2B: "→",
    0x2C: "←",
    0x2D: "↑",
    0x2E: "↓",
    0x30: "█",
    0x5F: "\u00a0",
    **{0x60 + offset: glyph for offset, glyph in enumerate(_VT100_GRAPHICS)},
}

_VT100 = "".join(_VT100_OVERRIDES.get(code, chr(code)) for code in range(128))

# Code page 437 shows pictures instead of control characters in the low range.
_CP437_LOW_GLYPHS = "\x00☺☻♥♦♣♠•◘○◙♂♀♪♫☼▶◀↕‼¶§▬↨↑↓→←∟↔▲▼"

_CP437 = (
    _CP437_LOW_GLYPHS
    + bytes(range(0x20, 0x7F)).decode("ascii")
    + "⌂"
    + bytes(range(0x80, 0x100)).decode("cp437")
)


def vt100_char(code: int) -> str:
    """Return the character the VT100 line-drawing set shows for ``code`` (0-127)."""
    if not 0 <= code < len(_VT100):
        raise ValueError(f"VT100 character code out of range: {code}")
    return _VT100[code]


def cp437_char(code: int) -> str:
    """Return the character code page 437 shows for byte ``code`` (0-255)."""
    if not 0 <= code < len(_CP437):
        raise ValueError(f"CP437 character code out of range: {code}")
    return _CP437[code]


def tf8(codepoint: int) -> bytes:
    """Encode ``codepoint`` as UTF-8, letting surrogates through unchanged."""
    if codepoint < 0 or codepoint >= 0x200000:
        raise ValueError(f"code point out of range: {codepoint:#x}")
    if codepoint < 0x80:
        return bytes((codepoint,))
    if codepoint < 0x800:
        return bytes((codepoint >> 6 | 0xC0, codepoint & 0x3F | 0x80))
    if codepoint < 0x10000:
        return bytes((
            codepoint >> 12 | 0xE0,
            codepoint >> 6 & 0x3F | 0x80,
            codepoint & 0x3F | 0x80,
        ))
    return bytes((
        codepoint >> 18 | 0xF0,
        codepoint >> 12 & 0x3F | 0x80,
        codepoint >> 6 & 0x3F | 0x80,
        codepoint & 0x3F | 0x80,
    ))