"""Playback of DosRecorder screen recordings."""

from __future__ import annotations

import io
import struct
import zlib
from typing import IO, Callable, Sequence

from .charsets import cp437_char, tf8

_ROWS = 25
_COLS = 80
_CELLS = _ROWS * _COLS
_MAXSCREENS = 256
_MINJUMP = 10  # jump the cursor rather than rewrite this many cells
_MINCL = 20  # clear rather than write this many spaces
_RGBBGR = b"04261537"
_BLANK = (0x20, 7)
_GZIP_MAGIC = b"\x1f\x8b"

_FRAME = struct.Struct("<IBBBBH")
_CHUNK = struct.Struct("<HH")
_NOTE = struct.Struct("<BBBBBBB")

Cell = tuple  # (character code, attribute)


def _ignore(*_args) -> None:
    pass


def _attr_sequence(a: int) -> bytes:
    seq = bytearray(b"\x1b[0")
    if a & 0x80:
        seq += b";5"
    seq += b";4" + _RGBBGR[(a >> 4) & 7:((a >> 4) & 7) + 1]
    if a & 0x08:
        seq += b";1"
    seq += b";3" + _RGBBGR[a & 7:(a & 7) + 1] + b"m"
    return bytes(seq)


def _char_bytes(c: int) -> bytes:
    return tf8(ord(cp437_char(c & 0xFF)))


def _count_spaces(row: Sequence[Cell], start: int, attr: int, limit: int) -> int:
    count = 0
    for c, a in row[start:start + max(limit, 0)]:
        if c != 0x20 or a != attr:
            break
        count += 1
    return count


def screen_diff(old: Sequence[Sequence[Cell]] | None,
                new: Sequence[Sequence[Cell]]) -> bytes:
    """Return the ANSI output that redraws the cells of ``new`` that differ from ``old``.

    Screens are 25 rows of 80 ``(character, attribute)`` cells; with ``old``
    None every cell is drawn.
    """
    if len(new) != _ROWS or any(len(row) != _COLS for row in new):
        raise ValueError("a screen must be 25 rows of 80 cells")
    out = bytearray()
    attr = 0xFF
    cx = cy = -1

    def set_attr(cell: Cell) -> None:
        nonlocal attr
        if attr != cell[1]:
            attr = cell[1]
            out.extend(_attr_sequence(attr))

    for y, row in enumerate(new):
        x = 0
        while x < _COLS:
            cell = row[x]
            if old is None or old[y][x] != cell:
                if y != cy or cx + _MINJUMP < x:
                    out.extend(b"\x1b[%d;%df" % (y + 1, x + 1))
                    cy, cx = y, x + 1
                else:
                    while cx < x:
                        set_attr(row[cx])
                        out.extend(_char_bytes(row[cx][0]))
                        cx += 1
                    cx += 1
                set_attr(cell)
                spaces = 0 if cx > _COLS - _MINCL else _count_spaces(row, x, attr, _COLS - cx)
                if cx > _COLS - _MINCL or spaces < _MINCL:
                    out.extend(_char_bytes(cell[0]))
                else:
                    out.extend(b"\x1b[%dX" % spaces)
                    x += spaces - 1
            x += 1
    return bytes(out)


def _inflate(raw: bytes) -> bytes:
    """Decompress gzip data as far as it is valid; pass other data through."""
    if not raw.startswith(_GZIP_MAGIC):
        return raw
    out = bytearray()
    data = raw
    while data.startswith(_GZIP_MAGIC):
        decoder = zlib.decompressobj(31)
        try:
            out += decoder.decompress(data)
        except zlib.error:
            break
        if not decoder.eof:
            break
        data = decoder.unused_data
    return bytes(out)


def _fill(screen: list, pos: int, raw: bytes) -> None:
    for i in range(len(raw) // 2):
        if pos + i < _CELLS:
            screen[pos + i] = (raw[2 * i], raw[2 * i + 1])
    if len(raw) % 2:
        last = pos + len(raw) // 2
        if last < _CELLS:
            screen[last] = (raw[-1], screen[last][1])


def _rows(screen: list) -> list:
    return [screen[y * _COLS:(y + 1) * _COLS] for y in range(_ROWS)]


def play_dosrecorder(fileobj: IO[bytes],
                     init_wait: Callable[[float], object] | None = None,
                     wait: Callable[[float], object] | None = None,
                     emit: Callable[[bytes], object] | None = None) -> None:
    """Play a DosRecorder recording, calling ``wait`` and ``emit`` for each frame.

    The start time is unknown to the format, so ``init_wait`` is never called.
    """
    wait = wait or _ignore
    emit = emit or _ignore
    src = io.BytesIO(_inflate(fileobj.read() or b""))
    screens = [[_BLANK] * _CELLS for _ in range(_MAXSCREENS)]
    out = bytearray(b"\x1bc\x1b%G\x1b[8;25;80t")

    while True:
        head = src.read(_FRAME.size)
        if len(head) < _FRAME.size:
            return
        delay, _cx, _cy, sscr, dscr, nchunks = _FRAME.unpack(head)
        note = nchunks & 0x8000
        nchunks &= 0x7FFF
        screen = list(screens[sscr])
        if nchunks > _CELLS:
            return  # corrupted: too many chunks
        table = src.read(nchunks * _CHUNK.size)
        if len(table) != nchunks * _CHUNK.size:
            return
        for pos, length in _CHUNK.iter_unpack(table):
            if pos >= _CELLS or pos + length > _CELLS:
                return  # corrupted
            _fill(screen, pos, src.read(length * 2))
        screens[dscr] = list(screen)

        if note:
            raw = src.read(_NOTE.size)
            if len(raw) < _NOTE.size:
                return
            w, h, x, y, titlelen, _attr, _flags = _NOTE.unpack(raw)
            for i in range(h):
                _fill(screen, (y + i) * _COLS + x, src.read(w * 2))
            if titlelen > 80:
                return
            out += b"\x1b]0;" + src.read(titlelen) + b"\x07"

        out += screen_diff(None, _rows(screen))
        wait(delay / 1000)
        emit(bytes(out))
        out = bytearray()