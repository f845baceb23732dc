import gzip
import io
import struct

import pytest

from ttyreckit.dosrecorder import play_dosrecorder, screen_diff

RESET = b"\x1bc\x1b%G\x1b[8;25;80t"


def blank():
    return [[(0x20, 7)] * 80 for _ in range(25)]


def frame(delay=0, sscr=0, dscr=0, chunks=(), note=None):
    count = len(chunks) | (0x8000 if note is not None else 0)
    data = struct.pack("<IBBBBH", delay, 0, 0, sscr, dscr, count)
    data += b"".join(struct.pack("<HH", pos, len(cells) // 2) for pos, cells in chunks)
    data += b"".join(cells for _, cells in chunks)
    if note is not None:
        data += struct.pack("<BBBBBBB", 0, 0, 0, 0, len(note), 7, 0) + note
    return data


def play(data):
    waits, out = [], []
    play_dosrecorder(io.BytesIO(data), None, waits.append, out.append)
    return waits, out


def test_identical_screens_give_no_output():
    assert screen_diff(blank(), blank()) == b""


def test_single_changed_cell():
    new = blank()
    new[2][5] = (ord("A"), 7)
    assert screen_diff(blank(), new) == b"\x1b[3;6f\x1b[0;40;37mA"


def test_blink_and_bright_attribute():
    new = blank()
    new[0][0] = (ord("Z"), 0x8F)
    assert b"\x1b[0;5;40;1;37mZ" in screen_diff(blank(), new)


def test_cp437_glyphs_are_utf8():
    new = blank()
    new[0][0] = (0x01, 7)
    assert "☺".encode() in screen_diff(None, new)


def test_full_redraw_clears_runs_of_spaces():
    out = screen_diff(None, blank())
    assert b"\x1b[79X" in out
    assert out.count(b"X") == 25


def test_bad_shape_rejected():
    with pytest.raises(ValueError):
        screen_diff(None, blank()[:24])


@pytest.mark.parametrize("compress", [False, True])
def test_play_single_frame(compress):
    data = frame(delay=1500, chunks=[(0, b"A\x07")])
    if compress:
        data = gzip.compress(data)
    waits, out = play(data)
    assert waits == [1.5]
    assert len(out) == 1
    assert out[0].startswith(RESET)
    assert b"A" in out[0]


def test_screens_persist_between_frames():
    data = frame(chunks=[(0, b"A\x07")], dscr=0) + frame(sscr=0) + frame(sscr=1)
    _, out = play(data)
    assert len(out) == 3
    assert b"A" in out[1]
    assert b"A" not in out[2]
    assert not out[1].startswith(RESET)


def test_corrupt_chunk_stops_playback():
    _, out = play(frame(chunks=[(2000, b"A\x07")]))
    assert out == []


def test_note_sets_title():
    _, out = play(frame(note=b"Title"))
    assert b"\x1b]0;Title\x07" in out[0]


def test_truncated_header_ends_playback():
    waits, out = play(frame()[:5])
    assert waits == [] and out == []