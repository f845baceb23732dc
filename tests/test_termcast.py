import io
import socket

import pytest

from ttyreckit.net import StreamError
from ttyreckit.stream import StreamMode
from ttyreckit.termcast import TermcastReader, match_session, open_termcast


class Chunks(io.RawIOBase):
    def __init__(self, chunks):
        super().__init__()
        self._chunks = list(chunks)

    def readable(self):
        return True

    def readinto(self, buffer):
        if not self._chunks:
            return 0
        chunk = self._chunks.pop(0)
        buffer[:len(chunk)] = chunk
        return len(chunk)


def test_match_plain_line():
    assert match_session(b"\r\n\x1b[5d a) alice (idle)", "alice") == b"a"


def test_match_coloured_line():
    line = b"\r\n\x1b[12db) \x1b[1mbob\x1b[0m (watching)"
    assert match_session(line, b"bob") == b"b"


def test_match_wrong_name():
    assert match_session(b"\r\n\x1b[5d a) alice (", "bob") is None


def test_match_truncated_line():
    assert match_session(b"\r\n\x1b[5d a) ali", "alice") is None


def test_match_needs_line_start():
    assert match_session(b"x\r\n\x1b[5d a) alice (", "alice") is None


def test_reader_selects_session():
    ours, theirs = socket.socketpair()
    content = b"menu\r\n\x1b[3d c) carol (more"
    reader = TermcastReader(io.BytesIO(content), ours, "carol")
    with io.BufferedReader(reader) as stream:
        assert stream.read() == content
        assert theirs.recv(1) == b"c"
    theirs.close()


def test_reader_match_across_chunks():
    ours, theirs = socket.socketpair()
    chunks = [b"xx\r\n\x1b[3", b"d c) carol (rest", b"session data"]
    reader = TermcastReader(Chunks(chunks), ours, "carol")
    with io.BufferedReader(reader) as stream:
        assert stream.read() == b"".join(chunks)
        assert theirs.recv(1) == b"c"
    theirs.close()


def test_reader_reports_end_without_match():
    ours, theirs = socket.socketpair()
    reader = TermcastReader(io.BytesIO(b"nothing here"), ours, "carol")
    stream = io.BufferedReader(reader)
    assert stream.read() == b"nothing here\x1b[0mInput terminated.\n"
    stream.close()
    assert theirs.recv(1) == b""
    theirs.close()


def test_open_termcast_rejects_writing():
    with pytest.raises(StreamError, match="not supported"):
        open_termcast("127.0.0.1:1/x", StreamMode.WRITE)


@pytest.mark.parametrize("suffix", ["", "/"])
def test_open_termcast_needs_session(suffix):
    srv = socket.socket()
    srv.bind(("127.0.0.1", 0))
    srv.listen(2)
    try:
        with pytest.raises(StreamError, match="What termcast session"):
            open_termcast(f"127.0.0.1:{srv.getsockname()[1]}{suffix}")
    finally:
        srv.close()