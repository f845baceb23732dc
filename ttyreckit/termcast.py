"""Watching a termcast session by scraping the server's session menu."""

from __future__ import annotations

import contextlib
import io
import socket

from .net import StreamError, connect_tcp
from .telnet import TelnetReader

_BUFSIZ = 8192
_ESC = 0x1B
_CR = 0x0D
_LF = 0x0A
_SPACE = 0x20


def _is_digit(c: int) -> bool:
    return 0x30 <= c <= 0x39


class _Cursor:
    def __init__(self, data: bytes):
        self._data = data
        self.pos = 0

    def peek(self) -> int:
        return self._data[self.pos] if self.pos < len(self._data) else 0

    def take(self) -> int:
        c = self.peek()
        self.pos += 1
        return c

    def expect(self, byte: int) -> bool:
        return self.take() == byte

    def skip_while(self, pred) -> None:
        while pred(self.peek()):
            self.pos += 1

    def eat_colour(self) -> bool:
        if self.peek() != _ESC:
            return True
        self.pos += 1
        if not self.expect(ord("[")):
            return False
        self.skip_while(lambda c: _is_digit(c) or c == ord(";"))
        return self.expect(ord("m"))


def match_session(text: bytes, rest) -> bytes | None:
    """Return the menu key of session ``rest`` if ``text`` starts with its menu line.

    The line looks like ``\\r\\n ESC[<n>d <key>) <name> (``, optionally coloured.
    """
    if isinstance(rest, str):
        rest = rest.encode()
    cur = _Cursor(bytes(text))
    for byte in (_CR, _LF, _ESC, ord("[")):
        if not cur.expect(byte):
            return None
    cur.skip_while(_is_digit)
    if not cur.expect(ord("d")):
        return None
    if cur.peek() == _SPACE:
        cur.pos += 1
    key = cur.take()
    if not (cur.expect(ord(")")) and cur.expect(_SPACE) and cur.eat_colour()):
        return None
    if not all(cur.expect(byte) for byte in rest):
        return None
    if not (cur.eat_colour() and cur.expect(_SPACE) and cur.eat_colour()
            and cur.expect(ord("("))):
        return None
    return bytes((key,)) if key else None


class TermcastReader(io.RawIOBase):
    """Pass a termcast stream through, selecting session ``rest`` when it shows."""

    def __init__(self, source, sock: socket.socket, rest):
        super().__init__()
        self._source = source
        self._sock = sock
        self._rest = rest.encode() if isinstance(rest, str) else bytes(rest)
        self._scan = bytearray()
        self._pending = b""
        self._found = False
        self._done = False

    def readable(self) -> bool:
        return True

    def _scrape(self, data: bytes) -> bytes | None:
        self._scan += data
        pos = 0
        while True:
            key = match_session(self._scan[pos:], self._rest)
            if key:
                return key
            nxt = self._scan.find(b"\r", pos + 1)
            if nxt < 0:
                break
            pos = nxt
        if pos:
            del self._scan[:pos]
        elif len(self._scan) > _BUFSIZ // 2:
            del self._scan[:(len(self._scan) + 1) // 2]
        return None

    def _pump(self) -> None:
        try:
            chunk = self._source.read(_BUFSIZ) or b""
        except OSError as exc:
            if not self._found:
                message = (exc.strerror or str(exc)).encode()
                self._pending = b"\x1b[0m" + message + b"\n"
            self._done = True
            return
        if not chunk:
            if not self._found:
                self._pending = b"\x1b[0mInput terminated.\n"
            self._done = True
            return
        self._pending = chunk
        if self._found:
            return
        key = self._scrape(chunk)
        if key:
            self._found = True
            self._scan.clear()
            try:
                self._sock.sendall(key)
            except OSError:
                self._done = True

    def readinto(self, buffer) -> int:
        view = memoryview(buffer).cast("B")
        while not self._pending and not self._done:
            self._pump()
        count = min(len(view), len(self._pending))
        view[:count] = self._pending[:count]
        self._pending = self._pending[count:]
        return count

    def close(self) -> None:
        if not self.closed:
            with contextlib.suppress(OSError):
                self._source.close()
            with contextlib.suppress(OSError):
                self._sock.close()
        super().close()


def open_termcast(url: str, mode="r") -> io.BufferedReader:
    """Connect to ``host[:port]/session`` and watch that termcast session."""
    if mode in ("w", "a"):
        raise StreamError("Writing to termcast streams is not supported (yet?)")
    sock, rest = connect_tcp(url, 23)
    if not rest.startswith("/") or len(rest) < 2:
        sock.close()
        raise StreamError("What termcast session to look for?")
    telnet = TelnetReader(sock)
    return io.BufferedReader(TermcastReader(telnet, sock, rest[1:]))