"""Reading and writing asciicast (v1 and v2) recordings."""

from __future__ import annotations

import re
from typing import IO, Callable

# A sanity limit for a single event's data.
_BUFFER_SIZE = 1048576
_READ_CHUNK = 4096
_EOF = -1

_WHITESPACE = frozenset(b" \t\r\n")
_COMMA = frozenset(b",")
_DIGITS = frozenset(b"0123456789")
_QUOTE = ord('"')
_BACKSLASH = ord("\\")
_SIMPLE_ESCAPES = {
    ord("b"): 0x08,
    ord("f"): 0x0C,
    ord("n"): 0x0A,
    ord("r"): 0x0D,
    ord("t"): 0x09,
}

_TERM_SIZE_PREFIX = re.compile(rb"\x1b%G\x1b\[8;\d*;\d*t")
_RESIZE = re.compile(rb"\x1b\[8;(\d+);(\d+)t")


def _call(callback: Callable | None, *args) -> None:
    """Invoke ``callback`` with ``args`` when one was given."""
    if callback is not None:
        callback(*args)


class _Malformed(Exception):
    """The recording cannot be played any further."""


class _StringFull(Exception):
    pass


class _Reader:
    """Byte reader with a single slot of push-back."""

    def __init__(self, fileobj: IO[bytes]):
        self._f = fileobj
        self._buf = b""
        self._pos = 0
        self._unget: int | None = None

    def getc(self) -> int:
        if self._unget is not None:
            c, self._unget = self._unget, None
            return c
        if self._pos >= len(self._buf):
            self._buf = self._f.read(_READ_CHUNK) or b""
            self._pos = 0
            if not self._buf:
                return _EOF
        c = self._buf[self._pos]
        self._pos += 1
        return c

    def ungetc(self, c: int) -> None:
        self._unget = c

    def eat(self, extra: frozenset = frozenset()) -> int:
        """Return the next byte that is neither whitespace nor in ``extra``."""
        c = self.getc()
        while c in _WHITESPACE or c in extra:
            c = self.getc()
        return c

    def eat_colon(self) -> bool:
        if self.eat() != ord(":"):
            return False
        self.ungetc(self.eat())
        return True

    def eat_int(self) -> int:
        x = 0
        while True:
            c = self.getc()
            if c in _DIGITS:
                x = x * 10 + c - 0x30
            else:
                self.ungetc(c)
                return x

    def eat_float(self) -> int:
        """Read a non-negative number, returned in millionths."""
        x = 0
        c = self.getc()
        while c in _DIGITS:
            x = x * 10 + c - 0x30
            c = self.getc()
        x *= 1000000
        if c == ord("."):
            y = 1000000
            c = self.getc()
            while c in _DIGITS:
                y //= 10
                x += (c - 0x30) * y
                c = self.getc()
        if c in (ord("e"), ord("E")):
            minus = False
            c = self.getc()
            if c == ord("+"):
                c = self.getc()
            elif c == ord("-"):
                c = self.getc()
                minus = True
            e = 0
            while c in _DIGITS:
                e = e * 10 + c - 0x30
                c = self.getc()
            x = x // 10 ** e if minus else x * 10 ** e
        self.ungetc(c)
        return x

    def eat_hexdigit(self) -> int:
        c = self.getc()
        if 0x30 <= c <= 0x39:
            return c - 0x30
        if ord("a") <= c <= ord("f"):
            return c + 10 - ord("a")
        if ord("A") <= c <= ord("F"):
            return c + 10 - ord("A")
        self.ungetc(c)
        return -1

    def eat_string(self) -> bytes:
        """Read the rest of a JSON string, decoding escapes into UTF-8."""
        out = bytearray()

        def put(*values: int) -> None:
            for value in values:
                if len(out) >= _BUFFER_SIZE - 1:
                    raise _StringFull
                out.append(value & 0xFF)

        surrogate = 0
        try:
            while True:
                c = self.getc()
                if c in (_EOF, _QUOTE):
                    break
                if c != _BACKSLASH:
                    put(c)
                    continue
                c = self.getc()
                if c in _SIMPLE_ESCAPES:
                    put(_SIMPLE_ESCAPES[c])
                    continue
                if c == ord("u"):
                    digits = [self.eat_hexdigit() for _ in range(4)]
                    code = digits[0] << 12 | digits[1] << 8 | digits[2] << 4 | digits[3]
                    if code >= 0:
                        if code < 0x80:
                            put(code)
                        elif code < 0x800:
                            put(0xC0 | code >> 6, 0x80 | code & 0x3F)
                        elif code < 0xD800 or code > 0xDFFF:
                            put(0xE0 | code >> 12, 0x80 | code >> 6 & 0x3F,
                                0x80 | code & 0x3F)
                        # Lone lead or trailing surrogates are dropped.
                        elif code < 0xDC00:
                            surrogate = code
                        elif surrogate:
                            code = (surrogate << 10 & 0xFFC00 | code & 0x3FF) + 0x10000
                            put(0xF0 | code >> 18, 0x80 | code >> 12 & 0x3F,
                                0x80 | code >> 6 & 0x3F, 0x80 | code & 0x3F)
                            surrogate = 0
                        continue
                    c = code
                put(c)
        except _StringFull:
            pass
        return bytes(out)


def _is_null(reader: _Reader) -> bool:
    return all(reader.getc() == ord(ch) for ch in "ull")


def _skip_value(reader: _Reader) -> bool:
    """Skip a header value; return True if it opened a nested object."""
    c = reader.eat()
    if c == _EOF:
        raise _Malformed("Not an asciicast: end of file within header.\n")
    if c == _QUOTE:
        reader.eat_string()
    elif c in _DIGITS:
        reader.ungetc(c)
        reader.eat_float()
    elif c == ord("{"):
        return True
    elif not (c == ord("n") and _is_null(reader)):
        raise _Malformed("Not an asciicast: junk within header.\n")
    return False


def _parse_header(reader: _Reader) -> tuple[int, int, int, int]:
    """Return version, width, height and the timestamp in millionths."""
    if reader.eat() != ord("{"):
        raise _Malformed("Not an asciicast: doesn't start with a JSON object.\n")
    bracket_level = 0
    version = -1
    sx, sy = 80, 25
    timestamp = 0
    while True:
        c = reader.getc()
        if c == _EOF:
            raise _Malformed("Not an asciicast: end of file within header.\n")
        if c in _WHITESPACE:
            continue
        if c == ord("}"):
            if version == 2 and not bracket_level:
                return version, sx, sy, timestamp
            bracket_level -= 1
            continue
        if c != _QUOTE:
            raise _Malformed("Not an asciicast: bad header.\n")

        name = reader.eat_string()
        if not reader.eat_colon():
            raise _Malformed("Not an asciicast: no colon after field name.\n")
        skip = False
        if bracket_level:
            skip = True
        elif name == b"version":
            v = reader.eat_int()
            if v not in (1, 2):
                raise _Malformed("Unsupported asciicast version.\n")
            version = v
        elif name == b"width":
            sx = reader.eat_int()
        elif name == b"height":
            sy = reader.eat_int()
        elif name == b"timestamp":
            timestamp = reader.eat_float()
        elif version == 1 and name == b"stdout":
            if reader.getc() != ord("["):
                raise _Malformed("Not an asciicast: v1 stdout not an array.\n")
            return version, sx, sy, timestamp
        else:
            skip = True
        if skip and _skip_value(reader):
            bracket_level += 1
            continue

        c = reader.eat()
        if c == ord("}"):
            bracket_level -= 1
            c = reader.eat()
        if c == ord("}"):
            reader.ungetc(c)
            continue
        if c == ord("[") and bracket_level == -1:
            reader.ungetc(c)
            return version, sx, sy, timestamp
        if c != ord(","):
            raise _Malformed("Not an asciicast: junk after a JSON field.\n")


def _play_body(reader: _Reader, version: int, wait, emit) -> None:
    old_delay = 0
    while True:
        c = reader.eat(_COMMA)
        if c in (_EOF, ord("}"), ord("]")):
            return
        if c != ord("["):
            raise _Malformed("Malformed asciicast: frame not an array.\n")
        c = reader.eat()
        if c not in _DIGITS:
            raise _Malformed("Malformed asciicast: expected duration.\n")
        reader.ungetc(c)
        delay = reader.eat_float()
        if version == 2:
            delay -= old_delay
            old_delay += delay
        _call(wait, delay / 1000000)

        if reader.eat() != ord(","):
            raise _Malformed("Malformed asciicast: no comma after duration.\n")
        if version == 2:
            if reader.eat() != _QUOTE:
                raise _Malformed("Malformed asciicast: expected event type.\n")
            reader.eat_string()
            if reader.eat() != ord(","):
                raise _Malformed("Malformed asciicast: no comma after event type.\n")
        if reader.eat() != _QUOTE:
            raise _Malformed("Malformed asciicast: expected even-data string.\n")
        _call(emit, reader.eat_string())
        if reader.eat() != ord("]"):
            raise _Malformed("Malformed asciicast: event not terminated.\n")


def play_asciicast(fileobj: IO[bytes],
                   init_wait: Callable[[float], object] | None = None,
                   wait: Callable[[float], object] | None = None,
                   emit: Callable[[bytes], object] | None = None) -> None:
    """Play an asciicast recording through the callbacks.

    ``init_wait`` gets the start time, ``wait`` each delay in seconds and
    ``emit`` the terminal output.  Problems with the data are shown as text
    through ``emit``.
    """
    reader = _Reader(fileobj)
    try:
        version, sx, sy, timestamp = _parse_header(reader)
        _call(init_wait, timestamp / 1000000)
        _call(emit, b"\x1b%%G\x1b[8;%d;%dt" % (sy, sx))
        _play_body(reader, version, wait, emit)
    except _Malformed as exc:
        _call(emit, str(exc).encode())


def skip_utf_term_size(data: bytes) -> int:
    """Return the length of a leading "UTF-8 on, resize" sequence, or 0."""
    match = _TERM_SIZE_PREFIX.match(data)
    return len(match.group()) if match else 0


def skip_partial_utf(data: bytes) -> int:
    """Return how many trailing bytes form an incomplete UTF-8 character."""
    length = len(data)
    part = 0
    while part < 4 and part < length and 0x80 <= data[length - part - 1] < 0xC0:
        part += 1
    if part >= length:
        return 0
    part += 1
    lead = data[length - part]
    if lead & 0xE0 == 0xC0 and part < 2:
        return part
    if lead & 0xF0 == 0xE0 and part < 3:
        return part
    if lead & 0xF8 == 0xF0 and part < 4:
        return part
    return 0


def _screen_size(data: bytes) -> tuple[int, int]:
    width, height = 80, 25
    for rows, cols in _RESIZE.findall(data):
        if int(rows) > 0 and int(cols) > 0:
            height, width = int(rows), int(cols)
    return width, height


def _escape_table() -> tuple[bytes, ...]:
    table = []
    for b in range(256):
        if b < 0x20:
            if b == 0x0D:
                table.append(b"\\r")
            elif b == 0x0A:
                table.append(b"\\n")
            else:
                table.append(b"\\u%04x" % b)
        elif b == _QUOTE:
            table.append(b'\\"')
        else:
            table.append(bytes((b,)))
    return tuple(table)


_ESCAPES = _escape_table()


class AsciicastRecorder:
    """Writes terminal output as an asciicast recording to a binary file."""

    def __init__(self, fileobj: IO[bytes], start: float | None = None, version: int = 2):
        if version not in (1, 2):
            raise ValueError(f"unsupported asciicast version: {version}")
        self._f = fileobj
        self.version = version
        self._start = start or 0.0
        self._last = self._start
        self._head_done = False
        self._need_comma = False
        self._carry = b""

    def _write_header(self, data: bytes) -> None:
        width, height = _screen_size(data)
        header = b'{"version":%d, "width":%d, "height":%d' % (self.version, width, height)
        if int(self._start):
            header += b', "timestamp":%d' % int(self._start)
        header += b', "stdout":[\n' if self.version == 1 else b"}\n"
        self._f.write(header)
        self._head_done = True

    def write(self, tm: float, data: bytes) -> None:
        """Record ``data`` shown at time ``tm`` (seconds)."""
        data = bytes(data)
        if not self._head_done:
            self._write_header(data)
            data = data[skip_utf_term_size(data):]
            if not data:
                return
        data = self._carry + data
        skip = skip_partial_utf(data)
        if skip:
            self._carry = data[-skip:]
            data = data[:-skip]
        else:
            self._carry = b""
        if not data:
            return

        if self.version == 1:
            if self._need_comma:
                self._f.write(b",\n")
            else:
                self._need_comma = True
            delay = tm - self._last if self._last else 0.0
            self._last = tm
            prefix = b'[%f, "' % delay
            suffix = b'"]'
        else:
            prefix = b'[%f, "o", "' % (tm - int(self._start))
            suffix = b'"]\n'
        self._f.write(prefix + b"".join(_ESCAPES[b] for b in data) + suffix)

    def finish(self) -> None:
        """Terminate the recording; the file itself is left open."""
        if self.version == 1:
            self._f.write(b"\n]}\n")