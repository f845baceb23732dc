"""A read-only telnet client that strips protocol sequences from the data."""

from __future__ import annotations

import io
import socket
from enum import Enum, auto
from typing import Callable

from .net import StreamError, connect_tcp

_BUFSIZ = 8192

SE = 240
SB = 250
WILL = 251
WONT = 252
DO = 253
DONT = 254
IAC = 255

ECHO = 1
SUPPRESS_GO_AHEAD = 3

_SUBNEG_LIMIT = 64

_ANSWERS = {
    ECHO: {WILL: DO, DO: WONT, WONT: DONT, DONT: WONT},
    SUPPRESS_GO_AHEAD: {WILL: DO, DO: WILL, WONT: DONT, DONT: WONT},
}
_DEFAULT_ANSWERS = {WILL: DONT, DO: WONT, WONT: DONT, DONT: WONT}


class _State(Enum):
    NORMAL = auto()
    IAC = auto()
    NEGOTIATE = auto()
    SB = auto()
    SUB = auto()
    SUB_IAC = auto()


class TelnetDecoder:
    """Incremental telnet decoder; negotiation answers go to ``respond``."""

    def __init__(self, respond: Callable[[bytes], object] | None = None):
        self._respond = respond
        self._state = _State.NORMAL
        self._verb = 0
        self._sublen = 0

    def _answer(self, option: int) -> None:
        verb = _ANSWERS.get(option, _DEFAULT_ANSWERS)[self._verb]
        if self._respond is not None:
            self._respond(bytes((IAC, verb, option)))

    def feed(self, data: bytes) -> bytes:
        """Decode ``data`` and return the payload bytes it carries."""
        out = bytearray()
        for byte in data:
            state = self._state
            if state is _State.NORMAL:
                if byte == IAC:
                    self._state = _State.IAC
                else:
                    out.append(byte)
            elif state is _State.IAC:
                if byte == IAC:
                    out.append(IAC)
                    self._state = _State.NORMAL
                elif byte in (WILL, WONT, DO, DONT):
                    self._verb = byte
                    self._state = _State.NEGOTIATE
                elif byte == SB:
                    self._state = _State.SB
                else:
                    self._state = _State.NORMAL
            elif state is _State.NEGOTIATE:
                self._answer(byte)
                self._state = _State.NORMAL
            elif state is _State.SB:
                self._sublen = 0
                self._state = _State.SUB
            elif state is _State.SUB:
                if byte == IAC:
                    self._state = _State.SUB_IAC
                else:
                    # an overlong subnegotiation is probably unterminated
                    if self._sublen >= _SUBNEG_LIMIT:
                        self._state = _State.NORMAL
                    self._sublen += 1
            else:
                self._state = _State.NORMAL if byte == SE else _State.SUB
        return bytes(out)


class TelnetReader(io.RawIOBase):
    """Raw stream of the payload received over a telnet socket."""

    def __init__(self, sock: socket.socket):
        super().__init__()
        self.sock = sock
        self._decoder = TelnetDecoder(self._reply)
        self._pending = b""
        self._eof = False

    def _reply(self, data: bytes) -> None:
        try:
            self.sock.sendall(data)
        except OSError:
            pass  # the peer may have stopped listening; keep reading

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        view = memoryview(buffer).cast("B")
        while not self._pending and not self._eof:
            chunk = self.sock.recv(_BUFSIZ)
            if not chunk:
                self._eof = True
            else:
                self._pending = self._decoder.feed(chunk)
        count = min(len(view), len(self._pending))
        view[:count] = self._pending[:count]
        self._pending = self._pending[count:]
        return count

    def close(self) -> None:
        if not self.closed:
            self.sock.close()
        super().close()


def open_telnet(url: str, mode="r") -> io.BufferedReader:
    """Connect to a telnet server (port 23 by default) for reading."""
    if mode in ("w", "a"):
        raise StreamError("Writing to telnet streams is not supported (yet?)")
    sock, _ = connect_tcp(url, 23)
    return io.BufferedReader(TelnetReader(sock))