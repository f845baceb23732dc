"""TCP connections addressed by ``host[:port][/rest]`` strings."""

from __future__ import annotations

import contextlib
import socket

_HOST_MAX = 127


class StreamError(OSError):
    """A stream could not be opened or set up."""


def _parse_port(text: str) -> int:
    if not (text.isascii() and text.isdigit()):
        raise StreamError("Invalid port number")
    value = int(text)
    if not 0 < value <= 65535:
        raise StreamError("Invalid port number")
    return value


def parse_host(host: str, port: int = 0) -> tuple[str, int]:
    """Split ``host`` into a host name and a port number.

    A ``:port`` suffix overrides ``port``; IPv6 addresses go in brackets.
    """
    if host.startswith("["):
        name, sep, after = host[1:].partition("]")
        if not sep:
            raise StreamError("Unmatched [ in the host part.")
        if after:
            if not after.startswith(":"):
                raise StreamError("Cruft after the [host name].")
            return name, _parse_port(after[1:])
    else:
        name, sep, text = host.rpartition(":")
        if sep:
            return name, _parse_port(text)
        name = host
    if port <= 0:
        raise StreamError("No port number given")
    return name, port


def _resolve(name: str, port: int) -> list:
    numeric = getattr(socket, "AI_NUMERICSERV", 0)
    addrconfig = getattr(socket, "AI_ADDRCONFIG", 0)
    args = (name, str(port), socket.AF_UNSPEC, socket.SOCK_STREAM, socket.IPPROTO_TCP)
    try:
        return socket.getaddrinfo(*args, numeric | addrconfig)
    except socket.gaierror:
        pass
    # Hosts with only a loopback interface reject AI_ADDRCONFIG.
    try:
        return socket.getaddrinfo(*args, numeric)
    except socket.gaierror as exc:
        if exc.errno == socket.EAI_NONAME:
            raise StreamError("No such host") from exc
        raise StreamError(exc.strerror or str(exc)) from exc


def connect_tcp(url: str, port: int = 0) -> tuple[socket.socket, str]:
    """Connect to ``host[:port][/rest]`` and return the socket and ``/rest``."""
    host, slash, tail = url.partition("/")
    rest = slash + tail
    name, port = parse_host(host[:_HOST_MAX], port)
    last_error: OSError | None = None
    for family, socktype, proto, _, address in _resolve(name, port):
        try:
            sock = socket.socket(family, socktype, proto)
        except OSError as exc:
            last_error = exc
            continue
        try:
            sock.connect(address)
        except OSError as exc:
            sock.close()
            last_error = exc
            continue
        return sock, rest
    if last_error is None:
        raise StreamError("No address to connect to")
    raise StreamError(last_error.strerror or str(last_error)) from last_error


def open_tcp(url: str, mode="r"):
    """Open a one-directional binary file over a TCP connection."""
    sock, _ = connect_tcp(url, 0)
    writing = mode in ("w", "a")
    with contextlib.suppress(OSError):
        sock.shutdown(socket.SHUT_RD if writing else socket.SHUT_WR)
    fileobj = sock.makefile("wb" if writing else "rb")
    sock.close()  # the file keeps the connection open until it is closed
    return fileobj