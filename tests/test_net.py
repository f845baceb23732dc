import socket

import pytest

from ttyreckit.net import StreamError, connect_tcp, open_tcp, parse_host


@pytest.fixture
def server():
    srv = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    srv.bind(("127.0.0.1", 0))
    srv.listen(4)
    yield srv
    srv.close()


def test_parse_host_with_port():
    assert parse_host("example.com:8080") == ("example.com", 8080)


def test_parse_host_port_overrides_default():
    assert parse_host("example.com:99", 23) == ("example.com", 99)


def test_parse_host_default_port():
    assert parse_host("example.com", 23) == ("example.com", 23)


def test_parse_host_bracketed():
    assert parse_host("[::1]:23") == ("::1", 23)
    assert parse_host("[::1]", 80) == ("::1", 80)


@pytest.mark.parametrize(
    "host,port,message",
    [
        ("example.com", 0, "No port number given"),
        ("[::1", 23, "Unmatched [ in the host part."),
        ("[::1]x", 23, "Cruft after the [host name]."),
        ("example.com:0", 23, "Invalid port number"),
        ("example.com:65536", 23, "Invalid port number"),
        ("example.com:abc", 23, "Invalid port number"),
        ("example.com:", 23, "Invalid port number"),
    ],
)
def test_parse_host_errors(host, port, message):
    with pytest.raises(StreamError) as info:
        parse_host(host, port)
    assert str(info.value) == message


def test_stream_error_is_os_error():
    with pytest.raises(OSError):
        parse_host("example.com")


def test_connect_tcp_returns_rest(server):
    port = server.getsockname()[1]
    sock, rest = connect_tcp(f"127.0.0.1:{port}/some/path")
    try:
        assert rest == "/some/path"
        assert sock.getpeername()[1] == port
    finally:
        sock.close()


def test_connect_tcp_default_port_and_empty_rest(server):
    port = server.getsockname()[1]
    sock, rest = connect_tcp("127.0.0.1", port)
    try:
        assert rest == ""
        assert sock.getpeername()[1] == port
    finally:
        sock.close()


def test_connect_refused():
    probe = socket.socket()
    probe.bind(("127.0.0.1", 0))
    port = probe.getsockname()[1]
    probe.close()
    with pytest.raises(StreamError):
        connect_tcp(f"127.0.0.1:{port}")


def test_open_tcp_read(server):
    port = server.getsockname()[1]
    fileobj = open_tcp(f"127.0.0.1:{port}", "r")
    conn, _ = server.accept()
    conn.sendall(b"hello")
    conn.close()
    with fileobj:
        assert fileobj.read() == b"hello"


def test_open_tcp_write(server):
    port = server.getsockname()[1]
    fileobj = open_tcp(f"127.0.0.1:{port}", "w")
    conn, _ = server.accept()
    with fileobj:
        assert fileobj.writable()
        fileobj.write(b"payload")
    received = b""
    while chunk := conn.recv(64):
        received += chunk
    conn.close()
    assert received == b"payload"