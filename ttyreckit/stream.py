"""Opening files, URLs and network streams, with transparent compression."""

from __future__ import annotations

import io
import os
import urllib.error
import urllib.request
from enum import Enum

from .compress import codec_from_ext
from .net import StreamError, open_tcp
from .prefix import match_prefix
from .telnet import open_telnet
from .termcast import open_termcast

USER_AGENT = "ttyreckit"


class StreamMode(str, Enum):
    """How a stream is opened."""

    READ = "r"
    WRITE = "w"
    APPEND = "a"
    REPREAD = "reread"

    @property
    def writes(self) -> bool:
        return self in (StreamMode.WRITE, StreamMode.APPEND)


def _as_mode(mode) -> StreamMode:
    try:
        return StreamMode(mode)
    except ValueError:
        raise StreamError(f"unknown stream mode: {mode!r}") from None


_FILE_MODES = {
    StreamMode.READ: "rb",
    StreamMode.WRITE: "wb",
    StreamMode.REPREAD: "rb",
    StreamMode.APPEND: "ab",
}


def open_file(path: str, mode=StreamMode.READ):
    """Open a local file in binary mode."""
    try:
        mode = StreamMode(mode)
    except ValueError:
        raise StreamError("unknown file mode in open_stream(file://)") from None
    try:
        return open(path, _FILE_MODES[mode])
    except OSError as exc:
        raise StreamError(exc.strerror or str(exc)) from exc


class _UploadStream(io.RawIOBase):
    """Collects written data and uploads it when closed."""

    def __init__(self, url: str):
        super().__init__()
        self._url = url
        self._data = bytearray()

    def writable(self) -> bool:
        return True

    def write(self, data) -> int:
        data = bytes(data)
        self._data += data
        return len(data)

    def close(self) -> None:
        if self.closed:
            return
        try:
            request = urllib.request.Request(
                self._url, data=bytes(self._data), method="PUT",
                headers={"User-Agent": USER_AGENT})
            with urllib.request.urlopen(request):
                pass
        except (urllib.error.URLError, ValueError, OSError) as exc:
            raise StreamError(f"upload failed: {exc}") from exc
        finally:
            super().close()


def _open_remote(url: str, mode: StreamMode):
    if mode is StreamMode.REPREAD:
        raise StreamError("Watching CURL URLs is not (yet?) supported.")
    if mode is StreamMode.APPEND:
        raise StreamError("Appending via CURL is not (yet?) supported.")
    if mode.writes:
        return _UploadStream(url)
    request = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
    try:
        return urllib.request.urlopen(request)
    except (urllib.error.URLError, ValueError, OSError) as exc:
        raise StreamError(f"CURL failed: {exc}") from exc


_SCHEMES = (
    ("file://", open_file),
    ("tcp://", open_tcp),
    ("telnet://", open_telnet),
    ("termcast://", open_termcast),
)


def open_url(url: str, mode=StreamMode.READ):
    """Open ``url`` without any decompression; "-" means stdin or stdout."""
    mode = _as_mode(mode)
    if url == "-":
        if mode.writes:
            return open(os.dup(1), "wb")
        return open(os.dup(0), "rb")
    for prefix, opener in _SCHEMES:
        if match_prefix(url, prefix):
            return opener(url[len(prefix):], mode)
    if "://" in url:
        return _open_remote(url, mode)
    return open_file(url, mode)


def open_stream(url: str | None = None, mode=StreamMode.READ, fileobj=None):
    """Open ``url`` (or wrap ``fileobj``), compressing by the name's extension."""
    mode = _as_mode(mode)
    if fileobj is None:
        if url is None:
            raise StreamError("nothing to open")
        fileobj = open_url(url, mode)
    codec = codec_from_ext(url) if url else None
    if codec is None:
        return fileobj
    if mode is StreamMode.APPEND:
        codec_mode = "a"
    elif mode.writes:
        codec_mode = "w"
    else:
        codec_mode = "r"
    return codec.open(fileobj, codec_mode)