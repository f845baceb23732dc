"""Transparent compression codecs selected by file name extension."""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from typing import IO, Callable

import zstandard

from .prefix import match_suffix

try:
    import gzip
except ImportError:  # interpreter built without zlib
    gzip = None

try:
    import bz2
except ImportError:  # interpreter built without libbz2
    bz2 = None

try:
    import lzma
except ImportError:  # interpreter built without liblzma
    lzma = None


def _decode_errors() -> tuple:
    errors = [OSError, EOFError, zstandard.ZstdError]
    if lzma is not None:
        errors.append(lzma.LZMAError)
    return tuple(errors)


_DECODE_ERRORS = _decode_errors()


class _CodecStream(io.BufferedIOBase):
    """A compressing or decompressing stream that owns its source file."""

    def __init__(self, inner, source: IO[bytes], name: str, writing: bool):
        super().__init__()
        self._inner = inner
        self._source = source
        self._name = name
        self._writing = writing

    def readable(self) -> bool:
        return not self._writing

    def writable(self) -> bool:
        return self._writing

    def _check_readable(self) -> None:
        if self.closed:
            raise ValueError("I/O operation on closed stream")
        if self._writing:
            raise io.UnsupportedOperation("stream is not readable")

    def read(self, size: int | None = -1) -> bytes:
        self._check_readable()
        if size is None:
            size = -1
        try:
            return self._inner.read(size)
        except _DECODE_ERRORS as exc:
            raise OSError(f"{self._name}: Error during decompression.") from exc

    def read1(self, size: int = -1) -> bytes:
        return self.read(size)

    def readinto(self, buffer) -> int:
        view = memoryview(buffer).cast("B")
        data = self.read(len(view))
        view[:len(data)] = data
        return len(data)

    def write(self, data) -> int:
        if self.closed:
            raise ValueError("I/O operation on closed stream")
        if not self._writing:
            raise io.UnsupportedOperation("stream is not writable")
        data = bytes(data)
        self._inner.write(data)
        return len(data)

    def flush(self) -> None:
        if self._writing and not self.closed:
            self._inner.flush()

    def close(self) -> None:
        if self.closed:
            return
        try:
            try:
                self._inner.close()
            finally:
                self._source.close()
        finally:
            super().close()


@dataclass(frozen=True)
class Codec:
    """A compression format known by its name and file extension."""

    name: str
    ext: str
    _reader: Callable = field(repr=False, compare=False)
    _writer: Callable = field(repr=False, compare=False)

    def open(self, fileobj: IO[bytes], mode: str = "r") -> io.BufferedIOBase:
        """Wrap ``fileobj`` for decompressing ("r") or compressing ("w", "a").

        Closing the returned stream closes ``fileobj`` as well.
        """
        if mode == "r":
            return _CodecStream(self._reader(fileobj), fileobj, self.name, False)
        if mode in ("w", "a"):
            return _CodecStream(self._writer(fileobj, mode), fileobj, self.name, True)
        raise ValueError(f"unknown stream mode: {mode!r}")


def _gzip_reader(fileobj):
    return gzip.GzipFile(filename="", fileobj=fileobj, mode="rb")


def _gzip_writer(fileobj, mode):
    return gzip.GzipFile(filename="", fileobj=fileobj, mode=mode + "b",
                         compresslevel=9, mtime=0)


def _bz2_reader(fileobj):
    return bz2.BZ2File(fileobj, "rb")


def _bz2_writer(fileobj, mode):
    return bz2.BZ2File(fileobj, mode + "b", compresslevel=9)


def _xz_reader(fileobj):
    return lzma.LZMAFile(fileobj, "rb", format=lzma.FORMAT_XZ)


def _xz_writer(fileobj, mode):
    return lzma.LZMAFile(fileobj, mode + "b", format=lzma.FORMAT_XZ,
                         check=lzma.CHECK_CRC64, preset=6)


def _zstd_reader(fileobj):
    return zstandard.ZstdDecompressor().stream_reader(
        fileobj, read_across_frames=True, closefd=False)


def _zstd_writer(fileobj, mode):
    return zstandard.ZstdCompressor(level=3).stream_writer(fileobj, closefd=False)


def _build_codecs() -> tuple[Codec, ...]:
    codecs = []
    if gzip is not None:
        codecs.append(Codec("gzip", ".gz", _gzip_reader, _gzip_writer))
    if bz2 is not None:
        codecs.append(Codec("bzip2", ".bz2", _bz2_reader, _bz2_writer))
    if lzma is not None:
        codecs.append(Codec("xz", ".xz", _xz_reader, _xz_writer))
    codecs.append(Codec("zstd", ".zst", _zstd_reader, _zstd_writer))
    return tuple(codecs)


_CODECS = _build_codecs()


def available_codecs() -> tuple[Codec, ...]:
    """Return the usable codecs in order of lookup."""
    return _CODECS


def codec_from_ext(name: str) -> Codec | None:
    """Return the codec whose extension ends ``name``, or None."""
    return next((codec for codec in _CODECS if match_suffix(name, codec.ext, 0)), None)


def default_compression_ext() -> str:
    """Return the extension of the preferred codec for new recordings, or ""."""
    available = {codec.ext for codec in _CODECS}
    for ext in (".bz2", ".gz", ".xz", ".zst"):
        if ext in available:
            return ext
    return ""