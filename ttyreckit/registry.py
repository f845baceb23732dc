"""The table of recording formats, and opening recordings for writing or playback."""

from __future__ import annotations

from dataclasses import dataclass
from typing import IO, Callable

from .asciicast import AsciicastRecorder, play_asciicast
from .compress import codec_from_ext
from .dosrecorder import play_dosrecorder
from .prefix import match_suffix
from .stream import StreamMode, open_stream


@dataclass(frozen=True)
class RecorderFormat:
    """A format recordings can be written in.

    ``factory(fileobj, start)`` returns an object with ``write(tm, data)``
    and ``finish()`` methods.
    """

    name: str
    ext: str | None
    factory: Callable[[IO[bytes], float | None], object]


@dataclass(frozen=True)
class PlayerFormat:
    """A format recordings can be played from.

    ``play(fileobj, init_wait, wait, emit)`` feeds the recording to the callbacks.
    """

    name: str
    ext: str | None
    play: Callable


RECORDERS: tuple[RecorderFormat, ...] = (
    RecorderFormat("asciicast", ".cast", lambda f, start: AsciicastRecorder(f, start, 2)),
    RecorderFormat("asciicast-v1", None, lambda f, start: AsciicastRecorder(f, start, 1)),
)

PLAYERS: tuple[PlayerFormat, ...] = (
    PlayerFormat("asciicast", ".cast", play_asciicast),
    PlayerFormat("dosrecorder", None, play_dosrecorder),
)

DEFAULT_W_FORMAT = RECORDERS[0].name
DEFAULT_R_FORMAT = PLAYERS[0].name


def _by_name(table, name: str):
    lowered = name.lower()
    return next((fmt for fmt in table if fmt.name.lower() == lowered), None)


def _find(table, format, filename, fallback):
    if format is not None:
        # An explicitly named format never falls back to the default.
        return _by_name(table, format)
    if filename:
        codec = codec_from_ext(filename)
        skip = len(codec.ext) if codec else 0
        for fmt in table:
            if fmt.ext and match_suffix(filename, fmt.ext, skip):
                return fmt
    if fallback is not None:
        return _by_name(table, fallback)
    return None


def find_w_format(format: str | None = None, filename: str | None = None,
                  fallback: str | None = None) -> RecorderFormat | None:
    """Find a writable format by name, else by the file's extension, else ``fallback``."""
    return _find(RECORDERS, format, filename, fallback)


def find_r_format(format: str | None = None, filename: str | None = None,
                  fallback: str | None = None) -> PlayerFormat | None:
    """Find a playable format by name, else by the file's extension, else ``fallback``."""
    return _find(PLAYERS, format, filename, fallback)


def w_format_names() -> list[str]:
    """Return the names of the writable formats."""
    return [fmt.name for fmt in RECORDERS]


def r_format_names() -> list[str]:
    """Return the names of the playable formats."""
    return [fmt.name for fmt in PLAYERS]


def w_format_ext(format: str) -> str | None:
    """Return the file extension of a writable format, or None."""
    fmt = find_w_format(format)
    return fmt.ext if fmt else None


def r_format_ext(format: str) -> str | None:
    """Return the file extension of a playable format, or None."""
    fmt = find_r_format(format)
    return fmt.ext if fmt else None


class Recorder:
    """An open recording that terminal output is written to."""

    def __init__(self, format: RecorderFormat, fileobj: IO[bytes], start: float | None = None):
        self.format = format
        self._f = fileobj
        self._state = format.factory(fileobj, start)

    def write(self, tm: float, data: bytes) -> None:
        """Record ``data`` shown at time ``tm`` (seconds)."""
        if self._f is None:
            raise ValueError("write to a closed recorder")
        self._state.write(tm, data)

    def close(self) -> None:
        """Finish the recording and close its file."""
        if self._f is None:
            return
        fileobj, self._f = self._f, None
        try:
            self._state.finish()
        finally:
            fileobj.close()

    def __enter__(self) -> "Recorder":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def open_recorder(filename: str | None = None, format: str | None = None,
                  start: float | None = None, fileobj: IO[bytes] | None = None) -> Recorder:
    """Start a recording in ``fileobj`` or in the file or URL ``filename``.

    A given ``fileobj`` is used as it is, without compression.
    """
    fmt = find_w_format(format, filename, DEFAULT_W_FORMAT)
    if fmt is None:
        if fileobj is not None:
            fileobj.close()
        raise ValueError(f"No such format: {format}")
    if fileobj is None:
        fileobj = open_stream(filename, StreamMode.WRITE)
    return Recorder(fmt, fileobj, start)


def play(filename: str | None = None, format: str | None = None,
         init_wait: Callable[[float], object] | None = None,
         wait: Callable[[float], object] | None = None,
         emit: Callable[[bytes], object] | None = None,
         fileobj: IO[bytes] | None = None) -> None:
    """Play a recording from ``fileobj`` or from the file or URL ``filename``."""
    fmt = find_r_format(format, filename, DEFAULT_R_FORMAT)
    if fmt is None:
        if fileobj is not None:
            fileobj.close()
        raise ValueError(f"No such format: {format}")
    if fileobj is None:
        fileobj = open_stream(filename, StreamMode.READ)
    with fileobj:
        fmt.play(fileobj, init_wait, wait, emit)