"""Opening the output file of a recording, inventing a name when none is given."""

from __future__ import annotations

import os
import time

from .compress import default_compression_ext
from .net import StreamError
from .stream import StreamMode, open_stream

_O_BINARY = getattr(os, "O_BINARY", 0)
_DATE_FORMAT = "%Y-%m-%d.%H-%M-%S"


def next_suffix(add: str) -> str:
    """Return the name suffix after ``add`` in the sequence "", a, b, ... z, aa, ab, ..."""
    letters = list(add)
    for i in reversed(range(len(letters))):
        if letters[i] != "z":
            letters[i] = chr(ord(letters[i]) + 1)
            return "".join(letters)
        letters[i] = "a"
    return "".join(letters) + "a"


def _create_dated(format_ext: str, append: bool) -> tuple[int, str]:
    date = time.strftime(_DATE_FORMAT, time.localtime())
    comp_ext = "" if append else default_compression_ext()
    flags = (os.O_APPEND if append else os.O_CREAT | os.O_EXCL) | os.O_WRONLY | _O_BINARY
    add = ""
    while True:
        name = f"{date}{add}{format_ext}{comp_ext}"
        try:
            return os.open(name, flags, 0o666), name
        except FileExistsError:
            add = next_suffix(add)
        except OSError as exc:
            raise StreamError(
                f"Can't create a valid file in the current directory: {exc.strerror}") from exc


def open_out(file_name: str | None = None, format_ext: str = "", append: bool = False):
    """Open a recording's output and return the stream together with its name.

    Without ``file_name`` a name is made from the current date, ``format_ext``
    and the preferred compression; "-" means standard output.
    """
    mode = StreamMode.APPEND if append else StreamMode.WRITE
    fileobj = None
    if file_name is None:
        fd, file_name = _create_dated(format_ext, append)
        fileobj = os.fdopen(fd, "ab" if append else "wb")
    elif file_name != "-":
        flags = (os.O_APPEND if append else os.O_CREAT | os.O_TRUNC) | os.O_WRONLY | _O_BINARY
        try:
            fd = os.open(file_name, flags, 0o666)
        except OSError as exc:
            raise StreamError(
                f"Can't write to the record file ({file_name}): {exc.strerror}") from exc
        fileobj = os.fdopen(fd, "ab" if append else "wb")
    return open_stream(file_name, mode, fileobj), file_name