"""Command-line options of the recorder and picking formats by name."""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass

from .registry import (
    DEFAULT_W_FORMAT,
    find_r_format,
    find_w_format,
    r_format_ext,
    r_format_names,
    w_format_ext,
    w_format_names,
)

_HELP = (
    "Usage: termrec [-f format] [-e command] [file]\n"
    "    Records the output of a console session to a file, including timing data.\n"
    "-f, --format X        set output format to X (-f whatever for the list)\n"
    "-e, --exec X          execute command X instead of spawning a shell\n"
    "-r, --raw             don't record UTFness or terminal size\n"
    "-a, --append          append to an existing file\n"
    "-h, --help            show this usage message\n"
    "If no filename is given, a name will be generated using the current date\n"
    "    and the given format.\n"
    "If no format is given, it will be set according to the extension of the\n"
    "    filename, or default to ttyrec if nothing is given.\n"
    "You can specify compression by appending .gz, .xz or .bz2 to the file name.\n"
)


@dataclass
class RecordOptions:
    """What the recorder was asked to do."""

    format: str
    format_ext: str = ""
    command: str | None = None
    record_name: str | None = None
    raw: bool = False
    append: bool = False


def _no_such_format(name: str, names, ext_of) -> ValueError:
    lines = [f"No such format: {name}", "Valid formats:"]
    for fmt in names:
        ext = ext_of(fmt)
        lines.append(f" {fmt:<15} ({ext})" if ext else f" {fmt:<15}")
    return ValueError("\n".join(lines) + "\n")


def pick_w_format(name: str) -> str:
    """Return the canonical name of writable format ``name``, or raise listing the valid ones."""
    fmt = find_w_format(name, None, None)
    if fmt is None:
        raise _no_such_format(name, w_format_names(), w_format_ext)
    return fmt.name


def pick_r_format(name: str) -> str:
    """Return the canonical name of playable format ``name``, or raise listing the valid ones."""
    fmt = find_r_format(name, None, None)
    if fmt is None:
        raise _no_such_format(name, r_format_names(), r_format_ext)
    return fmt.name


class _Parser(argparse.ArgumentParser):
    def error(self, message):
        raise ValueError(message)


def _parser() -> _Parser:
    parser = _Parser(prog="termrec", add_help=False)
    parser.add_argument("-f", "--format", action="append", default=[])
    parser.add_argument("-e", "--exec", dest="command", action="append", default=[])
    parser.add_argument("-r", "--raw", action="store_true")
    parser.add_argument("-a", "--append", action="store_true")
    parser.add_argument("-h", "--help", action="store_true")
    parser.add_argument("files", nargs="*")
    return parser


def parse_rec_args(argv=None) -> RecordOptions:
    """Parse the recorder's arguments (without the program name).

    ``-h`` prints the usage and exits; bad arguments raise ValueError.
    """
    args = _parser().parse_intermixed_args(sys.argv[1:] if argv is None else list(argv))
    if args.help:
        sys.stdout.write(_HELP)
        raise SystemExit(0)
    if len(args.format) > 1:
        raise ValueError("You can use only one format at a time.\n")
    if len(args.command) > 1:
        raise ValueError("You can specify -e only once.\n")
    if len(args.files) > 1:
        raise ValueError("You can specify at most one file to record to.\n")

    record_name = args.files[0] if args.files else None
    if args.format:
        format = pick_w_format(args.format[0])
    else:
        format = find_w_format(None, record_name, DEFAULT_W_FORMAT).name
    return RecordOptions(
        format=format,
        format_ext=w_format_ext(format) or "",
        command=args.command[0] if args.command else None,
        record_name=record_name,
        raw=args.raw,
        append=args.append,
    )