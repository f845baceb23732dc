"""Concatenate recordings into one, keeping their timing."""

from __future__ import annotations

import sys

from .registry import open_recorder, play


def main(argv=None) -> int:
    """Append each source recording to the destination, the last argument."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) < 2:
        print("Usage: termcat <filename> ... <dest>", file=sys.stderr)
        return 1
    *sources, dest = args
    try:
        rec = open_recorder(dest)
    except (OSError, ValueError):
        print("Failed to open destination file", file=sys.stderr)
        return 1

    clock = 0.0

    def delay(seconds: float) -> None:
        nonlocal clock
        clock += seconds

    def emit(data: bytes) -> None:
        rec.write(clock, data)

    any_played = False
    for source in sources:
        try:
            play(source, wait=delay, emit=emit)
        except (OSError, ValueError) as exc:
            print(f"{source}: {exc}", file=sys.stderr)
        else:
            any_played = True

    try:
        rec.close()
    except OSError as exc:
        print(f"{dest}: {exc}", file=sys.stderr)
        return 1
    return 0 if any_played else 1


if __name__ == "__main__":
    sys.exit(main())