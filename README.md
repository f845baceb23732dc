# ttyreckit

A library and a small command for terminal session recordings: playing
asciicast and DosRecorder recordings, writing asciicast recordings, and
opening them from files, standard streams or network URLs with transparent
gzip, bzip2, xz or zstd compression.

## Installation

```
pip install .
```

To run the test suite:

```
pip install .[test]
pytest
```

## Concatenating recordings

The `termcat` command joins recordings into one. The last argument names the
destination; the other arguments are the sources.

```
termcat first.cast second.cast.gz joined.cast.bz2
```

The destination's format is taken from its extension, and is asciicast when
the extension names no format; its compression is taken from a trailing
`.gz`, `.bz2`, `.xz` or `.zst`. Sources are played by their extension in the
same way, defaulting to asciicast. Delays are added up across all sources, so
each source's frames follow on from the previous one's. A source that cannot
be opened is reported on standard error and skipped. The exit status is
non-zero when the destination cannot be opened or closed, or when no source
was played.

## Formats

Formats are looked up in `ttyreckit.registry`, by name (ignoring case) or, when
no name is given, by the file name's extension with any compression extension
ignored.

| Name           | Write | Play | Extension |
|----------------|-------|------|-----------|
| `asciicast`    | yes   | yes  | `.cast`   |
| `asciicast-v1` | yes   | no   | none      |
| `dosrecorder`  | no    | yes  | none      |

```python
from ttyreckit.registry import w_format_names, r_format_names, find_w_format

print(w_format_names())                                  # ['asciicast', 'asciicast-v1']
print(r_format_names())                                  # ['asciicast', 'dosrecorder']
print(find_w_format(None, "session.cast.gz", None).name) # 'asciicast'
```

`w_format_ext(format)` and `r_format_ext(format)` give a format's extension,
or None.

## Playing and recording from Python

`ttyreckit.registry.play(filename, format, init_wait, wait, emit, fileobj)`
plays a recording through three optional callbacks: `init_wait` gets the
recording's start time in seconds, `wait` each delay in seconds, and `emit`
each frame's bytes. Data an asciicast player cannot parse is reported as text
through `emit`.

```python
from ttyreckit.registry import open_recorder, play

with open_recorder("out.cast.gz") as rec:
    rec.write(0.0, b"hello\r\n")
    rec.write(1.5, b"world\r\n")

play("out.cast.gz", emit=lambda data: print(data))
```

`open_recorder` returns a `Recorder` whose `write(tm, data)` adds output shown
at time `tm` and whose `close()` finishes and closes the file. Both functions
raise ValueError for an unknown format name. When a `fileobj` is passed it is
used as given, without compression.

The formats themselves live in `ttyreckit.asciicast` (`play_asciicast`,
`AsciicastRecorder`, which writes version 2 by default or version 1 on
request) and `ttyreckit.dosrecorder` (`play_dosrecorder`, and `screen_diff`,
which turns two 25×80 screens into ANSI output).

## Streams and URLs

`ttyreckit.stream.open_stream(url, mode, fileobj)` opens, for reading (`"r"`),
writing (`"w"`) or appending (`"a"`):

* `-` for standard input or output,
* plain paths and `file://` paths,
* `tcp://host:port` (one direction only),
* `telnet://host[:port]` (read only, port 23 by default; telnet negotiation is
  answered and stripped),
* `termcast://host[:port]/name` (read only; selects the named session from the
  server's menu),
* any other `scheme://` URL through `urllib`: read with a GET, or written with
  a PUT sent when the stream is closed.

Compression is added or removed according to the URL's extension; see
`ttyreckit.compress.available_codecs()` and `codec_from_ext(name)`. Failures
to open raise `ttyreckit.net.StreamError`, a subclass of OSError.

`ttyreckit.outfile.open_out(file_name, format_ext, append)` opens a
recording's output and returns the stream and its name; without a name it
creates a new file named after the current date and time, adding `a`, `b`, …
when the name is taken.

## Colours and character sets

```python
from ttyreckit.colors import col256_to_rgb, rgb_to_256
from ttyreckit.charsets import cp437_char, tf8

hex(col256_to_rgb(3))     # '0xaa5500', the CGA brown
rgb_to_256(0xff0000)
cp437_char(0xdb)          # '█'
tf8(0x2588)               # b'\xe2\x96\x88'
```

`color_convert(c, to)` converts between the `ColorType` kinds.

## What is not included

The package does not capture terminal sessions: there is no command that
spawns a shell or program and records it, and `ttyreckit.recargs.parse_rec_args`
only parses such a recorder's options. There is no player command that shows
a recording in real time, no terminal emulator, and no reading or writing of
the ttyrec format; the only command is `termcat`.