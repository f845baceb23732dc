"""Play, write and concatenate terminal session recordings, over files and network streams."""

__version__ = "0.1.0"