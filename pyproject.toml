[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ttyreckit"
version = "0.1.0"
description = "Play, write and concatenate terminal session recordings (asciicast, DosRecorder) with transparent compression and network streams"
requires-python = ">=3.10"
dependencies = [
    "zstandard",
]
keywords = [
    "asciicast",
    "dosrecorder",
    "terminal",
    "recording",
    "playback",
    "telnet",
    "termcast",
    "compression",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Terminals",
    "Topic :: System :: Archiving :: Compression",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
termcat = "ttyreckit.termcat:main"

[tool.hatch.build.targets.wheel]
packages = ["ttyreckit"]

[tool.hatch.build.targets.sdist]
include = [
    "ttyreckit",
    "tests",
    "README.md",
]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
